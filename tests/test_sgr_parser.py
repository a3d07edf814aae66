"""Tests for inline SGR scanning."""

import pytest

from sgr_layers.codec.sgr_parser import iter_sgr_segments, scan_sgr


class TestScanSgr:
    """Tests for scan_sgr."""

    @pytest.mark.parametrize("text,codes", [
        ("1;31", [1, 31]),
        ("\x1b[1;31m", [1, 31]),
        ("38;5;208", ["38;5;208"]),
        ("1;48;2;1;2;3;4", [1, "48;2;1;2;3", 4]),
        ("58;5;9", ["58;5;9"]),
        ("0", [0]),
        ("\x1b[m", [0]),
        ("", []),
        ("  4  ", [4]),
    ])
    def test_valid(self, text: str, codes: list) -> None:
        assert scan_sgr(text) == codes

    @pytest.mark.parametrize("text,codes", [
        ("x;1;;zz", [1]),
        ("1;300", [1]),
        ("38;5;300;1", [1]),
        ("38;2;1;2;999;4", [4]),
        ("38;7;1", [7, 1]),
        ("48;2;1;2", []),
        ("38", []),
        ("٣", []),
    ])
    def test_invalid_tokens_dropped(self, text: str, codes: list) -> None:
        assert scan_sgr(text) == codes

    def test_normalizes_numbers(self) -> None:
        assert scan_sgr("01;38;5;008") == [1, "38;5;8"]


class TestSegments:
    """Tests for iter_sgr_segments."""

    def test_split(self) -> None:
        assert list(iter_sgr_segments("a\x1b[1mb\x1b[mc")) == [
            ("text", "a"),
            ("sgr", "1"),
            ("text", "b"),
            ("sgr", "0"),
            ("text", "c"),
        ]

    def test_no_sequences(self) -> None:
        assert list(iter_sgr_segments("plain")) == [("text", "plain")]
        assert list(iter_sgr_segments("")) == []

    def test_adjacent_sequences(self) -> None:
        assert list(iter_sgr_segments("\x1b[1m\x1b[31mx")) == [
            ("sgr", "1"),
            ("sgr", "31"),
            ("text", "x"),
        ]

    def test_other_csi_left_as_text(self) -> None:
        assert list(iter_sgr_segments("\x1b[2Jx")) == [("text", "\x1b[2Jx")]
