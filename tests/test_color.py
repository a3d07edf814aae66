"""Tests for the Color type."""

import pytest

from sgr_layers.core.color import Color, Role
from sgr_layers.core.errors import InvalidColor, RoleMismatch
from sgr_layers.core.palette import ColorMode, Palette


class TestConstruction:
    """Tests for Color constructors."""

    @pytest.mark.parametrize("code,role", [
        (31, Role.FG),
        (39, Role.FG),
        (97, Role.FG),
        (41, Role.BG),
        (49, Role.BG),
        (107, Role.BG),
        (59, Role.UL),
        ("31", Role.FG),
    ])
    def test_from_sgr_basic(self, code: object, role: Role) -> None:
        color = Color.from_sgr(code)
        assert color.role is role
        assert color.sgr() == str(code)

    def test_from_sgr_extended(self) -> None:
        assert Color.from_sgr("38;5;208").sgr() == "38;5;208"
        assert Color.from_sgr("48;2;1;2;3").role is Role.BG
        assert Color.from_sgr("58;5;1").role is Role.UL
        assert Color.from_sgr("48;2;1;2;3").rgb() == (1, 2, 3)

    @pytest.mark.parametrize("code", [
        0, 1, 38, 58, 60, 108, True, None, "38;5;256", "38;2;1;2", "red", "28;5;1", 31.0,
    ])
    def test_from_sgr_invalid(self, code: object) -> None:
        with pytest.raises(InvalidColor):
            Color.from_sgr(code)

    def test_invalid_color_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            Color.from_sgr(60)

    def test_from_rgb(self) -> None:
        assert Color.from_rgb(1, 2, 3).sgr() == "38;2;1;2;3"
        assert Color.from_rgb(1, 2, 3, role=Role.BG).sgr() == "48;2;1;2;3"
        assert Color.from_rgb([1, 2, 3], role=Role.UL).sgr() == "58;2;1;2;3"
        assert Color.from_rgb("#ff8000").rgb() == (255, 128, 0)

    @pytest.mark.parametrize("args", [(256, 0, 0), (-1, 0, 0), (1, 2), (1.5, 2, 3), ("#ff80",)])
    def test_from_rgb_invalid(self, args: tuple) -> None:
        with pytest.raises(InvalidColor):
            Color.from_rgb(*args)

    @pytest.mark.parametrize("fields", [
        {"rgb": (300, 0, 0)},
        {"rgb": (1, 2)},
        {"rgb": 7},
        {"index": 999},
        {"index": -1},
        {"oklch": (1.5, 0.1, 0)},
        {"oklch": (0.5, -0.1, 0)},
        {"oklch": (0.5, "max", 0)},
    ])
    def test_constructor_validates_components(self, fields: dict) -> None:
        with pytest.raises(InvalidColor):
            Color(role=Role.FG, **fields)

    def test_constructor_accepts_valid_components(self) -> None:
        assert Color(role=Role.FG, index=196).to_sgr("16") == "91"
        assert Color(role=Role.BG, rgb=(0, 0, 0)).sgr() == "48;2;0;0;0"
        assert Color(role=Role.FG, oklch=(1.0, 0.0, 0.0)).rgb() == (255, 255, 255)

    def test_invalid_role(self) -> None:
        with pytest.raises(InvalidColor):
            Color.from_rgb(1, 2, 3, role=31)

    def test_from_hex(self) -> None:
        assert Color.from_hex("00ff00", role=Role.UL).sgr() == "58;2;0;255;0"
        assert Color.from_hex("#0000FF").rgb() == (0, 0, 255)
        with pytest.raises(InvalidColor):
            Color.from_hex("#zzzzzz")

    def test_from_256_gray_cube(self) -> None:
        assert Color.from_256(100).sgr() == "38;5;100"
        assert Color.from_gray(0, role=Role.BG).sgr() == "48;5;232"
        assert Color.from_gray(23).sgr() == "38;5;255"
        assert Color.from_cube(5, 0, 0).sgr() == "38;5;196"
        assert Color.from_cube(0, 0, 1).rgb() == (0, 0, 95)

    @pytest.mark.parametrize("build", [
        lambda: Color.from_256(256),
        lambda: Color.from_gray(24),
        lambda: Color.from_gray(-1),
        lambda: Color.from_cube(6, 0, 0),
        lambda: Color.from_cube(0, 0, 1.0),
    ])
    def test_index_ranges(self, build) -> None:
        with pytest.raises(InvalidColor):
            build()

    def test_from_oklch(self) -> None:
        color = Color.from_oklch(0.7, 0.1, 30)
        assert color.oklch() == (0.7, 0.1, 30)
        assert color.sgr().startswith("38;2;")

    def test_from_oklch_relative(self) -> None:
        from sgr_layers.core.color_utils import cmax

        color = Color.from_oklch(0.5, "max", 30, role=Role.BG)
        assert color.oklch()[1] == pytest.approx(cmax(0.5, 30))
        assert color.role is Role.BG

    @pytest.mark.parametrize("oklch", [(1.5, 0.1, 0), (0.5, -0.1, 0), (0.5, "x", 0)])
    def test_from_oklch_invalid(self, oklch: tuple) -> None:
        with pytest.raises(InvalidColor):
            Color.from_oklch(*oklch)

    def test_role_must_match_basic(self) -> None:
        with pytest.raises(InvalidColor):
            Color(role=Role.UL, basic=31)
        with pytest.raises(InvalidColor):
            Color(role=Role.FG)

    def test_maybe_color(self) -> None:
        assert isinstance(Color.maybe_color(31), Color)
        assert isinstance(Color.maybe_color("48;5;1"), Color)
        assert Color.maybe_color(1) == 1
        assert Color.maybe_color("bold") == "bold"
        assert Color.maybe_color(None) is None
        color = Color.from_sgr(31)
        assert Color.maybe_color(color) is color


class TestRepresentations:
    """Tests for derived representations."""

    def test_basic_rgb(self) -> None:
        assert Color.from_sgr(31).rgb() == (205, 0, 0)
        assert Color.from_sgr(91).rgb() == (255, 0, 0)
        assert Color.from_sgr(44).rgb() == (0, 0, 238)
        assert Color.from_sgr(101).rgb() == (255, 0, 0)

    def test_default_colors_use_palette(self) -> None:
        palette = Palette(fg_color=(1, 2, 3), bg_color=(4, 5, 6))
        assert Color.from_sgr(39).rgb(palette) == (1, 2, 3)
        assert Color.from_sgr(49).rgb(palette) == (4, 5, 6)
        assert Color.from_sgr(59).rgb(palette) == (1, 2, 3)

    def test_custom_basic_palette(self) -> None:
        theme = [(i, i, i) for i in range(16)]
        palette = Palette.from_basic(theme)
        assert Color.from_sgr(33).rgb(palette) == (3, 3, 3)
        assert Color.from_256(9).rgb(palette) == (9, 9, 9)

    def test_index_rgb(self) -> None:
        assert Color.from_256(196).rgb() == (255, 0, 0)

    def test_palette_index(self) -> None:
        assert Color.from_256(100).palette_index() == 100
        assert Color.from_rgb(255, 255, 255).palette_index() == 15

    def test_oklch_cached(self) -> None:
        color = Color.from_rgb(10, 200, 30)
        assert color.oklch() is color.oklch()

    def test_basic(self) -> None:
        assert Color.from_rgb(254, 0, 0).basic() == 91
        assert Color.from_rgb(254, 0, 0, role=Role.BG).basic() == 101
        assert Color.from_rgb(0, 0, 230).basic() == 34
        assert Color.from_rgb(1, 2, 3, role=Role.UL).basic() is None

    def test_int(self) -> None:
        assert int(Color.from_sgr(31)) == 31
        assert int(Color.from_256(5, role=Role.BG)) == 48


class TestToSgr:
    """Tests for mode-dependent rendering."""

    def test_basic_fallback(self) -> None:
        assert Color.from_rgb(254, 0, 0).to_sgr(ColorMode.STANDARD_16) == "91"
        assert Color.from_rgb(254, 0, 0, role=Role.BG).to_sgr("16") == "101"

    def test_true_color(self) -> None:
        assert Color.from_rgb(254, 0, 0).to_sgr(ColorMode.TRUE_COLOR) == "38;2;254;0;0"

    def test_256_fallback(self) -> None:
        assert Color.from_rgb(255, 0, 0).to_sgr(ColorMode.EXTENDED_256) == "38;5;9"
        assert Color.from_rgb(0, 0, 0, role=Role.BG).to_sgr("256") == "48;5;0"
        assert Color.from_256(196).to_sgr("16") == "91"

    def test_never_converts_up(self) -> None:
        assert Color.from_sgr(31).to_sgr(ColorMode.TRUE_COLOR) == "31"
        assert Color.from_sgr(31).to_sgr(ColorMode.EXTENDED_256) == "31"
        assert Color.from_256(100).to_sgr(ColorMode.TRUE_COLOR) == "38;5;100"

    def test_underline_color_basic(self) -> None:
        assert Color.from_rgb(254, 0, 0, role=Role.UL).to_sgr("16") == "58;5;9"
        assert Color.from_sgr(59).to_sgr("16") == "59"

    def test_mode_from_palette(self, palette16: Palette, palette256: Palette) -> None:
        color = Color.from_rgb(254, 0, 0)
        assert color.to_sgr(palette=palette16) == "91"
        assert color.to_sgr(palette=palette256).startswith("38;5;")
        assert color.to_sgr() == "38;2;254;0;0"

    def test_merged_picks_per_mode(self) -> None:
        color = Color.from_sgr(31).merge(Color.from_rgb(1, 2, 3))
        assert color.to_sgr("16") == "31"
        assert color.to_sgr("256") == "38;5;232"
        assert color.to_sgr("rgb") == "38;2;1;2;3"


class TestChangeRole:
    """Tests for change_role."""

    def test_basic_codes_shift(self) -> None:
        assert Color.from_sgr(31).change_role(Role.BG) == 41
        assert Color.from_sgr(91).change_role(Role.BG) == 101
        assert Color.from_sgr(41).change_role(Role.FG) == 31

    def test_defaults(self) -> None:
        assert Color.from_sgr(39).change_role(Role.UL) == 59
        assert Color.from_sgr(49).change_role(Role.FG) == 39
        assert Color.from_sgr(59).change_role(Role.BG) == 49

    def test_to_underline_gains_rgb(self) -> None:
        color = Color.from_sgr(31).change_role(Role.UL)
        assert color.role is Role.UL
        assert color.sgr() == "58;2;205;0;0"

    def test_rich_representations_kept(self) -> None:
        assert Color.from_256(100).change_role(Role.BG).sgr() == "48;5;100"
        assert Color.from_rgb(1, 2, 3).change_role(Role.UL).sgr() == "58;2;1;2;3"

    def test_same_role(self) -> None:
        color = Color.from_sgr(31)
        assert color.change_role(Role.FG) is color


class TestMerge:
    """Tests for merge and merge_many."""

    def test_role_mismatch(self) -> None:
        with pytest.raises(RoleMismatch):
            Color.from_sgr(31).merge(Color.from_sgr(41))

    def test_self_wins(self) -> None:
        a = Color.from_rgb(1, 2, 3)
        b = Color.from_rgb(4, 5, 6)
        assert a.merge(b).rgb() == a.rgb()
        assert b.merge(a).rgb() == b.rgb()

    def test_widens(self) -> None:
        color = Color.from_sgr(31).merge(Color.from_256(196))
        assert color.sgr() == "38;5;196"
        assert color.to_sgr("16") == "31"

    def test_merge_many(self) -> None:
        fg, bg, ul = Color.merge_many(
            Color.from_sgr(31), Color.from_sgr(41), Color.from_rgb(1, 2, 3)
        )
        assert fg == "38;2;1;2;3"
        assert fg.to_sgr("16") == "31"
        assert bg == 41
        assert ul is None

    def test_merge_many_empty(self) -> None:
        assert Color.merge_many() == (None, None, None)


class TestEquality:
    """Tests for equality and hashing."""

    def test_equal_to_raw(self) -> None:
        assert Color.from_sgr(31) == 31
        assert Color.from_sgr(31) == "31"
        assert Color.from_256(5) == "38;5;5"
        assert Color.from_sgr(31) != 32

    def test_equal_colors(self) -> None:
        assert Color.from_sgr("31") == Color.from_sgr(31)
        assert Color.from_rgb(1, 2, 3) == Color.from_sgr("38;2;1;2;3")
        assert Color.from_rgb(1, 2, 3) != Color.from_rgb(1, 2, 3, role=Role.BG)

    def test_hash(self) -> None:
        assert len({Color.from_sgr(31), Color.from_sgr("31"), Color.from_sgr(32)}) == 2

    def test_hash_matches_int_equality(self) -> None:
        assert hash(Color.from_sgr(31)) == hash(31)
        assert 31 in {Color.from_sgr(31)}
        assert {Color.from_sgr(44): "blue"}[44] == "blue"
        assert hash(Color.from_256(5)) == hash("38;5;5")

    def test_repr(self) -> None:
        assert repr(Color.from_256(5)) == "Color('38;5;5')"
        assert str(Color.from_sgr(31)) == "31"


class TestShifts:
    """Tests for oklch_shift and rgb_shift."""

    def test_rgb_shift(self) -> None:
        color = Color.from_rgb(10, 20, 30, role=Role.BG).rgb_shift(5, [300], -50)
        assert color.rgb() == (15, 255, 0)
        assert color.role is Role.BG

    def test_rgb_shift_basic(self) -> None:
        assert Color.from_sgr(31).rgb_shift(0, 10, 0).rgb() == (205, 10, 0)

    def test_rgb_shift_invalid(self) -> None:
        with pytest.raises(InvalidColor):
            Color.from_rgb(1, 2, 3).rgb_shift("a", 0, 0)

    def test_oklch_shift(self) -> None:
        color = Color.from_oklch(0.5, 0.1, 350).oklch_shift(0, 0, 20)
        l, c, h = color.oklch()
        assert (l, c, h) == pytest.approx((0.5, 0.1, 10))

    def test_oklch_shift_from_white(self) -> None:
        color = Color.from_rgb(255, 255, 255).oklch_shift(-0.5, None, 0)
        assert color.oklch()[0] == pytest.approx(0.5, abs=1e-3)

    def test_oklch_shift_invalid(self) -> None:
        with pytest.raises(InvalidColor):
            Color.from_rgb(1, 2, 3).oklch_shift("x", 0, 0)
