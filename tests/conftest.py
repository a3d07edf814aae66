"""Shared fixtures: deterministic palettes and rule tables."""

import pytest

from sgr_layers.core.palette import ColorMode, Palette
from sgr_layers.create.rules import RuleTable, bold_off, dim_off


@pytest.fixture(scope="session")
def palette() -> Palette:
    """xterm reference colors, true color output."""
    return Palette(color_mode=ColorMode.TRUE_COLOR)


@pytest.fixture(scope="session")
def palette256() -> Palette:
    return Palette(color_mode=ColorMode.EXTENDED_256)


@pytest.fixture(scope="session")
def palette16() -> Palette:
    return Palette(color_mode=ColorMode.STANDARD_16)


@pytest.fixture(scope="session")
def basic_rules() -> RuleTable:
    return RuleTable.basic()


@pytest.fixture(scope="session")
def rules() -> RuleTable:
    """Small rule table used by the emitter scenarios."""
    return RuleTable.from_codes(
        em=[1, 31],
        it=[3],
        ul=[4],
        bd=[1, 2],
        bold_off=bold_off,
        dim_off=dim_off,
    )
