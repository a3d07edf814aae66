"""Reference palettes, nearest-color lookup and terminal color capability."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from enum import Enum
from functools import lru_cache
from typing import Mapping, Optional, Sequence

from sgr_layers.core.color_utils import oklab_distance
from sgr_layers.core.constants import ANSI16

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]

RANGE_CUBE = range(16, 232)
RANGE_GRAY = range(232, 256)

# Environment override for the detected color mode
COLOR_MODE_ENV = "SGR_LAYERS_COLOR_MODE"


class ColorMode(Enum):
    """Color capability of the target terminal."""
    STANDARD_16 = "16"      # Standard 16-color (SGR 30-37, 40-47, 90-97, 100-107)
    EXTENDED_256 = "256"    # Extended 256-color (SGR 38;5;n, 48;5;n)
    TRUE_COLOR = "rgb"      # 24-bit true color (SGR 38;2;r;g;b, 48;2;r;g;b)

    @classmethod
    def parse(cls, value: str) -> "ColorMode":
        """Parse a mode name: ``16``/``basic``, ``256``, ``rgb``/``truecolor``/``24bit``."""
        key = value.strip().lower()
        aliases = {
            "16": cls.STANDARD_16,
            "basic": cls.STANDARD_16,
            "256": cls.EXTENDED_256,
            "rgb": cls.TRUE_COLOR,
            "truecolor": cls.TRUE_COLOR,
            "24bit": cls.TRUE_COLOR,
        }
        if key not in aliases:
            raise ValueError(f"Unknown color mode: {value!r}")
        return aliases[key]


def rgb8_from_cube_index(index: int) -> RGB:
    """RGB of a 6x6x6 cube entry (palette index 16-231)."""
    if index not in RANGE_CUBE:
        raise IndexError(f"cube index must be 16-231, got {index}")
    n = index - 16
    levels = (n // 36, (n // 6) % 6, n % 6)
    return tuple(0 if x == 0 else 55 + x * 40 for x in levels)


def rgb8_from_gray(gray: int) -> RGB:
    """RGB of a grayscale ramp step, given as 0-23 or as palette index 232-255."""
    if gray in RANGE_GRAY:
        gray -= RANGE_GRAY.start
    if not 0 <= gray <= 23:
        raise IndexError(f"gray step must be 0-23, got {gray}")
    v = 8 + gray * 10
    return (v, v, v)


def build_256(basic: Sequence[RGB] = ANSI16) -> tuple[RGB, ...]:
    """256-color table: the 16 basic colors, the color cube, the gray ramp."""
    if len(basic) != 16:
        raise ValueError(f"basic palette must have 16 entries, got {len(basic)}")
    return (
        tuple(tuple(c) for c in basic)
        + tuple(rgb8_from_cube_index(i) for i in RANGE_CUBE)
        + tuple(rgb8_from_gray(i) for i in RANGE_GRAY)
    )


COLORS256 = build_256(ANSI16)


@lru_cache(maxsize=4096)
def _nearest(rgb: RGB, palette: tuple[RGB, ...]) -> int:
    best_index = 0
    best = None
    for i, color in enumerate(palette):
        d = oklab_distance(rgb, color)
        if best is None or d < best:
            best_index, best = i, d
    return best_index


def nearest(rgb: Sequence[int], palette: Sequence[Sequence[int]]) -> int:
    """Index of the perceptually nearest palette entry (first one wins ties)."""
    return _nearest(
        tuple(int(c) for c in rgb),
        tuple(tuple(c) for c in palette),
    )


def detect_color_mode(environ: Optional[Mapping[str, str]] = None) -> ColorMode:
    """
    Guess the terminal's color mode from environment variables.

    ``SGR_LAYERS_COLOR_MODE`` wins when set, then ``COLORTERM`` (truecolor or
    24bit), then ``TERM`` (``*-256color``). Anything else is assumed basic.
    """
    env = os.environ if environ is None else environ

    if override := env.get(COLOR_MODE_ENV):
        return ColorMode.parse(override)

    colorterm = env.get("COLORTERM", "").lower()
    if "truecolor" in colorterm or "24bit" in colorterm:
        return ColorMode.TRUE_COLOR

    if env.get("TERM", "").endswith("-256color"):
        return ColorMode.EXTENDED_256

    return ColorMode.STANDARD_16


@dataclass(frozen=True)
class Palette:
    """
    Reference colors and capability level used to resolve colors.

    Passed explicitly wherever a color needs converting, so renders are
    deterministic and tests can swap palettes without global state.
    """
    basic_colors: tuple[RGB, ...] = ANSI16
    colors: tuple[RGB, ...] = COLORS256
    fg_color: RGB = ANSI16[7]
    bg_color: RGB = ANSI16[0]
    color_mode: ColorMode = ColorMode.TRUE_COLOR

    def __post_init__(self) -> None:
        if len(self.basic_colors) != 16:
            raise ValueError(f"basic_colors must have 16 entries, got {len(self.basic_colors)}")
        if len(self.colors) != 256:
            raise ValueError(f"colors must have 256 entries, got {len(self.colors)}")

    @classmethod
    def default(cls) -> "Palette":
        """xterm reference colors in true color mode."""
        return DEFAULT_PALETTE

    @classmethod
    def from_basic(
        cls,
        basic_colors: Sequence[RGB],
        color_mode: ColorMode = ColorMode.TRUE_COLOR,
        fg_color: Optional[RGB] = None,
        bg_color: Optional[RGB] = None,
    ) -> "Palette":
        """Palette built around custom 16 basic colors (e.g. a terminal theme)."""
        basic = tuple(tuple(c) for c in basic_colors)
        return cls(
            basic_colors=basic,
            colors=build_256(basic),
            fg_color=fg_color or basic[7],
            bg_color=bg_color or basic[0],
            color_mode=color_mode,
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Palette":
        """Default reference colors with the color mode detected from the environment."""
        mode = detect_color_mode(environ)
        logger.debug("Detected color mode %s", mode.value)
        return cls(color_mode=mode)

    def with_mode(self, color_mode: ColorMode) -> "Palette":
        """Copy of this palette targeting another color mode."""
        return replace(self, color_mode=color_mode)

    def nearest16(self, rgb: Sequence[int]) -> int:
        return nearest(rgb, self.basic_colors)

    def nearest256(self, rgb: Sequence[int]) -> int:
        return nearest(rgb, self.colors)


DEFAULT_PALETTE = Palette()
