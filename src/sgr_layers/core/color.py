"""Color representation for SGR rendering."""

from __future__ import annotations

import re
from enum import IntEnum
from typing import Any, Optional, Sequence, Union

from sgr_layers.core import color_utils
from sgr_layers.core.constants import DEFAULT_BG, DEFAULT_FG, DEFAULT_UL
from sgr_layers.core.errors import InvalidColor, RoleMismatch
from sgr_layers.core.palette import DEFAULT_PALETTE, ColorMode, Palette

RGB = tuple[int, int, int]
OKLCH = tuple[float, float, float]

_D8 = r'(?:25[0-5]|2[0-4]\d|1\d\d|[1-9]?\d)'   # 0-255
RX_256 = re.compile(rf'^([345]8);5;({_D8})$')
RX_RGB = re.compile(rf'^([345]8);2;({_D8});({_D8});({_D8})$')
RX_HEX = re.compile(r'^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$')

FG_CODES = frozenset([*range(30, 38), DEFAULT_FG, *range(90, 98)])
BG_CODES = frozenset([*range(40, 48), DEFAULT_BG, *range(100, 108)])
BASIC_CODES = FG_CODES | BG_CODES | {DEFAULT_UL}


class Role(IntEnum):
    """Which SGR color family a color applies to (its leading parameter)."""
    FG = 38
    BG = 48
    UL = 58   # underline color


def _is_int(x: object) -> bool:
    return isinstance(x, int) and not isinstance(x, bool)


def _basic_role(code: int) -> Role:
    if code in FG_CODES:
        return Role.FG
    if code in BG_CODES:
        return Role.BG
    return Role.UL


def _coerce_role(role: Any) -> Role:
    try:
        return Role(role)
    except ValueError as e:
        raise InvalidColor(f"Invalid color role: {role!r}") from e


def _check_components(index: Any, rgb: Any, oklch: Any) -> None:
    """Range-check the non-basic representations given to the constructor."""
    if index is not None and not (_is_int(index) and 0 <= index <= 255):
        raise InvalidColor(f"256-color index must be 0-255, got {index!r}")
    if rgb is not None:
        if not isinstance(rgb, (list, tuple)) or len(rgb) != 3 \
                or not all(_is_int(c) and 0 <= c <= 255 for c in rgb):
            raise InvalidColor(f"RGB values must be three ints 0-255, got {rgb!r}")
    if oklch is not None:
        if not isinstance(oklch, (list, tuple)) or len(oklch) != 3 \
                or not all(color_utils._is_number(x) for x in oklch):
            raise InvalidColor(f"OKLCH must be three numbers, got {oklch!r}")
        l, c, _ = oklch
        # derived lightness of white can land a rounding error past 1
        eps = color_utils.GAMUT_EPSILON
        if not -eps <= l <= 1 + eps:
            raise InvalidColor(f"OKLCH lightness must be 0-1, got {l!r}")
        if c < 0:
            raise InvalidColor(f"OKLCH chroma must be >= 0, got {c!r}")


def _parse_sgr(sgr: object) -> Optional[dict[str, Any]]:
    """Split a color SGR code into constructor fields, or None if it isn't one."""
    if _is_int(sgr):
        return {"basic": sgr} if sgr in BASIC_CODES else None
    if not isinstance(sgr, str):
        return None
    if sgr.isdigit():
        return _parse_sgr(int(sgr))
    if m := RX_256.match(sgr):
        return {"role": Role(int(m.group(1))), "index": int(m.group(2))}
    if m := RX_RGB.match(sgr):
        return {
            "role": Role(int(m.group(1))),
            "rgb": tuple(int(x) for x in m.group(2, 3, 4)),
        }
    return None


def _parse_rgb(args: Sequence[Any]) -> RGB:
    """Accept ``(r, g, b)``, ``([r, g, b],)`` or ``("#rrggbb",)``."""
    if len(args) == 1 and isinstance(args[0], str):
        m = RX_HEX.match(args[0])
        if not m:
            raise InvalidColor(f"Invalid hex color: {args[0]!r}")
        return tuple(int(x, 16) for x in m.groups())
    if len(args) == 1 and isinstance(args[0], (list, tuple)):
        args = args[0]
    if len(args) != 3 or not all(_is_int(c) and 0 <= c <= 255 for c in args):
        raise InvalidColor(f"RGB values must be three ints 0-255, got {tuple(args)!r}")
    return tuple(args)


class Color:
    """
    A color value that may know several representations at once.

    A color holds any of: a basic SGR code (31, 102, 39...), a 256-palette
    index, an sRGB triple and an OKLCH triple, plus its role (fg, bg or
    underline color). ``to_sgr`` picks the best representation for a
    terminal's color mode, converting downward only when nothing suitable is
    known. ``merge`` combines representations of the same role so a style can
    say "this truecolor, or this basic code on 16-color terminals".

    Colors compare equal when their ``sgr()`` strings match; a color also
    equals the int or str form of that string (``Color.from_sgr(31) == 31``).
    Hashing agrees with the int form of basic codes and the str form of
    extended ones, so ``31`` and ``"38;5;208"`` find their Colors as set
    members or dict keys while ``"31"`` does not.
    """

    __slots__ = ("_role", "_basic", "_index", "_rgb", "_oklch")

    def __init__(
        self,
        role: Optional[Role] = None,
        basic: Optional[int] = None,
        index: Optional[int] = None,
        rgb: Optional[RGB] = None,
        oklch: Optional[OKLCH] = None,
    ):
        if basic is None and index is None and rgb is None and oklch is None:
            raise InvalidColor("Color needs at least one representation")
        if basic is not None and basic not in BASIC_CODES:
            raise InvalidColor(f"Invalid basic SGR color code: {basic!r}")
        if role is None:
            if basic is None:
                raise InvalidColor("Color without a basic code needs a role")
            role = _basic_role(basic)
        role = _coerce_role(role)
        if basic is not None and _basic_role(basic) is not role:
            raise InvalidColor(f"SGR code {basic} does not match role {role.name}")
        _check_components(index, rgb, oklch)
        self._role = role
        self._basic = basic
        self._index = index
        self._rgb = tuple(rgb) if rgb is not None else None
        self._oklch = tuple(oklch) if oklch is not None else None

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def from_sgr(cls, sgr: Union[int, str]) -> "Color":
        """
        Create a Color from an SGR color code.

        Accepts basic codes (30-37, 39, 40-47, 49, 59, 90-97, 100-107, as int or
        str) and extended strings ``"38;5;n"`` / ``"48;2;r;g;b"`` / ``"58;..."``.
        """
        fields = _parse_sgr(sgr)
        if fields is None:
            raise InvalidColor(f"Invalid SGR color code: {sgr!r}")
        return cls(**fields)

    @classmethod
    def from_rgb(cls, *rgb: Any, role: Role = Role.FG) -> "Color":
        """Create a Color from RGB values, an RGB sequence or a hex string."""
        return cls(role=_coerce_role(role), rgb=_parse_rgb(rgb))

    @classmethod
    def from_hex(cls, hex_str: str, role: Role = Role.FG) -> "Color":
        """Create a Color from ``"#rrggbb"`` (the ``#`` is optional)."""
        if not isinstance(hex_str, str):
            raise InvalidColor(f"Hex color must be a string, got {hex_str!r}")
        return cls(role=_coerce_role(role), rgb=_parse_rgb((hex_str,)))

    @classmethod
    def from_oklch(cls, l: float, c: Union[float, str], h: float, role: Role = Role.FG) -> "Color":
        """Create a Color from OKLCH; chroma may be relative (``"0.5max"``)."""
        try:
            oklch = color_utils.oklch_from_maybe_relative_chroma((l, c, h))
        except ValueError as e:
            raise InvalidColor(str(e)) from e
        return cls(role=_coerce_role(role), oklch=oklch)

    @classmethod
    def from_256(cls, index: int, role: Role = Role.FG) -> "Color":
        """Create a Color from a 256-color index."""
        if not (_is_int(index) and 0 <= index <= 255):
            raise InvalidColor(f"256-color index must be 0-255, got {index!r}")
        return cls(role=_coerce_role(role), index=index)

    @classmethod
    def from_gray(cls, gray: int, role: Role = Role.FG) -> "Color":
        """Create a Color from a grayscale ramp step (0-23, palette 232-255)."""
        if not (_is_int(gray) and 0 <= gray <= 23):
            raise InvalidColor(f"Gray step must be 0-23, got {gray!r}")
        return cls(role=_coerce_role(role), index=232 + gray)

    @classmethod
    def from_cube(cls, r: int, g: int, b: int, role: Role = Role.FG) -> "Color":
        """Create a Color from 6x6x6 cube coordinates (each 0-5)."""
        if not all(_is_int(x) and 0 <= x <= 5 for x in (r, g, b)):
            raise InvalidColor(f"Cube coordinates must be 0-5, got ({r!r}, {g!r}, {b!r})")
        return cls(role=_coerce_role(role), index=16 + 36 * r + 6 * g + b)

    @classmethod
    def maybe_color(cls, value: Any) -> Any:
        """Wrap a color-shaped SGR code in a Color; return anything else unchanged."""
        if isinstance(value, Color):
            return value
        fields = _parse_sgr(value)
        return cls(**fields) if fields is not None else value

    # -------------------------------------------------------------------------
    # Representations
    # -------------------------------------------------------------------------

    @property
    def role(self) -> Role:
        return self._role

    def rgb(self, palette: Optional[Palette] = None) -> RGB:
        """sRGB triple, derived from OKLCH, the palette index or the basic code."""
        if self._rgb is not None:
            return self._rgb
        if self._oklch is not None:
            self._rgb = color_utils.srgb8_from_oklch(self._oklch)
            return self._rgb

        palette = palette or DEFAULT_PALETTE
        if self._index is not None:
            return tuple(palette.colors[self._index])

        n = self._basic
        assert n is not None
        if n == DEFAULT_FG or n == DEFAULT_UL:
            return tuple(palette.fg_color)
        if n == DEFAULT_BG:
            return tuple(palette.bg_color)
        if 30 <= n <= 37:
            i = n - 30
        elif 40 <= n <= 47:
            i = n - 40
        elif 90 <= n <= 97:
            i = n - 90 + 8
        else:
            i = n - 100 + 8
        return tuple(palette.basic_colors[i])

    def oklch(self, palette: Optional[Palette] = None) -> OKLCH:
        if self._oklch is not None:
            return self._oklch
        if self._rgb is not None:
            self._oklch = color_utils.oklch_from_srgb8(self._rgb)
            return self._oklch
        return color_utils.oklch_from_srgb8(self.rgb(palette))

    def palette_index(self, palette: Optional[Palette] = None) -> int:
        if self._index is not None:
            return self._index
        return (palette or DEFAULT_PALETTE).nearest256(self.rgb(palette))

    def basic(self, palette: Optional[Palette] = None) -> Optional[int]:
        """
        Basic SGR code for this color, matched against the 16 basic colors.

        Underline colors have no basic form other than the default (59), so
        this returns None for them.
        """
        if self._basic is not None:
            return self._basic
        if self._role is Role.UL:
            return None
        i = (palette or DEFAULT_PALETTE).nearest16(self.rgb(palette))
        code = 30 + i if i < 8 else 90 + i - 8
        return code + 10 if self._role is Role.BG else code

    def _has_truecolor(self) -> bool:
        return self._rgb is not None or self._oklch is not None

    def sgr(self) -> str:
        """SGR parameter for the richest representation this color knows."""
        if self._has_truecolor():
            r, g, b = self.rgb()
            return f"{self._role.value};2;{r};{g};{b}"
        if self._index is not None:
            return f"{self._role.value};5;{self._index}"
        return str(self._basic)

    def to_sgr(
        self,
        mode: Union[ColorMode, str, None] = None,
        palette: Optional[Palette] = None,
    ) -> str:
        """
        SGR parameter for a terminal's color mode.

        Uses the best known representation at or below ``mode`` and converts
        (via nearest palette match) only when none is known. Never converts
        upward: a basic color stays basic in 256 and true color mode.
        ``mode`` defaults to the palette's color mode.
        """
        palette = palette or DEFAULT_PALETTE
        if mode is None:
            mode = palette.color_mode
        elif isinstance(mode, str):
            mode = ColorMode.parse(mode)

        if mode is ColorMode.TRUE_COLOR:
            return self.sgr()

        if mode is ColorMode.EXTENDED_256:
            if self._index is not None:
                return f"{self._role.value};5;{self._index}"
            if self._has_truecolor():
                return f"{self._role.value};5;{palette.nearest256(self.rgb())}"
            return str(self._basic)

        # STANDARD_16
        if self._basic is not None:
            return str(self._basic)
        if self._role is Role.UL:
            # no 16-color underline codes; use the 256 form limited to the basic entries
            return f"{self._role.value};5;{palette.nearest16(self.rgb(palette))}"
        return str(self.basic(palette))

    # -------------------------------------------------------------------------
    # Transformations
    # -------------------------------------------------------------------------

    def change_role(self, new_role: Role, palette: Optional[Palette] = None) -> "Color":
        """
        The same color under another role.

        Basic codes move between the fg and bg ranges (31 <-> 41). A color
        becoming an underline color loses its basic code (only the default,
        59, carries over) and gains RGB if it knew nothing richer.
        """
        new_role = _coerce_role(new_role)
        if new_role is self._role:
            return self

        basic = None
        rgb = self._rgb
        if self._basic is not None:
            if self._basic in (DEFAULT_FG, DEFAULT_BG, DEFAULT_UL):
                basic = {Role.FG: DEFAULT_FG, Role.BG: DEFAULT_BG, Role.UL: DEFAULT_UL}[new_role]
            elif new_role is Role.UL:
                if self._index is None and not self._has_truecolor():
                    rgb = self.rgb(palette)
            else:
                basic = self._basic + (10 if new_role is Role.BG else -10)
        return Color(role=new_role, basic=basic, index=self._index, rgb=rgb, oklch=self._oklch)

    def merge(self, other: "Color") -> "Color":
        """Combine known representations; this color's win where both have one."""
        if not isinstance(other, Color):
            raise TypeError(f"Can only merge Color, got {type(other).__name__}")
        if self._role is not other._role:
            raise RoleMismatch(
                f"Cannot merge {self._role.name} color with {other._role.name} color"
            )
        return Color(
            role=self._role,
            basic=self._basic if self._basic is not None else other._basic,
            index=self._index if self._index is not None else other._index,
            rgb=self._rgb if self._rgb is not None else other._rgb,
            oklch=self._oklch if self._oklch is not None else other._oklch,
        )

    @staticmethod
    def merge_many(*colors: "Color") -> tuple[Optional["Color"], Optional["Color"], Optional["Color"]]:
        """Merge colors per role; returns ``(fg, bg, underline)``, None for absent roles."""
        merged: dict[Role, Color] = {}
        for color in colors:
            if color.role in merged:
                merged[color.role] = merged[color.role].merge(color)
            else:
                merged[color.role] = color
        return merged.get(Role.FG), merged.get(Role.BG), merged.get(Role.UL)

    def oklch_shift(self, dl: Any, dc: Any, dh: Any, palette: Optional[Palette] = None) -> "Color":
        """New color moved in OKLCH space (see ``color_utils.oklch_shift``)."""
        l, c, h = self.oklch(palette)
        # derived values can land a hair outside 0..1
        base = (min(max(l, 0.0), 1.0), max(c, 0.0), h)
        try:
            oklch = color_utils.oklch_shift(base, (dl, dc, dh))
        except ValueError as e:
            raise InvalidColor(str(e)) from e
        return Color(role=self._role, oklch=oklch)

    def rgb_shift(self, dr: Any, dg: Any, db: Any, palette: Optional[Palette] = None) -> "Color":
        """New color with RGB channels shifted; ``[x]`` sets a channel, results are clamped."""
        delta = []
        for d in (dr, dg, db):
            if isinstance(d, (list, tuple)) and len(d) == 1 and color_utils._is_number(d[0]):
                d = [min(max(d[0], 0), 255)]
            delta.append(d)
        try:
            rgb = color_utils.srgb8_shift(self.rgb(palette), delta)
        except ValueError as e:
            raise InvalidColor(str(e)) from e
        return Color(role=self._role, rgb=rgb)

    # -------------------------------------------------------------------------
    # Dunder
    # -------------------------------------------------------------------------

    def __int__(self) -> int:
        """Leading SGR parameter (31, or 38 for ``38;5;n``)."""
        return int(self.sgr().split(";", 1)[0])

    def __str__(self) -> str:
        return self.sgr()

    def __repr__(self) -> str:
        return f"Color({self.sgr()!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Color):
            return self.sgr() == other.sgr()
        if _is_int(other) or isinstance(other, str):
            return self.sgr() == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        # basic colors hash like their int code so they mix with ints in sets and dicts
        if not self._has_truecolor() and self._index is None:
            return hash(self._basic)
        return hash(self.sgr())
