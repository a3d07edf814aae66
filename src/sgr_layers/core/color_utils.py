"""
Color space conversions between sRGB, OKLab and OKLCH.

All functions are pure and work on plain 3-tuples:

- sRGB8: ``(r, g, b)`` integers in 0..255
- OKLab: ``(l, a, b)`` floats, ``l`` in 0..1
- OKLCH: ``(l, c, h)`` floats, ``c >= 0``, ``h`` in degrees 0..360

Chroma can also be given relative to the most saturated in-gamut color at a
lightness/hue: ``"0.5max"`` is half of ``cmax(l, h)``, ``"max"`` is all of it.
"""

from __future__ import annotations

import math
import re
from typing import Sequence, Union

Number = Union[int, float]
Vec3 = tuple[float, float, float]

SRGB_MAX = 255.0

SRGB_GAMMA_THRESHOLD = 0.04045
SRGB_GAMMA_FACTOR = 12.92
SRGB_GAMMA_A = 0.055
SRGB_GAMMA_DIV = 1.055
SRGB_GAMMA_GAMMA = 2.4

LINEAR_SRGB_THRESHOLD = 0.0031308
LINEAR_SRGB_FACTOR = 12.92
LINEAR_SRGB_A = 0.055
LINEAR_SRGB_SCALE = 1.055
LINEAR_SRGB_GAMMA_INV = 1.0 / 2.4

DEG_PER_RAD = 180.0 / math.pi

# Upper bound of the chroma search; sRGB never exceeds ~0.33
CHROMA_SEARCH_MAX = 0.4
CHROMA_SEARCH_STEPS = 30

GAMUT_EPSILON = 1e-6

DIST_WEIGHTS = (1.5, 1.0, 1.0)

LMS_FROM_LINEAR_SRGB = (
    (0.4122214708, 0.5363325363, 0.0514459929),
    (0.2119034982, 0.6806995451, 0.1073969566),
    (0.0883024619, 0.2817188376, 0.6299787005),
)

OKLAB_FROM_LMS = (
    (0.2104542553, 0.7936177850, -0.0040720468),
    (1.9779984951, -2.4285922050, 0.4505937099),
    (0.0259040371, 0.7827717662, -0.8086757660),
)

LMS_FROM_OKLAB = (
    (1.0, 0.3963377774, 0.2158037573),
    (1.0, -0.1055613458, -0.0638541728),
    (1.0, -0.0894841775, -1.2914855480),
)

LINEAR_SRGB_FROM_LMS = (
    (4.0767416621, -3.3077115913, 0.2309699292),
    (-1.2684380046, 2.6097574011, -0.3413193965),
    (-0.0041960863, -0.7034186147, 1.7076147010),
)

# "max", "0.5max", "-0.1max"
_RELATIVE_CHROMA = re.compile(r'^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))?\s*max\s*$')


def _mul(matrix: Sequence[Sequence[float]], v: Sequence[float]) -> Vec3:
    return tuple(
        row[0] * v[0] + row[1] * v[1] + row[2] * v[2] for row in matrix
    )


def _cbrt(x: float) -> float:
    return -((-x) ** (1.0 / 3.0)) if x < 0 else x ** (1.0 / 3.0)


def _is_number(x: object) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)


# -----------------------------------------------------------------------------
# Gamma
# -----------------------------------------------------------------------------

def linear_rgb_from_srgb8(srgb8: Sequence[int]) -> Vec3:
    """Decode 8-bit sRGB channels to linear light (0..1)."""
    out = []
    for c in srgb8:
        c = c / SRGB_MAX
        if c <= SRGB_GAMMA_THRESHOLD:
            out.append(c / SRGB_GAMMA_FACTOR)
        else:
            out.append(((c + SRGB_GAMMA_A) / SRGB_GAMMA_DIV) ** SRGB_GAMMA_GAMMA)
    return tuple(out)


def srgb8_from_linear_rgb(lin: Sequence[float]) -> tuple[int, int, int]:
    """Encode linear light to 8-bit sRGB, clamping out-of-gamut channels."""
    out = []
    for c in lin:
        c = min(max(c, 0.0), 1.0)
        if c <= LINEAR_SRGB_THRESHOLD:
            v = c * LINEAR_SRGB_FACTOR * SRGB_MAX
        else:
            v = (LINEAR_SRGB_SCALE * c ** LINEAR_SRGB_GAMMA_INV - LINEAR_SRGB_A) * SRGB_MAX
        out.append(min(max(int(v + 0.5), 0), 255))
    return tuple(out)


# -----------------------------------------------------------------------------
# Conversions
# -----------------------------------------------------------------------------

def oklab_from_srgb8(srgb8: Sequence[int]) -> Vec3:
    lms = _mul(LMS_FROM_LINEAR_SRGB, linear_rgb_from_srgb8(srgb8))
    return _mul(OKLAB_FROM_LMS, [_cbrt(x) for x in lms])


def linear_rgb_from_oklab(oklab: Sequence[float]) -> Vec3:
    lms = _mul(LMS_FROM_OKLAB, oklab)
    return _mul(LINEAR_SRGB_FROM_LMS, [x ** 3 for x in lms])


def srgb8_from_oklab(oklab: Sequence[float]) -> tuple[int, int, int]:
    return srgb8_from_linear_rgb(linear_rgb_from_oklab(oklab))


def oklch_from_oklab(oklab: Sequence[float]) -> Vec3:
    l, a, b = oklab
    c = math.sqrt(a * a + b * b)
    h = math.atan2(b, a) * DEG_PER_RAD
    if h < 0:
        h += 360.0
    return (l, c, h % 360.0)


def oklab_from_oklch(oklch: Sequence[float]) -> Vec3:
    l, c, h = oklch
    r = h / DEG_PER_RAD
    return (l, c * math.cos(r), c * math.sin(r))


def oklch_from_srgb8(srgb8: Sequence[int]) -> Vec3:
    return oklch_from_oklab(oklab_from_srgb8(srgb8))


def srgb8_from_oklch(oklch: Sequence[float]) -> tuple[int, int, int]:
    return srgb8_from_oklab(oklab_from_oklch(oklch))


# -----------------------------------------------------------------------------
# Gamut
# -----------------------------------------------------------------------------

def oklch_in_srgb_gamut(oklch: Sequence[float]) -> bool:
    """True if the color maps to linear sRGB without clipping."""
    lin = linear_rgb_from_oklab(oklab_from_oklch(oklch))
    return all(-GAMUT_EPSILON <= c <= 1.0 + GAMUT_EPSILON for c in lin)


def cmax(l: float, h: float) -> float:
    """Largest in-gamut chroma for lightness ``l`` and hue ``h`` (bisection)."""
    lo, hi = 0.0, CHROMA_SEARCH_MAX
    for _ in range(CHROMA_SEARCH_STEPS):
        mid = (lo + hi) / 2
        if oklch_in_srgb_gamut((l, mid, h)):
            lo = mid
        else:
            hi = mid
    return lo


# -----------------------------------------------------------------------------
# Relative chroma
# -----------------------------------------------------------------------------

def parse_relative_chroma(value: object) -> float | None:
    """Return the ratio in ``"Rmax"`` (``"max"`` is 1.0), or None if not relative."""
    if not isinstance(value, str):
        return None
    m = _RELATIVE_CHROMA.match(value)
    if not m:
        return None
    return float(m.group(1)) if m.group(1) is not None else 1.0


def _validate_oklch(oklch: Sequence[object]) -> None:
    if len(oklch) != 3 or not all(_is_number(x) for x in oklch):
        raise ValueError(f"invalid oklch: {oklch!r}")
    l, c, _ = oklch
    if not 0.0 <= l <= 1.0:
        raise ValueError(f"oklch lightness must be 0..1, got {l}")
    if c < 0:
        raise ValueError(f"oklch chroma must be >= 0, got {c}")


def oklch_from_maybe_relative_chroma(oklch: Sequence[object]) -> Vec3:
    """Resolve ``(l, "Rmax", h)`` to absolute chroma; absolute input passes through."""
    if len(oklch) != 3:
        raise ValueError(f"invalid oklch: {oklch!r}")
    l, c, h = oklch
    ratio = parse_relative_chroma(c)
    if ratio is not None:
        if ratio < 0:
            raise ValueError(f"relative chroma must be >= 0, got {c!r}")
        _validate_oklch((l, 0.0, h))
        c = ratio * cmax(l, h)
    _validate_oklch((l, c, h))
    return (l, c, h)


# -----------------------------------------------------------------------------
# Shifts
# -----------------------------------------------------------------------------

def _unwrap_absolute(value: object) -> object | None:
    """``[x]`` or ``(x,)`` -> x; anything else -> None."""
    if isinstance(value, (list, tuple)):
        if len(value) != 1:
            raise ValueError(f"absolute value must have exactly one element: {value!r}")
        return value[0]
    return None


def _shift_channel(old: float, delta: object) -> float:
    absolute = _unwrap_absolute(delta)
    if absolute is not None:
        if not _is_number(absolute):
            raise ValueError(f"invalid absolute value: {delta!r}")
        return float(absolute)
    if not _is_number(delta):
        raise ValueError(f"invalid delta: {delta!r}")
    return old + delta


def _relative_chroma_of(l: float, c: float, h: float) -> float:
    top = cmax(l, h)
    return c / top if top > 0 else 0.0


def oklch_shift(base: Sequence[float], delta: Sequence[object]) -> Vec3:
    """
    Shift an OKLCH color channel by channel.

    Lightness and hue deltas are numbers (added) or one-element lists
    (replacement). Chroma additionally accepts ``["Rmax"]`` (relative
    target), ``"+Rmax"``/``"-Rmax"`` (relative delta) and ``None``, which keeps
    the same relative chroma at the new lightness/hue.

    The result has lightness clamped to 0..1, hue wrapped to 0..360 and
    chroma clamped to what the new lightness/hue can hold in sRGB.
    """
    _validate_oklch(base)
    if len(delta) != 3:
        raise ValueError(f"delta must have 3 channels: {delta!r}")
    l, c, h = base
    dl, dc, dh = delta

    nl = min(max(_shift_channel(l, dl), 0.0), 1.0)
    nh = _shift_channel(h, dh) % 360.0
    new_max = cmax(nl, nh)

    if dc is None:
        nc = _relative_chroma_of(l, c, h) * new_max
    elif (absolute := _unwrap_absolute(dc)) is not None:
        ratio = parse_relative_chroma(absolute)
        if ratio is not None:
            nc = ratio * new_max
        elif _is_number(absolute):
            nc = float(absolute)
        else:
            raise ValueError(f"invalid absolute chroma: {dc!r}")
    elif (ratio := parse_relative_chroma(dc)) is not None:
        nc = (_relative_chroma_of(l, c, h) + ratio) * new_max
    elif _is_number(dc):
        nc = c + dc
    else:
        raise ValueError(f"invalid chroma delta: {dc!r}")

    nc = min(max(nc, 0.0), new_max)
    return (nl, nc, nh)


def srgb8_shift(srgb8: Sequence[int], delta: Sequence[object]) -> tuple[int, int, int]:
    """Shift sRGB8 channels by deltas or ``[absolute]`` values; result is clamped."""
    if len(srgb8) != 3 or not all(_is_number(x) and 0 <= x <= 255 for x in srgb8):
        raise ValueError(f"invalid sRGB8: {srgb8!r}")
    if len(delta) != 3:
        raise ValueError(f"delta must have 3 channels: {delta!r}")
    out = []
    for old, d in zip(srgb8, delta):
        absolute = _unwrap_absolute(d)
        if absolute is not None and _is_number(absolute) and not 0 <= absolute <= 255:
            raise ValueError(f"absolute channel must be 0..255, got {absolute}")
        v = _shift_channel(old, d)
        out.append(min(max(int(math.floor(v + 0.5)), 0), 255))
    return tuple(out)


# -----------------------------------------------------------------------------
# Distance
# -----------------------------------------------------------------------------

def oklab_distance(
    srgb8_a: Sequence[int],
    srgb8_b: Sequence[int],
    weights: Sequence[float] = DIST_WEIGHTS,
) -> float:
    """Weighted euclidean distance in OKLab (lightness weighted higher)."""
    a = oklab_from_srgb8(srgb8_a)
    b = oklab_from_srgb8(srgb8_b)
    return math.sqrt(sum(((y - x) * w) ** 2 for x, y, w in zip(a, b, weights)))
