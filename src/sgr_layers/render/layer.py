"""Layer - a snapshot of every tracked SGR attribute at one nesting depth."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Iterator, NamedTuple, Optional, Union

from sgr_layers.core.color import Color, Role
from sgr_layers.core.errors import FrozenLayerError
from sgr_layers.core.palette import ColorMode, Palette

logger = logging.getLogger(__name__)

Code = Union[int, str, Color]
Effect = Callable[["LayerView", "LayerView"], None]

INTENSITY_OFF = 22


class LayerRange(NamedTuple):
    """The SGR codes that write one layer slot."""
    label: str
    index: int
    codes: frozenset[int]
    on: Optional[int]   # None for color slots
    off: int


class LayerRanges:
    """
    Labeled, indexable table of slot ranges.

    Index by position (``RANGES[10]``) or label (``RANGES["bold"]``).
    """

    def __init__(self, ranges: Iterable[LayerRange]):
        self._ranges = tuple(ranges)
        self._by_label = {r.label: r for r in self._ranges}
        self._by_code: dict[int, list[int]] = {}
        for r in self._ranges:
            for code in r.codes:
                self._by_code.setdefault(code, []).append(r.index)

    def __getitem__(self, key: Union[int, str]) -> LayerRange:
        if isinstance(key, str):
            return self._by_label[key]
        return self._ranges[key]

    def __iter__(self) -> Iterator[LayerRange]:
        return iter(self._ranges)

    def __len__(self) -> int:
        return len(self._ranges)

    @property
    def labels(self) -> list[str]:
        return [r.label for r in self._ranges]

    def indices_for(self, code: Any) -> Optional[list[int]]:
        """Slot indices written by ``code``, or None if it isn't a layer code."""
        leading = _leading_param(code)
        if leading is None or leading not in self._by_code:
            return None
        return list(self._by_code[leading])


def _leading_param(code: Any) -> Optional[int]:
    if isinstance(code, Color):
        return int(code)
    if isinstance(code, bool):
        return None
    if isinstance(code, int):
        return code
    if isinstance(code, str):
        head = code.split(';', 1)[0]
        if head.isascii() and head.isdigit():
            return int(head)
    return None


RANGES = LayerRanges([
    LayerRange("fg", 0, frozenset([*range(30, 40), *range(90, 98)]), None, 39),
    LayerRange("bg", 1, frozenset([*range(40, 50), *range(100, 108)]), None, 49),
    LayerRange("underline_color", 2, frozenset([58, 59]), None, 59),
    LayerRange("italic", 3, frozenset([3, 23]), 3, 23),
    LayerRange("blink", 4, frozenset([5, 25]), 5, 25),
    LayerRange("inverse", 5, frozenset([7, 27]), 7, 27),
    LayerRange("hidden", 6, frozenset([8, 28]), 8, 28),
    LayerRange("strike", 7, frozenset([9, 29]), 9, 29),
    LayerRange("overline", 8, frozenset([53, 55]), 53, 55),
    LayerRange("underline", 9, frozenset([4, 21, 24]), 4, 24),
    LayerRange("bold", 10, frozenset([1, INTENSITY_OFF]), 1, INTENSITY_OFF),
    LayerRange("dim", 11, frozenset([2, INTENSITY_OFF]), 2, INTENSITY_OFF),
])

SLOT_COUNT = len(RANGES)
# Bold and dim are diffed together since they share the off code
INTENSITY = slice(10, 12)
DOUBLE_UNDERLINE = 21


def _flatten(codes: Iterable[Any]) -> Iterator[Any]:
    for code in codes:
        if isinstance(code, (list, tuple)):
            yield from _flatten(code)
        else:
            yield code


def _diff_intensity(new: list[Any], old: list[Any]) -> list[Any]:
    """
    Codes moving bold/dim from ``old`` to ``new``.

    Turning either one off needs 22, which turns both off, so 22 comes first
    and is followed by the on codes of everything that must stay on.
    """
    if new == old or all(v is None for v in new):
        return []
    ons = [RANGES[i].on for i in range(INTENSITY.start, INTENSITY.stop)]

    turning_off = any(n == INTENSITY_OFF and o != INTENSITY_OFF for n, o in zip(new, old))
    if turning_off:
        keep = [
            on for on, n, o in zip(ons, new, old)
            if n == on or (n is None and o == on)
        ]
        return [INTENSITY_OFF, *keep]
    return [n for n, o in zip(new, old) if n is not None and n != INTENSITY_OFF and n != o]


class Layer:
    """
    A fixed set of slots, one per SGR attribute.

    Each slot is unset (None), a raw SGR code (an int, or a string such as
    ``"38;5;208"``) or a Color. Layers also carry an optional tag and the
    effects recorded by ``from_codes``. Frozen layers reject writes.
    """

    __slots__ = ("_values", "tag", "effects", "_frozen")

    def __init__(
        self,
        values: Optional[Iterable[Optional[Code]]] = None,
        tag: Optional[str] = None,
        effects: Iterable[Effect] = (),
    ):
        self._values: list[Optional[Code]] = (
            list(values) if values is not None else [None] * SLOT_COUNT
        )
        if len(self._values) != SLOT_COUNT:
            raise ValueError(f"Layer needs {SLOT_COUNT} slots, got {len(self._values)}")
        self.tag = tag
        self.effects: tuple[Effect, ...] = tuple(effects)
        self._frozen = False

    @classmethod
    def empty(cls) -> "Layer":
        """Layer with every slot unset."""
        return cls()

    @classmethod
    def from_codes(cls, *codes: Any) -> "Layer":
        """
        Build a layer by applying SGR codes in order.

        Codes may be ints, digit strings, extended color strings, Colors,
        Layers (overlaid) or callables (recorded as effects). ``0`` resets
        the layer to BASE. ``None`` is skipped, nested lists are flattened
        and codes no slot accepts are dropped.

        Example:
            >>> Layer.from_codes(1, "31", Color.from_rgb(0, 0, 255, role=Role.BG))
        """
        layer = cls.empty()
        effects: list[Effect] = []

        for code in _flatten(codes):
            if code is None:
                continue
            if isinstance(code, Layer):
                layer = layer.overlay(code)
                effects.extend(code.effects)
                continue
            if callable(code):
                effects.append(code)
                continue
            if isinstance(code, str) and code.isascii() and code.isdigit():
                code = int(code)
            if code == 0 and type(code) is int:
                layer = BASE.copy()
                continue
            if isinstance(code, str):
                code = Color.maybe_color(code)

            indices = RANGES.indices_for(code)
            if indices is None:
                logger.debug("Dropping unclassified SGR code %r", code)
                continue
            for i in indices:
                layer._values[i] = code

        layer.effects = tuple(effects)
        return layer

    # -------------------------------------------------------------------------
    # Slot access
    # -------------------------------------------------------------------------

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "Layer":
        """Make this layer read-only; returns self."""
        self._frozen = True
        return self

    def copy(self) -> "Layer":
        """Unfrozen copy with the same slots, tag and effects."""
        return Layer(self._values, tag=self.tag, effects=self.effects)

    def __getitem__(self, key: Union[int, str]) -> Optional[Code]:
        index = RANGES[key].index if isinstance(key, str) else key
        return self._values[index]

    def __setitem__(self, key: Union[int, str], value: Optional[Code]) -> None:
        if self._frozen:
            raise FrozenLayerError("Cannot modify a frozen layer")
        index = RANGES[key].index if isinstance(key, str) else key
        self._values[index] = value

    def __iter__(self) -> Iterator[Optional[Code]]:
        return iter(self._values)

    def __len__(self) -> int:
        return SLOT_COUNT

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Layer):
            return NotImplemented
        return self._values == other._values

    __hash__ = None

    def __repr__(self) -> str:
        slots = ", ".join(
            f"{r.label}={v!r}" for r, v in zip(RANGES, self._values) if v is not None
        )
        tag = f" tag={self.tag!r}" if self.tag is not None else ""
        return f"<Layer{tag} {slots}>"

    # -------------------------------------------------------------------------
    # Composition
    # -------------------------------------------------------------------------

    def overlay(self, top: Optional["Layer"]) -> "Layer":
        """New layer with ``top``'s set slots written over this layer's."""
        if top is None:
            return Layer(self._values)
        if not isinstance(top, Layer):
            raise TypeError(f"Can only overlay a Layer, got {type(top).__name__}")
        return Layer(
            t if t is not None else s for s, t in zip(self._values, top._values)
        )

    def diff(self, other: Optional["Layer"]) -> list[Code]:
        """
        Codes that turn a terminal showing ``other`` into one showing this layer.

        Returns an empty list when nothing visible changes.
        """
        old = other._values if other is not None else [None] * SLOT_COUNT
        codes: list[Code] = [
            new for new, prev in zip(self._values[:INTENSITY.start], old[:INTENSITY.start])
            if new is not None and new != prev
        ]
        codes.extend(_diff_intensity(self._values[INTENSITY], old[INTENSITY]))
        return codes

    def codes(self) -> list[Code]:
        """Codes describing this layer from scratch."""
        return self.diff(None)

    def to_sgr(
        self,
        mode: Union[ColorMode, str, None] = None,
        palette: Optional[Palette] = None,
    ) -> str:
        """SGR parameter string for this layer, e.g. ``"31;1"``."""
        return ";".join(prepare_sgr(self.codes(), mode, palette))


def prepare_sgr(
    codes: Iterable[Optional[Code]],
    mode: Union[ColorMode, str, None] = None,
    palette: Optional[Palette] = None,
) -> list[str]:
    """
    Resolve codes to SGR parameter strings.

    Drops unset codes and duplicates, renders Colors for ``mode`` and moves
    22 to the front so it can't cancel a bold or dim code given with it.
    """
    params: list[str] = []
    for code in codes:
        if code is None:
            continue
        param = code.to_sgr(mode, palette) if isinstance(code, Color) else str(code)
        if param not in params:
            params.append(param)

    off = str(INTENSITY_OFF)
    if off in params:
        params.remove(off)
        params.insert(0, off)
    return params


BASE = Layer(r.off for r in RANGES).freeze()


def _flag(label: str, on: Optional[int] = None) -> property:
    r = RANGES[label]
    on = r.on if on is None else on

    def fget(self: "LayerView") -> bool:
        return self._layer[r.index] == on

    def fset(self: "LayerView", value: Optional[bool]) -> None:
        self._layer[r.index] = None if value is None else (on if value else r.off)

    return property(fget, fset, doc=f"Whether {label.replace('_', ' ')} is on.")


def _color(label: str, role: Role) -> property:
    index = RANGES[label].index

    def fget(self: "LayerView") -> Any:
        return Color.maybe_color(self._layer[index])

    def fset(self: "LayerView", value: Any) -> None:
        if value is not None:
            if not isinstance(value, Color):
                value = Color.from_sgr(value)
            value = value.change_role(role, self.palette)
        self._layer[index] = value

    return property(fget, fset, doc=f"The {label.replace('_', ' ')} as a Color, or None.")


class LayerView:
    """
    Attribute access to a layer for effects.

    Colors read back as Color objects and are moved to the slot's role on
    write (assigning a foreground color to ``bg`` yields the matching
    background color). Boolean attributes write their on or off code;
    assigning None unsets the slot. Writes to a frozen layer raise
    FrozenLayerError.
    """

    def __init__(self, layer: Layer, palette: Optional[Palette] = None):
        self._layer = layer
        self.palette = palette

    @property
    def layer(self) -> Layer:
        return self._layer

    fg = _color("fg", Role.FG)
    bg = _color("bg", Role.BG)
    underline_color = _color("underline_color", Role.UL)

    italic = _flag("italic")
    blink = _flag("blink")
    inverse = _flag("inverse")
    hidden = _flag("hidden")
    strike = _flag("strike")
    overline = _flag("overline")
    underline = _flag("underline")
    double_underline = _flag("underline", on=DOUBLE_UNDERLINE)
    bold = _flag("bold")
    dim = _flag("dim")

    def __repr__(self) -> str:
        return f"LayerView({self._layer!r})"


__all__ = [
    "BASE",
    "RANGES",
    "Layer",
    "LayerRange",
    "LayerRanges",
    "LayerView",
    "prepare_sgr",
]
