"""In-memory style rules mapping tag names to layers."""

from __future__ import annotations

from typing import Any, Iterator, Mapping, Optional

from sgr_layers.core.constants import COLORS_16
from sgr_layers.render.layer import Layer, LayerView


def bold_off(top: LayerView, under: LayerView) -> None:
    """Effect turning bold off while keeping dim."""
    top.bold = False


def dim_off(top: LayerView, under: LayerView) -> None:
    """Effect turning dim off while keeping bold."""
    top.dim = False


# SGR attribute names and their on codes
ATTRIBUTES = {
    "bold": 1,
    "dim": 2,
    "italic": 3,
    "underline": 4,
    "blink": 5,
    "inverse": 7,
    "hidden": 8,
    "strike": 9,
    "double_underline": 21,
    "overline": 53,
}


def _basic_rules() -> dict[str, Any]:
    rules: dict[str, Any] = dict(ATTRIBUTES)
    for name, index in COLORS_16.items():
        fg = 30 + index if index < 8 else 90 + index - 8
        rules[name] = fg
        rules[f"on_{name}"] = fg + 10
    rules["default"] = 39
    rules["on_default"] = 49
    rules["reset"] = 0
    rules["bold_off"] = bold_off
    rules["dim_off"] = dim_off
    return rules


class RuleTable(Mapping[str, Layer]):
    """
    Read-only mapping from tag name to Layer.

    Example:
        >>> rules = RuleTable.from_codes(warn=[1, 33], error=[1, "38;5;196"])
        >>> rules.lookup("warn").to_sgr()
        '33;1'
    """

    def __init__(self, rules: Optional[Mapping[str, Layer]] = None):
        self._rules: dict[str, Layer] = {}
        for name, layer in (rules or {}).items():
            if not isinstance(layer, Layer):
                raise TypeError(f"Rule {name!r} must be a Layer, got {type(layer).__name__}")
            self._rules[name] = layer.copy().freeze()

    @classmethod
    def from_codes(cls, **rules: Any) -> "RuleTable":
        """Build each rule with ``Layer.from_codes``; a value may be one code or a list."""
        return cls({name: Layer.from_codes(codes) for name, codes in rules.items()})

    @classmethod
    def basic(cls) -> "RuleTable":
        """
        Rules for the plain SGR attributes and the 16 named colors.

        Colors come as ``red``/``bright_red`` (foreground) and
        ``on_red``/``on_bright_red`` (background).
        """
        return cls.from_codes(**_basic_rules())

    def lookup(self, tag: str) -> Optional[Layer]:
        return self._rules.get(tag)

    def merge(self, other: Optional[Mapping[str, Any]] = None, **rules: Any) -> "RuleTable":
        """New table with rules from ``other`` and keyword codes added or replaced."""
        merged = dict(self._rules)
        for name, value in (other or {}).items():
            merged[name] = value if isinstance(value, Layer) else Layer.from_codes(value)
        for name, codes in rules.items():
            merged[name] = Layer.from_codes(codes)
        return RuleTable(merged)

    def __getitem__(self, tag: str) -> Layer:
        return self._rules[tag]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleTable({sorted(self._rules)})"
