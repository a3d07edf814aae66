"""
sgr-layers: minimal ANSI SGR output for nested styles

Render styled text to terminals with the fewest SGR codes needed to move
from one style to the next, across any depth of nested style regions.

Quick Start:
    >>> import sgr_layers as sgr
    >>> rules = sgr.RuleTable.basic().merge(warn=[1, 33])
    >>> print(sgr.render_markup(rules, ("bold", "Hello ", ("red", "World"))))

Features:
    - Layer stack diffing with correct bold/dim (SGR 22) ordering
    - Colors as basic codes, 256-palette indices, RGB or OKLCH
    - Perceptual (OKLab) nearest-color fallback for 16 and 256 color terminals
    - Relative-chroma OKLCH shifts clamped to the sRGB gamut
    - Injectable palettes for deterministic rendering
    - Inline raw SGR pass-through isolated from tagged regions
"""

__version__ = "0.1.0"

# Core types
from sgr_layers.core.color import Color, Role
from sgr_layers.core.palette import ColorMode, Palette
from sgr_layers.core.errors import (
    FrozenLayerError,
    InvalidColor,
    ProtocolError,
    RoleMismatch,
    SgrLayersError,
)

# Rendering
from sgr_layers.render.layer import BASE, RANGES, Layer, LayerView
from sgr_layers.render.layer_stack import LayerStack
from sgr_layers.render.emitter import Emitter

# Creation
from sgr_layers.create.rules import RuleTable
from sgr_layers.create.builder import StyleBuilder, render_markup


def style(rules: RuleTable, palette: Palette | None = None) -> StyleBuilder:
    """Start building styled output with the given rules."""
    return StyleBuilder(rules, palette=palette)


__all__ = [
    # Version
    "__version__",
    # Core types
    "Color",
    "Role",
    "ColorMode",
    "Palette",
    # Errors
    "SgrLayersError",
    "InvalidColor",
    "RoleMismatch",
    "ProtocolError",
    "FrozenLayerError",
    # Rendering
    "BASE",
    "RANGES",
    "Layer",
    "LayerView",
    "LayerStack",
    "Emitter",
    # Creation
    "style",
    "RuleTable",
    "StyleBuilder",
    "render_markup",
]
