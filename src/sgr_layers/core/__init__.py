"""Core color model: color math, palettes and the Color type."""

from sgr_layers.core.color import Color, Role
from sgr_layers.core.errors import (
    FrozenLayerError,
    InvalidColor,
    ProtocolError,
    RoleMismatch,
    SgrLayersError,
)
from sgr_layers.core.palette import ColorMode, Palette

__all__ = [
    "Color",
    "Role",
    "ColorMode",
    "Palette",
    "SgrLayersError",
    "InvalidColor",
    "RoleMismatch",
    "ProtocolError",
    "FrozenLayerError",
]
