"""Layer diffing and SGR output."""

from sgr_layers.render.layer import BASE, RANGES, Layer, LayerRange, LayerView, prepare_sgr
from sgr_layers.render.layer_stack import LayerStack
from sgr_layers.render.emitter import Emitter

__all__ = [
    "BASE",
    "RANGES",
    "Layer",
    "LayerRange",
    "LayerView",
    "LayerStack",
    "Emitter",
    "prepare_sgr",
]
