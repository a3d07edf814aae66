"""Tools for authoring styles and rendering styled text."""

from sgr_layers.create.builder import StyleBuilder, render_markup
from sgr_layers.create.rules import RuleTable

__all__ = ["RuleTable", "StyleBuilder", "render_markup"]
