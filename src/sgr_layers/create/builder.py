"""Builder API for rendering nested styled text."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional

from sgr_layers.codec.sgr_parser import iter_sgr_segments
from sgr_layers.core.palette import Palette
from sgr_layers.render.emitter import Emitter


class StyleBuilder:
    """
    Explicit API for building styled output from tags.

    Example:
        >>> out = StyleBuilder(RuleTable.basic())
        >>> with out.style("bold"):
        ...     out.text("Hello, ")
        ...     with out.style("red"):
        ...         out.text("World!")
        >>> out.render()
        '\\x1b[1mHello, \\x1b[31mWorld!\\x1b[0m'
    """

    def __init__(
        self,
        rules: Any = None,
        palette: Optional[Palette] = None,
        enabled: bool = True,
    ):
        self.emitter = Emitter(rules, palette=palette, enabled=enabled)

    def open(self, tag: Any) -> "StyleBuilder":
        """Open a styled region for a rule name, or for a Color or Layer directly."""
        self.emitter.open_tag(tag)
        return self

    def close(self) -> "StyleBuilder":
        """Close the innermost styled region."""
        self.emitter.close_tag()
        return self

    def raw(self, sgr: str) -> "StyleBuilder":
        """Apply raw SGR parameters until ``end_raw``."""
        self.emitter.push_raw(sgr)
        return self

    def end_raw(self) -> "StyleBuilder":
        self.emitter.pop_raw()
        return self

    def text(self, *parts: Any) -> "StyleBuilder":
        """
        Write text in the current style.

        SGR sequences embedded in the text apply until the end of that part,
        after which the surrounding style is restored.
        """
        for part in parts:
            raw_pushed = False
            for kind, value in iter_sgr_segments(str(part)):
                if kind == "sgr":
                    self.emitter.push_raw(value)
                    raw_pushed = True
                else:
                    self.emitter.append(value)
            if raw_pushed:
                self.emitter.pop_raw()
        return self

    def _unwind(self, depth: int) -> None:
        """Close tags and raw pushes until only ``depth`` markers remain."""
        emitter = self.emitter
        while emitter.depth > depth and not emitter.finalized:
            if emitter.in_raw:
                emitter.pop_raw()
            else:
                emitter.close_tag()

    @contextmanager
    def style(self, tag: Any) -> Iterator["StyleBuilder"]:
        """
        Context manager keeping ``tag`` open for the block.

        If the block raises, everything it left open is closed along with
        ``tag`` and the exception propagates unchanged.
        """
        self.open(tag)
        depth = self.emitter.depth
        try:
            yield self
        except BaseException:
            self._unwind(depth - 1)
            raise
        self.close()

    def render(self) -> str:
        """Finish and return the output string."""
        return self.emitter.finalize()

    def __str__(self) -> str:
        return self.render()


def _render_node(builder: StyleBuilder, node: Any) -> None:
    if isinstance(node, tuple):
        if not node:
            return
        tag, *children = node
        with builder.style(tag):
            for child in children:
                _render_node(builder, child)
    elif isinstance(node, list):
        for child in node:
            _render_node(builder, child)
    elif node is not None:
        builder.text(node)


def render_markup(rules: Any, *nodes: Any, palette: Optional[Palette] = None, enabled: bool = True) -> str:
    """
    Render nested ``(tag, child, ...)`` tuples to a styled string.

    Strings are text, tuples are tagged regions and lists group siblings.
    A tuple may start with a Color instead of a tag name to color its
    children directly.

    Example:
        >>> render_markup(rules, "plain ", ("bold", "loud ", ("red", "alarm")))
    """
    builder = StyleBuilder(rules, palette=palette, enabled=enabled)
    for node in nodes:
        _render_node(builder, node)
    return builder.render()
