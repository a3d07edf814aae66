"""Emitter - turns tag and raw SGR nesting into minimal escape output."""

import logging
from typing import Any, Optional

from sgr_layers.codec.sgr_parser import scan_sgr
from sgr_layers.core.color import Color
from sgr_layers.core.constants import CSI, RESET
from sgr_layers.core.errors import ProtocolError
from sgr_layers.core.palette import DEFAULT_PALETTE, Palette
from sgr_layers.render.layer import BASE, Code, Layer, prepare_sgr
from sgr_layers.render.layer_stack import LayerStack

logger = logging.getLogger(__name__)

TAG = "tag"
RAW = "raw"


class Emitter:
    """
    Render a sequence of open/close/text operations to an SGR string.

    Style changes are queued and only written, as one combined SGR
    sequence, right before the next text, so nested scopes that open and
    close without text in between cost nothing. A single reset is appended
    at the end if any styling was written.

    Tags resolve through ``rules`` (anything with ``lookup(tag)`` or
    ``get(tag)``); unknown tags style nothing. Raw pushes must be popped
    before the enclosing tag closes and can't have tags opened inside them.

    Example:
        >>> out = (Emitter(rules)
        ...     .open_tag("warn")
        ...     .append("careful")
        ...     .close_tag()
        ...     .finalize())
    """

    def __init__(
        self,
        rules: Any = None,
        palette: Optional[Palette] = None,
        enabled: bool = True,
    ):
        self.rules = rules
        self.palette = palette or DEFAULT_PALETTE
        self.enabled = enabled

        self._stack = LayerStack()
        self._markers: list[tuple[str, Any]] = []
        self._queue: list[Code] = []
        self._flushed: Layer = BASE
        self._parts: list[str] = []
        self._styled = False
        self._result: Optional[str] = None

    @property
    def depth(self) -> int:
        """Number of open tags and raw pushes."""
        return len(self._markers)

    @property
    def finalized(self) -> bool:
        return self._result is not None

    @property
    def in_raw(self) -> bool:
        """True while the innermost open marker is a raw SGR push."""
        return bool(self._markers) and self._markers[-1][0] == RAW

    def _check_open(self) -> None:
        if self._result is not None:
            raise ProtocolError("Emitter is already finalized")

    def _lookup(self, tag: Any) -> Optional[Layer]:
        if isinstance(tag, (Color, Layer)):
            return Layer.from_codes(tag)
        if self.rules is None:
            layer = None
        elif hasattr(self.rules, "lookup"):
            layer = self.rules.lookup(tag)
        else:
            layer = self.rules.get(tag)

        if layer is None:
            logger.debug("No style rule for tag %r", tag)
            return None
        if not isinstance(layer, Layer):
            layer = Layer.from_codes(layer)
        return layer

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def open_tag(self, tag: Any) -> "Emitter":
        """
        Open a styled region for ``tag``.

        ``tag`` is a rule name, or a Color or Layer applied directly.
        """
        self._check_open()
        if tag is None:
            raise ValueError("Tag name is required")
        if self.in_raw:
            raise ProtocolError(f"Cannot open tag {tag!r} inside a raw SGR push")

        self._markers.append((TAG, tag))
        self._queue.extend(self._stack.diffpush(self._lookup(tag), tag=tag))
        return self

    def close_tag(self) -> "Emitter":
        """Close the innermost tag."""
        self._check_open()
        if not self._markers:
            raise ProtocolError("close_tag without an open tag")
        if self.in_raw:
            raise ProtocolError("Cannot close a tag while a raw SGR push is open")

        self._markers.pop()
        self._queue.extend(self._stack.diffpop())
        return self

    def push_raw(self, text: str) -> "Emitter":
        """Apply inline SGR parameters (``"1;31"`` or ``"\\x1b[1;31m"``)."""
        self._check_open()
        layer = Layer.from_codes(scan_sgr(text))
        self._markers.append((RAW, None))
        self._queue.extend(self._stack.diffpush(layer))
        return self

    def pop_raw(self) -> "Emitter":
        """Undo every raw push since the innermost tag."""
        self._check_open()
        if not self._markers:
            raise ProtocolError("pop_raw without a raw SGR push")
        if self._markers[-1][0] == TAG:
            raise ProtocolError(
                f"Cannot pop raw SGR codes past open tag {self._markers[-1][1]!r}"
            )

        while self._markers and self._markers[-1][0] == RAW:
            self._markers.pop()
        self._queue.extend(self._stack.diffpop_until_tag())
        return self

    def append(self, text: str) -> "Emitter":
        """Write text in the current style."""
        self._check_open()
        if text:
            self._flush()
            self._parts.append(str(text))
        return self

    def _flush(self) -> None:
        if not self._queue:
            return
        pending = Layer.from_codes(self._queue)
        self._queue.clear()

        target = self._flushed.overlay(pending)
        codes = target.diff(self._flushed)
        self._flushed = target

        if codes and self.enabled:
            params = prepare_sgr(codes, self.palette.color_mode, self.palette)
            self._parts.append(f"{CSI}{';'.join(params)}m")
            self._styled = True

    def finalize(self) -> str:
        """Finish the render; later calls return the same string."""
        if self._result is None:
            if self._styled:
                self._parts.append(RESET)
            self._result = "".join(self._parts)
            logger.debug("Rendered %d parts", len(self._parts))
        return self._result

    def __str__(self) -> str:
        return self.finalize()
