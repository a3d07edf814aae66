"""Scanning of inline SGR parameter text."""

import logging
import re
from typing import Iterator, Union

from sgr_layers.core.constants import BG, FG, UL

logger = logging.getLogger(__name__)

# Regex for SGR sequences: ESC [ params m
SGR_PATTERN = re.compile(r'\x1b\[([0-9;]*)m')

COLOR_LEADERS = (FG, BG, UL)


def _is_param(token: str) -> bool:
    return token.isascii() and token.isdigit()


def _is_byte(token: str) -> bool:
    return _is_param(token) and int(token) <= 255


def scan_sgr(text: str) -> list[Union[int, str]]:
    """
    Split SGR parameter text into codes.

    Accepts bare parameters (``"1;31"``) or a whole sequence
    (``"\\x1b[1;31m"``). Single parameters become ints; extended colors are
    kept together as one string (``"38;5;208"``, ``"48;2;0;0;0"``).
    Tokens that aren't valid SGR parameters are dropped.

    Example:
        >>> scan_sgr("1;38;5;208;x;4")
        [1, '38;5;208', 4]
    """
    text = text.strip()
    if match := SGR_PATTERN.fullmatch(text):
        # ESC[m is a reset
        text = match.group(1) or "0"

    params = text.split(';') if text else []
    codes: list[Union[int, str]] = []

    i = 0
    while i < len(params):
        p = params[i]
        if not _is_byte(p):
            logger.debug("Dropping invalid SGR parameter %r", p)
            i += 1
            continue

        code = int(p)
        if code in COLOR_LEADERS:
            rest = params[i + 1:]
            if len(rest) >= 2 and rest[0] == '5' and _is_byte(rest[1]):
                codes.append(f"{code};5;{int(rest[1])}")
                i += 3
                continue
            if len(rest) >= 4 and rest[0] == '2' and all(_is_byte(c) for c in rest[1:4]):
                r, g, b = (int(c) for c in rest[1:4])
                codes.append(f"{code};2;{r};{g};{b}")
                i += 5
                continue
            # skip the whole malformed color, not just its leader
            width = {'5': 3, '2': 5}.get(rest[0], 1) if rest else 1
            logger.debug("Dropping malformed color parameter %r", ';'.join(params[i:i + width]))
            i += width
            continue

        codes.append(code)
        i += 1

    return codes


def iter_sgr_segments(text: str) -> Iterator[tuple[str, str]]:
    """
    Split text around embedded SGR sequences.

    Yields ``("text", chunk)`` for literal text and ``("sgr", params)`` for
    each ``ESC[...m`` sequence, in order. Empty text chunks are skipped.
    """
    pos = 0
    for match in SGR_PATTERN.finditer(text):
        if match.start() > pos:
            yield "text", text[pos:match.start()]
        yield "sgr", match.group(1) or "0"
        pos = match.end()
    if pos < len(text):
        yield "text", text[pos:]
