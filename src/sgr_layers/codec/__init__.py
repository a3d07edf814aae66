"""Parsing of inline SGR text."""

from sgr_layers.codec.sgr_parser import iter_sgr_segments, scan_sgr

__all__ = ["scan_sgr", "iter_sgr_segments"]
