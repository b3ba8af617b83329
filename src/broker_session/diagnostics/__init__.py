"""Diagnostic output: hex dumps and delivery traces."""

from .hexdump import REPEAT_MARKER, format_row, hexdump, hexdump_lines
from .trace import render_envelope

__all__ = ["REPEAT_MARKER", "format_row", "hexdump", "hexdump_lines", "render_envelope"]
