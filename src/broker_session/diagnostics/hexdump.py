"""Hex dump formatter for message bodies.

Sixteen bytes per row: the offset, the octets in hex split in two groups of
eight, then the printable characters. A full row equal to the row before it is
replaced by a single marker line, shared by a whole run of repeats; the last
row is always printed. When the last row holds data, a closing line gives the
total length.
"""

from typing import List, Optional, Union

ROW_WIDTH = 16
REPEAT_MARKER = "          .. .. .. .. .. .. .. .. : .. .. .. .. .. .. .. .."

Buffer = Union[bytes, bytearray, memoryview]


def _printable(octet: int) -> str:
    return chr(octet) if 0x20 <= octet < 0x7F else "."


def format_row(offset: int, row: bytes) -> str:
    line = f"{offset:08X}:"
    if not row:
        return line

    cells = []
    for index in range(ROW_WIDTH):
        separator = " :" if index == ROW_WIDTH // 2 else ""
        cell = f" {row[index]:02X}" if index < len(row) else "   "
        cells.append(separator + cell)
    return line + "".join(cells) + "  " + "".join(_printable(octet) for octet in row)


def hexdump_lines(data: Buffer, length: Optional[int] = None) -> List[str]:
    if length is not None and length < 0:
        raise ValueError(f"length must not be negative, got {length}")
    buffer = bytes(data) if length is None else bytes(data)[:length]
    rows = [buffer[start:start + ROW_WIDTH] for start in range(0, len(buffer), ROW_WIDTH)]
    if not rows:
        return [format_row(0, b"")]

    lines: List[str] = []
    previous: Optional[bytes] = None
    marker_shown = False
    for index, row in enumerate(rows[:-1]):
        if row == previous:
            if not marker_shown:
                lines.append(REPEAT_MARKER)
                marker_shown = True
        else:
            marker_shown = False
            lines.append(format_row(index * ROW_WIDTH, row))
        previous = row

    lines.append(format_row((len(rows) - 1) * ROW_WIDTH, rows[-1]))
    lines.append(f"{len(buffer):08X}:")
    return lines


def hexdump(data: Buffer, length: Optional[int] = None) -> str:
    """Render ``data`` (or its first ``length`` bytes) as a multi-line dump."""
    return "\n".join(hexdump_lines(data, length)) + "\n"
