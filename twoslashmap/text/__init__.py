"""Text snapshots and line / character positions."""

from twoslashmap.text.text import (
    LineIndex,
    LineOffsets,
    Position,
    build_line_offsets,
    offset_at,
    position_at,
    string_index,
    utf16_length,
)

__all__ = [
    "LineIndex",
    "LineOffsets",
    "Position",
    "build_line_offsets",
    "offset_at",
    "position_at",
    "string_index",
    "utf16_length",
]
