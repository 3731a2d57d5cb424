"""Base64 VLQ codec for the `mappings` field of v3 source maps."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from twoslashmap.errors import SourceMapError

_BASE64_ALPHABET: Final[str] = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_BASE64_VALUES: Final[dict[str, int]] = {ch: i for i, ch in enumerate(_BASE64_ALPHABET)}

_VLQ_SHIFT: Final[int] = 5
_VLQ_CONTINUATION_BIT: Final[int] = 1 << _VLQ_SHIFT
_VLQ_VALUE_MASK: Final[int] = _VLQ_CONTINUATION_BIT - 1


@dataclass(frozen=True, slots=True, order=True)
class MappingSegment:
    """One decoded mapping, all fields absolute and 0-based.

    `source` is None for segments that only mark a generated column.
    """

    generated_column: int
    source: int | None = None
    original_line: int | None = None
    original_column: int | None = None
    name: int | None = None


def decode_vlq(text: str, pos: int = 0) -> tuple[int, int]:
    """Decode one VLQ value starting at `pos`; returns (value, next_pos)."""
    result = 0
    shift = 0
    while True:
        if pos >= len(text):
            raise SourceMapError("Unexpected end of VLQ data")
        digit = _BASE64_VALUES.get(text[pos])
        if digit is None:
            raise SourceMapError(f"Invalid base64 character {text[pos]!r} at index {pos}")
        pos += 1
        result += (digit & _VLQ_VALUE_MASK) << shift
        if not digit & _VLQ_CONTINUATION_BIT:
            break
        shift += _VLQ_SHIFT
    negative = result & 1
    result >>= 1
    return (-result if negative else result), pos


def encode_vlq(value: int) -> str:
    vlq = ((-value) << 1) + 1 if value < 0 else value << 1
    out: list[str] = []
    while True:
        digit = vlq & _VLQ_VALUE_MASK
        vlq >>= _VLQ_SHIFT
        if vlq:
            digit |= _VLQ_CONTINUATION_BIT
        out.append(_BASE64_ALPHABET[digit])
        if not vlq:
            return "".join(out)


def decode_mappings(mappings: str) -> list[list[MappingSegment]]:
    """Decode a `mappings` string into segments grouped by generated line.

    Segments inside each line are sorted by generated column.
    """
    lines: list[list[MappingSegment]] = []
    # Source/original fields are relative across the whole string,
    # generated column is relative within a line.
    source = 0
    original_line = 0
    original_column = 0
    name = 0
    for raw_line in mappings.split(";"):
        generated_column = 0
        segments: list[MappingSegment] = []
        for raw_segment in raw_line.split(","):
            if not raw_segment:
                continue
            fields = _decode_segment_fields(raw_segment)
            generated_column += fields[0]
            if generated_column < 0:
                raise SourceMapError(f"Negative generated column in segment {raw_segment!r}")
            if len(fields) == 1:
                segments.append(MappingSegment(generated_column))
                continue
            if len(fields) not in (4, 5):
                raise SourceMapError(f"Segment {raw_segment!r} has {len(fields)} fields")
            source += fields[1]
            original_line += fields[2]
            original_column += fields[3]
            segment_name: int | None = None
            if len(fields) == 5:
                name += fields[4]
                segment_name = name
            segments.append(
                MappingSegment(
                    generated_column=generated_column,
                    source=source,
                    original_line=original_line,
                    original_column=original_column,
                    name=segment_name,
                )
            )
        segments.sort(key=lambda segment: segment.generated_column)
        lines.append(segments)
    return lines


def encode_mappings(lines: Sequence[Sequence[MappingSegment]]) -> str:
    """Inverse of `decode_mappings`."""
    source = 0
    original_line = 0
    original_column = 0
    name = 0
    encoded_lines: list[str] = []
    for segments in lines:
        generated_column = 0
        encoded_segments: list[str] = []
        for segment in segments:
            parts = [encode_vlq(segment.generated_column - generated_column)]
            generated_column = segment.generated_column
            if segment.source is not None:
                if segment.original_line is None or segment.original_column is None:
                    raise SourceMapError("Segment with a source needs an original line and column")
                parts.append(encode_vlq(segment.source - source))
                parts.append(encode_vlq(segment.original_line - original_line))
                parts.append(encode_vlq(segment.original_column - original_column))
                source = segment.source
                original_line = segment.original_line
                original_column = segment.original_column
                if segment.name is not None:
                    parts.append(encode_vlq(segment.name - name))
                    name = segment.name
            encoded_segments.append("".join(parts))
        encoded_lines.append(",".join(encoded_segments))
    return ";".join(encoded_lines)


def _decode_segment_fields(raw_segment: str) -> list[int]:
    fields: list[int] = []
    pos = 0
    while pos < len(raw_segment):
        value, pos = decode_vlq(raw_segment, pos)
        fields.append(value)
    return fields
