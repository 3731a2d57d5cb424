"""Read-only view over a raw v3 source map."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from twoslashmap.errors import SourceMapError
from twoslashmap.sourcemap.codec import MappingSegment, decode_mappings

SUPPORTED_VERSION = "3"


@dataclass(frozen=True, slots=True)
class OriginalPosition:
    """Original-side location of a mapping. `line` is 1-based, `column` 0-based."""

    source: str | None
    line: int
    column: int
    name: str | None = None


class SourceMapConsumer:
    """Generated -> original lookups over one decoded source map.

    Lookups use greatest-lower-bound bias on the requested generated line:
    the closest segment at or before the column wins, and a lookup never
    falls back to an earlier line.
    """

    __slots__ = ("file", "names", "sources", "_columns", "_lines")

    def __init__(self, raw: Mapping[str, object]) -> None:
        if "sections" in raw:
            raise SourceMapError("Indexed source maps with `sections` are not supported")
        version = str(raw.get("version", ""))
        if version != SUPPORTED_VERSION:
            raise SourceMapError(f"Unsupported source map version: {version!r}")
        mappings = raw.get("mappings")
        if not isinstance(mappings, str):
            raise SourceMapError("Source map `mappings` must be a string")

        source_root = raw.get("sourceRoot") or ""
        if not isinstance(source_root, str):
            raise SourceMapError("Source map `sourceRoot` must be a string")
        self.sources: tuple[str | None, ...] = tuple(
            None if source is None else f"{source_root.rstrip('/')}/{source}" if source_root else source
            for source in _string_list(raw, "sources")
        )
        self.names: tuple[str | None, ...] = tuple(_string_list(raw, "names"))
        file = raw.get("file")
        self.file: str | None = file if isinstance(file, str) else None

        self._lines: list[list[MappingSegment]] = decode_mappings(mappings)
        self._columns: list[list[int]] = [
            [segment.generated_column for segment in segments] for segments in self._lines
        ]

    @property
    def line_count(self) -> int:
        """Number of generated lines covered by `mappings`."""
        return len(self._lines)

    def original_position_for(self, line: int, column: int) -> OriginalPosition | None:
        """Look up a generated position (1-based line, 0-based column)."""
        if line < 1 or column < 0 or line > len(self._lines):
            return None
        segments = self._lines[line - 1]
        index = bisect_right(self._columns[line - 1], column) - 1
        if index < 0:
            return None
        segment = segments[index]
        if segment.source is None or segment.original_line is None or segment.original_column is None:
            return None
        return OriginalPosition(
            source=_lookup(self.sources, segment.source),
            line=segment.original_line + 1,
            column=segment.original_column,
            name=None if segment.name is None else _lookup(self.names, segment.name),
        )


def _string_list(raw: Mapping[str, object], key: str) -> list[str | None]:
    value = raw.get(key, [])
    if not isinstance(value, Sequence) or isinstance(value, str):
        raise SourceMapError(f"Source map `{key}` must be a list")
    items: list[str | None] = []
    for item in value:
        if item is not None and not isinstance(item, str):
            raise SourceMapError(f"Source map `{key}` entries must be strings")
        items.append(item)
    return items


def _lookup(table: tuple[str | None, ...], index: int) -> str | None:
    if 0 <= index < len(table):
        return table[index]
    return None
