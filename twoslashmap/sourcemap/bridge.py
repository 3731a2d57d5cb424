"""Zero-based position mapping on top of a source map consumer."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TypeAlias

from twoslashmap.sourcemap.consumer import SourceMapConsumer
from twoslashmap.text import Position

SourceMapper: TypeAlias = Callable[[Position], Position | None]


class SourceMapBridge:
    """Maps 0-based generated positions back to 0-based original positions."""

    __slots__ = ("_consumer",)

    def __init__(self, consumer: SourceMapConsumer) -> None:
        self._consumer = consumer

    @classmethod
    def from_raw(cls, raw: Mapping[str, object]) -> SourceMapBridge:
        return cls(SourceMapConsumer(raw))

    def map_to_original_position(self, position: Position) -> Position | None:
        """None when the generated position has no original counterpart."""
        if position.line < 0 or position.character < 0:
            return None
        original = self._consumer.original_position_for(position.line + 1, position.character)
        if original is None:
            return None
        return Position(original.line - 1, original.column)


def create_source_mapper(raw: Mapping[str, object]) -> SourceMapper:
    """Build the generated -> original mapping function for a raw v3 map.

    The map's `version` is coerced to a string first, since producers emit it
    either as a number or as a string.
    """
    normalized = {**raw, "version": str(raw.get("version", ""))}
    return SourceMapBridge.from_raw(normalized).map_to_original_position
