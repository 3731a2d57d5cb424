"""Pipeline run result carriers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TypeAlias

from twoslashmap.engine.types import EngineError, QuickInfo
from twoslashmap.text import Position

EngineInfo: TypeAlias = QuickInfo | EngineError


@dataclass(frozen=True, slots=True)
class MappedResult:
    """An engine result moved back onto the component.

    `info.line`, `info.character` and `info.start` are expressed in the
    processed document; `original` and `original_start` locate the same
    result in the untouched component. Characters and offsets are UTF-16
    code units.
    """

    info: EngineInfo
    original: Position
    original_start: int

    @property
    def processed(self) -> Position:
        return Position(self.info.line, self.info.character)

    def to_dict(self) -> dict[str, object]:
        data = self.info.to_dict()
        data["original"] = {
            "line": self.original.line,
            "character": self.original.character,
            "start": self.original_start,
        }
        return data


@dataclass(frozen=True, slots=True)
class TwoslashRunResult:
    """Result of one run over a component document."""

    code: str
    static_quick_infos: tuple[MappedResult, ...]
    errors: tuple[MappedResult, ...]
    removed_lines: tuple[int, ...] = ()
    prepended_lines: int = 0
    extras: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def to_dict(self) -> dict[str, object]:
        """JSON-ready rendering using the engine's camelCase field names."""
        return {
            **self.extras,
            "code": self.code,
            "staticQuickInfos": [info.to_dict() for info in self.static_quick_infos],
            "errors": [error.to_dict() for error in self.errors],
            "removedLines": list(self.removed_lines),
        }
