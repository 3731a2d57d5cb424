"""Contracts of the rewriter and analysis engine collaborators."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Protocol, TypeAlias

from twoslashmap.errors import FixtureError


class RewriteMode(StrEnum):
    """Output flavour requested from the component rewriter."""

    TS = "ts"
    DTS = "dts"


@dataclass(frozen=True, slots=True)
class RewriteResult:
    """Checkable code plus a raw v3 source map back to the component."""

    code: str
    map: Mapping[str, object]


class Rewriter(Protocol):
    def rewrite(self, text: str, *, mode: RewriteMode, is_ts_file: bool) -> RewriteResult: ...


class EngineDiagnostic(Protocol):
    """Anything the language service reports with an optional start offset."""

    @property
    def start(self) -> int | None: ...


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Plain language-service diagnostic."""

    code: int
    message: str
    start: int | None = None
    length: int | None = None
    category: int = 1


class LanguageService(Protocol):
    """The part of a language service this package relies on."""

    def get_semantic_diagnostics(self, filename: str) -> Sequence[EngineDiagnostic]: ...

    def get_source_text(self, filename: str) -> str | None:
        """The checker's own (possibly normalized) text of `filename`."""
        ...


ServiceFactory: TypeAlias = Callable[..., LanguageService]


@dataclass(frozen=True, slots=True)
class AnalyzeOptions:
    default_compiler_options: Mapping[str, object] = field(
        default_factory=lambda: MappingProxyType({})
    )
    service_factory: ServiceFactory | None = None


@dataclass(frozen=True, slots=True)
class QuickInfo:
    """Hover information the engine attached to an identifier."""

    line: int
    character: int
    start: int
    length: int
    target_string: str
    text: str
    docs: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> QuickInfo:
        return cls(
            line=_require_int(data, "line"),
            character=_require_int(data, "character"),
            start=_require_int(data, "start"),
            length=_require_int(data, "length"),
            target_string=_require_str(data, "targetString"),
            text=_require_str(data, "text"),
            docs=_optional_str(data, "docs"),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "line": self.line,
            "character": self.character,
            "start": self.start,
            "length": self.length,
            "targetString": self.target_string,
            "text": self.text,
            "docs": self.docs,
        }


@dataclass(frozen=True, slots=True)
class EngineError:
    """Type error the engine reported, positioned in the engine's code."""

    line: int
    character: int
    start: int
    length: int
    code: int
    category: int
    rendered_message: str
    id: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EngineError:
        return cls(
            line=_require_int(data, "line"),
            character=_require_int(data, "character"),
            start=_require_int(data, "start"),
            length=_require_int(data, "length"),
            code=_require_int(data, "code"),
            category=_require_int(data, "category"),
            rendered_message=_require_str(data, "renderedMessage"),
            id=_optional_str(data, "id") or "",
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "line": self.line,
            "character": self.character,
            "start": self.start,
            "length": self.length,
            "code": self.code,
            "category": self.category,
            "renderedMessage": self.rendered_message,
            "id": self.id,
        }


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """What the analysis engine returned for one piece of code.

    `extras` carries every field this package does not interpret.
    """

    code: str
    static_quick_infos: tuple[QuickInfo, ...] = ()
    errors: tuple[EngineError, ...] = ()
    extras: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}))


class Analyzer(Protocol):
    @property
    def service_factory(self) -> ServiceFactory:
        """Factory the engine uses when no override is supplied."""
        ...

    def analyze(self, code: str, language: str, options: AnalyzeOptions) -> AnalysisResult: ...


def _require_int(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if not isinstance(value, int) or isinstance(value, bool):
        raise FixtureError(f"Expected integer field `{key}`, got {value!r}")
    return value


def _require_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise FixtureError(f"Expected string field `{key}`, got {value!r}")
    return value


def _optional_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise FixtureError(f"Expected string or null field `{key}`, got {value!r}")
    return value
