"""Collaborators that serve rewriter / engine output captured earlier.

A fixture is one JSON object::

    {
      "source": "<component text>",
      "rewrite": {"code": "...", "map": {"version": 3, "mappings": "..."}},
      "analysis": {"code": "...", "staticQuickInfos": [...], "errors": [...]}
    }

Analysis keys other than `code`, `staticQuickInfos` and `errors` are kept
as `extras`. Recorded `line`, `character` and `start` values are UTF-16 code
units, the same unit `twoslashmap.text` counts in.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from twoslashmap.engine.types import (
    AnalysisResult,
    AnalyzeOptions,
    Diagnostic,
    EngineError,
    QuickInfo,
    RewriteMode,
    RewriteResult,
    ServiceFactory,
)
from twoslashmap.errors import FixtureError

REPLAY_FILENAME = "input.tsx"

_ANALYSIS_KEYS = frozenset({"code", "staticQuickInfos", "errors"})


@dataclass(frozen=True, slots=True)
class RecordedLanguageService:
    """Language service answering from a recorded engine run."""

    text: str
    diagnostics: tuple[Diagnostic, ...]

    def get_semantic_diagnostics(self, filename: str) -> list[Diagnostic]:
        return list(self.diagnostics)

    def get_source_text(self, filename: str) -> str | None:
        return self.text


@dataclass(frozen=True, slots=True)
class ReplayRewriter:
    source: str
    result: RewriteResult

    def rewrite(self, text: str, *, mode: RewriteMode, is_ts_file: bool) -> RewriteResult:
        if text != self.source:
            raise FixtureError("Replay rewriter was given a different source than it recorded")
        return self.result


@dataclass(frozen=True, slots=True)
class ReplayAnalyzer:
    """Replays a recorded analysis.

    Recorded errors are turned back into language-service diagnostics and
    pushed through whichever service factory the caller supplies; an error
    is replayed only if its diagnostic survives that service.
    """

    result: AnalysisResult

    @property
    def service_factory(self) -> ServiceFactory:
        return self._create_service

    def analyze(self, code: str, language: str, options: AnalyzeOptions) -> AnalysisResult:
        factory = options.service_factory or self.service_factory
        service = factory()
        surviving = {
            (diagnostic.start, getattr(diagnostic, "code", None))
            for diagnostic in service.get_semantic_diagnostics(REPLAY_FILENAME)
        }
        errors = tuple(error for error in self.result.errors if (error.start, error.code) in surviving)
        return replace(self.result, errors=errors)

    def _create_service(self, *args: Any, **kwargs: Any) -> RecordedLanguageService:
        return RecordedLanguageService(
            text=self.result.code,
            diagnostics=tuple(
                Diagnostic(
                    code=error.code,
                    message=error.rendered_message,
                    start=error.start,
                    length=error.length,
                    category=error.category,
                )
                for error in self.result.errors
            ),
        )


@dataclass(frozen=True, slots=True)
class Fixture:
    source: str
    rewriter: ReplayRewriter
    analyzer: ReplayAnalyzer


def load_fixture(data: Mapping[str, Any]) -> Fixture:
    """Build replay collaborators from a decoded fixture object."""
    source = data.get("source")
    if not isinstance(source, str):
        raise FixtureError("Fixture needs a string `source`")
    rewrite = _require_mapping(data, "rewrite")
    code = rewrite.get("code")
    if not isinstance(code, str):
        raise FixtureError("Fixture `rewrite.code` must be a string")
    raw_map = _require_mapping(rewrite, "map")
    analysis = _require_mapping(data, "analysis")
    return Fixture(
        source=source,
        rewriter=ReplayRewriter(source=source, result=RewriteResult(code=code, map=dict(raw_map))),
        analyzer=ReplayAnalyzer(result=analysis_from_dict(analysis)),
    )


def read_fixture(path: str | Path) -> Fixture:
    p = Path(path).expanduser()
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise FixtureError(f"{p}: invalid JSON: {exc}") from exc
    if not isinstance(data, Mapping):
        raise FixtureError(f"{p}: fixture must be a JSON object")
    return load_fixture(data)


def analysis_from_dict(data: Mapping[str, Any]) -> AnalysisResult:
    code = data.get("code")
    if not isinstance(code, str):
        raise FixtureError("Analysis `code` must be a string")
    return AnalysisResult(
        code=code,
        static_quick_infos=tuple(
            QuickInfo.from_dict(item) for item in _require_list(data, "staticQuickInfos")
        ),
        errors=tuple(EngineError.from_dict(item) for item in _require_list(data, "errors")),
        extras={key: value for key, value in data.items() if key not in _ANALYSIS_KEYS},
    )


def _require_mapping(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    if not isinstance(value, Mapping):
        raise FixtureError(f"Fixture `{key}` must be an object")
    return value


def _require_list(data: Mapping[str, Any], key: str) -> Sequence[Mapping[str, Any]]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, Mapping) for item in value):
        raise FixtureError(f"Analysis `{key}` must be a list of objects")
    return value
