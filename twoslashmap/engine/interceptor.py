"""Language-service decoration that hides diagnostics in synthesized code."""

from __future__ import annotations

import logging
from typing import Any

from twoslashmap.align import AlignmentMap, align
from twoslashmap.engine.types import EngineDiagnostic, LanguageService, ServiceFactory
from twoslashmap.sourcemap import SourceMapper
from twoslashmap.text import LineIndex

logger = logging.getLogger(__name__)


class FilteringLanguageService:
    """Wraps a language service and filters its semantic diagnostics.

    Diagnostic offsets are UTF-16 units into the checker's own view of the
    file, which is aligned back onto `generated` before source mapping.

    A diagnostic survives only when its start maps back, through the
    checker's line drops and the source map, to a real line of the original
    component. The wrapped service is never modified; every other attribute
    is read from it directly.
    """

    __slots__ = ("_service", "_generated", "_map_to_original", "_prepend_lines")

    def __init__(
        self,
        service: LanguageService,
        generated: str,
        map_to_original: SourceMapper,
        prepend_lines: int = 0,
    ) -> None:
        self._service = service
        self._generated = generated
        self._map_to_original = map_to_original
        self._prepend_lines = prepend_lines

    @property
    def wrapped(self) -> LanguageService:
        return self._service

    def get_semantic_diagnostics(self, filename: str) -> list[EngineDiagnostic]:
        diagnostics = list(self._service.get_semantic_diagnostics(filename))
        checker_text = self._service.get_source_text(filename)
        if checker_text is None:
            return diagnostics

        alignment = align(self._generated, checker_text)
        checker_index = LineIndex.of(checker_text)
        kept = [
            diagnostic
            for diagnostic in diagnostics
            if self._maps_to_original(diagnostic, checker_index, alignment)
        ]
        if len(kept) != len(diagnostics):
            logger.debug(
                "Dropped %d of %d diagnostics in synthesized code of %s",
                len(diagnostics) - len(kept),
                len(diagnostics),
                filename,
            )
        return kept

    def get_source_text(self, filename: str) -> str | None:
        return self._service.get_source_text(filename)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._service, name)

    def _maps_to_original(
        self,
        diagnostic: EngineDiagnostic,
        checker_index: LineIndex,
        alignment: AlignmentMap,
    ) -> bool:
        if diagnostic.start is None:
            return True
        position = alignment.map_to_original(checker_index.position_at(diagnostic.start))
        if position is None:
            return False
        original = self._map_to_original(position.shift_lines(-self._prepend_lines))
        return original is not None and original.line > 0 and original.character >= 0


def wrap_service_factory(
    factory: ServiceFactory,
    generated: str,
    map_to_original: SourceMapper,
    prepend_lines: int = 0,
) -> ServiceFactory:
    """Factory producing a fresh `FilteringLanguageService` per service.

    `generated` is the code handed to the engine; its first `prepend_lines`
    lines have no counterpart in the rewriter output.
    """

    def create_service(*args: Any, **kwargs: Any) -> LanguageService:
        return FilteringLanguageService(
            factory(*args, **kwargs),
            generated,
            map_to_original,
            prepend_lines,
        )

    return create_service
