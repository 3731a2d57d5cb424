"""Entrypoints that run a component through rewrite + analysis and remap results."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path

from twoslashmap.align import AlignmentMap, align, split_lines
from twoslashmap.engine import (
    AnalyzeOptions,
    Analyzer,
    Rewriter,
    wrap_service_factory,
)
from twoslashmap.engine.replay import read_fixture
from twoslashmap.pipeline.options import TwoslashOptions
from twoslashmap.pipeline.results import EngineInfo, MappedResult, TwoslashRunResult
from twoslashmap.sourcemap import SourceMapper, create_source_mapper
from twoslashmap.text import LineIndex, Position

logger = logging.getLogger(__name__)


def run_twoslash(
    source: str,
    *,
    rewriter: Rewriter,
    analyzer: Analyzer,
    options: TwoslashOptions | None = None,
) -> TwoslashRunResult:
    """Analyze one component and report results at component coordinates.

    Rewriter and analyzer failures propagate unchanged. Individual results
    that cannot be mapped back onto the component are dropped.
    """
    resolved_options = options if options is not None else TwoslashOptions()
    rewritten = rewriter.rewrite(
        source,
        mode=resolved_options.rewrite_mode,
        is_ts_file=resolved_options.is_ts_file,
    )

    generated = resolved_options.reference_header() + rewritten.code
    prepend_lines = len(resolved_options.reference_paths)

    map_to_original = create_source_mapper(rewritten.map)
    analysis = analyzer.analyze(
        generated,
        resolved_options.language,
        AnalyzeOptions(
            default_compiler_options=resolved_options.default_compiler_options,
            service_factory=wrap_service_factory(
                analyzer.service_factory,
                generated,
                map_to_original,
                prepend_lines,
            ),
        ),
    )

    engine_alignment = align(generated, analysis.code)
    removed_lines = _removed_source_lines(engine_alignment, prepend_lines, map_to_original)
    processed = remove_lines(source, removed_lines)
    if removed_lines:
        logger.debug("Stripped component lines %s from processed output", list(removed_lines))

    remapper = _ResultRemapper(
        source=LineIndex.of(source),
        processed=LineIndex.of(processed),
        engine_alignment=engine_alignment,
        source_alignment=align(source, processed),
        prepend_lines=prepend_lines,
        map_to_original=map_to_original,
    )
    static_quick_infos = tuple(
        mapped
        for info in analysis.static_quick_infos
        if info.target_string not in resolved_options.excluded_targets
        and (mapped := remapper.remap(info)) is not None
    )
    errors = tuple(mapped for error in analysis.errors if (mapped := remapper.remap(error)) is not None)

    return TwoslashRunResult(
        code=processed,
        static_quick_infos=static_quick_infos,
        errors=errors,
        removed_lines=removed_lines,
        prepended_lines=prepend_lines,
        extras=analysis.extras,
    )


def run_fixture(path: str | Path, options: TwoslashOptions | None = None) -> TwoslashRunResult:
    """Run the pipeline against a recorded replay fixture."""
    fixture = read_fixture(path)
    return run_twoslash(
        fixture.source,
        rewriter=fixture.rewriter,
        analyzer=fixture.analyzer,
        options=options,
    )


def remove_lines(source: str, lines: tuple[int, ...]) -> str:
    """Drop the given 0-based lines; survivors are joined with `\\n`."""
    if not lines:
        return source
    dropped = set(lines)
    return "\n".join(line for index, line in enumerate(split_lines(source)) if index not in dropped)


@dataclass(frozen=True, slots=True)
class _ResultRemapper:
    source: LineIndex
    processed: LineIndex
    engine_alignment: AlignmentMap
    source_alignment: AlignmentMap
    prepend_lines: int
    map_to_original: SourceMapper

    def to_original(self, position: Position) -> Position | None:
        """Engine position -> component position, None when unmapped."""
        generated = self.engine_alignment.map_to_original(position)
        if generated is None:
            return None
        return self.map_to_original(generated.shift_lines(-self.prepend_lines))

    def remap(self, info: EngineInfo) -> MappedResult | None:
        original = self.to_original(Position(info.line, info.character))
        if original is None or original.line <= 0 or original.character <= 0:
            _log_dropped(info, "no component position")
            return None
        processed = self.source_alignment.map_to_generated(original)
        if processed is None:
            _log_dropped(info, "component line was stripped")
            return None
        return MappedResult(
            info=replace(
                info,
                line=processed.line,
                character=processed.character,
                start=self.processed.offset_at(processed),
            ),
            original=original,
            original_start=self.source.offset_at(original),
        )


def _removed_source_lines(
    alignment: AlignmentMap,
    prepend_lines: int,
    map_to_original: SourceMapper,
) -> tuple[int, ...]:
    lines: set[int] = set()
    for line in alignment.removed_lines:
        original = map_to_original(Position(line - prepend_lines, 0))
        if original is not None:
            lines.add(original.line)
    return tuple(sorted(lines))


def _log_dropped(info: EngineInfo, reason: str) -> None:
    logger.debug("Dropped %s at %d:%d: %s", type(info).__name__, info.line, info.character, reason)
