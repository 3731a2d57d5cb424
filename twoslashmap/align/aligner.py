"""Whole-line alignment between a text and a copy with lines deleted."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from twoslashmap.text import Position

LINE_BREAK_PATTERN: Final[re.Pattern[str]] = re.compile(r"\r\n?|\n")


def split_lines(text: str) -> list[str]:
    """Split on `\\r\\n`, `\\r` or `\\n`. An empty text is one empty line."""
    return LINE_BREAK_PATTERN.split(text)


@dataclass(frozen=True, slots=True)
class AlignmentMap:
    """
    Line correspondence between a *before* text and an *after* text.

    `generated_to_original[i]` is the before line matched by after line `i`
    and `original_to_generated[j]` the after line matched by before line `j`;
    None marks lines without a counterpart.

    Invariant:
    - mapped entries of `generated_to_original` are strictly increasing.
    """

    generated_to_original: tuple[int | None, ...]
    original_to_generated: tuple[int | None, ...]
    removed_lines: tuple[int, ...]

    @property
    def original_line_count(self) -> int:
        return len(self.original_to_generated)

    @property
    def generated_line_count(self) -> int:
        return len(self.generated_to_original)

    def to_original_line(self, line: int) -> int | None:
        if 0 <= line < len(self.generated_to_original):
            return self.generated_to_original[line]
        return None

    def to_generated_line(self, line: int) -> int | None:
        if 0 <= line < len(self.original_to_generated):
            return self.original_to_generated[line]
        return None

    def map_to_original(self, position: Position) -> Position | None:
        """After-text position -> before-text position, character kept."""
        line = self.to_original_line(position.line)
        return None if line is None else position.with_line(line)

    def map_to_generated(self, position: Position) -> Position | None:
        """Before-text position -> after-text position, character kept."""
        line = self.to_generated_line(position.line)
        return None if line is None else position.with_line(line)


def align(before_text: str, after_text: str) -> AlignmentMap:
    """Align `after_text` against `before_text`, line by line.

    Every after line is looked up, in order, among the before lines that
    follow the previous match, by exact text. The walk stops at the first
    after line that has no match; later after lines stay unmapped.
    """
    before_lines = split_lines(before_text)
    after_lines = split_lines(after_text)

    generated_to_original: list[int | None] = [None] * len(after_lines)
    original_to_generated: list[int | None] = [None] * len(before_lines)

    cursor = 0
    for index, line in enumerate(after_lines):
        match = _find_line(before_lines, line, cursor)
        if match is None:
            break
        generated_to_original[index] = match
        original_to_generated[match] = index
        cursor = match + 1

    removed_lines = tuple(
        index for index, generated in enumerate(original_to_generated) if generated is None
    )
    return AlignmentMap(
        generated_to_original=tuple(generated_to_original),
        original_to_generated=tuple(original_to_generated),
        removed_lines=removed_lines,
    )


def _find_line(lines: list[str], line: str, start: int) -> int | None:
    try:
        return lines.index(line, start)
    except ValueError:
        return None
