from bisect import bisect_right
from dataclasses import dataclass
from typing import TypeAlias

LineOffsets: TypeAlias = tuple[int, ...]

_BMP_MAX = 0xFFFF


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """Zero-based line / character position in a text snapshot.

    `character` counts UTF-16 code units, like the offsets the analysis
    engine and source maps report.
    """

    line: int
    character: int

    def with_line(self, line: int) -> "Position":
        """Copy of this position on another line, character unchanged."""
        return Position(line, self.character)

    def shift_lines(self, delta: int) -> "Position":
        """Move the position by `delta` lines."""
        return Position(self.line + delta, self.character)

    def __repr__(self) -> str:
        return f"Position({self.line}, {self.character})"


def _code_units(ch: str) -> int:
    return 2 if ord(ch) > _BMP_MAX else 1


def utf16_length(text: str) -> int:
    """Length of `text` in UTF-16 code units."""
    if not text:
        return 0
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def string_index(text: str, offset: int) -> int:
    """Python index of the character at UTF-16 `offset`, clamped into the text.

    An offset inside a surrogate pair resolves to the character it splits.
    """
    remaining = max(0, offset)
    index = 0
    while index < len(text):
        units = _code_units(text[index])
        if remaining < units:
            break
        remaining -= units
        index += 1
    return index


def build_line_offsets(text: str) -> LineOffsets:
    """UTF-16 offsets of the first character of every line in `text`.

    `\\r`, `\\n` and `\\r\\n` each end one line. A non-empty text that ends
    with a terminator gets one more (empty) line starting at its end.
    """
    offsets: list[int] = []
    is_line_start = True
    units = 0
    i = 0
    length = len(text)
    while i < length:
        if is_line_start:
            offsets.append(units)
        ch = text[i]
        is_line_start = ch == "\r" or ch == "\n"
        if ch == "\r" and i + 1 < length and text[i + 1] == "\n":
            i += 1
            units += 1
        units += _code_units(ch)
        i += 1
    if is_line_start and length > 0:
        offsets.append(units)
    return tuple(offsets)


def _offset_at(position: Position, line_offsets: LineOffsets, end: int) -> int:
    if position.line >= len(line_offsets):
        return end
    if position.line < 0:
        return 0
    line_offset = line_offsets[position.line]
    next_line_offset = line_offsets[position.line + 1] if position.line + 1 < len(line_offsets) else end
    return max(line_offset, min(line_offset + position.character, next_line_offset))


def _position_at(offset: int, line_offsets: LineOffsets, end: int) -> Position:
    offset = max(0, min(offset, end))
    if not line_offsets:
        return Position(0, offset)
    line = bisect_right(line_offsets, offset) - 1
    return Position(line, offset - line_offsets[line])


def offset_at(position: Position, text: str, line_offsets: LineOffsets | None = None) -> int:
    """Absolute UTF-16 offset of `position`, clamped to the line it names."""
    if line_offsets is None:
        line_offsets = build_line_offsets(text)
    return _offset_at(position, line_offsets, utf16_length(text))


def position_at(offset: int, text: str, line_offsets: LineOffsets | None = None) -> Position:
    """Line / character of an absolute UTF-16 offset, clamped into the text."""
    if line_offsets is None:
        line_offsets = build_line_offsets(text)
    return _position_at(offset, line_offsets, utf16_length(text))


@dataclass(frozen=True, slots=True)
class LineIndex:
    """
    A text snapshot bundled with its line offset table.

    Invariant:
    - `line_offsets` is strictly increasing and belongs to `text` only.
    - `length` is the UTF-16 length of `text`.
    """

    text: str
    line_offsets: LineOffsets
    length: int

    @staticmethod
    def of(text: str) -> "LineIndex":
        """Scan `text` once and index its lines."""
        return LineIndex(text, build_line_offsets(text), utf16_length(text))

    @property
    def line_count(self) -> int:
        return len(self.line_offsets)

    def offset_at(self, position: Position) -> int:
        return _offset_at(position, self.line_offsets, self.length)

    def position_at(self, offset: int) -> Position:
        return _position_at(offset, self.line_offsets, self.length)

    def line_start(self, line: int) -> int:
        """Offset where `line` begins, clamped like `offset_at`."""
        return self.offset_at(Position(line, 0))

    def string_index(self, offset: int) -> int:
        """Python index into `text` for a UTF-16 offset."""
        return string_index(self.text, offset)
