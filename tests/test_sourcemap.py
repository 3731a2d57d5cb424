import pytest

from twoslashmap.errors import SourceMapError
from twoslashmap.sourcemap import (
    MappingSegment,
    SourceMapConsumer,
    create_source_mapper,
    decode_mappings,
    decode_vlq,
    encode_mappings,
    encode_vlq,
)
from twoslashmap.text import Position


def _raw_map(mappings: str, **fields: object) -> dict[str, object]:
    return {"version": 3, "sources": ["App.svelte"], "names": [], "mappings": mappings, **fields}


def test_vlq_known_vectors() -> None:
    assert encode_vlq(0) == "A"
    assert encode_vlq(1) == "C"
    assert encode_vlq(-1) == "D"
    assert encode_vlq(16) == "gB"
    assert encode_vlq(123) == "2H"
    assert decode_vlq("2H") == (123, 2)
    assert decode_vlq("AD", 1) == (-1, 2)


def test_vlq_rejects_truncated_and_invalid_input() -> None:
    with pytest.raises(SourceMapError):
        decode_vlq("g")
    with pytest.raises(SourceMapError):
        decode_vlq("!")


def test_decode_mappings_accumulates_relative_fields() -> None:
    lines = decode_mappings("AAAA,IAAI;;EACE")

    assert lines == [
        [MappingSegment(0, 0, 0, 0), MappingSegment(4, 0, 0, 4)],
        [],
        [MappingSegment(2, 0, 1, 6)],
    ]


def test_decode_mappings_keeps_generated_only_segments() -> None:
    assert decode_mappings("A,CAAA") == [[MappingSegment(0), MappingSegment(1, 0, 0, 0)]]


def test_encode_mappings_matches_hand_written_string() -> None:
    segments = [
        [MappingSegment(0, 0, 0, 0), MappingSegment(4, 0, 0, 4)],
        [],
        [MappingSegment(2, 0, 1, 6)],
    ]

    assert encode_mappings(segments) == "AAAA,IAAI;;EACE"


def test_decode_mappings_rejects_bad_field_count() -> None:
    with pytest.raises(SourceMapError):
        decode_mappings("AA")


def test_consumer_uses_greatest_lower_bound_on_the_same_line() -> None:
    consumer = SourceMapConsumer(_raw_map("AAAA,IAAI;;EACE", version="3"))

    first = consumer.original_position_for(1, 6)
    assert first is not None
    assert (first.source, first.line, first.column) == ("App.svelte", 1, 4)

    # Line 2 has no segments; no fallback to line 1.
    assert consumer.original_position_for(2, 0) is None
    # Column before the first segment of line 3.
    assert consumer.original_position_for(3, 1) is None
    third = consumer.original_position_for(3, 40)
    assert third is not None
    assert (third.line, third.column) == (2, 6)


def test_consumer_out_of_range_lookups_return_none() -> None:
    consumer = SourceMapConsumer(_raw_map("AAAA", version="3"))

    assert consumer.original_position_for(0, 0) is None
    assert consumer.original_position_for(5, 0) is None
    assert consumer.original_position_for(1, -1) is None


def test_consumer_resolves_names_and_source_root() -> None:
    consumer = SourceMapConsumer(
        _raw_map("AAAAA", version="3", names=["render"], sourceRoot="src/")
    )

    position = consumer.original_position_for(1, 0)
    assert position is not None
    assert position.source == "src/App.svelte"
    assert position.name == "render"


def test_consumer_rejects_unsupported_maps() -> None:
    with pytest.raises(SourceMapError):
        SourceMapConsumer(_raw_map("AAAA", version="2"))
    with pytest.raises(SourceMapError):
        SourceMapConsumer({"version": "3", "sections": []})
    with pytest.raises(SourceMapError):
        SourceMapConsumer({"version": "3", "sources": [], "mappings": None})


def test_source_mapper_coerces_numeric_version_and_uses_zero_based_lines() -> None:
    mapper = create_source_mapper(_raw_map("AAAA,IAAI;;EACE"))

    assert mapper(Position(0, 5)) == Position(0, 4)
    assert mapper(Position(2, 2)) == Position(1, 6)


def test_source_mapper_returns_none_when_unmapped() -> None:
    mapper = create_source_mapper(_raw_map("AAAA;;EACE"))

    assert mapper(Position(1, 0)) is None
    assert mapper(Position(-1, 0)) is None
    assert mapper(Position(0, -2)) is None
    assert mapper(Position(99, 0)) is None
