"""Source map decoding and generated -> original position mapping."""

from twoslashmap.sourcemap.bridge import SourceMapBridge, SourceMapper, create_source_mapper
from twoslashmap.sourcemap.codec import (
    MappingSegment,
    decode_mappings,
    decode_vlq,
    encode_mappings,
    encode_vlq,
)
from twoslashmap.sourcemap.consumer import OriginalPosition, SourceMapConsumer

__all__ = [
    "MappingSegment",
    "OriginalPosition",
    "SourceMapBridge",
    "SourceMapConsumer",
    "SourceMapper",
    "create_source_mapper",
    "decode_mappings",
    "decode_vlq",
    "encode_mappings",
    "encode_vlq",
]
