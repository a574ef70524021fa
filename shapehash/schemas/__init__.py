"""Shapehash value kinds, schema nodes and schema generation."""

from shapehash.schemas.canonical import canonicalize
from shapehash.schemas.decoders import (
    DecodeResult,
    decode,
    get_decoder,
    register_decoder,
    unregister_decoder,
)
from shapehash.schemas.merges import (
    MergeOutcome,
    SchemaMerge,
    SchemaMerges,
    apply_merges,
    parse_schema_merges,
)
from shapehash.schemas.schema_generator import generate_schema, schema_for
from shapehash.schemas.schema_node import SchemaNode
from shapehash.schemas.types import (
    DecodedKind,
    EncodingKind,
    SortedMembers,
    ValueKind,
    classify,
    type_mapping,
)

__all__ = [
    # Types
    "ValueKind",
    "EncodingKind",
    "DecodedKind",
    "SortedMembers",
    "classify",
    "type_mapping",
    # Canonicalization
    "canonicalize",
    # Decoding
    "DecodeResult",
    "decode",
    "get_decoder",
    "register_decoder",
    "unregister_decoder",
    # Merges
    "SchemaMerge",
    "SchemaMerges",
    "MergeOutcome",
    "apply_merges",
    "parse_schema_merges",
    # Schemas
    "SchemaNode",
    "generate_schema",
    "schema_for",
]
