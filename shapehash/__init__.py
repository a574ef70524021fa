"""Structural fingerprinting for recorded and replayed call data."""

__version__ = "0.1.0"

from shapehash.fingerprint import (
    FingerprintResult,
    generate_deterministic_hash,
    generate_schema_and_hash,
)
from shapehash.primitives import (
    UNDEFINED,
    ConfigurationError,
    CyclicStructureError,
    DecodeError,
    DepthExceededError,
    FingerprintError,
)
from shapehash.runtime import FingerprintConfig, load_config
from shapehash.schemas import (
    DecodedKind,
    EncodingKind,
    SchemaMerge,
    SchemaNode,
    ValueKind,
    canonicalize,
    classify,
    generate_schema,
    parse_schema_merges,
)

__all__ = [
    "__version__",
    "generate_schema_and_hash",
    "generate_deterministic_hash",
    "FingerprintResult",
    "FingerprintConfig",
    "load_config",
    "UNDEFINED",
    "ValueKind",
    "EncodingKind",
    "DecodedKind",
    "SchemaMerge",
    "SchemaNode",
    "canonicalize",
    "classify",
    "generate_schema",
    "parse_schema_merges",
    "FingerprintError",
    "DecodeError",
    "DepthExceededError",
    "CyclicStructureError",
    "ConfigurationError",
]
