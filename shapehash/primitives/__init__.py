"""Shapehash primitives: stateless building blocks."""

from shapehash.primitives.errors import (
    ConfigurationError,
    CyclicStructureError,
    DecodeError,
    DepthExceededError,
    FingerprintError,
)
from shapehash.primitives.guard import DEFAULT_MAX_DEPTH, RecursionGuard
from shapehash.primitives.integrity import (
    canonical_bytes,
    canonical_json,
    compute_digest,
)
from shapehash.primitives.sentinels import UNDEFINED

__all__ = [
    # Errors
    "FingerprintError",
    "DecodeError",
    "DepthExceededError",
    "CyclicStructureError",
    "ConfigurationError",
    # Guard
    "DEFAULT_MAX_DEPTH",
    "RecursionGuard",
    # Integrity
    "canonical_json",
    "canonical_bytes",
    "compute_digest",
    # Sentinels
    "UNDEFINED",
]
