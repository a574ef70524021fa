"""Fingerprint orchestrator.

Composes canonicalization, the decode pipeline, schema generation and the
digest into one call producing a schema and two hashes:

- decodedValueHash: digest of the canonical decoded value (strict equality)
- decodedSchemaHash: digest of the canonical schema (shape-only equality)

A replay-matching policy picks which hash to compare per field or endpoint,
tolerating legitimately varying values (timestamps, generated ids) while
still catching structural drift.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from shapehash.primitives.errors import DecodeError
from shapehash.primitives.integrity import compute_digest
from shapehash.runtime.config import FingerprintConfig
from shapehash.schemas.canonical import canonicalize
from shapehash.schemas.merges import apply_merges, parse_schema_merges
from shapehash.schemas.schema_generator import schema_for
from shapehash.schemas.schema_node import SchemaNode

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = FingerprintConfig()


@dataclass
class FingerprintResult:
    """Schema and hashes for one value.

    Attributes:
        schema: Shape of the decoded value, directives applied.
        decoded_value_hash: SHA256 of the canonical decoded value.
        decoded_schema_hash: SHA256 of the canonical schema.
        decoded_value: The canonical decoded value that was hashed.
        decode_errors: Directed fields that failed to decode.
    """

    schema: SchemaNode
    decoded_value_hash: str
    decoded_schema_hash: str
    decoded_value: Any = None
    decode_errors: List[DecodeError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema": self.schema.to_dict(),
            "decodedValueHash": self.decoded_value_hash,
            "decodedSchemaHash": self.decoded_schema_hash,
        }


def generate_schema_and_hash(
    value: Any,
    merges: Any = None,
    config: Optional[FingerprintConfig] = None,
    log: Optional[logging.Logger] = None,
) -> FingerprintResult:
    """Generate the schema and hashes for a recorded or replayed value.

    Directed root-level fields are decoded before canonicalization so raw
    bytes payloads are interpreted as bytes. Decode failures never abort the
    call: the field stays a STRING leaf carrying its directive, and the
    failure is logged and listed in the result.

    Args:
        value: Any Python value, typically the body/headers/result mapping.
        merges: SchemaMerges, directive dict or JSON text. Falls back to
            config.merges when None.
        config: Engine settings (defaults to FingerprintConfig()).
        log: Logger for decode diagnostics (defaults to the merges logger).

    Returns:
        FingerprintResult.

    Raises:
        DepthExceededError: If nesting goes past config.max_depth.
        CyclicStructureError: If the value graph contains a cycle.
        ConfigurationError: If merges are malformed.
    """
    config = config or DEFAULT_CONFIG
    merges = config.merges if merges is None else parse_schema_merges(merges)

    outcome = apply_merges(value, merges, log=log, log_level=config.decode_log_level)
    decoded = canonicalize(outcome.value, max_depth=config.max_depth)
    schema = schema_for(decoded, merges, max_depth=config.max_depth)

    result = FingerprintResult(
        schema=schema,
        decoded_value_hash=compute_digest(decoded),
        decoded_schema_hash=compute_digest(schema.to_dict()),
        decoded_value=decoded,
        decode_errors=outcome.errors,
    )
    if outcome.errors:
        logger.debug(
            f"Fingerprinted with {len(outcome.errors)} undecoded field(s): "
            f"{[e.field for e in outcome.errors]}"
        )
    return result


def generate_deterministic_hash(value: Any, config: Optional[FingerprintConfig] = None) -> str:
    """Canonicalize value and return its SHA256 hex digest."""
    config = config or DEFAULT_CONFIG
    return compute_digest(canonicalize(value, max_depth=config.max_depth))
