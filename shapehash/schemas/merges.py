"""Schema merge directives.

A merge directive tells the engine that a root-level field holds an encoded
payload (e.g. base64-wrapped JSON) and should be compared on its decoded
structure. Directives apply to the root object only; a nested property with
the same name never receives one.

Directives travel on recorded spans as JSON:

    {"body": {"encoding": "BASE64", "decodedType": "JSON", "matchImportance": 1}}
"""

import json
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from shapehash.primitives.errors import ConfigurationError, DecodeError
from shapehash.primitives.sentinels import UNDEFINED
from shapehash.schemas.decoders import decode
from shapehash.schemas.types import (
    DecodedKind,
    EncodingKind,
    ValueKind,
    classify,
    object_entries,
    parse_enum,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaMerge:
    """Directive for one root-level field.

    Attributes:
        encoding: Wire encoding of the raw value.
        decoded_type: Content type of the decoded payload.
        match_importance: Optional weight in [0, 1] for replay matching.
    """

    encoding: Optional[EncodingKind] = None
    decoded_type: Optional[DecodedKind] = None
    match_importance: Optional[float] = None

    def __post_init__(self):
        if self.encoding is not None:
            object.__setattr__(self, "encoding", parse_enum(EncodingKind, self.encoding, "encoding"))
        if self.decoded_type is not None:
            object.__setattr__(
                self, "decoded_type", parse_enum(DecodedKind, self.decoded_type, "decodedType")
            )
        if self.match_importance is not None:
            try:
                importance = float(self.match_importance)
            except (TypeError, ValueError):
                raise ConfigurationError(
                    f"matchImportance must be a number, got {self.match_importance!r}",
                    field="matchImportance",
                )
            if not 0.0 <= importance <= 1.0:
                raise ConfigurationError(
                    f"matchImportance must be between 0 and 1, got {importance}",
                    field="matchImportance",
                )
            object.__setattr__(self, "match_importance", importance)

    @property
    def decodes(self) -> bool:
        """True if the directive asks for any decoding."""
        return bool(self.encoding) or bool(self.decoded_type)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], name: str = "") -> "SchemaMerge":
        """Build a directive from camelCase or snake_case keys."""
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                f"merge directive for {name!r} must be an object, got {type(data).__name__}",
                field=name or None,
            )
        return cls(
            encoding=data.get("encoding"),
            decoded_type=data.get("decodedType", data.get("decoded_type")),
            match_importance=data.get("matchImportance", data.get("match_importance")),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.encoding is not None:
            data["encoding"] = self.encoding.name
        if self.decoded_type is not None:
            data["decodedType"] = self.decoded_type.name
        if self.match_importance is not None:
            data["matchImportance"] = self.match_importance
        return data


SchemaMerges = Mapping[str, SchemaMerge]

NO_MERGES: SchemaMerges = MappingProxyType({})


def parse_schema_merges(data: Any) -> SchemaMerges:
    """Build an immutable SchemaMerges mapping.

    Args:
        data: None, JSON text, or a mapping of field name to SchemaMerge or
            directive dict.

    Returns:
        Read-only mapping of field name to SchemaMerge.

    Raises:
        ConfigurationError: If data is malformed.
    """
    if data is None:
        return NO_MERGES

    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except ValueError as e:
            raise ConfigurationError(f"schema merges are not valid JSON: {e}")
        if data is None:
            return NO_MERGES

    if not isinstance(data, Mapping):
        raise ConfigurationError(
            f"schema merges must be an object, got {type(data).__name__}"
        )

    merges = {}
    for name, directive in data.items():
        if isinstance(directive, SchemaMerge):
            merges[str(name)] = directive
        else:
            merges[str(name)] = SchemaMerge.from_dict(directive, name=str(name))
    if not merges:
        return NO_MERGES
    return MappingProxyType(merges)


@dataclass
class MergeOutcome:
    """Root value with directed fields decoded.

    Attributes:
        value: Root with each directed field replaced by its decoded value.
        errors: Decode failures, one per field that could not be decoded.
    """

    value: Any
    errors: List[DecodeError] = field(default_factory=list)


def apply_merges(
    value: Any,
    merges: Optional[SchemaMerges],
    log: Optional[logging.Logger] = None,
    log_level: int = logging.DEBUG,
) -> MergeOutcome:
    """Decode the directed root-level fields of value.

    Fields that fail to decode keep their raw value and are reported in the
    outcome and through the logger; nothing is raised.

    Args:
        value: Root value. Merges only apply when it classifies as OBJECT.
        merges: Directives keyed by root-level field name.
        log: Logger for decode diagnostics (defaults to this module's).
        log_level: Level used for decode diagnostics.

    Returns:
        MergeOutcome with the partially decoded root.
    """
    if not merges or classify(value) is not ValueKind.OBJECT:
        return MergeOutcome(value=value)

    log = log or logger
    decoded = {}
    errors: List[DecodeError] = []

    for key, item in object_entries(value):
        directive = merges.get(key)
        if directive is None or item is UNDEFINED or not directive.decodes:
            decoded[key] = item
            continue

        result = decode(
            item,
            directive.encoding or EncodingKind.UNSPECIFIED,
            directive.decoded_type or DecodedKind.UNSPECIFIED,
        )
        if not result.success:
            error = result.error.for_field(key)
            errors.append(error)
            log.log(log_level, f"Failed to decode {key}: {error.message}")
        decoded[key] = result.value

    return MergeOutcome(value=decoded, errors=errors)
