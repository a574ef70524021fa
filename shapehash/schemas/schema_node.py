"""Schema nodes: the shape description of one position in a value tree.

The JSON form always carries a `properties` map (empty for leaves and lists)
and omits `items` for empty collections. Ingestion accepts the older
recorded variants too: `properties` missing, `items` present as null.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from shapehash.primitives.errors import ConfigurationError
from shapehash.schemas.types import DecodedKind, EncodingKind, ValueKind, parse_enum


@dataclass
class SchemaNode:
    """Shape of one value.

    Attributes:
        kind: ValueKind of the value at this position.
        properties: Child shapes by property name (OBJECT only; else empty).
        items: Representative element shape for non-empty lists.
        encoding: Wire encoding the raw value was declared with.
        decoded_type: Content type the raw value was declared with.
        match_importance: Weight in [0, 1] for a replay-matching policy.
    """

    kind: ValueKind
    properties: Dict[str, "SchemaNode"] = field(default_factory=dict)
    items: Optional["SchemaNode"] = None
    encoding: Optional[EncodingKind] = None
    decoded_type: Optional[DecodedKind] = None
    match_importance: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON-serializable form of this node."""
        data: Dict[str, Any] = {
            "type": self.kind.value,
            "properties": {name: node.to_dict() for name, node in self.properties.items()},
        }
        if self.items is not None:
            data["items"] = self.items.to_dict()
        if self.encoding is not None:
            data["encoding"] = self.encoding.name
        if self.decoded_type is not None:
            data["decodedType"] = self.decoded_type.name
        if self.match_importance is not None:
            data["matchImportance"] = self.match_importance
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchemaNode":
        """Build a node from its JSON form.

        Raises:
            ConfigurationError: If the type is missing or unknown.
        """
        if not isinstance(data, dict):
            raise ConfigurationError(f"schema node must be an object, got {type(data).__name__}")

        raw_kind = data.get("type", data.get("kind"))
        if raw_kind is None:
            raise ConfigurationError("schema node is missing its type", field="type")

        properties = data.get("properties") or {}
        items = data.get("items")
        encoding = data.get("encoding")
        decoded_type = data.get("decodedType", data.get("decoded_type"))
        importance = data.get("matchImportance", data.get("match_importance"))

        return cls(
            kind=parse_enum(ValueKind, raw_kind, "type"),
            properties={name: cls.from_dict(node) for name, node in properties.items()},
            items=cls.from_dict(items) if items is not None else None,
            encoding=parse_enum(EncodingKind, encoding, "encoding") if encoding is not None else None,
            decoded_type=(
                parse_enum(DecodedKind, decoded_type, "decodedType")
                if decoded_type is not None
                else None
            ),
            match_importance=float(importance) if importance is not None else None,
        )
