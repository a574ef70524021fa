"""Schema generation for arbitrary value trees.

Walks a value with the type classifier and builds a SchemaNode tree.
Merge directives decode and annotate root-level fields only; they are never
passed down the recursion, so a nested property sharing a directed field's
name (through object nesting or list elements) is left alone.

E.g. with {"body": {"encoding": "BASE64", "decodedType": "JSON"}} a body
holding base64-encoded JSON yields

    "body": {
        "type": "OBJECT",
        "properties": {"message": {"type": "STRING", "properties": {}}},
        "encoding": "BASE64",
        "decodedType": "JSON"
    }
"""

import logging
from typing import Any, Optional

from shapehash.primitives.guard import DEFAULT_MAX_DEPTH, RecursionGuard, join_path
from shapehash.primitives.sentinels import UNDEFINED
from shapehash.schemas.merges import (
    SchemaMerge,
    SchemaMerges,
    apply_merges,
    parse_schema_merges,
)
from shapehash.schemas.schema_node import SchemaNode
from shapehash.schemas.types import ValueKind, classify, object_entries


def generate_schema(
    value: Any,
    merges: Any = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
    log: Optional[logging.Logger] = None,
) -> SchemaNode:
    """Generate the schema of value, decoding directed root-level fields.

    Args:
        value: Any Python value.
        merges: SchemaMerges, a directive dict or its JSON text.
        max_depth: Maximum nesting depth before DepthExceededError.
        log: Logger for decode diagnostics.

    Returns:
        Root SchemaNode.

    Raises:
        DepthExceededError: If nesting goes past max_depth.
        CyclicStructureError: If the value graph contains a cycle.
        ConfigurationError: If merges are malformed.
    """
    merges = parse_schema_merges(merges)
    outcome = apply_merges(value, merges, log=log)
    return schema_for(outcome.value, merges, max_depth)


def schema_for(
    value: Any,
    merges: Optional[SchemaMerges] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> SchemaNode:
    """Build the schema of an already decoded value.

    Directed root-level properties are annotated with their directive; no
    decoding happens here.
    """
    return _schema(value, RecursionGuard(max_depth), 0, "", merges)


def _schema(
    value: Any,
    guard: RecursionGuard,
    depth: int,
    path: str,
    merges: Optional[SchemaMerges] = None,
) -> SchemaNode:
    kind = classify(value)

    if kind is ValueKind.ORDERED_LIST or kind is ValueKind.UNORDERED_LIST:
        with guard.descend(value, depth, path):
            for first in value:
                items = _schema(first, guard, depth + 1, join_path(path, 0))
                return SchemaNode(kind=kind, items=items)
        return SchemaNode(kind=kind)

    if kind is not ValueKind.OBJECT:
        return SchemaNode(kind=kind)

    node = SchemaNode(kind=kind)
    with guard.descend(value, depth, path):
        for key, item in object_entries(value):
            if item is UNDEFINED:
                continue
            child = _schema(item, guard, depth + 1, join_path(path, key))
            directive = merges.get(key) if merges else None
            if directive is not None:
                _annotate(child, directive)
            node.properties[key] = child
    return node


def _annotate(node: SchemaNode, directive: SchemaMerge) -> None:
    if directive.encoding is not None:
        node.encoding = directive.encoding
    if directive.decoded_type is not None:
        node.decoded_type = directive.decoded_type
    if directive.match_importance is not None:
        node.match_importance = directive.match_importance
