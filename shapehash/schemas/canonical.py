"""Canonicalization of value trees prior to hashing.

Produces a tree built only from dict, list, SortedMembers, str, int, float,
bool, None and function references:
- UNDEFINED-valued properties are dropped at every level
- object keys are stringified and sorted by UTF-16 code unit
- list element order is kept; UNDEFINED elements become None
- set members are sorted by their canonical JSON
- numbers are normalized (integral floats below 2**53 become ints, NaN/inf
  become None)
- opaque scalars (datetimes, bytes, enums, uuids) become their canonical text
"""

import decimal
import fractions
import math
from typing import Any, Optional

from shapehash.primitives.guard import DEFAULT_MAX_DEPTH, RecursionGuard, join_path
from shapehash.primitives.integrity import canonical_json, utf16_key
from shapehash.primitives.sentinels import UNDEFINED
from shapehash.schemas.types import (
    SortedMembers,
    ValueKind,
    classify,
    object_entries,
    scalar_text,
)


# Integers at or past 2**53 are not exact JavaScript numbers
SAFE_INTEGER_LIMIT = 2**53


def canonical_number(value: Any) -> Any:
    """Normalize a NUMBER value to int, float or None.

    Integral values below 2**53 become ints; larger integral floats stay
    floats so they serialize with their shortest digits.
    """
    if isinstance(value, int):
        return int(value)
    if isinstance(value, decimal.Decimal):
        if not value.is_finite():
            return None
        if value == value.to_integral_value() and abs(value) < SAFE_INTEGER_LIMIT:
            return int(value)
    elif isinstance(value, fractions.Fraction) and value.denominator == 1:
        return int(value)

    try:
        number = float(value)
    except OverflowError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    if number.is_integer() and abs(number) < SAFE_INTEGER_LIMIT:
        return int(number)
    return number


def canonicalize(
    value: Any,
    max_depth: int = DEFAULT_MAX_DEPTH,
    guard: Optional[RecursionGuard] = None,
) -> Any:
    """Return the canonical form of value.

    Args:
        value: Any Python value.
        max_depth: Maximum nesting depth before DepthExceededError.
        guard: Existing guard to share with an enclosing walk.

    Returns:
        Canonical value; a root UNDEFINED is returned unchanged.

    Raises:
        DepthExceededError: If nesting goes past max_depth.
        CyclicStructureError: If the value graph contains a cycle.
    """
    if guard is None:
        guard = RecursionGuard(max_depth)
    return _canonical(value, guard, 0, "")


def _canonical(value: Any, guard: RecursionGuard, depth: int, path: str) -> Any:
    kind = classify(value)

    if kind in (ValueKind.UNDEFINED, ValueKind.NULL, ValueKind.BOOLEAN, ValueKind.FUNCTION):
        return value
    if kind is ValueKind.NUMBER:
        return canonical_number(value)
    if kind is ValueKind.STRING:
        return scalar_text(value)

    with guard.descend(value, depth, path):
        if kind is ValueKind.ORDERED_LIST:
            return [
                None
                if item is UNDEFINED
                else _canonical(item, guard, depth + 1, join_path(path, index))
                for index, item in enumerate(value)
            ]

        if kind is ValueKind.UNORDERED_LIST:
            members = [
                _canonical(item, guard, depth + 1, join_path(path, index))
                for index, item in enumerate(value)
                if item is not UNDEFINED
            ]
            return SortedMembers(sorted(members, key=canonical_json))

        result = {}
        entries = sorted(object_entries(value), key=lambda entry: utf16_key(entry[0]))
        for key, item in entries:
            if item is UNDEFINED:
                continue
            result[key] = _canonical(item, guard, depth + 1, join_path(path, key))
        return result
