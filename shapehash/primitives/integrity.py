"""Integrity hashing primitives.

Provides deterministic SHA256 digests for canonicalized values.
Uses canonical JSON serialization (sorted keys, no whitespace, raw UTF-8) so
two structurally equal values always serialize to identical bytes.

The text matches what JSON.stringify produces for the same tree, so digests
agree with recorded traces:
- object keys are ordered by UTF-16 code unit
- non-integral and very large numbers use JavaScript number formatting
- lone surrogates are written as lower-case \\uXXXX escapes

The digest layer is shape-agnostic: callers canonicalize first (drop absent
fields, normalize numbers and scalars) and this module only serializes and
hashes.
"""

import decimal
import hashlib
import json
import re
from typing import Any

from shapehash.primitives.sentinels import UNDEFINED

# JSON string literal or number token in json.dumps output
_TOKEN = re.compile(r'"(?:[^"\\]|\\.)*"|-?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?')

_SURROGATE = re.compile("[\ud800-\udfff]")


def utf16_key(text: str) -> bytes:
    """Sort key ordering strings by UTF-16 code unit."""
    return text.encode("utf-16-be", "surrogatepass")


def js_number_text(value: float) -> str:
    """Format a float the way JavaScript's Number#toString does."""
    if value == 0:
        return "0"
    sign, digits, exponent = decimal.Decimal(repr(value)).normalize().as_tuple()
    text = "".join(str(d) for d in digits)
    k = len(text)
    n = exponent + k

    if k <= n <= 21:
        body = text + "0" * (n - k)
    elif 0 < n <= 21:
        body = f"{text[:n]}.{text[n:]}"
    elif -6 < n <= 0:
        body = "0." + "0" * -n + text
    else:
        e = n - 1
        mantissa = text if k == 1 else f"{text[0]}.{text[1:]}"
        body = f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
    return "-" + body if sign else body


def _leaf_token(value: Any) -> Any:
    """Serialize leaves json has no encoding for."""
    if callable(value):
        name = getattr(value, "__qualname__", None) or type(value).__qualname__
        return f"[Function: {name}]"
    if value is UNDEFINED:
        return None
    raise TypeError(f"Value of type {type(value).__name__} is not canonicalized")


def _key_ordered(data: Any) -> Any:
    if isinstance(data, dict):
        return {key: _key_ordered(data[key]) for key in sorted(data, key=utf16_key)}
    if isinstance(data, (list, tuple)):
        return [_key_ordered(item) for item in data]
    return data


def _escape_surrogate(match: "re.Match") -> str:
    return f"\\u{ord(match.group()):04x}"


def _rewrite_token(match: "re.Match") -> str:
    token = match.group()
    if token.startswith('"'):
        return _SURROGATE.sub(_escape_surrogate, token)
    if "." in token or "e" in token or "E" in token:
        return js_number_text(float(token))
    return token


def canonical_json(data: Any) -> str:
    """Serialize data to canonical JSON.

    Canonical form: keys sorted by UTF-16 code unit, no whitespace, non-ASCII
    kept as-is, JavaScript number formatting, NaN and infinities rejected.

    Args:
        data: Canonicalized data to serialize. Object keys must be strings.

    Returns:
        Canonical JSON string (always encodable as UTF-8).
    """
    text = json.dumps(
        _key_ordered(data),
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
        default=_leaf_token,
    )
    return _TOKEN.sub(_rewrite_token, text)


def canonical_bytes(data: Any) -> bytes:
    """Return canonical JSON as UTF-8 bytes."""
    return canonical_json(data).encode("utf-8")


def compute_digest(data: Any) -> str:
    """Compute deterministic SHA256 hash for canonicalized data.

    Args:
        data: Canonicalized value. Must be JSON-serializable apart from
            function references.

    Returns:
        SHA256 hex digest (64 lower-case chars).
    """
    return hashlib.sha256(canonical_bytes(data)).hexdigest()
