"""Value kinds and the type classifier.

Maps any Python value to one abstract ValueKind. Classification is total:
structured values nobody recognises fall back to OBJECT, opaque scalars
(temporal values, binary buffers, symbolic tokens) fall back to STRING.
"""

import array
import base64
import dataclasses
import datetime
import decimal
import enum
import numbers
import re
import uuid
from collections.abc import Mapping, Sequence, Set as AbstractSet
from pathlib import PurePath
from typing import Any, Dict, List, Tuple, Type, TypeVar

from shapehash.primitives.errors import ConfigurationError
from shapehash.primitives.sentinels import UNDEFINED


class ValueKind(enum.Enum):
    """Abstract classification of a value's shape."""

    NULL = "NULL"
    UNDEFINED = "UNDEFINED"
    STRING = "STRING"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"
    OBJECT = "OBJECT"
    ORDERED_LIST = "ORDERED_LIST"
    UNORDERED_LIST = "UNORDERED_LIST"
    FUNCTION = "FUNCTION"


class EncodingKind(enum.IntEnum):
    """Wire encodings applied to a leaf before interpretation."""

    UNSPECIFIED = 0
    BASE64 = 1


class DecodedKind(enum.IntEnum):
    """Content interpretations for a decoded leaf."""

    UNSPECIFIED = 0
    JSON = 1
    HTML = 2
    CSS = 3
    JAVASCRIPT = 4
    XML = 5
    YAML = 6
    MARKDOWN = 7
    CSV = 8
    SQL = 9
    GRAPHQL = 10
    PLAIN_TEXT = 11
    FORM_DATA = 12
    MULTIPART_FORM = 13
    PDF = 14
    AUDIO = 15
    VIDEO = 16
    GZIP = 17
    BINARY = 18
    JPEG = 19
    PNG = 20
    GIF = 21
    WEBP = 22
    SVG = 23
    ZIP = 24


E = TypeVar("E", bound=enum.Enum)


def parse_enum(enum_cls: Type[E], raw: Any, field: str = "") -> E:
    """Parse an enum member from a member, a name or a wire number.

    Names are matched case-insensitively. Numbers are accepted for IntEnums
    only, matching how recorded traces store them.

    Raises:
        ConfigurationError: If raw does not name a member of enum_cls.
    """
    if isinstance(raw, enum_cls):
        return raw
    if isinstance(raw, str):
        try:
            return enum_cls[raw.strip().upper()]
        except KeyError:
            pass
    elif isinstance(raw, int) and not isinstance(raw, bool) and issubclass(enum_cls, int):
        try:
            return enum_cls(raw)
        except ValueError:
            pass
    label = f"{field}: " if field else ""
    raise ConfigurationError(
        f"{label}unknown {enum_cls.__name__} {raw!r}",
        field=field or None,
    )


class SortedMembers(tuple):
    """Members of an unordered collection, in canonical order."""

    def __repr__(self) -> str:
        return f"SortedMembers({tuple.__repr__(self)})"


_TEMPORAL_TYPES = (datetime.date, datetime.time, datetime.timedelta)
_BINARY_TYPES = (bytes, bytearray, memoryview, array.array)
_SYMBOLIC_TYPES = (enum.Enum, uuid.UUID, PurePath, complex)


def classify(value: Any) -> ValueKind:
    """Classify a value. Never raises.

    Args:
        value: Any Python value.

    Returns:
        The ValueKind of value; first matching rule wins.
    """
    if value is UNDEFINED:
        return ValueKind.UNDEFINED
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (numbers.Real, decimal.Decimal)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if callable(value) and not isinstance(value, (Mapping, Sequence, AbstractSet)):
        return ValueKind.FUNCTION
    if isinstance(value, _TEMPORAL_TYPES):
        return ValueKind.STRING
    if isinstance(value, _BINARY_TYPES):
        return ValueKind.STRING
    if isinstance(value, _SYMBOLIC_TYPES):
        return ValueKind.STRING
    if isinstance(value, (SortedMembers, AbstractSet)):
        return ValueKind.UNORDERED_LIST
    if isinstance(value, Sequence):
        return ValueKind.ORDERED_LIST
    # Mappings, dataclasses, patterns, exceptions and plain objects
    return ValueKind.OBJECT


def type_mapping() -> Dict[str, ValueKind]:
    """Return the standard table of Python type names to value kinds."""
    return {
        "UNDEFINED": ValueKind.UNDEFINED,
        "NoneType": ValueKind.NULL,
        "bool": ValueKind.BOOLEAN,
        "int": ValueKind.NUMBER,
        "float": ValueKind.NUMBER,
        "Decimal": ValueKind.NUMBER,
        "Fraction": ValueKind.NUMBER,
        "str": ValueKind.STRING,
        "function": ValueKind.FUNCTION,
        "builtin_function_or_method": ValueKind.FUNCTION,
        "method": ValueKind.FUNCTION,
        "datetime": ValueKind.STRING,
        "date": ValueKind.STRING,
        "time": ValueKind.STRING,
        "timedelta": ValueKind.STRING,
        "bytes": ValueKind.STRING,
        "bytearray": ValueKind.STRING,
        "memoryview": ValueKind.STRING,
        "array": ValueKind.STRING,
        "Enum": ValueKind.STRING,
        "UUID": ValueKind.STRING,
        "PurePath": ValueKind.STRING,
        "complex": ValueKind.STRING,
        "list": ValueKind.ORDERED_LIST,
        "tuple": ValueKind.ORDERED_LIST,
        "range": ValueKind.ORDERED_LIST,
        "deque": ValueKind.ORDERED_LIST,
        "set": ValueKind.UNORDERED_LIST,
        "frozenset": ValueKind.UNORDERED_LIST,
        "SortedMembers": ValueKind.UNORDERED_LIST,
        "dict": ValueKind.OBJECT,
        "Pattern": ValueKind.OBJECT,
        "Exception": ValueKind.OBJECT,
        "object": ValueKind.OBJECT,
    }


def key_text(key: Any) -> str:
    """Render a mapping key as a property name."""
    if isinstance(key, str):
        return key
    if key is None:
        return "null"
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, float) and key.is_integer():
        return str(int(key))
    if isinstance(key, enum.Enum):
        return key.name
    return str(key)


def scalar_text(value: Any) -> str:
    """Canonical text of an opaque scalar that classifies as STRING.

    Aware datetimes are rendered in UTC with millisecond precision and a
    trailing "Z"; binary views are base64 encoded.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, datetime.datetime):
        if value.tzinfo is not None:
            utc = value.astimezone(datetime.timezone.utc)
            return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"
        return value.isoformat()
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, datetime.timedelta):
        return f"{value.total_seconds()}s"
    if isinstance(value, memoryview):
        return base64.b64encode(value.tobytes()).decode("ascii")
    if isinstance(value, array.array):
        return base64.b64encode(value.tobytes()).decode("ascii")
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, enum.Enum):
        return value.name
    if isinstance(value, PurePath):
        return value.as_posix()
    return str(value)


def object_entries(value: Any) -> List[Tuple[str, Any]]:
    """Return the property entries of a value classified as OBJECT.

    Mapping keys are stringified; other objects expose their public state.
    """
    if isinstance(value, Mapping):
        return [(key_text(k), v) for k, v in value.items()]

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return [(f.name, getattr(value, f.name)) for f in dataclasses.fields(value)]

    if isinstance(value, re.Pattern):
        return [("pattern", value.pattern), ("flags", value.flags)]

    if isinstance(value, BaseException):
        return [("name", type(value).__name__), ("message", str(value))]

    attrs = getattr(value, "__dict__", None)
    if isinstance(attrs, dict):
        return [(k, v) for k, v in attrs.items() if not k.startswith("_")]

    entries = []
    for klass in type(value).__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name.startswith("_") or not hasattr(value, name):
                continue
            entries.append((name, getattr(value, name)))
    return entries
