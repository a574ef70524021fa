"""Tests for the type classifier."""

import array
import collections
import dataclasses
import datetime
import decimal
import enum
import fractions
import re
import uuid
from pathlib import PurePosixPath

import pytest

from shapehash.primitives.errors import ConfigurationError
from shapehash.primitives.sentinels import UNDEFINED
from shapehash.schemas.types import (
    DecodedKind,
    EncodingKind,
    SortedMembers,
    ValueKind,
    classify,
    key_text,
    object_entries,
    parse_enum,
    scalar_text,
    type_mapping,
)


class Color(enum.Enum):
    RED = "red"


class Priority(enum.IntEnum):
    HIGH = 1


@dataclasses.dataclass
class Point:
    x: int
    y: int


class Plain:
    def __init__(self):
        self.name = "plain"
        self._hidden = True


class Slotted:
    __slots__ = ("a", "_b")

    def __init__(self):
        self.a = 1
        self._b = 2


class TestClassifyPrimitives:
    """Primitive values map to their own kinds."""

    def test_type_matrix(self):
        """Each basic value classifies to exactly one kind."""
        assert classify(None) is ValueKind.NULL
        assert classify(UNDEFINED) is ValueKind.UNDEFINED
        assert classify(42) is ValueKind.NUMBER
        assert classify("x") is ValueKind.STRING
        assert classify(True) is ValueKind.BOOLEAN
        assert classify({}) is ValueKind.OBJECT
        assert classify([]) is ValueKind.ORDERED_LIST
        assert classify(set()) is ValueKind.UNORDERED_LIST
        assert classify(lambda: None) is ValueKind.FUNCTION

    def test_bool_is_not_number(self):
        """Booleans are BOOLEAN even though bool subclasses int."""
        assert classify(False) is ValueKind.BOOLEAN

    def test_numbers(self):
        """Floats, big ints, decimals and fractions are NUMBER."""
        assert classify(3.14) is ValueKind.NUMBER
        assert classify(2**200) is ValueKind.NUMBER
        assert classify(decimal.Decimal("1.5")) is ValueKind.NUMBER
        assert classify(fractions.Fraction(1, 3)) is ValueKind.NUMBER
        assert classify(Priority.HIGH) is ValueKind.NUMBER

    def test_functions(self):
        """Functions, builtins and bound methods are FUNCTION."""
        assert classify(len) is ValueKind.FUNCTION
        assert classify("x".upper) is ValueKind.FUNCTION
        assert classify(classify) is ValueKind.FUNCTION


class TestClassifyOpaqueScalars:
    """Opaque scalars fall back to STRING."""

    def test_temporal_values(self):
        """Dates, times and durations are STRING."""
        assert classify(datetime.datetime(2023, 1, 1)) is ValueKind.STRING
        assert classify(datetime.date(2023, 1, 1)) is ValueKind.STRING
        assert classify(datetime.time(12, 0)) is ValueKind.STRING
        assert classify(datetime.timedelta(seconds=5)) is ValueKind.STRING

    def test_binary_views(self):
        """Byte buffers and binary views are STRING."""
        assert classify(b"abc") is ValueKind.STRING
        assert classify(bytearray(b"abc")) is ValueKind.STRING
        assert classify(memoryview(b"abc")) is ValueKind.STRING
        assert classify(array.array("i", [1, 2])) is ValueKind.STRING

    def test_symbolic_tokens(self):
        """Enum members, uuids, paths and complex numbers are STRING."""
        assert classify(Color.RED) is ValueKind.STRING
        assert classify(uuid.UUID(int=1)) is ValueKind.STRING
        assert classify(PurePosixPath("/tmp")) is ValueKind.STRING
        assert classify(1 + 2j) is ValueKind.STRING


class TestClassifyCollections:
    """Collections and structured objects."""

    def test_ordered_sequences(self):
        """Lists, tuples, ranges and deques are ORDERED_LIST."""
        assert classify([1]) is ValueKind.ORDERED_LIST
        assert classify((1, 2)) is ValueKind.ORDERED_LIST
        assert classify(range(3)) is ValueKind.ORDERED_LIST
        assert classify(collections.deque([1])) is ValueKind.ORDERED_LIST

    def test_unordered_collections(self):
        """Sets, frozensets and SortedMembers are UNORDERED_LIST."""
        assert classify({1, 2}) is ValueKind.UNORDERED_LIST
        assert classify(frozenset()) is ValueKind.UNORDERED_LIST
        assert classify(SortedMembers((1, 2))) is ValueKind.UNORDERED_LIST

    def test_structured_objects(self):
        """Mappings, dataclasses, patterns, errors and objects are OBJECT."""
        assert classify(collections.OrderedDict()) is ValueKind.OBJECT
        assert classify(Point(1, 2)) is ValueKind.OBJECT
        assert classify(re.compile("regex")) is ValueKind.OBJECT
        assert classify(ValueError("test")) is ValueKind.OBJECT
        assert classify(Plain()) is ValueKind.OBJECT
        assert classify(object()) is ValueKind.OBJECT


class TestObjectEntries:
    """Property entries of OBJECT values."""

    def test_mapping_keys_stringified(self):
        """Non-string mapping keys become property names."""
        entries = object_entries({1: "a", None: "b", 2.0: "c"})
        assert entries == [("1", "a"), ("null", "b"), ("2", "c")]

    def test_dataclass_fields(self):
        """Dataclass fields are entries."""
        assert object_entries(Point(1, 2)) == [("x", 1), ("y", 2)]

    def test_pattern(self):
        """Compiled patterns expose pattern and flags."""
        entries = dict(object_entries(re.compile("a+")))
        assert entries["pattern"] == "a+"
        assert "flags" in entries

    def test_exception(self):
        """Exceptions expose their name and message."""
        assert dict(object_entries(ValueError("boom"))) == {
            "name": "ValueError",
            "message": "boom",
        }

    def test_public_attributes_only(self):
        """Private attributes are skipped."""
        assert object_entries(Plain()) == [("name", "plain")]
        assert object_entries(Slotted()) == [("a", 1)]

    def test_opaque_object_has_no_entries(self):
        """A bare object has no entries."""
        assert object_entries(object()) == []


class TestScalarText:
    """Canonical text of opaque scalars."""

    def test_aware_datetime_is_utc_millis(self):
        """Aware datetimes render in UTC with milliseconds and Z."""
        tz = datetime.timezone(datetime.timedelta(hours=2))
        value = datetime.datetime(2023, 1, 1, 2, 0, 0, 123456, tzinfo=tz)
        assert scalar_text(value) == "2023-01-01T00:00:00.123Z"

    def test_naive_datetime_is_isoformat(self):
        """Naive datetimes use isoformat."""
        assert scalar_text(datetime.datetime(2023, 1, 1)) == "2023-01-01T00:00:00"

    def test_bytes_are_base64(self):
        """Binary values render as base64."""
        assert scalar_text(b"hello") == "aGVsbG8="
        assert scalar_text(memoryview(b"hello")) == "aGVsbG8="

    def test_enum_is_name(self):
        """Enum members render as their name."""
        assert scalar_text(Color.RED) == "RED"

    def test_key_text(self):
        """Integral float keys render without a fraction."""
        assert key_text(1.0) == "1"
        assert key_text(1.5) == "1.5"


class TestParseEnum:
    """Lenient enum parsing."""

    def test_by_name(self):
        """Names parse case-insensitively."""
        assert parse_enum(EncodingKind, "base64") is EncodingKind.BASE64
        assert parse_enum(DecodedKind, "JSON") is DecodedKind.JSON

    def test_by_number(self):
        """Wire numbers parse for IntEnums."""
        assert parse_enum(DecodedKind, 24) is DecodedKind.ZIP
        assert parse_enum(EncodingKind, 0) is EncodingKind.UNSPECIFIED

    def test_unknown_raises(self):
        """Unknown values raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            parse_enum(DecodedKind, "TOML")
        with pytest.raises(ConfigurationError):
            parse_enum(ValueKind, 3)


class TestEnumValues:
    """Wire numbers of the encoding and content enums."""

    def test_encoding_values(self):
        assert EncodingKind.UNSPECIFIED == 0
        assert EncodingKind.BASE64 == 1

    def test_decoded_values(self):
        assert DecodedKind.UNSPECIFIED == 0
        assert DecodedKind.JSON == 1
        assert DecodedKind.YAML == 6
        assert DecodedKind.FORM_DATA == 12
        assert DecodedKind.GZIP == 17
        assert DecodedKind.ZIP == 24
        assert len(DecodedKind) == 25


class TestTypeMapping:
    """Reference type table."""

    def test_mapping_contents(self):
        mapping = type_mapping()
        assert mapping["str"] is ValueKind.STRING
        assert mapping["int"] is ValueKind.NUMBER
        assert mapping["bool"] is ValueKind.BOOLEAN
        assert mapping["NoneType"] is ValueKind.NULL
        assert mapping["list"] is ValueKind.ORDERED_LIST
        assert mapping["set"] is ValueKind.UNORDERED_LIST
        assert mapping["dict"] is ValueKind.OBJECT

    def test_agrees_with_classify(self):
        """Every sample value classifies as its type's table entry."""
        mapping = type_mapping()
        samples = [
            None,
            True,
            7,
            1.5,
            decimal.Decimal("1.5"),
            fractions.Fraction(1, 3),
            "text",
            len,
            lambda: None,
            datetime.datetime(2023, 1, 1),
            datetime.date(2023, 1, 1),
            datetime.timedelta(seconds=1),
            b"raw",
            bytearray(b"raw"),
            1 + 2j,
            [1],
            (1,),
            range(2),
            collections.deque(),
            {1},
            frozenset(),
            SortedMembers(()),
            {"a": 1},
            object(),
        ]
        for sample in samples:
            assert classify(sample) is mapping[type(sample).__name__], type(sample).__name__
        assert classify(UNDEFINED) is mapping["UNDEFINED"]
