"""Decode pipeline for embedded encoded payloads.

Two stages: the wire encoding is undone first (identity or base64), then the
payload is interpreted by the decoder registered for its DecodedKind. The
result is a sub-tree of the same value space the schema generator walks.

decode() never raises for malformed input. Failures come back as a
DecodeResult with success=False so callers can degrade to a STRING leaf.
"""

import base64
import binascii
import csv
import gzip
import io
import json
import logging
import threading
import urllib.parse
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import yaml
from yaml.composer import ComposerError

from shapehash.primitives.errors import DecodeError
from shapehash.schemas.types import DecodedKind, EncodingKind

logger = logging.getLogger(__name__)

Decoder = Callable[[bytes], Any]

_URLSAFE_ALPHABET = str.maketrans("-_", "+/")


@dataclass
class DecodeResult:
    """Result of decoding one value.

    Attributes:
        success: True if the value was decoded (or needed no decoding).
        value: Decoded value; the raw value when nothing was decoded.
        error: DecodeError describing the failure, if any.
    """

    success: bool
    value: Any = None
    error: Optional[DecodeError] = None


# ---------------------------------------------------------------------------
# Encoding stage
# ---------------------------------------------------------------------------


def decode_base64(raw: Any) -> bytes:
    """Strictly decode base64 text, standard or URL-safe, padding optional.

    Raises:
        DecodeError: If raw is not valid base64.
    """
    try:
        text = raw.decode("ascii") if isinstance(raw, (bytes, bytearray)) else raw
        compact = "".join(text.split()).translate(_URLSAFE_ALPHABET).rstrip("=")
        compact += "=" * (-len(compact) % 4)
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise DecodeError(
            f"invalid base64 payload: {e}",
            encoding=EncodingKind.BASE64,
            cause=e,
        )


def _undo_encoding(raw: Any, encoding: EncodingKind) -> bytes:
    if encoding is EncodingKind.BASE64:
        return decode_base64(raw)
    if isinstance(raw, str):
        return raw.encode("utf-8")
    return bytes(raw)


# ---------------------------------------------------------------------------
# Content decoders
# ---------------------------------------------------------------------------


def _text(payload: bytes) -> str:
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"payload is not valid UTF-8: {e}", cause=e)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def decode_json(payload: bytes) -> Any:
    return json.loads(_text(payload), parse_constant=_reject_constant)


class _PayloadLoader(yaml.SafeLoader):
    """SafeLoader that rejects aliases in untrusted payloads."""

    def compose_node(self, parent, index):
        if self.check_event(yaml.AliasEvent):
            event = self.peek_event()
            raise ComposerError(
                None,
                None,
                f"found alias *{event.anchor}; aliases are not allowed in payloads",
                event.start_mark,
            )
        return super().compose_node(parent, index)


def decode_yaml(payload: bytes) -> Any:
    return yaml.load(_text(payload), Loader=_PayloadLoader)


def decode_form_data(payload: bytes) -> Dict[str, Any]:
    """Decode an urlencoded form; repeated keys become lists."""
    parsed = urllib.parse.parse_qs(_text(payload), keep_blank_values=True)
    return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}


def decode_csv(payload: bytes) -> Any:
    """Decode CSV with a header row into a list of row objects."""
    reader = csv.DictReader(io.StringIO(_text(payload), newline=""))
    return [dict(row) for row in reader]


def decode_plain_text(payload: bytes) -> str:
    return _text(payload)


def decode_gzip(payload: bytes) -> str:
    try:
        inflated = gzip.decompress(payload)
    except (OSError, EOFError) as e:
        raise DecodeError(f"invalid gzip payload: {e}", cause=e)
    return _text(inflated)


_registry_lock = threading.RLock()

_decoders: Dict[DecodedKind, Decoder] = {
    DecodedKind.JSON: decode_json,
    DecodedKind.YAML: decode_yaml,
    DecodedKind.FORM_DATA: decode_form_data,
    DecodedKind.CSV: decode_csv,
    DecodedKind.PLAIN_TEXT: decode_plain_text,
    DecodedKind.GZIP: decode_gzip,
}


def register_decoder(kind: DecodedKind, decoder: Decoder) -> None:
    """Register (or replace) the decoder for a content type.

    Args:
        kind: Content type the decoder interprets.
        decoder: Callable taking the payload bytes and returning a value.
    """
    if kind is DecodedKind.UNSPECIFIED:
        raise ValueError("cannot register a decoder for UNSPECIFIED")
    with _registry_lock:
        _decoders[kind] = decoder


def unregister_decoder(kind: DecodedKind) -> None:
    with _registry_lock:
        _decoders.pop(kind, None)


def get_decoder(kind: DecodedKind) -> Optional[Decoder]:
    """Return the decoder for kind, or None if it is an opaque type."""
    with _registry_lock:
        return _decoders.get(kind)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def decode(
    raw: Any,
    encoding: EncodingKind = EncodingKind.UNSPECIFIED,
    decoded_type: DecodedKind = DecodedKind.UNSPECIFIED,
) -> DecodeResult:
    """Decode a leaf value into a recursable value.

    Args:
        raw: Raw value. Only text and bytes are decoded; anything else is
            already structured and passes through unchanged.
        encoding: Wire encoding to undo first.
        decoded_type: Content interpretation of the payload.

    Returns:
        DecodeResult. Content types with no registered decoder keep the raw
        value as an opaque leaf. UNSPECIFIED content is tried as JSON and
        falls back to text without failing.
    """
    if not isinstance(raw, (str, bytes, bytearray)):
        return DecodeResult(success=True, value=raw)
    if encoding is EncodingKind.UNSPECIFIED and decoded_type is DecodedKind.UNSPECIFIED:
        return DecodeResult(success=True, value=raw)

    try:
        payload = _undo_encoding(raw, encoding)

        if decoded_type is DecodedKind.UNSPECIFIED:
            return DecodeResult(success=True, value=_guess_content(payload))

        decoder = get_decoder(decoded_type)
        if decoder is None:
            logger.debug(f"No decoder for {decoded_type.name}, keeping raw value")
            return DecodeResult(success=True, value=raw)

        return DecodeResult(success=True, value=decoder(payload))
    except DecodeError as e:
        error = e
    except Exception as e:
        error = DecodeError(f"invalid {decoded_type.name} content: {e}", cause=e)

    error.encoding = encoding
    error.decoded_type = decoded_type
    return DecodeResult(success=False, value=raw, error=error)


def _guess_content(payload: bytes) -> Any:
    text = payload.decode("utf-8", errors="replace")
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        logger.debug("Payload has no declared type and is not JSON, keeping text")
        return text
