"""URL-safe base64, challenge generation and strict JSON body decoding."""

from __future__ import annotations

import base64
import json
import re
import secrets
from typing import IO, Any

CHALLENGE_LENGTH = 32

_URL_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")
_JSON_WHITESPACE = " \t\n\r"


def encode_url_base64(data: bytes) -> str:
    """Encode bytes as unpadded URL-safe base64."""
    return base64.urlsafe_b64encode(bytes(data)).rstrip(b"=").decode("ascii")


def decode_url_base64(text: str | bytes | None) -> bytes | None:
    """Decode URL-safe base64, with or without padding. ``None`` stays ``None``."""
    if text is None:
        return None
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("ascii")
    text = text.rstrip("=")
    if not _URL_ALPHABET.fullmatch(text) or len(text) % 4 == 1:
        raise ValueError("illegal base64 data")
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


def create_challenge() -> bytes:
    """Return a new random challenge of CHALLENGE_LENGTH bytes."""
    return secrets.token_bytes(CHALLENGE_LENGTH)


def decode_json(data: str | bytes) -> Any:
    """Decode exactly one JSON value; anything but whitespace after it is an error."""
    text = bytes(data).decode("utf-8") if isinstance(data, (bytes, bytearray)) else data
    start = len(text) - len(text.lstrip(_JSON_WHITESPACE))
    value, end = json.JSONDecoder().raw_decode(text, start)
    if text[end:].strip(_JSON_WHITESPACE):
        raise ValueError("The body contains trailing data")
    return value


def decode_json_stream(stream: IO) -> Any:
    """Read a whole text or binary stream and decode it with decode_json."""
    return decode_json(stream.read())