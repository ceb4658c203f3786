"""Conversions between bytes, base64url text and JSON objects."""

import base64
import binascii
import json
import re
from typing import Any

from keysmith.core.errors import DecodeError, EncodeError, ValidationError

_BASE64URL = re.compile(r"[A-Za-z0-9_-]*={0,2}")


def encode(data: bytes) -> str:
    """Encode bytes as URL-safe base64 without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def decode(text: str) -> bytes:
    """Decode URL-safe base64, padded or not."""
    if not _BASE64URL.fullmatch(text):
        raise DecodeError("invalid base64url alphabet", details={"text": text})
    stripped = text.rstrip("=")
    if len(stripped) % 4 == 1:
        raise DecodeError("invalid base64url length", details={"text": text})
    if stripped != text and (
        len(text) % 4 or len(text) - len(stripped) != -len(stripped) % 4
    ):
        raise DecodeError("invalid base64url padding", details={"text": text})
    padded = stripped + "=" * (-len(stripped) % 4)
    try:
        return base64.urlsafe_b64decode(padded)
    except binascii.Error as exc:
        raise DecodeError("invalid base64url padding", details={"text": text}) from exc


def object_to_text(obj: Any) -> str:
    """Serialize to compact JSON, then base64url."""
    try:
        raw = json.dumps(
            obj, separators=(",", ":"), ensure_ascii=False, allow_nan=False
        )
    except (TypeError, ValueError) as exc:
        raise EncodeError("value is not JSON-representable") from exc
    return encode(raw.encode("utf-8"))


def text_to_object(text: str) -> dict[str, Any]:
    """Decode base64url text holding a JSON object."""
    try:
        obj = json.loads(decode(text).decode("utf-8"))
    except (
        DecodeError,
        UnicodeDecodeError,
        json.JSONDecodeError,
        RecursionError,
    ) as exc:
        raise ValidationError(
            "base64url/json decode failed", details={"text": text}
        ) from exc
    if not isinstance(obj, dict):
        raise ValidationError(
            "decoded value must be a JSON object", details={"text": text}
        )
    return obj
