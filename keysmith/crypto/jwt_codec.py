"""Compact JWT encoding and decoding. No signature checks happen here."""

from typing import Any

import pydantic

from keysmith.core.errors import TokenValidationError
from keysmith.crypto.codec import decode, object_to_text, text_to_object
from keysmith.crypto.types import TOKEN_TYPE, DecodedToken, JwtHeader, JwtPayload


def encode_token(header: dict[str, Any], payload: dict[str, Any]) -> str:
    """Return the signing input ``b64(header).b64(payload)``.

    ``typ`` is always set to ``JWT``, overriding any caller value.
    """
    encoded_header = object_to_text({**header, "typ": TOKEN_TYPE})
    encoded_payload = object_to_text(payload)
    return f"{encoded_header}.{encoded_payload}"


def decode_token(token: str) -> DecodedToken:
    """Split ``token`` into header, payload, signature and signed bytes."""
    parts = token.split(".")
    if len(parts) != 3 or not all(parts):
        raise TokenValidationError(
            "token must consist of 3 non-empty parts",
            reason="token-format",
            details={"parts": len(parts)},
        )
    header_encoded, payload_encoded, signature_encoded = parts
    header = text_to_object(header_encoded)
    payload = text_to_object(payload_encoded)
    signature = decode(signature_encoded)
    try:
        return DecodedToken(
            header=JwtHeader.model_validate(header),
            payload=JwtPayload.model_validate(payload),
            signature=signature,
            signed_data=f"{header_encoded}.{payload_encoded}".encode(),
        )
    except pydantic.ValidationError as exc:
        raise TokenValidationError(
            "token header or payload has an invalid shape",
            reason="token-schema",
            details={"errors": exc.errors(include_url=False)},
        ) from exc
