"""Tests for compact token encoding and decoding."""

import pytest

from keysmith.core.errors import (
    DecodeError,
    TokenValidationError,
    ValidationError,
)
from keysmith.crypto.codec import encode, object_to_text
from keysmith.crypto.jwt_codec import decode_token, encode_token

CLAIMS = {"sub": "me", "cap": {"team:123": ["read", "publish"]}}


def _token(header: dict, payload: dict, signature: bytes = b"sig") -> str:
    return f"{object_to_text(header)}.{object_to_text(payload)}.{encode(signature)}"


class TestEncodeToken:
    """Tests for signing input encoding."""

    def test_typ_is_overwritten(self) -> None:
        text = encode_token({"alg": "ES256", "typ": "at+jwt"}, CLAIMS)
        decoded = decode_token(f"{text}.{encode(b'sig')}")
        assert decoded.header.typ == "JWT"

    def test_round_trip(self) -> None:
        header = {"alg": "RS256", "kid": "k1", "x5t": "abc"}
        text = encode_token(header, CLAIMS)
        decoded = decode_token(f"{text}.{encode(b'sig')}")
        assert decoded.header.model_dump(exclude_unset=True) == {
            **header,
            "typ": "JWT",
        }
        assert decoded.payload.model_dump(exclude_unset=True) == CLAIMS

    def test_two_segments(self) -> None:
        assert encode_token({"alg": "EdDSA"}, {}).count(".") == 1


class TestDecodeToken:
    """Tests for token decoding."""

    def test_signed_data_is_encoded_text(self) -> None:
        token = _token({"alg": "ES256", "typ": "JWT"}, CLAIMS, b"\x01\x02")
        decoded = decode_token(token)
        head, body, _ = token.split(".")
        assert decoded.signed_data == f"{head}.{body}".encode()
        assert decoded.signature == b"\x01\x02"

    @pytest.mark.parametrize("token", ["a.b", "a.b.c.d", "abc"])
    def test_wrong_part_count(self, token: str) -> None:
        with pytest.raises(TokenValidationError) as info:
            decode_token(token)
        assert info.value.reason == "token-format"
        assert info.value.details["parts"] == len(token.split("."))

    def test_wrong_part_count_is_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            decode_token("a.b")

    def test_empty_part(self) -> None:
        with pytest.raises(TokenValidationError) as info:
            decode_token(f"{object_to_text({'alg': 'ES256'})}..c2ln")
        assert info.value.reason == "token-format"

    def test_header_not_json(self) -> None:
        token = f"{encode(b'nope')}.{object_to_text(CLAIMS)}.c2ln"
        with pytest.raises(ValidationError) as info:
            decode_token(token)
        assert not isinstance(info.value, TokenValidationError)

    def test_signature_not_base64url(self) -> None:
        token = f"{object_to_text({'alg': 'ES256'})}.{object_to_text(CLAIMS)}.a$b"
        with pytest.raises(DecodeError):
            decode_token(token)

    def test_header_without_alg(self) -> None:
        with pytest.raises(TokenValidationError) as info:
            decode_token(_token({"typ": "JWT"}, CLAIMS))
        assert info.value.reason == "token-schema"

    def test_non_integer_exp(self) -> None:
        with pytest.raises(TokenValidationError) as info:
            decode_token(_token({"alg": "ES256"}, {"exp": "tomorrow"}))
        assert info.value.reason == "token-schema"

    def test_audience_list(self) -> None:
        decoded = decode_token(_token({"alg": "ES256"}, {"aud": ["a", "b"]}))
        assert decoded.payload.aud == ["a", "b"]
