"""Tests for tokens and API keys minted from encoded private keys."""

import pytest

from keysmith.core.errors import PreconditionError, ValidationError
from keysmith.crypto.jwt_manager import JWTManager, decode_token
from keysmith.crypto.keys import encode_key_material
from keysmith.crypto.types import SigningKeyData
from keysmith.tokens.api_key import create_api_key, create_token

NOW = 1609459200

CAPABILITIES = {"cap": {"events/K7pWQnDx8z2Y/channels/main": ["read", "publish"]}}


class TestCreateToken:
    """Tests for create_token."""

    def test_signs_rs256_with_jwk_kid(
        self, manager: JWTManager, rsa_keys: SigningKeyData
    ) -> None:
        token = create_token(
            encode_key_material(rsa_keys.private_jwk),
            ttl_secs=60,
            claims={"sub": "svc"},
            manager=manager,
        )
        verified = manager.verify_token(rsa_keys.public_jwk, token)
        assert verified.as_dict() == {
            "header": {"typ": "JWT", "alg": "RS256", "kid": rsa_keys.kid},
            "payload": {"sub": "svc", "iat": NOW, "exp": NOW + 60},
        }

    def test_no_exp_without_ttl(
        self, manager: JWTManager, rsa_keys: SigningKeyData
    ) -> None:
        token = create_token(encode_key_material(rsa_keys.private_jwk), manager=manager)
        payload = decode_token(token).payload
        assert payload.iat == NOW
        assert payload.exp is None

    def test_kid_omitted_when_absent(
        self, manager: JWTManager, rsa_keys: SigningKeyData
    ) -> None:
        jwk = {k: v for k, v in rsa_keys.private_jwk.items() if k not in ("kid", "alg")}
        token = create_token(encode_key_material(jwk), manager=manager)
        header = decode_token(token).header
        assert header.kid is None
        assert header.alg == "RS256"

    def test_rejects_non_rsa_key(
        self, manager: JWTManager, ec_keys: SigningKeyData
    ) -> None:
        with pytest.raises(PreconditionError):
            create_token(encode_key_material(ec_keys.private_jwk), manager=manager)

    def test_rejects_undecodable_key(self, manager: JWTManager) -> None:
        with pytest.raises(ValidationError):
            create_token("not-a-jwk", manager=manager)


class TestCreateApiKey:
    """Tests for create_api_key."""

    def test_carries_team_and_capabilities(
        self, manager: JWTManager, rsa_keys: SigningKeyData
    ) -> None:
        api_key = create_api_key(
            encode_key_material(rsa_keys.private_jwk),
            team_id="z7t7j3d8cTD",
            claims=CAPABILITIES,
            manager=manager,
        )
        payload = manager.verify_token(rsa_keys.public_jwk, api_key).payload
        assert payload.model_dump(exclude_unset=True) == {
            **CAPABILITIES,
            "tid": "z7t7j3d8cTD",
            "iat": NOW,
        }

    def test_team_overrides_claim(
        self, manager: JWTManager, rsa_keys: SigningKeyData
    ) -> None:
        api_key = create_api_key(
            encode_key_material(rsa_keys.private_jwk),
            team_id="team-a",
            claims={"tid": "team-b"},
            ttl_secs=3600,
            manager=manager,
        )
        payload = decode_token(api_key).payload
        assert payload.model_extra == {"tid": "team-a"}
        assert payload.exp == NOW + 3600

    def test_team_required(self, rsa_keys: SigningKeyData) -> None:
        with pytest.raises(PreconditionError):
            create_api_key(encode_key_material(rsa_keys.private_jwk), team_id="")
