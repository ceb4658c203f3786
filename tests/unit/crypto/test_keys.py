"""Tests for key generation and JWK conversion."""

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from keysmith.crypto.codec import text_to_object
from keysmith.crypto.keys import (
    KeyFamily,
    build_key_set,
    encode_key_material,
    generate_keypair,
    pem_to_jwk,
)
from keysmith.crypto.types import SigningKeyData


class TestGenerateKeypair:
    """Tests for keypair generation."""

    def test_rsa_jwks_declare_alg(self, rsa_keys: SigningKeyData) -> None:
        assert rsa_keys.private_jwk["kty"] == "RSA"
        assert rsa_keys.private_jwk["alg"] == "RS256"
        assert "d" in rsa_keys.private_jwk
        assert "d" not in rsa_keys.public_jwk
        assert rsa_keys.public_jwk["kid"] == rsa_keys.kid

    def test_ec_jwks_carry_curve(self, ec_keys: SigningKeyData) -> None:
        assert ec_keys.public_jwk["kty"] == "EC"
        assert ec_keys.public_jwk["crv"] == "P-256"
        assert "d" in ec_keys.private_jwk

    def test_ec_other_curve(self) -> None:
        keys = generate_keypair(KeyFamily.EC, curve="P-384")
        assert keys.public_jwk["crv"] == "P-384"

    def test_okp_is_ed25519(self, okp_keys: SigningKeyData) -> None:
        assert okp_keys.public_jwk["kty"] == "OKP"
        assert okp_keys.public_jwk["crv"] == "Ed25519"

    def test_kid_is_nonempty(self, rsa_keys: SigningKeyData) -> None:
        assert len(rsa_keys.kid) > 10

    def test_different_calls_produce_different_keys(self) -> None:
        kp1 = generate_keypair(KeyFamily.OKP)
        kp2 = generate_keypair(KeyFamily.OKP)
        assert kp1.kid != kp2.kid
        assert kp1.private_jwk["d"] != kp2.private_jwk["d"]


class TestPemToJWK:
    """Tests for PEM to JWK conversion."""

    def test_produces_valid_jwk(self) -> None:
        private_key = ec.generate_private_key(ec.SECP256R1())
        pem = (
            private_key.public_key()
            .public_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PublicFormat.SubjectPublicKeyInfo,
            )
            .decode()
        )
        jwk = pem_to_jwk(pem, "key-1")
        assert jwk["kty"] == "EC"
        assert jwk["use"] == "sig"
        assert jwk["kid"] == "key-1"
        assert jwk["x"]


class TestKeyMaterial:
    """Tests for encoded key material and key sets."""

    def test_encoded_jwk_decodes_back(self, okp_keys: SigningKeyData) -> None:
        text = encode_key_material(okp_keys.private_jwk)
        assert text_to_object(text) == okp_keys.private_jwk

    def test_build_key_set(
        self, rsa_keys: SigningKeyData, ec_keys: SigningKeyData
    ) -> None:
        key_set = build_key_set(rsa_keys.public_jwk, ec_keys.public_jwk)
        assert [k["kid"] for k in key_set.keys] == [rsa_keys.kid, ec_keys.kid]
