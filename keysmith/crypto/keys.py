"""Signing key generation and JWK conversion."""

from enum import StrEnum
from typing import Any

import uuid_utils
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa
from jwt.algorithms import ECAlgorithm, OKPAlgorithm, RSAAlgorithm

from keysmith.crypto.codec import object_to_text
from keysmith.crypto.types import JwtAlg, KeySetDocument, SigningKeyData

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537

_EC_CURVES: dict[str, type[ec.EllipticCurve]] = {
    "P-256": ec.SECP256R1,
    "P-384": ec.SECP384R1,
    "P-521": ec.SECP521R1,
}


class KeyFamily(StrEnum):
    """Key types that can be generated."""

    RSA = "RSA"
    EC = "EC"
    OKP = "OKP"


def _to_jwk(key: Any) -> dict[str, Any]:
    if isinstance(key, rsa.RSAPrivateKey | rsa.RSAPublicKey):
        # RSA keys declare their algorithm so they can be resolved on import
        return {**RSAAlgorithm.to_jwk(key, as_dict=True), "alg": str(JwtAlg.RS256)}
    if isinstance(key, ec.EllipticCurvePrivateKey | ec.EllipticCurvePublicKey):
        return ECAlgorithm.to_jwk(key, as_dict=True)
    if isinstance(key, ed25519.Ed25519PrivateKey | ed25519.Ed25519PublicKey):
        return OKPAlgorithm.to_jwk(key, as_dict=True)
    raise TypeError(f"unsupported key type {type(key).__name__}")


def generate_keypair(
    family: KeyFamily = KeyFamily.RSA, curve: str = "P-256"
) -> SigningKeyData:
    """Generate a new keypair and export both halves as JWKs."""
    private_key: Any
    match family:
        case KeyFamily.RSA:
            private_key = rsa.generate_private_key(
                public_exponent=RSA_PUBLIC_EXPONENT,
                key_size=RSA_KEY_SIZE,
            )
        case KeyFamily.EC:
            private_key = ec.generate_private_key(_EC_CURVES[curve]())
        case KeyFamily.OKP:
            private_key = ed25519.Ed25519PrivateKey.generate()
    kid = str(uuid_utils.uuid7())
    return SigningKeyData(
        kid=kid,
        private_jwk={**_to_jwk(private_key), "kid": kid},
        public_jwk={**_to_jwk(private_key.public_key()), "kid": kid},
    )


def pem_to_jwk(public_key_pem: str, kid: str) -> dict[str, Any]:
    """Convert a PEM public key to JWK format."""
    loaded = serialization.load_pem_public_key(public_key_pem.encode())
    return {**_to_jwk(loaded), "use": "sig", "kid": kid}


def encode_key_material(jwk: dict[str, Any]) -> str:
    """Encode a JWK as base64url JSON text, the form accepted as key material."""
    return object_to_text(jwk)


def build_key_set(*jwks: dict[str, Any]) -> KeySetDocument:
    """Bundle public JWKs into a key set document."""
    return KeySetDocument(keys=list(jwks))
