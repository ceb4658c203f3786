"""Cryptographic primitives: key import, sign and verify.

Keys are loaded from JWKs with PyJWT's algorithm loaders and operated on with
``cryptography``. ECDSA signatures use the JWS raw ``r || s`` form.
"""

from typing import Any, Protocol

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)
from jwt.algorithms import ECAlgorithm, HMACAlgorithm, OKPAlgorithm, RSAAlgorithm
from jwt.exceptions import InvalidKeyError

from keysmith.crypto.types import (
    EcdsaImportParams,
    EcdsaSigningParams,
    EdDsaImportParams,
    EdDsaSigningParams,
    HashName,
    HmacImportParams,
    HmacSigningParams,
    ImportParams,
    KeyDescription,
    KeyHandle,
    KeyUsage,
    RsaImportParams,
    RsaSigningParams,
    SigningParams,
)

_HASHES: dict[HashName, type[hashes.HashAlgorithm]] = {
    "SHA-256": hashes.SHA256,
    "SHA-384": hashes.SHA384,
    "SHA-512": hashes.SHA512,
}

_EC_CURVE_NAMES = {
    "P-256": "secp256r1",
    "P-384": "secp384r1",
    "P-521": "secp521r1",
}


class CryptoProvider(Protocol):
    """Capability for importing keys and producing/checking signatures."""

    def import_key(
        self, key: KeyDescription, params: ImportParams, usage: KeyUsage
    ) -> KeyHandle: ...

    def sign(self, params: SigningParams, handle: KeyHandle, data: bytes) -> bytes: ...

    def verify(
        self,
        params: SigningParams,
        handle: KeyHandle,
        signature: bytes,
        data: bytes,
    ) -> bool: ...


def _hash(name: HashName) -> hashes.HashAlgorithm:
    return _HASHES[name]()


def _scope(key: Any, usage: KeyUsage, private_type: type) -> Any:
    """Reduce ``key`` to what ``usage`` needs."""
    is_private = isinstance(key, private_type)
    if usage is KeyUsage.SIGN and not is_private:
        raise InvalidKeyError("signing requires a private key")
    if usage is KeyUsage.VERIFY and is_private:
        return key.public_key()
    return key


def _ec_size(key: ec.EllipticCurvePrivateKey | ec.EllipticCurvePublicKey) -> int:
    return (key.curve.key_size + 7) // 8


class DefaultCryptoProvider:
    """``CryptoProvider`` backed by ``cryptography``."""

    def import_key(
        self, key: KeyDescription, params: ImportParams, usage: KeyUsage
    ) -> KeyHandle:
        """Load ``key`` for a single ``usage``; handles are never extractable."""
        jwk = key.to_jwk()
        match params:
            case RsaImportParams():
                loaded = _scope(
                    RSAAlgorithm.from_jwk(jwk), usage, rsa.RSAPrivateKey
                )
            case EcdsaImportParams(named_curve=curve):
                loaded = _scope(
                    ECAlgorithm.from_jwk(jwk), usage, ec.EllipticCurvePrivateKey
                )
                if loaded.curve.name != _EC_CURVE_NAMES[curve]:
                    raise InvalidKeyError(f"key is not on curve {curve}")
            case EdDsaImportParams():
                loaded = OKPAlgorithm.from_jwk(jwk)
                if not isinstance(
                    loaded, ed25519.Ed25519PrivateKey | ed25519.Ed25519PublicKey
                ):
                    raise InvalidKeyError("key is not an Ed25519 key")
                loaded = _scope(loaded, usage, ed25519.Ed25519PrivateKey)
            case HmacImportParams():
                loaded = HMACAlgorithm.from_jwk(jwk)
            case _:
                raise InvalidKeyError(f"unsupported import parameters {params!r}")
        return KeyHandle(key=loaded, usage=usage, params=params, kid=key.kid)

    def sign(self, params: SigningParams, handle: KeyHandle, data: bytes) -> bytes:
        """Sign ``data`` with a sign-scoped handle."""
        if handle.usage is not KeyUsage.SIGN:
            raise InvalidKeyError("key handle is not usable for signing")
        key = handle.key
        match params:
            case RsaSigningParams(hash=name):
                return key.sign(data, padding.PKCS1v15(), _hash(name))
            case EcdsaSigningParams(hash=name):
                der = key.sign(data, ec.ECDSA(_hash(name)))
                r, s = decode_dss_signature(der)
                size = _ec_size(key)
                return r.to_bytes(size, "big") + s.to_bytes(size, "big")
            case EdDsaSigningParams():
                return key.sign(data)
            case HmacSigningParams(hash=name):
                mac = hmac.HMAC(key, _hash(name))
                mac.update(data)
                return mac.finalize()
            case _:
                raise InvalidKeyError(f"unsupported signing parameters {params!r}")

    def verify(
        self,
        params: SigningParams,
        handle: KeyHandle,
        signature: bytes,
        data: bytes,
    ) -> bool:
        """Check ``signature`` over ``data`` with a verify-scoped handle."""
        if handle.usage is not KeyUsage.VERIFY:
            raise InvalidKeyError("key handle is not usable for verification")
        key = handle.key
        try:
            match params:
                case RsaSigningParams(hash=name):
                    key.verify(signature, data, padding.PKCS1v15(), _hash(name))
                case EcdsaSigningParams(hash=name):
                    size = _ec_size(key)
                    if len(signature) != 2 * size:
                        return False
                    der = encode_dss_signature(
                        int.from_bytes(signature[:size], "big"),
                        int.from_bytes(signature[size:], "big"),
                    )
                    key.verify(der, data, ec.ECDSA(_hash(name)))
                case EdDsaSigningParams():
                    key.verify(signature, data)
                case HmacSigningParams(hash=name):
                    mac = hmac.HMAC(key, _hash(name))
                    mac.update(data)
                    mac.verify(signature)
                case _:
                    raise InvalidKeyError(f"unsupported signing parameters {params!r}")
        except InvalidSignature:
            return False
        return True
