"""Type definitions for keys, algorithm parameters, and JWT values."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, StrictInt

TOKEN_TYPE = "JWT"


class JwtAlg(StrEnum):
    """Supported JWS algorithm identifiers."""

    ES256 = "ES256"
    ES384 = "ES384"
    ES512 = "ES512"
    EDDSA = "EdDSA"
    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"


class KeyUsage(StrEnum):
    """The single operation an imported key may perform."""

    SIGN = "sign"
    VERIFY = "verify"


HashName = Literal["SHA-256", "SHA-384", "SHA-512"]


class _Params(BaseModel):
    model_config = ConfigDict(frozen=True)


class EcdsaImportParams(_Params):
    """Import parameters for an EC key."""

    name: Literal["ECDSA"] = "ECDSA"
    named_curve: Literal["P-256", "P-384", "P-521"]

    @property
    def kty(self) -> str:
        return "EC"


class RsaImportParams(_Params):
    """Import parameters for an RSASSA-PKCS1-v1_5 key."""

    name: Literal["RSASSA-PKCS1-v1_5"] = "RSASSA-PKCS1-v1_5"
    hash: HashName

    @property
    def kty(self) -> str:
        return "RSA"


class HmacImportParams(_Params):
    """Import parameters for a symmetric HMAC key."""

    name: Literal["HMAC"] = "HMAC"
    hash: HashName

    @property
    def kty(self) -> str:
        return "oct"


class EdDsaImportParams(_Params):
    """Import parameters for an edwards-curve key."""

    name: Literal["Ed25519"] = "Ed25519"

    @property
    def kty(self) -> str:
        return "OKP"


class EcdsaSigningParams(_Params):
    name: Literal["ECDSA"] = "ECDSA"
    hash: HashName


class RsaSigningParams(_Params):
    name: Literal["RSASSA-PKCS1-v1_5"] = "RSASSA-PKCS1-v1_5"
    hash: HashName


class HmacSigningParams(_Params):
    name: Literal["HMAC"] = "HMAC"
    hash: HashName


class EdDsaSigningParams(_Params):
    name: Literal["Ed25519"] = "Ed25519"


ImportParams = (
    EcdsaImportParams | RsaImportParams | HmacImportParams | EdDsaImportParams
)
SigningParams = (
    EcdsaSigningParams | RsaSigningParams | HmacSigningParams | EdDsaSigningParams
)


@dataclass(frozen=True)
class KeyHandle:
    """A key imported for exactly one usage.

    ``key`` is the underlying ``cryptography`` key object, or raw bytes for
    HMAC secrets.
    """

    key: Any
    usage: KeyUsage
    params: ImportParams
    kid: str | None = None


class KeyDescription(BaseModel):
    """A JWK-shaped key description; unknown members pass through."""

    model_config = ConfigDict(extra="allow")

    kty: str
    crv: str | None = None
    alg: str | None = None
    kid: str | None = None

    def to_jwk(self) -> dict[str, Any]:
        """Return the JWK members exactly as supplied."""
        return self.model_dump(exclude_unset=True)


KeyMaterial = KeyHandle | KeyDescription | dict[str, Any] | str


class JwtHeader(BaseModel):
    """JOSE header."""

    model_config = ConfigDict(extra="allow")

    typ: str | None = None
    alg: str
    kid: str | None = None


class JwtPayload(BaseModel):
    """Registered claims plus arbitrary caller claims."""

    model_config = ConfigDict(extra="allow")

    iss: str | None = None
    sub: str | None = None
    aud: str | list[str] | None = None
    exp: StrictInt | None = None
    nbf: StrictInt | None = None
    iat: StrictInt | None = None
    jti: str | None = None


class DecodedToken(BaseModel):
    """A token split into its parts. Nothing here has been verified."""

    header: JwtHeader
    payload: JwtPayload
    signature: bytes
    signed_data: bytes


class VerifiedToken(BaseModel):
    """Header and payload of a token whose signature checked out."""

    header: JwtHeader
    payload: JwtPayload

    def as_dict(self) -> dict[str, dict[str, Any]]:
        """Plain header/payload mappings as they appeared on the wire."""
        return {
            "header": self.header.model_dump(exclude_unset=True),
            "payload": self.payload.model_dump(exclude_unset=True),
        }


class SigningKeyData(BaseModel):
    """A generated keypair exported as JWKs."""

    kid: str
    private_jwk: dict[str, Any]
    public_jwk: dict[str, Any]


class KeySetDocument(BaseModel):
    """JSON Web Key Set document."""

    keys: list[dict[str, Any]]
