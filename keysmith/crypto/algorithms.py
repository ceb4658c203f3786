"""Algorithm tables and key parameter resolution.

Import parameters load a key into a usable handle; signing parameters drive
each sign or verify call. The two coincide for RSA and HMAC but differ for
EC, where import needs the curve and signing needs the hash.
"""

from typing import Any

import pydantic

from keysmith.core.errors import PreconditionError, UnsupportedAlgorithmError
from keysmith.crypto.types import (
    EcdsaImportParams,
    EcdsaSigningParams,
    EdDsaImportParams,
    EdDsaSigningParams,
    HmacImportParams,
    HmacSigningParams,
    ImportParams,
    JwtAlg,
    KeyDescription,
    RsaImportParams,
    RsaSigningParams,
    SigningParams,
)

IMPORT_PARAMS: dict[JwtAlg, ImportParams] = {
    JwtAlg.ES256: EcdsaImportParams(named_curve="P-256"),
    JwtAlg.ES384: EcdsaImportParams(named_curve="P-384"),
    JwtAlg.ES512: EcdsaImportParams(named_curve="P-521"),
    JwtAlg.HS256: HmacImportParams(hash="SHA-256"),
    JwtAlg.HS384: HmacImportParams(hash="SHA-384"),
    JwtAlg.HS512: HmacImportParams(hash="SHA-512"),
    JwtAlg.RS256: RsaImportParams(hash="SHA-256"),
    JwtAlg.RS384: RsaImportParams(hash="SHA-384"),
    JwtAlg.RS512: RsaImportParams(hash="SHA-512"),
    # Ed448 is not supported
    JwtAlg.EDDSA: EdDsaImportParams(),
}

SIGNING_PARAMS: dict[JwtAlg, SigningParams] = {
    JwtAlg.ES256: EcdsaSigningParams(hash="SHA-256"),
    JwtAlg.ES384: EcdsaSigningParams(hash="SHA-384"),
    JwtAlg.ES512: EcdsaSigningParams(hash="SHA-512"),
    JwtAlg.HS256: HmacSigningParams(hash="SHA-256"),
    JwtAlg.HS384: HmacSigningParams(hash="SHA-384"),
    JwtAlg.HS512: HmacSigningParams(hash="SHA-512"),
    JwtAlg.RS256: RsaSigningParams(hash="SHA-256"),
    JwtAlg.RS384: RsaSigningParams(hash="SHA-384"),
    JwtAlg.RS512: RsaSigningParams(hash="SHA-512"),
    JwtAlg.EDDSA: EdDsaSigningParams(),
}

_EC_CURVES = {
    "P-256": JwtAlg.ES256,
    "P-384": JwtAlg.ES384,
    "P-521": JwtAlg.ES512,
}

_FAMILY_ALGS: dict[str, frozenset[JwtAlg]] = {
    "EC": frozenset({JwtAlg.ES256, JwtAlg.ES384, JwtAlg.ES512}),
    "RSA": frozenset({JwtAlg.RS256, JwtAlg.RS384, JwtAlg.RS512}),
    "OKP": frozenset({JwtAlg.EDDSA}),
    "oct": frozenset({JwtAlg.HS256, JwtAlg.HS384, JwtAlg.HS512}),
}

_DEFAULT_ALGS = {
    "EC": JwtAlg.ES256,
    "RSA": JwtAlg.RS256,
    "OKP": JwtAlg.EDDSA,
    "oct": JwtAlg.HS256,
}


def describe_key(key: KeyDescription | dict[str, Any]) -> KeyDescription:
    """Validate a JWK mapping into a KeyDescription."""
    if isinstance(key, KeyDescription):
        return key
    try:
        return KeyDescription.model_validate(key)
    except pydantic.ValidationError as exc:
        raise PreconditionError(
            "key description must be a JWK object with a string kty",
            reason="key-shape",
            details={"errors": exc.errors(include_url=False)},
        ) from exc


def _require(key: KeyDescription, member: str) -> str:
    value = getattr(key, member)
    if not isinstance(value, str):
        raise PreconditionError(
            f"{key.kty} key must have a {member} member",
            reason="key-shape",
            details={"kty": key.kty, "member": member},
        )
    return value


def resolve_import_params(key: KeyDescription | dict[str, Any]) -> ImportParams:
    """Derive the parameters needed to import ``key``."""
    key = describe_key(key)
    match key.kty:
        case "EC":
            crv = _require(key, "crv")
            if crv not in _EC_CURVES:
                raise UnsupportedAlgorithmError(
                    f"Unsupported EC crv {crv!r}", details={"crv": crv}
                )
            return IMPORT_PARAMS[_EC_CURVES[crv]]
        case "RSA":
            alg = _require(key, "alg")
            if alg not in (JwtAlg.RS256, JwtAlg.RS384, JwtAlg.RS512):
                raise UnsupportedAlgorithmError(
                    f"Unsupported RSA alg {alg!r}", details={"alg": alg}
                )
            return IMPORT_PARAMS[JwtAlg(alg)]
        case "OKP":
            crv = _require(key, "crv")
            if crv != "Ed25519":
                raise UnsupportedAlgorithmError(
                    f"Unsupported OKP crv {crv!r}", details={"crv": crv}
                )
            return IMPORT_PARAMS[JwtAlg.EDDSA]
        case _:
            raise UnsupportedAlgorithmError(
                f"Unsupported key type {key.kty!r}", details={"kty": key.kty}
            )


def resolve_signing_params(alg: str, params: ImportParams) -> SigningParams:
    """Map a declared ``alg`` to signing parameters for a key of ``params``'s family."""
    family = params.kty
    if alg not in _FAMILY_ALGS[family]:
        raise UnsupportedAlgorithmError(
            f"Unsupported {family} alg {alg!r}",
            details={"alg": alg, "kty": family},
        )
    return SIGNING_PARAMS[JwtAlg(alg)]


def resolve_key_signing_params(
    alg: str, key: KeyDescription | dict[str, Any]
) -> SigningParams:
    """Signing parameters for ``alg`` checked against a key description."""
    return resolve_signing_params(alg, resolve_import_params(key))


def default_algorithm(params: ImportParams) -> JwtAlg:
    """The canonical algorithm for a key family."""
    return _DEFAULT_ALGS[params.kty]
