"""JWT signing and verification over injected crypto and clock."""

import math
from typing import Any

from keysmith.core.clock import Clock, system_clock
from keysmith.core.errors import (
    EncodeError,
    PreconditionError,
    SignatureInvalidError,
    TokenExpiredError,
    TokenValidationError,
)
from keysmith.core.settings import KeysSettings
from keysmith.crypto import jwt_codec
from keysmith.crypto.algorithms import (
    default_algorithm,
    describe_key,
    resolve_import_params,
    resolve_signing_params,
)
from keysmith.crypto.codec import encode, text_to_object
from keysmith.crypto.provider import CryptoProvider, DefaultCryptoProvider
from keysmith.crypto.types import (
    DecodedToken,
    ImportParams,
    JwtAlg,
    KeyDescription,
    KeyHandle,
    KeyMaterial,
    KeyUsage,
    VerifiedToken,
)

NONE_ALG = "none"


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


class JWTManager:
    """Creates and verifies signed JWTs.

    Every call re-resolves parameters and re-imports the key; nothing is
    cached between calls.
    """

    def __init__(
        self,
        crypto: CryptoProvider | None = None,
        clock: Clock | None = None,
        settings: KeysSettings | None = None,
    ) -> None:
        self._crypto = crypto or DefaultCryptoProvider()
        self._clock = clock or system_clock
        self._settings = settings or KeysSettings()

    def now(self) -> int:
        """Current time from the injected clock."""
        return self._clock()

    def import_key(
        self,
        key: KeyMaterial,
        usage: KeyUsage,
        params: ImportParams | None = None,
    ) -> KeyHandle:
        """Normalize ``key`` into a handle scoped to ``usage``.

        Text is treated as a base64url-encoded JWK.
        """
        if isinstance(key, KeyHandle):
            if key.usage is not usage:
                raise PreconditionError(
                    f"key handle is scoped to {key.usage}, not {usage}",
                    reason="key-usage",
                )
            return key
        if isinstance(key, str):
            key = text_to_object(key)
        if not isinstance(key, dict | KeyDescription):
            raise PreconditionError(
                "key must be a KeyHandle, JWK object or encoded JWK",
                reason="key-shape",
                details={"type": type(key).__name__},
            )
        description = describe_key(key)
        params = params or resolve_import_params(description)
        return self._crypto.import_key(description, params, usage)

    def sign(
        self,
        payload: dict[str, Any],
        key: KeyMaterial,
        *,
        algorithm: JwtAlg | None = None,
        kid: str | None = None,
    ) -> str:
        """Sign a ready-made payload. ``algorithm`` defaults to the key family's."""
        handle = self.import_key(key, KeyUsage.SIGN)
        alg = algorithm or default_algorithm(handle.params)
        header: dict[str, Any] = {"alg": str(alg)}
        if kid:
            header["kid"] = kid
        signing_input = jwt_codec.encode_token(header, payload)
        signature = self._crypto.sign(
            resolve_signing_params(alg, handle.params),
            handle,
            signing_input.encode(),
        )
        return f"{signing_input}.{encode(signature)}"

    def sign_token(
        self,
        key: KeyMaterial,
        *,
        kid: str,
        claims: dict[str, Any] | None = None,
        ttl_secs: int | None = None,
    ) -> str:
        """Sign ``claims`` with ``iat`` and ``exp = iat + ttl_secs``."""
        if not isinstance(kid, str) or not kid:
            raise PreconditionError(
                "kid must be a non-empty string", reason="kid", details={"kid": kid}
            )
        ttl = self._settings.token_ttl if ttl_secs is None else ttl_secs
        if not isinstance(ttl, int) or isinstance(ttl, bool) or ttl <= 0:
            raise PreconditionError(
                "ttl_secs must be a positive integer",
                reason="ttl",
                details={"ttl_secs": ttl},
            )
        payload = dict(claims or {})
        iat = payload.get("iat")
        if _is_number(iat) and not math.isfinite(iat):
            raise EncodeError(
                "iat must be a finite number", reason="iat", details={"iat": iat}
            )
        iat = int(iat) if _is_number(iat) else self.now()
        payload["iat"] = iat
        payload["exp"] = iat + ttl
        return self.sign(payload, key, kid=kid)

    def check_time_claims(self, decoded: DecodedToken) -> None:
        """Reject tokens outside their ``nbf``/``exp`` window."""
        now = self.now()
        nbf = decoded.payload.nbf
        exp = decoded.payload.exp
        if nbf is not None and nbf > now:
            raise TokenExpiredError(
                "token is not yet valid",
                reason="not-yet-valid",
                details={"nbf": nbf, "now": now},
            )
        if exp is not None and exp <= now:
            raise TokenExpiredError(
                "token has expired",
                reason="expired",
                details={"exp": exp, "now": now},
            )

    def verify_token(self, key: KeyMaterial, token: str) -> VerifiedToken:
        """Verify ``token`` against ``key`` and return its header and payload."""
        if not isinstance(token, str):
            raise PreconditionError(
                "token must be a string",
                reason="token",
                details={"type": type(token).__name__},
            )
        decoded = jwt_codec.decode_token(token)
        self.check_time_claims(decoded)
        alg = decoded.header.alg
        if alg.lower() == NONE_ALG:
            raise TokenValidationError(
                "unsecured tokens are not accepted",
                reason="alg-none",
                details={"alg": alg},
            )
        handle = self.import_key(key, KeyUsage.VERIFY)
        params = resolve_signing_params(alg, handle.params)
        if not self._crypto.verify(
            params, handle, decoded.signature, decoded.signed_data
        ):
            raise SignatureInvalidError(
                "token signature did not verify",
                details={"alg": alg, "kid": decoded.header.kid},
            )
        return VerifiedToken(header=decoded.header, payload=decoded.payload)


def decode_token(token: str) -> DecodedToken:
    """Decode without verifying; for inspection only."""
    return jwt_codec.decode_token(token)


def sign_token(
    key: KeyMaterial,
    *,
    kid: str,
    claims: dict[str, Any] | None = None,
    ttl_secs: int | None = None,
) -> str:
    """Sign with a manager built from environment settings."""
    return JWTManager().sign_token(key, kid=kid, claims=claims, ttl_secs=ttl_secs)


def verify_token(key: KeyMaterial, token: str) -> VerifiedToken:
    """Verify with a manager built from environment settings."""
    return JWTManager().verify_token(key, token)
