"""RS256 tokens and team API keys minted from an encoded private JWK."""

from typing import Any

from keysmith.core.errors import PreconditionError
from keysmith.crypto.algorithms import IMPORT_PARAMS
from keysmith.crypto.codec import text_to_object
from keysmith.crypto.jwt_manager import JWTManager
from keysmith.crypto.types import JwtAlg, KeyUsage


def _mint(
    manager: JWTManager,
    private_key: str,
    ttl_secs: int | None,
    claims: dict[str, Any],
) -> str:
    jwk = text_to_object(private_key)
    if jwk.get("kty") != "RSA":
        raise PreconditionError(
            "private key must be an RSA JWK",
            reason="key-shape",
            details={"kty": jwk.get("kty")},
        )
    handle = manager.import_key(jwk, KeyUsage.SIGN, IMPORT_PARAMS[JwtAlg.RS256])
    now = manager.now()
    payload = {**claims, "iat": now}
    if ttl_secs:
        payload["exp"] = now + ttl_secs
    kid = jwk.get("kid")
    return manager.sign(
        payload,
        handle,
        algorithm=JwtAlg.RS256,
        kid=kid if isinstance(kid, str) else None,
    )


def create_token(
    private_key: str,
    *,
    ttl_secs: int | None = None,
    claims: dict[str, Any] | None = None,
    manager: JWTManager | None = None,
) -> str:
    """Sign ``claims`` with RS256 using a base64url-encoded private JWK.

    ``exp`` is only set when ``ttl_secs`` is given.
    """
    manager = manager or JWTManager()
    return _mint(manager, private_key, ttl_secs, claims or {})


def create_api_key(
    private_key: str,
    *,
    team_id: str,
    ttl_secs: int | None = None,
    claims: dict[str, Any] | None = None,
    manager: JWTManager | None = None,
) -> str:
    """Mint an API key for ``team_id``, carried as the ``tid`` claim.

    API keys are stamped with ``iat`` like any token; pass ``ttl_secs`` for an
    ``exp``. Without it the key does not expire.
    """
    if not isinstance(team_id, str) or not team_id:
        raise PreconditionError(
            "team_id must be a non-empty string", reason="team_id"
        )
    manager = manager or JWTManager()
    return _mint(
        manager,
        private_key,
        ttl_secs,
        {**(claims or {}), "tid": team_id},
    )
