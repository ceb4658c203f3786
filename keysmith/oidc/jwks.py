"""Token verification against a remote JSON Web Key Set."""

import json
import logging

import httpx
import pydantic

from keysmith.core.errors import (
    KeyNotFoundError,
    KeySetFetchError,
    PreconditionError,
    TokenValidationError,
    ValidationError,
)
from keysmith.core.settings import KeysSettings
from keysmith.crypto.jwt_codec import decode_token
from keysmith.crypto.jwt_manager import NONE_ALG, JWTManager
from keysmith.crypto.types import KeySetDocument, VerifiedToken

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


class KeySetVerifier:
    """Verifies tokens with the key set entry matching their ``kid``.

    The key set is fetched on every call so rotated keys are picked up
    immediately.
    """

    def __init__(
        self,
        manager: JWTManager | None = None,
        client: httpx.AsyncClient | None = None,
        settings: KeysSettings | None = None,
    ) -> None:
        self._settings = settings or KeysSettings()
        self._manager = manager or JWTManager(settings=self._settings)
        self._client = client

    async def fetch_key_set(self, key_set_uri: str | httpx.URL) -> KeySetDocument:
        """GET and validate the key set document."""
        if self._client is not None:
            response = await self._client.get(key_set_uri)
        else:
            async with httpx.AsyncClient(
                timeout=self._settings.key_set_timeout
            ) as client:
                response = await client.get(key_set_uri)

        content_type = response.headers.get("content-type")
        if not response.is_success or not (content_type or "").startswith(
            JSON_CONTENT_TYPE
        ):
            raise KeySetFetchError(
                "Failed to fetch key set",
                details={
                    "status": response.status_code,
                    "content_type": content_type,
                    "status_text": response.reason_phrase,
                },
            )
        try:
            return KeySetDocument.model_validate(response.json())
        except (json.JSONDecodeError, pydantic.ValidationError) as exc:
            raise ValidationError(
                "key set must be an object with a keys array of objects",
                details={"key_set_uri": str(key_set_uri)},
            ) from exc

    async def verify(
        self, token: str, key_set_uri: str | httpx.URL
    ) -> VerifiedToken:
        """Verify ``token`` using the key named by its ``kid``."""
        if not isinstance(token, str):
            raise PreconditionError(
                "token must be a string",
                reason="token",
                details={"type": type(token).__name__},
            )
        header = decode_token(token).header
        if not isinstance(header.kid, str):
            raise PreconditionError(
                "token header must carry a kid", reason="kid"
            )
        if header.alg.lower() == NONE_ALG:
            raise TokenValidationError(
                "unsecured tokens are not accepted",
                reason="alg-none",
                details={"alg": header.alg},
            )

        logger.debug("fetching key set %s for kid %s", key_set_uri, header.kid)
        key_set = await self.fetch_key_set(key_set_uri)
        key = next(
            (k for k in key_set.keys if k.get("kid") == header.kid), None
        )
        if key is None:
            raise KeyNotFoundError(
                "No usable key found for verification",
                details={
                    "kid": header.kid,
                    "key_set_uri": str(key_set_uri),
                    "keys_count": len(key_set.keys),
                },
            )
        logger.debug("matched kid %s in key set %s", header.kid, key_set_uri)
        return self._manager.verify_token(key, token)


async def verify_token_with_key_set(
    token: str,
    key_set_uri: str | httpx.URL,
    *,
    client: httpx.AsyncClient | None = None,
) -> VerifiedToken:
    """Verify ``token`` against the key set published at ``key_set_uri``."""
    return await KeySetVerifier(client=client).verify(token, key_set_uri)
