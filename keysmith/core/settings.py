"""Library settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict

TOKEN_TTL_DEFAULT = 3600


class KeysSettings(BaseSettings):
    """Token issuance and key-set retrieval settings."""

    model_config = SettingsConfigDict(env_prefix="KEYS_")

    token_ttl: int = TOKEN_TTL_DEFAULT
    key_set_timeout: float | None = None
