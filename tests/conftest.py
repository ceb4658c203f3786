"""Shared test fixtures for keysmith."""

import pytest

from keysmith.core.clock import fixed_clock
from keysmith.core.settings import KeysSettings
from keysmith.crypto.jwt_manager import JWTManager
from keysmith.crypto.keys import KeyFamily, generate_keypair
from keysmith.crypto.types import SigningKeyData

# 2021-01-01T00:00:00Z
NOW = 1609459200


@pytest.fixture(autouse=True)
def _set_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin environment-driven settings for tests."""
    monkeypatch.setenv("KEYS_TOKEN_TTL", "3600")
    monkeypatch.delenv("KEYS_KEY_SET_TIMEOUT", raising=False)


@pytest.fixture
def manager() -> JWTManager:
    """A JWTManager whose clock is frozen at NOW."""
    return JWTManager(clock=fixed_clock(NOW), settings=KeysSettings())


@pytest.fixture(scope="session")
def rsa_keys() -> SigningKeyData:
    return generate_keypair(KeyFamily.RSA)


@pytest.fixture(scope="session")
def ec_keys() -> SigningKeyData:
    return generate_keypair(KeyFamily.EC)


@pytest.fixture(scope="session")
def okp_keys() -> SigningKeyData:
    return generate_keypair(KeyFamily.OKP)
