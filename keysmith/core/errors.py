"""Error taxonomy for token signing and verification."""

from enum import StrEnum
from typing import Any, ClassVar

from jwt.exceptions import PyJWTError


class ErrorKind(StrEnum):
    """Machine-readable failure category."""

    VALIDATION = "validation"
    DECODE = "decode"
    ENCODE = "encode"
    ASSERTION = "assertion"
    TOKEN_VALIDATION = "token_validation"
    TOKEN_EXPIRED = "token_expired"
    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    KEY_NOT_FOUND = "key_not_found"
    KEY_SET_FETCH = "key_set_fetch"
    SIGNATURE_INVALID = "signature_invalid"


class KeysmithError(PyJWTError):
    """Base error carrying a kind, an optional reason tag and diagnostics."""

    kind: ClassVar[ErrorKind]

    def __init__(
        self,
        message: str,
        *,
        reason: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.reason = reason
        self.details = details or {}
        super().__init__(message)


class ValidationError(KeysmithError):
    """Malformed structural input."""

    kind = ErrorKind.VALIDATION


class DecodeError(ValidationError):
    """Text is not valid base64url."""

    kind = ErrorKind.DECODE


class EncodeError(KeysmithError):
    """Value cannot be represented as JSON."""

    kind = ErrorKind.ENCODE


class PreconditionError(ValidationError):
    """An argument violates a required shape."""

    kind = ErrorKind.ASSERTION


class TokenValidationError(ValidationError):
    """Token-specific structural defect."""

    kind = ErrorKind.TOKEN_VALIDATION


class TokenExpiredError(TokenValidationError):
    """Token is expired or not yet valid; see ``reason``."""

    kind = ErrorKind.TOKEN_EXPIRED


class UnsupportedAlgorithmError(KeysmithError):
    """Key type, curve or algorithm outside the supported set."""

    kind = ErrorKind.UNSUPPORTED_ALGORITHM


class KeyNotFoundError(KeysmithError):
    """No key in the key set matches the token's kid."""

    kind = ErrorKind.KEY_NOT_FOUND


class KeySetFetchError(KeysmithError):
    """Key set could not be retrieved."""

    kind = ErrorKind.KEY_SET_FETCH


class SignatureInvalidError(KeysmithError):
    """Signature did not verify against the key."""

    kind = ErrorKind.SIGNATURE_INVALID
