"""Error hierarchy and codes shared by signer, validator and middleware."""

from __future__ import annotations


class ErrorCode:
    ACCESS_KEY_EMPTY = "access_key_empty"
    ACCESS_KEY_INVALID = "access_key_invalid"
    KEY_RESOLUTION_FAILED = "key_resolution_failed"
    TIMESTAMP_EMPTY = "timestamp_empty"
    TIMESTAMP_INVALID = "timestamp_invalid"
    TIMESTAMP_EXPIRED = "timestamp_expired"
    SIGNATURE_EMPTY = "signature_empty"
    SIGNATURE_INVALID = "signature_invalid"
    BODY_HASH_MISSING = "body_hash_missing"
    BODY_INVALID = "body_invalid"
    BODY_READ_FAILED = "body_read_failed"
    REPLAY_DETECTED = "replay_detected"
    DECODING_FAILED = "decoding_failed"
    SIGNING_FAILED = "signing_failed"
    CLIENT_FAILED = "client_failed"


class AkskError(Exception):
    """Base error with a stable code and a message safe to show clients."""

    code = "error"
    default_message = "aksk error"
    status_code = 401

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class AuthError(AkskError):
    """A request failed authentication."""


class AccessKeyEmpty(AuthError):
    code = ErrorCode.ACCESS_KEY_EMPTY
    default_message = "access key is empty"


class AccessKeyInvalid(AuthError):
    code = ErrorCode.ACCESS_KEY_INVALID
    default_message = "access key is invalid"


class KeyResolutionError(AccessKeyInvalid):
    """The key resolver raised while looking up a secret."""

    code = ErrorCode.KEY_RESOLUTION_FAILED
    default_message = "access key lookup failed"


class TimestampEmpty(AuthError):
    code = ErrorCode.TIMESTAMP_EMPTY
    default_message = "timestamp is empty"


class TimestampInvalid(AuthError):
    code = ErrorCode.TIMESTAMP_INVALID
    default_message = "timestamp is invalid"


class TimestampExpired(AuthError):
    code = ErrorCode.TIMESTAMP_EXPIRED
    default_message = "timestamp expired"


class SignatureEmpty(AuthError):
    code = ErrorCode.SIGNATURE_EMPTY
    default_message = "signature is empty"


class SignatureInvalid(AuthError):
    code = ErrorCode.SIGNATURE_INVALID
    default_message = "signature is invalid"


class BodyHashMissing(AuthError):
    code = ErrorCode.BODY_HASH_MISSING
    default_message = "body hash is missing"


class BodyInvalid(AuthError):
    code = ErrorCode.BODY_INVALID
    default_message = "body is invalid"


class BodyReadError(AuthError):
    code = ErrorCode.BODY_READ_FAILED
    default_message = "failed to read request body"


class ReplayDetected(AuthError):
    code = ErrorCode.REPLAY_DETECTED
    default_message = "request was already seen"


class DecodingError(AkskError):
    """Input is not valid for the configured encoder."""

    code = ErrorCode.DECODING_FAILED
    default_message = "malformed encoded value"
    status_code = 400


class SigningError(AkskError):
    """An outgoing request could not be signed."""

    code = ErrorCode.SIGNING_FAILED
    default_message = "failed to sign request"
    status_code = 500


class SigningClientError(AkskError):
    """Error sending a signed request."""

    code = ErrorCode.CLIENT_FAILED
    default_message = "signed request failed"
    status_code = 502

    def __init__(self, message: str | None = None, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
