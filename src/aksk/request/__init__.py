"""Request signing (client) and validation (server)."""

from aksk.request.headers import (
    HEADER_ACCESS_KEY,
    HEADER_BODY_HASH,
    HEADER_RANDOM_STR,
    HEADER_SIGNATURE,
    HEADER_TIMESTAMP,
    SignatureHeaders,
)
from aksk.request.signer import RequestSigner, SignedRequest, SigningClient
from aksk.request.validator import (
    AuthenticatedRequest,
    BufferedBody,
    KeyResolver,
    RequestValidator,
)

__all__ = [
    "HEADER_ACCESS_KEY",
    "HEADER_TIMESTAMP",
    "HEADER_SIGNATURE",
    "HEADER_BODY_HASH",
    "HEADER_RANDOM_STR",
    "SignatureHeaders",
    "RequestSigner",
    "SignedRequest",
    "SigningClient",
    "AuthenticatedRequest",
    "BufferedBody",
    "KeyResolver",
    "RequestValidator",
]
