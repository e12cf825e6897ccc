"""Server-side request validation."""

from __future__ import annotations

import io
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import IO, Any, Union

from aksk.common.errors import (
    AccessKeyEmpty,
    AccessKeyInvalid,
    BodyReadError,
    KeyResolutionError,
    ReplayDetected,
    SignatureEmpty,
)
from aksk.common.logging import get_logger
from aksk.common.replay import NonceCache
from aksk.core.auth import Auth
from aksk.request.headers import SignatureHeaders

logger = get_logger(__name__)

KeyResolver = Callable[[str], Union[str, None]]
"""Looks up the secret key for an access key; "" or None means unknown."""


class BufferedBody:
    """
    Buffers a read-once body so it can be hashed and then read again.

    The stream is read on the first call to read_all(); replay() returns a
    fresh readable view of the same bytes.
    """

    def __init__(self, source: bytes | bytearray | IO[bytes] | None):
        self._source = source
        self._data: bytes | None = None

    @property
    def consumed(self) -> bool:
        return self._data is not None

    def read_all(self) -> bytes:
        if self._data is None:
            source = self._source
            if source is None:
                self._data = b""
            elif isinstance(source, (bytes, bytearray)):
                self._data = bytes(source)
            else:
                try:
                    self._data = bytes(source.read())
                except OSError as e:
                    raise BodyReadError() from e
        return self._data

    def replay(self) -> io.BytesIO:
        return io.BytesIO(self.read_all())


@dataclass(frozen=True)
class AuthenticatedRequest:
    """Result of a successful validation."""

    access_key: str
    headers: SignatureHeaders
    body: Any = None


class RequestValidator:
    """Verifies signature headers and body hashes of incoming requests."""

    def __init__(
        self,
        key_resolver: KeyResolver,
        auth: Auth | None = None,
        skip_body: bool = False,
        replay_cache: NonceCache | None = None,
    ) -> None:
        if key_resolver is None:
            raise ValueError("key_resolver is required")
        self._key_resolver = key_resolver
        self._auth = auth or Auth()
        self._skip_body = skip_body
        self._replay_cache = replay_cache

    @property
    def auth(self) -> Auth:
        return self._auth

    @property
    def skip_body(self) -> bool:
        return self._skip_body

    def _resolve_secret(self, access_key: str) -> str:
        try:
            secret = self._key_resolver(access_key)
        except Exception as e:
            logger.warning("Key resolver failed", access_key=access_key, error=type(e).__name__)
            raise KeyResolutionError() from e
        if not secret:
            raise AccessKeyInvalid()
        return secret

    def validate_headers(self, headers: Mapping[str, str]) -> SignatureHeaders:
        """
        Check identity, freshness and signature.

        Raises:
            AccessKeyEmpty, AccessKeyInvalid, KeyResolutionError,
            TimestampEmpty, TimestampInvalid, TimestampExpired,
            SignatureEmpty, SignatureInvalid
        """
        bundle = SignatureHeaders.from_headers(headers)
        if not bundle.access_key:
            raise AccessKeyEmpty()
        secret = self._resolve_secret(bundle.access_key)
        self._auth.parse_timestamp(bundle.timestamp)
        if not bundle.signature:
            raise SignatureEmpty()
        self._auth.valid_signature(secret, bundle.signature, *bundle.elements)
        return bundle

    def validate_body(self, body: bytes | None, bundle: SignatureHeaders) -> None:
        """Check the body against the signed body hash unless body checks are skipped."""
        if self._skip_body:
            return
        self._auth.valid_body(body, bundle.body_hash)

    def check_replay(self, bundle: SignatureHeaders) -> None:
        """
        Record a fully verified request in the replay cache, if one is set.

        Call only after validate_body has passed.

        Raises:
            ReplayDetected: the same access key, nonce and timestamp were seen
        """
        if self._replay_cache is None:
            return
        if not self._replay_cache.check_and_store(bundle.access_key, bundle.nonce, bundle.timestamp):
            raise ReplayDetected()

    def validate(
        self,
        headers: Mapping[str, str],
        body: bytes | bytearray | IO[bytes] | None = None,
    ) -> AuthenticatedRequest:
        """
        Validate a request.

        The body is only read after the headers verify. The returned request
        carries a fresh readable view of the buffered body, or the original
        body object when body checks are skipped.
        """
        bundle = self.validate_headers(headers)
        if self._skip_body:
            self.check_replay(bundle)
            return AuthenticatedRequest(access_key=bundle.access_key, headers=bundle, body=body)

        buffered = BufferedBody(body)
        self.validate_body(buffered.read_all(), bundle)
        self.check_replay(bundle)
        return AuthenticatedRequest(
            access_key=bundle.access_key,
            headers=bundle,
            body=buffered.replay(),
        )
