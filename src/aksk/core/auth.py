"""Auth facade composing encoder, hasher and timestamp validator."""

from __future__ import annotations

import hmac
import time
from collections.abc import Callable, Iterable
from datetime import timedelta
from typing import TYPE_CHECKING

from aksk.common.errors import (
    BodyHashMissing,
    BodyInvalid,
    DecodingError,
    SignatureInvalid,
)
from aksk.core.encoding import Base64Encoder, Encoder, get_encoder
from aksk.core.hashing import HashAlgorithm, Hasher
from aksk.core.timestamp import TimestampValidator

if TYPE_CHECKING:
    from aksk.common.settings import Settings

DEFAULT_ACCEPTABLE_SKEW = timedelta(seconds=60)


class Auth:
    """
    Immutable signing context.

    One instance is built at startup and shared by every signing and
    verification call. Defaults: base64 encoding, SHA-256, 60 second skew.
    """

    __slots__ = ("_encoder", "_hasher", "_timestamps")

    def __init__(
        self,
        encoder: Encoder | str | None = None,
        hash_algorithm: HashAlgorithm | str = HashAlgorithm.SHA256,
        acceptable_skew: timedelta | float = DEFAULT_ACCEPTABLE_SKEW,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if encoder is None:
            encoder = Base64Encoder()
        elif isinstance(encoder, str):
            encoder = get_encoder(encoder)
        self._encoder = encoder
        self._hasher = Hasher(hash_algorithm)
        self._timestamps = TimestampValidator(acceptable_skew, clock)

    @classmethod
    def from_settings(cls, settings: Settings, clock: Callable[[], float] = time.time) -> Auth:
        return cls(
            encoder=settings.encoder,
            hash_algorithm=settings.hash_algorithm,
            acceptable_skew=timedelta(seconds=settings.acceptable_skew_seconds),
            clock=clock,
        )

    @property
    def encoder(self) -> Encoder:
        return self._encoder

    @property
    def hash_algorithm(self) -> HashAlgorithm:
        return self._hasher.algorithm

    @property
    def acceptable_skew(self) -> timedelta:
        return self._timestamps.acceptable_skew

    def __repr__(self) -> str:
        return (
            f"Auth(encoder={self._encoder.name!r}, hash_algorithm={self.hash_algorithm.value!r}, "
            f"acceptable_skew={self.acceptable_skew.total_seconds()}s)"
        )

    def sum(self, data: bytes) -> bytes:
        """Digest of data with the configured hash."""
        return self._hasher.digest(data)

    def encode_to_string(self, data: bytes) -> str:
        return self._encoder.encode(data)

    def decode_string(self, text: str) -> bytes:
        return self._encoder.decode(text)

    def hmac(self, secret: bytes | str, elements: Iterable[str]) -> bytes:
        """HMAC over the sorted, concatenated elements."""
        return self._hasher.hmac(secret, elements)

    def timestamp(self) -> str:
        """Current Unix seconds as a decimal string."""
        return str(self._timestamps.now())

    def parse_timestamp(self, timestamp: str) -> None:
        """Check a timestamp string against the skew window."""
        self._timestamps.check(timestamp)

    def valid_body(self, body: bytes | None, expected: str) -> None:
        """
        Verify body against its encoded digest.

        Empty bodies are exempt and always pass.

        Raises:
            BodyHashMissing: body is non-empty and expected is ""
            BodyInvalid: expected does not decode or does not match
        """
        if not body:
            return
        if not expected:
            raise BodyHashMissing()
        try:
            mac = self._encoder.decode(expected)
        except DecodingError as e:
            raise BodyInvalid() from e
        if not hmac.compare_digest(mac, self.sum(body)):
            raise BodyInvalid()

    def valid_signature(self, secret: bytes | str, signature: str, *elements: str) -> None:
        """
        Verify an encoded signature over elements.

        Raises:
            SignatureInvalid: signature does not decode or does not match
        """
        try:
            mac = self._encoder.decode(signature)
        except DecodingError as e:
            raise SignatureInvalid() from e
        if not hmac.compare_digest(mac, self.hmac(secret, elements)):
            raise SignatureInvalid()
