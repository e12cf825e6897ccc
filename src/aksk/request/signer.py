"""Client-side request signing."""

from __future__ import annotations

import re
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import IO, Any, Union
from urllib.parse import urlsplit

import aiohttp

from aksk.common.errors import AccessKeyEmpty, AccessKeyInvalid, SigningClientError, SigningError
from aksk.common.logging import get_logger
from aksk.common.metrics import record_signed_request
from aksk.core.auth import Auth
from aksk.request.headers import SignatureHeaders

logger = get_logger(__name__)

Body = Union[bytes, bytearray, memoryview, str, IO[bytes], None]

MIN_NONCE_SIZE = 6

# RFC 9110 token characters
_METHOD_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


def read_body(body: Body) -> bytes:
    """Buffer a request body fully into memory."""
    if body is None:
        return b""
    if isinstance(body, str):
        return body.encode("utf-8")
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    try:
        data = body.read()
    except OSError as e:
        raise SigningError("failed to read request body") from e
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


@dataclass(frozen=True)
class SignedRequest:
    """An outgoing request with its signature headers attached."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""


class RequestSigner:
    """
    Signs requests for one access key / secret key pair.

    The signed element set is {access key, nonce, timestamp} plus the encoded
    body hash when the body is non-empty and body signing is enabled.
    """

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        auth: Auth | None = None,
        skip_body: bool = False,
        random_source: Callable[[int], bytes] = secrets.token_bytes,
        nonce_size: int = MIN_NONCE_SIZE,
    ) -> None:
        if not access_key:
            raise AccessKeyEmpty()
        if not secret_key:
            raise AccessKeyInvalid("secret key is empty")
        if nonce_size < MIN_NONCE_SIZE:
            raise ValueError(f"nonce_size must be at least {MIN_NONCE_SIZE}")
        self._access_key = access_key
        self._secret_key = secret_key
        self._auth = auth or Auth()
        self._skip_body = skip_body
        self._random_source = random_source
        self._nonce_size = nonce_size

    @property
    def access_key(self) -> str:
        return self._access_key

    @property
    def auth(self) -> Auth:
        return self._auth

    def _nonce(self) -> str:
        try:
            raw = self._random_source(self._nonce_size)
        except OSError as e:
            raise SigningError("failed to read random bytes") from e
        if len(raw) < MIN_NONCE_SIZE:
            raise SigningError("random source returned too few bytes")
        return self._auth.encode_to_string(raw)

    def signature_headers(self, body: bytes = b"") -> dict[str, str]:
        """Build the signature headers for a buffered body."""
        nonce = self._nonce()
        timestamp = self._auth.timestamp()
        elements = [self._access_key, nonce, timestamp]

        body_hash = ""
        if body and not self._skip_body:
            body_hash = self._auth.encode_to_string(self._auth.sum(body))
            elements.append(body_hash)

        signature = self._auth.encode_to_string(self._auth.hmac(self._secret_key, elements))
        return SignatureHeaders(
            access_key=self._access_key,
            timestamp=timestamp,
            signature=signature,
            body_hash=body_hash,
            nonce=nonce,
        ).to_headers()

    def sign(self, method: str, url: str, body: Body = None) -> SignedRequest:
        """
        Sign an outgoing request.

        A stream body is read once and returned buffered in
        SignedRequest.body so the transport can still send it.

        Raises:
            SigningError: invalid method or URL, unreadable body, random source failure
        """
        if not _METHOD_RE.fullmatch(method or ""):
            raise SigningError(f"invalid method {method!r}")
        try:
            parts = urlsplit(url)
        except ValueError as e:
            raise SigningError("invalid request url") from e
        if not parts.scheme or not parts.netloc:
            raise SigningError(f"request url must be absolute: {url!r}")

        data = read_body(body)
        headers = self.signature_headers(data)
        record_signed_request(method)
        logger.debug(
            "Signed request",
            method=method,
            url=url,
            access_key=self._access_key,
            body_bytes=len(data),
        )
        return SignedRequest(method=method, url=url, headers=headers, body=data)


class SigningClient:
    """aiohttp client that signs every request it sends."""

    def __init__(
        self,
        signer: RequestSigner,
        timeout: float = 30.0,
        session: aiohttp.ClientSession | None = None,
    ):
        self._signer = signer
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> SigningClient:
        self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session and self._owns_session:
            await self._session.close()
        self._session = None

    def _ensure_session(self) -> aiohttp.ClientSession:
        if not self._session:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def request(
        self,
        method: str,
        url: str,
        body: Body = None,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> aiohttp.ClientResponse:
        """
        Sign and send a request.

        Raises:
            SigningError: request could not be signed
            SigningClientError: transport failure
        """
        signed = self._signer.sign(method, url, body)
        merged = dict(headers or {})
        merged.update(signed.headers)
        session = self._ensure_session()
        try:
            return await session.request(
                signed.method,
                signed.url,
                data=signed.body or None,
                headers=merged,
                **kwargs,
            )
        except aiohttp.ClientError as e:
            raise SigningClientError(f"Request failed: {e}") from e

    async def get(self, url: str, **kwargs: Any) -> aiohttp.ClientResponse:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, body: Body = None, **kwargs: Any) -> aiohttp.ClientResponse:
        return await self.request("POST", url, body=body, **kwargs)
