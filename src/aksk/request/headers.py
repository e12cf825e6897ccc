"""Signature header names and the per-request header bundle."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

HEADER_ACCESS_KEY = "x-auth-access-key"
HEADER_TIMESTAMP = "x-auth-timestamp"
HEADER_SIGNATURE = "x-auth-signature"
HEADER_BODY_HASH = "x-auth-body-hash"
HEADER_RANDOM_STR = "x-auth-random-str"

SIGNATURE_HEADERS = (
    HEADER_ACCESS_KEY,
    HEADER_TIMESTAMP,
    HEADER_SIGNATURE,
    HEADER_BODY_HASH,
    HEADER_RANDOM_STR,
)


def get_header(headers: Mapping[str, str], name: str) -> str:
    """Case-insensitive header lookup; missing headers read as ""."""
    value = headers.get(name)
    if value is None:
        lowered = name.lower()
        for key, candidate in headers.items():
            if key.lower() == lowered:
                value = candidate
                break
    return value or ""


@dataclass(frozen=True)
class SignatureHeaders:
    """Header values exchanged with every signed request."""

    access_key: str
    timestamp: str
    signature: str
    body_hash: str = ""
    nonce: str = ""

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> SignatureHeaders:
        return cls(
            access_key=get_header(headers, HEADER_ACCESS_KEY),
            timestamp=get_header(headers, HEADER_TIMESTAMP),
            signature=get_header(headers, HEADER_SIGNATURE),
            body_hash=get_header(headers, HEADER_BODY_HASH),
            nonce=get_header(headers, HEADER_RANDOM_STR),
        )

    def to_headers(self) -> dict[str, str]:
        headers = {
            HEADER_ACCESS_KEY: self.access_key,
            HEADER_RANDOM_STR: self.nonce,
            HEADER_TIMESTAMP: self.timestamp,
            HEADER_SIGNATURE: self.signature,
        }
        if self.body_hash:
            headers[HEADER_BODY_HASH] = self.body_hash
        return headers

    @property
    def elements(self) -> tuple[str, ...]:
        """Values covered by the signature."""
        return (self.access_key, self.timestamp, self.nonce, self.body_hash)
