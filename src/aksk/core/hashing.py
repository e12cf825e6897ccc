"""Digest and HMAC computation over canonical element sets."""

from __future__ import annotations

import hashlib
import hmac
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any


class HashAlgorithm(str, Enum):
    """Built-in hash algorithms."""

    MD5 = "md5"
    SHA1 = "sha1"
    SHA224 = "sha224"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"

    @property
    def constructor(self) -> Callable[..., Any]:
        return _CONSTRUCTORS[self]


_CONSTRUCTORS: dict[HashAlgorithm, Callable[..., Any]] = {
    HashAlgorithm.MD5: hashlib.md5,
    HashAlgorithm.SHA1: hashlib.sha1,
    HashAlgorithm.SHA224: hashlib.sha224,
    HashAlgorithm.SHA256: hashlib.sha256,
    HashAlgorithm.SHA384: hashlib.sha384,
    HashAlgorithm.SHA512: hashlib.sha512,
}


def canonicalize(elements: Iterable[str]) -> bytes:
    """Sort elements and concatenate them with no separator."""
    return "".join(sorted(elements)).encode("utf-8")


class Hasher:
    """Hashing with a fixed algorithm."""

    __slots__ = ("_algorithm",)

    def __init__(self, algorithm: HashAlgorithm | str = HashAlgorithm.SHA256) -> None:
        self._algorithm = HashAlgorithm(algorithm)

    @property
    def algorithm(self) -> HashAlgorithm:
        return self._algorithm

    def digest(self, data: bytes) -> bytes:
        """One-way hash of data."""
        return self._algorithm.constructor(data).digest()

    def hmac(self, secret: bytes | str, elements: Iterable[str]) -> bytes:
        """
        Keyed hash of the canonicalized elements.

        Elements are sorted lexicographically before concatenation, so the
        result does not depend on the order the caller assembled them in.
        """
        key = secret.encode("utf-8") if isinstance(secret, str) else secret
        return hmac.new(key, canonicalize(elements), self._algorithm.constructor).digest()
