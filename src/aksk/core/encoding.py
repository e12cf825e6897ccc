"""Reversible text encodings for MACs, digests and nonces."""

from __future__ import annotations

import base64
import binascii
from abc import ABC, abstractmethod

from aksk.common.errors import DecodingError


class Encoder(ABC):
    """Bijective bytes <-> str encoding."""

    name: str

    @abstractmethod
    def encode(self, data: bytes) -> str:
        """Encode raw bytes as text."""

    @abstractmethod
    def decode(self, text: str) -> bytes:
        """Decode text back to bytes, raising DecodingError on bad input."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Base64Encoder(Encoder):
    """Standard base64 alphabet with padding."""

    name = "base64"

    def encode(self, data: bytes) -> str:
        return base64.b64encode(data).decode("ascii")

    def decode(self, text: str) -> bytes:
        try:
            return base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodingError("invalid base64 value") from e


class HexEncoder(Encoder):
    """Lowercase hexadecimal."""

    name = "hex"

    def encode(self, data: bytes) -> str:
        return data.hex()

    def decode(self, text: str) -> bytes:
        try:
            return binascii.unhexlify(text)
        except (binascii.Error, ValueError) as e:
            raise DecodingError("invalid hex value") from e


_ENCODERS: dict[str, Encoder] = {
    Base64Encoder.name: Base64Encoder(),
    HexEncoder.name: HexEncoder(),
}


def get_encoder(name: str) -> Encoder:
    """Look up a built-in encoder by name."""
    try:
        return _ENCODERS[name]
    except KeyError:
        raise ValueError(f"Unknown encoder: {name!r} (expected one of {sorted(_ENCODERS)})") from None
