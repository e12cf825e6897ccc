"""Signing core: encoders, hashing, timestamp window and the Auth facade."""

from aksk.core.auth import DEFAULT_ACCEPTABLE_SKEW, Auth
from aksk.core.encoding import Base64Encoder, Encoder, HexEncoder, get_encoder
from aksk.core.hashing import HashAlgorithm, Hasher, canonicalize
from aksk.core.timestamp import TimestampValidator

__all__ = [
    "Auth",
    "DEFAULT_ACCEPTABLE_SKEW",
    "Encoder",
    "Base64Encoder",
    "HexEncoder",
    "get_encoder",
    "HashAlgorithm",
    "Hasher",
    "canonicalize",
    "TimestampValidator",
]
