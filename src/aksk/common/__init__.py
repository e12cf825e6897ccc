"""Common utilities for aksk."""

from aksk.common.errors import AkskError, AuthError, ErrorCode
from aksk.common.settings import Settings, get_settings

__all__ = [
    "AkskError",
    "AuthError",
    "ErrorCode",
    "Settings",
    "get_settings",
]
