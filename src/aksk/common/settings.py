"""Configuration management using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="AKSK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Signing algorithm
    encoder: Literal["base64", "hex"] = Field(
        default="base64",
        description="Text encoding for signatures, body hashes and nonces",
    )
    hash_algorithm: Literal["md5", "sha1", "sha224", "sha256", "sha384", "sha512"] = Field(
        default="sha256",
        description="Hash used for body digests and as the HMAC hash",
    )
    acceptable_skew_seconds: int = Field(
        default=60,
        description="Maximum allowed difference between request timestamp and server clock",
    )
    skip_body: bool = Field(
        default=False,
        description="Do not sign or verify request bodies",
    )

    # Server side
    exempt_paths: list[str] = Field(
        default_factory=lambda: ["/health", "/metrics"],
        description="Paths served without signature verification",
    )
    credentials: dict[str, str] = Field(
        default_factory=dict,
        description="Static access key to secret key map (JSON) for the bundled server",
    )
    replay_protection_enabled: bool = Field(
        default=False,
        description="Reject a repeated (access key, nonce, timestamp) within the skew window",
    )
    replay_cache_max_entries: int = Field(
        default=100_000,
        description="Max entries kept by the replay nonce cache",
    )
    host: str = Field(
        default="127.0.0.1",
        description="Bind address for the bundled server",
    )
    port: int = Field(
        default=8090,
        description="Port for the bundled server",
    )

    # Client side
    access_key: str | None = Field(
        default=None,
        description="Access key used by the CLI when signing requests",
    )
    secret_key: str | None = Field(
        default=None,
        description="Secret key used by the CLI when signing requests",
    )
    http_timeout: float = Field(
        default=30.0,
        description="Total timeout for signed client requests in seconds",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level",
    )
    log_json: bool = Field(
        default=False,
        description="Render logs as JSON",
    )

    @field_validator("acceptable_skew_seconds")
    @classmethod
    def _non_negative_skew(cls, value: int) -> int:
        if value < 0:
            raise ValueError("acceptable_skew_seconds must be >= 0")
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings."""
    return Settings()
