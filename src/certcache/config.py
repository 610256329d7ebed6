"""
Configuration management using pydantic-settings.

Loads configuration from environment variables and .env files.
Validates required fields and provides typed access to settings.
"""

from __future__ import annotations

import binascii
from base64 import b64decode
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENDPOINT_TEMPLATE = "https://{account_name}.blob.core.windows.net"


class Settings(BaseSettings):
    """Certificate cache settings loaded from environment variables.

    Required:
        AZURE_STORAGE_ACCOUNT_NAME: Storage account name
        AZURE_STORAGE_ACCOUNT_KEY: Shared Key for the account (base64)

    Optional:
        CERT_CACHE_CONTAINER: Container holding the cache entries
        AZURE_STORAGE_ENDPOINT: Blob endpoint override (e.g. Azurite)
        CERT_CACHE_TIMEOUT_SECONDS: Default deadline for each operation
        LOG_LEVEL: Logging level
        LOG_FILE: JSON Lines log file; console only when unset
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    AZURE_STORAGE_ACCOUNT_NAME: str = Field(
        ..., min_length=1, description="Azure storage account name"
    )
    AZURE_STORAGE_ACCOUNT_KEY: str = Field(
        ..., description="Azure storage Shared Key (base64)"
    )
    CERT_CACHE_CONTAINER: str = Field(
        default="autocert", description="Blob container for certificate data"
    )
    AZURE_STORAGE_ENDPOINT: str | None = Field(
        default=None,
        description="Blob service endpoint; defaults to the public cloud endpoint",
    )
    CERT_CACHE_TIMEOUT_SECONDS: float | None = Field(
        default=None, description="Default per-operation timeout in seconds"
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    LOG_FILE: Path | None = Field(
        default=None, description="JSON Lines log file"
    )

    @field_validator("CERT_CACHE_CONTAINER")
    @classmethod
    def validate_container(cls, v: str) -> str:
        """Reject blank container names."""
        if not v.strip():
            raise ValueError("CERT_CACHE_CONTAINER must not be empty")
        return v

    @field_validator("AZURE_STORAGE_ACCOUNT_KEY")
    @classmethod
    def validate_account_key(cls, v: str) -> str:
        """Shared Keys are base64; anything else will never authenticate."""
        if not v:
            raise ValueError("AZURE_STORAGE_ACCOUNT_KEY must not be empty")
        try:
            b64decode(v, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError("AZURE_STORAGE_ACCOUNT_KEY must be base64 encoded") from e
        return v

    @field_validator("CERT_CACHE_TIMEOUT_SECONDS")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("CERT_CACHE_TIMEOUT_SECONDS must be greater than 0")
        return v

    @field_validator("AZURE_STORAGE_ENDPOINT")
    @classmethod
    def normalize_endpoint(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip().rstrip("/")

    @property
    def account_name(self) -> str:
        return self.AZURE_STORAGE_ACCOUNT_NAME

    @property
    def account_key(self) -> str:
        return self.AZURE_STORAGE_ACCOUNT_KEY

    @property
    def container_name(self) -> str:
        return self.CERT_CACHE_CONTAINER

    @property
    def endpoint_url(self) -> str:
        """Get the blob endpoint, falling back to the public cloud one."""
        if self.AZURE_STORAGE_ENDPOINT:
            return self.AZURE_STORAGE_ENDPOINT
        return DEFAULT_ENDPOINT_TEMPLATE.format(account_name=self.AZURE_STORAGE_ACCOUNT_NAME)

    def redacted_display(self) -> dict[str, str | float | None]:
        """Return settings with the account key redacted for display."""
        key = self.AZURE_STORAGE_ACCOUNT_KEY
        return {
            "AZURE_STORAGE_ACCOUNT_NAME": self.AZURE_STORAGE_ACCOUNT_NAME,
            "AZURE_STORAGE_ACCOUNT_KEY": f"{key[:8]}...{key[-4:]}" if len(key) > 12 else "***",
            "CERT_CACHE_CONTAINER": self.CERT_CACHE_CONTAINER,
            "AZURE_STORAGE_ENDPOINT": self.endpoint_url,
            "CERT_CACHE_TIMEOUT_SECONDS": self.CERT_CACHE_TIMEOUT_SECONDS,
            "LOG_LEVEL": self.LOG_LEVEL,
            "LOG_FILE": str(self.LOG_FILE) if self.LOG_FILE else None,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If required settings are missing or invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
