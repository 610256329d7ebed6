"""
Pytest configuration and fixtures for certificate cache tests.
"""

from __future__ import annotations

import os
from typing import Generator
from unittest.mock import patch

import pytest

from certcache.cache.azure_blob import AzureBlobCertCache
from certcache.config import Settings, clear_settings_cache

from tests.fakes import ACCOUNT_KEY, ACCOUNT_NAME, ENDPOINT_URL, FakeBlobService


@pytest.fixture
def blob_service() -> Generator[FakeBlobService, None, None]:
    """Patch the SDK ContainerClient with an in-process fake service."""
    service = FakeBlobService()
    with patch("certcache.cache.azure_blob.ContainerClient", service.client):
        yield service


@pytest.fixture
def make_cache(blob_service: FakeBlobService):
    """Factory for caches on the fake service, one per container name."""

    def _make(container_name: str = "testcontainer") -> AzureBlobCertCache:
        return AzureBlobCertCache(
            ACCOUNT_NAME, ACCOUNT_KEY, container_name, endpoint_url=ENDPOINT_URL
        )

    return _make


@pytest.fixture
async def blob_cache(make_cache) -> AzureBlobCertCache:
    """Provide a cache whose container has been created."""
    cache = make_cache()
    await cache.create_container()
    yield cache
    await cache.delete_container()
    await cache.close()


@pytest.fixture
def mock_env_vars() -> Generator[dict[str, str], None, None]:
    """Provide mock environment variables for testing."""
    env_vars = {
        "AZURE_STORAGE_ACCOUNT_NAME": ACCOUNT_NAME,
        "AZURE_STORAGE_ACCOUNT_KEY": ACCOUNT_KEY,
        "CERT_CACHE_CONTAINER": "certs",
        "AZURE_STORAGE_ENDPOINT": ENDPOINT_URL,
        "CERT_CACHE_TIMEOUT_SECONDS": "5",
        "LOG_LEVEL": "DEBUG",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        clear_settings_cache()
        yield env_vars


@pytest.fixture
def mock_settings(mock_env_vars: dict[str, str]) -> Generator[Settings, None, None]:
    """Provide a Settings instance with mock configuration."""
    clear_settings_cache()
    from certcache.config import get_settings

    yield get_settings()
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Automatically reset settings cache before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
