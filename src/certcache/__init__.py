"""
certcache - TLS certificate cache backed by Azure Blob Storage.
"""

from certcache.cache import AzureBlobCertCache, CertCache, InMemoryCertCache
from certcache.context import OperationContext
from certcache.exceptions import (
    CacheMissError,
    CertCacheError,
    ConfigurationError,
    EmptyContainerNameError,
    InvalidCredentialError,
    InvalidKeyError,
)

__version__ = "0.1.0"

__all__ = [
    "AzureBlobCertCache",
    "CacheMissError",
    "CertCache",
    "CertCacheError",
    "ConfigurationError",
    "EmptyContainerNameError",
    "InMemoryCertCache",
    "InvalidCredentialError",
    "InvalidKeyError",
    "OperationContext",
    "__version__",
]
