"""
Cache package for certificate data.

This package provides:
- CertCache (base.py): The get/put/delete capability set
- AzureBlobCertCache (azure_blob.py): Entries stored as blobs in an Azure container
- InMemoryCertCache (memory.py): Dict-backed cache for tests and local runs
"""

from certcache.cache.azure_blob import AzureBlobCertCache
from certcache.cache.base import PEM_CONTENT_TYPE, CertCache
from certcache.cache.memory import InMemoryCertCache

__all__ = [
    "AzureBlobCertCache",
    "CertCache",
    "InMemoryCertCache",
    "PEM_CONTENT_TYPE",
]
