"""
Base classes for certificate caches.

CertCache is the capability set a certificate manager needs from its cache:
get/put/delete over string keys and byte values. Implementations raise
CacheMissError from get() when nothing is stored under a key, and treat
deleting an absent key as success. Empty keys are rejected with
InvalidKeyError before any storage is touched.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from certcache.context import OperationContext

# Content type recorded on stored values. Descriptive only, never checked.
PEM_CONTENT_TYPE = "application/x-pem-file"


class CertCache(ABC):
    """Abstract interface for certificate cache implementations."""

    @abstractmethod
    async def get(self, key: str, ctx: OperationContext | None = None) -> bytes:
        """Get the data stored under key.

        Raises:
            CacheMissError: If there is no entry for key.
        """
        ...

    @abstractmethod
    async def put(self, key: str, data: bytes, ctx: OperationContext | None = None) -> None:
        """Store data under key, replacing any existing entry."""
        ...

    @abstractmethod
    async def delete(self, key: str, ctx: OperationContext | None = None) -> None:
        """Remove the entry for key. Absent keys are not an error."""
        ...
