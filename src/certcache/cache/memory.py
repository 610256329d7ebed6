"""
In-memory certificate cache.

A dict-backed CertCache with the same miss/overwrite/delete semantics as the
blob backend. Useful in tests and local runs where no storage account is
available. Nothing expires and nothing is evicted.
"""

from __future__ import annotations

from certcache.cache.base import CertCache
from certcache.context import OperationContext
from certcache.exceptions import CacheMissError, InvalidKeyError
from certcache.logging import get_logger

logger = get_logger(__name__)


class InMemoryCertCache(CertCache):
    """Certificate cache held in a process-local dict."""

    def __init__(self) -> None:
        self._entries: dict[str, bytes] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    async def get(self, key: str, ctx: OperationContext | None = None) -> bytes:
        if not key:
            raise InvalidKeyError()
        if ctx is not None:
            ctx.check()
        try:
            return self._entries[key]
        except KeyError:
            logger.debug("Cache miss", key=key)
            raise CacheMissError("No cached data for key", context={"key": key}) from None

    async def put(self, key: str, data: bytes, ctx: OperationContext | None = None) -> None:
        if not key:
            raise InvalidKeyError()
        if ctx is not None:
            ctx.check()
        # Copy so later changes to a caller's bytearray don't leak in
        self._entries[key] = bytes(data)

    async def delete(self, key: str, ctx: OperationContext | None = None) -> None:
        if not key:
            raise InvalidKeyError()
        if ctx is not None:
            ctx.check()
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()
