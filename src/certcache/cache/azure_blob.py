"""
Azure Blob Storage backend for the certificate cache.

Each cache entry is a block blob in a single container, named by its key.
The adapter is a thin pass-through: "not found" from the service becomes a
cache miss (or success, for deletes), and every other service or transport
error reaches the caller unchanged. Retries and backoff are left to the
Azure SDK pipeline.
"""

from __future__ import annotations

import binascii
from base64 import b64decode
from types import TracebackType

from azure.core.credentials import AzureNamedKeyCredential
from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import ContentSettings, StorageErrorCode
from azure.storage.blob.aio import ContainerClient

from certcache.cache.base import PEM_CONTENT_TYPE, CertCache
from certcache.config import DEFAULT_ENDPOINT_TEMPLATE, Settings
from certcache.context import OperationContext, run_with_context
from certcache.exceptions import (
    CacheMissError,
    ConfigurationError,
    EmptyContainerNameError,
    InvalidCredentialError,
    InvalidKeyError,
)
from certcache.logging import get_logger, log_context, setup_logging

logger = get_logger(__name__)


def _validate_credential(account_name: str, account_key: str) -> None:
    """Check a Shared Key credential the way the service will read it."""
    if not account_name or not account_name.strip():
        raise InvalidCredentialError(
            "account_name must not be empty",
            context={"reason": "empty account name"},
        )
    if not account_key:
        raise InvalidCredentialError(
            "account_key must not be empty",
            context={"account_name": account_name, "reason": "empty key"},
        )
    try:
        b64decode(account_key, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidCredentialError(
            "account_key is not valid base64",
            context={"account_name": account_name, "reason": str(e)},
        ) from e


class AzureBlobCertCache(CertCache):
    """Certificate cache stored in an Azure Blob Storage container.

    The container itself is managed by the caller through create_container()
    and delete_container(); get/put/delete never create it.

    Example:
        async with AzureBlobCertCache(name, key, "autocert") as cache:
            await cache.create_container()
            await cache.put("example.com", pem_bytes)
    """


    def __init__(
        self,
        account_name: str,
        account_key: str,
        container_name: str,
        endpoint_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the cache. No network call is made.

        Args:
            account_name: Storage account name.
            account_key: Shared Key for the account, base64 encoded.
            container_name: Container holding the cache entries.
            endpoint_url: Blob service endpoint. Defaults to the public
                cloud endpoint for account_name.
            timeout: Deadline in seconds applied to each call made without
                an explicit OperationContext. None means unbounded.

        Raises:
            InvalidCredentialError: If the account name or key is malformed.
            EmptyContainerNameError: If container_name is blank.
            ConfigurationError: If timeout is not positive.
        """
        _validate_credential(account_name, account_key)
        if not container_name or not container_name.strip():
            raise EmptyContainerNameError(context={"account_name": account_name})
        if timeout is not None and timeout <= 0:
            raise ConfigurationError(
                "timeout must be greater than 0", context={"timeout": timeout}
            )

        if endpoint_url is None:
            endpoint_url = DEFAULT_ENDPOINT_TEMPLATE.format(account_name=account_name)

        self._container_name = container_name
        self._endpoint_url = endpoint_url
        self._timeout = timeout
        self._client = ContainerClient(
            endpoint_url,
            container_name,
            credential=AzureNamedKeyCredential(account_name, account_key),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> AzureBlobCertCache:
        """Create a cache from loaded settings.

        Also applies LOG_LEVEL and LOG_FILE to the certcache loggers.
        """
        setup_logging(log_level=settings.LOG_LEVEL, log_file=settings.LOG_FILE)
        return cls(
            settings.account_name,
            settings.account_key,
            settings.container_name,
            endpoint_url=settings.endpoint_url,
            timeout=settings.CERT_CACHE_TIMEOUT_SECONDS,
        )

    @property
    def container_name(self) -> str:
        return self._container_name

    @property
    def endpoint_url(self) -> str:
        return self._endpoint_url

    @property
    def timeout(self) -> float | None:
        return self._timeout

    async def close(self) -> None:
        """Close the underlying client and its connections."""
        await self._client.close()

    async def __aenter__(self) -> AzureBlobCertCache:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def _context(self, ctx: OperationContext | None) -> OperationContext | None:
        # Fresh deadline per call
        if ctx is None and self._timeout is not None:
            return OperationContext(timeout=self._timeout)
        return ctx

    def _check_key(self, key: str) -> None:
        if not key:
            raise InvalidKeyError(context={"container": self._container_name})

    async def create_container(self, ctx: OperationContext | None = None) -> None:
        """Create the container. An existing container is left as is.

        Only the ContainerAlreadyExists conflict counts as success. Other
        409s (e.g. ContainerBeingDeleted) mean the container is not usable
        and are raised unchanged.
        """
        with log_context(container=self._container_name, operation="create_container"):
            try:
                await run_with_context(
                    self._context(ctx), self._client.create_container()
                )
            except ResourceExistsError as e:
                if e.error_code != StorageErrorCode.CONTAINER_ALREADY_EXISTS:
                    raise
                logger.debug("Container already exists")
                return
            logger.info("Created container", endpoint=self._endpoint_url)

    async def delete_container(self, ctx: OperationContext | None = None) -> None:
        """Delete the container and every entry in it.

        A container that does not exist is not an error.
        """
        with log_context(container=self._container_name, operation="delete_container"):
            try:
                await run_with_context(
                    self._context(ctx), self._client.delete_container()
                )
            except ResourceNotFoundError:
                logger.debug("Container already absent")
                return
            logger.info("Deleted container", endpoint=self._endpoint_url)

    async def get(self, key: str, ctx: OperationContext | None = None) -> bytes:
        """Download the data stored under key.

        Args:
            key: Cache key (blob name).
            ctx: Optional cancellation/deadline context.

        Returns:
            The stored bytes, in full.

        Raises:
            InvalidKeyError: If key is empty.
            CacheMissError: If the blob (or the container) does not exist.
            OperationAbortedError: If ctx, or the default timeout, fired.
        """
        self._check_key(key)
        with log_context(container=self._container_name, operation="get"):
            try:
                data = await run_with_context(self._context(ctx), self._download(key))
            except ResourceNotFoundError as e:
                logger.debug("Cache miss", key=key)
                raise CacheMissError(
                    "No cached data for key",
                    context={"key": key, "container": self._container_name},
                ) from e

            logger.debug("Cache hit", key=key, size=len(data))
            return data

    async def _download(self, key: str) -> bytes:
        downloader = await self._client.download_blob(key)
        return await downloader.readall()

    async def put(self, key: str, data: bytes, ctx: OperationContext | None = None) -> None:
        """Store data under key, overwriting any existing blob.

        No concurrency token is sent, so concurrent writers race and the last
        one wins. Raises InvalidKeyError if key is empty.
        """
        self._check_key(key)
        with log_context(container=self._container_name, operation="put"):
            await run_with_context(
                self._context(ctx),
                self._client.upload_blob(
                    key,
                    data,
                    overwrite=True,
                    content_settings=ContentSettings(content_type=PEM_CONTENT_TYPE),
                ),
            )
            logger.debug("Stored entry", key=key, size=len(data))

    async def delete(self, key: str, ctx: OperationContext | None = None) -> None:
        """Delete the blob for key. A missing blob is not an error.

        Raises InvalidKeyError if key is empty.
        """
        self._check_key(key)
        with log_context(container=self._container_name, operation="delete"):
            try:
                await run_with_context(self._context(ctx), self._client.delete_blob(key))
            except ResourceNotFoundError:
                logger.debug("Entry already absent", key=key)
                return
            logger.debug("Deleted entry", key=key)
