"""
Exception hierarchy for the certificate cache.

All exceptions raised by certcache itself inherit from CertCacheError, which
carries optional context for structured error handling and logging. Errors
coming from the storage backend (azure.core.exceptions) are not wrapped and
reach the caller unchanged.
"""

from __future__ import annotations

from typing import Any


class CertCacheError(Exception):
    """Base exception for all certificate cache errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class ConfigurationError(CertCacheError):
    """Raised when a cache is constructed with invalid or missing configuration.

    Only ever raised at construction time, never from an operation.
    """

    pass


class EmptyContainerNameError(ConfigurationError):
    """Raised when the container name is empty or whitespace."""

    def __init__(self, context: dict[str, Any] | None = None) -> None:
        super().__init__("container_name must not be empty", context)


class InvalidCredentialError(ConfigurationError):
    """Raised when the account name or Shared Key credential is malformed.

    Context should include:
        - account_name: The storage account the key was given for
        - reason: What was wrong with it
    """

    pass


class CacheMissError(CertCacheError):
    """Raised by get() when no entry exists for the key.

    Callers should treat this as "nothing cached" rather than a failure.

    Context should include:
        - key: The key that was looked up
        - container: The container that was searched
    """

    pass


class InvalidKeyError(CertCacheError, ValueError):
    """Raised by get/put/delete when the key is empty.

    Blob names must be non-empty, so the request is never sent.
    """

    def __init__(self, context: dict[str, Any] | None = None) -> None:
        super().__init__("key must not be empty", context)


class OperationAbortedError(CertCacheError):
    """Raised when an operation's OperationContext stops it."""

    pass


class OperationCancelledError(OperationAbortedError):
    """Raised when the operation context was cancelled."""

    pass


class DeadlineExceededError(OperationAbortedError):
    """Raised when the operation context's deadline passed.

    Context should include:
        - timeout: The remaining budget the call started with, if any
    """

    pass
