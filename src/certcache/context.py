"""
Per-call cancellation and deadlines.

An OperationContext is handed explicitly to every cache operation. It can be
cancelled from any task, and it may carry a deadline. When either fires, the
in-flight backend call is cancelled and the operation raises instead of
returning data.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, TypeVar

from certcache.exceptions import DeadlineExceededError, OperationCancelledError
from certcache.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class OperationContext:
    """Cancellation token with an optional deadline.

    Deadlines are expressed on the time.monotonic() clock.
    """

    def __init__(self, timeout: float | None = None) -> None:
        """Create a context.

        Args:
            timeout: Seconds from now until the deadline. None means no deadline.
        """
        self._deadline = time.monotonic() + timeout if timeout is not None else None
        self._cancelled = asyncio.Event()

    @classmethod
    def with_deadline(cls, deadline: float) -> OperationContext:
        """Create a context with an absolute time.monotonic() deadline."""
        ctx = cls()
        ctx._deadline = deadline
        return ctx

    @property
    def deadline(self) -> float | None:
        return self._deadline

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def done(self) -> bool:
        return self.cancelled or self.expired

    def cancel(self) -> None:
        """Cancel the context. Any call running under it is aborted."""
        self._cancelled.set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def check(self) -> None:
        """Raise if the context is already cancelled or expired.

        Raises:
            OperationCancelledError: If cancel() was called.
            DeadlineExceededError: If the deadline has passed.
        """
        if self.cancelled:
            raise OperationCancelledError("Operation context cancelled")
        if self.expired:
            raise DeadlineExceededError("Operation context deadline exceeded")

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await a backend call under this context.

        Args:
            awaitable: The backend call to run.

        Returns:
            The call's result, if it finished before the context fired.

        Raises:
            OperationCancelledError: If the context was cancelled first.
            DeadlineExceededError: If the deadline passed first.
        """
        try:
            self.check()
        except (OperationCancelledError, DeadlineExceededError):
            # Never started, but don't leak an un-awaited coroutine
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise

        timeout = self.remaining()
        operation = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._cancelled.wait())

        try:
            done, _ = await asyncio.wait(
                {operation, waiter},
                timeout=timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            operation.cancel()
            raise
        finally:
            waiter.cancel()

        if operation in done:
            return operation.result()

        operation.cancel()
        try:
            await operation
        except asyncio.CancelledError:
            pass
        except Exception as exc:
            # The context error wins over a failure during teardown
            logger.debug("Backend call failed after abort", error=repr(exc))

        if self.cancelled:
            raise OperationCancelledError("Operation context cancelled")
        raise DeadlineExceededError(
            "Operation context deadline exceeded",
            context={"timeout": timeout},
        )


async def run_with_context(ctx: OperationContext | None, awaitable: Awaitable[T]) -> T:
    """Await a call under ctx, or directly when no context is given."""
    if ctx is None:
        return await awaitable
    return await ctx.run(awaitable)
