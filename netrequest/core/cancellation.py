"""Cooperative cancellation handle for in-flight requests."""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from netrequest.core.errors import RequestCancelledError

__all__ = ["CancellationHandle"]

T = TypeVar("T")


class CancellationHandle:
    """Caller-owned token that aborts the awaitables it guards.

    One handle may be shared by several executions; firing it aborts all of
    them. Once cancelled a handle stays cancelled.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._timer: asyncio.TimerHandle | None = None

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Fire the cancellation signal."""
        self._event.set()
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def cancel_after(self, delay_sec: float) -> None:
        """Fire the signal after a deadline.

        Must be called from a running event loop. A later call replaces the
        previous deadline.

        Args:
            delay_sec: Seconds until cancellation.
        """
        if self._timer is not None:
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(max(0.0, delay_sec), self.cancel)

    def disarm(self) -> None:
        """Drop a pending deadline without firing it. No-op once fired."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def raise_if_cancelled(self) -> None:
        """Raise RequestCancelledError if the signal already fired."""
        if self.is_cancelled:
            raise RequestCancelledError()

    async def wait(self) -> None:
        """Block until the signal fires."""
        await self._event.wait()

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await `awaitable` unless the signal fires first.

        Args:
            awaitable: The operation to race against the signal.

        Returns:
            The awaitable's result.

        Raises:
            RequestCancelledError: If the signal fired before completion. The
                guarded operation is cancelled and awaited before raising.
        """
        if self.is_cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise RequestCancelledError()

        work = asyncio.ensure_future(awaitable)
        signal = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({work, signal}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            work.cancel()
            signal.cancel()
            raise

        if work.done():
            signal.cancel()
            return work.result()

        work.cancel()
        await asyncio.gather(work, return_exceptions=True)
        raise RequestCancelledError()
