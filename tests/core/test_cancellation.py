"""Tests for the cooperative cancellation handle."""

import asyncio

import pytest

from netrequest.core.cancellation import CancellationHandle
from netrequest.core.errors import RequestCancelledError

__all__ = []


@pytest.mark.asyncio
async def test_guard_returns_result_when_not_cancelled() -> None:
    """guard() should pass through the awaitable's result."""
    handle = CancellationHandle()

    async def work() -> int:
        return 42

    assert await handle.guard(work()) == 42
    assert handle.is_cancelled is False


@pytest.mark.asyncio
async def test_guard_propagates_work_exceptions() -> None:
    """guard() should re-raise errors from the guarded operation."""
    handle = CancellationHandle()

    async def work() -> None:
        raise ValueError("bad")

    with pytest.raises(ValueError, match="bad"):
        await handle.guard(work())


@pytest.mark.asyncio
async def test_guard_raises_when_already_cancelled() -> None:
    """A fired handle should reject new work without running it."""
    handle = CancellationHandle()
    handle.cancel()
    ran = False

    async def work() -> None:
        nonlocal ran
        ran = True

    with pytest.raises(RequestCancelledError):
        await handle.guard(work())

    assert ran is False


@pytest.mark.asyncio
async def test_cancel_aborts_pending_work() -> None:
    """Firing the handle should cancel the guarded task."""
    handle = CancellationHandle()
    started = asyncio.Event()
    aborted = False

    async def work() -> None:
        nonlocal aborted
        started.set()
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            aborted = True
            raise

    async def canceller() -> None:
        await started.wait()
        handle.cancel()

    with pytest.raises(RequestCancelledError):
        await asyncio.gather(handle.guard(work()), canceller())

    assert aborted is True


@pytest.mark.asyncio
async def test_cancel_after_fires_on_deadline() -> None:
    """cancel_after() should fire the handle once the delay elapses."""
    handle = CancellationHandle()
    handle.cancel_after(0.01)

    assert handle.is_cancelled is False
    await asyncio.wait_for(handle.wait(), timeout=1)
    assert handle.is_cancelled is True


@pytest.mark.asyncio
async def test_cancel_after_replaces_previous_deadline() -> None:
    """A later deadline should supersede the earlier one."""
    handle = CancellationHandle()
    handle.cancel_after(0.01)
    handle.cancel_after(10)

    await asyncio.sleep(0.05)

    assert handle.is_cancelled is False
    handle.cancel()


@pytest.mark.asyncio
async def test_disarm_drops_pending_deadline() -> None:
    """disarm() should stop an armed deadline from firing later."""
    handle = CancellationHandle()
    handle.cancel_after(0.01)

    handle.disarm()
    await asyncio.sleep(0.05)

    assert handle.is_cancelled is False


def test_disarm_keeps_fired_handle_cancelled() -> None:
    """disarm() after cancel() should leave the handle cancelled."""
    handle = CancellationHandle()
    handle.cancel()

    handle.disarm()

    assert handle.is_cancelled is True


@pytest.mark.asyncio
async def test_outer_cancellation_is_not_converted() -> None:
    """Cancelling the caller's task should raise asyncio.CancelledError."""
    handle = CancellationHandle()
    task = asyncio.ensure_future(handle.guard(asyncio.sleep(10)))
    await asyncio.sleep(0)

    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task


def test_raise_if_cancelled() -> None:
    """raise_if_cancelled() should only raise after cancel()."""
    handle = CancellationHandle()
    handle.raise_if_cancelled()

    handle.cancel()

    with pytest.raises(RequestCancelledError):
        handle.raise_if_cancelled()
