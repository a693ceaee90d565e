"""Signal handling that cancels in-flight requests."""

import asyncio
import logging
import signal

from netrequest.core.cancellation import CancellationHandle

__all__ = ["cancel_on_signals"]

logger = logging.getLogger(__name__)


def cancel_on_signals(handle: CancellationHandle) -> None:
    """Fire `handle` when SIGTERM or SIGINT is received.

    Lets a container stop (SIGTERM) or Ctrl+C abort the request through the
    same path as any other caller-driven cancellation.

    Args:
        handle: Cancellation handle guarding the request.
    """
    loop = asyncio.get_running_loop()

    def handle_signal() -> None:
        """Signal handler that fires the cancellation handle."""
        logger.info("Termination signal received, cancelling request...")
        handle.cancel()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, handle_signal)
