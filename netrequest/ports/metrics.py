"""Metrics port definition (interface and DTO)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

__all__ = ["ExchangeDto", "MetricsPort"]


@dataclass(slots=True, frozen=True)
class ExchangeDto:
    """Immutable snapshot of a single request/response exchange.

    Attributes:
        started_at_sec: Monotonic seconds when the message left the process.
        headers_at_sec: Monotonic seconds when response headers arrived.
        is_failed: True if considered failed (non-2xx status).
        status_code: HTTP status code of the response.
    """

    started_at_sec: float
    headers_at_sec: float
    is_failed: bool = False
    status_code: int | None = None


class MetricsPort(Protocol):
    """Interface for recording exchange metrics.

    Implementations must be async-safe and non-blocking.
    Transports call update() after each exchange; presentation layers call
    __str__() to render summaries.
    """

    def update(self, exchange: ExchangeDto, /) -> None:
        """Record a finished exchange.

        Args:
            exchange: The exchange to record.
        """
        ...

    def __str__(self) -> str:
        """Return concise textual summary for humans.

        Returns:
            Formatted metrics string.
        """
        ...
