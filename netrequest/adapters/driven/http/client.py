"""aiohttp transport adapter with retry and metrics integration."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType

import aiohttp
from aiohttp import ClientResponse, ClientTimeout, hdrs
from multidict import CIMultiDict

from netrequest.adapters.driven.http.retry import CONNECT_ERRORS, retry
from netrequest.core.cancellation import CancellationHandle
from netrequest.ports.http import OutboundMessage, TransportPort
from netrequest.ports.metrics import ExchangeDto, MetricsPort

__all__ = ["AiohttpTransport"]

logger = logging.getLogger(__name__)

# Configurable retry settings
PROBE_RETRIES = 5
PROBE_TIMEOUT = 10
SEND_RETRIES = 3
SEND_TIMEOUT = 30.0
FIRST_FAILING_HTTP_CODE = 300


class AiohttpTransport(TransportPort):
    """Transport backed by one shared aiohttp session.

    Features:
    - Responses are returned once headers arrive; the body stays unread.
    - Retry with backoff on connection failures (before anything was sent).
    - Metrics collection (time to headers, failure rate).
    - Context manager for proper resource cleanup.
    - Health check/probe functionality.

    Requests only borrow the transport; closing it is the owner's job.
    """

    def __init__(
        self,
        metrics: MetricsPort | None = None,
        *,
        timeout_sec: float = SEND_TIMEOUT,
        retries: int = SEND_RETRIES,
    ) -> None:
        """Initialize the transport.

        Args:
            metrics: Optional metrics collector to track exchanges.
            timeout_sec: Total timeout for one exchange.
            retries: Connection attempts per send (1 = no retry).
        """
        self.metrics = metrics
        self.timeout_sec = timeout_sec
        self.retries = retries
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> AiohttpTransport:
        """Enter async context manager (start session).

        Returns:
            Self for use in async with statement.
        """
        self.session = aiohttp.ClientSession(timeout=ClientTimeout(total=self.timeout_sec))
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Exit async context manager (close session).

        Args:
            exc_type: Exception type if raised in context.
            exc: Exception instance if raised in context.
            tb: Traceback if raised in context.
        """
        if self.session:
            await self.session.close()
            self.session = None

    @retry(times=PROBE_RETRIES)
    async def _probe_once(self, url: str, timeout: int = PROBE_TIMEOUT) -> ClientResponse:
        """Single HTTP GET request for health check (with retry).

        Args:
            url: URL to probe.
            timeout: Timeout in seconds.

        Returns:
            HTTP response.

        Raises:
            RuntimeError: If session not initialized.
            aiohttp exceptions: Network/timeout errors (retried by decorator).
        """
        if self.session is None:
            raise RuntimeError("Session not initialized; use 'async with' context manager")
        client_timeout = ClientTimeout(timeout)
        return await self.session.get(url, timeout=client_timeout, allow_redirects=True)

    async def probe(self, url: str, timeout: int = PROBE_TIMEOUT) -> bool:
        """Check if HTTP endpoint is reachable.

        Attempts up to PROBE_RETRIES times with exponential backoff.

        Args:
            url: URL to probe.
            timeout: Timeout in seconds.

        Returns:
            True if reachable (200 <= status < 300), False otherwise.
        """
        logger.info(f"Probing endpoint {url}...")
        try:
            resp = await self._probe_once(url, timeout)
            is_healthy = 200 <= resp.status < 300
            logger.info(f"Probe for {url} returned status {resp.status}")
            resp.release()
            return is_healthy
        except Exception as e:
            logger.warning(f"Probe failed for {url}: {e}")
            return False

    async def _send_once(self, message: OutboundMessage) -> ClientResponse:
        """Single HTTP request; resolves once response headers are read.

        Args:
            message: Outbound message to send.

        Returns:
            HTTP response with its body still unread.

        Raises:
            RuntimeError: If session not initialized.
            aiohttp exceptions: Network/timeout errors.
        """
        if self.session is None:
            raise RuntimeError("Session not initialized; use 'async with' context manager")

        headers: CIMultiDict[str] = CIMultiDict()
        if message.content_type:
            headers.add(hdrs.CONTENT_TYPE, message.content_type)
        for name, value in message.headers:
            headers.add(name, value)

        logger.debug(f"{message.method} {message.url} ({len(message.body)} bytes)")
        return await self.session.request(
            message.method, message.url, data=message.body, headers=headers
        )

    async def send(
        self,
        message: OutboundMessage,
        /,
        *,
        early_headers: bool = True,
        cancellation: CancellationHandle | None = None,
    ) -> ClientResponse:
        """Send a message and record metrics.

        Args:
            message: Outbound message to send.
            early_headers: Return once headers arrive; otherwise buffer the
                whole body before returning.
            cancellation: Optional handle that aborts the exchange.

        Returns:
            HTTP response.
        """
        if cancellation is not None:
            return await cancellation.guard(self._exchange(message, early_headers))
        return await self._exchange(message, early_headers)

    async def _exchange(self, message: OutboundMessage, early_headers: bool) -> ClientResponse:
        loop = asyncio.get_running_loop()
        started = loop.time()

        send_once = retry(times=self.retries, errors=CONNECT_ERRORS)(self._send_once)
        resp = await send_once(message)
        headers_at = loop.time()

        if self.metrics:
            self.metrics.update(
                ExchangeDto(
                    started_at_sec=started,
                    headers_at_sec=headers_at,
                    is_failed=resp.status >= FIRST_FAILING_HTTP_CODE,
                    status_code=resp.status,
                )
            )
            logger.info(f"HTTP metrics: {self.metrics}")

        if not early_headers:
            try:
                await resp.read()
            except BaseException:
                resp.release()
                raise

        return resp
