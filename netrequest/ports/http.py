"""Transport port definition (interface and DTO)."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from netrequest.core.cancellation import CancellationHandle

__all__ = ["OutboundMessage", "TransportPort", "TransportResponse"]


@dataclass(slots=True, frozen=True)
class OutboundMessage:
    """Wire message built by a request and handed to the transport.

    Decouples request construction from HTTP implementation details.

    Attributes:
        method: HTTP method (e.g. "POST").
        url: Absolute target URL.
        body: Encoded request body.
        content_type: Media type of the body.
        headers: Extra headers in send order; duplicate names are allowed.
    """

    method: str
    url: str
    body: bytes = b""
    content_type: str | None = None
    headers: tuple[tuple[str, str], ...] = field(default_factory=tuple)


class TransportResponse(Protocol):
    """Response returned by a transport once headers are available."""

    @property
    def status(self) -> int: ...

    @property
    def reason(self) -> str | None: ...

    @property
    def headers(self) -> Mapping[str, str]: ...

    async def text(self) -> str:
        """Read the remaining body and decode it as text."""
        ...

    def release(self) -> None:
        """Return the underlying connection to the transport."""
        ...


class TransportPort(Protocol):
    """Interface for sending one outbound message.

    Implementations must be safe for concurrent use by several in-flight
    requests on the same event loop.
    """

    async def send(
        self,
        message: OutboundMessage,
        /,
        *,
        early_headers: bool = True,
        cancellation: CancellationHandle | None = None,
    ) -> TransportResponse:
        """Send a message and return its response.

        Args:
            message: The message to send.
            early_headers: Resolve as soon as response headers arrive instead
                of buffering the full body first.
            cancellation: Optional handle whose signal aborts the send.

        Returns:
            The transport response.
        """
        ...
