"""POST request with a JSON body and a JSON response."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Any, TypeVar

from pydantic import AnyUrl, TypeAdapter, ValidationError

from netrequest.adapters.driven.serialization.json_serializer import default_serializer
from netrequest.core.cancellation import CancellationHandle
from netrequest.core.errors import ConfigurationError, DeserializationError, HttpStatusError
from netrequest.core.request import Headers, NetworkRequest
from netrequest.ports.http import OutboundMessage, TransportPort
from netrequest.ports.serialization import SerializationPort

__all__ = ["JsonPostNetworkRequest", "validate_address"]

T = TypeVar("T")

JSON_CONTENT_TYPE = "application/json"

_uri_adapter = TypeAdapter(AnyUrl)


class JsonPostNetworkRequest(NetworkRequest):
    """POST a JSON payload and decode the JSON response.

    The transport is shared, not owned: the request only keeps a reference
    and never closes it.
    """

    def __init__(
        self,
        client: TransportPort,
        address: str,
        payload: str | None = None,
        headers: Headers | None = None,
        serializer: SerializationPort | None = None,
    ) -> None:
        """Initialize the request.

        Args:
            client: Transport used to send the request.
            address: Absolute URL to POST to.
            payload: JSON text sent as the request body.
            headers: Optional extra headers.
            serializer: Decoder for the response body; defaults to the
                shared pydantic JSON serializer.

        Raises:
            ConfigurationError: If client is None.
        """
        super().__init__(address, headers)
        if client is None:
            raise ConfigurationError("No transport has been specified for the network request")
        self.client = client
        self.payload = payload
        self.serializer = serializer or default_serializer

    @classmethod
    def for_value(
        cls,
        client: TransportPort,
        address: str,
        value: Any,
        headers: Headers | None = None,
        serializer: SerializationPort | None = None,
    ) -> JsonPostNetworkRequest:
        """Build a request whose payload is `value` encoded as JSON."""
        serializer = serializer or default_serializer
        return cls(client, address, serializer.serialize(value), headers, serializer)

    async def execute(
        self,
        response_type: type[T],
        cancellation: CancellationHandle | None = None,
    ) -> T:
        body = await self.get_body(cancellation)
        try:
            return self.serializer.deserialize(body, response_type)
        except (ValueError, TypeError) as e:
            raise DeserializationError(response_type, type(e).__name__) from None

    async def execute_dynamic(
        self,
        response_type: Any,
        cancellation: CancellationHandle | None = None,
    ) -> Any:
        body = await self.get_body(cancellation)
        try:
            return self.serializer.deserialize_dynamic(body, response_type)
        except (ValueError, TypeError) as e:
            raise DeserializationError(response_type, type(e).__name__) from None

    async def get_body(self, cancellation: CancellationHandle | None = None) -> str:
        """Send the POST and return the raw response body.

        Control returns from the transport as soon as headers arrive, so the
        status is checked before the body is read.

        Args:
            cancellation: Optional handle observed during send and body read.

        Returns:
            The response body as text.

        Raises:
            ConfigurationError: If the transport or address is missing/invalid.
            RequestCancelledError: If the handle fired before completion.
            HttpStatusError: If the status is outside 2xx.
        """
        message = self._build_message()
        if cancellation is not None:
            cancellation.raise_if_cancelled()

        response = await _observe(
            self.client.send(message, early_headers=True, cancellation=cancellation),
            cancellation,
        )
        try:
            if not 200 <= response.status < 300:
                raise HttpStatusError(response.status, response.reason)
            return await _observe(response.text(), cancellation)
        finally:
            response.release()

    def _build_message(self) -> OutboundMessage:
        if self.client is None:
            raise ConfigurationError("No transport has been specified for the network request")
        address = validate_address(self.address)

        return OutboundMessage(
            method="POST",
            url=address,
            body=(self.payload or "").encode("utf-8"),
            content_type=JSON_CONTENT_TYPE,
            headers=tuple(self.header_items()),
        )


async def _observe(awaitable: Awaitable[T], cancellation: CancellationHandle | None) -> T:
    if cancellation is None:
        return await awaitable
    return await cancellation.guard(awaitable)


def validate_address(address: str | None) -> str:
    """Check that `address` is an absolute URI a request can be sent to.

    Args:
        address: Candidate target address.

    Returns:
        The address with surrounding whitespace removed.

    Raises:
        ConfigurationError: If the address is blank or not an absolute URI.
    """
    if not address or not address.strip():
        raise ConfigurationError("No address has been specified for the network request")

    address = address.strip()
    try:
        _uri_adapter.validate_python(address)
    except ValidationError:
        raise ConfigurationError(f"Invalid address for the network request: {address!r}") from None
    return address
