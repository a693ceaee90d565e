"""Request abstraction shared by all request kinds."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, TypeVar

from netrequest.core.cancellation import CancellationHandle

__all__ = ["Headers", "NetworkRequest"]

T = TypeVar("T")

Headers = Mapping[str, str] | Iterable[tuple[str, str]]


class NetworkRequest(ABC):
    """A request to a network address whose response resolves to a value.

    Subclasses implement one request kind (GET, POST, ...) and provide both
    entry points. Given the same request state and response bytes, both must
    decode to structurally equal values.

    Attributes:
        address: Target URI. Validated when the request executes.
        headers: Optional extra headers, either a mapping or (name, value)
            pairs when a name must be sent more than once.
    """

    def __init__(self, address: str, headers: Headers | None = None) -> None:
        self.address = address
        self.headers = headers

    @property
    def headers(self) -> Headers | None:
        return self._headers

    @headers.setter
    def headers(self, headers: Headers | None) -> None:
        # Pairs are copied; a generator would only yield on the first execution
        if headers is not None and not isinstance(headers, Mapping):
            headers = tuple(headers)
        self._headers = headers

    @abstractmethod
    async def execute(
        self,
        response_type: type[T],
        cancellation: CancellationHandle | None = None,
    ) -> T:
        """Execute the request and decode the response into a static type.

        Args:
            response_type: Type the response body is decoded into.
            cancellation: Optional handle that aborts the request.

        Returns:
            The decoded response.

        Raises:
            ConfigurationError: If the request cannot be sent as configured.
            RequestCancelledError: If the handle fired before completion.
            HttpStatusError: If the response status is not a success.
            DeserializationError: If the body does not fit response_type.
        """

    @abstractmethod
    async def execute_dynamic(
        self,
        response_type: Any,
        cancellation: CancellationHandle | None = None,
    ) -> Any:
        """Execute the request and decode the response into a runtime type.

        For callers that only hold a type descriptor at runtime (e.g.
        `list[Echo]` built by a plugin). Fails like `execute`.
        """

    def header_items(self) -> Iterator[tuple[str, str]]:
        """Yield the extra headers in iteration order, duplicates included."""
        if not self.headers:
            return
        items = self.headers.items() if isinstance(self.headers, Mapping) else self.headers
        for name, value in items:
            yield name, value

    def __repr__(self) -> str:
        return f"{type(self).__name__}(address={self.address!r})"
