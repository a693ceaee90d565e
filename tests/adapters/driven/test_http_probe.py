"""Tests for HTTP health check probing."""

from unittest.mock import AsyncMock, Mock

import pytest

from netrequest.adapters.driven.http.client import AiohttpTransport

__all__ = []


@pytest.mark.asyncio
async def test_probe_success() -> None:
    """probe() should return True when GET succeeds with 200 <= status < 300."""
    transport = AiohttpTransport()
    transport.session = AsyncMock()

    mock_response = Mock()
    mock_response.status = 200
    transport.session.get = AsyncMock(return_value=mock_response)

    result = await transport.probe("http://example.com")

    assert result is True
    transport.session.get.assert_called_once()
    mock_response.release.assert_called_once()


@pytest.mark.asyncio
async def test_probe_failure() -> None:
    """probe() should return False for >=300 status codes."""
    transport = AiohttpTransport()
    transport.session = AsyncMock()

    mock_response = Mock()
    mock_response.status = 300
    transport.session.get = AsyncMock(return_value=mock_response)

    result = await transport.probe("http://example.com")

    assert result is False


@pytest.mark.asyncio
async def test__probe_once_raises_if_session_not_initialized() -> None:
    """_probe_once should raise if session is None."""
    transport = AiohttpTransport()
    transport.session = None

    with pytest.raises(RuntimeError, match="Session not initialized"):
        await transport._probe_once("http://example.com")


@pytest.mark.asyncio
async def test_probe_returns_false_on_exception() -> None:
    """probe() should return False when _probe_once raises."""
    transport = AiohttpTransport()
    transport._probe_once = AsyncMock(side_effect=RuntimeError("boom"))

    result = await transport.probe("http://example.com")

    transport._probe_once.assert_awaited_once()
    assert result is False
