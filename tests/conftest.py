"""
createsend client tests - test configuration.

Provides pytest fixtures for building clients against an in-memory httpx
transport and for constructing canned API responses.
"""

from typing import Any, Callable, Dict, List, Optional, Type

import httpx
import pytest
from createsend_client import BaseClient
from createsend_client.logging_config import clear_request_id

TEST_API_KEY = "test-api-key"
TEST_BASE_URL = "https://api.test.local/api/v3"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it handled."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture(autouse=True)
def reset_request_id() -> None:
    """Make sure no request ID leaks between tests."""
    clear_request_id()


@pytest.fixture
def mock_subscriber() -> Dict[str, Any]:
    """
    Sample subscriber record as returned by the API.

    Returns:
        Dictionary with subscriber fields
    """
    return {
        "EmailAddress": "subscriber@example.com",
        "Name": "Subscriber One",
        "Date": "2011-06-14 10:30:00",
        "State": "Active",
    }


@pytest.fixture
def mock_paged_subscribers(mock_subscriber: Dict[str, Any]) -> Dict[str, Any]:
    """
    Sample paged result envelope wrapping two subscribers.

    Args:
        mock_subscriber: Subscriber fixture

    Returns:
        Dictionary shaped like the API's paged responses
    """
    second = dict(mock_subscriber, EmailAddress="second@example.com", Name="Subscriber Two")
    return {
        "Results": [mock_subscriber, second],
        "ResultsOrderedBy": "email",
        "OrderDirection": "asc",
        "PageNumber": 1,
        "PageSize": 2,
        "RecordsOnThisPage": 2,
        "TotalNumberOfRecords": 5,
        "NumberOfPages": 3,
    }


@pytest.fixture
def make_response() -> Callable[..., httpx.Response]:
    """
    Factory for httpx responses bound to a request.

    Returns:
        Callable building an httpx.Response from a status and body
    """

    def _make_response(
        status_code: int,
        json_body: Any = None,
        text: Optional[str] = None,
        method: str = "GET",
        url: str = f"{TEST_BASE_URL}/resource.json",
    ) -> httpx.Response:
        request = httpx.Request(method, url)
        if json_body is not None:
            return httpx.Response(status_code, json=json_body, request=request)
        return httpx.Response(status_code, text=text or "", request=request)

    return _make_response


@pytest.fixture
def make_client() -> Callable[..., "tuple[Any, RecordingTransport]"]:
    """
    Factory for a BaseClient wired to a RecordingTransport.

    The handler receives each request and returns the response to send back.

    Returns:
        Callable returning (client, transport)
    """

    def _make_client(
        handler: Callable[[httpx.Request], httpx.Response],
        client_class: Type[BaseClient] = BaseClient,
        **client_kwargs: Any,
    ) -> "tuple[Any, RecordingTransport]":
        transport = RecordingTransport(handler)
        client_kwargs.setdefault("api_key", TEST_API_KEY)
        client_kwargs.setdefault("base_url", TEST_BASE_URL)
        return client_class(transport=transport, **client_kwargs), transport

    return _make_client


@pytest.fixture
def json_handler() -> Callable[..., Callable[[httpx.Request], httpx.Response]]:
    """
    Factory for transport handlers that always answer with the same body.

    Returns:
        Callable taking (status_code, body) and returning a handler
    """

    def _json_handler(
        status_code: int, body: Any
    ) -> Callable[[httpx.Request], httpx.Response]:
        def handler(request: httpx.Request) -> httpx.Response:
            if isinstance(body, str):
                return httpx.Response(status_code, text=body)
            return httpx.Response(status_code, json=body)

        return handler

    return _json_handler


def pytest_configure(config: Any) -> None:
    """
    Configure pytest with custom markers.

    Args:
        config: Pytest configuration object
    """
    config.addinivalue_line(
        "markers",
        "asyncio: mark test as async",
    )
    config.addinivalue_line(
        "markers",
        "unit: mark test as unit test",
    )
