"""
Tests for the exception classes.

Tests initialization, attributes and message formatting of every
createsend client exception.
"""

import pytest
from createsend_client.exceptions import (
    ApiConnectionException,
    BadRequestException,
    CreateSendException,
    CreateSendHttpException,
    NotFoundException,
    ServerErrorException,
    UnauthorisedException,
)


def test_createsend_exception_basic() -> None:
    """
    Test basic CreateSendException initialization.

    Verifies that the base exception can be created with just a message.
    """
    exc = CreateSendException("Test error")

    assert exc.message == "Test error"
    assert exc.details == {}
    assert str(exc) == "Test error"


def test_createsend_exception_with_details() -> None:
    """Test CreateSendException with details."""
    details = {"code": "ERR001", "context": "test_context"}
    exc = CreateSendException("Test error", details=details)

    assert exc.details == details


def test_http_exception_without_api_error() -> None:
    """
    Test CreateSendHttpException with only a status.

    Verifies the message names the status and the API fields stay unset.
    """
    exc = CreateSendHttpException(503)

    assert exc.status_code == 503
    assert exc.code is None
    assert exc.api_message is None
    assert "503" in exc.message
    assert exc.details["status_code"] == 503


def test_http_exception_with_api_error() -> None:
    """Test CreateSendHttpException carrying the API error body."""
    exc = CreateSendHttpException(403, 52, "API key has been revoked")

    assert exc.code == 52
    assert exc.api_message == "API key has been revoked"
    assert "52" in str(exc)
    assert "API key has been revoked" in str(exc)
    assert exc.details == {
        "status_code": 403,
        "code": 52,
        "api_message": "API key has been revoked",
    }


@pytest.mark.parametrize(
    "exception_class, status_code",
    [
        (BadRequestException, 400),
        (UnauthorisedException, 401),
        (NotFoundException, 404),
        (ServerErrorException, 500),
    ],
)
def test_status_specific_exceptions(exception_class: type, status_code: int) -> None:
    """
    Test the status-specific HTTP exceptions.

    Verifies each carries its fixed status and the API code and message.
    """
    exc = exception_class(1, "Invalid value")

    assert exc.status_code == status_code
    assert exc.code == 1
    assert exc.api_message == "Invalid value"
    assert isinstance(exc, CreateSendHttpException)
    assert isinstance(exc, CreateSendException)


def test_status_specific_exception_defaults() -> None:
    """Test that the API code and message are optional."""
    exc = NotFoundException()

    assert exc.status_code == 404
    assert exc.code is None
    assert exc.api_message is None


def test_api_connection_exception() -> None:
    """Test ApiConnectionException message and details."""
    exc = ApiConnectionException("https://api.createsend.com/api/v3/clients.json", "Connection refused")

    assert exc.url == "https://api.createsend.com/api/v3/clients.json"
    assert exc.reason == "Connection refused"
    assert "Connection refused" in exc.message
    assert exc.details["url"] == exc.url
    assert isinstance(exc, CreateSendException)
    assert not isinstance(exc, CreateSendHttpException)


def test_api_connection_exception_without_reason() -> None:
    """Test ApiConnectionException default message."""
    exc = ApiConnectionException("https://api.createsend.com/api/v3")

    assert exc.message == "Could not reach the API at https://api.createsend.com/api/v3"
