"""
Exception classes raised by the createsend client.

Every failed API call surfaces as a subclass of CreateSendException. HTTP
failures carry the status code plus the error code and message the API
returned in its error body.
"""

from typing import Any, Dict, Optional


class CreateSendException(Exception):
    """
    Base exception for all createsend client errors.

    Attributes:
        message: Human-readable error message
        details: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class CreateSendHttpException(CreateSendException):
    """
    Raised when the API responds with an HTTP status >= 300 (redirects are not followed).

    Used directly for statuses without a dedicated subclass (403, 429, 503, ...).

    Attributes:
        status_code: HTTP status code of the response
        code: Error code from the API error body, if any
        api_message: Error message from the API error body, if any
    """

    def __init__(
        self,
        status_code: int,
        code: Optional[int] = None,
        api_message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.status_code = status_code
        self.code = code
        self.api_message = api_message

        message = f"The API call failed with HTTP status {status_code}"
        if code is not None or api_message:
            message = f"The API call failed with HTTP status {status_code}: {code}: {api_message}"

        super().__init__(
            message,
            details={
                "status_code": status_code,
                "code": code,
                "api_message": api_message,
                **(details or {}),
            },
        )


class _ApiErrorException(CreateSendHttpException):
    """HTTP error with a fixed status code."""

    STATUS_CODE = 0

    def __init__(
        self,
        code: Optional[int] = None,
        api_message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(self.STATUS_CODE, code, api_message, details)


class BadRequestException(_ApiErrorException):
    """Raised on HTTP 400. The request was invalid."""

    STATUS_CODE = 400


class UnauthorisedException(_ApiErrorException):
    """Raised on HTTP 401. The API key is missing or invalid."""

    STATUS_CODE = 401


class NotFoundException(_ApiErrorException):
    """Raised on HTTP 404."""

    STATUS_CODE = 404


class ServerErrorException(_ApiErrorException):
    """Raised on HTTP 500."""

    STATUS_CODE = 500


class ApiConnectionException(CreateSendException):
    """
    Raised when the API cannot be reached.

    Wraps timeouts, DNS failures and refused connections after any
    configured retries have been exhausted.
    """

    def __init__(
        self,
        url: str,
        reason: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.url = url
        self.reason = reason
        message = f"Could not reach the API at {url}"
        if reason:
            message += f": {reason}"
        super().__init__(message, details={"url": url, "reason": reason, **(details or {})})
