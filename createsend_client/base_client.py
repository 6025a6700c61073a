"""
Base client for the Campaign Monitor REST API.

Provides a thin async facade over httpx: request construction against the
configured endpoint, HTTP Basic authentication with the API key, JSON
(de)serialization through pydantic, paging parameters, and translation of
HTTP error statuses into typed exceptions. Resource clients subclass
BaseClient and call its get/post/put/delete helpers.
"""

import platform
import time
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from . import __version__
from .config import settings
from .exceptions import (
    ApiConnectionException,
    BadRequestException,
    CreateSendException,
    CreateSendHttpException,
    NotFoundException,
    ServerErrorException,
    UnauthorisedException,
)
from .logging_config import get_logger, get_request_id
from .models import ApiErrorResponse, PagedResult

logger = get_logger(__name__)

T = TypeVar("T")

USER_AGENT = (
    f"createsend-python-client-{__version__}-"
    f"{platform.python_version()}-{platform.system()}"
)

# Password half of the Basic Auth pair; the API only inspects the username
API_KEY_PASSWORD = "x"

ERROR_STATUS_EXCEPTIONS: Dict[int, Type[CreateSendHttpException]] = {
    400: BadRequestException,
    401: UnauthorisedException,
    404: NotFoundException,
    500: ServerErrorException,
}

IDEMPOTENT_METHODS = frozenset({"GET", "PUT", "DELETE"})


@lru_cache(maxsize=256)
def _type_adapter(klass: Any) -> TypeAdapter:
    return TypeAdapter(klass)


class BaseClient:
    """
    Base class for Campaign Monitor API calls.

    Wraps a single httpx.AsyncClient that is created on first use and
    reused for every subsequent request, so connection pooling is shared
    across calls made through the same instance.

    Attributes:
        api_key: API key sent as the Basic Auth username
        base_url: Base URL of the API, without trailing slash
        timeout: Request timeout in seconds
        max_retries: Retries of idempotent requests on transport errors
        logging_enabled: Log request and response details at DEBUG level
        http2: Negotiate HTTP/2 with the API
        _client: Lazily created httpx.AsyncClient
    """

    retry_wait = wait_exponential(multiplier=0.5, min=0.5, max=10)

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        logging_enabled: Optional[bool] = None,
        http2: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            api_key: API key (defaults to settings)
            base_url: Base URL of the API (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
            max_retries: Retry attempts for GET/PUT/DELETE (defaults to settings)
            logging_enabled: Log every request/response (defaults to settings)
            http2: Negotiate HTTP/2 (defaults to settings)
            transport: Custom httpx transport, e.g. httpx.MockTransport in tests
        """
        self.api_key = settings.API_KEY if api_key is None else api_key
        self.base_url = (settings.API_ENDPOINT if base_url is None else base_url).rstrip("/")
        self.timeout = settings.REQUEST_TIMEOUT if timeout is None else timeout
        self.max_retries = settings.MAX_RETRIES if max_retries is None else max_retries
        self.logging_enabled = (
            settings.LOGGING_ENABLED if logging_enabled is None else logging_enabled
        )
        self.http2 = settings.HTTP2 if http2 is None else http2

        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        if not self.api_key:
            logger.warning("No API key configured - requests will be rejected as unauthorised")

    async def _get_client(self) -> httpx.AsyncClient:
        """
        Get or create the persistent HTTP client.

        Returns:
            Configured httpx.AsyncClient instance
        """
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                limits=httpx.Limits(
                    max_keepalive_connections=20,
                    max_connections=100,
                    keepalive_expiry=30.0,
                ),
                http2=self.http2,
                transport=self._transport,
                follow_redirects=False,
                headers={
                    "User-Agent": USER_AGENT,
                    "Accept": "application/json",
                },
            )
            logger.debug("Created new HTTP client with connection pooling")
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
            logger.debug("Closed HTTP client")

    async def __aenter__(self) -> "BaseClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _build_url(self, *path_elements: str) -> str:
        path = "/".join(quote(str(element).strip("/"), safe="/") for element in path_elements)
        return f"{self.base_url}/{path}" if path else self.base_url

    def _get_request_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        request_id = get_request_id()
        if request_id:
            headers["X-Request-ID"] = request_id
        return headers

    def _get_auth(self) -> httpx.BasicAuth:
        return httpx.BasicAuth(self.api_key or "", API_KEY_PASSWORD)

    async def get(
        self,
        klass: Type[T],
        *path_elements: str,
        query: Optional[Mapping[str, Any]] = None,
    ) -> T:
        """
        Perform a GET on the route given by path_elements.

        Args:
            klass: Type to deserialise the response body to
            *path_elements: Path of the API resource
            query: Query string parameters; list values repeat the key

        Returns:
            The response body as an instance of klass

        Raises:
            CreateSendException: If the call fails or returns a status >= 300
        """
        response = await self._send("GET", path_elements, params=query)
        return self._deserialize(klass, response)

    async def get_paged_result(
        self,
        item_type: Type[T],
        *path_elements: str,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        order_field: Optional[str] = None,
        order_direction: Optional[str] = None,
        query: Optional[Mapping[str, Any]] = None,
    ) -> PagedResult[T]:
        """
        Perform a GET returning one page of item_type results.

        Paging parameters are only sent when given. The caller's query
        mapping is left untouched.

        Args:
            item_type: Type of the items in the page
            *path_elements: Path of the API resource
            page: 1-based page number
            page_size: Number of records per page
            order_field: Field to order the results by
            order_direction: "asc" or "desc"
            query: Additional query string parameters

        Returns:
            PagedResult wrapping the items and paging metadata

        Raises:
            CreateSendException: If the call fails or returns a status >= 300
        """
        params = self.add_paging_params(
            dict(query or {}), page, page_size, order_field, order_direction
        )
        response = await self._send("GET", path_elements, params=params)
        return self._deserialize(PagedResult[item_type], response)  # type: ignore[valid-type]

    async def post(self, klass: Type[T], entity: Any, *path_elements: str) -> T:
        """
        POST entity as JSON and deserialise the response to klass.

        Raises:
            CreateSendException: If the call fails or returns a status >= 300
        """
        response = await self._send("POST", path_elements, entity=entity)
        return self._deserialize(klass, response)

    async def put(self, entity: Any, *path_elements: str) -> None:
        """
        PUT entity as JSON to the given path. The response body is ignored.

        Raises:
            CreateSendException: If the call fails or returns a status >= 300
        """
        await self._send("PUT", path_elements, entity=entity)

    async def delete(self, *path_elements: str) -> None:
        """
        DELETE the resource at the given path.

        Raises:
            CreateSendException: If the call fails or returns a status >= 300
        """
        await self._send("DELETE", path_elements)

    @staticmethod
    def add_paging_params(
        query: Dict[str, Any],
        page: Optional[int],
        page_size: Optional[int],
        order_field: Optional[str],
        order_direction: Optional[str],
    ) -> Dict[str, Any]:
        """Add the non-None paging arguments to query and return it."""
        if page is not None:
            query["page"] = str(page)

        if page_size is not None:
            query["pagesize"] = str(page_size)

        if order_field is not None:
            query["orderfield"] = order_field

        if order_direction is not None:
            query["orderdirection"] = order_direction

        return query

    def handle_error_response(self, response: httpx.Response) -> CreateSendException:
        """
        Build the exception representing a failed API response.

        The API error body (Code/Message) is parsed when present. Statuses
        without a dedicated exception class, redirects included, map to
        CreateSendHttpException.

        Args:
            response: Response with a status >= 300

        Returns:
            The exception to raise
        """
        try:
            api_error = ApiErrorResponse.model_validate(response.json())
        except ValueError:
            # Covers both undecodable JSON and bodies that are not an error object
            api_error = ApiErrorResponse()

        exception_class = ERROR_STATUS_EXCEPTIONS.get(response.status_code)
        if exception_class is not None:
            return exception_class(api_error.Code, api_error.Message)

        return CreateSendHttpException(response.status_code, api_error.Code, api_error.Message)

    @staticmethod
    def fix_string_result(klass: Type[T], result: T) -> T:
        """
        Strip the enclosing quotes of a JSON string body.

        Args:
            klass: The type the caller asked for
            result: The raw result

        Returns:
            result unchanged unless klass is str, in which case one leading
            and one trailing double quote are removed when present
        """
        if klass is str:
            str_result = str(result)
            if str_result.startswith('"'):
                str_result = str_result[1:]

            if str_result.endswith('"'):
                str_result = str_result[:-1]

            return str_result  # type: ignore[return-value]

        return result

    def _serialize_entity(self, entity: Any) -> Any:
        # Options apply to models at any depth, e.g. {"Subscribers": [model, ...]}
        return _type_adapter(type(entity)).dump_python(
            entity, mode="json", by_alias=True, exclude_none=True
        )

    def _deserialize(self, klass: Type[T], response: httpx.Response) -> T:
        if klass is str:
            return self.fix_string_result(klass, response.text)  # type: ignore[arg-type]

        try:
            return _type_adapter(klass).validate_python(response.json())
        except (ValueError, ValidationError) as error:
            logger.error(
                "Could not deserialise API response",
                extra={
                    "extra_fields": {
                        "url": str(response.request.url),
                        "target_type": getattr(klass, "__name__", str(klass)),
                        "response_body": response.text[:500],
                        "error_type": type(error).__name__,
                    }
                },
            )
            raise CreateSendException(
                f"Could not deserialise response from {response.request.url}",
                details={"error": str(error)[:500]},
            ) from error

    async def _send(
        self,
        method: str,
        path_elements: tuple,
        params: Optional[Mapping[str, Any]] = None,
        entity: Any = None,
    ) -> httpx.Response:
        url = self._build_url(*path_elements)
        request_kwargs: Dict[str, Any] = {
            "params": params,
            "headers": self._get_request_headers(),
            "auth": self._get_auth(),
        }
        if entity is not None:
            request_kwargs["json"] = self._serialize_entity(entity)

        start_time = time.perf_counter()

        if self.logging_enabled:
            logger.debug(
                "Sending API request",
                extra={
                    "extra_fields": {
                        "method": method,
                        "url": url,
                        "params": dict(params or {}),
                        "body": request_kwargs.get("json"),
                    }
                },
            )

        try:
            response = await self._request(method, url, **request_kwargs)
        except httpx.TransportError as error:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "API request failed",
                extra={
                    "extra_fields": {
                        "method": method,
                        "url": url,
                        "duration_ms": duration_ms,
                        "error_type": type(error).__name__,
                        "error_message": str(error),
                    }
                },
            )
            raise ApiConnectionException(url, str(error) or type(error).__name__) from error

        duration_ms = (time.perf_counter() - start_time) * 1000

        if self.logging_enabled:
            logger.debug(
                "Received API response",
                extra={
                    "extra_fields": {
                        "method": method,
                        "url": url,
                        "status_code": response.status_code,
                        "duration_ms": duration_ms,
                        "response_body": response.text[:500],
                    }
                },
            )

        # follow_redirects is off: a 3xx is reported like any error status
        if response.status_code >= 300:
            error = self.handle_error_response(response)
            logger.warning(
                "API call returned an error status",
                extra={
                    "extra_fields": {
                        "method": method,
                        "url": url,
                        "status_code": response.status_code,
                        "error_type": type(error).__name__,
                        "duration_ms": duration_ms,
                    }
                },
            )
            raise error

        return response

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        client = await self._get_client()

        if method not in IDEMPOTENT_METHODS or self.max_retries == 0:
            return await client.request(method, url, **kwargs)

        retrying = AsyncRetrying(
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(self.max_retries + 1),
            wait=self.retry_wait,
            before_sleep=self._log_retry,
            reraise=True,
        )
        return await retrying(client.request, method, url, **kwargs)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        method, url = retry_state.args[:2]
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.info(
            "Retrying API request after transport error",
            extra={
                "extra_fields": {
                    "method": method,
                    "url": url,
                    "attempt": retry_state.attempt_number + 1,
                    "max_attempts": self.max_retries + 1,
                    "error_type": type(error).__name__,
                }
            },
        )
