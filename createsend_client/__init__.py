"""
createsend client package.

Async client base for the Campaign Monitor REST API: authenticated request
helpers, JSON models, paging and typed API errors.
"""

__version__ = "1.0.0"
__description__ = "Async base client for the Campaign Monitor REST API"

from .base_client import BaseClient  # noqa: E402
from .config import Settings, settings  # noqa: E402
from .exceptions import (  # noqa: E402
    ApiConnectionException,
    BadRequestException,
    CreateSendException,
    CreateSendHttpException,
    NotFoundException,
    ServerErrorException,
    UnauthorisedException,
)
from .logging_config import setup_logging  # noqa: E402
from .models import ApiDateTime, ApiErrorResponse, CreateSendModel, PagedResult  # noqa: E402

__all__ = [
    "ApiConnectionException",
    "ApiDateTime",
    "ApiErrorResponse",
    "BadRequestException",
    "BaseClient",
    "CreateSendException",
    "CreateSendHttpException",
    "CreateSendModel",
    "NotFoundException",
    "PagedResult",
    "ServerErrorException",
    "Settings",
    "UnauthorisedException",
    "settings",
    "setup_logging",
    "__version__",
]
