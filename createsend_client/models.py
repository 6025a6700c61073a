"""
Pydantic models shared by all API calls.

Field names mirror the PascalCase JSON keys used by the Campaign Monitor API.
"""

from datetime import datetime
from typing import Annotated, Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer

API_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

T = TypeVar("T")


def _parse_api_datetime(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return datetime.strptime(value, API_DATETIME_FORMAT)
        except ValueError:
            # Fall through to pydantic's ISO 8601 parsing
            return value
    return value


def _format_api_datetime(value: datetime) -> str:
    return value.strftime(API_DATETIME_FORMAT)


ApiDateTime = Annotated[
    datetime,
    BeforeValidator(_parse_api_datetime),
    PlainSerializer(_format_api_datetime, return_type=str, when_used="json"),
]
"""Datetime exchanged with the API as ``yyyy-MM-dd HH:mm:ss``."""


class CreateSendModel(BaseModel):
    """Base class for request and response bodies."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ApiErrorResponse(CreateSendModel):
    """Error body returned by the API alongside a 4xx/5xx status."""

    Code: Optional[int] = None
    Message: Optional[str] = None


class PagedResult(CreateSendModel, Generic[T]):
    """
    A page of results plus the pagination metadata describing it.

    Attributes:
        Results: Items on this page
        ResultsOrderedBy: Field the results are ordered by
        OrderDirection: "asc" or "desc"
        PageNumber: 1-based number of this page
        PageSize: Requested page size
        RecordsOnThisPage: Number of items in Results
        TotalNumberOfRecords: Number of items across all pages
        NumberOfPages: Total number of pages
    """

    Results: List[T] = Field(default_factory=list)
    ResultsOrderedBy: Optional[str] = None
    OrderDirection: Optional[str] = None
    PageNumber: int = 0
    PageSize: int = 0
    RecordsOnThisPage: int = 0
    TotalNumberOfRecords: int = 0
    NumberOfPages: int = 0

    @property
    def has_more_pages(self) -> bool:
        """True when pages after this one exist."""
        return self.PageNumber < self.NumberOfPages
