"""
Configuration module for the createsend client.

This module provides centralized configuration management using Pydantic settings.
All configuration values can be overridden via CREATESEND_-prefixed environment
variables or a .env file.
"""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Client settings for the Campaign Monitor API.

    Settings are validated on instantiation to ensure correct configuration.

    Attributes:
        API_ENDPOINT: Base URL of the Campaign Monitor REST API
        API_KEY: API key sent as the HTTP Basic Auth username
        LOGGING_ENABLED: Log every request and response at DEBUG level
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        REQUEST_TIMEOUT: Timeout for HTTP requests in seconds
        MAX_RETRIES: Retry attempts for idempotent requests on transport errors
        HTTP2: Negotiate HTTP/2 with the API
    """

    API_ENDPOINT: str = Field(
        default="https://api.createsend.com/api/v3",
        description="Base URL of the Campaign Monitor REST API",
    )
    API_KEY: Optional[str] = Field(
        default=None,
        description="API key used as the HTTP Basic Auth username",
    )

    # Logging configuration
    LOGGING_ENABLED: bool = Field(
        default=False,
        description="Log request and response details for every API call",
    )
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # HTTP client configuration
    REQUEST_TIMEOUT: float = Field(
        default=30.0,
        gt=0,
        le=300.0,
        description="Timeout for HTTP requests in seconds",
    )
    MAX_RETRIES: int = Field(
        default=0,
        ge=0,
        le=5,
        description="Maximum number of retry attempts for idempotent requests",
    )
    HTTP2: bool = Field(
        default=True,
        description="Enable HTTP/2 for the underlying connection pool",
    )

    model_config = SettingsConfigDict(
        env_prefix="CREATESEND_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("API_ENDPOINT")
    @classmethod
    def validate_url(cls, value: str) -> str:
        """
        Validate that the API endpoint is properly formatted.

        Args:
            value: The URL to validate

        Returns:
            The validated URL without trailing slash

        Raises:
            ValueError: If URL is invalid
        """
        if not value:
            raise ValueError("API endpoint cannot be empty")

        value = value.rstrip("/")

        if not (value.startswith("http://") or value.startswith("https://")):
            raise ValueError(
                f"API endpoint must start with http:// or https://, got: {value}"
            )

        return value


# Global settings instance
settings = Settings()
