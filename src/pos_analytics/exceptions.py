"""Domain-specific exceptions for POS Analytics.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from PosAnalyticsError for easy catching.
"""

from __future__ import annotations


class PosAnalyticsError(Exception):
    """Base exception for all POS Analytics errors.

    Users can catch this exception to handle any error raised by the package.
    The aggregation functions themselves never raise it for well-typed input;
    it surfaces from configuration, record parsing and the API client.
    """

    pass


class ConfigError(PosAnalyticsError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - Invalid configuration values are provided
    - Required configuration is missing (e.g. no API base URL)
    - Environment variables cannot be parsed
    """

    pass


class DataQualityError(PosAnalyticsError):
    """Raised when an input record cannot be interpreted at all.

    Missing numeric fields are not an error (they read as zero); this is
    reserved for records that are not mappings or lack an identifier.
    """

    pass


class ApiError(PosAnalyticsError):
    """Raised when a request to the POS REST API fails.

    This exception is raised when:
    - The connection to the API fails or times out
    - The API answers with a non-2xx status
    - The response body is not the expected JSON envelope

    Attributes:
        status_code: HTTP status code, or None for transport errors.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
