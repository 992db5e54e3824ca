"""Exceptions raised by the Forecast API client."""

from __future__ import annotations


class ForecastError(Exception):
    """Base class for every error raised by ``forecast_client``."""


class ConfigurationError(ForecastError):
    """The client is missing configuration it needs (usually the API key)."""


class TransportError(ForecastError):
    """The request never produced an HTTP response (DNS, connect, timeout, retries)."""


class ApiError(ForecastError):
    """The API answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class RateLimitError(ApiError):
    """HTTP 429: the daily call allowance is used up."""


class ResponseParseError(ForecastError):
    """The body was not JSON, or did not match the response schema."""
