"""
Forecast API client.

``ApiClient`` sends a request model over a retrying ``requests.Session`` and
turns the reply into an ``ApiResponse`` or a ``ForecastError``.

Example::

    from forecast_client import ApiClient

    with ApiClient(api_key="...") as client:
        resp = client.forecast(45.5, -122.6, units=Units.SI)
        print(resp.currently.temperature)
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Self

import requests
from pydantic import ValidationError

from forecast_client.config import DEFAULT_BASE_URL, Settings, get_settings
from forecast_client.errors import (
    ApiError,
    ConfigurationError,
    RateLimitError,
    ResponseParseError,
    TransportError,
)
from forecast_client.query import (
    ForecastRequest,
    ForecastRequestBuilder,
    TimeMachineRequest,
    TimeMachineRequestBuilder,
)
from forecast_client.schemas import ApiResponse, ExcludeBlock, ExtendBy, Lang, Units
from forecast_client.services.http import build_retry, create_session

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

logger = logging.getLogger(__name__)

# The API key is the first path segment after the base URL
_KEY_IN_PATH = re.compile(r"(/forecast/)[^/]+/")


def redact(url: str, api_key: str | None = None) -> str:
    """Hide the API key in a URL before it reaches a log line or an exception."""
    if api_key:
        url = url.replace(api_key, "***")
    return _KEY_IN_PATH.sub(r"\1***/", url)


def parse_response(payload: bytes | str) -> ApiResponse:
    """Deserialize a Forecast or Time Machine JSON body."""
    try:
        return ApiResponse.model_validate_json(payload)
    except ValidationError as exc:
        msg = f"Response does not match the forecast schema: {exc.error_count()} error(s)"
        raise ResponseParseError(msg) from exc


def _error_message(resp: requests.Response) -> str:
    """Pull ``error`` out of a JSON error body, else fall back to the status reason."""
    try:
        body = resp.json()
    except ValueError:
        return resp.reason or resp.text[:200]
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return resp.reason or ""


class ApiClient:
    """Client for the Forecast and Time Machine endpoints."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        session: requests.Session | None = None,
        base_url: str = DEFAULT_BASE_URL,
        units: Units | None = None,
        lang: Lang | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.units = units
        self.lang = lang
        self._owns_session = session is None
        self.session = session if session is not None else create_session()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ApiClient:
        """Build a client (and its session) from ``Settings``."""
        settings = settings or get_settings()
        session = create_session(
            retry=build_retry(settings.max_retries, settings.backoff_factor),
            timeout=settings.timeout,
        )
        client = cls(
            api_key=settings.api_key.get_secret_value() if settings.api_key else None,
            session=session,
            base_url=settings.base_url,
            units=settings.units,
            lang=settings.lang,
        )
        client._owns_session = True
        return client

    # ---------------- Lifecycle -----------------
    def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ---------------- Transport -----------------
    def url_for(self, request: ForecastRequest | TimeMachineRequest) -> str:
        return f"{self.base_url}{request.path()}"

    def fetch(self, request: ForecastRequest | TimeMachineRequest) -> bytes:
        """
        Send the request and return the raw response body.

        Raises:
            TransportError: No HTTP response was received.
            RateLimitError: HTTP 429 after retries.
            ApiError: Any other non-2xx status.
        """
        url = self.url_for(request)
        safe_url = redact(url, request.api_key)
        logger.debug("GET %s params=%s", safe_url, request.params())

        try:
            resp = self.session.get(url, params=request.params())
        except requests.RequestException as exc:
            msg = f"Request to {safe_url} failed: {type(exc).__name__}"
            # requests puts the full URL, key included, in its messages
            raise TransportError(msg) from None

        calls = resp.headers.get("X-Forecast-API-Calls")
        elapsed = resp.headers.get("X-Response-Time")
        if calls is not None or elapsed is not None:
            logger.debug(
                "%s answered %s in %s (API calls today: %s)",
                safe_url,
                resp.status_code,
                elapsed or "?",
                calls or "?",
            )

        if resp.status_code == 429:
            raise RateLimitError(resp.status_code, _error_message(resp))
        if resp.status_code >= 400:
            logger.warning("%s answered HTTP %s", safe_url, resp.status_code)
            raise ApiError(resp.status_code, _error_message(resp))
        return resp.content

    # ---------------- Endpoints -----------------
    def get_forecast(self, request: ForecastRequest) -> ApiResponse:
        """Current conditions plus minute/hour/day forecasts."""
        return parse_response(self.fetch(request))

    def get_time_machine(self, request: TimeMachineRequest) -> ApiResponse:
        """Conditions for a specific past or future time."""
        return parse_response(self.fetch(request))

    def forecast(
        self,
        latitude: float,
        longitude: float,
        time: int | datetime | None = None,
        *,
        exclude: Iterable[ExcludeBlock] = (),
        extend: ExtendBy | None = None,
        lang: Lang | None = None,
        units: Units | None = None,
    ) -> ApiResponse:
        """
        Fetch weather for a location, now or at ``time``.

        Uses the client's API key; ``lang`` and ``units`` default to the
        client's own. ``extend`` only applies without ``time``.

        Raises:
            ConfigurationError: The client has no API key.
            ValueError: ``extend`` was given together with ``time``.
        """
        if not self.api_key:
            msg = "No API key configured (pass api_key= or set FORECAST_API_KEY)"
            raise ConfigurationError(msg)

        lang = lang or self.lang
        units = units or self.units

        builder: ForecastRequestBuilder | TimeMachineRequestBuilder
        if time is None:
            builder = ForecastRequestBuilder(self.api_key, latitude, longitude)
            if extend is not None:
                builder.extend(extend)
        else:
            if extend is not None:
                msg = "extend is not supported for time machine requests"
                raise ValueError(msg)
            builder = TimeMachineRequestBuilder(self.api_key, latitude, longitude, time)

        builder.exclude_blocks(exclude)
        if lang is not None:
            builder.lang(lang)
        if units is not None:
            builder.units(units)

        request = builder.build()
        if isinstance(request, TimeMachineRequest):
            return self.get_time_machine(request)
        return self.get_forecast(request)

    def __repr__(self) -> str:
        return f"ApiClient(base_url={self.base_url!r}, units={self.units}, lang={self.lang})"


def fetch_forecast(
    latitude: float,
    longitude: float,
    time: int | datetime | None = None,
    **options: Any,
) -> ApiResponse:
    """One-shot helper: build a client from settings, fetch, close."""
    with ApiClient.from_settings() as client:
        return client.forecast(latitude, longitude, time, **options)
