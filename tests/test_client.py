"""Tests for ApiClient: transport, error mapping and the forecast() facade."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any
from unittest.mock import Mock, patch

import pytest
import requests
from pydantic import SecretStr, ValidationError

from forecast_client.client import ApiClient, fetch_forecast, parse_response, redact
from forecast_client.config import DEFAULT_BASE_URL, Settings
from forecast_client.errors import (
    ApiError,
    ConfigurationError,
    ForecastError,
    RateLimitError,
    ResponseParseError,
    TransportError,
)
from forecast_client.query import ForecastRequestBuilder, TimeMachineRequestBuilder
from forecast_client.schemas import ApiResponse, ExcludeBlock, ExtendBy, Icon, Lang, Units

API_KEY = "s3cr3tkey"


def _client(response: requests.Response | None = None, **kwargs: Any) -> ApiClient:
    session = Mock(spec=requests.Session)
    if response is not None:
        session.get.return_value = response
    return ApiClient(API_KEY, session=session, **kwargs)


class TestRedact:
    """The API key never leaks into logs or errors."""

    def test_redacts_known_key(self) -> None:
        url = f"https://example.com/v1/{API_KEY}/1.0,2.0"
        assert redact(url, API_KEY) == "https://example.com/v1/***/1.0,2.0"

    def test_redacts_forecast_path_without_key(self) -> None:
        url = f"{DEFAULT_BASE_URL}/{API_KEY}/1.0,2.0"
        assert API_KEY not in redact(url)


class TestParseResponse:
    """Body to model."""

    def test_parses_bytes(self, forecast_body: bytes) -> None:
        assert isinstance(parse_response(forecast_body), ApiResponse)

    def test_parses_str(self, forecast_body: bytes) -> None:
        assert parse_response(forecast_body.decode()).timezone == "America/Los_Angeles"

    def test_malformed_json(self) -> None:
        with pytest.raises(ResponseParseError):
            parse_response(b"<html>Service Unavailable</html>")

    def test_schema_mismatch(self) -> None:
        with pytest.raises(ResponseParseError) as exc_info:
            parse_response(b'{"latitude": 1}')
        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_is_forecast_error(self) -> None:
        with pytest.raises(ForecastError):
            parse_response(b"")


class TestFetch:
    """Transport: URL building and status handling."""

    def test_requests_url_and_params(self, response_factory: Any, forecast_body: bytes) -> None:
        client = _client(response_factory(200, forecast_body))
        request = (
            ForecastRequestBuilder(API_KEY, 37.8267, -122.4233)
            .exclude_block(ExcludeBlock.MINUTELY)
            .units(Units.SI)
            .build()
        )

        body = client.fetch(request)

        assert body == forecast_body
        client.session.get.assert_called_once_with(  # type: ignore[attr-defined]
            f"{DEFAULT_BASE_URL}/{API_KEY}/37.8267,-122.4233",
            params={"exclude": "minutely", "units": "si"},
        )

    def test_custom_base_url_trailing_slash(self, response_factory: Any) -> None:
        client = _client(response_factory(200, b"{}"), base_url="http://localhost:8080/forecast/")
        request = ForecastRequestBuilder(API_KEY, 1.0, 2.0).build()
        assert client.url_for(request) == f"http://localhost:8080/forecast/{API_KEY}/1.0,2.0"

    def test_time_machine_url(self, response_factory: Any) -> None:
        client = _client(response_factory(200, b"{}"))
        request = TimeMachineRequestBuilder(API_KEY, 1.0, 2.0, 666).build()
        client.fetch(request)
        url = client.session.get.call_args.args[0]  # type: ignore[attr-defined]
        assert url.endswith(f"/{API_KEY}/1.0,2.0,666")

    def test_rate_limited(self, response_factory: Any) -> None:
        body = b'{"code": 429, "error": "daily usage limit exceeded"}'
        client = _client(response_factory(429, body))
        with pytest.raises(RateLimitError) as exc_info:
            client.fetch(ForecastRequestBuilder(API_KEY, 1.0, 2.0).build())
        assert exc_info.value.status_code == 429
        assert exc_info.value.message == "daily usage limit exceeded"

    def test_rate_limit_is_api_error(self, response_factory: Any) -> None:
        client = _client(response_factory(429, b""))
        with pytest.raises(ApiError):
            client.fetch(ForecastRequestBuilder(API_KEY, 1.0, 2.0).build())

    def test_api_error_uses_error_field(self, response_factory: Any) -> None:
        body = b'{"code": 400, "error": "The given location is invalid."}'
        client = _client(response_factory(400, body))
        with pytest.raises(ApiError) as exc_info:
            client.fetch(ForecastRequestBuilder(API_KEY, 1.0, 2.0).build())
        assert exc_info.value.status_code == 400
        assert str(exc_info.value) == "HTTP 400: The given location is invalid."

    def test_api_error_non_json_body(self, response_factory: Any) -> None:
        client = _client(response_factory(503, b"<html>down</html>", reason="Service Unavailable"))
        with pytest.raises(ApiError) as exc_info:
            client.fetch(ForecastRequestBuilder(API_KEY, 1.0, 2.0).build())
        assert exc_info.value.status_code == 503
        assert exc_info.value.message == "Service Unavailable"

    def test_forbidden_is_not_rate_limit(self, response_factory: Any) -> None:
        client = _client(response_factory(403, b'{"code": 403, "error": "permission denied"}'))
        with pytest.raises(ApiError) as exc_info:
            client.fetch(ForecastRequestBuilder(API_KEY, 1.0, 2.0).build())
        assert not isinstance(exc_info.value, RateLimitError)

    def test_network_failure(self) -> None:
        client = _client()
        client.session.get.side_effect = requests.ConnectionError(  # type: ignore[attr-defined]
            f"Max retries exceeded with url: /forecast/{API_KEY}/1.0,2.0"
        )
        with pytest.raises(TransportError) as exc_info:
            client.fetch(ForecastRequestBuilder(API_KEY, 1.0, 2.0).build())
        assert API_KEY not in str(exc_info.value)
        assert "ConnectionError" in str(exc_info.value)

    def test_timeout(self) -> None:
        client = _client()
        client.session.get.side_effect = requests.Timeout()  # type: ignore[attr-defined]
        with pytest.raises(TransportError):
            client.fetch(ForecastRequestBuilder(API_KEY, 1.0, 2.0).build())

    def test_logs_without_key(
        self, response_factory: Any, caplog: pytest.LogCaptureFixture
    ) -> None:
        client = _client(
            response_factory(
                200, b"{}", headers={"X-Forecast-API-Calls": "17", "X-Response-Time": "52ms"}
            )
        )
        with caplog.at_level(logging.DEBUG, logger="forecast_client.client"):
            client.fetch(ForecastRequestBuilder(API_KEY, 1.0, 2.0).build())
        assert "API calls today: 17" in caplog.text
        assert "in 52ms" in caplog.text
        assert API_KEY not in caplog.text

    def test_logs_response_time_alone(
        self, response_factory: Any, caplog: pytest.LogCaptureFixture
    ) -> None:
        client = _client(response_factory(200, b"{}", headers={"X-Response-Time": "40ms"}))
        with caplog.at_level(logging.DEBUG, logger="forecast_client.client"):
            client.fetch(ForecastRequestBuilder(API_KEY, 1.0, 2.0).build())
        assert "in 40ms (API calls today: ?)" in caplog.text


class TestEndpoints:
    """get_forecast / get_time_machine return parsed models."""

    def test_get_forecast(self, response_factory: Any, forecast_body: bytes) -> None:
        client = _client(response_factory(200, forecast_body))
        resp = client.get_forecast(ForecastRequestBuilder(API_KEY, 37.8267, -122.4233).build())
        assert resp.currently is not None
        assert resp.currently.icon is Icon.RAIN

    def test_get_time_machine(self, response_factory: Any, forecast_body: bytes) -> None:
        client = _client(response_factory(200, forecast_body))
        request = TimeMachineRequestBuilder(API_KEY, 37.8267, -122.4233, 1477238400).build()
        assert client.get_time_machine(request).latitude == 37.8267

    def test_get_forecast_bad_body(self, response_factory: Any) -> None:
        client = _client(response_factory(200, b"not json"))
        with pytest.raises(ResponseParseError):
            client.get_forecast(ForecastRequestBuilder(API_KEY, 1.0, 2.0).build())


class TestForecastFacade:
    """ApiClient.forecast picks the endpoint and fills in defaults."""

    def test_requires_api_key(self) -> None:
        client = ApiClient(session=Mock(spec=requests.Session))
        with pytest.raises(ConfigurationError):
            client.forecast(1.0, 2.0)

    def test_forecast_without_time(self, response_factory: Any, forecast_body: bytes) -> None:
        client = _client(response_factory(200, forecast_body))
        client.forecast(1.0, 2.0, exclude=[ExcludeBlock.MINUTELY], extend=ExtendBy.HOURLY)
        call = client.session.get.call_args  # type: ignore[attr-defined]
        assert call.args[0].endswith(f"/{API_KEY}/1.0,2.0")
        assert call.kwargs["params"] == {"exclude": "minutely", "extend": "hourly"}

    def test_forecast_with_time(self, response_factory: Any, forecast_body: bytes) -> None:
        client = _client(response_factory(200, forecast_body))
        client.forecast(1.0, 2.0, datetime(2016, 10, 23, 16, 0, tzinfo=UTC))
        url = client.session.get.call_args.args[0]  # type: ignore[attr-defined]
        assert url.endswith(f"/{API_KEY}/1.0,2.0,1477238400")

    def test_extend_with_time_rejected(self) -> None:
        client = _client()
        with pytest.raises(ValueError, match="extend"):
            client.forecast(1.0, 2.0, 666, extend=ExtendBy.HOURLY)
        client.session.get.assert_not_called()  # type: ignore[attr-defined]

    def test_client_defaults_applied(self, response_factory: Any, forecast_body: bytes) -> None:
        client = _client(response_factory(200, forecast_body), units=Units.SI, lang=Lang.GERMAN)
        client.forecast(1.0, 2.0)
        params = client.session.get.call_args.kwargs["params"]  # type: ignore[attr-defined]
        assert params == {"lang": "de", "units": "si"}

    def test_call_overrides_client_defaults(
        self, response_factory: Any, forecast_body: bytes
    ) -> None:
        client = _client(response_factory(200, forecast_body), units=Units.SI)
        client.forecast(1.0, 2.0, units=Units.IMPERIAL)
        params = client.session.get.call_args.kwargs["params"]  # type: ignore[attr-defined]
        assert params["units"] == "us"

    def test_invalid_coordinates(self) -> None:
        client = _client()
        with pytest.raises(ValidationError):
            client.forecast(100.0, 2.0)


class TestLifecycle:
    """Session ownership."""

    def test_closes_own_session(self) -> None:
        with patch("forecast_client.client.create_session") as mock_create:
            with ApiClient(API_KEY):
                pass
            mock_create.return_value.close.assert_called_once()

    def test_leaves_injected_session_open(self) -> None:
        session = Mock(spec=requests.Session)
        with ApiClient(API_KEY, session=session):
            pass
        session.close.assert_not_called()

    def test_repr_hides_key(self) -> None:
        assert API_KEY not in repr(_client())


class TestFromSettings:
    """Building a client from configuration."""

    def _settings(self, **kwargs: Any) -> Settings:
        return Settings(_env_file=None, **kwargs)  # type: ignore[call-arg]

    def test_copies_settings(self) -> None:
        settings = self._settings(
            api_key=SecretStr(API_KEY),
            base_url="http://localhost/forecast",
            units=Units.CA,
            lang=Lang.FRENCH,
        )
        client = ApiClient.from_settings(settings)
        assert client.api_key == API_KEY
        assert client.base_url == "http://localhost/forecast"
        assert client.units is Units.CA
        assert client.lang is Lang.FRENCH

    def test_retry_budget_from_settings(self) -> None:
        client = ApiClient.from_settings(self._settings(max_retries=1, backoff_factor=0.1))
        adapter = client.session.get_adapter("https://api.darksky.net")
        assert adapter.max_retries.total == 1  # type: ignore[attr-defined]

    def test_missing_key(self) -> None:
        client = ApiClient.from_settings(self._settings())
        assert client.api_key is None

    def test_owns_session(self) -> None:
        client = ApiClient.from_settings(self._settings())
        with patch.object(client.session, "close") as mock_close:
            client.close()
        mock_close.assert_called_once()


class TestFetchForecast:
    """The one-shot helper."""

    def test_uses_settings(self, response_factory: Any, forecast_body: bytes) -> None:
        settings = Settings(_env_file=None, api_key=SecretStr(API_KEY))  # type: ignore[call-arg]
        with (
            patch("forecast_client.client.get_settings", return_value=settings),
            patch.object(
                requests.Session, "get", return_value=response_factory(200, forecast_body)
            ),
        ):
            resp = fetch_forecast(37.8267, -122.4233)
        assert resp.timezone == "America/Los_Angeles"
