"""Shared fixtures."""

from __future__ import annotations

import json
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
import requests

from forecast_client.config import get_settings

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep a developer's FORECAST_* variables and cached settings out of tests."""
    for name in list(os.environ):
        if name.startswith("FORECAST_"):
            monkeypatch.delenv(name)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def forecast_body() -> bytes:
    """A recorded Forecast API response body."""
    return (FIXTURES / "forecast_response.json").read_bytes()


@pytest.fixture
def forecast_dict(forecast_body: bytes) -> dict[str, Any]:
    result: dict[str, Any] = json.loads(forecast_body)
    return result


def make_response(
    status_code: int = 200,
    body: bytes = b"",
    headers: dict[str, str] | None = None,
    reason: str = "",
) -> requests.Response:
    """Build a ``requests.Response`` without touching the network."""
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = body
    resp.headers.update(headers or {})
    resp.reason = reason
    resp.encoding = "utf-8"
    return resp


@pytest.fixture
def response_factory() -> Any:
    """The ``make_response`` helper, as a fixture."""
    return make_response
