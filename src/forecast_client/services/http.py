"""
Session factory for talking to the Forecast API.

``create_session()`` returns a ``requests.Session`` for gzipped JSON that
retries GETs on 429 and gateway errors. ``ApiClient`` calls it unless a
session is injected; ``ApiClient.from_settings`` sizes the retry budget with
``build_retry``.

Usage::

    from forecast_client.services.http import build_retry, create_session

    s = create_session(retry=build_retry(2, 0.5), timeout=10)
    resp = s.get("https://api.darksky.net/forecast/KEY/45.5,-122.6")
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from forecast_client import __version__

#: Four retries on 429 and gateway errors; the last status is returned, not raised.
DEFAULT_RETRY = Retry(
    total=4,
    backoff_factor=2,  # sleeps 0s, 4s, 8s, 16s
    status_forcelist=[429, 502, 503, 504],
    allowed_methods=["GET", "HEAD", "OPTIONS"],
    raise_on_status=False,  # ApiClient maps the final status to an error
)

DEFAULT_TIMEOUT = 30  # seconds

USER_AGENT = f"forecast-client/{__version__}"


def build_retry(total: int, backoff_factor: float) -> Retry:
    """Return ``DEFAULT_RETRY`` with a different attempt budget and backoff."""
    return DEFAULT_RETRY.new(total=total, backoff_factor=backoff_factor)


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Session for the Forecast API with retries and a default timeout.

    Args:
        retry: Retry policy for both schemes; ``DEFAULT_RETRY`` if omitted.
        timeout: Seconds, used when a call passes no ``timeout=``.
    """
    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or DEFAULT_RETRY)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = USER_AGENT
    s.headers["Accept"] = "application/json"
    s.headers["Accept-Encoding"] = "gzip"

    # requests has no session-wide timeout; fill it in per send()
    _original_send = s.send

    def _send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return _original_send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = _send_with_timeout  # type: ignore[method-assign]
    return s
