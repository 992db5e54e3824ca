"""forecast-client - typed Python client for the Dark Sky style Forecast API.

Architecture::

    schemas.py       Pydantic models for the response body and option enums
    query.py         Request models + chainable builders (path and query params)
    client.py        ApiClient: transport, error mapping, forecast() facade
    errors.py        ForecastError hierarchy
    config.py        Settings from FORECAST_* environment variables
    services/http.py requests.Session with retry/backoff and default timeout
    cli.py           ``forecast-client`` command

Data flow: builder → request → ApiClient.fetch (bytes) → parse_response → ApiResponse
"""

__version__ = "0.1.0"

from forecast_client.client import ApiClient, fetch_forecast, parse_response
from forecast_client.config import Settings, get_settings
from forecast_client.errors import (
    ApiError,
    ConfigurationError,
    ForecastError,
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
from forecast_client.schemas import (
    Alert,
    AlertSeverity,
    ApiResponse,
    DataBlock,
    DataPoint,
    ExcludeBlock,
    ExtendBy,
    Flags,
    Icon,
    Lang,
    PrecipType,
    Units,
)

__all__ = [
    "Alert",
    "AlertSeverity",
    "ApiClient",
    "ApiError",
    "ApiResponse",
    "ConfigurationError",
    "DataBlock",
    "DataPoint",
    "ExcludeBlock",
    "ExtendBy",
    "Flags",
    "ForecastError",
    "ForecastRequest",
    "ForecastRequestBuilder",
    "Icon",
    "Lang",
    "PrecipType",
    "RateLimitError",
    "ResponseParseError",
    "Settings",
    "TimeMachineRequest",
    "TimeMachineRequestBuilder",
    "TransportError",
    "Units",
    "__version__",
    "fetch_forecast",
    "get_settings",
    "parse_response",
]
