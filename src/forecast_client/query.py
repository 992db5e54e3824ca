"""
Request models and their builders.

A request knows how to render itself as a URL path and query parameters;
``ApiClient`` joins those with the configured base URL.

Example::

    request = (
        ForecastRequestBuilder(api_key, 45.5, -122.6)
        .exclude_block(ExcludeBlock.MINUTELY)
        .units(Units.SI)
        .build()
    )
    request.path()    # "/<key>/45.5,-122.6"
    request.params()  # {"exclude": "minutely", "units": "si"}
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Self

from pydantic import BaseModel, ConfigDict, Field

from forecast_client.schemas import ExcludeBlock, ExtendBy, Lang, Units

if TYPE_CHECKING:
    from collections.abc import Iterable


def to_unix_time(value: int | datetime) -> int:
    """Convert a datetime (naive means UTC) to UNIX seconds; ints pass through."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return math.floor(value.timestamp())
    return value


def _coord(value: float) -> str:
    """Shortest plain decimal for a coordinate, never in exponent form (1e-05)."""
    return format(Decimal(repr(value)), "f")


class _BaseRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., min_length=1, repr=False)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    exclude: list[ExcludeBlock] = Field(default_factory=list)
    lang: Lang | None = None
    units: Units | None = None

    def _location(self) -> str:
        return f"{_coord(self.latitude)},{_coord(self.longitude)}"

    def path(self) -> str:
        """URL path below the base URL, including the API key."""
        return f"/{self.api_key}/{self._location()}"

    def params(self) -> dict[str, str]:
        """Query parameters; options that were never set are omitted."""
        params: dict[str, str] = {}
        if self.exclude:
            # dict.fromkeys drops repeats but keeps first-seen order
            params["exclude"] = ",".join(dict.fromkeys(b.value for b in self.exclude))
        if self.lang is not None:
            params["lang"] = self.lang.value
        if self.units is not None:
            params["units"] = self.units.value
        return params


class ForecastRequest(_BaseRequest):
    """Current conditions and forecast for a location."""

    extend: ExtendBy | None = None

    def params(self) -> dict[str, str]:
        params = super().params()
        if self.extend is not None:
            params["extend"] = self.extend.value
        return params


class TimeMachineRequest(_BaseRequest):
    """Observed or forecast conditions for a location at a given time."""

    time: int = Field(..., description="UNIX seconds; negative for dates before 1970")

    def _location(self) -> str:
        return f"{_coord(self.latitude)},{_coord(self.longitude)},{self.time}"


class _BaseBuilder:
    def __init__(self, api_key: str, latitude: float, longitude: float) -> None:
        self._api_key = api_key
        self._latitude = latitude
        self._longitude = longitude
        self._exclude: list[ExcludeBlock] = []
        self._lang: Lang | None = None
        self._units: Units | None = None

    def exclude_block(self, exclude_block: ExcludeBlock) -> Self:
        """Leave one block out of the response."""
        self._exclude.append(exclude_block)
        return self

    def exclude_blocks(self, exclude_blocks: Iterable[ExcludeBlock]) -> Self:
        """Leave several blocks out of the response. The iterable is not modified."""
        self._exclude.extend(exclude_blocks)
        return self

    def lang(self, lang: Lang) -> Self:
        self._lang = lang
        return self

    def units(self, units: Units) -> Self:
        self._units = units
        return self

    def _common(self) -> dict[str, object]:
        return {
            "api_key": self._api_key,
            "latitude": self._latitude,
            "longitude": self._longitude,
            "exclude": list(self._exclude),
            "lang": self._lang,
            "units": self._units,
        }


class ForecastRequestBuilder(_BaseBuilder):
    """Chainable builder for ``ForecastRequest``."""

    def __init__(self, api_key: str, latitude: float, longitude: float) -> None:
        super().__init__(api_key, latitude, longitude)
        self._extend: ExtendBy | None = None

    def extend(self, extend: ExtendBy) -> Self:
        self._extend = extend
        return self

    def build(self) -> ForecastRequest:
        """Validate and return the request. Raises ``pydantic.ValidationError``."""
        return ForecastRequest(**self._common(), extend=self._extend)


class TimeMachineRequestBuilder(_BaseBuilder):
    """Chainable builder for ``TimeMachineRequest``."""

    def __init__(
        self, api_key: str, latitude: float, longitude: float, time: int | datetime
    ) -> None:
        super().__init__(api_key, latitude, longitude)
        self._time = to_unix_time(time)

    def build(self) -> TimeMachineRequest:
        """Validate and return the request. Raises ``pydantic.ValidationError``."""
        return TimeMachineRequest(**self._common(), time=self._time)
