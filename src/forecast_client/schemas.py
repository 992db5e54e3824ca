"""
Domain models for the Forecast API.

Pydantic models for the request options and the JSON response body.
Python attributes are snake_case; the wire names (camelCase, or kebab-case
for flag keys) are kept as aliases so responses round-trip unchanged.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# =============================================================================
# Enumerations
# =============================================================================


class Icon(StrEnum):
    """Machine-readable summary of a data point, suitable for picking an icon."""

    CLEAR_DAY = "clear-day"
    CLEAR_NIGHT = "clear-night"
    RAIN = "rain"
    SNOW = "snow"
    SLEET = "sleet"
    WIND = "wind"
    FOG = "fog"
    CLOUDY = "cloudy"
    PARTLY_CLOUDY_DAY = "partly-cloudy-day"
    PARTLY_CLOUDY_NIGHT = "partly-cloudy-night"
    HAIL = "hail"
    THUNDERSTORM = "thunderstorm"
    TORNADO = "tornado"


class PrecipType(StrEnum):
    """Kind of precipitation occurring at a particular time."""

    RAIN = "rain"
    SNOW = "snow"
    SLEET = "sleet"


class ExcludeBlock(StrEnum):
    """A response block to leave out of the response."""

    CURRENTLY = "currently"
    MINUTELY = "minutely"
    HOURLY = "hourly"
    DAILY = "daily"
    ALERTS = "alerts"
    FLAGS = "flags"


class ExtendBy(StrEnum):
    """
    Extend a block beyond its default range.

    ``HOURLY`` reports 168 hours into the future instead of 48.
    """

    HOURLY = "hourly"


class Lang(StrEnum):
    """Language of text summaries."""

    ARABIC = "ar"
    AZERBAIJANI = "az"
    BELARUSIAN = "be"
    BOSNIAN = "bs"
    CZECH = "cz"
    GERMAN = "de"
    GREEK = "el"
    ENGLISH = "en"
    SPANISH = "es"
    FRENCH = "fr"
    CROATIAN = "hr"
    HUNGARIAN = "hu"
    INDONESIAN = "id"
    ITALIAN = "it"
    ICELANDIC = "is"
    CORNISH = "kw"
    NORWEGIAN_BOKMAL = "nb"
    DUTCH = "nl"
    POLISH = "pl"
    PORTUGUESE = "pt"
    RUSSIAN = "ru"
    SLOVAK = "sk"
    SERBIAN = "sr"
    SWEDISH = "sv"
    TETUM = "tet"
    TURKISH = "tr"
    UKRAINIAN = "uk"
    IGPAY_ATINLAY = "x-pig-latin"
    SIMPLIFIED_CHINESE = "zh"
    TRADITIONAL_CHINESE = "zh-tw"


class Units(StrEnum):
    """Measurement units for the response."""

    AUTO = "auto"
    CA = "ca"
    UK = "uk2"
    IMPERIAL = "us"
    SI = "si"


class AlertSeverity(StrEnum):
    """Severity of a weather alert."""

    ADVISORY = "advisory"
    WATCH = "watch"
    WARNING = "warning"


# =============================================================================
# Response body
# =============================================================================


def _utc(timestamp: int | None) -> datetime | None:
    return None if timestamp is None else datetime.fromtimestamp(timestamp, UTC)


class WireModel(BaseModel):
    """Base for response models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DataPoint(WireModel):
    """
    Weather conditions at a moment, or averaged over a period.

    Which fields are present depends on the block the point sits in: daily
    points carry the ``*_max``/``*_min`` extremes and sun times, minutely
    points usually carry only precipitation.
    """

    time: int = Field(..., description="UNIX seconds at the start of the period")
    summary: str | None = None
    icon: Icon | None = None

    apparent_temperature: float | None = None
    apparent_temperature_max: float | None = None
    apparent_temperature_max_time: int | None = None
    apparent_temperature_min: float | None = None
    apparent_temperature_min_time: int | None = None
    cloud_cover: float | None = None
    dew_point: float | None = None
    humidity: float | None = None
    moon_phase: float | None = None
    nearest_storm_bearing: float | None = None
    nearest_storm_distance: float | None = None
    ozone: float | None = None
    precip_accumulation: float | None = None
    precip_intensity: float | None = None
    precip_intensity_max: float | None = None
    precip_intensity_max_time: int | None = None
    precip_probability: float | None = None
    precip_type: PrecipType | None = None
    pressure: float | None = None
    sunrise_time: int | None = None
    sunset_time: int | None = None
    temperature: float | None = None
    temperature_max: float | None = None
    temperature_max_time: int | None = None
    temperature_min: float | None = None
    temperature_min_time: int | None = None
    uv_index: int | None = None
    uv_index_time: int | None = None
    visibility: float | None = None
    wind_bearing: float | None = None
    wind_gust: float | None = None
    wind_speed: float | None = None

    @property
    def timestamp(self) -> datetime:
        """``time`` as an aware UTC datetime."""
        return datetime.fromtimestamp(self.time, UTC)

    @property
    def sunrise(self) -> datetime | None:
        return _utc(self.sunrise_time)

    @property
    def sunset(self) -> datetime | None:
        return _utc(self.sunset_time)


class DataBlock(WireModel):
    """Weather over a period of time, as a list of data points."""

    data: list[DataPoint] = Field(default_factory=list)
    summary: str | None = None
    icon: Icon | None = None

    def __len__(self) -> int:
        return len(self.data)


class Alert(WireModel):
    """A severe weather warning issued by a government authority."""

    title: str
    description: str
    uri: str
    expires: int | None = None
    time: int | None = None
    severity: AlertSeverity | None = None
    regions: list[str] = Field(default_factory=list)

    @property
    def expires_at(self) -> datetime | None:
        return _utc(self.expires)

    def is_active(self, now: datetime | None = None) -> bool:
        """Whether the alert has not yet expired (alerts without expiry stay active)."""
        if self.expires is None:
            return True
        if now is None:
            now = datetime.now(UTC)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        return now < datetime.fromtimestamp(self.expires, UTC)


class Flags(BaseModel):
    """Miscellaneous metadata about a response."""

    model_config = ConfigDict(populate_by_name=True)

    darksky_unavailable: str | None = Field(default=None, alias="darksky-unavailable")
    metno_license: str | None = Field(default=None, alias="metno-license")
    nearest_station: float | None = Field(default=None, alias="nearest-station")
    sources: list[str] = Field(default_factory=list)
    units: Units


class ApiResponse(WireModel):
    """A Forecast or Time Machine response body."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    timezone: str = Field(..., description="IANA timezone name, e.g. America/New_York")
    offset: float | None = Field(default=None, description="UTC offset in hours")
    currently: DataPoint | None = None
    minutely: DataBlock | None = None
    hourly: DataBlock | None = None
    daily: DataBlock | None = None
    alerts: list[Alert] | None = None
    flags: Flags | None = None

    @property
    def tz(self) -> ZoneInfo:
        """The response's timezone, for localizing data point timestamps."""
        return ZoneInfo(self.timezone)

    def to_json(self) -> str:
        """Serialize back to the wire format."""
        return self.model_dump_json(by_alias=True, exclude_none=True)
