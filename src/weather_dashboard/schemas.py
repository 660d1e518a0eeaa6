# Project: weather-dashboard
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
schemas.py — Wire shapes: the normalized WeatherSnapshot, request bodies and
API responses.

Python attributes are snake_case; JSON uses camelCase via the alias
generator, and both spellings are accepted on input.
"""

from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

from weather_dashboard.utils import utcnow

Units = Literal["metric", "imperial"]
AlertType = Literal["temperature", "wind", "precipitation", "severe_weather"]
Severity = Literal["minor", "moderate", "warning", "severe"]

# City/country are matched by exact string equality, so trim them on the way in
PlaceName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
CountryName = Annotated[str, StringConstraints(strip_whitespace=True)]
Latitude = Annotated[float, Field(ge=-90, le=90, allow_inf_nan=False)]
Longitude = Annotated[float, Field(ge=-180, le=180, allow_inf_nan=False)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class FrozenCamelModel(CamelModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# WeatherSnapshot
# ---------------------------------------------------------------------------

class Coordinates(FrozenCamelModel):
    latitude: Latitude
    longitude: Longitude


class LocationInfo(FrozenCamelModel):
    city: str
    country: str
    coordinates: Coordinates


class CurrentWeather(FrozenCamelModel):
    temperature: float
    feels_like: float
    humidity: float = Field(ge=0, le=100)
    wind_speed: float = Field(ge=0)
    precipitation: float = Field(ge=0)
    weather_code: int
    description: str = Field(min_length=1)
    category: str  # display bucket from codes.severity_category


class HourlyForecastItem(FrozenCamelModel):
    time: str
    temperature: float
    weather_code: int
    wind_speed: float = Field(ge=0)
    precipitation: float = Field(ge=0)
    description: str = Field(min_length=1)
    category: str


class DailyForecastItem(FrozenCamelModel):
    date: str
    day_name: str
    max_temp: float
    min_temp: float
    weather_code: int
    precipitation: float = Field(ge=0)
    description: str = Field(min_length=1)
    category: str


class WeatherSnapshot(FrozenCamelModel):
    """One normalized forecast for one location at one fetch instant."""

    location: LocationInfo
    current: CurrentWeather
    hourly: tuple[HourlyForecastItem, ...] = Field(max_length=8)
    daily: tuple[DailyForecastItem, ...] = Field(max_length=7)
    units: Units = "metric"
    last_updated: datetime


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class WeatherSearchRequest(CamelModel):
    city: PlaceName
    units: Units = "metric"


class CoordinatesRequest(CamelModel):
    latitude: Latitude
    longitude: Longitude
    units: Units = "metric"


class AlertCheckRequest(CamelModel):
    latitude: Latitude
    longitude: Longitude
    city: PlaceName
    country: CountryName


class FavoriteCityCreate(CamelModel):
    name: PlaceName
    latitude: Latitude
    longitude: Longitude
    city: Optional[PlaceName] = None
    country: Optional[CountryName] = None


class AlertPreferenceCreate(CamelModel):
    city: PlaceName
    country: CountryName
    latitude: Latitude
    longitude: Longitude
    min_temp_threshold: Optional[float] = None
    max_temp_threshold: Optional[float] = None
    wind_speed_threshold: Optional[float] = None
    precipitation_threshold: Optional[float] = None
    severe_codes: Optional[str] = None
    is_enabled: bool = True


class AlertPreferenceUpdate(CamelModel):
    """Partial update: only fields present in the request body are applied."""

    city: Optional[PlaceName] = None
    country: Optional[CountryName] = None
    latitude: Optional[Latitude] = None
    longitude: Optional[Longitude] = None
    min_temp_threshold: Optional[float] = None
    max_temp_threshold: Optional[float] = None
    wind_speed_threshold: Optional[float] = None
    precipitation_threshold: Optional[float] = None
    severe_codes: Optional[str] = None
    is_enabled: Optional[bool] = None

    @field_validator("city", "country", "latitude", "longitude", "is_enabled")
    @classmethod
    def _not_null(cls, value):
        # Thresholds may be cleared with null; scope fields may not
        if value is None:
            raise ValueError("may not be null")
        return value


class AlertEventCreate(CamelModel):
    city: PlaceName
    country: CountryName
    alert_type: AlertType
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    severity: Severity
    start_time: datetime = Field(default_factory=utcnow)
    end_time: Optional[datetime] = None
    is_active: bool = True


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class FavoriteCityRead(CamelModel):
    id: str
    name: str
    latitude: float
    longitude: float
    city: Optional[str] = None
    country: Optional[str] = None
    added_at: datetime


class AlertPreferenceRead(CamelModel):
    id: str
    city: str
    country: str
    latitude: float
    longitude: float
    min_temp_threshold: Optional[float] = None
    max_temp_threshold: Optional[float] = None
    wind_speed_threshold: Optional[float] = None
    precipitation_threshold: Optional[float] = None
    severe_codes: Optional[str] = None
    is_enabled: bool
    created_at: datetime
    updated_at: datetime


class AlertEventRead(CamelModel):
    id: str
    city: str
    country: str
    alert_type: AlertType
    title: str
    description: str
    severity: Severity
    start_time: datetime
    end_time: Optional[datetime] = None
    is_active: bool
    created_at: datetime


class CheckResult(CamelModel):
    message: str
    alerts_generated: int
    alerts: list[AlertEventRead]


class LocationScan(CamelModel):
    city: str
    country: str
    alerts_generated: int
    alerts: list[AlertEventRead]
    error: Optional[str] = None


class ScanReport(CamelModel):
    message: str
    locations_scanned: int
    total_alerts_generated: int
    per_location: list[LocationScan]


class HealthStatus(CamelModel):
    status: str
    last_scan: Optional[dict] = None
