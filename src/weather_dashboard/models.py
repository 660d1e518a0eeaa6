# Project: weather-dashboard
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
models.py — Database rows for favorites, alert preferences and alerts.

Alerts are linked to preferences only by the (city, country) strings; there
is no foreign key between the two tables.

Timestamps are naive UTC (see utils.utcnow) in plain DateTime columns;
newer sqlmodel releases default datetime fields to a tz-aware column type
that rejects naive values.
"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from weather_dashboard.codes import parse_severe_codes
from weather_dashboard.utils import utcnow


def _new_id() -> str:
    return str(uuid4())


class FavoriteCity(SQLModel, table=True):
    __tablename__ = "favorite_cities"

    id: str = Field(default_factory=_new_id, primary_key=True)
    name: str
    latitude: float
    longitude: float
    city: Optional[str] = None
    country: Optional[str] = None
    added_at: datetime = Field(default_factory=utcnow, nullable=False, index=True, sa_type=DateTime)


class AlertPreference(SQLModel, table=True):
    """A threshold rule bound to one (city, country) scope.

    Any threshold left as None is inactive. severe_codes is a comma-separated
    list of WMO codes; None means the default thunderstorm set.
    """

    __tablename__ = "alert_preferences"

    id: str = Field(default_factory=_new_id, primary_key=True)
    city: str = Field(index=True)
    country: str = Field(index=True)
    latitude: float
    longitude: float
    min_temp_threshold: Optional[float] = None
    max_temp_threshold: Optional[float] = None
    wind_speed_threshold: Optional[float] = None
    precipitation_threshold: Optional[float] = None
    severe_codes: Optional[str] = None
    is_enabled: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=DateTime)

    def severe_code_set(self) -> frozenset[int]:
        return parse_severe_codes(self.severe_codes)


class WeatherAlert(SQLModel, table=True):
    """A materialized alert. Rows are deactivated, never deleted."""

    __tablename__ = "weather_alerts"

    id: str = Field(default_factory=_new_id, primary_key=True)
    city: str = Field(index=True)
    country: str = Field(index=True)
    alert_type: str = Field(max_length=32)
    title: str
    description: str
    severity: str = Field(max_length=16)
    start_time: datetime = Field(default_factory=utcnow, nullable=False, index=True, sa_type=DateTime)
    end_time: Optional[datetime] = Field(default=None, sa_type=DateTime)
    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True, sa_type=DateTime)


__all__ = ["FavoriteCity", "AlertPreference", "WeatherAlert"]
