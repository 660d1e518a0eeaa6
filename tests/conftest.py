# Project: weather-dashboard
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
conftest.py — Shared fixtures: an in-memory repository and fake forecast
payloads / snapshots. Nothing here touches the network or the disk.
"""

from datetime import datetime, timedelta

import pytest

from weather_dashboard.storage import SQLRepository, init_db, make_engine
from weather_dashboard.weather import normalize


def make_raw_forecast(
    n_hourly: int = 24,
    n_daily: int = 7,
    temperature: float = 15.0,
    apparent_temperature: float | None = 14.0,
    humidity: float = 60,
    wind_speed: float = 10.0,
    precipitation: float = 0.0,
    weather_code: int = 0,
    base_time: str = "2024-06-01T00:00",
) -> dict:
    """Build a minimal Open-Meteo forecast payload (metric units)."""
    base = datetime.strptime(base_time, "%Y-%m-%dT%H:%M")
    hours = [(base + timedelta(hours=i)).strftime("%Y-%m-%dT%H:%M") for i in range(n_hourly)]
    days = [(base + timedelta(days=i)).strftime("%Y-%m-%d") for i in range(n_daily)]

    current = {
        "time": base_time,
        "temperature_2m": temperature,
        "relative_humidity_2m": humidity,
        "apparent_temperature": apparent_temperature,
        "precipitation": precipitation,
        "weather_code": weather_code,
        "wind_speed_10m": wind_speed,
    }
    return {
        "current": current,
        "hourly": {
            "time": hours,
            "temperature_2m": [10.0 + i for i in range(n_hourly)],
            "precipitation": [0.0] * n_hourly,
            "weather_code": [i % 4 for i in range(n_hourly)],
            "wind_speed_10m": [5.0] * n_hourly,
        },
        "daily": {
            "time": days,
            "temperature_2m_max": [20.0 + i for i in range(n_daily)],
            "temperature_2m_min": [10.0 + i for i in range(n_daily)],
            "precipitation_sum": [1.0] * n_daily,
            "weather_code": [61] * n_daily,
        },
    }


BERLIN = {"city": "Berlin", "country": "Germany", "latitude": 52.52, "longitude": 13.41}


def make_snapshot(units: str = "metric", location: dict | None = None, **current):
    """Normalize a fake payload into a WeatherSnapshot; kwargs override current values."""
    return normalize(make_raw_forecast(**current), location or BERLIN, units=units)


@pytest.fixture
def repository():
    engine = make_engine("sqlite://")
    init_db(engine)
    return SQLRepository(engine)
