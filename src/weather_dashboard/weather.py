# Project: weather-dashboard
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
weather.py — Fetch the Open-Meteo forecast and normalize it into a
WeatherSnapshot.

Open-Meteo is free and requires no API key. We always request metric units;
imperial values are produced during normalization so the raw payload stays
in the canonical units alert thresholds are written in.

API docs: https://open-meteo.com/en/docs
"""

from pathlib import Path

import requests

from weather_dashboard.codes import describe, severity_category
from weather_dashboard.errors import MalformedPayload
from weather_dashboard.schemas import WeatherSnapshot
from weather_dashboard.units import (
    convert_precipitation,
    convert_speed,
    convert_temperature,
    round_half_up,
)
from weather_dashboard.utils import DEFAULT_LOG_PATH, fmt_day, fmt_hour, utcnow, with_retry


OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"

HOURLY_WINDOW = 8
DAILY_WINDOW = 7

CURRENT_VARIABLES = [
    "temperature_2m",
    "relative_humidity_2m",
    "apparent_temperature",
    "precipitation",
    "weather_code",
    "wind_speed_10m",
]

HOURLY_VARIABLES = [
    "temperature_2m",
    "precipitation",
    "weather_code",
    "wind_speed_10m",
]

DAILY_VARIABLES = [
    "temperature_2m_max",
    "temperature_2m_min",
    "precipitation_sum",
    "weather_code",
]

# Arrays normalize() cannot do without; wind and precipitation default to 0
REQUIRED_HOURLY = ("time", "temperature_2m", "weather_code")
REQUIRED_DAILY = ("time", "temperature_2m_max", "temperature_2m_min", "weather_code")
REQUIRED_CURRENT = ("temperature_2m", "relative_humidity_2m", "wind_speed_10m", "weather_code")


def fetch_forecast(
    latitude: float,
    longitude: float,
    base_url: str = OPEN_METEO_URL,
    timeout: float = 10,
    log_path: Path = DEFAULT_LOG_PATH,
) -> dict:
    """Fetch the raw current + hourly + daily forecast from Open-Meteo.

    Args:
        latitude: Location latitude in decimal degrees.
        longitude: Location longitude in decimal degrees.
        base_url: Forecast endpoint.
        timeout: Seconds per HTTP request.
        log_path: Where final failures are logged.

    Returns:
        The decoded JSON payload, in metric units.

    Raises:
        UpstreamUnavailable: If all retry attempts fail.
    """
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "current": ",".join(CURRENT_VARIABLES),
        "hourly": ",".join(HOURLY_VARIABLES),
        "daily": ",".join(DAILY_VARIABLES),
        "temperature_unit": "celsius",
        "wind_speed_unit": "kmh",
        "precipitation_unit": "mm",
        "forecast_days": DAILY_WINDOW,
        "timezone": "auto",
    }

    def _call():
        r = requests.get(base_url, params=params, timeout=timeout)
        r.raise_for_status()
        return r.json()

    return with_retry(_call, label="Open-Meteo forecast API", log_path=log_path)


def _block(raw: dict, name: str, required: tuple[str, ...], window: int | None) -> dict:
    """Return raw[name] after checking its required fields.

    For array blocks (window set) each required array must hold at least
    `window` entries.
    """
    if not isinstance(raw, dict) or not isinstance(raw.get(name), dict):
        raise MalformedPayload(f"Unexpected API response structure: missing '{name}' block")
    block = raw[name]
    for key in required:
        if key not in block or block[key] is None:
            raise MalformedPayload(f"Unexpected API response structure: missing '{name}.{key}'")
        if window is None:
            continue
        if not isinstance(block[key], list):
            raise MalformedPayload(f"Unexpected API response structure: '{name}.{key}' is not an array")
        if len(block[key]) < window:
            raise MalformedPayload(
                f"'{name}.{key}' has {len(block[key])} entries, expected at least {window}"
            )
    return block


def _value(values: list | None, i: int, default: float = 0) -> float:
    """values[i], treating a missing array, short array or null as `default`."""
    if not values or i >= len(values) or values[i] is None:
        return default
    return values[i]


def _required(values: list, i: int, field: str) -> float:
    if values[i] is None:
        raise MalformedPayload(f"Null value for '{field}' at index {i}")
    return values[i]


def normalize(raw: dict, location: dict, units: str = "metric") -> WeatherSnapshot:
    """Turn a raw Open-Meteo payload into a WeatherSnapshot.

    Hourly entries are cut to the first 8 and daily entries to the first 7,
    in source order. Temperatures, wind and precipitation are converted to
    `units` and rounded to whole numbers, the same granularity the alert
    thresholds are compared against.

    Args:
        raw: Payload from fetch_forecast (metric units).
        location: Dict with city, country, latitude, longitude.
        units: 'metric' or 'imperial'.

    Returns:
        An immutable WeatherSnapshot.

    Raises:
        MalformedPayload: If a block or required array is missing, an array
            is shorter than the forecast window, or a value cannot be parsed.
    """
    current = _block(raw, "current", REQUIRED_CURRENT, window=None)
    hourly = _block(raw, "hourly", REQUIRED_HOURLY, window=HOURLY_WINDOW)
    daily = _block(raw, "daily", REQUIRED_DAILY, window=DAILY_WINDOW)

    try:
        return _build_snapshot(current, hourly, daily, location, units)
    except MalformedPayload:
        raise
    except (ValueError, TypeError) as e:
        # ValueError covers pydantic's ValidationError and bad time strings
        raise MalformedPayload(f"Could not normalize forecast: {e}") from e


def _build_snapshot(current: dict, hourly: dict, daily: dict, location: dict, units: str) -> WeatherSnapshot:
    def temp(celsius: float) -> int:
        return round_half_up(convert_temperature(celsius, units))

    def speed(kmh: float) -> int:
        return round_half_up(convert_speed(kmh, units))

    def precip(mm: float) -> int:
        return round_half_up(convert_precipitation(mm, units))

    temperature = current["temperature_2m"]
    feels_like = current.get("apparent_temperature")
    if feels_like is None:
        feels_like = temperature
    code = int(current["weather_code"])

    hourly_items = []
    for i in range(HOURLY_WINDOW):
        hour_code = int(_required(hourly["weather_code"], i, "hourly.weather_code"))
        hourly_items.append({
            "time": fmt_hour(hourly["time"][i]),
            "temperature": temp(_required(hourly["temperature_2m"], i, "hourly.temperature_2m")),
            "weather_code": hour_code,
            "wind_speed": speed(_value(hourly.get("wind_speed_10m"), i)),
            "precipitation": precip(_value(hourly.get("precipitation"), i)),
            "description": describe(hour_code),
            "category": severity_category(hour_code),
        })

    daily_items = []
    for i in range(DAILY_WINDOW):
        day_code = int(_required(daily["weather_code"], i, "daily.weather_code"))
        date_str = daily["time"][i]
        daily_items.append({
            "date": date_str,
            "day_name": fmt_day(date_str),
            "max_temp": temp(_required(daily["temperature_2m_max"], i, "daily.temperature_2m_max")),
            "min_temp": temp(_required(daily["temperature_2m_min"], i, "daily.temperature_2m_min")),
            "weather_code": day_code,
            "precipitation": precip(_value(daily.get("precipitation_sum"), i)),
            "description": describe(day_code),
            "category": severity_category(day_code),
        })

    return WeatherSnapshot(
        location={
            "city": location["city"],
            "country": location["country"],
            "coordinates": {
                "latitude": location["latitude"],
                "longitude": location["longitude"],
            },
        },
        current={
            "temperature": temp(temperature),
            "feels_like": temp(feels_like),
            "humidity": round_half_up(current["relative_humidity_2m"]),
            "wind_speed": speed(current["wind_speed_10m"]),
            "precipitation": precip(current.get("precipitation") or 0),
            "weather_code": code,
            "description": describe(code),
            "category": severity_category(code),
        },
        hourly=hourly_items,
        daily=daily_items,
        units=units,
        last_updated=utcnow(),
    )


def fetch_snapshot(
    latitude: float,
    longitude: float,
    city: str,
    country: str,
    units: str = "metric",
    providers: dict | None = None,
    log_path: Path = DEFAULT_LOG_PATH,
) -> WeatherSnapshot:
    """Fetch and normalize the forecast for one location.

    Args:
        latitude: Location latitude in decimal degrees.
        longitude: Location longitude in decimal degrees.
        city: City name to stamp on the snapshot.
        country: Country name to stamp on the snapshot.
        units: Display unit system for the snapshot values.
        providers: The [providers] config section (forecast_url, timeout).
        log_path: Where final fetch failures are logged.

    Raises:
        UpstreamUnavailable: If the forecast request keeps failing.
        MalformedPayload: If the response cannot be normalized.
    """
    providers = providers or {}
    raw = fetch_forecast(
        latitude,
        longitude,
        base_url=providers.get("forecast_url", OPEN_METEO_URL),
        timeout=providers.get("timeout", 10),
        log_path=log_path,
    )
    location = {"city": city, "country": country, "latitude": latitude, "longitude": longitude}
    return normalize(raw, location, units=units)
