"""
rules.py — Evaluate alert preferences against current conditions.

Each check_* function receives the snapshot's current conditions and one
preference, and returns an unsaved WeatherAlert if its rule fires, or None
if the threshold is unset or not crossed.

evaluate() runs all checks and returns the alerts that fired. Thresholds are
in canonical metric units, like the snapshot values they are compared with.
"""

from datetime import datetime
from typing import Optional

from weather_dashboard.codes import alert_severity, describe
from weather_dashboard.models import AlertPreference, WeatherAlert
from weather_dashboard.schemas import CurrentWeather, WeatherSnapshot
from weather_dashboard.utils import utcnow


def _fmt(value: float) -> str:
    """33.0 → '33', 4.9 → '4.9'."""
    return f"{value:g}"


def _alert(
    preference: AlertPreference,
    now: datetime,
    alert_type: str,
    title: str,
    description: str,
    severity: str,
) -> WeatherAlert:
    # Scope comes from the preference, not the snapshot
    return WeatherAlert(
        city=preference.city,
        country=preference.country,
        alert_type=alert_type,
        title=title,
        description=description,
        severity=severity,
        start_time=now,
        end_time=None,
        is_active=True,
        created_at=now,
    )


def check_min_temperature(
    current: CurrentWeather, preference: AlertPreference, now: datetime
) -> Optional[WeatherAlert]:
    """Trigger if the temperature is strictly below minTempThreshold."""
    threshold = preference.min_temp_threshold
    if threshold is None or not current.temperature < threshold:
        return None
    return _alert(
        preference, now, "temperature", "Low Temperature Alert",
        f"Temperature has dropped to {_fmt(current.temperature)}°C, "
        f"below your threshold of {_fmt(threshold)}°C",
        "moderate",
    )


def check_max_temperature(
    current: CurrentWeather, preference: AlertPreference, now: datetime
) -> Optional[WeatherAlert]:
    """Trigger if the temperature is strictly above maxTempThreshold."""
    threshold = preference.max_temp_threshold
    if threshold is None or not current.temperature > threshold:
        return None
    return _alert(
        preference, now, "temperature", "High Temperature Alert",
        f"Temperature has risen to {_fmt(current.temperature)}°C, "
        f"above your threshold of {_fmt(threshold)}°C",
        "moderate",
    )


def check_wind(
    current: CurrentWeather, preference: AlertPreference, now: datetime
) -> Optional[WeatherAlert]:
    threshold = preference.wind_speed_threshold
    if threshold is None or not current.wind_speed > threshold:
        return None
    return _alert(
        preference, now, "wind", "High Wind Speed Alert",
        f"Wind speed has reached {_fmt(current.wind_speed)} km/h, "
        f"above your threshold of {_fmt(threshold)} km/h",
        "warning",
    )


def check_precipitation(
    current: CurrentWeather, preference: AlertPreference, now: datetime
) -> Optional[WeatherAlert]:
    threshold = preference.precipitation_threshold
    if threshold is None or not current.precipitation > threshold:
        return None
    return _alert(
        preference, now, "precipitation", "Heavy Precipitation Alert",
        f"Heavy precipitation detected: {_fmt(current.precipitation)}mm, "
        f"above your threshold of {_fmt(threshold)}mm",
        "warning",
    )


def check_severe_weather(
    current: CurrentWeather,
    preference: AlertPreference,
    now: datetime,
    severe_codes: frozenset[int],
) -> Optional[WeatherAlert]:
    """Trigger if the current weather code is one of the preference's severe codes.

    Fires regardless of the numeric thresholds. Severity follows the code:
    thunderstorms are severe, heavy rain/snow a warning, anything else moderate.
    """
    code = current.weather_code
    if code not in severe_codes:
        return None
    return _alert(
        preference, now, "severe_weather", "Severe Weather Alert",
        f"{describe(code)} detected in your area. Please take appropriate precautions.",
        alert_severity(code),
    )


def evaluate(
    snapshot: WeatherSnapshot,
    preference: AlertPreference,
    now: datetime | None = None,
) -> list[WeatherAlert]:
    """
    Run every rule family against snapshot.current.
    Returns the alerts that fired (empty list = no alerts), at most one per
    rule: low temp, high temp, wind, precipitation, severe weather.
    Nothing is saved here; see lifecycle.AlertLifecycleManager.
    """
    now = now or utcnow()
    current = snapshot.current
    severe_codes = preference.severe_code_set()

    checks = [
        check_min_temperature(current, preference, now),
        check_max_temperature(current, preference, now),
        check_wind(current, preference, now),
        check_precipitation(current, preference, now),
        check_severe_weather(current, preference, now, severe_codes),
    ]

    # Filter out None values (rules that didn't trigger)
    return [alert for alert in checks if alert is not None]
