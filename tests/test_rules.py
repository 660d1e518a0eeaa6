"""
test_rules.py — Unit tests for each rule check.

We use hardcoded fake current conditions — no API calls here.
The principle: each test focuses on one rule and one boundary condition.
"""

from datetime import datetime

import pytest

from conftest import make_snapshot
from weather_dashboard.models import AlertPreference
from weather_dashboard.rules import (
    check_max_temperature,
    check_min_temperature,
    check_precipitation,
    check_severe_weather,
    check_wind,
    evaluate,
)
from weather_dashboard.schemas import CurrentWeather

NOW = datetime(2024, 6, 1, 12, 0)


# ---------------------------------------------------------------------------
# Helpers: build minimal current conditions and preferences
# ---------------------------------------------------------------------------

def make_current(
    temperature=15.0,
    feels_like=14.0,
    humidity=60,
    wind_speed=10.0,
    precipitation=0.0,
    weather_code=0,
) -> CurrentWeather:
    return CurrentWeather(
        temperature=temperature,
        feels_like=feels_like,
        humidity=humidity,
        wind_speed=wind_speed,
        precipitation=precipitation,
        weather_code=weather_code,
        description="Clear sky",
        category="clear",
    )


def make_preference(**thresholds) -> AlertPreference:
    return AlertPreference(city="Berlin", country="DE", latitude=52.5, longitude=13.4, **thresholds)


def snapshot_with(current: CurrentWeather):
    """A normalized snapshot whose current conditions are replaced wholesale."""
    return make_snapshot().model_copy(update={"current": current})


# ---------------------------------------------------------------------------
# check_min_temperature — strict "below"
# ---------------------------------------------------------------------------

def test_min_temperature_triggers_just_below_threshold():
    alert = check_min_temperature(make_current(temperature=4.9), make_preference(min_temp_threshold=5), NOW)
    assert alert is not None
    assert alert.alert_type == "temperature"
    assert alert.title == "Low Temperature Alert"
    assert alert.severity == "moderate"
    assert "4.9°C" in alert.description
    assert "threshold of 5°C" in alert.description


@pytest.mark.parametrize("temperature", [5.0, 5.1])
def test_min_temperature_does_not_trigger_at_or_above_threshold(temperature):
    alert = check_min_temperature(make_current(temperature=temperature), make_preference(min_temp_threshold=5), NOW)
    assert alert is None


def test_unset_threshold_never_triggers():
    current = make_current(temperature=-30, wind_speed=200, precipitation=80)
    preference = make_preference()
    assert check_min_temperature(current, preference, NOW) is None
    assert check_max_temperature(current, preference, NOW) is None
    assert check_wind(current, preference, NOW) is None
    assert check_precipitation(current, preference, NOW) is None


# ---------------------------------------------------------------------------
# check_max_temperature / check_wind / check_precipitation
# ---------------------------------------------------------------------------

def test_max_temperature_triggers_when_above_threshold():
    alert = check_max_temperature(make_current(temperature=33), make_preference(max_temp_threshold=30), NOW)
    assert alert.title == "High Temperature Alert"
    assert alert.description == "Temperature has risen to 33°C, above your threshold of 30°C"


def test_max_temperature_at_threshold_does_not_trigger():
    assert check_max_temperature(make_current(temperature=30), make_preference(max_temp_threshold=30), NOW) is None


def test_wind_triggers_when_above_threshold():
    alert = check_wind(make_current(wind_speed=45), make_preference(wind_speed_threshold=30), NOW)
    assert alert.alert_type == "wind"
    assert alert.title == "High Wind Speed Alert"
    assert alert.severity == "warning"
    assert "45 km/h" in alert.description


def test_wind_at_threshold_does_not_trigger():
    assert check_wind(make_current(wind_speed=30), make_preference(wind_speed_threshold=30), NOW) is None


def test_precipitation_triggers_when_above_threshold():
    alert = check_precipitation(make_current(precipitation=12), make_preference(precipitation_threshold=10), NOW)
    assert alert.alert_type == "precipitation"
    assert alert.title == "Heavy Precipitation Alert"
    assert alert.severity == "warning"
    assert "12mm" in alert.description


# ---------------------------------------------------------------------------
# check_severe_weather
# ---------------------------------------------------------------------------

def test_severe_weather_thunderstorm_is_severe():
    preference = make_preference()
    alert = check_severe_weather(make_current(weather_code=99), preference, NOW, preference.severe_code_set())
    assert alert.alert_type == "severe_weather"
    assert alert.severity == "severe"
    assert alert.description == (
        "Thunderstorm with heavy hail detected in your area. Please take appropriate precautions."
    )


def test_severe_weather_ignores_codes_outside_the_set():
    preference = make_preference()
    assert check_severe_weather(make_current(weather_code=65), preference, NOW, preference.severe_code_set()) is None


def test_severe_weather_heavy_rain_is_warning():
    preference = make_preference(severe_codes="65,95")
    alert = check_severe_weather(make_current(weather_code=65), preference, NOW, preference.severe_code_set())
    assert alert.severity == "warning"


def test_severe_weather_other_listed_code_is_moderate():
    preference = make_preference(severe_codes="61")
    alert = check_severe_weather(make_current(weather_code=61), preference, NOW, preference.severe_code_set())
    assert alert.severity == "moderate"


# ---------------------------------------------------------------------------
# evaluate (integration-style, still no network)
# ---------------------------------------------------------------------------

def test_evaluate_fires_independent_rules():
    snapshot = snapshot_with(make_current(temperature=5, wind_speed=25))
    preference = make_preference(min_temp_threshold=10, wind_speed_threshold=20)

    alerts = evaluate(snapshot, preference, now=NOW)

    assert len(alerts) == 2
    assert sorted(a.alert_type for a in alerts) == ["temperature", "wind"]


def test_evaluate_severe_code_with_default_set():
    alerts = evaluate(snapshot_with(make_current(weather_code=99)), make_preference(), now=NOW)
    assert len(alerts) == 1
    assert alerts[0].alert_type == "severe_weather"
    assert alerts[0].severity == "severe"


def test_evaluate_heavy_rain_code_in_configured_set():
    alerts = evaluate(snapshot_with(make_current(weather_code=65)), make_preference(severe_codes="65"), now=NOW)
    assert [a.severity for a in alerts] == ["warning"]


def test_evaluate_min_above_max_fires_both():
    """A misconfigured preference (min > max) is evaluated rule by rule."""
    snapshot = snapshot_with(make_current(temperature=15))
    preference = make_preference(min_temp_threshold=20, max_temp_threshold=10)

    titles = [a.title for a in evaluate(snapshot, preference, now=NOW)]

    assert titles == ["Low Temperature Alert", "High Temperature Alert"]


def test_evaluate_returns_empty_when_no_trigger():
    snapshot = snapshot_with(make_current(temperature=20, wind_speed=10, precipitation=0))
    preference = make_preference(min_temp_threshold=5, max_temp_threshold=30, wind_speed_threshold=40)
    assert evaluate(snapshot, preference, now=NOW) == []


def test_evaluate_stamps_scope_and_times():
    snapshot = snapshot_with(make_current(temperature=40))
    alerts = evaluate(snapshot, make_preference(max_temp_threshold=30), now=NOW)

    alert = alerts[0]
    assert (alert.city, alert.country) == ("Berlin", "DE")
    assert alert.start_time == NOW
    assert alert.end_time is None
    assert alert.is_active is True
