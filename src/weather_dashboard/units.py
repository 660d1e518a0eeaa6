# Project: weather-dashboard
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
units.py — Convert canonical metric readings to a display unit system.

Everything is stored and compared in °C, km/h and mm. Imperial values only
exist on the way out, in snapshots requested with units="imperial".
"""

import math

UNIT_SYSTEMS = ("metric", "imperial")

_LABELS = {
    "metric": {"temperature": "°C", "speed": "km/h", "precipitation": "mm"},
    "imperial": {"temperature": "°F", "speed": "mph", "precipitation": "in"},
}

KM_PER_MILE = 1.609344
MM_PER_INCH = 25.4


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32


def kmh_to_mph(kmh: float) -> float:
    return kmh / KM_PER_MILE


def mm_to_inches(mm: float) -> float:
    return mm / MM_PER_INCH


def _check(units: str) -> None:
    if units not in UNIT_SYSTEMS:
        raise ValueError(f"Unknown unit system '{units}'. Use one of: {', '.join(UNIT_SYSTEMS)}")


def convert_temperature(celsius: float, units: str) -> float:
    """Return a °C reading in the requested unit system."""
    _check(units)
    return celsius_to_fahrenheit(celsius) if units == "imperial" else celsius


def convert_speed(kmh: float, units: str) -> float:
    """Return a km/h reading in the requested unit system."""
    _check(units)
    return kmh_to_mph(kmh) if units == "imperial" else kmh


def convert_precipitation(mm: float, units: str) -> float:
    """Return a mm reading in the requested unit system."""
    _check(units)
    return mm_to_inches(mm) if units == "imperial" else mm


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up (2.5 → 3, -2.5 → -2).

    Python's round() uses banker's rounding, which would show 22°C for a
    22.5°C reading. Display values follow the usual schoolbook rule instead.
    """
    return int(math.floor(value + 0.5))


def unit_labels(units: str) -> dict:
    """Return the display suffixes for a unit system.

    Args:
        units: 'metric' or 'imperial'.

    Returns:
        Dict with keys temperature, speed, precipitation.
    """
    _check(units)
    return dict(_LABELS[units])
