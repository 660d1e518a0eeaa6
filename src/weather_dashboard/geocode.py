# Project: weather-dashboard
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
geocode.py — Resolve place names to coordinates and back, using the
Open-Meteo Geocoding API.

Free, no API key required.
API docs: https://open-meteo.com/en/docs/geocoding-api
"""

from pathlib import Path

import requests

from weather_dashboard.errors import LocationNotFoundError
from weather_dashboard.utils import DEFAULT_LOG_PATH, with_retry

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
REVERSE_GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/reverse"

FALLBACK_LOCATION = {"city": "Current Location", "country": ""}


def geocode(
    place: str,
    url: str = GEOCODING_URL,
    timeout: float = 10,
    log_path: Path = DEFAULT_LOG_PATH,
) -> dict:
    """Look up coordinates for a place name using Open-Meteo Geocoding.

    Args:
        place: Human-readable place name, e.g. 'Tokyo' or 'Berlin'.
        url: Geocoding search endpoint.
        timeout: Seconds per HTTP request.
        log_path: Where final failures are logged.

    Returns:
        Dict with keys: latitude, longitude, city, country and name, where
        name is a canonical 'City, Region, Country' string.

    Raises:
        LocationNotFoundError: If no results are found for the place name.
        UpstreamUnavailable: If all API retry attempts fail.
    """
    params = {
        "name": place,
        "count": 1,
        "language": "en",
        "format": "json",
    }

    def _call():
        r = requests.get(url, params=params, timeout=timeout)
        r.raise_for_status()
        return r.json()

    data = with_retry(_call, label=f"Geocoding API for '{place}'", log_path=log_path)

    results = data.get("results") if isinstance(data, dict) else None
    if not results:
        raise LocationNotFoundError(
            f'Location "{place}" not found. Please check the spelling and try again.'
        )

    result = results[0]
    # Build a human-readable canonical name: "City, Region, Country"
    name_parts = [result.get("name", place)]
    if result.get("admin1"):
        name_parts.append(result["admin1"])
    if result.get("country"):
        name_parts.append(result["country"])

    return {
        "latitude": result["latitude"],
        "longitude": result["longitude"],
        "city": result.get("name") or place,
        "country": result.get("country") or "",
        "name": ", ".join(name_parts),
    }


def reverse_geocode(
    latitude: float,
    longitude: float,
    url: str = REVERSE_GEOCODING_URL,
    timeout: float = 10,
) -> dict:
    """Name the place at a coordinate pair.

    Used for "share my location" lookups, where a missing name is not worth
    failing the request over: any error or empty result gives
    FALLBACK_LOCATION.

    Returns:
        Dict with keys city and country.
    """
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "count": 1,
        "language": "en",
        "format": "json",
    }
    try:
        r = requests.get(url, params=params, timeout=timeout)
        r.raise_for_status()
        data = r.json()
    except (requests.RequestException, ValueError) as e:
        print(f"[geocode] Reverse lookup failed for ({latitude}, {longitude}): {e}")
        return dict(FALLBACK_LOCATION)

    results = data.get("results") if isinstance(data, dict) else None
    if not results:
        return dict(FALLBACK_LOCATION)

    result = results[0]
    return {
        "city": result.get("name") or FALLBACK_LOCATION["city"],
        "country": result.get("country") or "",
    }
