# Project: weather-dashboard
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
test_geocode.py — Unit tests for geocode.py.

All tests mock with_retry or requests.get — no real network calls.
"""

from unittest.mock import MagicMock

import pytest
import requests

from weather_dashboard.errors import LocationNotFoundError
from weather_dashboard.geocode import FALLBACK_LOCATION, geocode, reverse_geocode


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_geocode_response(results: list) -> dict:
    return {"results": results} if results else {}


def _make_result(name="Tokyo", admin1="Tokyo", country="Japan", lat=35.6895, lon=139.6917) -> dict:
    return {
        "name": name,
        "admin1": admin1,
        "country": country,
        "latitude": lat,
        "longitude": lon,
    }


# ---------------------------------------------------------------------------
# geocode — successful cases
# ---------------------------------------------------------------------------

def test_geocode_returns_latitude_longitude_name(monkeypatch):
    payload = _make_geocode_response([_make_result()])
    monkeypatch.setattr("weather_dashboard.geocode.with_retry", lambda fn, **kw: payload)

    result = geocode("Tokyo")

    assert result["latitude"] == pytest.approx(35.6895)
    assert result["longitude"] == pytest.approx(139.6917)
    assert "Tokyo" in result["name"]


def test_geocode_canonical_name_includes_region_and_country(monkeypatch):
    payload = _make_geocode_response([_make_result(name="London", admin1="England", country="United Kingdom")])
    monkeypatch.setattr("weather_dashboard.geocode.with_retry", lambda fn, **kw: payload)

    result = geocode("London")

    assert "London" in result["name"]
    assert "England" in result["name"]
    assert "United Kingdom" in result["name"]


def test_geocode_canonical_name_without_admin1(monkeypatch):
    """If admin1 is absent, canonical name should be City, Country."""
    raw = _make_result()
    raw.pop("admin1", None)
    raw["admin1"] = None  # API may return null
    payload = {"results": [raw]}
    monkeypatch.setattr("weather_dashboard.geocode.with_retry", lambda fn, **kw: payload)

    result = geocode("Tokyo")

    # admin1 is falsy, so it should be omitted
    assert "None" not in result["name"]
    assert "Tokyo" in result["name"]


def test_geocode_uses_first_result_only(monkeypatch):
    """geocode must only use results[0], ignoring subsequent matches."""
    payload = _make_geocode_response([
        _make_result(name="Paris", admin1="Île-de-France", country="France", lat=48.8566, lon=2.3522),
        _make_result(name="Paris", admin1="Texas", country="United States", lat=33.6609, lon=-95.5555),
    ])
    monkeypatch.setattr("weather_dashboard.geocode.with_retry", lambda fn, **kw: payload)

    result = geocode("Paris")

    assert result["latitude"] == pytest.approx(48.8566)


# ---------------------------------------------------------------------------
# geocode — not found
# ---------------------------------------------------------------------------

def test_geocode_raises_location_not_found_when_empty_results(monkeypatch):
    monkeypatch.setattr(
        "weather_dashboard.geocode.with_retry",
        lambda fn, **kw: {"results": []},
    )
    with pytest.raises(LocationNotFoundError, match="not found"):
        geocode("xyznonexistent")


def test_geocode_raises_location_not_found_when_no_results_key(monkeypatch):
    monkeypatch.setattr(
        "weather_dashboard.geocode.with_retry",
        lambda fn, **kw: {},
    )
    with pytest.raises(LocationNotFoundError):
        geocode("xyznonexistent")


def test_location_not_found_is_value_error():
    """LocationNotFoundError must be a subclass of ValueError."""
    assert issubclass(LocationNotFoundError, ValueError)


def test_geocode_not_found_message_names_the_place(monkeypatch):
    monkeypatch.setattr("weather_dashboard.geocode.with_retry", lambda fn, **kw: {})
    with pytest.raises(LocationNotFoundError) as excinfo:
        geocode("Atlantis")
    assert str(excinfo.value) == 'Location "Atlantis" not found. Please check the spelling and try again.'


def test_geocode_returns_city_and_country(monkeypatch):
    payload = _make_geocode_response([_make_result(name="Berlin", admin1="Land Berlin", country="Germany")])
    monkeypatch.setattr("weather_dashboard.geocode.with_retry", lambda fn, **kw: payload)

    result = geocode("berlin")

    assert result["city"] == "Berlin"
    assert result["country"] == "Germany"


# ---------------------------------------------------------------------------
# reverse_geocode
# ---------------------------------------------------------------------------

def _fake_get(payload):
    response = MagicMock()
    response.json.return_value = payload
    return MagicMock(return_value=response)


def test_reverse_geocode_names_the_place(monkeypatch):
    get = _fake_get({"results": [{"name": "Berlin", "country": "Germany"}]})
    monkeypatch.setattr("weather_dashboard.geocode.requests.get", get)

    result = reverse_geocode(52.52, 13.41)

    assert result == {"city": "Berlin", "country": "Germany"}
    assert get.call_args.kwargs["params"]["latitude"] == 52.52


def test_reverse_geocode_falls_back_on_empty_results(monkeypatch):
    monkeypatch.setattr("weather_dashboard.geocode.requests.get", _fake_get({"results": []}))
    assert reverse_geocode(0.0, 0.0) == FALLBACK_LOCATION


def test_reverse_geocode_falls_back_on_request_error(monkeypatch):
    get = MagicMock(side_effect=requests.ConnectionError("offline"))
    monkeypatch.setattr("weather_dashboard.geocode.requests.get", get)

    result = reverse_geocode(10.0, 10.0)

    assert result == {"city": "Current Location", "country": ""}
    # no retries for the optional name lookup
    assert get.call_count == 1


def test_geocode_non_object_payload_is_not_found(monkeypatch):
    monkeypatch.setattr("weather_dashboard.geocode.with_retry", lambda fn, **kw: ["unexpected"])
    with pytest.raises(LocationNotFoundError):
        geocode("Berlin")
