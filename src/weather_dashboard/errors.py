# Project: weather-dashboard
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
errors.py — Exception types shared by the fetch, normalize and storage layers.

The HTTP layer maps each of these to a status code; everything below it
raises them and lets them propagate.
"""


class WeatherDashboardError(Exception):
    """Base class for all errors raised by weather_dashboard."""


class NotFoundError(WeatherDashboardError, LookupError):
    """A referenced favorite, preference or alert id does not exist."""


class MalformedPayload(WeatherDashboardError, ValueError):
    """The weather provider returned a payload missing required fields."""


class UpstreamUnavailable(WeatherDashboardError, RuntimeError):
    """A geocoding or forecast request failed after all retry attempts."""


class LocationNotFoundError(WeatherDashboardError, ValueError):
    """The geocoding service returned no results for a place name."""
