# Project: weather-dashboard
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
config.py — Load and validate the TOML configuration file.

We use tomllib (Python 3.11+ stdlib) so no extra install is needed.
The config path defaults to "config.toml" in the current working directory,
but can be overridden for testing.
"""

import copy
import tomllib
from pathlib import Path


DEFAULT_CONFIG_PATH = Path("config.toml")

# Same values as config.toml.example; handy for tests and embedding
DEFAULT_CONFIG = {
    "providers": {
        "forecast_url": "https://api.open-meteo.com/v1/forecast",
        "geocoding_url": "https://geocoding-api.open-meteo.com/v1/search",
        "reverse_geocoding_url": "https://geocoding-api.open-meteo.com/v1/reverse",
        "timeout": 10,
    },
    "storage": {
        "database_url": "sqlite:///weather_dashboard.db",
    },
    "alerts": {
        "dedupe": False,
    },
    "server": {
        "host": "127.0.0.1",
        "port": 8000,
    },
    "log": {
        "path": "logs/weather_dashboard.log",
    },
}

REQUIRED_KEYS = {
    "providers": ("forecast_url", "geocoding_url", "reverse_geocoding_url", "timeout"),
    "storage": ("database_url",),
    "alerts": ("dedupe",),
    "server": ("host", "port"),
    "log": ("path",),
}


def default_config() -> dict:
    """Return a fresh copy of DEFAULT_CONFIG that callers may mutate."""
    return copy.deepcopy(DEFAULT_CONFIG)


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> dict:
    """Load and validate a TOML configuration file.

    Args:
        path: Path to the TOML config file.

    Returns:
        Nested dict of configuration values.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If required keys or sections are missing.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            "Copy config.toml.example to config.toml and adjust it."
        )

    with open(path, "rb") as f:
        config = tomllib.load(f)

    _validate(config)
    return config


def _validate(config: dict) -> None:
    """Validate that all required config sections and keys are present.

    Expected config schema::

        [providers]
        forecast_url          = <str>    # Open-Meteo forecast endpoint
        geocoding_url         = <str>    # Open-Meteo geocoding search endpoint
        reverse_geocoding_url = <str>    # reverse lookup endpoint
        timeout               = <float>  # seconds per HTTP request

        [storage]
        database_url = <str>   # SQLAlchemy URL, e.g. "sqlite:///weather_dashboard.db"

        [alerts]
        dedupe = <bool>   # true to skip alerts already active for city+country+type

        [server]
        host = <str>
        port = <int>

        [log]
        path = <str>     # relative or absolute path to the log file

    Args:
        config: Parsed TOML config dict.

    Raises:
        ValueError: If any required section or key is absent.
    """
    for section in REQUIRED_KEYS:
        if section not in config:
            raise ValueError(f"Missing required config section: [{section}]")

    for section, keys in REQUIRED_KEYS.items():
        for key in keys:
            if key not in config[section]:
                raise ValueError(f"Missing required config key: [{section}].{key}")

    if not isinstance(config["alerts"]["dedupe"], bool):
        raise ValueError("[alerts].dedupe must be true or false")
