# Project: weather-dashboard
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
codes.py — WMO weather codes as used by Open-Meteo.

Maps an integer condition code to a label, a coarse category (for icons
and grouping) and the severity a severe-weather alert should carry.

Code table: https://open-meteo.com/en/docs (section "WMO Weather interpretation codes")
"""

UNKNOWN_DESCRIPTION = "Unknown weather condition"

WEATHER_CODES = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}

# Closed ranges, checked in order
CATEGORY_RANGES = [
    (0, 1, "clear"),
    (2, 3, "cloud"),
    (45, 48, "fog"),
    (51, 57, "drizzle"),
    (61, 67, "rain"),
    (71, 77, "snow"),
    (80, 86, "showers"),
    (95, 99, "thunderstorm"),
]

CATEGORIES = tuple(name for _, _, name in CATEGORY_RANGES)

THUNDERSTORM_CODES = frozenset({95, 96, 99})
HEAVY_PRECIPITATION_CODES = frozenset({65, 67, 75, 77, 82})
DEFAULT_SEVERE_CODES = THUNDERSTORM_CODES

SEVERITIES = ("minor", "moderate", "warning", "severe")


def describe(code: int | None) -> str:
    """Return the human-readable label for a weather code.

    Never raises: unknown or missing codes get UNKNOWN_DESCRIPTION.
    """
    return WEATHER_CODES.get(code, UNKNOWN_DESCRIPTION)


def severity_category(code: int | None) -> str:
    """Bucket a weather code into one of CATEGORIES.

    Codes outside every range are not expected from Open-Meteo; values in the
    gap below fog are treated as cloud, anything else as clear.
    """
    if code is None:
        return "clear"
    for low, high, name in CATEGORY_RANGES:
        if low <= code <= high:
            return name
    if 4 <= code <= 44:
        return "cloud"
    return "clear"


def alert_severity(code: int) -> str:
    """Severity for a severe-weather alert triggered by `code`."""
    if code in THUNDERSTORM_CODES:
        return "severe"
    if code in HEAVY_PRECIPITATION_CODES:
        return "warning"
    return "moderate"


def severity_rank(severity: str) -> int:
    """Position of a severity in SEVERITIES (minor=0 … severe=3)."""
    return SEVERITIES.index(severity)


def parse_severe_codes(raw: str | None) -> frozenset[int]:
    """Parse a comma-separated list of weather codes, e.g. "95, 96,99".

    Tokens that are not integers are skipped. A missing or blank value means
    the default thunderstorm set.
    """
    if raw is None or not raw.strip():
        return DEFAULT_SEVERE_CODES

    codes = set()
    for token in raw.split(","):
        token = token.strip()
        try:
            codes.add(int(token))
        except ValueError:
            continue
    return frozenset(codes)
