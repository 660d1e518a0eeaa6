# Project: weather-dashboard
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
chart.py — Plain-text rendering of snapshots and scan reports for the CLI.

All rendering functions return strings ready to print.
"""

from weather_dashboard.codes import severity_rank
from weather_dashboard.schemas import ScanReport, WeatherSnapshot
from weather_dashboard.units import unit_labels


def _location_line(snapshot: WeatherSnapshot) -> str:
    loc = snapshot.location
    return f"{loc.city}, {loc.country}" if loc.country else loc.city


def render_current(snapshot: WeatherSnapshot) -> str:
    """Render the current conditions as a short multi-line report."""
    labels = unit_labels(snapshot.units)
    c = snapshot.current
    updated = snapshot.last_updated.strftime("%a %d %b, %H:%M UTC")
    return "\n".join([
        f"📍 {_location_line(snapshot)} — {updated}",
        f"🌤  Conditions:     {c.description}",
        f"🌡  Temperature:    {c.temperature:.0f}{labels['temperature']}  "
        f"(feels like {c.feels_like:.0f}{labels['temperature']})",
        f"💧 Humidity:        {c.humidity:.0f}%",
        f"🌧  Precipitation:  {c.precipitation:.0f} {labels['precipitation']}",
        f"💨 Wind:            {c.wind_speed:.0f} {labels['speed']}",
    ])


def render_daily_table(snapshot: WeatherSnapshot) -> str:
    """Render the daily forecast as a fixed-width table.

    Args:
        snapshot: Normalized forecast.

    Returns:
        Multi-line string containing the formatted table.
    """
    labels = unit_labels(snapshot.units)
    temp_unit = labels["temperature"]
    header_label = f"📍 {_location_line(snapshot)} — {len(snapshot.daily)}-day forecast"
    headers = [
        "Day ",
        f"{'Max' + temp_unit:>6}",
        f"{'Min' + temp_unit:>6}",
        f"{'Precip':>7}",
        "Conditions",
    ]
    header_row = "  ".join(headers)
    sep = "─" * max(60, len(header_row))

    lines = [header_label, sep, header_row, sep]
    for d in snapshot.daily:
        lines.append("  ".join([
            f"{d.day_name:<4}",
            f"{d.max_temp:>5.0f}°",
            f"{d.min_temp:>5.0f}°",
            f"{d.precipitation:>4.0f} {labels['precipitation']:<2}",
            d.description,
        ]))
    lines.append(sep)
    return "\n".join(lines)


def render_hourly_table(snapshot: WeatherSnapshot) -> str:
    """Render the hourly forecast as a fixed-width table.

    Args:
        snapshot: Normalized forecast.

    Returns:
        Multi-line string containing the formatted table.
    """
    labels = unit_labels(snapshot.units)
    header_label = f"📍 {_location_line(snapshot)} — {len(snapshot.hourly)}-hour forecast"
    headers = [
        "Time ",
        f"{'Temp' + labels['temperature']:>7}",
        f"{'Wind':>9}",
        f"{'Precip':>7}",
        "Conditions",
    ]
    header_row = "  ".join(headers)
    sep = "─" * max(60, len(header_row))

    lines = [header_label, sep, header_row, sep]
    for h in snapshot.hourly:
        lines.append("  ".join([
            f"{h.time:<5}",
            f"{h.temperature:>6.0f}°",
            f"{h.wind_speed:>4.0f} {labels['speed']:<4}",
            f"{h.precipitation:>4.0f} {labels['precipitation']:<2}",
            h.description,
        ]))
    lines.append(sep)
    return "\n".join(lines)


def render_scan_report(report: ScanReport) -> str:
    """Render a batch scan report, one line per scanned preference.

    Alerts under each location are listed most severe first.
    """
    lines = [report.message]
    for entry in report.per_location:
        place = f"{entry.city}, {entry.country}"
        if entry.error:
            lines.append(f"  ❌ {place}: {entry.error}")
        elif entry.alerts_generated:
            lines.append(f"  ⚠️  {place}: {entry.alerts_generated} alert(s)")
            for alert in sorted(entry.alerts, key=lambda a: severity_rank(a.severity), reverse=True):
                lines.append(f"       [{alert.severity}] {alert.title} — {alert.description}")
        else:
            lines.append(f"  ✅ {place}: no alerts")
    lines.append(f"Total alerts generated: {report.total_alerts_generated}")
    return "\n".join(lines)
