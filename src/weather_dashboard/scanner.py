# Project: weather-dashboard
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
scanner.py — Run alert preferences against fresh forecasts.

scan_all() walks every enabled preference: fetch → normalize → evaluate →
record, one preference at a time. A location whose cycle raises contributes
zero alerts and the scan moves on. Expired alerts are cleaned up once at the
end.

check_location() is the single-location manual trigger behind
POST /api/alerts/check.

Nothing here schedules itself; run it from the API, the `scan` CLI command,
or cron (see `weather-dashboard install-schedule`).
"""

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from weather_dashboard.lifecycle import AlertLifecycleManager
from weather_dashboard.models import WeatherAlert
from weather_dashboard.rules import evaluate
from weather_dashboard.schemas import AlertEventRead, LocationScan, ScanReport, WeatherSnapshot
from weather_dashboard.storage import Repository
from weather_dashboard.utils import utcnow, write_last_run

# fetch_snapshot(latitude, longitude, city, country, units) -> WeatherSnapshot
SnapshotFetcher = Callable[..., WeatherSnapshot]


class BatchAlertScanner:
    """Fetches forecasts and turns triggered preferences into stored alerts."""

    def __init__(
        self,
        repository: Repository,
        fetch_snapshot: SnapshotFetcher,
        lifecycle: AlertLifecycleManager | None = None,
        status_dir: Path | None = None,
    ) -> None:
        self.repository = repository
        self.fetch_snapshot = fetch_snapshot
        self.lifecycle = lifecycle or AlertLifecycleManager(repository)
        self.status_dir = status_dir

    def check_location(
        self,
        latitude: float,
        longitude: float,
        city: str,
        country: str,
        now: datetime | None = None,
    ) -> list[WeatherAlert]:
        """Evaluate every enabled preference scoped to (city, country).

        Matching is exact string equality on both fields. One forecast is
        fetched for the location and shared by all matching preferences.

        Raises:
            UpstreamUnavailable: If the forecast cannot be fetched.
            MalformedPayload: If the forecast cannot be normalized.
        """
        preferences = [
            p for p in self.repository.list_enabled_preferences()
            if p.city == city and p.country == country
        ]
        snapshot = self.fetch_snapshot(latitude, longitude, city, country, "metric")

        events = []
        for preference in preferences:
            events.extend(evaluate(snapshot, preference, now=now))
        return self.lifecycle.record_alerts(events)

    def scan_all(self, now: datetime | None = None) -> ScanReport:
        """Evaluate every enabled preference against a fresh forecast.

        Each preference gets its own fetch, even when several share a
        location. Thresholds are metric, so forecasts are always fetched in
        metric units.
        """
        now = now or utcnow()
        preferences = self.repository.list_enabled_preferences()
        per_location = []
        failures = 0

        for preference in preferences:
            error = None
            recorded: list[WeatherAlert] = []
            try:
                snapshot = self.fetch_snapshot(
                    preference.latitude,
                    preference.longitude,
                    preference.city,
                    preference.country,
                    "metric",
                )
                recorded = self.lifecycle.record_alerts(evaluate(snapshot, preference, now=now))
            except Exception as e:
                # Any failure stays with its own location
                failures += 1
                error = str(e) or type(e).__name__
                print(f"[scan] {preference.city}, {preference.country}: {type(e).__name__}: {error}")

            per_location.append(LocationScan(
                city=preference.city,
                country=preference.country,
                alerts_generated=len(recorded),
                alerts=[AlertEventRead.model_validate(a) for a in recorded],
                error=error,
            ))

        expired = self.lifecycle.expire_stale(now)
        total = sum(entry.alerts_generated for entry in per_location)

        detail = f"{len(preferences)} location(s), {total} alert(s)"
        if expired:
            detail += f", {expired} expired"
        if failures:
            detail += f", {failures} failed"
        self._write_status("OK" if not failures else "PARTIAL", detail)

        return ScanReport(
            message=f"Checked {len(preferences)} alert preference locations",
            locations_scanned=len(preferences),
            total_alerts_generated=total,
            per_location=per_location,
        )

    def _write_status(self, status: str, detail: str) -> None:
        if self.status_dir is None:
            return
        write_last_run(status, detail, log_dir=self.status_dir)
