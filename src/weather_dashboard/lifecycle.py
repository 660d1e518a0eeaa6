# Project: weather-dashboard
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
lifecycle.py — Persist, list, deactivate and expire weather alerts.

Alerts are never deleted. They become inactive either explicitly
(deactivate) or once their end_time has passed (expire_stale); alerts with
no end_time stay active until someone deactivates them.

By default every recorded alert is a new row, so a condition that persists
across scans produces one alert per scan. Setting dedupe=True skips alerts
whose dedup_key() matches an alert that is still active.
"""

from datetime import datetime

from weather_dashboard.models import WeatherAlert
from weather_dashboard.storage import Repository
from weather_dashboard.utils import as_naive_utc, utcnow


def dedup_key(alert: WeatherAlert) -> tuple[str, str, str]:
    """Identity of an ongoing condition: (city, country, alert_type)."""
    return (alert.city, alert.country, alert.alert_type)


class AlertLifecycleManager:
    """Owns the alert rows in a Repository."""

    def __init__(self, repository: Repository, dedupe: bool = False) -> None:
        self.repository = repository
        self.dedupe = dedupe

    def record_alerts(self, events: list[WeatherAlert]) -> list[WeatherAlert]:
        """Persist each event as a new row.

        Returns:
            The rows actually written (all of them unless dedupe is on).
        """
        recorded = []
        for event in events:
            event.start_time = as_naive_utc(event.start_time)
            if event.end_time is not None:
                event.end_time = as_naive_utc(event.end_time)
            if self.dedupe and self.repository.find_active_alert(*dedup_key(event)):
                print(f"[alerts] Skipping duplicate {event.alert_type} alert for {event.city}, {event.country}")
                continue
            recorded.append(self.repository.add_alert(event))
        return recorded

    def list_active(self) -> list[WeatherAlert]:
        """All active alerts, most recently created first."""
        return self.repository.list_active_alerts()

    def list_active_for_location(self, city: str, country: str) -> list[WeatherAlert]:
        """Active alerts whose city and country match exactly, newest start_time first."""
        return self.repository.list_alerts_for_location(city, country)

    def deactivate(self, alert_id: str) -> None:
        """Mark an alert inactive. Unknown or already inactive ids are ignored."""
        self.repository.deactivate_alert(alert_id)

    def expire_stale(self, now: datetime | None = None) -> int:
        """Deactivate active alerts whose end_time is before `now`.

        Returns:
            Number of alerts deactivated.
        """
        return self.repository.expire_alerts(now or utcnow())
