# Project: weather-dashboard
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
test_lifecycle.py — Tests for AlertLifecycleManager: recording, listing,
deactivation, expiry and the optional dedupe mode.
"""

from datetime import datetime, timedelta, timezone

from weather_dashboard.lifecycle import AlertLifecycleManager, dedup_key
from weather_dashboard.models import WeatherAlert

NOW = datetime(2024, 6, 1, 12, 0)


def make_alert(city="Berlin", country="DE", alert_type="temperature", **fields) -> WeatherAlert:
    fields.setdefault("start_time", NOW)
    return WeatherAlert(
        city=city,
        country=country,
        alert_type=alert_type,
        title="Low Temperature Alert",
        description="cold",
        severity="moderate",
        **fields,
    )


# ---------------------------------------------------------------------------
# expire_stale
# ---------------------------------------------------------------------------

def test_expire_stale_deactivates_past_end_time(repository):
    manager = AlertLifecycleManager(repository)
    expired, open_ended = manager.record_alerts([
        make_alert(end_time=NOW - timedelta(seconds=1)),
        make_alert(end_time=None),
    ])

    assert manager.expire_stale(NOW) == 1
    assert repository.get_alert(expired.id).is_active is False
    assert repository.get_alert(open_ended.id).is_active is True


def test_expire_stale_accepts_aware_now(repository):
    manager = AlertLifecycleManager(repository)
    (row,) = manager.record_alerts([make_alert(end_time=NOW - timedelta(minutes=1))])

    manager.expire_stale(NOW.replace(tzinfo=timezone.utc))

    assert repository.get_alert(row.id).is_active is False


# ---------------------------------------------------------------------------
# record_alerts
# ---------------------------------------------------------------------------

def test_record_alerts_stores_aware_times_as_utc(repository):
    manager = AlertLifecycleManager(repository)
    start = datetime(2024, 6, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))

    (row,) = manager.record_alerts([make_alert(start_time=start)])

    assert repository.get_alert(row.id).start_time == datetime(2024, 6, 1, 12, 0)


def test_repeated_condition_records_one_alert_per_call(repository):
    manager = AlertLifecycleManager(repository)
    manager.record_alerts([make_alert()])
    manager.record_alerts([make_alert()])

    assert len(manager.list_active()) == 2


def test_dedupe_skips_condition_already_active(repository):
    manager = AlertLifecycleManager(repository, dedupe=True)
    first = manager.record_alerts([make_alert()])
    second = manager.record_alerts([make_alert(), make_alert(alert_type="wind")])

    assert len(first) == 1
    assert [a.alert_type for a in second] == ["wind"]
    assert len(manager.list_active()) == 2


def test_dedupe_records_again_after_deactivation(repository):
    manager = AlertLifecycleManager(repository, dedupe=True)
    (row,) = manager.record_alerts([make_alert()])
    manager.deactivate(row.id)

    assert len(manager.record_alerts([make_alert()])) == 1


def test_dedup_key():
    assert dedup_key(make_alert(alert_type="wind")) == ("Berlin", "DE", "wind")


# ---------------------------------------------------------------------------
# listing and deactivation
# ---------------------------------------------------------------------------

def test_list_active_for_location_is_scoped(repository):
    manager = AlertLifecycleManager(repository)
    manager.record_alerts([make_alert(), make_alert(city="Paris", country="FR")])

    rows = manager.list_active_for_location("Paris", "FR")

    assert [(a.city, a.country) for a in rows] == [("Paris", "FR")]


def test_deactivate_is_idempotent(repository):
    manager = AlertLifecycleManager(repository)
    (row,) = manager.record_alerts([make_alert()])

    manager.deactivate(row.id)
    manager.deactivate(row.id)
    manager.deactivate("no-such-id")

    assert manager.list_active() == []
    assert repository.get_alert(row.id).is_active is False
