# Project: weather-dashboard
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
utils.py — Shared utilities: retry logic, failure logging, run status and
display labels.
"""

import time
from collections import deque
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from weather_dashboard.errors import UpstreamUnavailable


def fmt_day(date_str: str) -> str:
    """Format a date string as a short weekday name.

    Args:
        date_str: Date in 'YYYY-MM-DD' format.

    Returns:
        Weekday abbreviation like 'Mon'.
    """
    dt = datetime.strptime(date_str, "%Y-%m-%d")
    return dt.strftime("%a")


def fmt_hour(time_str: str) -> str:
    """Format an ISO datetime string as a 12-hour label.

    Args:
        time_str: Datetime in 'YYYY-MM-DDTHH:MM' format.

    Returns:
        Label like '3 PM' or '12 AM'.
    """
    dt = datetime.strptime(time_str, "%Y-%m-%dT%H:%M")
    hour = dt.hour % 12 or 12
    return f"{hour} {'AM' if dt.hour < 12 else 'PM'}"


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the form stored in the database)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(moment: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC already."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


DEFAULT_LOG_PATH = Path("logs/weather_dashboard.log")
MAX_ATTEMPTS = 3
RETRY_DELAY_SECONDS = 5


def with_retry(
    fn: Callable[..., Any],
    *args: Any,
    label: str = "API call",
    log_path: Path = DEFAULT_LOG_PATH,
    attempts: int = MAX_ATTEMPTS,
    delay: float = RETRY_DELAY_SECONDS,
    **kwargs: Any,
) -> Any:
    """Call a function up to `attempts` times, retrying on any exception.

    Args:
        fn: Callable to invoke (usually a zero-argument closure).
        *args: Positional arguments forwarded to fn.
        label: Human-readable name for the call, used in warning messages.
        log_path: Path to the log file for recording final failures.
        attempts: Maximum number of calls before giving up.
        delay: Seconds to sleep between attempts.
        **kwargs: Keyword arguments forwarded to fn.

    Returns:
        The return value of fn on success.

    Raises:
        UpstreamUnavailable: If every attempt raises.
    """
    for attempt in range(1, attempts + 1):
        try:
            return fn(*args, **kwargs)
        except Exception as e:
            if attempt < attempts:
                print(
                    f"[weather] {label} failed (attempt {attempt}/{attempts}): "
                    f"{e}. Retrying in {delay}s..."
                )
                time.sleep(delay)
            else:
                msg = f"All {attempts} attempts failed for {label}."
                print(f"[weather] {msg}")
                _log_error(f"{label}: {e}", log_path=log_path, attempts=attempts)
                raise UpstreamUnavailable(msg) from e


def _log_error(message: str, log_path: Path = DEFAULT_LOG_PATH, attempts: int = MAX_ATTEMPTS) -> None:
    """Append a timestamped ERROR line to the log file.

    Args:
        message: Error description to log.
        log_path: Destination log file path.
        attempts: Number of attempts made, for the log line.
    """
    try:
        log_path = Path(log_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with open(log_path, "a") as f:
            f.write(f"{timestamp} [ERROR] API call failed after {attempts} attempts: {message}\n")
    except OSError:
        pass  # Never crash on logging failure


def write_last_run(
    status: str,
    detail: str,
    log_dir: Path = Path("logs"),
) -> None:
    """Append a status record to logs/last_run.txt after each scan.

    Format: ``2026-02-23 20:00:01|OK|3 location(s), 2 alert(s)``

    Args:
        status: 'OK' or 'ERROR'.
        detail: Human-readable summary of the run outcome.
        log_dir: Directory containing last_run.txt.
    """
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with open(log_dir / "last_run.txt", "a") as f:
            f.write(f"{timestamp}|{status}|{detail.replace('|', '-')}\n")
    except OSError:
        pass


def read_last_run(log_dir: Path = Path("logs")) -> dict | None:
    """Read the most recent run record from logs/last_run.txt.

    Args:
        log_dir: Directory containing last_run.txt.

    Returns:
        Dict with keys timestamp, status, detail — or None if file is missing
        or empty.
    """
    path = log_dir / "last_run.txt"
    if not path.exists():
        return None
    try:
        with open(path) as f:
            buf: deque[str] = deque(f, maxlen=1)
        if not buf:
            return None
        last = buf[0].rstrip("\n")
        parts = last.split("|", 2)
        if len(parts) != 3:
            return None
        return {"timestamp": parts[0], "status": parts[1], "detail": parts[2]}
    except OSError:
        return None
