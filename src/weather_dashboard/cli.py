# Project: weather-dashboard
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
cli.py — Command-line interface for weather-dashboard.

We use argparse (stdlib) rather than click: six subcommands with a couple
of options each do not need more.

Commands:
  weather-dashboard serve               — run the HTTP API with uvicorn
  weather-dashboard scan                — evaluate every enabled alert preference once
  weather-dashboard search --location   — print the forecast for a place
  weather-dashboard install-schedule    — install an hourly cron job running `scan`
  weather-dashboard uninstall-schedule  — remove the cron job
  weather-dashboard status              — show cron state and the last scan result
"""

import argparse
import shutil
import subprocess
from functools import partial
from pathlib import Path

from weather_dashboard.chart import (
    render_current,
    render_daily_table,
    render_hourly_table,
    render_scan_report,
)
from weather_dashboard.config import load_config
from weather_dashboard.errors import LocationNotFoundError, MalformedPayload, UpstreamUnavailable
from weather_dashboard.geocode import geocode
from weather_dashboard.lifecycle import AlertLifecycleManager
from weather_dashboard.scanner import BatchAlertScanner
from weather_dashboard.storage import SQLRepository, init_db, make_engine
from weather_dashboard.utils import read_last_run, write_last_run
from weather_dashboard.weather import fetch_snapshot

BINARY_NAME = "weather-dashboard"


def _crontab_lines() -> list[str] | None:
    """Current crontab lines, or None when the user has no crontab."""
    result = subprocess.run(["crontab", "-l"], capture_output=True, text=True)
    # crontab -l exits non-zero when no crontab exists
    if result.returncode != 0:
        return None
    return result.stdout.splitlines(keepends=True)


def _write_crontab(content: str) -> None:
    result = subprocess.run(["crontab", "-"], input=content, capture_output=True, text=True)
    if result.returncode != 0:
        print(f"[error] Failed to write crontab: {result.stderr.strip()}")
        raise SystemExit(1)


def cmd_serve(args) -> None:
    """Run the API server."""
    import uvicorn

    from weather_dashboard.api import create_app

    config = load_config(args.config)
    host = args.host or config["server"]["host"]
    port = args.port or config["server"]["port"]
    print(f"[api] Serving on http://{host}:{port}")
    uvicorn.run(create_app(config), host=host, port=port)


def cmd_scan(args) -> None:
    """Run one batch scan over all enabled alert preferences and print the report."""
    config = load_config(args.config)
    log_path = Path(config["log"]["path"])

    engine = make_engine(config["storage"]["database_url"])
    init_db(engine)
    repository = SQLRepository(engine)

    fetcher = partial(fetch_snapshot, providers=config["providers"], log_path=log_path)
    lifecycle = AlertLifecycleManager(repository, dedupe=config["alerts"]["dedupe"])
    scanner = BatchAlertScanner(repository, fetcher, lifecycle=lifecycle, status_dir=log_path.parent)

    try:
        report = scanner.scan_all()
    except Exception as e:
        write_last_run("ERROR", str(e), log_dir=log_path.parent)
        raise

    print(render_scan_report(report))


def cmd_search(args) -> None:
    """Geocode a place, fetch its forecast and print it."""
    config = load_config(args.config)
    providers = config["providers"]
    log_path = Path(config["log"]["path"])

    try:
        place = geocode(
            args.location,
            url=providers["geocoding_url"],
            timeout=providers["timeout"],
            log_path=log_path,
        )
        print(f"Fetching forecast for {place['name']}...")
        snapshot = fetch_snapshot(
            place["latitude"],
            place["longitude"],
            place["city"],
            place["country"],
            args.units,
            providers=providers,
            log_path=log_path,
        )
    except (LocationNotFoundError, UpstreamUnavailable, MalformedPayload) as e:
        print(f"[error] {e}")
        raise SystemExit(1)

    print()
    print(render_current(snapshot))
    print()
    print(render_hourly_table(snapshot))
    print()
    print(render_daily_table(snapshot))


def cmd_install_schedule(args) -> None:
    """Install an hourly cron job that runs `weather-dashboard scan`."""
    binary = shutil.which(BINARY_NAME)
    if not binary:
        print(f"[error] Could not find {BINARY_NAME} binary. Make sure it is installed with pip install -e .")
        raise SystemExit(1)

    # cron runs from $HOME, so point it at absolute paths
    config_path = Path(args.config).resolve()
    config = load_config(config_path)
    log_dir = Path(config["log"]["path"]).resolve().parent
    log_dir.mkdir(parents=True, exist_ok=True)
    cron_log = log_dir / "cron.log"

    cron_line = f"0 * * * * cd {config_path.parent} && {binary} scan --config {config_path} >> {cron_log} 2>&1"

    existing = "".join(_crontab_lines() or [])
    if BINARY_NAME in existing:
        print("[schedule] Already installed. Run uninstall-schedule first.")
        raise SystemExit(0)

    updated = existing.rstrip("\n")
    if updated:
        updated += "\n"
    updated += cron_line + "\n"
    _write_crontab(updated)

    print(f"[schedule] Cron job installed. {BINARY_NAME} will scan alert preferences every hour.")
    print("[schedule] To verify: crontab -l")


def cmd_uninstall_schedule(args) -> None:
    """Remove the weather-dashboard cron job."""
    lines = _crontab_lines()
    if lines is None:
        print("[schedule] No crontab found. Nothing to remove.")
        return

    filtered = [line for line in lines if BINARY_NAME not in line]
    if len(filtered) == len(lines):
        print(f"[schedule] No {BINARY_NAME} cron job found. Nothing to remove.")
        return

    _write_crontab("".join(filtered))
    print("[schedule] Cron job removed.")


def cmd_status(args) -> None:
    """Show cron job status, last scan info, and log file size."""
    config = load_config(args.config)
    log_path = Path(config["log"]["path"])

    lines = _crontab_lines() or []
    cron_installed = any(BINARY_NAME in line for line in lines)
    cron_status = "✅ Installed" if cron_installed else "❌ Not installed"

    last = read_last_run(log_path.parent)
    if last:
        last_run_time = last["timestamp"]
        icon = {"OK": "✅", "PARTIAL": "⚠️ "}.get(last["status"], "❌")
        last_result = f"{icon} {last['detail']}"
    else:
        last_run_time = "Never"
        last_result = "—"

    if log_path.exists():
        size_kb = log_path.stat().st_size // 1024
        log_info = f"{log_path} ({size_kb} KB)"
    else:
        log_info = f"{log_path} (not created yet)"

    sep = "─" * 45
    print("\n🔧 Weather Dashboard — Status")
    print(sep)
    print(f"  Cron job:    {cron_status}")
    print(f"  Last scan:   {last_run_time}")
    print(f"  Last result: {last_result}")
    print(f"  Log file:    {log_info}")
    print(sep)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=BINARY_NAME,
        description="Weather dashboard backend and alert scanner using Open-Meteo",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        default="config.toml",
        help="Path to the TOML config file (default: config.toml)",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    p_serve = subparsers.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default=None, help="Override [server].host")
    p_serve.add_argument("--port", type=int, default=None, help="Override [server].port")

    p_scan = subparsers.add_parser("scan", help="Evaluate every enabled alert preference once")
    p_scan.add_argument("--config", metavar="PATH", default=argparse.SUPPRESS, help=argparse.SUPPRESS)

    p_search = subparsers.add_parser("search", help="Print the forecast for a place")
    p_search.add_argument(
        "--location",
        metavar="PLACE",
        required=True,
        help='Place name, e.g. "Tokyo" or "Berlin"',
    )
    p_search.add_argument(
        "--units",
        choices=("metric", "imperial"),
        default="metric",
        help="Unit system for the printed values (default: metric)",
    )

    subparsers.add_parser("install-schedule", help="Install cron job (scans every hour)")
    subparsers.add_parser("uninstall-schedule", help="Remove cron job")
    subparsers.add_parser("status", help="Show cron job status and last scan info")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    commands = {
        "serve": cmd_serve,
        "scan": cmd_scan,
        "search": cmd_search,
        "install-schedule": cmd_install_schedule,
        "uninstall-schedule": cmd_uninstall_schedule,
        "status": cmd_status,
    }
    commands[args.command](args)


if __name__ == "__main__":
    main()
