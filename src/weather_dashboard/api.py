# Project: weather-dashboard
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
api.py — FastAPI application: weather lookup, favorites, alert preferences
and alerts.

Run with: weather-dashboard serve
      or: uvicorn weather_dashboard.api:create_app --factory

Collaborators (repository, forecast fetcher, geocoders) are built from the
config by default and can be passed in instead, which is how the tests run
the app without a network or a database file.
"""

from collections.abc import Callable
from functools import partial
from pathlib import Path

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from weather_dashboard import geocode as geocoding
from weather_dashboard import weather
from weather_dashboard.config import load_config
from weather_dashboard.errors import (
    LocationNotFoundError,
    MalformedPayload,
    NotFoundError,
    UpstreamUnavailable,
)
from weather_dashboard.lifecycle import AlertLifecycleManager
from weather_dashboard.models import AlertPreference, FavoriteCity, WeatherAlert
from weather_dashboard.scanner import BatchAlertScanner
from weather_dashboard.schemas import (
    AlertCheckRequest,
    AlertEventCreate,
    AlertEventRead,
    AlertPreferenceCreate,
    AlertPreferenceRead,
    AlertPreferenceUpdate,
    CheckResult,
    CoordinatesRequest,
    FavoriteCityCreate,
    FavoriteCityRead,
    HealthStatus,
    ScanReport,
    WeatherSearchRequest,
    WeatherSnapshot,
)
from weather_dashboard.storage import Repository, SQLRepository, init_db, make_engine
from weather_dashboard.utils import as_naive_utc, read_last_run

APP_VERSION = "0.1.0"

router = APIRouter()


def _state(request: Request):
    return request.app.state


# ─────────────────────────────────────────────────────────────
# Health
# ─────────────────────────────────────────────────────────────

@router.get("/health", response_model=HealthStatus)
def health(request: Request):
    return HealthStatus(status="ok", last_scan=read_last_run(_state(request).status_dir))


# ─────────────────────────────────────────────────────────────
# Weather lookup
# ─────────────────────────────────────────────────────────────

@router.post("/weather/search", response_model=WeatherSnapshot)
def search_weather(payload: WeatherSearchRequest, request: Request):
    state = _state(request)
    place = state.geocode(payload.city)
    return state.fetch_snapshot(
        place["latitude"], place["longitude"], place["city"], place["country"], payload.units
    )


@router.post("/weather/coordinates", response_model=WeatherSnapshot)
def weather_by_coordinates(payload: CoordinatesRequest, request: Request):
    state = _state(request)
    place = state.reverse_geocode(payload.latitude, payload.longitude)
    return state.fetch_snapshot(
        payload.latitude, payload.longitude, place["city"], place["country"], payload.units
    )


# ─────────────────────────────────────────────────────────────
# Favorite cities
# ─────────────────────────────────────────────────────────────

@router.get("/favorites", response_model=list[FavoriteCityRead])
def list_favorites(request: Request):
    return [FavoriteCityRead.model_validate(f) for f in _state(request).repository.list_favorites()]


@router.post("/favorites", response_model=FavoriteCityRead, status_code=201)
def add_favorite(payload: FavoriteCityCreate, request: Request):
    row = _state(request).repository.add_favorite(FavoriteCity(**payload.model_dump()))
    return FavoriteCityRead.model_validate(row)


def _get_favorite(repository: Repository, favorite_id: str) -> FavoriteCity:
    row = repository.get_favorite(favorite_id)
    if row is None:
        raise NotFoundError("Favorite city not found")
    return row


@router.get("/favorites/{favorite_id}", response_model=FavoriteCityRead)
def get_favorite(favorite_id: str, request: Request):
    return FavoriteCityRead.model_validate(_get_favorite(_state(request).repository, favorite_id))


@router.delete("/favorites/{favorite_id}", status_code=204)
def remove_favorite(favorite_id: str, request: Request):
    repository = _state(request).repository
    _get_favorite(repository, favorite_id)
    repository.remove_favorite(favorite_id)
    return Response(status_code=204)


# ─────────────────────────────────────────────────────────────
# Alert preferences
# ─────────────────────────────────────────────────────────────

def _get_preference(repository: Repository, preference_id: str) -> AlertPreference:
    row = repository.get_preference(preference_id)
    if row is None:
        raise NotFoundError("Alert preference not found")
    return row


@router.get("/alert-preferences", response_model=list[AlertPreferenceRead])
def list_preferences(request: Request):
    rows = _state(request).repository.list_preferences()
    return [AlertPreferenceRead.model_validate(p) for p in rows]


@router.post("/alert-preferences", response_model=AlertPreferenceRead, status_code=201)
def add_preference(payload: AlertPreferenceCreate, request: Request):
    # min > max is accepted as written
    row = _state(request).repository.add_preference(AlertPreference(**payload.model_dump()))
    return AlertPreferenceRead.model_validate(row)


@router.get("/alert-preferences/{preference_id}", response_model=AlertPreferenceRead)
def get_preference(preference_id: str, request: Request):
    return AlertPreferenceRead.model_validate(_get_preference(_state(request).repository, preference_id))


@router.put("/alert-preferences/{preference_id}", response_model=AlertPreferenceRead)
def update_preference(preference_id: str, payload: AlertPreferenceUpdate, request: Request):
    repository = _state(request).repository
    _get_preference(repository, preference_id)
    row = repository.update_preference(preference_id, payload.model_dump(exclude_unset=True))
    return AlertPreferenceRead.model_validate(row)


@router.delete("/alert-preferences/{preference_id}", status_code=204)
def remove_preference(preference_id: str, request: Request):
    repository = _state(request).repository
    _get_preference(repository, preference_id)
    repository.remove_preference(preference_id)
    return Response(status_code=204)


# ─────────────────────────────────────────────────────────────
# Alerts
# ─────────────────────────────────────────────────────────────

@router.get("/alerts", response_model=list[AlertEventRead])
def list_active_alerts(request: Request):
    return [AlertEventRead.model_validate(a) for a in _state(request).lifecycle.list_active()]


@router.post("/alerts", response_model=AlertEventRead, status_code=201)
def add_alert(payload: AlertEventCreate, request: Request):
    # Manual alerts bypass dedupe
    alert = WeatherAlert(**payload.model_dump())
    alert.start_time = as_naive_utc(alert.start_time)
    if alert.end_time is not None:
        alert.end_time = as_naive_utc(alert.end_time)
    row = _state(request).repository.add_alert(alert)
    return AlertEventRead.model_validate(row)


@router.get("/alerts/city/{city}/{country}", response_model=list[AlertEventRead])
def list_alerts_for_location(city: str, country: str, request: Request):
    alerts = _state(request).lifecycle.list_active_for_location(city, country)
    return [AlertEventRead.model_validate(a) for a in alerts]


@router.delete("/alerts/{alert_id}", status_code=204)
def deactivate_alert(alert_id: str, request: Request):
    state = _state(request)
    if state.repository.get_alert(alert_id) is None:
        raise NotFoundError("Weather alert not found")
    state.lifecycle.deactivate(alert_id)
    return Response(status_code=204)


@router.post("/alerts/check", response_model=CheckResult)
def check_alerts(payload: AlertCheckRequest, request: Request):
    recorded = _state(request).scanner.check_location(
        payload.latitude, payload.longitude, payload.city, payload.country
    )
    return CheckResult(
        message=f"Checked weather conditions for {payload.city}, {payload.country}",
        alerts_generated=len(recorded),
        alerts=[AlertEventRead.model_validate(a) for a in recorded],
    )


@router.post("/alerts/check-all", response_model=ScanReport)
def check_all_alerts(request: Request):
    return _state(request).scanner.scan_all()


# ─────────────────────────────────────────────────────────────
# Error mapping: every error body is {message, errors?}
# ─────────────────────────────────────────────────────────────

def _error(status_code: int, message: str, errors: list | None = None) -> JSONResponse:
    content = {"message": message}
    if errors is not None:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _invalid_request(request: Request, exc: RequestValidationError):
        # ctx may hold the raw exception object, which is not JSON
        errors = [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]
        return _error(400, "Invalid request data", jsonable_encoder(errors))

    @app.exception_handler(LocationNotFoundError)
    async def _location_not_found(request: Request, exc: LocationNotFoundError):
        return _error(400, str(exc))

    @app.exception_handler(MalformedPayload)
    async def _malformed(request: Request, exc: MalformedPayload):
        print(f"[api] {request.url.path}: malformed provider payload: {exc}")
        return _error(400, str(exc))

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError):
        return _error(404, str(exc))

    @app.exception_handler(UpstreamUnavailable)
    async def _upstream(request: Request, exc: UpstreamUnavailable):
        print(f"[api] {request.url.path}: {exc}")
        return _error(500, "Weather service unavailable. Please try again later.")

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        print(f"[api] {request.url.path}: unexpected {type(exc).__name__}: {exc}")
        return _error(500, "Internal server error")


def create_app(
    config: dict | None = None,
    repository: Repository | None = None,
    fetch_snapshot: Callable | None = None,
    geocode: Callable | None = None,
    reverse_geocode: Callable | None = None,
) -> FastAPI:
    """Build the FastAPI app.

    Args:
        config: Loaded configuration; read from config.toml if omitted.
        repository: Storage backend; an SQLRepository on
            [storage].database_url if omitted.
        fetch_snapshot: fetch_snapshot(lat, lon, city, country, units)
            returning a WeatherSnapshot.
        geocode: geocode(place) returning latitude/longitude/city/country.
        reverse_geocode: reverse_geocode(lat, lon) returning city/country.
    """
    config = config or load_config()
    providers = config["providers"]
    log_path = Path(config["log"]["path"])

    if repository is None:
        engine = make_engine(config["storage"]["database_url"])
        init_db(engine)
        repository = SQLRepository(engine)

    fetch_snapshot = fetch_snapshot or partial(
        weather.fetch_snapshot, providers=providers, log_path=log_path
    )
    geocode = geocode or partial(
        geocoding.geocode,
        url=providers["geocoding_url"],
        timeout=providers["timeout"],
        log_path=log_path,
    )
    reverse_geocode = reverse_geocode or partial(
        geocoding.reverse_geocode,
        url=providers["reverse_geocoding_url"],
        timeout=providers["timeout"],
    )

    lifecycle = AlertLifecycleManager(repository, dedupe=config["alerts"]["dedupe"])

    app = FastAPI(title="weather-dashboard", version=APP_VERSION)
    app.state.repository = repository
    app.state.lifecycle = lifecycle
    app.state.status_dir = log_path.parent
    app.state.scanner = BatchAlertScanner(
        repository, fetch_snapshot, lifecycle=lifecycle, status_dir=log_path.parent
    )
    app.state.fetch_snapshot = fetch_snapshot
    app.state.geocode = geocode
    app.state.reverse_geocode = reverse_geocode

    app.include_router(router, prefix="/api")
    _install_error_handlers(app)
    return app
