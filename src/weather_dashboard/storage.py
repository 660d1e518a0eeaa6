# Project: weather-dashboard
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
storage.py — Repository interface for favorites, alert preferences and
alerts, plus the SQLModel implementation.

Everything that needs persistence takes a Repository as an argument; the
engine is built once by the caller (API app or CLI) and handed in.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, col, create_engine, select

from weather_dashboard.errors import NotFoundError
from weather_dashboard.models import AlertPreference, FavoriteCity, WeatherAlert
from weather_dashboard.utils import as_naive_utc, utcnow


class Repository(ABC):
    """Storage operations used by the lifecycle manager, scanner and API."""

    # Favorite cities
    @abstractmethod
    def list_favorites(self) -> list[FavoriteCity]: ...

    @abstractmethod
    def get_favorite(self, favorite_id: str) -> Optional[FavoriteCity]: ...

    @abstractmethod
    def add_favorite(self, favorite: FavoriteCity) -> FavoriteCity: ...

    @abstractmethod
    def remove_favorite(self, favorite_id: str) -> None: ...

    # Alert preferences
    @abstractmethod
    def list_preferences(self) -> list[AlertPreference]: ...

    @abstractmethod
    def list_enabled_preferences(self) -> list[AlertPreference]: ...

    @abstractmethod
    def get_preference(self, preference_id: str) -> Optional[AlertPreference]: ...

    @abstractmethod
    def add_preference(self, preference: AlertPreference) -> AlertPreference: ...

    @abstractmethod
    def update_preference(self, preference_id: str, changes: dict) -> AlertPreference: ...

    @abstractmethod
    def remove_preference(self, preference_id: str) -> None: ...

    # Alerts
    @abstractmethod
    def list_active_alerts(self) -> list[WeatherAlert]: ...

    @abstractmethod
    def list_alerts_for_location(self, city: str, country: str) -> list[WeatherAlert]: ...

    @abstractmethod
    def find_active_alert(self, city: str, country: str, alert_type: str) -> Optional[WeatherAlert]: ...

    @abstractmethod
    def get_alert(self, alert_id: str) -> Optional[WeatherAlert]: ...

    @abstractmethod
    def add_alert(self, alert: WeatherAlert) -> WeatherAlert: ...

    @abstractmethod
    def deactivate_alert(self, alert_id: str) -> None: ...

    @abstractmethod
    def expire_alerts(self, now: datetime) -> int: ...


def make_engine(database_url: str):
    """Create an SQLAlchemy engine, with the settings SQLite needs under FastAPI.

    FastAPI runs sync endpoints on a thread pool, so SQLite connections must
    be shareable across threads. In-memory databases also need a single
    shared connection or every session would see an empty database.
    """
    kwargs = {}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, echo=False, **kwargs)


def init_db(engine) -> None:
    SQLModel.metadata.create_all(engine)


class SQLRepository(Repository):
    """Repository backed by any database SQLModel supports."""

    def __init__(self, engine) -> None:
        self.engine = engine

    def _session(self) -> Session:
        # Rows stay readable after the session closes
        return Session(self.engine, expire_on_commit=False)

    def _add(self, row):
        with self._session() as session:
            session.add(row)
            session.commit()
            session.refresh(row)
            return row

    # ── Favorite cities ──────────────────────────────────────────

    def list_favorites(self) -> list[FavoriteCity]:
        with self._session() as session:
            stmt = select(FavoriteCity).order_by(col(FavoriteCity.added_at).desc())
            return list(session.exec(stmt).all())

    def get_favorite(self, favorite_id: str) -> Optional[FavoriteCity]:
        with self._session() as session:
            return session.get(FavoriteCity, favorite_id)

    def add_favorite(self, favorite: FavoriteCity) -> FavoriteCity:
        return self._add(favorite)

    def remove_favorite(self, favorite_id: str) -> None:
        with self._session() as session:
            row = session.get(FavoriteCity, favorite_id)
            if row is not None:
                session.delete(row)
                session.commit()

    # ── Alert preferences ────────────────────────────────────────

    def list_preferences(self) -> list[AlertPreference]:
        with self._session() as session:
            stmt = select(AlertPreference).order_by(col(AlertPreference.created_at).desc())
            return list(session.exec(stmt).all())

    def list_enabled_preferences(self) -> list[AlertPreference]:
        with self._session() as session:
            stmt = (
                select(AlertPreference)
                .where(AlertPreference.is_enabled == True)  # noqa: E712
                .order_by(col(AlertPreference.created_at).desc())
            )
            return list(session.exec(stmt).all())

    def get_preference(self, preference_id: str) -> Optional[AlertPreference]:
        with self._session() as session:
            return session.get(AlertPreference, preference_id)

    def add_preference(self, preference: AlertPreference) -> AlertPreference:
        return self._add(preference)

    def update_preference(self, preference_id: str, changes: dict) -> AlertPreference:
        """Apply a partial update; keys absent from `changes` keep their value."""
        with self._session() as session:
            row = session.get(AlertPreference, preference_id)
            if row is None:
                raise NotFoundError(f"Alert preference {preference_id} not found")
            for key, value in changes.items():
                setattr(row, key, value)
            row.updated_at = utcnow()
            session.add(row)
            session.commit()
            session.refresh(row)
            return row

    def remove_preference(self, preference_id: str) -> None:
        with self._session() as session:
            row = session.get(AlertPreference, preference_id)
            if row is not None:
                session.delete(row)
                session.commit()

    # ── Alerts ───────────────────────────────────────────────────

    def list_active_alerts(self) -> list[WeatherAlert]:
        with self._session() as session:
            stmt = (
                select(WeatherAlert)
                .where(WeatherAlert.is_active == True)  # noqa: E712
                .order_by(col(WeatherAlert.created_at).desc())
            )
            return list(session.exec(stmt).all())

    def list_alerts_for_location(self, city: str, country: str) -> list[WeatherAlert]:
        with self._session() as session:
            stmt = (
                select(WeatherAlert)
                .where(
                    WeatherAlert.city == city,
                    WeatherAlert.country == country,
                    WeatherAlert.is_active == True,  # noqa: E712
                )
                .order_by(col(WeatherAlert.start_time).desc())
            )
            return list(session.exec(stmt).all())

    def find_active_alert(self, city: str, country: str, alert_type: str) -> Optional[WeatherAlert]:
        with self._session() as session:
            stmt = select(WeatherAlert).where(
                WeatherAlert.city == city,
                WeatherAlert.country == country,
                WeatherAlert.alert_type == alert_type,
                WeatherAlert.is_active == True,  # noqa: E712
            )
            return session.exec(stmt).first()

    def get_alert(self, alert_id: str) -> Optional[WeatherAlert]:
        with self._session() as session:
            return session.get(WeatherAlert, alert_id)

    def add_alert(self, alert: WeatherAlert) -> WeatherAlert:
        return self._add(alert)

    def deactivate_alert(self, alert_id: str) -> None:
        with self._session() as session:
            row = session.get(WeatherAlert, alert_id)
            if row is None or not row.is_active:
                return
            row.is_active = False
            session.add(row)
            session.commit()

    def expire_alerts(self, now: datetime) -> int:
        """Deactivate active alerts whose end_time is set and before `now`.

        Returns:
            Number of alerts deactivated.
        """
        now = as_naive_utc(now)
        with self._session() as session:
            stmt = select(WeatherAlert).where(
                WeatherAlert.is_active == True,  # noqa: E712
                col(WeatherAlert.end_time).is_not(None),
                col(WeatherAlert.end_time) < now,
            )
            rows = list(session.exec(stmt).all())
            for row in rows:
                row.is_active = False
                session.add(row)
            session.commit()
            return len(rows)
