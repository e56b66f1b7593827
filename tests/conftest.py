"""Shared fixtures: a seeded in-memory SQLite database for the SQLAlchemy catalogue,
and an optional real PostgreSQL for the integration tests."""

from __future__ import annotations

import os

import pytest
from sqlalchemy.pool import StaticPool

from models.metro import TrackType
from orm.models import Base, CityModel, MetroLineModel, MetroSystemModel
from orm.session import create_session_factory

POSTGRES_URL = os.getenv("METRO_TEST_DATABASE_URL", "")
USE_DOCKER_POSTGRES = os.getenv("METRO_TEST_DOCKER", "").lower() in ("1", "true", "yes")

# Same rows as db/migrations/V2__populate_data.sql
CITIES = [
    (1, "Warszawa", 1748916, 517.24, None),
    (2, "Paris", 2243833, 105.4, "http://paris.fr"),
    (3, "Chicago", 2695598, 606.1, None),
]
SYSTEMS = [
    (1, 1, "Metro Warszawskie", 568000),
    (2, 2, "Métro de Paris", 4160000),
    (3, 3, "CTA Rail", 680000),
]
LINES = [
    (1, 1, "M1", 21, TrackType.RAIL),
    (2, 1, "M2", 7, TrackType.RAIL),
    (3, 2, "Ligne 1", 25, TrackType.RUBBER),
    (4, 2, "Ligne 7", 38, TrackType.RAIL),
    (5, 2, "Ligne 14", 13, TrackType.RUBBER),
    (6, 3, "Red Line", 33, TrackType.RAIL),
    (7, 3, "Brown Line", 27, TrackType.RAIL),
]


# ── skip marker ──────────────────────────────────────────────────────────────

skip_without_postgres = pytest.mark.skipif(
    not (POSTGRES_URL or USE_DOCKER_POSTGRES),
    reason="No PostgreSQL configured (set METRO_TEST_DATABASE_URL or METRO_TEST_DOCKER=1)",
)


# ── fixtures ─────────────────────────────────────────────────────────────────


@pytest.fixture
def session_factory():
    """Session factory over a fresh in-memory SQLite database holding the fixture rows."""
    engine, factory = create_session_factory(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    with factory.begin() as session:
        session.add_all(
            CityModel(id=i, name=n, population=p, area=a, link=l) for i, n, p, a, l in CITIES
        )
        session.add_all(
            MetroSystemModel(id=i, city_id=c, name=n, daily_ridership=r) for i, c, n, r in SYSTEMS
        )
        session.add_all(
            MetroLineModel(id=i, system_id=s, name=n, station_count=sc, track_type=t)
            for i, s, n, sc, t in LINES
        )
    yield factory
    engine.dispose()


@pytest.fixture(scope="session")
def postgres_url():
    """URL of a disposable PostgreSQL: the configured one, or a container started for the session."""
    if POSTGRES_URL:
        yield POSTGRES_URL
        return
    from db.container import PostgresContainer

    with PostgresContainer() as info:
        yield info.dsn
