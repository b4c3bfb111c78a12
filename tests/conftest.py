"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from routeweather.db.models import Base
from routeweather.errors import LocationNotFound, WeatherFetchFailed
from routeweather.fetch.timing import project_arrival_times
from routeweather.models import (
    DirectionsRoute,
    RouteAddresses,
    WeatherSample,
)
from routeweather.pipeline import ProviderClients, assemble_result

# Straight road heading north, one vertex every 0.01° (~1.1 km), ~22 km long
ROUTE_GEOMETRY = [(-122.0, round(37.0 + i * 0.01, 2)) for i in range(21)]


class FakeMapbox:
    """Resolves any location except ``Nowhere`` and always returns ROUTE_GEOMETRY."""

    def __init__(self):
        self.geocoded: list[str] = []

    def geocode(self, location: str):
        self.geocoded.append(location)
        if location == "Nowhere":
            raise LocationNotFound(location)
        if location.startswith("B"):
            return ROUTE_GEOMETRY[-1]
        return ROUTE_GEOMETRY[0]

    def directions(self, start, end):
        return DirectionsRoute(geometry=ROUTE_GEOMETRY, distance_m=22239.0, duration_s=1200.0)


class FakeWeather:
    """Returns one sample per point, cycling through ``codes``."""

    def __init__(self, codes: list[int] | None = None, fail: bool = False):
        self.codes = codes or [0]
        self.fail = fail

    def fetch_route_weather(self, points, departure, total_duration_s):
        if self.fail:
            raise WeatherFetchFailed("Failed to fetch weather data: 500 Server Error")
        arrivals = project_arrival_times(len(points), departure, total_duration_s)
        return [
            WeatherSample(
                coords=p.coords,
                temperature_f=60.0,
                precipitation_in=0.0,
                weather_code=self.codes[i % len(self.codes)],
                wind_speed_mph=5.0,
                arrival_time=arrivals[i],
            )
            for i, p in enumerate(points)
        ]


@pytest.fixture
def db_engine():
    """In-memory SQLite engine for tests."""
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Yield a SQLAlchemy session per test, rolled back after."""
    session = sessionmaker(bind=db_engine)()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def departure():
    return datetime(2026, 3, 10, 8, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def fake_clients():
    return ProviderClients(mapbox=FakeMapbox(), weather=FakeWeather())


@pytest.fixture
def make_sample(departure):
    """Factory for WeatherSamples spaced ``minutes`` apart along ROUTE_GEOMETRY."""

    def _make(code: int, idx: int = 0, minutes: int = 10, coords=None) -> WeatherSample:
        return WeatherSample(
            coords=coords or ROUTE_GEOMETRY[min(idx * 5, len(ROUTE_GEOMETRY) - 1)],
            temperature_f=55.0 + idx,
            precipitation_in=0.01 * idx,
            weather_code=code,
            wind_speed_mph=10.0,
            arrival_time=departure + timedelta(minutes=minutes * idx),
        )

    return _make


@pytest.fixture
def sample_route():
    return DirectionsRoute(geometry=ROUTE_GEOMETRY, distance_m=22239.0, duration_s=1200.0)


@pytest.fixture
def sample_addresses():
    return RouteAddresses(
        start="A Street, Springfield",
        end="B Avenue, Shelbyville",
        start_coords=ROUTE_GEOMETRY[0],
        end_coords=ROUTE_GEOMETRY[-1],
    )


@pytest.fixture
def sample_result(sample_route, sample_addresses, make_sample, departure):
    """Five samples: clear, rain, rain, clear, clear."""
    samples = [make_sample(code, idx) for idx, code in enumerate([0, 61, 63, 1, 0])]
    return assemble_result(sample_route, samples, sample_addresses, departure)


@pytest.fixture
def route_geometry():
    return list(ROUTE_GEOMETRY)


@pytest.fixture
def make_weather():
    """Build a fake weather client, e.g. ``make_weather(codes=[0, 61])``."""
    return FakeWeather
