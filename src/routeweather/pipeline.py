"""Core route weather pipeline — shared by CLI and API.

Orchestrates: geocode → directions → sample → project times → fetch weather
→ segments + alert summary. Returns structured results without printing.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from routeweather.analysis.alerts import summarize_alerts
from routeweather.analysis.segments import build_segments
from routeweather.config import ApiKeys, Settings
from routeweather.fetch.http import build_session
from routeweather.fetch.mapbox import MapboxClient
from routeweather.fetch.open_meteo import OpenMeteoClient
from routeweather.fetch.route_points import DEFAULT_INTERVAL_KM, sample_route_points
from routeweather.models import (
    CachedSession,
    DirectionsRoute,
    RouteAddresses,
    RouteWeatherResult,
    WeatherSample,
)

logger = logging.getLogger(__name__)


@dataclass
class RouteWeatherOptions:
    """Options controlling sampling density."""

    interval_km: float = DEFAULT_INTERVAL_KM


@dataclass
class ProviderClients:
    """The outbound API clients one pipeline run needs."""

    mapbox: MapboxClient
    weather: OpenMeteoClient

    @classmethod
    def from_settings(cls, settings: Settings, keys: ApiKeys) -> ProviderClients:
        session = build_session(settings.max_retries, settings.backoff_factor)
        return cls(
            mapbox=MapboxClient(keys.mapbox, timeout=settings.request_timeout_s, session=session),
            weather=OpenMeteoClient(
                timeout=settings.request_timeout_s,
                max_workers=settings.max_workers,
                session=session,
            ),
        )


def assemble_result(
    route: DirectionsRoute,
    samples: list[WeatherSample],
    addresses: RouteAddresses,
    departure_time: datetime,
) -> RouteWeatherResult:
    """Derive segments and alerts from a route and its weather samples."""
    return RouteWeatherResult(
        route=route,
        samples=samples,
        segments=build_segments(route.geometry, samples),
        alerts=summarize_alerts(samples, route.distance_miles),
        addresses=addresses,
        departure_time=departure_time,
    )


def result_from_cache(cached: CachedSession) -> RouteWeatherResult:
    """Rebuild a full result from a cached session without any network calls."""
    return assemble_result(
        cached.route, cached.weather_samples, cached.addresses, cached.departure_time
    )


def cache_entry(result: RouteWeatherResult) -> CachedSession:
    """The cacheable subset of a result; segments and alerts are re-derived on restore."""
    return CachedSession(
        route=result.route,
        weather_samples=result.samples,
        addresses=result.addresses,
        departure_time=result.departure_time,
    )


def execute_route_weather(
    start: str,
    end: str,
    clients: ProviderClients,
    departure: datetime | None = None,
    options: RouteWeatherOptions | None = None,
    progress_callback: Callable[[str, str | None], None] | None = None,
) -> RouteWeatherResult:
    """Run the full pipeline for one start/end/departure submission.

    A naive ``departure`` is taken as local time; None means now.

    Raises:
        LocationNotFound: If either location does not geocode.
        RouteNotFound: If no driving route connects them.
        WeatherFetchFailed: If any sample's forecast cannot be fetched.
        requests.RequestException: On geocoding/directions transport errors.
    """
    options = options or RouteWeatherOptions()
    departure = departure or datetime.now()
    if departure.tzinfo is None:
        departure = departure.astimezone()

    def _notify(stage: str, detail: str | None = None) -> None:
        if progress_callback is not None:
            progress_callback(stage, detail)

    logger.info("Route: %s -> %s, departing %s", start, end, departure.isoformat())

    _notify("geocode")
    with ThreadPoolExecutor(max_workers=2) as pool:
        start_future = pool.submit(clients.mapbox.geocode, start)
        end_future = pool.submit(clients.mapbox.geocode, end)
        start_coords = start_future.result()
        end_coords = end_future.result()

    addresses = RouteAddresses(
        start=start, end=end, start_coords=start_coords, end_coords=end_coords
    )

    _notify("directions")
    route = clients.mapbox.directions(start_coords, end_coords)

    _notify("sampling")
    points = sample_route_points(route.geometry, options.interval_km)
    logger.info(
        "Route sampled: %d points along %.1f km", len(points), points[-1].distance_km
    )

    _notify("weather", f"{len(points)} points")
    samples = clients.weather.fetch_route_weather(points, departure, route.duration_s)

    _notify("segments")
    result = assemble_result(route, samples, addresses, departure)
    logger.info(
        "Built %d segments, %d alert ranges", len(result.segments), len(result.alerts)
    )
    return result
