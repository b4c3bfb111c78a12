"""Sample a route polyline every ``interval_km``."""

from __future__ import annotations

from collections.abc import Sequence

from routeweather.geo import haversine_km
from routeweather.models import Coordinate, RoutePoint

DEFAULT_INTERVAL_KM = 5.0


def sample_route_points(
    coordinates: Sequence[Coordinate], interval_km: float = DEFAULT_INTERVAL_KM
) -> list[RoutePoint]:
    """Walk a polyline and emit a RoutePoint each time ``interval_km`` has accumulated.

    Points are snapped to existing vertices (no interpolation), so the
    actual spacing is at least ``interval_km``. The first and last
    coordinates are always included; the last may be closer than
    ``interval_km`` to its predecessor.

    Raises:
        ValueError: If the polyline is empty or the interval is not positive.
    """
    if not coordinates:
        raise ValueError("Route geometry has no coordinates")
    if interval_km <= 0:
        raise ValueError(f"Sampling interval must be positive, got {interval_km}")

    first = tuple(coordinates[0])
    points = [RoutePoint(coords=first, distance_km=0.0)]
    last_emitted_idx = 0
    emitted_km = 0.0
    accumulated_km = 0.0

    for i in range(1, len(coordinates)):
        accumulated_km += haversine_km(coordinates[i - 1], coordinates[i])
        if accumulated_km >= interval_km:
            emitted_km += accumulated_km
            points.append(RoutePoint(coords=tuple(coordinates[i]), distance_km=emitted_km))
            last_emitted_idx = i
            accumulated_km = 0.0

    if last_emitted_idx != len(coordinates) - 1:
        points.append(
            RoutePoint(
                coords=tuple(coordinates[-1]),
                distance_km=emitted_km + accumulated_km,
            )
        )

    return points
