"""Small geometric helpers on (lon, lat) coordinates."""

from __future__ import annotations

import math
from collections.abc import Sequence

from routeweather.models import Coordinate

EARTH_RADIUS_KM = 6371.0


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in km between two (lon, lat) points on a sphere."""
    lon1, lat1 = a
    lon2, lat2 = b
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def polyline_length_km(coords: Sequence[Coordinate]) -> float:
    """Total haversine length of a polyline."""
    return sum(haversine_km(coords[i - 1], coords[i]) for i in range(1, len(coords)))


def nearest_index(coords: Sequence[Coordinate], target: Coordinate) -> int:
    """Index of the polyline vertex closest to ``target``.

    Uses planar Euclidean distance on raw lon/lat degrees. The first
    minimum wins; an empty polyline yields 0.
    """
    best_idx = 0
    best_dist = math.inf
    t_lon, t_lat = target
    for i, (lon, lat) in enumerate(coords):
        dist = math.hypot(lon - t_lon, lat - t_lat)
        if dist < best_dist:
            best_dist = dist
            best_idx = i
    return best_idx
