"""Mapbox client for forward geocoding and driving directions."""

from __future__ import annotations

import logging
from urllib.parse import quote

import requests

from routeweather.errors import LocationNotFound, RouteNotFound
from routeweather.fetch.http import build_session
from routeweather.models import Coordinate, DirectionsRoute

logger = logging.getLogger(__name__)

GEOCODING_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places/{query}.json"
DIRECTIONS_URL = "https://api.mapbox.com/directions/v5/mapbox/driving/{start};{end}"


def _lonlat(coords: Coordinate) -> str:
    return f"{coords[0]},{coords[1]}"


class MapboxClient:
    """Client for the Mapbox geocoding and directions APIs."""

    def __init__(
        self,
        access_token: str,
        timeout: float = 15,
        session: requests.Session | None = None,
    ):
        self.access_token = access_token
        self.timeout = timeout
        self.session = session or build_session()

    def geocode(self, location: str) -> Coordinate:
        """Resolve free text to the (lon, lat) of the first matching feature.

        Raises:
            LocationNotFound: If the provider returns no features.
            requests.HTTPError: On a non-2xx response.
        """
        url = GEOCODING_URL.format(query=quote(location, safe=""))
        logger.info("Geocoding %r", location)

        resp = self.session.get(
            url, params={"access_token": self.access_token}, timeout=self.timeout
        )
        resp.raise_for_status()
        features = resp.json().get("features") or []
        if not features:
            raise LocationNotFound(location)

        lon, lat = features[0]["center"]
        return (float(lon), float(lat))

    def directions(self, start: Coordinate, end: Coordinate) -> DirectionsRoute:
        """Fetch the first driving route between two points.

        Raises:
            RouteNotFound: If the provider returns no routes.
            requests.HTTPError: On a non-2xx response.
        """
        url = DIRECTIONS_URL.format(start=_lonlat(start), end=_lonlat(end))
        params = {"geometries": "geojson", "access_token": self.access_token}
        logger.info("Fetching driving route %s -> %s", _lonlat(start), _lonlat(end))

        resp = self.session.get(url, params=params, timeout=self.timeout)
        resp.raise_for_status()
        routes = resp.json().get("routes") or []
        if not routes:
            raise RouteNotFound()

        route = routes[0]
        geometry = [(float(lon), float(lat)) for lon, lat in route["geometry"]["coordinates"]]
        logger.info(
            "Route: %.1f km, %.0f min, %d vertices",
            route["distance"] / 1000, route["duration"] / 60, len(geometry),
        )
        return DirectionsRoute(
            geometry=geometry,
            distance_m=route["distance"],
            duration_s=route["duration"],
        )
