"""Pydantic v2 models for routeweather.

Re-exports from submodules so ``from routeweather.models import X`` keeps working.
"""

from routeweather.models.route import (  # noqa: F401
    METERS_PER_MILE,
    AlertCategory,
    AlertRange,
    Coordinate,
    DirectionsRoute,
    PlaceSuggestion,
    RouteAddresses,
    RoutePoint,
    RouteWeatherResult,
    Segment,
    WeatherSample,
)
from routeweather.models.storage import (  # noqa: F401
    CachedSession,
    SavedRoute,
)
from routeweather.models.forecast import (  # noqa: F401
    HourlyForecast,
    PointForecast,
)
