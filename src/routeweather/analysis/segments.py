"""Colored route segments between consecutive weather samples."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from routeweather.analysis.classify import classify_weather
from routeweather.geo import nearest_index
from routeweather.models import Coordinate, Segment, WeatherSample

logger = logging.getLogger(__name__)


def build_segments(
    polyline: Sequence[Coordinate], samples: Sequence[WeatherSample]
) -> list[Segment]:
    """Build one Segment per consecutive sample pair.

    Each sample is matched to its nearest polyline vertex independently
    (planar lon/lat distance), and the polyline is sliced between the two
    matches inclusive. Color and conditions come from the pair's start
    sample.

    A route that doubles back on itself can match the end sample to an
    earlier vertex than the start sample. Such segments are kept, with an
    empty (inverted) or single-point slice, so the result always has
    ``len(samples) - 1`` entries.
    """
    segments: list[Segment] = []
    degenerate = 0

    for start, end in zip(samples, samples[1:]):
        start_idx = nearest_index(polyline, start.coords)
        end_idx = nearest_index(polyline, end.coords)
        coords = [tuple(c) for c in polyline[start_idx:end_idx + 1]]
        if len(coords) < 2:
            degenerate += 1

        wc = classify_weather(start.weather_code)
        segments.append(
            Segment(
                coordinates=coords,
                color=wc.color,
                weather_code=start.weather_code,
                description=wc.description,
                temperature_f=start.temperature_f,
                precipitation_in=start.precipitation_in,
                wind_speed_mph=start.wind_speed_mph,
                arrival_time=start.arrival_time,
            )
        )

    if degenerate:
        logger.debug("%d of %d segments have fewer than two vertices", degenerate, len(segments))
    return segments


def segments_feature_collection(segments: Sequence[Segment]) -> dict:
    """GeoJSON FeatureCollection of segment LineStrings, in route order."""
    return {
        "type": "FeatureCollection",
        "features": [s.to_feature() for s in segments],
    }
