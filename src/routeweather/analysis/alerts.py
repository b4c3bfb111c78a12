"""Merge consecutive same-category bad-weather samples into alert ranges."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Optional

from routeweather.analysis.classify import weather_category
from routeweather.fetch.timing import progress_ratio
from routeweather.models import AlertCategory, AlertRange, WeatherSample


def summarize_alerts(
    samples: Sequence[WeatherSample], total_distance_miles: float
) -> list[AlertRange]:
    """Collapse the sample sequence into maximal runs of one bad-weather category.

    Sample ``i`` sits at ``total * i / (N - 1)`` miles. A run closes at the
    mile of the first sample that no longer matches, with the time of the
    last sample that did; a run still open at the end closes at the route
    total. Good-weather samples never produce a range.
    """
    alerts: list[AlertRange] = []
    count = len(samples)

    category: Optional[AlertCategory] = None
    start_mile = 0.0
    start_time: datetime | None = None

    for idx, sample in enumerate(samples):
        current = weather_category(sample.weather_code)
        mile = total_distance_miles * progress_ratio(idx, count)

        if current == category:
            continue

        if category is not None:
            alerts.append(
                AlertRange(
                    category=category,
                    start_mile=start_mile,
                    start_time=start_time,
                    end_mile=mile,
                    end_time=samples[idx - 1].arrival_time,
                )
            )

        category = current
        if current is not None:
            start_mile = mile
            start_time = sample.arrival_time

    if category is not None:
        alerts.append(
            AlertRange(
                category=category,
                start_mile=start_mile,
                start_time=start_time,
                end_mile=total_distance_miles,
                end_time=samples[-1].arrival_time,
            )
        )

    return alerts
