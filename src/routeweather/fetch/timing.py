"""Arrival-time projection for route samples."""

from __future__ import annotations

from datetime import datetime, timedelta


def progress_ratio(index: int, count: int) -> float:
    """Fraction of the route completed at sample ``index`` of ``count`` (0 when count is 1)."""
    if count <= 1:
        return 0.0
    return index / (count - 1)


def project_arrival_times(
    count: int, departure: datetime, total_duration_s: float
) -> list[datetime]:
    """Arrival time per sample, spreading the route duration linearly by sample index.

    This assumes uniform progress per sample, not per kilometre: when the
    last sample is closer than the sampling interval, or speed varies along
    the route, the projected times drift from the real ones.
    """
    return [
        departure + timedelta(seconds=total_duration_s * progress_ratio(i, count))
        for i in range(count)
    ]
