"""Tests for route segment building."""

from __future__ import annotations

import json

import pytest

from routeweather.analysis.segments import build_segments, segments_feature_collection


class TestBuildSegments:
    @pytest.mark.parametrize("count", [0, 1, 2, 5])
    def test_one_segment_per_sample_pair(self, make_sample, route_geometry, count):
        samples = [make_sample(0, i) for i in range(count)]
        assert len(build_segments(route_geometry, samples)) == max(0, count - 1)

    def test_slices_between_matched_vertices(self, make_sample, route_geometry):
        samples = [make_sample(0, 0), make_sample(0, 1)]
        (segment,) = build_segments(route_geometry, samples)
        assert segment.coordinates == route_geometry[0:6]

    def test_conditions_from_start_sample(self, make_sample, route_geometry):
        samples = [make_sample(65, 0), make_sample(0, 1)]
        (segment,) = build_segments(route_geometry, samples)
        assert segment.color == "#1e40af"
        assert segment.description == "Heavy rain"
        assert segment.weather_code == 65
        assert segment.temperature_f == samples[0].temperature_f
        assert segment.arrival_time == samples[0].arrival_time

    def test_consecutive_segments_share_boundary_vertex(self, make_sample, route_geometry):
        samples = [make_sample(0, i) for i in range(3)]
        first, second = build_segments(route_geometry, samples)
        assert first.coordinates[-1] == second.coordinates[0]

    def test_backtracking_route_keeps_degenerate_segment(self, make_sample):
        polyline = [(0.0, 0.0), (0.0, 1.0), (0.0, 2.0), (0.0, 1.0), (0.0, 0.5)]
        samples = [
            make_sample(0, 0, coords=(0.0, 0.0)),
            make_sample(0, 1, coords=(0.0, 2.0)),
            make_sample(0, 2, coords=(0.0, 1.0)),
        ]
        segments = build_segments(polyline, samples)
        assert len(segments) == 2
        assert segments[0].coordinates == polyline[0:3]
        # (0, 1) matches vertex 1 first, behind vertex 2
        assert segments[1].coordinates == []

    def test_same_vertex_gives_single_point(self, make_sample, route_geometry):
        samples = [make_sample(0, 0), make_sample(0, 1, coords=route_geometry[0])]
        (segment,) = build_segments(route_geometry, samples)
        assert segment.coordinates == [route_geometry[0]]

    def test_empty_polyline(self, make_sample):
        samples = [make_sample(0, 0), make_sample(0, 1)]
        (segment,) = build_segments([], samples)
        assert segment.coordinates == []


def test_feature_collection_serializes_degenerate_segments(make_sample, route_geometry):
    samples = [make_sample(95, 0), make_sample(0, 1, coords=route_geometry[0])]
    fc = segments_feature_collection(build_segments(route_geometry, samples))
    assert fc["type"] == "FeatureCollection"
    feature = fc["features"][0]
    assert feature["geometry"] == {"type": "LineString", "coordinates": [[-122.0, 37.0]]}
    assert feature["properties"]["color"] == "#ef4444"
    assert feature["properties"]["arrival_time"] == samples[0].arrival_time.isoformat()
    json.dumps(fc)
