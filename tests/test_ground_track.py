"""Tests for the ground track and coverage footprints."""

import math
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from orbitview.analysis import (
    VISIBILITY_ELEVATIONS,
    GroundTrack,
    GroundTrackPoint,
    footprint_circle,
    footprint_radius,
    great_circle_distance,
    ground_track,
    is_within_footprint,
    subsatellite_point,
    visibility_zones,
)
from orbitview.constants import R_EARTH_MEAN_KM
from orbitview.pipeline import prepare_tle_record
from orbitview.time import gmst_at

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _wrap(angle: float) -> float:
    return (angle + 180.0) % 360.0 - 180.0


@pytest.fixture
def equatorial(element_set_factory):
    return element_set_factory(90001)


@pytest.fixture
def decaying(element_set_factory):
    return element_set_factory(90004, altitude_km=150.0, bstar=" 99999-0")


class TestSubsatellitePoint:
    def test_equatorial(self, equatorial):
        point = subsatellite_point(equatorial, EPOCH)
        assert isinstance(point, GroundTrackPoint)
        assert abs(point.latitude) < 0.1
        assert point.altitude == pytest.approx(500.0, abs=30.0)
        # Zero mean anomaly at epoch lies on the TEME x axis
        assert _wrap(point.longitude + gmst_at(EPOCH, use_degrees=True)) == pytest.approx(0.0, abs=1.0)
        assert point.time == EPOCH

    def test_satrec_input(self, equatorial):
        satrec = prepare_tle_record(equatorial).satrec
        assert subsatellite_point(satrec, EPOCH) == subsatellite_point(equatorial, EPOCH)

    def test_naive_instant_is_utc(self, equatorial):
        point = subsatellite_point(equatorial, datetime(2024, 1, 1))
        assert point.time == EPOCH

    def test_propagation_failure(self, decaying):
        assert subsatellite_point(decaying, EPOCH + timedelta(days=30)) is None


class TestGroundTrack:
    def test_sample_counts(self, equatorial):
        track = ground_track(equatorial, EPOCH)
        assert isinstance(track, GroundTrack)
        assert len(track.past) == 45
        assert len(track.future) == 90
        assert track.past[0].time == EPOCH - timedelta(minutes=45)
        assert track.past[-1].time == EPOCH - timedelta(minutes=1)
        assert track.future[0].time == EPOCH + timedelta(minutes=1)
        assert track.future[-1].time == EPOCH + timedelta(minutes=90)

    def test_current_matches_subsatellite_point(self, equatorial):
        track = ground_track(equatorial, EPOCH)
        expected = subsatellite_point(equatorial, EPOCH)
        assert track.current.latitude == pytest.approx(expected.latitude, abs=1e-9)
        assert track.current.longitude == pytest.approx(expected.longitude, abs=1e-9)

    def test_equatorial_trace_moves_east(self, equatorial):
        track = ground_track(equatorial, EPOCH, future_minutes=10.0, past_minutes=0.0)
        points = [track.current, *track.future]
        assert all(abs(p.latitude) < 0.1 for p in points)
        # ~3.6 deg/min: orbital rate minus Earth rotation
        steps = [_wrap(b.longitude - a.longitude) for a, b in zip(points, points[1:])]
        assert all(3.0 < s < 4.0 for s in steps)

    def test_longitudes_wrapped(self, equatorial):
        track = ground_track(equatorial, EPOCH)
        longitudes = [p.longitude for p in (*track.past, *track.future)]
        assert all(-180.0 <= lon <= 180.0 for lon in longitudes)

    def test_custom_step(self, equatorial):
        track = ground_track(equatorial, EPOCH, future_minutes=10.0, past_minutes=10.0, step=120.0)
        assert len(track.past) == 5
        assert len(track.future) == 5

    def test_failed_steps_dropped(self, decaying):
        track = ground_track(decaying, EPOCH + timedelta(days=30))
        assert track.current is None
        assert track.past == ()
        assert track.future == ()

    @pytest.mark.parametrize("kwargs", [
        {"step": 0.0},
        {"step": -60.0},
        {"future_minutes": -1.0},
        {"past_minutes": -1.0},
    ])
    def test_invalid_arguments(self, equatorial, kwargs):
        with pytest.raises(ValueError):
            ground_track(equatorial, EPOCH, **kwargs)


class TestFootprintRadius:
    def test_horizon_500km(self):
        # R * arccos(R / (R + h))
        assert footprint_radius(500.0) == pytest.approx(2445.5, abs=2.0)

    def test_zero_altitude(self):
        assert footprint_radius(0.0) == pytest.approx(0.0, abs=1e-6)

    def test_shrinks_with_elevation(self):
        radii = [footprint_radius(500.0, el) for el in VISIBILITY_ELEVATIONS]
        assert radii == sorted(radii, reverse=True)

    def test_grows_with_altitude(self):
        radii = [footprint_radius(h) for h in (400.0, 800.0, 20200.0, 35786.0)]
        assert radii == sorted(radii)

    def test_negative_altitude(self):
        with pytest.raises(ValueError, match="Altitude"):
            footprint_radius(-1.0)


class TestGreatCircleDistance:
    def test_quarter_meridian(self):
        assert great_circle_distance(0.0, 0.0, 90.0, 0.0) == pytest.approx(R_EARTH_MEAN_KM * math.pi / 2.0)

    def test_antipode(self):
        assert great_circle_distance(0.0, 0.0, 0.0, 180.0) == pytest.approx(R_EARTH_MEAN_KM * math.pi)

    def test_same_point(self):
        assert great_circle_distance(41.0, 29.0, 41.0, 29.0) == 0.0

    def test_symmetric(self):
        assert great_circle_distance(41.0, 29.0, -33.9, 151.2) == pytest.approx(
            great_circle_distance(-33.9, 151.2, 41.0, 29.0)
        )


class TestFootprintCircle:
    def test_closed_ring(self):
        ring = footprint_circle(41.0, 29.0, 1500.0)
        assert len(ring) == 73
        np.testing.assert_allclose(ring[0], ring[-1], atol=1e-9)

    @pytest.mark.parametrize("latitude, longitude", [(41.0, 29.0), (10.0, 179.0), (-60.0, -120.0)])
    def test_points_at_radius(self, latitude, longitude):
        ring = footprint_circle(latitude, longitude, 2000.0, num_points=36)
        distances = [great_circle_distance(latitude, longitude, lat, lon) for lat, lon in ring]
        np.testing.assert_allclose(distances, 2000.0, rtol=1e-7)
        assert all(-180.0 <= lon < 180.0 for _, lon in ring)

    def test_visibility_zones(self):
        zones = visibility_zones(0.0, 0.0, 500.0)
        assert tuple(zones) == VISIBILITY_ELEVATIONS
        reach = [great_circle_distance(0.0, 0.0, *zones[el][0]) for el in VISIBILITY_ELEVATIONS]
        assert reach == sorted(reach, reverse=True)


class TestIsWithinFootprint:
    POINT = GroundTrackPoint(latitude=0.0, longitude=0.0, altitude=500.0, time=EPOCH)

    def test_inside_horizon(self):
        # 20 deg of arc is ~2224 km
        assert is_within_footprint(self.POINT, 0.0, 20.0)

    def test_outside_horizon(self):
        assert not is_within_footprint(self.POINT, 0.0, 25.0)

    def test_elevation_mask(self):
        assert not is_within_footprint(self.POINT, 0.0, 20.0, min_elevation=10.0)
        assert is_within_footprint(self.POINT, 0.0, 10.0, min_elevation=10.0)
