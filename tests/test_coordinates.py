"""Tests for geodetic and topocentric coordinate conversions."""

import jax.numpy as jnp
import pytest

from orbitview.constants import WGS84_a, WGS84_f
from orbitview.coordinates import (
    LookAngles,
    Observer,
    look_angles,
    position_ecef_to_geodetic,
    position_geodetic_to_ecef,
    rotation_ecef_to_enz,
)

WGS84_b = WGS84_a * (1.0 - WGS84_f)


class TestGeodetic:
    def test_origin_of_equator(self):
        r = position_geodetic_to_ecef([0.0, 0.0, 0.0])
        assert jnp.allclose(r, jnp.array([WGS84_a, 0.0, 0.0]), atol=1e-6)

    def test_north_pole(self):
        r = position_geodetic_to_ecef([0.0, 90.0, 0.0], use_degrees=True)
        assert float(r[0]) == pytest.approx(0.0, abs=1e-6)
        assert float(r[1]) == pytest.approx(0.0, abs=1e-6)
        assert float(r[2]) == pytest.approx(WGS84_b, abs=1e-6)

    def test_altitude_raises_radius(self):
        ground = position_geodetic_to_ecef([0.0, 0.0, 0.0])
        elevated = position_geodetic_to_ecef([0.0, 0.0, 1000.0])
        assert float(elevated[0] - ground[0]) == pytest.approx(1000.0, abs=1e-6)

    @pytest.mark.parametrize(
        "geod",
        [
            [28.9784, 41.0082, 0.0],
            [-122.4, 37.8, 120.0],
            [151.2, -33.9, 500e3],
            [0.0, 89.9, 10.0],
            [-75.0, -60.0, 35786e3],
        ],
    )
    def test_roundtrip(self, geod):
        r = position_geodetic_to_ecef(geod, use_degrees=True)
        back = position_ecef_to_geodetic(r, use_degrees=True)
        assert float(back[0]) == pytest.approx(geod[0], abs=1e-8)
        assert float(back[1]) == pytest.approx(geod[1], abs=1e-8)
        assert float(back[2]) == pytest.approx(geod[2], abs=1e-4)

    def test_radians_default(self):
        r = position_geodetic_to_ecef([jnp.pi / 2, 0.0, 0.0])
        assert jnp.allclose(r, jnp.array([0.0, WGS84_a, 0.0]), atol=1e-6)


class TestObserver:
    def test_rejects_bad_latitude(self):
        with pytest.raises(ValueError, match="latitude"):
            Observer(latitude=91.0, longitude=0.0)

    def test_ecef(self):
        obs = Observer(latitude=0.0, longitude=90.0, altitude=10.0)
        assert jnp.allclose(obs.ecef(), jnp.array([0.0, WGS84_a + 10.0, 0.0]), atol=1e-6)


class TestLookAngles:
    def test_enz_rotation_at_origin(self):
        R = rotation_ecef_to_enz(0.0, 0.0)
        expected = jnp.array([[0.0, 1.0, 0.0], [0.0, 0.0, 1.0], [1.0, 0.0, 0.0]])
        assert jnp.allclose(R, expected, atol=1e-12)

    def test_zenith(self):
        obs = Observer(0.0, 0.0)
        angles = look_angles(obs, [WGS84_a + 500e3, 0.0, 0.0])
        assert isinstance(angles, LookAngles)
        assert angles.elevation == pytest.approx(90.0, abs=1e-9)
        assert angles.azimuth == 0.0
        assert angles.range == pytest.approx(500e3, abs=1e-6)

    def test_north_on_horizon(self):
        angles = look_angles(Observer(0.0, 0.0), [WGS84_a, 0.0, 1.0e6])
        assert angles.azimuth == pytest.approx(0.0, abs=1e-9)
        assert angles.elevation == pytest.approx(0.0, abs=1e-9)
        assert angles.range == pytest.approx(1.0e6, abs=1e-6)

    def test_east_on_horizon(self):
        angles = look_angles(Observer(0.0, 0.0), [WGS84_a, 1.0e6, 0.0])
        assert angles.azimuth == pytest.approx(90.0, abs=1e-9)
        assert angles.elevation == pytest.approx(0.0, abs=1e-9)

    def test_west_azimuth_wraps(self):
        angles = look_angles(Observer(0.0, 0.0), [WGS84_a, -1.0e6, 0.0])
        assert angles.azimuth == pytest.approx(270.0, abs=1e-9)

    def test_below_horizon(self):
        angles = look_angles(Observer(0.0, 0.0), [-WGS84_a, 0.0, 0.0])
        assert angles.elevation == pytest.approx(-90.0, abs=1e-9)
