"""Tests for the analytical Sun position and shadow test."""

import math
from datetime import datetime, timezone

import jax.numpy as jnp
import pytest

from orbitview.analysis import is_sunlit, sun_position_ecef, sun_position_eci
from orbitview.constants import AU
from orbitview.frames import positions_teme_to_pef
from orbitview.time import gmst_at


class TestSunPosition:
    @pytest.mark.parametrize("month", [1, 4, 7, 10])
    def test_distance(self, month):
        r = sun_position_eci(datetime(2024, month, 5, tzinfo=timezone.utc))
        assert 0.98 * AU < float(jnp.linalg.norm(r)) < 1.02 * AU

    def test_perihelion_and_aphelion(self):
        january = float(jnp.linalg.norm(sun_position_eci(datetime(2024, 1, 3, tzinfo=timezone.utc))))
        july = float(jnp.linalg.norm(sun_position_eci(datetime(2024, 7, 5, tzinfo=timezone.utc))))
        assert january < july

    def test_march_equinox(self):
        r = sun_position_eci(datetime(2024, 3, 20, 3, 6, tzinfo=timezone.utc))
        norm = float(jnp.linalg.norm(r))
        assert float(r[0]) / norm == pytest.approx(1.0, abs=1e-3)
        assert abs(float(r[2])) / norm < 0.01

    def test_june_solstice_declination(self):
        r = sun_position_eci(datetime(2024, 6, 20, 20, 51, tzinfo=timezone.utc))
        declination = math.degrees(math.asin(float(r[2]) / float(jnp.linalg.norm(r))))
        assert declination == pytest.approx(23.44, abs=0.05)

    def test_ecef_is_rotated_eci(self):
        instant = datetime(2024, 5, 1, 15, 30, tzinfo=timezone.utc)
        expected = positions_teme_to_pef(gmst_at(instant), sun_position_eci(instant))
        assert jnp.allclose(sun_position_ecef(instant), expected, rtol=1e-12)


class TestIsSunlit:
    R_SUN = jnp.array([1.49e11, 0.0, 0.0])

    def test_day_side(self):
        assert is_sunlit([7.0e6, 0.0, 0.0], self.R_SUN) is True

    def test_in_shadow(self):
        assert is_sunlit([-6.5e6, 1.0e5, 1.0e5], self.R_SUN) is False

    def test_night_side_outside_cylinder(self):
        assert is_sunlit([-7.0e6, 7.0e6, 0.0], self.R_SUN) is True

    def test_terminator_plane_is_lit_outside_earth(self):
        assert is_sunlit([0.0, 6.9e6, 0.0], self.R_SUN) is True
