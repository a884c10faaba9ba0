"""Tests for per-frame batch propagation."""

from datetime import datetime, timedelta, timezone

import jax.numpy as jnp
import numpy as np
import pytest

from orbitview.config import set_dtype
from orbitview.pipeline import (
    EphemerisRecord,
    PreparedCatalog,
    compute_position_batch,
    positions_as_xyz,
    prepare_catalog,
    valid_mask,
)
from orbitview.time import datetime_to_jd, gmst

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _static_ephemeris(identifier, start, span_days=1.0):
    jd, fraction = datetime_to_jd(start)
    epochs = np.array([jd + fraction, jd + fraction + span_days])
    positions = np.array([[7000.0, 0.0, 0.0], [7000.0, 0.0, 0.0]])
    return EphemerisRecord(identifier, epochs, positions)


class TestComputePositionBatch:
    def test_layout(self, equatorial_trio):
        catalog = prepare_catalog(equatorial_trio)
        batch = compute_position_batch(catalog, EPOCH)
        assert batch.shape == (9,)
        assert batch.dtype == np.float64
        assert positions_as_xyz(batch).shape == (3, 3)
        assert valid_mask(batch).all()

    def test_idempotent(self, equatorial_trio):
        catalog = prepare_catalog(equatorial_trio)
        first = compute_position_batch(catalog, EPOCH)
        second = compute_position_batch(catalog, EPOCH)
        assert np.array_equal(first, second)
        assert first is not second

    def test_index_alignment(self, equatorial_trio):
        forward = prepare_catalog(equatorial_trio)
        backward = prepare_catalog(list(reversed(equatorial_trio)))
        xyz_f = positions_as_xyz(compute_position_batch(forward, EPOCH))
        xyz_b = positions_as_xyz(compute_position_batch(backward, EPOCH))
        for identifier in forward.identifiers:
            np.testing.assert_allclose(
                xyz_f[forward.index_of(identifier)], xyz_b[backward.index_of(identifier)], rtol=1e-14
            )

    def test_nan_isolation(self, equatorial_trio):
        # Ephemeris that ends before the frame instant has no position
        stale = _static_ephemeris("EPH-OLD", EPOCH - timedelta(days=3))
        catalog = prepare_catalog(equatorial_trio, [stale])
        with_gap = compute_position_batch(catalog, EPOCH)
        alone = compute_position_batch(prepare_catalog(equatorial_trio), EPOCH)

        mask = valid_mask(with_gap)
        assert mask.tolist() == [True, True, True, False]
        assert np.isnan(positions_as_xyz(with_gap)[3]).all()
        np.testing.assert_allclose(with_gap[:9], alone, rtol=1e-14)

    def test_ephemeris_rotated_to_earth_fixed(self):
        catalog = prepare_catalog([], [_static_ephemeris("EPH", EPOCH - timedelta(hours=1))])
        xyz = positions_as_xyz(compute_position_batch(catalog, EPOCH))
        theta = gmst(*datetime_to_jd(EPOCH))
        expected = [7.0e6 * np.cos(theta), -7.0e6 * np.sin(theta), 0.0]
        assert xyz[0] == pytest.approx(expected, abs=1e-3)

    def test_unit_scale(self, equatorial_trio):
        catalog = prepare_catalog(equatorial_trio)
        metres = compute_position_batch(catalog, EPOCH)
        kilometres = compute_position_batch(catalog, EPOCH, unit_scale=1.0)
        assert metres == pytest.approx(kilometres * 1000.0, rel=1e-12, abs=1e-6)

    def test_float32_buffer(self, equatorial_trio):
        set_dtype(jnp.float32)
        batch = compute_position_batch(prepare_catalog(equatorial_trio), EPOCH)
        assert batch.dtype == np.float32
        assert valid_mask(batch).all()

    def test_radius_at_altitude(self, equatorial_trio):
        xyz = positions_as_xyz(compute_position_batch(prepare_catalog(equatorial_trio), EPOCH))
        radii = np.linalg.norm(xyz, axis=1)
        assert radii == pytest.approx(np.full(3, 6878.137e3), abs=50e3)
        assert np.abs(xyz[:, 2]).max() < 1.0


class TestPropagationFailures:
    @pytest.fixture
    def decaying(self, element_set_factory):
        # Heavy drag from a low orbit: valid at epoch, reentered within days
        return element_set_factory(90004, altitude_km=150.0, bstar=" 99999-0")

    def test_valid_at_epoch(self, equatorial_trio, decaying):
        batch = compute_position_batch(prepare_catalog([*equatorial_trio, decaying]), EPOCH)
        assert valid_mask(batch).tolist() == [True, True, True, True]

    @pytest.mark.parametrize("days", [5, 30, 365])
    def test_decayed_record_is_nan(self, equatorial_trio, decaying, days):
        instant = EPOCH + timedelta(days=days)
        batch = compute_position_batch(prepare_catalog([*equatorial_trio, decaying]), instant)
        alone = compute_position_batch(prepare_catalog(equatorial_trio), instant)

        assert valid_mask(batch).tolist() == [True, True, True, False]
        assert np.isnan(positions_as_xyz(batch)[3]).all()
        np.testing.assert_allclose(batch[:9], alone, rtol=1e-14)

    def test_per_record_fallback(self, monkeypatch, equatorial_trio, decaying):
        catalog = prepare_catalog([*equatorial_trio, decaying])
        instant = EPOCH + timedelta(days=30)
        vectorized = compute_position_batch(catalog, instant)

        class _Failing:
            def sgp4(self, jd, fraction):
                raise RuntimeError("vectorized propagation unavailable")

        monkeypatch.setattr(PreparedCatalog, "satrec_array", property(lambda self: _Failing()))
        fallback = compute_position_batch(catalog, instant)

        assert valid_mask(fallback).tolist() == [True, True, True, False]
        np.testing.assert_allclose(fallback[:9], vectorized[:9], rtol=1e-12)
        assert np.isnan(fallback[9:]).all()


def test_valid_mask_handles_inf():
    batch = np.array([0.0, 0.0, 0.0, np.inf, 0.0, 0.0, 1.0, np.nan, 2.0])
    assert valid_mask(batch).tolist() == [True, False, False]
