"""Unit tests for vectors and coordinate projection."""

import math

import numpy as np
import pytest

from aegis.core.geometry import (
    ORIGIN_LAT,
    ORIGIN_LON,
    Vector3,
    clamp_magnitude,
    local_to_geodetic,
)


class TestVector3:
    """Tests for Vector3."""

    def test_magnitude(self):
        assert Vector3(3.0, 4.0, 0.0).magnitude == 5.0
        assert Vector3(3.0, 4.0, 12.0).magnitude == 13.0

    def test_horizontal_magnitude(self):
        """Horizontal magnitude should ignore z."""
        assert Vector3(3.0, 4.0, 100.0).horizontal_magnitude == 5.0

    def test_distance(self):
        a = Vector3(1.0, 2.0, 3.0)
        b = Vector3(4.0, 6.0, 3.0)
        assert a.distance_to(b) == 5.0
        assert b.distance_to(a) == 5.0

    def test_array_conversion(self):
        vec = Vector3(1.5, -2.0, 3.25)
        arr = vec.to_array()

        assert arr.dtype == np.float64
        assert Vector3.from_array(arr) == vec

    def test_coerce_tuple(self):
        assert Vector3.of((1, 2, 3)) == Vector3(1.0, 2.0, 3.0)
        vec = Vector3(1.0, 1.0, 1.0)
        assert Vector3.of(vec) is vec

    def test_unpacking(self):
        x, y, z = Vector3(1.0, 2.0, 3.0)
        assert (x, y, z) == (1.0, 2.0, 3.0)

    def test_with_z(self):
        assert Vector3(1.0, 2.0, 3.0).with_z(0.0) == Vector3(1.0, 2.0, 0.0)

    def test_immutable(self):
        vec = Vector3(1.0, 2.0, 3.0)
        with pytest.raises(AttributeError):
            vec.x = 5.0


class TestClampMagnitude:
    """Tests for clamp_magnitude."""

    def test_clamps_long_vector(self):
        clamped = clamp_magnitude(np.array([30.0, 40.0, 0.0]), 5.0)
        assert np.linalg.norm(clamped) == pytest.approx(5.0)
        # Direction preserved
        assert clamped[0] / clamped[1] == pytest.approx(0.75)

    def test_short_vector_unchanged(self):
        vec = np.array([1.0, 1.0, 1.0])
        assert np.array_equal(clamp_magnitude(vec, 5.0), vec)

    def test_zero_vector(self):
        """Zero vectors should not produce NaN."""
        clamped = clamp_magnitude(np.zeros(3), 5.0)
        assert np.all(np.isfinite(clamped))
        assert np.all(clamped == 0.0)


class TestGeodeticProjection:
    """Tests for local_to_geodetic."""

    def test_origin(self):
        lat, lon, alt = local_to_geodetic(0.0, 0.0, 12.0)
        assert lat == ORIGIN_LAT
        assert lon == ORIGIN_LON
        assert alt == 12.0

    def test_north_offset(self):
        """111111m north should be one degree of latitude."""
        lat, lon, _ = local_to_geodetic(0.0, 111111.0, 0.0)
        assert lat == pytest.approx(ORIGIN_LAT + 1.0)
        assert lon == pytest.approx(ORIGIN_LON)

    def test_east_offset_scaled_by_latitude(self):
        _, lon, _ = local_to_geodetic(1000.0, 0.0, 0.0)
        expected = 1000.0 / (111111.0 * math.cos(math.radians(ORIGIN_LAT)))
        assert lon - ORIGIN_LON == pytest.approx(expected)
