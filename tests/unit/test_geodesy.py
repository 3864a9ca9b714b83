"""Tests for path length computation.

Haversine uses a 6371 km sphere; geodesic uses pyproj.Geod on WGS 84.
All values in kilometres.
"""

from __future__ import annotations

import math

import pytest

from pser_kml.utils.geodesy import (
    EARTH_RADIUS_KM,
    geodesic_path_km,
    haversine_km,
    haversine_path_km,
    path_length_km,
)

# Manila (Rizal Park) → Quezon City Memorial Circle, ~10.7 km
MANILA = (14.5831, 120.9794)
QUEZON_CITY = (14.6517, 121.0493)


class TestHaversine:
    """Great-circle distance between two points."""

    def test_one_degree_longitude_at_equator(self) -> None:
        assert haversine_km((0.0, 0.0), (0.0, 1.0)) == pytest.approx(111.19, abs=0.5)

    def test_one_degree_latitude(self) -> None:
        assert haversine_km((0.0, 0.0), (1.0, 0.0)) == pytest.approx(111.19, abs=0.5)

    def test_same_point_is_zero(self) -> None:
        assert haversine_km(MANILA, MANILA) == 0.0

    def test_symmetric(self) -> None:
        assert haversine_km(MANILA, QUEZON_CITY) == pytest.approx(haversine_km(QUEZON_CITY, MANILA))

    def test_manila_to_quezon_city(self) -> None:
        assert 10.0 < haversine_km(MANILA, QUEZON_CITY) < 11.5

    def test_antipodal_is_half_circumference(self) -> None:
        assert haversine_km((0.0, 0.0), (0.0, 180.0)) == pytest.approx(math.pi * EARTH_RADIUS_KM)

    def test_near_antipodal_rounding_does_not_raise(self) -> None:
        # h rounds to just above 1.0 for this pair
        distance = haversine_km((0.08, 0.0), (-0.08, 180.0))
        assert distance == pytest.approx(math.pi * EARTH_RADIUS_KM)

    def test_near_antipodal_path(self) -> None:
        path = [(0.08, 0.0), (-0.08, 180.0), (0.08, 0.0)]
        assert haversine_path_km(path) == pytest.approx(2 * math.pi * EARTH_RADIUS_KM)


class TestPathLength:
    """Sum over consecutive segments."""

    def test_single_point_is_zero(self) -> None:
        assert haversine_path_km([MANILA]) == 0.0
        assert geodesic_path_km([MANILA]) == 0.0

    def test_segments_are_summed(self) -> None:
        path = [(0.0, 0.0), (0.0, 1.0), (0.0, 2.0)]
        assert haversine_path_km(path) == pytest.approx(2 * haversine_km((0.0, 0.0), (0.0, 1.0)))

    def test_geodesic_close_to_haversine(self) -> None:
        path = [MANILA, QUEZON_CITY]
        assert geodesic_path_km(path) == pytest.approx(haversine_path_km(path), rel=0.01)

    def test_geodesic_equator_degree(self) -> None:
        assert geodesic_path_km([(0.0, 0.0), (0.0, 1.0)]) == pytest.approx(111.32, abs=0.01)

    def test_dispatch(self) -> None:
        path = [(0.0, 0.0), (0.0, 1.0)]
        assert path_length_km(path) == haversine_path_km(path)
        assert path_length_km(path, method="geodesic") == geodesic_path_km(path)

    def test_unknown_method(self) -> None:
        with pytest.raises(ValueError, match="Unknown distance method"):
            path_length_km([(0.0, 0.0), (0.0, 1.0)], method="vincenty")
