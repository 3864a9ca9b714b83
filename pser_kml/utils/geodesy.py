"""Path length along a sequence of ``(lat, lon)`` coordinates.

Two methods are available:

- **haversine**: great-circle distance on a sphere of radius 6371 km.
  This is the default and the value reported in interpretations.
- **geodesic**: distance on the WGS 84 ellipsoid via ``pyproj.Geod``,
  selected with ``DISTANCE_METHOD=geodesic``.

All results are in kilometres.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

EARTH_RADIUS_KM = 6371.0

METRES_PER_KILOMETRE = 1000.0


def haversine_km(a: tuple[float, float], b: tuple[float, float]) -> float:
    """Great-circle distance in kilometres between two ``(lat, lon)`` points."""
    lat1, lon1 = a
    lat2, lon2 = b
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    # Rounding can push h just past 1.0 for near-antipodal points.
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def haversine_path_km(coords: Sequence[tuple[float, float]]) -> float:
    """Sum of haversine distances between consecutive points."""
    return sum(haversine_km(coords[i], coords[i + 1]) for i in range(len(coords) - 1))


def geodesic_path_km(coords: Sequence[tuple[float, float]]) -> float:
    """Length of the path on the WGS 84 ellipsoid, in kilometres."""
    if len(coords) < 2:
        return 0.0

    from pyproj import Geod

    geod = Geod(ellps="WGS84")
    lats = [c[0] for c in coords]
    lons = [c[1] for c in coords]
    return float(geod.line_length(lons, lats)) / METRES_PER_KILOMETRE


def path_length_km(coords: Sequence[tuple[float, float]], *, method: str = "haversine") -> float:
    """Path length in kilometres using the named method.

    Raises:
        ValueError: If *method* is not ``"haversine"`` or ``"geodesic"``.
    """
    if method == "haversine":
        return haversine_path_km(coords)
    if method == "geodesic":
        return geodesic_path_km(coords)
    msg = f"Unknown distance method: {method!r}"
    raise ValueError(msg)
