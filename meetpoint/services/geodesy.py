# meetpoint/services/geodesy.py
"""
Geodesy primitives shared by the solver, the route sampler and the API.

Haversine distance is the only distance metric used anywhere in the service.
"""
import math
from typing import List, Optional, Sequence

from meetpoint.models.geo import Coordinate

EARTH_RADIUS_KM = 6371.0

# Below this magnitude the mean unit vector has no usable direction
# (antipodal or otherwise cancelling inputs).
CENTROID_EPSILON = 1e-10

# Trip diameter thresholds (km) -> default POI search radius (km)
SHORT_TRIP_MAX_KM = 25.0
MEDIUM_TRIP_MAX_KM = 450.0
SHORT_TRIP_RADIUS_KM = 1
MEDIUM_TRIP_RADIUS_KM = 15
LONG_TRIP_RADIUS_KM = 50


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """
    Great-circle (haversine) distance between two coordinates, in kilometres.
    """
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    dlat = lat2 - lat1
    dlon = math.radians(b.lon - a.lon)

    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    )
    # Rounding can push h slightly outside [0, 1] for antipodal points
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def spherical_centroid(coords: Sequence[Coordinate]) -> Optional[Coordinate]:
    """
    Centre of a set of points computed by averaging unit vectors on the sphere.

    Behaves correctly across the antimeridian and at high latitudes, unlike a
    plain lat/lon mean. When the averaged vector (almost) vanishes, the
    arithmetic mean of lat and lon is returned instead. Returns None for an
    empty input.
    """
    if not coords:
        return None

    x = y = z = 0.0
    for c in coords:
        lat = math.radians(c.lat)
        lon = math.radians(c.lon)
        x += math.cos(lat) * math.cos(lon)
        y += math.cos(lat) * math.sin(lon)
        z += math.sin(lat)

    n = len(coords)
    x, y, z = x / n, y / n, z / n
    norm = math.sqrt(x * x + y * y + z * z)

    if norm < CENTROID_EPSILON:
        return Coordinate(
            lat=sum(c.lat for c in coords) / n,
            lon=sum(c.lon for c in coords) / n,
        )

    x, y, z = x / norm, y / norm, z / norm
    return Coordinate(
        lat=math.degrees(math.atan2(z, math.hypot(x, y))),
        lon=math.degrees(math.atan2(y, x)),
    )


def max_pairwise_distance_km(coords: Sequence[Coordinate]) -> float:
    """
    Largest distance between any two points (the trip "diameter").
    """
    best = 0.0
    for i in range(len(coords)):
        for j in range(i + 1, len(coords)):
            best = max(best, distance_km(coords[i], coords[j]))
    return best


def max_spread_km(midpoint: Coordinate, coords: Sequence[Coordinate]) -> float:
    """
    Largest distance from `midpoint` to any of `coords` (0 when empty).
    """
    return max((distance_km(midpoint, c) for c in coords), default=0.0)


def default_search_radius_km(coords: Sequence[Coordinate]) -> int:
    """
    Default point-of-interest search radius based on the trip diameter:
    same city -> 1 km, regional -> 15 km, long distance -> 50 km.
    """
    diameter = max_pairwise_distance_km(coords)
    if diameter < SHORT_TRIP_MAX_KM:
        return SHORT_TRIP_RADIUS_KM
    if diameter < MEDIUM_TRIP_MAX_KM:
        return MEDIUM_TRIP_RADIUS_KM
    return LONG_TRIP_RADIUS_KM


def cumulative_distances_km(polyline: Sequence[Coordinate]) -> List[float]:
    """
    Running along-path distance at every vertex; the first entry is 0.
    """
    if not polyline:
        return []

    totals = [0.0]
    for prev, cur in zip(polyline[:-1], polyline[1:]):
        totals.append(totals[-1] + distance_km(prev, cur))
    return totals
