# meetpoint/services/route_sampler.py
"""
Sampling positions along driving routes.

Used by the recentering stage of the solver to find where each participant
would be after a shared amount of travel time.
"""
from bisect import bisect_left
from typing import List, Sequence

from meetpoint.core.logger import logger
from meetpoint.models.geo import Coordinate
from meetpoint.models.meeting import SolverResult
from meetpoint.services.geodesy import cumulative_distances_km
from meetpoint.services.ors_client import RouteGeometryProvider


def position_at_fraction(polyline: Sequence[Coordinate], fraction: float) -> Coordinate:
    """
    Point reached after `fraction` of the polyline's total length.

    The fraction is clamped to [0, 1]; the position is linearly interpolated
    inside the segment that contains it. A zero-length polyline yields its
    first point.
    """
    if not polyline:
        raise ValueError("position_at_fraction() needs a non-empty polyline")

    fraction = min(max(fraction, 0.0), 1.0)
    cumulative = cumulative_distances_km(polyline)
    total = cumulative[-1]
    if total <= 0.0:
        return polyline[0]

    target = fraction * total
    # First vertex whose cumulative distance reaches the target
    idx = bisect_left(cumulative, target)
    if idx == 0:
        return polyline[0]
    if idx >= len(polyline):
        return polyline[-1]

    start, end = polyline[idx - 1], polyline[idx]
    seg_len = cumulative[idx] - cumulative[idx - 1]
    if seg_len <= 0.0:
        return end

    t = (target - cumulative[idx - 1]) / seg_len
    return Coordinate(
        lat=start.lat + t * (end.lat - start.lat),
        lon=start.lon + t * (end.lon - start.lon),
    )


def equal_time_positions(
    origins: Sequence[Coordinate],
    best: SolverResult,
    router: RouteGeometryProvider,
) -> List[Coordinate]:
    """
    Where each participant would be, along their real route to `best.chosen`,
    once the average travel time has elapsed.

    Routes are fetched one origin at a time. Origins that cannot reach the
    candidate or whose route geometry is unavailable are left out.
    """
    reachable = best.reachable_times()
    if not reachable or best.travel_times is None:
        return []
    target_sec = sum(reachable) / len(reachable)

    positions: List[Coordinate] = []
    for i, (origin, travel_sec) in enumerate(zip(origins, best.travel_times)):
        if travel_sec is None:
            logger.info(f"Origin {i} cannot reach the current best point; skipped")
            continue

        route = router.route_geometry(origin, best.chosen)
        if route is None:
            logger.warning(f"No route geometry for origin {i}; skipped")
            continue

        fraction = 1.0 if travel_sec <= 0 else target_sec / travel_sec
        positions.append(position_at_fraction(route, fraction))

    logger.info(
        f"Equal-time positions after {target_sec:.0f} s: "
        f"{len(positions)}/{len(origins)} origins placed"
    )
    return positions
