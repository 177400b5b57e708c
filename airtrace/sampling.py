"""Resampling of route polylines at a fixed spatial interval."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .config import SAMPLE_INTERVAL_METERS
from .utils_geo import Coordinate, coordinate_distance

logger = logging.getLogger(__name__)


def sample_route_points(
    route: Optional[Sequence[Sequence[float]]],
    interval_meters: float = SAMPLE_INTERVAL_METERS,
) -> List[Coordinate]:
    """Return points spaced ``interval_meters`` apart along ``route``.

    The first and last vertices are always included. Interior points are
    placed by linear interpolation in latitude/longitude, which is accurate
    enough for intervals that are short relative to the Earth's curvature.
    Routes with fewer than two vertices give an empty list.

    Raises ValueError when ``interval_meters`` is not positive.
    """
    if interval_meters <= 0:
        raise ValueError("interval_meters must be > 0")
    if not route or len(route) < 2:
        return []

    first = route[0]
    sampled: List[Coordinate] = [(first[0], first[1])]
    accumulated = 0.0
    last_point = first

    for current in route[1:]:
        segment = coordinate_distance(last_point, current)
        if segment == 0:
            last_point = current
            continue

        accumulated += segment
        while accumulated >= interval_meters:
            # Distance from the segment start to the next sample position.
            offset = interval_meters - (accumulated - segment)
            fraction = offset / segment
            lat = last_point[0] + (current[0] - last_point[0]) * fraction
            lon = last_point[1] + (current[1] - last_point[1]) * fraction
            sampled.append((lat, lon))
            accumulated -= interval_meters

        last_point = current

    last = route[-1]
    if sampled[-1][0] != last[0] or sampled[-1][1] != last[1]:
        sampled.append((last[0], last[1]))

    logger.debug(
        "Sampled %d points from %d vertices at %.0fm", len(sampled), len(route), interval_meters
    )
    return sampled


__all__ = ["sample_route_points"]
