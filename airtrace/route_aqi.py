"""Per-point estimation along a route and route-level statistics."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .config import EstimationOptions
from .estimator import EstimationResult, estimate_aqi
from .stations import parse_stations
from .utils_geo import round_half_up

logger = logging.getLogger(__name__)

NO_VALID_ESTIMATES = "No valid AQI estimates found for route"


@dataclass(frozen=True)
class RoutePointEstimate:
    point_index: int
    result: EstimationResult

    def to_dict(self) -> Dict[str, Any]:
        payload = {"pointIndex": self.point_index}
        payload.update(self.result.to_dict())
        return payload


@dataclass(frozen=True)
class RouteAggregate:
    """Summary of the estimates along a route.

    The AQI statistics are ``None`` when no point had an estimate, in which
    case ``error`` explains why and ``coverage`` is 0.
    """

    average_aqi: Optional[float]
    min_aqi: Optional[float]
    max_aqi: Optional[float]
    valid_points: int
    total_points: int
    coverage: int
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "averageAQI": self.average_aqi,
            "minAQI": self.min_aqi,
            "maxAQI": self.max_aqi,
            "validPoints": self.valid_points,
            "totalPoints": self.total_points,
            "coverage": self.coverage,
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload


def estimate_route(
    points: Optional[Sequence[Sequence[float]]],
    stations: Optional[Sequence[Any]],
    options: Optional[EstimationOptions] = None,
) -> List[RoutePointEstimate]:
    """Estimate every point independently, keeping input order and index."""
    if not points:
        return []
    options = options or EstimationOptions()
    # Parse once instead of once per point.
    parsed = parse_stations(stations)
    return [
        RoutePointEstimate(point_index=index, result=estimate_aqi(point, parsed, options))
        for index, point in enumerate(points)
    ]


def aggregate_estimates(estimates: Sequence[RoutePointEstimate]) -> RouteAggregate:
    """Mean/min/max over the points that have an estimate."""
    total = len(estimates)
    valid = [
        e.result.estimated_aqi
        for e in estimates
        if e.result.estimated_aqi is not None and not np.isnan(e.result.estimated_aqi)
    ]

    if not valid:
        logger.info("Route has no valid AQI estimates across %d points", total)
        return RouteAggregate(
            average_aqi=None,
            min_aqi=None,
            max_aqi=None,
            valid_points=0,
            total_points=total,
            coverage=0,
            error=NO_VALID_ESTIMATES,
        )

    values = np.array(valid, dtype=float)
    aggregate = RouteAggregate(
        average_aqi=round_half_up(float(values.mean()), 1),
        min_aqi=round_half_up(float(values.min()), 1),
        max_aqi=round_half_up(float(values.max()), 1),
        valid_points=len(valid),
        total_points=total,
        coverage=int(round_half_up(len(valid) / total * 100, 0)),
    )
    logger.info(
        "Route AQI avg=%s min=%s max=%s coverage=%d%% (%d/%d points)",
        aggregate.average_aqi,
        aggregate.min_aqi,
        aggregate.max_aqi,
        aggregate.coverage,
        aggregate.valid_points,
        aggregate.total_points,
    )
    return aggregate


def aggregate_route(
    points: Optional[Sequence[Sequence[float]]],
    stations: Optional[Sequence[Any]],
    options: Optional[EstimationOptions] = None,
) -> RouteAggregate:
    return aggregate_estimates(estimate_route(points, stations, options))


__all__ = [
    "RoutePointEstimate",
    "RouteAggregate",
    "estimate_route",
    "aggregate_estimates",
    "aggregate_route",
    "NO_VALID_ESTIMATES",
]
