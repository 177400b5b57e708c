"""Inverse-distance-weighted AQI estimation at a single point."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np

from .config import EstimationOptions
from .stations import StationWithDistance, find_nearest_stations
from .utils_geo import Coordinate, round_half_up

logger = logging.getLogger(__name__)

STATUS_ESTIMATED = "estimated"
STATUS_INSUFFICIENT_STATIONS = "insufficient_stations"
STATUS_DEGENERATE_WEIGHTS = "degenerate_weights"

# Floor applied to station distances so a co-located station gets a finite weight.
MIN_DISTANCE_METERS = 1.0

DISTANCE_SCORE_WEIGHT = 0.6
STATION_COUNT_SCORE_WEIGHT = 0.4


@dataclass(frozen=True)
class EstimationResult:
    """Outcome of one estimation.

    ``status`` tells a successful estimate apart from the no-estimate cases;
    ``estimated_aqi`` is only set when ``status == "estimated"``.
    """

    status: str
    estimated_aqi: Optional[float]
    confidence: float
    stations: Tuple[StationWithDistance, ...]
    target: Coordinate
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_ESTIMATED

    @property
    def stations_used(self) -> int:
        return len(self.stations)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "status": self.status,
            "estimatedAQI": self.estimated_aqi,
            "confidence": self.confidence,
            "stationsUsed": self.stations_used,
            "stations": [station.to_dict() for station in self.stations],
            "targetLocation": [self.target[0], self.target[1]],
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload


def _no_estimate(
    status: str,
    target: Coordinate,
    nearest: Sequence[StationWithDistance],
    message: str,
) -> EstimationResult:
    return EstimationResult(
        status=status,
        estimated_aqi=None,
        confidence=0.0,
        stations=tuple(nearest),
        target=target,
        error=message,
    )


def estimate_aqi(
    target: Sequence[float],
    stations: Optional[Sequence[Any]],
    options: Optional[EstimationOptions] = None,
) -> EstimationResult:
    """Estimate the AQI at ``target`` from the nearest stations.

    Estimate = sum(value * w) / sum(w) with w = 1 / max(d, 1m) ** power.
    Confidence blends how close the stations are (60%) with how many of
    ``max_stations`` were found (40%), scaled to 0-100. It is a heuristic,
    not a statistical interval.

    Never raises for missing or malformed station data; those cases come
    back with ``estimated_aqi=None`` and an ``error`` message.
    """
    options = options or EstimationOptions()
    target_point: Coordinate = (target[0], target[1])

    nearest = find_nearest_stations(
        stations,
        target_point,
        max_stations=options.max_stations,
        max_distance_meters=options.max_distance_meters,
    )

    if len(nearest) < options.min_stations or not nearest:
        message = (
            f"Insufficient stations found. Required: {options.min_stations}, Found: {len(nearest)}"
        )
        logger.debug("No estimate at %s: %s", target_point, message)
        return _no_estimate(STATUS_INSUFFICIENT_STATIONS, target_point, nearest, message)

    distances = np.array([s.distance for s in nearest], dtype=float)
    values = np.array([s.station.value for s in nearest], dtype=float)

    weights = 1.0 / np.power(np.maximum(distances, MIN_DISTANCE_METERS), options.power)
    weight_sum = float(np.sum(weights))
    if not np.isfinite(weight_sum) or weight_sum <= 0:
        message = f"Station weights vanished for power={options.power}"
        logger.debug("No estimate at %s: %s", target_point, message)
        return _no_estimate(STATUS_DEGENERATE_WEIGHTS, target_point, nearest, message)

    estimate = float(np.sum(values * weights)) / weight_sum
    if not np.isfinite(estimate):
        message = "Weighted station values overflowed"
        logger.debug("No estimate at %s: %s", target_point, message)
        return _no_estimate(STATUS_DEGENERATE_WEIGHTS, target_point, nearest, message)

    avg_distance = float(np.mean(distances))
    distance_score = max(0.0, 1 - avg_distance / options.max_distance_meters)
    station_count_score = min(1.0, len(nearest) / options.max_stations)
    confidence = (
        distance_score * DISTANCE_SCORE_WEIGHT + station_count_score * STATION_COUNT_SCORE_WEIGHT
    ) * 100

    return EstimationResult(
        status=STATUS_ESTIMATED,
        estimated_aqi=round_half_up(estimate, 1),
        confidence=round_half_up(confidence, 1),
        stations=tuple(nearest),
        target=target_point,
    )


__all__ = [
    "EstimationResult",
    "estimate_aqi",
    "STATUS_ESTIMATED",
    "STATUS_INSUFFICIENT_STATIONS",
    "STATUS_DEGENERATE_WEIGHTS",
    "MIN_DISTANCE_METERS",
]
