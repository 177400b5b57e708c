"""GeoJSON export of route AQI estimates for map overlays."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from .route_aqi import RouteAggregate, RoutePointEstimate, aggregate_estimates
from .utils_geo import aqi_category, aqi_color


def route_geojson(
    points: Sequence[Sequence[float]],
    estimates: Sequence[RoutePointEstimate],
    aggregate: Optional[RouteAggregate] = None,
) -> Dict[str, object]:
    """One Point feature per sampled point, coloured by estimated AQI."""
    if len(points) != len(estimates):
        raise ValueError(
            f"points and estimates differ in length: {len(points)} != {len(estimates)}"
        )
    if aggregate is None:
        aggregate = aggregate_estimates(estimates)

    features: List[Dict[str, object]] = []
    for point, estimate in zip(points, estimates):
        result = estimate.result
        features.append(
            {
                "type": "Feature",
                # GeoJSON positions are [lon, lat].
                "geometry": {"type": "Point", "coordinates": [point[1], point[0]]},
                "properties": {
                    "pointIndex": estimate.point_index,
                    "estimatedAQI": result.estimated_aqi,
                    "confidence": result.confidence,
                    "stationsUsed": result.stations_used,
                    "category": aqi_category(result.estimated_aqi),
                    "color": aqi_color(result.estimated_aqi),
                },
            }
        )

    metadata = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "aggregate": aggregate.to_dict(),
        "points": len(features),
    }
    return {"type": "FeatureCollection", "features": features, "metadata": metadata}


__all__ = ["route_geojson"]
