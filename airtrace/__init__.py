"""AQI estimation at points and along routes from sparse sensor stations."""
from .config import EstimationOptions
from .estimator import EstimationResult, estimate_aqi
from .route_aqi import RouteAggregate, RoutePointEstimate, aggregate_route, estimate_route
from .sampling import sample_route_points
from .stations import Station, StationWithDistance, find_nearest_stations
from .utils_geo import haversine_distance

__all__ = [
    "EstimationOptions",
    "EstimationResult",
    "estimate_aqi",
    "RouteAggregate",
    "RoutePointEstimate",
    "aggregate_route",
    "estimate_route",
    "sample_route_points",
    "Station",
    "StationWithDistance",
    "find_nearest_stations",
    "haversine_distance",
]
