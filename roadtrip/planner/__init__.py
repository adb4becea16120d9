"""Trip-cost resolution components."""

from roadtrip.planner.costs import fuel_cost, total_cost, validate_vehicle_parameters
from roadtrip.planner.geo_resolver import GeoResolver
from roadtrip.planner.route_geometry import normalize_route_geometry
from roadtrip.planner.route_resolver import RouteResolver
from roadtrip.planner.toll_estimator import TollEstimator, fallback_estimate

__all__ = [
    "GeoResolver",
    "RouteResolver",
    "TollEstimator",
    "fallback_estimate",
    "fuel_cost",
    "normalize_route_geometry",
    "total_cost",
    "validate_vehicle_parameters",
]
