"""Domain enums."""

from enum import Enum


class VehicleClass(str, Enum):
    CAR = "car"
    MOTORCYCLE = "motorcycle"


class TollSource(str, Enum):
    PROVIDER = "provider"
    FALLBACK = "fallback"


class PipelineState(str, Enum):
    IDLE = "idle"
    RESOLVING_PLACES = "resolving_places"
    RESOLVING_ROUTE = "resolving_route"
    COMPUTING_COSTS = "computing_costs"
    COMPLETED = "completed"
    FAILED = "failed"


class ErrorKind(str, Enum):
    PLACE_NOT_FOUND = "place_not_found"
    INVALID_COORDINATE = "invalid_coordinate"
    ROUTE_NOT_FOUND = "route_not_found"
    INCOMPLETE_ROUTE_DATA = "incomplete_route_data"
    INVALID_VEHICLE_PARAMETERS = "invalid_vehicle_parameters"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    PROVIDER_UNAVAILABLE = "provider_unavailable"


TERMINAL_STATES = frozenset({PipelineState.COMPLETED, PipelineState.FAILED})
