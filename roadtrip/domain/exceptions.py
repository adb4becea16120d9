"""Domain semantic exceptions.

Every ``TripPlanningError`` is a hard failure: it aborts the pipeline run and
surfaces exactly one user-facing title/description pair.
"""

from __future__ import annotations

from roadtrip.domain.enums import ErrorKind


class DomainError(Exception):
    """Base domain exception."""


class TripPlanningError(DomainError):
    kind: ErrorKind = ErrorKind.PROVIDER_UNAVAILABLE
    title: str = "Error"
    description: str = "The route could not be calculated. Check the places you entered."

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(detail or self.description)


class PlaceNotFoundError(TripPlanningError):
    kind = ErrorKind.PLACE_NOT_FOUND
    title = "Place not found"
    description = "We could not find one of the places. Check the origin and destination."


class InvalidCoordinateError(TripPlanningError):
    kind = ErrorKind.INVALID_COORDINATE
    title = "Invalid coordinates"
    description = "The geocoding service returned invalid coordinates for one of the places."


class RouteNotFoundError(TripPlanningError):
    kind = ErrorKind.ROUTE_NOT_FOUND
    title = "No route found"
    description = "No driving route was found between the two places."


class IncompleteRouteDataError(TripPlanningError):
    kind = ErrorKind.INCOMPLETE_ROUTE_DATA
    title = "Incomplete route data"
    description = "The routing service returned a route without distance, duration or geometry."


class InvalidVehicleParametersError(TripPlanningError):
    kind = ErrorKind.INVALID_VEHICLE_PARAMETERS
    title = "Invalid vehicle settings"
    description = "Fuel efficiency must be greater than zero and fuel price cannot be negative."


class MissingRequiredFieldError(TripPlanningError):
    kind = ErrorKind.MISSING_REQUIRED_FIELD
    title = "Required fields"
    description = "Please fill in all required fields."

    def __init__(self, fields: list[str]):
        self.fields = list(fields)
        super().__init__("missing: " + ", ".join(self.fields))


class ProviderUnavailableError(TripPlanningError):
    kind = ErrorKind.PROVIDER_UNAVAILABLE
    title = "Service unavailable"
    description = "The map service could not be reached. Try again in a moment."
