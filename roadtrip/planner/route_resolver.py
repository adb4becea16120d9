"""Driving route acquisition between two resolved coordinates."""

from __future__ import annotations

from typing import Optional

from roadtrip.adapters.ors import DRIVING_PROFILE
from roadtrip.adapters.payloads import MISSING_GEOMETRY, MISSING_SUMMARY, Malformed, decode_route_feature
from roadtrip.domain.exceptions import IncompleteRouteDataError, ProviderUnavailableError, RouteNotFoundError
from roadtrip.domain.models import Coordinate, RouteSummary
from roadtrip.infrastructure.logging import StructuredLogger, get_logger
from roadtrip.shared.exceptions import KeyMissingError, ToolError
from roadtrip.tools.interfaces import DirectionsTool

_METERS_PER_KM = 1000.0
_SECONDS_PER_MINUTE = 60.0


class RouteResolver:
    def __init__(self, tool: DirectionsTool, *, logger: Optional[StructuredLogger] = None) -> None:
        self._tool = tool
        self._log = logger or get_logger()

    async def compute_route(
        self,
        origin: Coordinate,
        destination: Coordinate,
        profile: str = DRIVING_PROFILE,
    ) -> RouteSummary:
        try:
            payload = await self._tool.directions(origin, destination, profile)
        except (ToolError, KeyMissingError) as exc:
            raise ProviderUnavailableError(str(exc)) from exc

        decoded = decode_route_feature(payload)
        if isinstance(decoded, Malformed):
            if decoded.reason in (MISSING_SUMMARY, MISSING_GEOMETRY):
                raise IncompleteRouteDataError(f"{decoded.reason} {decoded.detail}".strip())
            raise RouteNotFoundError(decoded.reason)

        feature = decoded.data
        summary = RouteSummary(
            distance_km=feature.distance_m / _METERS_PER_KM,
            duration_minutes=feature.duration_s / _SECONDS_PER_MINUTE,
            raw_geometry=feature.coordinates,
        )
        self._log.event(
            "route_summary",
            profile=profile,
            distance_km=summary.distance_km,
            duration_minutes=summary.duration_minutes,
            points=len(summary.raw_geometry),
        )
        return summary
