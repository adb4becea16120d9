"""Provider tool protocols.

Each tool returns the provider's raw JSON body; decoding happens in
``roadtrip.adapters.payloads`` so the resolvers can tell a well-formed
answer from a malformed one.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from roadtrip.domain.models import Coordinate
from roadtrip.shared.exceptions import KeyMissingError, ToolError


@runtime_checkable
class GeocodingTool(Protocol):
    async def search(self, text: str, *, country: str, size: int) -> Any: ...


@runtime_checkable
class DirectionsTool(Protocol):
    async def directions(
        self,
        origin: Coordinate,
        destination: Coordinate,
        profile: str = "driving-car",
    ) -> Any: ...


@runtime_checkable
class TollTool(Protocol):
    async def calc_route(
        self,
        source: Coordinate,
        destination: Coordinate,
        vehicle_type: str,
        departure_time: str,
    ) -> Any: ...


__all__ = [
    "GeocodingTool",
    "DirectionsTool",
    "TollTool",
    "ToolError",
    "KeyMissingError",
]
