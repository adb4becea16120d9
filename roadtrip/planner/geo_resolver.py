"""Place name → coordinate resolution, plus autocomplete suggestions."""

from __future__ import annotations

import logging
from typing import Optional

from roadtrip.adapters.payloads import INVALID_GEOMETRY, Malformed, decode_suggestions, decode_top_match
from roadtrip.domain.exceptions import InvalidCoordinateError, PlaceNotFoundError, ProviderUnavailableError
from roadtrip.domain.models import Coordinate, GeocodeSuggestion, Place
from roadtrip.infrastructure.logging import StructuredLogger, get_logger
from roadtrip.shared.exceptions import KeyMissingError, ToolError
from roadtrip.tools.interfaces import GeocodingTool

MIN_QUERY_LENGTH = 3
MAX_SUGGESTIONS = 5
_LOGGER = logging.getLogger("road-trip.geocode")


class GeoResolver:
    def __init__(
        self,
        tool: GeocodingTool,
        *,
        country: str = "BR",
        suggestion_size: int = MAX_SUGGESTIONS,
        logger: Optional[StructuredLogger] = None,
    ) -> None:
        self._tool = tool
        self._country = country
        self._suggestion_size = max(1, min(MAX_SUGGESTIONS, suggestion_size))
        self._log = logger or get_logger()

    async def suggest(self, query: str, country: Optional[str] = None) -> list[GeocodeSuggestion]:
        """Best-effort suggestions; any failure yields an empty list."""
        text = (query or "").strip()
        if len(text) < MIN_QUERY_LENGTH:
            return []
        try:
            payload = await self._tool.search(
                text,
                country=country or self._country,
                size=self._suggestion_size,
            )
        except (ToolError, KeyMissingError) as exc:
            _LOGGER.info("suggestion lookup failed for %r: %s", text, exc)
            return []

        decoded = decode_suggestions(payload)
        if isinstance(decoded, Malformed):
            _LOGGER.debug("no suggestions for %r: %s", text, decoded.reason)
            return []
        return decoded.data[: self._suggestion_size]

    async def _top_match(self, text: str, country: Optional[str]) -> GeocodeSuggestion:
        try:
            payload = await self._tool.search(text, country=country or self._country, size=1)
        except (ToolError, KeyMissingError) as exc:
            raise ProviderUnavailableError(str(exc)) from exc

        decoded = decode_top_match(payload, default_label=text)
        if isinstance(decoded, Malformed):
            if decoded.reason == INVALID_GEOMETRY:
                raise InvalidCoordinateError(f"{text}: {decoded.detail}")
            raise PlaceNotFoundError(text)

        match = decoded.data
        self._log.event(
            "resolved_coordinate",
            query=text,
            label=match.label,
            lon=match.coordinate.lon,
            lat=match.coordinate.lat,
        )
        return match

    async def resolve(self, place_text: str, country: Optional[str] = None) -> Coordinate:
        match = await self._top_match((place_text or "").strip(), country)
        return match.coordinate

    async def resolve_place(self, place_text: str, country: Optional[str] = None) -> Place:
        text = (place_text or "").strip()
        match = await self._top_match(text, country)
        return Place(query_text=text, resolved_coordinate=match.coordinate, label=match.label)
