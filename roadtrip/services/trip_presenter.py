"""Presentation helpers for trip results: text summary and map payload."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from roadtrip.application.contracts import TripOutcome
from roadtrip.domain.enums import TollSource
from roadtrip.domain.models import RouteGeometry, TripResult

MAP_FIT_PADDING = (20, 20)
MAP_LEGEND = (
    {"key": "origin", "label": "Origin", "color": "#10b981"},
    {"key": "destination", "label": "Destination", "color": "#ef4444"},
    {"key": "route", "label": "Route", "color": "#2563eb"},
)
ROUND_TRIP_TIP = (
    "Tip: for a round trip, multiply the values by 2. Also consider parking, "
    "meals and possible detours."
)


def format_currency(value: Decimal | float) -> str:
    """BRL style: ``R$ 1.234,56``."""
    amount = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    text = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if amount < 0 else ""
    return f"{sign}R$ {text}"


def format_duration(minutes: float) -> str:
    hours = math.floor(minutes / 60)
    mins = int(Decimal(str(minutes % 60)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if mins == 60:
        hours, mins = hours + 1, 0
    return f"{hours}h {mins}min"


def format_distance(distance_km: float) -> str:
    return f"{distance_km:.1f} km"


def map_payload(geometry: RouteGeometry) -> dict[str, Any]:
    """What the map widget consumes; an invalid geometry renders nothing."""
    if not geometry.is_valid:
        return {"render": False, "legend": list(MAP_LEGEND)}
    return {
        "render": True,
        "polyline": [list(point) for point in geometry.polyline],
        "origin": geometry.origin_marker.model_dump() if geometry.origin_marker else None,
        "destination": geometry.destination_marker.model_dump() if geometry.destination_marker else None,
        "bounds": geometry.bounds.model_dump() if geometry.bounds else None,
        "padding": list(MAP_FIT_PADDING),
        "legend": list(MAP_LEGEND),
    }


def present_trip(result: TripResult) -> list[str]:
    lines = [
        f"{result.origin.query_text} -> {result.destination.query_text}",
        "=" * 50,
        f"Distance: {format_distance(result.distance_km)}",
        f"Duration: {format_duration(result.duration_minutes)}",
        "-" * 50,
        f"Fuel: {format_currency(result.fuel_cost)}",
    ]
    if result.toll_cost > 0:
        suffix = " (estimate)" if result.toll_source == TollSource.FALLBACK else ""
        lines.append(f"Tolls: {format_currency(result.toll_cost)}{suffix}")
        for toll in result.tolls:
            lines.append(f"  - {toll.name}: {format_currency(toll.cost)}")
    lines.append("=" * 50)
    lines.append(f"Total: {format_currency(result.total_cost)}")
    lines.append("One-way estimate" + (" (includes tolls)" if result.toll_cost > 0 else ""))
    lines.append(ROUND_TRIP_TIP)
    return lines


def present_outcome(outcome: TripOutcome) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "generation": outcome.generation,
        "state": outcome.state.value,
        "stale": outcome.stale,
    }
    if outcome.failure is not None:
        payload["failure"] = outcome.failure.model_dump(mode="json")
    if outcome.result is not None:
        payload["result"] = outcome.result.model_dump(mode="json", exclude={"route_geometry"})
        payload["map"] = map_payload(outcome.result.route_geometry)
    return payload
