"""Defensive decoders for loosely-typed provider payloads.

Every decoder is total: it returns ``WellFormed(data)`` or ``Malformed(reason)``
and never raises on unexpected shapes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Generic, Optional, TypeVar, Union

from roadtrip.domain.models import Coordinate, GeocodeSuggestion, TollLineItem

T = TypeVar("T")

# Malformed reasons
NOT_AN_OBJECT = "not_an_object"
NO_FEATURES = "no_features"
INVALID_GEOMETRY = "invalid_geometry"
MISSING_SUMMARY = "missing_summary"
MISSING_GEOMETRY = "missing_geometry"
MISSING_COSTS = "missing_costs"


@dataclass(frozen=True)
class WellFormed(Generic[T]):
    data: T


@dataclass(frozen=True)
class Malformed:
    reason: str
    detail: str = ""


Decoded = Union[WellFormed[T], Malformed]


@dataclass(frozen=True)
class RouteFeature:
    distance_m: float
    duration_s: float
    coordinates: list = field(default_factory=list)


@dataclass(frozen=True)
class TollCosts:
    toll_cost: Decimal
    tolls: list[TollLineItem] = field(default_factory=list)


def is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # JSON integers are unbounded; anything past float range is unusable.
        return False


def coordinate_from(value: Any) -> Optional[Coordinate]:
    """``[lon, lat, ...]`` with numeric first two components, else None."""
    if not isinstance(value, (list, tuple)) or len(value) < 2:
        return None
    lon, lat = value[0], value[1]
    if not is_number(lon) or not is_number(lat):
        return None
    return Coordinate(lon=float(lon), lat=float(lat))


def _features(payload: Any) -> Decoded[list]:
    if not isinstance(payload, dict):
        return Malformed(NOT_AN_OBJECT, type(payload).__name__)
    features = payload.get("features")
    if not isinstance(features, list) or not features:
        return Malformed(NO_FEATURES)
    return WellFormed(features)


def _geometry_coordinates(feature: Any) -> Any:
    if not isinstance(feature, dict):
        return None
    geometry = feature.get("geometry")
    if not isinstance(geometry, dict):
        return None
    return geometry.get("coordinates")


def _label(feature: dict, default: str) -> str:
    props = feature.get("properties")
    if isinstance(props, dict):
        label = props.get("label")
        if isinstance(label, str) and label.strip():
            return label
    return default


def decode_top_match(payload: Any, *, default_label: str = "") -> Decoded[GeocodeSuggestion]:
    """First geocoding feature; its geometry must carry a numeric lon/lat."""
    decoded = _features(payload)
    if isinstance(decoded, Malformed):
        return decoded
    feature = decoded.data[0]
    coordinate = coordinate_from(_geometry_coordinates(feature))
    if coordinate is None:
        return Malformed(INVALID_GEOMETRY, repr(_geometry_coordinates(feature))[:80])
    return WellFormed(
        GeocodeSuggestion(label=_label(feature, default_label), coordinate=coordinate)
    )


def decode_suggestions(payload: Any) -> Decoded[list[GeocodeSuggestion]]:
    """All usable geocoding features; unusable ones are skipped."""
    decoded = _features(payload)
    if isinstance(decoded, Malformed):
        return decoded
    suggestions: list[GeocodeSuggestion] = []
    for feature in decoded.data:
        coordinate = coordinate_from(_geometry_coordinates(feature))
        if coordinate is None:
            continue
        label = _label(feature, "")
        if not label:
            continue
        suggestions.append(GeocodeSuggestion(label=label, coordinate=coordinate))
    return WellFormed(suggestions)


def decode_route_feature(payload: Any) -> Decoded[RouteFeature]:
    decoded = _features(payload)
    if isinstance(decoded, Malformed):
        return decoded
    feature = decoded.data[0]
    if not isinstance(feature, dict):
        return Malformed(MISSING_SUMMARY, "feature is not an object")

    props = feature.get("properties")
    summary = props.get("summary") if isinstance(props, dict) else None
    if not isinstance(summary, dict):
        return Malformed(MISSING_SUMMARY)
    distance = summary.get("distance")
    duration = summary.get("duration")
    if not is_number(distance) or not is_number(duration) or distance < 0 or duration < 0:
        return Malformed(MISSING_SUMMARY, f"distance={distance!r} duration={duration!r}")

    coordinates = _geometry_coordinates(feature)
    if not isinstance(coordinates, list) or not coordinates:
        return Malformed(MISSING_GEOMETRY)

    return WellFormed(
        RouteFeature(distance_m=float(distance), duration_s=float(duration), coordinates=coordinates)
    )


def money(value: Any) -> Optional[Decimal]:
    """Non-negative numeric value as Decimal, else None."""
    if not is_number(value) or value < 0:
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


def _toll_item(raw: Any, index: int) -> Optional[TollLineItem]:
    if not isinstance(raw, dict):
        return None
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        name = f"Toll {index}"
    cost = Decimal("0")
    for key in ("tagCost", "cashCost", "cost"):
        value = money(raw.get(key))
        if value is not None:
            cost = value
            break
    return TollLineItem(name=name, cost=cost)


def decode_toll_costs(payload: Any) -> Decoded[TollCosts]:
    """``route.costs`` is required; the toll list is optional."""
    if not isinstance(payload, dict):
        return Malformed(NOT_AN_OBJECT, type(payload).__name__)
    route = payload.get("route")
    costs = route.get("costs") if isinstance(route, dict) else None
    if not isinstance(costs, dict):
        return Malformed(MISSING_COSTS)

    toll_cost = money(costs.get("tag"))
    if toll_cost is None:
        toll_cost = money(costs.get("cash"))
    if toll_cost is None:
        toll_cost = Decimal("0")

    raw_tolls = route.get("tolls")
    items: list[TollLineItem] = []
    if isinstance(raw_tolls, list):
        for idx, raw in enumerate(raw_tolls, start=1):
            item = _toll_item(raw, idx)
            if item is not None:
                items.append(item)
    return WellFormed(TollCosts(toll_cost=toll_cost, tolls=items))
