"""Pydantic domain models."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from roadtrip.domain.enums import TollSource

LatLng = tuple[float, float]


class Coordinate(BaseModel):
    """A point in provider order: longitude first."""

    model_config = ConfigDict(frozen=True)

    lon: float
    lat: float

    def as_lonlat(self) -> list[float]:
        return [self.lon, self.lat]

    def as_latlng(self) -> LatLng:
        return (self.lat, self.lon)


class GeocodeSuggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    coordinate: Coordinate


class Place(BaseModel):
    model_config = ConfigDict(frozen=True)

    query_text: str
    resolved_coordinate: Optional[Coordinate] = None
    label: str = ""

    @property
    def is_resolved(self) -> bool:
        return self.resolved_coordinate is not None

    @classmethod
    def from_suggestion(cls, suggestion: GeocodeSuggestion) -> "Place":
        return cls(
            query_text=suggestion.label,
            resolved_coordinate=suggestion.coordinate,
            label=suggestion.label,
        )


class Marker(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float
    label: Optional[str] = None


class BoundingRegion(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_lat: float
    min_lng: float
    max_lat: float
    max_lng: float


class RouteGeometry(BaseModel):
    """Renderable route: (lat, lng) polyline plus markers and bounds."""

    model_config = ConfigDict(frozen=True)

    polyline: list[LatLng] = Field(default_factory=list)
    origin_marker: Optional[Marker] = None
    destination_marker: Optional[Marker] = None
    bounds: Optional[BoundingRegion] = None

    @property
    def is_valid(self) -> bool:
        return len(self.polyline) > 0


class RouteSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    distance_km: float = Field(ge=0)
    duration_minutes: float = Field(ge=0)
    raw_geometry: list = Field(default_factory=list)


class TollLineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    cost: Decimal = Field(ge=0)


class TollEstimate(BaseModel):
    model_config = ConfigDict(frozen=True)

    toll_cost: Decimal = Field(ge=0)
    tolls: list[TollLineItem] = Field(default_factory=list)
    source: TollSource = TollSource.PROVIDER
    fallback_reason: Optional[str] = None

    @property
    def is_estimate(self) -> bool:
        return self.source == TollSource.FALLBACK


class TripResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    origin: Place
    destination: Place
    distance_km: float = Field(ge=0)
    duration_minutes: float = Field(ge=0)
    fuel_cost: Decimal = Field(ge=0)
    toll_cost: Decimal = Field(ge=0)
    total_cost: Decimal = Field(ge=0)
    toll_source: TollSource = TollSource.PROVIDER
    route_geometry: RouteGeometry = Field(default_factory=RouteGeometry)
    tolls: list[TollLineItem] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_total(self) -> "TripResult":
        if self.total_cost != self.fuel_cost + self.toll_cost:
            raise ValueError("total_cost must equal fuel_cost + toll_cost")
        return self
