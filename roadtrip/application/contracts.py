"""Application request/response contracts."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from roadtrip.domain.enums import ErrorKind, PipelineState, VehicleClass
from roadtrip.domain.exceptions import TripPlanningError
from roadtrip.domain.models import TripResult


class TripRequest(BaseModel):
    origin: str = Field(default="", max_length=200)
    destination: str = Field(default="", max_length=200)
    vehicle_class: VehicleClass = VehicleClass.CAR
    fuel_efficiency: Optional[Decimal] = Field(default=None, description="km per litre")
    fuel_price: Optional[Decimal] = Field(default=None, description="price per litre")


class TripFailure(BaseModel):
    kind: ErrorKind
    title: str
    description: str
    detail: str = ""

    @classmethod
    def from_error(cls, exc: TripPlanningError) -> "TripFailure":
        return cls(kind=exc.kind, title=exc.title, description=exc.description, detail=exc.detail)


class TripOutcome(BaseModel):
    generation: int
    state: PipelineState
    history: list[PipelineState] = Field(default_factory=list)
    result: Optional[TripResult] = None
    failure: Optional[TripFailure] = None
    stale: bool = False
