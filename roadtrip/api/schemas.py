"""API request/response models."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from roadtrip.domain.models import GeocodeSuggestion


class HealthResponse(BaseModel):
    status: str = "ok"


class SuggestResponse(BaseModel):
    query: str
    suggestions: list[GeocodeSuggestion] = Field(default_factory=list)


class TripResponse(BaseModel):
    generation: int
    state: str = Field(description="completed / failed")
    stale: bool = False
    result: Optional[dict[str, Any]] = Field(default=None, description="Trip costs and tolls")
    map: Optional[dict[str, Any]] = Field(default=None, description="Map widget payload")
    failure: Optional[dict[str, Any]] = Field(default=None, description="kind / title / description")


class DiagnosticsResponse(BaseModel):
    tools: dict[str, str] = Field(default_factory=dict)
    credentials: dict[str, dict[str, str]] = Field(default_factory=dict)
    tolls: dict[str, Any] = Field(default_factory=dict)
