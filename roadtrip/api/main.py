"""FastAPI application: trip calculation and place suggestions."""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Query, Request
from starlette.middleware.base import BaseHTTPMiddleware

from roadtrip.adapters.tool_factory import describe_active_tools
from roadtrip.api.schemas import DiagnosticsResponse, HealthResponse, SuggestResponse, TripResponse
from roadtrip.application.contracts import TripRequest
from roadtrip.application.plan_trip import TripPlanningPipeline, build_pipeline
from roadtrip.config.settings import Settings, describe_credentials, load_settings
from roadtrip.services.trip_presenter import present_outcome

_api_logger = logging.getLogger("road-trip.api")

load_dotenv()

app = FastAPI(
    title="road-trip",
    version="0.1.0",
    docs_url="/docs" if os.getenv("ENABLE_DOCS", "false").lower() == "true" else None,
    redoc_url=None,
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Cache-Control"] = "no-store"
        return response


app.add_middleware(SecurityHeadersMiddleware)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


@lru_cache(maxsize=1)
def _shared_pipeline() -> TripPlanningPipeline:
    return build_pipeline(get_settings())


def get_pipeline() -> TripPlanningPipeline:
    return _shared_pipeline()


@app.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok")


@app.get("/diagnostics", response_model=DiagnosticsResponse)
def diagnostics(
    settings: Settings = Depends(get_settings),
    pipeline: TripPlanningPipeline = Depends(get_pipeline),
):
    return DiagnosticsResponse(
        tools=describe_active_tools(settings),
        credentials=describe_credentials(settings),
        tolls=pipeline.tolls.get_diagnostics(),
    )


@app.get("/suggest", response_model=SuggestResponse)
async def suggest(
    q: str = Query(default="", max_length=200),
    pipeline: TripPlanningPipeline = Depends(get_pipeline),
):
    suggestions = await pipeline.geo.suggest(q)
    return SuggestResponse(query=q, suggestions=suggestions)


@app.post("/trip", response_model=TripResponse)
async def trip(req: TripRequest, pipeline: TripPlanningPipeline = Depends(get_pipeline)):
    # Generation fencing is scoped to a single request.
    outcome = await pipeline.new_session().calculate_trip(req)
    if outcome.failure is not None:
        _api_logger.info("trip failed: %s", outcome.failure.kind.value)
    return TripResponse(**present_outcome(outcome))
