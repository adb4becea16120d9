"""Trip planning use-case."""

from roadtrip.application.contracts import TripFailure, TripOutcome, TripRequest
from roadtrip.application.plan_trip import TripPlanningPipeline, build_pipeline

__all__ = ["TripFailure", "TripOutcome", "TripPlanningPipeline", "TripRequest", "build_pipeline"]
