"""Single entrypoint for trip cost calculation.

States: idle → resolving_places → resolving_route → computing_costs →
completed, with failed reachable from any non-terminal state. Runs are
fenced by a generation counter: only the newest run may publish into the
``current`` slot.
"""

from __future__ import annotations

import asyncio
import itertools
from typing import Optional

from roadtrip.adapters.tool_factory import ProviderTools, build_tools
from roadtrip.application.contracts import TripFailure, TripOutcome, TripRequest
from roadtrip.config.settings import Settings
from roadtrip.domain.enums import TERMINAL_STATES, PipelineState
from roadtrip.domain.exceptions import MissingRequiredFieldError, TripPlanningError
from roadtrip.domain.models import Place, RouteGeometry, RouteSummary, TripResult
from roadtrip.infrastructure.logging import StructuredLogger, get_logger
from roadtrip.planner.costs import fuel_cost, total_cost, validate_vehicle_parameters
from roadtrip.planner.geo_resolver import GeoResolver
from roadtrip.planner.route_geometry import normalize_route_geometry
from roadtrip.planner.route_resolver import RouteResolver
from roadtrip.planner.toll_estimator import TollEstimator

_ALLOWED = {
    PipelineState.IDLE: {PipelineState.RESOLVING_PLACES},
    PipelineState.RESOLVING_PLACES: {PipelineState.RESOLVING_ROUTE},
    PipelineState.RESOLVING_ROUTE: {PipelineState.COMPUTING_COSTS},
    PipelineState.COMPUTING_COSTS: {PipelineState.COMPLETED},
}


class _TripRun:
    def __init__(self, generation: int, log: StructuredLogger) -> None:
        self.generation = generation
        self.state = PipelineState.IDLE
        self.history = [PipelineState.IDLE]
        self.result: Optional[TripResult] = None
        self.failure: Optional[TripFailure] = None
        self._log = log

    def advance(self, target: PipelineState) -> None:
        if target not in _ALLOWED.get(self.state, set()):
            raise RuntimeError(f"illegal transition {self.state.value} -> {target.value}")
        if self.state != PipelineState.IDLE:
            self._log.stage_end(self.state.value, generation=self.generation)
        self.state = target
        self.history.append(target)
        if target not in TERMINAL_STATES:
            self._log.stage_start(target.value, generation=self.generation)

    def complete(self, result: TripResult) -> None:
        self.advance(PipelineState.COMPLETED)
        self.result = result

    def fail(self, exc: TripPlanningError) -> None:
        failed_in = self.state
        if failed_in != PipelineState.IDLE:
            self._log.stage_end(failed_in.value, generation=self.generation, failed=True)
        self.state = PipelineState.FAILED
        self.history.append(PipelineState.FAILED)
        self.failure = TripFailure.from_error(exc)
        self._log.error(
            "pipeline_failed",
            exc.detail or exc.description,
            kind=exc.kind.value,
            stage=failed_in.value,
            generation=self.generation,
        )

    def outcome(self, *, stale: bool) -> TripOutcome:
        return TripOutcome(
            generation=self.generation,
            state=self.state,
            history=list(self.history),
            result=self.result,
            failure=self.failure,
            stale=stale,
        )


def _check_required(request: TripRequest) -> None:
    missing = [
        name
        for name, value in (
            ("origin", request.origin.strip()),
            ("destination", request.destination.strip()),
            ("fuel_efficiency", request.fuel_efficiency),
            ("fuel_price", request.fuel_price),
        )
        if value in (None, "")
    ]
    if missing:
        raise MissingRequiredFieldError(missing)


class TripPlanningPipeline:
    def __init__(
        self,
        geo: GeoResolver,
        routes: RouteResolver,
        tolls: TollEstimator,
        *,
        logger: Optional[StructuredLogger] = None,
    ) -> None:
        self.geo = geo
        self.routes = routes
        self.tolls = tolls
        self._log = logger or get_logger()
        self._generations = itertools.count(1)
        self._latest_generation = 0
        self.current: Optional[TripOutcome] = None

    def new_session(self) -> "TripPlanningPipeline":
        """Same resolvers and toll diagnostics, independent generation fencing."""
        return TripPlanningPipeline(self.geo, self.routes, self.tolls, logger=self._log)

    async def calculate_trip(self, request: TripRequest) -> TripOutcome:
        generation = next(self._generations)
        self._latest_generation = generation
        run = _TripRun(generation, self._log)
        try:
            result = await self._run(run, request)
        except TripPlanningError as exc:
            run.fail(exc)
        else:
            run.complete(result)
        return self._publish(run)

    async def _run(self, run: _TripRun, request: TripRequest) -> TripResult:
        _check_required(request)
        validate_vehicle_parameters(request.fuel_efficiency, request.fuel_price)

        run.advance(PipelineState.RESOLVING_PLACES)
        origin, destination = await self._resolve_places(request.origin, request.destination)

        run.advance(PipelineState.RESOLVING_ROUTE)
        route = await self.routes.compute_route(origin.resolved_coordinate, destination.resolved_coordinate)

        run.advance(PipelineState.COMPUTING_COSTS)
        fuel = fuel_cost(route.distance_km, request.fuel_efficiency, request.fuel_price)
        toll_task = asyncio.create_task(
            self.tolls.estimate(
                origin.resolved_coordinate,
                destination.resolved_coordinate,
                request.vehicle_class,
                route.distance_km,
            )
        )
        try:
            geometry = self._normalize_geometry(route, origin, destination)
            toll = await toll_task
        finally:
            # The toll lookup never outlives the run that started it.
            if not toll_task.done():
                toll_task.cancel()
                await asyncio.gather(toll_task, return_exceptions=True)

        return TripResult(
            origin=origin,
            destination=destination,
            distance_km=route.distance_km,
            duration_minutes=route.duration_minutes,
            fuel_cost=fuel,
            toll_cost=toll.toll_cost,
            total_cost=total_cost(fuel, toll.toll_cost),
            toll_source=toll.source,
            route_geometry=geometry,
            tolls=toll.tolls,
        )

    def _normalize_geometry(self, route: RouteSummary, origin: Place, destination: Place) -> RouteGeometry:
        geometry = normalize_route_geometry(
            route.raw_geometry,
            {"coordinates": origin.resolved_coordinate.as_lonlat(), "name": origin.query_text},
            {"coordinates": destination.resolved_coordinate.as_lonlat(), "name": destination.query_text},
        )
        self._log.event(
            "geometry_normalized",
            valid=geometry.is_valid,
            kept=len(geometry.polyline),
            received=len(route.raw_geometry),
        )
        return geometry

    async def _resolve_places(self, origin_text: str, destination_text: str) -> tuple[Place, Place]:
        # Both lookups are issued before either is awaited.
        results = await asyncio.gather(
            self.geo.resolve_place(origin_text),
            self.geo.resolve_place(destination_text),
            return_exceptions=True,
        )
        for item in results:
            if isinstance(item, BaseException):
                raise item
        origin, destination = results
        return origin, destination

    def _publish(self, run: _TripRun) -> TripOutcome:
        stale = run.generation != self._latest_generation
        outcome = run.outcome(stale=stale)
        if stale:
            self._log.event(
                "stale_result_discarded",
                generation=run.generation,
                latest_generation=self._latest_generation,
                state=run.state.value,
            )
            return outcome
        self.current = outcome
        return outcome


def build_pipeline(
    settings: Settings,
    *,
    tools: Optional[ProviderTools] = None,
    logger: Optional[StructuredLogger] = None,
) -> TripPlanningPipeline:
    tools = tools or build_tools(settings)
    log = logger or StructuredLogger(key_manager=tools.key_manager)
    return TripPlanningPipeline(
        GeoResolver(
            tools.geocoding,
            country=settings.country_filter,
            suggestion_size=settings.suggestion_size,
            logger=log,
        ),
        RouteResolver(tools.directions, logger=log),
        TollEstimator(tools.tolls, logger=log),
        logger=log,
    )
