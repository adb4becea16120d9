"""Toll estimation: provider path, fallback path and provenance."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from decimal import Decimal

import httpx
import pytest

from roadtrip.adapters.tollguru import TollGuruClient
from roadtrip.config.settings import CredentialsAbsent
from roadtrip.domain.enums import TollSource, VehicleClass
from roadtrip.domain.models import Coordinate
from roadtrip.planner.toll_estimator import TollEstimator, fallback_estimate
from roadtrip.security.http_client import SecureHttpClient
from roadtrip.shared.exceptions import ToolError

SP = Coordinate(lon=-46.63, lat=-23.55)
RJ = Coordinate(lon=-43.17, lat=-22.90)


class _RecordingTollTool:
    def __init__(self, payload=None, error: Exception | None = None) -> None:
        self.payload = payload
        self.error = error
        self.calls: list[tuple] = []

    async def calc_route(self, source, destination, vehicle_type, departure_time):
        self.calls.append((source, destination, vehicle_type, departure_time))
        if self.error is not None:
            raise self.error
        return self.payload


def _estimate(tool, distance_km: float, logger, vehicle=VehicleClass.CAR):
    estimator = TollEstimator(tool, logger=logger)
    return estimator, asyncio.run(estimator.estimate(SP, RJ, vehicle, distance_km))


FAILURES = [
    pytest.param(_RecordingTollTool(error=ToolError("toll", "connection refused")), id="transport"),
    pytest.param(_RecordingTollTool(error=ToolError("toll", "HTTP 500: boom")), id="status"),
    pytest.param(_RecordingTollTool(payload={"route": {"tolls": []}}), id="no-costs"),
    pytest.param(_RecordingTollTool(payload=["not", "an", "object"]), id="malformed"),
    pytest.param(_RecordingTollTool(error=RuntimeError("bug")), id="unexpected"),
]


@pytest.mark.parametrize("tool", FAILURES)
def test_failure_on_short_trip_costs_nothing(tool, logger):
    _, result = _estimate(tool, 150.0, logger)

    assert result.toll_cost == 0
    assert result.tolls == []
    assert result.source == TollSource.FALLBACK
    assert result.is_estimate


@pytest.mark.parametrize("tool", FAILURES)
def test_failure_on_long_trip_uses_distance_estimate(tool, logger):
    _, result = _estimate(tool, 430.0, logger)

    assert result.toll_cost == Decimal("53.75")
    assert [t.name for t in result.tolls] == ["Estimated Toll 1", "Estimated Toll 2"]
    assert sum(t.cost for t in result.tolls) == result.toll_cost
    assert result.tolls[0].cost == Decimal("32.25")
    assert result.tolls[1].cost == Decimal("21.50")
    assert result.source == TollSource.FALLBACK


def test_fallback_threshold_is_exclusive():
    assert fallback_estimate(200.0, "test").toll_cost == 0
    over = fallback_estimate(200.01, "test")
    assert over.toll_cost == Decimal("25.00")
    assert len(over.tolls) == 2


def test_fallback_split_stays_exact_when_rounding():
    result = fallback_estimate(333.3, "test")

    assert result.toll_cost == Decimal("41.66")
    assert result.tolls[0].cost + result.tolls[1].cost == result.toll_cost
    assert result.tolls[0].cost == Decimal("25.00")


def test_provider_tag_cost_preferred(logger):
    tool = _RecordingTollTool(
        payload={
            "route": {
                "costs": {"tag": 41.3, "cash": 45.0},
                "tolls": [
                    {"name": "Praça Jacareí", "tagCost": 16.1, "cashCost": 17.0},
                    {"name": "Praça Moreira César", "cashCost": 25.2},
                    "junk",
                ],
            }
        }
    )
    _, result = _estimate(tool, 430.0, logger)

    assert result.source == TollSource.PROVIDER
    assert result.fallback_reason is None
    assert result.toll_cost == Decimal("41.3")
    assert [(t.name, t.cost) for t in result.tolls] == [
        ("Praça Jacareí", Decimal("16.1")),
        ("Praça Moreira César", Decimal("25.2")),
    ]


def test_provider_cash_cost_when_tag_missing(logger):
    tool = _RecordingTollTool(payload={"route": {"costs": {"cash": 12.0}}})
    _, result = _estimate(tool, 80.0, logger)

    assert result.toll_cost == Decimal("12.0")
    assert result.tolls == []
    assert result.source == TollSource.PROVIDER


def test_provider_costs_without_values_is_zero_not_fallback(logger):
    tool = _RecordingTollTool(payload={"route": {"costs": {}}})
    _, result = _estimate(tool, 430.0, logger)

    assert result.toll_cost == 0
    assert result.source == TollSource.PROVIDER


@pytest.mark.parametrize(
    "vehicle,expected",
    [(VehicleClass.CAR, "2AxlesAuto"), (VehicleClass.MOTORCYCLE, "Motorcycle"), ("motorcycle", "Motorcycle")],
)
def test_vehicle_class_mapping(vehicle, expected, logger):
    tool = _RecordingTollTool(payload={"route": {"costs": {"tag": 1}}})
    _estimate(tool, 10.0, logger, vehicle=vehicle)

    assert tool.calls[0][2] == expected


def test_departure_time_comes_from_clock(logger):
    tool = _RecordingTollTool(payload={"route": {"costs": {"tag": 1}}})
    fixed = datetime(2026, 5, 1, 8, 0, tzinfo=timezone.utc)
    estimator = TollEstimator(tool, logger=logger, clock=lambda: fixed)
    asyncio.run(estimator.estimate(SP, RJ, VehicleClass.CAR, 10.0))

    assert tool.calls[0][3] == "2026-05-01T08:00:00+00:00"


def test_absent_credentials_never_touch_the_network(logger):
    def _handler(request):
        raise AssertionError("network must not be used without a key")

    client = TollGuruClient(
        "https://toll.test/v1",
        CredentialsAbsent(name="TOLLGURU_API_KEY"),
        SecureHttpClient(tool_name="toll", transport=httpx.MockTransport(_handler)),
    )
    estimator, result = _estimate(client, 430.0, logger)

    assert result.source == TollSource.FALLBACK
    assert result.fallback_reason == "credentials_absent"
    assert result.toll_cost == Decimal("53.75")
    assert estimator.get_fallback_count() == 1


def test_diagnostics_record_fallback_events(logger, events):
    tool = _RecordingTollTool(error=ToolError("toll", "down"))
    estimator = TollEstimator(tool, logger=logger)
    asyncio.run(estimator.estimate(SP, RJ, VehicleClass.CAR, 430.0))

    diagnostics = estimator.get_diagnostics()
    assert diagnostics["toll_source"] == "fallback"
    assert diagnostics["fallback_count"] == 1
    assert diagnostics["events"][0]["reason"] == "provider_error"

    names = [e["event"] for e in events()]
    assert "fallback_triggered" in names
    assert names[-1] == "toll_outcome"
