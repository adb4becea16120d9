"""Toll cost acquisition with a deterministic distance-based fallback.

The fallback is a heuristic, not a toll lookup: estimates are tagged
``TollSource.FALLBACK`` so callers can tell them apart from provider data.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from roadtrip.adapters.payloads import Malformed, decode_toll_costs
from roadtrip.domain.enums import TollSource, VehicleClass
from roadtrip.domain.models import Coordinate, TollEstimate, TollLineItem
from roadtrip.infrastructure.logging import StructuredLogger, get_logger
from roadtrip.shared.exceptions import KeyMissingError, ToolError
from roadtrip.tools.interfaces import TollTool

VEHICLE_TYPES: dict[VehicleClass, str] = {
    VehicleClass.CAR: "2AxlesAuto",
    VehicleClass.MOTORCYCLE: "Motorcycle",
}

FALLBACK_MIN_DISTANCE_KM = Decimal("200")
FALLBACK_COST_PER_100_KM = Decimal("12.5")
FALLBACK_SPLIT = (("Estimated Toll 1", Decimal("0.6")), ("Estimated Toll 2", Decimal("0.4")))

_CENTS = Decimal("0.01")
_MAX_DIAGNOSTIC_EVENTS = 50
_LOGGER = logging.getLogger("road-trip.tolls")


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


def fallback_estimate(distance_km: float, reason: str) -> TollEstimate:
    """Above 200 km: 12.50 per 100 km split 60/40 into two synthetic items; else zero."""
    distance = Decimal(str(distance_km))
    if distance <= FALLBACK_MIN_DISTANCE_KM:
        return TollEstimate(
            toll_cost=Decimal("0.00"),
            tolls=[],
            source=TollSource.FALLBACK,
            fallback_reason=reason,
        )

    toll_cost = _quantize(distance / 100 * FALLBACK_COST_PER_100_KM)
    (first_name, first_share), (second_name, _) = FALLBACK_SPLIT
    first = _quantize(toll_cost * first_share)
    # Remainder on the second item keeps the sum exact.
    items = [
        TollLineItem(name=first_name, cost=first),
        TollLineItem(name=second_name, cost=toll_cost - first),
    ]
    return TollEstimate(
        toll_cost=toll_cost,
        tolls=items,
        source=TollSource.FALLBACK,
        fallback_reason=reason,
    )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TollEstimator:
    def __init__(
        self,
        tool: TollTool,
        *,
        logger: Optional[StructuredLogger] = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._tool = tool
        self._log = logger or get_logger()
        self._clock = clock
        self._fallback_count = 0
        self._diagnostic_events: list[dict[str, Any]] = []

    def _record_fallback(self, *, reason: str, distance_km: float, estimate: TollEstimate) -> None:
        self._fallback_count += 1
        event = {
            "toll_source": TollSource.FALLBACK.value,
            "reason": reason,
            "distance_km": distance_km,
            "toll_cost": str(estimate.toll_cost),
        }
        self._diagnostic_events.append(event)
        if len(self._diagnostic_events) > _MAX_DIAGNOSTIC_EVENTS:
            self._diagnostic_events = self._diagnostic_events[-_MAX_DIAGNOSTIC_EVENTS:]
        self._log.event("fallback_triggered", **event)

    async def estimate(
        self,
        origin: Coordinate,
        destination: Coordinate,
        vehicle_class: VehicleClass,
        distance_km: float,
    ) -> TollEstimate:
        """Never raises: every failure resolves to the fallback estimate."""
        reason = ""
        result: Optional[TollEstimate] = None
        try:
            payload = await self._tool.calc_route(
                origin,
                destination,
                VEHICLE_TYPES[VehicleClass(vehicle_class)],
                self._clock().isoformat(),
            )
            decoded = decode_toll_costs(payload)
            if isinstance(decoded, Malformed):
                reason = decoded.reason
            else:
                result = TollEstimate(
                    toll_cost=decoded.data.toll_cost,
                    tolls=decoded.data.tolls,
                    source=TollSource.PROVIDER,
                )
        except KeyMissingError:
            reason = "credentials_absent"
        except ToolError as exc:
            reason = "provider_error"
            _LOGGER.warning("toll provider failed: %s", exc)
        except Exception as exc:
            reason = "unexpected_error"
            _LOGGER.warning("toll lookup crashed: %s", type(exc).__name__)

        if result is None:
            result = fallback_estimate(distance_km, reason)
            self._record_fallback(reason=reason, distance_km=distance_km, estimate=result)

        self._log.event(
            "toll_outcome",
            source=result.source.value,
            toll_cost=str(result.toll_cost),
            items=len(result.tolls),
        )
        return result

    def get_fallback_count(self) -> int:
        return self._fallback_count

    def get_diagnostics(self) -> dict[str, Any]:
        return {
            "toll_source": TollSource.FALLBACK.value if self._fallback_count else TollSource.PROVIDER.value,
            "fallback_count": self._fallback_count,
            "events": list(self._diagnostic_events),
        }
