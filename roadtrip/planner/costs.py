"""Fuel and total trip cost."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from roadtrip.domain.exceptions import InvalidVehicleParametersError

_CENTS = Decimal("0.01")


def _as_decimal(value: Any, field: str) -> Decimal:
    if isinstance(value, bool):
        raise InvalidVehicleParametersError(f"{field} must be numeric")
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidVehicleParametersError(f"{field} must be numeric") from None
    if not number.is_finite():
        raise InvalidVehicleParametersError(f"{field} must be finite")
    return number


def validate_vehicle_parameters(efficiency_km_per_unit: Any, price_per_unit: Any) -> tuple[Decimal, Decimal]:
    efficiency = _as_decimal(efficiency_km_per_unit, "fuel_efficiency")
    price = _as_decimal(price_per_unit, "fuel_price")
    if efficiency <= 0:
        raise InvalidVehicleParametersError("fuel_efficiency must be > 0")
    if price < 0:
        raise InvalidVehicleParametersError("fuel_price must be >= 0")
    return efficiency, price


def fuel_cost(distance_km: float, efficiency_km_per_unit: Any, price_per_unit: Any) -> Decimal:
    """(distance / efficiency) * price, rounded to cents."""
    efficiency, price = validate_vehicle_parameters(efficiency_km_per_unit, price_per_unit)
    distance = Decimal(str(distance_km))
    return (distance / efficiency * price).quantize(_CENTS, rounding=ROUND_HALF_UP)


def total_cost(fuel: Decimal, toll: Decimal) -> Decimal:
    return fuel + toll
