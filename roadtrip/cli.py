"""road-trip CLI: trip cost, place suggestions and credential status."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv

from roadtrip.application.contracts import TripRequest
from roadtrip.application.plan_trip import build_pipeline
from roadtrip.config.settings import Settings, describe_credentials, load_settings
from roadtrip.domain.enums import VehicleClass
from roadtrip.services.trip_presenter import present_outcome, present_trip


def _decimal(value: str) -> Decimal:
    try:
        return Decimal(value.replace(",", "."))
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {value}") from None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="roadtrip", description="Road trip fuel and toll cost planner")
    sub = parser.add_subparsers(dest="command", required=True)

    plan = sub.add_parser("plan", help="Calculate route, fuel and toll cost")
    plan.add_argument("origin")
    plan.add_argument("destination")
    plan.add_argument("--efficiency", type=_decimal, required=True, help="km per litre, e.g. 12.5")
    plan.add_argument("--price", type=_decimal, required=True, help="fuel price per litre, e.g. 5.50")
    plan.add_argument(
        "--vehicle",
        choices=[v.value for v in VehicleClass],
        default=VehicleClass.CAR.value,
    )
    plan.add_argument("--json", action="store_true", help="Print the raw outcome as JSON")

    suggest = sub.add_parser("suggest", help="Autocomplete a place name")
    suggest.add_argument("query")

    sub.add_parser("keys", help="Show which provider keys are configured")
    return parser


async def _plan(settings: Settings, args: argparse.Namespace) -> int:
    pipeline = build_pipeline(settings)
    outcome = await pipeline.calculate_trip(
        TripRequest(
            origin=args.origin,
            destination=args.destination,
            vehicle_class=VehicleClass(args.vehicle),
            fuel_efficiency=args.efficiency,
            fuel_price=args.price,
        )
    )
    if args.json:
        print(json.dumps(present_outcome(outcome), ensure_ascii=False, indent=2))
    elif outcome.result is not None:
        print("\n".join(present_trip(outcome.result)))
    elif outcome.failure is not None:
        print(f"{outcome.failure.title}: {outcome.failure.description}", file=sys.stderr)
    return 0 if outcome.result is not None else 1


async def _suggest(settings: Settings, query: str) -> int:
    pipeline = build_pipeline(settings)
    for item in await pipeline.geo.suggest(query):
        print(f"{item.label}  ({item.coordinate.lat:.4f}, {item.coordinate.lon:.4f})")
    return 0


def _keys(settings: Settings) -> int:
    for name, info in describe_credentials(settings).items():
        preview = f"  {info['preview']}" if info["preview"] else ""
        print(f"{name}: {info['status']}{preview}")
    return 0


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = _build_parser().parse_args(argv)
    settings = load_settings()
    if args.command == "plan":
        return asyncio.run(_plan(settings, args))
    if args.command == "suggest":
        return asyncio.run(_suggest(settings, args.query))
    return _keys(settings)


if __name__ == "__main__":
    sys.exit(main())
