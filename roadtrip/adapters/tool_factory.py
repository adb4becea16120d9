"""Concrete tool selection and wiring."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

import httpx

from roadtrip.adapters.fault_injection import wrap_tool_with_fault_injection
from roadtrip.adapters.ors import OrsDirectionsClient, OrsGeocodingClient
from roadtrip.adapters.tollguru import TollGuruClient
from roadtrip.config.settings import ApiCredential, Settings
from roadtrip.security.http_client import SecureHttpClient
from roadtrip.security.key_manager import KeyManager
from roadtrip.tools.interfaces import DirectionsTool, GeocodingTool, TollTool

_logger = logging.getLogger("road-trip.tools")


@dataclass
class ProviderTools:
    geocoding: GeocodingTool
    directions: DirectionsTool
    tolls: TollTool
    key_manager: KeyManager


def build_tools(
    settings: Settings,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    env: Mapping[str, str] | None = None,
) -> ProviderTools:
    km = KeyManager.from_settings(settings)

    def _http(tool_name: str) -> SecureHttpClient:
        return SecureHttpClient(
            timeout=settings.http_timeout_seconds,
            tool_name=tool_name,
            key_manager=km,
            transport=transport,
        )

    for cred in settings.credentials():
        if not isinstance(cred, ApiCredential):
            _logger.warning("%s is not configured; running in degraded mode", cred.name)

    geocoding = OrsGeocodingClient(settings.ors_base_url, settings.ors_api_key, _http("geocode"))
    directions = OrsDirectionsClient(settings.ors_base_url, settings.ors_api_key, _http("route"))
    tolls = TollGuruClient(settings.tollguru_base_url, settings.tollguru_api_key, _http("toll"))
    return ProviderTools(
        geocoding=wrap_tool_with_fault_injection("geocode", geocoding, env),
        directions=wrap_tool_with_fault_injection("route", directions, env),
        tolls=wrap_tool_with_fault_injection("toll", tolls, env),
        key_manager=km,
    )


def describe_active_tools(settings: Settings) -> dict[str, str]:
    ors = "ors" if isinstance(settings.ors_api_key, ApiCredential) else "unavailable"
    toll = "tollguru" if isinstance(settings.tollguru_api_key, ApiCredential) else "fallback_estimate"
    return {"geocode": ors, "route": ors, "toll": toll}


__all__ = ["ProviderTools", "build_tools", "describe_active_tools"]
