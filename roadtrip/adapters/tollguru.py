"""TollGuru adapter: toll cost for an origin/destination pair.

Key: TOLLGURU_API_KEY
Docs: https://tollguru.com/toll-api-docs
"""

from __future__ import annotations

from typing import Any

from roadtrip.adapters.ors import require_key
from roadtrip.config.settings import Credential
from roadtrip.domain.models import Coordinate
from roadtrip.security.http_client import SecureHttpClient


class TollGuruClient:
    def __init__(self, base_url: str, credential: Credential, http: SecureHttpClient):
        self._url = f"{base_url}/calc/route"
        self._credential = credential
        self._http = http

    async def calc_route(
        self,
        source: Coordinate,
        destination: Coordinate,
        vehicle_type: str,
        departure_time: str,
    ) -> Any:
        key = require_key(self._credential)
        body = {
            "source": {"lat": source.lat, "lng": source.lon},
            "destination": {"lat": destination.lat, "lng": destination.lon},
            "vehicleType": vehicle_type,
            "departure_time": departure_time,
        }
        headers = {"x-api-key": key, "Content-Type": "application/json"}
        return await self._http.post_json(self._url, json=body, headers=headers)
