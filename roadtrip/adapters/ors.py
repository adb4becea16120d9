"""OpenRouteService adapters: geocoding search and driving directions.

Key: ORS_API_KEY
Docs:
  geocoding:  https://openrouteservice.org/dev/#/api-docs/geocode/search/get
  directions: https://openrouteservice.org/dev/#/api-docs/v2/directions/{profile}/geojson/post
"""

from __future__ import annotations

from typing import Any

from roadtrip.config.settings import ApiCredential, Credential
from roadtrip.domain.models import Coordinate
from roadtrip.security.http_client import SecureHttpClient
from roadtrip.shared.exceptions import KeyMissingError

DRIVING_PROFILE = "driving-car"


def require_key(credential: Credential) -> str:
    if not isinstance(credential, ApiCredential):
        raise KeyMissingError(credential.name)
    return credential.value


class OrsGeocodingClient:
    def __init__(self, base_url: str, credential: Credential, http: SecureHttpClient):
        self._url = f"{base_url}/geocode/search"
        self._credential = credential
        self._http = http

    async def search(self, text: str, *, country: str, size: int) -> Any:
        key = require_key(self._credential)
        params = {
            "api_key": key,
            "text": text,
            "boundary.country": country,
            "size": size,
        }
        return await self._http.get_json(self._url, params=params)


class OrsDirectionsClient:
    def __init__(self, base_url: str, credential: Credential, http: SecureHttpClient):
        self._base_url = base_url
        self._credential = credential
        self._http = http

    async def directions(
        self,
        origin: Coordinate,
        destination: Coordinate,
        profile: str = DRIVING_PROFILE,
    ) -> Any:
        key = require_key(self._credential)
        url = f"{self._base_url}/v2/directions/{profile}/geojson"
        # Waypoint order matters: origin first.
        body = {"coordinates": [origin.as_lonlat(), destination.as_lonlat()]}
        headers = {"Authorization": key, "Content-Type": "application/json"}
        return await self._http.post_json(url, json=body, headers=headers)
