"""Geocoding: suggestions and single-match resolution."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from roadtrip.adapters.ors import OrsGeocodingClient
from roadtrip.config.settings import CredentialsAbsent
from roadtrip.domain.exceptions import InvalidCoordinateError, PlaceNotFoundError, ProviderUnavailableError
from roadtrip.domain.models import Coordinate, GeocodeSuggestion, Place
from roadtrip.planner.geo_resolver import GeoResolver
from roadtrip.security.http_client import SecureHttpClient
from roadtrip.shared.exceptions import ToolError


class _FakeGeocoder:
    def __init__(self, payload=None, error: Exception | None = None) -> None:
        self.payload = payload if payload is not None else {"features": []}
        self.error = error
        self.calls: list[dict] = []

    async def search(self, text, *, country, size):
        self.calls.append({"text": text, "country": country, "size": size})
        if self.error is not None:
            raise self.error
        return self.payload


def _feature(label, coordinates):
    return {"properties": {"label": label}, "geometry": {"coordinates": coordinates}}


@pytest.mark.parametrize("query", ["", "a", "Rj", "  S ", None])
def test_short_query_returns_nothing_without_lookup(query, logger):
    tool = _FakeGeocoder()
    resolver = GeoResolver(tool, logger=logger)

    assert asyncio.run(resolver.suggest(query)) == []
    assert tool.calls == []


def test_suggest_is_bounded_and_country_filtered(logger):
    features = [_feature(f"Campinas {i}", [-47.0 - i, -22.9]) for i in range(7)]
    tool = _FakeGeocoder({"features": features})
    resolver = GeoResolver(tool, country="BR", logger=logger)

    suggestions = asyncio.run(resolver.suggest("Camp"))

    assert tool.calls == [{"text": "Camp", "country": "BR", "size": 5}]
    assert len(suggestions) == 5
    assert suggestions[0].label == "Campinas 0"
    assert suggestions[0].coordinate == Coordinate(lon=-47.0, lat=-22.9)


def test_suggest_skips_unusable_features(logger):
    features = [
        _feature("Santos, SP", [-46.33, -23.96]),
        _feature("Broken", [None, -23.0]),
        {"properties": {}, "geometry": {"coordinates": [-46.0, -23.0]}},
        "junk",
    ]
    resolver = GeoResolver(_FakeGeocoder({"features": features}), logger=logger)

    suggestions = asyncio.run(resolver.suggest("San"))

    assert [s.label for s in suggestions] == ["Santos, SP"]


@pytest.mark.parametrize(
    "tool",
    [
        _FakeGeocoder(error=ToolError("geocode", "HTTP 500")),
        _FakeGeocoder(payload="<html>"),
        _FakeGeocoder(payload={"features": "nope"}),
    ],
)
def test_suggest_swallows_failures(tool, logger):
    resolver = GeoResolver(tool, logger=logger)

    assert asyncio.run(resolver.suggest("Curitiba")) == []


def test_resolve_requests_single_match(logger, events):
    tool = _FakeGeocoder({"features": [_feature("São Paulo, SP, Brazil", [-46.63, -23.55])]})
    resolver = GeoResolver(tool, logger=logger)

    place = asyncio.run(resolver.resolve_place("São Paulo"))

    assert tool.calls == [{"text": "São Paulo", "country": "BR", "size": 1}]
    assert place == Place(
        query_text="São Paulo",
        resolved_coordinate=Coordinate(lon=-46.63, lat=-23.55),
        label="São Paulo, SP, Brazil",
    )
    assert asyncio.run(resolver.resolve("São Paulo")) == Coordinate(lon=-46.63, lat=-23.55)
    resolved = [e for e in events() if e["event"] == "resolved_coordinate"]
    assert resolved[0]["lat"] == -23.55


@pytest.mark.parametrize("payload", [{"features": []}, {}, None, [1, 2]])
def test_resolve_without_features_is_not_found(payload, logger):
    tool = _FakeGeocoder()
    tool.payload = payload
    resolver = GeoResolver(tool, logger=logger)

    with pytest.raises(PlaceNotFoundError):
        asyncio.run(resolver.resolve("Atlantis"))


@pytest.mark.parametrize(
    "coordinates",
    [None, [], [-46.6], ["-46.6", "-23.5"], [True, False]],
)
def test_resolve_with_bad_geometry_is_invalid_coordinate(coordinates, logger):
    resolver = GeoResolver(_FakeGeocoder({"features": [_feature("X", coordinates)]}), logger=logger)

    with pytest.raises(InvalidCoordinateError):
        asyncio.run(resolver.resolve("X"))


def test_resolve_missing_geometry_is_invalid_coordinate(logger):
    resolver = GeoResolver(_FakeGeocoder({"features": [{"properties": {"label": "X"}}]}), logger=logger)

    with pytest.raises(InvalidCoordinateError):
        asyncio.run(resolver.resolve("X"))


def test_resolve_transport_failure_is_provider_unavailable(logger):
    resolver = GeoResolver(_FakeGeocoder(error=ToolError("geocode", "timeout")), logger=logger)

    with pytest.raises(ProviderUnavailableError):
        asyncio.run(resolver.resolve("Recife"))


def test_absent_key_fails_resolution_and_silences_suggestions(logger):
    def _handler(request):
        raise AssertionError("network must not be used without a key")

    client = OrsGeocodingClient(
        "https://ors.test",
        CredentialsAbsent(name="ORS_API_KEY"),
        SecureHttpClient(tool_name="geocode", transport=httpx.MockTransport(_handler)),
    )
    resolver = GeoResolver(client, logger=logger)

    assert asyncio.run(resolver.suggest("Salvador")) == []
    with pytest.raises(ProviderUnavailableError):
        asyncio.run(resolver.resolve("Salvador"))


def test_ors_client_sends_expected_query(providers, settings, logger):
    providers.add_place("Belo Horizonte", -43.94, -19.92)
    client = OrsGeocodingClient(
        "https://ors.test",
        settings.ors_api_key,
        SecureHttpClient(tool_name="geocode", transport=providers.transport()),
    )
    asyncio.run(GeoResolver(client, logger=logger).resolve("Belo Horizonte"))

    params = providers.requests[0].url.params
    assert providers.requests[0].url.path == "/geocode/search"
    assert params["boundary.country"] == "BR"
    assert params["size"] == "1"
    assert params["api_key"] == settings.ors_api_key.value


def test_place_from_suggestion_is_resolved():
    suggestion = GeocodeSuggestion(label="Niterói, RJ", coordinate=Coordinate(lon=-43.1, lat=-22.88))
    place = Place.from_suggestion(suggestion)

    assert place.is_resolved
    assert place.label == "Niterói, RJ"
