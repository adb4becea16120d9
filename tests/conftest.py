"""pytest shared fixtures: isolated environment and simulated providers."""

from __future__ import annotations

import io
import json

import httpx
import pytest

from roadtrip.adapters.tool_factory import build_tools
from roadtrip.application.plan_trip import build_pipeline
from roadtrip.config.settings import ApiCredential, Settings
from roadtrip.infrastructure.logging import StructuredLogger

# Test sentinels only; intentionally fake values.
ORS_TEST_KEY = "ors-test-key-0001"
TOLL_TEST_KEY = "toll-test-key-0002"


@pytest.fixture(autouse=True)
def no_real_apis(monkeypatch):
    """Tests never reach a real provider."""
    for name in (
        "ORS_API_KEY",
        "TOLLGURU_API_KEY",
        "ORS_BASE_URL",
        "TOLLGURU_BASE_URL",
        "HTTP_TIMEOUT_SECONDS",
        "ENABLE_TOOL_FAULT_INJECTION",
        "TOOL_FAULT_INJECTION",
        "TOOL_FAULT_RATE",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


class FakeProviders:
    """In-process stand-in for OpenRouteService and TollGuru."""

    def __init__(self) -> None:
        self.places: dict[str, list] = {}
        self.route: object = {"features": []}
        self.toll: object = None
        self.toll_status = 200
        self.toll_down = False
        self.requests: list[httpx.Request] = []

    def add_place(self, text: str, lon: float, lat: float, label: str | None = None) -> None:
        self.places[text] = [
            {
                "properties": {"label": label or f"{text}, Brazil"},
                "geometry": {"coordinates": [lon, lat]},
            }
        ]

    def set_route(self, distance_m: float, duration_s: float, coordinates: list) -> None:
        self.route = {
            "features": [
                {
                    "properties": {"summary": {"distance": distance_m, "duration": duration_s}},
                    "geometry": {"coordinates": coordinates},
                }
            ]
        }

    def calls_to(self, suffix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(suffix)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.endswith("/geocode/search"):
            text = request.url.params.get("text", "")
            return httpx.Response(200, json={"features": self.places.get(text, [])})
        if "/v2/directions/" in path:
            return httpx.Response(200, json=self.route)
        if path.endswith("/calc/route"):
            if self.toll_down:
                raise httpx.ConnectError("toll provider unreachable", request=request)
            if self.toll is None:
                return httpx.Response(503, text="unavailable")
            return httpx.Response(self.toll_status, json=self.toll)
        return httpx.Response(404)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def providers() -> FakeProviders:
    return FakeProviders()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ors_api_key=ApiCredential(name="ORS_API_KEY", value=ORS_TEST_KEY),
        tollguru_api_key=ApiCredential(name="TOLLGURU_API_KEY", value=TOLL_TEST_KEY),
    )


@pytest.fixture
def log_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def logger(log_stream) -> StructuredLogger:
    return StructuredLogger(trace_id="test", output=log_stream)


@pytest.fixture
def pipeline(providers, settings, logger):
    tools = build_tools(settings, transport=providers.transport(), env={})
    return build_pipeline(settings, tools=tools, logger=logger)


def read_events(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


@pytest.fixture
def events(log_stream):
    return lambda: read_events(log_stream)
