"""Shared fixtures: sample AgentCards, stores, and a fake agent host."""

from __future__ import annotations

import copy
import json

import httpx
import pytest

from a2a_registry.fetch import AgentCardFetcher
from a2a_registry.service import AgentService
from a2a_registry.store import JsonFileStore, SqliteStore


def make_card(name: str = "weather-agent", **overrides) -> dict:
    """Build a minimal valid AgentCard."""
    card = {
        "name": name,
        "description": f"{name} answers questions",
        "url": f"https://agents.example.com/{name}",
        "version": "1.0.0",
        "protocolVersion": "0.3.0",
        "capabilities": {"streaming": True, "pushNotifications": False},
        "defaultInputModes": ["text/plain"],
        "defaultOutputModes": ["text/plain", "application/json"],
        "skills": [
            {
                "id": "forecast",
                "name": "Forecast",
                "description": "Gives a weather forecast",
                "tags": ["weather"],
                "examples": ["What's the weather in Oslo?"],
            }
        ],
    }
    card.update(overrides)
    return card


class FakeAgentHost:
    """Serves canned responses for AgentCard URLs through httpx.MockTransport."""

    def __init__(self) -> None:
        self.routes: dict[str, httpx.Response | Exception] = {}
        self.requests: list[httpx.Request] = []

    def serve_card(self, url: str, card) -> None:
        self.routes[url] = httpx.Response(200, json=copy.deepcopy(card))

    def serve(self, url: str, response: httpx.Response | Exception) -> None:
        self.routes[url] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        result = self.routes.get(str(request.url))
        if result is None:
            return httpx.Response(404, text="not found")
        if isinstance(result, Exception):
            raise result
        return result

    @property
    def requested_urls(self) -> list[str]:
        return [str(r.url) for r in self.requests]

    def fetcher(self, timeout: float = 5.0) -> AgentCardFetcher:
        return AgentCardFetcher(timeout=timeout, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def host() -> FakeAgentHost:
    return FakeAgentHost()


@pytest.fixture(params=["json", "sqlite"])
def store(request, tmp_path):
    """Each backend in turn, so tests double as conformance tests."""
    if request.param == "json":
        backend = JsonFileStore(tmp_path / "registry.json")
    else:
        backend = SqliteStore(tmp_path / "registry.db")
    yield backend
    backend.close()


@pytest.fixture
def service(host, tmp_path) -> AgentService:
    backend = JsonFileStore(tmp_path / "registry.json")
    return AgentService(backend, host.fetcher())


def read_json(path) -> dict:
    return json.loads(path.read_text())
