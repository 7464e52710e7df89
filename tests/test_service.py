"""Tests for the registration pipeline."""

import asyncio
import sqlite3

import httpx
import pytest

from a2a_registry.errors import AgentFetchError, ErrorKind, InvalidAgentCardError, StorageError
from a2a_registry.models import Outcome
from a2a_registry.service import AgentService
from a2a_registry.store import JsonFileStore, SqliteStore
from tests.conftest import make_card

BASE = "https://agents.example.com/weather-agent"
CARD_URL = f"{BASE}/.well-known/agent-card.json"


def _register(service, url=BASE):
    return asyncio.run(service.register_agent(url))


def _update(service, name, url=None):
    return asyncio.run(service.update_agent(name, url))


# --- register ---


def test_register_fetches_well_known_card(service, host):
    host.serve_card(CARD_URL, make_card())

    outcome = _register(service)
    assert outcome.ok
    assert outcome.value == make_card()
    assert host.requested_urls == [CARD_URL]
    assert service.get_agent("weather-agent").value == make_card()


def test_register_direct_json_url(service, host):
    url = "https://cdn.example.com/cards/weather.json"
    host.serve_card(url, make_card())

    assert _register(service, url).ok
    assert host.requested_urls == [url]


def test_register_duplicate_name(service, host):
    host.serve_card(CARD_URL, make_card())
    _register(service)
    other = "https://mirror.example.com/agent.json"
    host.serve_card(other, make_card(version="9.9.9"))

    outcome = _register(service, other)
    assert outcome.kind == ErrorKind.ALREADY_EXISTS
    assert outcome.message == "Agent 'weather-agent' already exists"
    assert service.get_agent("weather-agent").value["version"] == "1.0.0"


def test_register_invalid_card_not_stored(service, host):
    card = make_card()
    del card["skills"]
    host.serve_card(CARD_URL, card)

    outcome = _register(service)
    assert outcome.kind == ErrorKind.VALIDATION
    assert "skills" in outcome.message
    assert isinstance(outcome.error, InvalidAgentCardError)
    assert service.list_agents().value == []


def test_register_fetch_failure(service, host):
    outcome = _register(service, "https://agents.example.com/unknown")
    assert outcome.kind == ErrorKind.FETCH
    assert isinstance(outcome.error, AgentFetchError)
    assert outcome.error.url == "https://agents.example.com/unknown/.well-known/agent-card.json"
    assert "HTTP 404" in outcome.message


def test_register_returns_card_unchanged(service, host):
    card = make_card(vendorExtension={"nested": [1, 2, {"deep": True}]}, iconUrl=None)
    host.serve_card(CARD_URL, card)

    assert _register(service).value == card
    assert service.get_agent("weather-agent").value == card


# --- list / get / delete ---


def test_list_and_get(service, host):
    host.serve_card(CARD_URL, make_card())
    host.serve_card("https://x.example.com/.well-known/agent-card.json", make_card("translator"))
    _register(service)
    _register(service, "https://x.example.com/")

    names = sorted(c["name"] for c in service.list_agents().value)
    assert names == ["translator", "weather-agent"]
    assert service.get_agent("translator").value["name"] == "translator"


def test_get_missing_is_success_none(service):
    outcome = service.get_agent("nope")
    assert outcome.ok
    assert outcome.value is None


def test_delete_twice(service, host):
    host.serve_card(CARD_URL, make_card())
    _register(service)

    assert service.delete_agent("weather-agent").value is True
    second = service.delete_agent("weather-agent")
    assert second.ok
    assert second.value is False


# --- update ---


def test_update_missing_does_not_fetch(service, host):
    outcome = _update(service, "ghost", "https://ghost.example.com")
    assert outcome.ok
    assert outcome.value is None
    assert host.requests == []


def test_update_refetches_from_stored_url(service, host):
    host.serve_card(CARD_URL, make_card(url=BASE))
    _register(service)
    host.serve_card(CARD_URL, make_card(url=BASE, version="2.0.0"))

    outcome = _update(service, "weather-agent")
    assert outcome.value["version"] == "2.0.0"
    assert host.requested_urls == [CARD_URL, CARD_URL]
    assert service.get_agent("weather-agent").value["version"] == "2.0.0"


def test_update_with_new_url(service, host):
    host.serve_card(CARD_URL, make_card())
    _register(service)
    new_url = "https://new.example.com/weather.json"
    host.serve_card(new_url, make_card(url="https://new.example.com", version="3.0.0"))

    outcome = _update(service, "weather-agent", new_url)
    assert outcome.value["url"] == "https://new.example.com"
    assert host.requested_urls[-1] == new_url


def test_update_rejects_rename(service, host):
    host.serve_card(CARD_URL, make_card())
    _register(service)
    renamed = "https://other.example.com/card.json"
    host.serve_card(renamed, make_card("storm-agent"))

    outcome = _update(service, "weather-agent", renamed)
    assert outcome.kind == ErrorKind.VALIDATION
    assert outcome.message == (
        "Cannot update agent 'weather-agent': fetched AgentCard has different name 'storm-agent'"
    )
    assert outcome.error.fields == ["name"]
    assert service.get_agent("weather-agent").value == make_card()
    assert service.get_agent("storm-agent").value is None


def test_update_invalid_card_keeps_stored(service, host):
    host.serve_card(CARD_URL, make_card())
    _register(service)
    host.serve_card(CARD_URL, make_card(capabilities=["streaming"]))

    outcome = _update(service, "weather-agent")
    assert outcome.kind == ErrorKind.VALIDATION
    assert service.get_agent("weather-agent").value == make_card()


def test_update_fetch_failure(service, host):
    host.serve_card(CARD_URL, make_card())
    _register(service)
    host.serve(CARD_URL, httpx.Response(500))

    outcome = _update(service, "weather-agent")
    assert outcome.kind == ErrorKind.FETCH
    assert service.get_agent("weather-agent").value == make_card()


# --- storage failures and backends ---


def test_storage_failure_becomes_outcome(tmp_path, host):
    path = tmp_path / "registry.json"
    path.write_text("{broken")
    service = AgentService(JsonFileStore(path, on_corrupt="fail"), host.fetcher())

    outcome = service.list_agents()
    assert outcome.kind == ErrorKind.STORAGE
    with pytest.raises(StorageError):
        outcome.unwrap()


def test_corrupt_sqlite_row_becomes_outcome(tmp_path, host):
    path = tmp_path / "registry.db"
    store = SqliteStore(path)
    conn = sqlite3.connect(path)
    with conn:
        conn.execute("INSERT INTO agents (name, agent_card) VALUES (?, ?)", ("x", "{not json"))
    conn.close()
    service = AgentService(store, host.fetcher())

    assert service.list_agents().kind == ErrorKind.STORAGE
    assert service.get_agent("x").kind == ErrorKind.STORAGE
    store.close()


def test_pipeline_on_sqlite(host):
    service = AgentService(SqliteStore(), host.fetcher())
    host.serve_card(CARD_URL, make_card())

    assert _register(service).ok
    assert _register(service).kind == ErrorKind.ALREADY_EXISTS
    assert service.delete_agent("weather-agent").value is True
    service.store.close()


def test_outcome_unwrap():
    assert Outcome.success(3).unwrap() == 3
    failed = Outcome.failure(InvalidAgentCardError("bad"))
    assert not failed.ok
    with pytest.raises(InvalidAgentCardError):
        failed.unwrap()
