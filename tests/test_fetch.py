"""Tests for AgentCard URL resolution and retrieval."""

import asyncio

import httpx
import pytest

from a2a_registry.errors import AgentFetchError, ErrorKind
from a2a_registry.fetch import AgentCardFetcher, resolve_agent_card_url
from tests.conftest import make_card


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://example.com", "https://example.com/.well-known/agent-card.json"),
        ("https://example.com/my-agent", "https://example.com/my-agent/.well-known/agent-card.json"),
        ("https://example.com/my-agent/", "https://example.com/my-agent/.well-known/agent-card.json"),
        ("https://cdn.example.com/agent.json", "https://cdn.example.com/agent.json"),
    ],
)
def test_resolve_examples(url, expected):
    assert resolve_agent_card_url(url) == expected


def test_resolve_strips_only_one_slash():
    assert resolve_agent_card_url("https://example.com//") == "https://example.com//.well-known/agent-card.json"


def test_resolve_json_path_with_query_is_direct():
    url = "https://cdn.example.com/cards/agent.json?rev=3"
    assert resolve_agent_card_url(url) == url


def test_resolve_no_other_normalization():
    url = "HTTPS://Example.COM/a%20b"
    assert resolve_agent_card_url(url) == "HTTPS://Example.COM/a%20b/.well-known/agent-card.json"


def _fetch(fetcher: AgentCardFetcher, url: str):
    return asyncio.run(fetcher.fetch_document(url))


def test_fetch_returns_json(host):
    url = "https://example.com/.well-known/agent-card.json"
    host.serve_card(url, make_card())

    assert _fetch(host.fetcher(), url) == make_card()
    request = host.requests[0]
    assert request.method == "GET"
    assert request.headers["Accept"] == "application/json"
    assert request.headers["User-Agent"] == "A2A-Registry/1.0"


def test_fetch_http_error_status(host):
    url = "https://example.com/.well-known/agent-card.json"
    host.serve(url, httpx.Response(503))

    with pytest.raises(AgentFetchError) as excinfo:
        _fetch(host.fetcher(), url)
    err = excinfo.value
    assert err.kind == ErrorKind.FETCH
    assert err.url == url
    assert err.cause == "HTTP 503: Service Unavailable"
    assert str(err) == f"Failed to fetch AgentCard from {url}: HTTP 503: Service Unavailable"


def test_fetch_follows_redirects(host):
    old = "https://old.example.com/agent.json"
    new = "https://new.example.com/agent.json"
    host.serve(old, httpx.Response(301, headers={"Location": new}))
    host.serve_card(new, make_card())

    assert _fetch(host.fetcher(), old)["name"] == "weather-agent"
    assert host.requested_urls == [old, new]


def test_fetch_timeout(host):
    url = "https://slow.example.com/agent.json"
    host.serve(url, httpx.ReadTimeout("timed out"))

    with pytest.raises(AgentFetchError, match="Request timeout"):
        _fetch(host.fetcher(), url)


def test_fetch_timeout_covers_whole_request():
    async def slow_handler(request):
        await asyncio.sleep(5)
        return httpx.Response(200, json=make_card())

    fetcher = AgentCardFetcher(timeout=0.05, transport=httpx.MockTransport(slow_handler))
    with pytest.raises(AgentFetchError, match="Request timeout"):
        _fetch(fetcher, "https://slow.example.com/agent.json")


def test_fetch_dns_failure(host):
    url = "https://nowhere.invalid/agent.json"
    host.serve(url, httpx.ConnectError("[Errno -2] Name or service not known"))

    with pytest.raises(AgentFetchError, match="DNS lookup failed"):
        _fetch(host.fetcher(), url)


def test_fetch_connection_refused(host):
    url = "https://down.example.com/agent.json"
    host.serve(url, httpx.ConnectError("[Errno 111] Connection refused"))

    with pytest.raises(AgentFetchError, match="Connection refused"):
        _fetch(host.fetcher(), url)


def test_fetch_non_json_body(host):
    url = "https://example.com/agent.json"
    host.serve(url, httpx.Response(200, text="<html>hello</html>"))

    with pytest.raises(AgentFetchError, match="not valid JSON"):
        _fetch(host.fetcher(), url)


def test_fetch_invalid_url():
    with pytest.raises(AgentFetchError) as excinfo:
        _fetch(AgentCardFetcher(), "ftp://example.com/agent.json")
    assert excinfo.value.url == "ftp://example.com/agent.json"
