"""AgentCard URL resolution and the outbound HTTP fetch."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional
from urllib.parse import urlsplit

import httpx

from a2a_registry.errors import AgentFetchError

logger = logging.getLogger(__name__)

WELL_KNOWN_PATH = "/.well-known/agent-card.json"
DEFAULT_TIMEOUT = 30.0
USER_AGENT = "A2A-Registry/1.0"

_DNS_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "no address associated",
)


def resolve_agent_card_url(url: str) -> str:
    """Return the URL the AgentCard for *url* is fetched from.

    URLs whose path already ends in ``.json`` are used as-is. Anything else is
    treated as an agent base URL and gets the well-known card path appended,
    after dropping a single trailing slash.
    """
    try:
        path = urlsplit(url).path
    except ValueError:
        path = url
    if path.endswith(".json"):
        return url
    base = url[:-1] if url.endswith("/") else url
    return f"{base}{WELL_KNOWN_PATH}"


class AgentCardFetcher:
    """Fetches and JSON-decodes AgentCard documents over HTTP.

    Parameters
    ----------
    timeout : float
        Overall request timeout in seconds, covering connect, redirects and
        reading the body. A timeout is reported as a fetch failure; there is
        no retry.
    transport : httpx.AsyncBaseTransport | None
        Optional transport override (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self._transport = transport

    async def fetch_document(self, card_url: str) -> Any:
        """GET *card_url* and return the decoded JSON body.

        Raises:
            AgentFetchError: On network errors, timeouts, non-2xx responses,
                or a body that is not JSON.
        """
        headers = {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        try:
            resp = await asyncio.wait_for(self._get(card_url, headers), self.timeout)
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise AgentFetchError(card_url, f"HTTP {status}: {exc.response.reason_phrase}") from exc
        except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
            raise AgentFetchError(card_url, "Request timeout") from exc
        except httpx.ConnectError as exc:
            raise AgentFetchError(card_url, _describe_connect_error(exc)) from exc
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise AgentFetchError(card_url, str(exc) or exc.__class__.__name__) from exc

        try:
            return resp.json()
        except ValueError as exc:
            raise AgentFetchError(card_url, "Response is not valid JSON") from exc

    async def _get(self, card_url: str, headers: dict[str, str]) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            resp = await client.get(card_url, headers=headers)
            resp.raise_for_status()
        return resp


def _describe_connect_error(exc: httpx.ConnectError) -> str:
    text = str(exc)
    if any(marker in text.lower() for marker in _DNS_MARKERS):
        return "DNS lookup failed"
    return text or "Connection failed"
