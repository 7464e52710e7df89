"""Registration pipeline — the business logic behind every adapter.

``AgentService`` resolves agent URLs, fetches and validates AgentCards, and
hands them to the storage backend. Every public operation returns an
``Outcome`` instead of raising, so adapters have to deal with each error kind
explicitly. The service keeps no state of its own between calls.
"""

from __future__ import annotations

import logging
from typing import Optional

from a2a_registry.errors import InvalidAgentCardError, RegistryError
from a2a_registry.fetch import AgentCardFetcher, resolve_agent_card_url
from a2a_registry.models import AgentCard, Outcome
from a2a_registry.store.base import AgentStore
from a2a_registry.validation import ValidationIssue, ensure_valid_agent_card

logger = logging.getLogger(__name__)


class AgentService:
    """Register, list, get, update and delete AgentCards."""

    def __init__(self, store: AgentStore, fetcher: Optional[AgentCardFetcher] = None) -> None:
        self.store = store
        self.fetcher = fetcher or AgentCardFetcher()

    async def register_agent(self, url: str) -> Outcome[AgentCard]:
        """Fetch the AgentCard published at *url* and store it.

        Fails with ALREADY_EXISTS if an agent with the same name is already
        registered, so the caller can offer an update instead.
        """
        try:
            card = await self._fetch_agent_card(url)
            stored = self.store.create_agent(card)
        except RegistryError as exc:
            return self._fail("register", url, exc)

        logger.info("Registered agent '%s' from %s", stored["name"], url)
        return Outcome.success(stored)

    def list_agents(self) -> Outcome[list[AgentCard]]:
        try:
            return Outcome.success(self.store.list_agents())
        except RegistryError as exc:
            return self._fail("list", "agents", exc)

    def get_agent(self, name: str) -> Outcome[Optional[AgentCard]]:
        """Look up one agent. A missing agent is a successful ``None``."""
        try:
            return Outcome.success(self.store.get_agent(name))
        except RegistryError as exc:
            return self._fail("get", name, exc)

    async def update_agent(self, name: str, url: Optional[str] = None) -> Outcome[Optional[AgentCard]]:
        """Re-fetch an agent's card and replace the stored copy.

        The card is fetched from *url* when given, otherwise from the ``url``
        field of the stored card. The fetched card must carry the same name;
        renames are rejected before anything is written. Returns a successful
        ``None`` without fetching if *name* is not registered.
        """
        try:
            existing = self.store.get_agent(name)
            if existing is None:
                return Outcome.success(None)

            card = await self._fetch_agent_card(url if url is not None else existing["url"])
            if card["name"] != name:
                message = f"Cannot update agent '{name}': fetched AgentCard has different name '{card['name']}'"
                raise InvalidAgentCardError(message, issues=[ValidationIssue("name", message)])

            updated = self.store.update_agent(name, card)
        except RegistryError as exc:
            return self._fail("update", name, exc)

        if updated is not None:
            logger.info("Updated agent '%s'", name)
        return Outcome.success(updated)

    def delete_agent(self, name: str) -> Outcome[bool]:
        """Remove an agent. Deleting an unknown name is a successful ``False``."""
        try:
            deleted = self.store.delete_agent(name)
        except RegistryError as exc:
            return self._fail("delete", name, exc)

        if deleted:
            logger.info("Deleted agent '%s'", name)
        return Outcome.success(deleted)

    async def _fetch_agent_card(self, url: str) -> AgentCard:
        card_url = resolve_agent_card_url(url)
        data = await self.fetcher.fetch_document(card_url)
        return ensure_valid_agent_card(data)

    @staticmethod
    def _fail(operation: str, target: str, exc: RegistryError) -> Outcome:
        logger.warning("%s %s failed (%s): %s", operation, target, exc.kind.value, exc)
        return Outcome.failure(exc)
