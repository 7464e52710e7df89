"""JSON file-backed AgentCard store.

The whole registry lives in one JSON object keyed by agent name. It is read
once, on first access, into an in-memory dict owned by the store instance;
every mutation rewrites the file. There is no file locking, so two processes
sharing a file overwrite each other's changes.

File reads and writes are synchronous. When the store is called from the
async HTTP routes or MCP tools they block the event loop for the duration of
the read or write.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Optional

from a2a_registry.errors import AgentAlreadyExistsError, StorageError
from a2a_registry.models import AgentCard
from a2a_registry.store.base import AgentStore

logger = logging.getLogger(__name__)

ON_CORRUPT_RESET = "reset"
ON_CORRUPT_FAIL = "fail"
ON_CORRUPT_POLICIES = (ON_CORRUPT_RESET, ON_CORRUPT_FAIL)


class JsonFileStore(AgentStore):
    """File-based store for AgentCards.

    Parameters
    ----------
    file_path : str | Path
        Location of the JSON file. It need not exist yet.
    on_corrupt : str
        What to do when the file exists but cannot be parsed. ``"reset"``
        logs a warning and starts with an empty registry (the file is
        overwritten on the next write); ``"fail"`` raises ``StorageError``.
    """

    def __init__(self, file_path: str | Path, on_corrupt: str = ON_CORRUPT_RESET) -> None:
        if on_corrupt not in ON_CORRUPT_POLICIES:
            raise ValueError(
                f"Invalid on_corrupt policy '{on_corrupt}'. Must be one of: {', '.join(ON_CORRUPT_POLICIES)}"
            )
        self.file_path = Path(file_path)
        self.on_corrupt = on_corrupt
        self._agents: dict[str, AgentCard] = {}
        self._loaded = False

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return

        if self.file_path.exists():
            try:
                data = json.loads(self.file_path.read_text(encoding="utf-8"))
                if not isinstance(data, dict):
                    raise ValueError("top-level JSON value is not an object")
            except (ValueError, OSError) as exc:
                if self.on_corrupt == ON_CORRUPT_FAIL:
                    raise StorageError(f"Could not read registry file {self.file_path}") from exc
                logger.warning(
                    "Could not read %s (%s), starting with empty registry", self.file_path, exc
                )
            else:
                self._agents = dict(data)

        self._loaded = True

    def _persist(self) -> None:
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            self.file_path.write_text(json.dumps(self._agents, indent=2), encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Could not write registry file {self.file_path}") from exc

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def list_agents(self) -> list[AgentCard]:
        self._ensure_loaded()
        return [copy.deepcopy(card) for card in self._agents.values()]

    def get_agent(self, name: str) -> Optional[AgentCard]:
        self._ensure_loaded()
        card = self._agents.get(name)
        return copy.deepcopy(card) if card is not None else None

    def create_agent(self, card: AgentCard) -> AgentCard:
        self._ensure_loaded()
        name = card["name"]
        if name in self._agents:
            raise AgentAlreadyExistsError(name)

        self._agents[name] = copy.deepcopy(card)
        try:
            self._persist()
        except StorageError:
            del self._agents[name]
            raise
        return card

    def update_agent(self, name: str, card: AgentCard) -> Optional[AgentCard]:
        self._ensure_loaded()
        if name not in self._agents:
            return None

        previous = self._agents[name]
        self._agents[name] = copy.deepcopy(card)
        try:
            self._persist()
        except StorageError:
            self._agents[name] = previous
            raise
        return card

    def delete_agent(self, name: str) -> bool:
        self._ensure_loaded()
        if name not in self._agents:
            return False

        previous = self._agents.pop(name)
        try:
            self._persist()
        except StorageError:
            self._agents[name] = previous
            raise
        return True
