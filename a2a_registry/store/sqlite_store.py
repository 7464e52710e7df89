"""SQLite-backed AgentCard store.

One table, one row per agent::

    agents (name TEXT PRIMARY KEY, agent_card TEXT NOT NULL)

The primary key enforces name uniqueness; a duplicate insert is reported as
``AgentAlreadyExistsError`` like the file store does.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Optional

from a2a_registry.errors import AgentAlreadyExistsError, StorageError
from a2a_registry.models import AgentCard
from a2a_registry.store.base import AgentStore

logger = logging.getLogger(__name__)

MEMORY = ":memory:"


def _dumps(card: AgentCard) -> str:
    return json.dumps(card, separators=(",", ":"))


def _loads(name: str, text: str) -> AgentCard:
    try:
        return json.loads(text)
    except ValueError as exc:
        raise StorageError(f"Corrupt AgentCard stored for '{name}'") from exc


class SqliteStore(AgentStore):
    """Embedded-database store for AgentCards.

    All calls are synchronous. The connection is opened once and shared by
    every caller in the process.
    """

    def __init__(self, db_path: str | Path = MEMORY) -> None:
        self.db_path = str(db_path)
        try:
            if self.db_path != MEMORY:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._init_schema()
        except (sqlite3.Error, OSError) as exc:
            raise StorageError(f"Could not open database {self.db_path}") from exc

    def _init_schema(self) -> None:
        with self._conn:
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS agents (
                    name TEXT PRIMARY KEY,
                    agent_card TEXT NOT NULL
                )
                """
            )

    def list_agents(self) -> list[AgentCard]:
        try:
            rows = self._conn.execute("SELECT name, agent_card FROM agents").fetchall()
        except sqlite3.Error as exc:
            raise StorageError("Could not list agents") from exc
        return [_loads(name, text) for name, text in rows]

    def get_agent(self, name: str) -> Optional[AgentCard]:
        try:
            row = self._conn.execute(
                "SELECT agent_card FROM agents WHERE name = ?", (name,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Could not read agent '{name}'") from exc
        return _loads(name, row[0]) if row else None

    def create_agent(self, card: AgentCard) -> AgentCard:
        name = card["name"]
        try:
            with self._conn:
                self._conn.execute(
                    "INSERT INTO agents (name, agent_card) VALUES (?, ?)",
                    (name, _dumps(card)),
                )
        except sqlite3.IntegrityError as exc:
            if "UNIQUE constraint failed" in str(exc):
                raise AgentAlreadyExistsError(name) from None
            raise StorageError(f"Could not store agent '{name}'") from exc
        except sqlite3.Error as exc:
            raise StorageError(f"Could not store agent '{name}'") from exc
        return card

    def update_agent(self, name: str, card: AgentCard) -> Optional[AgentCard]:
        try:
            with self._conn:
                cur = self._conn.execute(
                    "UPDATE agents SET agent_card = ? WHERE name = ?",
                    (_dumps(card), name),
                )
        except sqlite3.Error as exc:
            raise StorageError(f"Could not update agent '{name}'") from exc
        if cur.rowcount == 0:
            return None
        return card

    def delete_agent(self, name: str) -> bool:
        try:
            with self._conn:
                cur = self._conn.execute("DELETE FROM agents WHERE name = ?", (name,))
        except sqlite3.Error as exc:
            raise StorageError(f"Could not delete agent '{name}'") from exc
        return cur.rowcount > 0

    def close(self) -> None:
        self._conn.close()
