"""Storage backends for AgentCards.

- ``JsonFileStore`` — a single pretty-printed JSON file
- ``SqliteStore`` — a single-table SQLite database
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from a2a_registry.store.base import AgentStore
from a2a_registry.store.json_store import JsonFileStore
from a2a_registry.store.sqlite_store import SqliteStore

if TYPE_CHECKING:
    from a2a_registry.config import RegistryConfig

logger = logging.getLogger(__name__)

STORE_TYPES = ("json", "sqlite")


def create_store(config: RegistryConfig) -> AgentStore:
    """Build the backend selected by ``config.store``."""
    if config.store == "json":
        logger.info("Using JSON file store: %s", config.file)
        return JsonFileStore(config.file, on_corrupt=config.on_corrupt)
    if config.store == "sqlite":
        logger.info("Using SQLite store: %s", config.file)
        return SqliteStore(config.file)
    raise ValueError(f"Invalid store type '{config.store}'. Must be 'json' or 'sqlite'.")


__all__ = [
    "AgentStore",
    "JsonFileStore",
    "SqliteStore",
    "STORE_TYPES",
    "create_store",
]
