"""Shared service dependency for the HTTP routes and the MCP tools.

Both adapters talk to the same ``AgentService`` (and therefore the same
storage backend) for the lifetime of the process.
"""

from __future__ import annotations

from typing import Optional

from a2a_registry.config import RegistryConfig
from a2a_registry.fetch import AgentCardFetcher
from a2a_registry.service import AgentService
from a2a_registry.store import create_store

_service: Optional[AgentService] = None


def configure(config: RegistryConfig) -> AgentService:
    """Build the service for *config* and make it the shared instance."""
    store = create_store(config)
    return set_service(AgentService(store, AgentCardFetcher(timeout=config.fetch_timeout)))


def set_service(service: Optional[AgentService]) -> Optional[AgentService]:
    """Replace the shared instance (``None`` resets to lazy construction)."""
    global _service
    if _service is not None and _service is not service:
        _service.store.close()
    _service = service
    return service


def get_service() -> AgentService:
    """Return the shared AgentService, configuring it from the environment on first use."""
    if _service is None:
        configure(RegistryConfig.from_env())
    return _service
