"""Storage contract shared by every AgentCard backend."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from a2a_registry.models import AgentCard


class AgentStore(ABC):
    """Persistence of AgentCards keyed by their ``name`` field.

    Implementations must behave identically for the same sequence of calls
    (list ordering excepted). Unexpected backend failures are raised as
    ``StorageError``; a duplicate create raises ``AgentAlreadyExistsError``.
    """

    @abstractmethod
    def list_agents(self) -> list[AgentCard]:
        """Return every stored card. Order is not guaranteed."""

    @abstractmethod
    def get_agent(self, name: str) -> Optional[AgentCard]:
        """Return the card stored under *name*, or None."""

    @abstractmethod
    def create_agent(self, card: AgentCard) -> AgentCard:
        """Store a new card. Never overwrites an existing name."""

    @abstractmethod
    def update_agent(self, name: str, card: AgentCard) -> Optional[AgentCard]:
        """Replace the card under *name*. Returns None if it is not stored."""

    @abstractmethod
    def delete_agent(self, name: str) -> bool:
        """Remove the card under *name*. Returns whether anything was removed."""

    def close(self) -> None:
        """Release backend resources."""
