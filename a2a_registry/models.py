"""Registry data models: the AgentCard type and pipeline outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from a2a_registry.errors import ErrorKind, RegistryError

# AgentCards are kept as plain dicts so that fields the registry does not
# interpret survive a store/load cycle unchanged.
AgentCard = dict[str, Any]

T = TypeVar("T")


@dataclass
class Outcome(Generic[T]):
    """Result of a pipeline operation: either a value or a RegistryError.

    A successful lookup that found nothing is still a success; ``value`` is
    then ``None`` (or ``False`` for deletes).
    """

    value: Optional[T] = None
    error: Optional[RegistryError] = None

    @classmethod
    def success(cls, value: T) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: RegistryError) -> Outcome[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        return self.error.kind if self.error is not None else None

    @property
    def message(self) -> str:
        return str(self.error) if self.error is not None else ""

    def unwrap(self) -> T:
        """Return the value, re-raising the carried error on failure."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
