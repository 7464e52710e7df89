"""Error taxonomy for the registry.

Every failure the registration pipeline can report is a ``RegistryError``
subclass tagged with an ``ErrorKind``. "Not found" is deliberately absent:
lookups that miss return ``None`` (or ``False`` for deletes).
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from a2a_registry.validation import ValidationIssue


class ErrorKind(Enum):
    ALREADY_EXISTS = "already_exists"
    VALIDATION = "validation"
    FETCH = "fetch"
    STORAGE = "storage"


class RegistryError(Exception):
    """Base class for every error the registry reports."""

    kind: ErrorKind = ErrorKind.STORAGE


class AgentAlreadyExistsError(RegistryError):
    """Raised when creating an agent whose name is already registered."""

    kind = ErrorKind.ALREADY_EXISTS

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Agent '{name}' already exists")


class InvalidAgentCardError(RegistryError):
    """Raised when a fetched document is not a well-formed AgentCard.

    ``issues`` holds one entry per offending field. A plain message (used for
    the update name-mismatch check) is wrapped into a single issue.
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str = "", issues: list[ValidationIssue] | None = None):
        self.issues: list[ValidationIssue] = list(issues or [])
        if not message:
            message = "; ".join(i.message for i in self.issues) or "Invalid AgentCard"
        super().__init__(message)

    @property
    def fields(self) -> list[str]:
        return [i.field for i in self.issues]


class AgentFetchError(RegistryError):
    """Raised when the AgentCard cannot be retrieved from its URL."""

    kind = ErrorKind.FETCH

    def __init__(self, url: str, cause: str):
        self.url = url
        self.cause = cause
        super().__init__(f"Failed to fetch AgentCard from {url}: {cause}")


class StorageError(RegistryError):
    """Raised when the storage backend fails unexpectedly."""

    kind = ErrorKind.STORAGE
