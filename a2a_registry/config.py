"""Runtime configuration, read from ``A2A_REGISTRY_*`` environment variables.

CLI flags override whatever the environment provides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from a2a_registry.fetch import DEFAULT_TIMEOUT
from a2a_registry.store import STORE_TYPES
from a2a_registry.store.json_store import ON_CORRUPT_POLICIES, ON_CORRUPT_RESET

ENV_PREFIX = "A2A_REGISTRY_"

DEFAULT_FILES = {
    "json": "a2a-registry.json",
    "sqlite": "a2a-registry.db",
}


@dataclass
class RegistryConfig:
    """Settings for one registry process."""

    store: str = "json"
    file: str = ""  # Empty means the store type's default file name
    host: str = "127.0.0.1"
    port: int = 3000
    fetch_timeout: float = DEFAULT_TIMEOUT
    on_corrupt: str = ON_CORRUPT_RESET
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.file:
            self.file = DEFAULT_FILES.get(self.store, "")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> RegistryConfig:
        """Build a config from the environment, then apply non-None *overrides*."""
        env = os.environ if environ is None else environ

        def get(key: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + key)
            return value if value else None

        values: dict = {}
        if get("STORE"):
            values["store"] = get("STORE").lower()
        if get("FILE"):
            values["file"] = get("FILE")
        if get("HOST"):
            values["host"] = get("HOST")
        if get("PORT"):
            values["port"] = _parse_int(get("PORT"), "port")
        if get("FETCH_TIMEOUT"):
            values["fetch_timeout"] = _parse_float(get("FETCH_TIMEOUT"), "fetch timeout")
        if get("ON_CORRUPT"):
            values["on_corrupt"] = get("ON_CORRUPT").lower()
        if get("LOG_LEVEL"):
            values["log_level"] = get("LOG_LEVEL").upper()

        values.update({k: v for k, v in overrides.items() if v is not None})
        config = cls(**values)
        config.validate()
        return config

    def with_overrides(self, **overrides) -> RegistryConfig:
        """Return a copy with the non-None *overrides* applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if "store" in changes and "file" not in changes and self.file == DEFAULT_FILES.get(self.store):
            changes["file"] = ""
        config = replace(self, **changes)
        config.validate()
        return config

    def validate(self) -> None:
        """Raise ValueError if any setting is out of range."""
        if self.store not in STORE_TYPES:
            raise ValueError(f"Invalid store type '{self.store}'. Must be 'json' or 'sqlite'.")
        if not 1 <= self.port <= 65535:
            raise ValueError(f"Invalid port '{self.port}'. Must be a number between 1 and 65535.")
        if self.on_corrupt not in ON_CORRUPT_POLICIES:
            raise ValueError(
                f"Invalid corrupt-file policy '{self.on_corrupt}'. Must be one of: {', '.join(ON_CORRUPT_POLICIES)}"
            )
        if self.fetch_timeout <= 0:
            raise ValueError(f"Invalid fetch timeout '{self.fetch_timeout}'. Must be positive.")


def _parse_int(value: str, label: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Invalid {label} '{value}'. Must be a number.") from None


def _parse_float(value: str, label: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Invalid {label} '{value}'. Must be a number.") from None
