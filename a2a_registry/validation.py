"""Field-level structural checks on fetched AgentCard documents.

Only the fields the registry relies on are constrained. Everything else in a
card (capability flags, extensions, vendor fields) is passed through as-is.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

from a2a_registry.errors import InvalidAgentCardError

REQUIRED_FIELDS = (
    "name",
    "description",
    "url",
    "version",
    "capabilities",
    "defaultInputModes",
    "defaultOutputModes",
    "skills",
)

REQUIRED_SKILL_FIELDS = ("id", "name", "description", "tags")
OPTIONAL_SKILL_ARRAYS = ("examples", "inputModes", "outputModes")

ROOT = "<root>"


@dataclass
class ValidationIssue:
    """A single problem found in an AgentCard."""

    field: str  # e.g. "capabilities" or "skills[2].tags"
    message: str

    def __str__(self) -> str:
        return self.message


def validate_agent_card(data: Any) -> list[ValidationIssue]:
    """Check a parsed JSON value against the AgentCard field rules.

    Returns:
        List of issues. Empty list means valid.
    """
    if not isinstance(data, dict):
        return [ValidationIssue(ROOT, "AgentCard must be an object")]

    issues: list[ValidationIssue] = []

    missing = set()
    for name in REQUIRED_FIELDS:
        if data.get(name) is None:
            missing.add(name)
            issues.append(ValidationIssue(name, f"Missing required field: {name}"))

    def present(name: str) -> bool:
        return name not in missing

    if present("name"):
        name = data["name"]
        if not isinstance(name, str) or not name.strip():
            issues.append(ValidationIssue("name", "name must be a non-empty string"))

    for name in ("description", "version"):
        if present(name) and not isinstance(data[name], str):
            issues.append(ValidationIssue(name, f"{name} must be a string"))

    if present("url") and not (isinstance(data["url"], str) and is_valid_url(data["url"])):
        issues.append(ValidationIssue("url", "url must be a valid URL string"))

    if present("capabilities") and not isinstance(data["capabilities"], dict):
        issues.append(ValidationIssue("capabilities", "capabilities must be an object"))

    for name in ("defaultInputModes", "defaultOutputModes", "skills"):
        if present(name) and not isinstance(data[name], list):
            issues.append(ValidationIssue(name, f"{name} must be an array"))

    if present("skills") and isinstance(data["skills"], list):
        for i, skill in enumerate(data["skills"]):
            _check_skill(skill, f"skills[{i}]", issues)

    _check_optional_fields(data, issues)

    return issues


def ensure_valid_agent_card(data: Any) -> dict:
    """Validate *data* and return it, or raise InvalidAgentCardError."""
    issues = validate_agent_card(data)
    if issues:
        raise InvalidAgentCardError(issues=issues)
    return data


def is_valid_url(value: str) -> bool:
    """True if *value* has at least a scheme and an authority."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def _check_skill(skill: Any, path: str, issues: list[ValidationIssue]) -> None:
    if not isinstance(skill, dict):
        issues.append(ValidationIssue(path, f"Each skill must be an object ({path})"))
        return

    for name in REQUIRED_SKILL_FIELDS:
        if name not in skill:
            issues.append(
                ValidationIssue(f"{path}.{name}", f"Skill {path} is missing required field: {name}")
            )
            continue
        expected_list = name == "tags"
        value = skill[name]
        if expected_list and not isinstance(value, list):
            issues.append(ValidationIssue(f"{path}.{name}", f"Skill {path} tags must be an array"))
        elif not expected_list and not isinstance(value, str):
            issues.append(
                ValidationIssue(f"{path}.{name}", f"Skill {path} {name} must be a string")
            )

    for name in OPTIONAL_SKILL_ARRAYS:
        if name in skill and not isinstance(skill[name], list):
            issues.append(
                ValidationIssue(
                    f"{path}.{name}", f"Skill {path} {name} must be an array when provided"
                )
            )


def _check_optional_fields(data: dict, issues: list[ValidationIssue]) -> None:
    for name in ("protocolVersion", "preferredTransport"):
        if name in data and not isinstance(data[name], str):
            issues.append(ValidationIssue(name, f"{name} must be a string"))

    # iconUrl may be explicitly null
    if "iconUrl" in data and data["iconUrl"] is not None and not isinstance(data["iconUrl"], str):
        issues.append(ValidationIssue("iconUrl", "iconUrl must be a string or null"))
