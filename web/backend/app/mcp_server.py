"""MCP (Model Context Protocol) tools for the A2A Registry.

Exposes the registry operations so any MCP client can register and look up
agents. The server is mounted into the FastAPI app at ``/mcp`` (SSE
transport) and can also be run on stdio with ``a2a-registry mcp``.
"""

from __future__ import annotations

from typing import Any, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from a2a_registry.errors import ErrorKind
from a2a_registry.models import Outcome
from web.backend.app.dependencies import get_service

mcp = FastMCP(
    "a2a-registry-mcp-server",
    instructions=(
        "Tools for the A2A Registry: register agents from the URL they publish "
        "their AgentCard at, then list, inspect, refresh or remove them by name."
    ),
)


def _unwrap(outcome: Outcome, hint: str = "") -> Any:
    if not outcome.ok:
        message = outcome.message
        if hint and outcome.kind == ErrorKind.ALREADY_EXISTS:
            message = f"{message}. {hint}"
        raise ToolError(message)
    return outcome.value


@mcp.tool()
async def a2a_register_agent(url: str) -> dict[str, Any]:
    """Register a new agent by fetching its AgentCard from a URL.

    If the URL ends with .json it is fetched directly; otherwise
    /.well-known/agent-card.json is appended. The card is validated and stored
    under the agent's name. Fails if an agent with the same name is already
    registered (use a2a_update_agent instead), if the URL cannot be reached,
    or if required AgentCard fields are missing or malformed.
    """
    outcome = await get_service().register_agent(url)
    return _unwrap(outcome, "Use a2a_update_agent to update the existing agent instead.")


@mcp.tool()
async def a2a_list_agents() -> dict[str, Any]:
    """List all agents registered in the A2A Registry with their full AgentCards."""
    return {"agents": _unwrap(get_service().list_agents())}


@mcp.tool()
async def a2a_get_agent(name: str) -> dict[str, Any]:
    """Get the complete AgentCard of one agent by its name."""
    card = _unwrap(get_service().get_agent(name))
    if card is None:
        raise ToolError(f"Agent '{name}' not found. Use a2a_list_agents to see available agents.")
    return card


@mcp.tool()
async def a2a_update_agent(name: str, url: Optional[str] = None) -> dict[str, Any]:
    """Update an existing agent by re-fetching its AgentCard.

    Without url the card is re-fetched from the agent's stored url. The
    fetched AgentCard must have the same name; agents cannot be renamed.
    """
    card = _unwrap(await get_service().update_agent(name, url))
    if card is None:
        raise ToolError(f"Agent '{name}' not found. Use a2a_register_agent to register new agents.")
    return card


@mcp.tool()
async def a2a_delete_agent(name: str) -> dict[str, Any]:
    """Delete an agent from the registry by name."""
    if not _unwrap(get_service().delete_agent(name)):
        raise ToolError(f"Agent '{name}' not found. Use a2a_list_agents to see available agents.")
    return {"success": True, "message": f"Successfully deleted agent '{name}'"}
