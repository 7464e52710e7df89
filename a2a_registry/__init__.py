"""A2A Registry — a small registry of Agent-to-Agent (A2A) AgentCards.

AgentCards are fetched from the URL an agent publishes them at, validated,
and stored under the agent's name. The same operations are exposed over an
HTTP CRUD API and as MCP tools.
"""

__version__ = "1.0.0"
