"""FastAPI application for the A2A Registry.

Serves two surfaces over the same registry:
- REST API for AgentCard CRUD under ``/agents``
- MCP server (SSE transport) under ``/mcp``
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from a2a_registry import __version__
from web.backend.app.mcp_server import mcp
from web.backend.app.models.api import HealthResponse, RootResponse
from web.backend.app.routers import agents

logger = logging.getLogger(__name__)

ERROR_LABELS = {
    400: "Bad request",
    404: "Not found",
    409: "Conflict",
    500: "Internal server error",
}

app = FastAPI(
    title="A2A Registry",
    description=(
        "Registry of A2A AgentCards. Agents are registered by URL; the "
        "registry fetches, validates and stores their AgentCards by name."
    ),
    version=__version__,
)

# ---------------------------------------------------------------------------
# CORS middleware (allow all origins)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Error bodies
# ---------------------------------------------------------------------------


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    label = ERROR_LABELS.get(exc.status_code, "Error")
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": label, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"] if part != "body")
        problems.append(f"{loc or 'body'}: {err['msg']}")
    return JSONResponse(
        status_code=400,
        content={"error": ERROR_LABELS[400], "message": "; ".join(problems)},
    )


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(agents.router)
app.mount("/mcp", mcp.sse_app())


# ---------------------------------------------------------------------------
# Root and health-check endpoints
# ---------------------------------------------------------------------------


@app.get("/", response_model=RootResponse, tags=["meta"])
async def root():
    """Return basic API information."""
    return RootResponse(
        name="A2A Registry",
        version=__version__,
        endpoints={
            "restApi": "/agents",
            "mcpServer": "/mcp",
            "health": "/health",
        },
    )


@app.get("/health", response_model=HealthResponse, tags=["meta"])
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc).isoformat())
