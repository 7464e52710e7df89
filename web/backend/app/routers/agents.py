"""Agents router -- CRUD over the registered AgentCards."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from a2a_registry.errors import ErrorKind
from a2a_registry.models import Outcome
from a2a_registry.service import AgentService
from web.backend.app.dependencies import get_service
from web.backend.app.models.api import (
    AgentCardResponse,
    ErrorResponse,
    RegisterAgentRequest,
    UpdateAgentRequest,
)

router = APIRouter(prefix="/agents", tags=["agents"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

_STATUS_FOR_KIND = {
    ErrorKind.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.FETCH: status.HTTP_400_BAD_REQUEST,
    ErrorKind.STORAGE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _unwrap(outcome: Outcome):
    """Return the outcome's value or raise the matching HTTPException."""
    if not outcome.ok:
        raise HTTPException(status_code=_STATUS_FOR_KIND[outcome.kind], detail=outcome.message)
    return outcome.value


def _not_found(name: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Agent '{name}' not found",
    )


@router.get(
    "",
    response_model=list[AgentCardResponse],
    summary="List all agents",
    responses=_ERROR_RESPONSES,
)
async def list_agents(service: AgentService = Depends(get_service)):
    """List every registered AgentCard."""
    return _unwrap(service.list_agents())


@router.post(
    "",
    response_model=AgentCardResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register an agent",
    responses=_ERROR_RESPONSES,
)
async def register_agent(
    body: Optional[RegisterAgentRequest] = None,
    service: AgentService = Depends(get_service),
):
    """Register an agent by fetching its AgentCard.

    ``url`` may be the agent's base URL (``/.well-known/agent-card.json`` is
    appended) or a direct link to a ``.json`` card.
    """
    if body is None or not body.url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Request body must include a "url" field',
        )
    return _unwrap(await service.register_agent(body.url))


@router.get(
    "/{name:path}",
    response_model=AgentCardResponse,
    summary="Get an agent",
    responses=_ERROR_RESPONSES,
)
async def get_agent(name: str, service: AgentService = Depends(get_service)):
    """Retrieve one AgentCard by agent name."""
    card = _unwrap(service.get_agent(name))
    if card is None:
        raise _not_found(name)
    return card


@router.put(
    "/{name:path}",
    response_model=AgentCardResponse,
    summary="Update an agent",
    responses=_ERROR_RESPONSES,
)
async def update_agent(
    name: str,
    body: Optional[UpdateAgentRequest] = None,
    service: AgentService = Depends(get_service),
):
    """Re-fetch an agent's AgentCard and replace the stored copy.

    Without a ``url`` in the body the card is re-fetched from the stored
    card's own ``url``. The fetched card must keep the same name.
    """
    url = body.url if body is not None else None
    card = _unwrap(await service.update_agent(name, url))
    if card is None:
        raise _not_found(name)
    return card


@router.delete(
    "/{name:path}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an agent",
    responses=_ERROR_RESPONSES,
)
async def delete_agent(name: str, service: AgentService = Depends(get_service)):
    """Remove an agent from the registry."""
    if not _unwrap(service.delete_agent(name)):
        raise _not_found(name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
