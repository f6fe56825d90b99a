"""
FastAPI Router for the command bridge.

Provides REST endpoints to run commands and inspect or clear the
conversation of the shared session.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from ..orchestrator.session import AgentSession
from .schemas import (
    ClearHistoryResponse,
    CommandRequest,
    CommandResponse,
    ErrorResponse,
    HistoryResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["bridge"])


# =============================================================================
# Dependencies
# =============================================================================


class BridgeDependencies:
    """Container for bridge dependencies.

    Injected at application startup.
    """

    session: Optional[AgentSession] = None


_deps = BridgeDependencies()


def create_bridge_dependencies(session: Optional[AgentSession]) -> None:
    """Install the session served by the router.

    Call this at application startup, and with None at shutdown.
    """
    _deps.session = session


def get_session() -> AgentSession:
    """Get the agent session dependency."""
    if _deps.session is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Bridge not initialized",
        )
    return _deps.session


# =============================================================================
# REST Endpoints
# =============================================================================


@router.post(
    "/execute-command",
    response_model=CommandResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def execute_command(
    request: CommandRequest,
    session: AgentSession = Depends(get_session),
):
    """Run a natural-language command and return the final answer."""
    if not request.command or not request.command.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Command is required"},
        )

    try:
        message = await session.execute_command(request.command)
    except ValueError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(e)},
        )
    except Exception as e:
        logger.exception(f"Error executing command: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e) or type(e).__name__},
        )

    return CommandResponse(message=message)


@router.get("/history", response_model=HistoryResponse)
async def get_history(
    session: AgentSession = Depends(get_session),
) -> HistoryResponse:
    """Current conversation of the shared session."""
    return HistoryResponse.from_messages(session.get_history())


@router.delete("/history", response_model=ClearHistoryResponse)
async def clear_history(
    session: AgentSession = Depends(get_session),
) -> ClearHistoryResponse:
    """Clear the conversation; the next command re-runs setup."""
    await session.clear_history()
    return ClearHistoryResponse()
