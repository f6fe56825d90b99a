"""Bridge API layer.

Provides the FastAPI router for running commands over HTTP.
"""

from .router import router, create_bridge_dependencies, get_session
from .schemas import (
    ClearHistoryResponse,
    CommandRequest,
    CommandResponse,
    ErrorResponse,
    HistoryResponse,
)

__all__ = [
    "router",
    "create_bridge_dependencies",
    "get_session",
    "ClearHistoryResponse",
    "CommandRequest",
    "CommandResponse",
    "ErrorResponse",
    "HistoryResponse",
]
