"""
API Module - HTTP interface to simulated modules.

Clients:
1. Create a session for a bomb
2. Press buttons or send remote commands
3. Solve other modules to advance stages
4. Read the displayed command, strikes and trace

All state is session-scoped and in memory.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    PressRequest,
    CommandRequest,
    SolveModuleRequest,
    TickRequest,
    ForceSolveRequest,
    # Responses
    SessionResponse,
    ActionResponse,
    StageInfo,
    ErrorResponse,
    # Enums
    SessionStatus,
    ErrorCode,
)
from .service import APIService, SessionNotFoundError
from .app import create_app

__all__ = [
    "CreateSessionRequest",
    "PressRequest",
    "CommandRequest",
    "SolveModuleRequest",
    "TickRequest",
    "ForceSolveRequest",
    "SessionResponse",
    "ActionResponse",
    "StageInfo",
    "ErrorResponse",
    "SessionStatus",
    "ErrorCode",
    "APIService",
    "SessionNotFoundError",
    "create_app",
]
