"""
Pydantic Schemas for API - Request/response models for OpenAPI.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- INVALID_COMMAND: Button token or remote command not recognised
- MODULE_NOT_FOUND: No unsolved module with that name on the bomb
- VALIDATION_ERROR: Request body failed validation
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    FINALIZING = "finalizing"
    SOLVED = "solved"
    ENDED = "ended"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_COMMAND = "INVALID_COMMAND"
    MODULE_NOT_FOUND = "MODULE_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# =============================================================================
# Requests
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Create a bomb carrying one Simon Sonundrum."""
    modules: list[str] = Field(
        default_factory=list,
        description="Names of the other modules on the bomb (repeats allowed)",
    )
    ignored_modules: list[str] = Field(
        default_factory=list,
        description="Extra module names to ignore",
    )
    seed: Optional[int] = Field(None, description="Random seed for reproducible commands")


class PressRequest(BaseModel):
    button: str = Field(description="tl, tr, bl or br")


class CommandRequest(BaseModel):
    command: str = Field(description='Remote command, e.g. "tl"')


class SolveModuleRequest(BaseModel):
    module: str = Field(description="Name of the module to mark solved")


class TickRequest(BaseModel):
    ticks: int = Field(5, ge=1, le=100_000, description="Frames to advance")


class ForceSolveRequest(BaseModel):
    max_ticks: int = Field(10_000, ge=1, le=1_000_000)


# =============================================================================
# Responses
# =============================================================================

class StageInfo(BaseModel):
    """One command Simon gave."""
    stage: Optional[int] = Field(None, description="None for the final command")
    text: str
    applied: bool
    conditional: bool = Field(description="Whether the command began with the conditional prefix")
    final: bool = False
    did_nothing: bool = False


class SessionResponse(BaseModel):
    """Current state of a session."""
    session_id: str
    status: SessionStatus
    stage: int
    stage_display: str
    display_text: str
    modules: list[str] = Field(default_factory=list)
    solved_modules: list[str] = Field(default_factory=list)
    strikes: int = 0
    solved: bool = False
    required_press: Optional[str] = None
    required_solve: Optional[str] = None
    validator: Optional[str] = None
    history: list[StageInfo] = Field(default_factory=list)
    log: list[str] = Field(default_factory=list)


class ActionResponse(BaseModel):
    """Result of a press, command, solve or tick."""
    success: bool
    message: str = ""
    strikes_added: int = 0
    session: SessionResponse


class SessionListResponse(BaseModel):
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    environment: str


class ErrorResponse(BaseModel):
    """Error payload returned with 4xx/5xx responses."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None
