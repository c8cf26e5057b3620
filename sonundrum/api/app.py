"""
FastAPI Application - REST API for driving simulated modules.

Endpoints:
    GET    /api/v1/health                          Health check
    POST   /api/v1/sessions                        Create a bomb session
    GET    /api/v1/sessions                        List active sessions
    GET    /api/v1/sessions/{id}                   Get session status
    DELETE /api/v1/sessions/{id}                   End session
    POST   /api/v1/sessions/{id}/press             Press a button (tl/tr/bl/br)
    POST   /api/v1/sessions/{id}/command           Remote-control command
    POST   /api/v1/sessions/{id}/solve             Solve another module
    POST   /api/v1/sessions/{id}/tick              Advance frames
    POST   /api/v1/sessions/{id}/force-solve       Press whatever is required until solved

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional, Union
import os

from .. import __version__

# Environment configuration
SONUNDRUM_ENV = os.getenv("SONUNDRUM_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
        from fastapi.encoders import jsonable_encoder
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from ..config import EngineConfig
    from ..session import SessionManager
    from .service import APIService, SessionNotFoundError
    from .schemas import (
        # Request models
        CreateSessionRequest,
        PressRequest,
        CommandRequest,
        SolveModuleRequest,
        TickRequest,
        ForceSolveRequest,
        # Response models
        SessionResponse,
        ActionResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
        ErrorResponse,
        # Enums
        ErrorCode,
    )

    app = FastAPI(
        title="Simon Sonundrum API",
        description="""
Drive a Simon Sonundrum module on a simulated bomb.

## Flow

1. `POST /sessions` with the other modules on the bomb
2. Read `display_text`; press buttons with `POST /press`
3. Solve other modules with `POST /solve`; each solve gives a new command
4. After the last solve, the final command is given; its press solves the module

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `INVALID_COMMAND` | Button or command token not recognised |
| `MODULE_NOT_FOUND` | No unsolved module with that name |
| `VALIDATION_ERROR` | Request body failed validation |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(
        session_manager=SessionManager(config=EngineConfig.from_env())
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(),
        )

    def not_found(e: SessionNotFoundError) -> JSONResponse:
        return make_error_response(ErrorCode.SESSION_NOT_FOUND, str(e), status_code=404)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request, exc: RequestValidationError) -> JSONResponse:
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request body failed validation",
            status_code=422,
            details={"errors": jsonable_encoder(exc.errors())},
        )

    # =========================================================================
    # Health
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["System"])
    async def health() -> HealthResponse:
        return HealthResponse(version=__version__, environment=SONUNDRUM_ENV)

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        tags=["Sessions"],
        summary="Create a bomb carrying one module",
    )
    async def create_session(body: CreateSessionRequest) -> SessionResponse:
        """The stage 0 command is given immediately."""
        return api_service.create_session(body)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response.error_code, response.error, status_code=404)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        success = api_service.end_session(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Module Input Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/press",
        response_model=ActionResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Module"],
        summary="Press a button",
    )
    async def press(session_id: str, body: PressRequest) -> Union[ActionResponse, JSONResponse]:
        try:
            return api_service.press(session_id, body.button)
        except SessionNotFoundError as e:
            return not_found(e)
        except ValueError as e:
            return make_error_response(ErrorCode.INVALID_COMMAND, str(e))

    @app.post(
        "/api/v1/sessions/{session_id}/command",
        response_model=ActionResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Module"],
        summary="Run a remote-control command",
    )
    async def command(session_id: str, body: CommandRequest) -> Union[ActionResponse, JSONResponse]:
        """Valid commands are tl, tr, bl and br."""
        try:
            return api_service.command(session_id, body.command)
        except SessionNotFoundError as e:
            return not_found(e)
        except ValueError as e:
            return make_error_response(ErrorCode.INVALID_COMMAND, str(e))

    @app.post(
        "/api/v1/sessions/{session_id}/solve",
        response_model=ActionResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Module"],
        summary="Solve another module on the bomb",
    )
    async def solve_module(
        session_id: str, body: SolveModuleRequest
    ) -> Union[ActionResponse, JSONResponse]:
        try:
            return api_service.solve_module(session_id, body.module)
        except SessionNotFoundError as e:
            return not_found(e)
        except ValueError as e:
            return make_error_response(ErrorCode.MODULE_NOT_FOUND, str(e))

    @app.post(
        "/api/v1/sessions/{session_id}/tick",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Module"],
        summary="Advance frames",
    )
    async def tick(session_id: str, body: TickRequest) -> Union[ActionResponse, JSONResponse]:
        try:
            return api_service.tick(session_id, body.ticks)
        except SessionNotFoundError as e:
            return not_found(e)

    @app.post(
        "/api/v1/sessions/{session_id}/force-solve",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Module"],
        summary="Press the required button until the module is solved",
    )
    async def force_solve(
        session_id: str, body: ForceSolveRequest
    ) -> Union[ActionResponse, JSONResponse]:
        try:
            return api_service.force_solve(session_id, body.max_ticks)
        except SessionNotFoundError as e:
            return not_found(e)

    return app


# For running directly: uvicorn sonundrum.api.app:app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass
