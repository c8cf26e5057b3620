"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to session/engine calls
2. Manages sessions
3. Formats responses

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
Bad input raises ValueError; unknown sessions raise SessionNotFoundError.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .schemas import (
    ActionResponse,
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    SessionResponse,
    SessionStatus,
    StageInfo,
)
from ..engine_core.display import format_stage_number
from ..session import SessionManager, ModuleSession, parse_command, HELP_MESSAGE


class SessionNotFoundError(LookupError):
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} not found")


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        session = service.create_session(CreateSessionRequest(modules=["Wires"]))
        service.press(session.session_id, "tl")
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        session = self.session_manager.create_session(
            modules=request.modules,
            ignored_modules=request.ignored_modules or None,
            seed=request.seed,
        )
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return ErrorResponse(
                error=f"Session {session_id} not found",
                error_code=ErrorCode.SESSION_NOT_FOUND,
            )
        return self._session_to_response(session)

    def end_session(self, session_id: str) -> bool:
        return self.session_manager.end_session(session_id)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    # =========================================================================
    # Actions
    # =========================================================================

    def press(self, session_id: str, button: str) -> ActionResponse:
        """Press a button given as tl/tr/bl/br."""
        session = self._require(session_id)
        parsed = parse_command(button)
        if parsed is None:
            raise ValueError(f"Unknown button: {button!r}. {HELP_MESSAGE}")

        strikes_before = session.boundary.strikes
        accepted = session.engine.press(parsed)
        return self._action(
            session,
            success=accepted,
            message="Good button press." if accepted else "Strike!",
            strikes_before=strikes_before,
        )

    def command(self, session_id: str, command: str) -> ActionResponse:
        """Run a remote-control command."""
        session = self._require(session_id)
        strikes_before = session.boundary.strikes
        accepted = session.loop.handle_command(command)
        if accepted is None:
            raise ValueError(f"Unknown command: {command!r}. {HELP_MESSAGE}")
        return self._action(
            session,
            success=accepted,
            message="Good button press." if accepted else "Strike!",
            strikes_before=strikes_before,
        )

    def solve_module(self, session_id: str, module: str) -> ActionResponse:
        """Mark another module solved and let the engine react."""
        session = self._require(session_id)
        strikes_before = session.boundary.strikes
        session.solve_module(module)
        return self._action(
            session,
            success=True,
            message=f"Solved {module}.",
            strikes_before=strikes_before,
        )

    def tick(self, session_id: str, ticks: int) -> ActionResponse:
        session = self._require(session_id)
        strikes_before = session.boundary.strikes
        result = session.loop.tick(ticks)
        return self._action(
            session,
            success=True,
            message=f"Advanced {result.ticks} tick(s), {result.polls} poll(s).",
            strikes_before=strikes_before,
        )

    def force_solve(self, session_id: str, max_ticks: int = 10_000) -> ActionResponse:
        session = self._require(session_id)
        strikes_before = session.boundary.strikes
        result = session.loop.force_solve(max_ticks=max_ticks)
        return self._action(
            session,
            success=result.solved,
            message=(
                "Module solved." if result.solved
                else "Module is still waiting on other modules."
            ),
            strikes_before=strikes_before,
        )

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    def _require(self, session_id: str) -> ModuleSession:
        session = self.session_manager.get_session(session_id)
        if not session:
            raise SessionNotFoundError(session_id)
        return session

    def _action(
        self,
        session: ModuleSession,
        success: bool,
        message: str,
        strikes_before: int,
    ) -> ActionResponse:
        return ActionResponse(
            success=success,
            message=message,
            strikes_added=session.boundary.strikes - strikes_before,
            session=self._session_to_response(session),
        )

    def _session_to_response(self, session: ModuleSession) -> SessionResponse:
        engine = session.engine
        boundary = session.boundary
        stage_display = boundary.current_stage_display or format_stage_number(engine.stage)

        return SessionResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            stage=engine.stage,
            stage_display=stage_display,
            display_text=boundary.current_text,
            modules=session.other_modules(),
            solved_modules=list(engine.seen_solved),
            strikes=boundary.strikes,
            solved=engine.is_solved,
            required_press=engine.required_press.token if engine.required_press else None,
            required_solve=engine.required_solve,
            validator=engine.validator.describe(),
            history=[
                StageInfo(
                    stage=r.stage,
                    text=r.text,
                    applied=r.applied,
                    conditional=r.rule.is_conditional,
                    final=r.final,
                    did_nothing=r.did_nothing,
                )
                for r in engine.history
            ],
            log=list(boundary.log_lines),
        )
