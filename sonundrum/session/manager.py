"""
Session Manager - Creates and manages module sessions.

A session is one simulated bomb carrying one Simon Sonundrum module:
- Created with the names of the other modules on the bomb
- Holds the engine, its loop, and the recorded outputs
- Destroyed when ended, ALL state deleted

There is no persistence. Sessions live in memory for the life of the
process.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import random
import time
import uuid

from ..config import EngineConfig
from ..engine_core.boundary import RecordingBoundary, SimulatedBomb
from ..engine_core.catalog import RuleCatalog
from ..engine_core.stage_engine import StageEngine, EnginePhase
from .game_loop import ModuleLoop


class SessionState(Enum):
    """State of a module session."""
    ACTIVE = "active"  # Commands still being given
    FINALIZING = "finalizing"  # Final command given
    SOLVED = "solved"
    ENDED = "ended"


@dataclass
class ModuleSession:
    """
    An ephemeral bomb with one module under test.

    Contains:
    - The simulated bomb (other modules and their solves)
    - The engine and the loop that ticks it
    - Everything the engine reported (strikes, texts, log lines)
    """
    session_id: str
    created_at: float
    config: EngineConfig
    bomb: SimulatedBomb
    boundary: RecordingBoundary
    engine: StageEngine
    loop: ModuleLoop
    seed: int | None = None
    ended: bool = False

    @property
    def state(self) -> SessionState:
        if self.ended:
            return SessionState.ENDED
        phase = self.engine.phase
        if phase == EnginePhase.SOLVED:
            return SessionState.SOLVED
        if phase == EnginePhase.FINALIZING:
            return SessionState.FINALIZING
        return SessionState.ACTIVE

    def is_active(self) -> bool:
        return self.state in {SessionState.ACTIVE, SessionState.FINALIZING}

    def other_modules(self) -> list[str]:
        """Modules on the bomb that count toward progress."""
        ignored = self.config.ignored_modules
        return [name for name in self.bomb.modules if name not in ignored]

    def solve_module(self, name: str):
        """Solve one instance of another module, then let the engine notice."""
        if name == self.config.module_name:
            raise ValueError("The module under test cannot be solved this way")
        self.bomb.solve(name)
        self.loop.tick(self.loop.poll_interval)


class SessionManager:
    """
    Manages module sessions.

    No persistence - sessions are in-memory only.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()
        self._sessions: dict[str, ModuleSession] = {}

    def create_session(
        self,
        modules: list[str],
        ignored_modules: list[str] | None = None,
        seed: int | None = None,
        catalog: RuleCatalog | None = None,
    ) -> ModuleSession:
        """
        Create a new session.

        Args:
            modules: Names of the other modules on the bomb
            ignored_modules: Extra names added to the ignore list
            seed: Random seed for reproducible commands
            catalog: Rule catalog to draw from instead of the default one

        Returns:
            New ModuleSession with the stage 0 command already given
        """
        config = self.config.with_ignored(ignored_modules) if ignored_modules else self.config

        bomb = SimulatedBomb(modules=[config.module_name, *modules])
        boundary = RecordingBoundary()
        engine = StageEngine(
            bomb=bomb,
            boundary=boundary,
            config=config,
            catalog=catalog,
            rng=random.Random(seed),
        )

        session = ModuleSession(
            session_id=str(uuid.uuid4()),
            created_at=time.time(),
            config=config,
            bomb=bomb,
            boundary=boundary,
            engine=engine,
            loop=ModuleLoop(engine),
            seed=seed,
        )

        self._sessions[session.session_id] = session
        return session

    def get_session(self, session_id: str) -> ModuleSession | None:
        return self._sessions.get(session_id)

    def end_session(self, session_id: str) -> bool:
        """Remove a session. Returns False if it did not exist."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.ended = True
        return True

    def list_active_sessions(self) -> list[str]:
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Remove finished sessions older than max_age.

        Returns the number of sessions removed.
        """
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds and not session.is_active()
        ]
        for session_id in to_remove:
            self.end_session(session_id)
        return len(to_remove)
