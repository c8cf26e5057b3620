"""
Session Module - Ephemeral bombs for running a module end to end.

A session represents one bomb:
- Created with the names of the other modules
- Holds the engine, its frame loop and the recorded outputs
- Destroyed when ended

Sessions are EPHEMERAL: nothing is written to disk.
"""

from .manager import SessionManager, ModuleSession, SessionState
from .game_loop import ModuleLoop, TickResult
from .remote import parse_command, HELP_MESSAGE

__all__ = [
    "SessionManager",
    "ModuleSession",
    "SessionState",
    "ModuleLoop",
    "TickResult",
    "parse_command",
    "HELP_MESSAGE",
]
