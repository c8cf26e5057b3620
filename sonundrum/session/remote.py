"""
Remote control - Text commands that press buttons on behalf of a viewer.
"""

from __future__ import annotations

from ..engine_core.rule import Button


HELP_MESSAGE = "Valid buttons are tl, tr, bl, and br."

_TOKENS = {button.token: button for button in Button}


def parse_command(command: str) -> Button | None:
    """Map "tl", "tr", "bl" or "br" (any case, padded) to a button."""
    return _TOKENS.get(command.strip().lower())
