"""
Display helpers for the module's two screens.

The text screen fits 28 characters per line; the stage screen shows
three digits, or "???" for the final stage.
"""

from __future__ import annotations


DISPLAY_WIDTH = 28

UNKNOWN_STAGE = "???"


def wrap_for_display(text: str, width: int = DISPLAY_WIDTH) -> str:
    """
    Break `text` into lines the way the scroll display does.

    Characters are appended one at a time. Once the current line is longer
    than `width` and does not end in a space, the last space on it becomes
    a line break. A single word longer than `width` is left unbroken.
    """
    shown = ""
    line = ""
    for ch in text:
        line += ch
        shown += ch
        if len(line) > width and not line.endswith(" ") and " " in line:
            shown = shown[:shown.rindex(" ")]
            line = line[line.rindex(" ") + 1:]
            shown += "\n" + line
    return shown


def format_stage_number(stage: int | None) -> str:
    if stage is None:
        return UNKNOWN_STAGE
    return f"{stage:03d}"
