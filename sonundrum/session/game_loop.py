"""
Module Loop - The host's fixed-update cycle for one module.

The host calls tick() once per frame. Every `poll_interval` ticks the
engine diffs the bomb's solved list against what it has already seen.
Polling is level-triggered, so extra ticks with nothing new are harmless.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..engine_core.rule import Button
from .remote import parse_command

if TYPE_CHECKING:
    from ..engine_core.stage_engine import StageEngine


@dataclass
class TickResult:
    """What happened during a batch of ticks."""
    ticks: int
    polls: int = 0
    newly_solved: list[str] = field(default_factory=list)
    presses: list[Button] = field(default_factory=list)
    solved: bool = False


class ModuleLoop:
    """
    Drives a StageEngine from frames and text commands.

    Usage:
        loop = ModuleLoop(engine)
        loop.tick(5)             # advance five frames
        loop.handle_command("tl")
    """

    def __init__(self, engine: StageEngine, poll_interval: int | None = None):
        self.engine = engine
        self.poll_interval = poll_interval or engine.config.poll_interval
        self._ticker = 0

    def tick(self, frames: int = 1) -> TickResult:
        result = TickResult(ticks=frames)
        for _ in range(frames):
            self._ticker += 1
            if self._ticker == self.poll_interval:
                self._ticker = 0
                result.polls += 1
                result.newly_solved.extend(self.engine.poll())
        result.solved = self.engine.is_solved
        return result

    def handle_command(self, command: str) -> bool | None:
        """
        Press the button named by a remote command.

        Returns None for an unrecognised command, otherwise whether the
        press was the expected one.
        """
        button = parse_command(command)
        if button is None:
            return None
        return self.engine.press(button)

    def force_solve(self, max_ticks: int = 10_000) -> TickResult:
        """
        Keep issuing the required press until the module is solved.

        While nothing is owed the loop keeps ticking, so stages that are
        still waiting on other modules block until `max_ticks` runs out.
        """
        engine = self.engine
        engine.log("Module force solved.")
        result = TickResult(ticks=0)
        while not engine.is_solved and result.ticks < max_ticks:
            if engine.required_press is not None:
                button = engine.required_press
                engine.press(button)
                result.presses.append(button)
                continue
            step = self.tick()
            result.ticks += 1
            result.polls += step.polls
            result.newly_solved.extend(step.newly_solved)
        result.solved = engine.is_solved
        return result
