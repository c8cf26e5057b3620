"""
Boundary - What the engine talks to outside itself.

Inputs:  BombInfo (which collaborating modules exist / are solved)
Outputs: ModuleBoundary (strikes, pass, display text, stage number, log lines)

In-memory implementations are provided for sessions, the CLI and tests.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field

from .display import format_stage_number


class BombInfo(ABC):
    """Read-only view of the other modules on the bomb."""

    @abstractmethod
    def get_solvable_module_names(self) -> list[str]:
        """One entry per solvable module instance (names may repeat)."""
        pass

    @abstractmethod
    def get_solved_module_names(self) -> list[str]:
        """One entry per solved module instance (names may repeat)."""
        pass


class ModuleBoundary(ABC):
    """Sink for everything the engine reports."""

    @abstractmethod
    def report_strike(self):
        pass

    @abstractmethod
    def report_pass(self):
        pass

    @abstractmethod
    def display_text(self, text: str):
        pass

    @abstractmethod
    def display_stage_number(self, stage: int | None):
        """Show the stage; None means the final, unknown stage."""
        pass

    def log(self, line: str):
        """Receive one trace line. Ignored unless overridden."""


@dataclass
class SimulatedBomb(BombInfo):
    """
    A bomb held in memory.

    `modules` lists every solvable module instance, including this one.
    """
    modules: list[str] = field(default_factory=list)
    solved: list[str] = field(default_factory=list)

    def get_solvable_module_names(self) -> list[str]:
        return list(self.modules)

    def get_solved_module_names(self) -> list[str]:
        return list(self.solved)

    def unsolved(self) -> list[str]:
        """Names with at least one unsolved instance, one entry per instance."""
        solved = Counter(self.solved)
        result = []
        for name in self.modules:
            if solved[name] > 0:
                solved[name] -= 1
            else:
                result.append(name)
        return result

    def solve(self, name: str):
        """Mark one unsolved instance of `name` as solved."""
        remaining = Counter(self.modules)
        remaining.subtract(self.solved)
        if remaining[name] <= 0:
            raise ValueError(f"No unsolved module named {name!r}")
        self.solved.append(name)


@dataclass
class RecordingBoundary(ModuleBoundary):
    """Keeps every output so callers can inspect it afterwards."""
    strikes: int = 0
    passes: int = 0
    texts: list[str] = field(default_factory=list)
    stage_displays: list[str] = field(default_factory=list)
    log_lines: list[str] = field(default_factory=list)

    def report_strike(self):
        self.strikes += 1

    def report_pass(self):
        self.passes += 1

    def display_text(self, text: str):
        self.texts.append(text)

    def display_stage_number(self, stage: int | None):
        self.stage_displays.append(format_stage_number(stage))

    def log(self, line: str):
        self.log_lines.append(line)

    @property
    def current_text(self) -> str:
        return self.texts[-1] if self.texts else ""

    @property
    def current_stage_display(self) -> str:
        return self.stage_displays[-1] if self.stage_displays else ""
