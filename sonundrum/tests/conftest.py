"""
Pytest fixtures for Sonundrum tests.
"""

import random

import pytest

from ..config import EngineConfig
from ..engine_core.boundary import RecordingBoundary, SimulatedBomb
from ..engine_core.catalog import RuleCatalog, RuleGenerator, WeightedEntry, default_catalog
from ..engine_core.rule import (
    BoardState,
    Button,
    Rule,
    RuleContext,
    RuleKind,
)
from ..engine_core.validator import PrefixValidator


PREFIX = "Simon Says: "


class ScriptedGenerator(RuleGenerator):
    """Hands out prepared rules in order, repeating the last one."""

    kind = RuleKind.PRESS_BUTTON

    def __init__(self, rules):
        self.rules = list(rules)
        self.calls = 0

    def generate(self, catalog, board):
        rule = self.rules[min(self.calls, len(self.rules) - 1)]
        self.calls += 1
        return rule


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def catalog(config, rng) -> RuleCatalog:
    """Standard catalog with a fixed seed."""
    return default_catalog(config, rng=rng)


@pytest.fixture
def boundary() -> RecordingBoundary:
    return RecordingBoundary()


@pytest.fixture
def bomb() -> SimulatedBomb:
    """A bomb with this module and two others."""
    return SimulatedBomb(modules=["Simon Sonundrum", "Wires", "Maze"])


@pytest.fixture
def empty_bomb() -> SimulatedBomb:
    """A bomb with nothing but this module."""
    return SimulatedBomb(modules=["Simon Sonundrum"])


@pytest.fixture
def board(bomb) -> BoardState:
    return BoardState(
        solvable_modules=tuple(bomb.modules),
        solved_modules=tuple(bomb.solved),
    )


@pytest.fixture
def make_context(config, board):
    """Factory for rule contexts on the default board."""

    def _make(stage=1, previous_applied=False, validator=None, board_state=None, cfg=None):
        return RuleContext(
            board=board_state or board,
            config=cfg or config,
            stage=stage,
            old_validator=validator or PrefixValidator(PREFIX),
            previous_applied=previous_applied,
        )

    return _make


@pytest.fixture
def press_rule():
    """Factory for button-press rules."""

    def _make(button=Button.TOP_LEFT, conditional=True):
        return Rule(
            kind=RuleKind.PRESS_BUTTON,
            prefix=PREFIX if conditional else "",
            body=f"Press the {Button(button).label} button.",
            button=Button(button),
        )

    return _make


@pytest.fixture
def solve_rule():
    """Factory for solve-next rules."""

    def _make(module_name="Maze", conditional=True):
        return Rule(
            kind=RuleKind.SOLVE_NEXT,
            prefix=PREFIX if conditional else "",
            body=f"Solve {module_name} next.",
            module_name=module_name,
        )

    return _make


@pytest.fixture
def scripted_catalog(config):
    """
    Factory for catalogs that hand out prepared rules.

    `rules` feed the regular draw; `final_rules` feed the final draw.
    """

    def _make(rules, final_rules=None):
        return RuleCatalog(
            entries=[WeightedEntry(generator=ScriptedGenerator(rules), weight=1)],
            final_generator=ScriptedGenerator(final_rules or rules),
            config=config,
            rng=random.Random(0),
        )

    return _make
