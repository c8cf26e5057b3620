"""
Rules - The commands Simon gives, as immutable tagged values.

A Rule is one of a fixed set of shapes (RuleKind). Every shape shares the
same two operations:
- apply(context): write the rule's effect into a RuleContext
- is_allowed(context): decide whether the rule may be shown at all

The juxtaposition shape embeds two other rules and delegates both
operations to them instead of carrying effects of its own.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import TYPE_CHECKING

from .validator import (
    AlternationValidator,
    InvertedValidator,
    LetterParityValidator,
    Validator,
)

if TYPE_CHECKING:
    from ..config import EngineConfig


class Button(IntEnum):
    """The four buttons, numbered the way the module wires them."""
    TOP_LEFT = 1
    TOP_RIGHT = 2
    BOTTOM_LEFT = 3
    BOTTOM_RIGHT = 4

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "-")

    @property
    def token(self) -> str:
        """Short remote-control token: tl, tr, bl, br."""
        top, side = self.name.split("_")
        return top[0].lower() + side[0].lower()


class LetterClass(Enum):
    """Letters a text-parity validator counts."""
    VOWELS = "aeiouAEIOU"
    LETTER_I = "iI"

    def count(self, text: str) -> int:
        return sum(1 for c in text if c in self.value)

    @property
    def description(self) -> str:
        if self is LetterClass.VOWELS:
            return "vowels in them. (Y is not a vowel.)"
        return "the letter I in them."


class Parity(IntEnum):
    EVEN = 0
    ODD = 1

    @property
    def label(self) -> str:
        return self.name.lower()


class RuleKind(Enum):
    """Rule shapes."""
    PRESS_BUTTON = "press_button"
    TEXT_PARITY = "text_parity"
    INVERT_VALIDATOR = "invert_validator"
    SOLVE_NEXT = "solve_next"
    ALTERNATION = "alternation"
    JUXTAPOSITION = "juxtaposition"
    SENTINEL = "sentinel"  # Dummy rules used only to probe validators


@dataclass(frozen=True)
class BoardState:
    """Read-only view of the bomb at the moment a rule is considered."""
    solvable_modules: tuple[str, ...] = ()
    solved_modules: tuple[str, ...] = ()

    def unsolved_candidates(self, ignored: frozenset[str]) -> list[str]:
        """Distinct solvable names with no solved instance, minus the ignore list."""
        solved = set(self.solved_modules)
        seen: list[str] = []
        for name in self.solvable_modules:
            if name in solved or name in ignored or name in seen:
                continue
            seen.append(name)
        return seen

    def count_of(self, name: str) -> int:
        return Counter(self.solvable_modules)[name]


@dataclass
class RuleContext:
    """
    Everything a rule may read, plus the slots its effect writes.

    Created fresh for each rule under consideration and discarded once
    the session has copied the outputs.
    """
    board: BoardState
    config: EngineConfig
    stage: int
    old_validator: Validator
    previous_applied: bool

    # Outputs written by Rule.apply
    required_press: Button | None = None
    required_solve: str | None = None
    new_validator: Validator | None = None


@dataclass(frozen=True)
class Rule:
    """
    One command.

    Only the fields belonging to `kind` are set; `branches` holds the
    (followed, not_followed) pair for a juxtaposition.
    """
    kind: RuleKind
    body: str
    prefix: str = ""
    button: Button | None = None
    letter_class: LetterClass | None = None
    parity: Parity | None = None
    module_name: str | None = None
    branches: tuple[Rule, Rule] | None = field(default=None, repr=False)

    @property
    def text(self) -> str:
        return self.prefix + self.body

    @property
    def is_conditional(self) -> bool:
        return self.prefix != ""

    def apply(self, context: RuleContext) -> None:
        """Write this rule's effect into `context`."""
        kind = self.kind
        if kind == RuleKind.PRESS_BUTTON:
            context.required_press = self.button
        elif kind == RuleKind.TEXT_PARITY:
            context.new_validator = LetterParityValidator(self.letter_class, self.parity)
        elif kind == RuleKind.INVERT_VALIDATOR:
            context.new_validator = InvertedValidator(context.old_validator)
        elif kind == RuleKind.SOLVE_NEXT:
            context.required_solve = self.module_name
        elif kind == RuleKind.ALTERNATION:
            context.new_validator = AlternationValidator()
        elif kind == RuleKind.JUXTAPOSITION:
            followed, otherwise = self.branches
            (followed if context.previous_applied else otherwise).apply(context)

    def is_allowed(self, context: RuleContext) -> bool:
        """Whether the rule may be shown in `context`."""
        if self.kind == RuleKind.SOLVE_NEXT:
            return _solve_next_allowed(self, context)
        if self.kind == RuleKind.JUXTAPOSITION:
            followed, otherwise = self.branches
            return (
                context.stage != 0
                and followed.is_allowed(context)
                and otherwise.is_allowed(context)
            )
        return True


def _solve_next_allowed(rule: Rule, context: RuleContext) -> bool:
    config = context.config
    board = context.board
    if rule.module_name is None:
        return False
    if not board.unsolved_candidates(config.ignored_modules):
        return False
    denylist = config.denylist
    if any(name in denylist for name in board.solvable_modules):
        return False
    return board.count_of(config.module_name) <= 1


# =============================================================================
# Sentinels
# =============================================================================

def dummy_applied() -> Rule:
    """Probe rule with a one-letter body and no prefix."""
    return Rule(kind=RuleKind.SENTINEL, body="I")


def dummy_not_applied() -> Rule:
    """Probe rule with an empty body and no prefix."""
    return Rule(kind=RuleKind.SENTINEL, body="")
