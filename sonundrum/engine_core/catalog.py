"""
Rule Catalog - Weighted random generation of rules.

The catalog holds an ordered list of generators, each with an integer
weight, and one generator for the final command. Drawing a rule:
1. Pick a number uniformly below the weight sum
2. Walk the cumulative weight table; the first entry whose cumulative
   weight exceeds the number wins
3. Ask that generator for one concrete Rule

Legality is not the generators' concern: callers redraw until a rule's
is_allowed() passes (see draw_allowed / draw_final).
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from bisect import bisect_right
from dataclasses import dataclass
from itertools import accumulate
import random

from ..config import EngineConfig
from .rule import (
    BoardState,
    Button,
    LetterClass,
    Parity,
    Rule,
    RuleContext,
    RuleKind,
)
from .validator import Validator


class ConfigurationError(Exception):
    """Raised when the weighted generator table is unusable."""


class RuleLegalityError(Exception):
    """Raised when a bounded draw runs out of attempts without a legal rule."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"No allowed rule after {attempts} draw(s)")


JUXTAPOSITION_MARKER = "If"


class RuleGenerator(ABC):
    """Produces one rule shape."""

    kind: RuleKind

    @abstractmethod
    def generate(self, catalog: RuleCatalog, board: BoardState) -> Rule:
        pass


class ButtonRuleGenerator(RuleGenerator):
    kind = RuleKind.PRESS_BUTTON

    def generate(self, catalog: RuleCatalog, board: BoardState) -> Rule:
        button = catalog.rng.choice(list(Button))
        return Rule(
            kind=self.kind,
            prefix=catalog.roll_prefix(),
            body=f"Press the {button.label} button.",
            button=button,
        )


class TextParityRuleGenerator(RuleGenerator):
    kind = RuleKind.TEXT_PARITY

    def generate(self, catalog: RuleCatalog, board: BoardState) -> Rule:
        letters = catalog.rng.choice(list(LetterClass))
        parity = catalog.rng.choice(list(Parity))
        return Rule(
            kind=self.kind,
            prefix=catalog.roll_prefix(),
            body=(
                "Follow my commands when and only when they have an "
                f"{parity.label} amount of {letters.description}"
            ),
            letter_class=letters,
            parity=parity,
        )


class InvertValidatorRuleGenerator(RuleGenerator):
    kind = RuleKind.INVERT_VALIDATOR

    def generate(self, catalog: RuleCatalog, board: BoardState) -> Rule:
        return Rule(
            kind=self.kind,
            prefix=catalog.roll_prefix(),
            body=(
                "Follow my commands when and only when you wouldn't have "
                "immediately before this command."
            ),
        )


class SolveNextRuleGenerator(RuleGenerator):
    """
    "Solve X next." X is picked among unsolved, non-ignored modules.

    When there is nothing to pick the rule still gets built, with no
    module name, and is_allowed() rejects it.
    """
    kind = RuleKind.SOLVE_NEXT

    def generate(self, catalog: RuleCatalog, board: BoardState) -> Rule:
        candidates = board.unsolved_candidates(catalog.config.ignored_modules)
        module_name = catalog.rng.choice(candidates) if candidates else None
        return Rule(
            kind=self.kind,
            prefix=catalog.roll_prefix(),
            body=f"Solve {module_name or 'ERROR'} next.",
            module_name=module_name,
        )


class AlternationRuleGenerator(RuleGenerator):
    kind = RuleKind.ALTERNATION

    def generate(self, catalog: RuleCatalog, board: BoardState) -> Rule:
        return Rule(
            kind=self.kind,
            prefix=catalog.roll_prefix(),
            body="Follow my commands when and only when you didn't follow the previous command.",
        )


class JuxtapositionRuleGenerator(RuleGenerator):
    """
    "If you followed my previous command, A Otherwise, B"

    A and B come from the catalog's regular draw. Neither may itself be a
    juxtaposition, and B may not repeat A.
    """
    kind = RuleKind.JUXTAPOSITION

    def generate(self, catalog: RuleCatalog, board: BoardState) -> Rule:
        followed = catalog.random_rule(board)
        while followed.body.startswith(JUXTAPOSITION_MARKER):
            followed = catalog.random_rule(board)

        otherwise = catalog.random_rule(board)
        while otherwise.body.startswith(JUXTAPOSITION_MARKER) or otherwise.body == followed.body:
            otherwise = catalog.random_rule(board)

        return Rule(
            kind=self.kind,
            prefix=catalog.roll_prefix(),
            body=(
                f"{JUXTAPOSITION_MARKER} you followed my previous command, "
                f"{followed.body} Otherwise, {otherwise.body}"
            ),
            branches=(followed, otherwise),
        )


@dataclass(frozen=True)
class WeightedEntry:
    generator: RuleGenerator
    weight: int


class RuleCatalog:
    """
    Weighted registry of rule generators.

    Usage:
        catalog = default_catalog(config, rng=random.Random(42))
        rule = catalog.draw_allowed(context)
    """

    def __init__(
        self,
        entries: list[WeightedEntry],
        final_generator: RuleGenerator,
        config: EngineConfig | None = None,
        rng: random.Random | None = None,
    ):
        if not entries:
            raise ConfigurationError("Rule catalog has no generators")
        bad = [e for e in entries if e.weight <= 0]
        if bad:
            raise ConfigurationError(
                f"Generator weights must be positive: {[e.generator.kind.value for e in bad]}"
            )

        self.entries = list(entries)
        self.final_generator = final_generator
        self.config = config or EngineConfig()
        self.rng = rng or random.Random()

        self._cumulative = list(accumulate(e.weight for e in self.entries))

    @property
    def total_weight(self) -> int:
        return self._cumulative[-1]

    def roll_prefix(self) -> str:
        """The conditional marker, with even odds."""
        return self.config.conditional_prefix if self.rng.randrange(2) == 1 else ""

    def pick_entry(self, selection: int) -> WeightedEntry:
        """Map a number in [0, total_weight) to its generator entry."""
        index = bisect_right(self._cumulative, selection)
        if index >= len(self.entries):
            raise ConfigurationError(f"Selection {selection} outside weight table")
        return self.entries[index]

    def random_rule(self, board: BoardState) -> Rule:
        """Draw one non-final rule. Legality is not checked."""
        entry = self.pick_entry(self.rng.randrange(self.total_weight))
        return entry.generator.generate(self, board)

    def random_final_rule(self, board: BoardState) -> Rule:
        return self.final_generator.generate(self, board)

    def draw_allowed(self, context: RuleContext, max_attempts: int | None = None) -> Rule:
        """
        Draw until a rule is allowed in `context`.

        Unbounded by default; with `max_attempts` a RuleLegalityError is
        raised once the attempts run out.
        """
        attempts = 0
        while max_attempts is None or attempts < max_attempts:
            attempts += 1
            rule = self.random_rule(context.board)
            if rule.is_allowed(context):
                return rule
        raise RuleLegalityError(attempts)

    def draw_final(
        self,
        board: BoardState,
        validator: Validator,
        previous_applied: bool,
        max_attempts: int | None = None,
    ) -> Rule:
        """Draw final rules until one satisfies `validator`."""
        attempts = 0
        while max_attempts is None or attempts < max_attempts:
            attempts += 1
            rule = self.random_final_rule(board)
            if validator.check(rule, previous_applied):
                return rule
        raise RuleLegalityError(attempts)


# Relative weights of the standard rule shapes
DEFAULT_WEIGHTS: list[tuple[type[RuleGenerator], int]] = [
    (ButtonRuleGenerator, 7),
    (TextParityRuleGenerator, 2),
    (InvertValidatorRuleGenerator, 1),
    (SolveNextRuleGenerator, 1),
    (AlternationRuleGenerator, 1),
    (JuxtapositionRuleGenerator, 1),
]


def default_catalog(
    config: EngineConfig | None = None,
    rng: random.Random | None = None,
) -> RuleCatalog:
    """Build the standard catalog; the final command is always a button press."""
    return RuleCatalog(
        entries=[WeightedEntry(generator=cls(), weight=w) for cls, w in DEFAULT_WEIGHTS],
        final_generator=ButtonRuleGenerator(),
        config=config,
        rng=rng,
    )
