"""
Stage Engine - Drives one Simon Sonundrum module through a bomb.

Lifecycle:
1. On creation the module states its only rule ("follow commands that
   begin with 'Simon Says:'") and gives the stage 0 command.
2. Every time a collaborating module is solved, one new command is given.
3. When every non-ignored module is solved, the final command is given;
   pressing the button it demands solves the module.

For each command the current validator decides whether it applies. An
applied command may demand a button press, demand a specific module be
solved next, or replace the validator.

Every mistake costs exactly one strike and the module carries on.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from itertools import count
from typing import Any
import logging
import random

from ..config import EngineConfig
from .boundary import BombInfo, ModuleBoundary
from .catalog import RuleCatalog, default_catalog
from .rule import BoardState, Button, Rule, RuleContext
from .validator import PrefixValidator, Validator, is_vacuous


logger = logging.getLogger(__name__)

_module_ids = count(1)

DO_NOTHING_TEXT = "Simon Says: Do nothing."


class EnginePhase(Enum):
    """Where the module is in its lifecycle."""
    IDLE = "idle"  # Nothing demanded of the defuser
    AWAITING_OBLIGATION = "awaiting_obligation"  # A press or a solve is owed
    FINALIZING = "finalizing"  # Final command given, waiting for its press
    SOLVED = "solved"


@dataclass
class StageResult:
    """Outcome of one command being given."""
    stage: int | None
    rule: Rule
    applied: bool
    required_press: Button | None = None
    required_solve: str | None = None
    validator_changed: bool = False
    final: bool = False
    did_nothing: bool = False

    @property
    def text(self) -> str:
        return self.rule.text


class StageEngine:
    """
    The module's rule engine.

    Usage:
        engine = StageEngine(bomb, boundary)
        engine.poll()                      # call periodically
        engine.press(Button.TOP_LEFT)      # on button input
    """

    def __init__(
        self,
        bomb: BombInfo,
        boundary: ModuleBoundary,
        config: EngineConfig | None = None,
        catalog: RuleCatalog | None = None,
        rng: random.Random | None = None,
        validator: Validator | None = None,
    ):
        self.bomb = bomb
        self.boundary = boundary
        self.config = config or EngineConfig()
        self.catalog = catalog or default_catalog(self.config, rng=rng)
        self.module_id = next(_module_ids)

        self.stage = 0
        self.validator: Validator = validator or PrefixValidator(self.config.conditional_prefix)
        self.required_press: Button | None = None
        self.required_solve: str | None = None
        self.previous_applied = False
        self.solving = False
        self.solve_on_press = False
        self.is_solved = False
        self.seen_solved: list[str] = []
        self.history: list[StageResult] = []

        self.log("To begin, there is exactly one rule.")
        self.log(
            "Whenever and only whenever Simon gives a command that begins with "
            f'the phrase "{self.config.conditional_prefix.strip()}", follow that command exactly.'
        )

        self.advance_stage()

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def phase(self) -> EnginePhase:
        if self.is_solved:
            return EnginePhase.SOLVED
        if self.solving:
            return EnginePhase.FINALIZING
        if self.required_press is not None or self.required_solve is not None:
            return EnginePhase.AWAITING_OBLIGATION
        return EnginePhase.IDLE

    @property
    def solves_required(self) -> int:
        ignored = self.config.ignored_modules
        return sum(1 for n in self.bomb.get_solvable_module_names() if n not in ignored)

    @property
    def progress(self) -> int:
        return len(self.seen_solved)

    # =========================================================================
    # Stage transitions
    # =========================================================================

    def advance_stage(self) -> StageResult | None:
        """
        Give the next command.

        The validator in force before the command is drawn decides whether
        it applies. Its outputs overwrite the outstanding obligations.
        """
        if self.is_solved:
            return None

        self._strike_for_missed_press()

        context = self._make_context()
        rule = self.catalog.draw_allowed(context)
        self.log(f'Simon\'s new statement: "{rule.text}"')

        applied = self.validator.check(rule, self.previous_applied)
        self.previous_applied = applied
        if applied:
            rule.apply(context)

        self.log("Do apply this rule." if applied else "Don't apply this rule.")

        self.required_press = context.required_press
        self.required_solve = context.required_solve

        if self.required_press is not None:
            self.log("This means that you need to press a button.")

        validator_changed = context.new_validator is not None
        if validator_changed:
            self.validator = context.new_validator
            self.log("This means that the conditions for when to apply rules have changed.")
        if self.required_solve is not None:
            self.log("This means that you must solve a specific module next.")

        self.boundary.display_stage_number(self.stage)
        self.boundary.display_text(rule.text)

        result = StageResult(
            stage=self.stage,
            rule=rule,
            applied=applied,
            required_press=self.required_press,
            required_solve=self.required_solve,
            validator_changed=validator_changed,
        )
        self.history.append(result)
        return result

    def finalize(self) -> StageResult | None:
        """
        Give the final command.

        If the validator rejects both sentinel rules, Simon first says
        "do nothing", which counts as a command and flips the followed flag.
        The final command is then redrawn until the validator accepts it.
        """
        if self.is_solved:
            return None

        self.solving = True
        self._strike_for_missed_press()
        self.boundary.display_stage_number(None)

        did_nothing = is_vacuous(self.validator, self.previous_applied)
        if did_nothing:
            self.boundary.display_text(DO_NOTHING_TEXT)
            self.log(f'Simon\'s statement: "{DO_NOTHING_TEXT}"')
            self.previous_applied = not self.previous_applied

        board = self._board()
        rule = self.catalog.draw_final(board, self.validator, self.previous_applied)

        self.log(f'Simon\'s last statement: "{rule.text}"')
        self.log("Do apply this rule.")
        self.log("This means that you need to press a button.")

        self.boundary.display_text(rule.text)

        context = self._make_context(board)
        rule.apply(context)
        self.required_press = context.required_press
        self.solve_on_press = True

        result = StageResult(
            stage=None,
            rule=rule,
            applied=True,
            required_press=self.required_press,
            final=True,
            did_nothing=did_nothing,
        )
        self.history.append(result)
        return result

    # =========================================================================
    # Inputs
    # =========================================================================

    def poll(self) -> list[str]:
        """
        Diff the bomb's solved list against what has been seen and react.

        Returns the newly seen solves. Calling it again with nothing new
        changes nothing.
        """
        ignored = self.config.ignored_modules
        fresh = Counter(n for n in self.bomb.get_solved_module_names() if n not in ignored)
        fresh.subtract(self.seen_solved)
        delta = [name for name in fresh.elements()]
        self.on_external_progress(delta)
        return delta

    def on_external_progress(self, newly_solved: list[str]):
        """
        Handle module solves since the last call.

        Checks a pending "solve X next" obligation, then gives one command
        per new solve, or the final command once every module is solved.
        """
        if newly_solved:
            self.seen_solved.extend(newly_solved)
            if self.required_solve is not None:
                if self.required_solve in newly_solved:
                    self.log("Correct solve.")
                else:
                    self.log("Incorrect solve. Strike!")
                    self.boundary.report_strike()
                self.required_solve = None

        progress = self.progress

        if not self.solving and not self.is_solved:
            if progress >= self.solves_required:
                self.stage = progress
                self.finalize()
            else:
                while self.stage < progress:
                    self.stage += 1
                    self.advance_stage()

        self.stage = progress

    def press(self, button: Button) -> bool:
        """
        Handle a button press. Returns True if the press was expected.

        A wrong press strikes and leaves the obligation in place.
        """
        if self.is_solved:
            return False

        button = Button(button)
        if self.required_press == button:
            self.log("Good button press.")
            self.required_press = None
            if self.solve_on_press:
                self.log("Module solved!")
                self.is_solved = True
                self.boundary.report_pass()
            return True

        self.log(f"You pressed button {int(button)} when you weren't supposed to. Strike!")
        self.boundary.report_strike()
        return False

    # =========================================================================
    # Helpers
    # =========================================================================

    def snapshot(self) -> dict[str, Any]:
        """Plain-data view of the session state."""
        return {
            "module_id": self.module_id,
            "phase": self.phase.value,
            "stage": self.stage,
            "progress": self.progress,
            "solves_required": self.solves_required,
            "required_press": self.required_press.token if self.required_press else None,
            "required_solve": self.required_solve,
            "previous_applied": self.previous_applied,
            "validator": self.validator.describe(),
            "is_solved": self.is_solved,
        }

    def _board(self) -> BoardState:
        return BoardState(
            solvable_modules=tuple(self.bomb.get_solvable_module_names()),
            solved_modules=tuple(self.bomb.get_solved_module_names()),
        )

    def _make_context(self, board: BoardState | None = None) -> RuleContext:
        return RuleContext(
            board=board or self._board(),
            config=self.config,
            stage=self.stage,
            old_validator=self.validator,
            previous_applied=self.previous_applied,
        )

    def _strike_for_missed_press(self):
        if self.required_press is not None:
            self.log("You were required to press a button and you didn't. Strike!")
            self.boundary.report_strike()
            self.required_press = None

    def log(self, message: str):
        line = f"[{self.config.module_name} #{self.module_id}] {message}"
        logger.info(line)
        self.boundary.log(line)
