"""
Engine Core - Rule generation, validation and stage progression.

The engine is the runtime that:
1. Draws random commands from a weighted catalog
2. Rejects commands that are not allowed on the current bomb
3. Decides with the current validator whether each command applies
4. Tracks the button presses and solves the defuser owes
"""

from .rule import (
    Rule,
    RuleKind,
    RuleContext,
    BoardState,
    Button,
    LetterClass,
    Parity,
    dummy_applied,
    dummy_not_applied,
)
from .validator import (
    Validator,
    ValidationQuery,
    PrefixValidator,
    LetterParityValidator,
    InvertedValidator,
    AlternationValidator,
    is_vacuous,
)
from .catalog import (
    RuleCatalog,
    RuleGenerator,
    WeightedEntry,
    ConfigurationError,
    RuleLegalityError,
    default_catalog,
)
from .boundary import BombInfo, ModuleBoundary, SimulatedBomb, RecordingBoundary
from .stage_engine import StageEngine, StageResult, EnginePhase

__all__ = [
    "Rule",
    "RuleKind",
    "RuleContext",
    "BoardState",
    "Button",
    "LetterClass",
    "Parity",
    "dummy_applied",
    "dummy_not_applied",
    "Validator",
    "ValidationQuery",
    "PrefixValidator",
    "LetterParityValidator",
    "InvertedValidator",
    "AlternationValidator",
    "is_vacuous",
    "RuleCatalog",
    "RuleGenerator",
    "WeightedEntry",
    "ConfigurationError",
    "RuleLegalityError",
    "default_catalog",
    "BombInfo",
    "ModuleBoundary",
    "SimulatedBomb",
    "RecordingBoundary",
    "StageEngine",
    "StageResult",
    "EnginePhase",
]
