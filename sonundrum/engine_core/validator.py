"""
Validators - Predicates deciding whether a command should be followed.

A validator answers one question: given the rule Simon just said and
whether the previous rule was followed, should this rule be followed?

Validators are frozen values. A validator built on top of another one
(InvertedValidator) holds its predecessor itself, not a reference to the
session's "current validator" slot, so later replacements never leak
into it.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .rule import Rule, LetterClass, Parity


@dataclass(frozen=True)
class ValidationQuery:
    """Input to a validator."""
    rule: Rule
    previous_applied: bool


class Validator(ABC):
    """Base class for validators."""

    @abstractmethod
    def __call__(self, query: ValidationQuery) -> bool:
        pass

    @abstractmethod
    def describe(self) -> str:
        """Human-readable condition, for logs."""
        pass

    def check(self, rule: Rule, previous_applied: bool) -> bool:
        return self(ValidationQuery(rule=rule, previous_applied=previous_applied))


@dataclass(frozen=True)
class PrefixValidator(Validator):
    """Follow exactly the commands starting with `prefix`."""
    prefix: str

    def __call__(self, query: ValidationQuery) -> bool:
        return query.rule.text.startswith(self.prefix)

    def describe(self) -> str:
        return f'the command begins with "{self.prefix.strip()}"'


@dataclass(frozen=True)
class LetterParityValidator(Validator):
    """Follow commands whose full text has `parity` many letters of `letters`."""
    letters: LetterClass
    parity: Parity

    def __call__(self, query: ValidationQuery) -> bool:
        return self.letters.count(query.rule.text) % 2 == self.parity

    def describe(self) -> str:
        return f"the command has an {self.parity.label} amount of {self.letters.description}"


@dataclass(frozen=True)
class InvertedValidator(Validator):
    inner: Validator

    def __call__(self, query: ValidationQuery) -> bool:
        return not self.inner(query)

    def describe(self) -> str:
        return f"NOT ({self.inner.describe()})"


@dataclass(frozen=True)
class AlternationValidator(Validator):
    """Follow a command exactly when the previous one was not followed."""

    def __call__(self, query: ValidationQuery) -> bool:
        return not query.previous_applied

    def describe(self) -> str:
        return "the previous command was not followed"


def is_vacuous(validator: Validator, previous_applied: bool) -> bool:
    """
    True when `validator` rejects both sentinel rules.

    Used before the final command: such a validator could never be
    satisfied by content alone, so the module says "do nothing" first.
    """
    from .rule import dummy_applied, dummy_not_applied

    return not (
        validator.check(dummy_applied(), previous_applied)
        or validator.check(dummy_not_applied(), previous_applied)
    )
