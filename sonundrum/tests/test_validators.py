"""
Tests for validators.

Tests:
- Each validator's truth table
- Composition by inversion
- Predecessors captured by value
- Vacuity check against the sentinels
"""

import pytest

from ..engine_core.rule import Button, LetterClass, Parity, Rule, RuleKind
from ..engine_core.validator import (
    AlternationValidator,
    InvertedValidator,
    LetterParityValidator,
    PrefixValidator,
    ValidationQuery,
    is_vacuous,
)
from .conftest import PREFIX


def _text_rule(text: str) -> Rule:
    return Rule(kind=RuleKind.SENTINEL, body=text)


class TestPrefixValidator:

    def test_accepts_prefixed(self, press_rule):
        validator = PrefixValidator(PREFIX)
        assert validator.check(press_rule(conditional=True), previous_applied=False)

    def test_rejects_unprefixed(self, press_rule):
        validator = PrefixValidator(PREFIX)
        assert not validator.check(press_rule(conditional=False), previous_applied=True)

    def test_query_object(self, press_rule):
        validator = PrefixValidator(PREFIX)
        query = ValidationQuery(rule=press_rule(), previous_applied=False)
        assert validator(query)


class TestLetterParityValidator:

    def test_counts_vowels_case_insensitive(self):
        assert LetterClass.VOWELS.count("AbE iOu y") == 5
        assert LetterClass.LETTER_I.count("Ii i") == 3

    def test_counts_prefix_too(self, press_rule):
        """The whole text, prefix included, is counted."""
        validator = LetterParityValidator(LetterClass.LETTER_I, Parity.ODD)
        # "Press the top-left button." has no I; "Simon" adds one.
        assert validator.check(press_rule(Button.TOP_LEFT, conditional=True), False)
        assert not validator.check(press_rule(Button.TOP_LEFT, conditional=False), False)

    def test_even_zero_matches(self):
        validator = LetterParityValidator(LetterClass.LETTER_I, Parity.EVEN)
        assert validator.check(_text_rule("Press the top-left button."), False)
        assert validator.check(_text_rule(""), True)

    def test_depends_only_on_candidate_text(self):
        """The validator holds letters and parity, never the text of the rule that set it."""
        validator = LetterParityValidator(LetterClass.VOWELS, Parity.EVEN)
        assert validator.check(_text_rule("bcd"), False)
        assert not validator.check(_text_rule("bad"), False)
        assert validator.check(_text_rule("bead"), False)
        assert validator == LetterParityValidator(LetterClass.VOWELS, Parity.EVEN)

    def test_ignores_previous_applied(self):
        validator = LetterParityValidator(LetterClass.VOWELS, Parity.ODD)
        rule = _text_rule("a")
        assert validator.check(rule, True) == validator.check(rule, False)


class TestInvertedValidator:

    @pytest.mark.parametrize("conditional", [True, False])
    @pytest.mark.parametrize("previous_applied", [True, False])
    def test_double_inversion_round_trips(self, press_rule, conditional, previous_applied):
        base = PrefixValidator(PREFIX)
        twice = InvertedValidator(InvertedValidator(base))
        rule = press_rule(conditional=conditional)
        assert twice.check(rule, previous_applied) == base.check(rule, previous_applied)

    def test_single_inversion_negates(self, press_rule):
        inverted = InvertedValidator(PrefixValidator(PREFIX))
        assert not inverted.check(press_rule(conditional=True), False)
        assert inverted.check(press_rule(conditional=False), False)

    def test_predecessor_is_frozen(self, press_rule):
        """Replacing the current validator later does not reach into an inverted one."""
        current = PrefixValidator(PREFIX)
        inverted = InvertedValidator(current)
        current = AlternationValidator()
        assert inverted.inner == PrefixValidator(PREFIX)
        assert inverted.check(press_rule(conditional=False), previous_applied=False)


class TestAlternationValidator:

    def test_follows_previous_flag_only(self, press_rule):
        validator = AlternationValidator()
        for conditional in (True, False):
            rule = press_rule(conditional=conditional)
            assert validator.check(rule, previous_applied=False)
            assert not validator.check(rule, previous_applied=True)


class TestVacuity:

    def test_prefix_validator_is_vacuous(self):
        """Neither sentinel carries the prefix."""
        assert is_vacuous(PrefixValidator(PREFIX), previous_applied=False)
        assert is_vacuous(PrefixValidator(PREFIX), previous_applied=True)

    def test_alternation_vacuous_only_after_followed(self):
        assert is_vacuous(AlternationValidator(), previous_applied=True)
        assert not is_vacuous(AlternationValidator(), previous_applied=False)

    def test_parity_never_vacuous(self):
        for letters in LetterClass:
            for parity in Parity:
                assert not is_vacuous(LetterParityValidator(letters, parity), False)

    def test_inverted_prefix_not_vacuous(self):
        assert not is_vacuous(InvertedValidator(PrefixValidator(PREFIX)), False)
