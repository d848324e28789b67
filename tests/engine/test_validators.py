"""
Zonk - Input Validation Tests
"""

import pytest

from zonk.engine.base import CombinationMatch, DiceSet, Rule
from zonk.engine.errors import InconsistentIndicesError, InvalidDiceError
from zonk.engine.validators import (
    as_dice_set,
    validate_dice_count,
    validate_dice_values,
    validate_round_number,
    validate_score,
    verify_match_indices,
)


class TestValidateDiceCount:
    @pytest.mark.parametrize("count", [1, 3, 6])
    def test_valid_counts(self, count: int):
        assert validate_dice_count(count) == count

    @pytest.mark.parametrize("count", [0, 7, -1])
    def test_out_of_range(self, count: int):
        with pytest.raises(InvalidDiceError):
            validate_dice_count(count)

    @pytest.mark.parametrize("count", [2.0, "3", True])
    def test_non_integer(self, count):
        with pytest.raises(InvalidDiceError):
            validate_dice_count(count)


class TestValidateDiceValues:
    def test_returns_tuple(self):
        assert validate_dice_values([1, 2, 3]) == (1, 2, 3)

    def test_too_few(self):
        with pytest.raises(InvalidDiceError, match="At least"):
            validate_dice_values([])

    def test_too_many(self):
        with pytest.raises(InvalidDiceError, match="At most"):
            validate_dice_values([1] * 7)

    @pytest.mark.parametrize("value", [0, 7, 1.5, "2"])
    def test_bad_face(self, value):
        with pytest.raises(InvalidDiceError, match="index 1"):
            validate_dice_values([1, value])


class TestAsDiceSet:
    def test_passes_dice_set_through(self):
        dice = DiceSet(values=(3, 4), positions=(2, 5))
        assert as_dice_set(dice) is dice

    def test_wraps_sequence(self):
        assert as_dice_set([6, 1]).values == (6, 1)

    def test_min_count_applies_to_dice_sets(self):
        with pytest.raises(InvalidDiceError):
            as_dice_set(DiceSet(values=()), min_count=1)


class TestVerifyMatchIndices:
    def test_consistent_match(self):
        match = CombinationMatch(Rule.SINGLE, 100, (2,), (1,), "Single 1")
        verify_match_indices(match, DiceSet.from_sequence([3, 4, 1]))

    def test_wrong_face(self):
        match = CombinationMatch(Rule.SINGLE, 100, (0,), (1,), "Single 1")
        with pytest.raises(InconsistentIndicesError, match="expected 1"):
            verify_match_indices(match, DiceSet.from_sequence([3, 4, 1]))

    def test_out_of_range(self):
        match = CombinationMatch(Rule.SINGLE, 100, (5,), (1,), "Single 1")
        with pytest.raises(InconsistentIndicesError, match="out of range"):
            verify_match_indices(match, DiceSet.from_sequence([1, 1]))


class TestScoreAndRound:
    def test_valid_score(self):
        assert validate_score(350) == 350

    def test_negative_score(self):
        with pytest.raises(ValueError):
            validate_score(-50)

    def test_negative_allowed(self):
        assert validate_score(-50, allow_negative=True) == -50

    def test_round_must_be_positive(self):
        assert validate_round_number(1) == 1
        with pytest.raises(ValueError):
            validate_round_number(0)
