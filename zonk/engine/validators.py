"""
Zonk - Input Validation Utilities

Provides validation functions for engine inputs. All validators either
return validated data or raise a descriptive exception from
``zonk.engine.errors``.
"""

from typing import Sequence

from zonk.engine.base import MAX_DICE, MAX_FACE, MIN_FACE, CombinationMatch, DiceSet
from zonk.engine.errors import InconsistentIndicesError, InvalidDiceError


def validate_dice_count(count: int) -> int:
    """
    Validate the number of dice to roll.

    Raises:
        InvalidDiceError: If count is not an integer between 1 and 6
    """
    if not isinstance(count, int) or isinstance(count, bool):
        raise InvalidDiceError(f"Dice count must be an integer, got {type(count).__name__}.")
    if not (1 <= count <= MAX_DICE):
        raise InvalidDiceError(f"Dice count must be between 1 and {MAX_DICE}, got {count}.")
    return count


def validate_dice_values(
    values: Sequence[int],
    min_count: int = 1,
    max_count: int = MAX_DICE
) -> tuple[int, ...]:
    """
    Validate and normalize dice values.

    Args:
        values: Sequence of dice values to validate
        min_count: Minimum number of dice required
        max_count: Maximum number of dice allowed

    Returns:
        Validated values as a tuple

    Raises:
        InvalidDiceError: If validation fails
    """
    values_tuple = tuple(values)
    count = len(values_tuple)

    if count < min_count:
        raise InvalidDiceError(f"At least {min_count} dice required, got {count}.")

    if count > max_count:
        raise InvalidDiceError(f"At most {max_count} dice allowed, got {count}.")

    for i, value in enumerate(values_tuple):
        if not isinstance(value, int) or isinstance(value, bool):
            raise InvalidDiceError(
                f"Die value at index {i} must be an integer, got {type(value).__name__}."
            )
        if not (MIN_FACE <= value <= MAX_FACE):
            raise InvalidDiceError(
                f"Die value at index {i} is {value}, must be between {MIN_FACE} and {MAX_FACE}."
            )

    return values_tuple


def as_dice_set(dice: Sequence[int] | DiceSet, min_count: int = 0) -> DiceSet:
    """Accept either a DiceSet or a plain sequence of values."""
    if isinstance(dice, DiceSet):
        if len(dice) < min_count:
            raise InvalidDiceError(f"At least {min_count} dice required, got {len(dice)}.")
        return dice
    return DiceSet.from_sequence(validate_dice_values(dice, min_count=min_count))


def verify_match_indices(match: CombinationMatch, dice: DiceSet) -> None:
    """
    Check that a match's indices address its values in ``dice``.

    Raises:
        InconsistentIndicesError: If any index is out of range or points at
            a different face than the match recorded
    """
    for idx, expected in zip(match.indices, match.dice_values):
        if not (0 <= idx < len(dice)):
            raise InconsistentIndicesError(
                f"{match.description}: index {idx} out of range for {len(dice)} dice."
            )
        if dice[idx] != expected:
            raise InconsistentIndicesError(
                f"{match.description}: die {idx} shows {dice[idx]}, expected {expected}."
            )


def validate_score(score: int, allow_negative: bool = False) -> int:
    """
    Validate a score value.

    Raises:
        ValueError: If score is invalid
    """
    if not isinstance(score, int):
        raise ValueError(f"Score must be an integer, got {type(score).__name__}.")

    if not allow_negative and score < 0:
        raise ValueError(f"Score cannot be negative, got {score}.")

    return score


def validate_round_number(round_number: int) -> int:
    """
    Validate a 1-based round number.

    Raises:
        ValueError: If the round is not a positive integer
    """
    if not isinstance(round_number, int):
        raise ValueError(f"Round must be an integer, got {type(round_number).__name__}.")

    if round_number < 1:
        raise ValueError(f"Round must be positive, got {round_number}.")

    return round_number
