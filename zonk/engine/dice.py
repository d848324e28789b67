"""
Zonk - Dice Generator

Produces dice values without physics. Uniform by default; an optional
safety mode biases small rolls toward scoring templates so the opponent
busts less often on its last few dice.
"""

import logging
import random

from zonk.config.settings import Settings, get_settings
from zonk.engine.base import MAX_DICE, MAX_FACE, MIN_FACE, DiceSet
from zonk.engine.validators import validate_dice_count

logger = logging.getLogger(__name__)


class DiceGenerator:
    """
    Seedable dice source for the opponent.

    All randomness flows through one ``random.Random`` instance so a seed
    reproduces a whole turn.
    """

    NUM_DICE = MAX_DICE

    FOUR_DICE_TEMPLATES: tuple[tuple[int, ...], ...] = (
        (1, 2, 3, 4), (2, 3, 4, 5), (3, 4, 5, 6),
        (1, 1, 2, 2), (3, 3, 4, 4), (5, 5, 6, 6),
        (1, 1, 1, 1), (2, 2, 2, 2), (3, 3, 3, 3),
        (4, 4, 4, 4), (5, 5, 5, 5), (6, 6, 6, 6),
    )
    THREE_DICE_TEMPLATES: tuple[tuple[int, ...], ...] = (
        (1, 2, 3), (2, 3, 4), (3, 4, 5), (4, 5, 6),
        (1, 1, 1), (2, 2, 2), (3, 3, 3),
        (4, 4, 4), (5, 5, 5), (6, 6, 6),
    )
    TWO_DICE_TEMPLATES: tuple[tuple[int, ...], ...] = (
        (1, 1), (2, 2), (3, 3), (4, 4), (5, 5), (6, 6),
    )
    ONE_DIE_TEMPLATES: tuple[tuple[int, ...], ...] = ((1,), (5,))

    def __init__(
        self,
        rng: random.Random | None = None,
        settings: Settings | None = None,
        safety_enabled: bool | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._settings = settings or get_settings()
        if safety_enabled is None:
            safety_enabled = self._settings.safety_dice_enabled
        self.safety_enabled = safety_enabled

    def roll(self, count: int = NUM_DICE) -> DiceSet:
        """
        Roll ``count`` dice on positions 0..count-1.

        Raises:
            InvalidDiceError: If count is outside 1-6
        """
        validate_dice_count(count)
        return DiceSet(values=self._values(count))

    def roll_fresh_six(self) -> DiceSet:
        """Full board after a hot streak."""
        return self.roll(self.NUM_DICE)

    def reroll(self, dice: DiceSet) -> DiceSet:
        """
        Roll fresh values for exactly the physical dice still in play.

        Positions keep their order so a display collaborator can match
        each new value to the die it already shows.
        """
        validate_dice_count(len(dice))
        return DiceSet(values=self._values(len(dice)), positions=dice.positions)

    def _values(self, count: int) -> tuple[int, ...]:
        if self.safety_enabled and 1 <= count <= 4:
            biased = self._try_safety_values(count)
            if biased is not None:
                logger.debug("Safety dice for %d dice: %s", count, biased)
                return tuple(biased)
        return tuple(self._rng.randint(MIN_FACE, MAX_FACE) for _ in range(count))

    def _try_safety_values(self, count: int) -> list[int] | None:
        """Walk the template chain from ``count`` dice down to one die."""
        s = self._settings

        if count == 4 and self._chance(s.safety_four_dice_probability):
            return self._shuffled(self.FOUR_DICE_TEMPLATES)
        if count == 3 and self._chance(s.safety_three_dice_probability):
            return self._shuffled(self.THREE_DICE_TEMPLATES)
        if count == 2 and self._chance(s.safety_two_dice_probability):
            return self._shuffled(self.TWO_DICE_TEMPLATES)

        # Fallback chain, padded with uniform dice
        if count >= 3 and self._chance(s.safety_three_dice_probability):
            return self._padded(self._shuffled(self.THREE_DICE_TEMPLATES), count)
        if count >= 2 and self._chance(s.safety_two_dice_probability):
            return self._padded(self._shuffled(self.TWO_DICE_TEMPLATES), count)
        if self._chance(s.safety_one_die_probability):
            return self._padded(self._shuffled(self.ONE_DIE_TEMPLATES), count)

        return None

    def _chance(self, probability: float) -> bool:
        return self._rng.random() < probability

    def _shuffled(self, templates: tuple[tuple[int, ...], ...]) -> list[int]:
        values = list(self._rng.choice(templates))
        self._rng.shuffle(values)
        return values

    def _padded(self, values: list[int], count: int) -> list[int]:
        while len(values) < count:
            values.append(self._rng.randint(MIN_FACE, MAX_FACE))
        return values
