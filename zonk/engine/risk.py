"""
Zonk - Stop/Continue Risk Model

Decides whether the opponent keeps rolling after banking a combination.
Two independent stop chances are computed and each gets its own draw:

    momentum = base(mode) × fibonacci(streaks) × success_momentum(successes)
               × dice_risk(dice left) × iteration_pressure(streaks)
    cap      = 0 below the cap, then base + growth × steps over the cap

The turn stops if either draw fires, which is the same as one draw
against 1 - (1 - momentum) × (1 - cap).
"""

import logging
import math
import random
from collections import Counter
from functools import lru_cache
from itertools import combinations_with_replacement

from zonk.config.settings import Settings, get_settings
from zonk.engine.base import MAX_FACE, MIN_FACE, DecisionOverride, StopDecision
from zonk.engine.scoring import CombinationScorer
from zonk.engine.validators import validate_dice_count

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def fibonacci(n: int) -> int:
    """Canonical sequence 1, 1, 2, 3, 5, ... with fibonacci(0) == 1."""
    if n <= 2:
        return 1
    return fibonacci(n - 1) + fibonacci(n - 2)


@lru_cache(maxsize=None)
def bust_probability(dice_count: int) -> float:
    """
    Exact chance that a fresh roll of ``dice_count`` dice cannot score.

    Enumerates every multiset of faces and weights it by the number of
    ordered rolls that produce it.
    """
    validate_dice_count(dice_count)
    faces = range(MIN_FACE, MAX_FACE + 1)
    total = 6 ** dice_count
    busted = 0

    for roll in combinations_with_replacement(faces, dice_count):
        if CombinationScorer.has_any_combination(roll):
            continue
        arrangements = math.factorial(dice_count)
        for count in Counter(roll).values():
            arrangements //= math.factorial(count)
        busted += arrangements

    return busted / total


class RiskModel:
    """
    Stateless stop/continue model.

    Configuration and the random source are passed into every call.
    """

    @classmethod
    def fibonacci_factor(cls, hot_streak_index: int, config: Settings) -> float:
        if hot_streak_index <= 0:
            return 1.0
        return float(fibonacci(min(hot_streak_index, config.max_fibonacci_index)))

    @classmethod
    def success_momentum(cls, success_count: int, config: Settings) -> float:
        """Consecutive banks damp the stop chance, down to a floor."""
        if success_count <= 0:
            return 1.0
        reduced = 1.0 - success_count * config.momentum_reduction_per_success
        return max(reduced, config.minimum_momentum_multiplier)

    @classmethod
    def dice_risk(cls, dice_remaining: int, config: Settings) -> float:
        """1.0 with plenty of dice, growing superlinearly as they run out."""
        threshold = config.dice_risk_threshold
        if dice_remaining > threshold:
            return 1.0
        shortfall = threshold + 1 - dice_remaining
        return 1.0 + shortfall ** config.dice_risk_exponent * config.dice_risk_multiplier

    @classmethod
    def iteration_pressure(cls, hot_streak_index: int, config: Settings) -> float:
        threshold = config.iteration_pressure_threshold
        if hot_streak_index <= threshold:
            return 1.0
        return 1.0 + (hot_streak_index - threshold) * config.iteration_pressure_increase

    @classmethod
    def momentum_probability(
        cls,
        hot_streak_index: int,
        dice_remaining: int,
        success_count: int,
        is_aggressive: bool,
        config: Settings | None = None,
    ) -> float:
        config = config or get_settings()
        chance = (
            config.base_multiplier_for(is_aggressive)
            * cls.fibonacci_factor(hot_streak_index, config)
            * cls.success_momentum(success_count, config)
            * cls.dice_risk(dice_remaining, config)
            * cls.iteration_pressure(hot_streak_index, config)
        )
        return min(max(chance, 0.0), config.max_momentum_for(is_aggressive))

    @classmethod
    def cap_probability(
        cls,
        projected_score: int,
        score_cap: int,
        is_aggressive: bool,
        config: Settings | None = None,
    ) -> float:
        config = config or get_settings()
        if projected_score < score_cap:
            return 0.0
        steps = (projected_score - score_cap) // config.cap_growth_interval
        chance = config.base_cap_stop_chance + steps * config.cap_growth_rate_for(is_aggressive)
        return min(chance, config.max_cap_stop_chance)

    @staticmethod
    def combine(momentum: float, cap: float) -> float:
        """Probability that at least one of two independent stops fires."""
        return 1.0 - (1.0 - momentum) * (1.0 - cap)

    @classmethod
    def calculate_stop_decision(
        cls,
        hot_streak_index: int,
        dice_remaining: int,
        success_count: int,
        projected_score: int,
        score_cap: int,
        is_aggressive: bool,
        config: Settings | None = None,
        rng: random.Random | None = None,
    ) -> StopDecision:
        """
        Compute both stop chances and draw a verdict.

        Args:
            hot_streak_index: Board clears this turn, including this selection
            dice_remaining: Dice left in play after this selection
            success_count: Selections banked before this one
            projected_score: Turn score including this selection
            score_cap: Points-per-turn ceiling for the mode
            is_aggressive: Behavior mode flag
            config: Tuning constants
            rng: Random source for the two draws

        Returns:
            StopDecision with probabilities, draws and verdict
        """
        config = config or get_settings()
        rng = rng or random.Random()

        momentum = cls.momentum_probability(
            hot_streak_index, dice_remaining, success_count, is_aggressive, config
        )
        cap = cls.cap_probability(projected_score, score_cap, is_aggressive, config)
        combined = cls.combine(momentum, cap)

        override = cls._check_overrides(hot_streak_index, dice_remaining, success_count, config)
        if override is not None:
            should_continue = override is not DecisionOverride.HOT_STREAK_LIMIT
            return StopDecision(
                momentum_probability=momentum,
                cap_probability=cap,
                combined_probability=combined,
                momentum_roll=False,
                cap_roll=False,
                should_continue=should_continue,
                reason=cls._override_reason(override, hot_streak_index, config),
                override=override,
            )

        momentum_roll = rng.random() < momentum
        cap_roll = rng.random() < cap
        should_stop = momentum_roll or cap_roll

        decision = StopDecision(
            momentum_probability=momentum,
            cap_probability=cap,
            combined_probability=combined,
            momentum_roll=momentum_roll,
            cap_roll=cap_roll,
            should_continue=not should_stop,
            reason=cls._roll_reason(
                momentum, cap, combined, momentum_roll, cap_roll, projected_score, score_cap
            ),
        )
        logger.debug(
            "Stop decision: momentum=%.3f cap=%.3f combined=%.3f -> %s",
            momentum, cap, combined, "STOP" if should_stop else "CONTINUE",
        )
        return decision

    @classmethod
    def _check_overrides(
        cls,
        hot_streak_index: int,
        dice_remaining: int,
        success_count: int,
        config: Settings,
    ) -> DecisionOverride | None:
        if hot_streak_index > config.max_hot_streaks:
            return DecisionOverride.HOT_STREAK_LIMIT
        if success_count <= 0:
            return DecisionOverride.FIRST_SELECTION
        if dice_remaining <= 0:
            return DecisionOverride.HOT_STREAK
        return None

    @staticmethod
    def _override_reason(
        override: DecisionOverride,
        hot_streak_index: int,
        config: Settings,
    ) -> str:
        if override is DecisionOverride.HOT_STREAK_LIMIT:
            return f"Hot streak limit exceeded ({hot_streak_index} > {config.max_hot_streaks})"
        if override is DecisionOverride.FIRST_SELECTION:
            return "First selection of the turn always continues"
        return "Hot streak - all dice used, continuing with a fresh six"

    @staticmethod
    def _roll_reason(
        momentum: float,
        cap: float,
        combined: float,
        momentum_roll: bool,
        cap_roll: bool,
        projected_score: int,
        score_cap: int,
    ) -> str:
        if momentum_roll and cap_roll:
            return f"Both momentum ({momentum:.1%}) and cap ({cap:.1%}) rolls fired"
        if momentum_roll:
            return f"Momentum roll fired ({momentum:.1%})"
        if cap_roll:
            return f"Cap roll fired ({cap:.1%}) at {projected_score} points (cap {score_cap})"
        return (
            f"Continue - combined stop chance {combined:.1%} missed "
            f"(momentum {momentum:.1%}, cap {cap:.1%})"
        )
