"""
Zonk - Behavior Mode Analyzer

Picks the opponent's behavior mode from the scoreboard. The opponent
plays passively only while it leads by more than a buffer, and the
buffer shrinks as the game goes on so late leads are protected sooner.
"""

import logging

from zonk.config.settings import Settings, get_settings
from zonk.engine.base import BehaviorMode
from zonk.engine.validators import validate_round_number, validate_score

logger = logging.getLogger(__name__)


class BehaviorAnalyzer:
    """Stateless scoreboard analysis."""

    @classmethod
    def buffer_cap(cls, round_number: int, config: Settings | None = None) -> int:
        """
        Lead required before the opponent turns passive.

        Starts at the initial buffer and drops every few rounds, never
        below the configured minimum.
        """
        config = config or get_settings()
        validate_round_number(round_number)
        cycles = (round_number - 1) // config.rounds_per_reduction
        reduced = config.initial_buffer_cap - cycles * config.buffer_reduction_per_round
        return max(reduced, config.minimum_buffer_cap)

    @classmethod
    def determine_mode(
        cls,
        ai_score: int,
        opponent_score: int,
        round_number: int = 1,
        config: Settings | None = None,
    ) -> BehaviorMode:
        """
        Passive when leading by more than the buffer, aggressive otherwise.

        Close games default to aggressive.
        """
        config = config or get_settings()
        validate_score(ai_score)
        validate_score(opponent_score)

        buffer = cls.buffer_cap(round_number, config)
        difference = ai_score - opponent_score
        mode = BehaviorMode.PASSIVE if difference > buffer else BehaviorMode.AGGRESSIVE

        logger.debug(
            "Round %d: difference %+d, buffer %d -> %s",
            round_number, difference, buffer, mode.value,
        )
        return mode

    @classmethod
    def score_cap_for(cls, mode: BehaviorMode, config: Settings | None = None) -> int:
        config = config or get_settings()
        return config.score_cap_for(mode.is_aggressive)
