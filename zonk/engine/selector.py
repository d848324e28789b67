"""
Zonk - Combination Selector

Chooses which scoring combination the opponent banks on each step.

Two phases:
    - Accumulation (4+ dice in play and below the cap): take the biggest
      combination worth at least the configured floor.
    - Full-clear (3 or fewer dice, or at/over the cap): clear the board
      if any combination uses every die, otherwise spend as few dice as
      possible.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from zonk.config.settings import Settings, get_settings
from zonk.engine.base import BehaviorMode, DiceSet, SelectionPhase, StrategyCandidate
from zonk.engine.scoring import CombinationScorer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selection:
    """
    Result of one selection step.

    Attributes:
        candidate: Chosen combination, or None on a bust
        phase: Policy that made the choice
        reason: Human-readable explanation
    """
    candidate: StrategyCandidate | None
    phase: SelectionPhase
    reason: str

    @property
    def is_bust(self) -> bool:
        return self.candidate is None


class CombinationSelector:
    """Stateless two-phase selection policy."""

    @classmethod
    def determine_phase(
        cls,
        dice_in_play: int,
        accumulated_score: int,
        score_cap: int,
        config: Settings | None = None,
    ) -> SelectionPhase:
        config = config or get_settings()
        if dice_in_play >= config.accumulation_min_dice and accumulated_score < score_cap:
            return SelectionPhase.ACCUMULATION
        return SelectionPhase.FULL_CLEAR

    @classmethod
    def select(
        cls,
        dice: Sequence[int] | DiceSet,
        mode: BehaviorMode,
        accumulated_score: int,
        score_cap: int,
        config: Settings | None = None,
    ) -> Selection:
        """
        Pick the combination to bank from ``dice``.

        Args:
            dice: Dice currently in play
            mode: Opponent behavior mode
            accumulated_score: Points banked so far this turn
            score_cap: Points-per-turn ceiling for the mode
            config: Tuning constants

        Returns:
            Selection with the chosen candidate (None on a bust)
        """
        config = config or get_settings()
        candidates = CombinationScorer.find_candidates(dice)
        phase = cls.determine_phase(len(dice), accumulated_score, score_cap, config)

        if not candidates:
            return Selection(candidate=None, phase=phase, reason="No scoring combination")

        if phase is SelectionPhase.ACCUMULATION:
            selection = cls._select_accumulation(candidates, mode, config)
        else:
            selection = cls._select_full_clear(candidates, len(dice), mode, config)

        logger.debug(
            "%s phase picked %s from %d candidates: %s",
            phase.value,
            selection.candidate.match.description,
            len(candidates),
            selection.reason,
        )
        return selection

    @classmethod
    def _select_accumulation(
        cls,
        candidates: list[StrategyCandidate],
        mode: BehaviorMode,
        config: Settings,
    ) -> Selection:
        floor = config.accumulation_min_points
        worthwhile = [c for c in candidates if c.points >= floor]

        if worthwhile:
            best = min(
                worthwhile,
                key=lambda c: (-c.points, -c.strategic_value, c.tier, c.match.indices),
            )
            return Selection(
                candidate=best,
                phase=SelectionPhase.ACCUMULATION,
                reason=f"Highest points ({best.points}) at or above {floor}",
            )

        best = CombinationScorer.select_minimum_dice(candidates, mode, config)
        return Selection(
            candidate=best,
            phase=SelectionPhase.ACCUMULATION,
            reason=f"Nothing worth {floor}+, minimum dice fallback",
        )

    @classmethod
    def _select_full_clear(
        cls,
        candidates: list[StrategyCandidate],
        dice_in_play: int,
        mode: BehaviorMode,
        config: Settings,
    ) -> Selection:
        clearing = [c for c in candidates if c.dice_used == dice_in_play]

        if clearing:
            best = min(
                clearing,
                key=lambda c: (-c.points, c.tier, c.match.indices),
            )
            return Selection(
                candidate=best,
                phase=SelectionPhase.FULL_CLEAR,
                reason=f"Clears all {dice_in_play} dice",
            )

        best = CombinationScorer.select_minimum_dice(candidates, mode, config)
        return Selection(
            candidate=best,
            phase=SelectionPhase.FULL_CLEAR,
            reason=f"Minimum dice: {best.dice_used} of {dice_in_play}",
        )
