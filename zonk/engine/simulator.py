"""
Zonk - Turn Simulator

Plain state machine that plays one opponent turn:

    ROLLING -> SELECTING -> DECIDED -> ROLLING ... -> COMPLETE

Each ``step()`` scores the dice in play, banks one combination, asks the
risk model whether to go on, and rerolls the dice still in hand (a fresh
six after a hot streak). A host can call ``step()`` once per frame or use
``run_turn()`` to play the whole turn at once; with the same seed both
produce the same trace.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Callable, Sequence

from zonk.config.settings import Settings, get_settings
from zonk.engine.base import (
    BUST_MATCH,
    BehaviorMode,
    DiceSet,
    SelectionRecord,
    TurnOutcome,
    TurnResult,
    TurnState,
    TurnStatus,
)
from zonk.engine.dice import DiceGenerator
from zonk.engine.errors import InvalidDiceError
from zonk.engine.risk import RiskModel
from zonk.engine.selector import CombinationSelector, Selection
from zonk.engine.validators import as_dice_set, verify_match_indices
from zonk.events.events import EventPayload, TurnEvent

logger = logging.getLogger(__name__)


class TurnSimulator:
    """
    Orchestrates a single opponent turn at a time.

    The simulator owns the only TurnState of the running turn. Every other
    component is stateless and receives the configuration explicitly.
    """

    def __init__(
        self,
        config: Settings | None = None,
        *,
        seed: int | None = None,
        rng: random.Random | None = None,
        generator: DiceGenerator | None = None,
        on_event: Callable[[EventPayload], None] | None = None,
    ) -> None:
        self._config = config or get_settings()
        self._rng = rng or random.Random(seed)
        self._generator = generator or DiceGenerator(rng=self._rng, settings=self._config)
        self._on_event = on_event
        self._state: TurnState | None = None
        self._turn_number = 0
        self._banked_before_bust = 0
        self._bust_dice: DiceSet | None = None

    @property
    def config(self) -> Settings:
        return self._config

    @property
    def state(self) -> TurnState | None:
        return self._state

    @property
    def is_complete(self) -> bool:
        return self._state is not None and self._state.is_complete

    def start_turn(
        self,
        mode: BehaviorMode,
        initial_dice: Sequence[int] | DiceSet | None = None,
        score_cap: int | None = None,
    ) -> TurnState:
        """
        Reset state and roll the opening dice.

        Args:
            mode: Behavior mode for the whole turn
            initial_dice: Opening dice (rolled if omitted or invalid)
            score_cap: Points-per-turn ceiling (mode default if omitted)

        Returns:
            The fresh TurnState
        """
        if self._state is not None and not self._state.is_complete:
            logger.warning("Abandoning turn %d before completion", self._turn_number)

        self._turn_number += 1
        self._banked_before_bust = 0
        self._bust_dice = None

        if score_cap is None:
            score_cap = self._config.score_cap_for(mode.is_aggressive)

        dice = self._opening_dice(initial_dice)
        self._state = TurnState(mode=mode, score_cap=score_cap, dice=dice)

        logger.info(
            "Turn %d started: %s mode, cap %d, dice %s",
            self._turn_number, mode.value, score_cap, list(dice.values),
        )
        self._emit(TurnEvent.TURN_STARTED, 0, {
            "mode": mode.value,
            "score_cap": score_cap,
            "dice": list(dice.values),
            "positions": list(dice.positions),
        })
        return self._state

    def step(self) -> SelectionRecord:
        """
        Play one selection step.

        Returns:
            The trace entry appended for this step

        Raises:
            RuntimeError: If no turn is running
            InconsistentIndicesError: If a match does not fit its dice
        """
        state = self._require_running()
        state = replace(state, status=TurnStatus.SELECTING)
        step_number = len(state.history) + 1
        dice = state.dice

        selection = CombinationSelector.select(
            dice, state.mode, state.accumulated_score, state.score_cap, self._config
        )
        if selection.is_bust:
            return self._bust(state, step_number, selection)

        match = selection.candidate.match
        verify_match_indices(match, dice)
        self._emit(TurnEvent.COMBINATION_SELECTED, step_number, {
            "rule": match.rule.name,
            "points": match.points,
            "indices": list(match.indices),
            "description": match.description,
            "phase": selection.phase.value,
            "reason": selection.reason,
        })

        remaining = dice.remove_indices(match.indices)
        self._emit(TurnEvent.DICE_REMOVED, step_number, {
            "indices": list(match.indices),
            "positions": [dice.positions[i] for i in match.indices],
        })

        is_hot_streak = len(remaining) == 0
        hot_streaks = state.hot_streak_count + (1 if is_hot_streak else 0)
        projected = state.accumulated_score + match.points

        decision = RiskModel.calculate_stop_decision(
            hot_streak_index=hot_streaks,
            dice_remaining=len(remaining),
            success_count=state.success_count,
            projected_score=projected,
            score_cap=state.score_cap,
            is_aggressive=state.mode.is_aggressive,
            config=self._config,
            rng=self._rng,
        )
        self._emit(TurnEvent.DECISION_MADE, step_number, {
            "verdict": "CONTINUE" if decision.should_continue else "STOP",
            "reason": decision.reason,
            "momentum_probability": decision.momentum_probability,
            "cap_probability": decision.cap_probability,
            "combined_probability": decision.combined_probability,
        })

        record = SelectionRecord(
            step=step_number,
            dice_before=dice,
            match=match,
            dice_remaining=len(remaining),
            decision=decision,
            phase=selection.phase,
            is_hot_streak=is_hot_streak,
            accumulated_score=projected,
        )
        state = replace(
            state,
            dice=remaining,
            accumulated_score=projected,
            hot_streak_count=hot_streaks,
            selection_count=state.selection_count + 1,
            status=TurnStatus.DECIDED,
            history=state.history + (record,),
        )
        logger.debug(
            "Step %d: %s from %s, %d left, %s",
            step_number, match, list(dice.values), len(remaining), decision.reason,
        )

        if is_hot_streak:
            self._emit(TurnEvent.HOT_STREAK, step_number, {
                "hot_streaks": state.hot_streak_count,
                "accumulated_score": state.accumulated_score,
            })

        max_iterations = self._config.max_iterations_for(state.mode.is_aggressive)
        if decision.should_stop:
            state = self._finish(state, TurnOutcome.STOPPED)
        elif state.selection_count >= max_iterations:
            logger.debug("Iteration limit %d reached", max_iterations)
            state = self._finish(state, TurnOutcome.ITERATION_LIMIT)
        else:
            state = self._reroll(state, step_number, is_hot_streak)

        self._state = state
        return record

    def result(self) -> TurnResult:
        """
        Summarize the completed turn.

        Raises:
            RuntimeError: If the turn has not finished
        """
        if self._state is None or not self._state.is_complete:
            raise RuntimeError("Turn is not complete.")
        state = self._state
        return TurnResult(
            mode=state.mode,
            outcome=state.outcome,
            final_score=state.accumulated_score,
            banked_before_bust=self._banked_before_bust,
            hot_streaks=state.hot_streak_count,
            steps=state.history,
            bust_dice=self._bust_dice,
        )

    def run_turn(
        self,
        mode: BehaviorMode,
        initial_dice: Sequence[int] | DiceSet | None = None,
        score_cap: int | None = None,
    ) -> TurnResult:
        """Play a whole turn eagerly and return its trace."""
        self.start_turn(mode, initial_dice=initial_dice, score_cap=score_cap)
        while not self.is_complete:
            self.step()
        return self.result()

    def _opening_dice(self, initial_dice: Sequence[int] | DiceSet | None) -> DiceSet:
        if initial_dice is None:
            return self._generator.roll_fresh_six()
        try:
            return as_dice_set(initial_dice, min_count=1)
        except InvalidDiceError as exc:
            logger.warning("Rejected opening dice %r (%s), rolling six", initial_dice, exc)
            return self._generator.roll_fresh_six()

    def _require_running(self) -> TurnState:
        if self._state is None:
            raise RuntimeError("No turn in progress. Call start_turn() first.")
        if self._state.is_complete:
            raise RuntimeError("Turn already complete.")
        return self._state

    def _reroll(self, state: TurnState, step_number: int, is_hot_streak: bool) -> TurnState:
        if is_hot_streak:
            dice = self._generator.roll_fresh_six()
        else:
            dice = self._generator.reroll(state.dice)

        self._emit(TurnEvent.DICE_ROLLED, step_number, {
            "dice": list(dice.values),
            "positions": list(dice.positions),
        })
        return replace(state, dice=dice, status=TurnStatus.ROLLING)

    def _bust(self, state: TurnState, step_number: int, selection: Selection) -> SelectionRecord:
        self._banked_before_bust = state.accumulated_score
        self._bust_dice = state.dice

        record = SelectionRecord(
            step=step_number,
            dice_before=state.dice,
            match=BUST_MATCH,
            dice_remaining=len(state.dice),
            decision=None,
            phase=selection.phase,
            is_hot_streak=False,
            accumulated_score=0,
        )
        state = replace(
            state,
            accumulated_score=0,
            history=state.history + (record,),
        )
        logger.debug("Step %d: bust on %s", step_number, list(state.dice.values))
        self._emit(TurnEvent.BUST_OCCURRED, step_number, {
            "dice": list(state.dice.values),
            "lost_points": self._banked_before_bust,
        })

        self._state = self._finish(state, TurnOutcome.BUST)
        return record

    def _finish(self, state: TurnState, outcome: TurnOutcome) -> TurnState:
        state = replace(state, status=TurnStatus.COMPLETE, outcome=outcome)
        logger.info(
            "Turn %d ended: %s with %d points after %d steps",
            self._turn_number, outcome.value, state.accumulated_score, len(state.history),
        )
        self._emit(TurnEvent.TURN_COMPLETED, len(state.history), {
            "outcome": outcome.value,
            "final_score": state.accumulated_score,
            "step_count": len(state.history),
            "hot_streaks": state.hot_streak_count,
        })
        return state

    def _emit(self, event: TurnEvent, step: int, data: dict) -> None:
        if self._on_event is None:
            return
        payload = EventPayload(event=event, turn_number=self._turn_number, step=step, data=data)
        try:
            self._on_event(payload)
        except Exception:
            logger.exception("Event listener failed on %s", event.name)
