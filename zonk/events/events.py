"""
Zonk - Turn Event Definitions

Event types and payloads emitted by the turn simulator for presentation
collaborators (dice display, score labels, turn log).
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class TurnEvent(Enum):
    """Events that can occur during an opponent turn."""

    TURN_STARTED = auto()
    DICE_ROLLED = auto()
    COMBINATION_SELECTED = auto()
    DICE_REMOVED = auto()
    DECISION_MADE = auto()
    HOT_STREAK = auto()
    BUST_OCCURRED = auto()
    TURN_COMPLETED = auto()


@dataclass
class EventPayload:
    """Wrapper for turn event data."""

    event: TurnEvent
    turn_number: int
    step: int = 0
    data: dict[str, Any] = field(default_factory=dict)


_SUMMARY_TEMPLATES: dict[TurnEvent, str] = {
    TurnEvent.TURN_STARTED: "Turn {turn_number} started ({mode}) with {dice}",
    TurnEvent.DICE_ROLLED: "Rolled {dice}",
    TurnEvent.COMBINATION_SELECTED: "Selected {description} for {points}",
    TurnEvent.DICE_REMOVED: "Removed dice at indices {indices}",
    TurnEvent.DECISION_MADE: "{verdict}: {reason}",
    TurnEvent.HOT_STREAK: "Hot streak #{hot_streaks}",
    TurnEvent.BUST_OCCURRED: "Bust on {dice}, lost {lost_points}",
    TurnEvent.TURN_COMPLETED: "Turn {turn_number} ended ({outcome}) with {final_score} after {step_count} steps",
}


def summarize_event(payload: EventPayload) -> str:
    """One-line description of an event for a turn log."""
    template = _SUMMARY_TEMPLATES[payload.event]
    try:
        return template.format(turn_number=payload.turn_number, **payload.data)
    except KeyError:
        return f"{payload.event.name} (step {payload.step})"
