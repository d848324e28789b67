"""
Zonk - Game Engine Base Classes

This module defines the foundational data structures and enums used throughout
the opponent engine. All classes are immutable (frozen dataclasses) so a turn
trace can be replayed or inspected without defensive copies.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, Sequence

from zonk.engine.errors import InconsistentIndicesError, InvalidDiceError

MIN_FACE = 1
MAX_FACE = 6
MAX_DICE = 6


class BehaviorMode(Enum):
    """Two-state opponent behavior."""
    AGGRESSIVE = "aggressive"  # trailing or close game: chase points
    PASSIVE = "passive"        # leading by more than the buffer: bank early

    @property
    def is_aggressive(self) -> bool:
        return self is BehaviorMode.AGGRESSIVE


class SelectionPhase(Enum):
    """Which selection policy applied to a step."""
    ACCUMULATION = "accumulation"
    FULL_CLEAR = "full_clear"


class TurnStatus(Enum):
    """Orchestrator state."""
    ROLLING = auto()
    SELECTING = auto()
    DECIDED = auto()
    COMPLETE = auto()


class TurnOutcome(Enum):
    """How a turn ended."""
    STOPPED = "stopped"
    BUST = "bust"
    ITERATION_LIMIT = "iteration_limit"


class DecisionOverride(Enum):
    """Verdicts fixed before any probability draw."""
    FIRST_SELECTION = "first_selection"
    HOT_STREAK = "hot_streak"
    HOT_STREAK_LIMIT = "hot_streak_limit"


class Rule(Enum):
    """Scoring patterns."""
    SINGLE = auto()           # a lone 1 or 5
    PAIR = auto()
    TWO_PAIR = auto()
    LOW_STRAIGHT = auto()     # three consecutive faces
    MIDDLE_STRAIGHT = auto()  # four consecutive faces
    THREE_OF_KIND = auto()
    FULL_HOUSE = auto()       # three of a kind + a pair
    FOUR_OF_KIND = auto()
    THREE_PAIRS = auto()
    STRAIGHT = auto()         # five consecutive faces
    MAX_STRAIGHT = auto()     # six consecutive faces
    TWO_SETS = auto()         # two different three of a kinds
    BUST = auto()


@dataclass(frozen=True)
class RuleSpec:
    """
    Static properties of a rule.

    Attributes:
        base_points: Points before face scaling and multiplier
        multiplier: Scaling applied to the computed points
        dice_used: Number of dice the rule consumes
        tier: Desirability rank, 1 is best
        label: Human-readable name
    """
    base_points: int
    multiplier: float
    dice_used: int
    tier: int
    label: str


RULE_SPECS: dict[Rule, RuleSpec] = {
    Rule.SINGLE: RuleSpec(50, 1.0, 1, 5, "Single"),
    Rule.PAIR: RuleSpec(100, 1.0, 2, 4, "Pair"),
    Rule.TWO_PAIR: RuleSpec(500, 1.0, 4, 3, "Two Pair"),
    Rule.LOW_STRAIGHT: RuleSpec(250, 1.0, 3, 4, "Low Straight"),
    Rule.MIDDLE_STRAIGHT: RuleSpec(500, 1.0, 4, 2, "Middle Straight"),
    Rule.THREE_OF_KIND: RuleSpec(100, 1.0, 3, 3, "Three of a Kind"),
    Rule.FULL_HOUSE: RuleSpec(100, 1.0, 5, 1, "Full House"),
    Rule.FOUR_OF_KIND: RuleSpec(200, 1.0, 4, 2, "Four of a Kind"),
    Rule.THREE_PAIRS: RuleSpec(1500, 1.0, 6, 1, "Three Pairs"),
    Rule.STRAIGHT: RuleSpec(1000, 1.0, 5, 2, "Straight"),
    Rule.MAX_STRAIGHT: RuleSpec(1500, 1.0, 6, 1, "Max Straight"),
    Rule.TWO_SETS: RuleSpec(100, 1.0, 6, 1, "Two Sets"),
    Rule.BUST: RuleSpec(0, 0.0, 0, 6, "Bust"),
}


@dataclass(frozen=True)
class DiceSet:
    """
    Immutable dice in play.

    Attributes:
        values: Face values, index-aligned with positions
        positions: Physical die slot (0-5) for each value
    """
    values: tuple[int, ...]
    positions: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if len(self.values) > MAX_DICE:
            raise InvalidDiceError(
                f"At most {MAX_DICE} dice allowed, got {len(self.values)}."
            )
        for value in self.values:
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidDiceError(
                    f"Invalid die value {value!r}. Must be an integer."
                )
            if not (MIN_FACE <= value <= MAX_FACE):
                raise InvalidDiceError(
                    f"Invalid die value {value}. Must be between {MIN_FACE} and {MAX_FACE}."
                )
        if not self.positions:
            object.__setattr__(self, "positions", tuple(range(len(self.values))))
        if len(self.positions) != len(self.values):
            raise InvalidDiceError("Each die value needs exactly one position.")
        if len(set(self.positions)) != len(self.positions):
            raise InvalidDiceError(f"Duplicate die positions {self.positions}.")

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index: int) -> int:
        return self.values[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self.values)

    @classmethod
    def from_sequence(cls, values: Sequence[int]) -> "DiceSet":
        """Create a DiceSet on positions 0..n-1 from any sequence type."""
        return cls(values=tuple(values))

    def remove_indices(self, indices: Sequence[int]) -> "DiceSet":
        """
        Remove dice by index, keeping the rest in their original order.

        This is the only supported removal. Removing by value or by count is
        ambiguous when faces repeat.
        """
        to_remove = set(indices)
        if len(to_remove) != len(indices):
            raise InconsistentIndicesError(f"Duplicate indices {tuple(indices)}.")
        for idx in to_remove:
            if not (0 <= idx < len(self.values)):
                raise InconsistentIndicesError(
                    f"Index {idx} is out of range for {len(self.values)} dice."
                )
        kept = [i for i in range(len(self.values)) if i not in to_remove]
        return DiceSet(
            values=tuple(self.values[i] for i in kept),
            positions=tuple(self.positions[i] for i in kept),
        )


@dataclass(frozen=True)
class CombinationMatch:
    """
    One scoring pattern found in a dice set.

    Attributes:
        rule: The pattern matched
        points: Points awarded
        indices: Indices of the dice consumed, relative to the evaluated set
        dice_values: Face values at those indices
        description: Human-readable description
    """
    rule: Rule
    points: int
    indices: tuple[int, ...]
    dice_values: tuple[int, ...]
    description: str

    def __post_init__(self) -> None:
        if len(set(self.indices)) != len(self.indices):
            raise InconsistentIndicesError(f"Duplicate indices in {self.description}.")
        if any(idx < 0 for idx in self.indices):
            raise InconsistentIndicesError(f"Negative index in {self.description}.")
        expected = RULE_SPECS[self.rule].dice_used
        if len(self.indices) != expected:
            raise InconsistentIndicesError(
                f"{self.rule.name} uses {expected} dice, got {len(self.indices)} indices."
            )
        if len(self.dice_values) != len(self.indices):
            raise InconsistentIndicesError("Each index needs exactly one die value.")

    @property
    def dice_used(self) -> int:
        return len(self.indices)

    @property
    def is_bust(self) -> bool:
        return self.rule is Rule.BUST

    def __str__(self) -> str:
        if self.is_bust:
            return "BUST! No scoring combination."
        return f"{self.description}: {self.points} points"


BUST_MATCH = CombinationMatch(
    rule=Rule.BUST,
    points=0,
    indices=(),
    dice_values=(),
    description="Bust - no scoring combination",
)


@dataclass(frozen=True)
class StrategyCandidate:
    """A match annotated with its tier and points-per-die value."""
    match: CombinationMatch
    tier: int
    strategic_value: float

    @classmethod
    def from_match(cls, match: CombinationMatch) -> "StrategyCandidate":
        spec = RULE_SPECS[match.rule]
        value = match.points / match.dice_used if match.dice_used else 0.0
        return cls(match=match, tier=spec.tier, strategic_value=value)

    @property
    def rule(self) -> Rule:
        return self.match.rule

    @property
    def points(self) -> int:
        return self.match.points

    @property
    def dice_used(self) -> int:
        return self.match.dice_used


@dataclass(frozen=True)
class StopDecision:
    """
    Outcome of the stop/continue risk model for one selection.

    Attributes:
        momentum_probability: Stop chance from streak/turn length
        cap_probability: Stop chance from the score ceiling
        combined_probability: 1 - (1 - momentum) * (1 - cap)
        momentum_roll: Whether the momentum draw fired
        cap_roll: Whether the cap draw fired
        should_continue: Final verdict
        reason: Human-readable explanation
        override: Unconditional rule that fixed the verdict, if any
    """
    momentum_probability: float
    cap_probability: float
    combined_probability: float
    momentum_roll: bool
    cap_roll: bool
    should_continue: bool
    reason: str
    override: DecisionOverride | None = None

    @property
    def should_stop(self) -> bool:
        return not self.should_continue


@dataclass(frozen=True)
class SelectionRecord:
    """
    Trace entry for one selection step.

    Attributes:
        step: 1-based selection number within the turn
        dice_before: Dice the selection was made from
        match: Banked combination (BUST_MATCH on a bust)
        dice_remaining: Dice left in play after removal
        decision: Risk verdict (None on a bust)
        phase: Selection policy used (None on a bust)
        is_hot_streak: Whether every die was consumed
        accumulated_score: Turn score after this step
    """
    step: int
    dice_before: DiceSet
    match: CombinationMatch
    dice_remaining: int
    decision: StopDecision | None
    phase: SelectionPhase | None
    is_hot_streak: bool
    accumulated_score: int

    @property
    def indices(self) -> tuple[int, ...]:
        return self.match.indices

    @property
    def is_bust(self) -> bool:
        return self.match.is_bust


@dataclass(frozen=True)
class TurnState:
    """
    Complete state of the opponent's turn.

    Attributes:
        mode: Behavior mode for the whole turn
        score_cap: Points-per-turn ceiling for the mode
        dice: Dice currently in play
        accumulated_score: Points banked this turn
        hot_streak_count: Number of board clears so far
        selection_count: Number of selections made
        status: Orchestrator state
        outcome: How the turn ended (None while running)
        history: Append-only selection trace
    """
    mode: BehaviorMode
    score_cap: int
    dice: DiceSet
    accumulated_score: int = 0
    hot_streak_count: int = 0
    selection_count: int = 0
    status: TurnStatus = TurnStatus.ROLLING
    outcome: TurnOutcome | None = None
    history: tuple[SelectionRecord, ...] = field(default_factory=tuple)

    @property
    def success_count(self) -> int:
        """Selections banked without busting."""
        return sum(1 for record in self.history if not record.is_bust)

    @property
    def dice_remaining(self) -> int:
        return len(self.dice)

    @property
    def is_complete(self) -> bool:
        return self.status is TurnStatus.COMPLETE


@dataclass(frozen=True)
class TurnResult:
    """
    Final result of a simulated turn.

    Attributes:
        mode: Behavior mode used
        outcome: How the turn ended
        final_score: Points awarded (0 on a bust)
        banked_before_bust: Points lost to a bust (0 otherwise)
        hot_streaks: Number of board clears
        steps: Full selection trace
        bust_dice: Dice that caused the bust, if any
    """
    mode: BehaviorMode
    outcome: TurnOutcome
    final_score: int
    banked_before_bust: int
    hot_streaks: int
    steps: tuple[SelectionRecord, ...]
    bust_dice: DiceSet | None = None

    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def is_bust(self) -> bool:
        return self.outcome is TurnOutcome.BUST
