"""
Zonk Opponent Engine.

Pure Python decision logic with zero UI/database dependencies.
Handles dice generation, combination scoring, selection, stop/continue
risk and turn simulation.
"""

from zonk.engine.base import (
    BUST_MATCH,
    RULE_SPECS,
    BehaviorMode,
    CombinationMatch,
    DecisionOverride,
    DiceSet,
    Rule,
    RuleSpec,
    SelectionPhase,
    SelectionRecord,
    StopDecision,
    StrategyCandidate,
    TurnOutcome,
    TurnResult,
    TurnState,
    TurnStatus,
)
from zonk.engine.behavior import BehaviorAnalyzer
from zonk.engine.dice import DiceGenerator
from zonk.engine.errors import InconsistentIndicesError, InvalidDiceError
from zonk.engine.risk import RiskModel, bust_probability
from zonk.engine.scoring import CombinationScorer
from zonk.engine.selector import CombinationSelector, Selection
from zonk.engine.simulator import TurnSimulator

__all__ = [
    # Data Classes
    "CombinationMatch",
    "DiceSet",
    "RuleSpec",
    "Selection",
    "SelectionRecord",
    "StopDecision",
    "StrategyCandidate",
    "TurnResult",
    "TurnState",
    # Enums
    "BehaviorMode",
    "DecisionOverride",
    "Rule",
    "SelectionPhase",
    "TurnOutcome",
    "TurnStatus",
    # Constants
    "BUST_MATCH",
    "RULE_SPECS",
    # Errors
    "InconsistentIndicesError",
    "InvalidDiceError",
    # Engines
    "BehaviorAnalyzer",
    "CombinationScorer",
    "CombinationSelector",
    "DiceGenerator",
    "RiskModel",
    "TurnSimulator",
    "bust_probability",
]
