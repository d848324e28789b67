"""
Zonk - Engine Errors

Only genuine faults are exceptions. A bust or a stop verdict is an
ordinary game event and is returned as data.
"""


class InvalidDiceError(ValueError):
    """Dice count outside 1-6 or a face value outside 1-6."""


class InconsistentIndicesError(RuntimeError):
    """
    A combination's indices do not address its values in the source dice.

    This is a programming error in the scorer or the orchestrator and is
    never recovered from at runtime.
    """
