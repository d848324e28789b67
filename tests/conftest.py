"""
Zonk - Test Configuration and Fixtures

Common fixtures and test data for all test modules.
"""

import random

import pytest

from zonk.config.settings import Settings


# =============================================================================
# CONFIGURATION
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    """Default ("Medium") opponent settings, isolated from the environment."""
    return Settings.model_construct()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source so every test run is reproducible."""
    return random.Random(1234)


class FixedRandom(random.Random):
    """Random source whose ``random()`` replays a fixed script of draws."""

    def __init__(self, draws: list[float]) -> None:
        super().__init__(0)
        self._draws = list(draws)

    def random(self) -> float:
        return self._draws.pop(0)


@pytest.fixture
def fixed_random():
    """Factory for a random source with scripted ``random()`` draws."""
    return FixedRandom


# =============================================================================
# D6 COMBINATION TEST DATA
# =============================================================================

@pytest.fixture
def bust_rolls() -> list[tuple[int, ...]]:
    """Rolls with no scoring combination."""
    return [
        (2,),
        (3,),
        (4,),
        (6,),
        (2, 3),
        (2, 4),
        (3, 6),
        (4, 6),
        (2, 4, 6),
        (3, 4, 6),
        (2, 3, 6),
    ]


@pytest.fixture
def clearing_rolls() -> dict[str, tuple[tuple[int, ...], int]]:
    """
    Six-dice rolls that a single combination clears.

    Returns:
        Dict mapping name to (dice_values, best clearing points)
    """
    return {
        "max_straight": ((6, 4, 2, 5, 3, 1), 1500),
        "three_pairs": ((2, 2, 4, 4, 6, 6), 1500),
        "two_sets": ((1, 1, 1, 5, 5, 5), 600),
    }
