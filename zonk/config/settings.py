"""
Zonk - Application Settings

Loads the opponent's tuning constants from environment variables using
Pydantic Settings. Every field has a default, so a bare environment yields
the standard "Medium" opponent. The settings object is frozen and passed
explicitly into every engine call.
"""

import logging
from enum import Enum
from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class Settings(BaseSettings):
    """Opponent configuration loaded from ``ZONK_*`` environment variables."""

    # Application
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Points-per-turn caps
    points_cap_aggressive: int = Field(default=500, gt=0)
    points_cap_passive: int = Field(default=250, gt=0)

    # Behavior buffer (lead needed before the opponent turns passive)
    initial_buffer_cap: int = Field(default=200, ge=0)
    buffer_reduction_per_round: int = Field(default=20, ge=0)
    rounds_per_reduction: int = Field(default=3, gt=0)
    minimum_buffer_cap: int = Field(default=50, ge=0)

    # Combination selection
    accumulation_min_dice: int = Field(default=4, ge=1, le=6)
    accumulation_min_points: int = Field(default=200, ge=0)
    aggressive_efficiency_floor: float = Field(default=25.0, ge=0)
    passive_efficiency_floor: float = Field(default=40.0, ge=0)

    # Momentum
    aggressive_base_multiplier: float = Field(default=0.10, ge=0, le=1)
    passive_base_multiplier: float = Field(default=0.15, ge=0, le=1)
    momentum_reduction_per_success: float = Field(default=0.12, ge=0, le=1)
    minimum_momentum_multiplier: float = Field(default=0.25, ge=0, le=1)
    max_fibonacci_index: int = Field(default=10, ge=1)
    dice_risk_threshold: int = Field(default=2, ge=0, le=6)
    dice_risk_exponent: float = Field(default=2.0, ge=1)
    dice_risk_multiplier: float = Field(default=0.3, ge=0)
    iteration_pressure_threshold: int = Field(default=2, ge=0)
    iteration_pressure_increase: float = Field(default=0.2, ge=0)
    aggressive_max_momentum: float = Field(default=0.90, ge=0, le=1)
    passive_max_momentum: float = Field(default=0.90, ge=0, le=1)

    # Cap probability
    base_cap_stop_chance: float = Field(default=0.30, gt=0, le=1)
    aggressive_cap_growth_rate: float = Field(default=0.10, ge=0, le=1)
    passive_cap_growth_rate: float = Field(default=0.20, ge=0, le=1)
    cap_growth_interval: int = Field(default=50, gt=0)
    max_cap_stop_chance: float = Field(default=0.80, gt=0, le=1)

    # Turn limits
    max_hot_streaks: int = Field(default=3, ge=0)
    aggressive_max_iterations: int = Field(default=5, ge=1)
    passive_max_iterations: int = Field(default=2, ge=1)

    # Safety dice
    safety_dice_enabled: bool = False
    safety_four_dice_probability: float = Field(default=0.5, ge=0, le=1)
    safety_three_dice_probability: float = Field(default=0.6, ge=0, le=1)
    safety_two_dice_probability: float = Field(default=0.7, ge=0, le=1)
    safety_one_die_probability: float = Field(default=0.9, ge=0, le=1)

    model_config = {
        "env_prefix": "ZONK_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "frozen": True,
    }

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        """Accept level names in any case (``debug`` == ``DEBUG``)."""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    def score_cap_for(self, aggressive: bool) -> int:
        return self.points_cap_aggressive if aggressive else self.points_cap_passive

    def efficiency_floor_for(self, aggressive: bool) -> float:
        return self.aggressive_efficiency_floor if aggressive else self.passive_efficiency_floor

    def base_multiplier_for(self, aggressive: bool) -> float:
        return self.aggressive_base_multiplier if aggressive else self.passive_base_multiplier

    def max_momentum_for(self, aggressive: bool) -> float:
        return self.aggressive_max_momentum if aggressive else self.passive_max_momentum

    def cap_growth_rate_for(self, aggressive: bool) -> float:
        return self.aggressive_cap_growth_rate if aggressive else self.passive_cap_growth_rate

    def max_iterations_for(self, aggressive: bool) -> int:
        return self.aggressive_max_iterations if aggressive else self.passive_max_iterations


class Difficulty(Enum):
    """Opponent difficulty presets."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


_DIFFICULTY_PRESETS: dict[Difficulty, dict[str, float | int]] = {
    Difficulty.EASY: {
        "points_cap_aggressive": 350,
        "points_cap_passive": 200,
        "initial_buffer_cap": 250,
        "momentum_reduction_per_success": 0.15,
        "aggressive_cap_growth_rate": 0.15,
        "passive_cap_growth_rate": 0.25,
        "aggressive_base_multiplier": 0.12,
        "passive_base_multiplier": 0.18,
        "passive_max_iterations": 2,
    },
    Difficulty.MEDIUM: {
        "points_cap_aggressive": 500,
        "points_cap_passive": 250,
        "initial_buffer_cap": 200,
        "momentum_reduction_per_success": 0.12,
        "aggressive_cap_growth_rate": 0.10,
        "passive_cap_growth_rate": 0.20,
        "aggressive_base_multiplier": 0.10,
        "passive_base_multiplier": 0.15,
        "passive_max_iterations": 2,
    },
    Difficulty.HARD: {
        "points_cap_aggressive": 650,
        "points_cap_passive": 300,
        "initial_buffer_cap": 150,
        "momentum_reduction_per_success": 0.08,
        "aggressive_cap_growth_rate": 0.08,
        "passive_cap_growth_rate": 0.15,
        "aggressive_base_multiplier": 0.08,
        "passive_base_multiplier": 0.12,
        "passive_max_iterations": 3,
    },
}


def apply_difficulty(settings: Settings, difficulty: Difficulty) -> Settings:
    """Return a copy of ``settings`` with the preset's values applied."""
    return settings.model_copy(update=_DIFFICULTY_PRESETS[difficulty])


def load_settings(**overrides) -> Settings:
    """
    Build settings from the environment, falling back to defaults.

    Invalid environment values never abort a game: they are logged and
    the documented defaults are used instead.
    """
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        logger.warning(
            "Invalid opponent configuration (%d errors), using defaults",
            exc.error_count(),
        )
        return Settings.model_construct()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached singleton settings instance."""
    return load_settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Apply the configured log level to the root logger."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("zonk").setLevel(level)
