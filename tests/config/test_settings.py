"""Tests for zonk/config/settings.py: environment loading, presets and logging."""

import logging

import pytest
from pydantic import ValidationError

from zonk.config.settings import (
    Difficulty,
    Settings,
    apply_difficulty,
    configure_logging,
    get_settings,
    load_settings,
)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestDefaults:
    def test_medium_defaults(self, settings):
        assert settings.points_cap_aggressive == 500
        assert settings.points_cap_passive == 250
        assert settings.initial_buffer_cap == 200
        assert settings.max_hot_streaks == 3
        assert not settings.safety_dice_enabled

    @pytest.mark.parametrize("aggressive,cap,floor,iterations", [
        (True, 500, 25.0, 5),
        (False, 250, 40.0, 2),
    ])
    def test_mode_helpers(self, settings, aggressive, cap, floor, iterations):
        assert settings.score_cap_for(aggressive) == cap
        assert settings.efficiency_floor_for(aggressive) == floor
        assert settings.max_iterations_for(aggressive) == iterations

    def test_frozen(self):
        with pytest.raises(ValidationError):
            Settings().points_cap_aggressive = 900


class TestEnvironment:
    def test_reads_prefixed_variables(self, monkeypatch):
        monkeypatch.setenv("ZONK_POINTS_CAP_AGGRESSIVE", "600")
        monkeypatch.setenv("ZONK_SAFETY_DICE_ENABLED", "true")
        settings = Settings()
        assert settings.points_cap_aggressive == 600
        assert settings.safety_dice_enabled

    def test_out_of_range_value_rejected(self):
        with pytest.raises(ValidationError):
            Settings(points_cap_aggressive=0)

    def test_load_settings_falls_back_to_defaults(self, monkeypatch, caplog):
        monkeypatch.setenv("ZONK_BASE_CAP_STOP_CHANCE", "2.0")
        with caplog.at_level(logging.WARNING, logger="zonk.config.settings"):
            settings = load_settings()
        assert settings.base_cap_stop_chance == 0.30
        assert "Invalid opponent configuration" in caplog.text

    def test_load_settings_overrides(self):
        assert load_settings(max_hot_streaks=5).max_hot_streaks == 5

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_log_level_is_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("ZONK_LOG_LEVEL", "debug")
        assert Settings().log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(log_level="verbose")

    def test_unknown_log_level_falls_back(self, monkeypatch, caplog):
        monkeypatch.setenv("ZONK_LOG_LEVEL", "verbose")
        with caplog.at_level(logging.WARNING, logger="zonk.config.settings"):
            settings = load_settings()
        assert settings.log_level == "INFO"
        assert "Invalid opponent configuration" in caplog.text


class TestDifficulty:
    def test_hard_raises_caps(self, settings):
        hard = apply_difficulty(settings, Difficulty.HARD)
        assert hard.points_cap_aggressive == 650
        assert hard.points_cap_passive == 300
        assert hard.initial_buffer_cap == 150

    def test_easy_lowers_caps(self, settings):
        easy = apply_difficulty(settings, Difficulty.EASY)
        assert easy.points_cap_aggressive == 350
        assert easy.momentum_reduction_per_success == 0.15

    def test_medium_matches_defaults(self, settings):
        medium = apply_difficulty(settings, Difficulty.MEDIUM)
        assert medium.points_cap_aggressive == settings.points_cap_aggressive
        assert medium.passive_cap_growth_rate == settings.passive_cap_growth_rate
        assert medium.passive_max_iterations == settings.passive_max_iterations
        assert medium.aggressive_base_multiplier == settings.aggressive_base_multiplier

    @pytest.mark.parametrize("difficulty,iterations,multipliers", [
        (Difficulty.EASY, 2, (0.12, 0.18)),
        (Difficulty.MEDIUM, 2, (0.10, 0.15)),
        (Difficulty.HARD, 3, (0.08, 0.12)),
    ])
    def test_passive_limit_and_multipliers(self, settings, difficulty, iterations, multipliers):
        preset = apply_difficulty(settings, difficulty)
        assert preset.max_iterations_for(False) == iterations
        assert preset.max_iterations_for(True) == 5
        assert (preset.base_multiplier_for(True), preset.base_multiplier_for(False)) == multipliers

    def test_input_settings_unchanged(self, settings):
        apply_difficulty(settings, Difficulty.HARD)
        assert settings.points_cap_aggressive == 500


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def restore_level(self):
        logger = logging.getLogger("zonk")
        level = logger.level
        yield
        logger.setLevel(level)

    def test_debug_flag_sets_debug_level(self, settings):
        configure_logging(settings.model_copy(update={"debug": True}))
        assert logging.getLogger("zonk").level == logging.DEBUG

    def test_log_level_applied(self, settings):
        configure_logging(settings.model_copy(update={"log_level": "warning"}))
        assert logging.getLogger("zonk").level == logging.WARNING

    def test_invalid_environment_level_does_not_break_logging(self, monkeypatch):
        monkeypatch.setenv("ZONK_LOG_LEVEL", "verbose")
        configure_logging(load_settings())
        assert logging.getLogger("zonk").level == logging.INFO
