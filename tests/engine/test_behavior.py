"""
Zonk - Behavior Mode Analyzer Tests
"""

import pytest

from zonk.engine.base import BehaviorMode
from zonk.engine.behavior import BehaviorAnalyzer


class TestBufferCap:
    @pytest.mark.parametrize("round_number,expected", [
        (1, 200),
        (3, 200),
        (4, 180),
        (7, 160),
        (100, 50),
    ])
    def test_buffer_shrinks_with_rounds(self, settings, round_number, expected):
        assert BehaviorAnalyzer.buffer_cap(round_number, settings) == expected

    def test_invalid_round(self, settings):
        with pytest.raises(ValueError):
            BehaviorAnalyzer.buffer_cap(0, settings)


class TestDetermineMode:
    @pytest.mark.parametrize("ai,opponent,expected", [
        (500, 250, BehaviorMode.PASSIVE),
        (400, 200, BehaviorMode.AGGRESSIVE),
        (100, 300, BehaviorMode.AGGRESSIVE),
        (0, 0, BehaviorMode.AGGRESSIVE),
    ])
    def test_first_round(self, settings, ai, opponent, expected):
        assert BehaviorAnalyzer.determine_mode(ai, opponent, 1, settings) is expected

    def test_late_game_protects_smaller_leads(self, settings):
        assert BehaviorAnalyzer.determine_mode(400, 250, 1, settings) is BehaviorMode.AGGRESSIVE
        assert BehaviorAnalyzer.determine_mode(400, 250, 10, settings) is BehaviorMode.PASSIVE

    def test_negative_score_rejected(self, settings):
        with pytest.raises(ValueError):
            BehaviorAnalyzer.determine_mode(-1, 0, 1, settings)


class TestScoreCap:
    def test_caps_by_mode(self, settings):
        assert BehaviorAnalyzer.score_cap_for(BehaviorMode.AGGRESSIVE, settings) == 500
        assert BehaviorAnalyzer.score_cap_for(BehaviorMode.PASSIVE, settings) == 250
