"""Tests for zonk/events: payload summaries, dispatcher and recorder."""

import logging
from unittest.mock import MagicMock

import pytest

from zonk.events import (
    EventDispatcher,
    EventPayload,
    EventRecorder,
    TurnEvent,
    summarize_event,
)
from zonk.events.events import _SUMMARY_TEMPLATES


def payload(event=TurnEvent.DICE_ROLLED, **data):
    return EventPayload(event=event, turn_number=2, step=1, data=data)


class TestSummarizeEvent:
    @pytest.mark.parametrize("event,data,expected", [
        (TurnEvent.TURN_STARTED, {"mode": "aggressive", "dice": [1, 2]},
         "Turn 2 started (aggressive) with [1, 2]"),
        (TurnEvent.DICE_ROLLED, {"dice": [3, 4]}, "Rolled [3, 4]"),
        (TurnEvent.COMBINATION_SELECTED, {"description": "Single 1", "points": 100},
         "Selected Single 1 for 100"),
        (TurnEvent.HOT_STREAK, {"hot_streaks": 2}, "Hot streak #2"),
        (TurnEvent.BUST_OCCURRED, {"dice": [2, 4, 6], "lost_points": 350},
         "Bust on [2, 4, 6], lost 350"),
        (TurnEvent.TURN_COMPLETED, {"outcome": "stopped", "final_score": 400, "step_count": 3},
         "Turn 2 ended (stopped) with 400 after 3 steps"),
    ])
    def test_templates(self, event, data, expected):
        assert summarize_event(payload(event, **data)) == expected

    def test_missing_fields_fall_back(self):
        assert summarize_event(payload(TurnEvent.DECISION_MADE)) == "DECISION_MADE (step 1)"

    def test_every_event_has_a_template(self):
        assert set(_SUMMARY_TEMPLATES) == set(TurnEvent)


class TestEventDispatcher:
    def test_dispatches_in_order(self):
        calls = []
        dispatcher = EventDispatcher([lambda p: calls.append("a"), lambda p: calls.append("b")])
        dispatcher(payload(dice=[1]))
        assert calls == ["a", "b"]

    def test_subscribe_and_unsubscribe(self):
        listener = MagicMock()
        dispatcher = EventDispatcher()
        dispatcher.subscribe(listener)
        assert dispatcher.listener_count == 1

        dispatcher.dispatch(payload(dice=[1]))
        listener.assert_called_once()

        dispatcher.unsubscribe(listener)
        assert dispatcher.listener_count == 0

    def test_duplicate_subscription_ignored(self, caplog):
        listener = MagicMock()
        dispatcher = EventDispatcher([listener])
        with caplog.at_level(logging.WARNING, logger="zonk.events.dispatcher"):
            dispatcher.subscribe(listener)
        assert dispatcher.listener_count == 1
        assert "already subscribed" in caplog.text

    def test_unsubscribe_unknown_is_noop(self):
        dispatcher = EventDispatcher()
        dispatcher.unsubscribe(MagicMock())
        assert dispatcher.listener_count == 0

    def test_failing_listener_is_isolated(self, caplog):
        broken = MagicMock(side_effect=RuntimeError("boom"))
        healthy = MagicMock()
        dispatcher = EventDispatcher([broken, healthy])

        with caplog.at_level(logging.ERROR, logger="zonk.events.dispatcher"):
            dispatcher.dispatch(payload(dice=[5]))

        healthy.assert_called_once()
        assert "failed on DICE_ROLLED" in caplog.text


class TestEventRecorder:
    def test_records_and_filters(self):
        recorder = EventRecorder()
        recorder(payload(TurnEvent.DICE_ROLLED, dice=[1]))
        recorder(payload(TurnEvent.HOT_STREAK, hot_streaks=1))
        recorder(payload(TurnEvent.DICE_ROLLED, dice=[2]))

        rolled = recorder.of_type(TurnEvent.DICE_ROLLED)
        assert [p.data["dice"] for p in rolled] == [[1], [2]]

    def test_replay_preserves_order(self):
        recorder = EventRecorder()
        first = payload(dice=[1])
        second = payload(dice=[2])
        recorder(first)
        recorder(second)

        listener = MagicMock()
        recorder.replay(listener)
        assert [c.args[0] for c in listener.call_args_list] == [first, second]

    def test_clear(self):
        recorder = EventRecorder()
        recorder(payload(dice=[1]))
        recorder.clear()
        assert recorder.payloads == []
