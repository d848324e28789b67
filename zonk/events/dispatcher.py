"""
Zonk - Event Dispatch

Fan-out of turn events to presentation listeners. A failing listener is
logged and skipped so it can never break the opponent's turn.
"""

from __future__ import annotations

import logging
from typing import Callable

from zonk.events.events import EventPayload, TurnEvent, summarize_event

logger = logging.getLogger(__name__)

EventListener = Callable[[EventPayload], None]


class EventDispatcher:
    """Delivers each payload to every registered listener in order."""

    def __init__(self, listeners: list[EventListener] | None = None) -> None:
        self._listeners: list[EventListener] = list(listeners or [])

    def subscribe(self, listener: EventListener) -> None:
        """Register a listener (ignored if already registered)."""
        if listener in self._listeners:
            logger.warning("Listener %r already subscribed", listener)
            return
        self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def __call__(self, payload: EventPayload) -> None:
        self.dispatch(payload)

    def dispatch(self, payload: EventPayload) -> None:
        logger.debug("Dispatching %s", summarize_event(payload))
        for listener in list(self._listeners):
            try:
                listener(payload)
            except Exception:
                logger.exception(
                    "Listener %r failed on %s", listener, payload.event.name
                )


class EventRecorder:
    """Listener that keeps every payload, for replay or inspection."""

    def __init__(self) -> None:
        self.payloads: list[EventPayload] = []

    def __call__(self, payload: EventPayload) -> None:
        self.payloads.append(payload)

    def of_type(self, event: TurnEvent) -> list[EventPayload]:
        return [p for p in self.payloads if p.event is event]

    def replay(self, listener: EventListener) -> None:
        """Feed every recorded payload to another listener, in order."""
        for payload in self.payloads:
            listener(payload)

    def clear(self) -> None:
        self.payloads.clear()
