"""
Zonk Turn Events.

Event types emitted by the turn simulator and helpers to deliver them.
"""

from zonk.events.dispatcher import EventDispatcher, EventListener, EventRecorder
from zonk.events.events import EventPayload, TurnEvent, summarize_event

__all__ = [
    "EventDispatcher",
    "EventListener",
    "EventPayload",
    "EventRecorder",
    "TurnEvent",
    "summarize_event",
]
