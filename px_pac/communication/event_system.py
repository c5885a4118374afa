"""
Synchronous event dispatch for resolver observers.

The resolver never writes to a global reporter; it is handed an EventSystem
and sends its events there. Handlers run on the calling thread.
"""

import logging
import threading
from typing import Callable, Dict, List

from .events import BaseEvent, EventType, DecisionEvent, WarningEvent, StatusEvent


class EventSystem:
    """
    Dispatches resolver events to registered handlers.

    A failing handler is logged and skipped; it never affects the request
    that produced the event.
    """

    def __init__(self):
        """Initialize the event system."""
        self.logger = logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._handlers: Dict[EventType, List[Callable[[BaseEvent], None]]] = {
            event_type: [] for event_type in EventType
        }
        self._stats = {
            'events_sent': 0,
            'handler_errors': 0
        }

    def send_event(self, event: BaseEvent) -> int:
        """
        Send an event to every handler registered for its type.

        Args:
            event: Event to send

        Returns:
            Number of handlers that processed the event without error
        """
        with self._lock:
            handlers = list(self._handlers[event.event_type])
            self._stats['events_sent'] += 1

        delivered = 0
        for handler in handlers:
            try:
                handler(event)
                delivered += 1
            except Exception as e:
                with self._lock:
                    self._stats['handler_errors'] += 1
                self.logger.error(f"Error in {event.event_type.value} event handler: {e}")
        return delivered

    def add_handler(self, event_type: EventType, handler: Callable[[BaseEvent], None]):
        """Add handler for a specific event type."""
        with self._lock:
            self._handlers[event_type].append(handler)

    def remove_handler(self, event_type: EventType, handler: Callable[[BaseEvent], None]):
        """Remove an event handler."""
        with self._lock:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)

    def add_decision_handler(self, handler: Callable[[DecisionEvent], None]):
        """Add handler for decision events."""
        self.add_handler(EventType.DECISION, handler)

    def add_warning_handler(self, handler: Callable[[WarningEvent], None]):
        """Add handler for warning events."""
        self.add_handler(EventType.WARNING, handler)

    def add_status_handler(self, handler: Callable[[StatusEvent], None]):
        """Add handler for status events."""
        self.add_handler(EventType.STATUS, handler)

    def get_stats(self) -> dict:
        """Get dispatch statistics."""
        with self._lock:
            return self._stats.copy()
