"""
Event reporting between the resolver and its observers.
"""

from .events import (
    BaseEvent,
    EventType,
    DecisionEvent,
    WarningEvent,
    StatusEvent,
    create_decision_event,
    create_warning_event,
    create_status_event
)
from .event_system import EventSystem

__all__ = [
    'BaseEvent',
    'EventType',
    'DecisionEvent',
    'WarningEvent',
    'StatusEvent',
    'create_decision_event',
    'create_warning_event',
    'create_status_event',
    'EventSystem'
]
