"""
Event data structures reported by the resolver.

Decision, warning and status events describe what the resolver did so that
callers can trace requests without depending on log output.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class EventType(Enum):
    """Types of events emitted by the resolver."""
    DECISION = "decision"
    WARNING = "warning"
    STATUS = "status"


@dataclass
class BaseEvent:
    """Base class for all events."""
    event_type: EventType
    timestamp: datetime
    event_id: str

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now()
        if not self.event_id:
            self.event_id = str(uuid.uuid4())


@dataclass
class DecisionEvent(BaseEvent):
    """Event sent when a proxy decision was taken for a request."""
    correlation_id: str
    method: str
    url: str
    proxy_decision: str  # "DIRECT" or "PROXY host:port"
    pac_result: Optional[str] = None  # raw FindProxyForURL result, None when not evaluated

    def __post_init__(self):
        super().__post_init__()
        self.event_type = EventType.DECISION


@dataclass
class WarningEvent(BaseEvent):
    """Event sent when a PAC result was only partly honoured."""
    correlation_id: str
    url: str
    message: str
    pac_result: str

    def __post_init__(self):
        super().__post_init__()
        self.event_type = EventType.WARNING


@dataclass
class StatusEvent(BaseEvent):
    """Event sent after each PAC (re)load attempt."""
    status: str  # "online" or "offline"
    pac_url: str
    reason: Optional[str] = None

    def __post_init__(self):
        super().__post_init__()
        self.event_type = EventType.STATUS


def create_decision_event(correlation_id: str, method: str, url: str, proxy_decision: str,
                          pac_result: Optional[str] = None) -> DecisionEvent:
    """Create a decision event."""
    return DecisionEvent(
        event_type=EventType.DECISION,  # This will be overridden by __post_init__
        timestamp=datetime.now(),
        event_id=str(uuid.uuid4()),
        correlation_id=correlation_id,
        method=method,
        url=url,
        proxy_decision=proxy_decision,
        pac_result=pac_result
    )


def create_warning_event(correlation_id: str, url: str, message: str,
                         pac_result: str) -> WarningEvent:
    """Create a warning event."""
    return WarningEvent(
        event_type=EventType.WARNING,  # This will be overridden by __post_init__
        timestamp=datetime.now(),
        event_id=str(uuid.uuid4()),
        correlation_id=correlation_id,
        url=url,
        message=message,
        pac_result=pac_result
    )


def create_status_event(status: str, pac_url: str, reason: Optional[str] = None) -> StatusEvent:
    """Create a status event."""
    return StatusEvent(
        event_type=EventType.STATUS,  # This will be overridden by __post_init__
        timestamp=datetime.now(),
        event_id=str(uuid.uuid4()),
        status=status,
        pac_url=pac_url,
        reason=reason
    )
