"""
Tests for resolver events and their dispatch.
"""

from unittest.mock import Mock

from px_pac.communication import (
    EventSystem, EventType, DecisionEvent, WarningEvent, StatusEvent,
    create_decision_event, create_warning_event, create_status_event
)


class TestEvents:
    """Test event construction helpers."""

    def test_decision_event(self):
        event = create_decision_event("abc", "GET", "http://a/", "PROXY p:80", "PROXY p:80")

        assert isinstance(event, DecisionEvent)
        assert event.event_type is EventType.DECISION
        assert event.event_id
        assert event.timestamp is not None
        assert event.proxy_decision == "PROXY p:80"

    def test_decision_event_without_pac_result(self):
        assert create_decision_event("abc", "GET", "http://a/", "DIRECT").pac_result is None

    def test_warning_event(self):
        event = create_warning_event("abc", "http://a/", "Ignoring unsupported SOCKS proxy", "SOCKS s:1080")

        assert isinstance(event, WarningEvent)
        assert event.event_type is EventType.WARNING

    def test_status_event(self):
        event = create_status_event("offline", "http://wpad/proxy.pac", "404")

        assert isinstance(event, StatusEvent)
        assert event.event_type is EventType.STATUS
        assert event.reason == "404"

    def test_event_type_is_forced_by_subclass(self):
        event = DecisionEvent(
            event_type=EventType.STATUS, timestamp=None, event_id="",
            correlation_id="abc", method="GET", url="http://a/", proxy_decision="DIRECT"
        )

        assert event.event_type is EventType.DECISION
        assert event.event_id
        assert event.timestamp is not None

    def test_event_ids_are_unique(self):
        first = create_status_event("online", "http://wpad/proxy.pac")
        second = create_status_event("online", "http://wpad/proxy.pac")

        assert first.event_id != second.event_id


class TestEventSystem:
    """Test EventSystem dispatch."""

    def setup_method(self):
        """Set up test fixtures."""
        self.event_system = EventSystem()

    def test_handlers_receive_their_type_only(self):
        decisions = Mock()
        statuses = Mock()
        self.event_system.add_decision_handler(decisions)
        self.event_system.add_status_handler(statuses)

        event = create_decision_event("abc", "GET", "http://a/", "DIRECT")
        delivered = self.event_system.send_event(event)

        assert delivered == 1
        decisions.assert_called_once_with(event)
        statuses.assert_not_called()

    def test_no_handlers(self):
        assert self.event_system.send_event(create_status_event("online", "http://wpad/")) == 0
        assert self.event_system.get_stats()['events_sent'] == 1

    def test_failing_handler_is_isolated(self):
        failing = Mock(side_effect=RuntimeError("handler failed"))
        working = Mock()
        self.event_system.add_warning_handler(failing)
        self.event_system.add_warning_handler(working)

        delivered = self.event_system.send_event(
            create_warning_event("abc", "http://a/", "warning", "SOCKS s:1")
        )

        assert delivered == 1
        working.assert_called_once()
        assert self.event_system.get_stats()['handler_errors'] == 1

    def test_remove_handler(self):
        handler = Mock()
        self.event_system.add_handler(EventType.STATUS, handler)
        self.event_system.remove_handler(EventType.STATUS, handler)
        # Removing twice is harmless
        self.event_system.remove_handler(EventType.STATUS, handler)

        self.event_system.send_event(create_status_event("online", "http://wpad/"))

        handler.assert_not_called()
