"""
Event Bus Mock for Component Testing

Records everything published through publish(subject, data).
"""
from typing import Any, Dict, List, Optional


class MockEventBus:
    """Mock for the service event bus"""

    def __init__(self):
        self.published_events: List[Dict[str, Any]] = []
        self._should_raise: Optional[Exception] = None

    async def publish(self, subject: str, data: Dict[str, Any]):
        """Mock publish"""
        if self._should_raise:
            raise self._should_raise

        self.published_events.append({"subject": subject, "data": data})

    # Test helper methods

    def get_published_by_subject(self, subject: str) -> List[Dict[str, Any]]:
        """Get published events by subject"""
        return [e for e in self.published_events if e.get("subject") == subject]

    def get_subjects(self) -> List[str]:
        return [e["subject"] for e in self.published_events]

    def get_last_event(self) -> Optional[Dict[str, Any]]:
        """Get the last published event"""
        return self.published_events[-1] if self.published_events else None

    def set_error(self, error: Exception):
        """Set an error to be raised on publish"""
        self._should_raise = error

    def clear(self):
        self.published_events.clear()

    def assert_no_events_published(self, subject: Optional[str] = None):
        """Assert that no events were published"""
        events = self.get_published_by_subject(subject) if subject else self.published_events
        assert len(events) == 0, f"Expected no events, but got: {events}"
