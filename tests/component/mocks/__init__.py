"""
Component Test Mocks

Shared mock implementations for component testing.
These mocks replace real I/O dependencies (advertising platform, event bus, timers).
"""

from .event_bus_mock import MockEventBus
from .platform_mock import MockAdsPlatform, RecordingSleep

__all__ = [
    'MockEventBus',
    'MockAdsPlatform',
    'RecordingSleep',
]
