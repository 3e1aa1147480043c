"""
Component Test Layer Configuration

Structure:
    tests/component/
    ├── trend_campaign/   Service components against mocked collaborators
    └── mocks/            Mock implementations

Usage:
    pytest tests/component -v
    pytest tests/component/trend_campaign -v
"""
import os
import sys

import pytest

# Set testing environment BEFORE any imports
os.environ["ENV"] = "testing"
os.environ["ENVIRONMENT"] = "testing"

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from tests.component.mocks import MockAdsPlatform, MockEventBus, RecordingSleep


# =============================================================================
# Shared Mocks
# =============================================================================

@pytest.fixture
def mock_event_bus() -> MockEventBus:
    """Mock event bus"""
    return MockEventBus()


@pytest.fixture
def mock_platform() -> MockAdsPlatform:
    """Mock advertising platform"""
    return MockAdsPlatform()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    """Sleep replacement that records requested delays and returns immediately"""
    return RecordingSleep()
