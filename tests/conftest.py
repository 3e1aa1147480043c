"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - component/  : Component tests (mocked platform, repositories, event bus)
    - unit/       : Unit tests (pure functions, no I/O)
    - contracts/  : Test data factories shared by both layers
"""
import os
import sys
from typing import Any, Dict, List

import pytest

# Set testing environment BEFORE any service imports
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("ENVIRONMENT", "testing")

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)


# =============================================================================
# Assertion Helpers
# =============================================================================

class AssertionHelpers:
    """Custom assertion helpers for tests"""

    @staticmethod
    def assert_http_success(response, expected_status: int = 200):
        """Assert HTTP response is successful"""
        assert response.status_code == expected_status, \
            f"Expected {expected_status}, got {response.status_code}: {response.text}"

    @staticmethod
    def assert_has_fields(data: Dict, fields: List[str]):
        """Assert dict has required fields"""
        missing = [f for f in fields if f not in data]
        assert not missing, f"Missing fields: {missing}"

    @staticmethod
    def assert_event_published(events: List[Dict], subject: str, **kwargs) -> Dict[str, Any]:
        """Assert an event was published under subject with expected data"""
        matching = [e for e in events if e.get("subject") == subject]
        assert matching, f"Event '{subject}' not found in {events}"

        if kwargs:
            for event in matching:
                if all(event["data"].get("data", {}).get(k) == v for k, v in kwargs.items()):
                    return event
            assert False, f"No event matched criteria: {kwargs}"

        return matching[0]


@pytest.fixture
def assertions() -> AssertionHelpers:
    """Provide assertion helpers"""
    return AssertionHelpers()


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "component: Component tests")
    config.addinivalue_line("markers", "unit: Unit tests")
