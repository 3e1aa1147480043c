"""
Unit Test Fixtures for Trend Campaign Service

Uses TrendCampaignTestDataFactory from the data contract.
"""

import pytest

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from tests.contracts.trend_campaign.data_contract import (
    FIXED_NOW,
    TrendCampaignTestDataFactory,
)


@pytest.fixture
def factory() -> TrendCampaignTestDataFactory:
    """Test data factory"""
    return TrendCampaignTestDataFactory()


@pytest.fixture
def now():
    """Deterministic scoring instant"""
    return FIXED_NOW
