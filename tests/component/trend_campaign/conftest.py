"""
Component Test Fixtures for Trend Campaign Service

Wires the real service components (provisioner, rollback coordinator,
lifecycle registry, article catalog) against the mocked platform, event
bus and trends source.
"""

import pytest
from typing import Dict, List, Optional
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from core.config import CampaignDefaults
from microservices.trend_campaign_service.article_service import ArticleService
from microservices.trend_campaign_service.campaign_registry import CampaignLifecycleRegistry
from microservices.trend_campaign_service.campaign_repository import (
    InMemoryArticleRepository,
    InMemoryCampaignRepository,
)
from microservices.trend_campaign_service.campaign_service import TrendCampaignService
from microservices.trend_campaign_service.events.publishers import TrendCampaignEventPublisher
from microservices.trend_campaign_service.provisioner import CampaignProvisioner
from microservices.trend_campaign_service.rollback import RollbackCoordinator
from tests.contracts.trend_campaign.data_contract import (
    FIXED_NOW,
    TrendingSearch,
    TrendCampaignTestDataFactory,
)


# ====================
# Mock Trends Source
# ====================


class MockTrendsClient:
    """Mock trends source returning canned trends"""

    def __init__(self):
        self.daily_trends: List[TrendingSearch] = []
        self.realtime_trends: List[TrendingSearch] = []
        self.related: Dict[str, List[str]] = {}
        self.requested_geos: List[Optional[str]] = []
        self.error: Optional[Exception] = None

    def _maybe_raise(self):
        if self.error:
            raise self.error

    async def get_daily_trends(self, geo: Optional[str] = None) -> List[TrendingSearch]:
        self._maybe_raise()
        self.requested_geos.append(geo)
        return list(self.daily_trends)

    async def get_realtime_trends(self, category: Optional[str] = None) -> List[TrendingSearch]:
        self._maybe_raise()
        return list(self.realtime_trends)

    async def get_related_queries(self, keyword: str) -> List[str]:
        self._maybe_raise()
        return list(self.related.get(keyword, []))

    async def get_interest_over_time(self, keyword: str, start_time=None):
        self._maybe_raise()
        return {"keyword": keyword, "timeline": []}

    async def get_top_trends_with_keywords(
        self, geo: Optional[str] = None, limit: int = 10
    ) -> List[TrendingSearch]:
        self._maybe_raise()
        return list(self.daily_trends)[:limit]


# ====================
# Fixtures
# ====================


@pytest.fixture
def factory() -> TrendCampaignTestDataFactory:
    """Provide TrendCampaignTestDataFactory"""
    return TrendCampaignTestDataFactory()


@pytest.fixture
def clock():
    """Frozen clock at FIXED_NOW"""
    return lambda: FIXED_NOW


@pytest.fixture
def defaults() -> CampaignDefaults:
    return CampaignDefaults()


@pytest.fixture
def article_repository() -> InMemoryArticleRepository:
    return InMemoryArticleRepository()


@pytest.fixture
def campaign_repository() -> InMemoryCampaignRepository:
    return InMemoryCampaignRepository()


@pytest.fixture
def mock_trends_client() -> MockTrendsClient:
    return MockTrendsClient()


@pytest.fixture
def event_publisher(mock_event_bus) -> TrendCampaignEventPublisher:
    return TrendCampaignEventPublisher(event_bus=mock_event_bus)


@pytest.fixture
def rollback(mock_platform, recording_sleep) -> RollbackCoordinator:
    return RollbackCoordinator(mock_platform, propagation_delay=2.0, sleep=recording_sleep)


@pytest.fixture
def provisioner(mock_platform, rollback, defaults, clock) -> CampaignProvisioner:
    return CampaignProvisioner(mock_platform, rollback, defaults=defaults, clock=clock)


@pytest.fixture
def registry(campaign_repository, mock_platform, event_publisher, clock) -> CampaignLifecycleRegistry:
    return CampaignLifecycleRegistry(
        campaign_repository, mock_platform, event_publisher=event_publisher, clock=clock
    )


@pytest.fixture
def article_service(article_repository, clock) -> ArticleService:
    return ArticleService(article_repository, clock=clock)


@pytest.fixture
def service(
    provisioner,
    registry,
    article_service,
    mock_trends_client,
    mock_platform,
    defaults,
    event_publisher,
    recording_sleep,
    clock,
) -> TrendCampaignService:
    return TrendCampaignService(
        provisioner=provisioner,
        registry=registry,
        article_service=article_service,
        trends_client=mock_trends_client,
        platform=mock_platform,
        defaults=defaults,
        event_publisher=event_publisher,
        sleep=recording_sleep,
        clock=clock,
    )
