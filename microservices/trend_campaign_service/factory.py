"""
Trend Campaign Service Factory

Factory for creating trend campaign service instances with proper dependency injection.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from core.config import ServiceSettings, get_settings

from .article_service import ArticleService
from .campaign_registry import CampaignLifecycleRegistry
from .campaign_repository import InMemoryArticleRepository, InMemoryCampaignRepository
from .campaign_service import TrendCampaignService
from .clients.google_ads_client import GoogleAdsClient
from .clients.trends_client import GoogleTrendsClient
from .events.publishers import TrendCampaignEventPublisher
from .protocols import AdsPlatformProtocol, EventBusProtocol, TrendsClientProtocol
from .provisioner import CampaignProvisioner
from .rollback import RollbackCoordinator

logger = logging.getLogger(__name__)


class TrendCampaignServiceFactory:
    """Factory for creating trend campaign service components.

    Collaborators left as None are built from settings; tests pass mocks.
    """

    def __init__(
        self,
        settings: Optional[ServiceSettings] = None,
        platform: Optional[AdsPlatformProtocol] = None,
        trends_client: Optional[TrendsClientProtocol] = None,
        event_bus: Optional[EventBusProtocol] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings or get_settings()
        self._platform = platform
        self._trends_client = trends_client
        self._event_bus = event_bus
        self._sleep = sleep

        self._article_service: Optional[ArticleService] = None
        self._registry: Optional[CampaignLifecycleRegistry] = None
        self._provisioner: Optional[CampaignProvisioner] = None
        self._service: Optional[TrendCampaignService] = None
        self._event_publisher: Optional[TrendCampaignEventPublisher] = None

    async def initialize(self) -> None:
        """Initialize all components"""
        logger.info("Initializing Trend Campaign Service components...")
        defaults = self.settings.campaigns

        if self._platform is None:
            if not self.settings.ads.is_configured:
                logger.warning("Google Ads credentials incomplete, platform calls will fail")
            self._platform = GoogleAdsClient(self.settings.ads)
        if self._trends_client is None:
            self._trends_client = GoogleTrendsClient(self.settings.trends, sleep=self._sleep)

        if self._event_bus is None:
            logger.info("No event bus configured, events will be skipped")
        self._event_publisher = TrendCampaignEventPublisher(self._event_bus)

        self._article_service = ArticleService(InMemoryArticleRepository())
        self._registry = CampaignLifecycleRegistry(
            repository=InMemoryCampaignRepository(),
            platform=self._platform,
            event_publisher=self._event_publisher,
        )

        rollback = RollbackCoordinator(
            self._platform,
            propagation_delay=defaults.rollback_propagation_delay_seconds,
            sleep=self._sleep,
        )
        self._provisioner = CampaignProvisioner(self._platform, rollback, defaults)

        self._service = TrendCampaignService(
            provisioner=self._provisioner,
            registry=self._registry,
            article_service=self._article_service,
            trends_client=self._trends_client,
            platform=self._platform,
            defaults=defaults,
            event_publisher=self._event_publisher,
            sleep=self._sleep,
        )

        logger.info("Trend Campaign Service components initialized")

    async def close(self) -> None:
        """Close all components"""
        logger.info("Closing Trend Campaign Service components...")

        for client in (self._platform, self._trends_client):
            if isinstance(client, (GoogleAdsClient, GoogleTrendsClient)):
                await client.close()

        logger.info("Trend Campaign Service components closed")

    @property
    def service(self) -> TrendCampaignService:
        """Get trend campaign service"""
        if not self._service:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._service

    @property
    def article_service(self) -> ArticleService:
        """Get article service"""
        if not self._article_service:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._article_service

    @property
    def registry(self) -> CampaignLifecycleRegistry:
        """Get campaign lifecycle registry"""
        if not self._registry:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._registry

    @property
    def trends_client(self) -> TrendsClientProtocol:
        """Get trends client"""
        if not self._trends_client:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._trends_client

    @property
    def platform(self) -> AdsPlatformProtocol:
        """Get advertising platform client"""
        if not self._platform:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._platform

    @property
    def event_publisher(self) -> Optional[TrendCampaignEventPublisher]:
        """Get event publisher"""
        return self._event_publisher


__all__ = [
    "TrendCampaignServiceFactory",
]
