"""
Trend Campaign Service Business Logic

Composes trend matching, the provisioning saga and the lifecycle registry:
explicit campaign creation, express campaigns for one article riding one
trend, and batch auto-creation from the current top matches.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from core.config import CampaignDefaults

from . import reporting
from .article_service import ArticleService
from .campaign_registry import CampaignLifecycleRegistry
from .events.publishers import TrendCampaignEventPublisher
from .models import (
    Article,
    CampaignCreateRequest,
    CampaignResult,
    CampaignSpec,
    ExpressCampaignRequest,
    StoredCampaign,
)
from .protocols import (
    AdsPlatformProtocol,
    CampaignProvisioningError,
    TrendsClientProtocol,
)
from .provisioner import MAX_NAME_LENGTH, CampaignProvisioner, unique_keywords

logger = logging.getLogger(__name__)

EXPRESS_NAME_PREFIX = "Express: "
EXPRESS_FALLBACK_DESCRIPTION = "Información actualizada y confiable"


def express_headlines(article: Article) -> List[str]:
    return [
        article.title[:30],
        f"{article.category} - Última Hora",
        "Lee Más Aquí",
    ]


def express_descriptions(article: Article) -> List[str]:
    return [
        article.short_description or EXPRESS_FALLBACK_DESCRIPTION,
        f"Toda la actualidad de {article.category}",
    ]


class TrendCampaignService:
    """Trend campaign orchestration layer"""

    def __init__(
        self,
        provisioner: CampaignProvisioner,
        registry: CampaignLifecycleRegistry,
        article_service: ArticleService,
        trends_client: TrendsClientProtocol,
        platform: AdsPlatformProtocol,
        defaults: Optional[CampaignDefaults] = None,
        event_publisher: Optional[TrendCampaignEventPublisher] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.provisioner = provisioner
        self.registry = registry
        self.article_service = article_service
        self.trends_client = trends_client
        self.platform = platform
        self.defaults = defaults or CampaignDefaults()
        self.event_publisher = event_publisher or TrendCampaignEventPublisher()
        self._sleep = sleep
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ====================
    # Creation
    # ====================

    async def _provision_and_store(
        self,
        spec: CampaignSpec,
        article_id: Optional[str] = None,
        trend_keyword: Optional[str] = None,
    ) -> CampaignResult:
        try:
            result = await self.provisioner.provision(spec)
        except CampaignProvisioningError as e:
            await self.event_publisher.publish_provisioning_failed(
                spec.name, e.classified, article_id=article_id, trend_keyword=trend_keyword
            )
            raise

        stored = StoredCampaign(
            id=result.campaign_id,
            article_id=article_id,
            trend_keyword=trend_keyword,
            result=result,
            created_at=spec.start_date,
            expires_at=spec.end_date,
        )
        await self.registry.insert(stored)
        await self.event_publisher.publish_campaign_provisioned(stored, spec.name)
        return result

    async def create_campaign(self, request: CampaignCreateRequest) -> CampaignResult:
        """Provision a campaign from explicit settings"""
        logger.info(f"Creating campaign: {request.name}")
        start = self._clock()
        spec = CampaignSpec(
            name=request.name,
            budget_micros=request.budget_micros,
            cpc_bid_micros=request.cpc_bid_micros or self.defaults.cpc_bid_micros,
            start_date=start,
            end_date=start + timedelta(hours=request.duration_hours),
            keywords=request.keywords,
            final_url=request.final_url,
            headlines=request.headlines,
            descriptions=request.descriptions,
        )
        return await self._provision_and_store(spec)

    def build_express_spec(
        self,
        article: Article,
        trend_keyword: str,
        budget_micros: Optional[int] = None,
        duration_hours: Optional[int] = None,
    ) -> CampaignSpec:
        """Campaign spec promoting ``article`` on ``trend_keyword``.

        The name carries the date plus a short random suffix so repeated
        attempts for the same trend never collide on the platform.
        """
        start = self._clock()
        duration = duration_hours or self.defaults.duration_hours

        suffix = f" - {start.strftime('%Y-%m-%d')} #{uuid.uuid4().hex[:6]}"
        room = MAX_NAME_LENGTH - len(EXPRESS_NAME_PREFIX) - len(suffix)
        name = f"{EXPRESS_NAME_PREFIX}{trend_keyword.strip()[:room]}{suffix}"

        return CampaignSpec(
            name=name,
            budget_micros=budget_micros or self.defaults.budget_micros,
            cpc_bid_micros=self.defaults.cpc_bid_micros,
            start_date=start,
            end_date=start + timedelta(hours=duration),
            keywords=unique_keywords([trend_keyword] + list(article.keywords)),
            final_url=article.url,
            headlines=express_headlines(article),
            descriptions=express_descriptions(article),
        )

    async def create_express_campaign(self, request: ExpressCampaignRequest) -> CampaignResult:
        """Provision a campaign for one article riding one trend.

        Raises ArticleNotFoundError before any platform call when the
        article does not exist.
        """
        logger.info(
            f"Creating express campaign for article: {request.article_id}, "
            f"trend: {request.trend_keyword}"
        )
        article = await self.article_service.get_article(request.article_id)
        spec = self.build_express_spec(
            article,
            request.trend_keyword,
            budget_micros=request.budget_micros,
            duration_hours=request.duration_hours,
        )
        result = await self._provision_and_store(
            spec, article_id=article.id, trend_keyword=request.trend_keyword
        )
        logger.info(f"Express campaign created: {result.campaign_id}")
        return result

    async def auto_create_from_trends(
        self,
        geo: Optional[str] = None,
        max_campaigns: Optional[int] = None,
    ) -> List[CampaignResult]:
        """Create express campaigns for the top-ranked trend/article matches.

        Matches are processed one at a time in rank order with a pacing delay
        between attempts. A failed match is logged and skipped.
        """
        limit = max_campaigns or self.defaults.auto_create_max_campaigns
        logger.info("Auto-creating campaigns from trends")

        trends = await self.trends_client.get_daily_trends(geo)
        logger.info(f"Found {len(trends)} trends")

        matches = await self.article_service.match_with_trends(trends)
        top_matches = matches[:limit]

        results: List[CampaignResult] = []
        for index, match in enumerate(top_matches):
            if index and self.defaults.pacing_delay_seconds > 0:
                await self._sleep(self.defaults.pacing_delay_seconds)

            logger.info(
                f"Creating campaign for trend: {match.trend.keyword}, "
                f"article: {match.article.title} (score {match.score})"
            )
            try:
                spec = self.build_express_spec(match.article, match.trend.keyword)
                result = await self._provision_and_store(
                    spec, article_id=match.article.id, trend_keyword=match.trend.keyword
                )
                results.append(result)
            except Exception as e:
                logger.error(f"Error creating campaign for {match.trend.keyword}: {e}")

        logger.info(f"Created {len(results)} of {len(top_matches)} campaigns")
        return results

    # ====================
    # Queries
    # ====================

    async def get_stored_campaign(self, campaign_id: str) -> Optional[StoredCampaign]:
        return await self.registry.get(campaign_id)

    async def list_stored_campaigns(self) -> List[StoredCampaign]:
        return await self.registry.list()

    async def get_campaign_stats(self, campaign_id: str) -> Optional[Dict[str, Any]]:
        return await reporting.get_campaign_stats(self.platform, campaign_id)

    async def list_active_campaigns(self) -> List[Dict[str, Any]]:
        return await reporting.list_active_campaigns(self.platform)

    async def get_account_info(self) -> Optional[Dict[str, Any]]:
        logger.info("Fetching account info...")
        return await reporting.get_account_info(self.platform)

    # ====================
    # Lifecycle
    # ====================

    async def pause_campaign(self, campaign_id: str) -> Optional[StoredCampaign]:
        return await self.registry.pause(campaign_id)

    async def enable_campaign(self, campaign_id: str) -> Optional[StoredCampaign]:
        return await self.registry.enable(campaign_id)

    async def remove_campaign(self, campaign_id: str) -> bool:
        return await self.registry.remove(campaign_id)

    async def cleanup_expired_campaigns(self) -> int:
        return await self.registry.sweep_expired(self._clock())


__all__ = ["TrendCampaignService", "express_headlines", "express_descriptions"]
