"""
Trend Campaign Event Publishers

Publishes lifecycle events to an optional event bus. Publishing is best
effort: a missing bus or a failed publish is logged and reported as False.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..models import ClassifiedError, StoredCampaign
from .models import (
    TrendCampaignEventType,
    CampaignProvisionedEventData,
    CampaignProvisioningFailedEventData,
    CampaignStatusChangedEventData,
    CampaignRemovedEventData,
)

logger = logging.getLogger(__name__)


class TrendCampaignEventPublisher:
    """Publisher for trend campaign service events"""

    def __init__(self, event_bus=None):
        self.event_bus = event_bus
        self.source = "trend_campaign_service"

    async def publish(
        self,
        event_type: TrendCampaignEventType,
        data: Dict[str, Any],
    ) -> bool:
        """
        Publish an event.

        Args:
            event_type: The event type enum
            data: Event data payload

        Returns:
            True if published successfully, False otherwise
        """
        if not self.event_bus:
            logger.debug(f"Event bus not configured, skipping publish: {event_type.value}")
            return False

        try:
            event = {
                "event_type": event_type.value,
                "source": self.source,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "data": data,
            }

            await self.event_bus.publish(event_type.value, event)
            logger.debug(f"Published event: {event_type.value}")
            return True

        except Exception as e:
            logger.error(f"Failed to publish event {event_type.value}: {e}")
            return False

    # ====================
    # Provisioning Events
    # ====================

    async def publish_campaign_provisioned(self, campaign: StoredCampaign, name: str) -> bool:
        """Publish campaign.provisioned event"""
        data = CampaignProvisionedEventData(
            campaign_id=campaign.id,
            resource_name=campaign.result.resource_name,
            name=name,
            article_id=campaign.article_id,
            trend_keyword=campaign.trend_keyword,
            expires_at=campaign.expires_at,
            timestamp=datetime.now(timezone.utc),
        )
        return await self.publish(TrendCampaignEventType.PROVISIONED, data.model_dump(mode="json"))

    async def publish_provisioning_failed(
        self,
        name: str,
        error: ClassifiedError,
        article_id: Optional[str] = None,
        trend_keyword: Optional[str] = None,
    ) -> bool:
        """Publish campaign.provisioning_failed event"""
        data = CampaignProvisioningFailedEventData(
            name=name,
            category=error.category.value,
            status_code=error.status_code,
            message=error.message,
            request_id=error.request_id,
            article_id=article_id,
            trend_keyword=trend_keyword,
            timestamp=datetime.now(timezone.utc),
        )
        return await self.publish(
            TrendCampaignEventType.PROVISIONING_FAILED, data.model_dump(mode="json")
        )

    # ====================
    # Lifecycle Events
    # ====================

    async def publish_status_changed(self, campaign: StoredCampaign) -> bool:
        """Publish campaign.paused or campaign.enabled depending on the stored status"""
        event_type = (
            TrendCampaignEventType.PAUSED
            if campaign.status.value == "PAUSED"
            else TrendCampaignEventType.ENABLED
        )
        data = CampaignStatusChangedEventData(
            campaign_id=campaign.id,
            resource_name=campaign.result.resource_name,
            status=campaign.status.value,
            timestamp=datetime.now(timezone.utc),
        )
        return await self.publish(event_type, data.model_dump(mode="json"))

    async def publish_campaign_removed(self, campaign: StoredCampaign, expired: bool = False) -> bool:
        """Publish campaign.removed, or campaign.expired when removed by the sweep"""
        data = CampaignRemovedEventData(
            campaign_id=campaign.id,
            resource_name=campaign.result.resource_name,
            article_id=campaign.article_id,
            trend_keyword=campaign.trend_keyword,
            expires_at=campaign.expires_at,
            timestamp=datetime.now(timezone.utc),
        )
        event_type = TrendCampaignEventType.EXPIRED if expired else TrendCampaignEventType.REMOVED
        return await self.publish(event_type, data.model_dump(mode="json"))


__all__ = ["TrendCampaignEventPublisher"]
