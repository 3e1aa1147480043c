"""
Campaign Lifecycle Registry

Tracks the campaigns this service created. Status changes are applied on
the platform first, through the campaign's resource name, and only then
recorded locally. All access to stored campaigns goes through this class.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from .events.publishers import TrendCampaignEventPublisher
from .models import PlatformCampaignStatus, StoredCampaign, StoredCampaignStatus
from .protocols import AdsPlatformProtocol, CampaignRepositoryProtocol

logger = logging.getLogger(__name__)

# EXPIRED entries are ones a previous sweep failed to remove
SWEEPABLE_STATUSES = (StoredCampaignStatus.ACTIVE, StoredCampaignStatus.EXPIRED)


class CampaignLifecycleRegistry:
    """Keyed store of provisioned campaigns with platform-backed transitions"""

    def __init__(
        self,
        repository: CampaignRepositoryProtocol,
        platform: AdsPlatformProtocol,
        event_publisher: Optional[TrendCampaignEventPublisher] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.repository = repository
        self.platform = platform
        self.event_publisher = event_publisher or TrendCampaignEventPublisher()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def insert(self, campaign: StoredCampaign) -> StoredCampaign:
        stored = await self.repository.save_campaign(campaign)
        logger.info(f"Registered campaign {campaign.id}, expires {campaign.expires_at.isoformat()}")
        return stored

    async def get(self, campaign_id: str) -> Optional[StoredCampaign]:
        return await self.repository.get_campaign(campaign_id)

    async def list(self) -> List[StoredCampaign]:
        return await self.repository.list_campaigns()

    async def pause(self, campaign_id: str) -> Optional[StoredCampaign]:
        """Pause on the platform and locally. Unknown ids are a no-op returning None."""
        return await self._set_status(
            campaign_id, PlatformCampaignStatus.PAUSED, StoredCampaignStatus.PAUSED
        )

    async def enable(self, campaign_id: str) -> Optional[StoredCampaign]:
        """Enable on the platform and mark ACTIVE locally. Unknown ids are a no-op returning None."""
        return await self._set_status(
            campaign_id, PlatformCampaignStatus.ENABLED, StoredCampaignStatus.ACTIVE
        )

    async def _set_status(
        self,
        campaign_id: str,
        platform_status: PlatformCampaignStatus,
        stored_status: StoredCampaignStatus,
    ) -> Optional[StoredCampaign]:
        campaign = await self.repository.get_campaign(campaign_id)
        if not campaign:
            logger.debug(f"Status change for unknown campaign {campaign_id} ignored")
            return None

        await self.platform.update_campaign(
            campaign.result.resource_name, {"status": platform_status.value}
        )

        updated = campaign.model_copy(update={
            "status": stored_status,
            "result": campaign.result.model_copy(update={"status": platform_status}),
        })
        await self.repository.save_campaign(updated)
        logger.info(f"Campaign {campaign_id} is now {stored_status.value}")

        await self.event_publisher.publish_status_changed(updated)
        return updated

    async def remove(self, campaign_id: str, expired: bool = False) -> bool:
        """Remove on the platform, then drop the local entry.

        Returns False for unknown ids. Platform failures propagate and leave
        the local entry in place.
        """
        campaign = await self.repository.get_campaign(campaign_id)
        if not campaign:
            return False

        await self.platform.remove_campaign(campaign.result.resource_name)
        await self.repository.delete_campaign(campaign_id)
        logger.info(f"Campaign {campaign_id} removed{' (expired)' if expired else ''}")

        await self.event_publisher.publish_campaign_removed(campaign, expired=expired)
        return True

    async def sweep_expired(self, now: Optional[datetime] = None) -> int:
        """Remove every ACTIVE campaign whose expiry has passed.

        Each one is marked EXPIRED before the platform removal, so an entry
        whose removal failed stays EXPIRED and is retried on the next sweep.
        One campaign failing to remove does not stop the sweep. Returns the
        number of campaigns actually removed.
        """
        now = now or self._clock()
        cleaned = 0

        for campaign in await self.repository.list_campaigns():
            if campaign.status not in SWEEPABLE_STATUSES or campaign.expires_at >= now:
                continue
            try:
                if campaign.status != StoredCampaignStatus.EXPIRED:
                    await self.repository.save_campaign(
                        campaign.model_copy(update={"status": StoredCampaignStatus.EXPIRED})
                    )
                if await self.remove(campaign.id, expired=True):
                    cleaned += 1
            except Exception as e:
                logger.error(f"Failed to remove expired campaign {campaign.id}: {e}")

        if cleaned:
            logger.info(f"Expired campaign sweep removed {cleaned} campaign(s)")
        return cleaned


__all__ = ["CampaignLifecycleRegistry"]
