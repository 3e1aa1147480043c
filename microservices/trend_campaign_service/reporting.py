"""
Campaign Reporting Queries

Read-only GAQL queries run through the platform's search operation.
"""

from typing import Any, Dict, List, Optional

from .protocols import AdsPlatformProtocol, CampaignValidationError

CAMPAIGN_STATS_QUERY = """
    SELECT
        campaign.id,
        campaign.name,
        campaign.status,
        metrics.impressions,
        metrics.clicks,
        metrics.cost_micros,
        metrics.conversions,
        metrics.ctr,
        metrics.average_cpc
    FROM campaign
    WHERE campaign.id = {campaign_id}
"""

ACTIVE_CAMPAIGNS_QUERY = """
    SELECT
        campaign.id,
        campaign.name,
        campaign.status,
        campaign.start_date,
        campaign.end_date,
        campaign_budget.amount_micros
    FROM campaign
    WHERE campaign.status = 'ENABLED'
    ORDER BY campaign.start_date DESC
"""

ACCOUNT_INFO_QUERY = """
    SELECT
        customer.id,
        customer.descriptive_name,
        customer.currency_code,
        customer.time_zone,
        customer.test_account,
        customer.manager,
        customer.status
    FROM customer
    LIMIT 1
"""


async def get_campaign_stats(
    platform: AdsPlatformProtocol, campaign_id: str
) -> Optional[Dict[str, Any]]:
    """Metrics row for one campaign, None if the platform has no such campaign"""
    # Interpolated into the query, so only plain numeric ids are accepted
    if not campaign_id.isdigit():
        raise CampaignValidationError(f"Invalid campaign id: {campaign_id}", field="campaign_id")
    rows = await platform.search(CAMPAIGN_STATS_QUERY.format(campaign_id=campaign_id))
    return rows[0] if rows else None


async def list_active_campaigns(platform: AdsPlatformProtocol) -> List[Dict[str, Any]]:
    return await platform.search(ACTIVE_CAMPAIGNS_QUERY)


async def get_account_info(platform: AdsPlatformProtocol) -> Optional[Dict[str, Any]]:
    rows = await platform.search(ACCOUNT_INFO_QUERY)
    return rows[0] if rows else None


__all__ = [
    "get_campaign_stats",
    "list_active_campaigns",
    "get_account_info",
    "CAMPAIGN_STATS_QUERY",
    "ACTIVE_CAMPAIGNS_QUERY",
    "ACCOUNT_INFO_QUERY",
]
