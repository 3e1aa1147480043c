"""
Trend Campaign Service Data Repositories

Data access layer - in-process dictionaries. Records live for the lifetime
of the process; swap in a durable implementation of the repository
protocols to persist them.
"""

import logging
from typing import Dict, List, Optional

from .models import Article, StoredCampaign

logger = logging.getLogger(__name__)


class InMemoryArticleRepository:
    """Article catalog keyed by article id, insertion ordered"""

    def __init__(self):
        self._articles: Dict[str, Article] = {}

    async def save_article(self, article: Article) -> Article:
        self._articles[article.id] = article
        return article

    async def get_article(self, article_id: str) -> Optional[Article]:
        return self._articles.get(article_id)

    async def list_articles(self) -> List[Article]:
        return list(self._articles.values())

    async def delete_article(self, article_id: str) -> bool:
        return self._articles.pop(article_id, None) is not None


class InMemoryCampaignRepository:
    """Stored campaigns keyed by platform campaign id"""

    def __init__(self):
        self._campaigns: Dict[str, StoredCampaign] = {}

    async def save_campaign(self, campaign: StoredCampaign) -> StoredCampaign:
        self._campaigns[campaign.id] = campaign
        return campaign

    async def get_campaign(self, campaign_id: str) -> Optional[StoredCampaign]:
        return self._campaigns.get(campaign_id)

    async def list_campaigns(self) -> List[StoredCampaign]:
        return list(self._campaigns.values())

    async def delete_campaign(self, campaign_id: str) -> bool:
        removed = self._campaigns.pop(campaign_id, None) is not None
        if removed:
            logger.debug(f"Deleted stored campaign {campaign_id}")
        return removed


__all__ = ["InMemoryArticleRepository", "InMemoryCampaignRepository"]
