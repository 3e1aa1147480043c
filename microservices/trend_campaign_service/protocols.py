"""
Trend Campaign Service Protocols

Defines interfaces for dependency injection and testing.
Following the protocol-based architecture pattern.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from .models import (
    Article,
    ClassifiedError,
    ProvisioningStep,
    StoredCampaign,
    TrendingSearch,
)


# ====================
# Repository Protocols
# ====================


class ArticleRepositoryProtocol(Protocol):
    """Keyed storage for the article catalog"""

    async def save_article(self, article: Article) -> Article:
        """Insert or replace an article"""
        ...

    async def get_article(self, article_id: str) -> Optional[Article]:
        """Get article by ID"""
        ...

    async def list_articles(self) -> List[Article]:
        """List all articles in insertion order"""
        ...

    async def delete_article(self, article_id: str) -> bool:
        """Delete article, returns False if it did not exist"""
        ...


class CampaignRepositoryProtocol(Protocol):
    """Keyed storage for campaigns created by this service"""

    async def save_campaign(self, campaign: StoredCampaign) -> StoredCampaign:
        """Insert or replace a stored campaign"""
        ...

    async def get_campaign(self, campaign_id: str) -> Optional[StoredCampaign]:
        """Get stored campaign by platform campaign ID"""
        ...

    async def list_campaigns(self) -> List[StoredCampaign]:
        """List all stored campaigns"""
        ...

    async def delete_campaign(self, campaign_id: str) -> bool:
        """Delete stored campaign, returns False if it did not exist"""
        ...


# ====================
# External Collaborator Protocols
# ====================


class AdsPlatformProtocol(Protocol):
    """Advertising platform operations used by the service.

    Every create call returns the platform resource name of the new
    resource. Failures raise PlatformCallError.
    """

    async def create_campaign_budget(self, budget: Dict[str, Any]) -> str:
        ...

    async def create_campaign(self, campaign: Dict[str, Any]) -> str:
        ...

    async def update_campaign(self, resource_name: str, fields: Dict[str, Any]) -> str:
        ...

    async def remove_campaign(self, resource_name: str) -> None:
        ...

    async def remove_campaign_budget(self, resource_name: str) -> None:
        ...

    async def create_ad_group(self, ad_group: Dict[str, Any]) -> str:
        ...

    async def create_ad_group_criteria(self, criteria: List[Dict[str, Any]]) -> List[str]:
        """Create several criteria in a single batched call"""
        ...

    async def create_ad_group_ad(self, ad_group_ad: Dict[str, Any]) -> str:
        ...

    async def search(self, query: str) -> List[Dict[str, Any]]:
        """Run a read-only reporting query and return its rows"""
        ...


class TrendsClientProtocol(Protocol):
    """Trending search source"""

    async def get_daily_trends(self, geo: Optional[str] = None) -> List[TrendingSearch]:
        ...

    async def get_realtime_trends(self, category: Optional[str] = None) -> List[TrendingSearch]:
        ...

    async def get_related_queries(self, keyword: str) -> List[str]:
        ...

    async def get_interest_over_time(
        self, keyword: str, start_time: Optional[datetime] = None
    ) -> Dict[str, Any]:
        ...

    async def get_top_trends_with_keywords(
        self, geo: Optional[str] = None, limit: int = 10
    ) -> List[TrendingSearch]:
        ...


class EventBusProtocol(Protocol):
    """Protocol for event bus operations"""

    async def publish(self, subject: str, data: Dict[str, Any]) -> Any:
        """Publish an event under a subject"""
        ...


# ====================
# Custom Exceptions
# ====================


class TrendCampaignServiceError(Exception):
    """Base exception for trend campaign service errors"""
    pass


class ArticleNotFoundError(TrendCampaignServiceError):
    """Raised when an article is not found"""
    pass


class CampaignNotFoundError(TrendCampaignServiceError):
    """Raised when a stored campaign is not found"""
    pass


class CampaignValidationError(TrendCampaignServiceError):
    """Raised when a campaign spec is rejected before any platform call"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class PlatformCallError(TrendCampaignServiceError):
    """Raised by the platform adapter when a call fails.

    ``errors`` holds the platform's structured sub-errors exactly as
    received; the classifier is responsible for interpreting them.
    ``status_code`` and ``status`` (e.g. "UNAUTHENTICATED") come from the
    HTTP response and classify failures that carry no sub-errors.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[Dict[str, Any]]] = None,
        request_id: Optional[str] = None,
        status_code: Optional[int] = None,
        status: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        self.request_id = request_id
        self.status_code = status_code
        self.status = status


class TrendsSourceError(TrendCampaignServiceError):
    """Raised when the trends source cannot be read or returns garbage"""
    pass


class CampaignProvisioningError(TrendCampaignServiceError):
    """Raised when the creation saga fails, after rollback has run.

    ``step`` is always FAILED; ``last_completed_step`` is the state the saga
    had reached before the failing call.
    """

    def __init__(self, classified: ClassifiedError, last_completed_step: ProvisioningStep):
        super().__init__(classified.message)
        self.classified = classified
        self.step = ProvisioningStep.FAILED
        self.last_completed_step = last_completed_step

    @property
    def status_code(self) -> int:
        return self.classified.status_code


__all__ = [
    "ArticleRepositoryProtocol",
    "CampaignRepositoryProtocol",
    "AdsPlatformProtocol",
    "TrendsClientProtocol",
    "EventBusProtocol",
    "TrendCampaignServiceError",
    "ArticleNotFoundError",
    "CampaignNotFoundError",
    "CampaignValidationError",
    "PlatformCallError",
    "TrendsSourceError",
    "CampaignProvisioningError",
]
