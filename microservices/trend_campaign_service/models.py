"""
Trend Campaign Service Data Models

Defines the Pydantic models shared by the scorer, provisioner, registry
and HTTP layer.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================

class PlatformCampaignStatus(str, Enum):
    """Administrative status of a campaign on the advertising platform"""
    ENABLED = "ENABLED"
    PAUSED = "PAUSED"
    REMOVED = "REMOVED"


class StoredCampaignStatus(str, Enum):
    """Status of a campaign tracked by the lifecycle registry"""
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    EXPIRED = "EXPIRED"


class ProvisioningStep(str, Enum):
    """Creation saga states, in execution order"""
    START = "START"
    BUDGET_CREATED = "BUDGET_CREATED"
    CAMPAIGN_CREATED = "CAMPAIGN_CREATED"
    AD_GROUP_CREATED = "AD_GROUP_CREATED"
    KEYWORDS_ADDED = "KEYWORDS_ADDED"
    AD_CREATED = "AD_CREATED"  # Terminal success
    FAILED = "FAILED"


class ResourceKind(str, Enum):
    """Platform resource kinds touched by the creation saga"""
    BUDGET = "campaign_budget"
    CAMPAIGN = "campaign"
    AD_GROUP = "ad_group"
    AD_GROUP_CRITERION = "ad_group_criterion"
    AD_GROUP_AD = "ad_group_ad"


class ErrorCategory(str, Enum):
    """Classification of a platform failure"""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    SERVER = "server"


# =============================================================================
# BASE MODELS
# =============================================================================

def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseContract(BaseModel):
    """Base model for all contracts"""

    model_config = {
        "from_attributes": True,
    }


# =============================================================================
# ARTICLES & TRENDS
# =============================================================================

class Article(BaseContract):
    """Publisher article eligible for promotion"""
    id: str = Field(..., description="Opaque article identifier")
    title: str = Field(..., min_length=1, max_length=200)
    url: str = Field(..., description="Canonical article URL")
    keywords: List[str] = Field(..., min_length=1)
    category: str
    published_at: datetime = Field(default_factory=utc_now)
    short_description: Optional[str] = Field(None, max_length=90, description="Ad copy")


class TrendArticle(BaseContract):
    """News article attached to a trend by the trends source"""
    title: str = ""
    url: str = ""
    source: str = ""
    snippet: str = ""


class TrendingSearch(BaseContract):
    """A currently popular search query"""
    keyword: str = ""
    traffic: str = "0"
    related_queries: List[str] = Field(default_factory=list)
    articles: List[TrendArticle] = Field(default_factory=list)

    model_config = {"from_attributes": True, "frozen": True}


class TrendMatch(BaseContract):
    """Scored pairing of one trend with one article"""
    trend: TrendingSearch
    article: Article
    score: int = Field(..., ge=1)


# =============================================================================
# CAMPAIGNS
# =============================================================================

class CampaignSpec(BaseContract):
    """Everything the provisioner needs to create one search campaign.

    Field limits are checked by the provisioner before the first platform
    call so a bad spec never leaves partial state behind.
    """
    name: str
    budget_micros: int
    cpc_bid_micros: Optional[int] = None
    start_date: datetime
    end_date: datetime
    keywords: List[str]
    final_url: str
    headlines: List[str]
    descriptions: List[str]


class CampaignResult(BaseContract):
    """Outcome of a successful provisioning attempt"""
    campaign_id: str
    ad_group_id: str
    status: PlatformCampaignStatus
    resource_name: str = Field(..., description="Durable platform handle for the campaign")


class StoredCampaign(BaseContract):
    """Campaign tracked by the lifecycle registry"""
    id: str = Field(..., description="Platform campaign id")
    article_id: Optional[str] = None
    trend_keyword: Optional[str] = None
    result: CampaignResult
    created_at: datetime = Field(default_factory=utc_now)
    expires_at: datetime
    status: StoredCampaignStatus = StoredCampaignStatus.ACTIVE


# =============================================================================
# ERRORS
# =============================================================================

class PlatformErrorDetail(BaseContract):
    """One structured sub-error reported by the platform"""
    code: str = "UNKNOWN"
    type: str = "UNKNOWN"
    message: str = "Unknown error"
    field: Optional[str] = None
    trigger: Optional[str] = None


class ClassifiedError(BaseContract):
    """Externally visible description of a provisioning failure"""
    category: ErrorCategory
    status_code: int
    message: str
    errors: List[PlatformErrorDetail] = Field(default_factory=list)
    request_id: Optional[str] = None
    timestamp: datetime = Field(default_factory=utc_now)


# =============================================================================
# REQUEST / RESPONSE MODELS
# =============================================================================

class ArticleCreateRequest(BaseContract):
    """Request to add an article to the catalog"""
    title: str = Field(..., min_length=1, max_length=200)
    url: str = Field(..., pattern=r"^https?://")
    keywords: List[str] = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    short_description: Optional[str] = Field(None, max_length=90)


class ArticleUpdateRequest(BaseContract):
    """Partial article update; omitted fields keep their value"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    url: Optional[str] = Field(None, pattern=r"^https?://")
    keywords: Optional[List[str]] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    short_description: Optional[str] = Field(None, max_length=90)


class ArticleStatsResponse(BaseContract):
    """Catalog statistics"""
    total: int
    by_category: Dict[str, int] = Field(default_factory=dict)


class CampaignCreateRequest(BaseContract):
    """Campaign with every setting given explicitly"""
    name: str = Field(..., min_length=1, max_length=100)
    budget_micros: int = Field(..., ge=1_000_000, description="Daily budget in micros")
    cpc_bid_micros: Optional[int] = Field(None, ge=10_000, description="Max CPC in micros")
    duration_hours: int = Field(..., ge=1)
    keywords: List[str] = Field(..., min_length=1)
    final_url: str = Field(..., pattern=r"^https?://")
    headlines: List[str] = Field(..., min_length=3, description="Truncated to 30 chars each")
    descriptions: List[str] = Field(..., min_length=2, description="Truncated to 90 chars each")


class ExpressCampaignRequest(BaseContract):
    """Campaign for one article riding one trend"""
    article_id: str
    trend_keyword: str = Field(..., min_length=1)
    budget_micros: Optional[int] = Field(None, ge=1_000_000)
    duration_hours: Optional[int] = Field(None, ge=1)


class CleanupResponse(BaseContract):
    cleaned: int


class MessageResponse(BaseContract):
    message: str


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    port: int
    version: str
    dependencies: Dict[str, str] = Field(default_factory=dict)


__all__ = [
    # Enums
    "PlatformCampaignStatus",
    "StoredCampaignStatus",
    "ProvisioningStep",
    "ResourceKind",
    "ErrorCategory",
    # Core Models
    "Article",
    "TrendArticle",
    "TrendingSearch",
    "TrendMatch",
    "CampaignSpec",
    "CampaignResult",
    "StoredCampaign",
    "PlatformErrorDetail",
    "ClassifiedError",
    # Request/Response
    "ArticleCreateRequest",
    "ArticleUpdateRequest",
    "ArticleStatsResponse",
    "CampaignCreateRequest",
    "ExpressCampaignRequest",
    "CleanupResponse",
    "MessageResponse",
    "HealthResponse",
    "utc_now",
]
