"""
Trend Campaign Event Data Models

Event type definitions and payloads for trend campaign service events.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# =============================================================================
# Event Type Definitions
# =============================================================================


class TrendCampaignEventType(str, Enum):
    """
    Events published by trend_campaign_service.

    Subscribers should reference these rather than literal subjects.
    """
    # Provisioning
    PROVISIONED = "campaign.provisioned"
    PROVISIONING_FAILED = "campaign.provisioning_failed"

    # Lifecycle
    PAUSED = "campaign.paused"
    ENABLED = "campaign.enabled"
    REMOVED = "campaign.removed"
    EXPIRED = "campaign.expired"


# =============================================================================
# Event Data Models
# =============================================================================


class CampaignProvisionedEventData(BaseModel):
    """campaign.provisioned event data"""
    campaign_id: str = Field(..., description="Platform campaign ID")
    resource_name: str = Field(..., description="Platform resource name")
    name: str = Field(..., description="Campaign name")
    article_id: Optional[str] = Field(None, description="Promoted article, if any")
    trend_keyword: Optional[str] = Field(None, description="Trend that triggered the campaign")
    expires_at: datetime = Field(..., description="When the sweep will remove it")
    timestamp: Optional[datetime] = Field(None, description="Event timestamp")


class CampaignProvisioningFailedEventData(BaseModel):
    """campaign.provisioning_failed event data"""
    name: str = Field(..., description="Requested campaign name")
    category: str = Field(..., description="Error classification")
    status_code: int = Field(..., description="HTTP-style status of the failure")
    message: str = Field(..., description="Primary error message")
    request_id: Optional[str] = Field(None, description="Platform correlation id")
    article_id: Optional[str] = None
    trend_keyword: Optional[str] = None
    timestamp: Optional[datetime] = Field(None, description="Event timestamp")


class CampaignStatusChangedEventData(BaseModel):
    """campaign.paused / campaign.enabled event data"""
    campaign_id: str = Field(..., description="Platform campaign ID")
    resource_name: str = Field(..., description="Platform resource name")
    status: str = Field(..., description="New stored status")
    timestamp: Optional[datetime] = Field(None, description="Event timestamp")


class CampaignRemovedEventData(BaseModel):
    """campaign.removed / campaign.expired event data"""
    campaign_id: str = Field(..., description="Platform campaign ID")
    resource_name: str = Field(..., description="Platform resource name")
    article_id: Optional[str] = None
    trend_keyword: Optional[str] = None
    expires_at: Optional[datetime] = None
    timestamp: Optional[datetime] = Field(None, description="Event timestamp")


__all__ = [
    "TrendCampaignEventType",
    "CampaignProvisionedEventData",
    "CampaignProvisioningFailedEventData",
    "CampaignStatusChangedEventData",
    "CampaignRemovedEventData",
]
