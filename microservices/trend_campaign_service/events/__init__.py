"""
Trend Campaign Service Events

Event models and publisher for trend campaign service.
"""

from .models import (
    TrendCampaignEventType,
    CampaignProvisionedEventData,
    CampaignProvisioningFailedEventData,
    CampaignStatusChangedEventData,
    CampaignRemovedEventData,
)
from .publishers import TrendCampaignEventPublisher

__all__ = [
    # Event Types
    "TrendCampaignEventType",
    # Event Data Models
    "CampaignProvisionedEventData",
    "CampaignProvisioningFailedEventData",
    "CampaignStatusChangedEventData",
    "CampaignRemovedEventData",
    # Publisher
    "TrendCampaignEventPublisher",
]
