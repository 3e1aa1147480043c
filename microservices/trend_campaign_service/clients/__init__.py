"""
Trend Campaign Service Clients

External API clients used by the service:
- GoogleAdsClient: advertising platform REST adapter
- GoogleTrendsClient: trending searches source
"""

from .google_ads_client import GoogleAdsClient
from .trends_client import GoogleTrendsClient

__all__ = ["GoogleAdsClient", "GoogleTrendsClient"]
