"""
Trend Campaign Service

Search-advertising automation for a news publisher:
- Article catalog and trend-to-article relevance matching
- Multi-step campaign provisioning with compensating rollback
- Platform error classification
- Lifecycle tracking (pause, enable, remove, expiry sweep)

Port: 8260
"""

__version__ = "1.0.0"
__service__ = "trend_campaign_service"
