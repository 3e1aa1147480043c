#!/usr/bin/env python3
"""Campaign provisioning defaults

Budget and bid amounts are expressed in micros (1 currency unit = 1,000,000).
"""
import os
from dataclasses import dataclass

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default

def _float(val: str, default: float) -> float:
    try:
        return float(val) if val else default
    except ValueError:
        return default


@dataclass
class CampaignDefaults:
    """Defaults applied when a request leaves a value out"""

    budget_micros: int = 20_000_000
    cpc_bid_micros: int = 500_000
    duration_hours: int = 24

    # PAUSED keeps a fresh campaign from serving until someone enables it.
    # ENABLED is accepted for accounts that want trend campaigns live immediately.
    initial_status: str = "PAUSED"

    # Platform removals are eventually consistent; the budget is only
    # removable once the campaign removal has propagated.
    rollback_propagation_delay_seconds: float = 2.0

    # Fixed gap between platform-mutating operations in one batch
    pacing_delay_seconds: float = 2.0

    auto_create_max_campaigns: int = 3

    @classmethod
    def from_env(cls) -> 'CampaignDefaults':
        """Load campaign defaults from environment variables"""
        initial_status = os.getenv("CAMPAIGN_INITIAL_STATUS", "PAUSED").upper()
        if initial_status not in ("PAUSED", "ENABLED"):
            initial_status = "PAUSED"
        return cls(
            budget_micros=_int(os.getenv("DEFAULT_CAMPAIGN_BUDGET_MICROS", "20000000"), 20_000_000),
            cpc_bid_micros=_int(os.getenv("DEFAULT_CPC_BID_MICROS", "500000"), 500_000),
            duration_hours=_int(os.getenv("DEFAULT_CAMPAIGN_DURATION_HOURS", "24"), 24),
            initial_status=initial_status,
            rollback_propagation_delay_seconds=_float(
                os.getenv("ROLLBACK_PROPAGATION_DELAY_SECONDS", "2"), 2.0
            ),
            pacing_delay_seconds=_float(os.getenv("PLATFORM_PACING_DELAY_SECONDS", "2"), 2.0),
            auto_create_max_campaigns=_int(os.getenv("AUTO_CREATE_MAX_CAMPAIGNS", "3"), 3),
        )
