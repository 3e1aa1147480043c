#!/usr/bin/env python3
"""Top level settings for the trend campaign service

Aggregates the per-concern configs so the factory and entrypoint only need
one object.
"""
import os
from dataclasses import dataclass, field

from .ads_config import AdsPlatformConfig
from .campaign_config import CampaignDefaults
from .logging_config import LoggingConfig
from .trends_config import TrendsConfig

def _bool(val: str) -> bool:
    return val.lower() == "true"

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


@dataclass
class ServiceSettings:
    """Complete service configuration"""

    environment: str = "development"
    debug: bool = False

    service_host: str = "0.0.0.0"
    service_port: int = 8260

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    ads: AdsPlatformConfig = field(default_factory=AdsPlatformConfig)
    trends: TrendsConfig = field(default_factory=TrendsConfig)
    campaigns: CampaignDefaults = field(default_factory=CampaignDefaults)

    @classmethod
    def from_env(cls) -> 'ServiceSettings':
        """Load complete configuration from environment"""
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        return cls(
            environment=env,
            debug=_bool(os.getenv("DEBUG", "true" if env == "development" else "false")),
            service_host=os.getenv("HOST", "0.0.0.0"),
            service_port=_int(os.getenv("SERVICE_PORT", "8260"), 8260),
            logging=LoggingConfig.from_env(),
            ads=AdsPlatformConfig.from_env(),
            trends=TrendsConfig.from_env(),
            campaigns=CampaignDefaults.from_env(),
        )
