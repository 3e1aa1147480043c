#!/usr/bin/env python3
"""Modular configuration system for the trend campaign service

Configuration hierarchy:
- logging_config: Logging configuration
- ads_config: Advertising platform credentials and endpoint
- trends_config: Trends source region/language
- campaign_config: Provisioning defaults, pacing and rollback delays
- service_settings: Aggregate of the above plus host/port
"""
import os
from dotenv import load_dotenv
from .logging_config import LoggingConfig
from .ads_config import AdsPlatformConfig
from .trends_config import TrendsConfig
from .campaign_config import CampaignDefaults
from .service_settings import ServiceSettings

# Load environment file based on ENV
env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
env_files = {
    "development": "deployment/environments/dev.env",
    "dev": "deployment/environments/dev.env",
    "testing": "deployment/environments/test.env",
    "test": "deployment/environments/test.env",
    "staging": "deployment/environments/staging.env",
    "production": "deployment/environments/production.env",
}
env_file = env_files.get(env, "deployment/environments/dev.env")
load_dotenv(env_file, override=False)

# Create global settings instance
settings = ServiceSettings.from_env()

def get_settings() -> ServiceSettings:
    """Get global settings instance"""
    return settings

def reload_settings() -> ServiceSettings:
    """Reload settings from environment"""
    global settings
    settings = ServiceSettings.from_env()
    return settings

__all__ = [
    'ServiceSettings',
    'get_settings',
    'reload_settings',
    'settings',
    'LoggingConfig',
    'AdsPlatformConfig',
    'TrendsConfig',
    'CampaignDefaults',
]
