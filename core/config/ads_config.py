#!/usr/bin/env python3
"""Advertising platform (Google Ads API) configuration

Credentials are OAuth2 installed-app style: a long lived refresh token is
exchanged for short lived access tokens by the platform client.
"""
import os
from dataclasses import dataclass
from typing import Optional


def _float(val: str, default: float) -> float:
    try:
        return float(val) if val else default
    except ValueError:
        return default


@dataclass
class AdsPlatformConfig:
    """Google Ads API credentials and endpoint"""

    client_id: str = ""
    client_secret: str = ""
    developer_token: str = ""
    refresh_token: str = ""
    customer_id: str = ""
    login_customer_id: Optional[str] = None

    api_base_url: str = "https://googleads.googleapis.com"
    api_version: str = "v17"
    token_url: str = "https://oauth2.googleapis.com/token"
    timeout: float = 30.0

    @property
    def is_configured(self) -> bool:
        return bool(self.developer_token and self.refresh_token and self.customer_id)

    @classmethod
    def from_env(cls) -> 'AdsPlatformConfig':
        """Load platform credentials from environment variables"""
        login_customer_id = os.getenv("GOOGLE_ADS_LOGIN_CUSTOMER_ID", "").replace("-", "")
        return cls(
            client_id=os.getenv("GOOGLE_ADS_CLIENT_ID", ""),
            client_secret=os.getenv("GOOGLE_ADS_CLIENT_SECRET", ""),
            developer_token=os.getenv("GOOGLE_ADS_DEVELOPER_TOKEN", ""),
            refresh_token=os.getenv("GOOGLE_ADS_REFRESH_TOKEN", ""),
            # Customer ids are shown with dashes in the UI, the API wants digits only
            customer_id=os.getenv("GOOGLE_ADS_CUSTOMER_ID", "").replace("-", ""),
            login_customer_id=login_customer_id or None,
            api_base_url=os.getenv("GOOGLE_ADS_API_BASE_URL", "https://googleads.googleapis.com"),
            api_version=os.getenv("GOOGLE_ADS_API_VERSION", "v17"),
            token_url=os.getenv("GOOGLE_OAUTH_TOKEN_URL", "https://oauth2.googleapis.com/token"),
            timeout=_float(os.getenv("GOOGLE_ADS_TIMEOUT", "30"), 30.0),
        )
