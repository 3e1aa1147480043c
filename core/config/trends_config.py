#!/usr/bin/env python3
"""Google Trends source configuration"""
import os
from dataclasses import dataclass


def _float(val: str, default: float) -> float:
    try:
        return float(val) if val else default
    except ValueError:
        return default


@dataclass
class TrendsConfig:
    """Trends region, language and endpoint"""
    geo: str = "AR"
    language: str = "es"
    base_url: str = "https://trends.google.com"
    timeout: float = 30.0
    # Pause between related-query lookups when enriching top trends
    enrich_delay_seconds: float = 1.0

    @classmethod
    def from_env(cls) -> 'TrendsConfig':
        """Load trends config from environment variables"""
        return cls(
            geo=os.getenv("GOOGLE_TRENDS_GEO", "AR"),
            language=os.getenv("GOOGLE_TRENDS_LANGUAGE", "es"),
            base_url=os.getenv("GOOGLE_TRENDS_BASE_URL", "https://trends.google.com"),
            timeout=_float(os.getenv("GOOGLE_TRENDS_TIMEOUT", "30"), 30.0),
            enrich_delay_seconds=_float(os.getenv("GOOGLE_TRENDS_ENRICH_DELAY_SECONDS", "1"), 1.0),
        )
