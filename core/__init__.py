#!/usr/bin/env python3
"""
Core Module

Shared building blocks for the microservices in this repository.

COMPONENTS:
    - config/: Dataclass configuration loaded from the environment
    - service_client_base.py: httpx based base class for outbound API clients

USAGE:
    from core.config import get_settings
    from core.service_client_base import BaseAPIClient

    settings = get_settings()
"""

from .service_client_base import BaseAPIClient

__all__ = [
    "BaseAPIClient",
]

__version__ = "2.0.0"
