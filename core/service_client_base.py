"""
Base HTTP Client for External APIs

Base class for the service's outbound REST clients. Owns one
httpx.AsyncClient per instance and exposes thin request helpers.
"""

import httpx
import logging
from typing import Optional, Dict, Any
from abc import ABC

logger = logging.getLogger(__name__)


class BaseAPIClient(ABC):
    """
    External API client base class

    Handles:
    1. HTTP client lifecycle
    2. Default headers
    3. Timeout control
    4. Transport injection (tests pass an httpx.MockTransport)

    Example:
        class ReportingClient(BaseAPIClient):
            client_name = "reporting"

            async def get_report(self, report_id: str):
                response = await self.get(f"/reports/{report_id}")
                response.raise_for_status()
                return response.json()
    """

    # Subclasses set this, used in logs and the User-Agent header
    client_name: str = None

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: API root, relative request paths are joined onto it
            timeout: Request timeout in seconds
            headers: Extra default headers
            transport: Optional httpx transport override
        """
        if not self.client_name:
            raise ValueError(f"{self.__class__.__name__} must define 'client_name'")

        self.base_url = base_url.rstrip('/')

        default_headers = {
            "Content-Type": "application/json",
            "User-Agent": f"trend-campaign-service/{self.client_name}",
        }
        default_headers.update(headers or {})

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=default_headers,
            transport=transport,
        )

        logger.debug(f"Initialized {self.client_name} client: {self.base_url}")

    async def close(self):
        """Close the HTTP client"""
        await self.client.aclose()
        logger.debug(f"Closed {self.client_name} client")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # ========================================
    # HTTP helpers
    # ========================================

    async def get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        """GET request; absolute URLs bypass base_url"""
        return await self.client.get(path, params=params, headers=headers)

    async def post(
        self,
        path: str,
        json: Optional[Any] = None,
        data: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        """POST request; absolute URLs bypass base_url"""
        return await self.client.post(path, json=json, data=data, headers=headers)


__all__ = ["BaseAPIClient"]
