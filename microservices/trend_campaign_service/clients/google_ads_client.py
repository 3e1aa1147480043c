"""
Google Ads API Client

REST adapter for the advertising platform. Executes single mutate and
search calls and reports failures as PlatformCallError; it never retries
and never interprets error codes.
"""

import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from core.config import AdsPlatformConfig
from core.service_client_base import BaseAPIClient

from ..protocols import PlatformCallError

logger = logging.getLogger(__name__)

# Refresh the access token this many seconds before it actually expires
TOKEN_EXPIRY_MARGIN = 60

FAILURE_TYPE_SUFFIX = "GoogleAdsFailure"


def _snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class GoogleAdsClient(BaseAPIClient):
    """Google Ads REST client implementing AdsPlatformProtocol"""

    client_name = "google_ads"

    def __init__(
        self,
        config: AdsPlatformConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(
            base_url=config.api_base_url,
            timeout=config.timeout,
            transport=transport,
        )
        self.config = config
        self._access_token: Optional[str] = None
        self._token_expires_at = 0.0

    @property
    def customer_path(self) -> str:
        return f"/{self.config.api_version}/customers/{self.config.customer_id}"

    # ====================
    # Authentication
    # ====================

    async def _get_access_token(self) -> str:
        """Exchange the refresh token for an access token, cached until near expiry"""
        if self._access_token and time.monotonic() < self._token_expires_at:
            return self._access_token

        try:
            response = await self.client.post(
                self.config.token_url,
                data={
                    "grant_type": "refresh_token",
                    "client_id": self.config.client_id,
                    "client_secret": self.config.client_secret,
                    "refresh_token": self.config.refresh_token,
                },
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.HTTPError as e:
            raise PlatformCallError(f"OAuth token request failed: {e}") from e

        if response.status_code != 200:
            raise PlatformCallError(
                "OAuth token refresh rejected",
                errors=[{
                    "errorCode": {"authenticationError": "OAUTH_TOKEN_INVALID"},
                    "message": response.text[:200] or "OAuth token refresh rejected",
                }],
                status_code=response.status_code,
            )

        try:
            body = response.json()
            access_token = body["access_token"]
            expires_in = int(body.get("expires_in", 3600))
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            raise PlatformCallError(
                f"OAuth token response unreadable: {type(e).__name__}",
                status_code=response.status_code,
            ) from e

        self._access_token = str(access_token)
        self._token_expires_at = time.monotonic() + max(expires_in - TOKEN_EXPIRY_MARGIN, 0)
        logger.debug("Obtained new Google Ads access token")
        return self._access_token

    async def _headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {await self._get_access_token()}",
            "developer-token": self.config.developer_token,
        }
        if self.config.login_customer_id:
            headers["login-customer-id"] = self.config.login_customer_id
        return headers

    # ====================
    # Transport
    # ====================

    async def _call(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        headers = await self._headers()
        try:
            response = await self.post(path, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise PlatformCallError(f"Google Ads request failed: {type(e).__name__}: {e}") from e

        if not response.is_success:
            raise self._to_error(response)
        if not response.content:
            return {}

        try:
            body = response.json()
        except ValueError as e:
            raise PlatformCallError(
                "Google Ads returned an unreadable response body",
                status_code=response.status_code,
            ) from e
        if not isinstance(body, dict):
            raise PlatformCallError(
                "Google Ads returned an unexpected response body",
                status_code=response.status_code,
            )
        return body

    @staticmethod
    def _to_error(response: httpx.Response) -> PlatformCallError:
        """Convert an error response into a PlatformCallError with the GoogleAdsFailure payload"""
        try:
            body = response.json()
        except ValueError:
            return PlatformCallError(
                f"Google Ads returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        envelope = body.get("error") if isinstance(body, dict) else None
        if not isinstance(envelope, dict):
            # OAuth-style bodies carry a bare string, e.g. {"error": "invalid_request"}
            message = envelope if isinstance(envelope, str) and envelope else None
            return PlatformCallError(
                message or f"Google Ads returned HTTP {response.status_code}",
                request_id=response.headers.get("request-id"),
                status_code=response.status_code,
            )

        errors: List[Dict[str, Any]] = []
        request_id = None
        details = envelope.get("details")
        for detail in details if isinstance(details, list) else []:
            if isinstance(detail, dict) and str(detail.get("@type", "")).endswith(FAILURE_TYPE_SUFFIX):
                failures = detail.get("errors")
                if isinstance(failures, list):
                    errors.extend(failures)
                request_id = request_id or detail.get("requestId")

        status = envelope.get("status")
        return PlatformCallError(
            str(envelope.get("message") or f"Google Ads returned HTTP {response.status_code}"),
            errors=errors,
            request_id=request_id or response.headers.get("request-id"),
            status_code=response.status_code,
            status=status if isinstance(status, str) else None,
        )

    async def _mutate(self, resource: str, operations: List[Dict[str, Any]]) -> List[str]:
        body = await self._call(
            f"{self.customer_path}/{resource}:mutate", {"operations": operations}
        )
        return [result.get("resourceName", "") for result in body.get("results", [])]

    async def _create_one(self, resource: str, payload: Dict[str, Any]) -> str:
        names = await self._mutate(resource, [{"create": payload}])
        if not names or not names[0]:
            raise PlatformCallError(f"Google Ads returned no resource name for {resource}")
        return names[0]

    # ====================
    # Mutations
    # ====================

    async def create_campaign_budget(self, budget: Dict[str, Any]) -> str:
        return await self._create_one("campaignBudgets", budget)

    async def create_campaign(self, campaign: Dict[str, Any]) -> str:
        return await self._create_one("campaigns", campaign)

    async def update_campaign(self, resource_name: str, fields: Dict[str, Any]) -> str:
        update = {"resourceName": resource_name}
        update.update(fields)
        names = await self._mutate("campaigns", [{
            "update": update,
            "updateMask": ",".join(_snake_to_camel(key) for key in fields),
        }])
        return names[0] if names else resource_name

    async def remove_campaign(self, resource_name: str) -> None:
        await self._mutate("campaigns", [{"remove": resource_name}])

    async def remove_campaign_budget(self, resource_name: str) -> None:
        await self._mutate("campaignBudgets", [{"remove": resource_name}])

    async def create_ad_group(self, ad_group: Dict[str, Any]) -> str:
        return await self._create_one("adGroups", ad_group)

    async def create_ad_group_criteria(self, criteria: List[Dict[str, Any]]) -> List[str]:
        return await self._mutate("adGroupCriteria", [{"create": c} for c in criteria])

    async def create_ad_group_ad(self, ad_group_ad: Dict[str, Any]) -> str:
        return await self._create_one("adGroupAds", ad_group_ad)

    # ====================
    # Reporting
    # ====================

    async def search(self, query: str) -> List[Dict[str, Any]]:
        """Run a GAQL query, following pagination"""
        rows: List[Dict[str, Any]] = []
        payload: Dict[str, Any] = {"query": " ".join(query.split())}
        while True:
            body = await self._call(f"{self.customer_path}/googleAds:search", payload)
            rows.extend(body.get("results", []))
            page_token = body.get("nextPageToken")
            if not page_token:
                return rows
            payload = dict(payload, pageToken=page_token)


__all__ = ["GoogleAdsClient"]
