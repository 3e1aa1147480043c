"""
Component Tests for the Google Ads REST Client

Drives GoogleAdsClient through httpx.MockTransport: OAuth token exchange,
mutate payloads, error envelope conversion and search pagination.
"""

import json

import httpx
import pytest

from core.config import AdsPlatformConfig
from microservices.trend_campaign_service.clients.google_ads_client import GoogleAdsClient
from microservices.trend_campaign_service.error_classifier import classify_error
from tests.contracts.trend_campaign.data_contract import (
    CUSTOMER_ID,
    ErrorCategory,
    PlatformCallError,
)

TOKEN_HOST = "oauth2.googleapis.com"
MUTATE_ROOT = f"/v17/customers/{CUSTOMER_ID}"


def make_config(**overrides) -> AdsPlatformConfig:
    data = {
        "client_id": "client-id",
        "client_secret": "client-secret",
        "developer_token": "dev-token",
        "refresh_token": "refresh-token",
        "customer_id": CUSTOMER_ID,
    }
    data.update(overrides)
    return AdsPlatformConfig(**data)


class RecordingHandler:
    """MockTransport handler serving a token plus queued API responses"""

    def __init__(self, *responses: httpx.Response, token_status: int = 200):
        self.responses = list(responses)
        self.token_status = token_status
        self.token_requests = []
        self.api_requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == TOKEN_HOST:
            self.token_requests.append(request)
            if self.token_status != 200:
                return httpx.Response(self.token_status, text="invalid_grant")
            return httpx.Response(200, json={"access_token": "tok-1", "expires_in": 3600})
        self.api_requests.append(request)
        return self.responses.pop(0)

    def body(self, index: int = -1):
        return json.loads(self.api_requests[index].content)


def make_client(handler, **config_overrides) -> GoogleAdsClient:
    return GoogleAdsClient(make_config(**config_overrides), transport=httpx.MockTransport(handler))


def created(*names: str) -> httpx.Response:
    return httpx.Response(200, json={"results": [{"resourceName": n} for n in names]})


class TestMutations:

    @pytest.mark.asyncio
    async def test_create_budget_posts_mutate_with_auth_headers(self):
        handler = RecordingHandler(created(f"customers/{CUSTOMER_ID}/campaignBudgets/11"))

        async with make_client(handler) as client:
            name = await client.create_campaign_budget({"name": "Budget", "amountMicros": "1000000"})

        assert name == f"customers/{CUSTOMER_ID}/campaignBudgets/11"
        request = handler.api_requests[0]
        assert request.method == "POST"
        assert request.url.path == f"{MUTATE_ROOT}/campaignBudgets:mutate"
        assert request.headers["Authorization"] == "Bearer tok-1"
        assert request.headers["developer-token"] == "dev-token"
        assert "login-customer-id" not in request.headers
        assert handler.body() == {
            "operations": [{"create": {"name": "Budget", "amountMicros": "1000000"}}]
        }

    @pytest.mark.asyncio
    async def test_token_request_uses_refresh_grant(self):
        handler = RecordingHandler(created("customers/1/campaigns/2"))

        async with make_client(handler) as client:
            await client.create_campaign({"name": "x"})

        form = handler.token_requests[0].content.decode()
        assert "grant_type=refresh_token" in form
        assert "refresh_token=refresh-token" in form

    @pytest.mark.asyncio
    async def test_access_token_is_cached(self):
        handler = RecordingHandler(created("a/1"), created("a/2"))

        async with make_client(handler) as client:
            await client.create_ad_group({"name": "AG 1"})
            await client.create_ad_group({"name": "AG 2"})

        assert len(handler.token_requests) == 1
        assert len(handler.api_requests) == 2

    @pytest.mark.asyncio
    async def test_login_customer_id_header(self):
        handler = RecordingHandler(created("a/1"))

        async with make_client(handler, login_customer_id="9876543210") as client:
            await client.create_ad_group_ad({"adGroup": "a"})

        assert handler.api_requests[0].headers["login-customer-id"] == "9876543210"

    @pytest.mark.asyncio
    async def test_criteria_are_sent_in_one_batch(self):
        handler = RecordingHandler(created("c/1", "c/2"))

        async with make_client(handler) as client:
            names = await client.create_ad_group_criteria([{"keyword": {"text": "a"}}, {"keyword": {"text": "b"}}])

        assert names == ["c/1", "c/2"]
        assert len(handler.api_requests) == 1
        assert handler.api_requests[0].url.path == f"{MUTATE_ROOT}/adGroupCriteria:mutate"
        assert len(handler.body()["operations"]) == 2

    @pytest.mark.asyncio
    async def test_update_campaign_sends_update_mask(self):
        resource = f"customers/{CUSTOMER_ID}/campaigns/5"
        handler = RecordingHandler(created(resource))

        async with make_client(handler) as client:
            await client.update_campaign(resource, {"status": "PAUSED"})

        assert handler.body() == {
            "operations": [
                {"update": {"resourceName": resource, "status": "PAUSED"}, "updateMask": "status"}
            ]
        }

    @pytest.mark.asyncio
    async def test_remove_operations(self):
        handler = RecordingHandler(httpx.Response(200, json={}), httpx.Response(200, json={}))

        async with make_client(handler) as client:
            await client.remove_campaign("customers/1/campaigns/5")
            await client.remove_campaign_budget("customers/1/campaignBudgets/4")

        assert handler.api_requests[0].url.path == f"{MUTATE_ROOT}/campaigns:mutate"
        assert handler.body(0) == {"operations": [{"remove": "customers/1/campaigns/5"}]}
        assert handler.api_requests[1].url.path == f"{MUTATE_ROOT}/campaignBudgets:mutate"
        assert handler.body(1) == {"operations": [{"remove": "customers/1/campaignBudgets/4"}]}

    @pytest.mark.asyncio
    async def test_create_without_resource_name_raises(self):
        handler = RecordingHandler(httpx.Response(200, json={"results": []}))

        async with make_client(handler) as client:
            with pytest.raises(PlatformCallError):
                await client.create_campaign({"name": "x"})


class TestErrorConversion:

    @pytest.mark.asyncio
    async def test_failure_envelope_becomes_platform_error(self, factory):
        body = factory.make_failure_envelope(
            [factory.make_error_entry("rangeError", "TOO_LOW", "Too low.", ["operations", "create"])],
            request_id="req-xyz789",
        )
        handler = RecordingHandler(httpx.Response(400, json=body))

        async with make_client(handler) as client:
            with pytest.raises(PlatformCallError) as exc_info:
                await client.create_campaign_budget({"amountMicros": "1"})

        error = exc_info.value
        assert error.status_code == 400
        assert error.request_id == "req-xyz789"
        assert error.errors[0]["errorCode"] == {"rangeError": "TOO_LOW"}

        classified = classify_error(error)
        assert classified.category == ErrorCategory.VALIDATION
        assert classified.errors[0].field == "operations.create"

    @pytest.mark.asyncio
    async def test_rejected_token_classifies_as_authentication(self):
        handler = RecordingHandler(token_status=401)

        async with make_client(handler) as client:
            with pytest.raises(PlatformCallError) as exc_info:
                await client.create_campaign({"name": "x"})

        assert handler.api_requests == []
        assert classify_error(exc_info.value).category == ErrorCategory.AUTHENTICATION

    @pytest.mark.asyncio
    async def test_non_json_error_classifies_as_server(self):
        handler = RecordingHandler(httpx.Response(503, text="<html>unavailable</html>"))

        async with make_client(handler) as client:
            with pytest.raises(PlatformCallError) as exc_info:
                await client.create_campaign({"name": "x"})

        assert exc_info.value.status_code == 503
        assert exc_info.value.errors == []
        assert classify_error(exc_info.value).category == ErrorCategory.SERVER

    @pytest.mark.asyncio
    async def test_transport_failure_becomes_platform_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == TOKEN_HOST:
                return httpx.Response(200, json={"access_token": "tok", "expires_in": 3600})
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(handler) as client:
            with pytest.raises(PlatformCallError) as exc_info:
                await client.create_campaign({"name": "x"})

        assert "ConnectError" in exc_info.value.message
        assert classify_error(exc_info.value).category == ErrorCategory.SERVER

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status_code, status, category",
        [
            (401, "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION),
            (403, "PERMISSION_DENIED", ErrorCategory.AUTHORIZATION),
            (404, "NOT_FOUND", ErrorCategory.NOT_FOUND),
            (429, "RESOURCE_EXHAUSTED", ErrorCategory.RATE_LIMITED),
        ],
    )
    async def test_envelope_without_failure_details_uses_http_status(
        self, status_code, status, category
    ):
        body = {"error": {"code": status_code, "status": status, "message": f"{status} call"}}
        handler = RecordingHandler(httpx.Response(status_code, json=body))

        async with make_client(handler) as client:
            with pytest.raises(PlatformCallError) as exc_info:
                await client.create_campaign({"name": "x"})

        error = exc_info.value
        assert error.errors == []
        assert error.status == status
        classified = classify_error(error)
        assert classified.category == category
        assert classified.status_code == status_code
        assert classified.message == f"{status} call"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"error": "invalid_request"},
            {"error": None},
            {"error": {"details": "not-a-list"}},
            {"error": {"details": [{"@type": "x.GoogleAdsFailure", "errors": "oops"}]}},
            ["unexpected"],
        ],
    )
    async def test_odd_error_bodies_still_raise_platform_error(self, body):
        handler = RecordingHandler(httpx.Response(400, json=body))

        async with make_client(handler) as client:
            with pytest.raises(PlatformCallError) as exc_info:
                await client.remove_campaign(f"customers/{CUSTOMER_ID}/campaigns/1")

        assert exc_info.value.status_code == 400
        assert exc_info.value.errors == []

    @pytest.mark.asyncio
    async def test_string_error_body_keeps_its_message(self):
        handler = RecordingHandler(httpx.Response(400, json={"error": "invalid_request"}))

        async with make_client(handler) as client:
            with pytest.raises(PlatformCallError) as exc_info:
                await client.remove_campaign(f"customers/{CUSTOMER_ID}/campaigns/1")

        assert exc_info.value.message == "invalid_request"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "token_response",
        [
            httpx.Response(200, json={"token_type": "Bearer"}),
            httpx.Response(200, text="not json"),
            httpx.Response(200, json=["tok"]),
            httpx.Response(200, json={"access_token": "tok", "expires_in": "soon"}),
        ],
    )
    async def test_unreadable_token_response_raises_platform_error(self, token_response):
        api_requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == TOKEN_HOST:
                return token_response
            api_requests.append(request)
            return created("unused")

        async with make_client(handler) as client:
            with pytest.raises(PlatformCallError) as exc_info:
                await client.create_campaign({"name": "x"})

        assert "OAuth token response unreadable" in exc_info.value.message
        assert api_requests == []

    @pytest.mark.asyncio
    async def test_unreadable_success_body_raises_platform_error(self):
        handler = RecordingHandler(httpx.Response(200, text="<html>ok</html>"))

        async with make_client(handler) as client:
            with pytest.raises(PlatformCallError):
                await client.create_campaign({"name": "x"})


class TestSearch:

    @pytest.mark.asyncio
    async def test_follows_pagination_and_normalizes_query(self):
        handler = RecordingHandler(
            httpx.Response(200, json={"results": [{"campaign": {"id": "1"}}], "nextPageToken": "p2"}),
            httpx.Response(200, json={"results": [{"campaign": {"id": "2"}}]}),
        )

        async with make_client(handler) as client:
            rows = await client.search("""
                SELECT campaign.id
                FROM campaign
            """)

        assert [r["campaign"]["id"] for r in rows] == ["1", "2"]
        assert handler.api_requests[0].url.path == f"{MUTATE_ROOT}/googleAds:search"
        assert handler.body(0) == {"query": "SELECT campaign.id FROM campaign"}
        assert handler.body(1) == {"query": "SELECT campaign.id FROM campaign", "pageToken": "p2"}

    @pytest.mark.asyncio
    async def test_empty_result_set(self):
        handler = RecordingHandler(httpx.Response(200, json={}))

        async with make_client(handler) as client:
            assert await client.search("SELECT customer.id FROM customer") == []
