"""
Google Trends Client

Reads the public Google Trends JSON endpoints and normalizes them into
TrendingSearch records. All calls are read-only, so transient transport
errors are retried.
"""

import asyncio
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from core.config import TrendsConfig
from core.service_client_base import BaseAPIClient

from ..models import TrendArticle, TrendingSearch
from ..protocols import TrendsSourceError

logger = logging.getLogger(__name__)

# Anti-JSON-hijacking prefix on every Trends response
XSSI_PREFIX = ")]}'"

DEFAULT_INTEREST_WINDOW = timedelta(days=7)


def strip_xssi_prefix(text: str) -> str:
    text = text.lstrip()
    if text.startswith(XSSI_PREFIX):
        text = text[len(XSSI_PREFIX):].lstrip(",").lstrip()
    return text


def _normalize_daily(trend: Dict[str, Any]) -> TrendingSearch:
    return TrendingSearch(
        keyword=(trend.get("title") or {}).get("query") or "",
        traffic=trend.get("formattedTraffic") or "0",
        related_queries=[q.get("query") for q in trend.get("relatedQueries") or [] if q.get("query")],
        articles=[
            TrendArticle(
                title=a.get("title") or "",
                url=a.get("url") or "",
                source=a.get("source") or "",
                snippet=a.get("snippet") or "",
            )
            for a in trend.get("articles") or []
        ],
    )


def _normalize_story(story: Dict[str, Any]) -> TrendingSearch:
    articles = story.get("articles") or []
    return TrendingSearch(
        keyword=story.get("title") or "",
        traffic=str(len(articles)),
        related_queries=[name for name in story.get("entityNames") or [] if name],
        articles=[
            TrendArticle(
                title=a.get("articleTitle") or "",
                url=a.get("url") or "",
                source=a.get("source") or "",
                snippet=a.get("snippet") or "",
            )
            for a in articles
        ],
    )


class GoogleTrendsClient(BaseAPIClient):
    """Google Trends client implementing TrendsClientProtocol"""

    client_name = "google_trends"

    def __init__(
        self,
        config: TrendsConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_wait=None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        super().__init__(base_url=config.base_url, timeout=config.timeout, transport=transport)
        self.config = config
        self._retry_wait = retry_wait or wait_exponential(multiplier=1, min=1, max=10)
        self._sleep = sleep

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Any:
        """GET a Trends endpoint, retrying transport errors up to 3 attempts"""
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(3),
                wait=self._retry_wait,
                retry=retry_if_exception_type(httpx.TransportError),
                reraise=True,
            ):
                with attempt:
                    response = await self.get(path, params=params)
        except httpx.TransportError as e:
            raise TrendsSourceError(f"Trends request {path} failed: {type(e).__name__}: {e}") from e

        if response.status_code != 200:
            raise TrendsSourceError(f"Trends request {path} returned HTTP {response.status_code}")
        try:
            return json.loads(strip_xssi_prefix(response.text))
        except ValueError as e:
            raise TrendsSourceError(f"Trends request {path} returned invalid JSON: {e}") from e

    async def get_daily_trends(self, geo: Optional[str] = None) -> List[TrendingSearch]:
        geo = geo or self.config.geo
        logger.info(f"Fetching daily trends for geo: {geo}")
        data = await self._get_json(
            "/trends/api/dailytrends",
            {"hl": self.config.language, "geo": geo, "tz": 0, "ns": 15},
        )
        days = ((data or {}).get("default") or {}).get("trendingSearchesDays") or []
        searches = (days[0].get("trendingSearches") or []) if days else []
        return [_normalize_daily(trend) for trend in searches]

    async def get_realtime_trends(self, category: Optional[str] = None) -> List[TrendingSearch]:
        logger.info("Fetching real-time trends")
        data = await self._get_json(
            "/trends/api/realtimetrends",
            {
                "hl": self.config.language,
                "geo": self.config.geo,
                "cat": category or "all",
                "tz": 0,
                "fi": 0,
                "fs": 0,
                "ri": 300,
                "rs": 20,
                "sort": 0,
            },
        )
        stories = ((data or {}).get("storySummaries") or {}).get("trendingStories") or []
        return [_normalize_story(story) for story in stories]

    async def _explore_widget(self, keyword: str, widget_id: str, time_range: str) -> Dict[str, Any]:
        """Look up the token/request pair the widgetdata endpoints require"""
        req = {
            "comparisonItem": [{"keyword": keyword, "geo": self.config.geo, "time": time_range}],
            "category": 0,
            "property": "",
        }
        data = await self._get_json(
            "/trends/api/explore",
            {"hl": self.config.language, "tz": 0, "req": json.dumps(req)},
        )
        for widget in (data or {}).get("widgets") or []:
            if widget.get("id") == widget_id:
                return widget
        raise TrendsSourceError(f"Trends explore returned no {widget_id} widget for '{keyword}'")

    async def _widget_data(self, path: str, widget: Dict[str, Any]) -> Any:
        return await self._get_json(
            path,
            {
                "hl": self.config.language,
                "tz": 0,
                "req": json.dumps(widget.get("request") or {}),
                "token": widget.get("token", ""),
            },
        )

    async def get_related_queries(self, keyword: str) -> List[str]:
        logger.info(f"Fetching related queries for: {keyword}")
        widget = await self._explore_widget(keyword, "RELATED_QUERIES", "now 7-d")
        data = await self._widget_data("/trends/api/widgetdata/relatedsearches", widget)
        ranked = ((data or {}).get("default") or {}).get("rankedList") or []
        keywords = (ranked[0].get("rankedKeyword") or []) if ranked else []
        return [item.get("query") for item in keywords if item.get("query")]

    async def get_interest_over_time(
        self, keyword: str, start_time: Optional[datetime] = None
    ) -> Dict[str, Any]:
        logger.info(f"Fetching interest over time for: {keyword}")
        end_time = datetime.now(timezone.utc)
        start_time = start_time or end_time - DEFAULT_INTEREST_WINDOW
        time_range = f"{start_time.strftime('%Y-%m-%d')} {end_time.strftime('%Y-%m-%d')}"
        widget = await self._explore_widget(keyword, "TIMESERIES", time_range)
        return await self._widget_data("/trends/api/widgetdata/multiline", widget)

    async def get_top_trends_with_keywords(
        self, geo: Optional[str] = None, limit: int = 10
    ) -> List[TrendingSearch]:
        """Daily trends, top ``limit``, each enriched with its related queries"""
        top = (await self.get_daily_trends(geo))[:limit]

        enriched: List[TrendingSearch] = []
        for index, trend in enumerate(top):
            if index and self.config.enrich_delay_seconds > 0:
                await self._sleep(self.config.enrich_delay_seconds)
            try:
                related = await self.get_related_queries(trend.keyword)
            except Exception as e:
                logger.warning(f"Could not fetch related queries for: {trend.keyword} ({e})")
                enriched.append(trend)
                continue
            merged = list(dict.fromkeys(trend.related_queries + related))
            enriched.append(trend.model_copy(update={"related_queries": merged}))

        return enriched


__all__ = ["GoogleTrendsClient", "strip_xssi_prefix"]
