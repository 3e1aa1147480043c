"""
Article Catalog Business Logic

CRUD over the publisher's article catalog plus matching the catalog
against trending searches.
"""

import logging
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Callable, List, Optional

from .models import (
    Article,
    ArticleCreateRequest,
    ArticleStatsResponse,
    ArticleUpdateRequest,
    TrendingSearch,
    TrendMatch,
)
from .protocols import ArticleNotFoundError, ArticleRepositoryProtocol
from .relevance import match_trends

logger = logging.getLogger(__name__)


class ArticleService:
    """Article catalog business logic layer"""

    def __init__(
        self,
        repository: ArticleRepositoryProtocol,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.repository = repository
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _generate_id(self) -> str:
        return f"article-{int(self._clock().timestamp() * 1000)}-{uuid.uuid4().hex[:9]}"

    async def create_article(self, request: ArticleCreateRequest) -> Article:
        article = Article(
            id=self._generate_id(),
            title=request.title,
            url=request.url,
            keywords=request.keywords,
            category=request.category,
            published_at=self._clock(),
            short_description=request.short_description,
        )
        await self.repository.save_article(article)
        logger.info(f"Article created: {article.id} ({article.category})")
        return article

    async def bulk_create(self, requests: List[ArticleCreateRequest]) -> List[Article]:
        articles = [await self.create_article(request) for request in requests]
        logger.info(f"Bulk created {len(articles)} article(s)")
        return articles

    async def list_articles(
        self,
        category: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> List[Article]:
        """List the catalog, optionally filtered by category and/or keyword"""
        articles = await self.repository.list_articles()
        if category:
            wanted = category.lower()
            articles = [a for a in articles if a.category.lower() == wanted]
        if keyword:
            needle = keyword.lower()
            articles = [a for a in articles if any(needle in k.lower() for k in a.keywords)]
        return articles

    async def find_by_category(self, category: str) -> List[Article]:
        return await self.list_articles(category=category)

    async def find_by_keyword(self, keyword: str) -> List[Article]:
        return await self.list_articles(keyword=keyword)

    async def get_article(self, article_id: str) -> Article:
        article = await self.repository.get_article(article_id)
        if not article:
            raise ArticleNotFoundError(f"Article not found: {article_id}")
        return article

    async def update_article(self, article_id: str, request: ArticleUpdateRequest) -> Article:
        """Replace the stored article with one merging the provided fields"""
        existing = await self.get_article(article_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        updated = existing.model_copy(update=changes)
        await self.repository.save_article(updated)
        logger.info(f"Article updated: {article_id} ({', '.join(changes) or 'no changes'})")
        return updated

    async def delete_article(self, article_id: str) -> None:
        if not await self.repository.delete_article(article_id):
            raise ArticleNotFoundError(f"Article not found: {article_id}")
        logger.info(f"Article deleted: {article_id}")

    async def get_stats(self) -> ArticleStatsResponse:
        articles = await self.repository.list_articles()
        return ArticleStatsResponse(
            total=len(articles),
            by_category=dict(Counter(a.category for a in articles)),
        )

    async def match_with_trends(self, trends: List[TrendingSearch]) -> List[TrendMatch]:
        """Rank the whole catalog against the given trends"""
        articles = await self.repository.list_articles()
        matches = match_trends(trends, articles)
        logger.info(
            f"Matched {len(trends)} trend(s) against {len(articles)} article(s): "
            f"{len(matches)} match(es)"
        )
        return matches


__all__ = ["ArticleService"]
