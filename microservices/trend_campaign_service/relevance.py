"""
Trend-to-Article Relevance

Scores how well an article fits a trending query and ranks every
(trend, article) pair. Pure functions, no I/O.

Scoring rules:
- +3 per trend token found in the article title
- +2 per (article keyword, trend token) pair where either contains the other
- +1 per (article keyword, related query) pair where either contains the other
- +2 if the article is under 24h old, +1 if under 72h
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, List, Optional

from .models import Article, TrendMatch, TrendingSearch

TITLE_TOKEN_WEIGHT = 3
KEYWORD_TOKEN_WEIGHT = 2
RELATED_QUERY_WEIGHT = 1

FRESH_WINDOW = timedelta(hours=24)
RECENT_WINDOW = timedelta(hours=72)
FRESH_BONUS = 2
RECENT_BONUS = 1

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _fold(values: Iterable[str]) -> List[str]:
    """Lowercase and drop empty strings, which would contain-match anything"""
    return [v.lower() for v in values if v and v.strip()]


def _overlaps(a: str, b: str) -> bool:
    return a in b or b in a


def recency_bonus(published_at: datetime, now: datetime) -> int:
    if published_at.tzinfo is None:
        published_at = published_at.replace(tzinfo=timezone.utc)
    age = now - published_at
    if age < FRESH_WINDOW:
        return FRESH_BONUS
    if age < RECENT_WINDOW:
        return RECENT_BONUS
    return 0


def score_relevance(
    trend: TrendingSearch,
    article: Article,
    now: Optional[datetime] = None,
) -> int:
    """Return a non-negative relevance score for one trend/article pair.

    ``now`` is sampled per call when not given, so two calls straddling the
    24h or 72h boundary may differ by the recency bonus.
    """
    if now is None:
        now = _utc_now()

    tokens = _fold(trend.keyword.split())
    related = _fold(trend.related_queries)
    keywords = _fold(article.keywords)
    title = article.title.lower()

    score = 0

    # Each token scores once no matter how often it recurs in the title
    for token in tokens:
        if token in title:
            score += TITLE_TOKEN_WEIGHT

    for keyword in keywords:
        for token in tokens:
            if _overlaps(keyword, token):
                score += KEYWORD_TOKEN_WEIGHT
        for query in related:
            if _overlaps(keyword, query):
                score += RELATED_QUERY_WEIGHT

    score += recency_bonus(article.published_at, now)
    return score


def match_trends(
    trends: Iterable[TrendingSearch],
    articles: Iterable[Article],
    clock: Optional[Clock] = None,
) -> List[TrendMatch]:
    """Score the full trends x articles cross product.

    Zero-score pairs are dropped. The result is ordered by score descending;
    equal scores keep trend-then-article enumeration order.
    """
    clock = clock or _utc_now
    article_list = list(articles)

    matches: List[TrendMatch] = []
    for trend in trends:
        for article in article_list:
            score = score_relevance(trend, article, now=clock())
            if score > 0:
                matches.append(TrendMatch(trend=trend, article=article, score=score))

    return sorted(matches, key=lambda m: m.score, reverse=True)


__all__ = ["score_relevance", "match_trends", "recency_bonus"]
