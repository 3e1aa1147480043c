"""
Unit Tests for Trend/Article Relevance Scoring

Title tokens, keyword overlap, related-query overlap and recency bonus.
"""

import pytest
from datetime import timedelta

from microservices.trend_campaign_service.relevance import (
    recency_bonus,
    score_relevance,
)


class TestScoreComponents:
    """Each scoring rule in isolation"""

    def test_reference_example_scores_at_least_seven(self, factory, now):
        # Given: the canonical election trend and a fresh matching article
        trend = factory.make_trend("elecciones 2025")
        article = factory.make_article(
            title="Elecciones 2025: Resultados preliminares",
            keywords=["elecciones", "resultados"],
            hours_old=1,
        )

        # When
        score = score_relevance(trend, article, now=now)

        # Then: title tokens 3+3, keyword "elecciones" vs token 2, fresh 2
        assert score >= 7
        assert score == 3 + 3 + 2 + 2

    def test_title_token_counts_once_even_when_repeated(self, factory, now):
        trend = factory.make_trend("boca")
        article = factory.make_article(
            title="Boca, Boca y más Boca", keywords=["futbol"], hours_old=100
        )

        assert score_relevance(trend, article, now=now) == 3

    def test_keyword_overlap_works_in_both_directions(self, factory, now):
        # "river" is contained in token "riverplate"; "superclasico" contains "clasico"
        trend = factory.make_trend("riverplate clasico")
        article = factory.make_article(
            title="Sin coincidencias", keywords=["river", "superclasico"], hours_old=100
        )

        assert score_relevance(trend, article, now=now) == 2 + 2

    def test_related_queries_add_one_per_overlap(self, factory, now):
        trend = factory.make_trend("xyz", related_queries=["inflación marzo", "precios"])
        article = factory.make_article(
            title="Sin coincidencias", keywords=["inflación", "precios"], hours_old=100
        )

        assert score_relevance(trend, article, now=now) == 1 + 1

    def test_matching_is_case_insensitive(self, factory, now):
        trend = factory.make_trend("MESSI")
        article = factory.make_article(title="Messi vuelve", keywords=["Messi"], hours_old=100)

        assert score_relevance(trend, article, now=now) == 3 + 2

    def test_no_overlap_and_old_article_scores_zero(self, factory, now):
        trend = factory.make_trend("tenis")
        article = factory.make_article(title="Lluvias en el AMBA", keywords=["clima"], hours_old=200)

        assert score_relevance(trend, article, now=now) == 0


class TestRecencyBonus:
    """+2 under 24h, +1 under 72h, 0 afterwards"""

    @pytest.mark.parametrize(
        "hours_old, expected",
        [(0, 2), (23.9, 2), (24, 1), (71.9, 1), (72, 0), (500, 0)],
    )
    def test_bonus_windows(self, now, hours_old, expected):
        assert recency_bonus(now - timedelta(hours=hours_old), now) == expected

    def test_naive_timestamp_is_treated_as_utc(self, now):
        naive = (now - timedelta(hours=2)).replace(tzinfo=None)
        assert recency_bonus(naive, now) == 2

    def test_bonus_changes_across_boundary(self, factory, now):
        # Same pair scored at two instants straddling the 24h boundary
        trend = factory.make_trend("tenis")
        article = factory.make_article(title="x", keywords=["clima"], published_at=now)

        before = score_relevance(trend, article, now=now + timedelta(hours=23))
        after = score_relevance(trend, article, now=now + timedelta(hours=25))

        assert (before, after) == (2, 1)


class TestEdgeCases:
    """Empty inputs contribute zero and never raise"""

    def test_empty_trend_keyword(self, factory, now):
        trend = factory.make_trend("")
        article = factory.make_article(hours_old=100)

        assert score_relevance(trend, article, now=now) == 0

    def test_whitespace_only_keyword_and_blank_related_queries(self, factory, now):
        trend = factory.make_trend("   ", related_queries=["", "  "])
        article = factory.make_article(keywords=["elecciones"], hours_old=100)

        assert score_relevance(trend, article, now=now) == 0

    def test_deterministic_for_fixed_now(self, factory, now):
        trend = factory.make_trend("elecciones 2025", related_queries=["resultados elecciones"])
        article = factory.make_article()

        assert score_relevance(trend, article, now=now) == score_relevance(trend, article, now=now)
