"""
Unit Tests for Trend/Article Matching

Cross-product scoring, zero-score filtering and stable rank ordering.
"""

from microservices.trend_campaign_service.relevance import match_trends


class TestMatchTrends:
    """match_trends over trends x articles"""

    def test_sorted_by_score_descending(self, factory, now):
        # Given: one strong and one weak article for the same trend
        trend = factory.make_trend("elecciones 2025")
        weak = factory.make_article(title="Agenda", keywords=["elecciones"], hours_old=100)
        strong = factory.make_article(title="Elecciones 2025 en vivo", keywords=["elecciones"])

        # When
        matches = match_trends([trend], [weak, strong], clock=lambda: now)

        # Then
        assert [m.article.id for m in matches] == [strong.id, weak.id]
        scores = [m.score for m in matches]
        assert scores == sorted(scores, reverse=True)

    def test_zero_score_pairs_are_dropped(self, factory, now):
        trend = factory.make_trend("tenis")
        unrelated = factory.make_article(title="Lluvias", keywords=["clima"], hours_old=200)

        assert match_trends([trend], [unrelated], clock=lambda: now) == []

    def test_ties_keep_trend_then_article_order(self, factory, now):
        # Every pair scores only the recency bonus, so all four tie
        trends = [factory.make_trend("aaa"), factory.make_trend("bbb")]
        articles = [
            factory.make_article(title="x1", keywords=["zzz"], hours_old=1),
            factory.make_article(title="x2", keywords=["yyy"], hours_old=1),
        ]

        matches = match_trends(trends, articles, clock=lambda: now)

        assert [(m.trend.keyword, m.article.title) for m in matches] == [
            ("aaa", "x1"),
            ("aaa", "x2"),
            ("bbb", "x1"),
            ("bbb", "x2"),
        ]
        assert {m.score for m in matches} == {2}

    def test_every_match_has_positive_score(self, factory, now):
        trends = [factory.make_trend("elecciones 2025"), factory.make_trend("dólar blue")]
        articles = [
            factory.make_article(),
            factory.make_article(title="Dólar blue hoy", keywords=["dólar"], hours_old=50),
            factory.make_article(title="Lluvias", keywords=["clima"], hours_old=200),
        ]

        matches = match_trends(trends, articles, clock=lambda: now)

        assert matches
        assert all(m.score >= 1 for m in matches)

    def test_empty_inputs_return_empty_list(self, factory, now):
        article = factory.make_article()
        trend = factory.make_trend()

        assert match_trends([], [article], clock=lambda: now) == []
        assert match_trends([trend], [], clock=lambda: now) == []
        assert match_trends([], []) == []

    def test_clock_is_sampled_per_pair(self, factory, now):
        calls = []

        def clock():
            calls.append(1)
            return now

        trends = [factory.make_trend("a"), factory.make_trend("b")]
        articles = [factory.make_article(), factory.make_article(), factory.make_article()]

        match_trends(trends, articles, clock=clock)

        assert len(calls) == 6

    def test_accepts_generators(self, factory, now):
        trends = (t for t in [factory.make_trend("elecciones 2025")])
        articles = (a for a in [factory.make_article()])

        matches = match_trends(trends, articles, clock=lambda: now)

        assert len(matches) == 1
