"""Tests for sentiment aggregation."""

from datetime import datetime

import pytest

from tradelens.config import SentimentWeights
from tradelens.core.sentiment import (
    AnalystRating,
    InsiderTrade,
    NewsArticle,
    SentimentInputs,
    SocialMention,
    analyze_analyst_sentiment,
    analyze_insider_sentiment,
    analyze_news_sentiment,
    analyze_social_sentiment,
    calculate_sentiment,
    news_momentum,
    sentiment_label,
)

AS_OF = datetime(2024, 6, 30)


class TestCalculateSentiment:
    """Test the composite score."""

    def test_no_data_is_neutral(self):
        """Missing feeds all score a neutral 50."""
        result = calculate_sentiment()

        assert result.score == 50
        assert result.label == "neutral"
        assert result.momentum == "neutral"
        assert result.interpretation.startswith("Mixed sentiment.")
        assert all(c.score == 50 for c in result.components.values())

    def test_empty_mapping_is_neutral(self):
        """An empty mapping behaves like no data."""
        assert calculate_sentiment({}).score == 50

    def test_explicit_news_sentiment(self):
        """Explicit article labels drive the news component."""
        result = calculate_sentiment(
            {
                "news": [
                    {"title": "a", "sentiment": "positive"},
                    {"title": "b", "sentiment": "bearish"},
                ]
            }
        )

        assert result.components["news"].score == 48
        assert result.score == 49

    def test_component_weights(self):
        """Component weights are reported and sum to 1."""
        result = calculate_sentiment()

        assert result.components["analyst"].weight == 0.35
        assert sum(c.weight for c in result.components.values()) == pytest.approx(1.0)

    def test_camel_case_mapping(self):
        """Provider camelCase keys are accepted."""
        result = calculate_sentiment(
            {
                "analystRatings": [{"newGrade": "Buy", "gradingCompany": "Broker"}],
                "insiderTrading": [
                    {
                        "transactionType": "P-Purchase",
                        "securitiesTransacted": 100,
                        "price": 10,
                        "filingDate": "2024-06-01",
                    }
                ],
            },
            as_of=AS_OF,
        )

        assert result.components["analyst"].score == 75
        assert result.components["insider"].score == 80

    def test_accepts_sentiment_inputs(self):
        """SentimentInputs coerces plain mappings into records."""
        inputs = SentimentInputs(social_mentions=[{"sentiment": "bullish", "count": 2}])

        assert isinstance(inputs.social_mentions[0], SocialMention)
        assert calculate_sentiment(inputs).components["social"].score == 80

    def test_extra_social_keys_ignored(self):
        """Unknown provider fields on social mentions are dropped."""
        result = calculate_sentiment(
            {"social_mentions": [{"sentiment": "bullish", "count": 10, "source": "reddit"}]}
        )

        assert result.components["social"].score == 80

    def test_social_mention_without_count(self):
        """A mention with no count carries no weight."""
        inputs = SentimentInputs(social_mentions=[{"sentiment": "bullish"}])

        assert inputs.social_mentions[0].count == 0
        assert calculate_sentiment(inputs).components["social"].score == 50


class TestNewsSentiment:
    """Test news scoring."""

    def test_headline_keywords(self):
        """Headlines without labels fall back to keyword matching."""
        assert analyze_news_sentiment([NewsArticle(title="Shares surge")]) == 70
        assert analyze_news_sentiment([NewsArticle(title="Stock drops on guidance")]) == 30
        assert analyze_news_sentiment([NewsArticle(title="Quarterly report filed")]) == 50

    def test_unknown_label_is_neutral(self):
        """Unrecognized sentiment labels count as 50."""
        assert analyze_news_sentiment([NewsArticle(title="x", sentiment="mixed")]) == 50


class TestAnalystSentiment:
    """Test recency-weighted analyst scoring."""

    def test_recency_weighting(self):
        """Newest rating counts fully, the next 0.65."""
        ratings = [AnalystRating(new_grade="Strong Buy"), AnalystRating(new_grade="Sell")]

        assert analyze_analyst_sentiment(ratings) == pytest.approx(111.25 / 1.65)

    def test_order_matters(self):
        """Reversing the order moves the score towards the newest grade."""
        bullish_first = [AnalystRating(new_grade="Strong Buy"), AnalystRating(new_grade="Sell")]
        bearish_first = list(reversed(bullish_first))

        assert analyze_analyst_sentiment(bullish_first) > analyze_analyst_sentiment(bearish_first)

    def test_composite_component_rounded(self):
        """The analyst component is rounded in the composite output."""
        result = calculate_sentiment(
            {"analyst_ratings": [{"new_grade": "strong buy"}, {"new_grade": "sell"}]}
        )

        assert result.components["analyst"].score == 67


class TestInsiderSentiment:
    """Test insider trading scoring."""

    def test_net_buying(self):
        """Two thirds buying maps to 60."""
        trades = [
            InsiderTrade("P-Purchase", 200, 10.0, "2024-06-01"),
            InsiderTrade("S-Sale", 100, 10.0, "2024-06-10"),
        ]

        assert analyze_insider_sentiment(trades, as_of=AS_OF) == pytest.approx(60.0)

    def test_stale_and_bad_dates_ignored(self):
        """Trades outside the window or with bad dates do not count."""
        trades = [
            InsiderTrade("P-Purchase", 200, 10.0, "2024-06-01"),
            InsiderTrade("S-Sale", 100, 10.0, "2024-06-10"),
            InsiderTrade("S-Sale", 100000, 10.0, "2024-01-01"),
            InsiderTrade("S-Sale", 100000, 10.0, "not-a-date"),
        ]

        assert analyze_insider_sentiment(trades, as_of=AS_OF) == pytest.approx(60.0)

    def test_only_stale_trades_is_neutral(self):
        """No activity in the window gives 50."""
        trades = [InsiderTrade("P-Purchase", 100, 10.0, "2023-01-01")]

        assert analyze_insider_sentiment(trades, as_of=AS_OF) == 50.0

    def test_all_selling_hits_floor(self):
        """Pure selling scores the floor of 20."""
        trades = [InsiderTrade("S-Sale", 100, 10.0, "2024-06-01")]

        assert analyze_insider_sentiment(trades, as_of=AS_OF) == pytest.approx(20.0)


class TestSocialSentiment:
    """Test social mention scoring."""

    def test_count_weighted(self):
        """Mention counts weight the bucket scores."""
        mentions = [SocialMention("positive", 3), SocialMention("negative", 1)]

        assert analyze_social_sentiment(mentions) == pytest.approx(62.5)

    def test_rounds_half_up(self):
        """62.5 rounds up to 63 in the composite output."""
        result = calculate_sentiment(
            {
                "social_mentions": [
                    {"sentiment": "positive", "count": 3},
                    {"sentiment": "negative", "count": 1},
                ]
            }
        )

        assert result.components["social"].score == 63

    def test_zero_counts_are_neutral(self):
        """Mentions with no count give 50."""
        assert analyze_social_sentiment([SocialMention("bullish", 0)]) == 50.0


class TestLabelsAndMomentum:
    """Test labels and news momentum."""

    @pytest.mark.parametrize(
        "score,label",
        [
            (80, "extreme_greed"),
            (79.9, "greed"),
            (60, "greed"),
            (59.9, "neutral"),
            (40, "neutral"),
            (39.9, "fear"),
            (20, "fear"),
            (19.9, "extreme_fear"),
        ],
    )
    def test_label_boundaries(self, score, label):
        """Lower bounds are inclusive."""
        assert sentiment_label(score) == label

    def test_positive_momentum(self):
        """Newer news more bullish than older news."""
        news = [NewsArticle(title="x", sentiment="bullish")] * 5 + [
            NewsArticle(title="y", sentiment="bearish")
        ] * 5

        assert news_momentum(news) == "positive"

    def test_negative_momentum(self):
        """Newer news more bearish than older news."""
        news = [NewsArticle(title="y", sentiment="bearish")] * 5 + [
            NewsArticle(title="x", sentiment="bullish")
        ] * 5

        assert news_momentum(news) == "negative"

    def test_invalid_weights_raise(self):
        """Sentiment weights must sum to 1."""
        with pytest.raises(ValueError):
            SentimentWeights(news=0.5)
