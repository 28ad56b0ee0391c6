"""
Sentiment aggregation.

Combines four independent sources into one 0-100 score
(0 = extreme fear, 100 = extreme greed):
- News: explicit article sentiment, or a headline keyword heuristic
- Analyst ratings: recency-weighted grade scores
- Insider trading: net buy/sell dollar value over the last 90 days
- Social mentions: count-weighted sentiment buckets

Every source defaults to a neutral 50 when it has no data.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Literal, Union

import pandas as pd

from tradelens.config import DEFAULT_CONFIG, SentimentConfig
from tradelens.utils import round_half_up

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50.0

NEWS_SENTIMENT_SCORES = {
    "positive": 80,
    "bullish": 85,
    "neutral": 50,
    "negative": 20,
    "bearish": 15,
}

SOCIAL_SENTIMENT_SCORES = {
    "positive": 75,
    "bullish": 80,
    "neutral": 50,
    "negative": 25,
    "bearish": 20,
}

ANALYST_GRADE_SCORES = {
    "strong buy": 95,
    "buy": 75,
    "outperform": 70,
    "market perform": 50,
    "hold": 50,
    "neutral": 50,
    "underperform": 30,
    "sell": 25,
    "strong sell": 5,
}

BULLISH_HEADLINE_WORDS = ("surge", "rally", "beat", "upgrade")
BEARISH_HEADLINE_WORDS = ("fall", "drop", "miss", "downgrade")
BULLISH_HEADLINE_SCORE = 70
BEARISH_HEADLINE_SCORE = 30

SentimentLabel = Literal["extreme_fear", "fear", "neutral", "greed", "extreme_greed"]
Momentum = Literal["positive", "neutral", "negative"]


def _from_mapping(cls, data: Mapping[str, Any], aliases: Mapping[str, str]):
    """Build a dataclass from snake_case or provider camelCase keys."""
    names = {f.name for f in fields(cls)}
    kwargs = {}
    for key, value in data.items():
        name = aliases.get(key, key)
        if name in names:
            kwargs[name] = value
    return cls(**kwargs)


@dataclass
class NewsArticle:
    title: str = ""
    sentiment: str | None = None
    published_date: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "NewsArticle":
        aliases = {"publishedDate": "published_date", "date": "published_date"}
        return _from_mapping(cls, data, aliases)


@dataclass
class AnalystRating:
    new_grade: str
    grading_company: str = ""
    previous_grade: str | None = None
    date: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AnalystRating":
        return _from_mapping(
            cls,
            data,
            {
                "newGrade": "new_grade",
                "gradingCompany": "grading_company",
                "previousGrade": "previous_grade",
            },
        )


@dataclass
class InsiderTrade:
    transaction_type: str
    securities_transacted: float
    price: float
    filing_date: str

    @property
    def value(self) -> float:
        return abs(self.securities_transacted * self.price)

    @property
    def is_buy(self) -> bool:
        kind = self.transaction_type or ""
        return "P-Purchase" in kind or "buy" in kind.lower()

    @property
    def is_sell(self) -> bool:
        kind = self.transaction_type or ""
        return "S-Sale" in kind or "sell" in kind.lower()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "InsiderTrade":
        return _from_mapping(
            cls,
            data,
            {
                "transactionType": "transaction_type",
                "securitiesTransacted": "securities_transacted",
                "filingDate": "filing_date",
            },
        )


@dataclass
class SocialMention:
    sentiment: str = "neutral"
    count: int = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SocialMention":
        return _from_mapping(cls, data, {"mentions": "count"})


@dataclass
class SentimentInputs:
    """
    Raw sentiment feeds for one symbol.

    News is expected newest first. Items may be the dataclasses above or
    plain mappings (snake_case or provider camelCase keys).
    """

    news: list = field(default_factory=list)
    analyst_ratings: list = field(default_factory=list)
    insider_trades: list = field(default_factory=list)
    social_mentions: list = field(default_factory=list)

    def __post_init__(self):
        self.news = _coerce(self.news, NewsArticle)
        self.analyst_ratings = _coerce(self.analyst_ratings, AnalystRating)
        self.insider_trades = _coerce(self.insider_trades, InsiderTrade)
        self.social_mentions = _coerce(self.social_mentions, SocialMention)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SentimentInputs":
        return cls(
            news=data.get("news") or [],
            analyst_ratings=data.get("analyst_ratings") or data.get("analystRatings") or [],
            insider_trades=data.get("insider_trades") or data.get("insiderTrading") or [],
            social_mentions=data.get("social_mentions") or data.get("socialMentions") or [],
        )


def _coerce(items: Iterable | None, cls) -> list:
    result = []
    for item in items or []:
        if isinstance(item, cls):
            result.append(item)
        else:
            result.append(cls.from_mapping(item))
    return result


@dataclass
class ComponentScore:
    score: int
    weight: float


@dataclass
class SentimentScore:
    """
    Composite sentiment.

    Attributes:
        score: 0-100 composite
        label: extreme_fear / fear / neutral / greed / extreme_greed
        components: news, analyst, insider, social each with score and weight
        interpretation: One-sentence reading of the score
        momentum: Recent news sentiment vs older news
    """

    score: int
    label: SentimentLabel
    components: dict[str, ComponentScore]
    interpretation: str
    momentum: Momentum


def analyze_news_sentiment(news: Sequence[NewsArticle]) -> float:
    """
    Average article sentiment (0-100).

    Articles with an explicit sentiment use NEWS_SENTIMENT_SCORES (unknown
    labels count as 50); otherwise the headline is checked for bullish
    (70) or bearish (30) keywords.
    """
    if not news:
        return NEUTRAL_SCORE

    total = 0.0
    for article in news:
        if article.sentiment:
            total += NEWS_SENTIMENT_SCORES.get(article.sentiment.lower(), NEUTRAL_SCORE)
            continue

        title = (article.title or "").lower()
        if any(word in title for word in BULLISH_HEADLINE_WORDS):
            total += BULLISH_HEADLINE_SCORE
        elif any(word in title for word in BEARISH_HEADLINE_WORDS):
            total += BEARISH_HEADLINE_SCORE
        else:
            total += NEUTRAL_SCORE

    return total / len(news)


def analyze_analyst_sentiment(
    ratings: Sequence[AnalystRating], min_weight: float = 0.3
) -> float:
    """
    Recency-weighted analyst grade score (0-100).

    Ratings are expected newest first. The i-th of n ratings is weighted
    1 - (i / n) * (1 - min_weight), so the newest counts fully and weights
    fall linearly towards min_weight.
    """
    if not ratings:
        return NEUTRAL_SCORE

    total = 0.0
    total_weight = 0.0
    n = len(ratings)

    for i, rating in enumerate(ratings):
        score = ANALYST_GRADE_SCORES.get((rating.new_grade or "").lower(), NEUTRAL_SCORE)
        weight = 1.0 - (i / n) * (1.0 - min_weight)
        total += score * weight
        total_weight += weight

    return total / total_weight if total_weight > 0 else NEUTRAL_SCORE


def analyze_insider_sentiment(
    trades: Sequence[InsiderTrade],
    as_of: datetime | None = None,
    lookback_days: int = 90,
    floor: float = 20.0,
    span: float = 60.0,
) -> float:
    """
    Net insider buying over the look-back window, mapped onto [20, 80].

    score = floor + buy_value / (buy_value + sell_value) * span

    Trades filed before the window, or with unparsable filing dates, are
    ignored. No qualifying activity gives 50.
    """
    if not trades:
        return NEUTRAL_SCORE

    now = pd.Timestamp(as_of) if as_of is not None else pd.Timestamp(datetime.now(timezone.utc))
    if now.tzinfo is None:
        now = now.tz_localize("UTC")
    cutoff = now - pd.Timedelta(days=lookback_days)

    buy_value = 0.0
    sell_value = 0.0

    for trade in trades:
        filed = _parse_date(trade.filing_date)
        if filed is None:
            logger.warning(f"Skipping insider trade with bad filing date {trade.filing_date!r}")
            continue
        if filed < cutoff:
            continue

        if trade.is_buy:
            buy_value += trade.value
        elif trade.is_sell:
            sell_value += trade.value

    if buy_value == 0 and sell_value == 0:
        return NEUTRAL_SCORE

    buy_ratio = buy_value / (buy_value + sell_value)
    return floor + buy_ratio * span


def _parse_date(value: Union[str, datetime, pd.Timestamp, None]) -> pd.Timestamp | None:
    if value is None or value == "":
        return None
    try:
        parsed = pd.Timestamp(value)
    except (ValueError, TypeError):
        return None
    if pd.isna(parsed):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.tz_localize("UTC")
    return parsed


def analyze_social_sentiment(mentions: Sequence[SocialMention]) -> float:
    """Mention-count weighted average of SOCIAL_SENTIMENT_SCORES (0-100)."""
    if not mentions:
        return NEUTRAL_SCORE

    total = 0.0
    total_count = 0
    for mention in mentions:
        score = SOCIAL_SENTIMENT_SCORES.get((mention.sentiment or "").lower(), NEUTRAL_SCORE)
        total += score * mention.count
        total_count += mention.count

    return total / total_count if total_count > 0 else NEUTRAL_SCORE


def sentiment_label(score: float, config: SentimentConfig | None = None) -> SentimentLabel:
    cfg = config or DEFAULT_CONFIG.sentiment
    if score >= cfg.extreme_greed:
        return "extreme_greed"
    if score >= cfg.greed:
        return "greed"
    if score >= cfg.neutral:
        return "neutral"
    if score >= cfg.fear:
        return "fear"
    return "extreme_fear"


def interpret_sentiment(score: float) -> str:
    if score >= 70:
        return (
            "Strong bullish sentiment across multiple sources. "
            "Market participants are very optimistic."
        )
    if score >= 55:
        return "Moderately positive sentiment. Analysts and insiders show confidence."
    if score >= 45:
        return "Mixed sentiment. Market participants are divided on outlook."
    if score >= 30:
        return "Moderately bearish sentiment. Caution among market participants."
    return "Strongly negative sentiment. Significant concerns from analysts and insiders."


def news_momentum(
    news: Sequence[NewsArticle], window: int = 5, threshold: float = 10.0
) -> Momentum:
    """
    Compare sentiment of the newest `window` articles to the `window` before.

    A rise of more than `threshold` points is positive, a fall negative.
    """
    recent = analyze_news_sentiment(news[:window])
    older = analyze_news_sentiment(news[window : window * 2])

    if recent > older + threshold:
        return "positive"
    if recent < older - threshold:
        return "negative"
    return "neutral"


def calculate_sentiment(
    data: Union[SentimentInputs, Mapping[str, Any], None] = None,
    as_of: datetime | None = None,
    config: SentimentConfig | None = None,
) -> SentimentScore:
    """
    Calculate the composite sentiment score.

    Never fails on missing feeds: each empty source scores a neutral 50.

    Args:
        data: SentimentInputs or a mapping with news / analyst_ratings /
              insider_trades / social_mentions lists
        as_of: Reference time for the insider look-back (default: now, UTC)
        config: Weights and thresholds (defaults to DEFAULT_CONFIG.sentiment)

    Returns:
        SentimentScore with rounded composite and component scores

    Example:
        >>> result = calculate_sentiment({"news": [{"title": "Shares surge"}]})
        >>> result.components["news"].score
        70
    """
    cfg = config or DEFAULT_CONFIG.sentiment

    if data is None:
        inputs = SentimentInputs()
    elif isinstance(data, SentimentInputs):
        inputs = data
    else:
        inputs = SentimentInputs.from_mapping(data)

    scores = {
        "news": analyze_news_sentiment(inputs.news),
        "analyst": analyze_analyst_sentiment(inputs.analyst_ratings, cfg.analyst_min_weight),
        "insider": analyze_insider_sentiment(
            inputs.insider_trades,
            as_of=as_of,
            lookback_days=cfg.insider_lookback_days,
            floor=cfg.insider_floor,
            span=cfg.insider_span,
        ),
        "social": analyze_social_sentiment(inputs.social_mentions),
    }
    weights = cfg.weights.as_dict()

    composite = sum(scores[name] * weights[name] for name in scores)

    momentum = news_momentum(inputs.news, cfg.momentum_window, cfg.momentum_threshold)

    logger.debug(
        f"Sentiment {composite:.1f} (news {scores['news']:.1f}, analyst {scores['analyst']:.1f}, "
        f"insider {scores['insider']:.1f}, social {scores['social']:.1f})"
    )

    return SentimentScore(
        score=round_half_up(composite),
        label=sentiment_label(composite, cfg),
        components={
            name: ComponentScore(score=round_half_up(scores[name]), weight=weights[name])
            for name in ("news", "analyst", "insider", "social")
        },
        interpretation=interpret_sentiment(composite),
        momentum=momentum,
    )
