"""
Multi-factor scoring.

This module combines the four factor scores into one composite:
- Fundamental (20%): profitability, growth, valuation, financial health
- Technical (35%): indicator-based technical score
- Sentiment (20%): news, analyst, insider and social sentiment
- Pattern (25%): count and quality of detected patterns

The composite maps to a rating from strong_sell to strong_buy.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Literal, Union

from tradelens.config import DEFAULT_CONFIG, CompositeConfig, PatternConfig, ScoringConfig
from tradelens.core.fundamentals import FinancialsInput, calculate_fundamental_score
from tradelens.core.indicators import TechnicalIndicators
from tradelens.core.patterns import Pattern
from tradelens.core.sentiment import SentimentScore
from tradelens.utils import clamp, round_half_up

logger = logging.getLogger(__name__)

Rating = Literal["strong_buy", "buy", "hold", "sell", "strong_sell"]


@dataclass
class PatternScore:
    score: int
    high_confidence: list[Pattern] = field(default_factory=list)
    medium_confidence: list[Pattern] = field(default_factory=list)


@dataclass
class CompositeScore:
    composite: int
    rating: Rating


@dataclass
class FactorScore:
    """One factor: its score, named sub-scores and a one-line reading."""

    score: int
    components: dict[str, float] = field(default_factory=dict)
    interpretation: str = ""


@dataclass
class PatternFactor:
    score: int
    high_confidence: list[Pattern] = field(default_factory=list)
    medium_confidence: list[Pattern] = field(default_factory=list)
    interpretation: str = ""


@dataclass
class FactorScores:
    fundamental: FactorScore
    technical: FactorScore
    sentiment: FactorScore
    pattern: PatternFactor
    composite: int
    rating: Rating


def calculate_pattern_score(
    patterns: Sequence[Pattern], config: PatternConfig | None = None
) -> PatternScore:
    """
    Score a set of patterns from 0 to 100.

    Starts at 50, adds 15 per HIGH and 8 per MEDIUM confidence pattern,
    then +10 if bullish patterns outnumber bearish ones (-10 for the
    reverse). Direction comes from each pattern's direction tag.

    Example:
        >>> calculate_pattern_score([]).score
        50
    """
    cfg = config or DEFAULT_CONFIG.patterns

    high = [p for p in patterns if p.confidence == "HIGH"]
    medium = [p for p in patterns if p.confidence == "MEDIUM"]

    score = 50
    score += len(high) * cfg.high_points
    score += len(medium) * cfg.medium_points

    bullish = sum(1 for p in patterns if p.is_bullish)
    bearish = sum(1 for p in patterns if p.is_bearish)
    if bullish > bearish:
        score += cfg.direction_points
    elif bearish > bullish:
        score -= cfg.direction_points

    clamped = clamp(score)
    if clamped != score:
        logger.debug(f"Pattern score clamped from {score} to {clamped}")

    return PatternScore(
        score=round_half_up(clamped), high_confidence=high, medium_confidence=medium
    )


def rating_for(composite: float, config: CompositeConfig | None = None) -> Rating:
    cfg = config or DEFAULT_CONFIG.composite
    if composite >= cfg.strong_buy:
        return "strong_buy"
    if composite >= cfg.buy:
        return "buy"
    if composite >= cfg.hold:
        return "hold"
    if composite >= cfg.sell:
        return "sell"
    return "strong_sell"


def calculate_composite_score(
    scores: Mapping[str, float], config: CompositeConfig | None = None
) -> CompositeScore:
    """
    Blend the four factor scores into a composite and a rating.

    Args:
        scores: Mapping with fundamental, technical, sentiment and pattern
                scores (0-100)
        config: Weights and rating thresholds (defaults to DEFAULT_CONFIG.composite)

    Returns:
        CompositeScore; the rating uses the unrounded composite

    Raises:
        KeyError: If a factor score is missing

    Example:
        >>> calculate_composite_score(
        ...     {"fundamental": 80, "technical": 80, "sentiment": 80, "pattern": 80}
        ... )
        CompositeScore(composite=80, rating='strong_buy')
    """
    cfg = config or DEFAULT_CONFIG.composite
    weights = cfg.weights.as_dict()

    composite = sum(scores[name] * weight for name, weight in weights.items())
    clamped = clamp(composite)
    if clamped != composite:
        logger.debug(f"Composite score clamped from {composite:.2f} to {clamped}")

    return CompositeScore(composite=round_half_up(clamped), rating=rating_for(clamped, cfg))


def interpret_fundamental(score: float) -> str:
    if score >= 70:
        return "Strong fundamentals with solid growth and profitability"
    if score >= 55:
        return "Decent fundamentals, some strengths and weaknesses"
    if score >= 40:
        return "Mixed fundamental picture, exercise caution"
    return "Weak fundamentals, significant concerns present"


def interpret_technical(score: float) -> str:
    if score >= 70:
        return "Strong bullish technical setup"
    if score >= 55:
        return "Moderately bullish technicals"
    if score >= 45:
        return "Neutral technical picture"
    if score >= 30:
        return "Moderately bearish technicals"
    return "Weak bearish setup"


def interpret_patterns(pattern_score: PatternScore) -> str:
    if pattern_score.high_confidence:
        return f"{len(pattern_score.high_confidence)} high-confidence pattern(s) detected"
    if pattern_score.medium_confidence:
        return f"{len(pattern_score.medium_confidence)} medium-confidence pattern(s) detected"
    return "No clear patterns detected"


def generate_factor_scores(
    financials: FinancialsInput,
    technicals: Union[TechnicalIndicators, float],
    sentiment: SentimentScore,
    patterns: Sequence[Pattern],
    config: ScoringConfig | None = None,
) -> FactorScores:
    """
    Compose already-computed analysis results into factor scores.

    Args:
        financials: Input for calculate_fundamental_score
        technicals: TechnicalIndicators, or a bare technical score
        sentiment: Result of calculate_sentiment
        patterns: Result of detect_all_patterns
        config: Full scoring configuration (defaults to DEFAULT_CONFIG)

    Returns:
        FactorScores with every factor, the composite and the rating

    Example:
        >>> factors = generate_factor_scores(
        ...     financials=None,
        ...     technicals=indicators,
        ...     sentiment=calculate_sentiment(),
        ...     patterns=[],
        ... )
        >>> factors.fundamental.score
        50
    """
    cfg = config or DEFAULT_CONFIG

    fundamental = calculate_fundamental_score(financials, cfg.fundamental)
    fundamental_factor = FactorScore(
        score=fundamental.score,
        components={
            "profitability": fundamental.components.profitability,
            "growth": fundamental.components.growth,
            "valuation": fundamental.components.valuation,
            "financial_health": fundamental.components.financial_health,
        },
        interpretation=interpret_fundamental(fundamental.score),
    )

    if isinstance(technicals, TechnicalIndicators):
        technical_score = technicals.technical_score
        breakdown = technicals.score_breakdown.components()
        technical_components = {
            name: round_half_up(breakdown[name])
            for name in ("trend", "momentum", "volume", "support")
        }
    else:
        technical_score = round_half_up(clamp(technicals))
        technical_components = {}
    technical_factor = FactorScore(
        score=technical_score,
        components=technical_components,
        interpretation=interpret_technical(technical_score),
    )

    sentiment_factor = FactorScore(
        score=sentiment.score,
        components={name: component.score for name, component in sentiment.components.items()},
        interpretation=sentiment.interpretation,
    )

    pattern_score = calculate_pattern_score(patterns, cfg.patterns)
    pattern_factor = PatternFactor(
        score=pattern_score.score,
        high_confidence=pattern_score.high_confidence,
        medium_confidence=pattern_score.medium_confidence,
        interpretation=interpret_patterns(pattern_score),
    )

    composite = calculate_composite_score(
        {
            "fundamental": fundamental_factor.score,
            "technical": technical_factor.score,
            "sentiment": sentiment_factor.score,
            "pattern": pattern_factor.score,
        },
        cfg.composite,
    )

    logger.debug(
        f"Factors F{fundamental_factor.score} T{technical_factor.score} "
        f"S{sentiment_factor.score} P{pattern_factor.score} -> "
        f"{composite.composite} ({composite.rating})"
    )

    return FactorScores(
        fundamental=fundamental_factor,
        technical=technical_factor,
        sentiment=sentiment_factor,
        pattern=pattern_factor,
        composite=composite.composite,
        rating=composite.rating,
    )
