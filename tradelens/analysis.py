"""
Full analysis of one symbol.

Runs every analyzer over the supplied data and composes the results:
indicators -> patterns -> key levels -> sentiment -> fundamentals ->
factor scores -> catalysts -> market regime -> (optionally) strategies.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from tradelens.config import DEFAULT_CONFIG, ScoringConfig
from tradelens.core.candles import CandleInput, to_ohlcv_frame
from tradelens.core.catalysts import (
    Catalyst,
    CatalystWarnings,
    analyze_catalyst_risk,
    identify_catalysts,
)
from tradelens.core.fundamentals import FinancialsInput
from tradelens.core.indicators import (
    IndicatorInterpretation,
    TechnicalIndicators,
    calculate_all_indicators,
    interpret_indicators,
)
from tradelens.core.market_structure import KeyLevels, calculate_key_levels
from tradelens.core.patterns import Pattern, detect_all_patterns
from tradelens.core.regime import MarketRegimeData, MarketSnapshot, detect_market_regime
from tradelens.core.sentiment import SentimentInputs, SentimentScore, calculate_sentiment
from tradelens.scoring.factors import FactorScores, generate_factor_scores
from tradelens.strategies.base import StrategyGenerationInput, TradingStrategy
from tradelens.strategies.generator import StrategyGenerator

logger = logging.getLogger(__name__)


@dataclass
class SymbolAnalysis:
    """Every analysis result for one symbol."""

    symbol: str
    current_price: float
    indicators: TechnicalIndicators
    interpretation: IndicatorInterpretation
    patterns: list[Pattern]
    key_levels: KeyLevels
    sentiment: SentimentScore
    factor_scores: FactorScores
    market_regime: MarketRegimeData | None = None
    catalysts: list[Catalyst] = field(default_factory=list)
    catalyst_risk: CatalystWarnings | None = None
    strategies: list[TradingStrategy] = field(default_factory=list)

    @property
    def composite(self) -> int:
        return self.factor_scores.composite

    @property
    def rating(self) -> str:
        return self.factor_scores.rating


def analyze_symbol(
    symbol: str,
    candles: CandleInput,
    current_price: float | None = None,
    financials: FinancialsInput = None,
    sentiment_inputs: Union[SentimentInputs, Mapping[str, Any], None] = None,
    market_snapshot: Union[MarketSnapshot, Mapping[str, Any], None] = None,
    catalyst_inputs: Mapping[str, Any] | None = None,
    generator: StrategyGenerator | None = None,
    config: ScoringConfig | None = None,
) -> SymbolAnalysis:
    """
    Analyze a symbol end to end.

    Args:
        symbol: Ticker
        candles: At least 200 chronological candles
        current_price: Latest price (default: last close)
        financials: Input for calculate_fundamental_score
        sentiment_inputs: Input for calculate_sentiment
        market_snapshot: Input for detect_market_regime; without it no
                         regime is classified and no strategies are built
        catalyst_inputs: Keyword arguments for identify_catalysts
                         (earnings_date, dividend_date, economic_events,
                         news, as_of); without it no catalysts are tracked
        generator: Strategy generator to run once the regime is known
        config: Full scoring configuration (defaults to DEFAULT_CONFIG)

    Returns:
        SymbolAnalysis

    Raises:
        InsufficientDataError: Fewer than 200 candles

    Example:
        >>> analysis = analyze_symbol("AAPL", candles, financials={"ratios": ratios})
        >>> analysis.rating
        'buy'
    """
    cfg = config or DEFAULT_CONFIG
    df = to_ohlcv_frame(candles)

    if current_price is None:
        if df.empty:
            raise ValueError(f"No candles for {symbol} and no current price given")
        current_price = float(df["close"].iloc[-1])

    indicators = calculate_all_indicators(df, current_price, cfg.technical)
    patterns = detect_all_patterns(df, current_price, cfg.patterns)
    key_levels = calculate_key_levels(df, current_price)
    sentiment = calculate_sentiment(sentiment_inputs, config=cfg.sentiment)

    factor_scores = generate_factor_scores(
        financials=financials,
        technicals=indicators,
        sentiment=sentiment,
        patterns=patterns,
        config=cfg,
    )

    analysis = SymbolAnalysis(
        symbol=symbol,
        current_price=current_price,
        indicators=indicators,
        interpretation=interpret_indicators(indicators),
        patterns=patterns,
        key_levels=key_levels,
        sentiment=sentiment,
        factor_scores=factor_scores,
    )

    if catalyst_inputs:
        analysis.catalysts = identify_catalysts(symbol, **catalyst_inputs)
        analysis.catalyst_risk = analyze_catalyst_risk(analysis.catalysts)

    if market_snapshot is not None:
        analysis.market_regime = detect_market_regime(market_snapshot, cfg.regime)

        if generator is not None:
            request = StrategyGenerationInput(
                symbol=symbol,
                current_price=current_price,
                factor_scores=factor_scores,
                market_regime=analysis.market_regime,
                key_levels=key_levels,
                technicals=indicators,
                sentiment=sentiment,
                patterns=patterns,
                catalysts=analysis.catalysts,
            )
            analysis.strategies = generator.generate(request)

    logger.info(
        f"{symbol}: composite {factor_scores.composite} ({factor_scores.rating}), "
        f"{len(patterns)} patterns"
    )

    return analysis
