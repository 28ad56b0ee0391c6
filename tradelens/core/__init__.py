"""Core analyzers: indicators, patterns, sentiment, fundamentals, regime."""

from .candles import Candle, to_ohlcv_frame, validate_ohlcv
from .catalysts import Catalyst, CatalystWarnings, analyze_catalyst_risk, identify_catalysts
from .fundamentals import FinancialRatios, FundamentalScore, calculate_fundamental_score
from .indicators import TechnicalIndicators, calculate_all_indicators, interpret_indicators
from .market_structure import KeyLevels, calculate_key_levels, find_swing_points, swing_levels
from .patterns import Pattern, detect_all_patterns
from .regime import MarketRegimeData, MarketSnapshot, detect_market_regime
from .sentiment import (
    AnalystRating,
    InsiderTrade,
    NewsArticle,
    SentimentInputs,
    SentimentScore,
    SocialMention,
    calculate_sentiment,
)

__all__ = [
    "Candle",
    "to_ohlcv_frame",
    "validate_ohlcv",
    "calculate_all_indicators",
    "interpret_indicators",
    "TechnicalIndicators",
    "find_swing_points",
    "swing_levels",
    "calculate_key_levels",
    "KeyLevels",
    "detect_all_patterns",
    "Pattern",
    "calculate_sentiment",
    "SentimentInputs",
    "SentimentScore",
    "NewsArticle",
    "AnalystRating",
    "InsiderTrade",
    "SocialMention",
    "calculate_fundamental_score",
    "FinancialRatios",
    "FundamentalScore",
    "detect_market_regime",
    "MarketSnapshot",
    "MarketRegimeData",
    "identify_catalysts",
    "analyze_catalyst_risk",
    "Catalyst",
    "CatalystWarnings",
]
