"""Multi-factor stock scoring and regime-aware strategy adjustment."""

from .analysis import SymbolAnalysis, analyze_symbol
from .config import DEFAULT_CONFIG, ScoringConfig
from .core import (
    calculate_all_indicators,
    calculate_fundamental_score,
    calculate_sentiment,
    detect_all_patterns,
    detect_market_regime,
)
from .exceptions import InsufficientDataError
from .scoring import calculate_composite_score, generate_factor_scores
from .strategies import StrategyGenerator, TradingStrategy, adjust_for_regime

__version__ = "0.1.0"

__all__ = [
    "calculate_all_indicators",
    "detect_all_patterns",
    "calculate_sentiment",
    "calculate_fundamental_score",
    "detect_market_regime",
    "generate_factor_scores",
    "calculate_composite_score",
    "adjust_for_regime",
    "analyze_symbol",
    "SymbolAnalysis",
    "TradingStrategy",
    "StrategyGenerator",
    "ScoringConfig",
    "DEFAULT_CONFIG",
    "InsufficientDataError",
]
