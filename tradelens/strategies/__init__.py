"""Trading strategies: model, sources and regime adjustment."""

from .base import StrategyGenerationInput, StrategySource, TradingStrategy
from .generator import StrategyGenerator
from .regime import adjust_for_regime
from .template import TemplateStrategySource

__all__ = [
    "TradingStrategy",
    "StrategySource",
    "StrategyGenerationInput",
    "TemplateStrategySource",
    "StrategyGenerator",
    "adjust_for_regime",
]
