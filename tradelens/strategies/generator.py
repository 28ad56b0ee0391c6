"""
Strategy generation pipeline.

Runs an injected strategy source, falls back to the template source when
it fails or returns nothing, normalizes the results and adjusts each one
to the market regime.
"""

import logging
from collections.abc import Mapping

from tradelens.config import DEFAULT_CONFIG, ScoringConfig
from tradelens.strategies.base import (
    StrategyGenerationInput,
    StrategySource,
    TradingStrategy,
)
from tradelens.strategies.regime import adjust_for_regime, regime_name
from tradelens.strategies.template import TemplateStrategySource

logger = logging.getLogger(__name__)


class StrategyGenerator:
    """
    Produce regime-adjusted strategies for a symbol.

    The primary source (e.g. an LLM-backed StrategySource) is passed in, so
    the generator itself needs no network access and can be tested with a
    stub source.

    Example:
        >>> generator = StrategyGenerator(source=MyLLMSource(client))
        >>> strategies = generator.generate(request)
        >>> strategies[0].notes
        ['Range-bound market - focus on defined risk/reward']
    """

    def __init__(
        self,
        source: StrategySource | None = None,
        fallback: StrategySource | None = None,
        config: ScoringConfig | None = None,
    ):
        """
        Initialize the generator.

        Args:
            source: Primary strategy source (None uses the fallback only)
            fallback: Source used when the primary fails (default: template)
            config: Scoring configuration (regime adjustment multipliers)
        """
        self.fallback = fallback or TemplateStrategySource()
        self.source = source
        self.config = config or DEFAULT_CONFIG

    def _run_fallback(self, request: StrategyGenerationInput) -> list[TradingStrategy]:
        return self.normalize(self.fallback.generate(request), request.current_price)

    def _run_source(self, request: StrategyGenerationInput) -> list[TradingStrategy]:
        if self.source is None:
            return self._run_fallback(request)

        try:
            raw = self.source.generate(request)
        except Exception as e:
            logger.error(f"Strategy source {self.source.name} failed for {request.symbol}: {e}")
            return self._run_fallback(request)

        if not raw:
            logger.warning(
                f"Strategy source {self.source.name} returned no strategies for "
                f"{request.symbol}, using {self.fallback.name}"
            )
            return self._run_fallback(request)

        try:
            return self.normalize(raw, request.current_price)
        except (ValueError, KeyError, TypeError) as e:
            logger.error(
                f"Strategy source {self.source.name} returned malformed strategies for "
                f"{request.symbol}: {e}"
            )
            return self._run_fallback(request)

    def normalize(self, raw: list, current_price: float) -> list[TradingStrategy]:
        """Convert raw source output into TradingStrategy objects."""
        strategies = []
        for index, item in enumerate(raw):
            if isinstance(item, TradingStrategy):
                strategies.append(item)
            elif isinstance(item, Mapping):
                strategies.append(TradingStrategy.from_dict(item, current_price, index))
            else:
                raise TypeError(f"Expected a strategy mapping, got {type(item).__name__}")
        return strategies

    def generate(self, request: StrategyGenerationInput) -> list[TradingStrategy]:
        """
        Generate strategies for one symbol.

        Args:
            request: Analysis results, including the market regime

        Returns:
            Normalized strategies, each adjusted once for request.market_regime
        """
        strategies = self._run_source(request)

        if request.market_regime is None:
            return strategies

        adjusted = [
            adjust_for_regime(strategy, request.market_regime, config=self.config.adjustment)
            for strategy in strategies
        ]
        logger.info(
            f"Generated {len(adjusted)} strategies for {request.symbol} "
            f"({regime_name(request.market_regime)} regime)"
        )
        return adjusted