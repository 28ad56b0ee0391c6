"""
Regime-based strategy adjustment.

Scales a strategy's risk parameters to the current market regime:
- high_volatility: wider stop, smaller position
- low_volatility: tighter stop
- trending_bull: higher confidence
- trending_bear: lower confidence and tighter stop for long strategies
- range_bound: advisory note only
"""

import copy
import logging
from collections.abc import Mapping
from typing import Any, Union

from tradelens.config import DEFAULT_CONFIG, RegimeAdjustmentConfig
from tradelens.core.regime import MarketRegimeData
from tradelens.strategies.base import TradingStrategy
from tradelens.utils import clamp

logger = logging.getLogger(__name__)

REGIME_NOTES = {
    "high_volatility": "High volatility regime - reduced position size",
    "low_volatility": "Low volatility - tighter risk management possible",
    "trending_bull": "Strong bullish market regime supports long positions",
    "trending_bear": "Bearish market regime - use tight stops on longs",
    "range_bound": "Range-bound market - focus on defined risk/reward",
}

RegimeInput = Union[MarketRegimeData, Mapping[str, Any], str]


def regime_name(regime: RegimeInput) -> str:
    if isinstance(regime, MarketRegimeData):
        return regime.regime
    if isinstance(regime, Mapping):
        return regime["regime"]
    return str(regime)


def adjust_for_regime(
    strategy: TradingStrategy,
    regime: RegimeInput,
    inplace: bool = False,
    config: RegimeAdjustmentConfig | None = None,
) -> TradingStrategy:
    """
    Adjust a strategy's risk parameters for the market regime.

    Multiplicative changes compound, so a strategy should be adjusted once
    per regime classification. Adjusting a strategy that already carries a
    regime adjustment logs a warning.

    Args:
        strategy: Fully built strategy
        regime: MarketRegimeData, a mapping with a 'regime' key, or the
                regime name
        inplace: Mutate and return `strategy` itself instead of a copy
        config: Multipliers (defaults to DEFAULT_CONFIG.adjustment)

    Returns:
        The adjusted strategy (a deep copy unless inplace=True)

    Example:
        >>> adjusted = adjust_for_regime(strategy, "high_volatility")
        >>> adjusted.stop_loss.percentage / strategy.stop_loss.percentage
        1.5
    """
    cfg = config or DEFAULT_CONFIG.adjustment
    name = regime_name(regime)
    adjusted = strategy if inplace else copy.deepcopy(strategy)

    if adjusted.regime_adjustments:
        logger.warning(
            f"Strategy {adjusted.id} already adjusted for {adjusted.regime_adjustments}, "
            f"applying {name} again"
        )

    if name == "high_volatility":
        adjusted.stop_loss.percentage *= cfg.high_volatility_stop
        adjusted.sizing.recommended_position *= cfg.high_volatility_size
        adjusted.notes.append(REGIME_NOTES[name])

    elif name == "low_volatility":
        adjusted.stop_loss.percentage *= cfg.low_volatility_stop
        adjusted.notes.append(REGIME_NOTES[name])

    elif name == "trending_bull":
        adjusted.confidence = clamp(adjusted.confidence + cfg.bull_confidence)
        adjusted.notes.append(REGIME_NOTES[name])

    elif name == "trending_bear":
        if adjusted.is_long:
            adjusted.confidence = clamp(adjusted.confidence - cfg.bear_confidence)
            adjusted.stop_loss.percentage *= cfg.bear_stop
            adjusted.notes.append(REGIME_NOTES[name])

    elif name == "range_bound":
        adjusted.notes.append(REGIME_NOTES[name])

    else:
        raise ValueError(f"Unknown market regime: {name}")

    adjusted.regime_adjustments.append(name)
    logger.debug(f"Adjusted strategy {adjusted.id} for {name} regime")

    return adjusted
