"""
Market regime classification.

Classifies the broad market from a single snapshot of SPY, VIX and breadth
data. Precedence:
1. VIX above 30 -> high_volatility
2. VIX at most 20 and SPY move under 0.5% -> low_volatility
   (VIX of exactly 20 counts as low volatility)
3. SPY up more than 0.8% with breadth above 0.6 -> trending_bull
4. SPY down more than 0.8% with breadth below 0.4 -> trending_bear
5. Otherwise -> range_bound
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, Union

from tradelens.config import DEFAULT_CONFIG, RegimeConfig

logger = logging.getLogger(__name__)

Regime = Literal[
    "trending_bull", "trending_bear", "range_bound", "high_volatility", "low_volatility"
]
VolatilityLevel = Literal["low", "medium", "high"]
TrendStrength = Literal["weak", "moderate", "strong"]

STRATEGY_SUGGESTIONS: dict[str, tuple[str, ...]] = {
    "high_volatility": (
        "Reduce position sizes",
        "Use wider stop losses",
        "Focus on high-conviction setups only",
        "Consider hedging strategies",
    ),
    "low_volatility": (
        "Range-trading opportunities",
        "Tighter stop losses possible",
        "Mean-reversion strategies favorable",
        "Prepare for volatility breakout",
    ),
    "trending_bull": (
        "Favor long positions",
        "Buy dips to support",
        "Momentum and breakout strategies",
        "Hold winners, cut losers quickly",
    ),
    "trending_bear": (
        "Defensive positioning",
        "Short bounces to resistance",
        "Avoid catching falling knives",
        "Tight stops on longs",
    ),
    "range_bound": (
        "Trade the range",
        "Buy support, sell resistance",
        "Quick profits, defined risk",
        "Wait for breakout confirmation",
    ),
}

# Keeps the new-high/new-low ratio defined when both counts are zero
HIGHS_LOWS_EPSILON = 0.01


@dataclass
class MarketSnapshot:
    """
    Broad market state at one moment.

    Attributes:
        spy_price: SPY last price
        spy_change: SPY percent change (1.2 means +1.2%)
        vix: VIX level
        advancers, decliners: Advancing/declining issue counts
        new_highs, new_lows: 52-week new high/low counts
    """

    spy_price: float
    spy_change: float
    vix: float
    advancers: int = 0
    decliners: int = 0
    new_highs: int = 0
    new_lows: int = 0

    def __post_init__(self):
        if self.vix is None or self.spy_change is None:
            raise ValueError("Market snapshot requires vix and spy_change")
        for name in ("advancers", "decliners", "new_highs", "new_lows"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")

    @property
    def breadth_ratio(self) -> float:
        """Advancers / (advancers + decliners), 0.5 when there is no data."""
        total = self.advancers + self.decliners
        if total == 0:
            return 0.5
        return self.advancers / total

    @property
    def highs_lows_ratio(self) -> float:
        return self.new_highs / (self.new_highs + self.new_lows + HIGHS_LOWS_EPSILON)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "MarketSnapshot":
        def pick(snake: str, camel: str, default=None):
            if snake in data:
                return data[snake]
            return data.get(camel, default)

        return cls(
            spy_price=pick("spy_price", "spyPrice", 0.0),
            spy_change=pick("spy_change", "spyChange"),
            vix=pick("vix", "vix"),
            advancers=pick("advancers", "advancers", 0),
            decliners=pick("decliners", "decliners", 0),
            new_highs=pick("new_highs", "newHighs", 0),
            new_lows=pick("new_lows", "newLows", 0),
        )


@dataclass
class MarketRegimeData:
    regime: Regime
    confidence: int
    characteristics: list[str] = field(default_factory=list)
    strategy_suggestions: list[str] = field(default_factory=list)
    volatility_level: VolatilityLevel = "medium"
    trend_strength: TrendStrength = "weak"


def classify_volatility(vix: float, config: RegimeConfig | None = None) -> VolatilityLevel:
    cfg = config or DEFAULT_CONFIG.regime
    if vix > cfg.vix_high:
        return "high"
    if vix > cfg.vix_medium:
        return "medium"
    return "low"


def classify_trend_strength(spy_change: float, config: RegimeConfig | None = None) -> TrendStrength:
    cfg = config or DEFAULT_CONFIG.regime
    move = abs(spy_change)
    if move > cfg.strong_move:
        return "strong"
    if move > cfg.moderate_move:
        return "moderate"
    return "weak"


def detect_market_regime(
    market_data: Union[MarketSnapshot, Mapping[str, Any]],
    config: RegimeConfig | None = None,
) -> MarketRegimeData:
    """
    Classify the market regime from one snapshot.

    Stateless: the result depends only on the snapshot and config.

    Args:
        market_data: MarketSnapshot or mapping with spy_price/spyPrice,
                     spy_change/spyChange, vix, advancers, decliners,
                     new_highs/newHighs, new_lows/newLows
        config: Thresholds (defaults to DEFAULT_CONFIG.regime)

    Returns:
        MarketRegimeData with regime, confidence, characteristics, four
        strategy suggestions, volatility level and trend strength

    Example:
        >>> data = detect_market_regime({"spyPrice": 450, "spyChange": 0.3, "vix": 15})
        >>> data.regime
        'low_volatility'
    """
    cfg = config or DEFAULT_CONFIG.regime
    snapshot = (
        market_data
        if isinstance(market_data, MarketSnapshot)
        else MarketSnapshot.from_mapping(market_data)
    )

    characteristics: list[str] = []

    volatility_level = classify_volatility(snapshot.vix, cfg)
    volatility_text = {"high": "High", "medium": "Moderate", "low": "Low"}[volatility_level]
    characteristics.append(f"{volatility_text} volatility (VIX: {snapshot.vix:.1f})")

    breadth = snapshot.breadth_ratio
    highs_lows = snapshot.highs_lows_ratio
    if breadth > cfg.strong_breadth and highs_lows > cfg.strong_highs_lows:
        characteristics.append("Strong positive breadth")
    elif breadth < cfg.weak_breadth and highs_lows < cfg.weak_highs_lows:
        characteristics.append("Weak breadth, more stocks declining")
    else:
        characteristics.append("Mixed market breadth")

    trend_strength = classify_trend_strength(snapshot.spy_change, cfg)
    move = abs(snapshot.spy_change)

    if volatility_level == "high":
        regime, confidence = "high_volatility", cfg.high_volatility_confidence
    elif volatility_level == "low" and move < cfg.low_vol_max_move:
        regime, confidence = "low_volatility", cfg.low_volatility_confidence
    elif snapshot.spy_change > cfg.trend_move and breadth > cfg.bull_breadth:
        regime, confidence = "trending_bull", cfg.trending_confidence
        characteristics.append("Bullish trend in place")
    elif snapshot.spy_change < -cfg.trend_move and breadth < cfg.bear_breadth:
        regime, confidence = "trending_bear", cfg.trending_confidence
        characteristics.append("Bearish trend in place")
    else:
        regime, confidence = "range_bound", cfg.range_bound_confidence
        characteristics.append("No clear trend")

    logger.debug(
        f"Regime {regime} (VIX {snapshot.vix:.1f}, SPY {snapshot.spy_change:+.2f}%, "
        f"breadth {breadth:.2f})"
    )

    return MarketRegimeData(
        regime=regime,
        confidence=confidence,
        characteristics=characteristics,
        strategy_suggestions=list(STRATEGY_SUGGESTIONS[regime]),
        volatility_level=volatility_level,
        trend_strength=trend_strength,
    )
