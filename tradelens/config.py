"""
Scoring configuration.

Every threshold and weight used by the analysis core lives here as a named
field, so calibration does not require code edits. All configs are frozen
dataclasses with the production defaults; build a variant with
``dataclasses.replace``.

Example:
    >>> from dataclasses import replace
    >>> cfg = replace(DEFAULT_CONFIG, regime=RegimeConfig(vix_high=35.0))
    >>> cfg.regime.vix_high
    35.0
"""

from dataclasses import dataclass, field

WEIGHT_TOLERANCE = 1e-9


def _check_weights(name: str, weights: dict[str, float]) -> None:
    for key, value in weights.items():
        if value < 0:
            raise ValueError(f"{name} weight '{key}' must be non-negative, got {value}")
    total = sum(weights.values())
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise ValueError(f"{name} weights must sum to 1.0, got {total}")


@dataclass(frozen=True)
class TechnicalConfig:
    """
    Indicator periods and signal thresholds for the technical score.

    Attributes:
        min_candles: Minimum history for calculate_all_indicators
        rsi_overbought / rsi_oversold: RSI signal bands
        adx_strong / adx_weak: ADX trend-strength buckets
        bb_squeeze_percent: Band width (% of middle band) below which a squeeze is flagged
        obv_lookback: OBV is compared to the value this many periods back
        obv_threshold: Relative OBV change for rising/falling (0.05 = 5%)
    """

    min_candles: int = 200

    sma_periods: tuple[int, int, int, int] = (20, 50, 100, 200)
    ema_periods: tuple[int, int] = (20, 50)

    rsi_period: int = 14
    rsi_overbought: float = 70.0
    rsi_oversold: float = 30.0
    rsi_bullish: float = 50.0

    stochastic_period: int = 14
    stochastic_signal_period: int = 3
    stochastic_overbought: float = 80.0
    stochastic_oversold: float = 20.0

    williams_period: int = 14
    cci_period: int = 20

    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9

    adx_period: int = 14
    adx_strong: float = 25.0
    adx_weak: float = 15.0

    bb_period: int = 20
    bb_std: float = 2.0
    bb_squeeze_percent: float = 4.0
    bb_upper_zone: float = 0.8
    bb_lower_zone: float = 0.2

    atr_period: int = 14

    obv_lookback: int = 20
    obv_threshold: float = 0.05

    volume_window: int = 20
    volume_threshold: float = 0.2

    divergence_lookback: int = 20
    divergence_min_points: int = 10

    def __post_init__(self):
        if self.min_candles < max(self.sma_periods):
            raise ValueError(
                f"min_candles ({self.min_candles}) must cover the longest SMA "
                f"({max(self.sma_periods)})"
            )
        if self.macd_fast >= self.macd_slow:
            raise ValueError("macd_fast must be shorter than macd_slow")


@dataclass(frozen=True)
class PatternConfig:
    """Minimum history, tolerances and point values for pattern detection."""

    min_candlestick_candles: int = 3
    min_volume_candles: int = 20
    min_chart_candles: int = 50

    double_window: int = 30
    double_tolerance: float = 0.03  # Extremes within 3%

    head_shoulders_window: int = 50
    head_margin: float = 0.03  # Head >3% above both shoulders
    shoulder_tolerance: float = 0.05  # Shoulders within 5%

    triangle_window: int = 30
    triangle_band: float = 0.02  # Touches within 2% of the flat side
    triangle_min_touches: int = 3
    triangle_slope: float = 0.01  # Sloping side must move >1%

    hammer_shadow_ratio: float = 2.0
    hammer_opposite_ratio: float = 0.3
    doji_body_ratio: float = 0.1
    star_body_ratio: float = 0.3

    climax_multiple: float = 3.0
    divergence_window: int = 10
    divergence_volume_drop: float = 0.2

    high_points: int = 15
    medium_points: int = 8
    direction_points: int = 10


@dataclass(frozen=True)
class SentimentWeights:
    news: float = 0.25
    analyst: float = 0.35
    insider: float = 0.30
    social: float = 0.10

    def __post_init__(self):
        _check_weights("Sentiment", self.as_dict())

    def as_dict(self) -> dict[str, float]:
        return {
            "news": self.news,
            "analyst": self.analyst,
            "insider": self.insider,
            "social": self.social,
        }


@dataclass(frozen=True)
class SentimentConfig:
    """Weights, look-back windows and label bands for sentiment aggregation."""

    weights: SentimentWeights = field(default_factory=SentimentWeights)

    insider_lookback_days: int = 90
    insider_floor: float = 20.0
    insider_span: float = 60.0  # Score range 20-80

    analyst_min_weight: float = 0.3

    momentum_window: int = 5
    momentum_threshold: float = 10.0

    extreme_greed: float = 80.0
    greed: float = 60.0
    neutral: float = 40.0
    fear: float = 20.0


@dataclass(frozen=True)
class FundamentalWeights:
    profitability: float = 0.30
    growth: float = 0.35
    valuation: float = 0.20
    health: float = 0.15

    def __post_init__(self):
        _check_weights("Fundamental", self.as_dict())

    def as_dict(self) -> dict[str, float]:
        return {
            "profitability": self.profitability,
            "growth": self.growth,
            "valuation": self.valuation,
            "health": self.health,
        }


@dataclass(frozen=True)
class FundamentalConfig:
    """
    Threshold ladders for the fundamental sub-scores.

    Ladders are ((threshold, score), ...) checked in order; the first match
    wins, otherwise the floor applies. ROE, revenue growth and current ratio
    ladders match when the ratio is ABOVE the threshold, the P/E ladder when
    it is BELOW.
    """

    weights: FundamentalWeights = field(default_factory=FundamentalWeights)

    roe_ladder: tuple[tuple[float, float], ...] = ((20, 90), (15, 75), (10, 60), (5, 45))
    roe_floor: float = 30
    margin_high: float = 20
    margin_low: float = 5
    margin_points: float = 10

    revenue_ladder: tuple[tuple[float, float], ...] = (
        (30, 95),
        (20, 80),
        (10, 65),
        (5, 55),
        (0, 45),
    )
    revenue_floor: float = 25
    eps_high: float = 15
    eps_bonus: float = 10
    eps_penalty: float = 15

    pe_ladder: tuple[tuple[float, float], ...] = ((10, 85), (15, 70), (25, 55), (40, 40))
    pe_floor: float = 25
    pb_cheap: float = 1.5
    pb_bonus: float = 10
    peg_cheap: float = 1.0
    peg_bonus: float = 15

    current_ratio_ladder: tuple[tuple[float, float], ...] = ((2.0, 85), (1.5, 70), (1.0, 55))
    current_ratio_floor: float = 35
    debt_low: float = 0.3
    debt_low_bonus: float = 15
    debt_moderate: float = 0.5
    debt_moderate_bonus: float = 5
    debt_high: float = 2.0
    debt_high_penalty: float = 20


@dataclass(frozen=True)
class RegimeConfig:
    """VIX, SPY-move and breadth thresholds for regime classification."""

    vix_high: float = 30.0
    vix_medium: float = 20.0

    low_vol_max_move: float = 0.5
    trend_move: float = 0.8
    bull_breadth: float = 0.6
    bear_breadth: float = 0.4

    strong_move: float = 2.0
    moderate_move: float = 1.0

    strong_breadth: float = 0.65
    weak_breadth: float = 0.35
    strong_highs_lows: float = 0.6
    weak_highs_lows: float = 0.4

    high_volatility_confidence: int = 75
    low_volatility_confidence: int = 70
    trending_confidence: int = 80
    range_bound_confidence: int = 60


@dataclass(frozen=True)
class FactorWeights:
    fundamental: float = 0.20
    technical: float = 0.35
    sentiment: float = 0.20
    pattern: float = 0.25

    def __post_init__(self):
        _check_weights("Factor", self.as_dict())

    def as_dict(self) -> dict[str, float]:
        return {
            "fundamental": self.fundamental,
            "technical": self.technical,
            "sentiment": self.sentiment,
            "pattern": self.pattern,
        }


@dataclass(frozen=True)
class CompositeConfig:
    """Factor weights and rating thresholds for the composite score."""

    weights: FactorWeights = field(default_factory=FactorWeights)

    strong_buy: float = 75.0
    buy: float = 60.0
    hold: float = 40.0
    sell: float = 25.0

    def __post_init__(self):
        if not self.strong_buy > self.buy > self.hold > self.sell:
            raise ValueError("Rating thresholds must be strictly decreasing")


@dataclass(frozen=True)
class RegimeAdjustmentConfig:
    """Multipliers and confidence offsets applied by adjust_for_regime."""

    high_volatility_stop: float = 1.5
    high_volatility_size: float = 0.6
    low_volatility_stop: float = 0.8
    bull_confidence: int = 10
    bear_confidence: int = 15
    bear_stop: float = 0.9


@dataclass(frozen=True)
class ScoringConfig:
    """All analysis settings in one place."""

    technical: TechnicalConfig = field(default_factory=TechnicalConfig)
    patterns: PatternConfig = field(default_factory=PatternConfig)
    sentiment: SentimentConfig = field(default_factory=SentimentConfig)
    fundamental: FundamentalConfig = field(default_factory=FundamentalConfig)
    regime: RegimeConfig = field(default_factory=RegimeConfig)
    composite: CompositeConfig = field(default_factory=CompositeConfig)
    adjustment: RegimeAdjustmentConfig = field(default_factory=RegimeAdjustmentConfig)


DEFAULT_CONFIG = ScoringConfig()
