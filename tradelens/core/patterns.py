"""
Pattern recognition: chart, candlestick and volume patterns.

Three independent scans run over the same candle window:
- Chart patterns (double bottom/top, head and shoulders, triangles)
- Candlestick patterns (1-3 candle formations on the latest bars)
- Volume patterns (climax, price/volume divergence)

Every detector assigns its own confidence tier and direction; nothing is
re-scored globally. Patterns are frozen values, recomputed on each call.
"""

import logging
from dataclasses import dataclass
from typing import Literal

import pandas as pd

from tradelens.config import DEFAULT_CONFIG, PatternConfig
from tradelens.core.candles import CandleInput, to_ohlcv_frame

logger = logging.getLogger(__name__)

Confidence = Literal["HIGH", "MEDIUM", "LOW"]
Category = Literal["chart", "candlestick", "harmonic", "volume"]
Direction = Literal["bullish", "bearish", "neutral"]

CONFIDENCE_RANK = {"HIGH": 3, "MEDIUM": 2, "LOW": 1}

# Used only for patterns built without an explicit direction
BULLISH_KEYWORDS = ("bull", "hammer", "morning", "ascending", "accumulation")
BEARISH_KEYWORDS = ("bear", "shooting", "evening", "descending", "distribution")


def infer_direction(pattern_type: str) -> Direction:
    """
    Infer direction from a pattern name by keyword.

    Example:
        >>> infer_direction("Bullish Engulfing")
        'bullish'
    """
    name = pattern_type.lower()
    if any(keyword in name for keyword in BULLISH_KEYWORDS):
        return "bullish"
    if any(keyword in name for keyword in BEARISH_KEYWORDS):
        return "bearish"
    return "neutral"


@dataclass(frozen=True)
class Pattern:
    """
    A detected price/volume pattern.

    Attributes:
        type: Pattern name (e.g. 'Double Bottom')
        confidence: HIGH, MEDIUM or LOW
        target: Projected price target
        invalidation: Price that invalidates the pattern
        description: Human-readable explanation
        category: chart, candlestick, harmonic or volume
        formation_progress: How complete the formation is (0-100)
        direction: bullish, bearish or neutral (inferred from type when omitted)
    """

    type: str
    confidence: Confidence
    target: float
    invalidation: float
    description: str
    category: Category
    formation_progress: int = 100
    direction: Direction | None = None

    def __post_init__(self):
        if self.confidence not in CONFIDENCE_RANK:
            raise ValueError(f"Confidence must be HIGH, MEDIUM or LOW, got {self.confidence}")
        if not 0 <= self.formation_progress <= 100:
            raise ValueError(f"Formation progress must be 0-100, got {self.formation_progress}")
        if self.direction is None:
            object.__setattr__(self, "direction", infer_direction(self.type))

    @property
    def is_bullish(self) -> bool:
        return self.direction == "bullish"

    @property
    def is_bearish(self) -> bool:
        return self.direction == "bearish"


def detect_all_patterns(
    candles: CandleInput, current_price: float, config: PatternConfig | None = None
) -> list[Pattern]:
    """
    Detect all patterns in the candle window.

    Never fails on short input: each scan returns nothing below its own
    minimum history.

    Args:
        candles: Chronological candles
        current_price: Latest traded price (used for targets)
        config: Pattern thresholds (defaults to DEFAULT_CONFIG.patterns)

    Returns:
        Patterns sorted HIGH > MEDIUM > LOW (stable within a tier)

    Example:
        >>> patterns = detect_all_patterns(candles, current_price=101.2)
        >>> [(p.type, p.confidence) for p in patterns]
        [('Bullish Engulfing', 'HIGH'), ('Double Bottom', 'MEDIUM')]
    """
    cfg = config or DEFAULT_CONFIG.patterns
    df = to_ohlcv_frame(candles)

    patterns: list[Pattern] = []
    patterns.extend(detect_chart_patterns(df, current_price, cfg))
    patterns.extend(detect_candlestick_patterns(df, current_price, cfg))
    patterns.extend(detect_volume_patterns(df, current_price, cfg))

    logger.debug(f"Detected {len(patterns)} patterns in {len(df)} candles")

    return sorted(patterns, key=lambda p: CONFIDENCE_RANK[p.confidence], reverse=True)


# =============================================================================
# Chart patterns
# =============================================================================


def detect_chart_patterns(
    candles: CandleInput, current_price: float, config: PatternConfig | None = None
) -> list[Pattern]:
    """Detect chart patterns (needs config.min_chart_candles, default 50)."""
    cfg = config or DEFAULT_CONFIG.patterns
    df = to_ohlcv_frame(candles)

    if len(df) < cfg.min_chart_candles:
        return []

    detectors = (
        find_double_bottom(df["low"], current_price, cfg),
        find_double_top(df["high"], current_price, cfg),
        find_head_and_shoulders(df["high"], df["low"], cfg),
        find_ascending_triangle(df["high"], df["low"], current_price, cfg),
        find_descending_triangle(df["high"], df["low"], current_price, cfg),
    )
    return [pattern for pattern in detectors if pattern is not None]


def _split_extremes(values: pd.Series, window: int, use_max: bool) -> tuple[float, float]:
    """Extreme of the first and second half of the last `window` values."""
    recent = values.iloc[-window:]
    half = window // 2
    first, second = recent.iloc[:half], recent.iloc[half:]
    if use_max:
        return float(first.max()), float(second.max())
    return float(first.min()), float(second.min())


def find_double_bottom(
    low: pd.Series, current_price: float, config: PatternConfig | None = None
) -> Pattern | None:
    """
    Two similar lows (within 3%) in the two halves of the window, below price.

    Target projects the distance from the first low to price above price.
    """
    cfg = config or DEFAULT_CONFIG.patterns
    if len(low) < cfg.double_window:
        return None

    min1, min2 = _split_extremes(low, cfg.double_window, use_max=False)
    if min1 <= 0:
        return None

    if abs(min1 - min2) / min1 < cfg.double_tolerance and min1 < current_price:
        return Pattern(
            type="Double Bottom",
            confidence="MEDIUM",
            target=current_price + (current_price - min1),
            invalidation=min(min1, min2) * 0.99,
            description="Double bottom suggests strong support and potential reversal",
            category="chart",
            formation_progress=85,
            direction="bullish",
        )
    return None


def find_double_top(
    high: pd.Series, current_price: float, config: PatternConfig | None = None
) -> Pattern | None:
    """Two similar highs (within 3%) in the two halves of the window, above price."""
    cfg = config or DEFAULT_CONFIG.patterns
    if len(high) < cfg.double_window:
        return None

    max1, max2 = _split_extremes(high, cfg.double_window, use_max=True)
    if max1 <= 0:
        return None

    if abs(max1 - max2) / max1 < cfg.double_tolerance and max1 > current_price:
        return Pattern(
            type="Double Top",
            confidence="MEDIUM",
            target=current_price - (max1 - current_price),
            invalidation=max(max1, max2) * 1.01,
            description="Double top indicates strong resistance and potential reversal",
            category="chart",
            formation_progress=85,
            direction="bearish",
        )
    return None


def find_head_and_shoulders(
    high: pd.Series, low: pd.Series, config: PatternConfig | None = None
) -> Pattern | None:
    """
    Simplified head and shoulders over the last 50 bars.

    The window is split in thirds; the middle third's peak (head) must be
    more than 3% above both outer peaks (shoulders), which must be within 5%
    of each other. The neckline is the window low.
    """
    cfg = config or DEFAULT_CONFIG.patterns
    window = cfg.head_shoulders_window
    if len(high) < window:
        return None

    recent = high.iloc[-window:]
    third = window // 3

    left_shoulder = float(recent.iloc[:third].max())
    head = float(recent.iloc[third : third * 2].max())
    right_shoulder = float(recent.iloc[third * 2 :].max())

    if left_shoulder <= 0:
        return None

    if (
        head > left_shoulder * (1 + cfg.head_margin)
        and head > right_shoulder * (1 + cfg.head_margin)
        and abs(left_shoulder - right_shoulder) / left_shoulder < cfg.shoulder_tolerance
    ):
        neckline = float(low.iloc[-window:].min())
        return Pattern(
            type="Head and Shoulders",
            confidence="HIGH",
            target=neckline - (head - neckline),
            invalidation=head,
            description="Classic reversal pattern indicating potential trend change to downside",
            category="chart",
            formation_progress=90,
            direction="bearish",
        )
    return None


def find_ascending_triangle(
    high: pd.Series, low: pd.Series, current_price: float, config: PatternConfig | None = None
) -> Pattern | None:
    """
    Flat resistance with rising lows.

    At least 3 highs within 2% of the window high, the lowest low of the
    last third more than 1% above the lowest low of the first third, and
    price still below resistance.
    """
    cfg = config or DEFAULT_CONFIG.patterns
    window = cfg.triangle_window
    if len(high) < window:
        return None

    recent_highs = high.iloc[-window:]
    recent_lows = low.iloc[-window:]
    third = window // 3

    max_high = float(recent_highs.max())
    touches = int((recent_highs > max_high * (1 - cfg.triangle_band)).sum())

    first_lows = recent_lows.iloc[:third]
    last_lows = recent_lows.iloc[-third:]
    lows_rising = last_lows.min() > first_lows.min() * (1 + cfg.triangle_slope)

    if touches >= cfg.triangle_min_touches and lows_rising and current_price < max_high:
        return Pattern(
            type="Ascending Triangle",
            confidence="HIGH",
            target=max_high + (max_high - float(recent_lows.min())),
            invalidation=float(last_lows.min()),
            description="Bullish continuation pattern - breakout above resistance likely",
            category="chart",
            formation_progress=75,
            direction="bullish",
        )
    return None


def find_descending_triangle(
    high: pd.Series, low: pd.Series, current_price: float, config: PatternConfig | None = None
) -> Pattern | None:
    """
    Flat support with falling highs.

    Mirror of find_ascending_triangle: at least 3 lows within 2% of the
    window low, falling highs, and price still above support.
    """
    cfg = config or DEFAULT_CONFIG.patterns
    window = cfg.triangle_window
    if len(low) < window:
        return None

    recent_highs = high.iloc[-window:]
    recent_lows = low.iloc[-window:]
    third = window // 3

    min_low = float(recent_lows.min())
    touches = int((recent_lows < min_low * (1 + cfg.triangle_band)).sum())

    first_highs = recent_highs.iloc[:third]
    last_highs = recent_highs.iloc[-third:]
    highs_falling = last_highs.max() < first_highs.max() * (1 - cfg.triangle_slope)

    if touches >= cfg.triangle_min_touches and highs_falling and current_price > min_low:
        return Pattern(
            type="Descending Triangle",
            confidence="HIGH",
            target=min_low - (float(recent_highs.max()) - min_low),
            invalidation=float(last_highs.max()),
            description="Bearish continuation pattern - breakdown below support likely",
            category="chart",
            formation_progress=75,
            direction="bearish",
        )
    return None


# =============================================================================
# Candlestick patterns
# =============================================================================


def detect_candlestick_patterns(
    candles: CandleInput, current_price: float, config: PatternConfig | None = None
) -> list[Pattern]:
    """
    Detect 1-3 candle patterns ending on the latest candle.

    Single: Hammer, Shooting Star, Doji. A zero-range candle counts as a
    (four-price) Doji.
    Two: Bullish/Bearish Engulfing.
    Three: Morning/Evening Star, Three White Soldiers, Three Black Crows.
    """
    cfg = config or DEFAULT_CONFIG.patterns
    df = to_ohlcv_frame(candles)

    if len(df) < cfg.min_candlestick_candles:
        return []

    patterns: list[Pattern] = []
    patterns.extend(_single_candle_patterns(df.iloc[-1], current_price, cfg))
    patterns.extend(_two_candle_patterns(df.iloc[-2], df.iloc[-1], current_price))
    first, middle, last = df.iloc[-3], df.iloc[-2], df.iloc[-1]
    patterns.extend(_three_candle_patterns(first, middle, last, current_price, cfg))
    return patterns


def _single_candle_patterns(
    last: pd.Series, current_price: float, cfg: PatternConfig
) -> list[Pattern]:
    patterns: list[Pattern] = []

    body = abs(last["close"] - last["open"])
    candle_range = last["high"] - last["low"]

    if candle_range <= 0:
        patterns.append(_doji(current_price))
        return patterns

    upper_shadow = last["high"] - max(last["open"], last["close"])
    lower_shadow = min(last["open"], last["close"]) - last["low"]

    if (
        lower_shadow > body * cfg.hammer_shadow_ratio
        and upper_shadow < body * cfg.hammer_opposite_ratio
        and last["close"] > last["open"]
    ):
        patterns.append(
            Pattern(
                type="Hammer",
                confidence="MEDIUM",
                target=current_price * 1.05,
                invalidation=float(last["low"]),
                description="Bullish reversal pattern suggesting buying pressure at lows",
                category="candlestick",
                direction="bullish",
            )
        )

    if (
        upper_shadow > body * cfg.hammer_shadow_ratio
        and lower_shadow < body * cfg.hammer_opposite_ratio
        and last["close"] < last["open"]
    ):
        patterns.append(
            Pattern(
                type="Shooting Star",
                confidence="MEDIUM",
                target=current_price * 0.95,
                invalidation=float(last["high"]),
                description="Bearish reversal pattern indicating rejection at highs",
                category="candlestick",
                direction="bearish",
            )
        )

    if body < candle_range * cfg.doji_body_ratio:
        patterns.append(_doji(current_price))

    return patterns


def _doji(current_price: float) -> Pattern:
    return Pattern(
        type="Doji",
        confidence="LOW",
        target=current_price * 1.02,
        invalidation=current_price * 0.98,
        description="Indecision candle - wait for directional confirmation",
        category="candlestick",
        direction="neutral",
    )


def _two_candle_patterns(prev: pd.Series, curr: pd.Series, current_price: float) -> list[Pattern]:
    patterns: list[Pattern] = []

    if (
        prev["close"] < prev["open"]
        and curr["close"] > curr["open"]
        and curr["close"] > prev["open"]
        and curr["open"] < prev["close"]
    ):
        patterns.append(
            Pattern(
                type="Bullish Engulfing",
                confidence="HIGH",
                target=current_price * 1.08,
                invalidation=float(curr["low"]),
                description="Strong bullish reversal - bulls overwhelmed bears completely",
                category="candlestick",
                direction="bullish",
            )
        )

    if (
        prev["close"] > prev["open"]
        and curr["close"] < curr["open"]
        and curr["close"] < prev["open"]
        and curr["open"] > prev["close"]
    ):
        patterns.append(
            Pattern(
                type="Bearish Engulfing",
                confidence="HIGH",
                target=current_price * 0.92,
                invalidation=float(curr["high"]),
                description="Strong bearish reversal - bears overwhelmed bulls completely",
                category="candlestick",
                direction="bearish",
            )
        )

    return patterns


def _three_candle_patterns(
    c0: pd.Series, c1: pd.Series, c2: pd.Series, current_price: float, cfg: PatternConfig
) -> list[Pattern]:
    patterns: list[Pattern] = []

    # Small-bodied middle candle
    middle_is_star = abs(c1["close"] - c1["open"]) < (c1["high"] - c1["low"]) * cfg.star_body_ratio
    first_midpoint = (c0["open"] + c0["close"]) / 2

    if (
        c0["close"] < c0["open"]
        and middle_is_star
        and c2["close"] > c2["open"]
        and c2["close"] > first_midpoint
    ):
        patterns.append(
            Pattern(
                type="Morning Star",
                confidence="HIGH",
                target=current_price * 1.08,
                invalidation=float(min(c0["low"], c1["low"], c2["low"])),
                description="Three-candle bullish reversal pattern - strong buy signal",
                category="candlestick",
                direction="bullish",
            )
        )

    if (
        c0["close"] > c0["open"]
        and middle_is_star
        and c2["close"] < c2["open"]
        and c2["close"] < first_midpoint
    ):
        patterns.append(
            Pattern(
                type="Evening Star",
                confidence="HIGH",
                target=current_price * 0.92,
                invalidation=float(max(c0["high"], c1["high"], c2["high"])),
                description="Three-candle bearish reversal pattern - strong sell signal",
                category="candlestick",
                direction="bearish",
            )
        )

    if (
        c0["close"] > c0["open"]
        and c1["close"] > c1["open"]
        and c2["close"] > c2["open"]
        and c1["close"] > c0["close"]
        and c2["close"] > c1["close"]
    ):
        patterns.append(
            Pattern(
                type="Three White Soldiers",
                confidence="MEDIUM",
                target=current_price * 1.06,
                invalidation=float(c0["low"]),
                description="Three consecutive bullish candles - strong buying momentum",
                category="candlestick",
                direction="bullish",
            )
        )

    if (
        c0["close"] < c0["open"]
        and c1["close"] < c1["open"]
        and c2["close"] < c2["open"]
        and c1["close"] < c0["close"]
        and c2["close"] < c1["close"]
    ):
        patterns.append(
            Pattern(
                type="Three Black Crows",
                confidence="MEDIUM",
                target=current_price * 0.94,
                invalidation=float(c0["high"]),
                description="Three consecutive bearish candles - strong selling momentum",
                category="candlestick",
                direction="bearish",
            )
        )

    return patterns


# =============================================================================
# Volume patterns
# =============================================================================


def detect_volume_patterns(
    candles: CandleInput, current_price: float, config: PatternConfig | None = None
) -> list[Pattern]:
    """
    Detect volume climax and price/volume divergence.

    Climax: last bar volume above 3x the window average; direction from the
    bar's own close vs open.
    Divergence: over the last 10 bars volume fell by more than 20% of the
    window average volume. Rising price on that is bearish, falling price is
    bullish (selling exhaustion).
    """
    cfg = config or DEFAULT_CONFIG.patterns
    df = to_ohlcv_frame(candles)

    if len(df) < cfg.min_volume_candles:
        return []

    patterns: list[Pattern] = []
    volume = df["volume"]
    avg_volume = float(volume.mean())
    last = df.iloc[-1]

    if avg_volume > 0 and last["volume"] > avg_volume * cfg.climax_multiple:
        is_bullish = last["close"] > last["open"]
        patterns.append(
            Pattern(
                type="Bullish Volume Climax" if is_bullish else "Bearish Volume Climax",
                confidence="MEDIUM",
                target=current_price * (1.06 if is_bullish else 0.94),
                invalidation=float(last["low"] if is_bullish else last["high"]),
                description=(
                    "Extreme volume spike suggests "
                    f"{'strong buying' if is_bullish else 'heavy selling'} pressure"
                ),
                category="volume",
                direction="bullish" if is_bullish else "bearish",
            )
        )

    recent = df.iloc[-cfg.divergence_window :]
    price_change = recent["close"].iloc[-1] - recent["close"].iloc[0]
    volume_change = recent["volume"].iloc[-1] - recent["volume"].iloc[0]
    volume_declining = volume_change < -avg_volume * cfg.divergence_volume_drop

    if price_change > 0 and volume_declining:
        patterns.append(
            Pattern(
                type="Bearish Volume Divergence",
                confidence="MEDIUM",
                target=current_price * 0.96,
                invalidation=current_price * 1.03,
                description="Price rising on declining volume suggests weak rally",
                category="volume",
                formation_progress=80,
                direction="bearish",
            )
        )
    elif price_change < 0 and volume_declining:
        patterns.append(
            Pattern(
                type="Bullish Volume Divergence",
                confidence="MEDIUM",
                target=current_price * 1.04,
                invalidation=current_price * 0.97,
                description="Price falling on declining volume suggests selling exhaustion",
                category="volume",
                formation_progress=80,
                direction="bullish",
            )
        )

    return patterns
