"""
Market structure: swing points and key price levels.

This module provides functions for detecting:
- Swing highs and swing lows (local extrema)
- Support and resistance levels around the current price
- The classic floor-trader pivot point
"""

from dataclasses import dataclass, field

import pandas as pd

from tradelens.core.candles import CandleInput, to_ohlcv_frame


def _side_extreme(values: pd.Series, n: int, how: str) -> tuple[pd.Series, pd.Series]:
    """Rolling max/min of the n bars before and the n bars after each bar."""
    before = getattr(values.shift(1).rolling(n), how)()
    reversed_extreme = getattr(values[::-1].shift(1).rolling(n), how)()
    after = pd.Series(reversed_extreme.to_numpy()[::-1], index=values.index)
    return before, after


def find_swing_points(high: pd.Series, low: pd.Series, n: int = 5) -> tuple[pd.Series, pd.Series]:
    """
    Identify swing highs and swing lows.

    A swing high is a bar whose high is strictly above the highs of the n
    bars on each side; a swing low mirrors it on the lows. The first and
    last n bars can never be swings.

    Args:
        high: Series of high prices
        low: Series of low prices
        n: Number of bars on each side to compare (default 5)

    Returns:
        swing_highs: Series with swing high prices at swing points (NaN elsewhere)
        swing_lows: Series with swing low prices at swing points (NaN elsewhere)

    Example:
        >>> swing_h, swing_l = find_swing_points(data['high'], data['low'], n=2)
        >>> print(f"Found {swing_h.dropna().count()} swing highs")
    """
    highs_before, highs_after = _side_extreme(high, n, "max")
    lows_before, lows_after = _side_extreme(low, n, "min")

    swing_highs = high.where((high > highs_before) & (high > highs_after))
    swing_lows = low.where((low < lows_before) & (low < lows_after))
    return swing_highs.astype(float), swing_lows.astype(float)


def swing_levels(df: pd.DataFrame, n: int = 5) -> tuple[list[float], list[float]]:
    """Swing high and swing low prices of an OHLCV frame, oldest first."""
    swing_highs, swing_lows = find_swing_points(df["high"], df["low"], n=n)
    return swing_highs.dropna().tolist(), swing_lows.dropna().tolist()


def pivot_point(high: float, low: float, close: float) -> float:
    """Floor-trader pivot: (H + L + C) / 3."""
    return (high + low + close) / 3


@dataclass
class KeyLevels:
    """
    Support/resistance levels around a price.

    Attributes:
        support: Levels below price, nearest first
        resistance: Levels above price, nearest first
        pivot_point: Pivot of the last bar
    """

    support: list[float] = field(default_factory=list)
    resistance: list[float] = field(default_factory=list)
    pivot_point: float = 0.0

    @property
    def nearest_support(self) -> float | None:
        return self.support[0] if self.support else None

    @property
    def nearest_resistance(self) -> float | None:
        return self.resistance[0] if self.resistance else None


def calculate_key_levels(
    candles: CandleInput,
    current_price: float,
    recent_bars: int = 20,
    lookback_bars: int = 60,
    swing_period: int = 2,
    max_levels: int = 3,
) -> KeyLevels:
    """
    Find the nearest support and resistance levels.

    Candidates are swing highs/lows (swing_period bars each side) over the
    last `lookback_bars`, plus the high/low of the last `recent_bars` and of
    the whole look-back window. Only resistance above and support below the
    current price is kept.

    Args:
        candles: Chronological candles
        current_price: Reference price
        recent_bars: Window for the recent high/low
        lookback_bars: Window for swing detection and the wider extremes
        swing_period: Bars on each side for swing detection
        max_levels: Maximum levels returned per side

    Returns:
        KeyLevels (empty lists and pivot = current_price without candles)

    Example:
        >>> levels = calculate_key_levels(candles, current_price=101.5)
        >>> levels.nearest_support
        99.8
    """
    df = to_ohlcv_frame(candles)
    if df.empty:
        return KeyLevels(pivot_point=current_price)

    last_bar = df.iloc[-1]
    pivot = pivot_point(last_bar["high"], last_bar["low"], last_bar["close"])

    recent = df.iloc[-recent_bars:]
    window = df.iloc[-lookback_bars:]

    swing_highs, swing_lows = swing_levels(window, n=swing_period)

    resistance_candidates = [h for h in swing_highs if h > current_price]
    support_candidates = [low for low in swing_lows if low < current_price]

    recent_high = recent["high"].max()
    recent_low = recent["low"].min()
    window_high = window["high"].max()
    window_low = window["low"].min()

    resistance_candidates.append(recent_high)
    if window_high > recent_high:
        resistance_candidates.append(window_high)
    support_candidates.append(recent_low)
    if window_low < recent_low:
        support_candidates.append(window_low)

    resistance = sorted({float(r) for r in resistance_candidates if r > current_price})
    support = sorted({float(s) for s in support_candidates if s < current_price}, reverse=True)

    return KeyLevels(
        support=support[:max_levels],
        resistance=resistance[:max_levels],
        pivot_point=float(pivot),
    )
