"""
Technical indicators and the composite technical score.

This module provides:
- Indicator series functions (SMA, EMA, RSI, Stochastic, Williams %R, CCI,
  MACD, ADX, Bollinger Bands, ATR, OBV, VWAP)
- calculate_all_indicators(): latest reading of every indicator plus a
  0-100 technical score built from fixed point contributions
- interpret_indicators(): human-readable summary of a reading

Wilder-smoothed indicators (RSI, ATR, ADX) are seeded with the simple
average of the first `period` values.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

import numpy as np
import pandas as pd

from tradelens.config import DEFAULT_CONFIG, TechnicalConfig
from tradelens.core.candles import CandleInput, to_ohlcv_frame
from tradelens.exceptions import InsufficientDataError

logger = logging.getLogger(__name__)

Trend = Literal["bullish", "bearish", "neutral"]
Divergence = Literal["bullish", "bearish", "none"]


# =============================================================================
# Indicator series
# =============================================================================


def sma(values: pd.Series, period: int) -> pd.Series:
    """Simple moving average (NaN until `period` values are available)."""
    return values.rolling(window=period, min_periods=period).mean()


def ema(values: pd.Series, period: int) -> pd.Series:
    """Exponential moving average with span `period`."""
    return values.ewm(span=period, adjust=False).mean()


def wilder_smooth(values: pd.Series, period: int) -> pd.Series:
    """
    Wilder's smoothing (RMA).

    Seeded with the mean of the first `period` non-NaN values, then
    avg[i] = (avg[i-1] * (period - 1) + value[i]) / period.
    Leading NaNs are skipped.

    Args:
        values: Input series
        period: Smoothing period

    Returns:
        Smoothed series aligned to the input index (NaN before the seed)
    """
    raw = values.to_numpy(dtype=float)
    out = np.full(len(raw), np.nan)

    valid_positions = np.flatnonzero(~np.isnan(raw))
    if len(valid_positions) < period:
        return pd.Series(out, index=values.index)

    start = valid_positions[0]
    seed_end = start + period
    out[seed_end - 1] = raw[start:seed_end].mean()

    for i in range(seed_end, len(raw)):
        current = raw[i] if not np.isnan(raw[i]) else 0.0
        out[i] = (out[i - 1] * (period - 1) + current) / period

    return pd.Series(out, index=values.index)


def rsi(close: pd.Series, period: int = 14) -> pd.Series:
    """
    Relative Strength Index (0-100).

    Returns 100 when there are only gains in the window and 50 when price
    did not move at all.
    """
    delta = close.diff()
    gains = delta.clip(lower=0)
    losses = -delta.clip(upper=0)

    avg_gain = wilder_smooth(gains, period)
    avg_loss = wilder_smooth(losses, period)

    with np.errstate(divide="ignore", invalid="ignore"):
        rs = avg_gain / avg_loss
        values = 100 - 100 / (1 + rs)

    values = values.where(avg_loss != 0, np.where(avg_gain > 0, 100.0, 50.0))
    return values.where(avg_gain.notna())


def stochastic(
    high: pd.Series, low: pd.Series, close: pd.Series, period: int = 14, signal_period: int = 3
) -> tuple[pd.Series, pd.Series]:
    """
    Stochastic oscillator.

    Returns:
        k: %K line (0-100), NaN when the window has no range
        d: %D line, SMA of %K over `signal_period`
    """
    lowest = low.rolling(window=period).min()
    highest = high.rolling(window=period).max()
    window_range = (highest - lowest).replace(0, np.nan)

    k = 100 * (close - lowest) / window_range
    d = k.rolling(window=signal_period).mean()
    return k, d


def williams_r(high: pd.Series, low: pd.Series, close: pd.Series, period: int = 14) -> pd.Series:
    """Williams %R (-100 to 0)."""
    lowest = low.rolling(window=period).min()
    highest = high.rolling(window=period).max()
    window_range = (highest - lowest).replace(0, np.nan)
    return -100 * (highest - close) / window_range


def cci(high: pd.Series, low: pd.Series, close: pd.Series, period: int = 20) -> pd.Series:
    """Commodity Channel Index using mean absolute deviation."""
    typical = (high + low + close) / 3
    mean = typical.rolling(window=period).mean()
    mean_deviation = typical.rolling(window=period).apply(
        lambda window: np.abs(window - window.mean()).mean(), raw=True
    )
    return (typical - mean) / (0.015 * mean_deviation.replace(0, np.nan))


def macd(
    close: pd.Series, fast: int = 12, slow: int = 26, signal: int = 9
) -> pd.DataFrame:
    """
    MACD line, signal line and histogram.

    Returns:
        DataFrame with columns [macd, signal, histogram]
    """
    macd_line = ema(close, fast) - ema(close, slow)
    signal_line = ema(macd_line, signal)
    return pd.DataFrame(
        {"macd": macd_line, "signal": signal_line, "histogram": macd_line - signal_line},
        index=close.index,
    )


def true_range(high: pd.Series, low: pd.Series, close: pd.Series) -> pd.Series:
    """True range: max(H-L, |H-prevC|, |L-prevC|)."""
    tr1 = high - low
    tr2 = abs(high - close.shift(1))
    tr3 = abs(low - close.shift(1))
    return pd.concat([tr1, tr2, tr3], axis=1).max(axis=1)


def atr(high: pd.Series, low: pd.Series, close: pd.Series, period: int = 14) -> pd.Series:
    """Average True Range (Wilder)."""
    return wilder_smooth(true_range(high, low, close), period)


def adx(high: pd.Series, low: pd.Series, close: pd.Series, period: int = 14) -> pd.DataFrame:
    """
    Average Directional Index.

    Returns:
        DataFrame with columns [adx, plus_di, minus_di]
    """
    up_move = high.diff()
    down_move = -low.diff()

    plus_dm = pd.Series(
        np.where((up_move > down_move) & (up_move > 0), up_move, 0.0), index=high.index
    )
    minus_dm = pd.Series(
        np.where((down_move > up_move) & (down_move > 0), down_move, 0.0), index=high.index
    )
    # First bar has no previous bar to compare against
    plus_dm.iloc[:1] = np.nan
    minus_dm.iloc[:1] = np.nan

    tr = true_range(high, low, close)
    tr.iloc[:1] = np.nan

    smoothed_tr = wilder_smooth(tr, period).replace(0, np.nan)
    plus_di = 100 * wilder_smooth(plus_dm, period) / smoothed_tr
    minus_di = 100 * wilder_smooth(minus_dm, period) / smoothed_tr

    di_sum = plus_di + minus_di
    dx = (100 * (plus_di - minus_di).abs() / di_sum.replace(0, np.nan)).where(di_sum != 0, 0.0)
    dx = dx.where(plus_di.notna())

    return pd.DataFrame(
        {"adx": wilder_smooth(dx, period), "plus_di": plus_di, "minus_di": minus_di},
        index=high.index,
    )


def bollinger_bands(close: pd.Series, period: int = 20, num_std: float = 2.0) -> pd.DataFrame:
    """
    Bollinger Bands (population standard deviation).

    Returns:
        DataFrame with columns [upper, middle, lower]
    """
    middle = sma(close, period)
    std = close.rolling(window=period, min_periods=period).std(ddof=0)
    return pd.DataFrame(
        {"upper": middle + num_std * std, "middle": middle, "lower": middle - num_std * std},
        index=close.index,
    )


def obv(close: pd.Series, volume: pd.Series) -> pd.Series:
    """On-Balance Volume, starting from 0 on the first bar."""
    direction = np.sign(close.diff()).fillna(0)
    return (direction * volume).cumsum()


def vwap(close: pd.Series, volume: pd.Series) -> float:
    """
    Volume-weighted average close over the whole window.

    This is a simplified VWAP (true VWAP needs intraday bars). Returns the
    last close when there is no volume.
    """
    total_volume = volume.sum()
    if total_volume <= 0:
        return float(close.iloc[-1])
    return float((close * volume).sum() / total_volume)


def detect_divergence(
    prices: Sequence[float], indicator: Sequence[float], min_points: int = 10
) -> Divergence:
    """
    Detect price/indicator divergence by comparing window endpoints.

    Bullish: price falls while the indicator rises.
    Bearish: price rises while the indicator falls.

    This is a coarse endpoint comparison, not a pivot-based detector.

    Args:
        prices: Recent prices, oldest first
        indicator: Recent indicator values, oldest first
        min_points: Minimum length of both inputs

    Returns:
        'bullish', 'bearish' or 'none'
    """
    if len(prices) < min_points or len(indicator) < min_points:
        return "none"

    price_first, price_last = prices[0], prices[-1]
    ind_first, ind_last = indicator[0], indicator[-1]

    if price_last < price_first and ind_last > ind_first:
        return "bullish"
    if price_last > price_first and ind_last < ind_first:
        return "bearish"
    return "none"


# =============================================================================
# Readings
# =============================================================================


@dataclass
class StochasticReading:
    k: float
    d: float
    signal: Literal["overbought", "oversold", "neutral"]


@dataclass
class MACDReading:
    value: float
    signal: float
    histogram: float
    crossover: Literal["bullish", "bearish", "none"]


@dataclass
class BollingerReading:
    upper: float
    middle: float
    lower: float
    squeeze: bool

    def position(self, price: float) -> float | None:
        """Relative position of price inside the bands (0 = lower, 1 = upper)."""
        width = self.upper - self.lower
        if width == 0:
            return None
        return (price - self.lower) / width


@dataclass
class TrendAlignment:
    daily: Trend
    weekly: Trend
    aligned: bool


@dataclass
class TechnicalScoreBreakdown:
    """
    Point contributions to the technical score.

    The score starts at 50 and adds each group's points:
    - trend: 0 to 25
    - momentum: -5 to 25
    - strength: 0 to 15 (ADX plus timeframe alignment)
    - volume: 0 to 10 (OBV trend)
    - position: -5 to 10 (Bollinger band position)
    """

    trend: int = 0
    momentum: int = 0
    strength: int = 0
    volume: int = 0
    position: int = 0

    BASE = 50
    MAX_POINTS = {"trend": 25, "momentum": 25, "strength": 15, "volume": 10, "position": 10}

    @property
    def raw_score(self) -> int:
        return self.BASE + self.trend + self.momentum + self.strength + self.volume + self.position

    @property
    def score(self) -> int:
        """Technical score clamped to 0-100."""
        return max(0, min(100, self.raw_score))

    def components(self) -> dict[str, float]:
        """
        Each group's points as a 0-100 share of its maximum.

        'support' is the Bollinger position component.
        """

        def share(points: int, maximum: int) -> float:
            return max(0.0, min(100.0, points / maximum * 100))

        return {
            "trend": share(self.trend, self.MAX_POINTS["trend"]),
            "momentum": share(self.momentum, self.MAX_POINTS["momentum"]),
            "strength": share(self.strength, self.MAX_POINTS["strength"]),
            "volume": share(self.volume, self.MAX_POINTS["volume"]),
            "support": share(self.position, self.MAX_POINTS["position"]),
        }


@dataclass
class TechnicalIndicators:
    """Latest value of every indicator plus the composite technical score."""

    # Trend
    sma20: float
    sma50: float
    sma100: float
    sma200: float
    ema20: float
    ema50: float

    # Momentum
    rsi: float
    rsi_signal: Literal["overbought", "oversold", "neutral"]
    rsi_divergence: Divergence
    stochastic: StochasticReading
    williams_r: float
    cci: float

    # Trend strength
    macd: MACDReading
    adx: float
    adx_signal: Literal["strong_trend", "weak_trend", "no_trend"]

    # Volatility
    bollinger_bands: BollingerReading
    atr: float
    atr_percent: float

    # Volume
    obv: float
    obv_trend: Literal["rising", "falling", "flat"]
    vwap: float
    volume_trend: Literal["increasing", "decreasing", "stable"]

    # Multi-timeframe
    trend_alignment: TrendAlignment

    # Composite
    technical_score: int
    score_breakdown: TechnicalScoreBreakdown = field(default_factory=TechnicalScoreBreakdown)


def _last(series: pd.Series, default: float) -> float:
    """Last value of a series, or default when missing/NaN."""
    if len(series) == 0:
        return default
    value = series.iloc[-1]
    if pd.isna(value):
        return default
    return float(value)


def calculate_all_indicators(
    candles: CandleInput, current_price: float, config: TechnicalConfig | None = None
) -> TechnicalIndicators:
    """
    Calculate all technical indicators for a candle window.

    Args:
        candles: Chronological candles (list of Candle/mappings or OHLCV DataFrame)
        current_price: Latest traded price
        config: Indicator periods and thresholds (defaults to DEFAULT_CONFIG.technical)

    Returns:
        TechnicalIndicators with the latest reading of every indicator

    Raises:
        InsufficientDataError: Fewer than config.min_candles (200) candles
        ValueError: Malformed candles or non-positive current price

    Example:
        >>> indicators = calculate_all_indicators(candles, current_price=182.5)
        >>> indicators.technical_score
        68
    """
    cfg = config or DEFAULT_CONFIG.technical

    df = to_ohlcv_frame(candles)
    if len(df) < cfg.min_candles:
        raise InsufficientDataError(cfg.min_candles, len(df))
    if current_price <= 0:
        raise ValueError(f"Current price must be positive, got {current_price}")

    close = df["close"]
    high = df["high"]
    low = df["low"]
    volume = df["volume"]

    # Trend
    p20, p50, p100, p200 = cfg.sma_periods
    sma20 = _last(sma(close, p20), 0.0)
    sma50 = _last(sma(close, p50), 0.0)
    sma100 = _last(sma(close, p100), 0.0)
    sma200 = _last(sma(close, p200), 0.0)
    ema20 = _last(ema(close, cfg.ema_periods[0]), 0.0)
    ema50 = _last(ema(close, cfg.ema_periods[1]), 0.0)

    # Momentum
    rsi_series = rsi(close, cfg.rsi_period)
    rsi_value = _last(rsi_series, 50.0)
    if rsi_value > cfg.rsi_overbought:
        rsi_signal = "overbought"
    elif rsi_value < cfg.rsi_oversold:
        rsi_signal = "oversold"
    else:
        rsi_signal = "neutral"

    lookback = cfg.divergence_lookback
    rsi_divergence = detect_divergence(
        close.iloc[-lookback:].tolist(),
        rsi_series.dropna().iloc[-lookback:].tolist(),
        cfg.divergence_min_points,
    )

    k_series, d_series = stochastic(
        high, low, close, cfg.stochastic_period, cfg.stochastic_signal_period
    )
    stoch_k = _last(k_series, 50.0)
    stoch_d = _last(d_series, 50.0)
    if stoch_k > cfg.stochastic_overbought:
        stoch_signal = "overbought"
    elif stoch_k < cfg.stochastic_oversold:
        stoch_signal = "oversold"
    else:
        stoch_signal = "neutral"
    stoch = StochasticReading(k=stoch_k, d=stoch_d, signal=stoch_signal)

    williams = _last(williams_r(high, low, close, cfg.williams_period), -50.0)
    cci_value = _last(cci(high, low, close, cfg.cci_period), 0.0)

    # MACD with crossover on the last bar
    macd_df = macd(close, cfg.macd_fast, cfg.macd_slow, cfg.macd_signal)
    macd_last = macd_df.iloc[-1].fillna(0.0)
    macd_prev = macd_df.iloc[-2].fillna(0.0) if len(macd_df) > 1 else macd_last
    if macd_last["macd"] > macd_last["signal"] and macd_prev["macd"] <= macd_prev["signal"]:
        crossover = "bullish"
    elif macd_last["macd"] < macd_last["signal"] and macd_prev["macd"] >= macd_prev["signal"]:
        crossover = "bearish"
    else:
        crossover = "none"
    macd_reading = MACDReading(
        value=float(macd_last["macd"]),
        signal=float(macd_last["signal"]),
        histogram=float(macd_last["histogram"]),
        crossover=crossover,
    )

    # ADX
    adx_value = _last(adx(high, low, close, cfg.adx_period)["adx"], 20.0)
    if adx_value > cfg.adx_strong:
        adx_signal = "strong_trend"
    elif adx_value > cfg.adx_weak:
        adx_signal = "weak_trend"
    else:
        adx_signal = "no_trend"

    # Bollinger Bands
    bands = bollinger_bands(close, cfg.bb_period, cfg.bb_std)
    last_band = bands.iloc[-1]
    if last_band.isna().any():
        upper, middle, lower = current_price * 1.05, current_price, current_price * 0.95
    else:
        upper, middle, lower = (
            float(last_band["upper"]),
            float(last_band["middle"]),
            float(last_band["lower"]),
        )
    width_percent = (upper - lower) / middle * 100 if middle else 0.0
    bollinger = BollingerReading(
        upper=upper, middle=middle, lower=lower, squeeze=width_percent < cfg.bb_squeeze_percent
    )

    # Volatility
    atr_value = _last(atr(high, low, close, cfg.atr_period), 0.0)
    atr_percent = atr_value / current_price * 100

    # Volume
    obv_series = obv(close, volume)
    obv_value = _last(obv_series, 0.0)
    obv_prev = (
        float(obv_series.iloc[-cfg.obv_lookback])
        if len(obv_series) >= cfg.obv_lookback
        else obv_value
    )
    if not obv_prev:
        obv_prev = obv_value
    if obv_value > obv_prev * (1 + cfg.obv_threshold):
        obv_trend = "rising"
    elif obv_value < obv_prev * (1 - cfg.obv_threshold):
        obv_trend = "falling"
    else:
        obv_trend = "flat"

    vwap_value = vwap(close, volume)
    volume_trend = _volume_trend(volume, cfg.volume_window, cfg.volume_threshold)

    # Multi-timeframe: weekly is approximated from longer SMAs, not resampled
    if current_price > sma20 > sma50:
        daily = "bullish"
    elif current_price < sma20 < sma50:
        daily = "bearish"
    else:
        daily = "neutral"

    if sma50 > sma100 > sma200:
        weekly = "bullish"
    elif sma50 < sma100 < sma200:
        weekly = "bearish"
    else:
        weekly = "neutral"

    alignment = TrendAlignment(
        daily=daily, weekly=weekly, aligned=daily == weekly and daily != "neutral"
    )

    breakdown = calculate_technical_score(
        current_price=current_price,
        sma20=sma20,
        sma50=sma50,
        sma200=sma200,
        rsi_value=rsi_value,
        macd_reading=macd_reading,
        stochastic_reading=stoch,
        adx_value=adx_value,
        trend_alignment=alignment,
        obv_trend=obv_trend,
        bollinger=bollinger,
        config=cfg,
    )

    logger.debug(
        f"Technical score {breakdown.score} from {len(df)} candles "
        f"(RSI {rsi_value:.1f}, ADX {adx_value:.1f}, {daily}/{weekly})"
    )

    return TechnicalIndicators(
        sma20=sma20,
        sma50=sma50,
        sma100=sma100,
        sma200=sma200,
        ema20=ema20,
        ema50=ema50,
        rsi=rsi_value,
        rsi_signal=rsi_signal,
        rsi_divergence=rsi_divergence,
        stochastic=stoch,
        williams_r=williams,
        cci=cci_value,
        macd=macd_reading,
        adx=adx_value,
        adx_signal=adx_signal,
        bollinger_bands=bollinger,
        atr=atr_value,
        atr_percent=atr_percent,
        obv=obv_value,
        obv_trend=obv_trend,
        vwap=vwap_value,
        volume_trend=volume_trend,
        trend_alignment=alignment,
        technical_score=breakdown.score,
        score_breakdown=breakdown,
    )


def _volume_trend(
    volume: pd.Series, window: int, threshold: float
) -> Literal["increasing", "decreasing", "stable"]:
    """Compare the average of the last `window` bars to the `window` before them."""
    recent = volume.iloc[-window:]
    older = volume.iloc[-2 * window : -window]
    if len(recent) == 0 or len(older) == 0:
        return "stable"

    recent_avg = recent.mean()
    older_avg = older.mean()
    if recent_avg > older_avg * (1 + threshold):
        return "increasing"
    if recent_avg < older_avg * (1 - threshold):
        return "decreasing"
    return "stable"


def calculate_technical_score(
    current_price: float,
    sma20: float,
    sma50: float,
    sma200: float,
    rsi_value: float,
    macd_reading: MACDReading,
    stochastic_reading: StochasticReading,
    adx_value: float,
    trend_alignment: TrendAlignment,
    obv_trend: str,
    bollinger: BollingerReading,
    config: TechnicalConfig | None = None,
) -> TechnicalScoreBreakdown:
    """
    Score the technical picture from 0 to 100.

    Starts at 50 (neutral) and adds fixed points per condition:

    Trend (up to +25): +5 each for price > SMA20, price > SMA50,
    price > SMA200, SMA20 > SMA50, SMA50 > SMA200.

    Momentum (-5 to +25): RSI 50-70 +8, RSI >= 70 +3, RSI < 30 -5;
    MACD above signal +8; histogram > 0 +5; %K above %D and below 80 +4.

    Strength (up to +15): ADX > 25 +10, ADX > 15 +5; aligned timeframes +5.

    Volume (up to +10): OBV rising +10, flat +5.

    Band position (-5 to +10): 0.5-0.8 +10, >= 0.8 +5, <= 0.2 -5.

    Returns:
        TechnicalScoreBreakdown; use .score for the clamped value
    """
    cfg = config or DEFAULT_CONFIG.technical
    breakdown = TechnicalScoreBreakdown()

    for condition in (
        current_price > sma20,
        current_price > sma50,
        current_price > sma200,
        sma20 > sma50,
        sma50 > sma200,
    ):
        if condition:
            breakdown.trend += 5

    if cfg.rsi_bullish < rsi_value < cfg.rsi_overbought:
        breakdown.momentum += 8
    elif rsi_value >= cfg.rsi_overbought:
        breakdown.momentum += 3  # Overbought
    elif rsi_value < cfg.rsi_oversold:
        breakdown.momentum -= 5

    if macd_reading.value > macd_reading.signal:
        breakdown.momentum += 8
    if macd_reading.histogram > 0:
        breakdown.momentum += 5
    if (
        stochastic_reading.k > stochastic_reading.d
        and stochastic_reading.k < cfg.stochastic_overbought
    ):
        breakdown.momentum += 4

    if adx_value > cfg.adx_strong:
        breakdown.strength += 10
    elif adx_value > cfg.adx_weak:
        breakdown.strength += 5
    if trend_alignment.aligned:
        breakdown.strength += 5

    if obv_trend == "rising":
        breakdown.volume += 10
    elif obv_trend == "flat":
        breakdown.volume += 5

    position = bollinger.position(current_price)
    if position is not None:
        if 0.5 < position < cfg.bb_upper_zone:
            breakdown.position += 10
        elif position >= cfg.bb_upper_zone:
            breakdown.position += 5  # Near upper band
        elif position <= cfg.bb_lower_zone:
            breakdown.position -= 5  # Near lower band

    if breakdown.raw_score != breakdown.score:
        logger.debug(f"Technical score clamped from {breakdown.raw_score} to {breakdown.score}")

    return breakdown


# =============================================================================
# Interpretation
# =============================================================================


@dataclass
class IndicatorSignal:
    indicator: str
    signal: str
    color: str


@dataclass
class IndicatorInterpretation:
    summary: str
    signals: list[IndicatorSignal] = field(default_factory=list)


def interpret_indicators(indicators: TechnicalIndicators) -> IndicatorInterpretation:
    """
    Turn an indicator reading into a summary and a list of notable signals.

    Example:
        >>> result = interpret_indicators(indicators)
        >>> [s.indicator for s in result.signals]
        ['RSI', 'MACD', 'ADX']
    """
    signals: list[IndicatorSignal] = []

    if indicators.rsi > 70:
        signals.append(IndicatorSignal("RSI", "Overbought - Consider taking profits", "red"))
    elif indicators.rsi < 30:
        signals.append(IndicatorSignal("RSI", "Oversold - Potential bounce opportunity", "green"))
    elif indicators.rsi > 50:
        signals.append(IndicatorSignal("RSI", "Bullish momentum", "emerald"))

    if indicators.macd.crossover == "bullish":
        signals.append(IndicatorSignal("MACD", "Bullish crossover detected", "emerald"))
    elif indicators.macd.crossover == "bearish":
        signals.append(IndicatorSignal("MACD", "Bearish crossover detected", "red"))

    if indicators.adx_signal == "strong_trend":
        signals.append(IndicatorSignal("ADX", "Strong trend in place", "blue"))

    if indicators.bollinger_bands.squeeze:
        signals.append(
            IndicatorSignal("Bollinger Bands", "Squeeze detected - Breakout imminent", "amber")
        )

    if indicators.volume_trend == "increasing":
        signals.append(IndicatorSignal("Volume", "Increasing volume confirms move", "emerald"))

    alignment = indicators.trend_alignment
    if alignment.aligned:
        signals.append(
            IndicatorSignal(
                "Multi-Timeframe",
                f"{alignment.daily} alignment across timeframes",
                "emerald" if alignment.daily == "bullish" else "red",
            )
        )

    score = indicators.technical_score
    if score >= 70:
        summary = "Strong bullish technical setup with multiple confirming indicators."
    elif score >= 55:
        summary = "Moderately bullish technical picture with some supporting signals."
    elif score >= 45:
        summary = "Neutral technical setup. Wait for clearer signals before entering."
    elif score >= 30:
        summary = "Moderately bearish technicals. Caution advised on long entries."
    else:
        summary = "Weak technical setup. Multiple bearish signals present."

    return IndicatorInterpretation(summary=summary, signals=signals)
