"""Tests for technical indicators and the technical score."""

import math

import numpy as np
import pandas as pd
import pytest

from tests.fixtures.sample_data import make_ohlcv
from tradelens.core.indicators import (
    BollingerReading,
    MACDReading,
    StochasticReading,
    TrendAlignment,
    bollinger_bands,
    calculate_all_indicators,
    calculate_technical_score,
    detect_divergence,
    interpret_indicators,
    obv,
    rsi,
    sma,
    vwap,
)
from tradelens.exceptions import InsufficientDataError


class TestSeriesIndicators:
    """Test the individual series calculations."""

    def test_sma_values(self):
        """SMA should average the trailing window."""
        result = sma(pd.Series([1.0, 2.0, 3.0, 4.0, 5.0]), 3)

        assert math.isnan(result.iloc[1])
        assert result.iloc[2] == pytest.approx(2.0)
        assert result.iloc[4] == pytest.approx(4.0)

    def test_rsi_only_gains_is_100(self):
        """RSI should be 100 when price only rises."""
        close = pd.Series(np.arange(1.0, 41.0))

        assert rsi(close, 14).iloc[-1] == pytest.approx(100.0)

    def test_rsi_no_movement_is_50(self):
        """RSI should be neutral when price never moves."""
        close = pd.Series([100.0] * 40)

        assert rsi(close, 14).iloc[-1] == pytest.approx(50.0)

    def test_rsi_bounded(self, ranging_data):
        """RSI should stay within 0-100."""
        values = rsi(ranging_data["close"], 14).dropna()

        assert (values >= 0).all()
        assert (values <= 100).all()

    def test_bollinger_band_order(self, ranging_data):
        """Upper band >= middle >= lower band."""
        bands = bollinger_bands(ranging_data["close"], 20, 2).dropna()

        assert (bands["upper"] >= bands["middle"]).all()
        assert (bands["middle"] >= bands["lower"]).all()

    def test_obv_accumulates_on_up_closes(self):
        """OBV adds volume on up closes and subtracts it on down closes."""
        close = pd.Series([10.0, 11.0, 12.0, 11.0])
        volume = pd.Series([100.0, 200.0, 300.0, 50.0])

        assert obv(close, volume).tolist() == [0.0, 200.0, 500.0, 450.0]

    def test_vwap_without_volume_returns_last_close(self):
        """VWAP falls back to the last close when there is no volume."""
        close = pd.Series([10.0, 11.0, 12.0])
        volume = pd.Series([0.0, 0.0, 0.0])

        assert vwap(close, volume) == 12.0

    def test_vwap_weights_by_volume(self):
        """VWAP should be the volume-weighted close."""
        close = pd.Series([10.0, 20.0])
        volume = pd.Series([3.0, 1.0])

        assert vwap(close, volume) == pytest.approx(12.5)


class TestDivergence:
    """Test endpoint divergence detection."""

    def test_bearish_divergence(self):
        """Rising price with falling indicator is bearish."""
        prices = list(np.linspace(100, 110, 20))
        indicator = list(np.linspace(70, 60, 20))

        assert detect_divergence(prices, indicator) == "bearish"

    def test_bullish_divergence(self):
        """Falling price with rising indicator is bullish."""
        prices = list(np.linspace(110, 100, 20))
        indicator = list(np.linspace(30, 40, 20))

        assert detect_divergence(prices, indicator) == "bullish"

    def test_too_few_points(self):
        """Fewer than min_points values gives no divergence."""
        assert detect_divergence([1, 2, 3], [3, 2, 1], min_points=10) == "none"


class TestCalculateAllIndicators:
    """Test the full indicator calculation."""

    def test_fails_with_199_candles(self, trending_data):
        """199 candles is below the minimum history."""
        with pytest.raises(InsufficientDataError) as exc_info:
            calculate_all_indicators(trending_data.iloc[:199], 150.0)

        assert exc_info.value.required == 200
        assert exc_info.value.actual == 199

    def test_insufficient_data_is_value_error(self, trending_data):
        """Callers catching ValueError also catch insufficient history."""
        with pytest.raises(ValueError):
            calculate_all_indicators(trending_data.iloc[:50], 150.0)

    def test_succeeds_with_200_candles(self, trending_data):
        """Exactly 200 candles populates every field."""
        data = trending_data.iloc[:200]
        result = calculate_all_indicators(data, float(data["close"].iloc[-1]))

        for value in (
            result.sma20,
            result.sma50,
            result.sma100,
            result.sma200,
            result.ema20,
            result.ema50,
            result.rsi,
            result.williams_r,
            result.cci,
            result.adx,
            result.atr,
            result.atr_percent,
            result.obv,
            result.vwap,
            result.stochastic.k,
            result.stochastic.d,
            result.macd.value,
            result.macd.signal,
            result.macd.histogram,
            result.bollinger_bands.upper,
            result.bollinger_bands.lower,
        ):
            assert value is not None
            assert not math.isnan(value)

        assert result.sma200 > 0

    def test_rejects_non_positive_price(self, trending_data):
        """Current price must be positive."""
        with pytest.raises(ValueError):
            calculate_all_indicators(trending_data, 0)

    def test_score_in_range(self, trending_data, downtrending_data, ranging_data):
        """Technical score stays within 0-100."""
        for data in (trending_data, downtrending_data, ranging_data):
            result = calculate_all_indicators(data, float(data["close"].iloc[-1]))
            assert 0 <= result.technical_score <= 100

    def test_uptrend_scores_higher_than_downtrend(self, trending_data, downtrending_data):
        """A clean uptrend should outscore a clean downtrend."""
        up = calculate_all_indicators(trending_data, float(trending_data["close"].iloc[-1]))
        down = calculate_all_indicators(
            downtrending_data, float(downtrending_data["close"].iloc[-1])
        )

        assert up.technical_score > down.technical_score
        assert up.technical_score > 65

    def test_uptrend_readings(self, trending_data):
        """Uptrend should show bullish alignment and ordered averages."""
        result = calculate_all_indicators(trending_data, float(trending_data["close"].iloc[-1]))

        assert result.sma20 > result.sma50 > result.sma200
        assert result.trend_alignment.daily == "bullish"
        assert result.trend_alignment.weekly == "bullish"
        assert result.trend_alignment.aligned
        assert result.rsi > 50

    def test_downtrend_alignment(self, downtrending_data):
        """Downtrend should be bearish on both timeframes."""
        result = calculate_all_indicators(
            downtrending_data, float(downtrending_data["close"].iloc[-1])
        )

        assert result.trend_alignment.daily == "bearish"
        assert result.trend_alignment.weekly == "bearish"
        assert result.sma50 < result.sma100 < result.sma200

    def test_accepts_candle_list(self, trending_data, candle_list):
        """List of mappings gives the same result as the DataFrame."""
        price = float(trending_data["close"].iloc[-1])
        from_frame = calculate_all_indicators(trending_data, price)
        from_list = calculate_all_indicators(candle_list, price)

        assert from_list.technical_score == from_frame.technical_score
        assert from_list.rsi == pytest.approx(from_frame.rsi)

    def test_breakdown_matches_score(self, trending_data):
        """The stored breakdown produces the reported score."""
        result = calculate_all_indicators(trending_data, float(trending_data["close"].iloc[-1]))

        assert result.score_breakdown.score == result.technical_score

    def test_flat_market(self):
        """Zero-volatility history gives neutral readings rather than errors."""
        data = make_ohlcv([100.0] * 220, spread=0.0)
        result = calculate_all_indicators(data, 100.0)

        assert result.rsi == 50.0
        assert result.rsi_signal == "neutral"
        assert result.bollinger_bands.squeeze
        assert 0 <= result.technical_score <= 100


class TestTechnicalScore:
    """Test the point-based technical score."""

    def _score(self, **overrides):
        args = dict(
            current_price=100.0,
            sma20=95.0,
            sma50=90.0,
            sma200=80.0,
            rsi_value=60.0,
            macd_reading=MACDReading(value=1.0, signal=0.5, histogram=0.5, crossover="none"),
            stochastic_reading=StochasticReading(k=60.0, d=50.0, signal="neutral"),
            adx_value=30.0,
            trend_alignment=TrendAlignment(daily="bullish", weekly="bullish", aligned=True),
            obv_trend="rising",
            bollinger=BollingerReading(upper=104.0, middle=98.0, lower=92.0, squeeze=False),
        )
        args.update(overrides)
        return calculate_technical_score(**args)

    def test_all_bullish_clamps_to_100(self):
        """Every bullish condition together exceeds 100 and is clamped."""
        breakdown = self._score()

        assert breakdown.trend == 25
        assert breakdown.momentum == 25
        assert breakdown.strength == 15
        assert breakdown.volume == 10
        assert breakdown.position == 10
        assert breakdown.raw_score == 135
        assert breakdown.score == 100

    def test_all_bearish(self):
        """Bearish readings only subtract from the neutral 50."""
        breakdown = self._score(
            current_price=70.0,
            sma20=80.0,
            sma50=90.0,
            sma200=100.0,
            rsi_value=25.0,
            macd_reading=MACDReading(value=-1.0, signal=-0.5, histogram=-0.5, crossover="none"),
            stochastic_reading=StochasticReading(k=10.0, d=15.0, signal="oversold"),
            adx_value=10.0,
            trend_alignment=TrendAlignment(daily="neutral", weekly="neutral", aligned=False),
            obv_trend="falling",
            bollinger=BollingerReading(upper=90.0, middle=80.0, lower=70.0, squeeze=False),
        )

        assert breakdown.trend == 0
        assert breakdown.momentum == -5
        assert breakdown.position == -5
        assert breakdown.score == 40

    def test_overbought_rsi_scores_less(self):
        """RSI >= 70 adds only 3 points versus 8 in the 50-70 band."""
        healthy = self._score(rsi_value=60.0)
        overbought = self._score(rsi_value=75.0)

        assert healthy.momentum - overbought.momentum == 5

    def test_components_are_shares(self):
        """Components express each group as a 0-100 share of its maximum."""
        components = self._score().components()

        assert components["trend"] == 100.0
        assert components["volume"] == 100.0
        assert set(components) == {"trend", "momentum", "strength", "volume", "support"}


class TestInterpretation:
    """Test indicator interpretation."""

    def test_uptrend_summary(self, trending_data):
        """Interpretation follows the score band and lists signals."""
        result = calculate_all_indicators(trending_data, float(trending_data["close"].iloc[-1]))
        interpretation = interpret_indicators(result)

        assert interpretation.summary
        assert any(s.indicator == "Multi-Timeframe" for s in interpretation.signals)
