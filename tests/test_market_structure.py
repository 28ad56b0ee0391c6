"""Tests for swing points and key levels."""

import pandas as pd
import pytest

from tests.fixtures.sample_data import make_frame
from tradelens.core.market_structure import (
    KeyLevels,
    calculate_key_levels,
    find_swing_points,
    pivot_point,
    swing_levels,
)


class TestSwingPoints:
    """Test swing point detection."""

    def test_finds_swings_in_cycles(self, sample_ohlcv):
        """Rally/pullback cycles produce several swing highs and lows."""
        swing_highs, swing_lows = find_swing_points(sample_ohlcv["high"], sample_ohlcv["low"], n=3)

        assert swing_highs.dropna().count() >= 5
        assert swing_lows.dropna().count() >= 5

    def test_swing_high_beats_neighbours(self, sample_ohlcv):
        """Each swing high exceeds the n bars on either side."""
        n = 3
        swing_highs, _ = find_swing_points(sample_ohlcv["high"], sample_ohlcv["low"], n=n)
        highs = sample_ohlcv["high"]

        for idx in swing_highs.dropna().index:
            i = sample_ohlcv.index.get_loc(idx)
            assert highs.iloc[i] > highs.iloc[i - n : i].max()
            assert highs.iloc[i] > highs.iloc[i + 1 : i + n + 1].max()

    def test_wider_period_finds_fewer(self, sample_ohlcv):
        """A larger comparison window is stricter."""
        narrow, _ = find_swing_points(sample_ohlcv["high"], sample_ohlcv["low"], n=3)
        wide, _ = find_swing_points(sample_ohlcv["high"], sample_ohlcv["low"], n=10)

        assert narrow.dropna().count() >= wide.dropna().count()

    def test_short_series(self):
        """Too little data returns all-NaN series of the same length."""
        values = pd.Series([100.0, 101.0, 102.0])
        swing_highs, swing_lows = find_swing_points(values, values, n=5)

        assert len(swing_highs) == 3
        assert swing_highs.isna().all()
        assert swing_lows.isna().all()

    def test_known_swings(self):
        """A single peak and trough are found at their bars."""
        highs = pd.Series([1.0, 2.0, 5.0, 2.0, 1.0, 2.0, 3.0, 2.0])
        lows = pd.Series([3.0, 2.0, 4.0, 2.0, 0.5, 2.0, 3.0, 2.0])

        swing_highs, swing_lows = find_swing_points(highs, lows, n=2)

        assert swing_highs.dropna().to_dict() == {2: 5.0}
        assert swing_lows.dropna().to_dict() == {4: 0.5}

    def test_equal_neighbour_is_not_a_swing(self):
        """Swings must be strictly above their neighbours."""
        highs = pd.Series([1.0, 3.0, 3.0, 1.0, 0.0])

        swing_highs, _ = find_swing_points(highs, highs, n=1)

        assert swing_highs.isna().all()

    def test_swing_levels(self):
        """Swing prices of a frame are returned oldest first."""
        frame = make_frame(
            [
                (100, 101, 99, 100),
                (100, 104, 99, 103),
                (103, 108, 102, 107),
                (107, 107, 96, 97),
                (97, 99, 94, 95),
                (95, 100, 95, 99),
                (99, 103, 98, 102),
            ]
        )

        swing_highs, swing_lows = swing_levels(frame, n=1)

        assert swing_highs == [108.0]
        assert swing_lows == [94.0]


class TestKeyLevels:
    """Test support and resistance levels."""

    def test_pivot_point(self):
        """Pivot is the mean of high, low and close."""
        assert pivot_point(110.0, 90.0, 100.0) == pytest.approx(100.0)

    def test_flat_range(self):
        """A flat range gives its high and low as the only levels."""
        frame = make_frame([(100, 101, 99, 100)] * 30)

        levels = calculate_key_levels(frame, 100.0)

        assert levels.support == [99.0]
        assert levels.resistance == [101.0]
        assert levels.pivot_point == pytest.approx(100.0)
        assert levels.nearest_support == 99.0
        assert levels.nearest_resistance == 101.0

    def test_levels_bracket_price(self, ranging_data):
        """Support is below and resistance above price, nearest first."""
        price = float(ranging_data["close"].iloc[-1])
        levels = calculate_key_levels(ranging_data, price)

        assert all(level < price for level in levels.support)
        assert all(level > price for level in levels.resistance)
        assert levels.support == sorted(levels.support, reverse=True)
        assert levels.resistance == sorted(levels.resistance)
        assert len(levels.support) <= 3
        assert len(levels.resistance) <= 3

    def test_price_above_range(self):
        """Price above every high has no resistance."""
        frame = make_frame([(100, 101, 99, 100)] * 30)

        levels = calculate_key_levels(frame, 105.0)

        assert levels.resistance == []
        assert levels.nearest_resistance is None

    def test_no_candles(self):
        """Without candles the pivot is the current price."""
        levels = calculate_key_levels([], 100.0)

        assert levels == KeyLevels(pivot_point=100.0)
        assert levels.nearest_support is None
