"""Tests for market regime classification."""

import pytest

from tradelens.core.regime import (
    STRATEGY_SUGGESTIONS,
    MarketSnapshot,
    classify_trend_strength,
    classify_volatility,
    detect_market_regime,
)


def snapshot(**overrides):
    data = dict(spy_price=450.0, spy_change=0.0, vix=18.0, advancers=500, decliners=500)
    data.update(overrides)
    return MarketSnapshot(**data)


class TestDetectMarketRegime:
    """Test the regime precedence rules."""

    def test_high_volatility(self):
        """VIX above 30 wins over everything else."""
        result = detect_market_regime(snapshot(vix=31.0, spy_change=1.5, advancers=900))

        assert result.regime == "high_volatility"
        assert result.confidence == 75
        assert result.volatility_level == "high"
        assert result.characteristics[0] == "High volatility (VIX: 31.0)"

    def test_low_volatility(self):
        """Calm VIX with a small SPY move."""
        result = detect_market_regime(snapshot(vix=15.0, spy_change=0.3))

        assert result.regime == "low_volatility"
        assert result.confidence == 70
        assert result.characteristics[0] == "Low volatility (VIX: 15.0)"

    def test_vix_twenty_is_low_volatility(self):
        """The VIX 20 boundary is inclusive."""
        assert detect_market_regime(snapshot(vix=20.0, spy_change=0.3)).regime == "low_volatility"
        assert detect_market_regime(snapshot(vix=20.1, spy_change=0.3)).regime == "range_bound"

    def test_trending_bull(self):
        """SPY up with broad participation."""
        result = detect_market_regime(
            snapshot(vix=22.0, spy_change=1.2, advancers=700, decliners=300)
        )

        assert result.regime == "trending_bull"
        assert result.confidence == 80
        assert result.trend_strength == "moderate"
        assert result.characteristics[-1] == "Bullish trend in place"

    def test_trending_bear(self):
        """SPY down with broad declines."""
        result = detect_market_regime(
            snapshot(vix=25.0, spy_change=-1.5, advancers=300, decliners=700)
        )

        assert result.regime == "trending_bear"
        assert result.confidence == 80
        assert result.characteristics[-1] == "Bearish trend in place"

    def test_range_bound(self):
        """Elevated VIX with no trend falls through to range_bound."""
        result = detect_market_regime(snapshot(vix=25.0, spy_change=0.3))

        assert result.regime == "range_bound"
        assert result.confidence == 60
        assert result.characteristics[-1] == "No clear trend"

    def test_low_vix_with_big_move_can_trend(self):
        """Low VIX only means low_volatility when SPY is quiet too."""
        result = detect_market_regime(
            snapshot(vix=15.0, spy_change=1.2, advancers=700, decliners=300)
        )

        assert result.regime == "trending_bull"
        assert result.volatility_level == "low"

    def test_zero_breadth_is_neutral(self):
        """No advancers or decliners gives a breadth ratio of 0.5."""
        snap = snapshot(vix=25.0, spy_change=1.2, advancers=0, decliners=0)

        assert snap.breadth_ratio == 0.5
        assert detect_market_regime(snap).regime == "range_bound"

    def test_breadth_characteristics(self):
        """Strong advancers and new highs are reported as strong breadth."""
        strong = detect_market_regime(
            snapshot(advancers=700, decliners=300, new_highs=100, new_lows=20)
        )
        weak = detect_market_regime(
            snapshot(advancers=300, decliners=700, new_highs=10, new_lows=100)
        )
        mixed = detect_market_regime(snapshot())

        assert strong.characteristics[1] == "Strong positive breadth"
        assert weak.characteristics[1] == "Weak breadth, more stocks declining"
        assert mixed.characteristics[1] == "Mixed market breadth"

    def test_four_suggestions(self):
        """Every regime carries its four suggestions."""
        result = detect_market_regime(snapshot(vix=31.0))

        assert result.strategy_suggestions == list(STRATEGY_SUGGESTIONS["high_volatility"])
        assert len(result.strategy_suggestions) == 4

    def test_stateless(self):
        """Same snapshot, same result."""
        snap = snapshot(vix=22.0, spy_change=1.2, advancers=700, decliners=300)

        assert detect_market_regime(snap) == detect_market_regime(snap)

    def test_camel_case_mapping(self):
        """Provider camelCase keys are accepted."""
        result = detect_market_regime(
            {
                "spyPrice": 450,
                "spyChange": -1.5,
                "vix": 25,
                "advancers": 300,
                "decliners": 700,
                "newHighs": 5,
                "newLows": 80,
            }
        )

        assert result.regime == "trending_bear"

    def test_missing_vix_raises(self):
        """VIX is required."""
        with pytest.raises(ValueError):
            detect_market_regime({"spyPrice": 450, "spyChange": 1.0})


class TestMarketSnapshot:
    """Test snapshot validation."""

    def test_negative_counts_raise(self):
        """Breadth counts cannot be negative."""
        with pytest.raises(ValueError):
            snapshot(advancers=-1)

    def test_highs_lows_ratio_defined_at_zero(self):
        """No new highs or lows gives a ratio of 0."""
        assert snapshot().highs_lows_ratio == 0.0


class TestClassifiers:
    """Test the volatility and trend strength buckets."""

    @pytest.mark.parametrize(
        "vix,level", [(31, "high"), (30, "medium"), (20.5, "medium"), (20, "low")]
    )
    def test_volatility(self, vix, level):
        """Bucket boundaries are exclusive."""
        assert classify_volatility(vix) == level

    @pytest.mark.parametrize(
        "change,strength", [(2.5, "strong"), (-2.5, "strong"), (1.5, "moderate"), (1.0, "weak")]
    )
    def test_trend_strength(self, change, strength):
        """Strength uses the absolute SPY move."""
        assert classify_trend_strength(change) == strength
