"""Tests for end-to-end symbol analysis."""

from datetime import datetime

import pytest

from tradelens import InsufficientDataError, StrategyGenerator, analyze_symbol
from tradelens.strategies.base import StrategySource

SNAPSHOT = {
    "spyPrice": 450,
    "spyChange": 1.1,
    "vix": 17,
    "advancers": 2100,
    "decliners": 900,
    "newHighs": 120,
    "newLows": 30,
}


class RecordingSource(StrategySource):
    """Keeps the last request and returns one default strategy."""

    def __init__(self):
        super().__init__("recording")
        self.request = None

    def generate(self, request):
        self.request = request
        return [{}]


class TestAnalyzeSymbol:
    """Test the full pipeline."""

    def test_without_market_data(self, trending_data, strong_ratios):
        """Scores are computed; no regime means no strategies."""
        analysis = analyze_symbol("TEST", trending_data, financials={"ratios": strong_ratios})

        assert analysis.current_price == float(trending_data["close"].iloc[-1])
        assert analysis.factor_scores.fundamental.score == 99
        assert analysis.composite == analysis.factor_scores.composite
        assert analysis.rating in ("strong_buy", "buy")
        assert analysis.market_regime is None
        assert analysis.strategies == []
        assert analysis.interpretation.summary

    def test_with_market_data_and_generator(self, trending_data):
        """The regime drives strategy adjustment."""
        analysis = analyze_symbol(
            "TEST",
            trending_data,
            sentiment_inputs={"news": [{"title": "Shares surge on earnings beat"}]},
            market_snapshot=SNAPSHOT,
            generator=StrategyGenerator(),
        )

        assert analysis.market_regime.regime == "trending_bull"
        assert analysis.sentiment.components["news"].score == 70
        assert len(analysis.strategies) == 1
        assert analysis.strategies[0].confidence == 70
        assert analysis.strategies[0].regime_adjustments == ["trending_bull"]

    def test_regime_without_generator(self, trending_data):
        """A snapshot alone classifies the regime."""
        analysis = analyze_symbol("TEST", trending_data, market_snapshot=SNAPSHOT)

        assert analysis.market_regime is not None
        assert analysis.strategies == []

    def test_key_levels_bracket_price(self, ranging_data):
        """Key levels are computed around the current price."""
        analysis = analyze_symbol("TEST", ranging_data, current_price=100.0)

        assert all(level < 100.0 for level in analysis.key_levels.support)
        assert all(level > 100.0 for level in analysis.key_levels.resistance)

    def test_insufficient_history(self, sample_ohlcv):
        """Fewer than 200 candles raises."""
        with pytest.raises(InsufficientDataError):
            analyze_symbol("TEST", sample_ohlcv)

    def test_no_candles_no_price(self):
        """Nothing to derive a price from."""
        with pytest.raises(ValueError):
            analyze_symbol("TEST", [])

    def test_catalysts_reach_strategy_request(self, trending_data):
        """Catalysts are tracked and handed to the strategy source."""
        source = RecordingSource()

        analysis = analyze_symbol(
            "TEST",
            trending_data,
            market_snapshot=SNAPSHOT,
            catalyst_inputs={"earnings_date": "2024-05-02", "as_of": datetime(2024, 4, 30)},
            generator=StrategyGenerator(source=source),
        )

        assert [c.event for c in analysis.catalysts] == ["TEST Earnings Report"]
        assert analysis.catalyst_risk.warnings == ["Earnings in 2 days - expect high volatility"]
        assert source.request.catalysts == analysis.catalysts

    def test_no_catalyst_inputs(self, trending_data):
        """Without catalyst inputs nothing is tracked."""
        analysis = analyze_symbol("TEST", trending_data)

        assert analysis.catalysts == []
        assert analysis.catalyst_risk is None
