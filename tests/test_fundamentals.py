"""Tests for fundamental scoring."""

import pytest

from tradelens.core.fundamentals import (
    FinancialRatios,
    calculate_fundamental_score,
)


class TestNeutralInput:
    """Missing data gives neutral scores."""

    @pytest.mark.parametrize("financials", [None, {}, {"ratios": {}}, {"other": 1}])
    def test_missing_ratios(self, financials):
        """No ratios means every score is 50."""
        result = calculate_fundamental_score(financials)

        assert result.score == 50
        assert result.components.profitability == 50
        assert result.components.growth == 50
        assert result.components.valuation == 50
        assert result.components.financial_health == 50


class TestCalculateFundamentalScore:
    """Test the sub-scores and the weighted composite."""

    def test_strong_company(self, strong_ratios):
        """Strong ratios max out three sub-scores."""
        result = calculate_fundamental_score({"ratios": strong_ratios})

        assert result.components.profitability == 100
        assert result.components.growth == 100
        assert result.components.valuation == 95
        assert result.components.financial_health == 100
        assert result.score == 99

    def test_roe_ladder(self):
        """ROE above 15% scores 75."""
        result = calculate_fundamental_score({"ratios": {"returnOnEquity": 18}})

        assert result.components.profitability == 75

    def test_peg_from_key_metrics(self):
        """A PEG below 1 in key metrics adds 15 to valuation."""
        result = calculate_fundamental_score(
            {"ratios": {"peRatio": 20}, "keyMetrics": {"pegRatio": 0.8}}
        )

        assert result.components.valuation == 70

    def test_peg_from_ratios(self):
        """PEG can also come from the ratios themselves."""
        result = calculate_fundamental_score({"ratios": {"peRatio": 20, "pegRatio": 0.8}})

        assert result.components.valuation == 70

    def test_expensive_peg_ignored(self):
        """PEG of 1 or more adds nothing."""
        result = calculate_fundamental_score(
            {"ratios": {"peRatio": 20}, "key_metrics": {"peg_ratio": 1.4}}
        )

        assert result.components.valuation == 55

    def test_weak_balance_sheet(self):
        """Low current ratio with heavy debt."""
        result = calculate_fundamental_score(
            {"ratios": {"currentRatio": 0.8, "debtToEquity": 2.5}}
        )

        assert result.components.financial_health == 15

    def test_valuation_clamped(self):
        """Stacked valuation bonuses are clamped to 100."""
        result = calculate_fundamental_score(
            {"ratios": {"peRatio": 8, "pbRatio": 1.0, "pegRatio": 0.5}}
        )

        assert result.components.valuation == 100

    def test_zero_roe_is_missing(self):
        """A zero primary ratio is treated as absent."""
        result = calculate_fundamental_score({"ratios": {"returnOnEquity": 0}})

        assert result.components.profitability == 50

    def test_negative_eps_growth(self):
        """Shrinking earnings cost 15 growth points."""
        result = calculate_fundamental_score({"ratios": {"revenueGrowth": 12, "epsGrowth": -5}})

        assert result.components.growth == 50

    def test_low_margin_penalty(self):
        """Margins below 5% cost 10 profitability points."""
        result = calculate_fundamental_score({"ratios": {"netProfitMargin": 2}})

        assert result.components.profitability == 40

    def test_accepts_financial_ratios(self):
        """A FinancialRatios instance can be passed directly."""
        result = calculate_fundamental_score(FinancialRatios(return_on_equity=18))

        assert result.components.profitability == 75

    def test_score_in_range(self):
        """Terrible ratios still produce scores within 0-100."""
        result = calculate_fundamental_score(
            {
                "ratios": {
                    "returnOnEquity": -40,
                    "netProfitMargin": -20,
                    "revenueGrowth": -30,
                    "epsGrowth": -50,
                    "peRatio": 300,
                    "currentRatio": 0.2,
                    "debtToEquity": 9,
                }
            }
        )

        assert 0 <= result.score <= 100
        assert result.components.financial_health == 15
