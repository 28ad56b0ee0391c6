"""
Rules-based strategy source.

Produces a conservative "Support Bounce" plan from the nearest key levels.
Used on its own when no other source is configured, and as the fallback
when another source fails.
"""

from tradelens.strategies.base import (
    FundamentalBasis,
    PositionSizing,
    SentimentBasis,
    StopLoss,
    StrategyEntry,
    StrategyGenerationInput,
    StrategySource,
    StrategyTarget,
    StrategyThesis,
    TechnicalBasis,
    TradingStrategy,
)


class TemplateStrategySource(StrategySource):
    """
    Support bounce strategy built from key levels.

    Entry just above the nearest support, target at the nearest resistance,
    stop 2% below support. Without levels, support and resistance default
    to 3% below and above the current price.

    Example:
        >>> source = TemplateStrategySource()
        >>> [s.name for s in source.generate(request)]
        ['Support Bounce']
    """

    DEFAULT_PARAMS = {
        "support_fallback": 0.97,
        "resistance_fallback": 1.03,
        "entry_offset": 1.002,
        "stop_offset": 0.98,
        "confidence": 60,
    }

    def __init__(self, params: dict | None = None):
        super().__init__("template", params)

    def _levels(self, request: StrategyGenerationInput) -> tuple[float, float]:
        price = request.current_price
        support = None
        resistance = None
        if request.key_levels is not None:
            support = request.key_levels.nearest_support
            resistance = request.key_levels.nearest_resistance
        if not support:
            support = price * self.params["support_fallback"]
        if not resistance:
            resistance = price * self.params["resistance_fallback"]
        return support, resistance

    def generate(self, request: StrategyGenerationInput) -> list[TradingStrategy]:
        support, resistance = self._levels(request)

        sentiment_score = 50
        sentiment_text = "Neutral"
        if request.factor_scores is not None:
            sentiment_score = request.factor_scores.sentiment.score
            sentiment_text = request.factor_scores.sentiment.interpretation

        strategy = TradingStrategy(
            id="fallback-1",
            name="Support Bounce",
            type="conservative",
            confidence=self.params["confidence"],
            timeframe="1-2 weeks",
            thesis=StrategyThesis(
                bull_case="Price holding at key support with technical bounce expected",
                bear_case="Support break would invalidate thesis",
                risks=["Support breakdown"],
            ),
            entries=[
                StrategyEntry(
                    price=support * self.params["entry_offset"],
                    condition="Near support",
                    rationale="Entry at tested support level",
                    side="LONG",
                )
            ],
            targets=[
                StrategyTarget(
                    price=resistance,
                    percentage=(resistance / support - 1) * 100,
                    probability=60,
                    rationale="First resistance",
                )
            ],
            stop_loss=StopLoss(
                price=support * self.params["stop_offset"],
                percentage=-2,
                trailing_type="Fixed",
                trailing_percentage=2,
                rationale="Below support",
            ),
            sizing=PositionSizing(recommended_position=5, max_position=8, scaling="in"),
            risk_reward="2.5:1",
            technical_basis=TechnicalBasis(
                supporting_indicators=["Support level"], key_levels=[support]
            ),
            fundamental_basis=FundamentalBasis(valuation="fair"),
            sentiment_basis=SentimentBasis(
                score=sentiment_score, interpretation=sentiment_text, momentum="neutral"
            ),
        )
        return [strategy]
