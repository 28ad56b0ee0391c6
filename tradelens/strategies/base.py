"""
Trading strategy model and the strategy source interface.

Strategies are produced by a StrategySource (an LLM client, a rules-based
template, ...) as raw mappings or TradingStrategy objects, normalized with
TradingStrategy.from_dict and then adjusted to the market regime.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, Union

from tradelens.utils import clamp

StrategyType = Literal["conservative", "moderate", "aggressive", "swing", "position"]
Side = Literal["LONG", "SHORT"]
Valuation = Literal["undervalued", "fair", "overvalued"]
SentimentMomentum = Literal["positive", "neutral", "negative"]

STRATEGY_TYPES = ("conservative", "moderate", "aggressive", "swing", "position")


def _get(raw: Mapping[str, Any], snake: str, camel: str | None = None, default=None):
    """Read a field by snake_case or camelCase name."""
    if snake in raw and raw[snake] is not None:
        return raw[snake]
    if camel and camel in raw and raw[camel] is not None:
        return raw[camel]
    return default


@dataclass
class StrategyThesis:
    bull_case: str = ""
    bear_case: str = ""
    catalysts: list[str] = field(default_factory=list)
    risks: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "StrategyThesis":
        return cls(
            bull_case=_get(raw, "bull_case", "bullCase", ""),
            bear_case=_get(raw, "bear_case", "bearCase", ""),
            catalysts=list(_get(raw, "catalysts", default=[])),
            risks=list(_get(raw, "risks", default=[])),
        )


@dataclass
class StrategyEntry:
    price: float
    condition: str = ""
    rationale: str = ""
    side: Side = "LONG"

    def __post_init__(self):
        self.side = str(self.side).upper()
        if self.side not in ("LONG", "SHORT"):
            raise ValueError(f"Side must be LONG or SHORT, got {self.side}")

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "StrategyEntry":
        return cls(
            price=float(raw["price"]),
            condition=raw.get("condition", ""),
            rationale=raw.get("rationale", ""),
            side=_get(raw, "side", "type", "LONG"),
        )


@dataclass
class StrategyTarget:
    price: float
    percentage: float
    probability: float = 50
    rationale: str = ""

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "StrategyTarget":
        return cls(
            price=float(raw["price"]),
            percentage=float(raw.get("percentage", 0.0)),
            probability=raw.get("probability", 50),
            rationale=raw.get("rationale", ""),
        )


@dataclass
class StopLoss:
    """
    Initial and trailing stop.

    Attributes:
        price: Initial stop price
        percentage: Initial stop distance in percent (negative for a long)
        trailing_type: Trailing method (e.g. 'Percentage', 'ATR-based')
        trailing_percentage: Trailing distance in percent
        rationale: Why the stop sits here
    """

    price: float
    percentage: float
    trailing_type: str = "Percentage"
    trailing_percentage: float = 2.0
    rationale: str = ""

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "StopLoss":
        """Accepts flat fields or {'initial': {...}, 'trailing': {...}} nesting."""
        initial = raw.get("initial") or {}
        trailing = raw.get("trailing") or {}
        return cls(
            price=float(_get(initial, "price", default=raw.get("price", 0.0))),
            percentage=float(_get(initial, "percentage", default=raw.get("percentage", 0.0))),
            trailing_type=_get(
                trailing, "type", default=_get(raw, "trailing_type", default="Percentage")
            ),
            trailing_percentage=float(
                _get(trailing, "percentage", default=_get(raw, "trailing_percentage", default=2.0))
            ),
            rationale=raw.get("rationale", ""),
        )


@dataclass
class PositionSizing:
    """Position size as a percentage of the portfolio."""

    recommended_position: float = 5.0
    max_position: float = 10.0
    scaling: Literal["in", "out", "both"] = "in"

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "PositionSizing":
        return cls(
            recommended_position=float(
                _get(raw, "recommended_position", "recommendedPosition", 5.0)
            ),
            max_position=float(_get(raw, "max_position", "maxPosition", 10.0)),
            scaling=raw.get("scaling", "in"),
        )


@dataclass
class TechnicalBasis:
    supporting_indicators: list[str] = field(default_factory=list)
    patterns: list[str] = field(default_factory=list)
    key_levels: list[float] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "TechnicalBasis":
        return cls(
            supporting_indicators=list(
                _get(raw, "supporting_indicators", "supportingIndicators", [])
            ),
            patterns=list(_get(raw, "patterns", default=[])),
            key_levels=[float(level) for level in _get(raw, "key_levels", "keyLevels", [])],
        )


@dataclass
class FundamentalBasis:
    strength_metrics: list[str] = field(default_factory=list)
    concern_metrics: list[str] = field(default_factory=list)
    valuation: Valuation = "fair"

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "FundamentalBasis":
        return cls(
            strength_metrics=list(_get(raw, "strength_metrics", "strengthMetrics", [])),
            concern_metrics=list(_get(raw, "concern_metrics", "concernMetrics", [])),
            valuation=raw.get("valuation", "fair"),
        )


@dataclass
class SentimentBasis:
    score: float = 50
    interpretation: str = "Neutral"
    momentum: SentimentMomentum = "neutral"

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "SentimentBasis":
        return cls(
            score=raw.get("score", 50),
            interpretation=raw.get("interpretation", "Neutral"),
            momentum=raw.get("momentum", "neutral"),
        )


@dataclass
class StrategyUpdate:
    condition: str
    action: str


def _build(cls, value):
    if not value:
        return None
    if isinstance(value, cls):
        return value
    return cls.from_dict(value)


@dataclass
class TradingStrategy:
    """
    A complete, executable trading plan.

    Attributes:
        id: Identifier, unique within one generation run
        name: Display name
        type: conservative, moderate, aggressive, swing or position
        confidence: 0-100
        timeframe: Holding period description (e.g. '1-2 weeks')
        entries: Entry levels; the first entry's side is the strategy side
        targets: Profit targets
        stop_loss: Initial and trailing stop
        sizing: Position size in percent of portfolio
        notes: Advisory notes appended by adjustments
        regime_adjustments: Regimes already applied to this strategy
    """

    id: str
    name: str
    type: StrategyType = "moderate"
    confidence: float = 50
    timeframe: str = "1-4 weeks"
    thesis: StrategyThesis = field(default_factory=StrategyThesis)
    entries: list[StrategyEntry] = field(default_factory=list)
    targets: list[StrategyTarget] = field(default_factory=list)
    stop_loss: StopLoss = field(default_factory=lambda: StopLoss(price=0.0, percentage=-3.0))
    sizing: PositionSizing = field(default_factory=PositionSizing)
    risk_reward: str = "2:1"
    technical_basis: TechnicalBasis = field(default_factory=TechnicalBasis)
    fundamental_basis: FundamentalBasis = field(default_factory=FundamentalBasis)
    sentiment_basis: SentimentBasis = field(default_factory=SentimentBasis)
    updates: list[StrategyUpdate] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    regime_adjustments: list[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate strategy parameters."""
        if self.type not in STRATEGY_TYPES:
            raise ValueError(f"Strategy type must be one of {STRATEGY_TYPES}, got {self.type}")
        if not 0 <= self.confidence <= 100:
            raise ValueError(f"Confidence must be 0-100, got {self.confidence}")

    @property
    def side(self) -> Side | None:
        """Side of the first entry, None without entries."""
        return self.entries[0].side if self.entries else None

    @property
    def is_long(self) -> bool:
        return self.side == "LONG"

    @classmethod
    def from_dict(
        cls, raw: Mapping[str, Any], current_price: float, index: int = 0
    ) -> "TradingStrategy":
        """
        Normalize a raw strategy mapping, filling missing parts with defaults.

        Defaults: entry at 0.99x price (market order), one target at 1.05x
        (+5%), stop at 0.97x (-3%) with a 2% trailing stop, 5% recommended
        and 10% max position, confidence 50, risk/reward '2:1'.

        Args:
            raw: Strategy mapping (snake_case or camelCase keys)
            current_price: Price the defaults are derived from
            index: Position in the generated list, used for id and name

        Returns:
            TradingStrategy
        """
        entries = [_build(StrategyEntry, e) for e in _get(raw, "entries", default=[])]
        if not entries:
            entries = [
                StrategyEntry(
                    price=current_price * 0.99,
                    condition="Market order",
                    rationale="Entry at current price",
                )
            ]

        targets = [_build(StrategyTarget, t) for t in _get(raw, "targets", default=[])]
        if not targets:
            targets = [
                StrategyTarget(
                    price=current_price * 1.05, percentage=5, probability=50, rationale="Target 1"
                )
            ]

        stop_loss = _build(StopLoss, _get(raw, "stop_loss", "stopLoss")) or StopLoss(
            price=current_price * 0.97,
            percentage=-3,
            trailing_type="Percentage",
            trailing_percentage=2,
            rationale="Stop below support",
        )

        updates = [
            u if isinstance(u, StrategyUpdate) else StrategyUpdate(u["condition"], u["action"])
            for u in _get(raw, "updates", default=[])
        ]

        return cls(
            id=_get(raw, "id", default=f"strategy-{index}"),
            name=_get(raw, "name", default=f"Strategy {index + 1}"),
            type=_get(raw, "type", default="moderate"),
            confidence=clamp(float(_get(raw, "confidence", default=50))),
            timeframe=_get(raw, "timeframe", default="1-4 weeks"),
            thesis=_build(StrategyThesis, _get(raw, "thesis")) or StrategyThesis(),
            entries=entries,
            targets=targets,
            stop_loss=stop_loss,
            sizing=_build(PositionSizing, _get(raw, "sizing")) or PositionSizing(),
            risk_reward=_get(raw, "risk_reward", "riskReward", "2:1"),
            technical_basis=_build(TechnicalBasis, _get(raw, "technical_basis", "technicalBasis"))
            or TechnicalBasis(),
            fundamental_basis=_build(
                FundamentalBasis, _get(raw, "fundamental_basis", "fundamentalBasis")
            )
            or FundamentalBasis(),
            sentiment_basis=_build(SentimentBasis, _get(raw, "sentiment_basis", "sentimentBasis"))
            or SentimentBasis(),
            updates=updates,
            notes=list(_get(raw, "notes", default=[])),
        )


@dataclass
class StrategyGenerationInput:
    """
    Everything a strategy source needs to propose strategies for a symbol.

    Attributes:
        symbol: Ticker
        current_price: Latest price
        factor_scores: FactorScores from generate_factor_scores
        market_regime: MarketRegimeData from detect_market_regime
        key_levels: KeyLevels from calculate_key_levels
        technicals: TechnicalIndicators (optional)
        sentiment: SentimentScore (optional)
        patterns: Detected patterns
        catalysts: Upcoming catalysts
        company_name, sector: Descriptive fundamentals
    """

    symbol: str
    current_price: float
    factor_scores: Any
    market_regime: Any
    key_levels: Any = None
    technicals: Any = None
    sentiment: Any = None
    patterns: list = field(default_factory=list)
    catalysts: list = field(default_factory=list)
    company_name: str = ""
    sector: str = ""

    def __post_init__(self):
        if self.current_price <= 0:
            raise ValueError(f"Current price must be positive, got {self.current_price}")


RawStrategy = Union[TradingStrategy, Mapping[str, Any]]


class StrategySource(ABC):
    """
    Abstract producer of trading strategies.

    Subclasses implement generate(). An LLM-backed source wraps its own
    client, which is passed in by the caller rather than created globally.

    Example:
        >>> class StaticSource(StrategySource):
        ...     def generate(self, request):
        ...         return [{"name": "Breakout", "type": "aggressive"}]
        >>> StaticSource("static").generate(request)
        [{'name': 'Breakout', 'type': 'aggressive'}]
    """

    DEFAULT_PARAMS: dict = {}

    def __init__(self, name: str, params: dict | None = None):
        """
        Initialize the source.

        Args:
            name: Source identifier (used in logs)
            params: Source parameters (merged with DEFAULT_PARAMS)
        """
        self.name = name
        self.params = {**self.DEFAULT_PARAMS, **(params or {})}

    @abstractmethod
    def generate(self, request: StrategyGenerationInput) -> list[RawStrategy]:
        """
        Propose strategies for one symbol.

        Args:
            request: Analysis results for the symbol

        Returns:
            Raw strategy mappings or TradingStrategy objects
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', params={self.params})"
