"""
Fundamental scoring.

This module provides the fundamental factor score, built from four
sub-scores that each start at a neutral 50:
- Profitability: return on equity ladder, net margin adjustment
- Growth: revenue growth ladder, EPS growth adjustment
- Valuation: P/E ladder (lower is better), P/B and PEG bonuses
- Financial health: current ratio ladder, debt/equity adjustment
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, Union

from tradelens.config import DEFAULT_CONFIG, FundamentalConfig
from tradelens.utils import clamp, round_half_up

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50

# Provider (camelCase) field names
RATIO_ALIASES = {
    "peRatio": "pe_ratio",
    "returnOnEquity": "return_on_equity",
    "revenueGrowth": "revenue_growth",
    "epsGrowth": "eps_growth",
    "pbRatio": "pb_ratio",
    "pegRatio": "peg_ratio",
    "currentRatio": "current_ratio",
    "debtToEquity": "debt_to_equity",
    "netProfitMargin": "net_profit_margin",
}


@dataclass
class FinancialRatios:
    """
    Sparse set of financial ratios, in percent where applicable
    (ROE 25 means 25%). Any field may be None.
    """

    pe_ratio: float | None = None
    return_on_equity: float | None = None
    revenue_growth: float | None = None
    eps_growth: float | None = None
    pb_ratio: float | None = None
    peg_ratio: float | None = None
    current_ratio: float | None = None
    debt_to_equity: float | None = None
    net_profit_margin: float | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FinancialRatios":
        """Build from snake_case or camelCase keys; unknown keys are ignored."""
        names = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = RATIO_ALIASES.get(key, key)
            if name in names and value is not None:
                kwargs[name] = float(value)
        return cls(**kwargs)


@dataclass
class FundamentalComponents:
    profitability: int = NEUTRAL_SCORE
    growth: int = NEUTRAL_SCORE
    valuation: int = NEUTRAL_SCORE
    financial_health: int = NEUTRAL_SCORE


@dataclass
class FundamentalScore:
    score: int = NEUTRAL_SCORE
    components: FundamentalComponents = field(default_factory=FundamentalComponents)


FinancialsInput = Union[FinancialRatios, Mapping[str, Any], None]


def _ladder_above(value: float, ladder, floor: float) -> float:
    for threshold, score in ladder:
        if value > threshold:
            return score
    return floor


def _ladder_below(value: float, ladder, floor: float) -> float:
    for threshold, score in ladder:
        if value < threshold:
            return score
    return floor


def _present(value: float | None) -> bool:
    """A ratio counts only when it is set and non-zero."""
    return value is not None and value != 0


def score_profitability(ratios: FinancialRatios, cfg: FundamentalConfig) -> float:
    score = NEUTRAL_SCORE
    if _present(ratios.return_on_equity):
        score = _ladder_above(ratios.return_on_equity, cfg.roe_ladder, cfg.roe_floor)

    margin = ratios.net_profit_margin
    if margin is not None:
        if margin > cfg.margin_high:
            score += cfg.margin_points
        elif margin < cfg.margin_low:
            score -= cfg.margin_points
    return score


def score_growth(ratios: FinancialRatios, cfg: FundamentalConfig) -> float:
    score = NEUTRAL_SCORE
    if _present(ratios.revenue_growth):
        score = _ladder_above(ratios.revenue_growth, cfg.revenue_ladder, cfg.revenue_floor)

    eps = ratios.eps_growth
    if eps is not None:
        if eps > cfg.eps_high:
            score += cfg.eps_bonus
        elif eps < 0:
            score -= cfg.eps_penalty
    return score


def score_valuation(
    ratios: FinancialRatios, cfg: FundamentalConfig, peg_ratio: float | None = None
) -> float:
    """Valuation score where 100 is most undervalued."""
    score = NEUTRAL_SCORE
    if _present(ratios.pe_ratio):
        score = _ladder_below(ratios.pe_ratio, cfg.pe_ladder, cfg.pe_floor)

    if _present(ratios.pb_ratio) and ratios.pb_ratio < cfg.pb_cheap:
        score += cfg.pb_bonus

    peg = peg_ratio if peg_ratio is not None else ratios.peg_ratio
    if peg is not None and 0 < peg < cfg.peg_cheap:
        score += cfg.peg_bonus
    return score


def score_financial_health(ratios: FinancialRatios, cfg: FundamentalConfig) -> float:
    score = NEUTRAL_SCORE
    if _present(ratios.current_ratio):
        score = _ladder_above(
            ratios.current_ratio, cfg.current_ratio_ladder, cfg.current_ratio_floor
        )

    debt = ratios.debt_to_equity
    if _present(debt):
        if debt < cfg.debt_low:
            score += cfg.debt_low_bonus
        elif debt < cfg.debt_moderate:
            score += cfg.debt_moderate_bonus
        elif debt > cfg.debt_high:
            score -= cfg.debt_high_penalty
    return score


def calculate_fundamental_score(
    financials: FinancialsInput = None, config: FundamentalConfig | None = None
) -> FundamentalScore:
    """
    Score a company's fundamentals from 0 to 100.

    Args:
        financials: FinancialRatios, or a mapping with a 'ratios' entry (and
                    optionally 'key_metrics'/'keyMetrics' holding a PEG ratio).
                    None, {} or a mapping without ratios give a neutral result.
        config: Ladders and weights (defaults to DEFAULT_CONFIG.fundamental)

    Returns:
        FundamentalScore with the weighted composite and the four clamped,
        rounded sub-scores

    Example:
        >>> result = calculate_fundamental_score({"ratios": {"returnOnEquity": 18}})
        >>> result.components.profitability
        75
    """
    cfg = config or DEFAULT_CONFIG.fundamental

    peg_ratio = None
    if isinstance(financials, FinancialRatios):
        ratios = financials
    elif not financials or not financials.get("ratios"):
        logger.debug("No financial ratios supplied, using neutral fundamental score")
        return FundamentalScore()
    else:
        raw = financials["ratios"]
        ratios = raw if isinstance(raw, FinancialRatios) else FinancialRatios.from_mapping(raw)
        key_metrics = financials.get("key_metrics") or financials.get("keyMetrics") or {}
        peg_ratio = key_metrics.get("peg_ratio", key_metrics.get("pegRatio"))

    raw_scores = {
        "profitability": score_profitability(ratios, cfg),
        "growth": score_growth(ratios, cfg),
        "valuation": score_valuation(ratios, cfg, peg_ratio),
        "health": score_financial_health(ratios, cfg),
    }
    scores = {name: clamp(value) for name, value in raw_scores.items()}

    for name, value in raw_scores.items():
        if value != scores[name]:
            logger.debug(f"Fundamental {name} score clamped from {value} to {scores[name]}")

    weights = cfg.weights.as_dict()
    composite = sum(scores[name] * weights[name] for name in scores)

    return FundamentalScore(
        score=round_half_up(composite),
        components=FundamentalComponents(
            profitability=round_half_up(scores["profitability"]),
            growth=round_half_up(scores["growth"]),
            valuation=round_half_up(scores["valuation"]),
            financial_health=round_half_up(scores["health"]),
        ),
    )
