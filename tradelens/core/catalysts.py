"""
Catalyst calendar.

Collects dated events that may move a stock (earnings, ex-dividend dates,
economic releases, regulatory news and product launches) and turns the
near-term ones into warnings and recommendations.
"""

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

import pandas as pd

logger = logging.getLogger(__name__)

CatalystType = Literal["earnings", "dividend", "economic", "product", "regulatory", "other"]
Importance = Literal["HIGH", "MEDIUM", "LOW"]
Impact = Literal["bullish", "bearish", "neutral"]

# (earliest, latest) days relative to now for each source
EARNINGS_WINDOW = (-5, 30)
DIVIDEND_WINDOW = (0, 30)
ECONOMIC_WINDOW = (0, 14)
NEWS_WINDOW = (-7, 30)

NEAR_TERM_DAYS = 14

REGULATORY_WORDS = ("fda", "approval")
PRODUCT_WORDS = ("launch", "release")


@dataclass
class Catalyst:
    date: str
    event: str
    type: CatalystType
    importance: Importance
    impact: Impact
    days_until: int
    description: str | None = None


@dataclass
class CatalystWarnings:
    near_term_catalysts: list[Catalyst] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


def _to_utc(value) -> pd.Timestamp | None:
    try:
        stamp = pd.Timestamp(value)
    except (ValueError, TypeError):
        return None
    if pd.isna(stamp):
        return None
    if stamp.tzinfo is None:
        stamp = stamp.tz_localize("UTC")
    return stamp


def days_until(date, now: pd.Timestamp) -> int | None:
    """Whole days from now to date, rounded up. None if date is unparsable."""
    stamp = _to_utc(date)
    if stamp is None:
        logger.warning(f"Ignoring catalyst with unparsable date {date!r}")
        return None
    return math.ceil((stamp - now) / pd.Timedelta(days=1))


def _in_window(days: int | None, window: tuple[int, int]) -> bool:
    return days is not None and window[0] <= days <= window[1]


def identify_catalysts(
    symbol: str,
    earnings_date: str | None = None,
    dividend_date: str | None = None,
    economic_events: Sequence[Mapping[str, Any]] | None = None,
    news: Sequence[Mapping[str, Any]] | None = None,
    as_of: datetime | None = None,
) -> list[Catalyst]:
    """
    Identify upcoming (and just passed) catalysts.

    Args:
        symbol: Ticker, used in the earnings event name
        earnings_date: Next earnings date (kept from 5 days ago to 30 ahead)
        dividend_date: Next ex-dividend date (0 to 30 days ahead)
        economic_events: Mappings with date, event, importance (0 to 14 days)
        news: Mappings with title and date (7 days ago to 30 ahead); titles
              mentioning FDA/approval or launch/release become catalysts
        as_of: Reference time (default: now, UTC)

    Returns:
        Catalysts sorted by days_until, soonest first

    Example:
        >>> events = identify_catalysts("AAPL", earnings_date="2024-05-02",
        ...                             as_of=datetime(2024, 4, 30))
        >>> events[0].days_until
        2
    """
    now = _to_utc(as_of) if as_of is not None else pd.Timestamp(datetime.now(timezone.utc))
    catalysts: list[Catalyst] = []

    if earnings_date:
        days = days_until(earnings_date, now)
        if _in_window(days, EARNINGS_WINDOW):
            catalysts.append(
                Catalyst(
                    date=str(earnings_date),
                    event=f"{symbol} Earnings Report",
                    type="earnings",
                    importance="HIGH",
                    impact="neutral",
                    days_until=days,
                    description="Quarterly earnings announcement",
                )
            )

    if dividend_date:
        days = days_until(dividend_date, now)
        if _in_window(days, DIVIDEND_WINDOW):
            catalysts.append(
                Catalyst(
                    date=str(dividend_date),
                    event="Ex-Dividend Date",
                    type="dividend",
                    importance="MEDIUM",
                    impact="bullish",
                    days_until=days,
                    description="Stock trades ex-dividend",
                )
            )

    for event in economic_events or []:
        days = days_until(event.get("date"), now)
        if not _in_window(days, ECONOMIC_WINDOW):
            continue
        importance = str(event.get("importance", "MEDIUM")).upper()
        if importance not in ("HIGH", "MEDIUM", "LOW"):
            importance = "MEDIUM"
        catalysts.append(
            Catalyst(
                date=str(event.get("date")),
                event=event.get("event", ""),
                type="economic",
                importance=importance,
                impact="neutral",
                days_until=days,
            )
        )

    for article in news or []:
        days = days_until(article.get("date"), now)
        if not _in_window(days, NEWS_WINDOW):
            continue
        title = article.get("title") or ""
        lowered = title.lower()
        if any(word in lowered for word in REGULATORY_WORDS):
            catalysts.append(
                Catalyst(
                    date=str(article.get("date")),
                    event="FDA Decision / Regulatory Event",
                    type="regulatory",
                    importance="HIGH",
                    impact="neutral",
                    days_until=days,
                    description=title,
                )
            )
        elif any(word in lowered for word in PRODUCT_WORDS):
            catalysts.append(
                Catalyst(
                    date=str(article.get("date")),
                    event="Product Launch",
                    type="product",
                    importance="MEDIUM",
                    impact="bullish",
                    days_until=days,
                    description=title,
                )
            )

    catalysts.sort(key=lambda c: c.days_until)
    return catalysts


def analyze_catalyst_risk(catalysts: Sequence[Catalyst]) -> CatalystWarnings:
    """
    Turn catalysts within the next two weeks into warnings and advice.

    Earnings within 3 days warn of high volatility, within 7 days of an
    approaching report. Other HIGH-importance events are listed for
    monitoring, and bullish catalysts are counted.
    """
    near_term = [c for c in catalysts if c.days_until <= NEAR_TERM_DAYS]
    result = CatalystWarnings(near_term_catalysts=near_term)

    earnings = next((c for c in near_term if c.type == "earnings"), None)
    if earnings is not None:
        if earnings.days_until <= 3:
            result.warnings.append(
                f"Earnings in {earnings.days_until} days - expect high volatility"
            )
            result.recommendations.append("Consider reducing position size before earnings")
            result.recommendations.append("Or widen stop loss to avoid earnings whipsaw")
        elif earnings.days_until <= 7:
            result.warnings.append(f"Earnings approaching in {earnings.days_until} days")
            result.recommendations.append("Monitor IV (implied volatility) for options")

    high_importance = [c for c in near_term if c.importance == "HIGH" and c.type != "earnings"]
    if high_importance:
        result.warnings.append(
            f"{len(high_importance)} high-importance event(s) in next 2 weeks"
        )
        for catalyst in high_importance:
            result.recommendations.append(f"Monitor: {catalyst.event} ({catalyst.days_until}d)")

    bullish = [c for c in near_term if c.impact == "bullish"]
    if bullish:
        result.recommendations.append(
            f"{len(bullish)} potential positive catalyst(s) identified"
        )

    return result
