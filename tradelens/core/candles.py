"""
Candle (OHLCV) input handling.

Every analysis function accepts candles in any of three shapes:
- a list of Candle objects
- a list of mappings with time/open/high/low/close/volume keys
- a pandas DataFrame with open/high/low/close/volume columns

to_ohlcv_frame() turns all of them into one validated DataFrame.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Union

import numpy as np
import pandas as pd

REQUIRED_COLUMNS = ["open", "high", "low", "close", "volume"]

# Allows for float noise in provider data when checking high/low bounds
PRICE_EPSILON = 1e-9


@dataclass(frozen=True)
class Candle:
    """
    One time-bucketed price/volume observation.

    Attributes:
        time: Timestamp, epoch seconds or ISO string as delivered by the provider
        open, high, low, close: Prices
        volume: Traded volume (non-negative)
    """

    time: Union[int, float, str, pd.Timestamp]
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    def __post_init__(self):
        """Validate OHLCV invariants."""
        if self.high + PRICE_EPSILON < max(self.open, self.close):
            raise ValueError(f"High {self.high} below body top {max(self.open, self.close)}")
        if self.low - PRICE_EPSILON > min(self.open, self.close):
            raise ValueError(f"Low {self.low} above body bottom {min(self.open, self.close)}")
        if self.volume < 0:
            raise ValueError(f"Volume must be non-negative, got {self.volume}")

    @property
    def body(self) -> float:
        return abs(self.close - self.open)

    @property
    def range(self) -> float:
        return self.high - self.low

    @property
    def is_bullish(self) -> bool:
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        return self.close < self.open


CandleInput = Union[pd.DataFrame, Sequence[Candle], Sequence[Mapping]]


def to_ohlcv_frame(candles: CandleInput) -> pd.DataFrame:
    """
    Normalize candle input into an OHLCV DataFrame.

    Args:
        candles: DataFrame, list of Candle, or list of mappings

    Returns:
        DataFrame with float columns [open, high, low, close, volume] in
        chronological order. A 'time' field, when present, becomes the index.

    Raises:
        ValueError: Missing columns or OHLC invariant violations

    Example:
        >>> df = to_ohlcv_frame([
        ...     {"time": 1, "open": 10, "high": 11, "low": 9, "close": 10.5, "volume": 100}
        ... ])
        >>> list(df.columns)
        ['open', 'high', 'low', 'close', 'volume']
    """
    if isinstance(candles, pd.DataFrame):
        df = candles.copy()
        df.columns = [str(c).lower() for c in df.columns]
    elif candles is None or len(candles) == 0:
        return pd.DataFrame(columns=REQUIRED_COLUMNS, dtype=float)
    else:
        rows = []
        for candle in candles:
            if isinstance(candle, Candle):
                rows.append(
                    {
                        "time": candle.time,
                        "open": candle.open,
                        "high": candle.high,
                        "low": candle.low,
                        "close": candle.close,
                        "volume": candle.volume,
                    }
                )
            else:
                rows.append({str(k).lower(): v for k, v in dict(candle).items()})
        df = pd.DataFrame(rows)

    if "time" in df.columns:
        df = df.set_index("time")

    if "volume" not in df.columns:
        df["volume"] = 0.0

    validate_ohlcv(df)

    return df[REQUIRED_COLUMNS].astype(float)


def validate_ohlcv(df: pd.DataFrame) -> bool:
    """
    Validate DataFrame matches the OHLCV format and invariants.

    Args:
        df: DataFrame to validate

    Returns:
        True if valid

    Raises:
        ValueError: If columns are missing or high/low/volume invariants fail
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    if df.empty:
        return True

    values = df[REQUIRED_COLUMNS].astype(float)
    body_top = np.maximum(values["open"], values["close"])
    body_bottom = np.minimum(values["open"], values["close"])

    bad_high = values["high"] + PRICE_EPSILON < body_top
    if bad_high.any():
        raise ValueError(f"High below open/close at {list(values.index[bad_high][:5])}")

    bad_low = values["low"] - PRICE_EPSILON > body_bottom
    if bad_low.any():
        raise ValueError(f"Low above open/close at {list(values.index[bad_low][:5])}")

    if (values["volume"] < 0).any():
        raise ValueError("Volume must be non-negative")

    return True
