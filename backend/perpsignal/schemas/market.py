"""
Market Data Contracts

Input: get_candles(symbol, limit)
Output: list[Candle] in ascending timestamp order

Candles are produced by a market data provider and consumed by the
signal engine. Perpetual-futures fields are optional per candle.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# CANDLE
# =============================================================================


class Candle(BaseModel):
    """Single OHLCV bar, optionally annotated with perp metrics."""

    model_config = ConfigDict(frozen=True)

    open: float
    high: float
    low: float
    close: float
    volume: float
    timestamp: datetime
    open_interest: Optional[float] = Field(
        default=None,
        description="Total outstanding open interest at bar close",
    )
    funding_rate: Optional[float] = Field(
        default=None,
        description="Funding rate per interval (0.0001 = 0.01%)",
    )
