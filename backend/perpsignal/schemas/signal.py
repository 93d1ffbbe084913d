"""
Signal Contracts

Input: ordered list[Candle] for one symbol
Output: SignalOutput (or no signal while awaiting data)

ScoreBreakdown and TradingSignal are internal to the engine.
SignalOutput is the external artifact handed to HTTP, cache and logs.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field

from perpsignal.schemas.market import Candle


# =============================================================================
# ENUMS
# =============================================================================


class SignalDirection(str, Enum):
    LONG = "Long"
    SHORT = "Short"
    NEUTRAL = "Neutral"


class MarketBias(str, Enum):
    STRONG_BULLISH = "StrongBullish"
    BULLISH = "Bullish"
    NEUTRAL = "Neutral"
    BEARISH = "Bearish"
    STRONG_BEARISH = "StrongBearish"

    @property
    def direction(self) -> SignalDirection:
        if self in (MarketBias.STRONG_BULLISH, MarketBias.BULLISH):
            return SignalDirection.LONG
        if self in (MarketBias.BEARISH, MarketBias.STRONG_BEARISH):
            return SignalDirection.SHORT
        return SignalDirection.NEUTRAL


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


# =============================================================================
# SCORING
# =============================================================================


class SignalReason(BaseModel):
    """One entry of the ordered reason trail."""

    model_config = ConfigDict(frozen=True)

    description: str
    weight: float = Field(default=1.0, ge=0)


class ScoreBreakdown(BaseModel):
    """Bounded per-category scores and their sum."""

    model_config = ConfigDict(frozen=True)

    trend_score: int = Field(default=0, ge=-3, le=3)
    momentum_score: int = Field(default=0, ge=-3, le=3)
    volatility_score: int = Field(default=0, ge=-2, le=2)
    volume_score: int = Field(default=0, ge=-2, le=2)
    perp_score: int = Field(default=0, ge=-2, le=2)

    @computed_field
    @property
    def total_score(self) -> int:
        return (
            self.trend_score
            + self.momentum_score
            + self.volatility_score
            + self.volume_score
            + self.perp_score
        )

    def as_list(self) -> list[int]:
        return [
            self.trend_score,
            self.momentum_score,
            self.volatility_score,
            self.volume_score,
            self.perp_score,
        ]


class TradingSignal(BaseModel):
    """Aggregated read of one evaluation, before sizing."""

    model_config = ConfigDict(frozen=True)

    position: SignalDirection
    confidence: float = Field(..., ge=0, le=1)
    bias: MarketBias
    breakdown: ScoreBreakdown
    risk_level: RiskLevel
    reasons: tuple[SignalReason, ...] = ()


# =============================================================================
# OUTPUT: SignalOutput
# =============================================================================


class SignalOutput(BaseModel):
    """
    Final trading recommendation for one symbol.
    Returned by: Signal Engine
    Consumed by: HTTP API, signal cache, runtime logs
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "direction": "Long",
                "confidence": 0.62,
                "recommended_sl_pct": 1.35,
                "recommended_tp_pct": 2.25,
                "reasons": [
                    {"description": "Golden Cross EMA20/50", "weight": 1.0},
                    {"description": "Risk level: Low", "weight": 0.5},
                ],
                "symbol": "BTC-PERP",
                "price": 64250.5,
                "timestamp": "2024-05-01T12:00:00Z",
            }
        },
    )

    direction: SignalDirection
    confidence: float = Field(..., ge=0, le=1)
    recommended_sl_pct: float = Field(..., ge=0, description="Stop-loss distance, % of price")
    recommended_tp_pct: float = Field(..., ge=0, description="Take-profit distance, % of price")
    reasons: list[SignalReason]
    symbol: str
    price: float
    timestamp: datetime


# =============================================================================
# REQUESTS
# =============================================================================


class SignalRequest(BaseModel):
    """
    Request to evaluate one symbol.
    Sent by: API / Runtime
    Received by: Signal Service
    """

    symbol: str = Field(..., min_length=1, description="Symbol to evaluate, e.g. BTC-PERP")
    limit: int = Field(
        default=250,
        ge=1,
        le=5000,
        description="Number of most recent candles to fetch",
    )


class EvaluateRequest(BaseModel):
    """Request body carrying a caller-supplied candle window."""

    symbol: str = Field(..., min_length=1)
    candles: list[Candle] = Field(..., description="Candles in ascending timestamp order")
    decision_policy: Optional[str] = Field(
        default=None,
        description="score_breakdown or global_score; defaults to configured policy",
    )
