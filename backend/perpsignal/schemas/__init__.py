"""
PerpSignal Schema Contracts

JSON contracts between the market data layer, the signal engine,
the cache and the HTTP API.
"""

from perpsignal.schemas.market import Candle
from perpsignal.schemas.indicators import (
    BollingerSignal,
    EMASignal,
    FundingSignal,
    IndicatorSignals,
    IndicatorSnapshot,
    MACDSignal,
    OBVSignal,
    OISignal,
    RSISignal,
    SuperTrendSignal,
    VolatilityRegime,
    VolumeProfileSignal,
)
from perpsignal.schemas.signal import (
    EvaluateRequest,
    MarketBias,
    RiskLevel,
    ScoreBreakdown,
    SignalDirection,
    SignalOutput,
    SignalReason,
    SignalRequest,
    TradingSignal,
)

__all__ = [
    # Market
    "Candle",
    # Indicators
    "BollingerSignal",
    "EMASignal",
    "FundingSignal",
    "IndicatorSignals",
    "IndicatorSnapshot",
    "MACDSignal",
    "OBVSignal",
    "OISignal",
    "RSISignal",
    "SuperTrendSignal",
    "VolatilityRegime",
    "VolumeProfileSignal",
    # Signal
    "EvaluateRequest",
    "MarketBias",
    "RiskLevel",
    "ScoreBreakdown",
    "SignalDirection",
    "SignalOutput",
    "SignalReason",
    "SignalRequest",
    "TradingSignal",
]
