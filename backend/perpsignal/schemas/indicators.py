"""
Indicator Contracts

Categorical micro-signals emitted by each streaming tracker, and the
IndicatorSnapshot describing the trackers' final raw values.

Every tracker emits exactly one of its signal values per candle.
A signal carries no numeric payload; it only selects a score delta.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# TREND SIGNALS
# =============================================================================


class EMASignal(str, Enum):
    BULLISH_CROSS = "BullishCross"
    BEARISH_CROSS = "BearishCross"
    STRONG_UPTREND = "StrongUptrend"
    STRONG_DOWNTREND = "StrongDowntrend"
    NEUTRAL = "Neutral"


class SuperTrendSignal(str, Enum):
    BULLISH = "Bullish"
    BEARISH = "Bearish"
    BULLISH_FLIP = "BullishFlip"
    BEARISH_FLIP = "BearishFlip"
    NEUTRAL = "Neutral"  # ATR window not yet full


# =============================================================================
# MOMENTUM SIGNALS
# =============================================================================


class RSISignal(str, Enum):
    OVERSOLD = "Oversold"
    OVERBOUGHT = "Overbought"
    BULLISH_DIVERGENCE = "BullishDivergence"
    BEARISH_DIVERGENCE = "BearishDivergence"
    NEUTRAL = "Neutral"

    @property
    def is_divergence(self) -> bool:
        return self in (RSISignal.BULLISH_DIVERGENCE, RSISignal.BEARISH_DIVERGENCE)


class MACDSignal(str, Enum):
    BULLISH_CROSS = "BullishCross"
    BEARISH_CROSS = "BearishCross"
    BULLISH_MOMENTUM = "BullishMomentum"
    BEARISH_MOMENTUM = "BearishMomentum"
    NEUTRAL = "Neutral"


# =============================================================================
# VOLATILITY SIGNALS
# =============================================================================


class BollingerSignal(str, Enum):
    SQUEEZE = "Squeeze"
    UPPER_BREAKOUT = "UpperBreakout"
    LOWER_BREAKOUT = "LowerBreakout"
    MEAN_REVERSION = "MeanReversion"
    WALKING_BANDS = "WalkingBands"
    NEUTRAL = "Neutral"


class VolatilityRegime(str, Enum):
    LOW = "Low"
    NORMAL = "Normal"
    ELEVATED = "Elevated"
    HIGH = "High"


# =============================================================================
# VOLUME SIGNALS
# =============================================================================


class OBVSignal(str, Enum):
    BULLISH_DIVERGENCE = "BullishDivergence"
    BEARISH_DIVERGENCE = "BearishDivergence"
    CONFIRMATION = "Confirmation"
    NEUTRAL = "Neutral"


class VolumeProfileSignal(str, Enum):
    POC_SUPPORT = "POCSupport"
    POC_RESISTANCE = "POCResistance"
    NEAR_HVN = "NearHVN"  # High Volume Node
    NEAR_LVN = "NearLVN"  # Low Volume Node
    NEUTRAL = "Neutral"


# =============================================================================
# PERP SIGNALS
# =============================================================================


class OISignal(str, Enum):
    BULLISH_EXPANSION = "BullishExpansion"  # OI up, price up: new longs
    BEARISH_EXPANSION = "BearishExpansion"  # OI up, price down: new shorts
    LONG_SQUEEZE = "LongSqueeze"  # OI down, price down
    SHORT_SQUEEZE = "ShortSqueeze"  # OI down, price up
    NEUTRAL = "Neutral"


class FundingSignal(str, Enum):
    EXTREME_LONG_BIAS = "ExtremeLongBias"
    EXTREME_SHORT_BIAS = "ExtremeShortBias"
    HIGH_LONG_BIAS = "HighLongBias"
    HIGH_SHORT_BIAS = "HighShortBias"
    NEUTRAL_POSITIVE = "NeutralPositive"
    NEUTRAL_NEGATIVE = "NeutralNegative"
    NEUTRAL = "Neutral"

    @property
    def is_extreme(self) -> bool:
        return self in (FundingSignal.EXTREME_LONG_BIAS, FundingSignal.EXTREME_SHORT_BIAS)


# =============================================================================
# FINAL TRACKER STATE
# =============================================================================


class IndicatorSignals(BaseModel):
    """Final categorical state of all ten trackers after the last candle."""

    ema: EMASignal = EMASignal.NEUTRAL
    supertrend: SuperTrendSignal = SuperTrendSignal.NEUTRAL
    rsi: RSISignal = RSISignal.NEUTRAL
    macd: MACDSignal = MACDSignal.NEUTRAL
    bollinger: BollingerSignal = BollingerSignal.NEUTRAL
    volatility: VolatilityRegime = VolatilityRegime.NORMAL
    obv: OBVSignal = OBVSignal.NEUTRAL
    volume_profile: VolumeProfileSignal = VolumeProfileSignal.NEUTRAL
    open_interest: OISignal = OISignal.NEUTRAL
    funding: FundingSignal = FundingSignal.NEUTRAL


class MACDValues(BaseModel):
    """MACD line, signal line and histogram."""

    macd_line: float
    signal_line: float
    histogram: float


class BollingerValues(BaseModel):
    """Bollinger Bands values."""

    upper: float
    middle: float
    lower: float
    bandwidth: float = Field(..., ge=0, description="(upper - lower) / middle")


class IndicatorSnapshot(BaseModel):
    """
    Raw indicator values observed after the last candle of an evaluation.

    Values are None when the tracker never produced one (e.g. no
    open interest in the candle window).
    """

    symbol: str
    price: float = Field(..., description="Close of the last candle")
    timestamp: datetime = Field(..., description="Timestamp of the last candle")
    ema_fast: Optional[float] = None
    ema_slow: Optional[float] = None
    supertrend: Optional[float] = None
    rsi: Optional[float] = Field(default=None, ge=0, le=100)
    macd: Optional[MACDValues] = None
    bollinger: Optional[BollingerValues] = None
    atr: float = Field(default=0.0, ge=0)
    obv: Optional[float] = None
    point_of_control: Optional[float] = None
    oi_change_percent: Optional[float] = None
    funding_rate_avg: Optional[float] = None
    signals: IndicatorSignals = Field(default_factory=IndicatorSignals)
