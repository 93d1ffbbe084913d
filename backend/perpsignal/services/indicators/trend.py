"""
Trend trackers: EMA crossover and SuperTrend.
"""

from typing import NamedTuple, Optional

from perpsignal.schemas.indicators import EMASignal, SuperTrendSignal
from perpsignal.services.indicators.calculations import EPSILON, StreamingEMA
from perpsignal.services.indicators.validation import IndicatorError, validate_period
from perpsignal.services.indicators.volatility import ATR


class EMAPair(NamedTuple):
    fast: float
    slow: float


# =============================================================================
# EMA CROSSOVER
# =============================================================================


class EMACrossover:
    """
    Fast/slow EMA pair (20/50 by default) emitting crossover and structure signals.

    - BullishCross / BearishCross when the fast EMA crosses the slow EMA
    - StrongUptrend when price > fast > slow and the fast EMA is rising
    - StrongDowntrend when price < fast < slow and the fast EMA is falling
    """

    def __init__(self, fast_period: int = 20, slow_period: int = 50):
        validate_period(fast_period, "fast_period")
        validate_period(slow_period, "slow_period")
        if fast_period >= slow_period:
            raise IndicatorError(
                f"EMA fast period ({fast_period}) must be less than slow period ({slow_period})"
            )
        self._fast = StreamingEMA(fast_period)
        self._slow = StreamingEMA(slow_period)
        self._prev: Optional[EMAPair] = None

    @property
    def values(self) -> Optional[EMAPair]:
        return self._prev

    def update(self, price: float) -> tuple[EMAPair, EMASignal]:
        fast = self._fast.update(price)
        slow = self._slow.update(price)
        prev = self._prev

        if prev is None:
            signal = EMASignal.NEUTRAL
        elif prev.fast <= prev.slow and fast > slow:
            signal = EMASignal.BULLISH_CROSS
        elif prev.fast >= prev.slow and fast < slow:
            signal = EMASignal.BEARISH_CROSS
        elif price > fast > slow and fast > prev.fast:
            signal = EMASignal.STRONG_UPTREND
        elif price < fast < slow and fast < prev.fast:
            signal = EMASignal.STRONG_DOWNTREND
        else:
            signal = EMASignal.NEUTRAL

        self._prev = EMAPair(fast, slow)
        return self._prev, signal


# =============================================================================
# SUPERTREND
# =============================================================================


class SuperTrend:
    """
    ATR-band trend follower (ATR 10, multiplier 3.0 by default).

    Final bands only tighten toward price: the upper band can only fall
    and the lower band only rise, unless the previous close broke through them.
    The active band switches when price crosses it. The transition candle
    reports a one-shot flip; later candles report the steady side.
    Reports Neutral until the ATR window is full.
    """

    def __init__(self, period: int = 10, multiplier: float = 3.0):
        if multiplier <= 0:
            raise IndicatorError(f"SuperTrend multiplier must be positive, got {multiplier}")
        self._atr = ATR(period)
        self.multiplier = multiplier
        self.upper_band: Optional[float] = None
        self.lower_band: Optional[float] = None
        self.value: Optional[float] = None
        self._side: Optional[SuperTrendSignal] = None
        self._prev_close: Optional[float] = None

    def update(self, high: float, low: float, close: float) -> tuple[float, SuperTrendSignal]:
        atr_value, _ = self._atr.update(high, low, close)
        hl_avg = (high + low) / 2.0
        basic_upper = hl_avg + self.multiplier * atr_value
        basic_lower = hl_avg - self.multiplier * atr_value

        prev_upper = self.upper_band
        prev_lower = self.lower_band
        prev_close = self._prev_close

        # A band resets only when the previous close had already broken through it
        if prev_upper is None or basic_upper < prev_upper or prev_close > prev_upper:
            final_upper = basic_upper
        else:
            final_upper = prev_upper

        if prev_lower is None or basic_lower > prev_lower or prev_close < prev_lower:
            final_lower = basic_lower
        else:
            final_lower = prev_lower

        # Previous candle was riding the upper band: stay there until price closes above it
        if (
            self.value is not None
            and prev_upper is not None
            and abs(self.value - prev_upper) < EPSILON
        ):
            supertrend = final_upper if close <= final_upper else final_lower
        else:
            supertrend = final_lower if close >= final_lower else final_upper

        self.upper_band = final_upper
        self.lower_band = final_lower
        self.value = supertrend
        self._prev_close = close

        side = SuperTrendSignal.BULLISH if close > supertrend else SuperTrendSignal.BEARISH
        previous_side = self._side
        self._side = side

        if not self._atr.is_ready:
            return supertrend, SuperTrendSignal.NEUTRAL
        if previous_side == SuperTrendSignal.BEARISH and side == SuperTrendSignal.BULLISH:
            return supertrend, SuperTrendSignal.BULLISH_FLIP
        if previous_side == SuperTrendSignal.BULLISH and side == SuperTrendSignal.BEARISH:
            return supertrend, SuperTrendSignal.BEARISH_FLIP
        return supertrend, side
