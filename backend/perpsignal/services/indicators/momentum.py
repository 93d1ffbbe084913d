"""
Momentum trackers: RSI and MACD.
"""

from collections import deque
from typing import NamedTuple, Optional

from perpsignal.schemas.indicators import MACDSignal, RSISignal
from perpsignal.services.indicators.calculations import RollingWindow, StreamingEMA, wilder_average
from perpsignal.services.indicators.validation import validate_macd_periods, validate_period

RSI_OVERSOLD = 30.0
RSI_OVERBOUGHT = 70.0
RSI_DIVERGENCE_LOOKBACK = 5
RS_CAP = 100.0


class MACDReading(NamedTuple):
    macd: float
    signal: float
    histogram: float


# =============================================================================
# RSI
# =============================================================================


class RSI:
    """
    Relative Strength Index with Wilder smoothing (period 14 by default).

    The first average gain/loss is the mean of the first `period` changes.
    RS is capped at 100 when there are no losses; a window with neither
    gains nor losses reads 50.

    Divergence compares against the close and RSI `divergence_lookback`
    candles back: in the oversold zone a lower close with a higher RSI is
    a bullish divergence, and the mirror case in the overbought zone is
    bearish.
    """

    def __init__(
        self,
        period: int = 14,
        oversold: float = RSI_OVERSOLD,
        overbought: float = RSI_OVERBOUGHT,
        divergence_lookback: int = RSI_DIVERGENCE_LOOKBACK,
    ):
        validate_period(period)
        validate_period(divergence_lookback, "divergence_lookback")
        self.period = period
        self.oversold = oversold
        self.overbought = overbought
        self._gains = RollingWindow(period)
        self._losses = RollingWindow(period)
        self._avg_gain: Optional[float] = None
        self._avg_loss: Optional[float] = None
        self._prev_close: Optional[float] = None
        # (close, rsi) of the most recent readings
        self._history: deque[tuple[float, float]] = deque(maxlen=divergence_lookback)
        self.value: Optional[float] = None

    def update(self, close: float) -> tuple[Optional[float], RSISignal]:
        prev_close = self._prev_close
        self._prev_close = close
        if prev_close is None:
            return None, RSISignal.NEUTRAL

        change = close - prev_close
        gain = change if change > 0 else 0.0
        loss = -change if change < 0 else 0.0
        self._gains.push(gain)
        self._losses.push(loss)

        if not self._gains.is_full:
            return None, RSISignal.NEUTRAL

        if self._avg_gain is None:
            self._avg_gain = self._gains.mean()
            self._avg_loss = self._losses.mean()
        else:
            self._avg_gain = wilder_average(self._avg_gain, gain, self.period)
            self._avg_loss = wilder_average(self._avg_loss, loss, self.period)

        if self._avg_loss == 0 and self._avg_gain == 0:
            rsi = 50.0
        else:
            rs = RS_CAP if self._avg_loss == 0 else self._avg_gain / self._avg_loss
            rsi = 100.0 - 100.0 / (1.0 + rs)

        reference = self._history[0] if len(self._history) == self._history.maxlen else None
        self._history.append((close, rsi))
        self.value = rsi
        return rsi, self._classify(close, rsi, reference)

    def _classify(
        self,
        close: float,
        rsi: float,
        reference: Optional[tuple[float, float]],
    ) -> RSISignal:
        if rsi < self.oversold:
            if reference is not None and close < reference[0] and rsi > reference[1]:
                return RSISignal.BULLISH_DIVERGENCE
            return RSISignal.OVERSOLD
        if rsi > self.overbought:
            if reference is not None and close > reference[0] and rsi < reference[1]:
                return RSISignal.BEARISH_DIVERGENCE
            return RSISignal.OVERBOUGHT
        return RSISignal.NEUTRAL


# =============================================================================
# MACD
# =============================================================================


class MACD:
    """MACD (12/26/9 by default) on streaming EMAs seeded from the first close."""

    def __init__(self, fast_period: int = 12, slow_period: int = 26, signal_period: int = 9):
        validate_macd_periods(fast_period, slow_period, signal_period)
        self.periods = (fast_period, slow_period, signal_period)
        self._fast = StreamingEMA(fast_period)
        self._slow = StreamingEMA(slow_period)
        self._signal = StreamingEMA(signal_period)
        self.reading: Optional[MACDReading] = None

    def update(self, close: float) -> tuple[MACDReading, MACDSignal]:
        macd = self._fast.update(close) - self._slow.update(close)
        signal_line = self._signal.update(macd)
        prev = self.reading

        if prev is None:
            signal = MACDSignal.NEUTRAL
        elif prev.macd <= prev.signal and macd > signal_line:
            signal = MACDSignal.BULLISH_CROSS
        elif prev.macd >= prev.signal and macd < signal_line:
            signal = MACDSignal.BEARISH_CROSS
        elif macd > 0 and macd > prev.macd:
            signal = MACDSignal.BULLISH_MOMENTUM
        elif macd < 0 and macd < prev.macd:
            signal = MACDSignal.BEARISH_MOMENTUM
        else:
            signal = MACDSignal.NEUTRAL

        self.reading = MACDReading(macd, signal_line, macd - signal_line)
        return self.reading, signal
