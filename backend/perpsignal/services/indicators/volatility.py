"""
Volatility trackers: ATR with volatility regime, and Bollinger Bands.
"""

from typing import NamedTuple, Optional

from perpsignal.schemas.indicators import BollingerSignal, VolatilityRegime
from perpsignal.services.indicators.calculations import (
    EPSILON,
    RollingWindow,
    true_range,
    wilder_average,
)
from perpsignal.services.indicators.validation import IndicatorError, validate_period

SQUEEZE_BANDWIDTH = 0.05
MEAN_REVERSION_STD = 0.5
WALKING_BANDS_STD = 0.2


class BollingerReading(NamedTuple):
    upper: float
    middle: float
    lower: float
    bandwidth: float


# =============================================================================
# ATR / VOLATILITY REGIME
# =============================================================================


def classify_regime(atr: float, lookback_avg: float) -> VolatilityRegime:
    """Map current ATR against its recent average to a volatility regime."""
    if lookback_avg <= EPSILON:
        return VolatilityRegime.NORMAL

    ratio = atr / lookback_avg
    if ratio > 1.5:
        return VolatilityRegime.HIGH
    if ratio > 1.0:
        return VolatilityRegime.ELEVATED
    if ratio > 0.7:
        return VolatilityRegime.NORMAL
    return VolatilityRegime.LOW


class ATR:
    """
    Average True Range (Wilder, period 14 by default).

    While the true-range window is filling, ATR equals the latest true range.
    When it fills, ATR is seeded with the window mean, then Wilder-smoothed.
    The regime compares ATR with the mean of the last `regime_lookback` ATR values.
    """

    def __init__(self, period: int = 14, regime_lookback: int = 14):
        validate_period(period)
        validate_period(regime_lookback, "regime_lookback")
        self.period = period
        self._true_ranges = RollingWindow(period)
        self._history = RollingWindow(regime_lookback)
        self._prev_close: Optional[float] = None
        self._seeded = False
        self.value: Optional[float] = None

    @property
    def is_ready(self) -> bool:
        return self._true_ranges.is_full

    def update(self, high: float, low: float, close: float) -> tuple[float, VolatilityRegime]:
        tr = true_range(high, low, self._prev_close)
        self._true_ranges.push(tr)

        if not self._true_ranges.is_full:
            atr = tr
        elif self._seeded:
            atr = wilder_average(self.value, tr, self.period)
        else:
            atr = self._true_ranges.mean()
            self._seeded = True

        self.value = atr
        self._prev_close = close
        self._history.push(atr)
        return atr, classify_regime(atr, self._history.mean())


# =============================================================================
# BOLLINGER BANDS
# =============================================================================


class BollingerBands:
    """
    Bollinger Bands (period 20, k = 2.0 by default) over closes.

    Signals are only emitted once the window is full; checked in order:
    squeeze, breakouts, then mean reversion / walking the bands.
    """

    def __init__(self, period: int = 20, std_dev: float = 2.0):
        validate_period(period)
        if std_dev <= 0:
            raise IndicatorError(f"Bollinger std_dev must be positive, got {std_dev}")
        self.std_dev = std_dev
        self._closes = RollingWindow(period)
        self._prev_bandwidth: Optional[float] = None
        self.reading: Optional[BollingerReading] = None

    def update(self, close: float) -> tuple[BollingerReading, BollingerSignal]:
        self._closes.push(close)

        middle = self._closes.mean()
        std = self._closes.std()
        upper = middle + self.std_dev * std
        lower = middle - self.std_dev * std
        bandwidth = (upper - lower) / middle if abs(middle) > EPSILON else 0.0

        signal = BollingerSignal.NEUTRAL
        if self._closes.is_full:
            if bandwidth < SQUEEZE_BANDWIDTH:
                signal = BollingerSignal.SQUEEZE
            elif close > upper:
                signal = BollingerSignal.UPPER_BREAKOUT
            elif close < lower:
                signal = BollingerSignal.LOWER_BREAKOUT
            elif self._prev_bandwidth is not None:
                if bandwidth < self._prev_bandwidth and abs(close - middle) < std * MEAN_REVERSION_STD:
                    signal = BollingerSignal.MEAN_REVERSION
                elif close >= upper - std * WALKING_BANDS_STD or close <= lower + std * WALKING_BANDS_STD:
                    signal = BollingerSignal.WALKING_BANDS

        self._prev_bandwidth = bandwidth
        self.reading = BollingerReading(upper, middle, lower, bandwidth)
        return self.reading, signal
