"""
Numeric Primitives

Running statistics shared by the streaming indicator trackers.
All math is deterministic: identical inputs give identical floats.
"""

from collections import deque
from typing import Optional, Sequence

import numpy as np

# Ratios below this magnitude are treated as zero
EPSILON = 1e-12


# =============================================================================
# WINDOW STATISTICS
# =============================================================================


def sma(values: Sequence[float], period: int) -> Optional[float]:
    """Simple Moving Average of the last `period` values."""
    if period <= 0 or len(values) < period:
        return None
    return float(np.mean(np.asarray(values[-period:], dtype=float)))


def ema(values: Sequence[float], period: int) -> Optional[float]:
    """Exponential Moving Average, seeded with the SMA of the first window."""
    if period <= 0 or len(values) < period:
        return None

    multiplier = ema_multiplier(period)
    result = sma(values[:period], period)
    for value in values[period:]:
        result = (value - result) * multiplier + result
    return result


def ema_multiplier(period: int) -> float:
    return 2.0 / (period + 1)


def standard_deviation(values: Sequence[float], period: int) -> Optional[float]:
    """Population standard deviation of the last `period` values."""
    if period <= 0 or len(values) < period:
        return None
    return float(np.std(np.asarray(values[-period:], dtype=float)))


def wilder_average(previous: float, value: float, period: int) -> float:
    """Wilder smoothing: avg = (avg * (N - 1) + new) / N."""
    return (previous * (period - 1) + value) / period


def true_range(high: float, low: float, previous_close: Optional[float]) -> float:
    """True Range; high - low when there is no previous close."""
    if previous_close is None:
        return high - low
    return max(high - low, abs(high - previous_close), abs(low - previous_close))


def is_zero(value: float) -> bool:
    return abs(value) < EPSILON


# =============================================================================
# STREAMING HELPERS
# =============================================================================


class RollingWindow:
    """Fixed-size window of the most recent samples."""

    def __init__(self, size: int):
        self.size = size
        self._values: deque[float] = deque(maxlen=size)

    def __len__(self) -> int:
        return len(self._values)

    @property
    def is_full(self) -> bool:
        return len(self._values) == self.size

    def push(self, value: float) -> None:
        self._values.append(value)

    def values(self) -> list[float]:
        return list(self._values)

    def mean(self) -> Optional[float]:
        if not self._values:
            return None
        return float(np.mean(np.fromiter(self._values, dtype=float)))

    def std(self) -> Optional[float]:
        """Population standard deviation over the window contents."""
        if not self._values:
            return None
        return float(np.std(np.fromiter(self._values, dtype=float)))


class StreamingEMA:
    """
    EMA updated one value at a time.

    Seeded with the first value, then ema = price * m + prev * (1 - m).
    """

    def __init__(self, period: int):
        self.period = period
        self.multiplier = ema_multiplier(period)
        self.value: Optional[float] = None

    def update(self, price: float) -> float:
        if self.value is None:
            self.value = price
        else:
            self.value = price * self.multiplier + self.value * (1.0 - self.multiplier)
        return self.value
