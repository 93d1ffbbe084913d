"""
Volume trackers: On-Balance Volume and Volume Profile.
"""

import math
from collections import deque
from typing import Optional

from perpsignal.schemas.indicators import OBVSignal, VolumeProfileSignal
from perpsignal.services.indicators.validation import IndicatorError, validate_period

OBV_SMOOTHING = 0.9  # weight kept by the previous smoothed value
HVN_MULTIPLIER = 1.5
LVN_MULTIPLIER = 0.5
POC_PROXIMITY_TICKS = 2.0


# =============================================================================
# ON-BALANCE VOLUME
# =============================================================================


class OBV:
    """
    Cumulative signed volume with 0.9/0.1 smoothing.

    Direction of the smoothed OBV is compared with the close-to-close
    price change: opposite moves are divergences, same moves confirm.
    """

    def __init__(self):
        self.value = 0.0
        self.smoothed: Optional[float] = None
        self._prev_close: Optional[float] = None

    def update(self, close: float, volume: float) -> tuple[float, OBVSignal]:
        prev_close = self._prev_close
        if prev_close is None:
            self.value = volume
        elif close > prev_close:
            self.value += volume
        elif close < prev_close:
            self.value -= volume

        if self.smoothed is None:
            obv_change = 0.0
            self.smoothed = self.value
        else:
            previous = self.smoothed
            self.smoothed = previous * OBV_SMOOTHING + self.value * (1.0 - OBV_SMOOTHING)
            obv_change = self.smoothed - previous

        self._prev_close = close
        if prev_close is None:
            return self.value, OBVSignal.NEUTRAL

        price_change = close - prev_close
        if price_change < 0 and obv_change > 0:
            signal = OBVSignal.BULLISH_DIVERGENCE
        elif price_change > 0 and obv_change < 0:
            signal = OBVSignal.BEARISH_DIVERGENCE
        elif (price_change > 0 and obv_change > 0) or (price_change < 0 and obv_change < 0):
            signal = OBVSignal.CONFIRMATION
        else:
            signal = OBVSignal.NEUTRAL
        return self.value, signal


# =============================================================================
# VOLUME PROFILE
# =============================================================================


class VolumeProfile:
    """
    Tick-bucketed volume histogram over the last `lookback` candles.

    Bucket index is round(close / tick_size). When a sample leaves the
    window its volume is subtracted from its bucket, floored at zero.
    The Point of Control (POC) is the bucket with the most volume.
    """

    def __init__(self, tick_size: float = 10.0, lookback: int = 240):
        if tick_size <= 0:
            raise IndicatorError(f"Volume profile tick size must be positive, got {tick_size}")
        validate_period(lookback, "lookback")
        self.tick_size = tick_size
        self.lookback = lookback
        self.levels: dict[int, float] = {}
        self._samples: deque[tuple[float, float]] = deque()

    def _bucket(self, price: float) -> int:
        # half-up, not banker's rounding
        return math.floor(price / self.tick_size + 0.5)

    def update(self, close: float, volume: float) -> tuple[float, VolumeProfileSignal]:
        self._samples.append((close, volume))
        if len(self._samples) > self.lookback:
            old_price, old_volume = self._samples.popleft()
            bucket = self._bucket(old_price)
            if bucket in self.levels:
                self.levels[bucket] = max(self.levels[bucket] - old_volume, 0.0)

        bucket = self._bucket(close)
        self.levels[bucket] = self.levels.get(bucket, 0.0) + volume
        return self.point_of_control(), self._classify(close)

    def point_of_control(self) -> float:
        """Price level of the highest-volume bucket (lowest price wins ties)."""
        if not self.levels:
            return 0.0
        bucket = max(sorted(self.levels), key=lambda b: self.levels[b])
        return bucket * self.tick_size

    def _classify(self, price: float) -> VolumeProfileSignal:
        poc = self.point_of_control()
        if abs(price - poc) < self.tick_size * POC_PROXIMITY_TICKS:
            if price > poc:
                return VolumeProfileSignal.POC_SUPPORT
            return VolumeProfileSignal.POC_RESISTANCE

        avg_volume = sum(self.levels.values()) / len(self.levels)
        current_volume = self.levels.get(self._bucket(price), 0.0)
        if current_volume > avg_volume * HVN_MULTIPLIER:
            return VolumeProfileSignal.NEAR_HVN
        if current_volume < avg_volume * LVN_MULTIPLIER:
            return VolumeProfileSignal.NEAR_LVN
        return VolumeProfileSignal.NEUTRAL
