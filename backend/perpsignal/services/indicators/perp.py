"""
Perpetual-futures trackers: Open Interest and Funding Rate.

Both only update on candles that carry the corresponding field.
"""

from typing import Optional

from perpsignal.schemas.indicators import FundingSignal, OISignal
from perpsignal.services.indicators.calculations import EPSILON, RollingWindow
from perpsignal.services.indicators.validation import validate_period

OI_CHANGE_THRESHOLD_PCT = 2.0

FUNDING_EXTREME = 0.001
FUNDING_HIGH = 0.0005


class OpenInterest:
    """
    Open interest change vs. price direction.

    OI up more than 2% with price: new positions (expansion).
    OI down more than 2%: positions closing (squeeze).
    """

    def __init__(self):
        self.change_percent: Optional[float] = None
        self._prev_oi: Optional[float] = None
        self._prev_price: Optional[float] = None

    def update(self, open_interest: float, price: float) -> tuple[float, OISignal]:
        prev_oi, prev_price = self._prev_oi, self._prev_price
        self._prev_oi = open_interest
        self._prev_price = price
        if prev_oi is None or prev_price is None:
            self.change_percent = 0.0
            return 0.0, OISignal.NEUTRAL

        pct = 0.0 if abs(prev_oi) < EPSILON else (open_interest - prev_oi) / prev_oi * 100.0
        price_change = price - prev_price
        self.change_percent = pct

        signal = OISignal.NEUTRAL
        if pct > OI_CHANGE_THRESHOLD_PCT:
            if price_change > 0:
                signal = OISignal.BULLISH_EXPANSION
            elif price_change < 0:
                signal = OISignal.BEARISH_EXPANSION
        elif pct < -OI_CHANGE_THRESHOLD_PCT:
            if price_change < 0:
                signal = OISignal.LONG_SQUEEZE
            elif price_change > 0:
                signal = OISignal.SHORT_SQUEEZE
        return pct, signal


class FundingRate:
    """
    Funding rate crowding read (lookback 24 by default).

    The signal classifies the latest rate; the returned value is the
    average over the lookback window.
    """

    def __init__(self, lookback: int = 24):
        validate_period(lookback, "lookback")
        self._history = RollingWindow(lookback)
        self.average: Optional[float] = None

    def update(self, funding_rate: float) -> tuple[float, FundingSignal]:
        self._history.push(funding_rate)
        self.average = self._history.mean()
        return self.average, classify_funding(funding_rate)


def classify_funding(rate: float) -> FundingSignal:
    if rate > FUNDING_EXTREME:
        return FundingSignal.EXTREME_LONG_BIAS
    if rate < -FUNDING_EXTREME:
        return FundingSignal.EXTREME_SHORT_BIAS
    if rate > FUNDING_HIGH:
        return FundingSignal.HIGH_LONG_BIAS
    if rate < -FUNDING_HIGH:
        return FundingSignal.HIGH_SHORT_BIAS
    if rate > 0:
        return FundingSignal.NEUTRAL_POSITIVE
    if rate < 0:
        return FundingSignal.NEUTRAL_NEGATIVE
    return FundingSignal.NEUTRAL
