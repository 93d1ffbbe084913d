"""
Indicator and candle validation.

The signal engine assumes finite, validated candles. These checks run at
the service boundary before evaluation, and on tracker construction for
period arguments.
"""

import math
from typing import Iterable, Optional

from perpsignal.schemas.indicators import IndicatorSnapshot
from perpsignal.schemas.market import Candle
from perpsignal.services.base import ValidationError

RSI_MIN = 0.0
RSI_MAX = 100.0
MIN_PERIOD = 1
MAX_PERIOD = 1000
MIN_PRICE = 0.0
MIN_VOLUME = 0.0
FUNDING_RATE_MIN = -1.0
FUNDING_RATE_MAX = 1.0
MACD_HISTOGRAM_TOLERANCE = 0.0001

_SERVICE = "IndicatorValidation"


# =============================================================================
# ERRORS
# =============================================================================


class IndicatorError(ValidationError):
    """Invalid indicator input or value."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(_SERVICE, message, details)


class OutOfRangeError(IndicatorError):
    def __init__(self, field: str, value: float, min_value: float, max_value: float):
        self.field = field
        self.value = value
        super().__init__(
            f"Field '{field}' value {value} is out of range [{min_value}, {max_value}]",
            {"field": field, "value": value, "min": min_value, "max": max_value},
        )


class InvalidPeriodError(IndicatorError):
    def __init__(self, field: str, value: int):
        self.field = field
        self.value = value
        super().__init__(
            f"Invalid period for field '{field}': {value}",
            {"field": field, "value": value},
        )


class MissingFieldError(IndicatorError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing required field: {field}", {"field": field})


# =============================================================================
# SCALARS
# =============================================================================


def _require_finite(field: str, value: float) -> None:
    if not math.isfinite(value):
        raise IndicatorError(f"{field} must be finite, got: {value}", {"field": field})


def validate_rsi(value: float) -> None:
    _require_finite("rsi", value)
    if not RSI_MIN <= value <= RSI_MAX:
        raise OutOfRangeError("rsi", value, RSI_MIN, RSI_MAX)


def validate_period(period: int, field: str = "period") -> None:
    if not MIN_PERIOD <= period <= MAX_PERIOD:
        raise InvalidPeriodError(field, period)


def validate_price(price: float, field: str = "price") -> None:
    _require_finite(field, price)
    if price <= MIN_PRICE:
        raise OutOfRangeError(field, price, MIN_PRICE, math.inf)


def validate_volume(volume: float) -> None:
    _require_finite("volume", volume)
    if volume < MIN_VOLUME:
        raise OutOfRangeError("volume", volume, MIN_VOLUME, math.inf)


def validate_funding_rate(funding_rate: float) -> None:
    _require_finite("funding_rate", funding_rate)
    if not FUNDING_RATE_MIN <= funding_rate <= FUNDING_RATE_MAX:
        raise OutOfRangeError("funding_rate", funding_rate, FUNDING_RATE_MIN, FUNDING_RATE_MAX)


def validate_macd(
    macd_line: float,
    signal_line: float,
    histogram: Optional[float] = None,
    periods: Optional[tuple[int, int, int]] = None,
) -> None:
    """Check MACD values are finite and the histogram equals line minus signal."""
    _require_finite("macd", macd_line)
    _require_finite("macd_signal", signal_line)
    if histogram is not None:
        _require_finite("macd_histogram", histogram)
        expected = macd_line - signal_line
        diff = abs(histogram - expected)
        if diff > MACD_HISTOGRAM_TOLERANCE:
            raise IndicatorError(
                f"MACD histogram inconsistency: expected {expected}, got {histogram} (diff: {diff})"
            )

    if periods is not None:
        fast, slow, signal = periods
        validate_macd_periods(fast, slow, signal)


def validate_macd_periods(fast: int, slow: int, signal: int) -> None:
    validate_period(fast, "fast_period")
    validate_period(slow, "slow_period")
    validate_period(signal, "signal_period")
    if fast >= slow:
        raise IndicatorError(
            f"MACD fast period ({fast}) must be less than slow period ({slow})"
        )


# =============================================================================
# CANDLES
# =============================================================================


def validate_candle(candle: Candle) -> None:
    """Validate a single candle's prices, volume and optional perp fields."""
    validate_price(candle.open, "open")
    validate_price(candle.high, "high")
    validate_price(candle.low, "low")
    validate_price(candle.close, "close")
    validate_volume(candle.volume)

    if candle.high < candle.low:
        raise IndicatorError(
            f"Candle high ({candle.high}) below low ({candle.low})",
            {"timestamp": candle.timestamp.isoformat()},
        )

    if candle.open_interest is not None:
        _require_finite("open_interest", candle.open_interest)
        if candle.open_interest < 0:
            raise OutOfRangeError("open_interest", candle.open_interest, 0.0, math.inf)

    if candle.funding_rate is not None:
        validate_funding_rate(candle.funding_rate)


def validate_candles(candles: Iterable[Candle]) -> None:
    """Validate every candle and require non-decreasing timestamps."""
    previous = None
    for index, candle in enumerate(candles):
        validate_candle(candle)
        if previous is not None and candle.timestamp < previous.timestamp:
            raise IndicatorError(
                f"Candles out of order at index {index}",
                {
                    "index": index,
                    "timestamp": candle.timestamp.isoformat(),
                    "previous": previous.timestamp.isoformat(),
                },
            )
        previous = candle


# =============================================================================
# SNAPSHOT
# =============================================================================


def validate_snapshot(snapshot: IndicatorSnapshot) -> None:
    """Sanity-check the final indicator values of an evaluation."""
    if not snapshot.symbol:
        raise MissingFieldError("symbol")
    validate_price(snapshot.price)

    if snapshot.rsi is not None:
        validate_rsi(snapshot.rsi)

    if snapshot.macd is not None:
        validate_macd(
            snapshot.macd.macd_line,
            snapshot.macd.signal_line,
            snapshot.macd.histogram,
        )

    if snapshot.funding_rate_avg is not None:
        validate_funding_rate(snapshot.funding_rate_avg)

    for field in ("ema_fast", "ema_slow", "supertrend", "obv", "point_of_control"):
        value = getattr(snapshot, field)
        if value is not None:
            _require_finite(field, value)
