"""
Shared candle builders for the test suite.
"""
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Sequence

import pytest

from perpsignal.schemas.market import Candle

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)
INTERVAL = timedelta(minutes=1)


def make_candle(
    close: float,
    index: int = 0,
    spread: float = 1.0,
    volume: float = 1000.0,
    open_interest: Optional[float] = None,
    funding_rate: Optional[float] = None,
) -> Candle:
    """Candle centred on `close` with high/low `spread` away."""
    return Candle(
        open=close,
        high=close + spread,
        low=close - spread,
        close=close,
        volume=volume,
        timestamp=BASE_TIME + INTERVAL * index,
        open_interest=open_interest,
        funding_rate=funding_rate,
    )


def make_series(
    closes: Sequence[float],
    spread: float = 1.0,
    volume: float = 1000.0,
    open_interest: Optional[Callable[[int], float]] = None,
    funding_rate: Optional[Callable[[int], float]] = None,
) -> list[Candle]:
    """Ascending candles from a list of closes; perp fields built per index."""
    return [
        make_candle(
            close,
            index=i,
            spread=spread,
            volume=volume,
            open_interest=open_interest(i) if open_interest else None,
            funding_rate=funding_rate(i) if funding_rate else None,
        )
        for i, close in enumerate(closes)
    ]


def rising_closes(n: int = 250, start: float = 100.0, step: float = 0.5) -> list[float]:
    return [start + step * i for i in range(n)]


def falling_closes(n: int = 250, start: float = 300.0, step: float = 0.5) -> list[float]:
    return [start - step * i for i in range(n)]


def uptrend_candles(n: int = 250, funding: float = 0.0001) -> list[Candle]:
    """Steady rise, open interest growing 2.5% per bar, constant funding."""
    return make_series(
        rising_closes(n),
        open_interest=lambda i: 1_000_000.0 * 1.025 ** i,
        funding_rate=lambda i: funding,
    )


@pytest.fixture
def uptrend() -> list[Candle]:
    return uptrend_candles()


@pytest.fixture
def crowded_uptrend() -> list[Candle]:
    return uptrend_candles(funding=0.0015)


@pytest.fixture
def downtrend() -> list[Candle]:
    return make_series(
        falling_closes(),
        open_interest=lambda i: 1_000_000.0 * 1.025 ** i,
        funding_rate=lambda i: -0.0001,
    )
