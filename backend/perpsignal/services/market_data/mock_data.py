"""
Mock Market Data Provider

Generates seeded synthetic perpetual-futures candles for development
and testing. Same seed and symbol give the same series.
"""

import asyncio
import random
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Optional

from perpsignal.schemas.market import Candle
from perpsignal.services.market_data.interface import MarketDataProvider

# Base prices for common perp markets
SYMBOL_BASE_PRICES = {
    "BTC-PERP": 64000.0,
    "ETH-PERP": 3200.0,
    "SOL-PERP": 145.0,
    "DOGE-PERP": 0.15,
}

DEFAULT_BASE_PRICE = 100.0
DEFAULT_INTERVAL = timedelta(minutes=1)


def get_base_price(symbol: str) -> float:
    """Get base price for a symbol."""
    return SYMBOL_BASE_PRICES.get(symbol.upper(), DEFAULT_BASE_PRICE)


class _RandomWalk:
    """Price, open interest and funding walking together."""

    def __init__(self, rng: random.Random, price: float, start: datetime, interval: timedelta):
        self.rng = rng
        self.price = price
        self.open_interest = price * 10_000
        self.funding_rate = 0.0001
        self.timestamp = start
        self.interval = interval

    def step(self) -> Candle:
        rng = self.rng
        volatility = self.price * 0.004

        open_price = self.price
        close_price = max(open_price + rng.gauss(0.0, volatility), open_price * 0.5)
        high_price = max(open_price, close_price) + rng.random() * volatility * 0.5
        low_price = min(open_price, close_price) - rng.random() * volatility * 0.5

        # OI drifts with price direction, funding mean-reverts toward 0.01%
        self.open_interest = max(
            self.open_interest * (1 + rng.gauss(0.0, 0.01) + (0.002 if close_price > open_price else -0.002)),
            1.0,
        )
        self.funding_rate += 0.2 * (0.0001 - self.funding_rate) + rng.gauss(0.0, 0.0001)

        candle = Candle(
            open=open_price,
            high=high_price,
            low=low_price,
            close=close_price,
            volume=rng.uniform(100.0, 5000.0),
            timestamp=self.timestamp,
            open_interest=self.open_interest,
            funding_rate=max(min(self.funding_rate, 0.01), -0.01),
        )
        self.price = close_price
        self.timestamp += self.interval
        return candle


class MockMarketDataProvider(MarketDataProvider):
    """Seeded synthetic candle source."""

    def __init__(
        self,
        seed: int = 7,
        interval: timedelta = DEFAULT_INTERVAL,
        end_time: Optional[datetime] = None,
    ):
        self.seed = seed
        self.interval = interval
        self.end_time = end_time

    @property
    def name(self) -> str:
        return "MockMarketDataProvider"

    def _walk(self, symbol: str, limit: int) -> _RandomWalk:
        end_time = self.end_time or datetime.now(timezone.utc).replace(second=0, microsecond=0)
        start = end_time - self.interval * limit
        rng = random.Random(f"{self.seed}:{symbol.upper()}")
        return _RandomWalk(rng, get_base_price(symbol), start, self.interval)

    def generate(self, symbol: str, limit: int) -> list[Candle]:
        """Generate `limit` ascending candles."""
        walk = self._walk(symbol, limit)
        return [walk.step() for _ in range(max(limit, 0))]

    async def get_candles(self, symbol: str, limit: int) -> list[Candle]:
        return self.generate(symbol, limit)

    async def get_latest_price(self, symbol: str) -> Optional[float]:
        candles = self.generate(symbol, 1)
        return candles[-1].close if candles else None

    async def subscribe(self, symbol: str) -> AsyncIterator[Candle]:
        walk = self._walk(symbol, 0)
        while True:
            yield walk.step()
            await asyncio.sleep(self.interval.total_seconds())
