"""
In-Memory Market Data Provider

Replay buffer fed by push(). Holds a bounded history per symbol and
fans new candles out to live subscribers.
"""

import asyncio
import logging
from collections import defaultdict, deque
from typing import AsyncIterator, Optional

from perpsignal.schemas.market import Candle
from perpsignal.services.market_data.interface import MarketDataProvider

logger = logging.getLogger(__name__)

DEFAULT_MAX_CANDLES = 5000


class InMemoryMarketDataProvider(MarketDataProvider):
    """Bounded per-symbol candle history with push-based updates."""

    def __init__(self, max_candles: int = DEFAULT_MAX_CANDLES):
        self._max_candles = max_candles
        self._candles: dict[str, deque[Candle]] = defaultdict(
            lambda: deque(maxlen=self._max_candles)
        )
        self._subscribers: dict[str, list[asyncio.Queue]] = defaultdict(list)

    @property
    def name(self) -> str:
        return "InMemoryMarketDataProvider"

    def push(self, symbol: str, candle: Candle) -> None:
        """Append a candle and notify subscribers. Oldest candles fall off the front."""
        key = symbol.upper()
        history = self._candles[key]
        if history and candle.timestamp < history[-1].timestamp:
            logger.warning(
                f"Out-of-order candle for {key}: {candle.timestamp} < {history[-1].timestamp}"
            )
        history.append(candle)
        for queue in self._subscribers.get(key, []):
            queue.put_nowait(candle)

    def extend(self, symbol: str, candles: list[Candle]) -> None:
        for candle in candles:
            self.push(symbol, candle)

    def symbols(self) -> list[str]:
        return sorted(key for key, history in self._candles.items() if history)

    async def get_candles(self, symbol: str, limit: int) -> list[Candle]:
        history = self._candles.get(symbol.upper())
        if not history or limit <= 0:
            return []
        return list(history)[-limit:]

    async def get_latest_price(self, symbol: str) -> Optional[float]:
        history = self._candles.get(symbol.upper())
        if not history:
            return None
        return history[-1].close

    async def subscribe(self, symbol: str) -> AsyncIterator[Candle]:
        key = symbol.upper()
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers[key].append(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._subscribers[key].remove(queue)
