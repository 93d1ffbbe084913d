"""
Market Data Provider Interface

Defines the contract between candle sources and the signal engine.
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator, Optional

from perpsignal.schemas.market import Candle


class MarketDataProvider(ABC):
    """
    Market Data Provider Contract.

    get_candles(symbol, limit)
        - Most recent `limit` candles, ascending by timestamp
        - Empty list for an unknown symbol, never None

    get_latest_price(symbol)
        - Close of the newest candle, None when nothing is known

    subscribe(symbol)
        - Async iterator of candles as they arrive
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for logging."""
        pass

    @abstractmethod
    async def get_candles(self, symbol: str, limit: int) -> list[Candle]:
        pass

    @abstractmethod
    async def get_latest_price(self, symbol: str) -> Optional[float]:
        pass

    @abstractmethod
    def subscribe(self, symbol: str) -> AsyncIterator[Candle]:
        pass

    async def health_check(self) -> bool:
        return True
