"""
Market Data

CONTRACT:
    Input:  symbol, limit
    Output: list[Candle] in ascending timestamp order

RESPONSIBILITIES:
    - Define the provider contract used by the signal service
    - In-memory replay buffer fed by push()
    - Seeded synthetic provider for development
"""

from perpsignal.services.market_data.interface import MarketDataProvider
from perpsignal.services.market_data.memory import InMemoryMarketDataProvider
from perpsignal.services.market_data.mock_data import MockMarketDataProvider

__all__ = [
    "InMemoryMarketDataProvider",
    "MarketDataProvider",
    "MockMarketDataProvider",
]
