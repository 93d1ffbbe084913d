"""
Tests for market data providers
"""
import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from conftest import make_candle, make_series, rising_closes
from perpsignal.services.indicators.validation import validate_candles
from perpsignal.services.market_data import InMemoryMarketDataProvider, MockMarketDataProvider
from perpsignal.services.market_data.mock_data import get_base_price

END_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class TestInMemoryProvider:
    def test_returns_most_recent_candles(self):
        provider = InMemoryMarketDataProvider()
        provider.extend("btc-perp", make_series(rising_closes(10)))

        candles = asyncio.run(provider.get_candles("BTC-PERP", 3))
        assert [c.close for c in candles] == [103.5, 104.0, 104.5]

    def test_limit_larger_than_history(self):
        provider = InMemoryMarketDataProvider()
        provider.extend("BTC-PERP", make_series(rising_closes(5)))
        assert len(asyncio.run(provider.get_candles("BTC-PERP", 100))) == 5

    def test_unknown_symbol(self):
        provider = InMemoryMarketDataProvider()
        assert asyncio.run(provider.get_candles("ETH-PERP", 10)) == []
        assert asyncio.run(provider.get_latest_price("ETH-PERP")) is None
        assert provider.symbols() == []

    def test_history_is_bounded(self):
        provider = InMemoryMarketDataProvider(max_candles=4)
        provider.extend("BTC-PERP", make_series(rising_closes(10)))

        candles = asyncio.run(provider.get_candles("BTC-PERP", 10))
        assert len(candles) == 4
        assert candles[0].close == 103.0

    def test_latest_price(self):
        provider = InMemoryMarketDataProvider()
        provider.push("SOL-PERP", make_candle(145.0))
        provider.push("SOL-PERP", make_candle(146.5, index=1))

        assert asyncio.run(provider.get_latest_price("sol-perp")) == 146.5
        assert provider.symbols() == ["SOL-PERP"]

    def test_subscribers_receive_pushed_candles(self):
        provider = InMemoryMarketDataProvider()

        async def scenario():
            stream = provider.subscribe("BTC-PERP")

            async def first():
                return await stream.__anext__()

            pending = asyncio.create_task(first())
            await asyncio.sleep(0)
            provider.push("BTC-PERP", make_candle(101.0))
            candle = await asyncio.wait_for(pending, timeout=1.0)
            await stream.aclose()
            return candle

        assert asyncio.run(scenario()).close == 101.0

    def test_health_check(self):
        assert asyncio.run(InMemoryMarketDataProvider().health_check()) is True


class TestMockProvider:
    def test_same_seed_same_series(self):
        first = MockMarketDataProvider(seed=3, end_time=END_TIME).generate("BTC-PERP", 100)
        second = MockMarketDataProvider(seed=3, end_time=END_TIME).generate("BTC-PERP", 100)
        assert first == second

    def test_different_seed_different_series(self):
        first = MockMarketDataProvider(seed=3, end_time=END_TIME).generate("BTC-PERP", 20)
        second = MockMarketDataProvider(seed=4, end_time=END_TIME).generate("BTC-PERP", 20)
        assert [c.close for c in first] != [c.close for c in second]

    def test_candles_are_valid_and_ordered(self):
        candles = MockMarketDataProvider(end_time=END_TIME).generate("ETH-PERP", 300)

        assert len(candles) == 300
        validate_candles(candles)
        assert candles[-1].timestamp == END_TIME - timedelta(minutes=1)
        assert all(c.open_interest is not None and c.funding_rate is not None for c in candles)
        assert all(-0.01 <= c.funding_rate <= 0.01 for c in candles)

    def test_starts_at_base_price(self):
        candles = MockMarketDataProvider(end_time=END_TIME).generate("SOL-PERP", 1)
        assert candles[0].open == get_base_price("SOL-PERP") == 145.0

    def test_unknown_symbol_uses_default_price(self):
        assert get_base_price("XYZ-PERP") == 100.0

    def test_async_accessors(self):
        provider = MockMarketDataProvider(end_time=END_TIME)
        candles = asyncio.run(provider.get_candles("BTC-PERP", 60))
        price = asyncio.run(provider.get_latest_price("BTC-PERP"))

        assert len(candles) == 60
        assert price == pytest.approx(provider.generate("BTC-PERP", 1)[0].close)
