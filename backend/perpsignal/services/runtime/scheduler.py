"""
Signal Runtime

Periodically evaluates every configured symbol and publishes the
latest signal to the cache.

Symbols are evaluated concurrently; evaluations of the same symbol
are serialised by a per-symbol lock. A failing symbol is logged and
counted, never aborting the sweep or the loop.
"""

import asyncio
import logging
from typing import Optional

from perpsignal.core.config import settings
from perpsignal.schemas.signal import SignalOutput, SignalRequest
from perpsignal.services.cache import SignalCache, get_signal_cache
from perpsignal.services.runtime.metrics import RuntimeMetrics
from perpsignal.services.signal import SignalService, get_signal_service

logger = logging.getLogger(__name__)


class SignalRuntime:
    """
    Evaluation loop over a fixed set of symbols.

    Usage:
        runtime = SignalRuntime(["BTC-PERP", "ETH-PERP"], interval=60)
        await runtime.start()
        ...
        await runtime.stop()
    """

    def __init__(
        self,
        symbols: Optional[list[str]] = None,
        interval: Optional[float] = None,
        candle_limit: Optional[int] = None,
        service: Optional[SignalService] = None,
        cache: Optional[SignalCache] = None,
    ):
        self.symbols = [s.upper() for s in (symbols if symbols is not None else settings.symbols)]
        self.interval = interval if interval is not None else settings.evaluation_interval_seconds
        self.candle_limit = candle_limit or settings.candle_limit
        self.service = service or get_signal_service()
        self.cache = cache or get_signal_cache()
        self.metrics = RuntimeMetrics()

        self._locks: dict[str, asyncio.Lock] = {}
        self._task: Optional[asyncio.Task] = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def _lock_for(self, symbol: str) -> asyncio.Lock:
        lock = self._locks.get(symbol)
        if lock is None:
            lock = self._locks[symbol] = asyncio.Lock()
        return lock

    async def evaluate_symbol(self, symbol: str) -> Optional[SignalOutput]:
        """Evaluate one symbol under its lock and publish the result."""
        async with self._lock_for(symbol):
            self.metrics.evaluations.inc()
            self.metrics.active.inc()
            try:
                with self.metrics.duration.time():
                    output = await self.service.execute(
                        SignalRequest(symbol=symbol, limit=self.candle_limit)
                    )
            except Exception as e:
                self.metrics.errors.inc()
                logger.exception(f"Evaluation failed for {symbol}: {e}")
                return None
            finally:
                self.metrics.active.dec()

            if output is None:
                logger.debug(f"No signal for {symbol} (awaiting data)")
                return None

            self.metrics.generated.inc()
            await self.cache.set_signal(output)
            logger.info(
                f"Signal {symbol}: {output.direction.value} "
                f"confidence={output.confidence:.2f} price={output.price}"
            )
            return output

    async def run_once(self) -> dict[str, Optional[SignalOutput]]:
        """One sweep over all symbols, evaluated concurrently."""
        results = await asyncio.gather(*(self.evaluate_symbol(s) for s in self.symbols))
        return dict(zip(self.symbols, results))

    async def start(self) -> None:
        if self._running:
            logger.warning("Signal runtime already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._loop())
        logger.info(f"Signal runtime started: {self.symbols} every {self.interval}s")

    async def stop(self) -> None:
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Signal runtime stopped")

    async def _loop(self) -> None:
        while self._running:
            try:
                await self.run_once()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Runtime sweep error: {e}")
            await asyncio.sleep(self.interval)


# Singleton instance
_runtime: Optional[SignalRuntime] = None


def get_signal_runtime() -> SignalRuntime:
    """Get the signal runtime singleton."""
    global _runtime
    if _runtime is None:
        _runtime = SignalRuntime()
    return _runtime


async def start_signal_runtime() -> SignalRuntime:
    runtime = get_signal_runtime()
    await runtime.start()
    return runtime


async def stop_signal_runtime() -> None:
    global _runtime
    if _runtime:
        await _runtime.stop()
        _runtime = None
