"""
Signal Service Implementation

Async boundary around the pure SignalEngine:
    Market Data Provider -> Validation -> SignalEngine -> SignalOutput

Used by the HTTP API and the periodic runtime.
"""

import logging
from typing import Optional

from perpsignal.core.config import settings
from perpsignal.core.logging import get_signal_logger
from perpsignal.schemas.market import Candle
from perpsignal.schemas.signal import SignalOutput, SignalRequest
from perpsignal.services.base import ExternalAPIError, ServiceError, ValidationError
from perpsignal.services.indicators.validation import validate_candles, validate_snapshot
from perpsignal.services.market_data import MarketDataProvider, MockMarketDataProvider
from perpsignal.services.scoring.decision import DecisionPolicy, get_decision_policy
from perpsignal.services.signal.engine import SignalEngine
from perpsignal.services.signal.interface import EvaluationResult, SignalServiceInterface

logger = logging.getLogger(__name__)
signal_log = get_signal_logger()


class SignalService(SignalServiceInterface):
    """
    Signal Service.

    Fetches candles from the configured provider, validates them and
    runs the engine. Provider failures surface as ExternalAPIError,
    malformed candles as ValidationError.
    """

    def __init__(
        self,
        provider: Optional[MarketDataProvider] = None,
        policy_name: Optional[str] = None,
    ):
        self._provider = provider
        self.engine = SignalEngine(get_decision_policy(policy_name or settings.decision_policy))

    @property
    def provider(self) -> MarketDataProvider:
        """Lazy load the market data provider."""
        if self._provider is None:
            self._provider = MockMarketDataProvider(seed=settings.market_data_seed)
        return self._provider

    async def validate_input(self, input_data: SignalRequest) -> SignalRequest:
        symbol = input_data.symbol.strip().upper()
        if not symbol:
            raise ValidationError(self.name, "Symbol must not be blank")
        return input_data.model_copy(update={"symbol": symbol})

    async def fetch_candles(self, symbol: str, limit: int) -> list[Candle]:
        try:
            candles = await self.provider.get_candles(symbol, limit)
        except ServiceError:
            raise
        except Exception as e:
            logger.error(f"{self.provider.name} failed for {symbol}: {e}")
            raise ExternalAPIError(
                self.name,
                f"Failed to fetch candles for {symbol}",
                {"provider": self.provider.name, "error": str(e)},
            ) from e
        logger.debug(f"Fetched {len(candles)} candles for {symbol} from {self.provider.name}")
        return candles

    def _evaluate(
        self,
        symbol: str,
        candles: list[Candle],
        policy: Optional[DecisionPolicy] = None,
    ) -> Optional[EvaluationResult]:
        validate_candles(candles)
        result = self.engine.evaluate_detailed(candles, symbol, policy)
        if result is not None:
            validate_snapshot(result.snapshot)
            output = result.output
            signal_log.info(
                f"{output.symbol} {output.direction.value} conf={output.confidence:.2f} "
                f"price={output.price} sl={output.recommended_sl_pct:.2f}% "
                f"tp={output.recommended_tp_pct:.2f}%"
            )
        return result

    async def execute(self, input_data: SignalRequest) -> Optional[SignalOutput]:
        result = await self.evaluate_detailed(input_data)
        return result.output if result else None

    async def evaluate_detailed(self, input_data: SignalRequest) -> Optional[EvaluationResult]:
        request = await self.validate_input(input_data)
        candles = await self.fetch_candles(request.symbol, request.limit)
        return self._evaluate(request.symbol, candles)

    async def evaluate_candles(
        self,
        symbol: str,
        candles: list[Candle],
        policy_name: Optional[str] = None,
    ) -> Optional[SignalOutput]:
        request = await self.validate_input(SignalRequest(symbol=symbol))
        policy = get_decision_policy(policy_name) if policy_name else None
        result = self._evaluate(request.symbol, candles, policy)
        return result.output if result else None

    async def health_check(self) -> bool:
        try:
            return await self.provider.health_check()
        except Exception as e:
            logger.warning(f"Provider health check failed: {e}")
            return False


# Singleton instance
_service_instance: Optional[SignalService] = None


def get_signal_service() -> SignalService:
    """Get or create signal service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = SignalService()
    return _service_instance


def set_signal_service(service: Optional[SignalService]) -> None:
    """Replace the shared instance (tests, alternate providers)."""
    global _service_instance
    _service_instance = service
