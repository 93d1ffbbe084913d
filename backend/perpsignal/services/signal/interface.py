"""
Signal Service Interface

Defines the contract for turning a symbol's candle history into a
trading signal.
"""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Optional

from perpsignal.schemas.indicators import IndicatorSnapshot
from perpsignal.schemas.market import Candle
from perpsignal.schemas.signal import SignalOutput, SignalRequest, TradingSignal
from perpsignal.services.base import BaseService


@dataclass(frozen=True)
class EvaluationResult:
    """Signal plus the intermediate state it was derived from."""

    output: SignalOutput
    trading_signal: TradingSignal
    snapshot: IndicatorSnapshot


class SignalServiceInterface(BaseService[SignalRequest, Optional[SignalOutput]]):
    """
    Signal Service Contract.

    INPUT: SignalRequest
        - symbol: Perp market to evaluate
        - limit: Number of most recent candles to fetch

    OUTPUT: Optional[SignalOutput]
        - None while fewer than the minimum candles are available
        - Otherwise direction, confidence, SL/TP % and reasons

    PIPELINE:
        candles -> indicator bank -> category scorer
                -> aggregator -> decision policy -> SignalOutput
    """

    @property
    def name(self) -> str:
        return "SignalService"

    @abstractmethod
    async def execute(self, input_data: SignalRequest) -> Optional[SignalOutput]:
        """Fetch candles for the symbol and evaluate them."""
        pass

    @abstractmethod
    async def evaluate_detailed(self, input_data: SignalRequest) -> Optional[EvaluationResult]:
        """Like execute, but also returns the aggregated signal and indicator snapshot."""
        pass

    @abstractmethod
    async def evaluate_candles(
        self,
        symbol: str,
        candles: list[Candle],
        policy_name: Optional[str] = None,
    ) -> Optional[SignalOutput]:
        """Evaluate a caller-supplied candle window."""
        pass
