"""
Signal Engine

Pure, synchronous evaluation of one candle window:

    AwaitingData  (fewer than MIN_CANDLES) -> None
    Evaluating    fresh IndicatorBank, fold every candle in order
    Done          score -> aggregate -> decide -> SignalOutput

No tracker state outlives a call, so two calls with the same candles
give the same output apart from the emission timestamp.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from perpsignal.schemas.market import Candle
from perpsignal.schemas.signal import SignalOutput
from perpsignal.services.indicators.service import IndicatorBank, IndicatorParameters
from perpsignal.services.scoring.aggregator import SignalAggregator
from perpsignal.services.scoring.decision import DecisionPolicy, ScoreBreakdownPolicy
from perpsignal.services.signal.interface import EvaluationResult

logger = logging.getLogger(__name__)

MIN_CANDLES = 50


class SignalEngine:
    """Runs the full indicator -> score -> decision pipeline over a candle window."""

    def __init__(
        self,
        policy: Optional[DecisionPolicy] = None,
        params: Optional[IndicatorParameters] = None,
    ):
        self.policy = policy or ScoreBreakdownPolicy()
        self.params = params or IndicatorParameters()
        self.aggregator = SignalAggregator()

    def evaluate(
        self,
        candles: Sequence[Candle],
        symbol: str,
        policy: Optional[DecisionPolicy] = None,
    ) -> Optional[SignalOutput]:
        result = self.evaluate_detailed(candles, symbol, policy)
        return result.output if result else None

    def evaluate_detailed(
        self,
        candles: Sequence[Candle],
        symbol: str,
        policy: Optional[DecisionPolicy] = None,
    ) -> Optional[EvaluationResult]:
        if len(candles) < MIN_CANDLES:
            logger.debug(f"{symbol}: awaiting data ({len(candles)}/{MIN_CANDLES} candles)")
            return None

        policy = policy or self.policy

        bank = IndicatorBank(self.params)
        for candle in candles:
            bank.update(candle)
        logger.debug(f"{symbol}: folded {bank.candles_seen} candles, signals={bank.signals}")

        trading_signal = self.aggregator.aggregate(bank.signals)

        price = candles[-1].close
        decision = policy.decide(trading_signal, bank.atr_value, price)

        output = SignalOutput(
            direction=decision.direction,
            confidence=decision.confidence,
            recommended_sl_pct=decision.sl_pct,
            recommended_tp_pct=decision.tp_pct,
            reasons=list(trading_signal.reasons),
            symbol=symbol,
            price=price,
            timestamp=datetime.now(timezone.utc),
        )

        logger.info(
            f"{symbol}: {output.direction.value} confidence={output.confidence:.2f} "
            f"bias={trading_signal.bias.value} total={trading_signal.breakdown.total_score} "
            f"risk={trading_signal.risk_level.value} policy={policy.name}"
        )

        return EvaluationResult(
            output=output,
            trading_signal=trading_signal,
            snapshot=bank.snapshot(symbol),
        )
