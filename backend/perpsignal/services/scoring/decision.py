"""
Decision and Sizing

Maps an aggregated TradingSignal to a direction, confidence and
ATR-scaled stop-loss / take-profit distances.

Two mutually exclusive policies share one interface:
    - ScoreBreakdownPolicy: direction follows the aggregator's bias
    - GlobalScorePolicy: weighted global score in [-1, 1] mapped to
      [0, 1] and cut at 0.60 / 0.40
Their thresholds are never mixed.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from perpsignal.schemas.signal import SignalDirection, TradingSignal
from perpsignal.services.base import ValidationError
from perpsignal.services.indicators.registry import (
    CATEGORY_BOUNDS,
    CATEGORY_WEIGHTS,
    IndicatorCategory,
)

SL_ATR_MULTIPLIER = 1.2
TP_ATR_MULTIPLIER = 2.0


@dataclass(frozen=True)
class Decision:
    """Direction, confidence and sizing for one evaluation."""

    direction: SignalDirection
    confidence: float
    sl_pct: float
    tp_pct: float


def calculate_sl_tp(atr: float, price: float) -> tuple[float, float]:
    """SL% = ATR*1.2/price*100, TP% = ATR*2.0/price*100 (reward:risk ~1.67)."""
    sl_pct = atr * SL_ATR_MULTIPLIER * 100.0 / price
    tp_pct = atr * TP_ATR_MULTIPLIER * 100.0 / price
    return sl_pct, tp_pct


def size_position(direction: SignalDirection, atr: float, price: float) -> tuple[float, float]:
    """Sizing only applies to a directional call with a positive ATR."""
    if direction == SignalDirection.NEUTRAL or atr <= 0 or price <= 0:
        return 0.0, 0.0
    return calculate_sl_tp(atr, price)


class DecisionPolicy(ABC):
    """Strategy turning a TradingSignal into a Decision."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def direction_and_confidence(self, signal: TradingSignal) -> tuple[SignalDirection, float]:
        pass

    def decide(self, signal: TradingSignal, atr: float, price: float) -> Decision:
        direction, confidence = self.direction_and_confidence(signal)
        sl_pct, tp_pct = size_position(direction, atr, price)
        return Decision(direction, confidence, sl_pct, tp_pct)


class ScoreBreakdownPolicy(DecisionPolicy):
    """Default policy: direction and confidence come straight from the aggregator."""

    @property
    def name(self) -> str:
        return "score_breakdown"

    def direction_and_confidence(self, signal: TradingSignal) -> tuple[SignalDirection, float]:
        return signal.position, signal.confidence


class GlobalScorePolicy(DecisionPolicy):
    """
    Legacy threshold policy.

    global = sum(weight_c * score_c / bound_c) over the five categories,
    so global is in [-1, 1]. As a percentage (global + 1) / 2:
    above 0.60 is Long, below 0.40 is Short, anything between is Neutral.
    """

    LONG_THRESHOLD = 0.60
    SHORT_THRESHOLD = 0.40

    @property
    def name(self) -> str:
        return "global_score"

    @staticmethod
    def global_score(signal: TradingSignal) -> float:
        b = signal.breakdown
        scores = {
            IndicatorCategory.TREND: b.trend_score,
            IndicatorCategory.MOMENTUM: b.momentum_score,
            IndicatorCategory.VOLATILITY: b.volatility_score,
            IndicatorCategory.VOLUME: b.volume_score,
            IndicatorCategory.PERP: b.perp_score,
        }
        return sum(
            CATEGORY_WEIGHTS[category] * score / CATEGORY_BOUNDS[category]
            for category, score in scores.items()
        )

    @staticmethod
    def to_percentage(normalized_score: float) -> float:
        return (normalized_score + 1.0) / 2.0

    def direction_and_confidence(self, signal: TradingSignal) -> tuple[SignalDirection, float]:
        score = self.global_score(signal)
        pct = self.to_percentage(score)
        if pct > self.LONG_THRESHOLD:
            direction = SignalDirection.LONG
        elif pct < self.SHORT_THRESHOLD:
            direction = SignalDirection.SHORT
        else:
            direction = SignalDirection.NEUTRAL
        return direction, min(abs(score), 1.0)


_POLICIES = {
    "score_breakdown": ScoreBreakdownPolicy,
    "global_score": GlobalScorePolicy,
}


def get_decision_policy(name: str = "score_breakdown") -> DecisionPolicy:
    """Look up a decision policy by name."""
    try:
        return _POLICIES[name]()
    except KeyError:
        raise ValidationError(
            "DecisionPolicy",
            f"Unknown decision policy: {name}",
            {"available": sorted(_POLICIES)},
        ) from None
