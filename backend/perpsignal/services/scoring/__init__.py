"""
Signal Scoring

CONTRACT:
    Input:  IndicatorSignals (final tracker state)
    Output: TradingSignal -> Decision

RESPONSIBILITIES:
    - Score five indicator categories with clamped integers and reasons
    - Aggregate into bias, confidence and risk level
    - Pick a direction and ATR-scaled SL/TP via a decision policy
"""

from perpsignal.services.scoring.aggregator import SignalAggregator
from perpsignal.services.scoring.decision import (
    Decision,
    DecisionPolicy,
    GlobalScorePolicy,
    ScoreBreakdownPolicy,
    calculate_sl_tp,
    get_decision_policy,
)

__all__ = [
    "Decision",
    "DecisionPolicy",
    "GlobalScorePolicy",
    "ScoreBreakdownPolicy",
    "SignalAggregator",
    "calculate_sl_tp",
    "get_decision_policy",
]
