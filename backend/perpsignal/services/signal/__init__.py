"""
Signal Engine

CONTRACT:
    Input:  ordered list[Candle] for one symbol (or SignalRequest)
    Output: Optional[SignalOutput]

RESPONSIBILITIES:
    - Gate on minimum history
    - Fold candles through a fresh indicator bank
    - Score, aggregate and decide
    - Async service boundary with provider fetch and validation
"""

from perpsignal.services.signal.engine import MIN_CANDLES, SignalEngine
from perpsignal.services.signal.interface import EvaluationResult, SignalServiceInterface
from perpsignal.services.signal.service import (
    SignalService,
    get_signal_service,
    set_signal_service,
)

__all__ = [
    "EvaluationResult",
    "MIN_CANDLES",
    "SignalEngine",
    "SignalService",
    "SignalServiceInterface",
    "get_signal_service",
    "set_signal_service",
]
