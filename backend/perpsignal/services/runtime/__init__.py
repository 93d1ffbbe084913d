"""
Signal runtime: periodic evaluation loop with Prometheus metrics.
"""

from perpsignal.services.runtime.metrics import RuntimeMetrics
from perpsignal.services.runtime.scheduler import (
    SignalRuntime,
    get_signal_runtime,
    start_signal_runtime,
    stop_signal_runtime,
)

__all__ = [
    "RuntimeMetrics",
    "SignalRuntime",
    "get_signal_runtime",
    "start_signal_runtime",
    "stop_signal_runtime",
]
