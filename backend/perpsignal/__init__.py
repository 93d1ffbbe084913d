"""
PerpSignal

Streaming multi-indicator signal engine for perpetual futures.
"""

__version__ = "0.1.0"
