"""
Indicator Trackers

CONTRACT:
    Input:  Candle (one at a time, chronological)
    Output: (raw value, categorical signal) per tracker

RESPONSIBILITIES:
    - Running statistics (SMA, EMA, Wilder smoothing, stddev, true range)
    - Ten stateful trackers: EMA crossover, SuperTrend, RSI, MACD,
      Bollinger Bands, ATR regime, OBV, Volume Profile, Open Interest,
      Funding Rate
    - Category registry and input validation

NO I/O - pure, deterministic computation.
"""

from perpsignal.services.indicators.momentum import MACD, RSI
from perpsignal.services.indicators.perp import FundingRate, OpenInterest
from perpsignal.services.indicators.registry import IndicatorCategory
from perpsignal.services.indicators.service import IndicatorBank, IndicatorParameters
from perpsignal.services.indicators.trend import EMACrossover, SuperTrend
from perpsignal.services.indicators.volatility import ATR, BollingerBands
from perpsignal.services.indicators.volume import OBV, VolumeProfile

__all__ = [
    "ATR",
    "BollingerBands",
    "EMACrossover",
    "FundingRate",
    "IndicatorBank",
    "IndicatorCategory",
    "IndicatorParameters",
    "MACD",
    "OBV",
    "OpenInterest",
    "RSI",
    "SuperTrend",
    "VolumeProfile",
]
