"""
Indicator Bank

Owns one instance of each of the ten streaming trackers for a single
evaluation. Candles are folded in order; only the state after the last
candle is read downstream.

NO SHARED STATE - a bank belongs to exactly one symbol and one evaluation.
"""

from typing import Optional

from pydantic import BaseModel, Field

from perpsignal.schemas.indicators import (
    BollingerValues,
    IndicatorSignals,
    IndicatorSnapshot,
    MACDValues,
)
from perpsignal.schemas.market import Candle
from perpsignal.services.indicators.momentum import MACD, RSI
from perpsignal.services.indicators.perp import FundingRate, OpenInterest
from perpsignal.services.indicators.trend import EMACrossover, SuperTrend
from perpsignal.services.indicators.volatility import ATR, BollingerBands
from perpsignal.services.indicators.volume import OBV, VolumeProfile


class IndicatorParameters(BaseModel):
    """Tracker parameters. Defaults are the production settings."""

    ema_fast: int = Field(default=20, ge=1, le=1000)
    ema_slow: int = Field(default=50, ge=1, le=1000)
    supertrend_period: int = Field(default=10, ge=1, le=1000)
    supertrend_multiplier: float = Field(default=3.0, gt=0)
    rsi_period: int = Field(default=14, ge=1, le=1000)
    rsi_divergence_lookback: int = Field(default=5, ge=1, le=1000)
    macd_fast: int = Field(default=12, ge=1, le=1000)
    macd_slow: int = Field(default=26, ge=1, le=1000)
    macd_signal: int = Field(default=9, ge=1, le=1000)
    bollinger_period: int = Field(default=20, ge=1, le=1000)
    bollinger_std_dev: float = Field(default=2.0, gt=0)
    atr_period: int = Field(default=14, ge=1, le=1000)
    atr_lookback: int = Field(default=14, ge=1, le=1000)
    volume_profile_tick: float = Field(default=10.0, gt=0)
    volume_profile_lookback: int = Field(default=240, ge=1, le=1000)
    funding_lookback: int = Field(default=24, ge=1, le=1000)


class IndicatorBank:
    """The ten trackers, updated together one candle at a time."""

    def __init__(self, params: Optional[IndicatorParameters] = None):
        p = params or IndicatorParameters()
        self.ema = EMACrossover(p.ema_fast, p.ema_slow)
        self.supertrend = SuperTrend(p.supertrend_period, p.supertrend_multiplier)
        self.rsi = RSI(p.rsi_period, divergence_lookback=p.rsi_divergence_lookback)
        self.macd = MACD(p.macd_fast, p.macd_slow, p.macd_signal)
        self.bollinger = BollingerBands(p.bollinger_period, p.bollinger_std_dev)
        self.atr = ATR(p.atr_period, p.atr_lookback)
        self.obv = OBV()
        self.volume_profile = VolumeProfile(p.volume_profile_tick, p.volume_profile_lookback)
        self.open_interest = OpenInterest()
        self.funding = FundingRate(p.funding_lookback)

        self.signals = IndicatorSignals()
        self.last_candle: Optional[Candle] = None
        self.candles_seen = 0

    def update(self, candle: Candle) -> IndicatorSignals:
        """Fold one candle through every tracker and return the resulting signals."""
        _, ema_signal = self.ema.update(candle.close)
        _, supertrend_signal = self.supertrend.update(candle.high, candle.low, candle.close)
        _, rsi_signal = self.rsi.update(candle.close)
        _, macd_signal = self.macd.update(candle.close)
        _, bollinger_signal = self.bollinger.update(candle.close)
        _, regime = self.atr.update(candle.high, candle.low, candle.close)
        _, obv_signal = self.obv.update(candle.close, candle.volume)
        _, vp_signal = self.volume_profile.update(candle.close, candle.volume)

        # Perp trackers keep their last signal on candles without perp data
        oi_signal = self.signals.open_interest
        if candle.open_interest is not None:
            _, oi_signal = self.open_interest.update(candle.open_interest, candle.close)

        funding_signal = self.signals.funding
        if candle.funding_rate is not None:
            _, funding_signal = self.funding.update(candle.funding_rate)

        self.signals = IndicatorSignals(
            ema=ema_signal,
            supertrend=supertrend_signal,
            rsi=rsi_signal,
            macd=macd_signal,
            bollinger=bollinger_signal,
            volatility=regime,
            obv=obv_signal,
            volume_profile=vp_signal,
            open_interest=oi_signal,
            funding=funding_signal,
        )
        self.last_candle = candle
        self.candles_seen += 1
        return self.signals

    @property
    def atr_value(self) -> float:
        return self.atr.value or 0.0

    def snapshot(self, symbol: str) -> IndicatorSnapshot:
        """Raw values of every tracker after the last folded candle."""
        if self.last_candle is None:
            raise ValueError("IndicatorBank.snapshot() called before any candle was folded")

        ema = self.ema.values
        macd = self.macd.reading
        bands = self.bollinger.reading
        return IndicatorSnapshot(
            symbol=symbol,
            price=self.last_candle.close,
            timestamp=self.last_candle.timestamp,
            ema_fast=ema.fast if ema else None,
            ema_slow=ema.slow if ema else None,
            supertrend=self.supertrend.value,
            rsi=self.rsi.value,
            macd=MACDValues(
                macd_line=macd.macd,
                signal_line=macd.signal,
                histogram=macd.histogram,
            ) if macd else None,
            bollinger=BollingerValues(
                upper=bands.upper,
                middle=bands.middle,
                lower=bands.lower,
                bandwidth=bands.bandwidth,
            ) if bands else None,
            atr=self.atr_value,
            obv=self.obv.value,
            point_of_control=self.volume_profile.point_of_control(),
            oi_change_percent=self.open_interest.change_percent,
            funding_rate_avg=self.funding.average,
            signals=self.signals,
        )
