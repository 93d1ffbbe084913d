"""
Tests for the signal aggregator: bias, confidence, risk and reasons
"""
import pytest

from perpsignal.schemas.indicators import (
    BollingerSignal,
    EMASignal,
    FundingSignal,
    IndicatorSignals,
    MACDSignal,
    OBVSignal,
    OISignal,
    RSISignal,
    SuperTrendSignal,
    VolatilityRegime,
    VolumeProfileSignal,
)
from perpsignal.schemas.signal import (
    MarketBias,
    RiskLevel,
    ScoreBreakdown,
    SignalDirection,
)
from perpsignal.services.scoring.aggregator import (
    SignalAggregator,
    assess_risk,
    bias_from_score,
    calculate_confidence,
)


@pytest.fixture
def aggregator():
    return SignalAggregator()


@pytest.fixture
def bullish_signals():
    return IndicatorSignals(
        ema=EMASignal.BULLISH_CROSS,
        supertrend=SuperTrendSignal.BULLISH_FLIP,
        rsi=RSISignal.BULLISH_DIVERGENCE,
        macd=MACDSignal.BULLISH_CROSS,
        bollinger=BollingerSignal.UPPER_BREAKOUT,
        volatility=VolatilityRegime.NORMAL,
        obv=OBVSignal.CONFIRMATION,
        volume_profile=VolumeProfileSignal.POC_SUPPORT,
        open_interest=OISignal.BULLISH_EXPANSION,
        funding=FundingSignal.NEUTRAL_NEGATIVE,
    )


class TestAggregate:
    def test_bullish_aggregation(self, aggregator, bullish_signals):
        signal = aggregator.aggregate(bullish_signals)

        assert signal.position == SignalDirection.LONG
        assert signal.bias == MarketBias.STRONG_BULLISH
        assert signal.breakdown.as_list() == [3, 3, 1, 2, 2]
        assert signal.breakdown.total_score == 11
        assert signal.confidence == pytest.approx(1.0)
        assert signal.risk_level == RiskLevel.LOW

    def test_high_risk_detection(self, aggregator, bullish_signals):
        signals = bullish_signals.model_copy(update={
            "volatility": VolatilityRegime.HIGH,
            "funding": FundingSignal.EXTREME_LONG_BIAS,
            "rsi": RSISignal.NEUTRAL,
        })
        assert aggregator.aggregate(signals).risk_level == RiskLevel.HIGH

    def test_funding_extreme_penalises_longs(self, aggregator, bullish_signals):
        signals = bullish_signals.model_copy(update={
            "funding": FundingSignal.EXTREME_LONG_BIAS,
            "rsi": RSISignal.NEUTRAL,
        })
        signal = aggregator.aggregate(signals)

        assert signal.breakdown.perp_score == 1
        assert signal.risk_level == RiskLevel.MEDIUM

    def test_all_neutral(self, aggregator):
        signal = aggregator.aggregate(IndicatorSignals())

        assert signal.position == SignalDirection.NEUTRAL
        assert signal.bias == MarketBias.NEUTRAL
        assert signal.confidence == 0.0
        assert signal.risk_level == RiskLevel.MEDIUM
        assert [r.description for r in signal.reasons] == ["Risk level: Medium"]

    def test_reasons_follow_category_order(self, aggregator):
        signals = IndicatorSignals(
            ema=EMASignal.BULLISH_CROSS,
            rsi=RSISignal.OVERBOUGHT,
            bollinger=BollingerSignal.SQUEEZE,
            obv=OBVSignal.CONFIRMATION,
            open_interest=OISignal.BULLISH_EXPANSION,
        )
        signal = aggregator.aggregate(signals)

        assert [r.description for r in signal.reasons] == [
            "Golden Cross EMA20/50",
            "RSI overbought",
            "Bollinger Squeeze - breakout setup",
            "Volume confirms price action",
            "New money entering longs",
            "Risk level: Low",
        ]
        assert signal.reasons[-1].weight == 0.5
        assert all(r.weight == 1.0 for r in signal.reasons[:-1])
        assert signal.bias == MarketBias.BULLISH

    def test_bearish_mirror(self, aggregator):
        signals = IndicatorSignals(
            ema=EMASignal.BEARISH_CROSS,
            supertrend=SuperTrendSignal.BEARISH_FLIP,
            rsi=RSISignal.BEARISH_DIVERGENCE,
            macd=MACDSignal.BEARISH_CROSS,
            open_interest=OISignal.BEARISH_EXPANSION,
        )
        signal = aggregator.aggregate(signals)

        assert signal.breakdown.total_score == -8
        assert signal.bias == MarketBias.STRONG_BEARISH
        assert signal.position == SignalDirection.SHORT


class TestBias:
    @pytest.mark.parametrize("score,bias", [
        (12, MarketBias.STRONG_BULLISH),
        (7, MarketBias.STRONG_BULLISH),
        (6, MarketBias.BULLISH),
        (3, MarketBias.BULLISH),
        (2, MarketBias.NEUTRAL),
        (0, MarketBias.NEUTRAL),
        (-2, MarketBias.NEUTRAL),
        (-3, MarketBias.BEARISH),
        (-6, MarketBias.BEARISH),
        (-7, MarketBias.STRONG_BEARISH),
        (-12, MarketBias.STRONG_BEARISH),
    ])
    def test_thresholds(self, score, bias):
        assert bias_from_score(score) == bias

    def test_direction_mapping(self):
        assert MarketBias.STRONG_BULLISH.direction == SignalDirection.LONG
        assert MarketBias.BEARISH.direction == SignalDirection.SHORT
        assert MarketBias.NEUTRAL.direction == SignalDirection.NEUTRAL


class TestConfidence:
    def test_aligned_trend_and_momentum_boost(self):
        breakdown = ScoreBreakdown(trend_score=2, momentum_score=1)
        assert calculate_confidence(breakdown) == pytest.approx(3 / 12 * 1.2)

    def test_misaligned_penalty(self):
        breakdown = ScoreBreakdown(trend_score=2, momentum_score=-1, volume_score=1)
        assert calculate_confidence(breakdown) == pytest.approx(3 / 12 * 0.8)

    def test_negative_side_dominates(self):
        breakdown = ScoreBreakdown(trend_score=-3, momentum_score=-3, perp_score=1)
        assert calculate_confidence(breakdown) == pytest.approx(6 / 12 * 1.2)

    def test_capped_at_one(self):
        breakdown = ScoreBreakdown(
            trend_score=3, momentum_score=3, volatility_score=2, volume_score=2, perp_score=2
        )
        assert calculate_confidence(breakdown) == 1.0

    def test_zero_scores(self):
        assert calculate_confidence(ScoreBreakdown()) == 0.0


class TestRisk:
    def test_high_volatility_and_extreme_funding(self):
        signals = IndicatorSignals(
            volatility=VolatilityRegime.HIGH,
            funding=FundingSignal.EXTREME_SHORT_BIAS,
        )
        assert assess_risk(signals, 5) == RiskLevel.HIGH

    def test_weak_score_is_medium(self):
        assert assess_risk(IndicatorSignals(), 1) == RiskLevel.MEDIUM

    def test_strong_score_is_low(self):
        assert assess_risk(IndicatorSignals(), 4) == RiskLevel.LOW

    def test_rsi_divergence_offsets_one_factor(self):
        signals = IndicatorSignals(rsi=RSISignal.BEARISH_DIVERGENCE)
        assert assess_risk(signals, 0) == RiskLevel.LOW

    def test_high_funding_is_not_extreme(self):
        signals = IndicatorSignals(funding=FundingSignal.HIGH_LONG_BIAS)
        assert assess_risk(signals, 4) == RiskLevel.LOW
