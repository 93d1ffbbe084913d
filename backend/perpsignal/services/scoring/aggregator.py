"""
Signal Aggregator

Combines the five category scores into bias, confidence and risk.

    total_score  = trend + momentum + volatility + volume + perp
    bias         = step function of total_score at 7 / 3 / -3 / -7
    confidence   = max(positive, negative magnitude) / 12, then
                   x1.2 (capped at 1) if trend and momentum agree in sign,
                   x0.8 otherwise
    risk         = count of risk factors, High >= 3, Medium >= 1
"""

import logging

from perpsignal.schemas.indicators import IndicatorSignals, VolatilityRegime
from perpsignal.schemas.signal import (
    MarketBias,
    RiskLevel,
    ScoreBreakdown,
    SignalReason,
    TradingSignal,
)
from perpsignal.services.indicators.registry import (
    CATEGORY_ORDER,
    TOTAL_POSSIBLE_SCORE,
    IndicatorCategory,
)
from perpsignal.services.scoring.scorer import score_category

logger = logging.getLogger(__name__)

ALIGNMENT_BOOST = 1.2
MISALIGNMENT_PENALTY = 0.8
RISK_REASON_WEIGHT = 0.5


def bias_from_score(total_score: int) -> MarketBias:
    if total_score >= 7:
        return MarketBias.STRONG_BULLISH
    if total_score >= 3:
        return MarketBias.BULLISH
    if total_score > -3:
        return MarketBias.NEUTRAL
    if total_score > -7:
        return MarketBias.BEARISH
    return MarketBias.STRONG_BEARISH


def calculate_confidence(breakdown: ScoreBreakdown) -> float:
    scores = breakdown.as_list()
    positive = sum(s for s in scores if s > 0)
    negative = sum(-s for s in scores if s < 0)

    confidence = max(positive, negative) / TOTAL_POSSIBLE_SCORE

    trend, momentum = breakdown.trend_score, breakdown.momentum_score
    if (trend > 0 and momentum > 0) or (trend < 0 and momentum < 0):
        confidence = min(confidence * ALIGNMENT_BOOST, 1.0)
    else:
        confidence *= MISALIGNMENT_PENALTY

    return max(0.0, min(1.0, confidence))


def assess_risk(signals: IndicatorSignals, total_score: int) -> RiskLevel:
    risk_factors = 0
    if signals.volatility == VolatilityRegime.HIGH:
        risk_factors += 2
    if signals.funding.is_extreme:
        risk_factors += 1
    if abs(total_score) < 2:
        risk_factors += 1
    if signals.rsi.is_divergence:
        risk_factors = max(risk_factors - 1, 0)

    if risk_factors >= 3:
        return RiskLevel.HIGH
    if risk_factors >= 1:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


class SignalAggregator:
    """Turns final tracker signals into a TradingSignal."""

    def aggregate(self, signals: IndicatorSignals) -> TradingSignal:
        scores: dict[IndicatorCategory, int] = {}
        reasons: list[SignalReason] = []
        for category in CATEGORY_ORDER:
            score, category_reasons = score_category(category, signals)
            scores[category] = score
            reasons.extend(category_reasons)

        breakdown = ScoreBreakdown(
            trend_score=scores[IndicatorCategory.TREND],
            momentum_score=scores[IndicatorCategory.MOMENTUM],
            volatility_score=scores[IndicatorCategory.VOLATILITY],
            volume_score=scores[IndicatorCategory.VOLUME],
            perp_score=scores[IndicatorCategory.PERP],
        )
        total = breakdown.total_score
        bias = bias_from_score(total)
        risk_level = assess_risk(signals, total)
        reasons.append(
            SignalReason(description=f"Risk level: {risk_level.value}", weight=RISK_REASON_WEIGHT)
        )

        logger.debug(
            f"Scores trend={breakdown.trend_score} momentum={breakdown.momentum_score} "
            f"volatility={breakdown.volatility_score} volume={breakdown.volume_score} "
            f"perp={breakdown.perp_score} total={total} bias={bias.value}"
        )

        return TradingSignal(
            position=bias.direction,
            confidence=calculate_confidence(breakdown),
            bias=bias,
            breakdown=breakdown,
            risk_level=risk_level,
            reasons=tuple(reasons),
        )
