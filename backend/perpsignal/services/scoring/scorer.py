"""
Category Scorer

Five pure functions, one per indicator family. Each takes only the
signals of its own category and returns a clamped integer score plus
the ordered reasons for the non-trivial branches it took.
"""

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
from perpsignal.schemas.signal import SignalReason
from perpsignal.services.indicators.registry import (
    CATEGORY_BOUNDS,
    IndicatorCategory,
    indicators_in,
)

CategoryScore = tuple[int, tuple[SignalReason, ...]]

# signal -> (score delta, reason or None)
_EMA_RULES = {
    EMASignal.BULLISH_CROSS: (2, "Golden Cross EMA20/50"),
    EMASignal.BEARISH_CROSS: (-2, "Death Cross EMA20/50"),
    EMASignal.STRONG_UPTREND: (1, "Strong uptrend structure"),
    EMASignal.STRONG_DOWNTREND: (-1, "Strong downtrend structure"),
}

_SUPERTREND_RULES = {
    SuperTrendSignal.BULLISH_FLIP: (2, "SuperTrend flip bullish"),
    SuperTrendSignal.BEARISH_FLIP: (-2, "SuperTrend flip bearish"),
    SuperTrendSignal.BULLISH: (1, None),
    SuperTrendSignal.BEARISH: (-1, None),
}

_RSI_RULES = {
    RSISignal.BULLISH_DIVERGENCE: (2, "RSI bullish divergence"),
    RSISignal.BEARISH_DIVERGENCE: (-2, "RSI bearish divergence"),
    RSISignal.OVERSOLD: (1, "RSI oversold"),
    RSISignal.OVERBOUGHT: (-1, "RSI overbought"),
}

_MACD_RULES = {
    MACDSignal.BULLISH_CROSS: (2, "MACD bullish cross"),
    MACDSignal.BEARISH_CROSS: (-2, "MACD bearish cross"),
    MACDSignal.BULLISH_MOMENTUM: (1, None),
    MACDSignal.BEARISH_MOMENTUM: (-1, None),
}

_BOLLINGER_RULES = {
    BollingerSignal.SQUEEZE: (0, "Bollinger Squeeze - breakout setup"),
    BollingerSignal.UPPER_BREAKOUT: (1, "Price broke above Bollinger upper"),
    BollingerSignal.LOWER_BREAKOUT: (-1, "Price broke below Bollinger lower"),
    BollingerSignal.MEAN_REVERSION: (0, "Bollinger mean reversion"),
    BollingerSignal.WALKING_BANDS: (0, "Walking the bands - strong trend"),
}

_REGIME_RULES = {
    VolatilityRegime.HIGH: (0, "High volatility - reduce size"),
    VolatilityRegime.LOW: (0, "Low volatility - breakout potential"),
    VolatilityRegime.ELEVATED: (0, "Elevated volatility"),
}

_OBV_RULES = {
    OBVSignal.BULLISH_DIVERGENCE: (2, "OBV bullish divergence"),
    OBVSignal.BEARISH_DIVERGENCE: (-2, "OBV bearish divergence"),
    OBVSignal.CONFIRMATION: (1, "Volume confirms price action"),
}

_VOLUME_PROFILE_RULES = {
    VolumeProfileSignal.POC_SUPPORT: (1, "Price at POC support"),
    VolumeProfileSignal.POC_RESISTANCE: (-1, "Price at POC resistance"),
    VolumeProfileSignal.NEAR_LVN: (0, "Near LVN - expect fast move"),
}

_OI_RULES = {
    OISignal.BULLISH_EXPANSION: (2, "New money entering longs"),
    OISignal.BEARISH_EXPANSION: (-2, "New money entering shorts"),
    OISignal.SHORT_SQUEEZE: (1, "Potential short squeeze"),
    OISignal.LONG_SQUEEZE: (-1, "Long squeeze in progress"),
}

# Contrarian: crowded longs count against the long side
_FUNDING_RULES = {
    FundingSignal.EXTREME_LONG_BIAS: (-1, "Extreme long bias - caution"),
    FundingSignal.EXTREME_SHORT_BIAS: (1, "Extreme short bias - bounce potential"),
}


def _clamp(score: int, bound: int) -> int:
    return max(-bound, min(bound, score))


def _apply(category: IndicatorCategory, *lookups) -> CategoryScore:
    """Sum the deltas of each (rules, signal) lookup and collect reasons in order."""
    score = 0
    reasons: list[SignalReason] = []
    for rules, signal in lookups:
        delta, reason = rules.get(signal, (0, None))
        score += delta
        if reason:
            reasons.append(SignalReason(description=reason))
    return _clamp(score, CATEGORY_BOUNDS[category]), tuple(reasons)


# =============================================================================
# CATEGORY SCORERS
# =============================================================================


def score_trend(ema: EMASignal, supertrend: SuperTrendSignal) -> CategoryScore:
    return _apply(
        IndicatorCategory.TREND,
        (_EMA_RULES, ema),
        (_SUPERTREND_RULES, supertrend),
    )


def score_momentum(rsi: RSISignal, macd: MACDSignal) -> CategoryScore:
    return _apply(
        IndicatorCategory.MOMENTUM,
        (_RSI_RULES, rsi),
        (_MACD_RULES, macd),
    )


def score_volatility(bollinger: BollingerSignal, volatility: VolatilityRegime) -> CategoryScore:
    return _apply(
        IndicatorCategory.VOLATILITY,
        (_BOLLINGER_RULES, bollinger),
        (_REGIME_RULES, volatility),
    )


def score_volume(obv: OBVSignal, volume_profile: VolumeProfileSignal) -> CategoryScore:
    return _apply(
        IndicatorCategory.VOLUME,
        (_OBV_RULES, obv),
        (_VOLUME_PROFILE_RULES, volume_profile),
    )


def score_perp(open_interest: OISignal, funding: FundingSignal) -> CategoryScore:
    return _apply(
        IndicatorCategory.PERP,
        (_OI_RULES, open_interest),
        (_FUNDING_RULES, funding),
    )


CATEGORY_SCORERS = {
    IndicatorCategory.TREND: score_trend,
    IndicatorCategory.MOMENTUM: score_momentum,
    IndicatorCategory.VOLATILITY: score_volatility,
    IndicatorCategory.VOLUME: score_volume,
    IndicatorCategory.PERP: score_perp,
}


def score_category(category: IndicatorCategory, signals: IndicatorSignals) -> CategoryScore:
    """Score one category using only the signals registered to it."""
    relevant = {name: getattr(signals, name) for name in indicators_in(category)}
    return CATEGORY_SCORERS[category](**relevant)
