"""
Indicator registry.

Maps each of the ten trackers to exactly one score category, and holds
the per-category score bounds and weights.
"""

from enum import Enum


class IndicatorCategory(str, Enum):
    TREND = "trend"
    MOMENTUM = "momentum"
    VOLATILITY = "volatility"
    VOLUME = "volume"
    PERP = "perp"


# Scoring order: reasons are concatenated in this order
CATEGORY_ORDER = (
    IndicatorCategory.TREND,
    IndicatorCategory.MOMENTUM,
    IndicatorCategory.VOLATILITY,
    IndicatorCategory.VOLUME,
    IndicatorCategory.PERP,
)

# Absolute clamp bound per category score
CATEGORY_BOUNDS: dict[IndicatorCategory, int] = {
    IndicatorCategory.TREND: 3,
    IndicatorCategory.MOMENTUM: 3,
    IndicatorCategory.VOLATILITY: 2,
    IndicatorCategory.VOLUME: 2,
    IndicatorCategory.PERP: 2,
}

# Sum of all bounds: normalizer for confidence
TOTAL_POSSIBLE_SCORE = sum(CATEGORY_BOUNDS.values())

# Category weights for the global-score decision policy (sum to 1.0)
CATEGORY_WEIGHTS: dict[IndicatorCategory, float] = {
    IndicatorCategory.MOMENTUM: 0.25,
    IndicatorCategory.TREND: 0.30,
    IndicatorCategory.VOLATILITY: 0.15,
    IndicatorCategory.VOLUME: 0.15,
    IndicatorCategory.PERP: 0.15,
}

INDICATOR_CATEGORIES: dict[str, IndicatorCategory] = {
    "ema": IndicatorCategory.TREND,
    "supertrend": IndicatorCategory.TREND,
    "rsi": IndicatorCategory.MOMENTUM,
    "macd": IndicatorCategory.MOMENTUM,
    "bollinger": IndicatorCategory.VOLATILITY,
    "volatility": IndicatorCategory.VOLATILITY,
    "obv": IndicatorCategory.VOLUME,
    "volume_profile": IndicatorCategory.VOLUME,
    "open_interest": IndicatorCategory.PERP,
    "funding": IndicatorCategory.PERP,
}


def category_of(indicator: str) -> IndicatorCategory:
    """Category an indicator contributes to."""
    try:
        return INDICATOR_CATEGORIES[indicator]
    except KeyError:
        raise KeyError(f"Unknown indicator: {indicator}") from None


def category_weight(category: IndicatorCategory) -> float:
    return CATEGORY_WEIGHTS[category]


def indicators_in(category: IndicatorCategory) -> list[str]:
    return [name for name, cat in INDICATOR_CATEGORIES.items() if cat == category]
