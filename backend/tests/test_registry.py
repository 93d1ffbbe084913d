"""
Tests for the indicator registry
"""
import pytest

from perpsignal.schemas.indicators import IndicatorSignals
from perpsignal.services.indicators.registry import (
    CATEGORY_BOUNDS,
    CATEGORY_ORDER,
    CATEGORY_WEIGHTS,
    INDICATOR_CATEGORIES,
    TOTAL_POSSIBLE_SCORE,
    IndicatorCategory,
    category_of,
    category_weight,
    indicators_in,
)


class TestRegistry:
    def test_every_indicator_has_one_category(self):
        assert set(INDICATOR_CATEGORIES) == set(IndicatorSignals.model_fields)
        assert len(INDICATOR_CATEGORIES) == 10

    def test_two_indicators_per_category(self):
        for category in IndicatorCategory:
            assert len(indicators_in(category)) == 2

    def test_category_lookup(self):
        assert category_of("ema") == IndicatorCategory.TREND
        assert category_of("macd") == IndicatorCategory.MOMENTUM
        assert category_of("volatility") == IndicatorCategory.VOLATILITY
        assert category_of("volume_profile") == IndicatorCategory.VOLUME
        assert category_of("funding") == IndicatorCategory.PERP

    def test_unknown_indicator(self):
        with pytest.raises(KeyError):
            category_of("adx")

    def test_bounds_sum_to_total(self):
        assert TOTAL_POSSIBLE_SCORE == 12
        assert CATEGORY_BOUNDS[IndicatorCategory.TREND] == 3
        assert CATEGORY_BOUNDS[IndicatorCategory.PERP] == 2

    def test_weights_sum_to_one(self):
        assert sum(CATEGORY_WEIGHTS.values()) == pytest.approx(1.0)
        assert category_weight(IndicatorCategory.TREND) == pytest.approx(0.30)

    def test_scoring_order(self):
        assert CATEGORY_ORDER == (
            IndicatorCategory.TREND,
            IndicatorCategory.MOMENTUM,
            IndicatorCategory.VOLATILITY,
            IndicatorCategory.VOLUME,
            IndicatorCategory.PERP,
        )
