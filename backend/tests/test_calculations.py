"""
Tests for numeric primitives
"""
import math

import pytest

from perpsignal.services.indicators.calculations import (
    RollingWindow,
    StreamingEMA,
    ema,
    ema_multiplier,
    is_zero,
    sma,
    standard_deviation,
    true_range,
    wilder_average,
)


class TestWindowStatistics:
    def test_sma_of_last_period(self):
        assert sma([1.0, 2.0, 3.0, 4.0, 5.0], 3) == pytest.approx(4.0)

    def test_sma_insufficient_data(self):
        assert sma([1.0, 2.0], 3) is None
        assert sma([1.0, 2.0], 0) is None

    def test_ema_seeded_with_sma(self):
        # seed = mean(1, 2, 3) = 2, then (4 - 2) * 0.5 + 2 = 3
        assert ema([1.0, 2.0, 3.0, 4.0], 3) == pytest.approx(3.0)

    def test_ema_multiplier(self):
        assert ema_multiplier(3) == pytest.approx(0.5)
        assert ema_multiplier(20) == pytest.approx(2.0 / 21.0)

    def test_population_standard_deviation(self):
        # population std of 2, 4, 4, 4, 5, 5, 7, 9 is exactly 2
        values = [2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0]
        assert standard_deviation(values, 8) == pytest.approx(2.0)

    def test_standard_deviation_insufficient_data(self):
        assert standard_deviation([1.0], 2) is None


class TestSmoothing:
    def test_wilder_average(self):
        assert wilder_average(10.0, 24.0, 14) == pytest.approx(11.0)

    def test_true_range_without_previous_close(self):
        assert true_range(105.0, 100.0, None) == 5.0

    def test_true_range_uses_gap_from_previous_close(self):
        assert true_range(105.0, 100.0, 110.0) == 10.0
        assert true_range(105.0, 100.0, 90.0) == 15.0

    def test_is_zero(self):
        assert is_zero(0.0)
        assert is_zero(1e-15)
        assert not is_zero(1e-6)


class TestRollingWindow:
    def test_evicts_oldest(self):
        window = RollingWindow(3)
        for value in [1.0, 2.0, 3.0, 4.0]:
            window.push(value)
        assert window.values() == [2.0, 3.0, 4.0]
        assert window.is_full
        assert window.mean() == pytest.approx(3.0)

    def test_empty_window(self):
        window = RollingWindow(3)
        assert len(window) == 0
        assert not window.is_full
        assert window.mean() is None
        assert window.std() is None

    def test_std_of_constant_window_is_zero(self):
        window = RollingWindow(4)
        for _ in range(4):
            window.push(7.0)
        assert window.std() == 0.0


class TestStreamingEMA:
    def test_seeded_from_first_value(self):
        tracker = StreamingEMA(3)
        assert tracker.update(100.0) == 100.0
        assert tracker.update(102.0) == pytest.approx(101.0)

    def test_converges_toward_constant_input(self):
        tracker = StreamingEMA(5)
        tracker.update(0.0)
        for _ in range(200):
            value = tracker.update(50.0)
        assert math.isclose(value, 50.0, rel_tol=1e-9)

    def test_rising_input_stays_above_start(self):
        tracker = StreamingEMA(5)
        last = 0.0
        for price in [100.0, 101.0, 102.0, 103.0, 104.0]:
            last = tracker.update(price)
        assert 100.0 < last < 104.0
