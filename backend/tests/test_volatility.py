"""
Tests for volatility trackers: ATR regime and Bollinger Bands
"""
import pytest

from perpsignal.schemas.indicators import BollingerSignal, VolatilityRegime
from perpsignal.services.indicators.volatility import ATR, BollingerBands, classify_regime


class TestClassifyRegime:
    @pytest.mark.parametrize(
        "atr,average,expected",
        [
            (2.0, 1.0, VolatilityRegime.HIGH),
            (1.2, 1.0, VolatilityRegime.ELEVATED),
            (1.0, 1.0, VolatilityRegime.NORMAL),
            (0.5, 1.0, VolatilityRegime.LOW),
            (1.0, 0.0, VolatilityRegime.NORMAL),
        ],
    )
    def test_ratio_thresholds(self, atr, average, expected):
        assert classify_regime(atr, average) == expected


class TestATR:
    def test_updates_and_stays_positive(self):
        atr = ATR(5)
        value = 0.0
        for offset in range(6):
            value, _ = atr.update(100.0 + offset, 99.0 - offset * 0.1, 99.5)
        assert value > 0.0
        assert atr.is_ready
        assert classify_regime(value, value / 2.0) == VolatilityRegime.HIGH

    def test_latest_true_range_while_filling(self):
        atr = ATR(14)
        value, _ = atr.update(105.0, 100.0, 102.0)
        assert value == 5.0
        value, _ = atr.update(103.0, 101.0, 102.0)
        assert value == 2.0
        assert not atr.is_ready

    def test_seeded_with_window_mean_then_wilder(self):
        atr = ATR(3)
        atr.update(102.0, 100.0, 101.0)  # tr 2
        atr.update(104.0, 100.0, 102.0)  # tr 4
        value, _ = atr.update(108.0, 102.0, 105.0)  # tr 6, seed = 4
        assert value == pytest.approx(4.0)
        value, _ = atr.update(106.0, 104.0, 105.0)  # tr 2, (4 * 2 + 2) / 3
        assert value == pytest.approx(10.0 / 3.0)

    def test_constant_range_is_normal(self):
        atr = ATR(14)
        for i in range(40):
            _, regime = atr.update(101.0 + i * 0.5, 99.0 + i * 0.5, 100.0 + i * 0.5)
        assert atr.value == pytest.approx(2.0)
        assert regime == VolatilityRegime.NORMAL

    def test_range_expansion_is_high(self):
        atr = ATR(5, regime_lookback=5)
        for _ in range(20):
            atr.update(101.0, 99.0, 100.0)
        _, regime = atr.update(130.0, 90.0, 100.0)
        assert regime == VolatilityRegime.HIGH


class TestBollingerBands:
    def test_detects_squeeze_and_breakout(self):
        bands = BollingerBands(5, 2.0)
        signals = [bands.update(100.0)[1] for _ in range(6)]
        assert signals[4:] == [BollingerSignal.SQUEEZE, BollingerSignal.SQUEEZE]

    def test_neutral_until_window_full(self):
        bands = BollingerBands(20, 2.0)
        signals = [bands.update(100.0 + i)[1] for i in range(19)]
        assert all(s == BollingerSignal.NEUTRAL for s in signals)

    def test_reading_is_symmetric(self):
        bands = BollingerBands(5, 2.0)
        for price in [100.0, 110.0, 90.0, 105.0, 95.0]:
            reading, _ = bands.update(price)
        assert reading.middle == pytest.approx(100.0)
        assert reading.upper - reading.middle == pytest.approx(reading.middle - reading.lower)
        assert reading.bandwidth == pytest.approx((reading.upper - reading.lower) / reading.middle)

    def test_lower_breakout(self):
        bands = BollingerBands(5, 1.0)
        for price in [100.0, 110.0, 90.0, 105.0, 95.0]:
            bands.update(price)
        _, signal = bands.update(70.0)
        assert signal == BollingerSignal.LOWER_BREAKOUT

    def test_upper_breakout(self):
        bands = BollingerBands(10, 2.0)
        for _ in range(9):
            bands.update(10.0)
        reading, signal = bands.update(13.0)
        assert 13.0 > reading.upper
        assert signal == BollingerSignal.UPPER_BREAKOUT

    def test_mean_reversion_on_contracting_bands(self):
        bands = BollingerBands(4, 2.0)
        for price in [5.0, 15.0, 5.0, 15.0]:
            previous, _ = bands.update(price)
        reading, signal = bands.update(10.0)

        assert reading.bandwidth < previous.bandwidth
        assert signal == BollingerSignal.MEAN_REVERSION

    def test_walking_the_upper_band(self):
        bands = BollingerBands(10, 2.0)
        for price in [9.0, 11.0, 9.0, 11.0, 10.0, 9.0, 11.0, 9.0, 11.0]:
            bands.update(price)
        reading, signal = bands.update(12.4)

        assert reading.middle < 12.4 <= reading.upper
        assert signal == BollingerSignal.WALKING_BANDS

    def test_walking_the_lower_band(self):
        bands = BollingerBands(10, 2.0)
        for price in [9.0, 11.0, 9.0, 11.0, 10.0, 9.0, 11.0, 9.0, 11.0]:
            bands.update(price)
        reading, signal = bands.update(7.6)

        assert reading.lower <= 7.6 < reading.middle
        assert signal == BollingerSignal.WALKING_BANDS
