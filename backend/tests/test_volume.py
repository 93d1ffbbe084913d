"""
Tests for volume trackers: OBV and Volume Profile
"""
import pytest

from perpsignal.schemas.indicators import OBVSignal, VolumeProfileSignal
from perpsignal.services.indicators.validation import IndicatorError
from perpsignal.services.indicators.volume import OBV, VolumeProfile


class TestOBV:
    def test_detects_confirmation_and_divergence(self):
        obv = OBV()
        _, first = obv.update(100.0, 1000.0)
        assert first == OBVSignal.NEUTRAL

        confirmations = [obv.update(p, v)[1] for p, v in [(101.0, 1200.0), (102.0, 1300.0)]]
        assert OBVSignal.CONFIRMATION in confirmations

        _, signal = obv.update(101.5, 200.0)
        assert signal == OBVSignal.BULLISH_DIVERGENCE

    def test_cumulative_signed_volume(self):
        obv = OBV()
        obv.update(100.0, 500.0)
        obv.update(101.0, 200.0)
        obv.update(100.5, 300.0)
        obv.update(100.5, 999.0)  # unchanged close leaves OBV alone
        assert obv.value == pytest.approx(400.0)

    def test_smoothing_weights(self):
        obv = OBV()
        obv.update(100.0, 1000.0)
        obv.update(101.0, 1000.0)
        # 1000 * 0.9 + 2000 * 0.1
        assert obv.smoothed == pytest.approx(1100.0)

    def test_bearish_divergence(self):
        obv = OBV()
        obv.update(100.0, 1000.0)
        for price in [99.0, 98.0, 97.0, 96.0]:
            obv.update(price, 1000.0)
        _, signal = obv.update(96.5, 10.0)
        assert signal == OBVSignal.BEARISH_DIVERGENCE


class TestVolumeProfile:
    def test_identifies_poc_and_lvn(self):
        profile = VolumeProfile(1.0, 20)
        for _ in range(10):
            profile.update(100.0, 1000.0)
        signal = None
        for _ in range(5):
            _, signal = profile.update(105.0, 200.0)

        assert profile.point_of_control() == pytest.approx(100.0)
        assert signal != VolumeProfileSignal.NEUTRAL

        _, signal = profile.update(110.0, 10.0)
        assert signal == VolumeProfileSignal.NEAR_LVN

    def test_buckets_round_half_up(self):
        profile = VolumeProfile(10.0, 10)
        poc, _ = profile.update(25.0, 100.0)
        assert poc == 30.0
        poc, _ = profile.update(14.9, 500.0)
        assert poc == 10.0

    def test_ties_go_to_lowest_price(self):
        profile = VolumeProfile(10.0, 10)
        profile.update(200.0, 100.0)
        profile.update(100.0, 100.0)
        assert profile.point_of_control() == 100.0

    def test_expired_samples_leave_window(self):
        profile = VolumeProfile(10.0, 3)
        profile.update(100.0, 5000.0)
        for _ in range(3):
            poc, _ = profile.update(200.0, 10.0)
        assert profile.levels[10] == 0.0
        assert poc == 200.0

    def test_support_and_resistance_near_poc(self):
        profile = VolumeProfile(10.0, 50)
        for _ in range(10):
            profile.update(100.0, 1000.0)
        _, above = profile.update(105.0, 1.0)
        _, below = profile.update(95.0, 1.0)
        assert above == VolumeProfileSignal.POC_SUPPORT
        assert below == VolumeProfileSignal.POC_RESISTANCE

    def test_high_volume_node_away_from_poc(self):
        profile = VolumeProfile(1.0, 50)
        profile.update(100.0, 1000.0)
        for price in [110.0, 120.0, 130.0]:
            profile.update(price, 10.0)
        poc, signal = profile.update(140.0, 900.0)

        assert poc == 100.0
        assert signal == VolumeProfileSignal.NEAR_HVN

    def test_rejects_non_positive_tick(self):
        with pytest.raises(IndicatorError):
            VolumeProfile(0.0, 10)
