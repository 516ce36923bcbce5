"""
Tests for the Tinseth bitterness model.
"""

import pytest

from brewing_calc.bitterness import (
    calculate_ibu,
    dry_hop_ibu,
    hop_ibu,
    tinseth_utilization,
    whirlpool_utilization,
)
from brewing_calc.config import CalculationConfig
from brewing_calc.models import Hop, HopUse

OG = 1.05921


class TestUtilization:
    """Tests for utilisation curves."""

    def test_sixty_minutes(self):
        assert abs(tinseth_utilization(60, OG) - 0.2123) < 0.0005

    def test_zero_minutes(self):
        assert tinseth_utilization(0, OG) == 0.0

    def test_higher_gravity_lowers_utilization(self):
        assert tinseth_utilization(60, 1.080) < tinseth_utilization(60, 1.040)

    def test_whirlpool_at_threshold_is_zero(self):
        assert whirlpool_utilization(20, 60.0, OG) == 0.0
        assert whirlpool_utilization(20, 40.0, OG) == 0.0

    def test_whirlpool_at_boiling(self):
        assert whirlpool_utilization(20, 100.0, OG) == pytest.approx(
            tinseth_utilization(20, OG)
        )

    def test_whirlpool_temperature_scaling(self):
        expected = tinseth_utilization(20, OG) * 0.5 ** 1.8
        assert whirlpool_utilization(20, 80.0, OG) == pytest.approx(expected)


class TestHopIbu:
    """Tests for single addition bitterness."""

    def test_boil_addition(self, cascade_bittering):
        # 30 g x 10% x 10 / 19 L x 0.2123
        assert abs(hop_ibu(cascade_bittering, OG, 19.0) - 33.53) < 0.05

    def test_first_wort_bonus(self):
        fwh = Hop(name="A", alpha_acid=10.0, grams=30.0, use=HopUse.FIRST_WORT, time_min=60)
        boil80 = Hop(name="A", alpha_acid=10.0, grams=30.0, use=HopUse.BOIL, time_min=80)
        assert hop_ibu(fwh, OG, 19.0) == pytest.approx(hop_ibu(boil80, OG, 19.0))

    def test_mash_hop_fraction(self, cascade_bittering):
        mash = cascade_bittering.model_copy(update={"use": HopUse.MASH})
        assert hop_ibu(mash, OG, 19.0) == pytest.approx(0.2 * hop_ibu(cascade_bittering, OG, 19.0))

    def test_whirlpool_uses_whirlpool_fields(self):
        hop = Hop(
            name="A",
            alpha_acid=10.0,
            grams=30.0,
            use=HopUse.WHIRLPOOL,
            whirlpool_time_min=20,
            whirlpool_temp_c=100.0,
        )
        boil = Hop(name="A", alpha_acid=10.0, grams=30.0, use=HopUse.BOIL, time_min=20)
        assert hop_ibu(hop, OG, 19.0) == pytest.approx(hop_ibu(boil, OG, 19.0))

    def test_whirlpool_falls_back_to_time(self):
        with_time = Hop(
            name="A",
            alpha_acid=10.0,
            grams=30.0,
            use=HopUse.WHIRLPOOL,
            time_min=20,
            whirlpool_temp_c=90.0,
        )
        explicit = with_time.model_copy(update={"whirlpool_time_min": 20.0, "time_min": 0.0})
        assert hop_ibu(with_time, OG, 19.0) == pytest.approx(hop_ibu(explicit, OG, 19.0))

    def test_whirlpool_defaults(self):
        hop = Hop(name="A", alpha_acid=10.0, grams=30.0, use=HopUse.WHIRLPOOL)
        explicit = hop.model_copy(update={"whirlpool_time_min": 15.0, "whirlpool_temp_c": 80.0})
        assert hop_ibu(hop, OG, 19.0) > 0
        assert hop_ibu(hop, OG, 19.0) == pytest.approx(hop_ibu(explicit, OG, 19.0))

    def test_cool_whirlpool_adds_nothing(self):
        hop = Hop(
            name="A", alpha_acid=10.0, grams=30.0, use=HopUse.WHIRLPOOL, whirlpool_temp_c=55.0
        )
        assert hop_ibu(hop, OG, 19.0) == 0.0

    def test_dry_hop_adds_nothing_by_default(self):
        hop = Hop(name="A", alpha_acid=12.0, grams=100.0, use=HopUse.DRY_HOP)
        assert hop_ibu(hop, OG, 19.0) == 0.0

    def test_dry_hop_estimate_when_enabled(self):
        hop = Hop(name="A", alpha_acid=12.0, grams=100.0, use=HopUse.DRY_HOP)
        config = CalculationConfig(dry_hop_bitterness=True)
        assert hop_ibu(hop, OG, 19.0, config) == pytest.approx(dry_hop_ibu(hop, 19.0))
        assert hop_ibu(hop, OG, 19.0, config) > 0

    def test_zero_volume(self, cascade_bittering):
        assert hop_ibu(cascade_bittering, OG, 0.0) == 0.0
        assert dry_hop_ibu(cascade_bittering, 0.0) == 0.0


class TestCalculateIbu:
    """Tests for recipe bitterness totals."""

    def test_single_hop(self, cascade_bittering):
        assert calculate_ibu([cascade_bittering], OG, 19.0) == 33.5

    def test_additions_sum(self, cascade_bittering):
        single = calculate_ibu([cascade_bittering], OG, 19.0)
        double = calculate_ibu([cascade_bittering, cascade_bittering], OG, 19.0)
        assert abs(double - 2 * single) < 0.15

    def test_no_hops(self):
        assert calculate_ibu([], OG, 19.0) == 0.0

    def test_zero_volume(self, cascade_bittering):
        assert calculate_ibu([cascade_bittering], OG, 0.0) == 0.0
