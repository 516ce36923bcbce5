"""
Tests for mash schedule thermodynamics.
"""

from brewing_calc.mash import (
    create_multi_step_schedule,
    create_single_infusion_schedule,
    infusion_temp,
    mash_volume_at_step,
    strike_temp,
    total_infusion_water,
    total_mash_time,
    validate_mash_step,
)
from brewing_calc.models import MashStep, MashStepType


class TestStrikeTemp:
    """Tests for strike water temperature."""

    def test_simplified_formula(self):
        # 67 + (67 - 20) x 0.41 / 3
        assert strike_temp(67.0, 3.0, 20.0) == 73.4

    def test_full_heat_balance(self):
        # 67 + 5 x 0.38 x 47 / 15
        assert strike_temp(67.0, 3.0, 20.0, total_grain_kg=5.0) == 73.0

    def test_zero_thickness_returns_target(self):
        assert strike_temp(67.0, 0.0) == 67.0

    def test_strike_above_target_for_cold_grain(self):
        assert strike_temp(65.0, 2.5, 10.0) > 65.0

    def test_warm_grain_needs_cooler_water(self):
        assert strike_temp(65.0, 2.5, 70.0) < 65.0


class TestInfusionTemp:
    """Tests for step infusion temperature."""

    def test_infusion(self):
        # (66 - 50) x (5 x 0.41 + 15) / 5 + 66
        assert infusion_temp(50.0, 66.0, 15.0, 5.0, 5.0) == 120.6

    def test_no_infusion_returns_target(self):
        assert infusion_temp(50.0, 66.0, 15.0, 0.0, 5.0) == 66.0


class TestMashVolumes:
    """Tests for mash volume helpers."""

    def test_volume_after_infusions(self):
        steps = [
            MashStep(name="Rest", infusion_volume_l=15.0),
            MashStep(name="Raise", type=MashStepType.TEMPERATURE, infusion_volume_l=4.0),
        ]
        # only infusion steps add water; 5 kg holds back 5.2 L
        assert mash_volume_at_step(steps, 5.0, 1.04) == 9.8

    def test_volume_never_negative(self):
        steps = [MashStep(name="Rest", infusion_volume_l=2.0)]
        assert mash_volume_at_step(steps, 5.0, 1.04) == 0.0

    def test_total_infusion_water(self):
        steps = [
            MashStep(name="A", infusion_volume_l=12.0),
            MashStep(name="B", infusion_volume_l=3.5),
            MashStep(name="C", type=MashStepType.DECOCTION, decoction_volume_l=4.0),
        ]
        assert total_infusion_water(steps) == 15.5

    def test_total_mash_time(self):
        steps = [MashStep(name="A", duration_min=15), MashStep(name="B", duration_min=45)]
        assert total_mash_time(steps) == 60


class TestValidateMashStep:
    """Tests for mash step validation."""

    def test_valid_infusion(self):
        step = MashStep(name="Rest", infusion_volume_l=15.0, infusion_temp_c=72.0)
        assert validate_mash_step(step) == []

    def test_valid_temperature_step(self):
        step = MashStep(name="Mash Out", type=MashStepType.TEMPERATURE, temperature_c=76.0)
        assert validate_mash_step(step) == []

    def test_missing_name(self):
        step = MashStep(
            name="  ",
            type=MashStepType.TEMPERATURE,
        )
        assert validate_mash_step(step) == ["Step name is required"]

    def test_out_of_range_values(self):
        step = MashStep(
            name="Bad", type=MashStepType.TEMPERATURE, temperature_c=101.0, duration_min=0
        )
        errors = validate_mash_step(step)
        assert "Temperature must be between 0°C and 100°C" in errors
        assert "Duration must be greater than 0 minutes" in errors

    def test_infusion_requires_volume_and_temp(self):
        errors = validate_mash_step(MashStep(name="Rest"))
        assert "Infusion volume is required and must be greater than 0" in errors
        assert "Infusion temperature is required and must be greater than 0" in errors

    def test_infusion_missing_only_volume(self):
        errors = validate_mash_step(MashStep(name="Rest", infusion_temp_c=72.0))
        assert errors == ["Infusion volume is required and must be greater than 0"]

    def test_decoction_requires_volume(self):
        step = MashStep(name="Decoct", type=MashStepType.DECOCTION)
        assert validate_mash_step(step) == [
            "Decoction volume is required and must be greater than 0"
        ]


class TestDefaultSchedules:
    """Tests for generated mash schedules."""

    def test_single_infusion(self):
        steps = create_single_infusion_schedule(5.0, 3.0)
        assert len(steps) == 1
        step = steps[0]
        assert step.temperature_c == 66.0
        assert step.duration_min == 60
        assert step.infusion_volume_l == 15.0
        assert step.infusion_temp_c == strike_temp(66.0, 3.0, 20.0, 5.0)
        assert validate_mash_step(step) == []

    def test_multi_step(self):
        steps = create_multi_step_schedule(5.0, 3.0)
        assert [s.name for s in steps] == ["Protein Rest", "Saccharification", "Mash Out"]
        assert [s.temperature_c for s in steps] == [50.0, 66.0, 76.0]
        assert total_mash_time(steps) == 70
        assert all(validate_mash_step(s) == [] for s in steps)
