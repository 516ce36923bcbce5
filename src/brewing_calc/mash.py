"""
Mash schedule thermodynamics.

Strike and infusion temperatures come from simple heat-balance equations
with water taken as 1 kg/L. Grain heat capacity is expressed relative to
water: 0.41 in the simplified single-infusion formula and in the mash
heat capacity for step infusions, 0.38 in the full strike heat balance.
The two constants are kept as they are; the formulas are only close, not
identical, once a grain bill exists.
"""

from collections.abc import Sequence

from brewing_calc.models import MashStep, MashStepType
from brewing_calc.units import round1

GRAIN_HEAT_CAPACITY_SIMPLE = 0.41
GRAIN_HEAT_CAPACITY_FULL = 0.38
WATER_HEAT_CAPACITY = 1.0

DEFAULT_GRAIN_TEMP_C = 20.0


def strike_temp(
    target_mash_temp_c: float,
    mash_thickness_l_per_kg: float,
    grain_temp_c: float = DEFAULT_GRAIN_TEMP_C,
    total_grain_kg: float = 0.0,
) -> float:
    """
    Calculate strike water temperature for a single infusion.

    Args:
        target_mash_temp_c: Desired mash temperature
        mash_thickness_l_per_kg: Water to grain ratio
        grain_temp_c: Temperature of the dry grain
        total_grain_kg: Grain bill weight; 0 selects the simplified formula

    Returns:
        Strike temperature in °C, rounded to one decimal. When the
        thickness is not positive there is no water to heat and the
        target is returned.
    """
    if mash_thickness_l_per_kg <= 0:
        return round1(target_mash_temp_c)

    delta = target_mash_temp_c - grain_temp_c
    water_kg = total_grain_kg * mash_thickness_l_per_kg

    if total_grain_kg <= 0 or water_kg <= 0:
        strike = delta * (GRAIN_HEAT_CAPACITY_SIMPLE / mash_thickness_l_per_kg) + target_mash_temp_c
    else:
        strike = target_mash_temp_c + (
            total_grain_kg * GRAIN_HEAT_CAPACITY_FULL * delta
        ) / (water_kg * WATER_HEAT_CAPACITY)

    return round1(strike)


def infusion_temp(
    current_temp_c: float,
    target_temp_c: float,
    current_mash_volume_l: float,
    infusion_volume_l: float,
    total_grain_kg: float,
) -> float:
    """
    Calculate the water temperature needed to raise a mash to a new step.

    Returns target_temp_c unchanged when no water is infused.
    """
    if infusion_volume_l <= 0:
        return target_temp_c

    mash_heat_capacity = total_grain_kg * GRAIN_HEAT_CAPACITY_SIMPLE + current_mash_volume_l
    temp = (target_temp_c - current_temp_c) * mash_heat_capacity / infusion_volume_l + target_temp_c
    return round1(temp)


def mash_volume_at_step(
    steps: Sequence[MashStep],
    total_grain_kg: float,
    grain_absorption_l_per_kg: float,
) -> float:
    """Free liquid in the mash after all infusions, less grain absorption."""
    infused = sum(
        step.infusion_volume_l or 0.0
        for step in steps
        if step.type == MashStepType.INFUSION
    )
    volume = infused - total_grain_kg * grain_absorption_l_per_kg
    return round1(max(0.0, volume))


def total_infusion_water(steps: Sequence[MashStep]) -> float:
    """Sum of water added by infusion steps."""
    return round1(
        sum(
            step.infusion_volume_l or 0.0
            for step in steps
            if step.type == MashStepType.INFUSION
        )
    )


def total_mash_time(steps: Sequence[MashStep]) -> float:
    return sum(max(0.0, step.duration_min) for step in steps)


def validate_mash_step(step: MashStep) -> list[str]:
    """
    Check a mash step for problems.

    Returns:
        Human-readable messages; an empty list means the step is valid.
    """
    errors: list[str] = []

    if not step.name or not step.name.strip():
        errors.append("Step name is required")

    if step.temperature_c < 0 or step.temperature_c > 100:
        errors.append("Temperature must be between 0°C and 100°C")

    if step.duration_min <= 0:
        errors.append("Duration must be greater than 0 minutes")

    if step.type == MashStepType.INFUSION:
        if step.infusion_volume_l is None or step.infusion_volume_l <= 0:
            errors.append("Infusion volume is required and must be greater than 0")
        if step.infusion_temp_c is None or step.infusion_temp_c <= 0:
            errors.append("Infusion temperature is required and must be greater than 0")

    if step.type == MashStepType.DECOCTION:
        if step.decoction_volume_l is None or step.decoction_volume_l <= 0:
            errors.append("Decoction volume is required and must be greater than 0")

    return errors


# === Default schedules ===


def create_single_infusion_schedule(
    total_grain_kg: float,
    mash_thickness_l_per_kg: float,
    grain_temp_c: float = DEFAULT_GRAIN_TEMP_C,
) -> list[MashStep]:
    """A single 66°C, 60 minute saccharification rest."""
    target = 66.0
    return [
        MashStep(
            name="Saccharification",
            type=MashStepType.INFUSION,
            temperature_c=target,
            duration_min=60,
            infusion_volume_l=round1(total_grain_kg * mash_thickness_l_per_kg),
            infusion_temp_c=strike_temp(
                target, mash_thickness_l_per_kg, grain_temp_c, total_grain_kg
            ),
        )
    ]


def create_multi_step_schedule(
    total_grain_kg: float,
    mash_thickness_l_per_kg: float,
    grain_temp_c: float = DEFAULT_GRAIN_TEMP_C,
) -> list[MashStep]:
    """Protein rest, saccharification and mash out."""
    protein_rest = 50.0
    return [
        MashStep(
            name="Protein Rest",
            type=MashStepType.INFUSION,
            temperature_c=protein_rest,
            duration_min=15,
            infusion_volume_l=round1(total_grain_kg * mash_thickness_l_per_kg),
            infusion_temp_c=strike_temp(
                protein_rest, mash_thickness_l_per_kg, grain_temp_c, total_grain_kg
            ),
        ),
        MashStep(
            name="Saccharification",
            type=MashStepType.TEMPERATURE,
            temperature_c=66.0,
            duration_min=45,
        ),
        MashStep(
            name="Mash Out",
            type=MashStepType.TEMPERATURE,
            temperature_c=76.0,
            duration_min=10,
        ),
    ]
