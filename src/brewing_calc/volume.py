"""
Volume and loss model.

Works backwards from the volume that should reach the fermenter:

    post-boil = batch + fermenter loss + chiller loss + kettle loss
                + hop absorption
    pre-boil  = post-boil / (1 - shrinkage) + boil-off rate x boil hours

Values are kept unrounded here; rounding happens when the calculations
record is built.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from brewing_calc.models import Equipment, Hop, Recipe


@dataclass(frozen=True)
class VolumeBreakdown:
    """Unrounded volumes through the brewing process, in litres."""

    batch_l: float
    post_boil_l: float
    pre_boil_l: float
    boil_off_l: float
    hop_absorption_l: float
    mash_water_l: float
    sparge_water_l: float

    @property
    def total_water_l(self) -> float:
        return self.mash_water_l + self.sparge_water_l


def hop_absorption_l(hops: Iterable[Hop], equipment: Equipment) -> float:
    """Wort retained by hops left in the kettle (boil, whirlpool, first wort)."""
    kettle_kg = sum(h.grams for h in hops if h.is_kettle_addition) / 1000.0
    return kettle_kg * equipment.hops_absorption_l_per_kg


def boil_off_l(equipment: Equipment) -> float:
    return equipment.boil_off_rate_l_per_hour * equipment.boil_time_min / 60.0


def post_boil_volume(
    batch_volume_l: float,
    equipment: Equipment,
    hops: Iterable[Hop] = (),
) -> float:
    """Volume at the end of the boil, before chilling."""
    return (
        batch_volume_l
        + equipment.fermenter_loss_l
        + equipment.chiller_loss_l
        + equipment.kettle_loss_l
        + hop_absorption_l(hops, equipment)
    )


def pre_boil_volume(post_boil_l: float, equipment: Equipment) -> float:
    """Volume to collect in the kettle before the boil starts."""
    shrink = equipment.cooling_shrinkage_percent / 100.0
    hot_volume = post_boil_l / (1.0 - shrink) if shrink < 1.0 else post_boil_l
    return hot_volume + boil_off_l(equipment)


def mash_water(total_grain_kg: float, equipment: Equipment) -> float:
    """Strike water for the grain bill plus mash tun deadspace."""
    return total_grain_kg * equipment.mash_thickness_l_per_kg + equipment.mash_tun_deadspace_l


def sparge_water(pre_boil_l: float, total_grain_kg: float, equipment: Equipment) -> float:
    """
    Sparge water needed to reach the pre-boil volume.

    First runnings are the mash water less what the grain holds back and
    what stays below the false bottom. Never negative.
    """
    first_runnings = (
        mash_water(total_grain_kg, equipment)
        - total_grain_kg * equipment.grain_absorption_l_per_kg
        - equipment.mash_tun_deadspace_l
    )
    return max(0.0, pre_boil_l - first_runnings)


def calculate_volumes(recipe: Recipe) -> VolumeBreakdown:
    """Compute every process volume for a recipe."""
    equipment = recipe.equipment
    grain_kg = recipe.total_grain_kg

    post_boil = post_boil_volume(recipe.batch_volume_l, equipment, recipe.hops)
    pre_boil = pre_boil_volume(post_boil, equipment)
    mash = mash_water(grain_kg, equipment)

    return VolumeBreakdown(
        batch_l=recipe.batch_volume_l,
        post_boil_l=post_boil,
        pre_boil_l=pre_boil,
        boil_off_l=boil_off_l(equipment),
        hop_absorption_l=hop_absorption_l(recipe.hops, equipment),
        mash_water_l=mash,
        sparge_water_l=sparge_water(pre_boil, grain_kg, equipment),
    )
