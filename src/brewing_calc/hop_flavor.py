"""
Hop flavor estimation.

An empirical sensory model: each addition contributes its flavor radar
weighted by dose (g/L) and an aroma retention factor for its timing.
The summed weight is mapped to an overall intensity that saturates at 5.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from brewing_calc.models import Hop, HopFlavor, HopUse
from brewing_calc.units import clamp

AROMA_DECAY_PER_MINUTE = 0.05
OVERALL_INTENSITY_LAMBDA = 0.7

DEFAULT_WHIRLPOOL_TEMP_C = 80.0
DEFAULT_WHIRLPOOL_TIME_MIN = 15.0
DEFAULT_DRY_HOP_START_DAY = 4.0

FLAVOR_AXES = HopFlavor.axes()


@dataclass(frozen=True)
class HopFlavorContribution:
    """One hop's flavor radar scaled by its aroma weight."""

    name: str
    flavor: HopFlavor
    weight: float


def _dry_hop_start_adjustment(start_day: float) -> float:
    # CO2 scrubbing early, staling risk late
    d = max(0.0, start_day)
    if d <= 2:
        return 0.9
    if d <= 7:
        return 1.0
    if d <= 14:
        return 0.95
    return 0.9


def timing_aroma_factor(hop: Hop) -> float:
    """
    Fraction of hop aroma retained for an addition's timing.

    Returns:
        Retention factor; dry hops and whirlpools retain most, long boils
        very little (never below 0.03).
    """
    if hop.use == HopUse.DRY_HOP:
        days = hop.dry_hop_days
        if not days or days <= 0:
            return 0.6
        t = min(7.0, days)
        base = 0.6 + 0.4 * (1.0 - math.exp(-0.6 * t))
        start_day = (
            hop.dry_hop_start_day
            if hop.dry_hop_start_day is not None
            else DEFAULT_DRY_HOP_START_DAY
        )
        return base * _dry_hop_start_adjustment(start_day)

    if hop.use == HopUse.WHIRLPOOL:
        temp = (
            hop.whirlpool_temp_c
            if hop.whirlpool_temp_c is not None
            else DEFAULT_WHIRLPOOL_TEMP_C
        )
        time = hop.steep_minutes(DEFAULT_WHIRLPOOL_TIME_MIN)
        temp_factor = 0.6 + 0.4 * clamp((95.0 - temp) / 20.0, 0.0, 1.0)
        time_factor = 1.0 - math.exp(-0.06 * max(0.0, time))
        return min(1.0, 0.5 + 0.5 * temp_factor * time_factor)

    if hop.use == HopUse.BOIL:
        return max(0.03, math.exp(-AROMA_DECAY_PER_MINUTE * max(0.0, hop.time_min)))

    if hop.use == HopUse.FIRST_WORT:
        return 0.08

    if hop.use == HopUse.MASH:
        return 0.05

    return 0.5


def _aroma_weight(hop: Hop, batch_volume_l: float) -> float:
    dose = hop.grams / batch_volume_l if batch_volume_l > 0 else 0.0
    return dose * timing_aroma_factor(hop)


def _flavor_for(hop: Hop, flavors: Mapping[str, HopFlavor] | None) -> HopFlavor:
    if hop.flavor is not None:
        return hop.flavor
    if flavors is not None and hop.name in flavors:
        return flavors[hop.name]
    return HopFlavor()


def estimate_recipe_hop_flavor(
    hops: Sequence[Hop],
    batch_volume_l: float,
    flavors: Mapping[str, HopFlavor] | None = None,
) -> HopFlavor:
    """
    Estimate the hop-driven flavor radar of a finished beer.

    Hops without a flavor radar still count towards overall intensity.

    Args:
        hops: Hop additions
        batch_volume_l: Batch volume used for dose
        flavors: Optional name -> radar lookup for hops lacking an inline flavor

    Returns:
        HopFlavor with every axis in [0, 5]; all zero when there is no
        aroma contribution.
    """
    overall_weight = 0.0
    axis_sum = dict.fromkeys(FLAVOR_AXES, 0.0)

    for hop in hops:
        if not hop.name:
            continue
        weight = _aroma_weight(hop, batch_volume_l)
        if weight <= 0:
            continue
        flavor = _flavor_for(hop, flavors)
        overall_weight += weight
        for axis in FLAVOR_AXES:
            axis_sum[axis] += weight * (getattr(flavor, axis) / 5.0)

    if overall_weight <= 0:
        return HopFlavor()

    magnitude = 5.0 * (1.0 - math.exp(-OVERALL_INTENSITY_LAMBDA * overall_weight))
    return HopFlavor(
        **{
            axis: clamp(magnitude * axis_sum[axis] / overall_weight, 0.0, 5.0)
            for axis in FLAVOR_AXES
        }
    )


def estimate_per_hop_contributions(
    hops: Sequence[Hop],
    batch_volume_l: float,
    flavors: Mapping[str, HopFlavor] | None = None,
) -> list[HopFlavorContribution]:
    """Per-hop radar rows, each axis scaled by min(1, aroma weight)."""
    rows = []
    for hop in hops:
        if not hop.name:
            continue
        weight = _aroma_weight(hop, batch_volume_l)
        flavor = _flavor_for(hop, flavors)
        scale = min(1.0, weight)
        scaled = HopFlavor(**{axis: getattr(flavor, axis) * scale for axis in FLAVOR_AXES})
        rows.append(HopFlavorContribution(name=hop.name, flavor=scaled, weight=weight))
    return rows
