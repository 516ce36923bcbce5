"""
Bitterness model (Tinseth).

    utilisation = 1.65 x 0.000125^(OG - 1) x (1 - e^(-0.04 t)) / 4.15
    IBU         = grams x AA% x 10 / litres x utilisation

First wort hops get extra minutes, mash hops a fraction of boil
utilisation and whirlpool hops a temperature-scaled utilisation that is
zero at or below 60 °C. Dry hops add no isomerised bitterness unless the
humulinone estimate is enabled in the configuration.
"""

import math
from collections.abc import Sequence

from brewing_calc.config import DEFAULT_CONFIG, CalculationConfig
from brewing_calc.models import Hop, HopUse
from brewing_calc.units import clamp, round1


def tinseth_utilization(
    minutes: float,
    wort_gravity: float,
    config: CalculationConfig = DEFAULT_CONFIG,
) -> float:
    """Fraction of alpha acids isomerised after boiling for ``minutes``."""
    gravity_factor = config.tinseth_bigness_factor * math.pow(
        config.tinseth_bigness_base, wort_gravity - 1.0
    )
    time_factor = (
        1.0 - math.exp(-config.tinseth_time_rate * minutes)
    ) / config.tinseth_time_divisor
    return gravity_factor * time_factor


def whirlpool_utilization(
    minutes: float,
    temp_c: float,
    wort_gravity: float,
    config: CalculationConfig = DEFAULT_CONFIG,
) -> float:
    """Tinseth utilisation scaled down for a sub-boiling whirlpool."""
    if temp_c <= config.whirlpool_min_temp_c:
        return 0.0
    clamped = clamp(temp_c, config.whirlpool_min_temp_c, 100.0)
    temp_factor = math.pow(
        (clamped - config.whirlpool_min_temp_c) / config.whirlpool_temp_span_c,
        config.whirlpool_exponent,
    )
    return tinseth_utilization(minutes, wort_gravity, config) * temp_factor


def dry_hop_ibu(hop: Hop, batch_volume_l: float) -> float:
    """
    Estimate bitterness from a dry hop charge.

    Humulinones (about 0.4% of pellet weight, 75% extracted, less at high
    rates) read as 0.54 IBU per mg/L; roughly 1% of alpha acids dissolve
    and read as 0.62 IBU per mg/L.
    """
    if batch_volume_l <= 0:
        return 0.0
    rate_g_per_l = hop.grams / batch_volume_l

    humulinone_mg = hop.grams * 0.004 * 1000.0
    extraction = 0.75 * math.exp(-0.04 * max(0.0, rate_g_per_l - 4.0))
    humulinone_ibu = humulinone_mg * extraction / batch_volume_l * 0.54

    dissolved_aa_mg = hop.grams * (hop.alpha_acid / 100.0) * 1000.0 * 0.01
    alpha_acid_ibu = dissolved_aa_mg / batch_volume_l * 0.62

    return humulinone_ibu + alpha_acid_ibu


def hop_ibu(
    hop: Hop,
    og: float,
    batch_volume_l: float,
    config: CalculationConfig = DEFAULT_CONFIG,
) -> float:
    """
    Bitterness contributed by a single hop addition (unrounded).

    Args:
        hop: Hop addition
        og: Wort gravity used for the utilisation correction
        batch_volume_l: Volume the iso-alpha acids end up in
        config: Utilisation constants

    Returns:
        IBU for this addition, 0 for a non-positive volume
    """
    if batch_volume_l <= 0 or hop.grams <= 0:
        return 0.0

    if hop.use == HopUse.DRY_HOP:
        return dry_hop_ibu(hop, batch_volume_l) if config.dry_hop_bitterness else 0.0

    if hop.use == HopUse.BOIL:
        utilization = tinseth_utilization(hop.time_min, og, config)
    elif hop.use == HopUse.FIRST_WORT:
        utilization = tinseth_utilization(hop.time_min + config.first_wort_bonus_min, og, config)
    elif hop.use == HopUse.WHIRLPOOL:
        temp_c = (
            hop.whirlpool_temp_c
            if hop.whirlpool_temp_c is not None
            else config.whirlpool_default_temp_c
        )
        utilization = whirlpool_utilization(
            hop.steep_minutes(config.whirlpool_default_time_min), temp_c, og, config
        )
    elif hop.use == HopUse.MASH:
        minutes = hop.time_min or config.mash_hop_default_time_min
        utilization = tinseth_utilization(minutes, og, config) * config.mash_hop_factor
    else:
        utilization = 0.0

    mg_per_l = hop.grams * hop.alpha_acid * config.tinseth_mg_per_l_scale / batch_volume_l
    return mg_per_l * utilization


def calculate_ibu(
    hops: Sequence[Hop],
    og: float,
    batch_volume_l: float,
    config: CalculationConfig = DEFAULT_CONFIG,
) -> float:
    """Total recipe bitterness, rounded to one decimal."""
    if not hops or batch_volume_l <= 0:
        return 0.0
    total = sum(hop_ibu(hop, og, batch_volume_l, config) for hop in hops)
    return round1(total)
