"""
Colour model (Morey).

    MCU = sum(lb x °L) / US gal
    SRM = 1.4922 x MCU^0.6859
"""

import math
from collections.abc import Sequence

from brewing_calc.config import DEFAULT_CONFIG, CalculationConfig
from brewing_calc.models import Fermentable
from brewing_calc.units import GAL_PER_L, LB_PER_KG, srm_to_ebc


def calculate_mcu(fermentables: Sequence[Fermentable], volume_l: float) -> float:
    """Malt colour units; 0 for a non-positive volume."""
    if volume_l <= 0:
        return 0.0
    volume_gal = volume_l * GAL_PER_L
    return sum(f.weight_kg * LB_PER_KG * f.color_lovibond for f in fermentables) / volume_gal


def calculate_srm(
    fermentables: Sequence[Fermentable],
    volume_l: float,
    config: CalculationConfig = DEFAULT_CONFIG,
) -> float:
    """Beer colour in SRM. Grows sub-linearly with MCU."""
    if not fermentables or volume_l <= 0:
        return 0.0
    mcu = calculate_mcu(fermentables, volume_l)
    if mcu <= 0:
        return 0.0
    return config.morey_factor * math.pow(mcu, config.morey_exponent)


def calculate_ebc(
    fermentables: Sequence[Fermentable],
    volume_l: float,
    config: CalculationConfig = DEFAULT_CONFIG,
) -> float:
    return srm_to_ebc(calculate_srm(fermentables, volume_l, config))
