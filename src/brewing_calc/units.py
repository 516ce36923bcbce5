"""
Unit and physical primitives for recipe calculations.

All internal representations use metric base units:
- Mass: kilograms for fermentables, grams for hops
- Volume: litres
- Temperature: Celsius
- Colour: SRM (EBC derived)
- Gravity: specific gravity, or gravity units (GU = points x 1000)

Fermentable potential is carried as GU per kg per litre (GU·L/kg):
1 kg of extract dissolved to 1 L of wort adds this many gravity points.
"""

import math
from enum import Enum
from typing import TypeVar

from brewing_calc.exceptions import UnitConversionError


class MassUnit(str, Enum):
    """Mass/weight units."""

    KG = "kg"
    G = "g"
    LB = "lb"
    OZ = "oz"


class VolumeUnit(str, Enum):
    """Volume units."""

    L = "l"
    ML = "ml"
    GAL_US = "gal_us"
    GAL_UK = "gal_uk"
    QT = "qt"


class TemperatureUnit(str, Enum):
    """Temperature units."""

    C = "c"
    F = "f"
    K = "k"


GRAMS_PER_UNIT: dict[MassUnit, float] = {
    MassUnit.KG: 1000.0,
    MassUnit.G: 1.0,
    MassUnit.LB: 453.59237,
    MassUnit.OZ: 28.349523125,
}

LITRES_PER_UNIT: dict[VolumeUnit, float] = {
    VolumeUnit.L: 1.0,
    VolumeUnit.ML: 0.001,
    VolumeUnit.GAL_US: 3.785411784,
    VolumeUnit.GAL_UK: 4.54609,
    VolumeUnit.QT: 0.946352946,
}

LB_PER_KG = GRAMS_PER_UNIT[MassUnit.KG] / GRAMS_PER_UNIT[MassUnit.LB]
GAL_PER_L = 1.0 / LITRES_PER_UNIT[VolumeUnit.GAL_US]

# PPG (points per pound per US gallon) -> GU·L/kg
PPG_TO_GU_PER_KG_L = LB_PER_KG / GAL_PER_L

# Sucrose, the 100% extract reference
SUCROSE_PPG = 46.214

SRM_TO_EBC = 1.97

E = TypeVar("E", bound=Enum)


def _parse_unit(unit: E | str, enum_cls: type[E], kind: str) -> E:
    if isinstance(unit, enum_cls):
        return unit
    try:
        return enum_cls(str(unit).lower())
    except ValueError as e:
        raise UnitConversionError(f"Unknown {kind} unit: {unit}") from e


def convert_mass(
    value: float,
    from_unit: MassUnit | str,
    to_unit: MassUnit | str,
) -> float:
    """
    Convert between mass units.

    Raises:
        UnitConversionError: If either unit is unknown
    """
    src = _parse_unit(from_unit, MassUnit, "mass")
    dst = _parse_unit(to_unit, MassUnit, "mass")
    return value * GRAMS_PER_UNIT[src] / GRAMS_PER_UNIT[dst]


def convert_volume(
    value: float,
    from_unit: VolumeUnit | str,
    to_unit: VolumeUnit | str,
) -> float:
    """
    Convert between volume units.

    Raises:
        UnitConversionError: If either unit is unknown
    """
    src = _parse_unit(from_unit, VolumeUnit, "volume")
    dst = _parse_unit(to_unit, VolumeUnit, "volume")
    return value * LITRES_PER_UNIT[src] / LITRES_PER_UNIT[dst]


def convert_temperature(
    value: float,
    from_unit: TemperatureUnit | str,
    to_unit: TemperatureUnit | str,
) -> float:
    """
    Convert between temperature units.

    Raises:
        UnitConversionError: If either unit is unknown
    """
    src = _parse_unit(from_unit, TemperatureUnit, "temperature")
    dst = _parse_unit(to_unit, TemperatureUnit, "temperature")

    if src == TemperatureUnit.F:
        celsius = (value - 32) * 5 / 9
    elif src == TemperatureUnit.K:
        celsius = value - 273.15
    else:
        celsius = value

    if dst == TemperatureUnit.F:
        return celsius * 9 / 5 + 32
    if dst == TemperatureUnit.K:
        return celsius + 273.15
    return celsius


def c_to_f(c: float) -> float:
    """Convert Celsius to Fahrenheit."""
    return convert_temperature(c, TemperatureUnit.C, TemperatureUnit.F)


def f_to_c(f: float) -> float:
    """Convert Fahrenheit to Celsius."""
    return convert_temperature(f, TemperatureUnit.F, TemperatureUnit.C)


def l_to_gal(litres: float) -> float:
    """Convert litres to US gallons."""
    return convert_volume(litres, VolumeUnit.L, VolumeUnit.GAL_US)


def kg_to_lb(kg: float) -> float:
    """Convert kilograms to pounds."""
    return convert_mass(kg, MassUnit.KG, MassUnit.LB)


# Colour

def srm_to_ebc(srm: float) -> float:
    """
    Convert SRM to EBC, rounded to one decimal and floored at 0.

    EBC = SRM x 1.97
    """
    return max(0.0, round1(srm * SRM_TO_EBC))


def ebc_to_srm(ebc: float) -> float:
    """Convert EBC to SRM."""
    return ebc / SRM_TO_EBC


def lovibond_to_srm(lovibond: float) -> float:
    """
    Convert a grain's Lovibond rating to SRM.

    SRM = 1.3546 x Lovibond - 0.76
    """
    return (1.3546 * lovibond) - 0.76


def srm_to_lovibond(srm: float) -> float:
    """Convert SRM to Lovibond."""
    return (srm + 0.76) / 1.3546


# Gravity

def sg_to_points(sg: float) -> float:
    """Specific gravity to gravity points (1.050 -> 50.0)."""
    return (sg - 1.0) * 1000.0


def points_to_sg(points: float) -> float:
    """Gravity points to specific gravity (50.0 -> 1.050)."""
    return 1.0 + points / 1000.0


def sg_to_plato(sg: float) -> float:
    """
    Convert specific gravity to degrees Plato.

    Cubic fit accurate to roughly 0.02 °P across the beer range.
    """
    return -616.868 + 1111.14 * sg - 630.272 * sg**2 + 135.997 * sg**3


def plato_to_sg(plato: float) -> float:
    """Convert degrees Plato to specific gravity."""
    return 259 / (259 - plato)


# Extract potential

def ppg_to_gu(ppg: float) -> float:
    """Points per pound per gallon to GU·L/kg (36 PPG -> ~300)."""
    return ppg * PPG_TO_GU_PER_KG_L


def gu_to_ppg(gu: float) -> float:
    """GU·L/kg to points per pound per gallon."""
    return gu / PPG_TO_GU_PER_KG_L


def yield_to_gu(yield_fraction: float) -> float:
    """Extract yield fraction (0.80 = 80% of sucrose) to GU·L/kg."""
    return ppg_to_gu(yield_fraction * SUCROSE_PPG)


# Helpers

def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def round1(value: float) -> float:
    """Round to one decimal place, halves rounding up."""
    return math.floor(value * 10 + 0.5) / 10


def finite_or(value: float, default: float = 0.0) -> float:
    """Return value if finite, otherwise default."""
    return value if math.isfinite(value) else default
