"""
Mash pH prediction using a proton deficit model.

1. Classify each mashed grain and assign its distilled-water pH (pHdi).
2. Work out the effective alkalinity of the mash water in mEq.
3. Solve for the pH where the total proton balance is zero.

Malts share a single buffering capacity of about 40 mEq/kg/pH and pull
the mash towards their own pHdi. Lactic acid and baking soda added to
the mash shift the balance.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from brewing_calc.models import (
    Fermentable,
    FermentableType,
    IngredientTiming,
    MashPhAdjustment,
    OtherIngredient,
    Recipe,
    WaterProfile,
)
from brewing_calc.units import clamp, round1
from brewing_calc.water import (
    add_profiles,
    clamp_profile,
    ion_delta_from_salts,
    split_salts_proportionally,
)


class GrainPhCategory(str, Enum):
    BASE = "base"
    WHEAT = "wheat"
    MUNICH = "munich"
    CRYSTAL = "crystal"
    ROASTED = "roasted"
    ACIDULATED = "acidulated"
    ADJUNCT = "adjunct"


# Distilled-water mash pH (min, max) per category
GRAIN_DI_PH: dict[GrainPhCategory, tuple[float, float]] = {
    GrainPhCategory.BASE: (5.65, 5.72),
    GrainPhCategory.WHEAT: (5.95, 6.05),
    GrainPhCategory.MUNICH: (4.70, 5.55),
    GrainPhCategory.CRYSTAL: (4.50, 5.20),
    GrainPhCategory.ROASTED: (4.45, 4.60),
    GrainPhCategory.ACIDULATED: (3.35, 3.45),
    GrainPhCategory.ADJUNCT: (5.70, 5.80),
}

# Colour span (°L) over which pHdi falls from max to min
_COLOR_INTERPOLATION: dict[GrainPhCategory, tuple[float, float]] = {
    GrainPhCategory.MUNICH: (4.0, 200.0),
    GrainPhCategory.CRYSTAL: (10.0, 120.0),
    GrainPhCategory.ROASTED: (300.0, 500.0),
}

MALT_BUFFERING_MEQ_KG_PH = -40.0
LACTIC_88_MEQ_PER_ML = 11.81
NAHCO3_MEQ_PER_G = 11.904

BISECT_PH_LO = 3.0
BISECT_PH_HI = 8.0
BISECT_TOL = 0.001
BISECT_MAX_ITER = 50

DEFAULT_TARGET_PH = 5.4
MASH_PH_RANGE = (5.2, 5.6)
MASH_PH_IDEAL = (5.2, 5.4)

# No adjustment is recommended within this distance of the target
ADJUSTMENT_TOLERANCE = 0.02

_ROASTED_TERMS = (
    "roasted", "black malt", "black patent", "black barley", "chocolate",
    "carafa", "midnight wheat", "blackprinz", "dehusked",
)
_CRYSTAL_TERMS = (
    "crystal", "caramel", "caramunich", "carapils", "carahell", "caravienne",
    "caraaroma", "carafoam", "carastan", "carared", "special b",
)
_WHEAT_TERMS = ("wheat", "weizen")
_MUNICH_TERMS = (
    "munich", "vienna", "biscuit", "melanoidin", "melano", "aromatic", "amber",
    "brown", "victory", "special roast", "honey malt", "abbey", "brumalt",
    "cookie", "coffee malt", "red x", "red ale",
)
_ADJUNCT_TERMS = ("flaked", "torrified", "rice hull", "corn", "rice")
_NOT_MASHED_TERMS = (
    "extract", "dme", "lme", "dry malt", "liquid malt", "cane sugar", "corn sugar",
    "dextrose", "sucrose", "table sugar", "honey", "maple syrup", "molasses",
    "brown sugar", "candy sugar", "candi sugar", "invert sugar", "lactose",
    "maltodextrin",
)

_ML_PER_UNIT = {"ml": 1.0, "l": 1000.0, "tsp": 4.93, "tbsp": 14.79, "drops": 0.05}
# tsp/tbsp assume baking soda at ~0.92 g/mL
_G_PER_UNIT = {"g": 1.0, "kg": 1000.0, "oz": 28.3495, "lb": 453.592, "tsp": 4.6, "tbsp": 13.8}


@dataclass(frozen=True)
class _GrainCharge:
    weight_kg: float
    di_ph: float


def classify_grain_for_ph(
    name: str,
    color_lovibond: float,
    fermentable_type: FermentableType | None = None,
) -> GrainPhCategory:
    """
    Classify a grain by name and colour.

    Name matches are checked from most to least specific; anything over
    10 °L that matched nothing is treated as a kilned malt.
    """
    n = name.lower()

    if "acidulated" in n or "acid malt" in n or "sauermalz" in n:
        return GrainPhCategory.ACIDULATED

    if fermentable_type in (FermentableType.EXTRACT, FermentableType.SUGAR):
        return GrainPhCategory.ADJUNCT

    if any(term in n for term in _ROASTED_TERMS) or color_lovibond >= 300:
        return GrainPhCategory.ROASTED

    if any(term in n for term in _CRYSTAL_TERMS) or ("cara" in n and "carafa" not in n):
        return GrainPhCategory.CRYSTAL

    if any(term in n for term in _WHEAT_TERMS):
        return GrainPhCategory.WHEAT

    if any(term in n for term in _MUNICH_TERMS):
        return GrainPhCategory.MUNICH

    if fermentable_type == FermentableType.ADJUNCT_MASHABLE or any(
        term in n for term in _ADJUNCT_TERMS
    ):
        return GrainPhCategory.ADJUNCT

    if color_lovibond > 10:
        return GrainPhCategory.MUNICH

    return GrainPhCategory.BASE


def grain_di_ph(category: GrainPhCategory, color_lovibond: float) -> float:
    """Distilled-water pH; darker kilned, crystal and roasted malts sit lower."""
    low, high = GRAIN_DI_PH[category]
    span = _COLOR_INTERPOLATION.get(category)
    if span is None:
        return (low + high) / 2
    min_color, max_color = span
    t = clamp((color_lovibond - min_color) / (max_color - min_color), 0.0, 1.0)
    return high - t * (high - low)


def is_mashable(fermentable: Fermentable) -> bool:
    """Extracts and sugars are not present in the mash."""
    if fermentable.type in (FermentableType.EXTRACT, FermentableType.SUGAR):
        return False
    n = fermentable.name.lower()
    return not any(term in n for term in _NOT_MASHED_TERMS)


def residual_alkalinity(profile: WaterProfile) -> float:
    """
    Residual alkalinity in ppm as CaCO3.

    Positive values raise mash pH, negative values lower it.
    """
    alkalinity = profile.hco3 * 50 / 61.016
    return alkalinity - profile.ca / 2.5 - profile.mg / 3.33


def effective_alkalinity_meq_per_l(profile: WaterProfile) -> float:
    """Alkalinity less calcium and magnesium precipitated with malt phosphates."""
    return profile.hco3 / 61.016 - profile.ca / (40.078 * 3.5) - profile.mg / (24.305 * 7)


def _proton_balance(
    ph: float,
    water_alk_meq: float,
    grains: Sequence[_GrainCharge],
    acid_meq: float,
    base_meq: float,
) -> float:
    malt_deficit = sum(g.weight_kg * MALT_BUFFERING_MEQ_KG_PH * (ph - g.di_ph) for g in grains)
    return water_alk_meq + malt_deficit - acid_meq + base_meq


def _solve_ph(
    water_alk_meq: float,
    grains: Sequence[_GrainCharge],
    acid_meq: float,
    base_meq: float,
) -> float:
    lo, hi = BISECT_PH_LO, BISECT_PH_HI
    f_lo = _proton_balance(lo, water_alk_meq, grains, acid_meq, base_meq)
    f_hi = _proton_balance(hi, water_alk_meq, grains, acid_meq, base_meq)

    # No sign change: pick the bound closer to balance
    if f_lo * f_hi > 0:
        return lo if abs(f_lo) < abs(f_hi) else hi

    for _ in range(BISECT_MAX_ITER):
        mid = (lo + hi) / 2
        f_mid = _proton_balance(mid, water_alk_meq, grains, acid_meq, base_meq)
        if abs(f_mid) < BISECT_TOL or (hi - lo) / 2 < BISECT_TOL:
            return mid
        if f_mid * f_lo < 0:
            hi = mid
        else:
            lo = mid
            f_lo = f_mid

    return (lo + hi) / 2


def _grain_charges(fermentables: Sequence[Fermentable]) -> list[_GrainCharge]:
    mashed = [f for f in fermentables if is_mashable(f)]
    if sum(f.weight_kg for f in mashed) <= 0:
        return []
    return [
        _GrainCharge(
            weight_kg=f.weight_kg,
            di_ph=grain_di_ph(
                classify_grain_for_ph(f.name, f.color_lovibond, f.type), f.color_lovibond
            ),
        )
        for f in mashed
    ]


def mashable_grain_kg(fermentables: Sequence[Fermentable]) -> float:
    return sum(f.weight_kg for f in fermentables if is_mashable(f))


def acid_base_from_ingredients(ingredients: Sequence[OtherIngredient]) -> tuple[float, float]:
    """
    Lactic acid (mL of 88%) and baking soda (g) added to the mash.

    Only mash-timed additions count. Amounts in units that do not convert
    (tablets, a mass of liquid acid) are ignored.
    """
    lactic_ml = 0.0
    soda_g = 0.0
    for ing in ingredients:
        if ing.timing != IngredientTiming.MASH:
            continue
        n = ing.name.lower()
        unit = ing.unit.lower()
        if "lactic" in n:
            lactic_ml += ing.amount * _ML_PER_UNIT.get(unit, 0.0)
        elif "baking soda" in n or "sodium bicarbonate" in n or "nahco3" in n:
            soda_g += ing.amount * _G_PER_UNIT.get(unit, 0.0)
    return lactic_ml, soda_g


def mash_water_profile(
    recipe: Recipe, mash_water_l: float, sparge_water_l: float
) -> WaterProfile | None:
    """Source water plus the mash share of the salts, at mash volume."""
    chemistry = recipe.water_chemistry
    if chemistry is None:
        return None
    mash_salts, _ = split_salts_proportionally(
        chemistry.salt_additions, mash_water_l, sparge_water_l
    )
    delta = ion_delta_from_salts(mash_salts, mash_water_l)
    return clamp_profile(add_profiles(chemistry.source_profile, delta))


def calculate_mash_ph(
    recipe: Recipe, mash_water_l: float, sparge_water_l: float
) -> float | None:
    """
    Predict mash pH.

    Args:
        recipe: Recipe with fermentables and optional water chemistry
        mash_water_l: Mash water volume
        sparge_water_l: Sparge water volume, used to split salts

    Returns:
        Estimated pH, or None when nothing is mashed
    """
    grains = _grain_charges(recipe.fermentables)
    if not grains:
        return None

    water_alk_meq = 0.0
    if mash_water_l > 0:
        profile = mash_water_profile(recipe, mash_water_l, sparge_water_l)
        if profile is not None:
            water_alk_meq = effective_alkalinity_meq_per_l(profile) * mash_water_l

    lactic_ml, soda_g = acid_base_from_ingredients(recipe.other_ingredients)
    return _solve_ph(
        water_alk_meq,
        grains,
        lactic_ml * LACTIC_88_MEQ_PER_ML,
        soda_g * NAHCO3_MEQ_PER_G,
    )


def calculate_grain_only_ph(fermentables: Sequence[Fermentable]) -> float | None:
    """Mash pH in distilled water with no additions."""
    grains = _grain_charges(fermentables)
    if not grains:
        return None
    return _solve_ph(0.0, grains, 0.0, 0.0)


def calculate_ph_adjustment(
    current_ph: float,
    target_ph: float,
    total_grain_kg: float,
) -> MashPhAdjustment | None:
    """
    Acid or base needed to move the mash to the target pH.

    Returns:
        MashPhAdjustment with either lactic acid or baking soda set, or
        None when already within 0.02 of the target
    """
    delta = current_ph - target_ph
    if abs(delta) < ADJUSTMENT_TOLERANCE:
        return None

    meq_needed = total_grain_kg * abs(MALT_BUFFERING_MEQ_KG_PH) * abs(delta)
    if delta > 0:
        return MashPhAdjustment(
            target_ph=target_ph,
            lactic_acid_88_ml=round1(meq_needed / LACTIC_88_MEQ_PER_ML),
        )
    return MashPhAdjustment(
        target_ph=target_ph,
        baking_soda_g=round1(meq_needed / NAHCO3_MEQ_PER_G),
    )
