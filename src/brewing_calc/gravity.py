"""
Gravity and fermentation model.

Original gravity comes from total fermentable extract spread over a wort
volume; final gravity and ABV follow from yeast attenuation. Nutrition
estimates and grist percentage helpers live here as well since they are
pure functions of the same quantities.
"""

from collections.abc import Iterable, Mapping, Sequence

from brewing_calc.models import Fermentable
from brewing_calc.units import clamp, round1, sg_to_plato

ABV_FACTOR = 131.25

SERVING_L = 0.355


def fermentable_efficiency(fermentable: Fermentable, mash_efficiency_percent: float) -> float:
    """Fraction of potential extract recovered for a fermentable."""
    if fermentable.type.efficiency_applies:
        return clamp(mash_efficiency_percent / 100.0, 0.0, 1.0)
    return 1.0


def gravity_units(fermentables: Iterable[Fermentable], mash_efficiency_percent: float) -> float:
    """Total extract as GU·L: gravity points if dissolved in one litre."""
    return sum(
        f.weight_kg * f.potential_gu * fermentable_efficiency(f, mash_efficiency_percent)
        for f in fermentables
    )


def calculate_og(
    fermentables: Sequence[Fermentable],
    volume_l: float,
    mash_efficiency_percent: float,
) -> float:
    """
    Predict original gravity.

    OG = 1 + sum(kg x GU·L/kg x efficiency) / volume / 1000

    Returns:
        Specific gravity; 1.0 when there is nothing to dissolve or no volume.
    """
    if not fermentables or volume_l <= 0:
        return 1.0
    return 1.0 + gravity_units(fermentables, mash_efficiency_percent) / volume_l / 1000.0


def fermentable_share(fermentables: Sequence[Fermentable], mash_efficiency_percent: float) -> float:
    """
    Fraction of the extract that yeast can ferment.

    Weighted by each fermentable's contribution to OG. Fermentables
    without an explicit fermentability count as fully fermentable.
    """
    total = gravity_units(fermentables, mash_efficiency_percent)
    if total <= 0:
        return 1.0
    fermentable = sum(
        f.weight_kg
        * f.potential_gu
        * fermentable_efficiency(f, mash_efficiency_percent)
        * (f.fermentability if f.fermentability is not None else 1.0)
        for f in fermentables
    )
    return fermentable / total


def calculate_fg(og: float, attenuation: float, fermentable_fraction: float = 1.0) -> float:
    """
    FG = 1 + (OG - 1) x (1 - attenuation x fermentable_fraction).

    Attenuation only applies to the fermentable part of the extract; with
    the default fraction of 1 this is the plain attenuation formula.
    """
    return 1.0 + (og - 1.0) * (1.0 - attenuation * fermentable_fraction)


def calculate_abv(og: float, fg: float) -> float:
    """
    Simple ABV approximation.

    Linear in (OG - FG); negative when FG exceeds OG.
    """
    return (og - fg) * ABV_FACTOR


def calculate_nutrition(og: float, fg: float) -> tuple[float, float]:
    """
    Estimate calories and carbohydrates per 355 mL serving.

    Uses real extract and alcohol by weight derived from Plato values.

    Returns:
        (calories, carbohydrate grams), both floored at 0
    """
    original_extract = sg_to_plato(og)
    apparent_extract = sg_to_plato(fg)
    real_extract = 0.1808 * original_extract + 0.8192 * apparent_extract
    abw = (original_extract - real_extract) / (2.0665 - 0.010665 * original_extract)

    calories_per_l = (6.9 * abw + 4.0 * (real_extract - 0.1)) * fg * 10.0
    carbs_per_l = (real_extract - 0.1) * fg * 10.0

    calories = max(0.0, float(round(calories_per_l * SERVING_L)))
    carbs = max(0.0, round1(carbs_per_l * SERVING_L))
    return calories, carbs


# === Grist helpers ===


def fermentable_percentages(fermentables: Sequence[Fermentable]) -> dict[str, float]:
    """Share of the grist by weight for each fermentable id, one decimal."""
    total = sum(f.weight_kg for f in fermentables)
    return {
        f.id: round1(f.weight_kg / total * 100.0) if total > 0 else 0.0
        for f in fermentables
    }


def total_percent(fermentables: Sequence[Fermentable], percent_by_id: Mapping[str, float]) -> float:
    return sum(percent_by_id.get(f.id, 0.0) for f in fermentables)


def weights_from_percentages(
    fermentables: Sequence[Fermentable],
    percent_by_id: Mapping[str, float],
    target_abv: float,
    batch_volume_l: float,
    mash_efficiency_percent: float,
    attenuation: float,
) -> list[Fermentable]:
    """
    Size a grist to hit a target ABV.

    Inverts ABV = (OG - 1) x 131.25 x attenuation for the target OG, then
    splits the extract needed across fermentables by percentage.
    Attenuation is clamped to [0.4, 0.98].

    Returns:
        New fermentables with weights rounded to grams. The input is
        returned unchanged when the target cannot be reached (no volume,
        no efficiency or no extract in the chosen percentages).
    """
    efficiency = clamp(mash_efficiency_percent / 100.0, 0.0, 1.0)
    attenuation = clamp(attenuation, 0.4, 0.98)
    if batch_volume_l <= 0 or efficiency <= 0:
        return list(fermentables)

    og_target = 1.0 + max(0.0, target_abv) / (ABV_FACTOR * attenuation)
    gu_needed = (og_target - 1.0) * 1000.0 * batch_volume_l

    gu_per_kg = sum(
        max(0.0, percent_by_id.get(f.id, 0.0)) / 100.0
        * f.potential_gu
        * fermentable_efficiency(f, mash_efficiency_percent)
        for f in fermentables
    )
    if gu_per_kg <= 0:
        return list(fermentables)

    total_kg = gu_needed / gu_per_kg
    return [
        f.model_copy(
            update={
                "weight_kg": round(total_kg * max(0.0, percent_by_id.get(f.id, 0.0)) / 100.0, 3)
            }
        )
        for f in fermentables
    ]
