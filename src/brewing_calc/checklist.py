"""
Brew day checklist generation.

Default items are target measurements and test reminders derived from a
recipe and its calculations. Users customise the list by storing items
on the recipe; those are merged over the defaults by id.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from brewing_calc.calculator import RecipeCalculator
from brewing_calc.mash import strike_temp
from brewing_calc.mash_ph import MASH_PH_RANGE
from brewing_calc.models import BrewDayChecklistItem, BrewDayStage, Recipe, RecipeCalculations
from brewing_calc.units import c_to_f, l_to_gal

STAGE_ORDER: dict[BrewDayStage, int] = {stage: i for i, stage in enumerate(BrewDayStage)}

STAGE_LABELS: dict[BrewDayStage, str] = {
    BrewDayStage.WATER_PREP: "Water Prep",
    BrewDayStage.MASH: "Mash",
    BrewDayStage.PRE_BOIL: "Pre-Boil",
    BrewDayStage.BOIL: "Boil",
    BrewDayStage.POST_BOIL: "Post-Boil",
    BrewDayStage.PITCH: "Pitch",
    BrewDayStage.FERMENTATION: "Fermentation",
    BrewDayStage.DRY_HOP: "Dry Hop",
    BrewDayStage.COLD_CRASH: "Cold Crash",
    BrewDayStage.PACKAGING: "Packaging",
}


@dataclass(frozen=True)
class ChecklistGroup:
    """Enabled checklist items for one stage."""

    stage: BrewDayStage
    label: str
    items: list[BrewDayChecklistItem]


def _fmt(value: float | None, decimals: int = 1) -> str:
    if value is None:
        return "–"
    return f"{value:.{decimals}f}"


def _temp(celsius: float) -> str:
    return f"{_fmt(celsius)}°C ({_fmt(c_to_f(celsius), 0)}°F)"


def pre_boil_gravity(recipe: Recipe, calculations: RecipeCalculations) -> float:
    """
    Gravity expected in the kettle before the boil.

    The batch gravity points are spread over the larger pre-boil volume.
    """
    if calculations.pre_boil_volume_l <= 0:
        return calculations.og
    return 1 + (calculations.og - 1) * recipe.batch_volume_l / calculations.pre_boil_volume_l


def generate_default_checklist(
    recipe: Recipe,
    calculations: RecipeCalculations | None = None,
) -> list[BrewDayChecklistItem]:
    """
    Build the default checklist for a recipe.

    Args:
        recipe: Recipe to build targets for
        calculations: Precomputed calculations; calculated when omitted

    Returns:
        Items with ids ``default-1`` onwards, in brew day order
    """
    calc = calculations if calculations is not None else RecipeCalculator().calculate(recipe)
    items: list[BrewDayChecklistItem] = []

    def add(label: str, stage: BrewDayStage, details: str) -> None:
        items.append(
            BrewDayChecklistItem(
                id=f"default-{len(items) + 1}",
                label=label,
                stage=stage,
                details=details,
            )
        )

    ph_low, ph_high = MASH_PH_RANGE
    ph_target = f"Target: {ph_low:.1f}–{ph_high:.1f}"
    if calc.estimated_mash_ph is not None:
        predicted = _fmt(calc.estimated_mash_ph, 2)
        add("Mash pH", BrewDayStage.MASH, f"Predicted: {predicted} ({ph_target})")
    else:
        add("Mash pH", BrewDayStage.MASH, ph_target)

    if recipe.mash_steps:
        strike = strike_temp(
            recipe.mash_steps[0].temperature_c,
            recipe.equipment.mash_thickness_l_per_kg,
        )
        add("Strike temperature", BrewDayStage.MASH, f"Target: {_temp(strike)}")

    add(
        "Pre-boil gravity",
        BrewDayStage.PRE_BOIL,
        f"Target: {_fmt(pre_boil_gravity(recipe, calc), 3)}",
    )
    add(
        "Pre-boil volume",
        BrewDayStage.PRE_BOIL,
        f"Target: {_fmt(calc.pre_boil_volume_l)} L "
        f"({_fmt(l_to_gal(calc.pre_boil_volume_l), 2)} gal)",
    )

    add("Original gravity (OG)", BrewDayStage.POST_BOIL, f"Target: {_fmt(calc.og, 3)}")

    if recipe.fermentation_steps:
        add(
            "Pitch temperature",
            BrewDayStage.PITCH,
            f"Target: {_temp(recipe.fermentation_steps[0].temperature_c)}",
        )

    add(
        "Collect forced fermentation test (FFT) sample",
        BrewDayStage.PITCH,
        "~200 mL of wort, pitch excess yeast, keep warm. Compare to fermenter later.",
    )

    add(
        "Check FFT sample",
        BrewDayStage.FERMENTATION,
        f"Compare FFT to expected FG: {_fmt(calc.fg, 3)}",
    )
    add(
        "Final gravity (FG) reading",
        BrewDayStage.FERMENTATION,
        f"Target: {_fmt(calc.fg, 3)}. Two stable readings 48 h apart confirm completion.",
    )

    return items


def merge_checklist(
    defaults: Sequence[BrewDayChecklistItem],
    user_items: Sequence[BrewDayChecklistItem],
) -> list[BrewDayChecklistItem]:
    """
    Merge user checklist items over generated defaults.

    A user item with a default's id replaces it in place. Other user
    items go after the last item of the same stage, or at the end when
    that stage has no items yet. Neither input is modified.
    """
    user_by_id = {item.id: item for item in user_items}
    merged = [user_by_id.get(item.id, item) for item in defaults]

    default_ids = {item.id for item in defaults}
    for extra in user_items:
        if extra.id in default_ids:
            continue
        last = next(
            (i for i in range(len(merged) - 1, -1, -1) if merged[i].stage == extra.stage),
            None,
        )
        if last is None:
            merged.append(extra)
        else:
            merged.insert(last + 1, extra)

    return merged


def build_checklist(
    recipe: Recipe,
    calculations: RecipeCalculations | None = None,
) -> list[BrewDayChecklistItem]:
    """Defaults for the recipe with the recipe's own items merged in."""
    defaults = generate_default_checklist(recipe, calculations)
    if not recipe.brew_day_checklist:
        return defaults
    return merge_checklist(defaults, recipe.brew_day_checklist)


def group_by_stage(items: Sequence[BrewDayChecklistItem]) -> list[ChecklistGroup]:
    """Group enabled items by stage, in brew day order. Empty stages are omitted."""
    groups: dict[BrewDayStage, list[BrewDayChecklistItem]] = {}
    for item in items:
        if not item.enabled:
            continue
        groups.setdefault(item.stage, []).append(item)

    return [
        ChecklistGroup(stage=stage, label=STAGE_LABELS[stage], items=stage_items)
        for stage, stage_items in sorted(groups.items(), key=lambda kv: STAGE_ORDER[kv[0]])
    ]
