"""
Yeast starter planning.

Estimates the cells a yeast package provides, the cells a batch needs,
and how each starter step grows the population. Cell counts are in
billions throughout.

Two growth models are supported: the White model, a power-law fit of
growth against inoculation rate that saturates at 200 B/L, and the
Braukaiser model, which grows a fixed number of cells per gram of
extract.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime

from brewing_calc.calculator import calculate
from brewing_calc.models import (
    Recipe,
    StarterGrowthModel,
    StarterInfo,
    StarterStep,
    YeastPackage,
)
from brewing_calc.units import GRAMS_PER_UNIT, MassUnit, clamp, l_to_gal, sg_to_plato

logger = logging.getLogger(__name__)

DME_PPG = 45.0
MIN_DIVISOR = 1e-4

VIABILITY_LOSS_PER_DAY = 0.007

DRY_SACHET_G = 11.0
DRY_BILLION_PER_G = 6.0
LIQUID_PACK_BILLION = {YeastPackage.LIQUID: 100.0, YeastPackage.LIQUID_LARGE: 200.0}

ALE_PITCH_RATE = 0.75

WHITE_COEFF_A = 12.54793776
WHITE_EXPONENT = -0.4594858324
WHITE_COEFF_C = -0.9994994906
WHITE_SHAKING_BOOST = 0.5
WHITE_MAX_GROWTH = 6.0
WHITE_SATURATION_BILLION_PER_L = 200.0

BRAUKAISER_BILLION_PER_G_DME = 1.4


@dataclass(frozen=True)
class StarterStepResult:
    """DME needed for a step and the cell count at its end."""

    id: str
    dme_g: float
    end_billion: float


@dataclass(frozen=True)
class StarterPlan:
    """Cells needed against cells grown through the starter steps."""

    required_billion: float
    available_billion: float
    steps: tuple[StarterStepResult, ...]
    final_billion: float
    total_volume_l: float
    total_dme_g: float

    @property
    def is_sufficient(self) -> bool:
        return self.final_billion >= self.required_billion


def dme_grams_for_gravity(volume_l: float, gravity: float, dme_ppg: float = DME_PPG) -> float:
    """
    Grams of dry malt extract to reach a starter gravity.

    Gravities at or below 1.000 need no extract.
    """
    points = max(0.0, (gravity - 1.0) * 1000.0)
    pounds = points * l_to_gal(volume_l) / max(MIN_DIVISOR, dme_ppg)
    return pounds * GRAMS_PER_UNIT[MassUnit.LB]


def _as_date(value: date | str) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        logger.warning("Ignoring unparseable manufacture date %r", value)
        return None


def calculate_viability(
    manufacture_date: date | str | None, today: date | None = None
) -> float:
    """
    Fraction of liquid yeast cells still viable.

    Loses 0.7% per whole day since manufacture. Unknown or unparseable
    dates are treated as fresh, and future dates as made today.

    Args:
        manufacture_date: Package date, or an ISO date string
        today: Reference date (defaults to the current date)

    Returns:
        Viability between 0 and 1
    """
    if not manufacture_date:
        return 1.0
    made = _as_date(manufacture_date)
    if made is None:
        return 1.0
    days = max(0, ((today or date.today()) - made).days)
    return clamp(1.0 - VIABILITY_LOSS_PER_DAY * days, 0.0, 1.0)


def calculate_cells_available(
    package: YeastPackage | str,
    packs: float,
    manufacture_date: date | str | None = None,
    slurry_l: float | None = None,
    slurry_billion_per_ml: float | None = None,
    today: date | None = None,
) -> float:
    """
    Cells provided by the yeast as pitched, in billions.

    Partial packs are floored. Dry yeast is not aged; slurry uses its
    measured density.
    """
    package = YeastPackage(package)
    whole_packs = max(0, math.floor(packs))

    if package == YeastPackage.DRY:
        return whole_packs * DRY_SACHET_G * DRY_BILLION_PER_G
    if package == YeastPackage.SLURRY:
        return max(0.0, slurry_l or 0.0) * 1000.0 * max(0.0, slurry_billion_per_ml or 0.0)

    viability = calculate_viability(manufacture_date, today)
    return whole_packs * LIQUID_PACK_BILLION[package] * viability


def calculate_required_cells(
    volume_l: float, og: float, pitch_rate: float = ALE_PITCH_RATE
) -> float:
    """
    Cells needed for a batch: pitch rate (M cells/mL/°P) x litres x °P.

    0.75 suits ales; lagers want about 1.5.
    """
    return pitch_rate * max(0.0, volume_l) * max(0.0, sg_to_plato(og))


def white_growth(current_billion: float, volume_l: float, shaken: bool = False) -> float:
    """Cells at the end of a White-model step."""
    if current_billion <= 0:
        return 0.0
    rate = current_billion / max(MIN_DIVISOR, volume_l)
    base = WHITE_COEFF_A * rate**WHITE_EXPONENT + WHITE_COEFF_C
    boost = WHITE_SHAKING_BOOST if shaken else 0.0
    growth = clamp(base + boost, 0.0, WHITE_MAX_GROWTH)
    return min(WHITE_SATURATION_BILLION_PER_L * volume_l, current_billion * (1.0 + growth))


def braukaiser_growth(current_billion: float, volume_l: float, gravity: float) -> float:
    """Cells at the end of a Braukaiser-model step."""
    return current_billion + dme_grams_for_gravity(volume_l, gravity) * BRAUKAISER_BILLION_PER_G_DME


def grow_step(current_billion: float, step: StarterStep) -> float:
    if step.model == StarterGrowthModel.BRAUKAISER:
        return braukaiser_growth(current_billion, step.volume_l, step.gravity)
    return white_growth(current_billion, step.volume_l, step.shaken)


def calculate_starter(
    volume_l: float,
    og: float,
    starter: StarterInfo,
    pitch_rate: float = ALE_PITCH_RATE,
    today: date | None = None,
) -> StarterPlan:
    """
    Plan a starter for a batch.

    Steps are applied in order, each starting from the previous step's
    cells. With no steps the final count is what the package provides.

    Args:
        volume_l: Batch volume
        og: Batch original gravity
        starter: Package details and steps
        pitch_rate: Target pitch rate
        today: Reference date for liquid yeast viability

    Returns:
        StarterPlan with per-step results and totals
    """
    required = calculate_required_cells(volume_l, og, pitch_rate)
    available = calculate_cells_available(
        starter.package,
        starter.packs,
        starter.manufacture_date,
        starter.slurry_l,
        starter.slurry_billion_per_ml,
        today,
    )

    results: list[StarterStepResult] = []
    current = max(0.0, available)
    for step in starter.steps:
        current = grow_step(current, step)
        results.append(
            StarterStepResult(
                id=step.id,
                dme_g=dme_grams_for_gravity(step.volume_l, step.gravity),
                end_billion=current,
            )
        )

    plan = StarterPlan(
        required_billion=required,
        available_billion=available,
        steps=tuple(results),
        final_billion=results[-1].end_billion if results else available,
        total_volume_l=sum(s.volume_l for s in starter.steps),
        total_dme_g=sum(r.dme_g for r in results),
    )
    logger.debug(
        "Starter: %.0f B required, %.0f B available, %.0f B after %d steps",
        plan.required_billion,
        plan.available_billion,
        plan.final_billion,
        len(plan.steps),
    )
    return plan


def starter_for_recipe(
    recipe: Recipe, pitch_rate: float = ALE_PITCH_RATE, today: date | None = None
) -> StarterPlan | None:
    """
    Plan the starter described on a recipe's yeast.

    Uses the recipe's batch volume and predicted OG.

    Returns:
        The plan, or None if the recipe has no yeast starter info
    """
    if recipe.yeast is None or recipe.yeast.starter is None:
        return None
    og = calculate(recipe).og
    return calculate_starter(recipe.batch_volume_l, og, recipe.yeast.starter, pitch_rate, today)

