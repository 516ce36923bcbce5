"""
Recipe calculation orchestrator.

Composes the volume, gravity, bitterness and colour models into a single
calculations record. Stages run in dependency order (volumes, OG, FG,
ABV, IBU, colour) and every stage is defined for empty or zeroed input,
so a partially filled recipe always produces a complete record.
"""

import logging

from brewing_calc.bitterness import calculate_ibu
from brewing_calc.color import calculate_srm
from brewing_calc.config import DEFAULT_CONFIG, CalculationConfig, GravityBasis
from brewing_calc.gravity import (
    calculate_abv,
    calculate_fg,
    calculate_nutrition,
    calculate_og,
    fermentable_share,
)
from brewing_calc.hop_flavor import estimate_recipe_hop_flavor
from brewing_calc.mash_ph import calculate_mash_ph, calculate_ph_adjustment, mashable_grain_kg
from brewing_calc.models import HopFlavor, Recipe, RecipeCalculations
from brewing_calc.protocols import HopFlavorLookup
from brewing_calc.units import finite_or, round1, srm_to_ebc
from brewing_calc.volume import VolumeBreakdown, calculate_volumes

logger = logging.getLogger(__name__)


class RecipeCalculator:
    """
    Derives predicted brewing values from a recipe.

    Holds only its configuration; every call recomputes from the recipe
    passed in.
    """

    def __init__(self, config: CalculationConfig | None = None):
        self.config = config or DEFAULT_CONFIG

    def gravity_volume(self, volumes: VolumeBreakdown) -> float:
        """Volume that extract is spread over for the OG prediction."""
        basis = self.config.gravity_basis
        if basis == GravityBasis.PRE_BOIL:
            return volumes.pre_boil_l
        if basis == GravityBasis.POST_BOIL:
            return volumes.post_boil_l
        return volumes.batch_l

    def attenuation(self, recipe: Recipe) -> float:
        if recipe.yeast is not None:
            return recipe.yeast.attenuation
        return self.config.default_attenuation

    def calculate(self, recipe: Recipe) -> RecipeCalculations:
        """
        Calculate all derived values for a recipe.

        Args:
            recipe: Recipe to evaluate; it is not modified

        Returns:
            A fresh RecipeCalculations record
        """
        volumes = calculate_volumes(recipe)
        equipment = recipe.equipment

        og = calculate_og(
            recipe.fermentables,
            self.gravity_volume(volumes),
            equipment.mash_efficiency_percent,
        )
        fg = calculate_fg(
            og,
            self.attenuation(recipe),
            fermentable_share(recipe.fermentables, equipment.mash_efficiency_percent),
        )
        abv = calculate_abv(og, fg)
        ibu = calculate_ibu(recipe.hops, og, recipe.batch_volume_l, self.config)
        srm = finite_or(calculate_srm(recipe.fermentables, recipe.batch_volume_l, self.config))

        calories, carbs = calculate_nutrition(og, fg)

        estimated_ph = calculate_mash_ph(recipe, volumes.mash_water_l, volumes.sparge_water_l)
        adjustment = None
        if estimated_ph is not None:
            adjustment = calculate_ph_adjustment(
                estimated_ph,
                self.config.target_mash_ph,
                mashable_grain_kg(recipe.fermentables),
            )

        result = RecipeCalculations(
            og=og,
            fg=fg,
            abv=abv,
            ibu=ibu,
            srm=srm,
            ebc=srm_to_ebc(srm),
            pre_boil_volume_l=round1(volumes.pre_boil_l),
            post_boil_volume_l=round1(volumes.post_boil_l),
            boil_off_l=round1(volumes.boil_off_l),
            mash_water_l=round1(volumes.mash_water_l),
            sparge_water_l=round1(volumes.sparge_water_l),
            total_water_l=round1(volumes.total_water_l),
            calories=calories,
            carbs_g=carbs,
            estimated_mash_ph=estimated_ph,
            mash_ph_adjustment=adjustment,
        )
        logger.debug(
            "Calculated %s: OG %.3f FG %.3f ABV %.1f IBU %.1f SRM %.1f",
            recipe.name,
            og,
            fg,
            abv,
            ibu,
            srm,
        )
        return result

    def hop_flavor(self, recipe: Recipe, catalog: HopFlavorLookup | None = None) -> HopFlavor:
        """
        Estimate the hop flavor radar for a recipe.

        Args:
            recipe: Recipe to evaluate
            catalog: Optional source of flavor radars for hops that carry none
        """
        flavors = catalog.hop_flavor_map() if catalog is not None else None
        return estimate_recipe_hop_flavor(recipe.hops, recipe.batch_volume_l, flavors)


def calculate(recipe: Recipe, config: CalculationConfig | None = None) -> RecipeCalculations:
    """Calculate a recipe with the given (or default) configuration."""
    return RecipeCalculator(config).calculate(recipe)
