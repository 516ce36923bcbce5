"""
Tests for the recipe calculation orchestrator.
"""

import math

import pytest

from brewing_calc.calculator import RecipeCalculator, calculate
from brewing_calc.catalog import catalog_from_mappings
from brewing_calc.config import CalculationConfig, GravityBasis
from brewing_calc.models import Fermentable, Hop, HopFlavor, HopUse, Recipe
from brewing_calc.units import srm_to_ebc


class TestCalculate:
    """End to end calculation of a simple pale ale."""

    def test_gravity(self, pale_ale):
        calc = calculate(pale_ale)
        assert abs(calc.og - 1.05921) < 0.0001
        assert abs(calc.fg - 1.0148) < 0.0001
        assert abs(calc.abv - 5.829) < 0.01

    def test_bitterness(self, pale_ale):
        assert calculate(pale_ale).ibu == 33.5

    def test_colour(self, pale_ale):
        calc = calculate(pale_ale)
        assert abs(calc.srm - 5.44) < 0.01
        assert calc.ebc == srm_to_ebc(calc.srm)

    def test_volumes_rounded(self, pale_ale):
        calc = calculate(pale_ale)
        assert calc.post_boil_volume_l == 21.0
        assert calc.pre_boil_volume_l == 25.9
        assert calc.boil_off_l == 4.0
        assert calc.mash_water_l == 17.0
        assert calc.sparge_water_l == 16.1
        assert calc.total_water_l == 33.1

    def test_nutrition(self, pale_ale):
        calc = calculate(pale_ale)
        assert calc.calories > 0
        assert calc.carbs_g > 0

    def test_mash_ph_and_adjustment(self, pale_ale):
        calc = calculate(pale_ale)
        assert abs(calc.estimated_mash_ph - 5.685) < 0.005
        assert calc.mash_ph_adjustment is not None
        assert calc.mash_ph_adjustment.target_ph == 5.4
        assert calc.mash_ph_adjustment.lactic_acid_88_ml > 0

    def test_recipe_not_modified(self, pale_ale):
        before = pale_ale.model_dump()
        calculate(pale_ale)
        assert pale_ale.model_dump() == before

    def test_repeatable(self, pale_ale):
        assert calculate(pale_ale) == calculate(pale_ale)


class TestDegenerateRecipes:
    """Partially filled recipes still produce complete records."""

    def test_empty_recipe(self):
        calc = calculate(Recipe())
        assert calc.og == 1.0
        assert calc.fg == 1.0
        assert calc.abv == 0.0
        assert calc.ibu == 0.0
        assert calc.srm == 0.0
        assert calc.ebc == 0.0
        assert calc.estimated_mash_ph is None
        assert calc.mash_ph_adjustment is None
        assert calc.calories == 0.0

    def test_zero_batch_volume(self, pale_ale):
        calc = calculate(pale_ale.model_copy(update={"batch_volume_l": 0.0}))
        assert calc.og == 1.0
        assert calc.ibu == 0.0
        assert calc.srm == 0.0
        for value in calc.model_dump(exclude={"mash_ph_adjustment"}).values():
            if isinstance(value, float):
                assert math.isfinite(value)

    def test_hops_without_fermentables(self, cascade_bittering):
        calc = calculate(Recipe(hops=[cascade_bittering]))
        assert calc.og == 1.0
        assert calc.ibu > 0

    def test_sugar_only(self, sugar):
        calc = calculate(Recipe(fermentables=[sugar]))
        assert calc.og > 1.0
        assert calc.estimated_mash_ph is None


class TestConfiguration:
    """Calculator behaviour under explicit configuration."""

    def test_default_attenuation_without_yeast(self, pale_ale):
        no_yeast = pale_ale.model_copy(update={"yeast": None})
        calc = RecipeCalculator(CalculationConfig(default_attenuation=0.8)).calculate(no_yeast)
        assert calc.fg == pytest.approx(1 + (calc.og - 1) * 0.2)

    def test_gravity_basis(self, pale_ale):
        batch = calculate(pale_ale)
        post_boil = calculate(pale_ale, CalculationConfig(gravity_basis=GravityBasis.POST_BOIL))
        pre_boil = calculate(pale_ale, CalculationConfig(gravity_basis=GravityBasis.PRE_BOIL))
        assert batch.og > post_boil.og > pre_boil.og

    def test_lactose_raises_fg(self, pale_ale):
        lactose = Fermentable(
            name="Lactose", weight_kg=0.5, potential_gu=300.0, type="sugar", fermentability=0.0
        )
        sugar = lactose.model_copy(update={"fermentability": None})
        milk = pale_ale.model_copy(update={"fermentables": [*pale_ale.fermentables, lactose]})
        sweet = pale_ale.model_copy(update={"fermentables": [*pale_ale.fermentables, sugar]})
        assert calculate(milk).og == calculate(sweet).og
        assert calculate(milk).fg > calculate(sweet).fg

    def test_dry_hop_bitterness_flag(self, pale_ale):
        dry = Hop(name="Citra", alpha_acid=12.0, grams=100.0, use=HopUse.DRY_HOP)
        recipe = pale_ale.model_copy(update={"hops": [*pale_ale.hops, dry]})
        assert calculate(recipe).ibu == calculate(pale_ale).ibu
        enabled = calculate(recipe, CalculationConfig(dry_hop_bitterness=True))
        assert enabled.ibu > calculate(pale_ale).ibu


class TestHopFlavor:
    """Recipe hop flavor through the calculator."""

    def test_inline_flavor(self, pale_ale, citra_flavor):
        dry = Hop(name="Citra", grams=100.0, use=HopUse.DRY_HOP, flavor=citra_flavor)
        recipe = pale_ale.model_copy(update={"hops": [dry]})
        assert RecipeCalculator().hop_flavor(recipe).citrus > 4.0

    def test_catalog_lookup(self, pale_ale):
        catalog = catalog_from_mappings(
            {"hops": [{"name": "Citra", "alpha_acid": 12.0, "flavor": {"citrus": 5}}]}
        )
        dry = Hop(name="Citra", grams=100.0, use=HopUse.DRY_HOP)
        recipe = pale_ale.model_copy(update={"hops": [dry]})
        calculator = RecipeCalculator()
        assert calculator.hop_flavor(recipe) == HopFlavor()
        assert calculator.hop_flavor(recipe, catalog).citrus > 4.0

    def test_no_hops(self):
        recipe = Recipe(fermentables=[Fermentable(name="Pale", weight_kg=5.0)])
        assert RecipeCalculator().hop_flavor(recipe) == HopFlavor()
