"""
Shared fixtures for brewing-calc tests.
"""

import pytest

from brewing_calc.models import (
    Equipment,
    Fermentable,
    FermentableType,
    Hop,
    HopFlavor,
    HopUse,
    MashStep,
    Recipe,
    Yeast,
)


@pytest.fixture
def pale_malt():
    return Fermentable(name="Pale Malt", weight_kg=5.0, color_lovibond=3.0, potential_gu=300.0)


@pytest.fixture
def cascade_bittering():
    return Hop(name="Cascade", alpha_acid=10.0, grams=30.0, use=HopUse.BOIL, time_min=60)


@pytest.fixture
def pale_ale(pale_malt, cascade_bittering):
    """19 L pale ale: 5 kg of 300 GU malt at 75% and one 60 minute hop."""
    return Recipe(
        name="Test Pale Ale",
        batch_volume_l=19.0,
        equipment=Equipment(mash_efficiency_percent=75.0),
        fermentables=[pale_malt],
        hops=[cascade_bittering],
        yeast=Yeast(name="US-05", attenuation=0.75),
        mash_steps=[MashStep(name="Saccharification", temperature_c=67.0, duration_min=60)],
    )


@pytest.fixture
def sugar():
    return Fermentable(
        name="Table Sugar", weight_kg=1.0, potential_gu=384.0, type=FermentableType.SUGAR
    )


@pytest.fixture
def citra_flavor():
    return HopFlavor(citrus=5, tropical_fruit=4, stone_fruit=2, resin_pine=1)
