"""
Brew session tracking.

A brew session pairs a recipe with what actually happened on the day.
Metrics are derived from the measured actuals against the brew-day
recipe's fermentables.

Efficiencies compare measured extract (gravity points x litres) with
the grist's full potential (kg x GU·L/kg), the metric form of
points x gallons over PPG x pounds.
"""

import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from brewing_calc.gravity import calculate_abv, gravity_units
from brewing_calc.models import (
    BrewSession,
    Fermentable,
    Recipe,
    SessionActuals,
    SessionMetrics,
    SessionStatus,
)
from brewing_calc.units import sg_to_points

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def apparent_attenuation(og: float, fg: float) -> float | None:
    """
    Apparent attenuation as a percentage.

    Returns:
        (OG - FG) / (OG - 1) x 100, or None when OG is at or below 1.000
    """
    if og <= 1.0:
        return None
    return (og - fg) / (og - 1.0) * 100.0


def potential_gravity_units(fermentables: Sequence[Fermentable]) -> float:
    """Extract available from a grist at 100% efficiency, in GU·L."""
    return gravity_units(fermentables, 100.0)


def _efficiency(
    fermentables: Sequence[Fermentable], gravity: float, volume_l: float
) -> float | None:
    potential = potential_gravity_units(fermentables)
    if potential <= 0:
        return None
    return sg_to_points(gravity) * volume_l / potential * 100.0


def mash_efficiency(
    fermentables: Sequence[Fermentable], pre_boil_gravity: float, pre_boil_volume_l: float
) -> float | None:
    """
    Share of the grist's potential extract collected in the kettle.

    Returns:
        Percentage, or None when the grist has no potential
    """
    return _efficiency(fermentables, pre_boil_gravity, pre_boil_volume_l)


def brewhouse_efficiency(
    fermentables: Sequence[Fermentable], og: float, volume_l: float
) -> float | None:
    """
    Share of the grist's potential extract that reached the fermenter.

    Lower than mash efficiency by the kettle, chiller and trub losses.

    Returns:
        Percentage, or None when the grist has no potential
    """
    return _efficiency(fermentables, og, volume_l)


def fermenter_volume_l(actuals: SessionActuals, recipe: Recipe) -> float:
    """Measured volume into the fermenter, else post-boil, else the planned batch."""
    if actuals.into_fermenter_l:
        return actuals.into_fermenter_l
    if actuals.post_boil_volume_l:
        return actuals.post_boil_volume_l
    return recipe.batch_volume_l


def calculate_session_metrics(recipe: Recipe, actuals: SessionActuals) -> SessionMetrics:
    """
    Derive brew-day metrics from measurements.

    Args:
        recipe: The brew-day recipe
        actuals: Measured values; any may be missing

    Returns:
        SessionMetrics with None for anything that could not be derived
    """
    og = actuals.original_gravity
    fg = actuals.final_gravity

    abv = attenuation = mash = brewhouse = None
    if og and fg:
        abv = calculate_abv(og, fg)
        attenuation = apparent_attenuation(og, fg)
    if actuals.pre_boil_gravity and actuals.pre_boil_volume_l:
        mash = mash_efficiency(
            recipe.fermentables, actuals.pre_boil_gravity, actuals.pre_boil_volume_l
        )
    if og:
        brewhouse = brewhouse_efficiency(
            recipe.fermentables, og, fermenter_volume_l(actuals, recipe)
        )

    return SessionMetrics(
        actual_abv=abv,
        apparent_attenuation=attenuation,
        mash_efficiency_percent=mash,
        brewhouse_efficiency_percent=brewhouse,
    )


def start_session(recipe: Recipe, brew_date: datetime | None = None) -> BrewSession:
    """
    Open a planning session for a recipe.

    The brew-day recipe starts as a copy of the recipe and can be
    replaced with whatever was actually brewed.
    """
    now = _now()
    session = BrewSession(
        recipe_id=recipe.id,
        recipe_version_number=recipe.current_version,
        recipe_name=recipe.name,
        original_recipe=recipe,
        brew_day_recipe=recipe.model_copy(deep=True),
        brew_date=brew_date or now,
        created_at=now,
        updated_at=now,
    )
    logger.info("Started brew session %s for recipe %s", session.id, recipe.id)
    return session


def record_actuals(session: BrewSession, **measurements: float | None) -> BrewSession:
    """
    Merge new measurements into a session and recompute its metrics.

    Args:
        session: Session to update
        **measurements: SessionActuals fields to set

    Returns:
        Updated copy of the session

    Raises:
        ValueError: If a measurement is unknown or out of range
    """
    data = session.actuals.model_dump()
    unknown = set(measurements) - set(data)
    if unknown:
        raise ValueError(f"Unknown session measurements: {', '.join(sorted(unknown))}")
    actuals = SessionActuals.model_validate({**data, **measurements})
    return session.model_copy(
        update={
            "actuals": actuals,
            "metrics": calculate_session_metrics(session.brew_day_recipe, actuals),
            "updated_at": _now(),
        }
    )


def update_brew_day_recipe(session: BrewSession, recipe: Recipe) -> BrewSession:
    """Replace the brew-day recipe and recompute metrics against it."""
    return session.model_copy(
        update={
            "brew_day_recipe": recipe,
            "metrics": calculate_session_metrics(recipe, session.actuals),
            "updated_at": _now(),
        }
    )


def set_status(session: BrewSession, status: SessionStatus | str) -> BrewSession:
    return session.model_copy(update={"status": SessionStatus(status), "updated_at": _now()})
