"""
Tests for brew session metrics and persistence.
"""

from datetime import datetime, timezone

import pytest

from brewing_calc.models import Fermentable, Recipe, SessionActuals, SessionStatus
from brewing_calc.repository import BrewSessionRepository, RecipeRepository
from brewing_calc.session import (
    apparent_attenuation,
    brewhouse_efficiency,
    calculate_session_metrics,
    mash_efficiency,
    record_actuals,
    set_status,
    start_session,
    update_brew_day_recipe,
)
from brewing_calc.storage import FileStore, InMemoryStore


class TestApparentAttenuation:
    """Tests for apparent attenuation."""

    @pytest.mark.parametrize(
        "og,fg,expected",
        [(1.050, 1.010, 80.0), (1.060, 1.006, 90.0), (1.045, 1.015, 66.67)],
    )
    def test_values(self, og, fg, expected):
        assert apparent_attenuation(og, fg) == pytest.approx(expected, abs=0.01)

    def test_no_extract(self):
        assert apparent_attenuation(1.000, 1.000) is None
        assert apparent_attenuation(0.998, 0.996) is None


class TestEfficiency:
    """Tests for mash and brewhouse efficiency."""

    def test_mash(self, pale_malt):
        # 5 kg x 300 GU·L/kg = 1500; 45 points x 25 L = 1125
        assert mash_efficiency([pale_malt], 1.045, 25.0) == pytest.approx(75.0)

    def test_brewhouse(self, pale_malt):
        assert brewhouse_efficiency([pale_malt], 1.050, 19.0) == pytest.approx(63.33, abs=0.01)

    def test_brewhouse_below_mash(self, pale_malt):
        mash = mash_efficiency([pale_malt], 1.045, 25.0)
        assert brewhouse_efficiency([pale_malt], 1.050, 19.0) < mash

    def test_several_fermentables(self, pale_malt, sugar):
        assert mash_efficiency([pale_malt, sugar], 1.050, 25.0) == pytest.approx(
            1250 / 1884 * 100
        )

    def test_no_fermentables(self):
        assert mash_efficiency([], 1.045, 25.0) is None
        assert brewhouse_efficiency([Fermentable(name="Empty")], 1.050, 19.0) is None


class TestSessionMetrics:
    """Tests for metrics from brew-day actuals."""

    def test_all_actuals(self, pale_ale):
        actuals = SessionActuals(
            pre_boil_gravity=1.045,
            pre_boil_volume_l=25.0,
            original_gravity=1.050,
            final_gravity=1.010,
            into_fermenter_l=19.0,
        )
        metrics = calculate_session_metrics(pale_ale, actuals)
        assert metrics.actual_abv == pytest.approx(5.25)
        assert metrics.apparent_attenuation == pytest.approx(80.0)
        assert metrics.mash_efficiency_percent == pytest.approx(75.0)
        assert metrics.brewhouse_efficiency_percent == pytest.approx(63.33, abs=0.01)

    def test_gravities_only(self, pale_ale):
        actuals = SessionActuals(original_gravity=1.050, final_gravity=1.010)
        metrics = calculate_session_metrics(pale_ale, actuals)
        assert metrics.actual_abv == pytest.approx(5.25)
        assert metrics.mash_efficiency_percent is None

    def test_nothing_measured(self, pale_ale):
        metrics = calculate_session_metrics(pale_ale, SessionActuals())
        assert metrics.actual_abv is None
        assert metrics.apparent_attenuation is None
        assert metrics.mash_efficiency_percent is None
        assert metrics.brewhouse_efficiency_percent is None

    def test_og_only(self, pale_ale):
        metrics = calculate_session_metrics(pale_ale, SessionActuals(original_gravity=1.050))
        assert metrics.actual_abv is None
        assert metrics.apparent_attenuation is None
        assert metrics.brewhouse_efficiency_percent is not None

    @pytest.mark.parametrize(
        "volumes,expected",
        [
            ({"into_fermenter_l": 18.0, "post_boil_volume_l": 22.0}, 60.0),
            ({"post_boil_volume_l": 22.0}, 50 * 22 / 1500 * 100),
            ({}, 50 * 19 / 1500 * 100),
        ],
    )
    def test_brewhouse_volume_priority(self, pale_ale, volumes, expected):
        actuals = SessionActuals(original_gravity=1.050, **volumes)
        metrics = calculate_session_metrics(pale_ale, actuals)
        assert metrics.brewhouse_efficiency_percent == pytest.approx(expected)


class TestSessionLifecycle:
    """Tests for starting and updating sessions."""

    def test_start(self, pale_ale):
        session = start_session(pale_ale)
        assert session.status == SessionStatus.PLANNING
        assert session.recipe_id == pale_ale.id
        assert session.recipe_name == "Test Pale Ale"
        assert session.recipe_version_number == 1
        assert session.brew_day_recipe == session.original_recipe == pale_ale
        assert session.metrics.actual_abv is None

    def test_record_actuals_merges(self, pale_ale):
        session = start_session(pale_ale)
        session = record_actuals(session, original_gravity=1.050)
        session = record_actuals(session, final_gravity=1.010)
        assert session.actuals.original_gravity == 1.050
        assert session.metrics.actual_abv == pytest.approx(5.25)
        assert session.updated_at >= session.created_at

    def test_record_unknown_measurement(self, pale_ale):
        with pytest.raises(ValueError):
            record_actuals(start_session(pale_ale), colour=12)

    def test_record_out_of_range(self, pale_ale):
        with pytest.raises(ValueError):
            record_actuals(start_session(pale_ale), final_gravity=-1.0)

    def test_metrics_use_brew_day_recipe(self, pale_ale, pale_malt):
        session = record_actuals(start_session(pale_ale), original_gravity=1.050)
        heavier = pale_ale.model_copy(
            update={"fermentables": [pale_malt.model_copy(update={"weight_kg": 6.0})]}
        )
        changed = update_brew_day_recipe(session, heavier)
        assert changed.original_recipe == pale_ale
        assert (
            changed.metrics.brewhouse_efficiency_percent
            < session.metrics.brewhouse_efficiency_percent
        )

    def test_status(self, pale_ale):
        session = set_status(start_session(pale_ale), "fermenting")
        assert session.status == SessionStatus.FERMENTING


@pytest.fixture(params=["memory", "file"])
def sessions(request, tmp_path):
    if request.param == "memory":
        return BrewSessionRepository(InMemoryStore())
    return BrewSessionRepository(FileStore(tmp_path))


class TestBrewSessionRepository:
    """Tests for session persistence."""

    def test_save_and_load(self, sessions, pale_ale):
        session = record_actuals(start_session(pale_ale), original_gravity=1.050)
        stored = sessions.save(session)
        assert sessions.load(session.id) == stored

    def test_load_missing(self, sessions):
        assert sessions.load("does-not-exist") is None

    def test_sessions_for_recipe_newest_first(self, sessions, pale_ale):
        for day in (1, 20, 10):
            brew_date = datetime(2024, 3, day, tzinfo=timezone.utc)
            sessions.save(start_session(pale_ale, brew_date))
        sessions.save(start_session(Recipe(name="Stout")))

        days = [s.brew_date.day for s in sessions.list_for_recipe(pale_ale.id)]
        assert days == [20, 10, 1]
        assert sessions.count_for_recipe(pale_ale.id) == 3
        assert len(sessions.list_sessions()) == 4

    def test_delete(self, sessions, pale_ale):
        session = sessions.save(start_session(pale_ale))
        assert sessions.delete(session.id)
        assert sessions.load(session.id) is None
        assert not sessions.delete(session.id)

    def test_delete_for_recipe(self, sessions, pale_ale):
        sessions.save(start_session(pale_ale))
        sessions.save(start_session(pale_ale))
        other = sessions.save(start_session(Recipe(name="Stout")))
        assert sessions.delete_for_recipe(pale_ale.id) == 2
        assert [s.id for s in sessions.list_sessions()] == [other.id]

    def test_shares_store_with_recipes(self, pale_ale):
        store = InMemoryStore()
        RecipeRepository(store).save(pale_ale)
        BrewSessionRepository(store).save(start_session(pale_ale))
        assert [r.id for r in RecipeRepository(store).list_recipes()] == [pale_ale.id]
