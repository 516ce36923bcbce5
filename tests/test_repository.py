"""
Tests for recipe persistence and version history.
"""

import pytest

from brewing_calc.exceptions import StorageError
from brewing_calc.models import Recipe
from brewing_calc.repository import RecipeRepository
from brewing_calc.storage import FileStore, InMemoryStore, save_json


@pytest.fixture(params=["memory", "file"])
def repo(request, tmp_path):
    if request.param == "memory":
        return RecipeRepository(InMemoryStore())
    return RecipeRepository(FileStore(tmp_path))


class TestRecipes:
    """Tests for saving, loading and deleting recipes."""

    def test_save_and_load(self, repo, pale_ale):
        stored = repo.save(pale_ale)
        assert stored.created_at is not None
        assert stored.updated_at is not None

        loaded = repo.load(pale_ale.id)
        assert loaded == stored
        assert loaded.hops[0].time_min == 60

    def test_created_at_kept_on_resave(self, repo, pale_ale):
        first = repo.save(pale_ale)
        second = repo.save(first.model_copy(update={"notes": "More hops"}))
        assert second.created_at == first.created_at
        assert second.updated_at >= first.updated_at

    def test_load_missing(self, repo):
        assert repo.load("does-not-exist") is None

    def test_list_sorted_by_name(self, repo):
        for name in ["Stout", "amber", "Pilsner"]:
            repo.save(Recipe(name=name))
        assert [r.name for r in repo.list_recipes()] == ["amber", "Pilsner", "Stout"]

    def test_delete(self, repo, pale_ale):
        repo.save(pale_ale)
        repo.create_version(pale_ale)
        assert repo.delete(pale_ale.id)
        assert repo.load(pale_ale.id) is None
        assert repo.list_versions(pale_ale.id) == []

    def test_delete_missing(self, repo):
        assert not repo.delete("does-not-exist")

    def test_invalid_stored_recipe(self):
        store = InMemoryStore()
        save_json(store, "recipe:bad", {"batch_volume_l": -5})
        with pytest.raises(StorageError) as excinfo:
            RecipeRepository(store).load("bad")
        assert excinfo.value.error_type == "parse_error"


class TestVersions:
    """Tests for version snapshots."""

    def test_create_version(self, repo, pale_ale):
        version = repo.create_version(pale_ale, change_notes="First brew")
        assert version.version_number == 1
        assert version.change_notes == "First brew"
        assert version.recipe_snapshot.current_version == 1
        assert repo.load(pale_ale.id).current_version == 2

    def test_list_versions_oldest_first(self, repo, pale_ale):
        recipe = pale_ale
        for _ in range(3):
            repo.create_version(recipe)
            recipe = repo.load(recipe.id)
        assert [v.version_number for v in repo.list_versions(recipe.id)] == [1, 2, 3]
        assert recipe.current_version == 4

    def test_get_version(self, repo, pale_ale):
        repo.create_version(pale_ale)
        assert repo.get_version(pale_ale.id, 1).recipe_snapshot.name == pale_ale.name
        assert repo.get_version(pale_ale.id, 7) is None

    def test_restore_keeps_counter(self, repo, pale_ale):
        repo.create_version(pale_ale)
        changed = repo.load(pale_ale.id).model_copy(update={"batch_volume_l": 40.0})
        repo.create_version(changed)

        restored = repo.restore_version(pale_ale.id, 1)
        assert restored.batch_volume_l == pale_ale.batch_volume_l
        assert restored.current_version == 3
        assert repo.load(pale_ale.id).batch_volume_l == pale_ale.batch_volume_l

    def test_restore_missing_version(self, repo, pale_ale):
        repo.save(pale_ale)
        with pytest.raises(StorageError) as excinfo:
            repo.restore_version(pale_ale.id, 5)
        assert excinfo.value.error_type == "not_found"
