"""
Recipe and brew session persistence.

Recipes, their version snapshots and brew sessions are stored as JSON
through the storage envelope functions, so any KeyValueStore backend
works.
"""

import logging
from datetime import datetime, timezone

from pydantic import ValidationError

from brewing_calc.exceptions import StorageError
from brewing_calc.models import BrewSession, Recipe, RecipeVersion
from brewing_calc.protocols import KeyValueStore
from brewing_calc.storage import delete_json, load_json, save_json

logger = logging.getLogger(__name__)

RECIPE_PREFIX = "recipe:"
VERSION_PREFIX = "recipe-version:"
SESSION_PREFIX = "brew-session:"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RecipeRepository:
    """
    Save, load and version recipes.

    Args:
        store: Backend to persist into
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    @staticmethod
    def _recipe_key(recipe_id: str) -> str:
        return f"{RECIPE_PREFIX}{recipe_id}"

    @staticmethod
    def _version_key(recipe_id: str, version_number: int) -> str:
        return f"{VERSION_PREFIX}{recipe_id}:{version_number}"

    # === Recipes ===

    def save(self, recipe: Recipe) -> Recipe:
        """
        Persist a recipe, stamping ``created_at`` and ``updated_at``.

        Returns:
            The recipe as stored

        Raises:
            StorageError: If the backend rejects the write
        """
        now = _now()
        stored = recipe.model_copy(
            update={"created_at": recipe.created_at or now, "updated_at": now}
        )
        save_json(self.store, self._recipe_key(stored.id), stored.model_dump(mode="json"))
        logger.info("Saved recipe %s (%s)", stored.id, stored.name)
        return stored

    def load(self, recipe_id: str) -> Recipe | None:
        """
        Load a recipe by id.

        Returns:
            The recipe, or None if no recipe has that id

        Raises:
            StorageError: If the stored data is corrupted or unreadable
        """
        data = load_json(self.store, self._recipe_key(recipe_id))
        if data is None:
            return None
        try:
            return Recipe.model_validate(data)
        except ValidationError as e:
            raise StorageError(
                f"Stored recipe {recipe_id!r} is invalid: {e}", error_type="parse_error"
            ) from e

    def list_recipes(self) -> list[Recipe]:
        """All stored recipes, sorted by name."""
        recipes = []
        for key in self.store.keys():
            if not key.startswith(RECIPE_PREFIX):
                continue
            recipe = self.load(key[len(RECIPE_PREFIX):])
            if recipe is not None:
                recipes.append(recipe)
        return sorted(recipes, key=lambda r: r.name.lower())

    def delete(self, recipe_id: str) -> bool:
        """
        Delete a recipe and all of its versions.

        Returns:
            True if the recipe existed and was deleted
        """
        key = self._recipe_key(recipe_id)
        if key not in self.store.keys():
            return False
        for version in self.list_versions(recipe_id):
            delete_json(self.store, self._version_key(recipe_id, version.version_number))
        deleted = delete_json(self.store, key)
        if deleted:
            logger.info("Deleted recipe %s", recipe_id)
        return deleted

    # === Versions ===

    def create_version(self, recipe: Recipe, change_notes: str | None = None) -> RecipeVersion:
        """
        Snapshot a recipe at its current version number and bump the number.

        The saved recipe carries ``current_version + 1`` afterwards.

        Returns:
            The snapshot that was written
        """
        version = RecipeVersion(
            recipe_id=recipe.id,
            version_number=recipe.current_version,
            created_at=_now(),
            change_notes=change_notes,
            recipe_snapshot=recipe,
        )
        save_json(
            self.store,
            self._version_key(recipe.id, version.version_number),
            version.model_dump(mode="json"),
        )
        self.save(recipe.model_copy(update={"current_version": recipe.current_version + 1}))
        logger.info("Created version %d of recipe %s", version.version_number, recipe.id)
        return version

    def get_version(self, recipe_id: str, version_number: int) -> RecipeVersion | None:
        data = load_json(self.store, self._version_key(recipe_id, version_number))
        if data is None:
            return None
        try:
            return RecipeVersion.model_validate(data)
        except ValidationError as e:
            raise StorageError(
                f"Stored version {version_number} of {recipe_id!r} is invalid: {e}",
                error_type="parse_error",
            ) from e

    def list_versions(self, recipe_id: str) -> list[RecipeVersion]:
        """Versions of a recipe, oldest first."""
        prefix = f"{VERSION_PREFIX}{recipe_id}:"
        numbers = []
        for key in self.store.keys():
            if key.startswith(prefix) and key[len(prefix):].isdigit():
                numbers.append(int(key[len(prefix):]))

        versions = []
        for number in sorted(numbers):
            version = self.get_version(recipe_id, number)
            if version is not None:
                versions.append(version)
        return versions

    def restore_version(self, recipe_id: str, version_number: int) -> Recipe:
        """
        Make a snapshot the current recipe.

        The restored recipe keeps the latest version counter so later
        snapshots do not overwrite existing ones.

        Raises:
            StorageError: If the version does not exist
        """
        version = self.get_version(recipe_id, version_number)
        if version is None:
            raise StorageError(
                f"Recipe {recipe_id!r} has no version {version_number}", error_type="not_found"
            )
        current = self.load(recipe_id)
        counter = current.current_version if current is not None else version_number + 1
        restored = version.recipe_snapshot.model_copy(update={"current_version": counter})
        logger.info("Restoring recipe %s to version %d", recipe_id, version_number)
        return self.save(restored)


class BrewSessionRepository:
    """
    Save and load brew sessions.

    Args:
        store: Backend to persist into
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    @staticmethod
    def _key(session_id: str) -> str:
        return f"{SESSION_PREFIX}{session_id}"

    def save(self, session: BrewSession) -> BrewSession:
        """
        Persist a session (create or update), stamping its timestamps.

        Raises:
            StorageError: If the backend rejects the write
        """
        now = _now()
        stored = session.model_copy(
            update={"created_at": session.created_at or now, "updated_at": now}
        )
        save_json(self.store, self._key(stored.id), stored.model_dump(mode="json"))
        logger.info("Saved brew session %s (%s)", stored.id, stored.recipe_name)
        return stored

    def load(self, session_id: str) -> BrewSession | None:
        """
        Load a session by id.

        Raises:
            StorageError: If the stored data is corrupted or unreadable
        """
        data = load_json(self.store, self._key(session_id))
        if data is None:
            return None
        try:
            return BrewSession.model_validate(data)
        except ValidationError as e:
            raise StorageError(
                f"Stored brew session {session_id!r} is invalid: {e}", error_type="parse_error"
            ) from e

    def list_sessions(self) -> list[BrewSession]:
        """All stored sessions, most recent brew date first."""
        sessions = []
        for key in self.store.keys():
            if not key.startswith(SESSION_PREFIX):
                continue
            session = self.load(key[len(SESSION_PREFIX):])
            if session is not None:
                sessions.append(session)
        return sorted(sessions, key=lambda s: s.brew_date, reverse=True)

    def list_for_recipe(self, recipe_id: str) -> list[BrewSession]:
        """Sessions brewed from a recipe, most recent brew date first."""
        return [s for s in self.list_sessions() if s.recipe_id == recipe_id]

    def count_for_recipe(self, recipe_id: str) -> int:
        return len(self.list_for_recipe(recipe_id))

    def delete(self, session_id: str) -> bool:
        """
        Delete a session.

        Returns:
            True if the session existed and was deleted
        """
        key = self._key(session_id)
        if key not in self.store.keys():
            return False
        deleted = delete_json(self.store, key)
        if deleted:
            logger.info("Deleted brew session %s", session_id)
        return deleted

    def delete_for_recipe(self, recipe_id: str) -> int:
        """
        Delete every session of a recipe.

        Returns:
            Number of sessions deleted
        """
        return sum(1 for s in self.list_for_recipe(recipe_id) if self.delete(s.id))
