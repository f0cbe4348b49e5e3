"""Saved-recipe storage on top of a key-value persistence surface."""

import logging
import re
from functools import partial

from anyio import to_thread

from .exceptions import CorruptStoreError, MalformedPayloadError
from .models import Recipe, RecipeCollection, decode_collection, encode_collection
from .ports import KeyValueStorage

logger = logging.getLogger(__name__)

SAVED_RECIPES_KEY = "savedRecipes"
RECIPE_ID_KEY = "recipeId"

_COUNTER_RE = re.compile(r"[0-9]+")


class RecipeStore:
    """Owns the saved RecipeCollection held in key-value storage.

    The collection lives under ``savedRecipes`` as export payload text, and the
    last issued id lives under ``recipeId`` so ids are never reused after a delete.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = SAVED_RECIPES_KEY,
        counter_key: str = RECIPE_ID_KEY,
    ):
        self.storage = storage
        self.key = key
        self.counter_key = counter_key

    def load_all(self) -> RecipeCollection:
        """Read and validate the saved collection.

        Returns:
            The saved recipes, or an empty collection when nothing is stored

        Raises:
            CorruptStoreError: If a stored value is present but not a valid collection
        """
        try:
            raw = self.storage.get_item(self.key)
        except UnicodeDecodeError as e:
            raise CorruptStoreError(f"Stored recipes under {self.key!r} are not valid UTF-8") from e

        if raw is None:
            return RecipeCollection()

        try:
            return decode_collection(raw)
        except MalformedPayloadError as e:
            raise CorruptStoreError(f"Stored recipes under {self.key!r} are corrupt: {e.reason}") from e

    async def load_all_async(self) -> RecipeCollection:
        """Async wrapper for load_all() to avoid blocking the event loop."""
        return await to_thread.run_sync(self.load_all)

    def get(self, recipe_id: int) -> Recipe | None:
        """Look up a saved recipe by id."""
        for recipe in self.load_all():
            if recipe.id == recipe_id:
                return recipe
        return None

    def _load_counter(self) -> int:
        try:
            raw = self.storage.get_item(self.counter_key)
        except UnicodeDecodeError as e:
            raise CorruptStoreError(f"Stored id counter under {self.counter_key!r} is not valid UTF-8") from e

        if raw is None:
            return 0
        if not _COUNTER_RE.fullmatch(raw):
            raise CorruptStoreError(f"Stored id counter under {self.counter_key!r} is not an integer: {raw!r}")
        return int(raw)

    def next_id(self, collection: RecipeCollection | None = None) -> int:
        """Return the id the next saved recipe would receive."""
        if collection is None:
            collection = self.load_all()
        return max(self._load_counter(), collection.max_id()) + 1

    def _write(self, collection: RecipeCollection, counter: int) -> None:
        self.storage.set_item(self.key, encode_collection(collection))
        self.storage.set_item(self.counter_key, str(counter))

    def save(self, name: str, recipe: str) -> Recipe:
        """Append a new recipe with a freshly allocated id.

        Args:
            name: Display name, must not be blank
            recipe: Serialized operation steps (opaque)

        Returns:
            The stored recipe
        """
        collection = self.load_all()
        saved = Recipe(id=self.next_id(collection), name=name, recipe=recipe)
        self._write(RecipeCollection([*collection, saved]), saved.id)
        logger.info(f"Saved recipe {saved.id}: {saved.name}")
        return saved

    async def save_async(self, name: str, recipe: str) -> Recipe:
        """Async wrapper for save() to avoid blocking the event loop."""
        return await to_thread.run_sync(partial(self.save, name, recipe))

    def delete(self, recipe_id: int) -> bool:
        """Delete a recipe by id.

        Returns:
            True if deleted, False if not found
        """
        collection = self.load_all()
        remaining = [recipe for recipe in collection if recipe.id != recipe_id]
        if len(remaining) == len(collection):
            return False

        self.storage.set_item(self.key, encode_collection(RecipeCollection(remaining)))
        logger.info(f"Deleted recipe {recipe_id}")
        return True

    async def delete_async(self, recipe_id: int) -> bool:
        """Async wrapper for delete() to avoid blocking the event loop."""
        return await to_thread.run_sync(self.delete, recipe_id)

    def replace_all(self, collection: RecipeCollection) -> None:
        """Replace the whole saved collection, keeping the id counter ahead of every id."""
        counter = max(self._load_counter(), collection.max_id())
        self._write(collection, counter)
        logger.info(f"Replaced saved recipes ({len(collection)} total)")

    async def replace_all_async(self, collection: RecipeCollection) -> None:
        """Async wrapper for replace_all() to avoid blocking the event loop."""
        await to_thread.run_sync(self.replace_all, collection)
