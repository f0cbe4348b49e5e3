"""Import of previously exported recipe payloads."""

from __future__ import annotations

from enum import Enum
from functools import partial
from pathlib import Path

from anyio import to_thread

from .models import Recipe, RecipeCollection, decode_collection
from .observability import get_logger, operation_context
from .store import RecipeStore

logger = get_logger(__name__)


class ImportMode(str, Enum):
    """How an imported payload is combined with the saved recipes."""

    REPLACE = "replace"
    MERGE = "merge"


class Importer:
    """Restores an export payload into a RecipeStore.

    The payload is fully decoded and validated before anything is written, so a
    malformed payload leaves the saved recipes untouched.
    """

    def __init__(self, store: RecipeStore):
        self.store = store

    def _merge(self, existing: RecipeCollection, imported: RecipeCollection) -> tuple[RecipeCollection, int]:
        used = set(existing.ids)
        # Fresh ids start past every saved and imported id.
        next_id = max(self.store.next_id(existing), imported.max_id() + 1)
        merged: list[Recipe] = list(existing)
        remapped = 0

        for recipe in imported:
            if recipe.id in used:
                while next_id in used:
                    next_id += 1
                logger.info("recipe_id_remapped", old_id=recipe.id, new_id=next_id, name=recipe.name)
                recipe = recipe.model_copy(update={"id": next_id})
                remapped += 1
            used.add(recipe.id)
            merged.append(recipe)

        return RecipeCollection(merged), remapped

    def import_payload(self, text: str | bytes, mode: ImportMode = ImportMode.REPLACE) -> RecipeCollection:
        """Decode ``text`` and store it.

        Args:
            text: Export payload text (or UTF-8 bytes)
            mode: REPLACE swaps the whole collection, MERGE appends with id remapping

        Returns:
            The saved collection after the import

        Raises:
            MalformedPayloadError: If ``text`` is not a valid export payload
            CorruptStoreError: If merging and the saved recipes cannot be read
        """
        with operation_context("import"):
            imported = decode_collection(text)

            if mode is ImportMode.MERGE:
                result, remapped = self._merge(self.store.load_all(), imported)
            else:
                result, remapped = imported, 0

            self.store.replace_all(result)
            logger.info(
                "recipes_imported",
                mode=mode.value,
                imported=len(imported),
                remapped=remapped,
                total=len(result),
            )
            return result

    async def import_payload_async(self, text: str | bytes, mode: ImportMode = ImportMode.REPLACE) -> RecipeCollection:
        """Async wrapper for import_payload() to avoid blocking the event loop."""
        return await to_thread.run_sync(partial(self.import_payload, text, mode))

    def import_file(self, path: str | Path, mode: ImportMode = ImportMode.REPLACE) -> RecipeCollection:
        """Read an exported file from disk and import it."""
        data = Path(path).expanduser().read_bytes()
        return self.import_payload(data, mode)
