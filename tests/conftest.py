"""Pytest configuration and fixtures for recipe-export tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from recipe_export.ports import FileResource
from recipe_export.storage import MemoryStorage
from recipe_export.store import SAVED_RECIPES_KEY, RecipeStore

TEST_RECIPES = '[{"id":1,"name":"Test Recipe","recipe":"To Base64"}]'


class RecordingFileSaver:
    """FileSaver double that records every capability call.

    ``fail_on`` names one capability (create_file, create_object_url, download,
    revoke_object_url) that raises instead of succeeding.
    """

    def __init__(self, handle: str = "blob:mock-url", fail_on: str | None = None, error: Exception | None = None):
        self.handle = handle
        self.fail_on = fail_on
        self.error = error or OSError("platform exploded")
        self.files: list[FileResource] = []
        self.created_handles: list[str] = []
        self.downloads: list[tuple[str, str]] = []
        self.revoked: list[str] = []

    def _maybe_fail(self, name: str) -> None:
        if self.fail_on == name:
            raise self.error

    def create_file(self, parts: Sequence[str], filename: str, content_type: str) -> FileResource:
        self._maybe_fail("create_file")
        resource = FileResource(parts=tuple(parts), name=filename, content_type=content_type)
        self.files.append(resource)
        return resource

    def create_object_url(self, resource: FileResource) -> str:
        self._maybe_fail("create_object_url")
        self.created_handles.append(self.handle)
        return self.handle

    def download(self, handle: str, filename: str) -> None:
        self._maybe_fail("download")
        self.downloads.append((handle, filename))

    def revoke_object_url(self, handle: str) -> None:
        self.revoked.append(handle)
        self._maybe_fail("revoke_object_url")


class CollectingNotifier:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage({SAVED_RECIPES_KEY: TEST_RECIPES})


@pytest.fixture
def saved_payload() -> str:
    """Export payload text held by the ``storage`` fixture."""
    return TEST_RECIPES


@pytest.fixture
def empty_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage) -> RecipeStore:
    return RecipeStore(storage)


@pytest.fixture
def files() -> RecordingFileSaver:
    return RecordingFileSaver()


@pytest.fixture
def notifier() -> CollectingNotifier:
    return CollectingNotifier()


@pytest.fixture
def make_files():
    """Factory for RecordingFileSaver doubles with a failing capability."""
    return RecordingFileSaver
