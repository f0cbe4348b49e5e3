"""Export of saved recipes to a downloadable JSON file.

One call to ``export_click`` creates exactly one file resource, mints exactly one
handle for it, triggers exactly one download, and revokes that handle on every
exit path. The user is notified only after the download succeeded.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from anyio import to_thread

from .exceptions import PlatformCapabilityError
from .models import encode_collection
from .observability import get_logger, operation_context
from .ports import FileResource, FileSaver, Notifier
from .store import RecipeStore

EXPORT_FILENAME = "CyberChefExport.json"
EXPORT_CONTENT_TYPE = "application/json"
EXPORT_MESSAGE = f'Recipe downloaded as "{EXPORT_FILENAME}".'

logger = get_logger(__name__)


class Exporter:
    """Writes the saved RecipeCollection to ``CyberChefExport.json`` via the platform."""

    def __init__(self, store: RecipeStore, files: FileSaver, notifier: Notifier):
        self.store = store
        self.files = files
        self.notifier = notifier

    @contextmanager
    def _object_url(self, resource: FileResource) -> Iterator[str]:
        try:
            handle = self.files.create_object_url(resource)
        except PlatformCapabilityError:
            raise
        except Exception as e:
            raise PlatformCapabilityError(f"Could not create a handle for {resource.name}: {e}") from e

        try:
            yield handle
        finally:
            try:
                self.files.revoke_object_url(handle)
            except Exception as e:
                # Download already attempted, revocation failure is non-fatal.
                logger.warning("handle_revoke_failed", handle=handle, error=str(e))

    def _create_file(self, payload: str) -> FileResource:
        try:
            return self.files.create_file([payload], EXPORT_FILENAME, EXPORT_CONTENT_TYPE)
        except PlatformCapabilityError:
            raise
        except Exception as e:
            raise PlatformCapabilityError(f"Could not create {EXPORT_FILENAME}: {e}") from e

    def _download(self, handle: str) -> None:
        try:
            self.files.download(handle, EXPORT_FILENAME)
        except PlatformCapabilityError:
            raise
        except Exception as e:
            raise PlatformCapabilityError(f"Download of {EXPORT_FILENAME} failed: {e}") from e

    def export_click(self) -> FileResource:
        """Export every saved recipe and notify the user.

        Returns:
            The file resource that was handed to the download

        Raises:
            CorruptStoreError: If the saved recipes cannot be read; nothing is exported
            PlatformCapabilityError: If file creation, handle creation or the download fails
        """
        with operation_context("export"):
            collection = self.store.load_all()
            payload = encode_collection(collection)

            resource = self._create_file(payload)
            with self._object_url(resource) as handle:
                self._download(handle)

            logger.info("recipes_exported", count=len(collection), filename=EXPORT_FILENAME, size=len(resource.data))
            try:
                self.notifier.notify(EXPORT_MESSAGE)
            except Exception as e:
                # File is already saved, a failed notification is non-fatal.
                logger.warning("notify_failed", error=str(e))
            return resource

    async def export_click_async(self) -> FileResource:
        """Async wrapper for export_click() to avoid blocking the event loop."""
        return await to_thread.run_sync(self.export_click)
