"""Local platform adapters: a downloads-directory file saver and a console notifier."""

import logging
import uuid
from collections.abc import Sequence
from pathlib import Path

import typer

from .exceptions import PlatformCapabilityError
from .ports import FileResource
from .utils import atomic_write_text

logger = logging.getLogger(__name__)


class DirectoryFileSaver:
    """Saves downloads into a directory, handing out revocable ``blob:`` handles.

    A handle keeps its resource alive in the registry until it is revoked, the
    same way an object URL pins a Blob in a browser.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory).expanduser()
        self._handles: dict[str, FileResource] = {}
        self.saved_paths: list[Path] = []

    @property
    def live_handles(self) -> list[str]:
        return list(self._handles)

    def create_file(self, parts: Sequence[str], filename: str, content_type: str) -> FileResource:
        if not filename or Path(filename).name != filename:
            raise PlatformCapabilityError(f"Refusing to create file with unsafe name {filename!r}")
        return FileResource(parts=tuple(parts), name=filename, content_type=content_type)

    def create_object_url(self, resource: FileResource) -> str:
        handle = f"blob:{uuid.uuid4()}"
        self._handles[handle] = resource
        logger.debug(f"Created handle {handle} for {resource.name}")
        return handle

    def download(self, handle: str, filename: str) -> None:
        resource = self._handles.get(handle)
        if resource is None:
            raise PlatformCapabilityError(f"Unknown or revoked handle: {handle}")

        path = self.directory / Path(filename).name
        try:
            atomic_write_text(path, resource.text)
        except OSError as e:
            raise PlatformCapabilityError(f"Failed to save {path}: {e}") from e

        self.saved_paths.append(path)
        logger.info(f"Saved download to {path}")

    def revoke_object_url(self, handle: str) -> None:
        if self._handles.pop(handle, None) is None:
            raise PlatformCapabilityError(f"Handle already revoked: {handle}")
        logger.debug(f"Revoked handle {handle}")


class EchoNotifier:
    """Prints user notifications to the console."""

    def notify(self, message: str) -> None:
        typer.echo(message)
