"""Capability interfaces injected into the store, exporter and importer.

These stand in for the platform objects a browser would provide: key-value
storage, file/object-URL creation, download triggering, and user alerts.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class FileResource:
    """A named, content-typed file built from text parts."""

    parts: tuple[str, ...]
    name: str
    content_type: str

    @property
    def text(self) -> str:
        return "".join(self.parts)

    @property
    def data(self) -> bytes:
        return self.text.encode("utf-8")


@runtime_checkable
class KeyValueStorage(Protocol):
    """String key-value persistence (localStorage-like)."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


@runtime_checkable
class FileSaver(Protocol):
    """File creation, revocable handles and a user-facing save interaction."""

    def create_file(self, parts: Sequence[str], filename: str, content_type: str) -> FileResource: ...

    def create_object_url(self, resource: FileResource) -> str: ...

    def download(self, handle: str, filename: str) -> None: ...

    def revoke_object_url(self, handle: str) -> None: ...


@runtime_checkable
class Notifier(Protocol):
    """Shows a single message to the user."""

    def notify(self, message: str) -> None: ...
