"""Saved-recipe persistence, export and import."""

from .exceptions import CorruptStoreError, MalformedPayloadError, PlatformCapabilityError, RecipeExportError
from .exporter import EXPORT_CONTENT_TYPE, EXPORT_FILENAME, Exporter
from .importer import Importer, ImportMode
from .models import Recipe, RecipeCollection, decode_collection, encode_collection
from .ports import FileResource, FileSaver, KeyValueStorage, Notifier
from .store import RecipeStore

__all__ = [
    # Models
    "Recipe",
    "RecipeCollection",
    "decode_collection",
    "encode_collection",
    # Components
    "RecipeStore",
    "Exporter",
    "Importer",
    "ImportMode",
    "EXPORT_FILENAME",
    "EXPORT_CONTENT_TYPE",
    # Capability ports
    "FileResource",
    "FileSaver",
    "KeyValueStorage",
    "Notifier",
    # Errors
    "RecipeExportError",
    "CorruptStoreError",
    "MalformedPayloadError",
    "PlatformCapabilityError",
]
