"""Custom exceptions for recipe persistence, export and import."""


class RecipeExportError(Exception):
    """Base exception for recipe export errors."""

    pass


class CorruptStoreError(RecipeExportError):
    """Raised when persisted recipes are present but cannot be decoded."""

    pass


class MalformedPayloadError(RecipeExportError):
    """Raised when an export payload is not a valid recipe collection."""

    def __init__(self, reason: str):
        super().__init__(f"Malformed recipe payload: {reason}")
        self.reason = reason


class PlatformCapabilityError(RecipeExportError):
    """Raised when the file-save or handle capability fails."""

    pass
