"""Pydantic models for saved recipes and the canonical export payload codec.

The export payload is the only bit-exact contract of this package:
- UTF-8 JSON, an array of record objects
- Compact separators, ``id``/``name``/``recipe`` first in that order
- Extra record fields preserved and written after the core fields, sorted by key
  (nested objects inside them too)
- NaN and Infinity rejected both ways
- Non-ASCII characters written literally

Decoding is strict at the persistence boundary. Anything that is not an array of
recipe-shaped records with unique ids is rejected with MalformedPayloadError.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
    model_validator,
)

from .exceptions import MalformedPayloadError

CORE_FIELDS = ("id", "name", "recipe")


class Recipe(BaseModel):
    """A named, user-authored sequence of operation invocations.

    ``recipe`` is opaque here: it is produced and consumed by the execution engine.
    """

    model_config = ConfigDict(extra="allow")

    id: StrictInt
    name: StrictStr = Field(min_length=1)
    recipe: StrictStr

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be blank")
        return value

    def to_record(self) -> dict[str, Any]:
        """Return the JSON record with a stable key order."""
        record: dict[str, Any] = {field: getattr(self, field) for field in CORE_FIELDS}
        extra = self.model_extra or {}
        for key in sorted(extra):
            record[key] = _sort_nested(extra[key])
        return record


class RecipeCollection(RootModel[list[Recipe]]):
    """Ordered recipes with unique ids. Insertion order is export order."""

    root: list[Recipe] = Field(default_factory=list)

    @model_validator(mode="after")
    def _ids_unique(self) -> RecipeCollection:
        seen: set[int] = set()
        for recipe in self.root:
            if recipe.id in seen:
                raise ValueError(f"duplicate recipe id {recipe.id}")
            seen.add(recipe.id)
        return self

    def __iter__(self) -> Iterator[Recipe]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> Recipe:
        return self.root[index]

    @property
    def ids(self) -> list[int]:
        return [recipe.id for recipe in self.root]

    def max_id(self) -> int:
        """Largest id in the collection, 0 when empty."""
        return max(self.ids, default=0)


def _sort_nested(value: Any) -> Any:
    """Return ``value`` with every nested mapping ordered by key."""
    if isinstance(value, dict):
        return {key: _sort_nested(value[key]) for key in sorted(value)}
    if isinstance(value, list):
        return [_sort_nested(item) for item in value]
    return value


def _reject_constant(name: str) -> Any:
    raise MalformedPayloadError(f"{name} is not valid JSON")


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    parts = [str(part) for part in first["loc"] if part != "root"]
    loc = ".".join(parts)
    where = f"record {loc}" if loc else "collection"
    return f"{where}: {first['msg']}"


def encode_collection(collection: RecipeCollection) -> str:
    """Serialize a collection to its canonical export payload text.

    Equal collections always produce identical text.
    """
    records = [recipe.to_record() for recipe in collection]
    return json.dumps(records, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def decode_collection(payload: str | bytes) -> RecipeCollection:
    """Parse export payload text (or UTF-8 bytes) into a validated collection.

    Raises:
        MalformedPayloadError: If the payload is not valid UTF-8, not JSON, not an
            array, or holds a record that is not a valid recipe.
    """
    if isinstance(payload, bytes):
        try:
            payload = payload.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedPayloadError(f"not valid UTF-8 ({e.reason} at byte {e.start})") from e

    try:
        data: object = json.loads(payload, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise MalformedPayloadError(f"invalid JSON: {e.msg} at line {e.lineno} column {e.colno}") from e

    if not isinstance(data, list):
        raise MalformedPayloadError(f"expected a JSON array of recipes, got {type(data).__name__}")

    try:
        return RecipeCollection.model_validate(data)
    except ValidationError as e:
        raise MalformedPayloadError(_describe_validation_error(e)) from e
