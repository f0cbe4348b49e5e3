"""Tests for recipe models and the export payload codec."""

import json

import pytest
from pydantic import ValidationError

from recipe_export.exceptions import MalformedPayloadError
from recipe_export.models import Recipe, RecipeCollection, decode_collection, encode_collection


def _collection(*records: dict) -> RecipeCollection:
    return RecipeCollection.model_validate(list(records))


class TestRecipe:
    def test_accepts_core_fields(self):
        recipe = Recipe(id=1, name="Test Recipe", recipe="To Base64")
        assert recipe.to_record() == {"id": 1, "name": "Test Recipe", "recipe": "To Base64"}

    @pytest.mark.parametrize("bad_id", ["1", 1.5, True, None])
    def test_rejects_non_integer_id(self, bad_id):
        with pytest.raises(ValidationError):
            Recipe.model_validate({"id": bad_id, "name": "n", "recipe": "r"})

    @pytest.mark.parametrize("bad_name", ["", "   ", 3])
    def test_rejects_blank_or_non_string_name(self, bad_name):
        with pytest.raises(ValidationError):
            Recipe.model_validate({"id": 1, "name": bad_name, "recipe": "r"})

    def test_extra_fields_follow_core_fields_sorted(self):
        recipe = Recipe.model_validate({"zeta": 1, "recipe": "r", "alpha": "a", "name": "n", "id": 4})
        assert list(recipe.to_record()) == ["id", "name", "recipe", "alpha", "zeta"]


class TestRecipeCollection:
    def test_empty_by_default(self):
        collection = RecipeCollection()
        assert len(collection) == 0
        assert collection.max_id() == 0

    def test_preserves_order(self):
        collection = _collection(
            {"id": 3, "name": "c", "recipe": ""},
            {"id": 1, "name": "a", "recipe": ""},
        )
        assert collection.ids == [3, 1]
        assert collection[0].name == "c"
        assert collection.max_id() == 3

    def test_rejects_duplicate_ids(self):
        with pytest.raises(ValidationError, match="duplicate recipe id 2"):
            _collection({"id": 2, "name": "a", "recipe": ""}, {"id": 2, "name": "b", "recipe": ""})


class TestEncode:
    def test_matches_browser_json_stringify(self):
        collection = _collection({"id": 1, "name": "Test Recipe", "recipe": "To Base64"})
        assert encode_collection(collection) == '[{"id":1,"name":"Test Recipe","recipe":"To Base64"}]'

    def test_empty_collection_is_empty_array(self):
        assert encode_collection(RecipeCollection()) == "[]"

    def test_non_ascii_written_literally(self):
        collection = _collection({"id": 1, "name": "Rezept für Ümlaute", "recipe": "From Hex('Auto')"})
        text = encode_collection(collection)
        assert "für Ümlaute" in text
        assert json.loads(text)[0]["name"] == "Rezept für Ümlaute"

    def test_deterministic(self):
        records = [
            {"id": 1, "name": "a", "recipe": "To Base64", "b": 2, "a": 1},
            {"id": 2, "name": "b", "recipe": "From Base64"},
        ]
        first = encode_collection(_collection(*records))
        second = encode_collection(_collection(*[dict(reversed(list(r.items()))) for r in records]))
        assert first == second

    def test_nested_extras_sorted(self):
        first = decode_collection('[{"id":1,"name":"a","recipe":"b","x":{"p":1,"q":[{"s":2,"r":1}]}}]')
        second = decode_collection('[{"id":1,"name":"a","recipe":"b","x":{"q":[{"r":1,"s":2}],"p":1}}]')
        assert first == second
        assert encode_collection(first) == encode_collection(second)
        assert encode_collection(first) == '[{"id":1,"name":"a","recipe":"b","x":{"p":1,"q":[{"r":1,"s":2}]}}]'

    def test_rejects_non_finite_numbers(self):
        collection = _collection({"id": 1, "name": "a", "recipe": "b", "x": float("nan")})
        with pytest.raises(ValueError):
            encode_collection(collection)


class TestDecode:
    def test_round_trip(self):
        collection = _collection(
            {"id": 1, "name": "Test Recipe", "recipe": "To Base64('A-Za-z0-9+/=')"},
            {"id": 7, "name": "Two", "recipe": '[{"op":"To Hex","args":["Space",0]}]', "note": "kept"},
            {"id": 2, "name": "Ωmega", "recipe": ""},
        )
        decoded = decode_collection(encode_collection(collection))
        assert decoded == collection
        assert decoded.ids == [1, 7, 2]
        assert decoded[1].model_extra == {"note": "kept"}

    def test_accepts_utf8_bytes(self):
        decoded = decode_collection('[{"id":1,"name":"café","recipe":"x"}]'.encode("utf-8"))
        assert decoded[0].name == "café"

    @pytest.mark.parametrize(
        "payload, reason",
        [
            ('[{"id":1,"name":"Test', "invalid JSON"),
            ("", "invalid JSON"),
            ('{"id":1,"name":"a","recipe":"b"}', "expected a JSON array"),
            ("null", "expected a JSON array"),
            ("[1, 2]", "record 0"),
            ('[{"id":1,"name":"a"}]', "record 0.recipe"),
            ('[{"id":"1","name":"a","recipe":"b"}]', "record 0.id"),
            ('[{"id":1,"name":"a","recipe":"b"},{"id":1,"name":"c","recipe":"d"}]', "duplicate recipe id 1"),
            ('[{"id":1,"name":"a","recipe":"b","x":NaN}]', "NaN is not valid JSON"),
            ('[{"id":1,"name":"a","recipe":"b","x":[Infinity]}]', "Infinity is not valid JSON"),
            ('[{"id":1,"name":"a","recipe":"b","x":{"y":-Infinity}}]', "-Infinity is not valid JSON"),
        ],
    )
    def test_rejects_malformed(self, payload, reason):
        with pytest.raises(MalformedPayloadError, match=reason):
            decode_collection(payload)

    def test_accepts_utf8_bom(self):
        decoded = decode_collection(b"\xef\xbb\xbf" + '[{"id":1,"name":"a","recipe":"b"}]'.encode("utf-8"))
        assert decoded.ids == [1]

    def test_rejects_invalid_utf8(self):
        with pytest.raises(MalformedPayloadError, match="not valid UTF-8"):
            decode_collection(b'[{"id":1,"name":"\xff","recipe":""}]')

    def test_error_keeps_cause(self):
        with pytest.raises(MalformedPayloadError) as exc_info:
            decode_collection("[")
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)
        assert exc_info.value.reason.startswith("invalid JSON")
