"""
tests/test_validators.py
Unit tests for dtogen.validators (schema review).

Tests cover:
- ValidationResult bookkeeping and report formatting
- Each individual check, positive and negative
- The aggregate validate_schema pipeline
"""

from __future__ import annotations

from typing import Any, Dict

import pytest

from dtogen.models import DTOSchema, FieldDefinition
from dtogen.validators import (
    ReviewWarning,
    ValidationResult,
    validate_field_ids,
    validate_field_names,
    validate_field_shapes,
    validate_indexes,
    validate_schema,
    validate_schema_name,
)


def _schema(*fields: Dict[str, Any], **extra: Any) -> DTOSchema:
    return DTOSchema.from_dict({"name": "User", "fields": list(fields), **extra})


# ===========================================================================
# Result container
# ===========================================================================


class TestValidationResult:
    def test_empty_result(self) -> None:
        result = ValidationResult()
        assert not result.has_warnings
        assert len(result) == 0
        assert result.summary() == "Review: 0 warning(s)."
        assert result.format_report() == "Review: 0 warning(s)."

    def test_add_warning(self) -> None:
        result = ValidationResult()
        result.add_warning("X", "something odd", {"k": 1})
        assert result.has_warnings
        assert result.codes == ["X"]
        assert result.warnings[0].context == {"k": 1}

    def test_merge_and_report(self) -> None:
        first, second = ValidationResult(), ValidationResult()
        first.add_warning("A", "a")
        second.add_warning("B", "b")
        first.merge(second)
        assert first.format_report().splitlines() == [
            "Review: 2 warning(s).",
            "  ⚠ [A] a",
            "  ⚠ [B] b",
        ]

    def test_warning_repr(self) -> None:
        assert str(ReviewWarning("C", "msg")) == "[WARNING] C: msg"


# ===========================================================================
# Individual checks
# ===========================================================================


class TestSchemaName:
    @pytest.mark.parametrize("name", ["User", "blogPost", "_x", "$y"])
    def test_valid(self, name: str) -> None:
        assert len(validate_schema_name(DTOSchema(name=name))) == 0

    @pytest.mark.parametrize("name", ["", "bad name", "1User", "user-profile"])
    def test_invalid(self, name: str) -> None:
        assert validate_schema_name(DTOSchema(name=name)).codes == ["INVALID_SCHEMA_NAME"]


class TestFieldNames:
    def test_clean_schema(self, example_schema: DTOSchema) -> None:
        assert len(validate_field_names(example_schema)) == 0

    def test_empty_and_invalid_names(self) -> None:
        schema = _schema({"name": ""}, {"name": "first-name"})
        assert sorted(validate_field_names(schema).codes) == [
            "EMPTY_FIELD_NAME", "INVALID_FIELD_NAME",
        ]

    def test_duplicate_siblings(self) -> None:
        schema = _schema({"name": "a"}, {"name": "a"})
        assert validate_field_names(schema).codes == ["DUPLICATE_FIELD_NAME"]

    def test_same_name_at_different_levels_is_fine(self) -> None:
        schema = _schema(
            {"name": "name"},
            {"name": "owner", "type": "object", "nestedFields": [{"name": "name"}]},
        )
        assert len(validate_field_names(schema)) == 0

    def test_duplicate_nested_siblings(self) -> None:
        schema = _schema(
            {"name": "owner", "type": "object", "nestedFields": [{"name": "x"}, {"name": "x"}]},
        )
        assert validate_field_names(schema).codes == ["DUPLICATE_FIELD_NAME"]


class TestFieldIds:
    def test_unique_ids(self, nested_schema: DTOSchema) -> None:
        assert len(validate_field_ids(nested_schema)) == 0

    def test_duplicate_across_levels(self) -> None:
        schema = _schema(
            {"id": "a", "name": "x"},
            {"id": "o", "name": "o", "type": "object", "nestedFields": [{"id": "a", "name": "y"}]},
        )
        result = validate_field_ids(schema)
        assert result.codes == ["DUPLICATE_FIELD_ID"]
        assert result.warnings[0].context == {"id": "a"}


class TestFieldShapes:
    def test_clean_schema(self, example_schema: DTOSchema) -> None:
        assert len(validate_field_shapes(example_schema)) == 0

    @pytest.mark.parametrize(
        "field, code",
        [
            ({"name": "s", "type": "string", "nestedFields": [{"name": "x"}]}, "UNUSED_NESTED_FIELDS"),
            ({"name": "s", "type": "string", "enum": [{"key": "A", "value": "a"}]}, "UNUSED_ENUM_VALUES"),
            ({"name": "e", "type": "enum"}, "EMPTY_ENUM"),
            ({"name": "e", "type": "enum", "enum": []}, "EMPTY_ENUM"),
            ({"name": "e", "type": "enum", "enum": [{"key": "", "value": "a"}]}, "BLANK_ENUM_KEY"),
            ({"name": "r", "type": "string", "ref": "User"}, "REF_ON_NON_OBJECT_ID"),
            ({"name": "r", "type": "string", "refPath": "kind"}, "REF_ON_NON_OBJECT_ID"),
            ({"name": "a", "type": "array", "arrayType": "array"}, "ARRAY_OF_ARRAY"),
            (
                {"name": "a", "type": "array", "arrayMinItems": 3, "arrayMaxItems": 1},
                "ARRAY_BOUNDS_INVERTED",
            ),
        ],
    )
    def test_findings(self, field: Dict[str, Any], code: str) -> None:
        assert validate_field_shapes(_schema(field)).codes == [code]

    def test_nested_findings_are_reported(self) -> None:
        schema = _schema(
            {"name": "o", "type": "object", "nestedFields": [{"name": "e", "type": "enum"}]}
        )
        assert validate_field_shapes(schema).codes == ["EMPTY_ENUM"]

    def test_ref_on_object_id_is_fine(self) -> None:
        assert len(validate_field_shapes(_schema({"name": "o", "type": "ObjectId", "ref": "User"}))) == 0

    def test_empty_nested_list_on_scalar_is_fine(self) -> None:
        assert len(validate_field_shapes(_schema({"name": "s", "nestedFields": []}))) == 0


class TestIndexes:
    def test_known_fields(self, example_schema: DTOSchema) -> None:
        assert len(validate_indexes(example_schema)) == 0

    def test_unknown_and_empty(self) -> None:
        schema = _schema({"name": "email"}, indexes=[{"fields": ["email", "ghost"]}, {"fields": []}])
        result = validate_indexes(schema)
        assert result.codes == ["INDEX_UNKNOWN_FIELD", "EMPTY_INDEX"]
        assert result.warnings[0].context["fields"] == ["ghost"]


# ===========================================================================
# Aggregate
# ===========================================================================


class TestValidateSchema:
    def test_example_schema_is_clean(self, example_schema: DTOSchema) -> None:
        result = validate_schema(example_schema)
        assert len(result) == 0

    def test_collects_every_finding(self, review_warning_schema_dict: Dict[str, Any]) -> None:
        result = validate_schema(DTOSchema.from_dict(review_warning_schema_dict))
        assert result.has_warnings
        assert set(result.codes) == {
            "INVALID_SCHEMA_NAME",
            "INVALID_FIELD_NAME",
            "EMPTY_FIELD_NAME",
            "DUPLICATE_FIELD_ID",
            "REF_ON_NON_OBJECT_ID",
            "EMPTY_ENUM",
            "INDEX_UNKNOWN_FIELD",
            "EMPTY_INDEX",
        }

    def test_does_not_mutate_schema(self, nested_schema: DTOSchema) -> None:
        before = nested_schema.model_dump()
        validate_schema(nested_schema)
        assert nested_schema.model_dump() == before

    def test_seed_field_is_flagged_until_named(self) -> None:
        schema = DTOSchema(fields=[FieldDefinition.new()])
        assert validate_schema(schema).codes == ["EMPTY_FIELD_NAME"]
