# File: dtogen/validators.py
"""
dtogen - Schema Review
=======================
A **pure-function review pipeline** over ``DTOSchema``.

Pydantic handles structural correctness when a schema is loaded.  This
module adds the semantic checks a reviewer would make before trusting the
generated code: identifier-shaped names, tree-unique ids, attributes that
only make sense for another field type, index keys that name no field.

Rendering never depends on this pass.  Every finding is a *warning*: the
engine always renders best-effort text and leaves compiling it to the
user.  Callers that want a hard gate (the CLI's ``--fail-on-warnings``)
decide that themselves.

Usage:
    from dtogen.validators import validate_schema
    result = validate_schema(schema)
    for item in result.warnings:
        print(item)
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Callable, Dict, List, Optional, Set

from dtogen.models import DTOSchema, FieldDefinition, FieldType
from dtogen.tree import iter_fields
from dtogen.utils import is_identifier

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("dtogen.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ReviewWarning:
    """Lightweight finding descriptor (no Pydantic overhead)."""

    __slots__ = ("code", "message", "context")

    def __init__(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    def __repr__(self) -> str:
        return f"[WARNING] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()


class ValidationResult:
    """Accumulates the ``ReviewWarning`` findings of the review pipeline."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ReviewWarning] = []

    # -- Mutation -----------------------------------------------------------

    def add_warning(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ReviewWarning(code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    # -- Query --------------------------------------------------------------

    @property
    def warnings(self) -> List[ReviewWarning]:
        return list(self._items)

    @property
    def codes(self) -> List[str]:
        return [w.code for w in self._items]

    @property
    def has_warnings(self) -> bool:
        return bool(self._items)

    def summary(self) -> str:
        return f"Review: {len(self._items)} warning(s)."

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __len__(self) -> int:
        return len(self._items)

    def format_report(self) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary()]
        for item in self._items:
            lines.append(f"  ⚠ [{item.code}] {item.message}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def _label(field: FieldDefinition) -> str:
    return f"'{field.name}'" if field.name else f"<unnamed #{field.id}>"


def validate_schema_name(schema: DTOSchema) -> ValidationResult:
    """The entity name drives every generated identifier."""
    result: ValidationResult = ValidationResult()
    if not is_identifier(schema.name):
        result.add_warning(
            "INVALID_SCHEMA_NAME",
            f"Schema name '{schema.name}' is not a valid identifier; "
            f"generated type and model names will not compile.",
            {"name": schema.name},
        )
    return result


def validate_field_names(schema: DTOSchema) -> ValidationResult:
    """Empty / non-identifier names and duplicate sibling names."""
    result: ValidationResult = ValidationResult()

    def _check_siblings(fields: List[FieldDefinition]) -> None:
        counts: Counter[str] = Counter(f.name for f in fields if f.name)
        for name, count in counts.items():
            if count > 1:
                result.add_warning(
                    "DUPLICATE_FIELD_NAME",
                    f"Field name '{name}' appears {count} times in the same object.",
                    {"name": name},
                )

    _check_siblings(schema.fields)
    for _, field in iter_fields(schema.fields):
        if not field.name:
            result.add_warning(
                "EMPTY_FIELD_NAME",
                f"Field #{field.id} has no name.",
                {"id": field.id},
            )
        elif not is_identifier(field.name):
            result.add_warning(
                "INVALID_FIELD_NAME",
                f"Field name '{field.name}' is not a valid identifier.",
                {"id": field.id, "name": field.name},
            )
        if field.nested_fields:
            _check_siblings(field.nested_fields)
    return result


def validate_field_ids(schema: DTOSchema) -> ValidationResult:
    """Ids must be unique across the whole tree for edits to be unambiguous."""
    result: ValidationResult = ValidationResult()
    counts: Counter[str] = Counter(f.id for _, f in iter_fields(schema.fields))
    for field_id, count in counts.items():
        if count > 1:
            result.add_warning(
                "DUPLICATE_FIELD_ID",
                f"Field id '{field_id}' is used {count} times; edits will only "
                f"reach the first occurrence.",
                {"id": field_id},
            )
    return result


def validate_field_shapes(schema: DTOSchema) -> ValidationResult:
    """Attributes carried by a field type that does not use them."""
    result: ValidationResult = ValidationResult()

    for _, field in iter_fields(schema.fields):
        label: str = _label(field)

        if field.nested_fields and not field.has_nested_object:
            result.add_warning(
                "UNUSED_NESTED_FIELDS",
                f"Field {label} of type '{getattr(field.type, 'value', field.type)}' carries nested fields "
                f"that will not be rendered.",
                {"id": field.id},
            )

        if field.enum is not None and field.type != FieldType.ENUM:
            result.add_warning(
                "UNUSED_ENUM_VALUES",
                f"Field {label} carries enum values but is not an enum.",
                {"id": field.id},
            )

        if field.type == FieldType.ENUM:
            if not field.enum:
                result.add_warning(
                    "EMPTY_ENUM",
                    f"Enum field {label} has no values.",
                    {"id": field.id},
                )
            elif any(not member.key for member in field.enum):
                result.add_warning(
                    "BLANK_ENUM_KEY",
                    f"Enum field {label} has a member with a blank key.",
                    {"id": field.id},
                )

        if (field.ref or field.ref_path) and field.type != FieldType.OBJECT_ID:
            result.add_warning(
                "REF_ON_NON_OBJECT_ID",
                f"Field {label} has a reference but is not an ObjectId.",
                {"id": field.id},
            )

        if field.type == FieldType.ARRAY:
            if field.array_type == FieldType.ARRAY:
                result.add_warning(
                    "ARRAY_OF_ARRAY",
                    f"Array field {label} declares 'array' as its element type.",
                    {"id": field.id},
                )
            if (
                field.array_min_items is not None
                and field.array_max_items is not None
                and field.array_min_items > field.array_max_items
            ):
                result.add_warning(
                    "ARRAY_BOUNDS_INVERTED",
                    f"Array field {label} has arrayMinItems "
                    f"({field.array_min_items}) > arrayMaxItems ({field.array_max_items}).",
                    {"id": field.id},
                )
    return result


def validate_indexes(schema: DTOSchema) -> ValidationResult:
    """Index keys should name top-level fields."""
    result: ValidationResult = ValidationResult()
    known: Set[str] = {f.name for f in schema.fields if f.name}

    for position, index in enumerate(schema.indexes):
        if not index.fields:
            result.add_warning(
                "EMPTY_INDEX",
                f"Index #{position} lists no fields.",
                {"index": position},
            )
            continue
        missing: List[str] = [name for name in index.fields if name not in known]
        if missing:
            result.add_warning(
                "INDEX_UNKNOWN_FIELD",
                f"Index #{position} references unknown field(s): {missing}.",
                {"index": position, "fields": missing},
            )
    return result


# ---------------------------------------------------------------------------
# Aggregate entry point
# ---------------------------------------------------------------------------


def validate_schema(schema: DTOSchema) -> ValidationResult:
    """Run every check and return the merged result."""
    result: ValidationResult = ValidationResult()

    checks: List[Callable[[DTOSchema], ValidationResult]] = [
        validate_schema_name,
        validate_field_names,
        validate_field_ids,
        validate_field_shapes,
        validate_indexes,
    ]

    for check in checks:
        logger.debug("Running check: %s", check.__name__)
        result.merge(check(schema))

    logger.info("Review of '%s' complete: %s", schema.name, result.summary())
    return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ReviewWarning",
    "ValidationResult",
    "validate_schema_name",
    "validate_field_names",
    "validate_field_ids",
    "validate_field_shapes",
    "validate_indexes",
    "validate_schema",
]

logger.debug("dtogen.validators loaded — %d public symbols.", len(__all__))
