# File: dtogen/models.py
"""
dtogen - Core Data Models
==========================
Pydantic V2 models describing a single document entity: a named schema
holding an ordered, recursive tree of typed fields plus the storage-layer
options (indexes, hooks, virtuals, methods, statics).

These models are the single source of truth for the whole pipeline:
Structural Edits → Review → Rendering → Export.

The wire form (JSON / YAML schema files, editor payloads) uses camelCase
keys such as ``arrayType`` and ``nestedFields``; attributes are exposed in
snake_case.  Both spellings are accepted on input.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    field_validator,
)

from dtogen.utils import capitalize_first, new_field_id

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("dtogen.models")

# ---------------------------------------------------------------------------
# Enums — closed sets used across the entire project
# ---------------------------------------------------------------------------


class FieldType(str, Enum):
    """Field kinds understood by both renderers."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "Date"
    OBJECT_ID = "ObjectId"
    BUFFER = "Buffer"
    MAP = "Map"
    DECIMAL128 = "Decimal128"
    ARRAY = "array"
    OBJECT = "object"
    ENUM = "enum"
    MIXED = "mixed"


class ValidationRuleType(str, Enum):
    """Validation rule kinds attachable to a field."""

    MIN = "min"
    MAX = "max"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    MATCH = "match"
    VALIDATE = "validate"
    CUSTOM = "custom"


class IndexKind(str, Enum):
    """Informational index kind carried from the editor."""

    SINGLE = "single"
    COMPOUND = "compound"
    TEXT = "text"
    GEO_2DSPHERE = "2dsphere"
    HASHED = "hashed"


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    use_enum_values=True,
    frozen=False,
    extra="forbid",
)


# ---------------------------------------------------------------------------
# Field-level primitives
# ---------------------------------------------------------------------------


class ValidationRule(BaseModel):
    """A single validation rule, e.g. ``min: 0`` or ``match: /^\\S+@\\S+$/``."""

    model_config = _SHARED_CONFIG

    type: ValidationRuleType = Field(..., description="Rule kind.")
    value: Union[int, float, str] = Field(..., description="Rule argument, emitted verbatim.")
    message: Optional[str] = Field(default=None, description="Custom error message.")


class EnumValue(BaseModel):
    """One ``KEY = "value"`` member of an enum field."""

    model_config = _SHARED_CONFIG

    key: str = Field(default="", description="Enum member identifier.")
    value: str = Field(default="", description="Stored string value.")
    description: Optional[str] = Field(default=None)


class FieldDefinition(BaseModel):
    """
    One node of the field tree.

    ``nested_fields`` is owned exclusively by its parent and is meaningful
    for ``object`` fields and for ``array`` fields whose ``array_type`` is
    ``object``.  ``enum`` is meaningful for ``enum`` fields only.  Neither
    invariant is enforced here: the renderers tolerate the wrong
    combination and the review pass reports it.
    """

    model_config = _SHARED_CONFIG

    # -- Identity -----------------------------------------------------------
    id: str = Field(default_factory=new_field_id, description="Tree-unique token.")
    name: str = Field(default="", description="Field identifier (not validated).")
    type: FieldType = Field(default=FieldType.STRING, description="Field kind.")

    # -- Flags --------------------------------------------------------------
    required: bool = Field(default=False)
    unique: bool = Field(default=False)
    index: Optional[bool] = Field(default=None)
    sparse: Optional[bool] = Field(default=None)
    immutable: Optional[bool] = Field(default=None)
    deprecated: Optional[bool] = Field(default=None)
    select: Optional[bool] = Field(
        default=None, description="Unset means selected by default."
    )
    virtual: Optional[bool] = Field(default=None)
    populate: Optional[bool] = Field(default=None)

    # -- Value attributes ---------------------------------------------------
    default: Optional[str] = Field(
        default=None, description="Raw default literal, emitted verbatim."
    )
    description: Optional[str] = Field(default=None)
    example: Optional[str] = Field(default=None)
    alias: Optional[str] = Field(default=None)
    transform: Optional[str] = Field(default=None)
    getter: Optional[str] = Field(default=None)
    setter: Optional[str] = Field(default=None)

    # -- References ---------------------------------------------------------
    ref: Optional[str] = Field(default=None, description="Referenced model name.")
    ref_path: Optional[str] = Field(
        default=None, alias="refPath", description="Dynamic reference field."
    )

    # -- Array attributes ---------------------------------------------------
    array_type: Optional[FieldType] = Field(default=None, alias="arrayType")
    array_ref: Optional[str] = Field(default=None, alias="arrayRef")
    array_min_items: Optional[NonNegativeInt] = Field(default=None, alias="arrayMinItems")
    array_max_items: Optional[NonNegativeInt] = Field(default=None, alias="arrayMaxItems")

    # -- Children -----------------------------------------------------------
    nested_fields: Optional[List["FieldDefinition"]] = Field(
        default=None, alias="nestedFields"
    )
    enum: Optional[List[EnumValue]] = Field(default=None)
    validation: Optional[List[ValidationRule]] = Field(default=None)

    # -- Editor view state --------------------------------------------------
    is_expanded: Optional[bool] = Field(default=None, alias="isExpanded")

    @field_validator("default", "example", mode="before")
    @classmethod
    def _literal_to_text(cls, v: Any) -> Any:
        # YAML/JSON payloads may carry numbers or booleans; keep them as source text.
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, (int, float)):
            return str(v)
        return v

    # -- Factories & helpers ------------------------------------------------

    @classmethod
    def new(cls) -> "FieldDefinition":
        """The seed field the editor appends on "Add Field"."""
        return cls(
            name="",
            type=FieldType.STRING,
            required=False,
            unique=False,
            is_expanded=True,
        )

    @property
    def enum_name(self) -> str:
        return f"{capitalize_first(self.name)}Enum"

    @property
    def has_nested_object(self) -> bool:
        """True for ``object`` and array-of-``object`` fields."""
        if self.type == FieldType.OBJECT:
            return True
        return self.type == FieldType.ARRAY and self.array_type == FieldType.OBJECT

    def __repr__(self) -> str:
        req: str = " required" if self.required else ""
        return f"<Field {self.name or '?'}:{getattr(self.type, 'value', self.type)}{req} #{self.id}>"


FieldDefinition.model_rebuild()


# ---------------------------------------------------------------------------
# Schema-level building blocks
# ---------------------------------------------------------------------------


class SchemaOptions(BaseModel):
    """Options block passed as the second argument of ``new Schema(...)``."""

    model_config = _SHARED_CONFIG

    timestamps: bool = Field(default=True)
    version_key: bool = Field(default=False, alias="versionKey")
    strict: bool = Field(default=True)
    validate_before_save: bool = Field(default=True, alias="validateBeforeSave")
    auto_index: bool = Field(default=True, alias="autoIndex")
    collection: Optional[str] = Field(default=None)
    discriminator_key: Optional[str] = Field(default=None, alias="discriminatorKey")


class IndexDefinition(BaseModel):
    """Schema-level (possibly compound) index."""

    model_config = _SHARED_CONFIG

    fields: List[str] = Field(default_factory=list, description="Ordered field names.")
    type: Optional[IndexKind] = Field(default=None, description="Informational only.")
    unique: Optional[bool] = Field(default=None)
    sparse: Optional[bool] = Field(default=None)
    background: Optional[bool] = Field(default=None)


class SchemaHooks(BaseModel):
    """Lifecycle events that receive a placeholder hook."""

    model_config = _SHARED_CONFIG

    pre: List[str] = Field(default_factory=list)
    post: List[str] = Field(default_factory=list)


class StandaloneEnum(BaseModel):
    """Schema-level enum declared outside any field (carried, not rendered)."""

    model_config = _SHARED_CONFIG

    name: str = Field(..., description="Enum name.")
    values: List[EnumValue] = Field(default_factory=list)
    description: Optional[str] = Field(default=None)


# ---------------------------------------------------------------------------
# DTOSchema — root aggregate
# ---------------------------------------------------------------------------


class DTOSchema(BaseModel):
    """
    The root model: one named entity and everything needed to render it.

    ``DTOSchema()`` gives the editor's starting state (name ``User``,
    timestamps on, version key off, every sequence empty).  The value is
    treated as copy-on-write: structural edits in ``dtogen.tree`` return a
    new schema and never touch the one they were given.
    """

    model_config = _SHARED_CONFIG

    name: str = Field(default="User", description="Entity name.")
    fields: List[FieldDefinition] = Field(
        default_factory=list, description="Top-level fields in declaration order."
    )
    imports: List[str] = Field(
        default_factory=list, description="Raw import lines injected verbatim."
    )
    enums: List[StandaloneEnum] = Field(default_factory=list)
    indexes: List[IndexDefinition] = Field(default_factory=list)
    options: SchemaOptions = Field(default_factory=SchemaOptions)
    hooks: SchemaHooks = Field(default_factory=SchemaHooks)
    virtuals: List[str] = Field(default_factory=list)
    methods: List[str] = Field(default_factory=list)
    statics: List[str] = Field(default_factory=list)

    @property
    def class_name(self) -> str:
        """Identifier stem for ``<Name>Dto``, ``<Name>Schema`` and the model."""
        return capitalize_first(self.name)

    @property
    def enum_fields(self) -> List[FieldDefinition]:
        """Top-level fields of type ``enum`` (nested enums are not declared)."""
        return [f for f in self.fields if f.type == FieldType.ENUM]

    # -- Wire form ----------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DTOSchema":
        """Validate a camelCase (or snake_case) payload."""
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        """Dump to the camelCase wire form, leaving out unset optionals."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
        )

    def __repr__(self) -> str:
        return f"<DTOSchema {self.name} ({len(self.fields)} top-level fields)>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "FieldType",
    "ValidationRuleType",
    "IndexKind",
    "ValidationRule",
    "EnumValue",
    "FieldDefinition",
    "SchemaOptions",
    "IndexDefinition",
    "SchemaHooks",
    "StandaloneEnum",
    "DTOSchema",
]

logger.debug("dtogen.models loaded — %d public symbols.", len(__all__))
