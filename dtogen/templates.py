# File: dtogen/templates.py
"""
dtogen - Code Template Engine
==============================
Pure-Python code generation engine.

This module is the **heart** of dtogen: it transforms a ``DTOSchema`` into
two TypeScript source documents:

    1. the type-definition document (enums, nested interfaces, the main
       ``<Name>Dto`` type, its derived variants and an export list);
    2. the Mongoose schema/model document (field map, options, indexes,
       virtual/method/static/hook stubs, model registration).

**Contract:**
    - Every function here is pure and total: malformed input renders as
      best-effort text, nothing raises.
    - All string assembly uses ``List[str]`` + ``"\\n".join()``.
    - Output is byte-for-byte deterministic for a given schema.

Indentation of nested literals follows the key that owns them: a key at
column *n* puts its members at *n + 2* and its closing brace at *n*.
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, List

from dtogen.models import DTOSchema, FieldDefinition, FieldType
from dtogen.utils import capitalize_first, join_sections, wrap_in_quotes

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("dtogen.templates")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Recursion guard for pathological (self-referencing) trees.
MAX_NESTING_DEPTH: int = 32

_STEP: int = 2

# TypeScript type per field type (array / object / enum handled separately)
_TS_TYPE_MAP: Dict[str, str] = {
    "string": "string",
    "number": "number",
    "boolean": "boolean",
    "Date": "Date",
    "ObjectId": "Types.ObjectId",
    "Buffer": "Buffer",
    "mixed": "any",
    "Map": "Map<string, any>",
    "Decimal128": "Types.Decimal128",
}

# Element types of ``T[]`` that differ from their own name
_TS_ARRAY_ELEMENT_MAP: Dict[str, str] = {
    "ObjectId": "Types.ObjectId",
    "Decimal128": "Types.Decimal128",
}

# Mongoose SchemaType per field type
_MONGOOSE_TYPE_MAP: Dict[str, str] = {
    "string": "String",
    "number": "Number",
    "boolean": "Boolean",
    "Date": "Date",
    "ObjectId": "Schema.Types.ObjectId",
    "Buffer": "Buffer",
    "mixed": "Schema.Types.Mixed",
    "Map": "Map",
    "Decimal128": "Schema.Types.Decimal128",
    "enum": "String",
}

# Element types allowed inside ``[T]``; anything else becomes Mixed
_MONGOOSE_ARRAY_ELEMENT_MAP: Dict[str, str] = {
    "ObjectId": "Schema.Types.ObjectId",
    "string": "String",
    "number": "Number",
    "boolean": "Boolean",
    "Date": "Date",
    "Decimal128": "Schema.Types.Decimal128",
}

_ANY_TS: str = "any"
_MIXED: str = "Schema.Types.Mixed"

# Validation rule kinds that map one-to-one onto a SchemaType option
_RENDERED_RULES: FrozenSet[str] = frozenset({"min", "max", "minLength", "maxLength", "match"})

# Default literals passed through untouched even for non-string types
_CURRENT_TIME_SENTINEL: str = "Date.now"

_DOCUMENT_IMPORT: str = 'import { Document, Types } from "mongoose";'
_MONGOOSE_IMPORT: str = 'import { Model, Schema, model } from "mongoose";'


def _kind(value: object) -> str:
    """Plain string value of a FieldType (or of an out-of-domain raw value)."""
    return str(getattr(value, "value", value))


def _optional_marker(field: FieldDefinition) -> str:
    return "" if field.required else "?"


def _too_deep(field: FieldDefinition, depth: int, ancestors: FrozenSet[int]) -> bool:
    if depth > MAX_NESTING_DEPTH or id(field) in ancestors:
        logger.warning(
            "Field '%s' nests beyond %d levels or contains itself; "
            "rendering it as an untyped value.",
            field.name,
            MAX_NESTING_DEPTH,
        )
        return True
    return False


# ---------------------------------------------------------------------------
# Type renderer
# ---------------------------------------------------------------------------


def _ts_members(
    field: FieldDefinition,
    indent: int,
    depth: int,
    ancestors: FrozenSet[int],
) -> str:
    pad: str = " " * (indent + _STEP)
    lines: List[str] = [
        f"{pad}{f.name}{_optional_marker(f)}: "
        f"{_type_of(f, indent + _STEP, depth + 1, ancestors)};"
        for f in field.nested_fields or []
    ]
    return "{\n" + "\n".join(lines) + "\n" + " " * indent + "}"


def _type_of(
    field: FieldDefinition,
    indent: int,
    depth: int,
    ancestors: FrozenSet[int],
) -> str:
    kind: str = _kind(field.type)

    if kind in _TS_TYPE_MAP:
        return _TS_TYPE_MAP[kind]

    if kind == "enum":
        return f"{capitalize_first(field.name)}Enum"

    if kind == "array":
        element: str = _kind(field.array_type) if field.array_type is not None else ""
        if element == "object" and field.nested_fields is not None:
            if _too_deep(field, depth, ancestors):
                return f"{_ANY_TS}[]"
            return _ts_members(field, indent, depth, ancestors | {id(field)}) + "[]"
        mapped: str = _TS_ARRAY_ELEMENT_MAP.get(element) or _TS_TYPE_MAP.get(element, _ANY_TS)
        return f"{mapped}[]"

    if kind == "object":
        if field.nested_fields is None:
            return "object"
        if _too_deep(field, depth, ancestors):
            return _ANY_TS
        return _ts_members(field, indent, depth, ancestors | {id(field)})

    return _ANY_TS


def type_of(field: FieldDefinition, indent: int = 2) -> str:
    """
    Render the TypeScript type expression of *field*.

    Objects (and arrays of objects) with nested fields render as inline
    anonymous records; *indent* is the column of the key owning the type.
    """
    return _type_of(field, indent, 0, frozenset())


# ---------------------------------------------------------------------------
# Storage (Mongoose) field renderer
# ---------------------------------------------------------------------------


def _storage_type_of(
    field: FieldDefinition,
    indent: int,
    depth: int,
    ancestors: FrozenSet[int],
) -> str:
    kind: str = _kind(field.type)

    if kind == "array":
        element: str = _kind(field.array_type) if field.array_type is not None else ""
        if element == "object" and field.nested_fields is not None:
            if _too_deep(field, depth, ancestors):
                return f"[{_MIXED}]"
            inner: int = indent + _STEP
            members: List[str] = [
                f"{' ' * inner}{f.name}: "
                f"{_storage_field_def(f, inner, depth + 1, ancestors | {id(field)})}"
                for f in field.nested_fields
            ]
            members.append(f"{' ' * inner}_id: false")
            return "[{\n" + ",\n".join(members) + "\n" + " " * indent + "}]"
        return f"[{_MONGOOSE_ARRAY_ELEMENT_MAP.get(element, _MIXED)}]"

    if kind == "object":
        if field.nested_fields is None:
            return _MIXED
        if _too_deep(field, depth, ancestors):
            return _MIXED
        inner = indent + _STEP
        members = [
            f"{' ' * inner}{f.name}: "
            f"{_storage_field_def(f, inner, depth + 1, ancestors | {id(field)})}"
            for f in field.nested_fields
        ]
        return "{\n" + ",\n".join(members) + "\n" + " " * indent + "}"

    return _MONGOOSE_TYPE_MAP.get(kind, _MIXED)


def _default_literal(field: FieldDefinition) -> str:
    raw: str = field.default or ""
    if _kind(field.type) == "string":
        return wrap_in_quotes(raw)
    if raw == _CURRENT_TIME_SENTINEL:
        return _CURRENT_TIME_SENTINEL
    return raw


def _storage_options(field: FieldDefinition, base: str) -> List[str]:
    """Ordered ``key: value`` options for a scalar field."""
    options: List[str] = [f"type: {base}"]

    if field.required:
        options.append("required: true")
    if field.unique:
        options.append("unique: true")
    if field.index:
        options.append("index: true")
    if field.sparse:
        options.append("sparse: true")
    if field.immutable:
        options.append("immutable: true")
    if field.default:
        options.append(f"default: {_default_literal(field)}")
    if field.ref:
        options.append(f"ref: {wrap_in_quotes(field.ref)}")
    if field.ref_path:
        options.append(f"refPath: {wrap_in_quotes(field.ref_path)}")
    if field.alias:
        options.append(f"alias: {wrap_in_quotes(field.alias)}")
    if field.select is False:
        options.append("select: false")

    for rule in field.validation or []:
        rule_kind: str = _kind(rule.type)
        if rule_kind in _RENDERED_RULES:
            options.append(f"{rule_kind}: {rule.value}")

    if _kind(field.type) == "enum" and field.enum is not None:
        options.append(f"enum: Object.values({capitalize_first(field.name)}Enum)")

    return options


def _storage_field_def(
    field: FieldDefinition,
    indent: int,
    depth: int,
    ancestors: FrozenSet[int],
) -> str:
    base: str = _storage_type_of(field, indent, depth, ancestors)
    if _kind(field.type) in ("array", "object"):
        return base

    options: List[str] = _storage_options(field, base)
    if len(options) == 1:
        return base
    pad: str = " " * (indent + _STEP)
    return "{\n" + pad + f",\n{pad}".join(options) + "\n" + " " * indent + "}"


def storage_type_of(field: FieldDefinition, indent: int = 4) -> str:
    """
    Render the Mongoose SchemaType token of *field*.

    Objects (and arrays of objects) with nested fields render as nested
    field-map literals whose members go through ``storage_field_def``.
    """
    return _storage_type_of(field, indent, 0, frozenset())


def storage_field_def(field: FieldDefinition, indent: int = 4) -> str:
    """
    Render the value placed after ``name:`` in a Mongoose field map.

    A scalar field with nothing but its type renders as the bare type
    token; any extra option switches to the ``{ type: ..., ... }`` form.
    """
    return _storage_field_def(field, indent, 0, frozenset())


# ---------------------------------------------------------------------------
# TemplateGenerator — artifact assembly
# ---------------------------------------------------------------------------


class TemplateGenerator:
    """
    Assembles the two artifacts for a schema.

    *dto_dir* and *model_dir* name the directories the artifacts are
    exported to; the model artifact imports the DTO artifact through the
    relative path between them (``../dtos/<name>.dto`` by default).
    """

    def __init__(self, dto_dir: str = "dtos", model_dir: str = "models") -> None:
        self._dto_dir: str = dto_dir
        self._model_dir: str = model_dir

    # -----------------------------------------------------------------
    # File naming
    # -----------------------------------------------------------------

    @staticmethod
    def file_stem(schema: DTOSchema) -> str:
        return schema.name.lower()

    def dto_path(self, schema: DTOSchema) -> str:
        return f"{self._dto_dir}/{self.file_stem(schema)}.dto.ts"

    def model_path(self, schema: DTOSchema) -> str:
        return f"{self._model_dir}/{self.file_stem(schema)}.model.ts"

    # -----------------------------------------------------------------
    # Type-definition artifact
    # -----------------------------------------------------------------

    def generate_type_artifact(self, schema: DTOSchema) -> str:
        """Render the full type-definition document."""
        name: str = schema.class_name

        sections: List[str] = [
            self._dto_imports(schema),
            "\n\n".join(self._enum_declarations(schema)),
            "\n\n".join(self._nested_interfaces(schema.fields, name)),
            self._main_type(schema),
            "\n".join(self._derived_types(name)),
            self._dto_export(schema),
        ]

        logger.debug(
            "Rendered type artifact for '%s' (%d top-level fields).",
            schema.name,
            len(schema.fields),
        )
        return join_sections(sections)

    @staticmethod
    def _dto_imports(schema: DTOSchema) -> str:
        lines: List[str] = [_DOCUMENT_IMPORT]
        lines.extend(imp for imp in schema.imports if imp.strip())
        return "\n".join(lines)

    @staticmethod
    def _enum_declarations(schema: DTOSchema) -> List[str]:
        declarations: List[str] = []
        for field in schema.enum_fields:
            if field.enum is None:
                continue
            values: str = ",\n".join(
                f"  {member.key} = {wrap_in_quotes(member.value)}" for member in field.enum
            )
            declarations.append(f"enum {field.enum_name} {{\n{values}\n}}")
        return declarations

    def _nested_interfaces(
        self,
        fields: List[FieldDefinition],
        prefix: str,
        depth: int = 0,
    ) -> List[str]:
        """
        One interface per object-bearing field, depth-first, parent first.

        Names concatenate the enclosing prefix (initially the schema name)
        with ``<Field>Type``, or ``<Field>ItemType`` for arrays of objects.
        """
        if depth > MAX_NESTING_DEPTH:
            logger.warning("Nested interfaces deeper than %d levels skipped.", MAX_NESTING_DEPTH)
            return []

        interfaces: List[str] = []
        for field in fields:
            if field.nested_fields is None:
                continue
            kind: str = _kind(field.type)
            if kind == "object":
                suffix: str = "Type"
            elif kind == "array" and _kind(field.array_type) == "object":
                suffix = "ItemType"
            else:
                continue

            interface_name: str = f"{prefix}{capitalize_first(field.name)}{suffix}"
            members: str = "\n".join(self._member_line(f) for f in field.nested_fields)
            interfaces.append(f"interface {interface_name} {{\n{members}\n}}")
            interfaces.extend(
                self._nested_interfaces(field.nested_fields, interface_name, depth + 1)
            )
        return interfaces

    @staticmethod
    def _member_line(field: FieldDefinition, deprecated_marker: bool = False) -> str:
        line: str = f"  {field.name}{_optional_marker(field)}: {type_of(field)};"
        if field.description:
            line += f" // {field.description}"
        if deprecated_marker and field.deprecated:
            line += " @deprecated"
        return line

    def _main_type(self, schema: DTOSchema) -> str:
        members: str = "\n".join(
            self._member_line(f, deprecated_marker=True) for f in schema.fields
        )
        return f"type {schema.class_name}Dto = {{\n{members}\n}};"

    @staticmethod
    def _derived_types(name: str) -> List[str]:
        return [
            f"type {name}SchemaDto = {name}Dto & Document;",
            f"type Create{name}Dto = Omit<{name}Dto, '_id' | 'createdAt' | 'updatedAt'>;",
            f"type Update{name}Dto = Partial<Create{name}Dto>;",
            f"type {name}PopulatedDto = {name}Dto; // Add populated field types as needed",
        ]

    @staticmethod
    def _export_names(schema: DTOSchema) -> List[str]:
        name: str = schema.class_name
        names: List[str] = [
            f"{name}Dto",
            f"{name}SchemaDto",
            f"Create{name}Dto",
            f"Update{name}Dto",
            f"{name}PopulatedDto",
        ]
        names.extend(f.enum_name for f in schema.enum_fields)
        return names

    def _dto_export(self, schema: DTOSchema) -> str:
        return "export {\n  " + ",\n  ".join(self._export_names(schema)) + "\n};"

    # -----------------------------------------------------------------
    # Storage schema artifact
    # -----------------------------------------------------------------

    def generate_storage_artifact(self, schema: DTOSchema) -> str:
        """Render the full Mongoose schema/model document."""
        name: str = schema.class_name

        sections: List[str] = [
            self._model_imports(schema),
            self._schema_statement(schema),
            "\n".join(self._index_statements(schema)),
            "\n\n".join(
                f"{name}Schema.virtual('{virtual}').get(function() {{\n"
                f"  // Add virtual logic here\n}});"
                for virtual in schema.virtuals
            ),
            "\n\n".join(
                f"{name}Schema.methods.{method} = function() {{\n"
                f"  // Add method logic here\n}};"
                for method in schema.methods
            ),
            "\n\n".join(
                f"{name}Schema.statics.{static} = function() {{\n"
                f"  // Add static method logic here\n}};"
                for static in schema.statics
            ),
            "\n\n".join(self._hook_statements(schema)),
            f'const {name}: Model<{name}SchemaDto> = model("{name}", {name}Schema);',
            f"export {{ {name} }};",
        ]

        logger.debug(
            "Rendered storage artifact for '%s' (%d indexes, %d hooks).",
            schema.name,
            len(schema.indexes),
            len(schema.hooks.pre) + len(schema.hooks.post),
        )
        return join_sections(sections)

    def _model_imports(self, schema: DTOSchema) -> str:
        names: List[str] = [f"{schema.class_name}SchemaDto"]
        names.extend(f.enum_name for f in schema.enum_fields)
        dto_module: str = f"../{self._dto_dir}/{self.file_stem(schema)}.dto"
        return "\n".join([
            _MONGOOSE_IMPORT,
            f'import {{ {", ".join(names)} }} from "{dto_module}";',
        ])

    @staticmethod
    def _schema_statement(schema: DTOSchema) -> str:
        name: str = schema.class_name
        opts = schema.options

        field_map: str = ",\n".join(
            f"    {f.name}: {storage_field_def(f, indent=4)}" for f in schema.fields
        )
        option_lines: List[str] = [
            f"timestamps: {_js_bool(opts.timestamps)}",
            f"versionKey: {_js_bool(opts.version_key)}",
            f"strict: {_js_bool(opts.strict)}",
            f"validateBeforeSave: {_js_bool(opts.validate_before_save)}",
            f"autoIndex: {_js_bool(opts.auto_index)}",
        ]
        if opts.collection:
            option_lines.append(f"collection: {wrap_in_quotes(opts.collection)}")
        if opts.discriminator_key:
            option_lines.append(f"discriminatorKey: {wrap_in_quotes(opts.discriminator_key)}")

        lines: List[str] = [
            f"const {name}Schema = new Schema<{name}SchemaDto>(",
            "  {",
        ]
        if field_map:
            lines.append(field_map)
        lines.extend([
            "  },",
            "  {",
            ",\n".join(f"    {line}" for line in option_lines),
            "  }",
            ");",
        ])
        return "\n".join(lines)

    @staticmethod
    def _index_statements(schema: DTOSchema) -> List[str]:
        statements: List[str] = []
        for index in schema.indexes:
            keys: str = ", ".join(f"{f}: 1" for f in index.fields)
            spec: str = f"{{ {keys} }}"

            flags: List[str] = []
            if index.unique:
                flags.append("unique: true")
            if index.sparse:
                flags.append("sparse: true")
            if index.background:
                flags.append("background: true")
            flag_str: str = f", {{ {', '.join(flags)} }}" if flags else ""

            statements.append(f"{schema.class_name}Schema.index({spec}{flag_str});")
        return statements

    @staticmethod
    def _hook_statements(schema: DTOSchema) -> List[str]:
        name: str = schema.class_name
        hooks: List[str] = [
            f"{name}Schema.pre('{event}', function(next) {{\n"
            f"  // Add pre-hook logic here\n  next();\n}});"
            for event in schema.hooks.pre
        ]
        hooks.extend(
            f"{name}Schema.post('{event}', function(doc) {{\n"
            f"  // Add post-hook logic here\n}});"
            for event in schema.hooks.post
        )
        return hooks

    # -----------------------------------------------------------------
    # Aggregate
    # -----------------------------------------------------------------

    def generate_all(self, schema: DTOSchema) -> Dict[str, str]:
        """Return ``{relative_path: content}`` for both artifacts."""
        return {
            self.dto_path(schema): self.generate_type_artifact(schema),
            self.model_path(schema): self.generate_storage_artifact(schema),
        }


def _js_bool(value: bool) -> str:
    return "true" if value else "false"


# ---------------------------------------------------------------------------
# Module-level conveniences
# ---------------------------------------------------------------------------


def render_type_artifact(schema: DTOSchema) -> str:
    """Type-definition document with the default layout."""
    return TemplateGenerator().generate_type_artifact(schema)


def render_storage_artifact(schema: DTOSchema) -> str:
    """Mongoose schema/model document with the default layout."""
    return TemplateGenerator().generate_storage_artifact(schema)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "MAX_NESTING_DEPTH",
    "type_of",
    "storage_type_of",
    "storage_field_def",
    "TemplateGenerator",
    "render_type_artifact",
    "render_storage_artifact",
]

logger.debug("dtogen.templates loaded — %d public symbols.", len(__all__))
