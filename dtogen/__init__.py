# File: dtogen/__init__.py
"""
dtogen — TypeScript DTO and Mongoose Schema Generator
======================================================

Turns an entity schema (a tree of field definitions) into two TypeScript
source documents: a type-definition module (enums, nested object types,
the main DTO and its derived Create/Update/Response/Populated types) and
a Mongoose model module (schema definition, indexes, hooks, model export).

Architecture overview::

    ┌──────────────┐     ┌───────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│  DtoGenerator  │────▶│ TemplateGenerator│
    │   (cli.py)   │     │ (generator.py) │     │  (templates.py)  │
    └──────────────┘     └───────┬───────┘     └──────────────────┘
                                 │
                    ┌────────────┼────────────┐
                    ▼            ▼            ▼
             ┌──────────┐ ┌───────────┐ ┌───────────┐
             │validators│ │models/tree│ │ exporters │
             │  (.py)   │ │  (.py)    │ │  (.py)    │
             └──────────┘ └───────────┘ └───────────┘

Usage::

    # As a library
    from dtogen import DTOSchema, render
    artifacts = render(DTOSchema.from_dict(data))
    print(artifacts.type_artifact)

    # From the command line
    python -m dtogen --schema user.yaml --output ./src --verbose

Public API:
    - render             — Pure schema → (types, storage) rendering
    - DtoGenerator       — Batch orchestrator with review and export
    - DTOSchema          — Entity schema model
    - FieldDefinition    — Field tree node
    - apply_*            — Persistent edits on a schema's field tree
    - validate_schema    — Schema review entry point
"""

from __future__ import annotations

__version__: str = "1.0.0"
__author__: str = "Diegoproggramer"
__license__: str = "MIT"

from dtogen.models import (
    DTOSchema,
    EnumValue,
    FieldDefinition,
    FieldType,
    IndexDefinition,
    IndexKind,
    SchemaHooks,
    SchemaOptions,
    StandaloneEnum,
    ValidationRule,
    ValidationRuleType,
)
from dtogen.tree import (
    apply_insert,
    apply_remove,
    apply_toggle,
    apply_update,
    find_field_by_id,
    insert_field,
    remove_field,
    toggle_field_expansion,
    update_field,
)
from dtogen.validators import validate_schema, ValidationResult
from dtogen.utils import Timer, capitalize_first, write_file
from dtogen.templates import (
    TemplateGenerator,
    render_storage_artifact,
    render_type_artifact,
    storage_field_def,
    storage_type_of,
    type_of,
)
from dtogen.exporters import ArtifactExporter, ExportResult, FileRecord
from dtogen.generator import DtoGenerator, GenerationReport, RenderedArtifacts, render

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Core orchestrator
    "render",
    "RenderedArtifacts",
    "DtoGenerator",
    "GenerationReport",
    # Models
    "DTOSchema",
    "EnumValue",
    "FieldDefinition",
    "FieldType",
    "IndexDefinition",
    "IndexKind",
    "SchemaHooks",
    "SchemaOptions",
    "StandaloneEnum",
    "ValidationRule",
    "ValidationRuleType",
    # Tree edits
    "insert_field",
    "remove_field",
    "update_field",
    "toggle_field_expansion",
    "find_field_by_id",
    "apply_insert",
    "apply_remove",
    "apply_update",
    "apply_toggle",
    # Review
    "validate_schema",
    "ValidationResult",
    # Templates
    "TemplateGenerator",
    "type_of",
    "storage_type_of",
    "storage_field_def",
    "render_type_artifact",
    "render_storage_artifact",
    # Exporters
    "ArtifactExporter",
    "ExportResult",
    "FileRecord",
    # Utilities
    "Timer",
    "capitalize_first",
    "write_file",
]
