# File: dtogen/tree.py
"""
dtogen - Structural Edits on the Field Tree
============================================
Pure, persistent edit operations.  Every function returns a new list (or a
new ``DTOSchema``) and leaves its input untouched: the fields along the
path from the root to the mutation point are shallow-copied, everything
else is shared with the previous tree.

Target sequences are addressed by an explicit *path* of field ids leading
from the root (``None`` or ``()`` is the root list itself)::

    fields, seed = insert_field(fields, ("address",))
    fields = remove_field(fields, "city", ("address",))

A bare field id is accepted as shorthand for "that field's children", and
the nested list object itself (as held by an editor) is resolved by
identity against the current tree.

Edits addressed at ids (or sequences) that are not in the tree are silent
no-ops: the returned list is the very object that was passed in.  Edits
never raise for malformed values either; see ``update_field``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, FrozenSet, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from dtogen.models import DTOSchema, EnumValue, FieldDefinition, FieldType

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("dtogen.tree")

FieldList = List[FieldDefinition]
FieldPath = Tuple[str, ...]
ParentRef = Union[None, str, Sequence[str], FieldList]

# Attributes whose unvalidated values the renderers can still handle
_RAW_KIND_ATTRIBUTES: FrozenSet[str] = frozenset({"type", "array_type"})


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def iter_fields(
    fields: Sequence[FieldDefinition],
    prefix: FieldPath = (),
) -> Iterator[Tuple[FieldPath, FieldDefinition]]:
    """Depth-first walk yielding ``(parent_path, field)`` pairs."""
    for field in fields:
        yield prefix, field
        if field.nested_fields:
            yield from iter_fields(field.nested_fields, prefix + (field.id,))


def find_field_by_id(
    fields: Sequence[FieldDefinition], field_id: str
) -> Optional[FieldDefinition]:
    """Depth-first search; first match wins."""
    for _, field in iter_fields(fields):
        if field.id == field_id:
            return field
    return None


def find_path(fields: Sequence[FieldDefinition], field_id: str) -> Optional[FieldPath]:
    """Return the id path from the root down to (and including) *field_id*."""
    for prefix, field in iter_fields(fields):
        if field.id == field_id:
            return prefix + (field.id,)
    return None


def _path_of_sequence(fields: FieldList, target: FieldList) -> Optional[FieldPath]:
    if target is fields:
        return ()
    for prefix, field in iter_fields(fields):
        if field.nested_fields is target:
            return prefix + (field.id,)
    return None


def resolve_parent(fields: FieldList, parent: ParentRef) -> Optional[FieldPath]:
    """
    Normalise any accepted parent reference to an id path.

    Returns ``None`` when the reference does not point into *fields*.
    A list is always a sequence held by the caller and is matched by
    identity only; the root is addressed as ``None`` or ``()``.
    """
    if parent is None:
        return ()
    if isinstance(parent, str):
        return find_path(fields, parent)
    if isinstance(parent, list) and all(isinstance(f, FieldDefinition) for f in parent):
        return _path_of_sequence(fields, parent)
    return tuple(parent)


# ---------------------------------------------------------------------------
# Copy-on-path rewriting
# ---------------------------------------------------------------------------


def _rewrite(
    fields: FieldList,
    path: FieldPath,
    fn: Callable[[FieldList], FieldList],
) -> FieldList:
    """Apply *fn* to the sequence at *path*, copying every ancestor on the way."""
    if not path:
        return fn(fields)

    head: str = path[0]
    for i, field in enumerate(fields):
        if field.id != head:
            continue
        current: FieldList = field.nested_fields if field.nested_fields is not None else []
        replaced: FieldList = _rewrite(current, path[1:], fn)
        if replaced is current:
            return fields
        updated: FieldList = list(fields)
        updated[i] = field.model_copy(update={"nested_fields": replaced})
        return updated

    logger.debug("Path segment '%s' not found; edit ignored.", head)
    return fields


# ---------------------------------------------------------------------------
# Edit operations
# ---------------------------------------------------------------------------


def insert_field(
    fields: FieldList,
    parent: ParentRef = None,
    new_field: Optional[FieldDefinition] = None,
) -> Tuple[FieldList, FieldDefinition]:
    """
    Append *new_field* (default: ``FieldDefinition.new()``) to the target
    sequence and return ``(new_tree, inserted_field)``.

    A target field without children gets a fresh child list.
    """
    seed: FieldDefinition = new_field if new_field is not None else FieldDefinition.new()
    path: Optional[FieldPath] = resolve_parent(fields, parent)
    if path is None:
        logger.debug("Insert target %r not found; edit ignored.", parent)
        return fields, seed

    result: FieldList = _rewrite(fields, path, lambda seq: [*seq, seed])
    if result is not fields:
        logger.debug("Inserted field %s under path %s.", seed.id, "/".join(path) or "<root>")
    return result, seed


def remove_field(
    fields: FieldList,
    field_id: str,
    parent: ParentRef = None,
) -> FieldList:
    """Remove *field_id* (and its subtree) from the target sequence only."""
    path: Optional[FieldPath] = resolve_parent(fields, parent)
    if path is None:
        return fields

    def _drop(seq: FieldList) -> FieldList:
        kept: FieldList = [f for f in seq if f.id != field_id]
        return seq if len(kept) == len(seq) else kept

    result: FieldList = _rewrite(fields, path, _drop)
    if result is fields:
        logger.debug("Field %s not found under %r; nothing removed.", field_id, parent)
    return result


def _normalise_changes(changes: Mapping[str, Any]) -> Dict[str, Any]:
    """Map camelCase wire keys to attribute names; drop unknown keys."""
    by_alias: Dict[str, str] = {
        (info.alias or name): name for name, info in FieldDefinition.model_fields.items()
    }
    known: Dict[str, Any] = {}
    for key, value in changes.items():
        name: Optional[str] = key if key in FieldDefinition.model_fields else by_alias.get(key)
        if name is None:
            logger.warning("Ignoring unknown field attribute %r.", key)
            continue
        known[name] = value
    return known


def _apply_changes(field: FieldDefinition, changes: Mapping[str, Any]) -> FieldDefinition:
    updated: FieldDefinition = field.model_copy()
    normalised: Dict[str, Any] = _normalise_changes(changes)
    for name, value in normalised.items():
        try:
            setattr(updated, name, value)
        except PydanticValidationError as exc:
            if name in _RAW_KIND_ATTRIBUTES:
                logger.warning("Field %s: unknown %s %r kept unvalidated.", field.id, name, value)
                updated = updated.model_copy(update={name: value})
            else:
                logger.warning(
                    "Field %s: dropping invalid %s %r (%d error(s)).",
                    field.id,
                    name,
                    value,
                    exc.error_count(),
                )

    # Type transitions seed the attribute the new type needs, never replacing it.
    if "type" in normalised:
        if updated.type == FieldType.OBJECT and updated.nested_fields is None:
            updated.nested_fields = []
        if updated.type == FieldType.ENUM and updated.enum is None:
            updated.enum = [EnumValue(key="", value="")]
    if "type" in normalised or "array_type" in normalised:
        if (
            updated.type == FieldType.ARRAY
            and updated.array_type == FieldType.OBJECT
            and updated.nested_fields is None
        ):
            updated.nested_fields = []
    return updated


def update_field(
    fields: FieldList,
    field_id: str,
    changes: Mapping[str, Any],
) -> FieldList:
    """
    Merge *changes* into the first field (depth-first) whose id matches.

    Keys may use attribute names (``array_type``) or wire names
    (``arrayType``).  All attributes not named in *changes* are kept.

    A value the model rejects is dropped with a warning, except for
    ``type`` / ``array_type``: those are stored unvalidated so the field
    renders through the ``any`` / ``Schema.Types.Mixed`` fallback.
    """
    for i, field in enumerate(fields):
        if field.id == field_id:
            updated: FieldList = list(fields)
            updated[i] = _apply_changes(field, changes)
            return updated
        if field.nested_fields:
            nested: FieldList = update_field(field.nested_fields, field_id, changes)
            if nested is not field.nested_fields:
                updated = list(fields)
                updated[i] = field.model_copy(update={"nested_fields": nested})
                return updated
    return fields


def toggle_field_expansion(fields: FieldList, field_id: str) -> FieldList:
    """Flip the editor's expanded flag; unknown ids are ignored."""
    field: Optional[FieldDefinition] = find_field_by_id(fields, field_id)
    if field is None:
        return fields
    return update_field(fields, field_id, {"is_expanded": not field.is_expanded})


# ---------------------------------------------------------------------------
# Schema-level facade (what an editor front-end calls)
# ---------------------------------------------------------------------------


def _with_fields(schema: DTOSchema, fields: FieldList) -> DTOSchema:
    if fields is schema.fields:
        return schema
    return schema.model_copy(update={"fields": fields})


def apply_insert(
    schema: DTOSchema,
    parent: ParentRef = None,
    seed: Optional[FieldDefinition] = None,
) -> DTOSchema:
    """Return a schema with a new field appended under *parent*."""
    fields, _ = insert_field(schema.fields, parent, seed)
    return _with_fields(schema, fields)


def apply_remove(schema: DTOSchema, field_id: str, parent: ParentRef = None) -> DTOSchema:
    """Return a schema without *field_id* in the *parent* sequence."""
    return _with_fields(schema, remove_field(schema.fields, field_id, parent))


def apply_update(schema: DTOSchema, field_id: str, changes: Mapping[str, Any]) -> DTOSchema:
    """Return a schema with *changes* merged into *field_id*."""
    return _with_fields(schema, update_field(schema.fields, field_id, changes))


def apply_toggle(schema: DTOSchema, field_id: str) -> DTOSchema:
    """Return a schema with *field_id*'s expanded flag flipped."""
    return _with_fields(schema, toggle_field_expansion(schema.fields, field_id))


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "FieldPath",
    "ParentRef",
    "iter_fields",
    "find_field_by_id",
    "find_path",
    "resolve_parent",
    "insert_field",
    "remove_field",
    "update_field",
    "toggle_field_expansion",
    "apply_insert",
    "apply_remove",
    "apply_update",
    "apply_toggle",
]

logger.debug("dtogen.tree loaded — %d public symbols.", len(__all__))
