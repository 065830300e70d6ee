"""
tests/conftest.py
Shared fixtures for the dtogen test suite.

All fixtures are function-scoped unless stated otherwise.
No external mocking libraries are used; real file I/O is performed
inside temporary directories managed by pytest's tmp_path fixtures.
"""

from __future__ import annotations

import copy
import json
import pathlib
from typing import Any, Dict

import pytest
import yaml

from dtogen.models import DTOSchema


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

ROOT_DIR: pathlib.Path = pathlib.Path(__file__).resolve().parent.parent
SCHEMA_EXAMPLE_PATH: pathlib.Path = ROOT_DIR / "schema_example.yaml"


# ---------------------------------------------------------------------------
# Raw schema data fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def raw_schema_dict() -> Dict[str, Any]:
    """Load the reference schema_example.yaml once per session and return as dict."""
    assert SCHEMA_EXAMPLE_PATH.exists(), (
        f"Reference schema not found at {SCHEMA_EXAMPLE_PATH}. "
        "Make sure schema_example.yaml is in the project root."
    )
    with open(SCHEMA_EXAMPLE_PATH, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    assert isinstance(data, dict), "Top-level YAML must be a mapping."
    return data


@pytest.fixture()
def schema_dict(raw_schema_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Return a deep copy of the inner schema so each test can mutate freely."""
    return copy.deepcopy(raw_schema_dict["schema"])


@pytest.fixture()
def example_schema(schema_dict: Dict[str, Any]) -> DTOSchema:
    return DTOSchema.from_dict(schema_dict)


@pytest.fixture()
def schema_yaml_path(raw_schema_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the reference schema to a temporary YAML file and return its path."""
    path = tmp_path / "schema.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(raw_schema_dict, fh, default_flow_style=False, allow_unicode=True)
    return path


# ---------------------------------------------------------------------------
# Minimal / edge-case schema fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def minimal_schema_dict() -> Dict[str, Any]:
    """Smallest useful schema: one required, unique string field."""
    return {
        "name": "User",
        "fields": [
            {
                "id": "email",
                "name": "email",
                "type": "string",
                "required": True,
                "unique": True,
            }
        ],
    }


@pytest.fixture()
def minimal_schema(minimal_schema_dict: Dict[str, Any]) -> DTOSchema:
    return DTOSchema.from_dict(minimal_schema_dict)


@pytest.fixture()
def minimal_schema_json_path(
    minimal_schema_dict: Dict[str, Any], tmp_path: pathlib.Path
) -> pathlib.Path:
    """Write the minimal schema to a temp JSON file and return the path."""
    path = tmp_path / "minimal_schema.json"
    path.write_text(json.dumps(minimal_schema_dict, indent=2), encoding="utf-8")
    return path


@pytest.fixture()
def nested_schema_dict() -> Dict[str, Any]:
    """Three top-level fields, one object with children, one array of objects."""
    return {
        "name": "User",
        "fields": [
            {"id": "name", "name": "name", "type": "string"},
            {
                "id": "address",
                "name": "address",
                "type": "object",
                "nestedFields": [
                    {"id": "city", "name": "city", "type": "string", "required": True},
                    {
                        "id": "geo",
                        "name": "geo",
                        "type": "object",
                        "nestedFields": [
                            {"id": "lat", "name": "lat", "type": "number"},
                        ],
                    },
                ],
            },
            {
                "id": "phones",
                "name": "phones",
                "type": "array",
                "arrayType": "object",
                "nestedFields": [
                    {"id": "number", "name": "number", "type": "string"},
                ],
            },
        ],
    }


@pytest.fixture()
def nested_schema(nested_schema_dict: Dict[str, Any]) -> DTOSchema:
    return DTOSchema.from_dict(nested_schema_dict)


# ---------------------------------------------------------------------------
# Invalid schema fixtures (for negative testing)
# ---------------------------------------------------------------------------


@pytest.fixture()
def review_warning_schema_dict() -> Dict[str, Any]:
    """Loads fine but trips several review checks."""
    return {
        "name": "bad name",
        "fields": [
            {"id": "dup", "name": "first-name", "type": "string"},
            {"id": "dup", "name": "", "type": "number", "ref": "Other"},
            {"id": "kind", "name": "kind", "type": "enum", "enum": []},
        ],
        "indexes": [{"fields": ["missing"]}, {"fields": []}],
    }


@pytest.fixture()
def review_warning_yaml_path(
    review_warning_schema_dict: Dict[str, Any], tmp_path: pathlib.Path
) -> pathlib.Path:
    path = tmp_path / "warnings.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(review_warning_schema_dict, fh, default_flow_style=False)
    return path


@pytest.fixture()
def invalid_json_path(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "broken.json"
    path.write_text('{"name": "User", "fields": [', encoding="utf-8")
    return path
