# File: dtogen/generator.py
"""
dtogen - Generation Pipeline (Orchestrator)
============================================

Connects every phase together:

    Schema Input → Review → Rendering → (optional) Export

``render()`` is the pure core an editor front-end calls after every edit.
``DtoGenerator`` wraps it for batch use (CLI, scripts): it loads a schema
file, reviews it, renders both artifacts, optionally writes them, and
returns a ``GenerationReport``.

Error handling strategy:
    - Input errors (missing file, bad JSON/YAML, payload rejected by the
      models) are recorded in the report, not raised.
    - Review findings are warnings; they only fail the run when the
      generator was created with ``fail_on_warnings=True``.
    - Export errors are recorded per file.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional

import yaml
from pydantic import ValidationError as PydanticValidationError

from dtogen.exporters import ArtifactExporter, ExportResult
from dtogen.models import DTOSchema
from dtogen.templates import TemplateGenerator
from dtogen.utils import Timer, count_lines
from dtogen.validators import ValidationResult, validate_schema

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("dtogen.generator")


# ---------------------------------------------------------------------------
# Render core
# ---------------------------------------------------------------------------


class RenderedArtifacts(NamedTuple):
    """The two rendered documents, in ``(types, storage)`` order."""

    type_artifact: str
    storage_artifact: str


def render(schema: DTOSchema, templates: Optional[TemplateGenerator] = None) -> RenderedArtifacts:
    """Render *schema* into its type-definition and storage-schema text."""
    engine: TemplateGenerator = templates or TemplateGenerator()
    return RenderedArtifacts(
        type_artifact=engine.generate_type_artifact(schema),
        storage_artifact=engine.generate_storage_artifact(schema),
    )


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """Everything ``DtoGenerator`` learned during one run."""

    success: bool = False
    schema_name: str = ""
    output_directory: str = ""

    total_lines: int = 0
    total_elapsed_seconds: float = 0.0

    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    review_warnings: List[str] = field(default_factory=list)
    input_errors: List[str] = field(default_factory=list)
    generation_errors: List[str] = field(default_factory=list)
    export_errors: List[str] = field(default_factory=list)

    files: Dict[str, str] = field(default_factory=dict)
    artifacts: Optional[RenderedArtifacts] = None
    export_result: Optional[ExportResult] = None

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "SUCCESS" if self.success else "FAILED"
        lines.append("=" * 60)
        lines.append("  dtogen — Generation Report")
        lines.append("=" * 60)
        lines.append(f"  Status:     {status}")
        lines.append(f"  Schema:     {self.schema_name}")
        if self.output_directory:
            lines.append(f"  Output:     {self.output_directory}")
        lines.append(f"  Files:      {len(self.files)}")
        lines.append(f"  Lines:      {self.total_lines:,}")
        lines.append(f"  Time:       {self.total_elapsed_seconds:.3f}s")
        lines.append("─" * 60)

        if self.step_metrics:
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<20s} "
                    f"{step.elapsed_seconds:>7.3f}s  {step.detail}"
                )

        for title, items, mark in (
            ("Input Errors", self.input_errors, "✗"),
            ("Review Warnings", self.review_warnings, "⚠"),
            ("Generation Errors", self.generation_errors, "✗"),
            ("Export Errors", self.export_errors, "✗"),
        ):
            if items:
                lines.append("─" * 60)
                lines.append(f"  {title} ({len(items)}):")
                lines.extend(f"    {mark} {item}" for item in items)

        lines.append("=" * 60)
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Schema loader helpers
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object at top level, got {type(data).__name__}."
        )
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. Raises ValueError on parse errors."""
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )
    return data


def load_schema_file(path: Path) -> Dict[str, Any]:
    """
    Load a schema definition file (JSON or YAML).

    Dispatches on the file extension; unknown extensions try JSON first,
    then YAML.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")
    if not path.is_file():
        raise ValueError(f"Schema path is not a file: {path}")

    suffix: str = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _load_yaml_file(path)
    if suffix == ".json":
        return _load_json_file(path)

    logger.info("Unknown extension '%s' — trying JSON then YAML.", suffix)
    try:
        return _load_json_file(path)
    except ValueError:
        return _load_yaml_file(path)


def parse_raw_schema(raw: Dict[str, Any]) -> DTOSchema:
    """
    Validate a raw mapping into a ``DTOSchema``.

    The schema may sit at the top level or under a ``schema`` key.

    Raises:
        ValueError: If the payload does not describe a valid schema.
    """
    data: Any = raw.get("schema", raw)
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected 'schema' to be a mapping, got {type(data).__name__}."
        )
    try:
        return DTOSchema.from_dict(data)
    except PydanticValidationError as exc:
        raise ValueError(f"Schema validation failed: {exc}") from exc


# ---------------------------------------------------------------------------
# DtoGenerator — batch orchestrator
# ---------------------------------------------------------------------------


class DtoGenerator:
    """
    Batch pipeline around ``render()``.

    Usage::

        generator = DtoGenerator()
        report = generator.generate_from_file(Path("user.yaml"), Path("./src"))
        print(report.summary())

    The generator is reusable: create once, call ``generate()`` many times.
    """

    def __init__(
        self,
        *,
        fail_on_warnings: bool = False,
        templates: Optional[TemplateGenerator] = None,
        atomic_writes: bool = True,
    ) -> None:
        self._fail_on_warnings: bool = fail_on_warnings
        self._templates: TemplateGenerator = templates or TemplateGenerator()
        self._atomic_writes: bool = atomic_writes

        logger.debug(
            "DtoGenerator initialised: fail_on_warnings=%s, atomic=%s.",
            fail_on_warnings,
            atomic_writes,
        )

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def generate_from_file(
        self,
        schema_path: Path,
        output_dir: Optional[Path] = None,
        *,
        name_override: Optional[str] = None,
    ) -> GenerationReport:
        """Load → parse → review → render → export."""
        report: GenerationReport = GenerationReport()
        started: float = time.perf_counter()

        with Timer("load_schema") as t_load:
            try:
                raw: Dict[str, Any] = load_schema_file(schema_path)
                schema: DTOSchema = parse_raw_schema(raw)
            except (FileNotFoundError, ValueError) as exc:
                report.input_errors.append(str(exc))
                logger.error("Could not load %s: %s", schema_path, exc)
                schema = None  # type: ignore[assignment]

        report.step_metrics.append(GenerationStepMetric(
            step_name="Load Schema",
            success=schema is not None,
            elapsed_seconds=t_load.elapsed,
            detail=f"from {schema_path.name}",
        ))
        if schema is None:
            return self._finalise_report(report, time.perf_counter() - started)

        if name_override:
            schema = schema.model_copy(update={"name": name_override})

        return self._run_pipeline(schema, output_dir, report, started)

    def generate(
        self,
        schema: DTOSchema,
        output_dir: Optional[Path] = None,
    ) -> GenerationReport:
        """Review → render → export for an in-memory schema."""
        return self._run_pipeline(schema, output_dir, GenerationReport(), time.perf_counter())

    # -----------------------------------------------------------------
    # Internal: pipeline
    # -----------------------------------------------------------------

    def _run_pipeline(
        self,
        schema: DTOSchema,
        output_dir: Optional[Path],
        report: GenerationReport,
        started: float,
    ) -> GenerationReport:
        report.schema_name = schema.name

        self._step_review(schema, report)
        self._step_render(schema, report)

        if output_dir is not None and report.files:
            self._step_export(output_dir, report)

        return self._finalise_report(report, time.perf_counter() - started)

    def _step_review(self, schema: DTOSchema, report: GenerationReport) -> None:
        with Timer("review") as t:
            result: ValidationResult = validate_schema(schema)

        report.review_warnings.extend(str(item) for item in result.warnings)
        for item in result.warnings:
            logger.warning("  ⚠ %s", item)

        report.step_metrics.append(GenerationStepMetric(
            step_name="Review Schema",
            success=not (self._fail_on_warnings and result.has_warnings),
            elapsed_seconds=t.elapsed,
            detail=f"{len(result.warnings)} warning(s)",
        ))

    def _step_render(self, schema: DTOSchema, report: GenerationReport) -> None:
        with Timer("render") as t:
            try:
                artifacts: RenderedArtifacts = render(schema, self._templates)
            except Exception as exc:
                error_msg: str = f"Fatal rendering error: {type(exc).__name__}: {exc}"
                report.generation_errors.append(error_msg)
                logger.error(error_msg, exc_info=True)
                artifacts = None  # type: ignore[assignment]

        if artifacts is not None:
            report.artifacts = artifacts
            report.files = {
                self._templates.dto_path(schema): artifacts.type_artifact,
                self._templates.model_path(schema): artifacts.storage_artifact,
            }
            report.total_lines = sum(count_lines(c) for c in report.files.values())

        report.step_metrics.append(GenerationStepMetric(
            step_name="Render Artifacts",
            success=artifacts is not None,
            elapsed_seconds=t.elapsed,
            detail=f"{len(report.files)} files, ~{report.total_lines:,} lines",
        ))
        logger.info(
            "Rendered '%s': %d files, %d lines in %.3fs.",
            schema.name,
            len(report.files),
            report.total_lines,
            t.elapsed,
        )

    def _step_export(self, output_dir: Path, report: GenerationReport) -> None:
        exporter: ArtifactExporter = ArtifactExporter(
            output_dir, atomic_writes=self._atomic_writes
        )
        result: ExportResult = exporter.export(report.files)

        report.output_directory = result.output_directory
        report.export_result = result
        report.export_errors.extend(result.errors)
        report.step_metrics.append(GenerationStepMetric(
            step_name="Export Files",
            success=result.success,
            elapsed_seconds=result.elapsed_seconds,
            detail=f"{len(result.files)} files, {result.total_bytes:,} bytes",
        ))

    def _finalise_report(
        self,
        report: GenerationReport,
        total_elapsed: float,
    ) -> GenerationReport:
        report.total_elapsed_seconds = total_elapsed
        has_errors: bool = bool(
            report.input_errors or report.generation_errors or report.export_errors
        )
        failed_review: bool = self._fail_on_warnings and bool(report.review_warnings)
        report.success = not has_errors and not failed_review
        return report


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "RenderedArtifacts",
    "render",
    "GenerationStepMetric",
    "GenerationReport",
    "load_schema_file",
    "parse_raw_schema",
    "DtoGenerator",
]

logger.debug("dtogen.generator loaded.")
