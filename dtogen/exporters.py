# File: dtogen/exporters.py
"""
dtogen - Artifact Exporter
===========================
Writes rendered artifacts under an output directory.

    1. Each file is written atomically (temp file + rename).
    2. A ``FileRecord`` with size, line count and checksum is kept per file.
    3. A failing write is recorded and the remaining files are still
       written; the result reports overall success.

Re-running on the same directory overwrites the artifacts in place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple

from dtogen.utils import Timer, count_lines, sha256_hex, write_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("dtogen.exporters")


# ---------------------------------------------------------------------------
# Data classes for export results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Immutable record of a single exported file."""

    relative_path: str
    absolute_path: str
    size_bytes: int
    line_count: int
    sha256: str


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Result returned by ``ArtifactExporter.export()``."""

    success: bool
    output_directory: str
    files: Tuple[FileRecord, ...] = ()
    errors: Tuple[str, ...] = ()
    elapsed_seconds: float = 0.0

    @property
    def total_bytes(self) -> int:
        return sum(record.size_bytes for record in self.files)

    @property
    def total_lines(self) -> int:
        return sum(record.line_count for record in self.files)


# ---------------------------------------------------------------------------
# ArtifactExporter
# ---------------------------------------------------------------------------


class ArtifactExporter:
    """
    Writes ``{relative_path: content}`` mappings below *output_dir*.

    Usage::

        exporter = ArtifactExporter(Path("./src"))
        result = exporter.export(TemplateGenerator().generate_all(schema))

    Not thread-safe.  Use one exporter per output directory.
    """

    def __init__(self, output_dir: Path, *, atomic_writes: bool = True) -> None:
        self._output_dir: Path = Path(output_dir).resolve()
        self._atomic_writes: bool = atomic_writes

        logger.debug(
            "ArtifactExporter initialised: output_dir=%s, atomic=%s.",
            self._output_dir,
            self._atomic_writes,
        )

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def export(self, files: Dict[str, str]) -> ExportResult:
        """Write every file and return the collected records and errors."""
        records: List[FileRecord] = []
        errors: List[str] = []

        with Timer("export") as timer:
            for rel_path, content in files.items():
                target: Path = self._output_dir / rel_path
                try:
                    size: int = write_file(target, content, atomic=self._atomic_writes)
                except OSError as exc:
                    error_msg: str = f"Failed to write {rel_path}: {type(exc).__name__}: {exc}"
                    errors.append(error_msg)
                    logger.error(error_msg)
                    continue

                records.append(FileRecord(
                    relative_path=rel_path,
                    absolute_path=str(target),
                    size_bytes=size,
                    line_count=count_lines(content),
                    sha256=sha256_hex(content),
                ))
                logger.debug("Wrote file: %s (%d bytes).", rel_path, size)

        result: ExportResult = ExportResult(
            success=not errors,
            output_directory=str(self._output_dir),
            files=tuple(records),
            errors=tuple(errors),
            elapsed_seconds=timer.elapsed,
        )

        if result.success:
            logger.info(
                "Export complete: %d files, %d bytes to %s in %.3fs.",
                len(records),
                result.total_bytes,
                self._output_dir,
                timer.elapsed,
            )
        else:
            logger.error(
                "Export finished with %d error(s) in %.3fs.",
                len(errors),
                timer.elapsed,
            )
        return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "FileRecord",
    "ExportResult",
    "ArtifactExporter",
]

logger.debug("dtogen.exporters loaded.")
