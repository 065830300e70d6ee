"""
tests/test_exporters.py
Unit tests for dtogen.exporters (ArtifactExporter).

All writes go to pytest's tmp_path; nothing is mocked.
"""

from __future__ import annotations

import hashlib
import pathlib

from dtogen.exporters import ArtifactExporter, ExportResult
from dtogen.models import DTOSchema
from dtogen.templates import TemplateGenerator


class TestArtifactExporter:
    def test_writes_both_artifacts(self, minimal_schema: DTOSchema, tmp_path: pathlib.Path) -> None:
        files = TemplateGenerator().generate_all(minimal_schema)
        result: ExportResult = ArtifactExporter(tmp_path).export(files)

        assert result.success
        assert result.errors == ()
        assert (tmp_path / "dtos" / "user.dto.ts").read_text(encoding="utf-8") == files["dtos/user.dto.ts"]
        assert (tmp_path / "models" / "user.model.ts").read_text(encoding="utf-8") == files["models/user.model.ts"]

    def test_records(self, tmp_path: pathlib.Path) -> None:
        content = "line one\nline two\n"
        result = ArtifactExporter(tmp_path).export({"a/b.ts": content})

        record = result.files[0]
        assert record.relative_path == "a/b.ts"
        assert record.absolute_path == str(tmp_path.resolve() / "a" / "b.ts")
        assert record.size_bytes == len(content.encode("utf-8"))
        assert record.line_count == 2
        assert record.sha256 == hashlib.sha256(content.encode("utf-8")).hexdigest()
        assert result.total_bytes == record.size_bytes
        assert result.total_lines == 2

    def test_overwrites_in_place(self, tmp_path: pathlib.Path) -> None:
        exporter = ArtifactExporter(tmp_path)
        exporter.export({"x.ts": "old\n"})
        exporter.export({"x.ts": "new\n"})
        assert (tmp_path / "x.ts").read_text(encoding="utf-8") == "new\n"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["x.ts"]

    def test_non_atomic_writes(self, tmp_path: pathlib.Path) -> None:
        result = ArtifactExporter(tmp_path, atomic_writes=False).export({"x.ts": "é\n"})
        assert result.success
        assert result.files[0].size_bytes == 3

    def test_write_failure_is_collected(self, tmp_path: pathlib.Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")

        result = ArtifactExporter(tmp_path).export(
            {"blocker/inside.ts": "x\n", "ok.ts": "y\n"}
        )
        assert not result.success
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Failed to write blocker/inside.ts")
        assert [r.relative_path for r in result.files] == ["ok.ts"]
        assert (tmp_path / "ok.ts").exists()

    def test_output_dir_is_resolved(self, tmp_path: pathlib.Path) -> None:
        exporter = ArtifactExporter(tmp_path / "sub" / ".." / "out")
        assert exporter.output_dir == (tmp_path / "out").resolve()
