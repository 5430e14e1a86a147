"""JSON dump of converted questions and diagnostics."""

from __future__ import annotations

from pathlib import Path

from canvasqti.enums import ExportFormat
from canvasqti.exporters.base import BaseExporter, artifact_filename
from canvasqti.schemas import ExportArtifact, ImportResult


class JsonExporter(BaseExporter):
    format_name = ExportFormat.JSON.value

    def export(self, result: ImportResult, options: dict, output_dir: Path) -> ExportArtifact:
        if not result.questions:
            raise ValueError("No exportable question in the Canvas export.")
        filename = artifact_filename(options, "canvas_questions.json")
        output_dir.mkdir(parents=True, exist_ok=True)
        file_path = output_dir / filename
        file_path.write_text(result.model_dump_json(indent=2), encoding="utf-8")
        return ExportArtifact(
            artifact_path=str(file_path), mime="application/json", filename=filename
        )
