"""Base exporter interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from canvasqti.schemas import ExportArtifact, ImportResult


def artifact_filename(options: dict, default: str) -> str:
    """Bare file name from ``options["filename"]``; paths are rejected."""

    filename = str(options.get("filename") or default)
    if filename in {".", ".."} or Path(filename).name != filename:
        raise ValueError(f"Invalid export filename: {filename!r}")
    return filename


class BaseExporter(ABC):
    """Exporter contract."""

    format_name: str

    @abstractmethod
    def export(self, result: ImportResult, options: dict, output_dir: Path) -> ExportArtifact:
        """Write the converted questions of ``result`` to an artifact."""
