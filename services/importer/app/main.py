"""Canvas QTI import service."""

from __future__ import annotations

import logging
from pathlib import Path

from canvasqti.config import get_settings
from canvasqti.correlation import CorrelationIdMiddleware, get_conversion_id
from canvasqti.errors import DocumentParseError
from canvasqti.exporters.registry import get_exporters
from canvasqti.importer.pipeline import import_questions
from canvasqti.logging import configure_logging
from canvasqti.schemas import (
    CanvasExportRequest,
    CanvasImportRequest,
    CanvasImportResponse,
)
from fastapi import FastAPI, HTTPException, status
from fastapi.responses import FileResponse

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Canvas QTI Import Service", version="0.1.0")
app.add_middleware(CorrelationIdMiddleware)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "service": "importer"}


def _check_size(xml_content: str) -> None:
    if len(xml_content.encode("utf-8")) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File size exceeds {settings.max_upload_bytes} bytes",
        )


@app.post("/v1/canvas/import", response_model=CanvasImportResponse)
def import_canvas(payload: CanvasImportRequest) -> CanvasImportResponse:
    _check_size(payload.xml_content)
    try:
        result = import_questions(payload.xml_content, settings=settings, locale=payload.locale)
    except DocumentParseError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return CanvasImportResponse(
        source_filename=payload.source_filename,
        imported_questions_count=len(result.questions),
        skipped_items_count=len(result.diagnostics),
        type_breakdown=result.type_breakdown,
        questions=result.questions,
        diagnostics=result.diagnostics,
    )


@app.get("/v1/export/formats")
def list_formats() -> dict[str, list[str]]:
    return {"formats": sorted(get_exporters().keys())}


@app.post("/v1/canvas/export")
def export_canvas(payload: CanvasExportRequest) -> FileResponse:
    _check_size(payload.xml_content)
    exporter = get_exporters().get(payload.format)
    if exporter is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Unsupported export format"
        )

    try:
        result = import_questions(payload.xml_content, settings=settings, locale=payload.locale)
        output_dir = Path(settings.export_dir) / (get_conversion_id() or "default")
        artifact = exporter.export(result, payload.options, output_dir)
    except ValueError as exc:
        # DocumentParseError included.
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    logger.info("export artifact ready", extra={"format_name": exporter.format_name})
    return FileResponse(
        artifact.artifact_path, media_type=artifact.mime, filename=artifact.filename
    )
