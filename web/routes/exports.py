"""Single-report and aggregated export routes."""
from __future__ import annotations

import io
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from web.config import Settings
from web.dependencies import (
    get_aggregated_exporter,
    get_current_session,
    get_docx_generator,
    get_report_service,
    get_settings,
    get_store,
)
from web.services.aggregated import (
    EXPORT_FORMATS,
    SORT_BY_DATE,
    AggregatedExporter,
    aggregated_filename,
    select_reports,
)
from web.services.content import build_share_url, generate_text, report_filename
from web.services.docx_report import DocxReportGenerator
from web.services.models import EvaluationType
from web.services.report import ReportService
from web.services.spreadsheet import generate_report_xlsx
from web.store import EvaluationStore

router = APIRouter(dependencies=[Depends(get_current_session)])

MEDIA_TYPES = {
    "txt": "text/plain; charset=utf-8",
    "pdf": "application/pdf",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

SKIPPED_HEADER = "X-Skipped-Reports"


def _check_format(extension: str) -> None:
    if extension not in EXPORT_FORMATS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unsupported export format '{extension}'. Use one of: {', '.join(EXPORT_FORMATS)}.",
        )


def _attachment(data: bytes, extension: str, filename: str, headers: Optional[dict] = None) -> StreamingResponse:
    # Header values must be latin-1; teacher names are usually Arabic
    response_headers = {"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"}
    response_headers.update(headers or {})
    return StreamingResponse(io.BytesIO(data), media_type=MEDIA_TYPES[extension], headers=response_headers)


@router.get("/reports/{report_id}/share")
async def share_report(
    report_id: str,
    settings: Settings = Depends(get_settings),
    store: EvaluationStore = Depends(get_store),
):
    report = store.get_report(report_id)
    teacher = store.get_teacher(report.teacher_id)
    return {"url": build_share_url(generate_text(report, teacher), settings.SHARE_BASE_URL)}


@router.get("/reports/{report_id}.{extension}")
async def export_report(
    report_id: str,
    extension: str,
    store: EvaluationStore = Depends(get_store),
    report_service: ReportService = Depends(get_report_service),
    docx_generator: DocxReportGenerator = Depends(get_docx_generator),
):
    """Download one report as txt, pdf, xlsx or docx."""
    _check_format(extension)
    report = store.get_report(report_id)
    teacher = store.get_teacher(report.teacher_id)

    if extension == "txt":
        data = generate_text(report, teacher).encode("utf-8")
    elif extension == "pdf":
        data = report_service.generate_report_pdf(report, teacher)
    elif extension == "docx":
        data = docx_generator.generate_report_bytes(report, teacher)
    else:
        data = generate_report_xlsx(report, teacher)

    return _attachment(data, extension, report_filename(report, teacher, extension))


def _selected_reports(
    store: EvaluationStore,
    sort: str,
    teacher_id: Optional[str],
    evaluation_type: Optional[EvaluationType],
):
    snapshot = store.snapshot()
    try:
        reports = select_reports(
            snapshot.reports,
            snapshot.teachers,
            sort=sort,
            teacher_id=teacher_id,
            evaluation_type=evaluation_type,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return reports, snapshot.teachers


@router.get("/aggregated/share")
async def share_aggregated(
    sort: str = Query(SORT_BY_DATE),
    teacher_id: Optional[str] = Query(None, alias="teacherId"),
    evaluation_type: Optional[EvaluationType] = Query(None, alias="evaluationType"),
    store: EvaluationStore = Depends(get_store),
    exporter: AggregatedExporter = Depends(get_aggregated_exporter),
):
    reports, teachers = _selected_reports(store, sort, teacher_id, evaluation_type)
    return {"url": exporter.share_url(reports, teachers)}


@router.get("/aggregated.{extension}")
async def export_aggregated(
    extension: str,
    sort: str = Query(SORT_BY_DATE),
    teacher_id: Optional[str] = Query(None, alias="teacherId"),
    evaluation_type: Optional[EvaluationType] = Query(None, alias="evaluationType"),
    store: EvaluationStore = Depends(get_store),
    exporter: AggregatedExporter = Depends(get_aggregated_exporter),
):
    """Download many reports as one file; reports without a teacher are left out."""
    _check_format(extension)
    reports, teachers = _selected_reports(store, sort, teacher_id, evaluation_type)
    data, result = exporter.export(extension, reports, teachers)
    return _attachment(
        data,
        extension,
        aggregated_filename(extension),
        headers={SKIPPED_HEADER: str(result.skipped_count)},
    )
