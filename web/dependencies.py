"""Reusable FastAPI dependencies."""
from functools import lru_cache

from fastapi import Depends, HTTPException, Request, status

from web.auth import SESSION_COOKIE_NAME, validate_session
from web.config import Settings, get_settings as _get_settings
from web.services.aggregated import AggregatedExporter
from web.services.docx_report import DocxReportGenerator
from web.services.report import ReportService
from web.store import EvaluationStore


def get_settings() -> Settings:
    """Return application settings (cached)."""
    return _get_settings()


def get_current_session(request: Request) -> str:
    """Ensure the request originates from an authenticated session."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not validate_session(token):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return token


@lru_cache(maxsize=1)
def _default_store() -> EvaluationStore:
    return EvaluationStore(_get_settings().DATA_FILE)


def get_store() -> EvaluationStore:
    """The process-wide evaluation store, loaded on first use."""
    return _default_store()


def get_report_service(settings: Settings = Depends(get_settings)) -> ReportService:
    return ReportService(font_path=settings.pdf_font_path)


def get_docx_generator() -> DocxReportGenerator:
    return DocxReportGenerator()


def get_aggregated_exporter(
    settings: Settings = Depends(get_settings),
    report_service: ReportService = Depends(get_report_service),
    docx_generator: DocxReportGenerator = Depends(get_docx_generator),
) -> AggregatedExporter:
    return AggregatedExporter(
        report_service=report_service,
        docx_generator=docx_generator,
        share_base_url=settings.SHARE_BASE_URL,
    )
