"""Service layer for Teacher Evaluation Reports."""
from .report import ReportService
from .docx_report import DocxReportGenerator
from .aggregated import AggregatedExporter, AggregationResult
from .prefill import build_draft_report
from .scoring import calculate_report_percentage

__all__ = [
	"ReportService", "DocxReportGenerator",
	"AggregatedExporter", "AggregationResult",
	"build_draft_report", "calculate_report_percentage",
]
