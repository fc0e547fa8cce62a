"""
Aggregated exports across many reports and teachers.

Reports are rendered in the order the caller supplies. A report whose
teacher is missing from the teacher set is left out of every artifact; the
skipped ids are kept on the resolution result and logged.
"""
from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from web.services.content import (
    AGGREGATED_SEPARATOR,
    AGGREGATED_TITLE,
    SHARE_BASE_URL,
    build_share_url,
    generate_text,
)
from web.services.docx_report import DocxReportGenerator
from web.services.models import EvaluationType, Report, Teacher
from web.services.report import ReportService
from web.services.spreadsheet import generate_aggregated_xlsx

logger = logging.getLogger(__name__)

SORT_BY_DATE = "date"
SORT_BY_TEACHER = "teacher"

EXPORT_FORMATS = ("txt", "pdf", "xlsx", "docx")


@dataclass
class AggregationResult:
    pairs: List[Tuple[Report, Teacher]] = field(default_factory=list)
    skipped_report_ids: List[str] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_report_ids)


def resolve_report_teachers(
    reports: Iterable[Report],
    teachers: Iterable[Teacher],
    on_skip: Optional[Callable[[Report], None]] = None,
) -> AggregationResult:
    """Pair each report with its teacher, keeping the report order."""
    teacher_map = {teacher.id: teacher for teacher in teachers}
    result = AggregationResult()
    for report in reports:
        teacher = teacher_map.get(report.teacher_id)
        if teacher is None:
            result.skipped_report_ids.append(report.id)
            if on_skip is not None:
                on_skip(report)
            continue
        result.pairs.append((report, teacher))

    if result.skipped_report_ids:
        logger.warning(
            f"Skipped {result.skipped_count} report(s) with no matching teacher: "
            f"{', '.join(result.skipped_report_ids)}"
        )
    return result


def select_reports(
    reports: Iterable[Report],
    teachers: Iterable[Teacher],
    sort: str = SORT_BY_DATE,
    teacher_id: Optional[str] = None,
    evaluation_type: Optional[EvaluationType] = None,
) -> List[Report]:
    """
    Filter and order reports for an aggregated view.

    ``date`` orders newest first; ``teacher`` orders by teacher name, then
    newest first within a teacher. Unknown teachers sort last by name.
    """
    selected = [
        r for r in reports
        if (teacher_id is None or r.teacher_id == teacher_id)
        and (evaluation_type is None or r.evaluation_type == EvaluationType(evaluation_type).value)
    ]
    selected.sort(key=lambda r: r.date, reverse=True)
    if sort == SORT_BY_TEACHER:
        names = {teacher.id: teacher.name for teacher in teachers}
        selected.sort(key=lambda r: (r.teacher_id not in names, names.get(r.teacher_id, "")))
    elif sort != SORT_BY_DATE:
        raise ValueError(f"Unknown sort order: {sort}")
    return selected


def aggregated_filename(extension: str, today: Optional[dt.date] = None) -> str:
    return f"aggregated_reports_{(today or dt.date.today()).isoformat()}.{extension}"


class AggregatedExporter:
    """Combines single-report renderings into one artifact per format."""

    def __init__(
        self,
        report_service: Optional[ReportService] = None,
        docx_generator: Optional[DocxReportGenerator] = None,
        share_base_url: str = SHARE_BASE_URL,
    ):
        self._report_service = report_service
        self._docx_generator = docx_generator
        self.share_base_url = share_base_url

    @property
    def report_service(self) -> ReportService:
        if self._report_service is None:
            self._report_service = ReportService()
        return self._report_service

    @property
    def docx_generator(self) -> DocxReportGenerator:
        if self._docx_generator is None:
            self._docx_generator = DocxReportGenerator()
        return self._docx_generator

    def to_text(self, reports: Sequence[Report], teachers: Sequence[Teacher]) -> str:
        return self._text(resolve_report_teachers(reports, teachers).pairs)

    def share_url(self, reports: Sequence[Report], teachers: Sequence[Teacher]) -> str:
        return build_share_url(self.to_text(reports, teachers), self.share_base_url)

    def export(
        self, extension: str, reports: Sequence[Report], teachers: Sequence[Teacher]
    ) -> Tuple[bytes, AggregationResult]:
        """
        Render ``reports`` as one file of the given format.

        Returns the file bytes with the resolution result, so callers can
        report how many reports were skipped.
        """
        if extension not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {extension}")
        result = resolve_report_teachers(reports, teachers)
        if extension == "txt":
            data = self._text(result.pairs).encode("utf-8")
        elif extension == "pdf":
            data = self.report_service.generate_aggregated_pdf(result.pairs)
        elif extension == "docx":
            data = self.docx_generator.generate_aggregated_bytes(result.pairs)
        else:
            data = generate_aggregated_xlsx(result.pairs)
        return data, result

    @staticmethod
    def _text(pairs: Sequence[Tuple[Report, Teacher]]) -> str:
        text = f"{AGGREGATED_TITLE}\n\n"
        for report, teacher in pairs:
            text += generate_text(report, teacher)
            text += f"\n{AGGREGATED_SEPARATOR}\n\n"
        return text
