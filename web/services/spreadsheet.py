"""
Spreadsheet exports.

A single report becomes one flat "Report" sheet with one row per fact;
aggregation produces an "Aggregated Reports" summary sheet with one row per
report. Both sheets read right to left.
"""
from __future__ import annotations

import logging
from io import BytesIO
from typing import Any, List, Sequence, Tuple

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from web.services.content import (
    EVALUATION_TYPE_LABELS,
    LABEL_FINAL,
    ReportContent,
    build_report_content,
)
from web.services.models import Report, Teacher

logger = logging.getLogger(__name__)

SINGLE_SHEET_TITLE = "Report"
AGGREGATED_SHEET_TITLE = "Aggregated Reports"

AGGREGATED_HEADERS = ["المعلم", "التاريخ", "المدرسة", "نوع التقييم", "النسبة المئوية"]
GENERAL_TABLE_HEADERS = ["المعيار", "الدرجة", "النسبة", "حالة التقدم", "عنوان آخر درس"]

HEADER_FILL = PatternFill(start_color="16786D", end_color="16786D", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True)


def _report_rows(content: ReportContent) -> Tuple[List[List[Any]], List[int]]:
    header_rows: List[int] = []
    rows: List[List[Any]] = [
        ["المعلم", content.teacher_name],
        ["التاريخ", content.date],
    ]
    rows += [[label, value] for label, value in content.location]
    rows.append([])

    rows.append(["نوع التقييم", content.heading])
    rows += [[label, value] for label, value in content.kind_fields]
    rows.append([])

    for table in content.tables:
        if table.title is None:
            rows.append(list(GENERAL_TABLE_HEADERS))
            header_rows.append(len(rows))
            rows += [
                [row.label, row.score, row.percentage_text, row.progress, row.last_lesson_title]
                for row in table.rows
            ]
        else:
            rows.append([table.title, "الدرجة"])
            header_rows.append(len(rows))
            rows += [[f"  - {row.label}", row.score] for row in table.rows]
    rows.append([])

    rows.append([LABEL_FINAL, content.final_percentage_text])
    rows.append([])
    rows += [[label, value] for label, value in content.narrative]
    return rows, header_rows


def build_aggregated_rows(pairs: Sequence[Tuple[Report, Teacher]]) -> List[List[Any]]:
    rows: List[List[Any]] = [list(AGGREGATED_HEADERS)]
    for report, teacher in pairs:
        content = build_report_content(report, teacher)
        rows.append([
            teacher.name,
            content.date,
            report.school,
            EVALUATION_TYPE_LABELS[report.evaluation_type],
            content.final_percentage_text,
        ])
    return rows


def _workbook_bytes(rows: List[List[Any]], title: str, header_rows: Sequence[int] = ()) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = title
    sheet.sheet_view.rightToLeft = True

    for row in rows:
        sheet.append(row)

    for row_index in header_rows:
        for cell in sheet[row_index]:
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
            cell.alignment = Alignment(horizontal="center")

    sheet.column_dimensions["A"].width = 40
    widest = max((len(row) for row in rows), default=1)
    for column_index in range(2, widest + 1):
        sheet.column_dimensions[get_column_letter(column_index)].width = 22

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def generate_report_xlsx(report: Report, teacher: Teacher) -> bytes:
    content = build_report_content(report, teacher)
    rows, header_rows = _report_rows(content)
    data = _workbook_bytes(rows, SINGLE_SHEET_TITLE, header_rows)
    logger.info(f"Generated spreadsheet for report {report.id}")
    return data


def generate_aggregated_xlsx(pairs: Sequence[Tuple[Report, Teacher]]) -> bytes:
    rows = build_aggregated_rows(pairs)
    data = _workbook_bytes(rows, AGGREGATED_SHEET_TITLE, header_rows=[1])
    logger.info(f"Generated aggregated spreadsheet with {len(rows) - 1} report(s)")
    return data
