"""
Shared content model for report exports.

Every export target (plain text, PDF, spreadsheet, Word, share link) renders
the same ``ReportContent``, built once per (report, teacher) pair. The plain
text rendering and the share link live here; the file formats have their own
modules.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from urllib.parse import quote

from web.services.models import (
    MAX_CRITERION_SCORE,
    ClassSessionEvaluationReport,
    Criterion,
    GeneralEvaluationReport,
    Report,
    Teacher,
)
from web.services.scoring import calculate_report_percentage, criterion_percentage, format_percentage

SHARE_BASE_URL = "https://api.whatsapp.com/send"

# Characters encodeURIComponent leaves untouched besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"

GENERAL_HEADING = "تقييم عام"
CLASS_SESSION_HEADING = "تقييم حصة دراسية"

EVALUATION_TYPE_LABELS = {
    "general": "عام",
    "class_session": "حصة دراسية",
}

LABEL_TEACHER = "تقرير لـ"
LABEL_DATE = "تاريخ"
LABEL_FINAL = "النسبة المئوية النهائية"
LABEL_LAST_LESSON = "آخر درس"

AGGREGATED_TITLE = "--- تقارير مجمعة ---"
AGGREGATED_SEPARATOR = "================================"


@dataclass
class CriterionRow:
    label: str
    score: int
    percentage: float
    progress: str = ""
    last_lesson_title: str = ""

    @property
    def rounded_percentage(self) -> str:
        return format_percentage(self.percentage, 0)

    @property
    def percentage_text(self) -> str:
        return f"{self.rounded_percentage}%"

    @property
    def annotation(self) -> str:
        """Progress status and last lesson, when the criterion carries them."""
        parts = []
        if self.progress:
            parts.append(self.progress)
        if self.last_lesson_title:
            parts.append(f"{LABEL_LAST_LESSON}: {self.last_lesson_title}")
        return " | ".join(parts)


@dataclass
class CriteriaTable:
    """A run of criteria; ``title`` is set for class-session groups only."""
    rows: List[CriterionRow]
    title: Optional[str] = None


@dataclass
class ReportContent:
    teacher_name: str
    date: str
    evaluation_type: str
    heading: str
    location: List[Tuple[str, str]]
    kind_fields: List[Tuple[str, str]] = field(default_factory=list)
    tables: List[CriteriaTable] = field(default_factory=list)
    final_percentage: float = 0.0
    narrative: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def final_percentage_text(self) -> str:
        return f"{format_percentage(self.final_percentage, 2)}%"


def _criterion_row(criterion: Criterion) -> CriterionRow:
    return CriterionRow(
        label=criterion.label,
        score=criterion.score,
        percentage=criterion_percentage(criterion.score, MAX_CRITERION_SCORE),
        progress=criterion.progress.value if criterion.progress else "",
        last_lesson_title=criterion.last_lesson_title or "",
    )


def build_report_content(report: Report, teacher: Teacher) -> ReportContent:
    """Lay out one report as labelled sections, in export order."""
    content = ReportContent(
        teacher_name=teacher.name,
        date=report.date.isoformat(),
        evaluation_type=report.evaluation_type,
        heading="",
        location=[
            ("المدرسة", report.school),
            ("المادة", report.subject),
            ("الصفوف", report.grades),
            ("الفرع", report.branch),
        ],
        final_percentage=calculate_report_percentage(report),
    )

    if isinstance(report, GeneralEvaluationReport):
        content.heading = GENERAL_HEADING
        content.tables = [CriteriaTable(rows=[_criterion_row(c) for c in report.criteria])]
        content.narrative = [
            ("أهم الاستراتيجيات المنفذة", report.strategies),
            ("أهم الوسائل المستخدمة", report.tools),
            ("أهم البرامج المنفذة", report.programs),
            ("أهم المصادر", report.sources),
        ]
    elif isinstance(report, ClassSessionEvaluationReport):
        content.heading = f"{CLASS_SESSION_HEADING} ({report.sub_type.value})"
        content.kind_fields = [
            ("اسم المشرف", report.supervisor_name),
            ("الفصل الدراسي", report.semester.value),
            ("نوع الزيارة", report.visit_type.value),
            ("الصف", f"{report.class_number.value} / {report.section.value}"),
            ("رقم الدرس", report.lesson_number),
            ("عنوان الدرس", report.lesson_name),
        ]
        content.tables = [
            CriteriaTable(title=group.title, rows=[_criterion_row(c) for c in group.criteria])
            for group in report.criterion_groups
        ]
        content.narrative = [
            ("الإيجابيات", report.positives),
            ("ملاحظات للتحسين", report.notes_for_improvement),
            ("التوصيات", report.recommendations),
            ("تعليق الموظف", report.employee_comment),
        ]
    else:
        raise TypeError(f"Unsupported report type: {type(report).__name__}")

    return content


def _text_row(row: CriterionRow) -> str:
    line = f"{row.label}: {row.score} / {MAX_CRITERION_SCORE} ({row.percentage_text})"
    if row.annotation:
        line += f" [{row.annotation}]"
    return line


def render_text(content: ReportContent) -> str:
    text = f"{LABEL_TEACHER}: {content.teacher_name}\n"
    text += f"{LABEL_DATE}: {content.date}\n"
    text += "".join(f"{label}: {value}\n" for label, value in content.location)

    text += f"\n--- {content.heading} ---\n"
    if content.kind_fields:
        text += "".join(f"{label}: {value}\n" for label, value in content.kind_fields)
        text += "\n"

    for table in content.tables:
        if table.title is None:
            text += "".join(f"{_text_row(row)}\n" for row in table.rows)
        else:
            text += f"\n{table.title}:\n"
            text += "".join(f"  - {_text_row(row)}\n" for row in table.rows)

    text += f"\n{LABEL_FINAL}: {content.final_percentage_text}\n\n"
    text += "".join(f"{label}: {value}\n" for label, value in content.narrative)
    return text


def generate_text(report: Report, teacher: Teacher) -> str:
    """Plain-text rendering of one report."""
    return render_text(build_report_content(report, teacher))


def build_share_url(text: str, base_url: str = SHARE_BASE_URL) -> str:
    """Message-compose link carrying ``text``; the recipient is picked in the app."""
    return f"{base_url}?text={quote(text, safe=_URI_COMPONENT_SAFE)}"


def report_filename(report: Report, teacher: Teacher, extension: str) -> str:
    return f"report_{teacher.name}_{report.date.isoformat()}.{extension}"
