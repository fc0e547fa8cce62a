"""
Draft construction for new evaluations.

A new report starts from the teacher's most relevant history: the latest
report of the requested kind, then the latest report of any kind, then the
teacher record itself. Nothing passed in is mutated and nothing is persisted.
"""
from __future__ import annotations

import datetime as dt
import logging
import uuid
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from web.services.criteria_loader import class_session_template, general_template
from web.services.models import (
    ClassNumber,
    ClassSessionEvaluationReport,
    Criterion,
    CustomCriterion,
    EvaluationType,
    GeneralEvaluationReport,
    Report,
    Section,
    Semester,
    SubType,
    Teacher,
    VisitType,
)

logger = logging.getLogger(__name__)

LOCATION_FIELDS = ("school", "subject", "grades", "branch")

# Carried from the latest class-session report; the value is used when absent
CLASS_SESSION_DEFAULTS = {
    "supervisor_name": "",
    "semester": Semester.FIRST,
    "visit_type": VisitType.EXPLORATORY,
    "class_number": ClassNumber.FIRST,
    "section": Section.A,
    "lesson_number": "",
    "lesson_name": "",
}


def new_report_id() -> str:
    return f"report-{uuid.uuid4().hex}"


def latest_report(reports: Iterable[Report]) -> Optional[Report]:
    """Most recent report by date; the first one wins on equal dates."""
    return max(reports, key=lambda r: r.date, default=None)


def resolve_location(teacher: Teacher, *sources: Optional[Report]) -> dict:
    """Pick each location field from the first source with a non-empty value."""
    resolved = {}
    for field_name in LOCATION_FIELDS:
        value = ""
        for source in (*sources, teacher):
            candidate = getattr(source, field_name, None) if source is not None else None
            if candidate:
                value = candidate
                break
        resolved[field_name] = value
    return resolved


def _custom_general_criteria(custom_criteria: Iterable[CustomCriterion], school: str) -> List[Criterion]:
    return [
        Criterion(**custom.criterion.model_dump(), score=0)
        for custom in custom_criteria
        if custom.school == school and custom.evaluation_type == EvaluationType.GENERAL
    ]


def build_draft_report(
    teacher: Teacher,
    evaluation_type: EvaluationType,
    reports: Sequence[Report] = (),
    custom_criteria: Sequence[CustomCriterion] = (),
    *,
    today: Optional[dt.date] = None,
    report_id: Optional[str] = None,
    config_dir: Optional[Path] = None,
) -> Report:
    """
    Build an unsaved report for ``teacher`` pre-filled from their history.

    Args:
        teacher: The teacher being evaluated.
        evaluation_type: Kind of report to start.
        reports: Prior reports; entries for other teachers are ignored.
        custom_criteria: Custom criteria of every school.
        today: Date stamped on the draft (defaults to the current date).
        report_id: Identifier for the draft (defaults to a fresh one).
        config_dir: Directory holding the criteria templates.

    Returns:
        A new GeneralEvaluationReport or ClassSessionEvaluationReport.
    """
    kind = EvaluationType(evaluation_type)
    own_reports = [r for r in reports if r.teacher_id == teacher.id]
    same_kind = [r for r in own_reports if r.evaluation_type == kind.value]

    latest_same_kind = latest_report(same_kind)
    latest_any = latest_report(own_reports)

    base = {
        "id": report_id or new_report_id(),
        "teacher_id": teacher.id,
        "date": today or dt.date.today(),
        **resolve_location(teacher, latest_same_kind, latest_any),
    }

    if kind == EvaluationType.GENERAL:
        criteria = general_template(config_dir) + _custom_general_criteria(custom_criteria, base["school"])
        draft = GeneralEvaluationReport(**base, criteria=criteria)
    else:
        carried = {}
        for field_name, default in CLASS_SESSION_DEFAULTS.items():
            previous = getattr(latest_same_kind, field_name, None) if latest_same_kind is not None else None
            carried[field_name] = previous or default
        draft = ClassSessionEvaluationReport(
            **base,
            **carried,
            sub_type=SubType.BRIEF,
            criterion_groups=class_session_template(SubType.BRIEF, config_dir),
        )

    logger.info(
        f"Prepared {kind.value} draft for teacher {teacher.id} "
        f"(history: {len(own_reports)} report(s))"
    )
    return draft
