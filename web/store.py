"""
JSON-file storage for teachers, reports and custom criteria.
The whole document is read when the store is created and rewritten after
every change. Without a data file the store lives in memory only.
"""
from __future__ import annotations

import json
import logging
import threading
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from web.services.models import CustomCriterion, Report, Teacher, report_adapter

logger = logging.getLogger(__name__)


class RecordNotFoundError(LookupError):
    """Raised when a teacher or report id is unknown."""


@dataclass
class StoreSnapshot:
    """Deep copies of the stored collections, safe to hand to exporters."""

    teachers: List[Teacher] = field(default_factory=list)
    reports: List[Report] = field(default_factory=list)
    custom_criteria: List[CustomCriterion] = field(default_factory=list)


class EvaluationStore:
    """Thread-safe storage for the three evaluation collections."""

    def __init__(self, data_file: Optional[Path] = None):
        self.data_file = Path(data_file) if data_file else None
        self._teachers: List[Teacher] = []
        self._reports: List[Report] = []
        self._custom_criteria: List[CustomCriterion] = []
        self._lock = threading.Lock()
        self.load()

    def load(self) -> None:
        if self.data_file is None or not self.data_file.exists():
            return
        with open(self.data_file, "r", encoding="utf-8") as f:
            document = json.load(f)
        with self._lock:
            self._teachers = [Teacher.model_validate(t) for t in document.get("teachers", [])]
            self._reports = [report_adapter.validate_python(r) for r in document.get("reports", [])]
            self._custom_criteria = [
                CustomCriterion.model_validate(c) for c in document.get("customCriteria", [])
            ]
        logger.info(
            f"Loaded {len(self._teachers)} teacher(s) and {len(self._reports)} report(s) from {self.data_file}"
        )

    def _flush(self) -> None:
        # Caller holds the lock
        if self.data_file is None:
            return
        document = {
            "teachers": [t.model_dump(mode="json", by_alias=True) for t in self._teachers],
            "reports": [r.model_dump(mode="json", by_alias=True) for r in self._reports],
            "customCriteria": [c.model_dump(mode="json", by_alias=True) for c in self._custom_criteria],
        }
        self.data_file.parent.mkdir(parents=True, exist_ok=True)
        tmp_file = self.data_file.with_suffix(self.data_file.suffix + ".tmp")
        tmp_file.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp_file.replace(self.data_file)

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(
                teachers=[t.model_copy(deep=True) for t in self._teachers],
                reports=[r.model_copy(deep=True) for r in self._reports],
                custom_criteria=[c.model_copy(deep=True) for c in self._custom_criteria],
            )

    def list_teachers(self) -> List[Teacher]:
        return self.snapshot().teachers

    def get_teacher(self, teacher_id: str) -> Teacher:
        with self._lock:
            for teacher in self._teachers:
                if teacher.id == teacher_id:
                    return teacher.model_copy(deep=True)
        raise RecordNotFoundError(f"Teacher {teacher_id} not found")

    def add_teacher(self, name: str) -> Teacher:
        teacher = Teacher(id=f"teacher-{uuid.uuid4().hex}", name=name)
        with self._lock:
            self._teachers.append(teacher)
            self._flush()
        logger.info(f"Added teacher {teacher.id}")
        return teacher.model_copy(deep=True)

    def update_teacher(self, teacher: Teacher) -> Teacher:
        with self._lock:
            for index, existing in enumerate(self._teachers):
                if existing.id == teacher.id:
                    self._teachers[index] = teacher.model_copy(deep=True)
                    self._flush()
                    return teacher
        raise RecordNotFoundError(f"Teacher {teacher.id} not found")

    def delete_teacher(self, teacher_id: str) -> int:
        """Delete a teacher and every report referencing it. Returns the number of reports removed."""
        with self._lock:
            remaining = [t for t in self._teachers if t.id != teacher_id]
            if len(remaining) == len(self._teachers):
                raise RecordNotFoundError(f"Teacher {teacher_id} not found")
            kept_reports = [r for r in self._reports if r.teacher_id != teacher_id]
            removed = len(self._reports) - len(kept_reports)
            self._teachers = remaining
            self._reports = kept_reports
            self._flush()
        logger.info(f"Deleted teacher {teacher_id} and {removed} report(s)")
        return removed

    def list_reports(self, teacher_id: Optional[str] = None) -> List[Report]:
        reports = self.snapshot().reports
        if teacher_id is not None:
            reports = [r for r in reports if r.teacher_id == teacher_id]
        return reports

    def get_report(self, report_id: str) -> Report:
        with self._lock:
            for report in self._reports:
                if report.id == report_id:
                    return report.model_copy(deep=True)
        raise RecordNotFoundError(f"Report {report_id} not found")

    def save_report(self, report: Report) -> Report:
        """
        Insert a new report or replace the one with the same id in place.

        The teacher's stored school, subject, grades and branch follow the
        saved report.
        """
        stored = report.model_copy(deep=True)
        with self._lock:
            teacher_index = next(
                (i for i, t in enumerate(self._teachers) if t.id == report.teacher_id), None
            )
            if teacher_index is None:
                raise RecordNotFoundError(f"Teacher {report.teacher_id} not found")

            teacher = self._teachers[teacher_index]
            location = {
                "school": report.school,
                "subject": report.subject,
                "grades": report.grades,
                "branch": report.branch,
            }
            if any(getattr(teacher, key) != value for key, value in location.items()):
                self._teachers[teacher_index] = teacher.model_copy(update=location)

            for index, existing in enumerate(self._reports):
                if existing.id == report.id:
                    self._reports[index] = stored
                    break
            else:
                self._reports.append(stored)
            self._flush()
        logger.info(f"Saved {report.evaluation_type} report {report.id} for teacher {report.teacher_id}")
        return report

    def delete_report(self, report_id: str) -> None:
        with self._lock:
            remaining = [r for r in self._reports if r.id != report_id]
            if len(remaining) == len(self._reports):
                raise RecordNotFoundError(f"Report {report_id} not found")
            self._reports = remaining
            self._flush()

    def list_custom_criteria(self) -> List[CustomCriterion]:
        return self.snapshot().custom_criteria

    def add_custom_criterion(self, criterion: CustomCriterion) -> CustomCriterion:
        with self._lock:
            self._custom_criteria.append(criterion.model_copy(deep=True))
            self._flush()
        return criterion
