"""Pytest configuration and fixtures."""
import datetime as dt

import pytest
from fastapi.testclient import TestClient

from web.app import app
from web.dependencies import get_store
from web.services.models import (
    ClassNumber,
    ClassSessionEvaluationReport,
    Criterion,
    CriterionGroup,
    GeneralEvaluationReport,
    Progress,
    Section,
    Semester,
    SubType,
    Teacher,
    VisitType,
)
from web.store import EvaluationStore


STAFF_PASSWORD = "supervisor2024"


@pytest.fixture
def store() -> EvaluationStore:
    """Fresh in-memory store."""
    return EvaluationStore()


@pytest.fixture
def client(store: EvaluationStore):
    """Create test client backed by the in-memory store."""
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def authenticated_client(client: TestClient) -> TestClient:
    """Create authenticated test client."""
    client.post("/login", data={"password": STAFF_PASSWORD})
    return client


@pytest.fixture
def teacher() -> Teacher:
    return Teacher(
        id="teacher-1",
        name="أحمد علي",
        school="مدرسة النور",
        subject="الرياضيات",
        grades="السابع",
        branch="الرئيسي",
    )


@pytest.fixture
def general_report(teacher: Teacher) -> GeneralEvaluationReport:
    """General report with scores [4, 0, 2]."""
    return GeneralEvaluationReport(
        id="report-general",
        teacher_id=teacher.id,
        date=dt.date(2024, 3, 10),
        school="مدرسة النور",
        subject="الرياضيات",
        grades="السابع",
        branch="الرئيسي",
        criteria=[
            Criterion(id="c1", label="التخطيط", score=4),
            Criterion(id="c2", label="إدارة الصف", score=0),
            Criterion(
                id="c3",
                label="تنفيذ الدرس",
                score=2,
                progress=Progress.ON_TRACK,
                last_lesson_title="الكسور",
            ),
        ],
        strategies="التعلم التعاوني",
        tools="السبورة الذكية",
        programs="برنامج القراءة",
        sources="الكتاب المدرسي",
    )


@pytest.fixture
def class_session_report(teacher: Teacher) -> ClassSessionEvaluationReport:
    return ClassSessionEvaluationReport(
        id="report-class",
        teacher_id=teacher.id,
        date=dt.date(2024, 4, 2),
        school="مدرسة النور",
        subject="الرياضيات",
        grades="السابع",
        branch="الرئيسي",
        sub_type=SubType.BRIEF,
        supervisor_name="سعاد",
        semester=Semester.SECOND,
        visit_type=VisitType.EXPLORATORY,
        class_number=ClassNumber.SEVENTH,
        section=Section.B,
        lesson_number="12",
        lesson_name="المعادلات",
        criterion_groups=[
            CriterionGroup(
                id="g1",
                title="التخطيط",
                criteria=[
                    Criterion(id="g1-c1", label="وضوح الأهداف", score=4),
                    Criterion(id="g1-c2", label="تنظيم الوقت", score=3),
                ],
            ),
            CriterionGroup(
                id="g2",
                title="التنفيذ",
                criteria=[Criterion(id="g2-c1", label="التفاعل", score=1)],
            ),
        ],
        positives="تفاعل جيد",
        notes_for_improvement="زيادة الأنشطة",
        recommendations="حضور ورشة",
        employee_comment="شكرا",
    )
