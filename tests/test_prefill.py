"""Tests for draft pre-filling."""
import datetime as dt
import json

import pytest

from web.services.criteria_loader import class_session_template, clear_cache, general_template, load_templates
from web.services.models import (
    ClassNumber,
    ClassSessionEvaluationReport,
    CriterionDefinition,
    CustomCriterion,
    EvaluationType,
    GeneralEvaluationReport,
    Section,
    Semester,
    SubType,
    Teacher,
    VisitType,
)
from web.services.prefill import build_draft_report, latest_report, resolve_location


TODAY = dt.date(2024, 5, 1)


@pytest.fixture
def bare_teacher() -> Teacher:
    return Teacher(id="teacher-2", name="منى")


class TestGeneralDraft:
    """Drafts of general evaluations."""

    def test_no_history_equals_template(self, bare_teacher):
        draft = build_draft_report(bare_teacher, EvaluationType.GENERAL, today=TODAY)

        assert isinstance(draft, GeneralEvaluationReport)
        assert draft.teacher_id == bare_teacher.id
        assert draft.date == TODAY
        assert [c.label for c in draft.criteria] == [c.label for c in general_template()]
        assert all(c.score == 0 for c in draft.criteria)
        assert (draft.strategies, draft.tools, draft.programs, draft.sources) == ("", "", "", "")
        assert (draft.school, draft.subject, draft.grades, draft.branch) == ("", "", "", "")

    def test_location_comes_from_teacher_without_history(self, teacher):
        draft = build_draft_report(teacher, EvaluationType.GENERAL, today=TODAY)
        assert draft.school == "مدرسة النور"
        assert draft.branch == "الرئيسي"

    def test_location_prefers_latest_same_kind_report(self, teacher, general_report, class_session_report):
        older = general_report.model_copy(update={"id": "old", "date": dt.date(2023, 1, 1), "school": "قديمة"})
        newer = general_report.model_copy(update={"id": "new", "school": "جديدة"})
        other_kind = class_session_report.model_copy(update={"school": "حصة"})

        draft = build_draft_report(teacher, EvaluationType.GENERAL, [older, newer, other_kind], today=TODAY)

        assert draft.school == "جديدة"

    def test_location_falls_back_to_any_kind(self, bare_teacher, class_session_report):
        history = class_session_report.model_copy(update={"teacher_id": bare_teacher.id, "subject": "العلوم"})
        draft = build_draft_report(bare_teacher, EvaluationType.GENERAL, [history], today=TODAY)
        assert draft.subject == "العلوم"

    def test_other_teachers_history_ignored(self, bare_teacher, general_report):
        draft = build_draft_report(bare_teacher, EvaluationType.GENERAL, [general_report], today=TODAY)
        assert draft.school == ""

    def test_custom_criteria_for_school_are_appended(self, teacher):
        custom = [
            CustomCriterion(
                id="x1",
                school="مدرسة النور",
                evaluation_type=EvaluationType.GENERAL,
                criterion=CriterionDefinition(id="custom-1", label="المشاركة المجتمعية"),
            ),
            CustomCriterion(
                id="x2",
                school="مدرسة أخرى",
                evaluation_type=EvaluationType.GENERAL,
                criterion=CriterionDefinition(id="custom-2", label="لا تظهر"),
            ),
        ]
        draft = build_draft_report(teacher, EvaluationType.GENERAL, custom_criteria=custom, today=TODAY)

        labels = [c.label for c in draft.criteria]
        assert labels[-1] == "المشاركة المجتمعية"
        assert "لا تظهر" not in labels
        assert len(labels) == len(general_template()) + 1

    def test_history_not_mutated(self, teacher, general_report):
        before = general_report.model_dump()
        build_draft_report(teacher, EvaluationType.GENERAL, [general_report], today=TODAY)
        assert general_report.model_dump() == before


class TestClassSessionDraft:
    """Drafts of class-session evaluations."""

    def test_carry_over_resets_scores(self, teacher, class_session_report):
        draft = build_draft_report(teacher, EvaluationType.CLASS_SESSION, [class_session_report], today=TODAY)

        assert isinstance(draft, ClassSessionEvaluationReport)
        assert draft.supervisor_name == "سعاد"
        assert draft.semester == Semester.SECOND
        assert draft.class_number == ClassNumber.SEVENTH
        assert draft.section == Section.B
        assert draft.lesson_name == "المعادلات"
        assert draft.sub_type == SubType.BRIEF
        assert all(c.score == 0 for g in draft.criterion_groups for c in g.criteria)
        assert draft.positives == ""
        assert draft.id != class_session_report.id

    def test_defaults_without_history(self, bare_teacher):
        draft = build_draft_report(bare_teacher, EvaluationType.CLASS_SESSION, today=TODAY)

        assert draft.supervisor_name == ""
        assert draft.semester == Semester.FIRST
        assert draft.visit_type == VisitType.EXPLORATORY
        assert draft.class_number == ClassNumber.FIRST
        assert draft.section == Section.A
        assert [g.title for g in draft.criterion_groups] == [g.title for g in class_session_template()]

    def test_general_history_does_not_carry_session_fields(self, teacher, general_report):
        draft = build_draft_report(teacher, EvaluationType.CLASS_SESSION, [general_report], today=TODAY)
        assert draft.supervisor_name == ""
        assert draft.school == general_report.school


def test_latest_report_picks_newest(general_report):
    older = general_report.model_copy(update={"id": "a", "date": dt.date(2020, 1, 1)})
    assert latest_report([older, general_report]).id == general_report.id
    assert latest_report([]) is None


def test_resolve_location_skips_empty_values(teacher, general_report):
    source = general_report.model_copy(update={"school": "", "subject": "العلوم"})
    resolved = resolve_location(teacher, source)
    assert resolved["school"] == teacher.school
    assert resolved["subject"] == "العلوم"


class TestTemplateLoading:
    """Criteria templates read from a config directory."""

    def test_templates_from_config_dir(self, tmp_path):
        (tmp_path / "criteria_templates.json").write_text(
            json.dumps(
                {
                    "general": [{"id": "g", "label": "معيار"}],
                    "class_session": {"brief": [{"id": "b", "title": "مجموعة", "criteria": [{"id": "b1", "label": "أ"}]}]},
                }
            ),
            encoding="utf-8",
        )
        clear_cache()

        assert [c.label for c in general_template(tmp_path)] == ["معيار"]
        groups = class_session_template(SubType.EXTENDED, tmp_path)
        assert [g.title for g in groups] == ["مجموعة"]

    def test_missing_file_uses_builtin(self, tmp_path):
        templates = load_templates(tmp_path)
        assert len(templates["general"]) == 10
        assert set(templates["class_session"]) == {"brief", "extended", "subject_specific"}

    def test_invalid_json_uses_builtin(self, tmp_path):
        (tmp_path / "criteria_templates.json").write_text("{not json", encoding="utf-8")
        clear_cache()
        assert len(general_template(tmp_path)) == 10
