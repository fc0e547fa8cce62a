"""
Evaluation data model.

Teachers, the two report variants (general and class session) and the
school-scoped custom criteria. Reports form a tagged union on
``evaluation_type``; every model serializes with camelCase keys so the
persisted JSON keeps the ``teachers`` / ``reports`` / ``customCriteria`` shape.
"""
from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


MAX_CRITERION_SCORE = 4


class EvaluationType(str, Enum):
    GENERAL = "general"
    CLASS_SESSION = "class_session"


class SubType(str, Enum):
    BRIEF = "brief"
    EXTENDED = "extended"
    SUBJECT_SPECIFIC = "subject_specific"


class Progress(str, Enum):
    """Curriculum pacing relative to the plan."""
    AHEAD = "متقدم"
    ON_TRACK = "مطابق"
    BEHIND = "متأخر"


class Semester(str, Enum):
    FIRST = "الأول"
    SECOND = "الثاني"


class VisitType(str, Enum):
    EXPLORATORY = "استطلاعية"
    EVALUATIVE_1 = "تقييمية 1"
    EVALUATIVE_2 = "تقييمية 2"
    TECHNICAL_SUPERVISORY = "فنية إشرافية"
    DEVELOPMENTAL = "تطويرية"
    EXCHANGE = "تبادلية"
    DIAGNOSTIC = "تشخيصية"
    REMEDIAL = "علاجية"


class ClassNumber(str, Enum):
    FIRST = "الأول"
    SECOND = "الثاني"
    THIRD = "الثالث"
    FOURTH = "الرابع"
    FIFTH = "الخامس"
    SIXTH = "السادس"
    SEVENTH = "السابع"
    EIGHTH = "الثامن"
    NINTH = "التاسع"
    TENTH = "العاشر"
    ELEVENTH = "الحادي عشر"
    TWELFTH = "الثاني عشر"


class Section(str, Enum):
    A = "أ"
    B = "ب"
    C = "ج"
    D = "د"
    E = "هـ"
    F = "و"
    G = "ز"
    H = "ح"
    I = "ط"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Teacher(CamelModel):
    id: str
    name: str
    school: Optional[str] = None
    subject: Optional[str] = None
    grades: Optional[str] = None
    branch: Optional[str] = None


class CriterionDefinition(CamelModel):
    """A rubric item without a score (used by custom criteria)."""
    id: str
    label: str
    progress: Optional[Progress] = None
    last_lesson_title: Optional[str] = None


class Criterion(CriterionDefinition):
    score: int = Field(default=0, ge=0, le=MAX_CRITERION_SCORE)


class CriterionGroup(CamelModel):
    id: str
    title: str
    criteria: List[Criterion] = Field(default_factory=list)


class BaseReport(CamelModel):
    id: str
    teacher_id: str
    date: dt.date
    school: str = ""
    subject: str = ""
    grades: str = ""
    branch: str = ""


class GeneralEvaluationReport(BaseReport):
    evaluation_type: Literal["general"] = "general"
    criteria: List[Criterion] = Field(default_factory=list)
    strategies: str = ""
    tools: str = ""
    programs: str = ""
    sources: str = ""


class ClassSessionEvaluationReport(BaseReport):
    evaluation_type: Literal["class_session"] = "class_session"
    sub_type: SubType = SubType.BRIEF
    supervisor_name: str = ""
    semester: Semester = Semester.FIRST
    visit_type: VisitType = VisitType.EXPLORATORY
    class_number: ClassNumber = Field(default=ClassNumber.FIRST, alias="class")
    section: Section = Section.A
    lesson_number: str = ""
    lesson_name: str = ""
    criterion_groups: List[CriterionGroup] = Field(default_factory=list)
    positives: str = ""
    notes_for_improvement: str = ""
    recommendations: str = ""
    employee_comment: str = ""


Report = Annotated[
    Union[GeneralEvaluationReport, ClassSessionEvaluationReport],
    Field(discriminator="evaluation_type"),
]

report_adapter: TypeAdapter = TypeAdapter(Report)


class CustomCriterion(CamelModel):
    """Extra criterion a school adds to its evaluations."""
    id: str
    school: str
    evaluation_type: EvaluationType
    sub_type: Optional[SubType] = None
    group_title: Optional[str] = None
    criterion: CriterionDefinition

