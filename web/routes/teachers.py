"""Teacher management routes."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from pydantic import Field

from web.dependencies import get_current_session, get_store
from web.services.models import CamelModel, Teacher
from web.store import EvaluationStore

router = APIRouter(prefix="/teachers", dependencies=[Depends(get_current_session)])


class TeacherCreate(CamelModel):
    name: str = Field(min_length=1)


@router.get("")
async def list_teachers(store: EvaluationStore = Depends(get_store)) -> List[Teacher]:
    return store.list_teachers()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_teacher(
    payload: TeacherCreate,
    store: EvaluationStore = Depends(get_store),
) -> Teacher:
    return store.add_teacher(payload.name.strip())


@router.put("/{teacher_id}")
async def update_teacher(
    teacher_id: str,
    teacher: Teacher,
    store: EvaluationStore = Depends(get_store),
) -> Teacher:
    """Replace a teacher record; the id in the path wins over the body."""
    return store.update_teacher(teacher.model_copy(update={"id": teacher_id}))


@router.delete("/{teacher_id}")
async def delete_teacher(teacher_id: str, store: EvaluationStore = Depends(get_store)):
    """Delete a teacher together with all of their reports."""
    removed = store.delete_teacher(teacher_id)
    return {"deletedReports": removed}


@router.get("/{teacher_id}/reports")
async def list_teacher_reports(teacher_id: str, store: EvaluationStore = Depends(get_store)):
    """A teacher's reports, newest first."""
    store.get_teacher(teacher_id)
    reports = store.list_reports(teacher_id=teacher_id)
    return sorted(reports, key=lambda r: r.date, reverse=True)
