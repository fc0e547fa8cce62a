"""Evaluation report routes: drafting, saving, reading and deleting."""
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Response, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from web.config import Settings
from web.dependencies import get_current_session, get_settings, get_store
from web.services.models import CamelModel, EvaluationType, report_adapter
from web.services.prefill import build_draft_report
from web.store import EvaluationStore

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_session)])


class DraftRequest(CamelModel):
    teacher_id: str
    evaluation_type: EvaluationType


@router.post("/draft")
async def create_draft(
    payload: DraftRequest,
    settings: Settings = Depends(get_settings),
    store: EvaluationStore = Depends(get_store),
):
    """Return an unsaved report pre-filled from the teacher's history."""
    teacher = store.get_teacher(payload.teacher_id)
    return build_draft_report(
        teacher,
        payload.evaluation_type,
        store.list_reports(teacher_id=teacher.id),
        store.list_custom_criteria(),
        config_dir=settings.CONFIG_DIR,
    )


@router.put("")
async def save_report(
    payload: Dict[str, Any] = Body(...),
    store: EvaluationStore = Depends(get_store),
):
    """Insert or replace a report; the teacher's location fields follow it."""
    try:
        report = report_adapter.validate_python(payload)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc
    return store.save_report(report)


@router.get("/{report_id}")
async def get_report(report_id: str, store: EvaluationStore = Depends(get_store)):
    return store.get_report(report_id)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(report_id: str, store: EvaluationStore = Depends(get_store)):
    store.delete_report(report_id)
    logger.info(f"Deleted report {report_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
