"""Criteria templates and school custom criteria."""
from __future__ import annotations

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from web.config import Settings
from web.dependencies import get_current_session, get_settings, get_store
from web.services.criteria_loader import class_session_template, general_template
from web.services.models import (
    CamelModel,
    Criterion,
    CriterionDefinition,
    CriterionGroup,
    CustomCriterion,
    EvaluationType,
    SubType,
)
from web.store import EvaluationStore

router = APIRouter(dependencies=[Depends(get_current_session)])


class CustomCriterionCreate(CamelModel):
    school: str
    evaluation_type: EvaluationType
    sub_type: Optional[SubType] = None
    group_title: Optional[str] = None
    criterion: CriterionDefinition


@router.get("/templates/general")
async def get_general_template(settings: Settings = Depends(get_settings)) -> List[Criterion]:
    return general_template(settings.CONFIG_DIR)


@router.get("/templates/class-session/{sub_type}")
async def get_class_session_template(
    sub_type: SubType,
    settings: Settings = Depends(get_settings),
) -> List[CriterionGroup]:
    return class_session_template(sub_type, settings.CONFIG_DIR)


@router.get("/custom-criteria")
async def list_custom_criteria(store: EvaluationStore = Depends(get_store)) -> List[CustomCriterion]:
    return store.list_custom_criteria()


@router.post("/custom-criteria", status_code=status.HTTP_201_CREATED)
async def create_custom_criterion(
    payload: CustomCriterionCreate,
    store: EvaluationStore = Depends(get_store),
) -> CustomCriterion:
    criterion = CustomCriterion(id=f"custom-{uuid.uuid4().hex}", **payload.model_dump())
    return store.add_custom_criterion(criterion)
