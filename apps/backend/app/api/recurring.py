from __future__ import annotations

import dataclasses
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app import models
from app.api.common import require_owned, require_usable_category
from app.core.config import settings
from app.core.database import get_db
from app.core.deps import get_current_user
from app.schemas import (
    RecurringPreviewOut,
    RecurringProcessOut,
    RecurringTransactionCreate,
    RecurringTransactionOut,
    RecurringTransactionUpdate,
    schedule_problem,
)
from app.services.recurring_evaluator import RecurringDefinition, matching_dates
from app.services.recurring_processor import process_recurring_transactions
from app.services.recurring_service import RecurringTransactionService
from app.utils.dates import today_local

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recurring-transactions", tags=["recurring-transactions"])

_REQUIRED_FIELDS = ("type", "amount", "description", "category_id", "frequency", "start_date", "is_active")


def _validate_recurring_update(row: models.RecurringTransaction, changes: dict) -> None:
    """Check the merged state of a partial update and drop anchors the frequency does not use."""
    for key in _REQUIRED_FIELDS:
        if key in changes and changes[key] is None:
            raise HTTPException(status_code=400, detail=f"{key} cannot be null")

    frequency = changes.get("frequency", row.frequency)
    start_date = changes.get("start_date", row.start_date)
    end_date = changes.get("end_date", row.end_date)
    day_of_week = changes.get("day_of_week", row.day_of_week)
    day_of_month = changes.get("day_of_month", row.day_of_month)

    problem = schedule_problem(frequency, start_date, end_date, day_of_week, day_of_month)
    if problem:
        raise HTTPException(status_code=400, detail=problem)

    if frequency != models.RecurringFrequency.WEEKLY and day_of_week is not None:
        changes["day_of_week"] = None
    if frequency != models.RecurringFrequency.MONTHLY and day_of_month is not None:
        changes["day_of_month"] = None


@router.get("", response_model=list[RecurringTransactionOut])
def list_recurring_transactions(
    is_active: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    return RecurringTransactionService(db).list(user_id=current_user.id, is_active=is_active)


@router.post("", response_model=RecurringTransactionOut, status_code=201)
def create_recurring_transaction(
    payload: RecurringTransactionCreate,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    require_usable_category(db, current_user, payload.category_id, payload.type)
    return RecurringTransactionService(db).create(payload.model_dump(), user_id=current_user.id)


@router.post("/process", response_model=RecurringProcessOut)
def process_recurring(
    run_date: Optional[date] = Query(None, description="Defaults to today"),
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    today = today_local()
    target = run_date or today
    if target > today:
        raise HTTPException(status_code=400, detail="run_date cannot be in the future")
    try:
        processed = process_recurring_transactions(db, run_date=target, user_id=current_user.id)
    except SQLAlchemyError:
        logger.exception("Recurring run failed for user %s on %s", current_user.id, target.isoformat())
        raise HTTPException(status_code=503, detail="Recurring processing is temporarily unavailable")
    return RecurringProcessOut(run_date=target, processed=processed)


@router.get("/{recurring_id}", response_model=RecurringTransactionOut)
def get_recurring_transaction(recurring_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return require_owned(RecurringTransactionService(db).get(recurring_id), current_user, "Recurring transaction")


@router.put("/{recurring_id}", response_model=RecurringTransactionOut)
def put_recurring_transaction(
    recurring_id: int,
    payload: RecurringTransactionCreate,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    svc = RecurringTransactionService(db)
    row = require_owned(svc.get(recurring_id), current_user, "Recurring transaction")
    require_usable_category(db, current_user, payload.category_id, payload.type)
    return svc.update(row, payload.model_dump())


@router.patch("/{recurring_id}", response_model=RecurringTransactionOut)
def patch_recurring_transaction(
    recurring_id: int,
    payload: RecurringTransactionUpdate,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    svc = RecurringTransactionService(db)
    row = require_owned(svc.get(recurring_id), current_user, "Recurring transaction")
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        return row
    _validate_recurring_update(row, changes)
    if "category_id" in changes or "type" in changes:
        require_usable_category(
            db,
            current_user,
            changes.get("category_id", row.category_id),
            changes.get("type", row.type),
        )
    return svc.update(row, changes)


@router.delete("/{recurring_id}", status_code=204)
def delete_recurring_transaction(recurring_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    svc = RecurringTransactionService(db)
    row = require_owned(svc.get(recurring_id), current_user, "Recurring transaction")
    svc.delete(row)
    return None


@router.get("/{recurring_id}/preview", response_model=RecurringPreviewOut)
def preview_recurring_transaction(
    recurring_id: int,
    start: date = Query(...),
    end: date = Query(...),
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    row = require_owned(RecurringTransactionService(db).get(recurring_id), current_user, "Recurring transaction")
    if end < start:
        raise HTTPException(status_code=400, detail="end must be on or after start")
    if (end - start).days + 1 > settings.PREVIEW_MAX_DAYS:
        raise HTTPException(status_code=400, detail=f"Preview window is limited to {settings.PREVIEW_MAX_DAYS} days")
    # 미리보기는 일정만 보여주므로 처리 이력/활성 여부는 무시
    schedule = dataclasses.replace(RecurringDefinition.from_row(row), is_active=True, last_processed_date=None)
    return RecurringPreviewOut(
        recurring_id=row.id,
        start=start,
        end=end,
        dates=list(matching_dates(schedule, start, end)),
    )
