from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app import models
from app.api.common import require_owned, require_usable_category
from app.core.database import get_db
from app.core.deps import get_current_user
from app.schemas import BudgetCreate, BudgetOut, BudgetSummaryOut, BudgetUpdate
from app.services.budget_service import BudgetService


router = APIRouter(prefix="/budgets", tags=["budgets"])


@router.get("", response_model=list[BudgetOut])
def list_budgets(db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return BudgetService(db).list(user_id=current_user.id)


@router.post("", response_model=BudgetOut, status_code=201)
def create_budget(payload: BudgetCreate, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    # 예산은 지출 카테고리에만 설정
    require_usable_category(db, current_user, payload.category_id, models.TxnType.EXPENSE)
    return BudgetService(db).create(payload.model_dump(), user_id=current_user.id)


@router.get("/{budget_id}", response_model=BudgetOut)
def get_budget(budget_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return require_owned(BudgetService(db).get(budget_id), current_user, "Budget")


@router.put("/{budget_id}", response_model=BudgetOut)
def put_budget(
    budget_id: int,
    payload: BudgetCreate,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    svc = BudgetService(db)
    row = require_owned(svc.get(budget_id), current_user, "Budget")
    require_usable_category(db, current_user, payload.category_id, models.TxnType.EXPENSE)
    return svc.update(row, payload.model_dump())


@router.patch("/{budget_id}", response_model=BudgetOut)
def patch_budget(
    budget_id: int,
    payload: BudgetUpdate,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    svc = BudgetService(db)
    row = require_owned(svc.get(budget_id), current_user, "Budget")
    changes = payload.model_dump(exclude_unset=True)
    for key in ("category_id", "amount", "period", "start_date", "end_date"):
        if key in changes and changes[key] is None:
            raise HTTPException(status_code=400, detail=f"{key} cannot be null")
    start = changes.get("start_date", row.start_date)
    end = changes.get("end_date", row.end_date)
    if end < start:
        raise HTTPException(status_code=400, detail="end_date must be on or after start_date")
    if "category_id" in changes:
        require_usable_category(db, current_user, changes["category_id"], models.TxnType.EXPENSE)
    return svc.update(row, changes)


@router.delete("/{budget_id}", status_code=204)
def delete_budget(budget_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    svc = BudgetService(db)
    row = require_owned(svc.get(budget_id), current_user, "Budget")
    svc.delete(row)
    return None


@router.get("/{budget_id}/summary", response_model=BudgetSummaryOut)
def get_budget_summary(budget_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    svc = BudgetService(db)
    row = require_owned(svc.get(budget_id), current_user, "Budget")
    return svc.summarize(row)
