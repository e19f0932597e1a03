from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app import models
from app.core.database import get_db
from app.core.deps import get_current_user
from app.schemas import CategoryCreate, CategoryOut, CategoryUpdate
from app.services.category_service import CategoryService


router = APIRouter(prefix="/categories", tags=["categories"])


def _get_own_category(svc: CategoryService, category_id: int, user: models.User) -> models.Category:
    row = svc.get(category_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Category not found")
    if row.is_shared:
        raise HTTPException(status_code=403, detail="Shared categories cannot be modified")
    if row.user_id != user.id:
        raise HTTPException(status_code=403, detail="Category belongs to another user")
    return row


@router.get("", response_model=list[CategoryOut])
def list_categories(
    type: Optional[models.TxnType] = Query(None),
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    return CategoryService(db).list_visible(current_user.id, type=type)


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return CategoryService(db).create(payload.model_dump(), user_id=current_user.id)


@router.put("/{category_id}", response_model=CategoryOut)
def put_category(
    category_id: int,
    payload: CategoryCreate,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    svc = CategoryService(db)
    row = _get_own_category(svc, category_id, current_user)
    if payload.type != row.type and svc.is_in_use(row.id):
        raise HTTPException(status_code=409, detail="Category type cannot change while it is in use")
    return svc.update(row, payload.model_dump())


@router.patch("/{category_id}", response_model=CategoryOut)
def patch_category(
    category_id: int,
    payload: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    svc = CategoryService(db)
    row = _get_own_category(svc, category_id, current_user)
    changes = payload.model_dump(exclude_unset=True)
    if "type" in changes and changes["type"] is None:
        raise HTTPException(status_code=400, detail="type cannot be null")
    if "name" in changes and changes["name"] is None:
        raise HTTPException(status_code=400, detail="name cannot be null")
    if "type" in changes and changes["type"] != row.type and svc.is_in_use(row.id):
        raise HTTPException(status_code=409, detail="Category type cannot change while it is in use")
    return svc.update(row, changes)


@router.delete("/{category_id}", status_code=204)
def delete_category(category_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    svc = CategoryService(db)
    row = _get_own_category(svc, category_id, current_user)
    if svc.is_in_use(row.id):
        raise HTTPException(status_code=409, detail="Category is referenced by transactions, budgets or recurring transactions")
    svc.delete(row)
    return None
