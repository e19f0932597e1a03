from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from app import models
from app.api.common import require_owned, require_usable_category
from app.core.database import get_db
from app.core.deps import get_current_user
from app.schemas import TransactionCreate, TransactionOut, TransactionUpdate
from app.services.transaction_service import TransactionService


router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=list[TransactionOut])
def list_transactions(
    response: Response,
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    type: Optional[models.TxnType] = Query(None),
    category_id: Optional[int] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=2000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    if start and end and end < start:
        raise HTTPException(status_code=400, detail="end must be on or after start")
    rows, total = TransactionService(db).list(
        user_id=current_user.id,
        start=start,
        end=end,
        type=type,
        category_id=category_id,
        limit=limit,
        offset=offset,
    )
    response.headers["X-Total-Count"] = str(total)
    return rows


@router.post("", response_model=TransactionOut, status_code=201)
def create_transaction(payload: TransactionCreate, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    require_usable_category(db, current_user, payload.category_id, payload.type)
    return TransactionService(db).create(payload.model_dump(), user_id=current_user.id)


@router.get("/{txn_id}", response_model=TransactionOut)
def get_transaction(txn_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return require_owned(TransactionService(db).get(txn_id), current_user, "Transaction")


@router.put("/{txn_id}", response_model=TransactionOut)
def put_transaction(
    txn_id: int,
    payload: TransactionCreate,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    svc = TransactionService(db)
    row = require_owned(svc.get(txn_id), current_user, "Transaction")
    require_usable_category(db, current_user, payload.category_id, payload.type)
    return svc.update(row, payload.model_dump())


@router.patch("/{txn_id}", response_model=TransactionOut)
def patch_transaction(
    txn_id: int,
    payload: TransactionUpdate,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    svc = TransactionService(db)
    row = require_owned(svc.get(txn_id), current_user, "Transaction")
    changes = payload.model_dump(exclude_unset=True)
    for key in ("type", "amount", "description", "date", "category_id"):
        if key in changes and changes[key] is None:
            raise HTTPException(status_code=400, detail=f"{key} cannot be null")
    if "category_id" in changes or "type" in changes:
        require_usable_category(
            db,
            current_user,
            changes.get("category_id", row.category_id),
            changes.get("type", row.type),
        )
    return svc.update(row, changes)


@router.delete("/{txn_id}", status_code=204)
def delete_transaction(txn_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    svc = TransactionService(db)
    row = require_owned(svc.get(txn_id), current_user, "Transaction")
    svc.delete(row)
    return None
