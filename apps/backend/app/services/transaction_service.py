from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from app import models
from app.models import TxnType


class TransactionService:
    """CRUD over a user's income/expense transactions."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def list(
        self,
        *,
        user_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        type: Optional[TxnType] = None,
        category_id: Optional[int] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> tuple[list[models.Transaction], int]:
        """Return ``(rows, total)``; ``total`` ignores paging."""
        q = self.db.query(models.Transaction).filter(models.Transaction.user_id == user_id)
        if start:
            q = q.filter(models.Transaction.date >= start)
        if end:
            q = q.filter(models.Transaction.date <= end)
        if type:
            q = q.filter(models.Transaction.type == type)
        if category_id:
            q = q.filter(models.Transaction.category_id == category_id)
        total = q.count()
        q = q.order_by(models.Transaction.date.desc(), models.Transaction.id.desc())
        if offset:
            q = q.offset(offset)
        if limit is not None:
            q = q.limit(limit)
        return q.all(), total

    def get(self, txn_id: int) -> models.Transaction | None:
        return self.db.get(models.Transaction, txn_id)

    def create(self, payload: dict, *, user_id: int) -> models.Transaction:
        payload["user_id"] = user_id
        row = models.Transaction(**payload)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def update(self, row: models.Transaction, patch: dict) -> models.Transaction:
        if not patch:
            return row
        for key, value in patch.items():
            setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        return row

    def delete(self, row: models.Transaction) -> None:
        self.db.delete(row)
        self.db.commit()
