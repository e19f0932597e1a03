from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from app import models


class RecurringTransactionService:
    """Persistence for recurring definitions. ``last_processed_date`` is left to the processor."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def list(self, *, user_id: int, is_active: Optional[bool] = None) -> list[models.RecurringTransaction]:
        q = self.db.query(models.RecurringTransaction).filter(models.RecurringTransaction.user_id == user_id)
        if is_active is not None:
            q = q.filter(models.RecurringTransaction.is_active.is_(is_active))
        return q.order_by(models.RecurringTransaction.id).all()

    def get(self, recurring_id: int) -> models.RecurringTransaction | None:
        return self.db.get(models.RecurringTransaction, recurring_id)

    def create(self, payload: dict, *, user_id: int) -> models.RecurringTransaction:
        payload["user_id"] = user_id
        row = models.RecurringTransaction(**payload)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def update(self, row: models.RecurringTransaction, patch: dict) -> models.RecurringTransaction:
        if not patch:
            return row
        for key, value in patch.items():
            setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        return row

    def delete(self, row: models.RecurringTransaction) -> None:
        self.db.delete(row)
        self.db.commit()
