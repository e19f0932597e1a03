from __future__ import annotations

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app import models
from app.models import TxnType


# (name, type, icon, color): shared defaults visible to every user
DEFAULT_CATEGORIES: list[tuple[str, TxnType, str, str]] = [
    ("Housing", TxnType.EXPENSE, "ri-home-line", "#9333ea"),
    ("Food & Dining", TxnType.EXPENSE, "ri-restaurant-line", "#3b82f6"),
    ("Transportation", TxnType.EXPENSE, "ri-car-line", "#10b981"),
    ("Utilities", TxnType.EXPENSE, "ri-lightbulb-line", "#f59e0b"),
    ("Entertainment", TxnType.EXPENSE, "ri-movie-line", "#ef4444"),
    ("Shopping", TxnType.EXPENSE, "ri-shopping-bag-line", "#ec4899"),
    ("Health", TxnType.EXPENSE, "ri-heart-pulse-line", "#14b8a6"),
    ("Personal", TxnType.EXPENSE, "ri-user-line", "#8b5cf6"),
    ("Education", TxnType.EXPENSE, "ri-book-line", "#f97316"),
    ("Salary", TxnType.INCOME, "ri-briefcase-line", "#22c55e"),
    ("Investment", TxnType.INCOME, "ri-line-chart-line", "#6366f1"),
    ("Gifts", TxnType.INCOME, "ri-gift-line", "#ec4899"),
    ("Other Income", TxnType.INCOME, "ri-money-dollar-circle-line", "#64748b"),
]


class CategoryService:
    """Categories a user can see: their own plus the shared defaults (``user_id`` NULL)."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _visible_query(self, user_id: int):
        return self.db.query(models.Category).filter(
            or_(models.Category.user_id == user_id, models.Category.user_id.is_(None))
        )

    def list_visible(self, user_id: int, type: Optional[TxnType] = None) -> list[models.Category]:
        q = self._visible_query(user_id)
        if type is not None:
            q = q.filter(models.Category.type == type)
        return q.order_by(models.Category.type, models.Category.name, models.Category.id).all()

    def get(self, category_id: int) -> models.Category | None:
        return self.db.get(models.Category, category_id)

    def get_visible(self, user_id: int, category_id: int) -> models.Category | None:
        return self._visible_query(user_id).filter(models.Category.id == category_id).first()

    def create(self, payload: dict, *, user_id: int) -> models.Category:
        row = models.Category(user_id=user_id, **payload)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def update(self, row: models.Category, patch: dict) -> models.Category:
        if not patch:
            return row
        for key, value in patch.items():
            setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        return row

    def is_in_use(self, category_id: int) -> bool:
        for model in (models.Transaction, models.Budget, models.RecurringTransaction):
            exists = self.db.query(model.id).filter(model.category_id == category_id).first()
            if exists is not None:
                return True
        return False

    def delete(self, row: models.Category) -> None:
        self.db.delete(row)
        self.db.commit()

    def ensure_default_categories(self) -> list[models.Category]:
        """Create the shared default categories once. Idempotent by (name, type)."""
        rows: list[models.Category] = []
        for name, txn_type, icon, color in DEFAULT_CATEGORIES:
            row = (
                self.db.query(models.Category)
                .filter(
                    models.Category.user_id.is_(None),
                    models.Category.name == name,
                    models.Category.type == txn_type,
                )
                .first()
            )
            if row is None:
                row = models.Category(user_id=None, name=name, type=txn_type, icon=icon, color=color)
                self.db.add(row)
                self.db.flush()
            rows.append(row)
        return rows
