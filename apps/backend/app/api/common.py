"""Shared lookups for the feature routers."""

from __future__ import annotations

from typing import Optional, TypeVar

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app import models
from app.services.category_service import CategoryService

T = TypeVar("T")


def require_owned(row: Optional[T], user: models.User, label: str) -> T:
    """404 when missing, 403 when the row belongs to someone else."""
    if row is None:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    if getattr(row, "user_id", None) != user.id:
        raise HTTPException(status_code=403, detail=f"{label} belongs to another user")
    return row


def require_usable_category(
    db: Session,
    user: models.User,
    category_id: int,
    txn_type: models.TxnType,
) -> models.Category:
    """The category must be visible to the user and share the transaction type."""
    category = CategoryService(db).get_visible(user.id, category_id)
    if category is None:
        raise HTTPException(status_code=400, detail="category_id is not a category available to this user")
    if category.type != txn_type:
        raise HTTPException(
            status_code=400,
            detail=f"category type {category.type.value} does not match transaction type {txn_type.value}",
        )
    return category
