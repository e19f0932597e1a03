from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import Session

from app import models, schemas
from app.models import TxnType


class BudgetService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list(self, *, user_id: int) -> list[models.Budget]:
        return (
            self.db.query(models.Budget)
            .filter(models.Budget.user_id == user_id)
            .order_by(models.Budget.start_date.desc(), models.Budget.id)
            .all()
        )

    def get(self, budget_id: int) -> models.Budget | None:
        return self.db.get(models.Budget, budget_id)

    def create(self, payload: dict, *, user_id: int) -> models.Budget:
        payload["user_id"] = user_id
        row = models.Budget(**payload)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def update(self, row: models.Budget, patch: dict) -> models.Budget:
        if not patch:
            return row
        for key, value in patch.items():
            setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        return row

    def delete(self, row: models.Budget) -> None:
        self.db.delete(row)
        self.db.commit()

    def spent(self, budget: models.Budget) -> float:
        total = (
            self.db.query(func.coalesce(func.sum(models.Transaction.amount), 0))
            .filter(
                models.Transaction.user_id == budget.user_id,
                models.Transaction.category_id == budget.category_id,
                models.Transaction.type == TxnType.EXPENSE,
                models.Transaction.date >= budget.start_date,
                models.Transaction.date <= budget.end_date,
            )
            .scalar()
        )
        return float(total or 0)

    def summarize(self, budget: models.Budget) -> schemas.BudgetSummaryOut:
        """
        예산 집행 현황

        - spent: 예산 기간 내 해당 카테고리 지출 합계
        - remaining: 0 미만으로 내려가지 않음
        - percentage: 100 상한, execution_rate: 상한 없음
        """
        planned = float(budget.amount)
        spent = self.spent(budget)
        execution = (spent / planned) * 100 if planned else 0.0
        return schemas.BudgetSummaryOut(
            budget_id=budget.id,
            category_id=budget.category_id,
            start_date=budget.start_date,
            end_date=budget.end_date,
            planned=planned,
            spent=spent,
            remaining=max(0.0, planned - spent),
            percentage=min(100.0, execution),
            execution_rate=execution,
            is_over_budget=spent > planned,
        )
