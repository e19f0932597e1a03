"""
정기 거래 저장소 (SQLAlchemy 구현)

RecurringStore 계약을 Session 위에 구현합니다.
mark_processed는 조건부 UPDATE 한 번으로 날짜를 선점하므로
서로 다른 프로세스에서 겹쳐 실행되어도 같은 날짜에 두 번 생성되지 않습니다.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app import models
from app.services.recurring_evaluator import RecurringDefinition
from app.services.recurring_processor import TransactionPayload


class SqlAlchemyRecurringStore:
    def __init__(self, db: Session):
        self.db = db

    def list_active_definitions(self, user_id: Optional[int] = None) -> List[RecurringDefinition]:
        q = self.db.query(models.RecurringTransaction).filter(models.RecurringTransaction.is_active.is_(True))
        if user_id is not None:
            q = q.filter(models.RecurringTransaction.user_id == user_id)
        rows = q.order_by(models.RecurringTransaction.id).all()
        # 세션 상태와 분리된 스냅샷으로 넘겨야 정의별 롤백 후에도 안전
        return [RecurringDefinition.from_row(row) for row in rows]

    def mark_processed(self, definition_id: int, run_date: date) -> bool:
        rt = models.RecurringTransaction
        updated = (
            self.db.query(rt)
            .filter(
                rt.id == definition_id,
                rt.is_active.is_(True),
                or_(rt.last_processed_date.is_(None), rt.last_processed_date != run_date),
            )
            .update({rt.last_processed_date: run_date}, synchronize_session=False)
        )
        return updated == 1

    def create_transaction(self, payload: TransactionPayload) -> models.Transaction:
        txn = models.Transaction(
            user_id=payload.user_id,
            type=payload.type,
            amount=payload.amount,
            description=payload.description,
            date=payload.date,
            category_id=payload.category_id,
            notes=payload.notes,
            source_recurring_id=payload.source_recurring_id,
        )
        self.db.add(txn)
        self.db.flush()
        return txn

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
