"""
대시보드 요약 서비스

사용자 전체 거래 기준으로 수입/지출 합계, 카테고리별 지출, 월별 흐름을 계산합니다.
"""

from __future__ import annotations

from collections import defaultdict

from sqlalchemy.orm import Session

from app import models, schemas
from app.models import TxnType
from app.utils.dates import month_key


def build_summary(db: Session, user_id: int) -> schemas.SummaryOut:
    rows = (
        db.query(
            models.Transaction.type,
            models.Transaction.amount,
            models.Transaction.category_id,
            models.Transaction.date,
        )
        .filter(models.Transaction.user_id == user_id)
        .all()
    )

    total_income = 0.0
    total_expenses = 0.0
    by_category: dict[int, float] = defaultdict(float)
    # (year, month) -> [income, expenses]
    monthly: dict[tuple[int, int], list[float]] = defaultdict(lambda: [0.0, 0.0])

    for txn_type, amount, category_id, txn_date in rows:
        value = float(amount)
        bucket = monthly[month_key(txn_date)]
        if txn_type == TxnType.INCOME:
            total_income += value
            bucket[0] += value
        else:
            total_expenses += value
            bucket[1] += value
            by_category[category_id] += value

    monthly_data = [
        schemas.MonthlyFlowItem(year=year, month=month, income=income, expenses=expenses)
        for (year, month), (income, expenses) in sorted(monthly.items(), reverse=True)
    ]
    return schemas.SummaryOut(
        total_income=total_income,
        total_expenses=total_expenses,
        balance=total_income - total_expenses,
        expenses_by_category=dict(by_category),
        monthly_data=monthly_data,
    )
