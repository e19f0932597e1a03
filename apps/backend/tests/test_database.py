from __future__ import annotations

from datetime import date

from sqlalchemy import text

from app import models
from app.core.database import SQLITE_BUSY_TIMEOUT_MS, build_engine, is_memory_sqlite


def _pragma(db_session, name: str):
    return db_session.execute(text(f"PRAGMA {name}")).scalar()


def test_foreign_keys_enabled(db_session):
    assert _pragma(db_session, "foreign_keys") == 1
    assert _pragma(db_session, "busy_timeout") == SQLITE_BUSY_TIMEOUT_MS


def test_foreign_keys_survive_previous_teardown(db_session):
    # 앞 테스트의 정리 단계 이후 풀에서 재사용되는 연결도 FK 가 켜져 있어야 함
    assert _pragma(db_session, "foreign_keys") == 1


def test_deleting_rule_nulls_generated_transactions(db_session, demo_user, food_category):
    rule = models.RecurringTransaction(
        user_id=demo_user.id,
        category_id=food_category.id,
        type=models.TxnType.EXPENSE,
        amount=12.5,
        description="Lunch",
        frequency=models.RecurringFrequency.DAILY,
        start_date=date(2024, 1, 1),
        is_active=True,
    )
    db_session.add(rule)
    db_session.flush()
    txn = models.Transaction(
        user_id=demo_user.id,
        category_id=food_category.id,
        type=models.TxnType.EXPENSE,
        amount=12.5,
        description="Lunch",
        date=date(2024, 1, 1),
        source_recurring_id=rule.id,
    )
    db_session.add(txn)
    db_session.commit()

    db_session.execute(text("DELETE FROM recurringtransaction WHERE id = :id"), {"id": rule.id})
    db_session.commit()
    db_session.expire_all()

    assert db_session.get(models.Transaction, txn.id).source_recurring_id is None


def test_memory_url_detection():
    assert is_memory_sqlite("sqlite://")
    assert is_memory_sqlite("sqlite:///:memory:")
    assert not is_memory_sqlite("sqlite:////tmp/ft.sqlite3")


def test_memory_engine_gets_pragmas():
    eng = build_engine("sqlite://")
    try:
        with eng.connect() as conn:
            assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1
            assert conn.exec_driver_sql("PRAGMA busy_timeout").scalar() == SQLITE_BUSY_TIMEOUT_MS
    finally:
        eng.dispose()
