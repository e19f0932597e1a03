"""
정기 거래 처리 서비스

책임:
- 활성 정기 거래 정의 전체를 순회하며 실행일(run_date) 기준으로 평가
- 발생 대상이면 날짜를 원자적으로 선점(mark_processed)한 뒤 거래 생성
- 정의 단위 실패 격리 (롤백 + 로그 후 다음 정의 계속)
- 동일 프로세스 내 실행 직렬화
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Protocol, Sequence

from sqlalchemy.orm import Session

from app.models import TxnType
from app.services.recurring_evaluator import RecurringDefinition, evaluate
from app.utils.dates import to_calendar_date, today_local

logger = logging.getLogger(__name__)

# 한 프로세스 안에서 겹치는 실행(스케줄러 + HTTP + CLI)을 직렬화
_RUN_LOCK = threading.Lock()


@dataclass(frozen=True)
class TransactionPayload:
    user_id: int
    type: TxnType
    amount: float
    description: str
    date: date
    category_id: int
    notes: Optional[str] = None
    source_recurring_id: Optional[int] = None


class RecurringStore(Protocol):
    """정기 거래 처리기가 사용하는 저장소 계약"""

    def list_active_definitions(self, user_id: Optional[int] = None) -> Sequence[RecurringDefinition]:
        ...

    def mark_processed(self, definition_id: int, run_date: date) -> bool:
        ...

    def create_transaction(self, payload: TransactionPayload) -> Any:
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...


@dataclass
class ProcessReport:
    run_date: date
    created: int = 0
    skipped: int = 0
    failed_ids: list[int] = field(default_factory=list)


def build_transaction_payload(definition: RecurringDefinition, matched_date: date) -> TransactionPayload:
    return TransactionPayload(
        user_id=definition.user_id,
        type=definition.type,
        amount=definition.amount,
        description=definition.description,
        date=matched_date,
        category_id=definition.category_id,
        notes=definition.notes,
        source_recurring_id=definition.id,
    )


class RecurringProcessor:
    """
    정기 거래 일괄 처리기

    저장소 계약(RecurringStore)만 알고 있으므로 테스트에서는
    메모리 기반 가짜 저장소를 주입할 수 있습니다.
    """

    def __init__(self, store: RecurringStore):
        self.store = store

    def run(self, run_date: date, user_id: Optional[int] = None) -> ProcessReport:
        """
        실행일 기준으로 활성 정의를 처리

        Args:
            run_date: 평가 기준 날짜 (호출부에서 명시적으로 전달)
            user_id: 지정 시 해당 사용자 정의만 처리

        Returns:
            ProcessReport (생성 건수, 건너뛴 건수, 실패한 정의 ID 목록)

        Raises:
            목록 조회 단계의 예외는 그대로 전파됩니다 (부분 결과 없음).
        """
        run_date = to_calendar_date(run_date)
        with _RUN_LOCK:
            definitions = self.store.list_active_definitions(user_id)
            report = ProcessReport(run_date=run_date)
            for definition in definitions:
                self._process_one(definition, run_date, report)

        logger.info(
            "Recurring run %s: created=%d skipped=%d failed=%d (definitions=%d)",
            run_date.isoformat(),
            report.created,
            report.skipped,
            len(report.failed_ids),
            len(definitions),
        )
        return report

    def _process_one(self, definition: RecurringDefinition, run_date: date, report: ProcessReport) -> None:
        try:
            result = evaluate(definition, run_date)
            if not result.should_emit:
                report.skipped += 1
                logger.debug(
                    "Recurring %s skipped on %s: %s",
                    definition.id,
                    run_date.isoformat(),
                    result.reason.value if result.reason else None,
                )
                return

            # 조건부 갱신에서 진 경우 다른 실행이 이미 처리한 날짜
            if not self.store.mark_processed(definition.id, run_date):
                self.store.rollback()
                report.skipped += 1
                logger.debug("Recurring %s already claimed for %s", definition.id, run_date.isoformat())
                return

            self.store.create_transaction(build_transaction_payload(definition, result.matched_date))
            self.store.commit()
            report.created += 1
        except Exception:
            logger.exception("Failed to process recurring transaction %s for %s", definition.id, run_date.isoformat())
            try:
                self.store.rollback()
            except Exception:
                logger.exception("Rollback failed for recurring transaction %s", definition.id)
            report.failed_ids.append(definition.id)


def process_recurring_transactions(
    db: Session,
    run_date: date | None = None,
    user_id: int | None = None,
) -> int:
    """SQLAlchemy 세션으로 정기 거래를 처리하고 생성된 거래 수를 반환합니다."""
    from app.services.recurring_store import SqlAlchemyRecurringStore

    target = run_date if run_date is not None else today_local()
    report = RecurringProcessor(SqlAlchemyRecurringStore(db)).run(target, user_id=user_id)
    return report.created
