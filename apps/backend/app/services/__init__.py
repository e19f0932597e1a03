"""
Services 패키지

비즈니스 로직 서비스 클래스들을 제공합니다.
"""

from .budget_service import BudgetService
from .category_service import CategoryService
from .recurring_processor import ProcessReport, RecurringProcessor, process_recurring_transactions
from .recurring_service import RecurringTransactionService
from .recurring_store import SqlAlchemyRecurringStore
from .summary_service import build_summary
from .transaction_service import TransactionService

__all__ = [
    "BudgetService",
    "CategoryService",
    "ProcessReport",
    "RecurringProcessor",
    "RecurringTransactionService",
    "SqlAlchemyRecurringStore",
    "TransactionService",
    "build_summary",
    "process_recurring_transactions",
]
