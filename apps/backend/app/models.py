from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Index,
    Boolean,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .core.database import Base
from .utils.dates import now_local_naive


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_local_naive, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now_local_naive, onupdate=now_local_naive, nullable=False)


class TxnType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class RecurringFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class BudgetPeriod(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    CUSTOM = "custom"


def _value_enum(enum_cls: type[Enum], name: str) -> SAEnum:
    # Persist the lower-case wire values rather than member names
    return SAEnum(enum_cls, name=name, values_callable=lambda members: [m.value for m in members])


class User(Base, TimestampMixin):
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(100))
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)


class Category(Base, TimestampMixin):
    """Transaction category. ``user_id`` NULL marks a shared default category."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("user.id", ondelete="CASCADE"))
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    icon: Mapped[str | None] = mapped_column(String(64))
    color: Mapped[str | None] = mapped_column(String(9))  # e.g., #22c55e
    type: Mapped[TxnType] = mapped_column(_value_enum(TxnType, "txn_type"), nullable=False)

    __table_args__ = (
        Index("ix_category_user_type", "user_id", "type"),
    )

    @property
    def is_shared(self) -> bool:
        return self.user_id is None


class Transaction(Base, TimestampMixin):
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    type: Mapped[TxnType] = mapped_column(_value_enum(TxnType, "txn_type"), nullable=False)
    amount: Mapped[float] = mapped_column(Numeric(18, 2), nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    category_id: Mapped[int] = mapped_column(ForeignKey("category.id"), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    # Set only for rows materialized from a recurring definition
    source_recurring_id: Mapped[int | None] = mapped_column(
        ForeignKey("recurringtransaction.id", ondelete="SET NULL"),
        nullable=True,
    )

    category: Mapped["Category"] = relationship("Category")

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_txn_amount_positive"),
        Index("ix_txn_user_date", "user_id", "date"),
        Index("ix_txn_source_recurring", "source_recurring_id"),
    )


class Budget(Base, TimestampMixin):
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    category_id: Mapped[int] = mapped_column(ForeignKey("category.id"), nullable=False)
    amount: Mapped[float] = mapped_column(Numeric(18, 2), nullable=False)
    period: Mapped[BudgetPeriod] = mapped_column(_value_enum(BudgetPeriod, "budget_period"), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_budget_amount_positive"),
        CheckConstraint("end_date >= start_date", name="ck_budget_span"),
    )


class RecurringTransaction(Base, TimestampMixin):
    """A user-defined rule that materializes transactions on matching dates."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    category_id: Mapped[int] = mapped_column(ForeignKey("category.id"), nullable=False)
    type: Mapped[TxnType] = mapped_column(_value_enum(TxnType, "txn_type"), nullable=False)
    amount: Mapped[float] = mapped_column(Numeric(18, 2), nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    frequency: Mapped[RecurringFrequency] = mapped_column(
        _value_enum(RecurringFrequency, "recurring_frequency"), nullable=False
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date)
    day_of_week: Mapped[int | None] = mapped_column(Integer)  # 0=Sun .. 6=Sat
    day_of_month: Mapped[int | None] = mapped_column(Integer)  # 1-31, no rollover
    last_processed_date: Mapped[date | None] = mapped_column(Date)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    category: Mapped["Category"] = relationship("Category")

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_recurring_amount_positive"),
        CheckConstraint("day_of_week IS NULL OR (day_of_week BETWEEN 0 AND 6)", name="ck_recurring_day_of_week"),
        CheckConstraint("day_of_month IS NULL OR (day_of_month BETWEEN 1 AND 31)", name="ck_recurring_day_of_month"),
        CheckConstraint("end_date IS NULL OR end_date >= start_date", name="ck_recurring_span"),
        Index("ix_recurring_active_user", "is_active", "user_id"),
    )

    def __repr__(self) -> str:  # pragma: no cover
        freq = getattr(self.frequency, "value", self.frequency)
        return (
            f"<RecurringTransaction id={self.id!r} user_id={self.user_id!r} freq={freq!r} "
            f"start={self.start_date!r} end={self.end_date!r} last={self.last_processed_date!r} "
            f"active={self.is_active!r}>"
        )
