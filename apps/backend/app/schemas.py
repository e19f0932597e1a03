from __future__ import annotations

import math
from datetime import date, datetime
import datetime as dt
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from .models import (
    BudgetPeriod,
    RecurringFrequency,
    TxnType,
)


def _positive_finite(v: float | None) -> float | None:
    if v is None:
        return v
    if not math.isfinite(v):
        raise ValueError("amount must be finite")
    if v <= 0:
        raise ValueError("amount must be positive")
    return v


def _strip_required(v: str | None) -> str | None:
    if v is None:
        return v
    stripped = v.strip()
    if not stripped:
        raise ValueError("must not be empty")
    return stripped


# ===== Categories =====

class CategoryCreate(BaseModel):
    name: str = Field(..., max_length=100)
    type: TxnType
    icon: Optional[str] = Field(default=None, max_length=64)
    color: Optional[str] = Field(default=None, max_length=9)

    @field_validator("name")
    def name_not_empty(cls, v: str):
        return _strip_required(v)


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    type: Optional[TxnType] = None
    icon: Optional[str] = Field(default=None, max_length=64)
    color: Optional[str] = Field(default=None, max_length=9)

    model_config = ConfigDict(extra="forbid")

    @field_validator("name")
    def name_not_empty(cls, v: str | None):
        return _strip_required(v)


class CategoryOut(BaseModel):
    id: int
    user_id: Optional[int]
    name: str
    icon: Optional[str]
    color: Optional[str]
    type: TxnType
    is_shared: bool

    model_config = ConfigDict(from_attributes=True)


# ===== Transactions =====

class TransactionCreate(BaseModel):
    type: TxnType
    amount: float
    description: str = Field(..., max_length=255)
    date: dt.date
    category_id: int
    notes: Optional[str] = None

    @field_validator("amount")
    def amount_valid(cls, v: float):
        return _positive_finite(v)

    @field_validator("description")
    def description_not_empty(cls, v: str):
        return _strip_required(v)


class TransactionUpdate(BaseModel):
    type: Optional[TxnType] = None
    amount: Optional[float] = None
    description: Optional[str] = Field(default=None, max_length=255)
    date: Optional[dt.date] = None
    category_id: Optional[int] = None
    notes: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("amount")
    def amount_valid(cls, v: float | None):
        return _positive_finite(v)

    @field_validator("description")
    def description_not_empty(cls, v: str | None):
        return _strip_required(v)


class TransactionOut(BaseModel):
    id: int
    user_id: int
    type: TxnType
    amount: float
    description: str
    date: dt.date
    category_id: int
    notes: Optional[str]
    source_recurring_id: Optional[int]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ===== Budgets =====

class BudgetCreate(BaseModel):
    category_id: int
    amount: float
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    start_date: date
    end_date: date

    @field_validator("amount")
    def amount_valid(cls, v: float):
        return _positive_finite(v)

    @model_validator(mode="after")
    def validate_span(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class BudgetUpdate(BaseModel):
    category_id: Optional[int] = None
    amount: Optional[float] = None
    period: Optional[BudgetPeriod] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("amount")
    def amount_valid(cls, v: float | None):
        return _positive_finite(v)


class BudgetOut(BaseModel):
    id: int
    user_id: int
    category_id: int
    amount: float
    period: BudgetPeriod
    start_date: date
    end_date: date

    model_config = ConfigDict(from_attributes=True)


class BudgetSummaryOut(BaseModel):
    budget_id: int
    category_id: int
    start_date: date
    end_date: date
    planned: float
    spent: float
    remaining: float
    percentage: float
    execution_rate: float
    is_over_budget: bool


# ===== Recurring transactions =====

class RecurringTransactionCreate(BaseModel):
    type: TxnType
    amount: float
    description: str = Field(..., max_length=255)
    notes: Optional[str] = None
    category_id: int
    frequency: RecurringFrequency
    start_date: date
    end_date: Optional[date] = None
    day_of_week: Optional[int] = Field(default=None, description="0=Sunday .. 6=Saturday")
    day_of_month: Optional[int] = Field(default=None, description="1-31; short months are skipped")
    is_active: bool = True

    @field_validator("amount")
    def amount_valid(cls, v: float):
        return _positive_finite(v)

    @field_validator("description")
    def description_not_empty(cls, v: str):
        return _strip_required(v)

    @field_validator("day_of_week")
    def validate_weekday(cls, v: int | None):
        if v is not None and not (0 <= v <= 6):
            raise ValueError("day_of_week must be between 0 and 6")
        return v

    @field_validator("day_of_month")
    def validate_day(cls, v: int | None):
        if v is not None and not (1 <= v <= 31):
            raise ValueError("day_of_month must be between 1 and 31")
        return v

    @model_validator(mode="after")
    def validate_schedule(self):
        problem = schedule_problem(
            self.frequency, self.start_date, self.end_date, self.day_of_week, self.day_of_month
        )
        if problem:
            raise ValueError(problem)
        # Anchors only mean something for their own frequency
        if self.frequency != RecurringFrequency.WEEKLY:
            self.day_of_week = None
        if self.frequency != RecurringFrequency.MONTHLY:
            self.day_of_month = None
        return self


class RecurringTransactionUpdate(BaseModel):
    """Every field a client may change. ``last_processed_date`` is not writable."""

    type: Optional[TxnType] = None
    amount: Optional[float] = None
    description: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = None
    category_id: Optional[int] = None
    frequency: Optional[RecurringFrequency] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    day_of_week: Optional[int] = None
    day_of_month: Optional[int] = None
    is_active: Optional[bool] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("amount")
    def amount_valid(cls, v: float | None):
        return _positive_finite(v)

    @field_validator("description")
    def description_not_empty(cls, v: str | None):
        return _strip_required(v)

    @field_validator("day_of_week")
    def validate_weekday(cls, v: int | None):
        if v is not None and not (0 <= v <= 6):
            raise ValueError("day_of_week must be between 0 and 6")
        return v

    @field_validator("day_of_month")
    def validate_day(cls, v: int | None):
        if v is not None and not (1 <= v <= 31):
            raise ValueError("day_of_month must be between 1 and 31")
        return v


class RecurringTransactionOut(BaseModel):
    id: int
    user_id: int
    type: TxnType
    amount: float
    description: str
    notes: Optional[str]
    category_id: int
    frequency: RecurringFrequency
    start_date: date
    end_date: Optional[date]
    day_of_week: Optional[int]
    day_of_month: Optional[int]
    last_processed_date: Optional[date]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RecurringPreviewOut(BaseModel):
    recurring_id: int
    start: date
    end: date
    dates: list[date] = Field(default_factory=list)


class RecurringProcessOut(BaseModel):
    run_date: date
    processed: int


def schedule_problem(
    frequency: RecurringFrequency,
    start_date: date,
    end_date: date | None,
    day_of_week: int | None,
    day_of_month: int | None,
) -> str | None:
    """Return a message describing why a schedule is unusable, or ``None``."""
    if end_date is not None and end_date < start_date:
        return "end_date must be on or after start_date"
    if frequency == RecurringFrequency.WEEKLY and day_of_week is None:
        return "day_of_week is required for weekly schedules"
    if frequency == RecurringFrequency.MONTHLY and day_of_month is None:
        return "day_of_month is required for monthly schedules"
    return None


# ===== Summary =====

class MonthlyFlowItem(BaseModel):
    year: int
    month: int
    income: float
    expenses: float


class SummaryOut(BaseModel):
    total_income: float
    total_expenses: float
    balance: float
    expenses_by_category: dict[int, float] = Field(default_factory=dict)
    monthly_data: list[MonthlyFlowItem] = Field(default_factory=list)
