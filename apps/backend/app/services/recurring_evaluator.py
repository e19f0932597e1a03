"""
Recurring rule evaluator

Pure decision function: given a recurring definition and a calendar date,
decide whether a concrete transaction should be materialized for that date.

The evaluator never raises for a malformed definition (unknown frequency,
missing weekday/day-of-month anchor, missing start date). Such rules simply
never match; rejecting them is the job of the validation layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Iterator

from app.models import RecurringFrequency, TxnType
from app.utils.dates import to_calendar_date


class SkipReason(str, Enum):
    INACTIVE = "inactive"
    ALREADY_PROCESSED = "already_processed"
    ENDED = "ended"
    NOT_STARTED = "not_started"
    NO_MATCH = "no_match"


@dataclass(frozen=True)
class RecurringDefinition:
    """Plain snapshot of a recurring rule, detached from any ORM session."""

    id: int
    user_id: int
    category_id: int
    type: TxnType
    amount: float
    description: str
    frequency: RecurringFrequency
    start_date: date
    notes: str | None = None
    end_date: date | None = None
    day_of_week: int | None = None
    day_of_month: int | None = None
    last_processed_date: date | None = None
    is_active: bool = True

    @classmethod
    def from_row(cls, row: Any) -> "RecurringDefinition":
        return cls(
            id=row.id,
            user_id=row.user_id,
            category_id=row.category_id,
            type=row.type,
            amount=float(row.amount),
            description=row.description,
            notes=row.notes,
            frequency=row.frequency,
            start_date=row.start_date,
            end_date=row.end_date,
            day_of_week=row.day_of_week,
            day_of_month=row.day_of_month,
            last_processed_date=row.last_processed_date,
            is_active=bool(row.is_active),
        )


@dataclass(frozen=True)
class Evaluation:
    should_emit: bool
    matched_date: date | None = None
    reason: SkipReason | None = None


def sunday_first_weekday(value: date) -> int:
    """Weekday with Sunday=0 .. Saturday=6 (``date.weekday()`` is Monday=0)."""
    return (value.weekday() + 1) % 7


def _optional_date(value: Any) -> date | None:
    if value is None:
        return None
    try:
        return to_calendar_date(value)
    except (TypeError, ValueError):
        return None


def _frequency(value: Any) -> RecurringFrequency | None:
    if isinstance(value, RecurringFrequency):
        return value
    try:
        return RecurringFrequency(str(value).lower())
    except ValueError:
        return None


def _matches_schedule(definition: Any, target: date, start: date) -> bool:
    frequency = _frequency(getattr(definition, "frequency", None))
    if frequency is RecurringFrequency.DAILY:
        return True
    if frequency is RecurringFrequency.WEEKLY:
        day_of_week = getattr(definition, "day_of_week", None)
        return day_of_week is not None and day_of_week == sunday_first_weekday(target)
    if frequency is RecurringFrequency.MONTHLY:
        # Strict equality: a rule on the 31st does not fire in shorter months
        day_of_month = getattr(definition, "day_of_month", None)
        return day_of_month is not None and day_of_month == target.day
    if frequency is RecurringFrequency.YEARLY:
        return (target.month, target.day) == (start.month, start.day)
    return False


def evaluate(definition: Any, target_date: date | datetime | str) -> Evaluation:
    """Decide whether ``definition`` should materialize a transaction on ``target_date``.

    ``definition`` is anything exposing the recurring attributes
    (``is_active``, ``frequency``, ``start_date``, ``end_date``,
    ``day_of_week``, ``day_of_month``, ``last_processed_date``): a
    ``RecurringDefinition`` snapshot or an ORM row.
    """
    target = to_calendar_date(target_date)

    if not getattr(definition, "is_active", False):
        return Evaluation(False, reason=SkipReason.INACTIVE)

    last_processed = _optional_date(getattr(definition, "last_processed_date", None))
    if last_processed is not None and last_processed == target:
        return Evaluation(False, reason=SkipReason.ALREADY_PROCESSED)

    end = _optional_date(getattr(definition, "end_date", None))
    if end is not None and end < target:
        return Evaluation(False, reason=SkipReason.ENDED)

    start = _optional_date(getattr(definition, "start_date", None))
    if start is None or start > target:
        return Evaluation(False, reason=SkipReason.NOT_STARTED)

    if not _matches_schedule(definition, target, start):
        return Evaluation(False, reason=SkipReason.NO_MATCH)

    return Evaluation(True, matched_date=target)


def matching_dates(definition: Any, start: date, end: date) -> Iterator[date]:
    """Yield every date in ``[start, end]`` on which ``evaluate`` would emit."""
    current = to_calendar_date(start)
    last = to_calendar_date(end)
    while current <= last:
        if evaluate(definition, current).should_emit:
            yield current
        current += timedelta(days=1)
