"""
Utils package
"""

from .dates import month_key, now_local_naive, to_calendar_date, today_local

__all__ = [
    "month_key",
    "now_local_naive",
    "to_calendar_date",
    "today_local",
]
