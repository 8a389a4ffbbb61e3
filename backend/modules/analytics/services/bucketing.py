# backend/modules/analytics/services/bucketing.py

"""
Day bucketing for aggregates.

Every aggregate row covers one UTC calendar day. Timestamps are stored
naive in UTC; naive values passed in here are therefore read as UTC and
aware values are converted before the date is taken.
"""

from datetime import date, datetime, timezone
from typing import Optional, Union


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, matching stored timestamps"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def bucket_date(value: Optional[Union[datetime, date]] = None) -> date:
    """Return the UTC calendar date that ``value`` falls on"""
    if value is None:
        return utc_now().date()

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()

    if isinstance(value, date):
        return value

    raise TypeError(f"Cannot bucket {type(value).__name__} into a date")


def to_utc_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are returned as-is"""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
