"""
Date and time helpers for the allocation ledger.

Timestamps are stored as naive UTC datetimes so values read back from
SQLite and PostgreSQL compare the same way.
"""

from datetime import datetime, timezone
from typing import Optional


class DateTimeHelper:
    """Clock and duration utilities"""

    @staticmethod
    def utcnow() -> datetime:
        """Current UTC time without tzinfo"""
        return datetime.now(timezone.utc).replace(tzinfo=None)

    @staticmethod
    def to_naive_utc(value: datetime) -> datetime:
        """Convert an aware datetime to naive UTC; naive values pass through"""
        if value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    @staticmethod
    def days_between(start: datetime, end: Optional[datetime]) -> Optional[int]:
        """
        Whole days elapsed between two instants, rounded down.

        Args:
            start: Start of the interval
            end: End of the interval, or None while still open

        Returns:
            Number of complete days, or None when ``end`` is not set
        """
        if end is None:
            return None
        delta = DateTimeHelper.to_naive_utc(end) - DateTimeHelper.to_naive_utc(start)
        return int(delta.total_seconds() // 86400)


utcnow = DateTimeHelper.utcnow
