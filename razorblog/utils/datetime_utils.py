# razorblog/utils/datetime_utils.py
"""
Centralised time handling.

Everything the backend stores or returns is a timezone-aware UTC datetime:
values are normalised on the way into Firestore (``for_firestore``) and on the
way out (``from_firestore``).
"""

import logging
from datetime import datetime, date, timezone, time
from typing import Any

logger = logging.getLogger(__name__)


class DateTimeUtils:

    @staticmethod
    def now() -> datetime:
        """Current time as an aware UTC datetime."""
        return datetime.now(timezone.utc)

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Prepares a value for a Firestore write.

        - date -> datetime at 00:00 UTC
        - naive datetime -> aware UTC datetime
        - dicts and lists are converted recursively
        """
        if isinstance(obj, date) and not isinstance(obj, datetime):
            return datetime.combine(obj, time.min).replace(tzinfo=timezone.utc)
        elif isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)
        elif isinstance(obj, dict):
            return {k: DateTimeUtils.for_firestore(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """
        Normalises a value read from Firestore. Timestamps become aware UTC
        datetimes; dicts and lists are converted recursively.
        """
        try:
            if isinstance(obj, datetime):
                if obj.tzinfo is None:
                    return obj.replace(tzinfo=timezone.utc)
                return obj.astimezone(timezone.utc)
            elif isinstance(obj, dict):
                return {k: DateTimeUtils.from_firestore(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [DateTimeUtils.from_firestore(item) for item in obj]
            return obj
        except Exception as e:
            # Leave the original value in place; a bad timestamp should not fail a read.
            logger.error(f"Failed to convert Firestore value: {obj} ({type(obj)}) - {e}")
            return obj


now = DateTimeUtils.now
for_firestore = DateTimeUtils.for_firestore
from_firestore = DateTimeUtils.from_firestore
