"""
Calendar dates and validated absolute date ranges.

Filter sets are scoped by an inclusive range of calendar days. Dates are
exchanged with operators as fixed-width ``YYYYMMDD`` strings and with the API
as ``{"year", "month", "day"}`` messages.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Dict

from core.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK_DAYS = 7

_DATE_STRING_PATTERN = re.compile(r"[0-9]{8}")


@dataclass(frozen=True, order=True)
class CalendarDate:
    """A real calendar day, ordered chronologically."""

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        try:
            date(self.year, self.month, self.day)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(
                f"Not a valid calendar date: {self.year}-{self.month}-{self.day}",
                details={"reason": str(e)},
            )

    @classmethod
    def from_date(cls, value: date) -> "CalendarDate":
        return cls(value.year, value.month, value.day)

    @classmethod
    def parse(cls, value: str) -> "CalendarDate":
        """
        Parse a fixed-width ``YYYYMMDD`` string.

        Raises:
            InvalidArgumentError: If the string is not eight digits or does
                not name a real calendar day
        """
        if not isinstance(value, str) or not _DATE_STRING_PATTERN.fullmatch(value):
            raise InvalidArgumentError(
                f"Date must be in YYYYMMDD format, got {value!r}",
                details={"value": value},
            )
        return cls(int(value[0:4]), int(value[4:6]), int(value[6:8]))

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    def plus_days(self, days: int) -> "CalendarDate":
        try:
            return CalendarDate.from_date(self.to_date() + timedelta(days=days))
        except OverflowError:
            raise InvalidArgumentError(
                f"Shifting {self.format()} by {days} days leaves the supported calendar",
                details={"date": self.format(), "days": days},
            )

    def days_until(self, other: "CalendarDate") -> int:
        """Signed number of days from this date to ``other``."""
        return (other.to_date() - self.to_date()).days

    def format(self) -> str:
        # strftime does not zero-pad years below 1000 on every platform
        return f"{self.year:04d}{self.month:02d}{self.day:02d}"

    def to_api(self) -> Dict[str, int]:
        """Serialize as the API's Date message."""
        return {"year": self.year, "month": self.month, "day": self.day}

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar days with ``start <= end``."""

    start: CalendarDate
    end: CalendarDate

    def __post_init__(self) -> None:
        if self.start.days_until(self.end) < 0:
            raise InvalidArgumentError(
                "Start date must not be after the end date",
                details={"start_date": self.start.format(), "end_date": self.end.format()},
            )

    @property
    def days(self) -> int:
        """Number of days covered, counting both ends."""
        return self.start.days_until(self.end) + 1

    def to_api(self) -> Dict[str, Dict[str, int]]:
        """Serialize as the API's AbsoluteDateRange message."""
        return {"startDate": self.start.to_api(), "endDate": self.end.to_api()}


def resolve_date_range(
    start_date: Optional[str],
    end_date: Optional[str],
    today: Optional[CalendarDate] = None,
) -> DateRange:
    """
    Resolve optional ``YYYYMMDD`` bounds into a validated date range.

    When neither bound is given the range is the trailing week ending today.
    Empty strings count as absent.

    Args:
        start_date: Start date string or None
        end_date: End date string or None
        today: Reference day for the default range (local date if omitted)

    Returns:
        DateRange covering both bounds inclusively

    Raises:
        InvalidArgumentError: If only one bound is given, a bound cannot be
            parsed, or start is after end
    """
    start_date = start_date or None
    end_date = end_date or None

    if start_date is None and end_date is None:
        if today is None:
            today = CalendarDate.from_date(date.today())
        date_range = DateRange(today.plus_days(-DEFAULT_LOOKBACK_DAYS), today)
        logger.debug(f"No date bounds given, defaulting to {date_range.start}-{date_range.end}")
        return date_range

    if start_date is None or end_date is None:
        raise InvalidArgumentError(
            "Both start date and end date must be set",
            details={"start_date": start_date, "end_date": end_date},
        )

    return DateRange(CalendarDate.parse(start_date), CalendarDate.parse(end_date))
