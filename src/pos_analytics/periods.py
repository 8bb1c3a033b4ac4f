"""Period resolution: turn a report period token into a concrete date range.

Supported tokens:

- ``7d`` / ``30d`` / ``90d`` / ``1y``: rolling windows ending today. The start
  is ``now`` minus N days (or one year) at the same time of day; these are
  NOT calendar-aligned.
- ``today``: the current calendar day.
- ``this_month``: first to last instant of the current calendar month.
- ``YYYY-MM``: first to last instant of that month.
- ``year-YYYY``: first to last instant of that year.
- an explicit ``(start, end)`` pair or ``{"start": ..., "end": ...}`` mapping,
  which takes precedence over any token.

Every resolved range ends at 23:59:59.999 of its last calendar day. Unknown
tokens resolve with the ``30d`` rule.

Example:
    >>> from datetime import datetime
    >>> r = resolve_period("7d", now=datetime(2025, 3, 10, 15, 30))
    >>> r.start, r.end
    (datetime.datetime(2025, 3, 3, 15, 30), datetime.datetime(2025, 3, 10, 23, 59, 59, 999000))

"""

from __future__ import annotations

import calendar
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import MINYEAR, date, datetime, timedelta
from typing import Any, Union

from pos_analytics.utils import end_of_day, parse_timestamp, start_of_day

logger = logging.getLogger(__name__)

RELATIVE_DAYS = {"7d": 7, "30d": 30, "90d": 90}
FALLBACK_TOKEN = "30d"

MONTH_RE = re.compile(r"^(?P<year>\d{4})-(?P<month>\d{2})$")
YEAR_RE = re.compile(r"^year-(?P<year>\d{4})$")

PRESET_LABELS = {
    "today": "Today",
    "7d": "Last 7 Days",
    "30d": "Last 30 Days",
    "90d": "Last 90 Days",
    "1y": "Last Year",
    "this_month": "This Month",
}

PeriodSpec = Union[str, Mapping[str, Any], Sequence[Any], None]


@dataclass(frozen=True)
class DateRange:
    """Inclusive ``[start, end]`` range of naive datetimes."""

    start: datetime
    end: datetime

    def contains(self, moment: datetime | None) -> bool:
        return moment is not None and self.start <= moment <= self.end

    @property
    def days(self) -> list[date]:
        """Calendar days touched by the range, in order."""
        first, last = self.start.date(), self.end.date()
        return [first + timedelta(days=i) for i in range((last - first).days + 1)]


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return start_of_day(value)
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ValueError(f"Cannot interpret {value!r} as a date")
    return parsed


def explicit_range(start: Any, end: Any) -> DateRange:
    """Build a range from an explicit pair; the end is forced to end-of-day.

    Raises:
        ValueError: If either bound is unparseable or start is after end.

    """
    start_dt = _as_datetime(start)
    end_dt = end_of_day(_as_datetime(end))
    if start_dt > end_dt:
        raise ValueError(f"Range start {start_dt} is after end {end_dt}")
    return DateRange(start=start_dt, end=end_dt)


def _minus_one_year(moment: datetime) -> datetime:
    try:
        return moment.replace(year=moment.year - 1)
    except ValueError:
        # 29 February
        return moment.replace(year=moment.year - 1, day=28)


def month_range(year: int, month: int) -> DateRange:
    last_day = calendar.monthrange(year, month)[1]
    return DateRange(
        start=datetime(year, month, 1),
        end=end_of_day(date(year, month, last_day)),
    )


def year_range(year: int) -> DateRange:
    return DateRange(start=datetime(year, 1, 1), end=end_of_day(date(year, 12, 31)))


def _month_token(token: str) -> tuple[int, int] | None:
    """(year, month) for a ``YYYY-MM`` token naming a real calendar month."""
    m = MONTH_RE.match(token)
    if not m:
        return None
    year, month = int(m.group("year")), int(m.group("month"))
    if year < MINYEAR or not 1 <= month <= 12:
        return None
    return year, month


def _year_token(token: str) -> int | None:
    m = YEAR_RE.match(token)
    if not m or int(m.group("year")) < MINYEAR:
        return None
    return int(m.group("year"))


def _explicit_pair(period: PeriodSpec) -> tuple[Any, Any] | None:
    if isinstance(period, Mapping):
        if period.get("start") is not None and period.get("end") is not None:
            return period["start"], period["end"]
        return None
    if isinstance(period, Sequence) and not isinstance(period, str) and len(period) == 2:
        return period[0], period[1]
    return None


def resolve_period(
    period: PeriodSpec = FALLBACK_TOKEN,
    now: datetime | None = None,
    start: Any = None,
    end: Any = None,
) -> DateRange:
    """Resolve a period token (or explicit bounds) into a DateRange.

    Args:
        period: Period token, or an explicit ``(start, end)`` pair / mapping.
        now: Current instant. Defaults to ``datetime.now()``.
        start: Explicit start; together with ``end`` overrides ``period``.
        end: Explicit end; forced to 23:59:59.999 of its day.

    Returns:
        The resolved DateRange.

    Raises:
        ValueError: If explicit bounds are unparseable or reversed.

    Examples:
        >>> resolve_period("2024-02", now=datetime(2025, 1, 1)).end
        datetime.datetime(2024, 2, 29, 23, 59, 59, 999000)
        >>> resolve_period("bogus", now=datetime(2025, 1, 31)).start
        datetime.datetime(2025, 1, 1, 0, 0)

    """
    now = now or datetime.now()

    if start is not None and end is not None:
        return explicit_range(start, end)
    pair = _explicit_pair(period)
    if pair is not None:
        return explicit_range(*pair)

    token = str(period).strip().lower() if period is not None else FALLBACK_TOKEN

    if token in RELATIVE_DAYS:
        return DateRange(start=now - timedelta(days=RELATIVE_DAYS[token]), end=end_of_day(now))
    if token == "1y":
        return DateRange(start=_minus_one_year(now), end=end_of_day(now))
    if token == "today":
        return DateRange(start=start_of_day(now), end=end_of_day(now))
    if token == "this_month":
        return month_range(now.year, now.month)

    month = _month_token(token)
    if month is not None:
        return month_range(*month)
    year = _year_token(token)
    if year is not None:
        return year_range(year)

    return _fallback_range(token, now)


def _fallback_range(token: str, now: datetime) -> DateRange:
    """Resolve an unrecognized token with the 30-day rule."""
    logger.warning("Unrecognized period %r, falling back to %s", token, FALLBACK_TOKEN)
    return DateRange(
        start=now - timedelta(days=RELATIVE_DAYS[FALLBACK_TOKEN]),
        end=end_of_day(now),
    )


def previous_range(current: DateRange) -> DateRange:
    """Return the equal-length range that ends just before ``current`` starts.

    Examples:
        >>> cur = DateRange(datetime(2025, 1, 8), datetime(2025, 1, 14, 23, 59, 59, 999000))
        >>> previous_range(cur).start
        datetime.datetime(2025, 1, 1, 0, 0)

    """
    length = current.end - current.start
    prev_end = current.start - timedelta(milliseconds=1)
    return DateRange(start=prev_end - length, end=prev_end)


def describe_period(period: PeriodSpec) -> str:
    """Human-readable label for a period, as shown in report headers."""
    if _explicit_pair(period) is not None:
        return "Custom Range"
    token = str(period).strip().lower() if period is not None else FALLBACK_TOKEN
    if token in PRESET_LABELS:
        return PRESET_LABELS[token]
    month = _month_token(token)
    if month is not None:
        return f"{calendar.month_name[month[1]]} {month[0]:04d}"
    year = _year_token(token)
    if year is not None:
        return f"Year {year:04d}"
    return PRESET_LABELS[FALLBACK_TOKEN]
