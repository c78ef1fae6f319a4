import datetime
import logging
from collections.abc import Iterable, Iterator

from app.core.config import TIME_END_OF_DAY_STRING
from app.core.constants import MINUTES_PER_DAY, MINUTES_PER_HOUR, SECONDS_PER_MINUTE

logger = logging.getLogger(__name__)

Span = tuple[datetime.datetime, datetime.datetime]


def parse_clock_minutes(value: str) -> int:
    """Parse a clock time to minutes after midnight.

    Handles:
    1) "HH:MM" and "HH:MM:SS" (seconds are dropped)
    2) "24:00" as end of day => 1440
    3) error handling via logging + ValueError (no bare except)
    """
    if not isinstance(value, str):
        logger.error("Unsupported clock time type. type=%s value=%r", type(value).__name__, value)
        raise ValueError(f"Unsupported clock time type: {type(value).__name__}")

    s = value.strip()
    if not s:
        raise ValueError("Clock time is empty")

    if s == TIME_END_OF_DAY_STRING or s == TIME_END_OF_DAY_STRING + ":00":
        return MINUTES_PER_DAY

    try:
        if len(s.split(":")) == 2:
            t = datetime.datetime.strptime(s, "%H:%M").time()
        else:
            t = datetime.datetime.strptime(s, "%H:%M:%S").time()
    except ValueError as e:
        logger.warning("Failed parsing clock time. value=%r", value)
        raise ValueError(f"Invalid clock time format: {value!r}") from e

    return t.hour * MINUTES_PER_HOUR + t.minute


def at_minutes(day: datetime.date, minutes: int, tzinfo: datetime.tzinfo | None = None) -> datetime.datetime:
    """Timestamp `minutes` after midnight on `day` (1440 => next midnight).

    With `tzinfo` the timestamp is local wall-clock time in that zone.
    """
    midnight = datetime.datetime.combine(day, datetime.time(0, 0), tzinfo=tzinfo)
    return midnight + datetime.timedelta(minutes=minutes)


def day_span(day: datetime.date, tzinfo: datetime.tzinfo | None = None) -> Span:
    """The full 24 hours of a calendar day."""
    return at_minutes(day, 0, tzinfo), at_minutes(day, MINUTES_PER_DAY, tzinfo)


def local_days(
    start: datetime.datetime, end: datetime.datetime
) -> tuple[datetime.tzinfo | None, datetime.date, datetime.date]:
    """Zone of `start` and the first and last calendar day of start..end in that zone."""
    tzinfo = start.tzinfo
    if tzinfo is None:
        return None, start.date(), end.date()
    return tzinfo, start.date(), end.astimezone(tzinfo).date()


def iter_days(first: datetime.date, last: datetime.date) -> Iterator[datetime.date]:
    """Dates from first to last, both inclusive."""
    day = first
    while day <= last:
        yield day
        day += datetime.timedelta(days=1)


def merge_spans(spans: Iterable[Span]) -> list[Span]:
    """Sorts and merges overlapping or touching spans."""
    merged: list[Span] = []
    for start, end in sorted(s for s in spans if s[1] > s[0]):
        if merged and start <= merged[-1][1]:
            if end > merged[-1][1]:
                merged[-1] = (merged[-1][0], end)
        else:
            merged.append((start, end))
    return merged


def intersect_spans(left: list[Span], right: list[Span]) -> list[Span]:
    """Intersection of two merged, sorted span lists."""
    result: list[Span] = []
    i = j = 0
    while i < len(left) and j < len(right):
        start = max(left[i][0], right[j][0])
        end = min(left[i][1], right[j][1])
        if end > start:
            result.append((start, end))
        if left[i][1] < right[j][1]:
            i += 1
        else:
            j += 1
    return result


def span_minutes(spans: Iterable[Span]) -> int:
    """Total whole minutes covered by (non-overlapping) spans."""
    seconds = sum((end - start).total_seconds() for start, end in spans)
    return int(seconds // SECONDS_PER_MINUTE)


def weekday_minutes(start: datetime.datetime, end: datetime.datetime, weekday: int) -> int:
    """Whole minutes of start..end that fall on the given weekday (0 = Monday)."""
    if end <= start:
        return 0
    tzinfo, first_day, last_day = local_days(start, end)
    days = [day_span(day, tzinfo) for day in iter_days(first_day, last_day) if day.weekday() == weekday]
    return span_minutes(intersect_spans([(start, end)], days))
