import datetime
import re
from typing import Any

from nomina.core.config import TIME_FORMAT_HM, TIME_PATTERN_HM
from nomina.core.constants import SECONDS_PER_HOUR
from nomina.core.errors import InvalidShift

Interval = tuple[datetime.datetime, datetime.datetime]


def parse_hm(value: Any, field_name: str) -> datetime.time:
    """Parse a 24h "HH:MM" string (or pass through a datetime.time).

    Raises InvalidShift for empty, malformed or unsupported values.
    """
    if isinstance(value, datetime.time):
        return value

    if isinstance(value, str):
        s = value.strip()
        if not s:
            raise InvalidShift(f"{field_name} is empty")
        if not re.match(TIME_PATTERN_HM, s):
            raise InvalidShift(f"Invalid {field_name} format: {value!r} (expected HH:MM)")
        try:
            return datetime.datetime.strptime(s, TIME_FORMAT_HM).time()
        except ValueError as e:
            raise InvalidShift(f"Invalid {field_name}: {value!r}") from e

    raise InvalidShift(f"Unsupported {field_name} type: {type(value).__name__}")


def resolve_shift_interval(shift) -> Interval:
    """Return the absolute half-open interval [start, end) of a shift.

    When ends_next_day is set the end time is anchored to the following date.
    """
    start_time = parse_hm(shift.start_time, "start_time")
    end_time = parse_hm(shift.end_time, "end_time")

    start_dt = datetime.datetime.combine(shift.date, start_time)
    end_date = shift.date + datetime.timedelta(days=1) if shift.ends_next_day else shift.date
    end_dt = datetime.datetime.combine(end_date, end_time)

    if end_dt <= start_dt:
        raise InvalidShift(
            f"Shift on {shift.date.isoformat()} ends at or before it starts "
            f"({shift.start_time} - {shift.end_time}, ends_next_day={shift.ends_next_day})"
        )
    return start_dt, end_dt


def resolve_break_interval(shift, shift_start: datetime.datetime, shift_end: datetime.datetime) -> Interval | None:
    """Return the absolute break interval inside [shift_start, shift_end], or None.

    The break start is the first occurrence of its clock time at or after the
    shift start; the break end is the first occurrence of its clock time after
    the break start, so a break may cross midnight.
    """
    if not shift.include_break:
        return None

    if not shift.break_start or not shift.break_end:
        raise InvalidShift("Break start and end are required when include_break is set")

    break_start_time = parse_hm(shift.break_start, "break_start")
    break_end_time = parse_hm(shift.break_end, "break_end")

    if break_end_time == break_start_time:
        raise InvalidShift("Break end must be after break start")

    break_start = datetime.datetime.combine(shift_start.date(), break_start_time)
    if break_start < shift_start:
        break_start += datetime.timedelta(days=1)

    break_end = datetime.datetime.combine(break_start.date(), break_end_time)
    if break_end <= break_start:
        break_end += datetime.timedelta(days=1)

    if break_end > shift_end:
        raise InvalidShift(
            f"Break {shift.break_start} - {shift.break_end} is not within the shift "
            f"{shift.start_time} - {shift.end_time}"
        )
    return break_start, break_end


def subtract_interval(outer: Interval, hole: Interval | None) -> list[Interval]:
    """Remove hole from outer, returning zero, one or two remaining intervals."""
    start, end = outer
    if hole is None:
        return [outer]

    hole_start, hole_end = hole
    remaining = []
    if hole_start > start:
        remaining.append((start, min(hole_start, end)))
    if hole_end < end:
        remaining.append((max(hole_end, start), end))
    return [(s, e) for s, e in remaining if e > s]


def hours_between(start: datetime.datetime, end: datetime.datetime) -> float:
    """Length of [start, end) in fractional hours."""
    return (end - start).total_seconds() / SECONDS_PER_HOUR
