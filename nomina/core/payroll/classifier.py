"""Clasificación de un turno en las ocho categorías de horas."""

import datetime
import logging
import math
from collections.abc import Collection, Iterator
from typing import NamedTuple

from nomina.core.constants import (
    BASE_CATEGORY_BY_FLAGS,
    OVERTIME_CATEGORY_BY_FLAGS,
    PAY_CATEGORIES,
    SECONDS_PER_HOUR,
    SUNDAY_WEEKDAY,
    PayCategory,
)
from nomina.core.errors import InvalidShift
from nomina.core.models import ClassifiedDay, PayrollSettings, ShiftInput
from nomina.core.time_utils import (
    hours_between,
    parse_hm,
    resolve_break_interval,
    resolve_shift_interval,
    subtract_interval,
)

logger = logging.getLogger(__name__)


class Piece(NamedTuple):
    """Atomic slice of worked time with constant classification flags."""

    start: datetime.datetime
    end: datetime.datetime
    is_night: bool
    is_sunday_or_holiday: bool

    @property
    def seconds(self) -> float:
        return (self.end - self.start).total_seconds()


def is_sunday_or_holiday(date: datetime.date, holidays: Collection[datetime.date]) -> bool:
    """True for Sundays and for dates in the holiday set (counted once either way)."""
    return date.weekday() == SUNDAY_WEEKDAY or date in holidays


def years_touched(shift: ShiftInput) -> set[int]:
    """Calendar years a shift can touch (two when it crosses New Year's Eve)."""
    years = {shift.date.year}
    if shift.ends_next_day:
        years.add((shift.date + datetime.timedelta(days=1)).year)
    return years


def classify_shift(
    shift: ShiftInput,
    holidays: Collection[datetime.date],
    settings: PayrollSettings,
) -> ClassifiedDay:
    """
    Calcula las horas por categoría de un turno.

    The shift is resolved into an absolute interval, the break is cut out,
    and the rest is split at midnight and at the day window boundaries.
    Every piece lands in a base bucket; if the worked time exceeds the
    ordinary daily hours, the excess is moved to the overtime buckets
    starting from the latest worked minutes.

    Args:
        shift: The shift to classify
        holidays: Holiday dates covering every date the shift touches
        settings: Day window and ordinary daily hours

    Returns:
        ClassifiedDay with all eight categories

    Raises:
        InvalidShift: Malformed times, break outside the shift or no worked time
    """
    start_dt, end_dt = resolve_shift_interval(shift)
    break_interval = resolve_break_interval(shift, start_dt, end_dt)
    worked_intervals = subtract_interval((start_dt, end_dt), break_interval)

    worked_seconds = math.fsum((e - s).total_seconds() for s, e in worked_intervals)
    if worked_seconds <= 0:
        raise InvalidShift(f"Shift on {shift.date.isoformat()} has no worked time after the break")

    day_start = parse_hm(settings.day_window_start, "day_window_start")
    day_end = parse_hm(settings.day_window_end, "day_window_end")

    pieces: list[Piece] = []
    for interval_start, interval_end in worked_intervals:
        pieces.extend(_split_into_pieces(interval_start, interval_end, day_start, day_end, holidays))

    seconds = _accumulate(pieces, worked_seconds, settings.ordinary_daily_hours * SECONDS_PER_HOUR)
    hours = {category: seconds[category] / SECONDS_PER_HOUR for category in PAY_CATEGORIES}

    break_hours = hours_between(*break_interval) if break_interval else 0.0
    worked_hours = worked_seconds / SECONDS_PER_HOUR

    logger.debug(
        "Classified shift %s %s-%s: %.2f h worked, %d pieces",
        shift.date.isoformat(),
        shift.start_time,
        shift.end_time,
        worked_hours,
        len(pieces),
    )

    return ClassifiedDay(
        date=shift.date,
        hours=hours,
        worked_hours=worked_hours,
        break_hours=break_hours,
    )


# === Funciones auxiliares privadas ===


def _split_into_pieces(
    start: datetime.datetime,
    end: datetime.datetime,
    day_start: datetime.time,
    day_end: datetime.time,
    holidays: Collection[datetime.date],
) -> Iterator[Piece]:
    """Split [start, end) at every midnight and every day window boundary."""
    current = start
    while current < end:
        day = current.date()
        boundaries = (
            datetime.datetime.combine(day, day_start),
            datetime.datetime.combine(day, day_end),
            datetime.datetime.combine(day + datetime.timedelta(days=1), datetime.time(0, 0)),
        )
        next_cut = min(b for b in boundaries if b > current)
        segment_end = min(end, next_cut)

        clock = current.time()
        is_night = not (day_start <= clock < day_end)

        yield Piece(current, segment_end, is_night, is_sunday_or_holiday(day, holidays))
        current = segment_end


def _accumulate(pieces: list[Piece], worked_seconds: float, ordinary_seconds: float) -> dict[PayCategory, float]:
    """Seconds per category, with the tail beyond ordinary_seconds as overtime."""
    overtime_left = max(0.0, worked_seconds - ordinary_seconds)
    buckets: dict[PayCategory, list[float]] = {category: [] for category in PAY_CATEGORIES}

    # Overtime is taken from the end of the shift backwards
    for piece in reversed(pieces):
        flags = (piece.is_night, piece.is_sunday_or_holiday)
        piece_seconds = piece.seconds
        overtime = min(piece_seconds, overtime_left)
        overtime_left -= overtime

        if overtime > 0:
            buckets[OVERTIME_CATEGORY_BY_FLAGS[flags]].append(overtime)
        if piece_seconds - overtime > 0:
            buckets[BASE_CATEGORY_BY_FLAGS[flags]].append(piece_seconds - overtime)

    return {category: math.fsum(values) for category, values in buckets.items()}
