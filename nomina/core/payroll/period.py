"""Quincenas y sumatoria del período."""

import calendar
import datetime
import math
from collections.abc import Iterable

from nomina.core.config import FIRST_QUINCENA_LAST_DAY
from nomina.core.constants import PAY_CATEGORIES
from nomina.core.errors import DuplicateShiftDate, OutOfPeriodShift
from nomina.core.models import DayPayroll, PayPeriod, QuincenalSummary


def quincena_for(date: datetime.date) -> PayPeriod:
    """
    Devuelve la quincena que contiene la fecha.

    1st-15th, or 16th to the last day of the month.
    """
    if date.day <= FIRST_QUINCENA_LAST_DAY:
        return PayPeriod(
            start=date.replace(day=1),
            end=date.replace(day=FIRST_QUINCENA_LAST_DAY),
        )

    last_day = calendar.monthrange(date.year, date.month)[1]
    return PayPeriod(
        start=date.replace(day=FIRST_QUINCENA_LAST_DAY + 1),
        end=date.replace(day=last_day),
    )


def aggregate_period(days: Iterable[DayPayroll], base_salary: float) -> QuincenalSummary:
    """
    Suma los pagos diarios de un período.

    All sums use math.fsum, which is correctly rounded, so any ordering of
    the input gives exactly the same summary. An empty period is valid and
    yields gross_base_plus_extras == base_salary.
    """
    days = list(days)

    hours_by_category = {c: math.fsum(day.hours[c] for day in days) for c in PAY_CATEGORIES}
    payment_by_category = {c: math.fsum(day.payments[c] for day in days) for c in PAY_CATEGORIES}
    extras = math.fsum(day.total_payment for day in days)

    return QuincenalSummary(
        total_hours_by_category=hours_by_category,
        total_payment_by_category=payment_by_category,
        total_surcharge_overtime_pay=extras,
        base_salary=base_salary,
        gross_base_plus_extras=base_salary + extras,
        total_worked_hours=math.fsum(day.total_hours for day in days),
        day_count=len(days),
    )


# === Políticas del llamador ===


def ensure_shift_in_period(date: datetime.date, period: PayPeriod) -> None:
    """Raise OutOfPeriodShift if date is outside the period."""
    if not period.contains(date):
        raise OutOfPeriodShift(date, period.start, period.end)


def ensure_unique_shift_date(date: datetime.date, existing_dates: Iterable[datetime.date]) -> None:
    """Raise DuplicateShiftDate if the period already has a shift on date."""
    if date in set(existing_dates):
        raise DuplicateShiftDate(date)
