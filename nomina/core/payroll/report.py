"""Reporte completo de una quincena."""

import logging
from collections.abc import Iterable, Sequence

from nomina.core.holiday_calendar import HolidayCalendar
from nomina.core.models import (
    Adjustment,
    DayEntry,
    PayPeriod,
    PayrollSettings,
    PeriodReport,
)

from .classifier import years_touched
from .day import evaluate_day
from .financials import compute_period_financials
from .period import aggregate_period

logger = logging.getLogger(__name__)


def build_period_report(
    period: PayPeriod,
    entries: Sequence[DayEntry],
    calendar: HolidayCalendar,
    settings: PayrollSettings,
    base_salary: float | None = None,
    transport_enabled: bool = False,
    incomes: Iterable[Adjustment] = (),
    deductions: Iterable[Adjustment] = (),
) -> PeriodReport:
    """
    Evaluate every day of a period and compute its financials.

    This is the only place that composes classifier, aggregator and
    deduction calculator; API responses and exports all read from the
    returned snapshot.

    Args:
        period: Period bounds
        entries: Computed or overridden day entries
        calendar: Holiday cache owned by the caller
        settings: Payroll settings (rates, thresholds, deductions)
        base_salary: Base salary for the period; settings.base_salary when None
        transport_enabled: Whether the transport allowance applies
        incomes: Validated manual income items
        deductions: Validated manual deduction items

    Returns:
        PeriodReport with days sorted by date
    """
    if base_salary is None:
        base_salary = settings.base_salary

    years: set[int] = {period.start.year, period.end.year}
    for entry in entries:
        years |= years_touched(entry.shift)
    holidays = calendar.for_years(years)

    days = sorted((evaluate_day(entry, holidays, settings) for entry in entries), key=lambda d: d.date)
    summary = aggregate_period(days, base_salary)
    financials = compute_period_financials(summary, transport_enabled, incomes, deductions, settings)

    logger.debug(
        "Period %s - %s: %d days, extras %.2f, net %.2f",
        period.start,
        period.end,
        summary.day_count,
        summary.total_surcharge_overtime_pay,
        financials.net_pay,
    )

    return PeriodReport(period=period, days=days, summary=summary, financials=financials)
