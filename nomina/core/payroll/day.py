"""Pago por día: tarifas aplicadas a las horas clasificadas o editadas."""

import datetime
import logging
import math
from collections.abc import Collection, Mapping
from numbers import Real
from typing import Any, Literal

from nomina.core.constants import HOURS_EPSILON, PAID_CATEGORIES, PAY_CATEGORIES, PayCategory
from nomina.core.errors import InvalidHoursOverride, PayrollInvariantError
from nomina.core.models import (
    ComputedDay,
    DayPayroll,
    OverriddenDay,
    PayrollSettings,
    RateTable,
)
from nomina.core.types import HoursByCategory, HoursMapping, PaymentByCategory

from .classifier import classify_shift

logger = logging.getLogger(__name__)


def compute_day_payroll(
    date: datetime.date,
    hours: HoursMapping,
    rates: RateTable,
    source: Literal["computed", "overridden"] = "computed",
) -> DayPayroll:
    """
    Calcula el pago por categoría de un día.

    ORD always pays 0 because the rate table has no ordinary rate.

    Args:
        date: Date of the shift
        hours: Hours for all eight categories
        rates: Peso-per-hour rate table
        source: Whether hours come from the classifier or a manual edit

    Returns:
        DayPayroll with payments, total_payment and total_hours

    Raises:
        PayrollInvariantError: A category is missing or unknown
    """
    if set(hours) != set(PAY_CATEGORIES):
        missing = sorted(c.value for c in set(PAY_CATEGORIES) - set(hours))
        unknown = sorted(str(c) for c in set(hours) - set(PAY_CATEGORIES))
        logger.error("Hours mapping for %s is incomplete: missing=%s unknown=%s", date, missing, unknown)
        raise PayrollInvariantError(f"Hours mapping for {date.isoformat()} must cover every pay category")

    rate_map = rates.as_mapping()
    payments: PaymentByCategory = {category: hours[category] * rate_map[category] for category in PAY_CATEGORIES}

    return DayPayroll(
        date=date,
        source=source,
        hours=dict(hours),
        payments=payments,
        total_payment=math.fsum(payments[category] for category in PAID_CATEGORIES),
        total_hours=math.fsum(hours[category] for category in PAY_CATEGORIES),
    )


def validate_hours_override(raw: Mapping[Any, Any]) -> HoursByCategory:
    """
    Validate manually edited hours.

    Keys may be PayCategory members or their codes ("HED", "RN", ...). Missing
    categories are filled with 0.

    Raises:
        InvalidHoursOverride: Unknown category, non-numeric, negative or non-finite value
    """
    hours: HoursByCategory = {category: 0.0 for category in PAY_CATEGORIES}

    for key, value in raw.items():
        try:
            category = PayCategory(key)
        except ValueError as e:
            raise InvalidHoursOverride(f"Unknown pay category: {key!r}") from e

        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidHoursOverride(f"Hours for {category.value} must be a number, got {value!r}")
        value = float(value)
        if not math.isfinite(value) or value < 0:
            raise InvalidHoursOverride(f"Hours for {category.value} must be finite and non-negative, got {value!r}")

        hours[category] = value

    return hours


def evaluate_day(
    entry: ComputedDay | OverriddenDay,
    holidays: Collection[datetime.date],
    settings: PayrollSettings,
) -> DayPayroll:
    """Produce the DayPayroll of a day entry, classifying the shift or using the edited hours."""
    if isinstance(entry, ComputedDay):
        classified = classify_shift(entry.shift, holidays, settings)
        total = math.fsum(classified.hours.values())
        if abs(total - classified.worked_hours) > HOURS_EPSILON:
            logger.error(
                "Classified hours %.6f do not add up to worked hours %.6f for %s",
                total,
                classified.worked_hours,
                entry.shift.date,
            )
            raise PayrollInvariantError("Classified hours do not add up to worked hours")
        return compute_day_payroll(entry.shift.date, classified.hours, settings.rates, "computed")

    if isinstance(entry, OverriddenDay):
        hours = validate_hours_override(entry.hours)
        return compute_day_payroll(entry.shift.date, hours, settings.rates, "overridden")

    logger.error("Unknown day entry type: %s", type(entry).__name__)
    raise PayrollInvariantError(f"Unknown day entry type: {type(entry).__name__}")
