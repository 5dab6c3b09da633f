"""
Payroll module - clasificación de turnos y liquidación quincenal.

Exports the public engine functions.
"""

from .classifier import classify_shift, is_sunday_or_holiday, years_touched
from .day import compute_day_payroll, evaluate_day, validate_hours_override
from .financials import build_adjustment, compute_period_financials, validate_adjustment
from .period import (
    aggregate_period,
    ensure_shift_in_period,
    ensure_unique_shift_date,
    quincena_for,
)
from .report import build_period_report

__all__ = [
    # classifier
    "classify_shift",
    "is_sunday_or_holiday",
    "years_touched",
    # day
    "compute_day_payroll",
    "evaluate_day",
    "validate_hours_override",
    # period
    "aggregate_period",
    "quincena_for",
    "ensure_shift_in_period",
    "ensure_unique_shift_date",
    # financials
    "compute_period_financials",
    "validate_adjustment",
    "build_adjustment",
    # report
    "build_period_report",
]
