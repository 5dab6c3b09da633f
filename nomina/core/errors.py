# nomina/core/errors.py
"""
Error types raised by the payroll engine and its callers.

Input errors (InvalidShift, InvalidAdjustment, InvalidHoursOverride) are
raised before any computation and are never defaulted to zero. Period
policies (DuplicateShiftDate, OutOfPeriodShift) are checked by callers, the
engine itself has no notion of "the rest of the period".
"""

import datetime


class PayrollError(Exception):
    """Base class for all payroll errors."""

    pass


class InvalidShift(PayrollError):
    """Structurally impossible shift (bad times, break outside shift, no worked time)."""

    pass


class InvalidAdjustment(PayrollError):
    """Manual income/deduction amount that is not a positive finite number."""

    pass


class InvalidHoursOverride(PayrollError):
    """Manually edited hours that are negative, non-finite or of an unknown category."""

    pass


class PayrollInvariantError(PayrollError):
    """Internal invariant violated in a correctly composed pipeline."""

    pass


class DuplicateShiftDate(PayrollError):
    """A second shift for a calendar date already present in the period."""

    def __init__(self, date: datetime.date):
        self.date = date
        super().__init__(f"A shift for {date.isoformat()} already exists in this period")


class OutOfPeriodShift(PayrollError):
    """A shift whose date falls outside the declared period bounds."""

    def __init__(self, date: datetime.date, start: datetime.date, end: datetime.date):
        self.date = date
        self.start = start
        self.end = end
        super().__init__(
            f"Shift date {date.isoformat()} is outside the period {start.isoformat()} - {end.isoformat()}"
        )
