# tests/test_day_payroll.py
"""
Unit tests for per-day payments and manually edited hours.
"""

import datetime
import math
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
from nomina.core.constants import PAID_CATEGORIES, PAY_CATEGORIES, PayCategory
from nomina.core.errors import InvalidHoursOverride, PayrollInvariantError
from nomina.core.models import ComputedDay, OverriddenDay, RateTable, ShiftInput
from nomina.core.payroll import compute_day_payroll, evaluate_day, validate_hours_override

DAY = datetime.date(2025, 3, 4)


def full_hours(**by_code) -> dict[PayCategory, float]:
    hours = {category: 0.0 for category in PAY_CATEGORIES}
    for code, value in by_code.items():
        hours[PayCategory(code)] = value
    return hours


class TestRateTable:
    def test_ordinary_rate_is_always_zero(self):
        assert RateTable().rate_for(PayCategory.ORDINARY_DAY) == 0.0

    def test_default_rates(self):
        rates = RateTable().as_mapping()

        assert rates[PayCategory.NIGHT_SURCHARGE] == 2166
        assert rates[PayCategory.OVERTIME_DAY] == 7736.41
        assert rates[PayCategory.OVERTIME_SUNDAY_HOLIDAY_NIGHT] == 15472.83

    def test_ordinary_rate_cannot_be_configured(self):
        with pytest.raises(ValidationError):
            RateTable(ordinary_day=1000)

    def test_rates_must_be_positive(self):
        with pytest.raises(ValidationError):
            RateTable(overtime_day=0)


class TestComputeDayPayroll:
    def test_payment_is_hours_times_rate(self):
        day = compute_day_payroll(DAY, full_hours(ORD=8, HED=1, HEN=1), RateTable())

        assert day.payments[PayCategory.OVERTIME_DAY] == pytest.approx(7736.41)
        assert day.payments[PayCategory.OVERTIME_NIGHT] == pytest.approx(10830.98)
        assert day.total_payment == pytest.approx(7736.41 + 10830.98)
        assert day.total_hours == 10.0
        assert day.source == "computed"

    def test_ordinary_hours_pay_nothing(self):
        day = compute_day_payroll(DAY, full_hours(ORD=8), RateTable())

        assert day.payments[PayCategory.ORDINARY_DAY] == 0.0
        assert day.total_payment == 0.0
        assert day.total_hours == 8.0

    def test_total_payment_sums_paid_categories(self):
        hours = full_hours(RN=1.5, RDD=2, RDN=0.25, HED=1, HEN=0.5, HEDD_F=0.75, HEND_F=3)
        day = compute_day_payroll(DAY, hours, RateTable())

        assert day.total_payment == pytest.approx(math.fsum(day.payments[c] for c in PAID_CATEGORIES))

    def test_payments_follow_configured_rates(self):
        rates = RateTable(night_surcharge=3000, overtime_sunday_holiday_night=20000)
        hours = full_hours(ORD=4, RN=2, HEND_F=1.5)
        day = compute_day_payroll(DAY, hours, rates)

        assert day.payments == {category: hours[category] * rates.as_mapping()[category] for category in PAY_CATEGORIES}
        assert day.payments[PayCategory.NIGHT_SURCHARGE] == 6000
        assert day.total_payment == pytest.approx(6000 + 30000)

    def test_missing_category_is_an_invariant_error(self):
        hours = full_hours(ORD=8)
        del hours[PayCategory.NIGHT_SURCHARGE]

        with pytest.raises(PayrollInvariantError):
            compute_day_payroll(DAY, hours, RateTable())


class TestHoursOverride:
    def test_missing_categories_are_filled_with_zero(self):
        hours = validate_hours_override({"ORD": 6, "HED": 2.5})

        assert set(hours) == set(PAY_CATEGORIES)
        assert hours[PayCategory.ORDINARY_DAY] == 6.0
        assert hours[PayCategory.OVERTIME_DAY] == 2.5
        assert hours[PayCategory.NIGHT_SURCHARGE] == 0.0

    def test_accepts_enum_keys(self):
        hours = validate_hours_override({PayCategory.NIGHT_SURCHARGE: 3})

        assert hours[PayCategory.NIGHT_SURCHARGE] == 3.0

    @pytest.mark.parametrize(
        "raw",
        [
            {"HED": -1},
            {"HED": float("nan")},
            {"HED": float("inf")},
            {"HED": "2"},
            {"HED": True},
            {"XYZ": 1},
        ],
    )
    def test_rejects_invalid_values(self, raw):
        with pytest.raises(InvalidHoursOverride):
            validate_hours_override(raw)


class TestEvaluateDay:
    def test_computed_entry_is_classified(self, settings):
        shift = ShiftInput(date=DAY, start_time="12:00", end_time="22:00")
        day = evaluate_day(ComputedDay(shift=shift), frozenset(), settings)

        assert day.source == "computed"
        assert day.hours[PayCategory.OVERTIME_NIGHT] == 1.0
        assert day.total_payment == pytest.approx(7736.41 + 10830.98)

    def test_overridden_entry_uses_edited_hours(self, settings):
        shift = ShiftInput(date=DAY, start_time="12:00", end_time="22:00")
        entry = OverriddenDay(shift=shift, hours={PayCategory.ORDINARY_DAY: 8, PayCategory.NIGHT_SURCHARGE: 2})
        day = evaluate_day(entry, frozenset(), settings)

        assert day.source == "overridden"
        assert day.hours[PayCategory.OVERTIME_NIGHT] == 0.0
        assert day.total_payment == pytest.approx(2 * 2166)

    def test_overridden_entry_with_negative_hours_is_rejected(self, settings):
        shift = ShiftInput(date=DAY, start_time="08:00", end_time="16:00")
        entry = OverriddenDay(shift=shift, hours={PayCategory.ORDINARY_DAY: -1})

        with pytest.raises(InvalidHoursOverride):
            evaluate_day(entry, frozenset(), settings)
