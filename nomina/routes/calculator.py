# nomina/routes/calculator.py
"""
Stateless calculator routes - holidays, single-shift classification and
financials for hours sent by the client.
"""

from fastapi import APIRouter, Depends, Path

from nomina.core.holiday_calendar import HolidayCalendar
from nomina.core.models import ComputedDay, PayrollSettings, ShiftInput
from nomina.core.payroll import (
    aggregate_period,
    build_adjustment,
    compute_day_payroll,
    compute_period_financials,
    evaluate_day,
    validate_hours_override,
    years_touched,
)
from nomina.routes.shared import FinancialsRequest, get_holiday_calendar, get_settings

router = APIRouter(prefix="/api", tags=["calculator"])


@router.get("/holidays/{year}")
async def list_holidays(
    year: int = Path(..., ge=1900, le=2200),
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
):
    """Holiday dates of a year, sorted."""
    dates = sorted(calendar.for_year(year))
    return {"year": year, "holidays": [d.isoformat() for d in dates]}


@router.post("/shifts/classify")
async def classify_single_shift(
    shift: ShiftInput,
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
    settings: PayrollSettings = Depends(get_settings),
):
    """Classify one shift and price it. Nothing is stored."""
    holidays = calendar.for_years(years_touched(shift))
    day = evaluate_day(ComputedDay(shift=shift), holidays, settings)
    return day.model_dump(mode="json")


@router.post("/financials")
async def calculate_financials(
    payload: FinancialsRequest,
    settings: PayrollSettings = Depends(get_settings),
):
    """
    Summary and financials for day hours computed (or edited) on the client.

    Hours go through the same validation as manual overrides.
    """
    days = [
        compute_day_payroll(day.date, validate_hours_override(day.hours), settings.rates, "overridden")
        for day in payload.days
    ]
    base_salary = settings.base_salary if payload.base_salary is None else payload.base_salary
    summary = aggregate_period(days, base_salary)

    incomes = [build_adjustment(item.amount, item.description) for item in payload.incomes]
    deductions = [build_adjustment(item.amount, item.description) for item in payload.deductions]
    financials = compute_period_financials(summary, payload.transport_enabled, incomes, deductions, settings)

    return {
        "days": [day.model_dump(mode="json") for day in days],
        "summary": summary.model_dump(mode="json"),
        "financials": financials.model_dump(mode="json"),
    }
