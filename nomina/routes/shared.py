# nomina/routes/shared.py
"""
Shared dependencies and request schemas for route modules.
"""

import datetime

from fastapi import Request
from pydantic import BaseModel, Field

from nomina.core.constants import AdjustmentKind
from nomina.core.holiday_calendar import HolidayCalendar
from nomina.core.models import PayrollSettings
from nomina.core.storage import get_payroll_settings


def get_settings() -> PayrollSettings:
    """Dependency returning the cached payroll settings."""
    return get_payroll_settings()


def get_holiday_calendar(request: Request) -> HolidayCalendar:
    """Dependency returning the app-wide holiday cache (created by the lifespan handler)."""
    calendar = getattr(request.app.state, "holiday_calendar", None)
    if calendar is None:
        calendar = HolidayCalendar.from_settings(get_payroll_settings())
        request.app.state.holiday_calendar = calendar
    return calendar


# ============ Pydantic schemas ============


class PeriodCreate(BaseModel):
    employee_id: str = Field(min_length=1, max_length=64)
    start_date: datetime.date
    end_date: datetime.date | None = None  # defaults to the end of the quincena
    base_salary: float | None = Field(default=None, ge=0)
    transport_enabled: bool = False


class PeriodUpdate(BaseModel):
    """Fields left out keep their stored value."""

    end_date: datetime.date | None = None
    base_salary: float | None = Field(default=None, ge=0)
    transport_enabled: bool | None = None


class HoursOverrideIn(BaseModel):
    hours: dict[str, float]


class AdjustmentIn(BaseModel):
    amount: float
    description: str | None = Field(default=None, max_length=200)


class PeriodAdjustmentIn(AdjustmentIn):
    kind: AdjustmentKind


class DayHoursIn(BaseModel):
    date: datetime.date
    hours: dict[str, float]


class FinancialsRequest(BaseModel):
    days: list[DayHoursIn] = Field(default_factory=list)
    base_salary: float | None = Field(default=None, ge=0)
    transport_enabled: bool = False
    incomes: list[AdjustmentIn] = Field(default_factory=list)
    deductions: list[AdjustmentIn] = Field(default_factory=list)
