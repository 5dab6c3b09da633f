import datetime
import re
import uuid
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from nomina.core import config
from nomina.core.constants import PAY_CATEGORIES, PayCategory


def _check_hm(value: str) -> str:
    if not re.match(config.TIME_PATTERN_HM, value):
        raise ValueError(f"Expected HH:MM, got {value!r}")
    hour, minute = map(int, value.split(":"))
    if hour > 23 or minute > 59:
        raise ValueError(f"Time out of range: {value!r}")
    return value


class ShiftInput(BaseModel):
    """One work shift as entered by the user. Times are 24h "HH:MM" strings."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    start_time: str
    end_time: str
    ends_next_day: bool = False
    include_break: bool = False
    break_start: str | None = None
    break_end: str | None = None


class RateTable(BaseModel):
    """Peso-per-hour rate per paid category. ORD has no field and always pays 0."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    night_surcharge: float = Field(default=config.DEFAULT_HOURLY_RATES["RN"], gt=0)
    sunday_holiday_day: float = Field(default=config.DEFAULT_HOURLY_RATES["RDD"], gt=0)
    sunday_holiday_night: float = Field(default=config.DEFAULT_HOURLY_RATES["RDN"], gt=0)
    overtime_day: float = Field(default=config.DEFAULT_HOURLY_RATES["HED"], gt=0)
    overtime_night: float = Field(default=config.DEFAULT_HOURLY_RATES["HEN"], gt=0)
    overtime_sunday_holiday_day: float = Field(default=config.DEFAULT_HOURLY_RATES["HEDD_F"], gt=0)
    overtime_sunday_holiday_night: float = Field(default=config.DEFAULT_HOURLY_RATES["HEND_F"], gt=0)

    def rate_for(self, category: PayCategory) -> float:
        if category is PayCategory.ORDINARY_DAY:
            return 0.0
        return getattr(self, category.name.lower())

    def as_mapping(self) -> dict[PayCategory, float]:
        return {category: self.rate_for(category) for category in PAY_CATEGORIES}


class PayrollSettings(BaseModel):
    """Configurable payroll parameters (loaded from data/payroll_settings.json)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    day_window_start: str = config.DAY_WINDOW_START
    day_window_end: str = config.DAY_WINDOW_END
    ordinary_daily_hours: float = Field(default=config.ORDINARY_DAILY_HOURS, gt=0)
    base_salary: float = Field(default=config.BASE_SALARY_QUINCENAL, ge=0)
    transport_allowance: float = Field(default=config.TRANSPORT_ALLOWANCE_QUINCENAL, ge=0)
    health_rate: float = Field(default=config.HEALTH_RATE, ge=0, lt=1)
    pension_rate: float = Field(default=config.PENSION_RATE, ge=0, lt=1)
    rates: RateTable = Field(default_factory=RateTable)
    extra_holidays: list[datetime.date] = Field(default_factory=list)

    @field_validator("day_window_start", "day_window_end")
    @classmethod
    def _validate_window_time(cls, value: str) -> str:
        return _check_hm(value)

    @model_validator(mode="after")
    def _validate_window_order(self) -> "PayrollSettings":
        if self.day_window_start >= self.day_window_end:
            raise ValueError("day_window_start must be before day_window_end")
        return self


class Adjustment(BaseModel):
    """Manual income or deduction line item for a whole quincena."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    amount: float
    description: str | None = None


# ==========================
# Day entries (computed vs overridden)
# ==========================


class ComputedDay(BaseModel):
    """A day whose hours come from the shift classifier."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["computed"] = "computed"
    shift: ShiftInput


class OverriddenDay(BaseModel):
    """A day whose hours were edited manually. The shift is kept for its date."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["overridden"] = "overridden"
    shift: ShiftInput
    hours: dict[PayCategory, float]


DayEntry = Annotated[Union[ComputedDay, OverriddenDay], Field(discriminator="kind")]


# ==========================
# Engine results
# ==========================


class ClassifiedDay(BaseModel):
    """Hours per category for one shift. All eight categories are present."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    hours: dict[PayCategory, float]
    worked_hours: float
    break_hours: float = 0.0


class DayPayroll(BaseModel):
    """Hours and payments for one day, either computed or manually overridden."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    source: Literal["computed", "overridden"] = "computed"
    hours: dict[PayCategory, float]
    payments: dict[PayCategory, float]
    total_payment: float
    total_hours: float


class QuincenalSummary(BaseModel):
    """Totals of all day payrolls in a period."""

    model_config = ConfigDict(frozen=True)

    total_hours_by_category: dict[PayCategory, float]
    total_payment_by_category: dict[PayCategory, float]
    total_surcharge_overtime_pay: float
    base_salary: float
    gross_base_plus_extras: float
    total_worked_hours: float
    day_count: int


class PeriodFinancials(BaseModel):
    """Gross, legal deductions and net pay for a quincena."""

    model_config = ConfigDict(frozen=True)

    transport_allowance: float
    total_other_income: float
    total_other_deductions: float
    gross_earnings: float
    contribution_base: float
    health_deduction: float
    pension_deduction: float
    total_legal_deductions: float
    net_before_manual_deductions: float
    net_pay: float


class PayPeriod(BaseModel):
    """Inclusive date range of a pay period."""

    model_config = ConfigDict(frozen=True)

    start: datetime.date
    end: datetime.date

    @model_validator(mode="after")
    def _validate_bounds(self) -> "PayPeriod":
        if self.end < self.start:
            raise ValueError("Period end must not be before period start")
        return self

    def contains(self, date: datetime.date) -> bool:
        return self.start <= date <= self.end


class PeriodReport(BaseModel):
    """Everything a renderer needs for one period. Read-only snapshot."""

    model_config = ConfigDict(frozen=True)

    period: PayPeriod
    days: list[DayPayroll]
    summary: QuincenalSummary
    financials: PeriodFinancials
