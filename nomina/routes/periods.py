# nomina/routes/periods.py
"""
Pay period routes - periods, shifts, manual hour edits, adjustments and exports.

Only inputs are stored; every response recomputes the period report.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import ValidationError
from sqlalchemy.orm import Session

from nomina.core.calendar_export import generate_ical
from nomina.core.constants import AdjustmentKind
from nomina.core.csv_export import report_to_csv, reports_to_csv
from nomina.core.holiday_calendar import HolidayCalendar
from nomina.core.models import ComputedDay, PayPeriod, PayrollSettings, PeriodReport, ShiftInput
from nomina.core.payroll import (
    build_adjustment,
    build_period_report,
    ensure_shift_in_period,
    ensure_unique_shift_date,
    evaluate_day,
    quincena_for,
    validate_hours_override,
    years_touched,
)
from nomina.core.time_utils import parse_hm
from nomina.database.database import (
    AdjustmentRecord,
    PeriodRecord,
    ShiftRecord,
    get_db,
    to_adjustment,
    to_day_entry,
    to_pay_period,
    to_shift_input,
)
from nomina.routes.shared import (
    HoursOverrideIn,
    PeriodAdjustmentIn,
    PeriodCreate,
    PeriodUpdate,
    get_holiday_calendar,
    get_settings,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/periods", tags=["periods"])


# ============ Helpers ============


def _get_period_or_404(session: Session, period_id: int) -> PeriodRecord:
    record = session.get(PeriodRecord, period_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Period not found")
    return record


def _get_shift_or_404(period: PeriodRecord, shift_id: int) -> ShiftRecord:
    for shift in period.shifts:
        if shift.id == shift_id:
            return shift
    raise HTTPException(status_code=404, detail="Shift not found")


def _build_report(record: PeriodRecord, calendar: HolidayCalendar, settings: PayrollSettings) -> PeriodReport:
    incomes = [to_adjustment(a) for a in record.adjustments if a.kind == AdjustmentKind.INCOME]
    deductions = [to_adjustment(a) for a in record.adjustments if a.kind == AdjustmentKind.DEDUCTION]
    return build_period_report(
        to_pay_period(record),
        [to_day_entry(s) for s in record.shifts],
        calendar,
        settings,
        base_salary=record.base_salary,
        transport_enabled=record.transport_enabled,
        incomes=incomes,
        deductions=deductions,
    )


def _log_context(record: PeriodRecord) -> dict:
    return {"employee_id": record.employee_id, "period_id": record.id}


def _shift_payload(record: ShiftRecord) -> dict:
    shift = to_shift_input(record)
    return {"id": record.id, **shift.model_dump(mode="json"), "overridden": record.hours_override is not None}


def _period_payload(record: PeriodRecord, report: PeriodReport) -> dict:
    return {
        "id": record.id,
        "employee_id": record.employee_id,
        "start_date": record.start_date.isoformat(),
        "end_date": record.end_date.isoformat(),
        "base_salary": record.base_salary,
        "transport_enabled": record.transport_enabled,
        "shifts": [_shift_payload(s) for s in record.shifts],
        "adjustments": [
            {"id": a.uid, "kind": a.kind.value, "amount": a.amount, "description": a.description}
            for a in record.adjustments
        ],
        "report": report.model_dump(mode="json"),
    }


def _validate_shift(shift: ShiftInput, calendar: HolidayCalendar, settings: PayrollSettings) -> None:
    """Classify once so an invalid shift is rejected before it is stored."""
    evaluate_day(ComputedDay(shift=shift), calendar.for_years(years_touched(shift)), settings)


def _apply_shift(record: ShiftRecord, shift: ShiftInput) -> None:
    record.date = shift.date
    record.start_time = parse_hm(shift.start_time, "start_time")
    record.end_time = parse_hm(shift.end_time, "end_time")
    record.ends_next_day = shift.ends_next_day
    record.include_break = shift.include_break
    if shift.include_break:
        record.break_start = parse_hm(shift.break_start, "break_start")
        record.break_end = parse_hm(shift.break_end, "break_end")
    else:
        record.break_start = None
        record.break_end = None
    # A replaced shift is computed again
    record.hours_override = None


# ============ Periods ============


@router.post("", status_code=201)
async def create_period(
    payload: PeriodCreate,
    session: Session = Depends(get_db),
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
    settings: PayrollSettings = Depends(get_settings),
):
    """
    Create a pay period.

    Without end_date the period is the quincena containing start_date.
    """
    end_date = payload.end_date or quincena_for(payload.start_date).end
    try:
        PayPeriod(start=payload.start_date, end=end_date)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail="Period end must not be before period start") from e

    record = PeriodRecord(
        employee_id=payload.employee_id,
        start_date=payload.start_date,
        end_date=end_date,
        base_salary=settings.base_salary if payload.base_salary is None else payload.base_salary,
        transport_enabled=payload.transport_enabled,
    )
    session.add(record)
    session.commit()
    session.refresh(record)

    logger.info(
        "Created period %s for %s (%s - %s)",
        record.id,
        record.employee_id,
        record.start_date,
        end_date,
        extra=_log_context(record),
    )
    return _period_payload(record, _build_report(record, calendar, settings))


@router.get("")
async def list_periods(
    employee_id: str | None = Query(None),
    session: Session = Depends(get_db),
):
    """List periods, optionally for one employee."""
    query = session.query(PeriodRecord)
    if employee_id:
        query = query.filter(PeriodRecord.employee_id == employee_id)
    records = query.order_by(PeriodRecord.employee_id, PeriodRecord.start_date).all()

    return [
        {
            "id": r.id,
            "employee_id": r.employee_id,
            "start_date": r.start_date.isoformat(),
            "end_date": r.end_date.isoformat(),
            "shift_count": len(r.shifts),
        }
        for r in records
    ]


@router.get("/export.csv")
async def export_periods_csv(
    employee_id: str | None = Query(None),
    session: Session = Depends(get_db),
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
    settings: PayrollSettings = Depends(get_settings),
):
    """One CSV row per period (all employees unless employee_id is given)."""
    query = session.query(PeriodRecord)
    if employee_id:
        query = query.filter(PeriodRecord.employee_id == employee_id)
    records = query.order_by(PeriodRecord.employee_id, PeriodRecord.start_date).all()

    content = reports_to_csv((r.employee_id, _build_report(r, calendar, settings)) for r in records)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="nomina.csv"'},
    )


@router.get("/{period_id}")
async def get_period(
    period_id: int,
    session: Session = Depends(get_db),
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
    settings: PayrollSettings = Depends(get_settings),
):
    """Period with its shifts, adjustments and freshly computed report."""
    record = _get_period_or_404(session, period_id)
    return _period_payload(record, _build_report(record, calendar, settings))


@router.patch("/{period_id}")
async def update_period(
    period_id: int,
    payload: PeriodUpdate,
    session: Session = Depends(get_db),
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
    settings: PayrollSettings = Depends(get_settings),
):
    """
    Change the end date, base salary or transport flag of a period.

    Shifts and adjustments are kept. A new end date must not leave any
    stored shift outside the period.
    """
    record = _get_period_or_404(session, period_id)

    if payload.end_date is not None:
        try:
            new_period = PayPeriod(start=record.start_date, end=payload.end_date)
        except ValidationError as e:
            raise HTTPException(status_code=422, detail="Period end must not be before period start") from e
        for shift in record.shifts:
            ensure_shift_in_period(shift.date, new_period)
        record.end_date = payload.end_date
    if payload.base_salary is not None:
        record.base_salary = payload.base_salary
    if payload.transport_enabled is not None:
        record.transport_enabled = payload.transport_enabled

    session.commit()
    session.refresh(record)

    logger.info("Updated period %s", period_id, extra=_log_context(record))
    return _period_payload(record, _build_report(record, calendar, settings))


@router.delete("/{period_id}", status_code=204)
async def delete_period(period_id: int, session: Session = Depends(get_db)):
    record = _get_period_or_404(session, period_id)
    context = _log_context(record)
    session.delete(record)
    session.commit()
    logger.info("Deleted period %s", period_id, extra=context)
    return Response(status_code=204)


# ============ Shifts ============


@router.post("/{period_id}/shifts", status_code=201)
async def add_shift(
    period_id: int,
    shift: ShiftInput,
    session: Session = Depends(get_db),
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
    settings: PayrollSettings = Depends(get_settings),
):
    """
    Add a shift to a period.

    Invalid shifts are rejected with 422; shifts outside the period or on a
    date that already has a shift are rejected with 400.
    """
    record = _get_period_or_404(session, period_id)

    _validate_shift(shift, calendar, settings)
    ensure_shift_in_period(shift.date, to_pay_period(record))
    ensure_unique_shift_date(shift.date, (s.date for s in record.shifts))

    shift_record = ShiftRecord(period_id=record.id)
    _apply_shift(shift_record, shift)
    record.shifts.append(shift_record)
    session.commit()
    session.refresh(record)

    logger.info("Added shift %s to period %s", shift.date, period_id, extra=_log_context(record))
    return _period_payload(record, _build_report(record, calendar, settings))


@router.put("/{period_id}/shifts/{shift_id}")
async def replace_shift(
    period_id: int,
    shift_id: int,
    shift: ShiftInput,
    session: Session = Depends(get_db),
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
    settings: PayrollSettings = Depends(get_settings),
):
    """Replace a shift wholesale. Any manual hour edit on it is dropped."""
    record = _get_period_or_404(session, period_id)
    shift_record = _get_shift_or_404(record, shift_id)

    _validate_shift(shift, calendar, settings)
    ensure_shift_in_period(shift.date, to_pay_period(record))
    ensure_unique_shift_date(shift.date, (s.date for s in record.shifts if s.id != shift_id))

    _apply_shift(shift_record, shift)
    session.commit()
    session.refresh(record)

    return _period_payload(record, _build_report(record, calendar, settings))


@router.delete("/{period_id}/shifts/{shift_id}", status_code=204)
async def delete_shift(period_id: int, shift_id: int, session: Session = Depends(get_db)):
    record = _get_period_or_404(session, period_id)
    shift_record = _get_shift_or_404(record, shift_id)
    record.shifts.remove(shift_record)
    session.commit()
    return Response(status_code=204)


@router.put("/{period_id}/shifts/{shift_id}/hours")
async def override_shift_hours(
    period_id: int,
    shift_id: int,
    payload: HoursOverrideIn,
    session: Session = Depends(get_db),
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
    settings: PayrollSettings = Depends(get_settings),
):
    """Replace the computed hours of a shift with manually edited hours."""
    record = _get_period_or_404(session, period_id)
    shift_record = _get_shift_or_404(record, shift_id)

    hours = validate_hours_override(payload.hours)
    shift_record.hours_override = {category.value: value for category, value in hours.items()}
    session.commit()
    session.refresh(record)

    logger.info("Hours of shift %s in period %s edited manually", shift_id, period_id, extra=_log_context(record))
    return _period_payload(record, _build_report(record, calendar, settings))


@router.delete("/{period_id}/shifts/{shift_id}/hours")
async def revert_shift_hours(
    period_id: int,
    shift_id: int,
    session: Session = Depends(get_db),
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
    settings: PayrollSettings = Depends(get_settings),
):
    """Drop the manual edit so the shift is classified again."""
    record = _get_period_or_404(session, period_id)
    shift_record = _get_shift_or_404(record, shift_id)

    shift_record.hours_override = None
    session.commit()
    session.refresh(record)

    return _period_payload(record, _build_report(record, calendar, settings))


# ============ Adjustments ============


@router.post("/{period_id}/adjustments", status_code=201)
async def add_adjustment(
    period_id: int,
    payload: PeriodAdjustmentIn,
    session: Session = Depends(get_db),
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
    settings: PayrollSettings = Depends(get_settings),
):
    """Add a manual income or deduction to a period."""
    record = _get_period_or_404(session, period_id)
    adjustment = build_adjustment(payload.amount, payload.description)

    record.adjustments.append(
        AdjustmentRecord(
            kind=payload.kind,
            uid=adjustment.id,
            amount=adjustment.amount,
            description=adjustment.description,
        )
    )
    session.commit()
    session.refresh(record)

    logger.info(
        "Added %s of %.2f to period %s",
        payload.kind.value,
        adjustment.amount,
        period_id,
        extra=_log_context(record),
    )
    return _period_payload(record, _build_report(record, calendar, settings))


@router.delete("/{period_id}/adjustments/{adjustment_id}", status_code=204)
async def delete_adjustment(period_id: int, adjustment_id: str, session: Session = Depends(get_db)):
    record = _get_period_or_404(session, period_id)
    for adjustment in record.adjustments:
        if adjustment.uid == adjustment_id:
            record.adjustments.remove(adjustment)
            session.commit()
            return Response(status_code=204)
    raise HTTPException(status_code=404, detail="Adjustment not found")


# ============ Exports ============


@router.get("/{period_id}/export.csv")
async def export_period_csv(
    period_id: int,
    session: Session = Depends(get_db),
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
    settings: PayrollSettings = Depends(get_settings),
):
    record = _get_period_or_404(session, period_id)
    content = report_to_csv(record.employee_id, _build_report(record, calendar, settings))
    filename = f"nomina_{record.employee_id}_{record.start_date.isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{period_id}/calendar.ics")
async def export_period_ical(
    period_id: int,
    session: Session = Depends(get_db),
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
    settings: PayrollSettings = Depends(get_settings),
):
    record = _get_period_or_404(session, period_id)
    report = _build_report(record, calendar, settings)
    content = generate_ical(record.employee_id, [to_shift_input(s) for s in record.shifts], report)
    filename = f"turnos_{record.employee_id}_{record.start_date.isoformat()}.ics"
    return Response(
        content=content,
        media_type="text/calendar",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
