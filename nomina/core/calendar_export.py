"""Generación de archivos iCal con los turnos de una quincena."""

import datetime
from collections.abc import Iterable
from zoneinfo import ZoneInfo

from icalendar import Calendar, Event

from nomina.core.config import TIMEZONE
from nomina.core.constants import CATEGORY_LABELS, PAY_CATEGORIES
from nomina.core.models import DayPayroll, PeriodReport, ShiftInput
from nomina.core.time_utils import resolve_shift_interval
from nomina.core.types import EmployeeId


def generate_ical(employee_id: EmployeeId, shifts: Iterable[ShiftInput], report: PeriodReport) -> str:
    """
    Genera un iCal con un evento por turno.

    Args:
        employee_id: Employee the period belongs to
        shifts: Shifts of the period
        report: Report of the same period, source of hours and payments

    Returns:
        iCal-formatted string
    """
    tz = ZoneInfo(TIMEZONE)
    days_by_date = {day.date: day for day in report.days}

    cal = Calendar()
    cal.add("prodid", "-//Nomina Quincenal//nomina//")
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("method", "PUBLISH")
    cal.add("x-wr-calname", f"Turnos {employee_id} {report.period.start.isoformat()} - {report.period.end.isoformat()}")
    cal.add("x-wr-timezone", TIMEZONE)

    for shift in sorted(shifts, key=lambda s: s.date):
        cal.add_component(_create_shift_event(employee_id, shift, days_by_date.get(shift.date), tz))

    return cal.to_ical().decode("utf-8")


def _create_shift_event(
    employee_id: EmployeeId,
    shift: ShiftInput,
    day: DayPayroll | None,
    tz: ZoneInfo,
) -> Event:
    """
    Crea un VEVENT para un turno.

    Args:
        employee_id: Employee ID, part of the event UID
        shift: The shift
        day: Its computed payroll, or None when the shift is not in the report
        tz: Local timezone of the shift times
    """
    start, end = resolve_shift_interval(shift)

    event = Event()
    event.add("summary", f"Turno {shift.start_time} - {shift.end_time}")
    event.add("uid", f"{shift.date.isoformat()}_{employee_id}@nomina")
    event.add("dtstart", start.replace(tzinfo=tz))
    event.add("dtend", end.replace(tzinfo=tz))

    description_parts = []
    if shift.include_break and shift.break_start and shift.break_end:
        description_parts.append(f"Descanso: {shift.break_start} - {shift.break_end}")
    if day is not None:
        description_parts.append(f"Horas trabajadas: {day.total_hours:.2f}")
        for category in PAY_CATEGORIES:
            if day.hours[category] > 0:
                description_parts.append(f"{CATEGORY_LABELS[category]}: {day.hours[category]:.2f} h")
        description_parts.append(f"Recargos y extras: ${day.total_payment:,.2f}")
        if day.source == "overridden":
            description_parts.append("Horas editadas manualmente")

    event.add("description", "\n".join(description_parts))
    event.add("dtstamp", datetime.datetime.now(datetime.timezone.utc))

    return event
