"""
CSV export of period reports.

Every value comes from a PeriodReport; nothing is recomputed here.
"""

import csv
import io
from collections.abc import Iterable

from nomina.core.models import PeriodReport
from nomina.core.types import EmployeeId

CSV_COLUMNS: tuple[str, ...] = (
    "employee_id",
    "period_start",
    "period_end",
    "base_salary",
    "surcharge_overtime_pay",
    "transport_allowance",
    "other_income",
    "gross_earnings",
    "health_deduction",
    "pension_deduction",
    "other_deductions",
    "net_pay",
    "total_hours",
)


def report_row(employee_id: EmployeeId, report: PeriodReport) -> dict[str, str]:
    """Flatten one report into a CSV row (amounts with two decimals)."""
    summary = report.summary
    financials = report.financials

    return {
        "employee_id": employee_id,
        "period_start": report.period.start.isoformat(),
        "period_end": report.period.end.isoformat(),
        "base_salary": f"{summary.base_salary:.2f}",
        "surcharge_overtime_pay": f"{summary.total_surcharge_overtime_pay:.2f}",
        "transport_allowance": f"{financials.transport_allowance:.2f}",
        "other_income": f"{financials.total_other_income:.2f}",
        "gross_earnings": f"{financials.gross_earnings:.2f}",
        "health_deduction": f"{financials.health_deduction:.2f}",
        "pension_deduction": f"{financials.pension_deduction:.2f}",
        "other_deductions": f"{financials.total_other_deductions:.2f}",
        "net_pay": f"{financials.net_pay:.2f}",
        "total_hours": f"{summary.total_worked_hours:.2f}",
    }


def reports_to_csv(rows: Iterable[tuple[EmployeeId, PeriodReport]]) -> str:
    """
    Write one row per (employee_id, report) pair.

    Args:
        rows: Pairs in the order they should appear

    Returns:
        CSV text with header
    """
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for employee_id, report in rows:
        writer.writerow(report_row(employee_id, report))
    return buffer.getvalue()


def report_to_csv(employee_id: EmployeeId, report: PeriodReport) -> str:
    return reports_to_csv([(employee_id, report)])
