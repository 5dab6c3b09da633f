"""Ajustes manuales, deducciones legales y neto a pagar."""

import logging
import math
from collections.abc import Iterable
from numbers import Real
from typing import Any

from nomina.core.errors import InvalidAdjustment
from nomina.core.models import Adjustment, PayrollSettings, PeriodFinancials, QuincenalSummary

logger = logging.getLogger(__name__)


def validate_adjustment(adjustment: Adjustment) -> Adjustment:
    """
    Reject adjustments whose amount is not a positive finite number.

    Called at the boundary (API, persistence loaders) before anything reaches
    compute_period_financials.

    Raises:
        InvalidAdjustment: Amount is zero, negative, NaN or infinite
    """
    amount = adjustment.amount
    if isinstance(amount, bool) or not isinstance(amount, Real) or not math.isfinite(amount) or amount <= 0:
        raise InvalidAdjustment(f"Adjustment amount must be a positive number, got {amount!r}")
    return adjustment


def build_adjustment(amount: Any, description: str | None = None, adjustment_id: str | None = None) -> Adjustment:
    """Create a validated Adjustment."""
    if isinstance(amount, bool) or not isinstance(amount, Real):
        raise InvalidAdjustment(f"Adjustment amount must be a number, got {amount!r}")

    fields: dict[str, Any] = {"amount": float(amount), "description": description}
    if adjustment_id is not None:
        fields["id"] = adjustment_id
    return validate_adjustment(Adjustment(**fields))


def compute_period_financials(
    summary: QuincenalSummary,
    transport_enabled: bool,
    incomes: Iterable[Adjustment],
    deductions: Iterable[Adjustment],
    settings: PayrollSettings,
) -> PeriodFinancials:
    """
    Calcula devengado, deducciones legales y neto de una quincena.

    The contribution base (IBC) is gross base plus extras plus other income.
    The transport allowance is added to gross earnings only and is never
    part of the IBC.

    Args:
        summary: Aggregated quincena
        transport_enabled: Whether the transport allowance applies
        incomes: Validated manual income items
        deductions: Validated manual deduction items
        settings: Transport amount and health/pension rates

    Returns:
        PeriodFinancials
    """
    transport_allowance = settings.transport_allowance if transport_enabled else 0.0
    total_other_income = math.fsum(item.amount for item in incomes)
    total_other_deductions = math.fsum(item.amount for item in deductions)

    gross_earnings = summary.gross_base_plus_extras + transport_allowance + total_other_income
    contribution_base = summary.gross_base_plus_extras + total_other_income

    health_deduction = contribution_base * settings.health_rate
    pension_deduction = contribution_base * settings.pension_rate

    net_before_manual_deductions = gross_earnings - health_deduction - pension_deduction
    net_pay = net_before_manual_deductions - total_other_deductions

    if net_pay < 0:
        logger.warning("Net pay is negative (%.2f); manual deductions exceed earnings", net_pay)

    return PeriodFinancials(
        transport_allowance=transport_allowance,
        total_other_income=total_other_income,
        total_other_deductions=total_other_deductions,
        gross_earnings=gross_earnings,
        contribution_base=contribution_base,
        health_deduction=health_deduction,
        pension_deduction=pension_deduction,
        total_legal_deductions=health_deduction + pension_deduction,
        net_before_manual_deductions=net_before_manual_deductions,
        net_pay=net_pay,
    )
