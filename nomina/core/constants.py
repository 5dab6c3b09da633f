# nomina/core/constants.py
import enum
from typing import Final


# ==========================
# Categorías de pago
# ==========================


class PayCategory(str, enum.Enum):
    """The eight legally defined hour categories of a shift."""

    ORDINARY_DAY = "ORD"
    NIGHT_SURCHARGE = "RN"
    SUNDAY_HOLIDAY_DAY = "RDD"
    SUNDAY_HOLIDAY_NIGHT = "RDN"
    OVERTIME_DAY = "HED"
    OVERTIME_NIGHT = "HEN"
    OVERTIME_SUNDAY_HOLIDAY_DAY = "HEDD_F"
    OVERTIME_SUNDAY_HOLIDAY_NIGHT = "HEND_F"


#: All categories in display order. Every hours/payment mapping carries all of them.
PAY_CATEGORIES: Final[tuple[PayCategory, ...]] = tuple(PayCategory)

#: Categories paid on top of the base salary (everything except ORD).
PAID_CATEGORIES: Final[tuple[PayCategory, ...]] = tuple(c for c in PayCategory if c is not PayCategory.ORDINARY_DAY)

#: Base bucket chosen by (is_night, is_sunday_or_holiday).
BASE_CATEGORY_BY_FLAGS: Final[dict[tuple[bool, bool], PayCategory]] = {
    (False, False): PayCategory.ORDINARY_DAY,
    (True, False): PayCategory.NIGHT_SURCHARGE,
    (False, True): PayCategory.SUNDAY_HOLIDAY_DAY,
    (True, True): PayCategory.SUNDAY_HOLIDAY_NIGHT,
}

#: Overtime bucket chosen by (is_night, is_sunday_or_holiday).
OVERTIME_CATEGORY_BY_FLAGS: Final[dict[tuple[bool, bool], PayCategory]] = {
    (False, False): PayCategory.OVERTIME_DAY,
    (True, False): PayCategory.OVERTIME_NIGHT,
    (False, True): PayCategory.OVERTIME_SUNDAY_HOLIDAY_DAY,
    (True, True): PayCategory.OVERTIME_SUNDAY_HOLIDAY_NIGHT,
}

#: Spanish labels for exports.
CATEGORY_LABELS: Final[dict[PayCategory, str]] = {
    PayCategory.ORDINARY_DAY: "Ordinaria diurna",
    PayCategory.NIGHT_SURCHARGE: "Recargo nocturno",
    PayCategory.SUNDAY_HOLIDAY_DAY: "Recargo dominical/festivo diurno",
    PayCategory.SUNDAY_HOLIDAY_NIGHT: "Recargo dominical/festivo nocturno",
    PayCategory.OVERTIME_DAY: "Hora extra diurna",
    PayCategory.OVERTIME_NIGHT: "Hora extra nocturna",
    PayCategory.OVERTIME_SUNDAY_HOLIDAY_DAY: "Hora extra dominical/festiva diurna",
    PayCategory.OVERTIME_SUNDAY_HOLIDAY_NIGHT: "Hora extra dominical/festiva nocturna",
}


# ==========================
# Ajustes manuales
# ==========================


class AdjustmentKind(str, enum.Enum):
    """Whether a manual line item adds to or subtracts from the quincena."""

    INCOME = "income"
    DEDUCTION = "deduction"


# ==========================
# Semana / fechas
# ==========================

#: datetime.weekday() value for Sunday (0 = Monday).
SUNDAY_WEEKDAY: Final[int] = 6

#: Number of seconds per hour. Used when converting deltas to hours.
SECONDS_PER_HOUR: Final[int] = 3600

#: Tolerance when comparing float hour sums.
HOURS_EPSILON: Final[float] = 1e-9
