# nomina/core/config.py

from typing import Final, Dict


# ==========================
# Jornada diurna / nocturna
# ==========================

#: Start of the daytime window. Everything before it (back to day end) is night.
#: Colombian labour code: night work runs from 21:00 to 06:00.
DAY_WINDOW_START: Final[str] = "06:00"

#: End of the daytime window (exclusive).
DAY_WINDOW_END: Final[str] = "21:00"


# ==========================
# Horas extra
# ==========================

#: Ordinary hours per shift before the remainder counts as overtime.
#: Overtime is evaluated per shift, on the chronologically latest hours.
ORDINARY_DAILY_HOURS: Final[float] = 8.0


# ==========================
# Quincena
# ==========================

#: Fixed base salary for one quincena, in COP.
BASE_SALARY_QUINCENAL: Final[float] = 711750

#: Transport allowance (auxilio de transporte) per quincena, in COP.
#: Added to gross earnings but never to the contribution base (IBC).
TRANSPORT_ALLOWANCE_QUINCENAL: Final[float] = 100000

#: Last day of the first quincena of a month.
FIRST_QUINCENA_LAST_DAY: Final[int] = 15


# ==========================
# Deducciones legales
# ==========================

#: Employee health contribution (salud) over the IBC.
HEALTH_RATE: Final[float] = 0.04

#: Employee pension contribution (pensión) over the IBC.
PENSION_RATE: Final[float] = 0.04


# ==========================
# Valores por hora (COP)
# ==========================

#: Default peso-per-hour rate per category code.
#: ORD is covered by the base salary and has no entry here.
DEFAULT_HOURLY_RATES: Final[Dict[str, float]] = {
    "RN": 2166,
    "RDD": 4642,
    "RDN": 6808,
    "HED": 7736.41,
    "HEN": 10830.98,
    "HEDD_F": 12378.26,
    "HEND_F": 15472.83,
}


# ==========================
# Formatos de hora y zona horaria
# ==========================

#: Clock time format for shift and break times (for example "14:00").
TIME_FORMAT_HM: Final[str] = "%H:%M"

#: Regex accepted for clock times before parsing.
TIME_PATTERN_HM: Final[str] = r"^\d{2}:\d{2}$"

#: Local timezone of the shifts, used for calendar export.
TIMEZONE: Final[str] = "America/Bogota"
