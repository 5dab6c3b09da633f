# nomina/core/types.py

"""
Type aliases for the payroll engine.

NewType wrappers keep similar primitives apart (an employee id is not free text).
"""

from collections.abc import Mapping
from typing import NewType

from nomina.core.constants import PayCategory

EmployeeId = NewType("EmployeeId", str)

# Type aliases for common structures
Hours = float
MonetaryAmount = float
HoursByCategory = dict[PayCategory, Hours]
PaymentByCategory = dict[PayCategory, MonetaryAmount]
HoursMapping = Mapping[PayCategory, Hours]
