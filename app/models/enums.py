"""Centralized Enum Definitions"""

import enum
from typing import List, Type


class ConnectionType(str, enum.Enum):
    """Electricity connection categories, each with its own tariff"""
    DOMESTIC = "domestic"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"


class BillStatus(str, enum.Enum):
    """Bill payment status (labels match what the dashboard renders)"""
    NOT_PAID = "Not Paid"
    PAID = "Paid"


def enum_values(enum_cls: Type[enum.Enum]) -> List[str]:
    """Persist enum values instead of member names."""
    return [member.value for member in enum_cls]
