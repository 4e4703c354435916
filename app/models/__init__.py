"""Models Package - Export all models for easy imports"""

from app.models.base import BaseModel, TimestampMixin
from app.models.enums import BillStatus, ConnectionType
from app.models.user import User
from app.models.billing import Bill


__all__ = [
    # Base classes
    "BaseModel",
    "TimestampMixin",

    # Enums
    "BillStatus",
    "ConnectionType",

    # User
    "User",

    # Billing
    "Bill",
]
