"""Billing Model"""

import uuid
from sqlalchemy import CheckConstraint, Column, Enum, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.base import TimestampMixin
from app.models.enums import BillStatus, ConnectionType, enum_values

# Fits int4; at the highest slab rate the amount stays within Numeric(12,2)
MAX_UNITS_CONSUMED = 1_000_000_000


class Bill(Base, TimestampMixin):
    """
    Electricity bill for one meter reading.

    amount is computed from (units_consumed, connection_type) when the bill is
    generated and is never recomputed, so later tariff changes leave it as is.
    """
    __tablename__ = "bills"
    __table_args__ = (
        CheckConstraint("units_consumed >= 0", name="ck_bills_units_non_negative"),
        CheckConstraint(f"units_consumed <= {MAX_UNITS_CONSUMED}", name="ck_bills_units_max"),
        CheckConstraint("amount >= 0", name="ck_bills_amount_non_negative"),
    )

    bill_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    consumer_name = Column(String(255), nullable=False)
    meter_number = Column(String(64), nullable=False, index=True)
    connection_type = Column(
        Enum(ConnectionType, name="connection_type", values_callable=enum_values),
        nullable=False,
    )
    units_consumed = Column(Integer, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    status = Column(
        Enum(BillStatus, name="bill_status", values_callable=enum_values),
        default=BillStatus.NOT_PAID,
        nullable=False,
        index=True,
    )

    owner = relationship("User", back_populates="bills")

    @property
    def is_paid(self) -> bool:
        return self.status == BillStatus.PAID

    def __repr__(self) -> str:
        return f"<Bill {self.meter_number} {self.amount} - {self.status}>"
