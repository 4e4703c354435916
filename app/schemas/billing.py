from typing import Any, Optional, List
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from datetime import datetime
from decimal import Decimal

from app.models.billing import MAX_UNITS_CONSUMED
from app.models.enums import BillStatus, ConnectionType


class BillCreate(BaseModel):
    """
    Bill generation form.

    Fields are deliberately loose; BillService.validate_bill_input owns the
    rules so that every violation is reported against its field.
    """
    consumer_name: Optional[str] = None
    meter_number: Optional[str] = None
    connection_type: Optional[str] = None
    units_consumed: Any = None


class BillResponse(BaseModel):
    bill_id: UUID
    owner_id: UUID
    consumer_name: str
    meter_number: str
    connection_type: ConnectionType
    units_consumed: int
    amount: Decimal
    status: BillStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BillFilters(BaseModel):
    """Optional, composable list filters."""
    search: Optional[str] = Field(None, description="Case-insensitive match on consumer name or meter number")
    status: Optional[BillStatus] = None
    connection_type: Optional[ConnectionType] = None


class BillStats(BaseModel):
    total_bills: int = 0
    paid_bills: int = 0
    unpaid_bills: int = 0
    total_amount: Decimal = Decimal("0.00")


class SlabCharge(BaseModel):
    """Charge for the units that fall inside one tariff slab."""
    lower_bound: int
    upper_bound: Optional[int] = None
    units: int
    rate: Decimal
    charge: Decimal


class TariffSlab(BaseModel):
    lower_bound: int
    upper_bound: Optional[int] = None
    rate: Decimal


class TariffCard(BaseModel):
    connection_type: ConnectionType
    slabs: List[TariffSlab]


class TariffQuoteRequest(BaseModel):
    units_consumed: int = Field(..., ge=0, le=MAX_UNITS_CONSUMED)
    connection_type: ConnectionType


class TariffQuoteResponse(BaseModel):
    connection_type: ConnectionType
    units_consumed: int
    amount: Decimal
    breakdown: List[SlabCharge]
