"""Bill Service - bill lifecycle on top of the tariff calculator"""

import logging
import re
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.database import store_errors
from app.models.billing import MAX_UNITS_CONSUMED, Bill
from app.models.enums import BillStatus, ConnectionType
from app.schemas.billing import BillFilters, BillStats
from app.services.tariff_service import compute_amount
from app.utils.time import get_utc_now

logger = logging.getLogger(__name__)

_UNITS_PATTERN = re.compile(r"^\d+$")


def _required_text(field: str, value: Any, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, f"{label} is required")
    return value.strip()


def _parse_units(value: Any) -> int:
    # bool is an int subclass; floats are rejected even when whole
    if isinstance(value, bool):
        raise ValidationError("units_consumed", "Units consumed must be a non-negative whole number")
    if isinstance(value, int):
        units = value
    elif isinstance(value, str) and _UNITS_PATTERN.match(value.strip()):
        digits = value.strip().lstrip("0") or "0"
        # int() refuses very long digit strings; anything this long is over the ceiling anyway
        if len(digits) > len(str(MAX_UNITS_CONSUMED)):
            raise ValidationError("units_consumed", f"Units consumed must not exceed {MAX_UNITS_CONSUMED}")
        units = int(digits)
    elif value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("units_consumed", "Units consumed is required")
    else:
        raise ValidationError("units_consumed", "Units consumed must be a non-negative whole number")
    if units < 0:
        raise ValidationError("units_consumed", "Units consumed must be a non-negative whole number")
    if units > MAX_UNITS_CONSUMED:
        raise ValidationError("units_consumed", f"Units consumed must not exceed {MAX_UNITS_CONSUMED}")
    return units


class BillService:
    """Service layer for bill generation, listing and status changes"""

    @staticmethod
    def validate_bill_input(
        consumer_name: Any,
        meter_number: Any,
        connection_type: Any,
        units: Any,
    ) -> Tuple[str, str, ConnectionType, int]:
        """
        Validate raw form input.

        Returns:
            (consumer_name, meter_number, connection_type, units), trimmed and typed

        Raises:
            ValidationError: on the first invalid field
        """
        name = _required_text("consumer_name", consumer_name, "Consumer name")
        meter = _required_text("meter_number", meter_number, "Meter number")

        if isinstance(connection_type, ConnectionType):
            conn_type = connection_type
        else:
            raw_type = _required_text("connection_type", connection_type, "Connection type")
            try:
                conn_type = ConnectionType(raw_type.lower())
            except ValueError:
                allowed = ", ".join(t.value for t in ConnectionType)
                raise ValidationError("connection_type", f"Connection type must be one of: {allowed}")

        return name, meter, conn_type, _parse_units(units)

    @staticmethod
    async def generate_bill(
        db: AsyncSession,
        owner_id: UUID,
        consumer_name: Any,
        meter_number: Any,
        connection_type: Any,
        units: Any,
    ) -> Bill:
        """
        Validate input, price it and persist a new unpaid bill.

        Nothing touches the session until validation has passed.
        """
        name, meter, conn_type, units_consumed = BillService.validate_bill_input(
            consumer_name, meter_number, connection_type, units
        )
        amount = compute_amount(units_consumed, conn_type)

        bill = Bill(
            owner_id=owner_id,
            consumer_name=name,
            meter_number=meter,
            connection_type=conn_type,
            units_consumed=units_consumed,
            amount=amount,
            status=BillStatus.NOT_PAID,
        )
        with store_errors():
            db.add(bill)
            await db.commit()
            await db.refresh(bill)

        logger.info(
            "Bill %s generated for owner %s: %s units (%s) = %s",
            bill.bill_id, owner_id, units_consumed, conn_type.value, amount,
        )
        return bill

    @staticmethod
    async def get_bill(db: AsyncSession, owner_id: UUID, bill_id: UUID) -> Optional[Bill]:
        """Get a bill by ID, scoped to its owner."""
        with store_errors():
            result = await db.execute(
                select(Bill).where(Bill.bill_id == bill_id, Bill.owner_id == owner_id)
            )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_bills(
        db: AsyncSession,
        owner_id: UUID,
        filters: Optional[BillFilters] = None,
    ) -> List[Bill]:
        """Owner's bills, newest first, narrowed by any supplied filters."""
        stmt = select(Bill).where(Bill.owner_id == owner_id)

        if filters is not None:
            search = (filters.search or "").strip().lower()
            if search:
                stmt = stmt.where(
                    or_(
                        func.lower(Bill.consumer_name).contains(search, autoescape=True),
                        func.lower(Bill.meter_number).contains(search, autoescape=True),
                    )
                )
            if filters.status is not None:
                stmt = stmt.where(Bill.status == filters.status)
            if filters.connection_type is not None:
                stmt = stmt.where(Bill.connection_type == filters.connection_type)

        stmt = stmt.order_by(Bill.created_at.desc(), Bill.bill_id.desc())
        with store_errors():
            result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def find_by_meter(db: AsyncSession, owner_id: UUID, meter_number: Any) -> List[Bill]:
        """Exact meter-number lookup within the owner's bills, newest first."""
        meter = _required_text("meter_number", meter_number, "Meter number")
        with store_errors():
            result = await db.execute(
                select(Bill)
                .where(Bill.owner_id == owner_id, Bill.meter_number == meter)
                .order_by(Bill.created_at.desc(), Bill.bill_id.desc())
            )
        return list(result.scalars().all())

    @staticmethod
    async def mark_paid(db: AsyncSession, owner_id: UUID, bill_id: UUID) -> Bill:
        """
        Set a bill's status to Paid.

        Idempotent: a bill that is already paid is returned untouched.

        Raises:
            NotFoundError: bill missing or owned by someone else
        """
        bill = await BillService.get_bill(db, owner_id, bill_id)
        if not bill:
            raise NotFoundError("Bill", bill_id)

        if bill.is_paid:
            logger.info("Bill %s already paid; nothing to do", bill_id)
            return bill

        bill.status = BillStatus.PAID
        bill.updated_at = get_utc_now()
        with store_errors():
            await db.commit()
            await db.refresh(bill)

        logger.info("Bill %s marked as paid", bill_id)
        return bill

    @staticmethod
    async def delete_bill(db: AsyncSession, owner_id: UUID, bill_id: UUID) -> None:
        """
        Permanently remove a bill.

        Raises:
            NotFoundError: bill missing or owned by someone else
        """
        bill = await BillService.get_bill(db, owner_id, bill_id)
        if not bill:
            raise NotFoundError("Bill", bill_id)

        with store_errors():
            await db.delete(bill)
            await db.commit()

        logger.info("Bill %s deleted by owner %s", bill_id, owner_id)

    @staticmethod
    def summarize(bills: Iterable[Bill]) -> BillStats:
        """Dashboard counters over an already fetched list of bills."""
        total = paid = 0
        total_amount = Decimal("0.00")
        for bill in bills:
            total += 1
            if bill.is_paid:
                paid += 1
            total_amount += Decimal(bill.amount)
        return BillStats(
            total_bills=total,
            paid_bills=paid,
            unpaid_bills=total - paid,
            total_amount=total_amount,
        )

    @staticmethod
    async def get_stats(db: AsyncSession, owner_id: UUID) -> BillStats:
        """Stats computed from the owner's full, unfiltered bill list."""
        bills = await BillService.list_bills(db, owner_id)
        return BillService.summarize(bills)
