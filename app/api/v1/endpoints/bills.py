from typing import Any, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.core.exceptions import NotFoundError
from app.models.enums import BillStatus, ConnectionType
from app.models.user import User
from app.schemas.billing import BillCreate, BillFilters, BillResponse, BillStats
from app.schemas.payment import CheckoutSession, PayerDetails, PaymentOutcome
from app.schemas.responses import SuccessResponse
from app.services.bill_service import BillService
from app.services.payment_service import PaymentService

router = APIRouter()


@router.post("", response_model=SuccessResponse[BillResponse])
async def generate_bill(
    bill_in: BillCreate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Generate a bill from the form input. The amount comes from the tariff slabs.
    """
    bill = await BillService.generate_bill(
        db,
        owner_id=current_user.id,
        consumer_name=bill_in.consumer_name,
        meter_number=bill_in.meter_number,
        connection_type=bill_in.connection_type,
        units=bill_in.units_consumed,
    )
    return SuccessResponse(data=bill, message="Bill generated successfully")


@router.get("", response_model=SuccessResponse[List[BillResponse]])
async def list_bills(
    search: Optional[str] = Query(None, description="Consumer name or meter number contains"),
    status: Optional[BillStatus] = Query(None),
    connection_type: Optional[ConnectionType] = Query(None),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Bill history, newest first.
    """
    filters = BillFilters(search=search, status=status, connection_type=connection_type)
    bills = await BillService.list_bills(db, current_user.id, filters)
    return SuccessResponse(data=bills)


@router.get("/stats", response_model=SuccessResponse[BillStats])
async def get_bill_stats(
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Dashboard counters: total, paid, unpaid and total amount.
    """
    stats = await BillService.get_stats(db, current_user.id)
    return SuccessResponse(data=stats)


@router.get("/search", response_model=SuccessResponse[List[BillResponse]])
async def search_by_meter(
    meter_number: str = Query("", description="Exact meter number"),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    All bills for one meter, newest first.
    """
    bills = await BillService.find_by_meter(db, current_user.id, meter_number)
    message = "Operation successful" if bills else "No bills found for this meter number"
    return SuccessResponse(data=bills, message=message)


@router.get("/{bill_id}", response_model=SuccessResponse[BillResponse])
async def get_bill(
    bill_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    bill = await BillService.get_bill(db, current_user.id, bill_id)
    if not bill:
        raise NotFoundError("Bill", bill_id)
    return SuccessResponse(data=bill)


@router.post("/{bill_id}/mark-paid", response_model=SuccessResponse[BillResponse])
async def mark_bill_paid(
    bill_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Manual override from the history view. Safe to repeat.
    """
    bill = await BillService.mark_paid(db, current_user.id, bill_id)
    return SuccessResponse(data=bill, message="Bill marked as paid")


@router.delete("/{bill_id}", response_model=SuccessResponse)
async def delete_bill(
    bill_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    await BillService.delete_bill(db, current_user.id, bill_id)
    return SuccessResponse(message="Bill deleted successfully")


@router.post("/{bill_id}/payment/order", response_model=SuccessResponse[CheckoutSession])
async def create_payment_order(
    bill_id: UUID,
    payer: PayerDetails,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
    gateway: deps.RazorpayGateway = Depends(deps.get_payment_gateway),
) -> Any:
    """
    Create a gateway order and return the options for the checkout widget.
    """
    session = await PaymentService.start_checkout(db, gateway, current_user.id, bill_id, payer)
    return SuccessResponse(data=session)


@router.post("/{bill_id}/payment/complete", response_model=SuccessResponse[BillResponse])
async def complete_payment(
    bill_id: UUID,
    outcome: PaymentOutcome,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
    gateway: deps.RazorpayGateway = Depends(deps.get_payment_gateway),
) -> Any:
    """
    Report the checkout widget's result. Success marks the bill as paid.
    """
    bill = await PaymentService.complete_payment(db, gateway, current_user.id, bill_id, outcome)
    return SuccessResponse(data=bill, message="Payment completed successfully")
