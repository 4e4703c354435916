from typing import Any, List

from fastapi import APIRouter

from app.schemas.billing import TariffCard, TariffQuoteRequest, TariffQuoteResponse
from app.schemas.responses import SuccessResponse
from app.services.tariff_service import compute_amount, describe_tariffs, slab_breakdown

router = APIRouter()


@router.get("", response_model=SuccessResponse[List[TariffCard]])
async def get_tariffs() -> Any:
    """
    Rate card shown next to the bill form.
    """
    return SuccessResponse(data=describe_tariffs())


@router.post("/quote", response_model=SuccessResponse[TariffQuoteResponse])
async def quote(quote_in: TariffQuoteRequest) -> Any:
    """
    Preview the amount for a reading without creating a bill.
    """
    return SuccessResponse(
        data=TariffQuoteResponse(
            connection_type=quote_in.connection_type,
            units_consumed=quote_in.units_consumed,
            amount=compute_amount(quote_in.units_consumed, quote_in.connection_type),
            breakdown=slab_breakdown(quote_in.units_consumed, quote_in.connection_type),
        )
    )
