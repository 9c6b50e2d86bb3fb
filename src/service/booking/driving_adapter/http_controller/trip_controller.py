from fastapi import APIRouter, Depends, Query

from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.booking.app.query.calculate_price_use_case import CalculatePriceUseCase
from src.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    PriceBreakdownResponse,
)


router = APIRouter()


@router.get('/{trip_id}/price')
@Logger.io
async def get_trip_price(
    trip_id: UtilsUUID7,
    seats_count: int = Query(1),
    use_case: CalculatePriceUseCase = Depends(CalculatePriceUseCase.depends),
) -> PriceBreakdownResponse:
    """Price quote; nothing is reserved"""
    price = await use_case.calculate_price(trip_id=trip_id, seats_count=seats_count)
    return PriceBreakdownResponse.from_price(price)
