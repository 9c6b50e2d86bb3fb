from typing import List, Optional

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.booking.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.app.query.get_booking_use_case import GetBookingUseCase
from src.service.booking.app.query.list_bookings_use_case import ListBookingsUseCase
from src.service.booking.app.query.preview_refund_use_case import PreviewRefundUseCase
from src.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    BookingCreatedResponse,
    BookingCreateRequest,
    BookingResponse,
    CancelBookingRequest,
    RefundCalculationResponse,
)
from src.service.shared_kernel.driving_adapter.http_controller.auth.current_user import (
    get_current_user,
)
from src.service.shared_kernel.driving_adapter.http_controller.auth.jwt_auth import (
    CurrentUserInfo,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_booking(
    request: BookingCreateRequest,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: CreateBookingUseCase = Depends(CreateBookingUseCase.depends),
) -> BookingCreatedResponse:
    with tracer.start_as_current_span('controller.create_booking') as span:
        span.set_attribute('trip.id', str(request.trip_id))
        span.set_attribute('passenger.id', str(current_user.user_id))
        span.set_attribute('seats.requested', request.seats_count)

        result = await use_case.create_booking(
            trip_id=request.trip_id,
            passenger_id=current_user.user_id,
            passenger_name=current_user.name,
            seats_count=request.seats_count,
            pickup_location=request.pickup_location,
            dropoff_location=request.dropoff_location,
            payment_method_id=request.payment_method_id,
        )

        span.set_attribute('booking.id', str(result.booking.id))
        return BookingCreatedResponse.from_result(result)


@router.get('/my_booking', response_model=List[BookingResponse])
@Logger.io
async def list_my_bookings(
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: ListBookingsUseCase = Depends(ListBookingsUseCase.depends),
) -> List[BookingResponse]:
    bookings = await use_case.list_passenger_bookings(passenger_id=current_user.user_id)
    return [BookingResponse.from_booking(b) for b in bookings]


@router.get('/trip/{trip_id}', response_model=List[BookingResponse])
@Logger.io
async def list_trip_bookings(
    trip_id: UtilsUUID7,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: ListBookingsUseCase = Depends(ListBookingsUseCase.depends),
) -> List[BookingResponse]:
    """Driver view of every booking on one of their trips"""
    bookings = await use_case.list_trip_bookings(trip_id=trip_id, driver_id=current_user.user_id)
    return [BookingResponse.from_booking(b) for b in bookings]


@router.get('/{booking_id}')
@Logger.io
async def get_booking(
    booking_id: UtilsUUID7,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: GetBookingUseCase = Depends(GetBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.get_booking(booking_id=booking_id, user_id=current_user.user_id)
    return BookingResponse.from_booking(booking)


@router.get('/{booking_id}/refund_preview')
@Logger.io
async def preview_refund(
    booking_id: UtilsUUID7,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: PreviewRefundUseCase = Depends(PreviewRefundUseCase.depends),
) -> Optional[RefundCalculationResponse]:
    refund = await use_case.preview_refund(booking_id=booking_id, user_id=current_user.user_id)
    return RefundCalculationResponse.from_refund(refund) if refund else None


@router.patch('/{booking_id}/cancel', status_code=status.HTTP_200_OK)
@Logger.io
async def cancel_booking(
    booking_id: UtilsUUID7,
    request: CancelBookingRequest,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: CancelBookingUseCase = Depends(CancelBookingUseCase.depends),
) -> RefundCalculationResponse:
    with tracer.start_as_current_span('controller.cancel_booking') as span:
        span.set_attribute('booking.id', str(booking_id))
        refund = await use_case.cancel_booking(
            booking_id=booking_id,
            user_id=current_user.user_id,
            user_name=current_user.name,
            reason=request.reason,
        )
        return RefundCalculationResponse.from_refund(refund)
