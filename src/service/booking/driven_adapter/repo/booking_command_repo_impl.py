from sqlalchemy import delete, update
from uuid_utils import UUID

from src.platform.database.base_repo import BaseSqlRepo
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.domain.entity.booking_entity import Booking, BookingStatus
from src.service.booking.driven_adapter.model.booking_model import BookingModel


class BookingCommandRepoImpl(BaseSqlRepo, IBookingCommandRepo):
    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        async with self._get_session() as session:
            session.add(
                BookingModel(
                    id=booking.id,
                    trip_id=booking.trip_id,
                    passenger_id=booking.passenger_id,
                    seats_booked=booking.seats_booked,
                    total_amount=booking.total_amount,
                    platform_fee=booking.platform_fee,
                    gst_amount=booking.gst_amount,
                    booking_status=booking.booking_status.value,
                    payment_status=booking.payment_status.value,
                    pickup_location=booking.pickup_location,
                    dropoff_location=booking.dropoff_location,
                    created_at=booking.created_at,
                    updated_at=booking.updated_at,
                )
            )
            await session.commit()
            return booking

    @Logger.io
    async def delete(self, *, booking_id: UUID) -> None:
        async with self._get_session() as session:
            await session.execute(delete(BookingModel).where(BookingModel.id == booking_id))
            await session.commit()

    @Logger.io
    async def cancel(self, *, booking: Booking) -> bool:
        async with self._get_session() as session:
            result = await session.execute(
                update(BookingModel)
                .where(
                    BookingModel.id == booking.id,
                    BookingModel.booking_status == BookingStatus.CONFIRMED.value,
                )
                .values(
                    booking_status=booking.booking_status.value,
                    payment_status=booking.payment_status.value,
                    cancellation_reason=booking.cancellation_reason,
                    cancelled_by=booking.cancelled_by,
                    cancelled_at=booking.cancelled_at,
                    refund_amount=booking.refund_amount,
                    refund_status=booking.refund_status.value if booking.refund_status else None,
                    updated_at=booking.updated_at,
                )
                .execution_options(synchronize_session=False)
            )
            await session.commit()
            return result.rowcount == 1  # type: ignore[attr-defined]
