from typing import List, Optional

from sqlalchemy import select
from uuid_utils import UUID

from src.platform.database.base_repo import BaseSqlRepo
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.domain.entity.booking_entity import (
    Booking,
    BookingStatus,
    PaymentStatus,
    RefundStatus,
)
from src.service.booking.driven_adapter.model.booking_model import BookingModel


class BookingQueryRepoImpl(BaseSqlRepo, IBookingQueryRepo):
    @staticmethod
    def _to_entity(db_booking: BookingModel) -> Booking:
        return Booking(
            id=UUID(str(db_booking.id)),
            trip_id=UUID(str(db_booking.trip_id)),
            passenger_id=UUID(str(db_booking.passenger_id)),
            seats_booked=db_booking.seats_booked,
            total_amount=db_booking.total_amount,
            platform_fee=db_booking.platform_fee,
            gst_amount=db_booking.gst_amount,
            booking_status=BookingStatus(db_booking.booking_status),
            payment_status=PaymentStatus(db_booking.payment_status),
            pickup_location=db_booking.pickup_location,
            dropoff_location=db_booking.dropoff_location,
            cancellation_reason=db_booking.cancellation_reason,
            cancelled_by=UUID(str(db_booking.cancelled_by)) if db_booking.cancelled_by else None,
            cancelled_at=db_booking.cancelled_at,
            refund_amount=db_booking.refund_amount,
            refund_status=RefundStatus(db_booking.refund_status)
            if db_booking.refund_status
            else None,
            created_at=db_booking.created_at,
            updated_at=db_booking.updated_at,
        )

    @Logger.io
    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        async with self._get_session() as session:
            result = await session.execute(
                select(BookingModel).where(BookingModel.id == booking_id)
            )
            db_booking = result.scalar_one_or_none()
            return self._to_entity(db_booking) if db_booking else None

    @Logger.io
    async def list_by_passenger(self, *, passenger_id: UUID) -> List[Booking]:
        async with self._get_session() as session:
            result = await session.execute(
                select(BookingModel)
                .where(BookingModel.passenger_id == passenger_id)
                .order_by(BookingModel.created_at.desc())
            )
            return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def list_by_trip(self, *, trip_id: UUID) -> List[Booking]:
        async with self._get_session() as session:
            result = await session.execute(
                select(BookingModel)
                .where(BookingModel.trip_id == trip_id)
                .order_by(BookingModel.created_at)
            )
            return [self._to_entity(row) for row in result.scalars().all()]
