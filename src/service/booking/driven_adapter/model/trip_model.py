from datetime import datetime
from decimal import Decimal
import uuid

from sqlalchemy import CheckConstraint, DateTime, Float, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class TripModel(Base):
    __tablename__ = 'trip'
    __table_args__ = (
        CheckConstraint(
            'available_seats >= 0 AND available_seats <= total_seats',
            name='ck_trip_available_seats_range',
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)  # UUID7
    driver_id: Mapped[uuid.UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False, index=True)
    departure_location: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    arrival_location: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    departure_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    price_per_seat: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    toll_charges: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    total_seats: Mapped[int] = mapped_column(Integer, nullable=False)
    available_seats: Mapped[int] = mapped_column(Integer, nullable=False)
    booking_deadline_hours: Mapped[float] = mapped_column(Float, nullable=False, default=2)
    status: Mapped[str] = mapped_column(String(20), default='scheduled', nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
