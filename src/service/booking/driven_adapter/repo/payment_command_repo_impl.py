from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import delete, update
from uuid_utils import UUID

from src.platform.database.base_repo import BaseSqlRepo
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_payment_command_repo import IPaymentCommandRepo
from src.service.booking.domain.entity.booking_entity import PaymentStatus
from src.service.booking.domain.entity.payment_entity import Payment
from src.service.booking.driven_adapter.model.payment_model import PaymentModel


class PaymentCommandRepoImpl(BaseSqlRepo, IPaymentCommandRepo):
    @Logger.io
    async def create(self, *, payment: Payment) -> Payment:
        async with self._get_session() as session:
            session.add(
                PaymentModel(
                    id=payment.id,
                    booking_id=payment.booking_id,
                    amount=payment.amount,
                    booking_fee=payment.booking_fee,
                    total_amount=payment.total_amount,
                    currency=payment.currency,
                    status=payment.status.value,
                    transaction_id=payment.transaction_id,
                    payment_method_id=payment.payment_method_id,
                    paid_at=payment.paid_at,
                )
            )
            await session.commit()
            return payment

    @Logger.io
    async def delete_by_booking_id(self, *, booking_id: UUID) -> None:
        async with self._get_session() as session:
            await session.execute(delete(PaymentModel).where(PaymentModel.booking_id == booking_id))
            await session.commit()

    @Logger.io
    async def mark_refunded(self, *, booking_id: UUID, refund_amount: Decimal) -> bool:
        async with self._get_session() as session:
            result = await session.execute(
                update(PaymentModel)
                .where(PaymentModel.booking_id == booking_id)
                .values(
                    status=PaymentStatus.REFUNDED.value,
                    refund_amount=refund_amount,
                    refunded_at=datetime.now(timezone.utc),
                )
                .execution_options(synchronize_session=False)
            )
            await session.commit()
            return result.rowcount == 1  # type: ignore[attr-defined]
