from uuid_utils import UUID

from src.service.chat.domain.entity.message_entity import Message, MessageType
from src.service.chat.driven_adapter.model.message_model import MessageModel


def to_entity(db_message: MessageModel) -> Message:
    return Message(
        id=UUID(str(db_message.id)),
        trip_id=UUID(str(db_message.trip_id)),
        sender_id=UUID(str(db_message.sender_id)),
        receiver_id=UUID(str(db_message.receiver_id)),
        text=db_message.message,
        message_type=MessageType(db_message.message_type),
        is_read=db_message.is_read,
        read_at=db_message.read_at,
        created_at=db_message.created_at,
    )
