from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.platform.types import UtilsUUID7
from src.service.chat.domain.entity.message_entity import Message, MessageType


class SendMessageRequest(BaseModel):
    receiver_id: UtilsUUID7
    message: str
    message_type: MessageType = MessageType.TEXT

    class Config:
        json_schema_extra = {
            'example': {
                'receiver_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'message': 'I will be at the pickup point in 5 minutes',
                'message_type': 'text',
            }
        }


class MessageResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': '01936d8f-5e73-7c4e-a9c5-123456789abc',  # UUID7
                'trip_id': '01936d8f-1111-7c4e-a9c5-123456789abc',
                'sender_id': '01936d8f-2222-7c4e-a9c5-123456789abc',
                'receiver_id': '01936d8f-3333-7c4e-a9c5-123456789abc',
                'message': 'I will be at the pickup point in 5 minutes',
                'message_type': 'text',
                'is_read': False,
                'read_at': None,
                'created_at': '2025-01-10T10:30:00Z',
            }
        },
    }

    id: UtilsUUID7
    trip_id: UtilsUUID7
    sender_id: UtilsUUID7
    receiver_id: UtilsUUID7
    message: str
    message_type: str
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_message(cls, message: Message) -> 'MessageResponse':
        return cls(
            id=message.id,
            trip_id=message.trip_id,
            sender_id=message.sender_id,
            receiver_id=message.receiver_id,
            message=message.text,
            message_type=message.message_type.value,
            is_read=message.is_read,
            read_at=message.read_at,
            created_at=message.created_at,
        )


class UnreadCountResponse(BaseModel):
    trip_id: UtilsUUID7
    unread_count: int


class PresenceResponse(BaseModel):
    trip_id: UtilsUUID7
    user_id: UtilsUUID7
    online: bool
