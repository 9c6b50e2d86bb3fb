from datetime import datetime, timezone
from enum import StrEnum
from typing import Any, Dict, Optional

import attrs
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import ValidationError
from src.platform.logging.loguru_io import Logger


class MessageType(StrEnum):
    TEXT = 'text'
    SYSTEM = 'system'
    LOCATION = 'location'
    QUICK_REPLY = 'quick_reply'


def validate_message_text(text: str) -> str:
    text = (text or '').strip()
    if not text:
        raise ValidationError('Message cannot be empty')
    if len(text) > settings.CHAT_MESSAGE_MAX_LENGTH:
        raise ValidationError(
            f'Message cannot exceed {settings.CHAT_MESSAGE_MAX_LENGTH} characters'
        )
    return text


@attrs.define
class Message:
    """
    Persisted chat message. Immutable except for the read receipt.

    `id` and `created_at` are assigned by the server; clients order by created_at.
    """

    id: UUID
    trip_id: UUID
    sender_id: UUID
    receiver_id: UUID
    text: str
    message_type: MessageType = MessageType.TEXT
    is_read: bool = False
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        id: UUID,
        trip_id: UUID,
        sender_id: UUID,
        receiver_id: UUID,
        text: str,
        message_type: MessageType = MessageType.TEXT,
    ) -> 'Message':
        if sender_id == receiver_id:
            raise ValidationError('Cannot send a message to yourself')

        return cls(
            id=id,
            trip_id=trip_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            text=validate_message_text(text),
            message_type=message_type,
            created_at=datetime.now(timezone.utc),
        )

    def mark_read(self, *, now: Optional[datetime] = None) -> 'Message':
        if self.is_read:
            return self
        return attrs.evolve(self, is_read=True, read_at=now or datetime.now(timezone.utc))

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready form used on the live channel and SSE stream"""
        return {
            'id': str(self.id),
            'trip_id': str(self.trip_id),
            'sender_id': str(self.sender_id),
            'receiver_id': str(self.receiver_id),
            'text': self.text,
            'message_type': self.message_type.value,
            'is_read': self.is_read,
            'read_at': self.read_at.isoformat() if self.read_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'Message':
        read_at = payload.get('read_at')
        created_at = payload.get('created_at')
        return cls(
            id=UUID(payload['id']),
            trip_id=UUID(payload['trip_id']),
            sender_id=UUID(payload['sender_id']),
            receiver_id=UUID(payload['receiver_id']),
            text=payload['text'],
            message_type=MessageType(payload.get('message_type', MessageType.TEXT)),
            is_read=bool(payload.get('is_read', False)),
            read_at=datetime.fromisoformat(read_at) if read_at else None,
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )
