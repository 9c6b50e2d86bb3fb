from enum import StrEnum
from typing import Any, Dict

from src.service.chat.domain.entity.message_entity import Message


class ChannelEventType(StrEnum):
    INSERT = 'INSERT'
    UPDATE = 'UPDATE'


def insert_event(message: Message) -> Dict[str, Any]:
    return {'type': ChannelEventType.INSERT.value, 'message': message.to_payload()}


def update_event(message: Message) -> Dict[str, Any]:
    return {'type': ChannelEventType.UPDATE.value, 'message': message.to_payload()}
