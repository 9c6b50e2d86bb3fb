"""Application layer interfaces (Ports)"""

from src.service.chat.app.interface.i_chat_participant_query_repo import (
    IChatParticipantQueryRepo,
)
from src.service.chat.app.interface.i_message_command_repo import IMessageCommandRepo
from src.service.chat.app.interface.i_message_query_repo import IMessageQueryRepo

__all__ = [
    'IChatParticipantQueryRepo',
    'IMessageCommandRepo',
    'IMessageQueryRepo',
]
