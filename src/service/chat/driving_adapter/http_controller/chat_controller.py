from collections.abc import AsyncIterator
from typing import List

import anyio
from fastapi import APIRouter, Depends, status
import orjson
from sse_starlette.sse import EventSourceResponse

from src.platform.config.di import container
from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.chat.app.command.mark_message_read_use_case import MarkMessageReadUseCase
from src.service.chat.app.command.send_message_use_case import SendMessageUseCase
from src.service.chat.app.query.list_trip_messages_use_case import ListTripMessagesUseCase
from src.service.chat.app.session.trip_chat_session import TripChatSession
from src.service.chat.domain.entity.message_entity import Message
from src.service.chat.driving_adapter.http_controller.schema.chat_schema import (
    MessageResponse,
    PresenceResponse,
    SendMessageRequest,
    UnreadCountResponse,
)
from src.service.shared_kernel.driving_adapter.http_controller.auth.current_user import (
    get_current_user,
)
from src.service.shared_kernel.driving_adapter.http_controller.auth.jwt_auth import (
    CurrentUserInfo,
)


router = APIRouter()


@router.post('/trip/{trip_id}/message', status_code=status.HTTP_201_CREATED)
@Logger.io
async def send_message(
    trip_id: UtilsUUID7,
    request: SendMessageRequest,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: SendMessageUseCase = Depends(SendMessageUseCase.depends),
) -> MessageResponse:
    message = await use_case.send_message(
        trip_id=trip_id,
        sender_id=current_user.user_id,
        receiver_id=request.receiver_id,
        text=request.message,
        message_type=request.message_type,
    )
    return MessageResponse.from_message(message)


@router.get('/trip/{trip_id}/message', response_model=List[MessageResponse])
@Logger.io
async def list_messages(
    trip_id: UtilsUUID7,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: ListTripMessagesUseCase = Depends(ListTripMessagesUseCase.depends),
) -> List[MessageResponse]:
    messages = await use_case.list_messages(trip_id=trip_id, user_id=current_user.user_id)
    return [MessageResponse.from_message(m) for m in messages]


@router.patch('/message/{message_id}/read')
@Logger.io
async def mark_message_read(
    message_id: UtilsUUID7,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: MarkMessageReadUseCase = Depends(MarkMessageReadUseCase.depends),
) -> MessageResponse:
    message = await use_case.mark_as_read(message_id=message_id, reader_id=current_user.user_id)
    return MessageResponse.from_message(message)


@router.get('/trip/{trip_id}/unread')
@Logger.io
async def get_unread_count(
    trip_id: UtilsUUID7,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: ListTripMessagesUseCase = Depends(ListTripMessagesUseCase.depends),
) -> UnreadCountResponse:
    count = await use_case.unread_count(trip_id=trip_id, user_id=current_user.user_id)
    return UnreadCountResponse(trip_id=trip_id, unread_count=count)


@router.get('/trip/{trip_id}/presence/{user_id}')
@Logger.io
async def get_presence(
    trip_id: UtilsUUID7,
    user_id: UtilsUUID7,
    current_user: CurrentUserInfo = Depends(get_current_user),
) -> PresenceResponse:
    broadcaster = container.trip_channel_broadcaster()
    return PresenceResponse(
        trip_id=trip_id,
        user_id=user_id,
        online=broadcaster.is_online(trip_id=trip_id, user_id=user_id),
    )


# ============================ SSE Endpoint ============================


@router.get('/trip/{trip_id}/sse', status_code=status.HTTP_200_OK)
@Logger.io
async def stream_trip_chat(
    trip_id: UtilsUUID7,
    current_user: CurrentUserInfo = Depends(get_current_user),
    send_use_case: SendMessageUseCase = Depends(SendMessageUseCase.depends),
    mark_read_use_case: MarkMessageReadUseCase = Depends(MarkMessageReadUseCase.depends),
    list_use_case: ListTripMessagesUseCase = Depends(ListTripMessagesUseCase.depends),
) -> EventSourceResponse:
    """
    SSE stream of one participant's trip conversation

    Flow:
    1. Client connects -> session subscribes to the trip channel and loads history
    2. `history` event carries the conversation so far (received messages marked read)
    3. `insert` / `update` events follow for new messages and read receipts
    4. Disconnect closes the session, which also ends the participant's presence
    """
    # Non-participants get ForbiddenError before the stream opens
    await list_use_case.unread_count(trip_id=trip_id, user_id=current_user.user_id)

    session = TripChatSession(
        trip_id=trip_id,
        user_id=current_user.user_id,
        send_message_use_case=send_use_case,
        mark_message_read_use_case=mark_read_use_case,
        list_trip_messages_use_case=list_use_case,
        broadcaster=container.trip_channel_broadcaster(),
    )
    user_id = current_user.user_id
    Logger.base.info(f'📡 [SSE] Client subscribing to trip={trip_id}, user={user_id}')

    async def event_generator() -> AsyncIterator[dict[str, str]]:
        try:
            async with session:
                history = [m.to_payload() for m in session.messages() if isinstance(m, Message)]
                yield {'event': 'history', 'data': orjson.dumps(history).decode()}

                async for event in session.events():
                    yield {
                        'event': event['type'].lower(),
                        'data': orjson.dumps(event['message']).decode(),
                    }
        except anyio.get_cancelled_exc_class():
            Logger.base.info(f'🔌 [SSE] Client disconnected: trip={trip_id}, user={user_id}')
            raise
        except Exception as e:
            Logger.base.error(
                f'[SSE] Error in generator for trip={trip_id}, user={user_id}: '
                f'{type(e).__name__}: {e}'
            )
            raise

    return EventSourceResponse(event_generator())
