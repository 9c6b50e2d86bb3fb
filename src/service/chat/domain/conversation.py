"""
Participant-side view of a trip conversation.

Entries are kept in a map keyed by message id, or by a temporary id while a send is
still in flight. That key is what makes reconciliation idempotent:

- a message echoed by the send response and again by the live channel is stored once
- a confirmed send replaces its temporary entry under the same slot
- a failed send removes its temporary entry, leaving no phantom behind
"""

from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, List, Optional, Union

import attrs
from uuid_utils import UUID

from src.service.chat.domain.entity.message_entity import Message, MessageType


TEMP_ID_PREFIX = 'temp-'


@attrs.define(frozen=True)
class PendingMessage:
    """Optimistic local echo of a message that has not been confirmed yet"""

    temp_id: str
    trip_id: UUID
    sender_id: UUID
    receiver_id: UUID
    text: str
    created_at: datetime
    message_type: MessageType = MessageType.TEXT


ConversationEntry = Union[Message, PendingMessage]


@attrs.define(frozen=True)
class DayGroup:
    day: date
    label: str
    messages: List[ConversationEntry]


def entry_key(entry: ConversationEntry) -> str:
    return entry.temp_id if isinstance(entry, PendingMessage) else str(entry.id)


class Conversation:
    def __init__(self) -> None:
        self._entries: Dict[str, ConversationEntry] = {}
        # insertion sequence breaks created_at ties deterministically
        self._sequence: Dict[str, int] = {}
        self._next_sequence = 0

    def _put(self, key: str, entry: ConversationEntry) -> None:
        if key not in self._sequence:
            self._sequence[key] = self._next_sequence
            self._next_sequence += 1
        self._entries[key] = entry

    def _remove(self, key: str) -> None:
        self._entries.pop(key, None)
        self._sequence.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return str(key) in self._entries

    def get(self, key: Union[str, UUID]) -> Optional[ConversationEntry]:
        return self._entries.get(str(key))

    def load(self, messages: List[Message]) -> None:
        """Replace confirmed history, keeping sends that are still in flight"""
        pending = self.pending()
        self._entries.clear()
        self._sequence.clear()
        for message in messages:
            self._put(str(message.id), message)
        for entry in pending:
            self._put(entry.temp_id, entry)

    def add_pending(self, pending: PendingMessage) -> None:
        self._put(pending.temp_id, pending)

    def confirm(self, temp_id: str, message: Message) -> None:
        key = str(message.id)
        if self.get(key) is not None:
            # The live channel delivered the row first and may already hold its receipt
            self._remove(temp_id)
            return

        if temp_id in self._entries:
            # Same slot, same position
            self._sequence[key] = self._sequence.pop(temp_id)
            del self._entries[temp_id]
        self._put(key, message)

    def discard(self, temp_id: str) -> None:
        self._remove(temp_id)

    def apply_insert(self, message: Message) -> bool:
        """Returns False when the message is already known"""
        key = str(message.id)
        if key in self._entries:
            return False
        self._put(key, message)
        return True

    def apply_update(self, message: Message) -> None:
        self._put(str(message.id), message)

    def messages(self) -> List[ConversationEntry]:
        return sorted(
            self._entries.values(),
            key=lambda e: (e.created_at, self._sequence[entry_key(e)]),
        )

    def pending(self) -> List[PendingMessage]:
        return [e for e in self.messages() if isinstance(e, PendingMessage)]


def day_label(day: date, today: date) -> str:
    if day == today:
        return 'Today'
    if day == today - timedelta(days=1):
        return 'Yesterday'
    return day.strftime('%A, %d %B %Y')


def group_by_day(
    messages: List[ConversationEntry], *, tz: tzinfo, today: Optional[date] = None
) -> List[DayGroup]:
    """Group ordered messages by their calendar date in the viewer's timezone"""
    today = today or datetime.now(tz).date()
    groups: List[DayGroup] = []
    for message in messages:
        day = message.created_at.astimezone(tz).date()  # type: ignore[union-attr]
        if not groups or groups[-1].day != day:
            groups.append(DayGroup(day=day, label=day_label(day, today), messages=[]))
        groups[-1].messages.append(message)
    return groups
