from datetime import datetime
from enum import StrEnum
from typing import Any, Dict, Optional

import attrs
from uuid_utils import UUID


class NotificationType(StrEnum):
    BOOKING_CONFIRMATION = 'booking_confirmation'
    NEW_BOOKING = 'new_booking'
    BOOKING_CANCELLED = 'booking_cancelled'


@attrs.define(frozen=True)
class Notification:
    """Write-once user notification. Rendering/push transport happens downstream."""

    user_id: UUID
    title: str
    body: str
    type: NotificationType
    data: Dict[str, Any] = attrs.field(factory=dict)
    action_url: Optional[str] = None
    id: Optional[UUID] = None
    created_at: Optional[datetime] = None
