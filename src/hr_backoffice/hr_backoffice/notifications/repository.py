from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import RequestKind
from .model import Notification


class NotificationRepository(Protocol):
    def create(self, *, recipient_id: int, kind: RequestKind, message: str, related_request_id: int) -> Notification:
        raise NotImplementedError

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        raise NotImplementedError

    def list_for_recipient(self, recipient_id: int, *, unseen_only: bool = True, limit: int = 500) -> Sequence[Notification]:
        raise NotImplementedError

    def mark_seen(self, notification_id: int) -> bool:
        raise NotImplementedError

    def mark_seen_for_request(self, *, kind: RequestKind, related_request_id: int) -> int:
        """Mark every notification tied to a request as seen; return how many changed."""

        raise NotImplementedError
