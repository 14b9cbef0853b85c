from __future__ import annotations

import logging
from typing import Sequence

from ..core.enums import RequestKind, Role
from ..core.exceptions import NotFoundError
from ..users.repository import IdentityRepository
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Persist notification records; delivery is someone else's job."""

    def __init__(self, notifications: NotificationRepository, identities: IdentityRepository):
        self._notifications = notifications
        self._identities = identities

    def notify(self, *, recipient_id: int, kind: RequestKind, message: str, related_request_id: int) -> Notification:
        return self._notifications.create(
            recipient_id=int(recipient_id),
            kind=kind,
            message=message,
            related_request_id=int(related_request_id),
        )

    def notify_role(self, *, role: Role, kind: RequestKind, message: str, related_request_id: int) -> list[Notification]:
        recipients = self._identities.list_by_roles([role], active_only=True)
        if not recipients:
            logger.warning("no active %s identities to notify about %s request %s", role.value, kind.value, related_request_id)
        return [
            self.notify(recipient_id=r.identity_id, kind=kind, message=message, related_request_id=related_request_id)
            for r in recipients
        ]

    def retire_for_request(self, *, kind: RequestKind, related_request_id: int) -> int:
        retired = self._notifications.mark_seen_for_request(kind=kind, related_request_id=int(related_request_id))
        logger.info("retired %d notification(s) for %s request %s", retired, kind.value, related_request_id)
        return retired

    def list_unseen(self, *, recipient_id: int) -> Sequence[Notification]:
        return self._notifications.list_for_recipient(int(recipient_id), unseen_only=True)

    def mark_seen(self, *, notification_id: int, recipient_id: int) -> None:
        n = self._notifications.get_by_id(int(notification_id))
        # Someone else's notification looks the same as a missing one.
        if not n or n.recipient_id != int(recipient_id):
            raise NotFoundError("Notification not found")
        if not n.seen:
            self._notifications.mark_seen(n.notification_id)
