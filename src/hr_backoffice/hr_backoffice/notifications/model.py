from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import RequestKind


@dataclass(frozen=True)
class Notification:
    notification_id: int
    recipient_id: int
    kind: RequestKind
    message: str
    related_request_id: int
    seen: bool = False
    created_at: Optional[datetime] = None

    def as_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "recipientId": self.recipient_id,
            "type": self.kind.value,
            "message": self.message,
            "relatedRequestId": self.related_request_id,
            "seen": self.seen,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
