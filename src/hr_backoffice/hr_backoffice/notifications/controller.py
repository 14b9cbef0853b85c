from __future__ import annotations

from flask import Flask

from ..common.web import current_actor, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/notifications", methods=["GET"], endpoint="notifications")
    @login_required
    def notifications():
        rows = container.notification_service.list_unseen(recipient_id=current_actor().identity_id)
        return ok([n.as_dict() for n in rows], count=len(rows))

    @app.route("/notifications/seen/<int:notification_id>", methods=["PUT"], endpoint="notification_seen")
    @login_required
    def notification_seen(notification_id: int):
        container.notification_service.mark_seen(
            notification_id=notification_id,
            recipient_id=current_actor().identity_id,
        )
        return ok(message="Notification marked as seen")
