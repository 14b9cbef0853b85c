from __future__ import annotations

from flask import Flask

from ..common.web import current_actor, json_body, login_required, ok, roles_required
from ..core.enums import ApprovalStage, RequestKind, Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    _register_kind(app, container, RequestKind.LEAVE, "leave")
    _register_kind(app, container, RequestKind.ADVANCE, "advance")


def _register_kind(app: Flask, container: Container, kind: RequestKind, prefix: str) -> None:
    """Leave and advance share one route layout; only the apply payload differs."""

    service = container.request_service

    def apply():
        actor = current_actor()
        data = json_body()
        if kind == RequestKind.LEAVE:
            created = service.submit_leave(
                current_role=actor.role,
                actor_id=actor.identity_id,
                from_date=data.get("fromDate"),
                to_date=data.get("toDate"),
                reason=data.get("reason"),
            )
        else:
            created = service.submit_advance(
                current_role=actor.role,
                actor_id=actor.identity_id,
                amount=data.get("amount"),
                reason=data.get("reason"),
            )
        return ok(created.as_dict(), 201)

    def decider(stage: ApprovalStage):
        def decide(request_id: int):
            actor = current_actor()
            data = json_body()
            updated = service.decide(
                kind=kind,
                request_id=request_id,
                stage=stage,
                current_role=actor.role,
                actor_id=actor.identity_id,
                decision=data.get("status"),
                comments=data.get("comments"),
                modified_amount=data.get("modifiedAmount"),
            )
            return ok(updated.as_dict())

        return decide

    def queue(stage: ApprovalStage):
        def view():
            actor = current_actor()
            rows = service.list_queue(kind=kind, stage=stage, current_role=actor.role, actor_id=actor.identity_id)
            return ok([r.as_dict() for r in rows], count=len(rows))

        return view

    def mine():
        rows = service.list_mine(kind=kind, actor_id=current_actor().identity_id)
        return ok([r.as_dict() for r in rows], count=len(rows))

    def seen(request_id: int):
        actor = current_actor()
        updated = service.mark_seen(kind=kind, request_id=request_id, current_role=actor.role, actor_id=actor.identity_id)
        return ok(updated.as_dict())

    app.add_url_rule(
        f"/{prefix}/apply", f"{prefix}_apply", roles_required(Role.EMPLOYEE)(apply), methods=["POST"]
    )

    for path, stage, role in (
        ("update", ApprovalStage.SUPERVISOR, Role.SUPERVISOR),
        ("hr/update", ApprovalStage.HR, Role.HR),
        ("admin/update", ApprovalStage.ADMIN, Role.ADMIN),
    ):
        app.add_url_rule(
            f"/{prefix}/{path}/<int:request_id>",
            f"{prefix}_{stage.value}_update",
            roles_required(role)(decider(stage)),
            methods=["PUT"],
        )
        app.add_url_rule(
            f"/{prefix}/{stage.value}",
            f"{prefix}_{stage.value}_queue",
            roles_required(role)(queue(stage)),
            methods=["GET"],
        )

    app.add_url_rule(f"/{prefix}/mine", f"{prefix}_mine", login_required(mine), methods=["GET"])
    app.add_url_rule(
        f"/{prefix}/seen/<int:request_id>",
        f"{prefix}_seen",
        roles_required(Role.EMPLOYEE, Role.SUPERVISOR)(seen),
        methods=["PUT"],
    )
