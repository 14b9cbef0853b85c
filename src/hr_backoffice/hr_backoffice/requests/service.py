from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional, Sequence, Union

from ..attendance.repository import AttendanceRepository
from ..attendance.service import AttendanceService, parse_status
from ..common.datetime_utils import format_hhmm, normalize_day, now_local, parse_hhmm
from ..common.validators import require_non_empty, require_positive_amount
from ..core.constants import DEFAULT_QUEUE_LIMIT
from ..core.enums import ApprovalStage, Decision, ModificationStatus, RequestKind, Role
from ..core.exceptions import (
    AlreadyProcessed,
    AuthorizationError,
    InvalidSupervisor,
    NotFoundError,
    ValidationError,
)
from ..notifications.service import NotificationService
from ..users.model import Identity
from ..users.repository import IdentityRepository
from . import workflow
from .model import ApprovalRequest, AttendanceModificationRequest
from .repository import RequestRepository

logger = logging.getLogger(__name__)

DayLike = Union[date, datetime, str]

_OFFICE_ROLES = {Role.ADMIN, Role.HR}


def _clean(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None


class RequestService:
    """Leave and advance requests: submit, decide stage by stage, list queues."""

    def __init__(
        self,
        requests: RequestRepository,
        identities: IdentityRepository,
        notifications: NotificationService,
        *,
        clock: Callable[[], datetime] = now_local,
        queue_limit: int = DEFAULT_QUEUE_LIMIT,
    ):
        self._requests = requests
        self._identities = identities
        self._notifications = notifications
        self._clock = clock
        self._queue_limit = int(queue_limit)

    # ---- submission ----
    def _requester_and_supervisor(self, *, current_role: Role, actor_id: int) -> tuple[Identity, Identity]:
        if current_role != Role.EMPLOYEE:
            raise AuthorizationError("Only employees can submit requests")

        requester = self._identities.get_by_id(int(actor_id))
        if not requester or not requester.is_active:
            raise NotFoundError("Employee not found")
        if requester.supervisor_id is None:
            raise InvalidSupervisor("No supervisor assigned to this employee")

        supervisor = self._identities.get_by_id(requester.supervisor_id)
        if not supervisor or not supervisor.is_active or supervisor.role != Role.SUPERVISOR:
            raise InvalidSupervisor("Assigned supervisor is not an active supervisor")
        return requester, supervisor

    def _announce(self, request: ApprovalRequest, requester: Identity) -> None:
        self._notifications.notify(
            recipient_id=request.supervisor_id,
            kind=request.kind,
            message=f"New {request.kind.value.lower()} request from {requester.name}",
            related_request_id=request.request_id,
        )
        logger.info(
            "%s request %s submitted by employee=%s",
            request.kind.value,
            request.request_id,
            request.employee_id,
        )

    def submit_leave(
        self,
        *,
        current_role: Role,
        actor_id: int,
        from_date: DayLike,
        to_date: DayLike,
        reason: str,
    ) -> ApprovalRequest:
        reason = require_non_empty(reason, "reason")
        if not from_date or not to_date:
            raise ValidationError("fromDate and toDate are required")
        start, end = normalize_day(from_date), normalize_day(to_date)
        if end < start:
            raise ValidationError("toDate must be on or after fromDate")

        requester, supervisor = self._requester_and_supervisor(current_role=current_role, actor_id=actor_id)
        request = self._requests.create_request(
            kind=RequestKind.LEAVE,
            employee_id=requester.identity_id,
            supervisor_id=supervisor.identity_id,
            reason=reason,
            from_date=start,
            to_date=end,
        )
        self._announce(request, requester)
        return request

    def submit_advance(
        self,
        *,
        current_role: Role,
        actor_id: int,
        amount,
        reason: str,
    ) -> ApprovalRequest:
        reason = require_non_empty(reason, "reason")
        value = require_positive_amount(amount, "amount")

        requester, supervisor = self._requester_and_supervisor(current_role=current_role, actor_id=actor_id)
        request = self._requests.create_request(
            kind=RequestKind.ADVANCE,
            employee_id=requester.identity_id,
            supervisor_id=supervisor.identity_id,
            reason=reason,
            amount=value,
        )
        self._announce(request, requester)
        return request

    # ---- decisions ----
    def _get(self, kind: RequestKind, request_id: int) -> ApprovalRequest:
        request = self._requests.get_request(kind=kind, request_id=int(request_id))
        if not request:
            raise NotFoundError(f"{kind.value} request not found")
        return request

    def decide(
        self,
        *,
        kind: RequestKind,
        request_id: int,
        stage: ApprovalStage,
        current_role: Role,
        actor_id: int,
        decision,
        comments: Optional[str] = None,
        modified_amount=None,
    ) -> ApprovalRequest:
        decision = workflow.parse_decision(decision)
        if current_role != workflow.STAGE_ROLE[stage]:
            raise AuthorizationError(f"Only {workflow.stage_label(stage)} can decide at this stage")

        request = self._get(kind, request_id)
        if stage == ApprovalStage.SUPERVISOR and request.supervisor_id != int(actor_id):
            raise AuthorizationError("Not the assigned supervisor for this request")

        transition = workflow.plan_transition(request, stage, decision)

        new_amount: Optional[Decimal] = None
        if modified_amount not in (None, ""):
            if kind != RequestKind.ADVANCE or stage != ApprovalStage.HR:
                raise ValidationError("modifiedAmount can only be set by HR on advance requests")
            new_amount = require_positive_amount(modified_amount, "modifiedAmount")

        applied = self._requests.transition(
            kind=kind,
            request_id=request.request_id,
            expected_flags=request.flags,
            stage=stage,
            approve=decision == Decision.APPROVE,
            new_status=transition.new_status,
            comments=_clean(comments),
            decided_at=self._clock(),
            modified_amount=new_amount if decision == Decision.APPROVE else None,
        )
        if not applied:
            logger.info("%s request %s changed concurrently during %s decision", kind.value, request.request_id, stage.value)
            raise AlreadyProcessed("Request was processed by someone else")

        updated = self._get(kind, request.request_id)
        self._fan_out(updated, transition)
        logger.info(
            "%s request %s %s at %s stage by %s",
            kind.value,
            updated.request_id,
            decision.value.lower(),
            stage.value,
            actor_id,
        )
        return updated

    def _fan_out(self, request: ApprovalRequest, transition: workflow.Transition) -> None:
        label = request.kind.value.lower()
        verdict = "approved" if transition.decision == Decision.APPROVE else "rejected"
        by = workflow.stage_label(transition.stage)

        self._notifications.notify(
            recipient_id=request.employee_id,
            kind=request.kind,
            message=f"Your {label} request has been {verdict} by {by}",
            related_request_id=request.request_id,
        )

        if transition.decision != Decision.APPROVE:
            return
        if transition.next_stage is not None:
            name = request.employee_name or f"employee {request.employee_id}"
            self._notifications.notify_role(
                role=workflow.STAGE_ROLE[transition.next_stage],
                kind=request.kind,
                message=f"{request.kind.value} request from {name} awaits your approval",
                related_request_id=request.request_id,
            )
        else:
            self._notifications.retire_for_request(kind=request.kind, related_request_id=request.request_id)

    # ---- queues ----
    def list_queue(
        self,
        *,
        kind: RequestKind,
        stage: ApprovalStage,
        current_role: Role,
        actor_id: int,
    ) -> Sequence[ApprovalRequest]:
        if current_role != workflow.STAGE_ROLE[stage]:
            raise AuthorizationError(f"Only {workflow.stage_label(stage)} can view this queue")
        if stage == ApprovalStage.SUPERVISOR:
            return self._requests.list_supervisor_queue(
                kind=kind, supervisor_id=int(actor_id), limit=self._queue_limit
            )
        return self._requests.list_stage_queue(kind=kind, stage=stage, limit=self._queue_limit)

    def list_mine(self, *, kind: RequestKind, actor_id: int) -> Sequence[ApprovalRequest]:
        return self._requests.list_for_employee(kind=kind, employee_id=int(actor_id), limit=self._queue_limit)

    def mark_seen(self, *, kind: RequestKind, request_id: int, current_role: Role, actor_id: int) -> ApprovalRequest:
        request = self._get(kind, request_id)
        if current_role == Role.EMPLOYEE and request.employee_id == int(actor_id):
            by_employee = True
        elif current_role == Role.SUPERVISOR and request.supervisor_id == int(actor_id):
            by_employee = False
        else:
            raise AuthorizationError("Only the requester or their supervisor can mark this request seen")

        self._requests.mark_seen(kind=kind, request_id=request.request_id, by_employee=by_employee)
        return self._get(kind, request.request_id)


class AttendanceModificationService:
    """Supervisor-raised corrections to a day's attendance, decided by HR/admin."""

    def __init__(
        self,
        requests: RequestRepository,
        attendance: AttendanceRepository,
        attendance_service: AttendanceService,
        identities: IdentityRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._requests = requests
        self._attendance = attendance
        self._attendance_service = attendance_service
        self._identities = identities
        self._clock = clock

    def create(
        self,
        *,
        current_role: Role,
        actor_id: int,
        employee_id: int,
        work_date: DayLike,
        reason: str,
        status=None,
        time_in: Optional[str] = None,
        time_out: Optional[str] = None,
    ) -> AttendanceModificationRequest:
        if current_role != Role.SUPERVISOR:
            raise AuthorizationError("Only supervisors can request attendance modifications")

        reason = require_non_empty(reason, "reason")
        day = normalize_day(work_date)
        new_status = parse_status(status) if status not in (None, "") else None
        new_in = parse_hhmm(time_in, "timeIn")
        new_out = parse_hhmm(time_out, "timeOut")
        if new_status is None and new_in is None and new_out is None:
            raise ValidationError("At least one change is required")

        employee = self._identities.get_by_id(int(employee_id))
        if not employee or not employee.is_active:
            raise NotFoundError("Employee not found")
        if employee.supervisor_id != int(actor_id):
            raise AuthorizationError("Supervisors can only manage their own employees")
        if not self._attendance.get_for_employee_and_date(employee.identity_id, day):
            raise NotFoundError("Attendance record not found for this date")

        created = self._requests.create_modification(
            requested_by=int(actor_id),
            employee_id=employee.identity_id,
            work_date=day,
            requested_status=new_status,
            requested_time_in=new_in,
            requested_time_out=new_out,
            reason=reason,
        )
        logger.info("attendance modification %s requested for employee=%s date=%s", created.request_id, employee.identity_id, day)
        return created

    def list_pending(self, *, current_role: Role) -> Sequence[AttendanceModificationRequest]:
        if current_role not in _OFFICE_ROLES:
            raise AuthorizationError("Only HR or admin can view modification requests")
        return self._requests.list_modifications(status=ModificationStatus.PENDING)

    def decide(
        self,
        *,
        current_role: Role,
        actor_id: int,
        request_id: int,
        decision,
        note: Optional[str] = None,
    ) -> AttendanceModificationRequest:
        if current_role not in _OFFICE_ROLES:
            raise AuthorizationError("Only HR or admin can decide modification requests")
        decision = workflow.parse_decision(decision)

        req = self._requests.get_modification(request_id=int(request_id))
        if not req:
            raise NotFoundError("Modification request not found")
        if req.status != ModificationStatus.PENDING:
            raise AlreadyProcessed("Modification request already processed")

        record = None
        if decision == Decision.APPROVE:
            record = self._attendance.get_for_employee_and_date(req.employee_id, req.work_date)
            if not record:
                raise NotFoundError("Attendance record not found for this date")

        # Claim the request before touching the ledger.
        new_status = ModificationStatus.APPROVED if decision == Decision.APPROVE else ModificationStatus.REJECTED
        decided = self._requests.decide_modification(
            request_id=req.request_id,
            status=new_status,
            decided_by=int(actor_id),
            decided_at=self._clock(),
            approval_note=_clean(note),
        )
        if not decided:
            logger.info("attendance modification %s changed concurrently", req.request_id)
            raise AlreadyProcessed("Modification request already processed")

        if record is not None:
            self._attendance_service.correct_attendance(
                current_role=current_role,
                actor_id=int(actor_id),
                attendance_id=record.attendance_id,
                status=req.requested_status,
                time_in=format_hhmm(req.requested_time_in),
                time_out=format_hhmm(req.requested_time_out),
            )

        logger.info("attendance modification %s %s by %s", req.request_id, new_status.value, actor_id)
        return self._requests.get_modification(request_id=req.request_id)
