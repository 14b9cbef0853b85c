from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import ApprovalStage, AttendanceStatus, ModificationStatus, RequestKind, RequestStatus
from .model import ApprovalRequest, AttendanceModificationRequest


class RequestRepository(Protocol):
    # Leave / advance requests
    def create_request(
        self,
        *,
        kind: RequestKind,
        employee_id: int,
        supervisor_id: int,
        reason: str,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        amount: Optional[Decimal] = None,
    ) -> ApprovalRequest:
        raise NotImplementedError

    def get_request(self, *, kind: RequestKind, request_id: int) -> Optional[ApprovalRequest]:
        raise NotImplementedError

    def transition(
        self,
        *,
        kind: RequestKind,
        request_id: int,
        expected_flags: tuple[bool, bool, bool],
        stage: ApprovalStage,
        approve: bool,
        new_status: RequestStatus,
        comments: Optional[str],
        decided_at: datetime,
        modified_amount: Optional[Decimal] = None,
    ) -> bool:
        """Compare-and-swap one stage decision.

        Applies only while the stored row is still Pending with exactly
        ``expected_flags`` (supervisor, hr, admin). False means another
        writer got there first.
        """

        raise NotImplementedError

    def list_supervisor_queue(self, *, kind: RequestKind, supervisor_id: int, limit: int = 500) -> Sequence[ApprovalRequest]:
        raise NotImplementedError

    def list_stage_queue(self, *, kind: RequestKind, stage: ApprovalStage, limit: int = 500) -> Sequence[ApprovalRequest]:
        """Pending requests whose previous stage is approved and ``stage`` is not."""

        raise NotImplementedError

    def list_for_employee(self, *, kind: RequestKind, employee_id: int, limit: int = 500) -> Sequence[ApprovalRequest]:
        raise NotImplementedError

    def mark_seen(self, *, kind: RequestKind, request_id: int, by_employee: bool) -> bool:
        raise NotImplementedError

    # Attendance modification requests
    def create_modification(
        self,
        *,
        requested_by: int,
        employee_id: int,
        work_date: date,
        requested_status: Optional[AttendanceStatus],
        requested_time_in: Optional[time],
        requested_time_out: Optional[time],
        reason: str,
    ) -> AttendanceModificationRequest:
        raise NotImplementedError

    def get_modification(self, *, request_id: int) -> Optional[AttendanceModificationRequest]:
        raise NotImplementedError

    def list_modifications(
        self,
        *,
        status: Optional[ModificationStatus] = None,
        limit: int = 500,
    ) -> Sequence[AttendanceModificationRequest]:
        raise NotImplementedError

    def decide_modification(
        self,
        *,
        request_id: int,
        status: ModificationStatus,
        decided_by: int,
        decided_at: datetime,
        approval_note: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError
