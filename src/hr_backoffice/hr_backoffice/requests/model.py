from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import format_hhmm
from ..core.enums import ApprovalStage, AttendanceStatus, ModificationStatus, RequestKind, RequestStatus


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _money(value: Optional[Decimal]) -> Optional[str]:
    return str(value) if value is not None else None


@dataclass(frozen=True)
class ApprovalRequest:
    """A leave or advance request moving through supervisor, HR and admin."""

    request_id: int
    kind: RequestKind
    employee_id: int
    supervisor_id: int
    reason: str
    status: RequestStatus
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    amount: Optional[Decimal] = None
    modified_amount: Optional[Decimal] = None
    supervisor_approved: bool = False
    supervisor_approved_at: Optional[datetime] = None
    supervisor_comments: Optional[str] = None
    hr_approved: bool = False
    hr_approved_at: Optional[datetime] = None
    hr_comments: Optional[str] = None
    admin_approved: bool = False
    admin_approved_at: Optional[datetime] = None
    admin_comments: Optional[str] = None
    is_seen_by_employee: bool = False
    is_seen_by_supervisor: bool = False
    created_at: Optional[datetime] = None
    employee_name: Optional[str] = None

    def approved(self, stage: ApprovalStage) -> bool:
        return bool(getattr(self, f"{stage.value}_approved"))

    @property
    def flags(self) -> tuple[bool, bool, bool]:
        return (self.supervisor_approved, self.hr_approved, self.admin_approved)

    def as_dict(self) -> dict:
        from .workflow import derive_state

        out = {
            "id": self.request_id,
            "kind": self.kind.value,
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "supervisorId": self.supervisor_id,
            "reason": self.reason,
            "status": self.status.value,
            "state": derive_state(self).value,
            "isSeenByEmployee": self.is_seen_by_employee,
            "isSeenBySupervisor": self.is_seen_by_supervisor,
            "createdAt": _iso(self.created_at),
        }
        if self.kind == RequestKind.LEAVE:
            out["fromDate"] = _iso(self.from_date)
            out["toDate"] = _iso(self.to_date)
        else:
            out["amount"] = _money(self.amount)
            out["modifiedAmount"] = _money(self.modified_amount)
        for stage in ApprovalStage:
            s = stage.value
            out[f"{s}Approved"] = self.approved(stage)
            out[f"{s}ApprovedAt"] = _iso(getattr(self, f"{s}_approved_at"))
            out[f"{s}Comments"] = getattr(self, f"{s}_comments")
        return out


@dataclass(frozen=True)
class AttendanceModificationRequest:
    request_id: int
    requested_by: int
    employee_id: int
    work_date: date
    reason: str
    status: ModificationStatus
    requested_status: Optional[AttendanceStatus] = None
    requested_time_in: Optional[time] = None
    requested_time_out: Optional[time] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    approval_note: Optional[str] = None
    created_at: Optional[datetime] = None
    employee_name: Optional[str] = None
    requested_by_name: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "id": self.request_id,
            "requestedBy": self.requested_by,
            "requestedByName": self.requested_by_name,
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "date": self.work_date.isoformat(),
            "requestedChanges": {
                "status": self.requested_status.value if self.requested_status else None,
                "timeIn": format_hhmm(self.requested_time_in),
                "timeOut": format_hhmm(self.requested_time_out),
            },
            "reason": self.reason,
            "status": self.status.value,
            "decidedBy": self.decided_by,
            "decidedAt": _iso(self.decided_at),
            "approvalNote": self.approval_note,
            "createdAt": _iso(self.created_at),
        }
