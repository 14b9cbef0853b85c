from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Identity role used for authorization and approval stages."""

    ADMIN = "admin"
    HR = "hr"
    SUPERVISOR = "supervisor"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    """Daily attendance status stored in the ledger."""

    PRESENT = "Present"
    ABSENT = "Absent"
    HALFDAY = "Halfday"


class RequestKind(str, Enum):
    LEAVE = "Leave"
    ADVANCE = "Advance"


class RequestStatus(str, Enum):
    """Persisted status of a leave/advance request."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class ApprovalStage(str, Enum):
    """Sequential approval stages, in order."""

    SUPERVISOR = "supervisor"
    HR = "hr"
    ADMIN = "admin"


class ApprovalState(str, Enum):
    """Workflow position derived from status + stage flags."""

    PENDING = "Pending"
    SUPERVISOR_APPROVED = "SupervisorApproved"
    HR_APPROVED = "HRApproved"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class Decision(str, Enum):
    APPROVE = "Approved"
    REJECT = "Rejected"


class ModificationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
