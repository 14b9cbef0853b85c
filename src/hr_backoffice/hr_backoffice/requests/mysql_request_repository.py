from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import ApprovalStage, AttendanceStatus, ModificationStatus, RequestKind, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import ApprovalRequest, AttendanceModificationRequest
from .repository import RequestRepository

_REQUEST_SELECT = """
    SELECT r.request_id, r.kind, r.employee_id, r.supervisor_id, r.reason,
           r.from_date, r.to_date, r.amount, r.modified_amount, r.status,
           r.supervisor_approved, r.supervisor_approved_at, r.supervisor_comments,
           r.hr_approved, r.hr_approved_at, r.hr_comments,
           r.admin_approved, r.admin_approved_at, r.admin_comments,
           r.is_seen_by_employee, r.is_seen_by_supervisor, r.created_at,
           e.name AS employee_name
    FROM approval_requests r
    JOIN identities e ON e.identity_id = r.employee_id
"""

_MODIFICATION_SELECT = """
    SELECT m.request_id, m.requested_by, m.employee_id, m.work_date,
           m.requested_status, m.requested_time_in, m.requested_time_out,
           m.reason, m.status, m.decided_by, m.decided_at, m.approval_note, m.created_at,
           e.name AS employee_name, rb.name AS requested_by_name
    FROM attendance_modification_requests m
    JOIN identities e ON e.identity_id = m.employee_id
    JOIN identities rb ON rb.identity_id = m.requested_by
"""

# Stage before each queue; admin waits on HR, HR waits on supervisor.
_PREVIOUS_STAGE = {
    ApprovalStage.HR: ApprovalStage.SUPERVISOR,
    ApprovalStage.ADMIN: ApprovalStage.HR,
}


def _dec(value) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


def _to_request(r: dict) -> ApprovalRequest:
    return ApprovalRequest(
        request_id=int(r["request_id"]),
        kind=RequestKind(r["kind"]),
        employee_id=int(r["employee_id"]),
        supervisor_id=int(r["supervisor_id"]),
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        from_date=r.get("from_date"),
        to_date=r.get("to_date"),
        amount=_dec(r.get("amount")),
        modified_amount=_dec(r.get("modified_amount")),
        supervisor_approved=bool(r.get("supervisor_approved")),
        supervisor_approved_at=r.get("supervisor_approved_at"),
        supervisor_comments=r.get("supervisor_comments"),
        hr_approved=bool(r.get("hr_approved")),
        hr_approved_at=r.get("hr_approved_at"),
        hr_comments=r.get("hr_comments"),
        admin_approved=bool(r.get("admin_approved")),
        admin_approved_at=r.get("admin_approved_at"),
        admin_comments=r.get("admin_comments"),
        is_seen_by_employee=bool(r.get("is_seen_by_employee")),
        is_seen_by_supervisor=bool(r.get("is_seen_by_supervisor")),
        created_at=r.get("created_at"),
        employee_name=r.get("employee_name"),
    )


def _to_modification(r: dict) -> AttendanceModificationRequest:
    return AttendanceModificationRequest(
        request_id=int(r["request_id"]),
        requested_by=int(r["requested_by"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        reason=r["reason"],
        status=ModificationStatus(r["status"]),
        requested_status=AttendanceStatus(r["requested_status"]) if r.get("requested_status") else None,
        requested_time_in=normalize_mysql_time(r.get("requested_time_in")),
        requested_time_out=normalize_mysql_time(r.get("requested_time_out")),
        decided_by=int(r["decided_by"]) if r.get("decided_by") is not None else None,
        decided_at=r.get("decided_at"),
        approval_note=r.get("approval_note"),
        created_at=r.get("created_at"),
        employee_name=r.get("employee_name"),
        requested_by_name=r.get("requested_by_name"),
    )


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Leave / advance requests --------
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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO approval_requests(kind, employee_id, supervisor_id, reason, from_date, to_date, amount, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    kind.value,
                    int(employee_id),
                    int(supervisor_id),
                    reason,
                    from_date,
                    to_date,
                    amount,
                    RequestStatus.PENDING.value,
                ),
            )
            request_id = int(cur.lastrowid)
            cur.execute(f"{_REQUEST_SELECT} WHERE r.request_id=%s", (request_id,))
            return _to_request(fetchone(cur))

    def get_request(self, *, kind: RequestKind, request_id: int) -> Optional[ApprovalRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_REQUEST_SELECT} WHERE r.request_id=%s AND r.kind=%s", (int(request_id), kind.value))
            r = fetchone(cur)
            return _to_request(r) if r else None

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
        s = stage.value
        assignments = [f"{s}_comments=%s", "status=%s"]
        params: list[object] = [comments, new_status.value]
        if approve:
            assignments += [f"{s}_approved=1", f"{s}_approved_at=%s"]
            params.append(decided_at)
        if modified_amount is not None:
            assignments.append("modified_amount=%s")
            params.append(modified_amount)

        sup, hr, admin = (int(bool(f)) for f in expected_flags)
        params += [int(request_id), kind.value, RequestStatus.PENDING.value, sup, hr, admin]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE approval_requests
                SET {', '.join(assignments)}
                WHERE request_id=%s AND kind=%s AND status=%s
                  AND supervisor_approved=%s AND hr_approved=%s AND admin_approved=%s
                """,
                tuple(params),
            )
            return cur.rowcount > 0

    def list_supervisor_queue(self, *, kind: RequestKind, supervisor_id: int, limit: int = 500) -> Sequence[ApprovalRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_REQUEST_SELECT}
                WHERE r.kind=%s AND r.supervisor_id=%s AND r.status=%s AND r.supervisor_approved=0
                ORDER BY r.created_at DESC
                LIMIT %s
                """,
                (kind.value, int(supervisor_id), RequestStatus.PENDING.value, int(limit)),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_stage_queue(self, *, kind: RequestKind, stage: ApprovalStage, limit: int = 500) -> Sequence[ApprovalRequest]:
        previous = _PREVIOUS_STAGE[stage]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_REQUEST_SELECT}
                WHERE r.kind=%s AND r.status=%s
                  AND r.{previous.value}_approved=1 AND r.{stage.value}_approved=0
                ORDER BY r.created_at DESC
                LIMIT %s
                """,
                (kind.value, RequestStatus.PENDING.value, int(limit)),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_for_employee(self, *, kind: RequestKind, employee_id: int, limit: int = 500) -> Sequence[ApprovalRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_REQUEST_SELECT} WHERE r.kind=%s AND r.employee_id=%s ORDER BY r.created_at DESC LIMIT %s",
                (kind.value, int(employee_id), int(limit)),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def mark_seen(self, *, kind: RequestKind, request_id: int, by_employee: bool) -> bool:
        column = "is_seen_by_employee" if by_employee else "is_seen_by_supervisor"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE approval_requests SET {column}=1 WHERE request_id=%s AND kind=%s",
                (int(request_id), kind.value),
            )
            return cur.rowcount > 0

    # -------- Attendance modification requests --------
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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_modification_requests(
                    requested_by, employee_id, work_date,
                    requested_status, requested_time_in, requested_time_out, reason, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(requested_by),
                    int(employee_id),
                    work_date,
                    requested_status.value if requested_status else None,
                    requested_time_in,
                    requested_time_out,
                    reason,
                    ModificationStatus.PENDING.value,
                ),
            )
            request_id = int(cur.lastrowid)
            cur.execute(f"{_MODIFICATION_SELECT} WHERE m.request_id=%s", (request_id,))
            return _to_modification(fetchone(cur))

    def get_modification(self, *, request_id: int) -> Optional[AttendanceModificationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_MODIFICATION_SELECT} WHERE m.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_modification(r) if r else None

    def list_modifications(
        self,
        *,
        status: Optional[ModificationStatus] = None,
        limit: int = 500,
    ) -> Sequence[AttendanceModificationRequest]:
        clauses = ["1=1"]
        params: list[object] = []
        if status is not None:
            clauses.append("m.status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_MODIFICATION_SELECT} WHERE {' AND '.join(clauses)} ORDER BY m.created_at DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_to_modification(r) for r in fetchall(cur)]

    def decide_modification(
        self,
        *,
        request_id: int,
        status: ModificationStatus,
        decided_by: int,
        decided_at: datetime,
        approval_note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_modification_requests
                SET status=%s, decided_by=%s, decided_at=%s, approval_note=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(decided_by),
                    decided_at,
                    approval_note,
                    int(request_id),
                    ModificationStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
