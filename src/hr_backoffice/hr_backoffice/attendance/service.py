from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Optional, Sequence, Union

from ..common.datetime_utils import normalize_day, now_local, parse_hhmm
from ..core.constants import DEFAULT_LATE_GRACE_MINUTES
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, InvalidStatus, NotFoundError, ValidationError
from ..users.model import Identity
from ..users.repository import IdentityRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, AttendanceRow, MarkResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

DayLike = Union[date, datetime, str]

_MARKING_ROLES = {Role.ADMIN, Role.HR, Role.SUPERVISOR}
_OFFICE_ROLES = {Role.ADMIN, Role.HR}


def parse_status(value) -> AttendanceStatus:
    if isinstance(value, AttendanceStatus):
        return value
    try:
        return AttendanceStatus(str(value or "").strip())
    except ValueError:
        raise InvalidStatus("status must be one of Present, Absent, Halfday")


class AttendanceService:
    """Use case: mark, correct, list and delete daily attendance records."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        identities: IdentityRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
    ):
        self._attendance = attendance
        self._identities = identities
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._grace_minutes = int(grace_minutes)

    def _require_employee(self, employee_id: int) -> Identity:
        employee = self._identities.get_by_id(int(employee_id))
        if not employee or not employee.is_active:
            raise NotFoundError("Employee not found")
        return employee

    @staticmethod
    def _check_scope(*, current_role: Role, actor_id: int, employee: Identity) -> None:
        if current_role == Role.SUPERVISOR and employee.supervisor_id != actor_id:
            raise AuthorizationError("Supervisors can only manage their own employees")

    def _decide(self, *, employee: Identity, status: AttendanceStatus, time_in: Optional[time]):
        strategy = self._factory.for_mark(
            status=status,
            time_in=time_in,
            shift_start=employee.shift_start,
            grace_minutes=self._grace_minutes,
        )
        return strategy.decide(status=status, time_in=time_in)

    def mark_attendance(
        self,
        *,
        current_role: Role,
        actor_id: int,
        employee_id: int,
        work_date: DayLike,
        status,
        time_in: Optional[str] = None,
        time_out: Optional[str] = None,
        now: datetime | None = None,
    ) -> MarkResult:
        if current_role not in _MARKING_ROLES:
            raise AuthorizationError("Only supervisors, HR or admin can mark attendance")

        day = normalize_day(work_date)
        status = parse_status(status)
        override = parse_hhmm(time_in, "timeIn")
        out = parse_hhmm(time_out, "timeOut")

        employee = self._require_employee(employee_id)
        self._check_scope(current_role=current_role, actor_id=actor_id, employee=employee)

        effective_in = None
        if status == AttendanceStatus.PRESENT:
            effective_in = override or (now or now_local()).time().replace(second=0, microsecond=0)

        decision = self._decide(employee=employee, status=status, time_in=effective_in)
        existed = self._attendance.get_for_employee_and_date(employee.identity_id, day) is not None

        record = self._attendance.upsert(
            employee_id=employee.identity_id,
            work_date=day,
            time_in=decision.time_in,
            time_out=out,
            status=decision.status,
            is_late=decision.is_late,
            recorded_by=actor_id,
        )
        logger.info(
            "attendance marked employee=%s date=%s status=%s late=%s by=%s",
            employee.identity_id,
            day.isoformat(),
            record.status.value,
            record.is_late,
            actor_id,
        )
        return MarkResult(record=record, late=record.is_late, created=not existed)

    def correct_attendance(
        self,
        *,
        current_role: Role,
        actor_id: int,
        attendance_id: int,
        status=None,
        time_in: Optional[str] = None,
        time_out: Optional[str] = None,
    ) -> AttendanceRecord:
        """Overwrite fields of an existing record; unset fields keep their value."""

        if current_role not in _MARKING_ROLES:
            raise AuthorizationError("Only supervisors, HR or admin can correct attendance")

        new_status = parse_status(status) if status not in (None, "") else None
        new_in = parse_hhmm(time_in, "timeIn")
        new_out = parse_hhmm(time_out, "timeOut")

        existing = self._attendance.get_by_id(int(attendance_id))
        if not existing:
            raise NotFoundError("Attendance record not found")

        employee = self._identities.get_by_id(existing.employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        self._check_scope(current_role=current_role, actor_id=actor_id, employee=employee)

        status_value = new_status or existing.status
        decision = self._decide(
            employee=employee,
            status=status_value,
            time_in=new_in if new_in is not None else existing.time_in,
        )

        updated = self._attendance.update_record(
            attendance_id=existing.attendance_id,
            time_in=decision.time_in,
            time_out=new_out if new_out is not None else existing.time_out,
            status=decision.status,
            is_late=decision.is_late,
            recorded_by=actor_id,
        )
        if not updated:
            raise NotFoundError("Attendance record not found")

        logger.info("attendance corrected id=%s status=%s by=%s", updated.attendance_id, updated.status.value, actor_id)
        return updated

    def delete_attendance(self, *, current_role: Role, attendance_id: int) -> None:
        if current_role not in _OFFICE_ROLES:
            raise AuthorizationError("Only HR or admin can delete attendance")
        if not self._attendance.delete(int(attendance_id)):
            raise NotFoundError("Attendance record not found")
        logger.info("attendance deleted id=%s", attendance_id)

    def list_attendance(
        self,
        *,
        current_role: Role,
        actor_id: int,
        day: DayLike | None = None,
        start: DayLike | None = None,
        end: DayLike | None = None,
    ) -> Sequence[AttendanceRow]:
        if start is not None or end is not None:
            if start is None or end is None:
                raise ValidationError("startDate and endDate must be given together")
            start_day, end_day = normalize_day(start), normalize_day(end)
            if end_day < start_day:
                raise ValidationError("endDate must not be before startDate")
        else:
            start_day = end_day = normalize_day(day) if day is not None else now_local().date()

        employee_ids: Optional[list[int]]
        if current_role == Role.EMPLOYEE:
            employee_ids = [actor_id]
        elif current_role == Role.SUPERVISOR:
            employee_ids = [e.identity_id for e in self._identities.list_assigned(actor_id)]
        else:
            employee_ids = None

        return self._attendance.list_rows(start_day, end_day, employee_ids=employee_ids)
