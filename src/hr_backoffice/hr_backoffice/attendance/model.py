from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..common.datetime_utils import format_hhmm
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one ledger entry per (employee, calendar day)."""

    attendance_id: int
    employee_id: int
    work_date: date
    time_in: Optional[time]
    time_out: Optional[time]
    status: AttendanceStatus
    is_late: bool = False
    recorded_by: Optional[int] = None

    def as_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "employeeId": self.employee_id,
            "date": self.work_date.isoformat(),
            "timeIn": format_hhmm(self.time_in),
            "timeOut": format_hhmm(self.time_out),
            "status": self.status.value,
            "isLate": self.is_late,
            "recordedBy": self.recorded_by,
        }


@dataclass(frozen=True)
class AttendanceRow:
    """Read-model for listings: a record hydrated with display fields."""

    record: AttendanceRecord
    employee_name: str
    emp_id: Optional[str] = None
    designation: Optional[str] = None
    recorded_by_name: Optional[str] = None

    def as_dict(self) -> dict:
        out = self.record.as_dict()
        out["employee"] = {
            "id": self.record.employee_id,
            "name": self.employee_name,
            "empId": self.emp_id,
            "designation": self.designation,
        }
        out["recordedByName"] = self.recorded_by_name
        return out


@dataclass(frozen=True)
class MarkResult:
    record: AttendanceRecord
    late: bool
    created: bool

    def as_dict(self) -> dict:
        out = self.record.as_dict()
        out["late"] = self.late
        out["created"] = self.created
        return out
