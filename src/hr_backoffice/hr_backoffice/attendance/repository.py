from __future__ import annotations

from datetime import date, time
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceRow


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        employee_id: int,
        work_date: date,
        time_in: Optional[time],
        time_out: Optional[time],
        status: AttendanceStatus,
        is_late: bool,
        recorded_by: Optional[int],
    ) -> AttendanceRecord:
        """Create or overwrite the single record for (employee_id, work_date)."""

        raise NotImplementedError

    def update_record(
        self,
        *,
        attendance_id: int,
        time_in: Optional[time],
        time_out: Optional[time],
        status: AttendanceStatus,
        is_late: bool,
        recorded_by: Optional[int],
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def list_range(
        self,
        start_date: date,
        end_date: date,
        *,
        employee_ids: Optional[Iterable[int]] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_rows(
        self,
        start_date: date,
        end_date: date,
        *,
        employee_ids: Optional[Iterable[int]] = None,
    ) -> Sequence[AttendanceRow]:
        raise NotImplementedError
