from __future__ import annotations

from collections import Counter
from datetime import date, datetime
from typing import Dict, Iterable, Union

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import normalize_day
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .model import AttendanceCounts


class MonthlyAggregator:
    """Reduce ledger records in a closed date range to per-employee counts.

    Pure read: days with no record are simply not counted.
    """

    def __init__(self, attendance: AttendanceRepository, *, late_counts_as_present: bool = False):
        self._attendance = attendance
        self._late_counts_as_present = bool(late_counts_as_present)

    def aggregate(
        self,
        employee_ids: Iterable[int],
        start_date: Union[date, datetime, str],
        end_date: Union[date, datetime, str],
    ) -> Dict[int, AttendanceCounts]:
        ids = [int(i) for i in employee_ids]
        start, end = normalize_day(start_date), normalize_day(end_date)
        if end < start:
            raise ValidationError("endDate must not be before startDate")
        if not ids:
            return {}

        tallies: Dict[int, Counter] = {i: Counter() for i in ids}
        for r in self._attendance.list_range(start, end, employee_ids=ids):
            t = tallies.get(r.employee_id)
            if t is None:
                continue
            if r.status == AttendanceStatus.PRESENT:
                if r.is_late:
                    t["late"] += 1
                    if self._late_counts_as_present:
                        t["present"] += 1
                else:
                    t["present"] += 1
            elif r.status == AttendanceStatus.ABSENT:
                t["absent"] += 1
            elif r.status == AttendanceStatus.HALFDAY:
                t["half"] += 1

        return {
            i: AttendanceCounts(
                present_days=t["present"],
                absent_days=t["absent"],
                half_days=t["half"],
                late_markings=t["late"],
            )
            for i, t in tallies.items()
        }
