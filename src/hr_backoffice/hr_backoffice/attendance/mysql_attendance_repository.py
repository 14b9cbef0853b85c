from __future__ import annotations

from datetime import date, time
from typing import Iterable, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, normalize_mysql_time
from .model import AttendanceRecord, AttendanceRow
from .repository import AttendanceRepository

_COLUMNS = "ar.attendance_id, ar.employee_id, ar.work_date, ar.time_in, ar.time_out, ar.status, ar.is_late, ar.recorded_by"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        time_in=normalize_mysql_time(r.get("time_in")),
        time_out=normalize_mysql_time(r.get("time_out")),
        status=AttendanceStatus(r["status"]),
        is_late=bool(r.get("is_late")),
        recorded_by=int(r["recorded_by"]) if r.get("recorded_by") is not None else None,
    )


def _range_where(start_date: date, end_date: date, employee_ids: Optional[Iterable[int]]):
    clauses = ["ar.work_date BETWEEN %s AND %s"]
    params: list[object] = [start_date, end_date]
    if employee_ids is not None:
        ids_sql, ids_params = in_clause("ar.employee_id", [int(i) for i in employee_ids])
        clauses.append(ids_sql)
        params.extend(ids_params)
    return " AND ".join(clauses), tuple(params)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records ar WHERE ar.attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records ar WHERE ar.employee_id=%s AND ar.work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        # The unique key on (employee_id, work_date) turns concurrent marks into overwrites.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, work_date, time_in, time_out, status, is_late, recorded_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    time_in=VALUES(time_in),
                    time_out=VALUES(time_out),
                    status=VALUES(status),
                    is_late=VALUES(is_late),
                    recorded_by=VALUES(recorded_by)
                """,
                (int(employee_id), work_date, time_in, time_out, status.value, int(bool(is_late)), recorded_by),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records ar WHERE ar.employee_id=%s AND ar.work_date=%s",
                (int(employee_id), work_date),
            )
            return _to_record(fetchone(cur))

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET time_in=%s, time_out=%s, status=%s, is_late=%s, recorded_by=%s
                WHERE attendance_id=%s
                """,
                (time_in, time_out, status.value, int(bool(is_late)), recorded_by, int(attendance_id)),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records ar WHERE ar.attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def list_range(
        self,
        start_date: date,
        end_date: date,
        *,
        employee_ids: Optional[Iterable[int]] = None,
    ) -> Sequence[AttendanceRecord]:
        where, params = _range_where(start_date, end_date, employee_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records ar WHERE {where} ORDER BY ar.work_date, ar.employee_id",
                params,
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_rows(
        self,
        start_date: date,
        end_date: date,
        *,
        employee_ids: Optional[Iterable[int]] = None,
    ) -> Sequence[AttendanceRow]:
        where, params = _range_where(start_date, end_date, employee_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    {_COLUMNS},
                    e.name AS employee_name, e.emp_id, e.designation,
                    rb.name AS recorded_by_name
                FROM attendance_records ar
                JOIN identities e ON e.identity_id = ar.employee_id
                LEFT JOIN identities rb ON rb.identity_id = ar.recorded_by
                WHERE {where}
                ORDER BY ar.work_date DESC, e.name ASC
                """,
                params,
            )
            return [
                AttendanceRow(
                    record=_to_record(r),
                    employee_name=r["employee_name"],
                    emp_id=r.get("emp_id"),
                    designation=r.get("designation"),
                    recorded_by_name=r.get("recorded_by_name"),
                )
                for r in fetchall(cur)
            ]
