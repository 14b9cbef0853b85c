from __future__ import annotations

from datetime import date, datetime, time

import pytest

from src.hr_backoffice.hr_backoffice.core.enums import AttendanceStatus, Role
from src.hr_backoffice.hr_backoffice.core.exceptions import (
    AuthorizationError,
    InvalidStatus,
    InvalidTimeFormat,
    NotFoundError,
    ValidationError,
)
from tests.fakes import EMPLOYEE, EMPLOYEE_2, HR, INACTIVE, OTHER_EMPLOYEE, OTHER_SUPERVISOR, SUPERVISOR

DAY = date(2024, 3, 1)


def _mark(container, *, role=Role.HR, actor=HR, employee=EMPLOYEE, work_date=DAY, **kwargs):
    kwargs.setdefault("status", "Present")
    return container.attendance_service.mark_attendance(
        current_role=role,
        actor_id=actor,
        employee_id=employee,
        work_date=work_date,
        **kwargs,
    )


def test_mark_within_grace_is_not_late(container):
    result = _mark(container, time_in="09:04")

    assert result.late is False
    assert result.record.time_in == time(9, 4)
    assert result.created is True


def test_mark_after_grace_is_late(container):
    result = _mark(container, time_in="09:06")

    assert result.late is True
    assert result.record.is_late is True


def test_mark_without_override_uses_wall_clock(container, fixed_now):
    result = _mark(container, now=fixed_now)

    assert result.record.time_in == time(9, 6)
    assert result.late is True


def test_mark_absent_clears_time_in_and_lateness(container):
    result = _mark(container, status="Absent", time_in="11:30")

    assert result.record.status == AttendanceStatus.ABSENT
    assert result.record.time_in is None
    assert result.record.is_late is False


def test_mark_halfday_keeps_time_out(container):
    result = _mark(container, status="Halfday", time_in="13:00", time_out="17:00")

    assert result.record.time_in is None
    assert result.record.time_out == time(17, 0)
    assert result.record.is_late is False


def test_remarking_same_day_overwrites_single_record(container, attendance_repo):
    first = _mark(container, time_in="09:30")
    second = _mark(container, status="Absent")

    assert second.created is False
    assert second.record.attendance_id == first.record.attendance_id
    assert len(attendance_repo.records) == 1
    assert attendance_repo.get_for_employee_and_date(EMPLOYEE, DAY).status == AttendanceStatus.ABSENT


def test_date_is_normalized_to_calendar_day(container, attendance_repo):
    _mark(container, work_date=datetime(2024, 3, 1, 18, 45), time_in="09:00")
    _mark(container, work_date="2024-03-01T07:00:00", time_in="09:10")

    assert len(attendance_repo.records) == 1
    assert attendance_repo.get_for_employee_and_date(EMPLOYEE, DAY).time_in == time(9, 10)


def test_identity_without_shift_is_never_late(container):
    result = _mark(container, employee=EMPLOYEE_2, time_in="23:00")

    assert result.late is False


def test_invalid_status_rejected(container):
    with pytest.raises(InvalidStatus):
        _mark(container, status="Late")


@pytest.mark.parametrize("bad", ["9:00", "24:00", "12:60", "noon", "09:00:00"])
def test_invalid_time_format_rejected(container, bad):
    with pytest.raises(InvalidTimeFormat):
        _mark(container, time_in=bad)


def test_invalid_time_out_rejected(container):
    with pytest.raises(InvalidTimeFormat):
        _mark(container, time_in="09:00", time_out="25:00")


def test_unknown_or_inactive_employee_not_found(container):
    with pytest.raises(NotFoundError):
        _mark(container, employee=999)
    with pytest.raises(NotFoundError):
        _mark(container, employee=INACTIVE)


def test_employee_cannot_mark(container):
    with pytest.raises(AuthorizationError):
        _mark(container, role=Role.EMPLOYEE, actor=EMPLOYEE)


def test_supervisor_limited_to_assignees(container):
    ok = _mark(container, role=Role.SUPERVISOR, actor=SUPERVISOR, time_in="09:00")
    assert ok.record.recorded_by == SUPERVISOR

    with pytest.raises(AuthorizationError):
        _mark(container, role=Role.SUPERVISOR, actor=SUPERVISOR, employee=OTHER_EMPLOYEE)


def test_correction_recomputes_lateness(container):
    marked = _mark(container, time_in="09:30")
    assert marked.late is True

    corrected = container.attendance_service.correct_attendance(
        current_role=Role.HR,
        actor_id=HR,
        attendance_id=marked.record.attendance_id,
        time_in="08:55",
    )

    assert corrected.time_in == time(8, 55)
    assert corrected.is_late is False
    assert corrected.status == AttendanceStatus.PRESENT


def test_correction_to_absent_reapplies_invariant(container):
    marked = _mark(container, time_in="09:30")

    corrected = container.attendance_service.correct_attendance(
        current_role=Role.HR,
        actor_id=HR,
        attendance_id=marked.record.attendance_id,
        status="Absent",
    )

    assert corrected.time_in is None
    assert corrected.is_late is False


def test_correction_unknown_record(container):
    with pytest.raises(NotFoundError):
        container.attendance_service.correct_attendance(current_role=Role.HR, actor_id=HR, attendance_id=42)


def test_correction_by_other_supervisor_forbidden(container):
    marked = _mark(container, time_in="09:00")

    with pytest.raises(AuthorizationError):
        container.attendance_service.correct_attendance(
            current_role=Role.SUPERVISOR,
            actor_id=OTHER_SUPERVISOR,
            attendance_id=marked.record.attendance_id,
            status="Absent",
        )


def test_delete_requires_office_role(container, attendance_repo):
    marked = _mark(container, time_in="09:00")

    with pytest.raises(AuthorizationError):
        container.attendance_service.delete_attendance(
            current_role=Role.SUPERVISOR, attendance_id=marked.record.attendance_id
        )

    container.attendance_service.delete_attendance(current_role=Role.HR, attendance_id=marked.record.attendance_id)
    assert attendance_repo.records == {}

    with pytest.raises(NotFoundError):
        container.attendance_service.delete_attendance(current_role=Role.HR, attendance_id=marked.record.attendance_id)


def test_listing_is_role_filtered(container):
    _mark(container, employee=EMPLOYEE, time_in="09:00")
    _mark(container, employee=EMPLOYEE_2, time_in="09:00")
    _mark(container, employee=OTHER_EMPLOYEE, time_in="09:00")
    svc = container.attendance_service

    everyone = svc.list_attendance(current_role=Role.HR, actor_id=HR, day=DAY)
    team = svc.list_attendance(current_role=Role.SUPERVISOR, actor_id=SUPERVISOR, day=DAY)
    own = svc.list_attendance(current_role=Role.EMPLOYEE, actor_id=EMPLOYEE, day="2024-03-01")

    assert {r.record.employee_id for r in everyone} == {EMPLOYEE, EMPLOYEE_2, OTHER_EMPLOYEE}
    assert {r.record.employee_id for r in team} == {EMPLOYEE, EMPLOYEE_2}
    assert [r.record.employee_id for r in own] == [EMPLOYEE]
    assert own[0].employee_name == "Esha Employee"
    assert own[0].recorded_by_name == "Hari HR"


def test_listing_range_requires_both_bounds(container):
    with pytest.raises(ValidationError):
        container.attendance_service.list_attendance(current_role=Role.HR, actor_id=HR, start="2024-03-01")


def test_listing_range_rejects_inverted_bounds(container):
    with pytest.raises(ValidationError):
        container.attendance_service.list_attendance(
            current_role=Role.HR, actor_id=HR, start="2024-03-05", end="2024-03-01"
        )
