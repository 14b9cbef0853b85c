from __future__ import annotations

from datetime import date, time

import pytest

from src.hr_backoffice.hr_backoffice.core.enums import AttendanceStatus, ModificationStatus, Role
from src.hr_backoffice.hr_backoffice.core.exceptions import (
    AlreadyProcessed,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from tests.fakes import ADMIN, EMPLOYEE, HR, HR_2, OTHER_EMPLOYEE, SUPERVISOR

DAY = date(2024, 3, 1)


@pytest.fixture
def marked(container):
    return container.attendance_service.mark_attendance(
        current_role=Role.SUPERVISOR,
        actor_id=SUPERVISOR,
        employee_id=EMPLOYEE,
        work_date=DAY,
        status="Present",
        time_in="09:40",
    )


def _request(container, **kwargs):
    kwargs.setdefault("employee_id", EMPLOYEE)
    kwargs.setdefault("work_date", "2024-03-01")
    kwargs.setdefault("reason", "biometric reader was down")
    return container.modification_service.create(current_role=Role.SUPERVISOR, actor_id=SUPERVISOR, **kwargs)


def test_approved_modification_is_applied(container, attendance_repo, marked):
    assert marked.late is True
    req = _request(container, time_in="09:02")

    decided = container.modification_service.decide(
        current_role=Role.HR, actor_id=HR, request_id=req.request_id, decision="Approved", note="verified"
    )

    record = attendance_repo.get_for_employee_and_date(EMPLOYEE, DAY)
    assert decided.status == ModificationStatus.APPROVED
    assert decided.approval_note == "verified"
    assert record.time_in == time(9, 2)
    assert record.is_late is False
    assert record.recorded_by == HR


def test_rejected_modification_leaves_record(container, attendance_repo, marked):
    req = _request(container, status="Absent")

    container.modification_service.decide(current_role=Role.HR, actor_id=HR, request_id=req.request_id, decision="Rejected")

    assert attendance_repo.get_for_employee_and_date(EMPLOYEE, DAY).status == AttendanceStatus.PRESENT
    with pytest.raises(AlreadyProcessed):
        container.modification_service.decide(
            current_role=Role.HR, actor_id=HR, request_id=req.request_id, decision="Approved"
        )


def test_request_needs_existing_record(container):
    with pytest.raises(NotFoundError):
        _request(container, status="Absent")


def test_request_needs_a_change_and_reason(container, marked):
    with pytest.raises(ValidationError):
        _request(container)
    with pytest.raises(ValidationError):
        _request(container, status="Absent", reason="")


def test_request_only_for_own_assignees(container, marked):
    with pytest.raises(AuthorizationError):
        _request(container, employee_id=OTHER_EMPLOYEE, status="Absent")


def test_pending_list_is_office_only(container, marked):
    _request(container, status="Halfday")

    assert len(container.modification_service.list_pending(current_role=Role.ADMIN)) == 1
    with pytest.raises(AuthorizationError):
        container.modification_service.list_pending(current_role=Role.SUPERVISOR)


def test_approval_losing_to_a_concurrent_reject_leaves_record(container, attendance_repo, requests_repo, marked):
    req = _request(container, status="Absent")
    requests_repo.reject_next_modification_first = True

    with pytest.raises(AlreadyProcessed):
        container.modification_service.decide(
            current_role=Role.ADMIN, actor_id=ADMIN, request_id=req.request_id, decision="Approved"
        )

    stored = requests_repo.get_modification(request_id=req.request_id)
    record = attendance_repo.get_for_employee_and_date(EMPLOYEE, DAY)
    assert stored.status == ModificationStatus.REJECTED
    assert stored.decided_by == HR_2
    assert record.status == AttendanceStatus.PRESENT
    assert record.time_in == time(9, 40)
