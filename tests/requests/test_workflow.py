from __future__ import annotations

import pytest

from src.hr_backoffice.hr_backoffice.core.enums import (
    ApprovalStage,
    ApprovalState,
    Decision,
    RequestKind,
    RequestStatus,
)
from src.hr_backoffice.hr_backoffice.core.exceptions import AlreadyProcessed, AuthorizationError, ValidationError
from src.hr_backoffice.hr_backoffice.requests import workflow
from src.hr_backoffice.hr_backoffice.requests.model import ApprovalRequest


def _request(status=RequestStatus.PENDING, sup=False, hr=False, admin=False) -> ApprovalRequest:
    return ApprovalRequest(
        request_id=1,
        kind=RequestKind.LEAVE,
        employee_id=5,
        supervisor_id=4,
        reason="personal",
        status=status,
        supervisor_approved=sup,
        hr_approved=hr,
        admin_approved=admin,
    )


@pytest.mark.parametrize(
    "request_, expected",
    [
        (_request(), ApprovalState.PENDING),
        (_request(sup=True), ApprovalState.SUPERVISOR_APPROVED),
        (_request(sup=True, hr=True), ApprovalState.HR_APPROVED),
        (_request(RequestStatus.APPROVED, True, True, True), ApprovalState.APPROVED),
        (_request(RequestStatus.REJECTED, sup=True), ApprovalState.REJECTED),
    ],
)
def test_state_is_derived_from_status_and_flags(request_, expected):
    assert workflow.derive_state(request_) == expected


def test_supervisor_approval_moves_to_hr():
    t = workflow.plan_transition(_request(), ApprovalStage.SUPERVISOR, Decision.APPROVE)

    assert t.new_status == RequestStatus.PENDING
    assert t.next_stage == ApprovalStage.HR
    assert not t.is_final


def test_admin_approval_is_final():
    t = workflow.plan_transition(_request(sup=True, hr=True), ApprovalStage.ADMIN, Decision.APPROVE)

    assert t.new_status == RequestStatus.APPROVED
    assert t.next_stage is None
    assert t.is_final


def test_reject_is_terminal_from_any_stage():
    t = workflow.plan_transition(_request(sup=True), ApprovalStage.HR, Decision.REJECT)

    assert t.new_status == RequestStatus.REJECTED
    assert t.is_final


def test_acting_ahead_of_turn_is_unauthorized():
    with pytest.raises(AuthorizationError):
        workflow.plan_transition(_request(), ApprovalStage.HR, Decision.APPROVE)
    with pytest.raises(AuthorizationError):
        workflow.plan_transition(_request(sup=True), ApprovalStage.ADMIN, Decision.REJECT)


def test_acting_on_a_passed_stage_is_already_processed():
    with pytest.raises(AlreadyProcessed):
        workflow.plan_transition(_request(sup=True), ApprovalStage.SUPERVISOR, Decision.APPROVE)


@pytest.mark.parametrize("stage", list(ApprovalStage))
def test_terminal_requests_are_already_processed(stage):
    for terminal in (_request(RequestStatus.REJECTED), _request(RequestStatus.APPROVED, True, True, True)):
        with pytest.raises(AlreadyProcessed):
            workflow.plan_transition(terminal, stage, Decision.APPROVE)


def test_parse_decision():
    assert workflow.parse_decision("Approved") == Decision.APPROVE
    assert workflow.parse_decision(Decision.REJECT) == Decision.REJECT
    with pytest.raises(ValidationError):
        workflow.parse_decision("maybe")
