"""Three-stage approval state machine shared by leave and advance requests.

Pending -> SupervisorApproved -> HRApproved -> Approved, with Rejected
reachable from any non-terminal state. The persisted shape is ``status`` plus
one approved flag per stage; the state is always derived from those, never
stored separately.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import ApprovalStage, ApprovalState, Decision, RequestStatus, Role
from ..core.exceptions import AlreadyProcessed, AuthorizationError, ValidationError
from .model import ApprovalRequest

STAGE_ORDER = (ApprovalStage.SUPERVISOR, ApprovalStage.HR, ApprovalStage.ADMIN)

STAGE_ROLE = {
    ApprovalStage.SUPERVISOR: Role.SUPERVISOR,
    ApprovalStage.HR: Role.HR,
    ApprovalStage.ADMIN: Role.ADMIN,
}

_STATE_AFTER = {
    ApprovalStage.SUPERVISOR: ApprovalState.SUPERVISOR_APPROVED,
    ApprovalStage.HR: ApprovalState.HR_APPROVED,
    ApprovalStage.ADMIN: ApprovalState.APPROVED,
}

_STAGE_LABEL = {
    ApprovalStage.SUPERVISOR: "supervisor",
    ApprovalStage.HR: "HR",
    ApprovalStage.ADMIN: "admin",
}


@dataclass(frozen=True)
class Transition:
    stage: ApprovalStage
    decision: Decision
    new_status: RequestStatus
    next_stage: Optional[ApprovalStage]

    @property
    def is_final(self) -> bool:
        return self.new_status != RequestStatus.PENDING


def stage_label(stage: ApprovalStage) -> str:
    return _STAGE_LABEL[stage]


def parse_decision(value) -> Decision:
    if isinstance(value, Decision):
        return value
    try:
        return Decision(str(value or "").strip())
    except ValueError:
        raise ValidationError("status must be Approved or Rejected")


def derive_state(request: ApprovalRequest) -> ApprovalState:
    if request.status == RequestStatus.REJECTED:
        return ApprovalState.REJECTED
    if request.status == RequestStatus.APPROVED:
        return ApprovalState.APPROVED

    state = ApprovalState.PENDING
    for stage in STAGE_ORDER:
        if not request.approved(stage):
            break
        state = _STATE_AFTER[stage]
    return state


def current_stage(request: ApprovalRequest) -> Optional[ApprovalStage]:
    """The stage whose decision is awaited, or None once terminal."""
    if request.status != RequestStatus.PENDING:
        return None
    for stage in STAGE_ORDER:
        if not request.approved(stage):
            return stage
    return None


def next_stage(stage: ApprovalStage) -> Optional[ApprovalStage]:
    idx = STAGE_ORDER.index(stage)
    return STAGE_ORDER[idx + 1] if idx + 1 < len(STAGE_ORDER) else None


def plan_transition(request: ApprovalRequest, stage: ApprovalStage, decision: Decision) -> Transition:
    """Validate that ``stage`` may decide ``request`` now and describe the result.

    Raises AlreadyProcessed when the request is terminal or ``stage`` has
    already been passed, AuthorizationError when an earlier stage is still
    outstanding.
    """

    awaiting = current_stage(request)
    if awaiting is None:
        raise AlreadyProcessed(f"Request already {request.status.value.lower()}")

    if STAGE_ORDER.index(stage) < STAGE_ORDER.index(awaiting):
        raise AlreadyProcessed(f"Request already processed by {stage_label(stage)}")
    if STAGE_ORDER.index(stage) > STAGE_ORDER.index(awaiting):
        raise AuthorizationError(f"Request is awaiting {stage_label(awaiting)} approval")

    if decision == Decision.REJECT:
        return Transition(stage=stage, decision=decision, new_status=RequestStatus.REJECTED, next_stage=None)

    following = next_stage(stage)
    return Transition(
        stage=stage,
        decision=decision,
        new_status=RequestStatus.PENDING if following else RequestStatus.APPROVED,
        next_stage=following,
    )
