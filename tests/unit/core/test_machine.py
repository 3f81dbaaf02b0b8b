"""Tests for the review state machine."""

import pytest

from docflow.core.approval.machine import ReviewStateMachine
from docflow.core.approval.states import (
    ConsultantAction,
    DocumentStatus,
    EngineeringAction,
    ReviewStage,
)
from docflow.core.errors import (
    ForbiddenError,
    InvalidActionError,
    InvalidTransitionError,
)
from docflow.core.principal import Principal, Role


DALKON = Principal(id=2, role=Role.DALKON)
ENGINEER = Principal(id=3, role=Role.ENGINEER)
MANAGER = Principal(id=4, role=Role.MANAGER)
VENDOR = Principal(id=1, role=Role.VENDOR)


class TestReviewStateMachine:
    """Test transitions through the machine."""

    def test_initial_status(self):
        machine = ReviewStateMachine(1, "submitted", DALKON)
        assert machine.status == DocumentStatus.SUBMITTED

    def test_consultant_approve(self):
        machine = ReviewStateMachine(1, DocumentStatus.SUBMITTED, DALKON)
        outcome = machine.transition(ReviewStage.CONSULTANT, "approve")

        assert outcome.from_status == DocumentStatus.SUBMITTED
        assert outcome.to_status == DocumentStatus.IN_REVIEW_ENGINEERING
        assert outcome.narrative == "Forwarded to Engineering"
        assert outcome.actor_id == DALKON.id
        assert machine.status == DocumentStatus.IN_REVIEW_ENGINEERING

    def test_consultant_reject(self):
        machine = ReviewStateMachine(1, DocumentStatus.SUBMITTED, DALKON)
        machine.transition("consultant", ConsultantAction.REJECT)
        assert machine.status == DocumentStatus.REJECTED

    def test_engineering_notes_replace_narrative(self):
        machine = ReviewStateMachine(1, DocumentStatus.IN_REVIEW_ENGINEERING, ENGINEER)
        outcome = machine.transition(
            ReviewStage.ENGINEERING, EngineeringAction.APPROVE_WITH_NOTES, notes="Minor fixes"
        )
        assert outcome.to_status == DocumentStatus.APPROVED_WITH_NOTES
        assert outcome.narrative == "Minor fixes"

    def test_engineering_default_narrative_without_notes(self):
        machine = ReviewStateMachine(1, DocumentStatus.IN_REVIEW_ENGINEERING, ENGINEER)
        outcome = machine.transition(ReviewStage.ENGINEERING, "returnForCorrection")
        assert outcome.narrative == "Returned for correction"

    def test_manager_ignores_notes(self):
        machine = ReviewStateMachine(1, DocumentStatus.APPROVED_WITH_NOTES, MANAGER)
        outcome = machine.transition(ReviewStage.MANAGER, "approve", notes="ignored")
        assert outcome.narrative == "Approved by Manager"
        assert machine.status == DocumentStatus.APPROVED

    def test_outcome_carries_document_id(self):
        machine = ReviewStateMachine(7, DocumentStatus.SUBMITTED, DALKON)
        outcome = machine.transition(ReviewStage.CONSULTANT, "returnForCorrection")
        assert outcome.document_id == 7
        assert outcome.to_status == DocumentStatus.RETURN_FOR_CORRECTION


class TestRoleGuard:
    """Each stage is bound to exactly one role."""

    @pytest.mark.parametrize("principal", [VENDOR, ENGINEER, MANAGER])
    def test_only_dalkon_can_consult(self, principal):
        machine = ReviewStateMachine(1, DocumentStatus.SUBMITTED, principal)
        with pytest.raises(ForbiddenError) as exc_info:
            machine.transition(ReviewStage.CONSULTANT, "approve")
        assert exc_info.value.message == "Only Dalkon can review"
        assert machine.status == DocumentStatus.SUBMITTED

    def test_role_checked_before_action(self):
        """A wrong role gets Forbidden even with an unknown action."""
        machine = ReviewStateMachine(1, DocumentStatus.SUBMITTED, VENDOR)
        with pytest.raises(ForbiddenError):
            machine.transition(ReviewStage.MANAGER, "bogus")

    def test_unknown_action(self):
        machine = ReviewStateMachine(1, DocumentStatus.SUBMITTED, MANAGER)
        with pytest.raises(InvalidActionError):
            machine.transition(ReviewStage.MANAGER, "reject")
        assert machine.status == DocumentStatus.SUBMITTED


class TestStageOrder:
    """Permissive by default; strict ordering is opt-in."""

    def test_manager_can_act_on_submitted_by_default(self):
        machine = ReviewStateMachine(1, DocumentStatus.SUBMITTED, MANAGER)
        outcome = machine.transition(ReviewStage.MANAGER, "approve")
        assert outcome.to_status == DocumentStatus.APPROVED

    def test_strict_order_blocks_out_of_stage_action(self):
        machine = ReviewStateMachine(1, DocumentStatus.SUBMITTED, MANAGER, strict_stage_order=True)
        with pytest.raises(InvalidTransitionError) as exc_info:
            machine.transition(ReviewStage.MANAGER, "approve")
        assert exc_info.value.status_code == 409
        assert exc_info.value.from_status == "submitted"
        assert exc_info.value.stage == "manager"
        assert machine.status == DocumentStatus.SUBMITTED

    def test_strict_order_allows_in_stage_action(self):
        machine = ReviewStateMachine(
            1, DocumentStatus.IN_REVIEW_ENGINEERING, ENGINEER, strict_stage_order=True
        )
        outcome = machine.transition(ReviewStage.ENGINEERING, "approve")
        assert outcome.to_status == DocumentStatus.APPROVED
