"""Review state machine implementation.

Handles stage transitions with role checking, action validation and
optional stage-order enforcement. Persistence lives in the service.
"""

import logging
from typing import NamedTuple, Optional, Union
from enum import Enum

from docflow.core.errors import ForbiddenError, InvalidActionError, InvalidTransitionError
from docflow.core.principal import Principal

from .states import (
    DocumentStatus,
    ReviewAction,
    ReviewStage,
    STAGE_ROLES,
    can_act_from,
    get_transition_rule,
    parse_action,
    parse_stage,
)

logger = logging.getLogger(__name__)


class TransitionOutcome(NamedTuple):
    """Result of a review transition, ready to be persisted."""
    document_id: int
    stage: ReviewStage
    action: ReviewAction
    from_status: DocumentStatus
    to_status: DocumentStatus
    narrative: str
    actor_id: int


class ReviewStateMachine:
    """
    State machine for one document's review pipeline.

    Manages transitions with:
    - Role guard per review stage
    - Closed per-stage action sets
    - Optional check of the document's current status
    """

    def __init__(
        self,
        document_id: int,
        current_status: Union[DocumentStatus, str],
        principal: Principal,
        *,
        strict_stage_order: bool = False,
    ):
        """
        Initialize the state machine.

        Args:
            document_id: ID of the document under review
            current_status: Status currently stored on the document
            principal: The acting user
            strict_stage_order: Reject actions from stages the document is not at
        """
        self.document_id = document_id
        self._status = DocumentStatus(current_status)
        self.principal = principal
        self.strict_stage_order = strict_stage_order

    @property
    def status(self) -> DocumentStatus:
        """Current status of the document."""
        return self._status

    def transition(
        self,
        stage: Union[ReviewStage, str],
        action: Union[str, Enum],
        *,
        notes: Optional[str] = None,
    ) -> TransitionOutcome:
        """
        Perform a review transition.

        Args:
            stage: Review stage the caller is acting as
            action: Action name, validated against the stage's action set
            notes: Free text; replaces the narrative for actions that accept notes

        Returns:
            The transition outcome

        Raises:
            ForbiddenError: If the principal's role does not own the stage
            InvalidActionError: If the action is unknown for the stage
            InvalidTransitionError: If strict ordering is on and the document is elsewhere
        """
        stage = parse_stage(stage)
        parsed = self._check(stage, action)
        rule = get_transition_rule(stage, parsed)
        if rule is None:
            raise InvalidActionError("Invalid action")

        narrative = rule.narrative
        if rule.accepts_notes and notes:
            narrative = notes

        outcome = TransitionOutcome(
            document_id=self.document_id,
            stage=stage,
            action=parsed,
            from_status=self._status,
            to_status=rule.to_status,
            narrative=narrative,
            actor_id=self.principal.id,
        )
        self._status = rule.to_status
        return outcome

    def _check(self, stage: ReviewStage, action: Union[str, Enum]) -> ReviewAction:
        required_role = STAGE_ROLES[stage]
        if self.principal.role != required_role:
            logger.warning(
                "Forbidden %s review on document %s by user %s (role %s)",
                stage.value, self.document_id, self.principal.id, self.principal.role.value,
            )
            raise ForbiddenError(f"Only {required_role.value} can review")

        parsed = parse_action(stage, action)

        if self.strict_stage_order and not can_act_from(stage, self._status):
            raise InvalidTransitionError(
                f"Cannot perform {stage.value} review from status {self._status.value}",
                self._status.value,
                stage.value,
            )
        return parsed
