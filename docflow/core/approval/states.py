"""Document review states, stages and transitions.

Transition table (stage, action -> status):

    consultant   approve              -> inReviewEngineering
    consultant   returnForCorrection  -> returnForCorrection
    consultant   reject               -> rejected
    engineering  approve              -> approved
    engineering  approveWithNotes     -> approvedWithNotes
    engineering  returnForCorrection  -> returnForCorrection
    manager      approve              -> approved
    manager      returnForCorrection  -> returnForCorrection

Vendor submit and resubmit put a document at ``submitted``.

Each review stage is bound to exactly one role. By default the guard checks
only that role; the document's current status is not consulted unless
strict stage ordering is switched on (see ``STAGE_ENTRY_STATES``).
"""

from enum import Enum
from typing import Dict, NamedTuple, Optional, Set, Type, Union

from docflow.core.errors import InvalidActionError
from docflow.core.principal import Role


class DocumentStatus(str, Enum):
    """States a document can be in."""

    SUBMITTED = "submitted"
    IN_REVIEW_CONSULTANT = "inReviewConsultant"
    IN_REVIEW_ENGINEERING = "inReviewEngineering"
    IN_REVIEW_MANAGER = "inReviewManager"
    APPROVED_WITH_NOTES = "approvedWithNotes"
    APPROVED = "approved"
    RETURN_FOR_CORRECTION = "returnForCorrection"
    REJECTED = "rejected"


class DocumentType(str, Enum):
    """Domain category of a document. Does not affect transitions."""

    CIVIL = "civil"
    PROTECTION = "protection"


class ReviewStage(str, Enum):
    """Review stages, in pipeline order."""

    CONSULTANT = "consultant"
    ENGINEERING = "engineering"
    MANAGER = "manager"


class ConsultantAction(str, Enum):
    APPROVE = "approve"
    RETURN_FOR_CORRECTION = "returnForCorrection"
    REJECT = "reject"


class EngineeringAction(str, Enum):
    APPROVE = "approve"
    APPROVE_WITH_NOTES = "approveWithNotes"
    RETURN_FOR_CORRECTION = "returnForCorrection"


class ManagerAction(str, Enum):
    APPROVE = "approve"
    RETURN_FOR_CORRECTION = "returnForCorrection"


ReviewAction = Union[ConsultantAction, EngineeringAction, ManagerAction]


STAGE_ROLES: Dict[ReviewStage, Role] = {
    ReviewStage.CONSULTANT: Role.DALKON,
    ReviewStage.ENGINEERING: Role.ENGINEER,
    ReviewStage.MANAGER: Role.MANAGER,
}

STAGE_ACTIONS: Dict[ReviewStage, Type[Enum]] = {
    ReviewStage.CONSULTANT: ConsultantAction,
    ReviewStage.ENGINEERING: EngineeringAction,
    ReviewStage.MANAGER: ManagerAction,
}


# Vendor-side narratives (no Approval row is written for these)
SUBMITTED_NARRATIVE = "Submitted by vendor"
RESUBMITTED_NARRATIVE = "Resubmitted by vendor"
FILE_UPDATED_NARRATIVE = "File updated"


class TransitionRule(NamedTuple):
    """Defines what a review action does."""
    stage: ReviewStage
    action: ReviewAction
    to_status: DocumentStatus
    narrative: str
    accepts_notes: bool = False  # caller notes replace the narrative


TRANSITION_RULES: list[TransitionRule] = [
    # Consulting reviewer
    TransitionRule(ReviewStage.CONSULTANT, ConsultantAction.APPROVE,
                   DocumentStatus.IN_REVIEW_ENGINEERING, "Forwarded to Engineering"),
    TransitionRule(ReviewStage.CONSULTANT, ConsultantAction.RETURN_FOR_CORRECTION,
                   DocumentStatus.RETURN_FOR_CORRECTION, "Returned to Vendor"),
    TransitionRule(ReviewStage.CONSULTANT, ConsultantAction.REJECT,
                   DocumentStatus.REJECTED, "Rejected by Dalkon"),

    # Engineering reviewer
    TransitionRule(ReviewStage.ENGINEERING, EngineeringAction.APPROVE,
                   DocumentStatus.APPROVED, "Approved by Engineer"),
    TransitionRule(ReviewStage.ENGINEERING, EngineeringAction.APPROVE_WITH_NOTES,
                   DocumentStatus.APPROVED_WITH_NOTES, "Approved with notes", accepts_notes=True),
    TransitionRule(ReviewStage.ENGINEERING, EngineeringAction.RETURN_FOR_CORRECTION,
                   DocumentStatus.RETURN_FOR_CORRECTION, "Returned for correction", accepts_notes=True),

    # Manager
    TransitionRule(ReviewStage.MANAGER, ManagerAction.APPROVE,
                   DocumentStatus.APPROVED, "Approved by Manager"),
    TransitionRule(ReviewStage.MANAGER, ManagerAction.RETURN_FOR_CORRECTION,
                   DocumentStatus.RETURN_FOR_CORRECTION, "Returned by Manager"),
]

# Keyed by action value: the per-stage enums share values like "approve"
TRANSITION_TARGETS: Dict[tuple[ReviewStage, str], TransitionRule] = {
    (rule.stage, rule.action.value): rule for rule in TRANSITION_RULES
}


# Statuses from which a stage may act when strict ordering is enabled
STAGE_ENTRY_STATES: Dict[ReviewStage, Set[DocumentStatus]] = {
    ReviewStage.CONSULTANT: {
        DocumentStatus.SUBMITTED,
        DocumentStatus.IN_REVIEW_CONSULTANT,
    },
    ReviewStage.ENGINEERING: {
        DocumentStatus.IN_REVIEW_ENGINEERING,
    },
    ReviewStage.MANAGER: {
        DocumentStatus.IN_REVIEW_ENGINEERING,
        DocumentStatus.APPROVED_WITH_NOTES,
        DocumentStatus.IN_REVIEW_MANAGER,
    },
}

# Reviewer roles that may read history
REVIEWER_ROLES: Set[Role] = set(STAGE_ROLES.values())

# Roles allowed to read a document's progress timeline
PROGRESS_ROLES: Set[Role] = {Role.DALKON, Role.MANAGER}


def parse_stage(raw: Union[str, ReviewStage]) -> ReviewStage:
    """Resolve a stage name, raising InvalidActionError for unknown stages."""
    try:
        return ReviewStage(raw)
    except ValueError:
        raise InvalidActionError(f"Unknown review stage: {raw}") from None


def parse_action(stage: ReviewStage, raw: Union[str, Enum]) -> ReviewAction:
    """Resolve an action string into the stage's closed action enum."""
    action_enum = STAGE_ACTIONS[stage]
    value = raw.value if isinstance(raw, Enum) else raw
    try:
        return action_enum(value)
    except ValueError:
        raise InvalidActionError("Invalid action") from None


def get_transition_rule(stage: ReviewStage, action: ReviewAction) -> Optional[TransitionRule]:
    """Get the rule for a stage/action combination."""
    return TRANSITION_TARGETS.get((stage, action.value))


def can_act_from(stage: ReviewStage, status: DocumentStatus) -> bool:
    """Check whether a stage may act on a document in the given status."""
    return status in STAGE_ENTRY_STATES.get(stage, set())
