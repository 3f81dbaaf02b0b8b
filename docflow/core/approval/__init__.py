"""Approval workflow module for Docflow.

Implements the document review state machine. The persistence-backed
``DocumentService`` and ``DocumentHistoryReader`` live in ``service`` and
``history`` and are imported from there directly.
"""

from .states import (
    DocumentStatus,
    DocumentType,
    ReviewStage,
    ConsultantAction,
    EngineeringAction,
    ManagerAction,
    TRANSITION_RULES,
)
from .machine import ReviewStateMachine, TransitionOutcome

__all__ = [
    "DocumentStatus",
    "DocumentType",
    "ReviewStage",
    "ConsultantAction",
    "EngineeringAction",
    "ManagerAction",
    "TRANSITION_RULES",
    "ReviewStateMachine",
    "TransitionOutcome",
]
