"""Read-only projections over documents and their approvals.

- ``get_history``: role-scoped document listing
- ``get_progress``: one document's position plus its full approval timeline
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from docflow.core.errors import ForbiddenError, NotFoundError
from docflow.core.principal import Principal, Role
from docflow.db.models import Approval, Document

from .states import PROGRESS_ROLES, REVIEWER_ROLES


@dataclass(frozen=True)
class UserRef:
    id: int
    name: Optional[str]
    role: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class ApprovalEntry:
    id: int
    type: str
    status: str
    notes: Optional[str]
    deadline: Optional[datetime]
    created_at: datetime
    reviewed_by: Optional[UserRef]


@dataclass(frozen=True)
class HistoryItem:
    id: int
    name: str
    file_path: str
    version: int
    status: str
    document_type: str
    progress: Optional[str]
    overall_deadline: Optional[datetime]
    contract_id: Optional[int]
    contract_number: Optional[str]
    submitted_by_id: int
    reviewed_by_id: Optional[int]
    created_at: datetime
    updated_at: datetime
    submitted_by: Optional[UserRef] = None
    approvals: List[ApprovalEntry] = field(default_factory=list)


@dataclass(frozen=True)
class ProgressView:
    document_id: int
    name: str
    status: str
    progress: Optional[str]
    approvals: List[ApprovalEntry] = field(default_factory=list)


def _approval_entry(approval: Approval) -> ApprovalEntry:
    reviewer = approval.approved_by
    return ApprovalEntry(
        id=approval.id,
        type=approval.type,
        status=approval.status,
        notes=approval.notes,
        deadline=approval.deadline,
        created_at=approval.created_at,
        reviewed_by=UserRef(id=reviewer.id, name=reviewer.name, role=reviewer.role) if reviewer else None,
    )


def _history_item(document: Document, *, include_submitter: bool) -> HistoryItem:
    submitter = None
    if include_submitter and document.submitted_by is not None:
        u = document.submitted_by
        submitter = UserRef(id=u.id, name=u.name, email=u.email)

    # Newest first for listings
    approvals = sorted(document.approvals, key=lambda a: (a.created_at, a.id), reverse=True)
    return HistoryItem(
        id=document.id,
        name=document.name,
        file_path=document.file_path,
        version=document.version,
        status=document.status,
        document_type=document.document_type,
        progress=document.progress,
        overall_deadline=document.overall_deadline,
        contract_id=document.contract_id,
        contract_number=document.contract_number,
        submitted_by_id=document.submitted_by_id,
        reviewed_by_id=document.reviewed_by_id,
        created_at=document.created_at,
        updated_at=document.updated_at,
        submitted_by=submitter,
        approvals=[_approval_entry(a) for a in approvals],
    )


class DocumentHistoryReader:
    """Query side of the workflow. Never writes."""

    def __init__(self, db: Session):
        self.db = db

    def get_history(self, principal: Principal) -> List[HistoryItem]:
        """
        List the documents relevant to the caller.

        Vendors see what they submitted, newest first. Reviewers see every
        document they last reviewed or appear on as an approver, most
        recently updated first.

        Raises:
            ForbiddenError: For roles without a history view
        """
        query = self.db.query(Document).options(
            selectinload(Document.approvals).joinedload(Approval.approved_by),
            selectinload(Document.contract),
        )

        if principal.role == Role.VENDOR:
            documents = (
                query.filter(Document.submitted_by_id == principal.id)
                .order_by(Document.created_at.desc(), Document.id.desc())
                .all()
            )
            return [_history_item(d, include_submitter=False) for d in documents]

        if principal.role in REVIEWER_ROLES:
            documents = (
                query.options(selectinload(Document.submitted_by))
                .filter(
                    or_(
                        Document.reviewed_by_id == principal.id,
                        Document.approvals.any(Approval.approved_by_id == principal.id),
                    )
                )
                .order_by(Document.updated_at.desc(), Document.id.desc())
                .all()
            )
            return [_history_item(d, include_submitter=True) for d in documents]

        raise ForbiddenError("Role not permitted to view history")

    def get_progress(self, principal: Principal, document_id: int) -> ProgressView:
        """
        Get a document's current position and its approvals, oldest first.

        Raises:
            ForbiddenError: Unless the caller is a consulting reviewer or manager
            NotFoundError: If the document does not exist
        """
        if principal.role not in PROGRESS_ROLES:
            raise ForbiddenError("Only Dalkon and Manager can view progress")

        document = (
            self.db.query(Document)
            .options(selectinload(Document.approvals).joinedload(Approval.approved_by))
            .filter(Document.id == document_id)
            .first()
        )
        if document is None:
            raise NotFoundError("Document not found")

        approvals = sorted(document.approvals, key=lambda a: (a.created_at, a.id))
        return ProgressView(
            document_id=document.id,
            name=document.name,
            status=document.status,
            progress=document.progress,
            approvals=[_approval_entry(a) for a in approvals],
        )
