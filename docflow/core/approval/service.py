"""Document service for the review workflow.

Provides the role-gated action surface (submit, resubmit, file update,
review) on top of the state machine, with database persistence. Methods
flush but never commit: the caller wraps each call in one transaction so a
status change and its Approval row are stored together or not at all.
"""

import logging
from datetime import datetime
from typing import Optional, Union
from enum import Enum

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from docflow.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from docflow.core.principal import Principal, Role
from docflow.db.models import Approval, Contract, Document, User

from .deadlines import Clock, DeadlinePolicy, days_after, utcnow
from .machine import ReviewStateMachine
from .states import (
    DocumentStatus,
    DocumentType,
    ReviewStage,
    FILE_UPDATED_NARRATIVE,
    RESUBMITTED_NARRATIVE,
    SUBMITTED_NARRATIVE,
    parse_stage,
)

logger = logging.getLogger(__name__)


class DocumentService:
    """
    High-level service for the document review workflow.

    Handles:
    - Vendor submission, resubmission and file replacement
    - Review transitions with their Approval audit rows
    - Existence, ownership and role checks before any write
    """

    def __init__(
        self,
        db: Session,
        *,
        clock: Clock = utcnow,
        deadline_policy: Optional[DeadlinePolicy] = None,
        strict_stage_order: bool = False,
    ):
        """
        Initialize the document service.

        Args:
            db: Database session
            clock: Returns the current (naive UTC) time
            deadline_policy: Maps an action time to the Approval deadline
            strict_stage_order: Only let a stage act on documents at that stage
        """
        self.db = db
        self.clock = clock
        self.deadline_policy = deadline_policy or days_after()
        self.strict_stage_order = strict_stage_order

    def submit(
        self,
        principal: Principal,
        *,
        name: str,
        file_path: str,
        document_type: Union[DocumentType, str],
        contract_id: Optional[int] = None,
        overall_deadline: Optional[datetime] = None,
        remarks: Optional[str] = None,
    ) -> Document:
        """
        Create a new document at ``submitted``.

        No Approval row is written: the audit trail starts at the first review.

        Raises:
            NotFoundError: If the acting user or the contract does not exist
            ForbiddenError: If the caller is not a vendor
            ValidationError: If name, file path or document type are invalid
        """
        self._require_user(principal)
        if principal.role != Role.VENDOR:
            raise ForbiddenError("Only vendors can submit documents")

        name = (name or "").strip()
        file_path = (file_path or "").strip()
        if not name:
            raise ValidationError("Document name is required")
        if not file_path:
            raise ValidationError("File is required")
        try:
            doc_type = DocumentType(document_type)
        except ValueError:
            raise ValidationError(f"Invalid document type: {document_type}") from None

        if contract_id is not None and self.db.get(Contract, contract_id) is None:
            raise NotFoundError("Contract not found")

        now = self.clock()
        document = Document(
            name=name,
            file_path=file_path,
            document_type=doc_type.value,
            contract_id=contract_id,
            submitted_by_id=principal.id,
            reviewed_by_id=None,
            status=DocumentStatus.SUBMITTED.value,
            version=1,
            progress=SUBMITTED_NARRATIVE,
            overall_deadline=overall_deadline,
            remarks=remarks,
            created_at=now,
            updated_at=now,
        )
        self.db.add(document)
        self._flush()

        logger.info("Document %s submitted by vendor %s", document.id, principal.id)
        return document

    def resubmit(self, principal: Principal, document_id: int, file_path: str) -> Document:
        """
        Send a document back into the pipeline with a new file.

        Allowed from every status, including ``rejected`` and ``approved``.
        The document is re-loaded under lock and its owner checked in the
        same transaction as the write.

        Raises:
            NotFoundError: If the user or document does not exist
            ForbiddenError: If the caller is not the vendor who submitted it
            ValidationError: If the file path is empty
        """
        self._require_user(principal)
        if principal.role != Role.VENDOR:
            raise ForbiddenError("Only vendors can resubmit documents")
        file_path = (file_path or "").strip()
        if not file_path:
            raise ValidationError("File is required")

        document = self._get_document(document_id, for_update=True)
        if document.submitted_by_id != principal.id:
            raise ForbiddenError("Only the vendor who submitted can resubmit")

        old_status = document.status
        document.file_path = file_path
        document.status = DocumentStatus.SUBMITTED.value
        document.reviewed_by_id = None
        document.version = (document.version or 1) + 1
        document.progress = RESUBMITTED_NARRATIVE
        document.updated_at = self.clock()
        self._flush()

        logger.info(
            "Document %s resubmitted by vendor %s (%s -> submitted, version %s)",
            document.id, principal.id, old_status, document.version,
        )
        return document

    def upload_file(self, principal: Principal, document_id: int, file_path: str) -> Document:
        """
        Replace a document's file without moving it through the workflow.

        Raises:
            NotFoundError: If the user or document does not exist
            ForbiddenError: If the caller did not submit the document
            ValidationError: If the file path is empty
        """
        self._require_user(principal)
        file_path = (file_path or "").strip()
        if not file_path:
            raise ValidationError("File is required")

        document = self._get_document(document_id, for_update=True)
        if document.submitted_by_id != principal.id:
            raise ForbiddenError("Only the vendor who submitted can upload file")

        document.file_path = file_path
        document.progress = FILE_UPDATED_NARRATIVE
        document.updated_at = self.clock()
        self._flush()

        logger.info("Document %s file replaced by vendor %s", document.id, principal.id)
        return document

    def review(
        self,
        principal: Principal,
        document_id: int,
        stage: Union[ReviewStage, str],
        action: Union[str, Enum],
        *,
        notes: Optional[str] = None,
    ) -> Document:
        """
        Apply a review action and append its Approval row.

        Args:
            principal: The acting reviewer
            document_id: Document to act on
            stage: consultant, engineering or manager
            action: Action name from the stage's closed action set
            notes: Optional notes (used by engineering approveWithNotes and
                returnForCorrection)

        Returns:
            The updated document, approvals included

        Raises:
            NotFoundError: If the acting user or the document does not exist
            ForbiddenError: If the principal's role does not own the stage
            InvalidActionError: If the action is not valid for the stage
            ConflictError: If another writer updated the document concurrently
        """
        self._require_user(principal)
        stage = parse_stage(stage)
        document = self._get_document(document_id, for_update=True)

        machine = ReviewStateMachine(
            document.id,
            document.status,
            principal,
            strict_stage_order=self.strict_stage_order,
        )
        outcome = machine.transition(stage, action, notes=notes)

        now = self.clock()
        # Keep the audit trail ordered even if the clock steps backwards
        if document.approvals:
            now = max(now, document.approvals[-1].created_at)

        document.status = outcome.to_status.value
        document.reviewed_by_id = principal.id
        document.progress = outcome.narrative
        document.updated_at = now

        approval = Approval(
            type=document.document_type,
            status=outcome.to_status.value,
            notes=outcome.narrative,
            approved_by_id=principal.id,
            deadline=self.deadline_policy(now),
            created_at=now,
        )
        document.approvals.append(approval)
        self._flush()

        logger.info(
            "Document %s %s review by user %s: %s -> %s",
            document.id, stage.value, principal.id,
            outcome.from_status.value, outcome.to_status.value,
        )
        return document

    def _get_document(self, document_id: int, *, for_update: bool = False) -> Document:
        query = self.db.query(Document).filter(Document.id == document_id)
        if for_update:
            query = query.with_for_update(of=Document)
        try:
            document = query.first()
        except StaleDataError:
            # Locked reloads compare row_version with the copy already in the session
            logger.warning("Document %s changed since it was loaded", document_id)
            raise ConflictError("Document was modified concurrently") from None
        if document is None:
            raise NotFoundError("Document not found")
        return document

    def _require_user(self, principal: Principal) -> User:
        user = self.db.get(User, principal.id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def _flush(self) -> None:
        try:
            self.db.flush()
        except StaleDataError:
            logger.warning("Concurrent modification detected on flush")
            raise ConflictError("Document was modified concurrently") from None
        except IntegrityError as e:
            logger.warning("Integrity error on flush: %s", e.orig)
            if "foreign key" in str(e.orig).lower():
                raise NotFoundError("Referenced record not found") from None
            raise ConflictError("Write conflicts with existing data") from None
