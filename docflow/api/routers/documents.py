"""Document workflow API endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from docflow.api.deps import get_db, get_document_service, get_history_reader, get_principal
from docflow.api.schemas.documents import (
    DocumentResponse,
    EngineeringReviewRequest,
    FilePathRequest,
    HistoryItemResponse,
    ProgressResponse,
    ReviewRequest,
    SubmitDocumentRequest,
)
from docflow.core.approval.history import DocumentHistoryReader
from docflow.core.approval.service import DocumentService
from docflow.core.approval.states import ReviewStage
from docflow.core.principal import Principal
from docflow.db.session import transaction

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("/submit", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
def submit_document(
    body: SubmitDocumentRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
    service: DocumentService = Depends(get_document_service),
):
    """Submit a new document (vendors only)."""
    with transaction(db):
        document = service.submit(
            principal,
            name=body.name,
            file_path=body.file_path,
            document_type=body.document_type,
            contract_id=body.contract_id,
            overall_deadline=body.overall_deadline,
            remarks=body.remarks,
        )
    return DocumentResponse.model_validate(document)


@router.get("/history", response_model=List[HistoryItemResponse])
def get_history(
    principal: Principal = Depends(get_principal),
    reader: DocumentHistoryReader = Depends(get_history_reader),
):
    """List documents the caller submitted or reviewed."""
    return [HistoryItemResponse.model_validate(item) for item in reader.get_history(principal)]


@router.get("/{document_id}/progress", response_model=ProgressResponse)
def get_progress(
    document_id: int,
    principal: Principal = Depends(get_principal),
    reader: DocumentHistoryReader = Depends(get_history_reader),
):
    """Get a document's status and approval timeline (Dalkon and Manager only)."""
    return ProgressResponse.model_validate(reader.get_progress(principal, document_id))


@router.patch("/{document_id}/resubmit", response_model=DocumentResponse)
def resubmit_document(
    document_id: int,
    body: FilePathRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
    service: DocumentService = Depends(get_document_service),
):
    """Resubmit a document with a revised file."""
    with transaction(db):
        document = service.resubmit(principal, document_id, body.file_path)
    return DocumentResponse.model_validate(document)


@router.patch("/{document_id}/file", response_model=DocumentResponse)
def upload_file(
    document_id: int,
    body: FilePathRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
    service: DocumentService = Depends(get_document_service),
):
    """Replace a document's file without changing its status."""
    with transaction(db):
        document = service.upload_file(principal, document_id, body.file_path)
    return DocumentResponse.model_validate(document)


def _review(
    stage: ReviewStage,
    document_id: int,
    body: ReviewRequest,
    db: Session,
    principal: Principal,
    service: DocumentService,
) -> DocumentResponse:
    with transaction(db):
        document = service.review(
            principal, document_id, stage, body.action, notes=getattr(body, "notes", None)
        )
    return DocumentResponse.model_validate(document)


@router.patch("/{document_id}/dalkon-review", response_model=DocumentResponse)
def dalkon_review(
    document_id: int,
    body: ReviewRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
    service: DocumentService = Depends(get_document_service),
):
    """Consulting review: approve, returnForCorrection or reject."""
    return _review(ReviewStage.CONSULTANT, document_id, body, db, principal, service)


@router.patch("/{document_id}/engineering-review", response_model=DocumentResponse)
def engineering_review(
    document_id: int,
    body: EngineeringReviewRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
    service: DocumentService = Depends(get_document_service),
):
    """Engineering review: approve, approveWithNotes or returnForCorrection."""
    return _review(ReviewStage.ENGINEERING, document_id, body, db, principal, service)


@router.patch("/{document_id}/manager-review", response_model=DocumentResponse)
def manager_review(
    document_id: int,
    body: ReviewRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
    service: DocumentService = Depends(get_document_service),
):
    """Manager review: approve or returnForCorrection."""
    return _review(ReviewStage.MANAGER, document_id, body, db, principal, service)
