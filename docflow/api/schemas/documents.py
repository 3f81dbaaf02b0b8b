"""Request and response schemas for document workflow endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from docflow.core.approval.states import DocumentType


class SubmitDocumentRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    file_path: str = Field(..., min_length=1)
    document_type: DocumentType
    contract_id: Optional[int] = None
    overall_deadline: Optional[datetime] = None
    remarks: Optional[str] = None


class FilePathRequest(BaseModel):
    """Body for resubmission and file replacement."""
    file_path: str = Field(..., min_length=1)


class ReviewRequest(BaseModel):
    """
    Review action. ``action`` is validated against the stage's action set by
    the workflow engine so unknown actions surface as ``invalid_action``.
    """
    model_config = ConfigDict(extra="forbid")

    action: str


class EngineeringReviewRequest(ReviewRequest):
    """Engineering review; ``notes`` replace the default Approval narrative."""
    notes: Optional[str] = None


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: Optional[str] = None
    role: Optional[str] = None
    email: Optional[str] = None


class ApprovalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    document_id: int
    type: str
    status: str
    notes: Optional[str] = None
    approved_by_id: int
    deadline: Optional[datetime] = None
    created_at: datetime


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    file_path: str
    version: int
    status: str
    document_type: str
    progress: Optional[str] = None
    remarks: Optional[str] = None
    overall_deadline: Optional[datetime] = None
    contract_id: Optional[int] = None
    submitted_by_id: int
    reviewed_by_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    approvals: List[ApprovalResponse] = []


class ApprovalEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    status: str
    notes: Optional[str] = None
    deadline: Optional[datetime] = None
    created_at: datetime
    reviewed_by: Optional[UserSummary] = None


class HistoryItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    file_path: str
    version: int
    status: str
    document_type: str
    progress: Optional[str] = None
    overall_deadline: Optional[datetime] = None
    contract_id: Optional[int] = None
    contract_number: Optional[str] = None
    submitted_by_id: int
    reviewed_by_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    submitted_by: Optional[UserSummary] = None
    approvals: List[ApprovalEntryResponse] = []


class ProgressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    document_id: int
    name: str
    status: str
    progress: Optional[str] = None
    approvals: List[ApprovalEntryResponse] = []
