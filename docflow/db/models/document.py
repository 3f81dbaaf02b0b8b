"""Document and review models.

A Document carries its current status and a cached progress narrative;
the authoritative history is its append-only list of Approval rows.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from docflow.core.approval.deadlines import utcnow
from docflow.core.approval.states import DocumentStatus
from docflow.db.base import Base


class Document(Base):
    """
    A vendor document moving through the review pipeline.

    ``row_version`` is SQLAlchemy's optimistic-concurrency counter: an UPDATE
    that races another writer affects zero rows and raises StaleDataError.
    ``version`` is the business revision number bumped on resubmission.
    """
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    file_path = Column(String(1024), nullable=False)  # opaque storage reference
    version = Column(Integer, nullable=False, default=1)
    
    # Workflow state
    status = Column(String(50), nullable=False, default=DocumentStatus.SUBMITTED.value, index=True)
    document_type = Column(String(50), nullable=False)  # civil, protection
    progress = Column(Text, nullable=True)
    remarks = Column(Text, nullable=True)
    overall_deadline = Column(DateTime, nullable=True)
    
    # Related entities
    contract_id = Column(Integer, ForeignKey("contracts.id", ondelete="SET NULL"), nullable=True, index=True)
    submitted_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    reviewed_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    
    row_version = Column(Integer, nullable=False, default=1)
    
    # Timestamps
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, index=True)
    
    # Relationships
    contract = relationship("Contract", back_populates="documents")
    submitted_by = relationship("User", foreign_keys=[submitted_by_id], back_populates="submitted_documents")
    reviewed_by = relationship("User", foreign_keys=[reviewed_by_id])
    approvals = relationship(
        "Approval",
        back_populates="document",
        order_by="[Approval.created_at, Approval.id]",
        lazy="selectin",
    )
    
    __mapper_args__ = {"version_id_col": row_version}
    
    @property
    def contract_number(self):
        return self.contract.contract_number if self.contract else None
    
    def __repr__(self) -> str:
        return f"<Document {self.name} v{self.version} [{self.status}]>"
