"""Approval audit records.

One row per review transition. Rows are append-only: the mapper refuses
to UPDATE or DELETE them.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, event
from sqlalchemy.orm import relationship

from docflow.core.approval.deadlines import utcnow
from docflow.db.base import Base


class Approval(Base):
    """
    Immutable record of one review transition.

    ``status`` is the status the document moved to; ``notes`` holds the
    narrative written for that transition.
    """
    __tablename__ = "approvals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(Integer, ForeignKey("documents.id"), nullable=False, index=True)
    
    type = Column(String(50), nullable=False)  # mirrors Document.document_type
    status = Column(String(50), nullable=False)
    notes = Column(Text, nullable=True)
    
    # Actor
    approved_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    
    deadline = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    
    # Relationships
    document = relationship("Document", back_populates="approvals")
    approved_by = relationship("User", back_populates="approvals", lazy="joined")
    
    def __repr__(self) -> str:
        return f"<Approval doc={self.document_id} -> {self.status}>"


@event.listens_for(Approval, "before_update")
def _prevent_update(mapper, connection, target):
    raise RuntimeError("Approval records are append-only and cannot be updated")


@event.listens_for(Approval, "before_delete")
def _prevent_delete(mapper, connection, target):
    raise RuntimeError("Approval records are append-only and cannot be deleted")
