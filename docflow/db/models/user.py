from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from docflow.core.approval.deadlines import utcnow
from docflow.db.base import Base


class User(Base):
    """Read-only mirror of the identity provider's users."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=True)
    role = Column(String(50), nullable=False, index=True)  # Manager, Dalkon, Engineer, Vendor
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    submitted_documents = relationship(
        "Document", back_populates="submitted_by", foreign_keys="Document.submitted_by_id"
    )
    approvals = relationship("Approval", back_populates="approved_by")

    def __repr__(self) -> str:
        return f"<User {self.email} [{self.role}]>"
