from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from docflow.core.approval.deadlines import utcnow
from docflow.db.base import Base


class Contract(Base):
    __tablename__ = "contracts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    contract_number = Column(String(100), unique=True, nullable=False, index=True)
    contract_date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    documents = relationship("Document", back_populates="contract")

    def __repr__(self) -> str:
        return f"<Contract {self.contract_number}>"
