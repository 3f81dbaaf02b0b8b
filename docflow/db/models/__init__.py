"""Database models for Docflow."""

from docflow.db.models.user import User
from docflow.db.models.contract import Contract
from docflow.db.models.document import Document
from docflow.db.models.approval import Approval

__all__ = [
    "User",
    "Contract",
    "Document",
    "Approval",
]
