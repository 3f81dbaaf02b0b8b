from typing import Generator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from docflow.core.approval.deadlines import days_after
from docflow.core.approval.history import DocumentHistoryReader
from docflow.core.approval.service import DocumentService
from docflow.core.config import Settings, get_settings
from docflow.core.errors import AuthenticationError
from docflow.core.principal import Principal
from docflow.core.security import authenticate
from docflow.db.session import SessionLocal

bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator:
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_principal(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    """Resolve the caller from the bearer token."""
    token = credentials.credentials if credentials else None
    try:
        return authenticate(token, db)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_document_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> DocumentService:
    return DocumentService(
        db,
        deadline_policy=days_after(settings.approval_deadline_days),
        strict_stage_order=settings.strict_stage_order,
    )


def get_history_reader(db: Session = Depends(get_db)) -> DocumentHistoryReader:
    return DocumentHistoryReader(db)
