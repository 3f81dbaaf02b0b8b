"""Engine and session factory for Docflow."""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from docflow.core.config import get_settings

settings = get_settings()


def build_engine(database_url: str):
    """Create an engine; SQLite connections are shared across request threads."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Commit everything done inside the block as one unit, or nothing.

    Workflow services only flush; this is where a transition's document
    update and its Approval insert become durable together.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
