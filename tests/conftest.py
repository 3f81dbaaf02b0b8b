"""Pytest configuration and shared fixtures."""

from datetime import datetime
from typing import Callable, Dict

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from docflow.api.deps import get_db, get_document_service
from docflow.api.main import app
from docflow.core.approval.deadlines import days_after
from docflow.core.approval.service import DocumentService
from docflow.core.principal import Role
from docflow.core.security import create_access_token
from docflow.db.base import Base
from docflow.db.models import User

from tests.factories import FIXED_NOW, create_user


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Session:
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def users(db_session) -> Dict[Role, User]:
    """One user per role."""
    return {
        Role.VENDOR: create_user(db_session, role=Role.VENDOR, name="Alice Vendor"),
        Role.DALKON: create_user(db_session, role=Role.DALKON, name="Jane Dalkon"),
        Role.ENGINEER: create_user(db_session, role=Role.ENGINEER, name="Bob Engineer"),
        Role.MANAGER: create_user(db_session, role=Role.MANAGER, name="John Manager"),
    }


@pytest.fixture
def vendor(users) -> User:
    return users[Role.VENDOR]


@pytest.fixture
def dalkon(users) -> User:
    return users[Role.DALKON]


@pytest.fixture
def engineer(users) -> User:
    return users[Role.ENGINEER]


@pytest.fixture
def manager(users) -> User:
    return users[Role.MANAGER]


@pytest.fixture
def service(db_session, fixed_clock) -> DocumentService:
    return DocumentService(db_session, clock=fixed_clock, deadline_policy=days_after(7))


@pytest.fixture
def client(db_session, users, fixed_clock):
    """TestClient bound to the test session and a fixed clock.

    Users are committed first: a failed request rolls the session back.
    """
    db_session.commit()

    def override_get_db():
        yield db_session

    def override_get_document_service(db: Session = Depends(get_db)):
        return DocumentService(db, clock=fixed_clock, deadline_policy=days_after(7))

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_document_service] = override_get_document_service
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> Callable[[User], Dict[str, str]]:
    """Build a bearer header for a user. Tokens use the real clock."""

    def _headers(user: User) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _headers
