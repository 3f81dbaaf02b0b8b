"""Database seeding for Docflow.

Creates one demo user per role and the demo contracts. Users are
idempotent; contract numbers are unique and a duplicate raises
ConflictError.

Run with ``python -m docflow.db.seed``.
"""

import logging
from datetime import datetime
from typing import Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from docflow.core.errors import ConflictError
from docflow.core.principal import Role
from docflow.db.models import Contract, User

logger = logging.getLogger(__name__)


DEFAULT_USERS = {
    Role.MANAGER: {"email": "manager@example.com", "name": "John Manager"},
    Role.DALKON: {"email": "dalkon@example.com", "name": "Jane Dalkon"},
    Role.ENGINEER: {"email": "engineer@example.com", "name": "Bob Engineer"},
    Role.VENDOR: {"email": "vendor@example.com", "name": "Alice Vendor"},
}

DEFAULT_CONTRACTS = {
    "CONTRACT-001": datetime(2025, 1, 1),
    "CONTRACT-002": datetime(2025, 2, 1),
}


def seed_default_users(db: Session) -> Dict[Role, User]:
    """
    Create the demo users, one per role.

    Returns existing users untouched when their email is already present.
    """
    users = {}
    for role, config in DEFAULT_USERS.items():
        existing = db.query(User).filter(User.email == config["email"]).first()
        if existing:
            users[role] = existing
            continue

        user = User(email=config["email"], name=config["name"], role=role.value)
        db.add(user)
        users[role] = user

    db.flush()
    return users


def create_contract(db: Session, contract_number: str, contract_date: datetime) -> Contract:
    """
    Register a contract.

    Raises:
        ConflictError: If the contract number is already registered
    """
    exists = db.query(Contract).filter(Contract.contract_number == contract_number).first()
    if exists:
        raise ConflictError(f"Contract {contract_number} already exists")

    contract = Contract(contract_number=contract_number, contract_date=contract_date)
    db.add(contract)
    try:
        db.flush()
    except IntegrityError:
        # Lost a race with another writer; the caller must roll back
        raise ConflictError(f"Contract {contract_number} already exists") from None
    return contract


def seed_default_contracts(db: Session) -> Dict[str, Contract]:
    """Create the demo contracts, skipping numbers that already exist."""
    contracts = {}
    for number, contract_date in DEFAULT_CONTRACTS.items():
        existing = db.query(Contract).filter(Contract.contract_number == number).first()
        contracts[number] = existing or create_contract(db, number, contract_date)
    return contracts


def main() -> None:
    from docflow.core.config import get_settings
    from docflow.core.logging import configure_logging
    from docflow.db.session import SessionLocal, transaction

    settings = get_settings()
    configure_logging(settings)

    db = SessionLocal()
    try:
        with transaction(db):
            users = seed_default_users(db)
            contracts = seed_default_contracts(db)
        logger.info("Seeded %d users and %d contracts", len(users), len(contracts))
    finally:
        db.close()


if __name__ == "__main__":
    main()
