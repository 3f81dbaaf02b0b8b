"""Test Alembic migrations: upgrade, downgrade, and structural checks.

Runs against a throwaway SQLite file so no database server is needed.
"""

import os

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

ALEMBIC_INI = os.path.join(os.path.dirname(__file__), "..", "..", "alembic.ini")

EXPECTED_TABLES = {
    "users",
    "contracts",
    "documents",
    "approvals",
}


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'migrations.db'}"


@pytest.fixture
def alembic_cfg(database_url) -> Config:
    cfg = Config(ALEMBIC_INI)
    cfg.set_main_option("sqlalchemy.url", database_url)
    # Keep pytest's logging setup intact
    cfg.attributes["configure_logger"] = False
    return cfg


def _inspect(database_url):
    engine = create_engine(database_url)
    try:
        inspector = inspect(engine)
        return {
            table: {c["name"] for c in inspector.get_columns(table)}
            for table in inspector.get_table_names()
        }, {
            table: {fk["name"] for fk in inspector.get_foreign_keys(table)}
            for table in inspector.get_table_names()
        }
    finally:
        engine.dispose()


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


@pytest.mark.integration
class TestMigrations:
    """Run upgrade -> verify -> downgrade -> verify cycle."""

    def test_upgrade_creates_all_tables(self, alembic_cfg, database_url):
        command.upgrade(alembic_cfg, "head")

        columns, _ = _inspect(database_url)

        assert EXPECTED_TABLES <= set(columns)
        assert "alembic_version" in columns

    def test_upgrade_is_idempotent(self, alembic_cfg):
        command.upgrade(alembic_cfg, "head")
        command.upgrade(alembic_cfg, "head")  # should be a no-op

    def test_documents_columns(self, alembic_cfg, database_url):
        command.upgrade(alembic_cfg, "head")

        columns, _ = _inspect(database_url)

        assert columns["documents"] == {
            "id", "name", "file_path", "version", "status", "document_type",
            "progress", "remarks", "overall_deadline", "contract_id",
            "submitted_by_id", "reviewed_by_id", "row_version",
            "created_at", "updated_at",
        }

    def test_approvals_columns(self, alembic_cfg, database_url):
        command.upgrade(alembic_cfg, "head")

        columns, _ = _inspect(database_url)

        assert columns["approvals"] == {
            "id", "document_id", "type", "status", "notes",
            "approved_by_id", "deadline", "created_at",
        }

    def test_foreign_keys(self, alembic_cfg, database_url):
        command.upgrade(alembic_cfg, "head")

        _, fks = _inspect(database_url)

        assert {
            "fk_documents_contract_id",
            "fk_documents_submitted_by_id",
            "fk_documents_reviewed_by_id",
        } <= fks["documents"]
        assert {"fk_approvals_document_id", "fk_approvals_approved_by_id"} <= fks["approvals"]

    def test_downgrade_removes_tables(self, alembic_cfg, database_url):
        command.upgrade(alembic_cfg, "head")
        command.downgrade(alembic_cfg, "base")

        columns, _ = _inspect(database_url)

        assert not EXPECTED_TABLES & set(columns)
