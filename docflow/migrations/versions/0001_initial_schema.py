"""Initial schema: users, contracts, documents, approvals

Revision ID: 0001
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all workflow tables."""

    # --- users (no FK deps) ---
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("role", sa.String(50), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    # --- contracts (no FK deps) ---
    op.create_table(
        "contracts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("contract_number", sa.String(100), nullable=False),
        sa.Column("contract_date", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_contracts"),
    )
    op.create_index("ix_contracts_contract_number", "contracts", ["contract_number"], unique=True)

    # --- documents (FK -> users, contracts) ---
    op.create_table(
        "documents",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("file_path", sa.String(1024), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("status", sa.String(50), nullable=False, server_default="submitted"),
        sa.Column("document_type", sa.String(50), nullable=False),
        sa.Column("progress", sa.Text(), nullable=True),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("overall_deadline", sa.DateTime(), nullable=True),
        sa.Column("contract_id", sa.Integer(), nullable=True),
        sa.Column("submitted_by_id", sa.Integer(), nullable=False),
        sa.Column("reviewed_by_id", sa.Integer(), nullable=True),
        sa.Column("row_version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_documents"),
        sa.ForeignKeyConstraint(
            ["contract_id"], ["contracts.id"], name="fk_documents_contract_id", ondelete="SET NULL"
        ),
        sa.ForeignKeyConstraint(["submitted_by_id"], ["users.id"], name="fk_documents_submitted_by_id"),
        sa.ForeignKeyConstraint(
            ["reviewed_by_id"], ["users.id"], name="fk_documents_reviewed_by_id", ondelete="SET NULL"
        ),
    )
    op.create_index("ix_documents_status", "documents", ["status"])
    op.create_index("ix_documents_contract_id", "documents", ["contract_id"])
    op.create_index("ix_documents_submitted_by_id", "documents", ["submitted_by_id"])
    op.create_index("ix_documents_reviewed_by_id", "documents", ["reviewed_by_id"])
    op.create_index("ix_documents_created_at", "documents", ["created_at"])
    op.create_index("ix_documents_updated_at", "documents", ["updated_at"])

    # --- approvals (FK -> documents, users); append-only ---
    op.create_table(
        "approvals",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("document_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("status", sa.String(50), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("approved_by_id", sa.Integer(), nullable=False),
        sa.Column("deadline", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_approvals"),
        sa.ForeignKeyConstraint(["document_id"], ["documents.id"], name="fk_approvals_document_id"),
        sa.ForeignKeyConstraint(["approved_by_id"], ["users.id"], name="fk_approvals_approved_by_id"),
    )
    op.create_index("ix_approvals_document_id", "approvals", ["document_id"])
    op.create_index("ix_approvals_approved_by_id", "approvals", ["approved_by_id"])
    op.create_index("ix_approvals_created_at", "approvals", ["created_at"])


def downgrade() -> None:
    """Drop all workflow tables."""
    op.drop_table("approvals")
    op.drop_table("documents")
    op.drop_table("contracts")
    op.drop_table("users")
