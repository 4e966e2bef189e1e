"""Initial PID reconciliation schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from pidsync.adapters.sqlalchemy.mappings import PidType

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

OWNER_TYPES = ("DATASET", "DOWNLOAD")
PID_STATUSES = ("NEW", "RESERVED", "REGISTERED", "DELETED", "FAILED")
DOWNLOAD_STATUSES = (
    "PREPARING",
    "RUNNING",
    "SUCCEEDED",
    "CANCELLED",
    "KILLED",
    "FAILED",
    "SUSPENDED",
    "FILE_ERASED",
)
IDENTIFIER_KINDS = ("DOI", "URL", "LSID", "HANDLE", "UUID", "UNKNOWN")


def _enum(*values: str, name: str) -> sa.Enum:
    return sa.Enum(*values, name=name, native_enum=False)


def upgrade() -> None:
    op.create_table(
        "pid",
        sa.Column("pid", PidType(), nullable=False),
        sa.Column("owner_type", _enum(*OWNER_TYPES, name="ownertype"), nullable=False),
        sa.Column("status", _enum(*PID_STATUSES, name="pidstatus"), nullable=False),
        sa.Column("metadata", sa.Text(), nullable=True),
        sa.Column("target", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("pid", name=op.f("pk_pid")),
    )
    op.create_index(op.f("ix_pid_owner_type"), "pid", ["owner_type"])
    op.create_index(op.f("ix_pid_status"), "pid", ["status"])

    op.create_table(
        "dataset",
        sa.Column("key", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("doi", PidType(), nullable=True),
        sa.PrimaryKeyConstraint("key", name=op.f("pk_dataset")),
    )
    op.create_index(op.f("ix_dataset_doi"), "dataset", ["doi"])

    op.create_table(
        "dataset_identifier",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("dataset_key", sa.Uuid(), nullable=False),
        sa.Column("type", _enum(*IDENTIFIER_KINDS, name="identifierkind"), nullable=False),
        sa.Column("identifier", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(
            ["dataset_key"],
            ["dataset.key"],
            name=op.f("fk_dataset_identifier_dataset_key_dataset"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_dataset_identifier")),
    )
    op.create_index(
        op.f("ix_dataset_identifier_identifier"), "dataset_identifier", ["identifier"]
    )

    op.create_table(
        "download",
        sa.Column("key", sa.String(), nullable=False),
        sa.Column("doi", PidType(), nullable=True),
        sa.Column("status", _enum(*DOWNLOAD_STATUSES, name="downloadstatus"), nullable=False),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("key", name=op.f("pk_download")),
        sa.UniqueConstraint("doi", name=op.f("uq_download_doi")),
    )

    op.create_table(
        "user_account",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_user_account")),
        sa.UniqueConstraint("user_name", name=op.f("uq_user_account_user_name")),
    )


def downgrade() -> None:
    op.drop_table("user_account")
    op.drop_table("download")
    op.drop_index(op.f("ix_dataset_identifier_identifier"), table_name="dataset_identifier")
    op.drop_table("dataset_identifier")
    op.drop_index(op.f("ix_dataset_doi"), table_name="dataset")
    op.drop_table("dataset")
    op.drop_index(op.f("ix_pid_status"), table_name="pid")
    op.drop_index(op.f("ix_pid_owner_type"), table_name="pid")
    op.drop_table("pid")
