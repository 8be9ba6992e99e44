"""Object record and stored file tables.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

ENTITY_TYPES = (
    "CASE",
    "CASE_TYPE",
    "PROPERTY",
    "ROLE_TYPE",
    "DOCUMENT",
    "DOCUMENT_TYPE",
    "CASE_DOCUMENT",
)


def upgrade() -> None:
    op.create_table(
        "object_record",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "entity_type",
            sa.Enum(*ENTITY_TYPES, name="entitytype", native_enum=False),
            nullable=False,
        ),
        sa.Column("attributes", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_object_record")),
    )
    op.create_index(
        op.f("ix_object_record_entity_type"),
        "object_record",
        ["entity_type"],
        unique=False,
    )
    op.create_table(
        "stored_file",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("document_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("mime_type", sa.String(), nullable=False),
        sa.Column("extension", sa.String(), nullable=False),
        sa.Column("size", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(
            ["document_id"],
            ["object_record.id"],
            name=op.f("fk_stored_file_document_id_object_record"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_stored_file")),
        sa.UniqueConstraint("document_id", name=op.f("uq_stored_file_document_id")),
    )


def downgrade() -> None:
    op.drop_table("stored_file")
    op.drop_index(op.f("ix_object_record_entity_type"), table_name="object_record")
    op.drop_table("object_record")
