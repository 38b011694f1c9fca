"""document sequences

Revision ID: 4c7d2e9a1b36
Revises: 8a3e5c1f2b70
Create Date: 2026-10-13 16:45:00.000000
"""
from alembic import op
import sqlalchemy as sa


revision = "4c7d2e9a1b36"
down_revision = "8a3e5c1f2b70"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "document_sequences",
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("companies.id"), primary_key=True),
        sa.Column("document_type", sa.String(length=20), primary_key=True),
        sa.Column("year", sa.Integer(), primary_key=True),
        sa.Column("last_number", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("document_sequences")
