"""documents schema

Revision ID: 8a3e5c1f2b70
Revises:
Create Date: 2026-10-12 09:30:00.000000
"""
from alembic import op
import sqlalchemy as sa


revision = "8a3e5c1f2b70"
down_revision = None
branch_labels = None
depends_on = None


def _document_columns() -> list:
    return [
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("companies.id"), nullable=False),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("number", sa.Integer(), nullable=True),
        sa.Column("title", sa.String(length=200), nullable=True),
        sa.Column("notes", sa.String(length=2000), nullable=True),
        sa.Column("issue_date", sa.Date(), nullable=True),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("subtotal_amount", sa.Numeric(19, 2), nullable=False),
        sa.Column("tax_amount", sa.Numeric(19, 2), nullable=False),
        sa.Column("total_amount", sa.Numeric(19, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def _item_columns() -> list:
    return [
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(length=1000), nullable=False),
        sa.Column("notes", sa.String(length=1000), nullable=True),
        sa.Column("quantity", sa.Numeric(19, 4), nullable=False),
        sa.Column("unit", sa.String(length=20), nullable=True),
        sa.Column("unit_price", sa.Numeric(19, 4), nullable=False),
        sa.Column("tax_rate", sa.Numeric(5, 2), nullable=False),
        sa.Column("discount_type", sa.String(length=20), nullable=False),
        sa.Column("discount_value", sa.Numeric(19, 4), nullable=False),
        sa.Column("line_subtotal_amount", sa.Numeric(19, 2), nullable=False),
        sa.Column("line_tax_amount", sa.Numeric(19, 2), nullable=False),
        sa.Column("line_total_amount", sa.Numeric(19, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("vat_number", sa.String(length=50), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "customers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("companies.id"), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("vat_number", sa.String(length=50), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_customers_company_id", "customers", ["company_id"])

    op.create_table(
        "quotes",
        *_document_columns(),
        sa.Column("valid_until", sa.Date(), nullable=True),
        sa.UniqueConstraint(
            "company_id", "year", "number", name="uq_quotes_company_year_number"
        ),
    )
    op.create_index("ix_quotes_company_status", "quotes", ["company_id", "status"])
    op.create_index("ix_quotes_customer_id", "quotes", ["customer_id"])
    op.create_table(
        "quote_items",
        *_item_columns(),
        sa.Column("quote_id", sa.Integer(), sa.ForeignKey("quotes.id"), nullable=False),
        sa.UniqueConstraint("quote_id", "position", name="uq_quote_items_quote_position"),
    )
    op.create_index("ix_quote_items_quote_id", "quote_items", ["quote_id"])

    op.create_table(
        "invoices",
        *_document_columns(),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("source_quote_id", sa.Integer(), sa.ForeignKey("quotes.id"), nullable=True),
        sa.UniqueConstraint(
            "company_id", "year", "number", name="uq_invoices_company_year_number"
        ),
    )
    op.create_index("ix_invoices_company_status", "invoices", ["company_id", "status"])
    op.create_index("ix_invoices_customer_id", "invoices", ["customer_id"])
    op.create_index("ix_invoices_source_quote_id", "invoices", ["source_quote_id"])
    op.create_table(
        "invoice_items",
        *_item_columns(),
        sa.Column("invoice_id", sa.Integer(), sa.ForeignKey("invoices.id"), nullable=False),
        sa.UniqueConstraint(
            "invoice_id", "position", name="uq_invoice_items_invoice_position"
        ),
    )
    op.create_index("ix_invoice_items_invoice_id", "invoice_items", ["invoice_id"])


def downgrade() -> None:
    op.drop_index("ix_invoice_items_invoice_id", table_name="invoice_items")
    op.drop_table("invoice_items")
    op.drop_index("ix_invoices_source_quote_id", table_name="invoices")
    op.drop_index("ix_invoices_customer_id", table_name="invoices")
    op.drop_index("ix_invoices_company_status", table_name="invoices")
    op.drop_table("invoices")
    op.drop_index("ix_quote_items_quote_id", table_name="quote_items")
    op.drop_table("quote_items")
    op.drop_index("ix_quotes_customer_id", table_name="quotes")
    op.drop_index("ix_quotes_company_status", table_name="quotes")
    op.drop_table("quotes")
    op.drop_index("ix_customers_company_id", table_name="customers")
    op.drop_table("customers")
    op.drop_table("companies")
