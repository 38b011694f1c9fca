from datetime import date

from sqlalchemy import (
    Date,
    Enum as SAEnum,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..enums import DocumentTypeEnum, InvoiceStatusEnum
from .base import Base
from .document import DocumentMixin


class Invoice(DocumentMixin, Base):
    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint(
            "company_id", "year", "number", name="uq_invoices_company_year_number"
        ),
        Index("ix_invoices_company_status", "company_id", "status"),
        Index("ix_invoices_customer_id", "customer_id"),
        Index("ix_invoices_source_quote_id", "source_quote_id"),
    )

    document_type = DocumentTypeEnum.INVOICE
    draft_status = InvoiceStatusEnum.DRAFT

    status: Mapped[InvoiceStatusEnum] = mapped_column(
        SAEnum(InvoiceStatusEnum, native_enum=False, create_constraint=False),
        nullable=False,
        default=InvoiceStatusEnum.DRAFT,
    )
    due_date: Mapped[date | None] = mapped_column(Date)
    source_quote_id: Mapped[int | None] = mapped_column(ForeignKey("quotes.id"))
    items: Mapped[list["InvoiceItem"]] = relationship(
        "InvoiceItem",
        back_populates="invoice",
        order_by="InvoiceItem.position",
        cascade="all, delete-orphan",
    )
