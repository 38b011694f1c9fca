from datetime import date

from sqlalchemy import Date, Enum as SAEnum, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..enums import DocumentTypeEnum, QuoteStatusEnum
from .base import Base
from .document import DocumentMixin


class Quote(DocumentMixin, Base):
    __tablename__ = "quotes"
    __table_args__ = (
        UniqueConstraint(
            "company_id", "year", "number", name="uq_quotes_company_year_number"
        ),
        Index("ix_quotes_company_status", "company_id", "status"),
        Index("ix_quotes_customer_id", "customer_id"),
    )

    document_type = DocumentTypeEnum.QUOTE
    draft_status = QuoteStatusEnum.DRAFT

    status: Mapped[QuoteStatusEnum] = mapped_column(
        SAEnum(QuoteStatusEnum, native_enum=False, create_constraint=False),
        nullable=False,
        default=QuoteStatusEnum.DRAFT,
    )
    valid_until: Mapped[date | None] = mapped_column(Date)
    items: Mapped[list["QuoteItem"]] = relationship(
        "QuoteItem",
        back_populates="quote",
        order_by="QuoteItem.position",
        cascade="all, delete-orphan",
    )
