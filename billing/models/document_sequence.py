from datetime import datetime

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from ..enums import DocumentTypeEnum
from .base import Base, utcnow


class DocumentSequence(Base):
    __tablename__ = "document_sequences"

    company_id: Mapped[int] = mapped_column(
        ForeignKey("companies.id"), primary_key=True
    )
    document_type: Mapped[DocumentTypeEnum] = mapped_column(
        SAEnum(DocumentTypeEnum, native_enum=False, create_constraint=False),
        primary_key=True,
    )
    year: Mapped[int] = mapped_column(Integer, primary_key=True)
    last_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
