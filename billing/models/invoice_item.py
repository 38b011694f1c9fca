from sqlalchemy import ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from .line_item import LineItemMixin


class InvoiceItem(LineItemMixin, Base):
    __tablename__ = "invoice_items"
    __table_args__ = (
        UniqueConstraint("invoice_id", "position", name="uq_invoice_items_invoice_position"),
        Index("ix_invoice_items_invoice_id", "invoice_id"),
    )

    invoice_id: Mapped[int] = mapped_column(ForeignKey("invoices.id"), nullable=False)
    invoice: Mapped["Invoice"] = relationship("Invoice", back_populates="items")

    @property
    def document(self):
        return self.invoice
