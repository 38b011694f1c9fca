from sqlalchemy import ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from .line_item import LineItemMixin


class QuoteItem(LineItemMixin, Base):
    __tablename__ = "quote_items"
    __table_args__ = (
        UniqueConstraint("quote_id", "position", name="uq_quote_items_quote_position"),
        Index("ix_quote_items_quote_id", "quote_id"),
    )

    quote_id: Mapped[int] = mapped_column(ForeignKey("quotes.id"), nullable=False)
    quote: Mapped["Quote"] = relationship("Quote", back_populates="items")

    @property
    def document(self):
        return self.quote
