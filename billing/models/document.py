from datetime import date
from decimal import Decimal
from typing import ClassVar

from sqlalchemy import Date, ForeignKey, Integer, String, event
from sqlalchemy.orm import Mapped, Session, mapped_column, validates

from ..enums import DocumentTypeEnum
from ..errors import DocumentImmutableError
from ..money import ZERO_MONEY
from ..services.aggregator import DocumentTotals, aggregate
from .base import TimestampMixin
from .line_item import LineItemMixin


class DocumentMixin(TimestampMixin):
    """Columns and computed totals shared by invoices and quotes.

    ``year``/``number`` stay null until the document is first issued and can
    never be reassigned afterwards. The ``*_amount`` columns are a cache of
    ``totals`` refreshed before every flush.
    """

    document_type: ClassVar[DocumentTypeEnum]
    draft_status: ClassVar[str] = "DRAFT"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id"), nullable=False)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False)
    year: Mapped[int | None] = mapped_column(Integer)
    number: Mapped[int | None] = mapped_column(Integer)
    title: Mapped[str | None] = mapped_column(String(200))
    notes: Mapped[str | None] = mapped_column(String(2000))
    issue_date: Mapped[date | None] = mapped_column(Date)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")
    _subtotal_amount: Mapped[Decimal] = mapped_column(
        "subtotal_amount", nullable=False, default=ZERO_MONEY
    )
    _tax_amount: Mapped[Decimal] = mapped_column(
        "tax_amount", nullable=False, default=ZERO_MONEY
    )
    _total_amount: Mapped[Decimal] = mapped_column(
        "total_amount", nullable=False, default=ZERO_MONEY
    )

    @validates("year", "number")
    def _validate_assigned_once(self, key, value):
        current = getattr(self, key)
        if current is not None and value != current:
            raise DocumentImmutableError(self.document_type.value, key)
        return value

    @property
    def is_editable(self) -> bool:
        return self.status == self.draft_status

    @property
    def totals(self) -> DocumentTotals:
        return aggregate(item.amounts for item in self.items)

    @property
    def subtotal_amount(self) -> Decimal:
        return self.totals.subtotal

    @property
    def tax_amount(self) -> Decimal:
        return self.totals.tax

    @property
    def total_amount(self) -> Decimal:
        return self.totals.total

    @property
    def display_number(self) -> str | None:
        if self.number is None:
            return None
        return f"{self.year}/{self.number:05d}"

    def next_position(self) -> int:
        return max((item.position for item in self.items), default=0) + 1

    def refresh_amounts(self) -> DocumentTotals:
        totals = aggregate(item.refresh_amounts() for item in self.items)
        self._subtotal_amount = totals.subtotal
        self._tax_amount = totals.tax
        self._total_amount = totals.total
        return totals


@event.listens_for(Session, "before_flush")
def _refresh_cached_amounts(session, flush_context, instances):
    documents = {}
    for obj in list(session.new) + list(session.dirty) + list(session.deleted):
        if isinstance(obj, DocumentMixin):
            document = obj
        elif isinstance(obj, LineItemMixin):
            document = obj.document
        else:
            continue
        if document is not None and document not in session.deleted:
            documents[id(document)] = document

    for document in documents.values():
        document.refresh_amounts()
