from .base import Base
from .company import Company
from .customer import Customer
from .document import DocumentMixin
from .document_sequence import DocumentSequence
from .invoice import Invoice
from .invoice_item import InvoiceItem
from .line_item import LineItemMixin
from .quote import Quote
from .quote_item import QuoteItem
from ..enums import (
    DiscountTypeEnum,
    DocumentTypeEnum,
    InvoiceActionEnum,
    InvoiceStatusEnum,
    QuoteActionEnum,
    QuoteStatusEnum,
)

__all__ = [
    "Base",
    "Company",
    "Customer",
    "DocumentMixin",
    "DocumentSequence",
    "Invoice",
    "InvoiceItem",
    "LineItemMixin",
    "Quote",
    "QuoteItem",
    "DiscountTypeEnum",
    "DocumentTypeEnum",
    "InvoiceActionEnum",
    "InvoiceStatusEnum",
    "QuoteActionEnum",
    "QuoteStatusEnum",
]
