from .dashboard import DashboardSummary, StatusAggregate
from .invoice import InvoiceCreate, InvoicePage, InvoiceRead, InvoiceSummary, InvoiceUpdate
from .line_item import LineItemCreate, LineItemRead, LineItemUpdate
from .quote import QuoteCreate, QuotePage, QuoteRead, QuoteSummary, QuoteUpdate

__all__ = [
    "DashboardSummary",
    "StatusAggregate",
    "InvoiceCreate",
    "InvoicePage",
    "InvoiceRead",
    "InvoiceSummary",
    "InvoiceUpdate",
    "LineItemCreate",
    "LineItemRead",
    "LineItemUpdate",
    "QuoteCreate",
    "QuotePage",
    "QuoteRead",
    "QuoteSummary",
    "QuoteUpdate",
]
