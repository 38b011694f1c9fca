import logging
from collections.abc import Callable
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from ..enums import InvoiceStatusEnum, QuoteActionEnum, QuoteStatusEnum
from ..errors import BillingError, RetryableError
from ..models import Invoice, InvoiceItem, Quote, QuoteItem
from ..schemas import LineItemCreate, LineItemUpdate, QuoteCreate, QuoteUpdate
from . import documents
from .lifecycle import apply_transition
from .numbering import is_lock_contention

logger = logging.getLogger(__name__)


def create_quote(db: Session, payload: QuoteCreate) -> Quote:
    documents.require_customer(db, payload.company_id, payload.customer_id)
    quote = Quote(
        company_id=payload.company_id,
        customer_id=payload.customer_id,
        status=QuoteStatusEnum.DRAFT,
        title=documents.trim_to_null(payload.title),
        notes=documents.trim_to_null(payload.notes),
        issue_date=payload.issue_date,
        valid_until=payload.valid_until,
        currency=documents.normalize_currency(payload.currency),
    )
    documents.attach_items(quote, QuoteItem, payload.items)
    db.add(quote)
    db.commit()
    db.refresh(quote)
    return quote


def get_quote(db: Session, quote_id: int) -> Quote:
    return documents.get_document(db, Quote, quote_id)


def list_quotes(
    db: Session,
    company_id: int,
    q: str | None = None,
    status: QuoteStatusEnum | None = None,
    page: int = 1,
    page_size: int = 20,
) -> dict:
    return documents.list_documents(db, Quote, company_id, q, status, page, page_size)


def update_quote(db: Session, quote_id: int, payload: QuoteUpdate) -> Quote:
    quote = get_quote(db, quote_id)
    return documents.update_header(db, quote, payload.model_dump(exclude_unset=True))


def add_quote_item(db: Session, quote_id: int, payload: LineItemCreate) -> QuoteItem:
    quote = get_quote(db, quote_id)
    return documents.add_item(db, quote, QuoteItem, payload)


def update_quote_item(
    db: Session, quote_id: int, item_id: int, payload: LineItemUpdate
) -> QuoteItem:
    quote = get_quote(db, quote_id)
    return documents.update_item(db, quote, item_id, payload)


def remove_quote_item(db: Session, quote_id: int, item_id: int) -> None:
    quote = get_quote(db, quote_id)
    documents.remove_item(db, quote, item_id)


def transition_quote(
    db: Session,
    quote_id: int,
    action: QuoteActionEnum,
    today: Callable[[], date] = date.today,
) -> Quote:
    if action == QuoteActionEnum.CONVERT:
        # A conversion always produces its invoice.
        convert_quote(db, quote_id, today=today)
        return get_quote(db, quote_id)
    return documents.transition_document(db, Quote, quote_id, action, today=today)


def convert_quote(
    db: Session, quote_id: int, today: Callable[[], date] = date.today
) -> tuple[Invoice, bool]:
    """Turn an accepted quote into a new draft invoice.

    Returns the invoice and whether it was created by this call. Converting an
    already converted quote returns the invoice created the first time.
    """
    try:
        quote = documents.get_document(db, Quote, quote_id, for_update=True)
        result = apply_transition(db, quote, QuoteActionEnum.CONVERT, today=today)
        if not result.changed:
            existing = (
                db.execute(
                    select(Invoice)
                    .where(Invoice.source_quote_id == quote.id)
                    .order_by(Invoice.id)
                )
                .scalars()
                .first()
            )
            if existing is not None:
                db.rollback()
                return existing, False

        invoice = Invoice(
            company_id=quote.company_id,
            customer_id=quote.customer_id,
            source_quote_id=quote.id,
            status=InvoiceStatusEnum.DRAFT,
            title=quote.title,
            notes=quote.notes,
            currency=quote.currency,
        )
        for item in quote.items:
            invoice.items.append(
                InvoiceItem(
                    position=item.position,
                    description=item.description,
                    notes=item.notes,
                    quantity=item.quantity,
                    unit=item.unit,
                    unit_price=item.unit_price,
                    tax_rate=item.tax_rate,
                    discount_type=item.discount_type,
                    discount_value=item.discount_value,
                )
            )
        db.add(invoice)
        db.commit()
    except OperationalError as exc:
        db.rollback()
        if not is_lock_contention(exc):
            raise
        raise RetryableError(("QUOTE", quote_id), str(exc.orig)) from exc
    except Exception as exc:
        db.rollback()
        if not isinstance(exc, BillingError):
            logger.exception("Conversion of quote %s failed", quote_id)
        raise

    logger.info("Quote %s converted into invoice %s", quote_id, invoice.id)
    db.refresh(invoice)
    return invoice, True
