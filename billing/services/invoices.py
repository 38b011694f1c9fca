from collections.abc import Callable
from datetime import date

from sqlalchemy.orm import Session

from ..enums import InvoiceActionEnum, InvoiceStatusEnum
from ..models import Invoice, InvoiceItem
from ..schemas import InvoiceCreate, InvoiceUpdate, LineItemCreate, LineItemUpdate
from . import documents


def create_invoice(db: Session, payload: InvoiceCreate) -> Invoice:
    documents.require_customer(db, payload.company_id, payload.customer_id)
    invoice = Invoice(
        company_id=payload.company_id,
        customer_id=payload.customer_id,
        status=InvoiceStatusEnum.DRAFT,
        title=documents.trim_to_null(payload.title),
        notes=documents.trim_to_null(payload.notes),
        issue_date=payload.issue_date,
        due_date=payload.due_date,
        currency=documents.normalize_currency(payload.currency),
    )
    documents.attach_items(invoice, InvoiceItem, payload.items)
    db.add(invoice)
    db.commit()
    db.refresh(invoice)
    return invoice


def get_invoice(db: Session, invoice_id: int) -> Invoice:
    return documents.get_document(db, Invoice, invoice_id)


def list_invoices(
    db: Session,
    company_id: int,
    q: str | None = None,
    status: InvoiceStatusEnum | None = None,
    page: int = 1,
    page_size: int = 20,
) -> dict:
    return documents.list_documents(db, Invoice, company_id, q, status, page, page_size)


def update_invoice(db: Session, invoice_id: int, payload: InvoiceUpdate) -> Invoice:
    invoice = get_invoice(db, invoice_id)
    return documents.update_header(db, invoice, payload.model_dump(exclude_unset=True))


def add_invoice_item(db: Session, invoice_id: int, payload: LineItemCreate) -> InvoiceItem:
    invoice = get_invoice(db, invoice_id)
    return documents.add_item(db, invoice, InvoiceItem, payload)


def update_invoice_item(
    db: Session, invoice_id: int, item_id: int, payload: LineItemUpdate
) -> InvoiceItem:
    invoice = get_invoice(db, invoice_id)
    return documents.update_item(db, invoice, item_id, payload)


def remove_invoice_item(db: Session, invoice_id: int, item_id: int) -> None:
    invoice = get_invoice(db, invoice_id)
    documents.remove_item(db, invoice, item_id)


def transition_invoice(
    db: Session,
    invoice_id: int,
    action: InvoiceActionEnum,
    today: Callable[[], date] = date.today,
) -> Invoice:
    return documents.transition_document(db, Invoice, invoice_id, action, today=today)
