from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ..db import get_db
from ..enums import InvoiceActionEnum, InvoiceStatusEnum
from ..models import Invoice, InvoiceItem
from ..schemas import (
    InvoiceCreate,
    InvoicePage,
    InvoiceRead,
    InvoiceUpdate,
    LineItemCreate,
    LineItemRead,
    LineItemUpdate,
)
from ..services import invoices as invoices_service
from ..services.documents import retry_on_contention

router = APIRouter()


@router.post("/invoices", response_model=InvoiceRead, status_code=201)
def create_invoice(payload: InvoiceCreate, db: Session = Depends(get_db)) -> Invoice:
    return invoices_service.create_invoice(db, payload)


@router.get("/invoices", response_model=InvoicePage)
def list_invoices(
    company_id: int,
    q: str | None = None,
    status: InvoiceStatusEnum | None = None,
    page: int = 1,
    page_size: int = 20,
    db: Session = Depends(get_db),
) -> dict:
    return invoices_service.list_invoices(db, company_id, q, status, page, page_size)


@router.get("/invoices/{invoice_id}", response_model=InvoiceRead)
def get_invoice(invoice_id: int, db: Session = Depends(get_db)) -> Invoice:
    return invoices_service.get_invoice(db, invoice_id)


@router.patch("/invoices/{invoice_id}", response_model=InvoiceRead)
def update_invoice(
    invoice_id: int, payload: InvoiceUpdate, db: Session = Depends(get_db)
) -> Invoice:
    return invoices_service.update_invoice(db, invoice_id, payload)


@router.post("/invoices/{invoice_id}/items", response_model=LineItemRead, status_code=201)
def add_invoice_item(
    invoice_id: int, payload: LineItemCreate, db: Session = Depends(get_db)
) -> InvoiceItem:
    return invoices_service.add_invoice_item(db, invoice_id, payload)


@router.patch("/invoices/{invoice_id}/items/{item_id}", response_model=LineItemRead)
def update_invoice_item(
    invoice_id: int,
    item_id: int,
    payload: LineItemUpdate,
    db: Session = Depends(get_db),
) -> InvoiceItem:
    return invoices_service.update_invoice_item(db, invoice_id, item_id, payload)


@router.delete("/invoices/{invoice_id}/items/{item_id}", status_code=204)
def remove_invoice_item(
    invoice_id: int, item_id: int, db: Session = Depends(get_db)
) -> Response:
    invoices_service.remove_invoice_item(db, invoice_id, item_id)
    return Response(status_code=204)


@router.post("/invoices/{invoice_id}/actions/{action}", response_model=InvoiceRead)
def transition_invoice(
    invoice_id: int, action: InvoiceActionEnum, db: Session = Depends(get_db)
) -> Invoice:
    return retry_on_contention(
        lambda: invoices_service.transition_invoice(db, invoice_id, action)
    )
