from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ..db import get_db
from ..enums import QuoteActionEnum, QuoteStatusEnum
from ..models import Invoice, Quote, QuoteItem
from ..schemas import (
    InvoiceRead,
    LineItemCreate,
    LineItemRead,
    LineItemUpdate,
    QuoteCreate,
    QuotePage,
    QuoteRead,
    QuoteUpdate,
)
from ..services import quotes as quotes_service
from ..services.documents import retry_on_contention

router = APIRouter()


@router.post("/quotes", response_model=QuoteRead, status_code=201)
def create_quote(payload: QuoteCreate, db: Session = Depends(get_db)) -> Quote:
    return quotes_service.create_quote(db, payload)


@router.get("/quotes", response_model=QuotePage)
def list_quotes(
    company_id: int,
    q: str | None = None,
    status: QuoteStatusEnum | None = None,
    page: int = 1,
    page_size: int = 20,
    db: Session = Depends(get_db),
) -> dict:
    return quotes_service.list_quotes(db, company_id, q, status, page, page_size)


@router.get("/quotes/{quote_id}", response_model=QuoteRead)
def get_quote(quote_id: int, db: Session = Depends(get_db)) -> Quote:
    return quotes_service.get_quote(db, quote_id)


@router.patch("/quotes/{quote_id}", response_model=QuoteRead)
def update_quote(
    quote_id: int, payload: QuoteUpdate, db: Session = Depends(get_db)
) -> Quote:
    return quotes_service.update_quote(db, quote_id, payload)


@router.post("/quotes/{quote_id}/items", response_model=LineItemRead, status_code=201)
def add_quote_item(
    quote_id: int, payload: LineItemCreate, db: Session = Depends(get_db)
) -> QuoteItem:
    return quotes_service.add_quote_item(db, quote_id, payload)


@router.patch("/quotes/{quote_id}/items/{item_id}", response_model=LineItemRead)
def update_quote_item(
    quote_id: int,
    item_id: int,
    payload: LineItemUpdate,
    db: Session = Depends(get_db),
) -> QuoteItem:
    return quotes_service.update_quote_item(db, quote_id, item_id, payload)


@router.delete("/quotes/{quote_id}/items/{item_id}", status_code=204)
def remove_quote_item(
    quote_id: int, item_id: int, db: Session = Depends(get_db)
) -> Response:
    quotes_service.remove_quote_item(db, quote_id, item_id)
    return Response(status_code=204)


@router.post("/quotes/{quote_id}/convert", response_model=InvoiceRead, status_code=201)
def convert_quote(
    quote_id: int, response: Response, db: Session = Depends(get_db)
) -> Invoice:
    invoice, created = retry_on_contention(
        lambda: quotes_service.convert_quote(db, quote_id)
    )
    if not created:
        response.status_code = 200
    return invoice


@router.post("/quotes/{quote_id}/actions/{action}", response_model=QuoteRead)
def transition_quote(
    quote_id: int, action: QuoteActionEnum, db: Session = Depends(get_db)
) -> Quote:
    return retry_on_contention(lambda: quotes_service.transition_quote(db, quote_id, action))
