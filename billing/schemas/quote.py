from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from ..enums import QuoteStatusEnum
from .line_item import LineItemCreate, LineItemRead


class QuoteCreate(BaseModel):
    company_id: int
    customer_id: int
    title: str | None = Field(None, max_length=200)
    notes: str | None = Field(None, max_length=2000)
    issue_date: date | None = None
    valid_until: date | None = None
    currency: str | None = Field(None, max_length=3)
    items: list[LineItemCreate] = Field(min_length=1)


class QuoteUpdate(BaseModel):
    title: str | None = Field(None, max_length=200)
    notes: str | None = Field(None, max_length=2000)
    issue_date: date | None = None
    valid_until: date | None = None
    currency: str | None = Field(None, max_length=3)


class QuoteSummary(BaseModel):
    id: int
    company_id: int
    customer_id: int
    status: QuoteStatusEnum
    year: int | None
    number: int | None
    display_number: str | None
    title: str | None
    issue_date: date | None
    valid_until: date | None
    currency: str
    subtotal_amount: Decimal
    tax_amount: Decimal
    total_amount: Decimal

    model_config = {"from_attributes": True}


class QuoteRead(QuoteSummary):
    notes: str | None
    items: list[LineItemRead]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class QuotePage(BaseModel):
    rows: list[QuoteSummary]
    page: int
    page_size: int
    total_count: int
    total_pages: int
