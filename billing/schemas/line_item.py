from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from ..enums import DiscountTypeEnum


class LineItemCreate(BaseModel):
    position: int | None = Field(None, ge=1)
    description: str = Field(min_length=1, max_length=1000)
    notes: str | None = Field(None, max_length=1000)
    quantity: Decimal | None = None
    unit: str | None = Field(None, max_length=20)
    unit_price: Decimal | None = None
    tax_rate: Decimal | None = None
    discount_type: DiscountTypeEnum | None = None
    discount_value: Decimal | None = None


class LineItemUpdate(BaseModel):
    position: int | None = Field(None, ge=1)
    description: str | None = Field(None, min_length=1, max_length=1000)
    notes: str | None = Field(None, max_length=1000)
    quantity: Decimal | None = None
    unit: str | None = Field(None, max_length=20)
    unit_price: Decimal | None = None
    tax_rate: Decimal | None = None
    discount_type: DiscountTypeEnum | None = None
    discount_value: Decimal | None = None


class LineItemRead(BaseModel):
    id: int
    position: int
    description: str
    notes: str | None
    quantity: Decimal
    unit: str | None
    unit_price: Decimal
    tax_rate: Decimal
    discount_type: DiscountTypeEnum
    discount_value: Decimal
    line_subtotal_amount: Decimal
    line_tax_amount: Decimal
    line_total_amount: Decimal
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
