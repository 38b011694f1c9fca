from decimal import Decimal

from pydantic import BaseModel


class StatusAggregate(BaseModel):
    status: str
    count: int
    total_amount: Decimal


class DashboardSummary(BaseModel):
    company_id: int
    invoices: list[StatusAggregate]
    quotes: list[StatusAggregate]
