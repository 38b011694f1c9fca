from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..models import Invoice, Quote
from ..money import money


def status_aggregates(db: Session, model, company_id: int) -> list[dict]:
    rows = db.execute(
        select(
            model.status,
            func.count(model.id),
            func.coalesce(func.sum(model._total_amount), 0),
        )
        .where(model.company_id == company_id)
        .group_by(model.status)
        .order_by(model.status)
    ).all()
    return [
        {
            "status": status.value if hasattr(status, "value") else str(status),
            "count": count,
            "total_amount": money(total),
        }
        for status, count, total in rows
    ]


def company_summary(db: Session, company_id: int) -> dict:
    return {
        "company_id": company_id,
        "invoices": status_aggregates(db, Invoice, company_id),
        "quotes": status_aggregates(db, Quote, company_id),
    }
