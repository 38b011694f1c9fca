"""
Operations shared by invoices and quotes: loading, header edits, line item
management, lifecycle transitions and paginated listing.

Line items are only touched while their document is DRAFT. Every item is run
through the line calculator before it is attached, so invalid numbers are
rejected here rather than at flush time.
"""

import logging
from collections.abc import Callable
from datetime import date
from decimal import Decimal
from typing import TypeVar

from sqlalchemy import func, or_, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from ..config import settings
from ..errors import (
    BillingError,
    DocumentNotEditableError,
    DocumentNotFoundError,
    LineItemNotFoundError,
    RetryableError,
    ValidationError,
)
from ..enums import DiscountTypeEnum
from ..models import Customer, DocumentMixin, LineItemMixin
from ..money import to_decimal
from ..schemas import LineItemCreate, LineItemUpdate
from .lifecycle import apply_transition
from .line_calculator import LineInput, compute_line
from .numbering import is_lock_contention

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_PAGE_SIZE = 100


def trim_to_null(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def normalize_currency(value: str | None) -> str:
    value = trim_to_null(value)
    if value is None:
        return settings.default_currency
    if len(value) != 3 or not value.isalpha():
        raise ValidationError("currency", "must be a three-letter currency code")
    return value.upper()


def get_document(db: Session, model, document_id: int, for_update: bool = False):
    document = db.get(model, document_id, with_for_update=for_update or None)
    if document is None:
        raise DocumentNotFoundError(model.document_type.value, document_id)
    return document


def require_editable(document: DocumentMixin) -> None:
    if not document.is_editable:
        raise DocumentNotEditableError(
            document.document_type.value, document.id, document.status.value
        )


def require_customer(db: Session, company_id: int, customer_id: int) -> Customer:
    customer = db.get(Customer, customer_id)
    if customer is None or customer.company_id != company_id:
        raise ValidationError("customer_id", "customer is not available for this company")
    return customer


def build_item(item_cls, payload: LineItemCreate, position: int) -> LineItemMixin:
    values = {
        "quantity": to_decimal(payload.quantity, Decimal("1")),
        "unit_price": to_decimal(payload.unit_price, Decimal("0")),
        "tax_rate": to_decimal(payload.tax_rate, Decimal("0")),
        "discount_type": payload.discount_type or DiscountTypeEnum.NONE,
        "discount_value": to_decimal(payload.discount_value, Decimal("0")),
    }
    compute_line(LineInput(**values))
    return item_cls(
        position=position,
        description=payload.description.strip(),
        notes=trim_to_null(payload.notes),
        unit=trim_to_null(payload.unit),
        **values,
    )


def attach_items(document: DocumentMixin, item_cls, payloads: list[LineItemCreate]) -> None:
    for payload in payloads:
        position = payload.position or document.next_position()
        _require_free_position(document, position)
        document.items.append(build_item(item_cls, payload, position))


def add_item(db: Session, document: DocumentMixin, item_cls, payload: LineItemCreate):
    require_editable(document)
    position = payload.position or document.next_position()
    _require_free_position(document, position)
    item = build_item(item_cls, payload, position)
    document.items.append(item)
    db.commit()
    db.refresh(item)
    return item


def update_item(db: Session, document: DocumentMixin, item_id: int, payload: LineItemUpdate):
    require_editable(document)
    item = _find_item(document, item_id)
    changes = payload.model_dump(exclude_unset=True)

    if "description" in changes:
        if changes["description"] is None or not changes["description"].strip():
            raise ValidationError("description", "must not be empty")
        changes["description"] = changes["description"].strip()
    for key in ("notes", "unit"):
        if key in changes:
            changes[key] = trim_to_null(changes[key])
    if "position" in changes:
        if changes["position"] is None:
            raise ValidationError("position", "must not be empty")
        if changes["position"] != item.position:
            _require_free_position(document, changes["position"])

    numeric_defaults = {
        "quantity": Decimal("1"),
        "unit_price": Decimal("0"),
        "tax_rate": Decimal("0"),
        "discount_value": Decimal("0"),
    }
    for key, default in numeric_defaults.items():
        if key in changes:
            changes[key] = to_decimal(changes[key], default)
    if "discount_type" in changes and changes["discount_type"] is None:
        changes["discount_type"] = DiscountTypeEnum.NONE

    current = item.line_input()
    compute_line(
        LineInput(
            quantity=changes.get("quantity", current.quantity),
            unit_price=changes.get("unit_price", current.unit_price),
            tax_rate=changes.get("tax_rate", current.tax_rate),
            discount_type=changes.get("discount_type", current.discount_type),
            discount_value=changes.get("discount_value", current.discount_value),
        )
    )

    for key, value in changes.items():
        setattr(item, key, value)
    db.commit()
    db.refresh(item)
    return item


def remove_item(db: Session, document: DocumentMixin, item_id: int) -> None:
    require_editable(document)
    item = _find_item(document, item_id)
    document.items.remove(item)
    db.commit()


def update_header(db: Session, document: DocumentMixin, changes: dict) -> DocumentMixin:
    require_editable(document)
    issue_date = changes.get("issue_date")
    if (
        issue_date is not None
        and document.number is not None
        and issue_date.year != document.year
    ):
        raise ValidationError(
            "issue_date", f"must stay in {document.year}, the year of {document.display_number}"
        )
    if "title" in changes:
        document.title = trim_to_null(changes.pop("title"))
    if "notes" in changes:
        document.notes = trim_to_null(changes.pop("notes"))
    if "currency" in changes:
        document.currency = normalize_currency(changes.pop("currency"))
    for key, value in changes.items():
        if value is not None:
            setattr(document, key, value)
    db.commit()
    db.refresh(document)
    return document


def transition_document(
    db: Session,
    model,
    document_id: int,
    action,
    today: Callable[[], date] = date.today,
):
    try:
        document = get_document(db, model, document_id, for_update=True)
        apply_transition(db, document, action, today=today)
        db.commit()
    except OperationalError as exc:
        db.rollback()
        if not is_lock_contention(exc):
            raise
        raise RetryableError(
            (model.document_type.value, document_id), str(exc.orig)
        ) from exc
    except Exception as exc:
        db.rollback()
        if not isinstance(exc, BillingError):
            logger.exception(
                "Transition %s on %s %s failed", action, model.document_type.value, document_id
            )
        raise
    db.refresh(document)
    return document


def retry_on_contention(operation: Callable[[], T], attempts: int | None = None) -> T:
    """Run ``operation`` again while it fails with ``RetryableError``.

    The operation must own its transaction; each failed attempt has already
    been rolled back, so re-running it cannot leave a number allocated twice.
    """
    attempts = max(attempts or settings.transition_retry_attempts, 1)
    attempt = 1
    while True:
        try:
            return operation()
        except RetryableError as exc:
            if attempt >= attempts:
                raise
            logger.warning(
                "Retrying after contention (attempt %s/%s): %s", attempt, attempts, exc
            )
            attempt += 1


def paginate(db: Session, query, page: int, page_size: int) -> dict:
    page = max(page, 1)
    page_size = min(max(page_size, 1), MAX_PAGE_SIZE)
    total_count = (
        db.execute(select(func.count()).select_from(query.order_by(None).subquery())).scalar()
        or 0
    )
    total_pages = max((total_count + page_size - 1) // page_size, 1)
    page = min(page, total_pages)
    rows = (
        db.execute(query.limit(page_size).offset((page - 1) * page_size))
        .scalars()
        .all()
    )
    return {
        "rows": rows,
        "page": page,
        "page_size": page_size,
        "total_count": total_count,
        "total_pages": total_pages,
    }


def list_documents(
    db: Session,
    model,
    company_id: int,
    q: str | None = None,
    status: str | None = None,
    page: int = 1,
    page_size: int = 20,
) -> dict:
    query = select(model).where(model.company_id == company_id)
    if status:
        query = query.where(model.status == status)
    if q:
        like = f"%{q.strip().lower()}%"
        query = query.join(Customer, model.customer_id == Customer.id).where(
            or_(
                func.lower(model.title).like(like),
                func.lower(Customer.display_name).like(like),
            )
        )
    query = query.order_by(model.issue_date.desc(), model.id.desc())
    return paginate(db, query, page, page_size)


def _find_item(document: DocumentMixin, item_id: int):
    for item in document.items:
        if item.id == item_id:
            return item
    raise LineItemNotFoundError(document.document_type.value, document.id, item_id)


def _require_free_position(document: DocumentMixin, position: int) -> None:
    if any(item.position == position for item in document.items):
        raise ValidationError("position", f"position {position} is already used")
