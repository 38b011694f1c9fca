from datetime import date
from decimal import Decimal

import pytest

from billing.enums import DiscountTypeEnum, InvoiceActionEnum, InvoiceStatusEnum
from billing.errors import (
    DocumentImmutableError,
    DocumentNotEditableError,
    DocumentNotFoundError,
    InvalidTransitionError,
    LineItemNotFoundError,
    ValidationError,
)
from billing.models import Invoice
from billing.schemas import InvoiceCreate, InvoiceUpdate, LineItemCreate, LineItemUpdate
from billing.services import invoices as invoices_service


def _today():
    return date(2026, 5, 4)


def _create(db_session, customer, **overrides):
    payload = {
        "company_id": customer.company_id,
        "customer_id": customer.id,
        "title": "  Skip hire May  ",
        "items": [
            {"description": "Skip hire", "quantity": "2", "unit_price": "10.00", "tax_rate": "22"},
            {
                "description": "Landfill tax",
                "unit_price": "100.00",
                "tax_rate": "10",
                "discount_type": "PERCENTAGE",
                "discount_value": "50",
            },
        ],
    }
    payload.update(overrides)
    return invoices_service.create_invoice(db_session, InvoiceCreate(**payload))


def test_create_invoice_computes_totals(db_session, customer):
    invoice = _create(db_session, customer)

    assert invoice.status == InvoiceStatusEnum.DRAFT
    assert invoice.title == "Skip hire May"
    assert invoice.currency == "EUR"
    assert invoice.number is None
    assert [item.position for item in invoice.items] == [1, 2]
    assert invoice.subtotal_amount == Decimal("70.00")
    assert invoice.tax_amount == Decimal("9.40")
    assert invoice.total_amount == Decimal("79.40")
    assert invoice._total_amount == Decimal("79.40")


def test_create_invoice_rejects_foreign_customer(db_session, customer):
    with pytest.raises(ValidationError) as excinfo:
        _create(db_session, customer, company_id=customer.company_id + 1)

    assert excinfo.value.field == "customer_id"


def test_create_invoice_rejects_invalid_line(db_session, customer):
    with pytest.raises(ValidationError) as excinfo:
        _create(
            db_session,
            customer,
            items=[{"description": "Bad", "unit_price": "10", "tax_rate": "150"}],
        )

    assert excinfo.value.field == "tax_rate"


def test_pay_requires_issue_first(db_session, customer):
    invoice = _create(db_session, customer)

    with pytest.raises(InvalidTransitionError):
        invoices_service.transition_invoice(db_session, invoice.id, InvoiceActionEnum.PAY)

    db_session.refresh(invoice)
    assert invoice.status == InvoiceStatusEnum.DRAFT
    assert invoice.number is None

    invoices_service.transition_invoice(
        db_session, invoice.id, InvoiceActionEnum.ISSUE, today=_today
    )
    assert invoice.status == InvoiceStatusEnum.ISSUED
    assert invoice.issue_date == date(2026, 5, 4)
    assert (invoice.year, invoice.number) == (2026, 1)
    assert invoice.display_number == "2026/00001"

    invoices_service.transition_invoice(db_session, invoice.id, InvoiceActionEnum.PAY)
    assert invoice.status == InvoiceStatusEnum.PAID
    assert (invoice.year, invoice.number) == (2026, 1)


def test_issue_keeps_existing_issue_date(db_session, customer):
    invoice = _create(db_session, customer, issue_date="2025-12-30")

    invoices_service.transition_invoice(
        db_session, invoice.id, InvoiceActionEnum.ISSUE, today=_today
    )

    assert invoice.issue_date == date(2025, 12, 30)
    assert invoice.year == 2025


def test_repeated_issue_is_a_no_op(db_session, customer):
    invoice = _create(db_session, customer)
    invoices_service.transition_invoice(
        db_session, invoice.id, InvoiceActionEnum.ISSUE, today=_today
    )
    invoices_service.transition_invoice(
        db_session, invoice.id, InvoiceActionEnum.ISSUE, today=_today
    )

    second = _create(db_session, customer)
    invoices_service.transition_invoice(
        db_session, second.id, InvoiceActionEnum.ISSUE, today=_today
    )

    assert invoice.number == 1
    assert second.number == 2


def test_archived_draft_never_gets_a_number(db_session, customer):
    invoice = _create(db_session, customer)

    invoices_service.transition_invoice(db_session, invoice.id, InvoiceActionEnum.ARCHIVE)

    assert invoice.status == InvoiceStatusEnum.ARCHIVED
    assert invoice.number is None
    assert invoice.issue_date is None


def test_number_cannot_be_reassigned(db_session, customer):
    invoice = _create(db_session, customer)
    invoices_service.transition_invoice(
        db_session, invoice.id, InvoiceActionEnum.ISSUE, today=_today
    )

    with pytest.raises(DocumentImmutableError) as excinfo:
        invoice.number = 42
    assert excinfo.value.field == "number"

    with pytest.raises(DocumentImmutableError):
        invoice.year = 2030

    invoice.number = 1


def test_issued_invoice_is_not_editable(db_session, customer):
    invoice = _create(db_session, customer)
    item_id = invoice.items[0].id
    invoices_service.transition_invoice(
        db_session, invoice.id, InvoiceActionEnum.ISSUE, today=_today
    )

    with pytest.raises(DocumentNotEditableError):
        invoices_service.add_invoice_item(
            db_session, invoice.id, LineItemCreate(description="Extra", unit_price=Decimal("1"))
        )
    with pytest.raises(DocumentNotEditableError):
        invoices_service.update_invoice_item(
            db_session, invoice.id, item_id, LineItemUpdate(quantity=Decimal("3"))
        )
    with pytest.raises(DocumentNotEditableError):
        invoices_service.remove_invoice_item(db_session, invoice.id, item_id)
    with pytest.raises(DocumentNotEditableError):
        invoices_service.update_invoice(db_session, invoice.id, InvoiceUpdate(title="New"))


def test_item_changes_refresh_totals(db_session, customer):
    invoice = _create(db_session, customer)
    first, second = invoice.items

    invoices_service.update_invoice_item(
        db_session,
        invoice.id,
        first.id,
        LineItemUpdate(quantity=Decimal("3"), discount_type=DiscountTypeEnum.FIXED, discount_value=Decimal("5")),
    )
    db_session.refresh(invoice)
    # 3 x 10.00 - 5.00 = 25.00 at 22% plus the unchanged 50.00 at 10%
    assert invoice.subtotal_amount == Decimal("75.00")
    assert invoice.tax_amount == Decimal("10.50")
    assert invoice._total_amount == Decimal("85.50")

    added = invoices_service.add_invoice_item(
        db_session, invoice.id, LineItemCreate(description="Weighbridge fee", unit_price=Decimal("4.50"))
    )
    assert added.position == 3
    db_session.refresh(invoice)
    assert invoice._total_amount == Decimal("90.00")

    invoices_service.remove_invoice_item(db_session, invoice.id, second.id)
    db_session.refresh(invoice)
    assert [item.description for item in invoice.items] == ["Skip hire", "Weighbridge fee"]
    assert invoice._subtotal_amount == Decimal("29.50")
    assert invoice._total_amount == Decimal("35.00")


def test_item_update_validates_merged_values(db_session, customer):
    invoice = _create(db_session, customer)
    second = invoice.items[1]

    with pytest.raises(ValidationError) as excinfo:
        invoices_service.update_invoice_item(
            db_session, invoice.id, second.id, LineItemUpdate(discount_value=Decimal("120"))
        )

    assert excinfo.value.field == "discount_value"


def test_duplicate_position_is_rejected(db_session, customer):
    invoice = _create(db_session, customer)

    with pytest.raises(ValidationError) as excinfo:
        invoices_service.add_invoice_item(
            db_session, invoice.id, LineItemCreate(position=2, description="Clash")
        )

    assert excinfo.value.field == "position"


def test_missing_documents_and_items(db_session, customer):
    invoice = _create(db_session, customer)

    with pytest.raises(DocumentNotFoundError):
        invoices_service.get_invoice(db_session, invoice.id + 100)
    with pytest.raises(LineItemNotFoundError):
        invoices_service.remove_invoice_item(db_session, invoice.id, 9999)


def test_update_header_normalizes_values(db_session, customer):
    invoice = _create(db_session, customer)

    invoices_service.update_invoice(
        db_session, invoice.id, InvoiceUpdate(title="   ", currency="gbp", due_date="2026-06-30")
    )

    assert invoice.title is None
    assert invoice.currency == "GBP"
    assert invoice.due_date == date(2026, 6, 30)

    with pytest.raises(ValidationError) as excinfo:
        invoices_service.update_invoice(db_session, invoice.id, InvoiceUpdate(currency="E1"))
    assert excinfo.value.field == "currency"


def test_list_invoices_searches_and_paginates(db_session, customer):
    for index in range(3):
        _create(db_session, customer, title=f"Tipping {index}")
    _create(db_session, customer, title="Container rental")

    page = invoices_service.list_invoices(db_session, customer.company_id, q="tipping", page_size=2)
    assert page["total_count"] == 3
    assert page["total_pages"] == 2
    assert len(page["rows"]) == 2

    by_customer = invoices_service.list_invoices(db_session, customer.company_id, q="NORTHSIDE")
    assert by_customer["total_count"] == 4

    drafts = invoices_service.list_invoices(
        db_session, customer.company_id, status=InvoiceStatusEnum.PAID
    )
    assert drafts["total_count"] == 0
    assert drafts["rows"] == []


def test_cached_totals_match_after_reload(db_session, SessionLocal, customer):
    invoice = _create(
        db_session,
        customer,
        items=[
            {
                "description": "Tonnage",
                "quantity": "1.3333",
                "unit_price": "99.9999",
                "tax_rate": "22.12",
                "discount_type": "PERCENTAGE",
                "discount_value": "7.5",
            },
            {"description": "Gate fee", "unit_price": "12.3456", "tax_rate": "5.5"},
        ],
    )
    invoice_id = invoice.id
    db_session.close()

    with SessionLocal() as session:
        reloaded = session.get(Invoice, invoice_id)
        assert reloaded._subtotal_amount == reloaded.subtotal_amount
        assert reloaded._tax_amount == reloaded.tax_amount
        assert reloaded._total_amount == reloaded.total_amount
        for item in reloaded.items:
            assert item._line_total_amount == item.line_total_amount


def test_input_beyond_stored_precision_is_rejected(db_session, customer):
    with pytest.raises(ValidationError) as excinfo:
        _create(
            db_session,
            customer,
            items=[{"description": "Skip hire", "unit_price": "100", "tax_rate": "22.125"}],
        )
    assert excinfo.value.field == "tax_rate"

    invoice = _create(db_session, customer)
    with pytest.raises(ValidationError) as excinfo:
        invoices_service.update_invoice_item(
            db_session,
            invoice.id,
            invoice.items[0].id,
            LineItemUpdate(quantity=Decimal("2.00005")),
        )
    assert excinfo.value.field == "quantity"
