from decimal import Decimal

import pytest

from billing.enums import DiscountTypeEnum
from billing.errors import ValidationError
from billing.money import money
from billing.services.line_calculator import LineInput, apply_discount, compute_line


def test_plain_line_with_tax():
    amounts = compute_line(
        LineInput(
            quantity=Decimal("2"),
            unit_price=Decimal("10.00"),
            tax_rate=Decimal("22"),
            discount_type=DiscountTypeEnum.NONE,
        )
    )

    assert amounts.subtotal == Decimal("20.00")
    assert amounts.tax == Decimal("4.40")
    assert amounts.total == Decimal("24.40")


def test_percentage_discount_applies_before_tax():
    amounts = compute_line(
        LineInput(
            quantity=Decimal("1"),
            unit_price=Decimal("100.00"),
            tax_rate=Decimal("10"),
            discount_type=DiscountTypeEnum.PERCENTAGE,
            discount_value=Decimal("50"),
        )
    )

    assert amounts.subtotal == Decimal("50.00")
    assert amounts.tax == Decimal("5.00")
    assert amounts.total == Decimal("55.00")


def test_fixed_discount_larger_than_line_floors_at_zero():
    amounts = compute_line(
        LineInput(
            quantity=Decimal("1"),
            unit_price=Decimal("5.00"),
            tax_rate=Decimal("0"),
            discount_type=DiscountTypeEnum.FIXED,
            discount_value=Decimal("20.00"),
        )
    )

    assert amounts.subtotal == Decimal("0.00")
    assert amounts.tax == Decimal("0.00")
    assert amounts.total == Decimal("0.00")


def test_missing_values_use_defaults():
    amounts = compute_line(LineInput(unit_price=Decimal("12.50")))

    assert amounts.subtotal == Decimal("12.50")
    assert amounts.tax == Decimal("0.00")
    assert amounts.total == Decimal("12.50")

    assert compute_line(LineInput()).total == Decimal("0.00")


def test_amounts_are_rounded_half_up_to_cents():
    amounts = compute_line(
        LineInput(
            quantity=Decimal("3"),
            unit_price=Decimal("0.335"),
            tax_rate=Decimal("10"),
        )
    )

    # 3 x 0.335 = 1.005 -> 1.01; tax 0.1005 -> 0.10
    assert amounts.subtotal == Decimal("1.01")
    assert amounts.tax == Decimal("0.10")
    assert amounts.total == Decimal("1.11")


def test_discount_type_accepts_plain_strings():
    amounts = compute_line(
        LineInput(unit_price=Decimal("80"), discount_type="PERCENTAGE", discount_value=25)
    )

    assert amounts.subtotal == Decimal("60.00")


@pytest.mark.parametrize(
    ("line", "field"),
    [
        (LineInput(quantity=Decimal("-1")), "quantity"),
        (LineInput(unit_price=Decimal("-0.01")), "unit_price"),
        (LineInput(tax_rate=Decimal("-1")), "tax_rate"),
        (LineInput(tax_rate=Decimal("100.01")), "tax_rate"),
        (LineInput(discount_type=DiscountTypeEnum.FIXED, discount_value=Decimal("-5")), "discount_value"),
        (
            LineInput(discount_type=DiscountTypeEnum.PERCENTAGE, discount_value=Decimal("101")),
            "discount_value",
        ),
        (LineInput(quantity="abc"), "quantity"),
        (LineInput(unit_price=Decimal("NaN")), "unit_price"),
        (LineInput(discount_type="HALF_OFF"), "discount_type"),
    ],
)
def test_invalid_input_names_the_field(line, field):
    with pytest.raises(ValidationError) as excinfo:
        compute_line(line)

    assert excinfo.value.field == field
    assert excinfo.value.code == "VALIDATION_ERROR"


def test_boundary_values_are_accepted():
    full_tax = compute_line(LineInput(unit_price=Decimal("10"), tax_rate=Decimal("100")))
    assert full_tax.total == Decimal("20.00")

    free = compute_line(
        LineInput(
            unit_price=Decimal("10"),
            discount_type=DiscountTypeEnum.PERCENTAGE,
            discount_value=Decimal("100"),
        )
    )
    assert free.subtotal == Decimal("0.00")


@pytest.mark.parametrize(
    ("quantity", "unit_price", "discount_type", "discount_value"),
    [
        ("1.25", "19.99", DiscountTypeEnum.PERCENTAGE, "12.50"),
        ("7", "3.33", DiscountTypeEnum.FIXED, "0.99"),
        ("0.5", "0.01", DiscountTypeEnum.NONE, "0"),
        ("10", "99.99", DiscountTypeEnum.PERCENTAGE, "33.33"),
    ],
)
def test_discount_never_raises_the_subtotal(quantity, unit_price, discount_type, discount_value):
    gross = money(Decimal(quantity) * Decimal(unit_price))
    amounts = compute_line(
        LineInput(
            quantity=Decimal(quantity),
            unit_price=Decimal(unit_price),
            discount_type=discount_type,
            discount_value=Decimal(discount_value),
        )
    )

    assert Decimal("0") <= amounts.subtotal <= gross
    assert amounts.total == amounts.subtotal + amounts.tax


def test_apply_discount_without_discount_returns_gross():
    assert apply_discount(Decimal("12.3456"), DiscountTypeEnum.NONE, Decimal("99")) == Decimal(
        "12.3456"
    )


@pytest.mark.parametrize(
    ("line", "field"),
    [
        (LineInput(unit_price=Decimal("100"), tax_rate=Decimal("22.125")), "tax_rate"),
        (LineInput(quantity=Decimal("1.23456")), "quantity"),
        (LineInput(unit_price=Decimal("0.00001")), "unit_price"),
        (
            LineInput(discount_type=DiscountTypeEnum.FIXED, discount_value=Decimal("0.12345")),
            "discount_value",
        ),
    ],
)
def test_input_finer_than_stored_scale_is_rejected(line, field):
    with pytest.raises(ValidationError) as excinfo:
        compute_line(line)

    assert excinfo.value.field == field


def test_trailing_zeros_within_scale_are_accepted():
    amounts = compute_line(
        LineInput(
            quantity=Decimal("1.50000000"),
            unit_price=Decimal("100"),
            tax_rate=Decimal("22.1000"),
        )
    )

    assert amounts.subtotal == Decimal("150.00")
    assert amounts.tax == Decimal("33.15")
