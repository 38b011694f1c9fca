"""
Line amount computation.

A line's subtotal, tax and total are derived from its quantity, unit price,
discount and tax rate. Intermediate products stay at line scale (4 digits);
only the returned amounts are rounded half-up to currency scale. Out-of-range
input, or input finer than its stored scale, is rejected with a
field-identified ``ValidationError``, never clamped or rounded.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from ..enums import DiscountTypeEnum
from ..errors import ValidationError
from ..money import HUNDRED, line_round, money, to_decimal

ONE = Decimal("1")
ZERO = Decimal("0")

# Fractional digits each input keeps once stored.
INPUT_PLACES = {"quantity": 4, "unit_price": 4, "tax_rate": 2, "discount_value": 4}


@dataclass(frozen=True)
class LineInput:
    quantity: Decimal | None = None
    unit_price: Decimal | None = None
    tax_rate: Decimal | None = None
    discount_type: DiscountTypeEnum | str | None = None
    discount_value: Decimal | None = None


@dataclass(frozen=True)
class LineAmounts:
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def compute_line(line: LineInput) -> LineAmounts:
    quantity = _number("quantity", line.quantity, ONE)
    unit_price = _number("unit_price", line.unit_price, ZERO)
    tax_rate = _number("tax_rate", line.tax_rate, ZERO)
    discount_type = _discount_type(line.discount_type)
    discount_value = _number("discount_value", line.discount_value, ZERO)

    if quantity < 0:
        raise ValidationError("quantity", "must not be negative")
    if unit_price < 0:
        raise ValidationError("unit_price", "must not be negative")
    if tax_rate < 0 or tax_rate > HUNDRED:
        raise ValidationError("tax_rate", "must be between 0 and 100")
    if discount_value < 0:
        raise ValidationError("discount_value", "must not be negative")
    if discount_type is DiscountTypeEnum.PERCENTAGE and discount_value > HUNDRED:
        raise ValidationError("discount_value", "percentage must be between 0 and 100")

    gross = line_round(quantity * unit_price)
    discounted = apply_discount(gross, discount_type, discount_value)

    subtotal = money(discounted)
    tax = money(discounted * tax_rate / HUNDRED)
    return LineAmounts(subtotal=subtotal, tax=tax, total=subtotal + tax)


def apply_discount(
    gross: Decimal, discount_type: DiscountTypeEnum, value: Decimal
) -> Decimal:
    if discount_type is DiscountTypeEnum.PERCENTAGE:
        return line_round(gross * (ONE - value / HUNDRED))
    if discount_type is DiscountTypeEnum.FIXED:
        # A fixed discount larger than the line never makes it negative.
        return max(line_round(gross - value), ZERO)
    return gross


def _number(field: str, value, default: Decimal) -> Decimal:
    try:
        number = to_decimal(value, default)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(field, "must be a number") from None
    if not number.is_finite():
        raise ValidationError(field, "must be a finite number")
    places = INPUT_PLACES[field]
    try:
        exact = number == number.quantize(Decimal(1).scaleb(-places))
    except InvalidOperation:
        raise ValidationError(field, "is out of range") from None
    if not exact:
        raise ValidationError(field, f"must have at most {places} decimal places")
    return number


def _discount_type(value) -> DiscountTypeEnum:
    if value is None:
        return DiscountTypeEnum.NONE
    try:
        return DiscountTypeEnum(value)
    except ValueError:
        raise ValidationError("discount_type", f"unknown discount type {value!r}") from None
