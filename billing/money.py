from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

LINE_SCALE = Decimal("0.0001")
CURRENCY_SCALE = Decimal("0.01")
ZERO_MONEY = Decimal("0.00")
HUNDRED = Decimal("100")


def to_decimal(value, default: Decimal = Decimal("0")) -> Decimal:
    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidOperation(f"not a number: {value!r}")
    return Decimal(str(value))


def line_round(value) -> Decimal:
    return to_decimal(value).quantize(LINE_SCALE, rounding=ROUND_HALF_UP)


def money(value) -> Decimal:
    return to_decimal(value).quantize(CURRENCY_SCALE, rounding=ROUND_HALF_UP)
