from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from ..money import ZERO_MONEY, money
from .line_calculator import LineAmounts


@dataclass(frozen=True)
class DocumentTotals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def aggregate(lines: Iterable[LineAmounts]) -> DocumentTotals:
    """Sum already-computed line amounts into document totals.

    An empty iterable yields all-zero totals.
    """
    subtotal = ZERO_MONEY
    tax = ZERO_MONEY
    for line in lines:
        subtotal += line.subtotal
        tax += line.tax
    subtotal = money(subtotal)
    tax = money(tax)
    return DocumentTotals(subtotal=subtotal, tax=tax, total=money(subtotal + tax))
