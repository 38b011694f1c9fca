from decimal import Decimal

from sqlalchemy import Enum as SAEnum, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from ..enums import DiscountTypeEnum
from ..money import ZERO_MONEY
from ..services.line_calculator import LineAmounts, LineInput, compute_line
from .base import TimestampMixin


class LineItemMixin(TimestampMixin):
    """Columns and computed amounts shared by invoice and quote items.

    The ``line_*_amount`` columns are a cache written at flush time; reads
    always go through ``amounts``, which recomputes from the inputs.
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(String(1000), nullable=False)
    notes: Mapped[str | None] = mapped_column(String(1000))
    quantity: Mapped[Decimal | None] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("1")
    )
    unit: Mapped[str | None] = mapped_column(String(20))
    unit_price: Mapped[Decimal | None] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    tax_rate: Mapped[Decimal | None] = mapped_column(
        Numeric(5, 2), nullable=False, default=Decimal("0")
    )
    discount_type: Mapped[DiscountTypeEnum] = mapped_column(
        SAEnum(DiscountTypeEnum, native_enum=False, create_constraint=False),
        nullable=False,
        default=DiscountTypeEnum.NONE,
    )
    discount_value: Mapped[Decimal | None] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    _line_subtotal_amount: Mapped[Decimal] = mapped_column(
        "line_subtotal_amount", nullable=False, default=ZERO_MONEY
    )
    _line_tax_amount: Mapped[Decimal] = mapped_column(
        "line_tax_amount", nullable=False, default=ZERO_MONEY
    )
    _line_total_amount: Mapped[Decimal] = mapped_column(
        "line_total_amount", nullable=False, default=ZERO_MONEY
    )

    def line_input(self) -> LineInput:
        return LineInput(
            quantity=self.quantity,
            unit_price=self.unit_price,
            tax_rate=self.tax_rate,
            discount_type=self.discount_type,
            discount_value=self.discount_value,
        )

    @property
    def amounts(self) -> LineAmounts:
        return compute_line(self.line_input())

    @property
    def line_subtotal_amount(self) -> Decimal:
        return self.amounts.subtotal

    @property
    def line_tax_amount(self) -> Decimal:
        return self.amounts.tax

    @property
    def line_total_amount(self) -> Decimal:
        return self.amounts.total

    def refresh_amounts(self) -> LineAmounts:
        amounts = self.amounts
        self._line_subtotal_amount = amounts.subtotal
        self._line_tax_amount = amounts.tax
        self._line_total_amount = amounts.total
        return amounts
