"""Fixed-point money helpers. Everything is computed in integer cents."""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


@dataclass(frozen=True)
class Currency:
    """The single unit of account balances and debts are expressed in."""

    code: str = "EUR"
    symbol: str = "€"

    def format(self, amount) -> str:
        return format_amount(amount, self)


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() avoids binary float artifacts such as 0.1 -> 0.1000000000000000055
    return Decimal(str(value))


def to_cents(value) -> int:
    """Convert a display amount (12.5, "12.50", Decimal) to integer cents, half up."""
    return int((to_decimal(value) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENT)


def round_amount(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(amount, currency: Currency) -> str:
    """Render an amount with the currency symbol, e.g. "€12.50"."""
    return f"{currency.symbol}{round_amount(amount)}"
