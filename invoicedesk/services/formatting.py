# invoicedesk/services/formatting.py
"""Money and date helpers. Amounts are integer cents until they reach these."""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[int, float, str, Decimal, None]

CENTS = Decimal(100)


def _to_decimal(value: Number) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def cents_to_amount(cents: Number) -> Decimal:
    return _to_decimal(cents) / CENTS


def amount_to_cents(amount: Number) -> int:
    cents = _to_decimal(amount) * CENTS
    return int(cents.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_currency(cents: Number) -> str:
    """
    Format an amount in cents as US dollars, e.g. 123456 -> "$1,234.56".
    """
    amount = cents_to_amount(cents)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def today_iso() -> str:
    # UTC, matching the date stamp written on invoice creation
    return datetime.now(timezone.utc).date().isoformat()
