from datetime import datetime, timezone
from decimal import Decimal

from invoicedesk.services.formatting import (
    amount_to_cents,
    cents_to_amount,
    format_currency,
    today_iso,
)


def test_format_currency_dollars_with_grouping():
    assert format_currency(123456) == "$1,234.56"
    assert format_currency(15795) == "$157.95"
    assert format_currency(Decimal("100000000")) == "$1,000,000.00"


def test_format_currency_zero_and_missing():
    assert format_currency(0) == "$0.00"
    assert format_currency(None) == "$0.00"


def test_format_currency_negative_and_text_input():
    assert format_currency(-500) == "-$5.00"
    assert format_currency("2000") == "$20.00"


def test_amount_to_cents_is_exact():
    assert amount_to_cents(Decimal("49.99")) == 4999
    assert amount_to_cents(49.99) == 4999
    assert amount_to_cents("0.29") == 29
    assert amount_to_cents("0.015") == 2


def test_cents_round_trip():
    for amount in ("49.99", "0.01", "1234.50", "7"):
        assert cents_to_amount(amount_to_cents(amount)) == Decimal(amount)


def test_today_iso_is_utc_date():
    assert today_iso() == datetime.now(timezone.utc).date().isoformat()
