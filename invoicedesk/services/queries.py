# invoicedesk/services/queries.py
"""
Read side of the dashboard: customer and invoice tables, the latest
invoices, card totals and the revenue series.

Every function takes the Store to read from. Amounts stay in cents until
the row is shaped for the caller. Store failures are logged and re-raised
as DataAccessError with a message naming the operation.
"""

import logging
import math
from contextlib import contextmanager
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from invoicedesk.errors import DataAccessError, StoreError
from invoicedesk.models.customers import CustomerField, CustomerTableRow
from invoicedesk.models.dashboard import CardData, Revenue
from invoicedesk.models.invoices import InvoiceForm, InvoiceTableRow, LatestInvoice
from invoicedesk.services.formatting import cents_to_amount, format_currency
from invoicedesk.store.base import Store

logger = logging.getLogger(__name__)

ITEMS_PER_PAGE = 6
LATEST_INVOICES_LIMIT = 5


@contextmanager
def _failing_as(message: str):
    try:
        yield
    except StoreError as exc:
        logger.exception("Database error: %s", message)
        raise DataAccessError(message) from exc


def page_offset(page: int) -> int:
    """Translate a 1-based page number into a row offset."""
    return (max(page, 1) - 1) * ITEMS_PER_PAGE


def total_pages(count: int) -> int:
    return math.ceil(count / ITEMS_PER_PAGE)


# ---- Customers ----

def fetch_customers(store: Store) -> List[CustomerField]:
    with _failing_as("Failed to fetch customers"):
        rows = store.list_customers()
    return [CustomerField(id=str(row["id"]), name=row["name"]) for row in rows]


def fetch_customer_names(store: Store) -> List[str]:
    return [customer.name for customer in fetch_customers(store)]


def fetch_filtered_customers(store: Store, query: str, page: int = 1) -> List[CustomerTableRow]:
    with _failing_as("Failed to fetch customer table"):
        rows = store.filtered_customers(query, ITEMS_PER_PAGE, page_offset(page))

    return [
        CustomerTableRow(
            id=str(row["id"]),
            name=row["name"],
            email=row["email"],
            image_url=row.get("image_url"),
            total_invoices=row["total_invoices"],
            total_pending=format_currency(row["total_pending"]),
            total_paid=format_currency(row["total_paid"]),
        )
        for row in rows
    ]


def fetch_customers_pages(store: Store, query: str) -> int:
    with _failing_as("Failed to fetch the number of customer pages"):
        count = store.count_filtered_customers(query)
    return total_pages(count)


# ---- Invoices ----

def fetch_latest_invoices(store: Store) -> List[LatestInvoice]:
    with _failing_as("Failed to fetch the latest invoices"):
        rows = store.latest_invoices(LATEST_INVOICES_LIMIT)

    return [
        LatestInvoice(
            id=str(row["id"]),
            name=row["name"],
            image_url=row.get("image_url"),
            email=row["email"],
            amount=format_currency(row["amount"]),
        )
        for row in rows
    ]


def fetch_filtered_invoices(store: Store, query: str, page: int = 1) -> List[InvoiceTableRow]:
    with _failing_as("Failed to fetch invoices"):
        rows = store.filtered_invoices(query, ITEMS_PER_PAGE, page_offset(page))

    return [
        InvoiceTableRow(
            id=str(row["id"]),
            customer_id=str(row["customer_id"]),
            name=row["name"],
            email=row["email"],
            image_url=row.get("image_url"),
            date=row["date"],
            amount=format_currency(row["amount"]),
            status=row["status"],
        )
        for row in rows
    ]


def fetch_invoices_pages(store: Store, query: str) -> int:
    with _failing_as("Failed to fetch the number of invoice pages"):
        count = store.count_filtered_invoices(query)
    return total_pages(count)


def fetch_invoice_by_id(store: Store, invoice_id: str) -> Optional[InvoiceForm]:
    """
    Return the invoice with its amount in dollars, or None if no invoice
    has this id.
    """
    with _failing_as("Failed to fetch the invoice data"):
        rows = store.invoices_by_id(invoice_id)

    if not rows:
        return None
    if len(rows) > 1:
        logger.error("Invoice id %s matched %s rows", invoice_id, len(rows))
        raise DataAccessError("Failed to fetch the invoice data")

    row = rows[0]
    return InvoiceForm(
        id=str(row["id"]),
        customer_id=str(row["customer_id"]),
        amount=cents_to_amount(row["amount"]),
        status=row["status"],
    )


# ---- Dashboard ----

def fetch_card_data(store: Store) -> CardData:
    with _failing_as("Failed to fetch card data"):
        totals = store.card_totals()

    return CardData(
        number_of_invoices=int(totals["invoices_count"] or 0),
        number_of_customers=int(totals["customers_count"] or 0),
        total_paid_invoices=format_currency(totals["total_paid"]),
        total_pending_invoices=format_currency(totals["total_pending"]),
    )


def fetch_revenue(store: Store) -> List[Revenue]:
    with _failing_as("Failed to fetch revenue data"):
        rows = store.revenue()

    # the column can arrive as text
    try:
        return [
            Revenue(month=row["month"], revenue=float(Decimal(str(row["revenue"]))))
            for row in rows
        ]
    except (InvalidOperation, KeyError, ValueError) as exc:
        logger.exception("Malformed revenue row")
        raise DataAccessError("Failed to fetch revenue data") from exc
