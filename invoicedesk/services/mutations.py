# invoicedesk/services/mutations.py

import logging
from typing import Any, Callable, Mapping, Optional, Union

from invoicedesk.errors import StoreError
from invoicedesk.models.actions import InvoiceActionState, Redirect
from invoicedesk.services.formatting import amount_to_cents, today_iso
from invoicedesk.services.revalidation import INVOICES_VIEW, view_cache
from invoicedesk.services.validation import validate_invoice_form
from invoicedesk.store.base import Store

logger = logging.getLogger(__name__)

Revalidate = Callable[[str], None]
InvoiceActionResult = Union[Redirect, InvoiceActionState]


def create_invoice(
    store: Store,
    fields: Mapping[str, Any],
    prev_state: Optional[InvoiceActionState] = None,
    revalidate: Revalidate = view_cache.revalidate_path,
) -> InvoiceActionResult:
    """
    Validate the submitted form and insert a new invoice dated today.

    Returns the field errors when validation fails, a database error state
    when the insert fails, and otherwise a redirect to the invoice list.
    """
    data, errors = validate_invoice_form(fields, action="create")
    if errors is not None:
        return errors

    values = {
        "customer_id": data.customer_id,
        "amount": amount_to_cents(data.amount),
        "status": data.status,
        "date": today_iso(),
    }

    try:
        invoice_id = store.insert_invoice(values)
    except StoreError:
        logger.exception("Failed to insert invoice for customer %s", data.customer_id)
        return InvoiceActionState(message="Database Error: Failed to create invoice.")

    logger.info("Created invoice %s for customer %s", invoice_id, data.customer_id)
    revalidate(INVOICES_VIEW)
    return Redirect(location=INVOICES_VIEW)


def update_invoice(
    store: Store,
    invoice_id: str,
    fields: Mapping[str, Any],
    prev_state: Optional[InvoiceActionState] = None,
    revalidate: Revalidate = view_cache.revalidate_path,
) -> InvoiceActionResult:
    data, errors = validate_invoice_form(fields, action="update")
    if errors is not None:
        return errors

    values = {
        "customer_id": data.customer_id,
        "amount": amount_to_cents(data.amount),
        "status": data.status,
    }

    try:
        updated = store.update_invoice(invoice_id, values)
    except StoreError:
        logger.exception("Failed to update invoice %s", invoice_id)
        return InvoiceActionState(message="Database Error: Failed to update invoice.")

    # an unknown id updates nothing and still redirects
    logger.info("Updated invoice %s (%s row(s))", invoice_id, updated)
    revalidate(INVOICES_VIEW)
    return Redirect(location=INVOICES_VIEW)


def delete_invoice(
    store: Store,
    invoice_id: str,
    revalidate: Revalidate = view_cache.revalidate_path,
) -> Optional[InvoiceActionState]:
    """Delete an invoice. Returns an error state on failure, None otherwise."""
    try:
        deleted = store.delete_invoice(invoice_id)
    except StoreError:
        logger.exception("Failed to delete invoice %s", invoice_id)
        return InvoiceActionState(message="Database Error: Failed to delete invoice.")

    logger.info("Deleted invoice %s (%s row(s))", invoice_id, deleted)
    revalidate(INVOICES_VIEW)
    return None
